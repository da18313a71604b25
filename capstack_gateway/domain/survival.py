"""Survival months - how long the emergency fund lasts under stress"""

import math
from dataclasses import dataclass
from typing import List

from capstack_gateway.domain.models import (
    FinancialProfile,
    StressScenarios,
    SurvivalBreakdown,
    SurvivalResult,
)
from capstack_gateway.domain.tables import DEFAULT_TABLES, ScoringTables

EMERGENCY_EXPENSE_REDUCTION = 0.25  # Discretionary spending cut during an emergency


@dataclass
class SurvivalInputs:
    emergency_fund: float
    monthly_expenses: float
    monthly_income: float
    income_stability: float  # 0-1
    job_security: float  # 0-1
    has_side_income: bool = False
    dependents: int = 0
    location: str = "metro"

    @classmethod
    def from_profile(cls, profile: FinancialProfile) -> "SurvivalInputs":
        stability = profile.job_stability_score / 10
        return cls(
            emergency_fund=profile.emergency_fund,
            monthly_expenses=profile.monthly_expenses,
            monthly_income=profile.monthly_income,
            income_stability=stability,
            job_security=stability,
            dependents=profile.dependents,
            location=profile.location,
        )


def risk_level_for_months(months: int) -> str:
    if months >= 12:
        return "low"
    elif months >= 6:
        return "medium"
    elif months >= 3:
        return "high"
    return "critical"


def _base_months(emergency_fund: float, expenses: float) -> float:
    if expenses <= 0:
        return 0.0
    return max(0.0, emergency_fund) / expenses


def survival_recommendations(inputs: SurvivalInputs, months: int) -> List[str]:
    recommendations: List[str] = []

    if months < 3:
        recommendations.append("CRITICAL: Build emergency fund immediately - target 3-6 months of expenses")
        recommendations.append("Reduce discretionary spending by 30-50% temporarily")
        recommendations.append("Consider part-time work or side income sources")
    elif months < 6:
        recommendations.append("HIGH PRIORITY: Increase emergency fund to at least 6 months coverage")
        recommendations.append("Review and optimize monthly expenses")
        recommendations.append("Explore additional income streams for stability")
    elif months < 12:
        recommendations.append("MODERATE: Aim for 12 months of emergency coverage")
        recommendations.append("Continue building savings consistently")
        recommendations.append("Consider high-yield savings options for emergency fund")
    else:
        recommendations.append("EXCELLENT: Maintain current emergency preparedness")
        recommendations.append("Consider investing excess emergency funds appropriately")

    if inputs.location == "metro" and inputs.monthly_expenses > 40000:
        recommendations.append("Consider relocation to reduce cost of living if feasible")

    if inputs.dependents > 2:
        recommendations.append("Review family insurance coverage for comprehensive protection")

    if inputs.income_stability < 0.7:
        recommendations.append("Diversify income sources to improve financial stability")

    return recommendations


def calculate_survival(inputs: SurvivalInputs, tables: ScoringTables = DEFAULT_TABLES) -> SurvivalResult:
    """
    Estimate months of solvency.

    months = floor(base * stability * scenario * location * dependents)
    where base = fund / (expenses * 0.75). The reported ``months`` is the
    moderate scenario; the risk tier and stress tests derive from the
    conservative one.
    """
    adjusted_expenses = inputs.monthly_expenses * (1 - EMERGENCY_EXPENSE_REDUCTION)
    base_months = _base_months(inputs.emergency_fund, adjusted_expenses)

    stability_factor = inputs.income_stability * 0.8 + inputs.job_security * 0.2
    location_multiplier = tables.survival_location_multipliers.get(
        inputs.location,
        tables.survival_location_multipliers[tables.survival_default_location],
    )
    dependent_multiplier = 1 + max(0, inputs.dependents) * 0.1
    adjusted_base = base_months * max(0.0, stability_factor) * location_multiplier * dependent_multiplier

    scenario = tables.survival_scenario_multipliers
    conservative = math.floor(adjusted_base * scenario["conservative"])
    moderate = math.floor(adjusted_base * scenario["moderate"])
    optimistic = math.floor(adjusted_base * scenario["optimistic"])

    return SurvivalResult(
        months=moderate,
        breakdown=SurvivalBreakdown(
            emergency_fund=inputs.emergency_fund,
            monthly_expenses=inputs.monthly_expenses,
            adjusted_expenses=adjusted_expenses,
            conservative_months=conservative,
            moderate_months=moderate,
            optimistic_months=optimistic,
        ),
        risk_level=risk_level_for_months(conservative),
        scenarios=StressScenarios(
            job_loss=math.floor(conservative * 0.8),
            medical_emergency=math.floor(conservative * 0.6),
            market_crash=math.floor(conservative * 0.9),
        ),
        recommendations=survival_recommendations(inputs, conservative),
    )


def calculate_survival_months(profile: FinancialProfile, tables: ScoringTables = DEFAULT_TABLES) -> SurvivalResult:
    return calculate_survival(SurvivalInputs.from_profile(profile), tables)


def scenario_survival(
    emergency_fund: float,
    monthly_expenses: float,
    scenario: str,
    tables: ScoringTables = DEFAULT_TABLES,
) -> int:
    """Unadjusted months for a single named scenario (conservative | moderate | optimistic)"""
    multiplier = tables.survival_scenario_multipliers[scenario]
    return math.floor(_base_months(emergency_fund, monthly_expenses) * multiplier)
