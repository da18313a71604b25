"""Lookup tables and thresholds shared by the scorers.

Every scorer takes a ``ScoringTables`` argument (defaulting to
``DEFAULT_TABLES``) so boundary values can be exercised in tests with a
substituted table instead of patching module literals.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ScoringTables:
    """Immutable configuration data for all calculators"""

    # (minimum score, grade), highest first; anything below the last band is "F"
    grade_thresholds: Tuple[Tuple[int, str], ...] = (
        (90, "A+"),
        (80, "A"),
        (70, "B+"),
        (60, "B"),
        (50, "C+"),
        (40, "C"),
        (30, "D"),
    )
    lowest_grade: str = "F"

    health_weights: Mapping[str, float] = field(
        default_factory=lambda: _frozen(
            {
                "income_stability": 0.25,
                "expense_management": 0.20,
                "savings_discipline": 0.20,
                "emergency_preparedness": 0.15,
                "debt_management": 0.10,
                "investment_strategy": 0.10,
            }
        )
    )

    risk_tolerance_diversification: Mapping[str, float] = field(
        default_factory=lambda: _frozen({"low": 0.4, "medium": 0.6, "high": 0.8})
    )

    # Survival calculator
    survival_location_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen({"metro": 1.2, "tier2": 1.0, "rural": 0.8})
    )
    survival_default_location: str = "rural"
    survival_scenario_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen({"conservative": 0.7, "moderate": 0.9, "optimistic": 1.1})
    )

    # Income suitability scorer
    income_weights: Mapping[str, float] = field(
        default_factory=lambda: _frozen(
            {
                "stability": 0.30,
                "growth": 0.25,
                "diversification": 0.20,
                "market_alignment": 0.15,
                "goal_suitability": 0.10,
            }
        )
    )
    industry_growth_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen(
            {
                "technology": 1.2,
                "finance": 1.1,
                "healthcare": 1.1,
                "education": 0.9,
                "retail": 0.8,
                "default": 1.0,
            }
        )
    )
    market_location_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen({"metro": 1.0, "tier1": 0.85, "tier2": 0.7, "rural": 0.5})
    )
    market_default_location_multiplier: float = 1.0
    industry_income_baselines: Mapping[str, float] = field(
        default_factory=lambda: _frozen(
            {
                "technology": 80000,
                "finance": 75000,
                "healthcare": 70000,
                "education": 45000,
                "retail": 35000,
                "default": 50000,
            }
        )
    )
    single_source_diversification: float = 30.0

    def grade_for(self, score: float) -> str:
        for minimum, grade in self.grade_thresholds:
            if score >= minimum:
                return grade
        return self.lowest_grade

    def industry_growth(self, industry: str) -> float:
        return self.industry_growth_multipliers.get(industry, self.industry_growth_multipliers["default"])

    def industry_baseline(self, industry: str) -> float:
        return self.industry_income_baselines.get(industry, self.industry_income_baselines["default"])


DEFAULT_TABLES = ScoringTables()


def grade_for_score(score: float, tables: ScoringTables = DEFAULT_TABLES) -> str:
    """Map a 0-100 score to a letter grade (thresholds are inclusive)"""
    return tables.grade_for(score)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (70.5 -> 71)"""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))
