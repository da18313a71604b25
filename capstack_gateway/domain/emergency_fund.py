"""Emergency fund monitoring: coverage status, stress simulations, contribution planning"""

import math
from typing import List, Optional

from capstack_gateway.domain.allocation import emergency_fund_months
from capstack_gateway.domain.models import (
    ContributionPlan,
    DepletionRisk,
    EmergencyFundStatus,
    EmergencySimulation,
)

TARGET_MONTHS = 6

STATUS_ACTIONS = {
    "excellent": "Maintain current fund; consider investing the excess beyond 12 months",
    "good": "Keep contributing to reach 12 months of coverage",
    "adequate": "Increase monthly contributions to reach 6 months of coverage",
    "insufficient": "Prioritize emergency savings over discretionary spending",
    "critical": "Build an emergency buffer immediately before any other goal",
}


def coverage_status(months: float) -> str:
    if months >= 12:
        return "excellent"
    elif months >= 6:
        return "good"
    elif months >= 3:
        return "adequate"
    elif months >= 1:
        return "insufficient"
    return "critical"


def emergency_fund_status(
    balance: float, monthly_expenses: float, target_months: int = TARGET_MONTHS
) -> EmergencyFundStatus:
    months = emergency_fund_months(balance, monthly_expenses)
    status = coverage_status(months)

    alerts: List[str] = []
    shortfall = max(0.0, target_months * monthly_expenses - balance)
    if months < target_months and shortfall > 0:
        alerts.append(f"Emergency fund is ₹{shortfall:,.0f} short of the {target_months}-month target")
    if status == "critical":
        alerts.append("Less than one month of expenses is covered")

    return EmergencyFundStatus(
        current_balance=balance,
        target_months=target_months,
        monthly_burn_rate=monthly_expenses,
        months_coverage=months,
        status=status,
        recommended_action=STATUS_ACTIONS[status],
        alerts=alerts,
    )


def _months_covered(balance: float, shortfall: float) -> Optional[float]:
    """None when income covers spending and the balance is never drawn down"""
    if shortfall <= 0:
        return None
    return round(max(0.0, balance) / shortfall, 1)


def simulate_emergency_scenarios(
    balance: float,
    monthly_expenses: float,
    monthly_income: float,
    target_months: int = TARGET_MONTHS,
) -> List[EmergencySimulation]:
    """
    Fixed stress scenarios; each reports the monthly gap between spending
    and remaining income and how long the balance bridges it.

    - job_loss:          income stops, expenses unchanged
    - medical_emergency: one-off cost of 3 months' expenses, income unchanged
    - income_reduction:  income halves
    - inflation_spike:   expenses rise 15%
    """
    scenarios = [
        ("job_loss", "Complete loss of income", 0.0, monthly_expenses, 0.0),
        ("medical_emergency", "Unplanned medical bill", monthly_income, monthly_expenses, 3 * monthly_expenses),
        ("income_reduction", "Income drops by half", monthly_income * 0.5, monthly_expenses, 0.0),
        ("inflation_spike", "Living costs rise 15%", monthly_income, monthly_expenses * 1.15, 0.0),
    ]

    simulations = []
    for name, description, income, expenses, one_off in scenarios:
        remaining = balance - one_off
        shortfall = max(0.0, expenses - income)
        covered = _months_covered(remaining, shortfall) if remaining > 0 else 0.0
        simulations.append(
            EmergencySimulation(
                scenario=name,
                description=description,
                monthly_shortfall=round(shortfall, 2),
                months_covered=covered,
                survives_target=covered is None or covered >= target_months,
            )
        )
    return simulations


def optimal_contribution(
    balance: float,
    monthly_expenses: float,
    monthly_income: float,
    target_months: int = TARGET_MONTHS,
    horizon_months: int = 12,
) -> ContributionPlan:
    """Spread the gap to target over the horizon, capped at half the monthly surplus"""
    target = max(0.0, monthly_expenses) * target_months
    gap = max(0.0, target - balance)
    surplus = max(0.0, monthly_income - monthly_expenses)

    contribution = min(gap / horizon_months, surplus * 0.5) if gap > 0 else 0.0
    months_to_target: Optional[int]
    if gap == 0:
        months_to_target = 0
    elif contribution > 0:
        months_to_target = math.ceil(gap / contribution)
    else:
        months_to_target = None

    return ContributionPlan(
        monthly_contribution=round(contribution, 2),
        target_amount=round(target, 2),
        gap=round(gap, 2),
        months_to_target=months_to_target,
    )


def depletion_risk(
    balance: float,
    monthly_expenses: float,
    monthly_income: float,
    job_stability: int,
) -> DepletionRisk:
    """
    Likelihood the fund is drained within a year of losing income.

    probability = (1 - coverage/12 capped at 1) * (1 - job_stability/10 * 0.5)
    """
    months = emergency_fund_months(balance, monthly_expenses)
    coverage_gap = 1 - min(months / 12, 1.0)
    stability = min(max(job_stability, 0), 10) / 10
    probability = round(coverage_gap * (1 - stability * 0.5), 2)

    if probability >= 0.6:
        level = "high"
    elif probability >= 0.3:
        level = "medium"
    else:
        level = "low"

    burn = monthly_expenses - monthly_income
    months_until_depletion = round(max(0.0, balance) / burn, 1) if burn > 0 else None

    return DepletionRisk(level=level, probability=probability, months_until_depletion=months_until_depletion)


def emergency_recommendations(
    status: EmergencyFundStatus, contribution: ContributionPlan, risk: DepletionRisk
) -> List[str]:
    recommendations = [status.recommended_action]

    if contribution.monthly_contribution > 0:
        timeline = (
            f" to close the gap in {contribution.months_to_target} months"
            if contribution.months_to_target is not None
            else ""
        )
        recommendations.append(f"Set aside ₹{contribution.monthly_contribution:,.0f} per month{timeline}")
    elif contribution.gap > 0:
        recommendations.append("Reduce monthly expenses to free up a surplus for emergency savings")

    if risk.months_until_depletion is not None:
        recommendations.append(
            f"Spending exceeds income; the fund runs out in {risk.months_until_depletion:g} months at this rate"
        )
    if risk.level == "high":
        recommendations.append("Keep the emergency fund in liquid instruments such as savings or liquid funds")

    return recommendations


def coverage_change_alert(previous: Optional[EmergencyFundStatus], current: EmergencyFundStatus) -> Optional[str]:
    """Alert text when coverage dropped since the last stored snapshot"""
    if previous is None or current.months_coverage >= previous.months_coverage:
        return None
    return f"Coverage fell from {previous.months_coverage:g} to {current.months_coverage:g} months since the last check"
