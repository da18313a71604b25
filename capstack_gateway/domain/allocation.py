"""Asset allocation of the monthly surplus and the supporting ratio formulas"""

from typing import Dict, List

from capstack_gateway.domain.models import (
    AllocatedAmounts,
    AllocationFormulas,
    AssetAllocation,
    FinancialProfile,
)

BUCKETS = ("sip", "stocks", "bonds", "lifestyle", "emergency")

# Base split (percent) per risk tolerance; each row sums to 100
BASE_ALLOCATIONS: Dict[str, Dict[str, float]] = {
    "low": {"sip": 25, "stocks": 10, "bonds": 25, "lifestyle": 25, "emergency": 15},
    "medium": {"sip": 30, "stocks": 20, "bonds": 15, "lifestyle": 25, "emergency": 10},
    "high": {"sip": 30, "stocks": 30, "bonds": 5, "lifestyle": 25, "emergency": 10},
}

# Risk weight per bucket on a 0-10 scale
BUCKET_RISK = {"sip": 6.0, "stocks": 9.0, "bonds": 2.0, "lifestyle": 0.0, "emergency": 0.0}

MIN_EMERGENCY_MONTHS = 3
HIGH_DEBT_TO_INCOME = 0.4
DEFAULT_SIP_YEARS = 10
DEFAULT_SIP_RETURN = 12.0  # annual %


def emergency_fund_months(balance: float, monthly_expenses: float) -> float:
    """Months of expenses covered by the balance (0 when expenses are not positive)"""
    if monthly_expenses <= 0:
        return 0.0
    return round(max(0.0, balance) / monthly_expenses, 1)


def debt_to_income_ratio(debt: float, annual_income: float) -> float:
    if annual_income <= 0:
        return 0.0
    return round(max(0.0, debt) / annual_income, 2)


def savings_rate_percentage(monthly_income: float, monthly_expenses: float) -> float:
    if monthly_income <= 0:
        return 0.0
    return round((monthly_income - monthly_expenses) / monthly_income * 100, 1)


def sip_future_value(monthly_amount: float, years: int, annual_return_pct: float) -> float:
    """
    Future value of a monthly SIP (annuity due).

    FV = P * [((1 + r)^n - 1) / r] * (1 + r),  r = annual% / 12 / 100, n = years * 12
    """
    months = max(0, years) * 12
    rate = annual_return_pct / 12 / 100
    if rate == 0:
        return monthly_amount * months
    return monthly_amount * (((1 + rate) ** months - 1) / rate) * (1 + rate)


def sip_growth_percentage(monthly_amount: float, years: int, annual_return_pct: float) -> float:
    """Future value as a percentage of the total amount invested"""
    invested = monthly_amount * max(0, years) * 12
    if invested <= 0:
        return 0.0
    return round(sip_future_value(monthly_amount, years, annual_return_pct) / invested * 100, 1)


def investment_risk_score(allocation: AssetAllocation) -> float:
    """Percentage-weighted bucket risk, 0 (all cash) to 9 (all stocks)"""
    percentages = _percentages(allocation)
    score = sum(percentages[bucket] * BUCKET_RISK[bucket] for bucket in BUCKETS) / 100
    return round(score, 1)


def stability_index(
    emergency_months: float,
    savings_rate_pct: float,
    debt_to_income: float,
    job_stability: int,
) -> int:
    """
    0-100 composite:
    - 30: emergency coverage, full at 6 months
    - 25: savings rate, full at 30%
    - 20: debt-to-income, full at zero debt
    - 25: job stability (0-10)
    """
    emergency_part = min(max(emergency_months, 0.0) / 6, 1.0) * 30
    savings_part = min(max(savings_rate_pct, 0.0) / 30, 1.0) * 25
    debt_part = max(0.0, 1 - debt_to_income) * 20
    job_part = min(max(job_stability, 0), 10) / 10 * 25
    return int(round(emergency_part + savings_part + debt_part + job_part))


def _percentages(allocation: AssetAllocation) -> Dict[str, float]:
    return {
        "sip": allocation.sip_percentage,
        "stocks": allocation.stocks_percentage,
        "bonds": allocation.bonds_percentage,
        "lifestyle": allocation.lifestyle_percentage,
        "emergency": allocation.emergency_fund_percentage,
    }


def _shift(split: Dict[str, float], source: str, target: str, points: float) -> float:
    moved = min(points, split[source])
    split[source] -= moved
    split[target] += moved
    return moved


def calculate_optimal_allocation(profile: FinancialProfile) -> AssetAllocation:
    """
    Split the monthly surplus (income - expenses) across five buckets.

    Rules applied on top of the risk-tolerance base split:
    - emergency coverage under 3 months moves 10 points from stocks to the emergency bucket
    - annual debt-to-income above 0.4 moves 5 points from stocks to bonds
    """
    risk = getattr(profile.risk_tolerance, "value", profile.risk_tolerance)
    split = dict(BASE_ALLOCATIONS.get(risk, BASE_ALLOCATIONS["medium"]))
    reasoning: List[str] = [f"Base allocation for {risk} risk tolerance"]

    months = emergency_fund_months(profile.emergency_fund, profile.monthly_expenses)
    if months < MIN_EMERGENCY_MONTHS:
        moved = _shift(split, "stocks", "emergency", 10)
        reasoning.append(
            f"Emergency fund covers {months:g} months; moved {moved:g}% from stocks to the emergency fund"
        )

    dti = debt_to_income_ratio(profile.debt_amount, profile.monthly_income * 12)
    if dti > HIGH_DEBT_TO_INCOME:
        moved = _shift(split, "stocks", "bonds", 5)
        reasoning.append(f"Debt-to-income of {dti:g} is high; moved {moved:g}% from stocks to bonds")

    surplus = max(0.0, profile.monthly_income - profile.monthly_expenses)
    if surplus == 0:
        reasoning.append("No monthly surplus available to allocate")

    amounts = {bucket: round(surplus * split[bucket] / 100, 2) for bucket in BUCKETS}

    return AssetAllocation(
        sip_percentage=split["sip"],
        stocks_percentage=split["stocks"],
        bonds_percentage=split["bonds"],
        lifestyle_percentage=split["lifestyle"],
        emergency_fund_percentage=split["emergency"],
        allocated_amounts=AllocatedAmounts(**amounts),
        reasoning=reasoning,
    )


def allocation_formulas(profile: FinancialProfile, allocation: AssetAllocation) -> AllocationFormulas:
    months = emergency_fund_months(profile.emergency_fund, profile.monthly_expenses)
    savings_rate = savings_rate_percentage(profile.monthly_income, profile.monthly_expenses)
    dti = debt_to_income_ratio(profile.debt_amount, profile.monthly_income * 12)

    return AllocationFormulas(
        sip_cagr=sip_growth_percentage(allocation.allocated_amounts.sip, DEFAULT_SIP_YEARS, DEFAULT_SIP_RETURN),
        emergency_months=months,
        debt_to_income=dti,
        savings_rate=savings_rate,
        investment_risk_score=investment_risk_score(allocation),
        stability_index=stability_index(months, savings_rate, dti, profile.job_stability_score),
    )
