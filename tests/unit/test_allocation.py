"""Unit tests for surplus allocation and its formulas"""

import pytest
from capstack_gateway.domain.models import RiskTolerance
from capstack_gateway.domain.allocation import (
    allocation_formulas,
    calculate_optimal_allocation,
    debt_to_income_ratio,
    emergency_fund_months,
    investment_risk_score,
    savings_rate_percentage,
    sip_future_value,
    sip_growth_percentage,
    stability_index,
)


def percentages(allocation):
    return (
        allocation.sip_percentage,
        allocation.stocks_percentage,
        allocation.bonds_percentage,
        allocation.lifestyle_percentage,
        allocation.emergency_fund_percentage,
    )


def test_default_profile_allocation(default_profile):
    """Medium risk base split applied to the 21000 surplus"""
    allocation = calculate_optimal_allocation(default_profile)

    assert percentages(allocation) == (30, 20, 15, 25, 10)
    assert allocation.allocated_amounts.sip == 6300
    assert allocation.allocated_amounts.stocks == 4200
    assert allocation.allocated_amounts.bonds == 3150
    assert allocation.allocated_amounts.lifestyle == 5250
    assert allocation.allocated_amounts.emergency == 2100
    assert allocation.reasoning == ["Base allocation for medium risk tolerance"]


def test_thin_emergency_fund_shifts_stocks(default_profile):
    default_profile.emergency_fund = 50000

    allocation = calculate_optimal_allocation(default_profile)

    assert allocation.stocks_percentage == 10
    assert allocation.emergency_fund_percentage == 20
    assert sum(percentages(allocation)) == 100


def test_high_debt_shifts_stocks_to_bonds(default_profile):
    default_profile.debt_amount = 300000

    allocation = calculate_optimal_allocation(default_profile)

    assert allocation.stocks_percentage == 15
    assert allocation.bonds_percentage == 20
    assert any("Debt-to-income" in line for line in allocation.reasoning)


def test_shift_never_goes_negative(fragile_profile):
    """Low risk holds only 10% stocks; both rules fire"""
    allocation = calculate_optimal_allocation(fragile_profile)

    assert allocation.stocks_percentage == 0
    assert all(value >= 0 for value in percentages(allocation))
    assert sum(percentages(allocation)) == 100


def test_no_surplus_allocates_nothing(default_profile):
    default_profile.monthly_expenses = 60000

    allocation = calculate_optimal_allocation(default_profile)

    assert allocation.allocated_amounts.sip == 0
    assert "No monthly surplus available to allocate" in allocation.reasoning


@pytest.mark.parametrize("risk", list(RiskTolerance))
def test_every_risk_tolerance_sums_to_100(default_profile, risk):
    default_profile.risk_tolerance = risk

    assert sum(percentages(calculate_optimal_allocation(default_profile))) == 100


def test_emergency_fund_months_is_direct_ratio():
    assert emergency_fund_months(186000, 31000) == 6.0
    assert emergency_fund_months(50000, 31000) == 1.6
    assert emergency_fund_months(50000, 0) == 0.0


def test_ratio_helpers():
    assert debt_to_income_ratio(50000, 624000) == 0.08
    assert debt_to_income_ratio(50000, 0) == 0.0
    assert savings_rate_percentage(52000, 31000) == 40.4
    assert savings_rate_percentage(0, 31000) == 0.0


def test_sip_future_value_annuity_due():
    """1000/month for a year at 12%: 1000 * ((1.01^12 - 1) / 0.01) * 1.01"""
    assert sip_future_value(1000, 1, 12) == pytest.approx(12809.33, abs=0.01)
    assert sip_future_value(1000, 1, 0) == 12000
    assert sip_growth_percentage(1000, 1, 12) == 106.7
    assert sip_growth_percentage(0, 10, 12) == 0.0


def test_default_profile_formulas(default_profile):
    allocation = calculate_optimal_allocation(default_profile)

    formulas = allocation_formulas(default_profile, allocation)

    assert formulas.emergency_months == 6.0
    assert formulas.debt_to_income == 0.08
    assert formulas.savings_rate == 40.4
    assert formulas.investment_risk_score == 3.9
    assert formulas.stability_index == 91
    assert formulas.sip_cagr > 100


def test_risk_score_and_stability_bounds(strong_profile):
    allocation = calculate_optimal_allocation(strong_profile)

    assert 0 <= investment_risk_score(allocation) <= 9
    assert stability_index(0, 0, 1.5, 0) == 0
    assert stability_index(12, 50, 0, 10) == 100
