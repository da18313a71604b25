"""Unit tests for the income suitability score"""

import math
import pytest
from capstack_gateway.domain.models import IncomeSource
from capstack_gateway.domain.income import (
    IncomeProfile,
    calculate_income_score,
    coefficient_of_variation,
    diversification_score,
    goal_suitability_score,
    herfindahl_index,
    market_alignment_score,
    stability_score,
)


def salary(amount: float, stability: float = 0.9) -> IncomeSource:
    return IncomeSource(type="salary", amount=amount, frequency="monthly", stability=stability)


def test_default_profile_income_score(default_profile):
    """
    stability 88, growth 75, diversification 30, market 50, goals 20
    => 26.4 + 18.75 + 6 + 7.5 + 2 = 60.65
    """
    result = calculate_income_score(default_profile)

    assert result.category_scores == {
        "stability": 88,
        "growth": 75,
        "diversification": 30,
        "market_alignment": 50,
        "goal_suitability": 20,
    }
    assert result.total_score == 61
    assert result.grade == "B"
    assert result.risk_level == "medium"
    assert "Income heavily dependent on single source" in result.insights


def test_strong_profile_income_score(strong_profile):
    result = calculate_income_score(strong_profile)

    assert result.total_score == 74
    assert result.risk_level == "low"
    assert result.category_scores["market_alignment"] == 95


def test_projections_compound_growth(default_profile):
    result = calculate_income_score(default_profile)

    assert result.projections.next_year == 54600
    assert result.projections.five_year == 66367
    assert 0.6 <= result.projections.confidence <= 1.0


def test_coefficient_of_variation():
    assert coefficient_of_variation([50000] * 12) == 0
    assert coefficient_of_variation([100, 300]) == pytest.approx(0.5)
    assert math.isinf(coefficient_of_variation([]))
    assert math.isinf(coefficient_of_variation([0, 0, 0]))


def test_volatile_history_lowers_stability():
    steady = IncomeProfile(monthly_income=50000, income_history=[50000] * 12, income_sources=[salary(50000)])
    volatile = IncomeProfile(
        monthly_income=50000,
        income_history=[20000, 80000] * 6,
        income_sources=[salary(50000)],
    )

    assert stability_score(steady) > stability_score(volatile)
    assert 0 <= stability_score(volatile) <= 100


def test_zero_mean_history_scores_on_sources_only():
    data = IncomeProfile(monthly_income=0, income_history=[0] * 12, income_sources=[salary(0)])

    assert stability_score(data) == 0


def test_herfindahl_index():
    assert herfindahl_index([100]) == 1.0
    assert herfindahl_index([50, 50]) == pytest.approx(0.5)
    assert herfindahl_index([0, 0]) == 1.0


def test_diversification_single_source_is_fixed():
    data = IncomeProfile(monthly_income=50000, income_history=[], income_sources=[salary(50000)])

    assert diversification_score(data) == 30


def test_diversification_two_source_types():
    """HHI 0.5 gives 50, plus 5 per distinct source type"""
    data = IncomeProfile(
        monthly_income=60000,
        income_history=[],
        income_sources=[
            salary(30000),
            IncomeSource(type="freelance", amount=30000, frequency="irregular", stability=0.5),
        ],
    )

    assert diversification_score(data) == pytest.approx(60)


def test_diversification_without_income_is_zero():
    empty = IncomeProfile(monthly_income=0, income_history=[], income_sources=[])
    zeroes = IncomeProfile(monthly_income=0, income_history=[], income_sources=[salary(0), salary(0)])

    assert diversification_score(empty) == 0
    assert diversification_score(zeroes) == 0


def test_market_alignment_bands():
    """Retail baseline 35000 in a tier2 city is expected at 24500"""
    above = IncomeProfile(monthly_income=30000, income_history=[], location="tier2", industry="retail", experience_years=1)
    below = IncomeProfile(monthly_income=10000, income_history=[], location="tier2", industry="retail", experience_years=1)

    assert market_alignment_score(above) == 82
    assert market_alignment_score(below) == 27


def test_goal_suitability_floor():
    assert goal_suitability_score(IncomeProfile(monthly_income=0, income_history=[])) == 20
    assert goal_suitability_score(IncomeProfile(monthly_income=-100, income_history=[])) == 20
    assert goal_suitability_score(IncomeProfile(monthly_income=90000, income_history=[])) == 20
