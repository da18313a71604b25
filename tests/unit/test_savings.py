"""Unit tests for savings discipline rules"""

import pytest
from capstack_gateway.domain.models import SavingsPlan, Transaction
from capstack_gateway.domain.savings import (
    ALTERNATIVE_ACTIONS,
    DEFAULT_PROTOCOL,
    DisciplineProtocol,
    auto_save_income,
    check_spending_limit,
    enforce_discipline_protocol,
    summarize_savings,
)


def test_spending_within_daily_limit_is_allowed():
    check = check_spending_limit(Transaction(amount=2000, category="groceries", type="expense"))

    assert check.allowed is True
    assert check.reason is None


def test_spending_over_daily_limit_is_blocked():
    check = check_spending_limit(Transaction(amount=2500, category="groceries", type="expense"))

    assert check.allowed is False
    assert check.reason == "Transaction exceeds daily spending limit of ₹2000"


@pytest.mark.parametrize("category", ["entertainment", "dining_out"])
def test_blocked_categories(category):
    check = check_spending_limit(Transaction(amount=100, category=category, type="expense"))

    assert check.allowed is False
    assert category in check.reason


def test_income_is_never_blocked():
    """Large deposits and blocked categories do not apply to income"""
    check = check_spending_limit(Transaction(amount=50000, category="entertainment", type="income"))

    assert check.allowed is True


def test_custom_protocol_limit():
    strict = DisciplineProtocol(daily_limit=500, category_blocks=())

    assert check_spending_limit(Transaction(amount=600, category="travel", type="expense"), strict).allowed is False
    assert check_spending_limit(Transaction(amount=100, category="entertainment", type="expense"), strict).allowed


def test_auto_save_split():
    result = auto_save_income(2000)

    assert result.saved_amount == 500
    assert result.locked_amount == 400
    assert result.available_amount == 100


def test_auto_save_floors_fractions():
    result = auto_save_income(1001)

    assert result.saved_amount == 250
    assert result.locked_amount == 200
    assert result.available_amount == 50


def test_auto_save_zero_income():
    result = auto_save_income(0)

    assert (result.saved_amount, result.locked_amount, result.available_amount) == (0, 0, 0)


def test_protocol_blocks_with_alternatives():
    outcome = enforce_discipline_protocol(Transaction(amount=300, category="entertainment", type="expense"))

    assert outcome.blocked is True
    assert outcome.message == "Transaction blocked"
    assert outcome.alternative_actions == ALTERNATIVE_ACTIONS
    assert outcome.auto_saved is None


def test_protocol_auto_saves_income():
    outcome = enforce_discipline_protocol(Transaction(amount=10000, category="salary", type="income"))

    assert outcome.blocked is False
    assert outcome.auto_saved == 2500
    assert outcome.message == "Transaction approved. ₹2500 automatically saved."


def test_protocol_approves_ordinary_spending():
    outcome = enforce_discipline_protocol(Transaction(amount=800, category="groceries", type="expense"))

    assert outcome.blocked is False
    assert outcome.message == "Transaction approved"
    assert outcome.alternative_actions == []


def test_summarize_savings():
    plans = [
        SavingsPlan(name="Vacation", target_amount=100000, current_amount=10000),
        SavingsPlan(name="Laptop", target_amount=80000, current_amount=5000),
    ]

    summary = summarize_savings(plans, monthly_income=52000)

    assert summary.total_saved == 15000
    assert summary.locked == 10500
    assert summary.available == 4500
    assert summary.monthly_auto_save == 13000
    assert summary.discipline_score == 85
    assert summary.plans == plans


def test_summarize_without_plans():
    summary = summarize_savings([], monthly_income=0)

    assert summary.total_saved == 0
    assert summary.locked == 0
    assert summary.monthly_auto_save == 0


def test_default_protocol_limits():
    assert DEFAULT_PROTOCOL.daily_limit == 2000
    assert DEFAULT_PROTOCOL.weekly_limit == 10000
    assert DEFAULT_PROTOCOL.monthly_limit == 35000
    assert DEFAULT_PROTOCOL.auto_save_percentage == 0.25


def test_auto_save_ten_thousand():
    result = auto_save_income(10000)

    assert result.saved_amount == 2500
    assert result.locked_amount == 2000
    assert result.available_amount == 500
