"""Savings discipline rules: spending checks and income auto-save"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from capstack_gateway.domain.models import (
    AutoSaveResult,
    ProtocolOutcome,
    SavingsPlan,
    SavingsSummary,
    SpendingCheck,
    Transaction,
)

LOCKED_SHARE = 0.8  # of each auto-saved amount
AVAILABLE_SHARE = 0.2
PLAN_LOCKED_SHARE = 0.7  # of the balance held across savings plans
DEFAULT_DISCIPLINE_SCORE = 85

ALTERNATIVE_ACTIONS = [
    "Use available savings instead",
    "Wait until next pay cycle",
    "Review and adjust spending limits",
]


@dataclass(frozen=True)
class DisciplineProtocol:
    daily_limit: float = 2000
    weekly_limit: float = 10000
    monthly_limit: float = 35000
    category_blocks: Tuple[str, ...] = ("entertainment", "dining_out")
    auto_save_percentage: float = 0.25
    emergency_buffer: float = 200000
    reward_system: bool = True


DEFAULT_PROTOCOL = DisciplineProtocol()


def check_spending_limit(transaction: Transaction, protocol: DisciplineProtocol = DEFAULT_PROTOCOL) -> SpendingCheck:
    """
    Stateless rule check for a single transaction.

    Income always passes. Spending is blocked when its category is on the
    protocol's block list, or when the amount alone exceeds the daily cap.
    """
    if transaction.type == "income":
        return SpendingCheck(allowed=True)

    if transaction.category in protocol.category_blocks:
        return SpendingCheck(
            allowed=False,
            reason=f"Spending blocked on {transaction.category} category due to discipline protocol",
        )

    if transaction.amount > protocol.daily_limit:
        return SpendingCheck(
            allowed=False,
            reason=f"Transaction exceeds daily spending limit of ₹{protocol.daily_limit:g}",
        )

    return SpendingCheck(allowed=True)


def auto_save_income(amount: float, protocol: DisciplineProtocol = DEFAULT_PROTOCOL) -> AutoSaveResult:
    """Split an income transaction: 25% saved, of which 80% locked and 20% available"""
    saved = math.floor(max(0.0, amount) * protocol.auto_save_percentage)
    return AutoSaveResult(
        saved_amount=saved,
        locked_amount=math.floor(saved * LOCKED_SHARE),
        available_amount=math.floor(saved * AVAILABLE_SHARE),
    )


def enforce_discipline_protocol(
    transaction: Transaction, protocol: DisciplineProtocol = DEFAULT_PROTOCOL
) -> ProtocolOutcome:
    check = check_spending_limit(transaction, protocol)
    if not check.allowed:
        return ProtocolOutcome(
            blocked=True,
            message="Transaction blocked",
            reason=check.reason,
            alternative_actions=list(ALTERNATIVE_ACTIONS),
        )

    if transaction.type == "income":
        saved = auto_save_income(transaction.amount, protocol)
        return ProtocolOutcome(
            blocked=False,
            message=f"Transaction approved. ₹{saved.saved_amount} automatically saved.",
            auto_saved=saved.saved_amount,
        )

    return ProtocolOutcome(blocked=False, message="Transaction approved")


def summarize_savings(
    plans: List[SavingsPlan],
    monthly_income: float,
    protocol: DisciplineProtocol = DEFAULT_PROTOCOL,
) -> SavingsSummary:
    total_saved = sum(max(0.0, plan.current_amount) for plan in plans)
    locked = math.floor(total_saved * PLAN_LOCKED_SHARE)

    return SavingsSummary(
        total_saved=total_saved,
        locked=locked,
        available=total_saved - locked,
        monthly_auto_save=math.floor(max(0.0, monthly_income) * protocol.auto_save_percentage),
        discipline_score=DEFAULT_DISCIPLINE_SCORE,
        plans=plans,
    )
