"""/v1/savings/* - Discipline protocol, auto-save and savings plans"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from capstack_gateway.api.v1.schemas import (
    AutoSaveRequest,
    AutoSaveResponse,
    ProtocolOutcomeResponse,
    SavingsPlanCreate,
    SavingsPlanCreateResponse,
    SavingsStatusResponse,
    SpendingCheckResponse,
    TransactionSchema,
)
from capstack_gateway.api.dependencies import get_current_user_id, get_request_id
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.infrastructure.database.repositories import ProfileRepository, SavingsPlanRepository
from capstack_gateway.infrastructure.observability.metrics import (
    auto_saved_amount_counter,
    blocked_transaction_counter,
)
from capstack_gateway.infrastructure.observability.logging import log_protocol_outcome
from capstack_gateway.domain.profiles import resolve_profile
from capstack_gateway.domain.savings import (
    auto_save_income,
    check_spending_limit,
    enforce_discipline_protocol,
    summarize_savings,
)

router = APIRouter()


@router.post("/savings/check-transaction", response_model=SpendingCheckResponse)
def check_transaction(request_body: TransactionSchema, user_id: int = Depends(get_current_user_id)):
    """Dry-run a transaction against the spending rules"""
    return SpendingCheckResponse(**asdict(check_spending_limit(request_body.to_domain())))


@router.post("/savings/process-transaction", response_model=ProtocolOutcomeResponse)
def process_transaction(
    request_body: TransactionSchema,
    request: Request,
    user_id: int = Depends(get_current_user_id),
):
    """
    Run a transaction through the discipline protocol.

    Blocked spending comes back with alternative actions; income is
    auto-saved and the saved amount reported.
    """
    outcome = enforce_discipline_protocol(request_body.to_domain())

    if outcome.blocked:
        blocked_transaction_counter.inc()
    if outcome.auto_saved:
        auto_saved_amount_counter.inc(outcome.auto_saved)

    log_protocol_outcome(
        get_request_id(request),
        user_id,
        request_body.category,
        request_body.amount,
        outcome.blocked,
        reason=outcome.reason,
        auto_saved=outcome.auto_saved,
    )

    return ProtocolOutcomeResponse(**asdict(outcome))


@router.post("/savings/auto-save", response_model=AutoSaveResponse)
def auto_save(request_body: AutoSaveRequest, user_id: int = Depends(get_current_user_id)):
    """Split an income amount into locked and available savings"""
    result = auto_save_income(request_body.income_amount)
    auto_saved_amount_counter.inc(result.saved_amount)
    return AutoSaveResponse(success=True, **asdict(result))


@router.post("/savings/plans", response_model=SavingsPlanCreateResponse, status_code=201)
def create_savings_plan(
    request_body: SavingsPlanCreate,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a savings goal; a non-zero lock percentage schedules auto-locking"""
    request_id = get_request_id(request)

    try:
        plan = SavingsPlanRepository(db).create_plan(user_id, request_body.to_domain())
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Savings plan creation failed: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Savings plan created", extra={"request_id": request_id, "user_id": user_id, "plan_id": plan.id})
    return SavingsPlanCreateResponse(
        success=True,
        plan=asdict(plan),
        auto_lock_scheduled=plan.lock_percentage > 0,
    )


@router.get("/savings/status", response_model=SavingsStatusResponse)
def get_savings_status(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Totals across the user's savings plans plus the expected monthly auto-save"""
    profile, _ = resolve_profile(ProfileRepository(db), user_id)
    plans = SavingsPlanRepository(db).get_plans_by_user(user_id)

    summary = summarize_savings(plans, profile.monthly_income)
    return SavingsStatusResponse(**asdict(summary))
