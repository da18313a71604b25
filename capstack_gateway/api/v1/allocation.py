"""/v1/finance/asset-allocation and /v1/finance/sip-plan - Surplus allocation and SIP projections"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from capstack_gateway.api.v1.schemas import (
    AllocationResponse,
    AllocationUpdateRequest,
    AllocationUpdateResponse,
    SipPlanRequest,
    SipPlanResponse,
)
from capstack_gateway.api.dependencies import get_current_user_id, get_request_id
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.infrastructure.database.repositories import AllocationRepository, ProfileRepository
from capstack_gateway.domain.profiles import resolve_profile
from capstack_gateway.domain.tables import round_half_up
from capstack_gateway.domain.allocation import (
    allocation_formulas,
    calculate_optimal_allocation,
    sip_future_value,
    sip_growth_percentage,
)

router = APIRouter()


@router.get("/finance/asset-allocation", response_model=AllocationResponse)
def get_asset_allocation(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Current allocation of the monthly surplus plus the derived formulas.

    Flow:
    1. Return the stored allocation if the user has one
    2. Otherwise compute it from the profile (default on miss)
    3. Persist computed allocations for users with a stored profile
    """
    request_id = get_request_id(request)
    profile, used_default = resolve_profile(ProfileRepository(db), user_id)
    allocation_repo = AllocationRepository(db)

    allocation = allocation_repo.get_allocation(user_id)
    if allocation is None:
        allocation = calculate_optimal_allocation(profile)
        if not used_default:
            try:
                allocation_repo.save_allocation(user_id, allocation)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logging.error(f"Allocation snapshot failed: {e}", extra={"request_id": request_id, "user_id": user_id})
                raise HTTPException(status_code=500, detail="Internal server error")
            logging.info("Allocation snapshot saved", extra={"request_id": request_id, "user_id": user_id})

    return AllocationResponse(
        allocation=asdict(allocation),
        formulas=asdict(allocation_formulas(profile, allocation)),
    )


@router.post("/finance/asset-allocation/update", response_model=AllocationUpdateResponse)
def update_asset_allocation(
    request_body: AllocationUpdateRequest,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Replace the stored allocation with a user-chosen split"""
    request_id = get_request_id(request)

    try:
        AllocationRepository(db).save_allocation(user_id, request_body.allocation.to_domain())
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Allocation update failed: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return AllocationUpdateResponse(
        success=True,
        message="Asset allocation updated",
        allocation=request_body.allocation,
    )


@router.post("/finance/sip-plan", response_model=SipPlanResponse)
def create_sip_plan(request_body: SipPlanRequest, user_id: int = Depends(get_current_user_id)):
    """Project a monthly SIP over a horizon at an expected annual return"""
    future_value = round_half_up(
        sip_future_value(request_body.monthly_investment, request_body.years, request_body.expected_return)
    )
    total_invested = request_body.monthly_investment * request_body.years * 12

    return SipPlanResponse(
        monthly_investment=request_body.monthly_investment,
        years=request_body.years,
        expected_return=request_body.expected_return,
        future_value=future_value,
        total_invested=total_invested,
        wealth_gained=round_half_up(future_value - total_invested),
        growth_percentage=sip_growth_percentage(
            request_body.monthly_investment, request_body.years, request_body.expected_return
        ),
    )
