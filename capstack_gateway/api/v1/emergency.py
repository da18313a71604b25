"""/v1/finance/emergency-* - Emergency fund monitoring and stress simulation"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from capstack_gateway.api.v1.schemas import (
    EmergencySimulationRequest,
    EmergencySimulationResponse,
    EmergencyStatusResponse,
)
from capstack_gateway.api.dependencies import get_current_user_id, get_request_id
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.infrastructure.database.repositories import EmergencyFundRepository, ProfileRepository
from capstack_gateway.domain.profiles import resolve_profile
from capstack_gateway.domain.emergency_fund import (
    coverage_change_alert,
    depletion_risk,
    emergency_fund_status,
    emergency_recommendations,
    optimal_contribution,
    simulate_emergency_scenarios,
)

router = APIRouter()


@router.get("/finance/emergency-status", response_model=EmergencyStatusResponse)
def get_emergency_status(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Coverage status, stress simulations, contribution plan and depletion risk.

    Users with a stored profile get a snapshot saved on every check; a drop in
    coverage since the previous snapshot is reported as an alert.
    """
    request_id = get_request_id(request)
    profile, used_default = resolve_profile(ProfileRepository(db), user_id)
    status = emergency_fund_status(profile.emergency_fund, profile.monthly_expenses)

    if not used_default:
        status_repo = EmergencyFundRepository(db)
        change = coverage_change_alert(status_repo.get_status(user_id), status)
        if change:
            status.alerts.append(change)
            logging.warning(change, extra={"request_id": request_id, "user_id": user_id})
        try:
            status_repo.save_status(user_id, status)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logging.error(f"Emergency fund snapshot failed: {e}", extra={"request_id": request_id, "user_id": user_id})
            raise HTTPException(status_code=500, detail="Internal server error")

    simulations = simulate_emergency_scenarios(
        status.current_balance, status.monthly_burn_rate, profile.monthly_income, status.target_months
    )
    contribution = optimal_contribution(
        status.current_balance, status.monthly_burn_rate, profile.monthly_income, status.target_months
    )
    risk = depletion_risk(
        status.current_balance, status.monthly_burn_rate, profile.monthly_income, profile.job_stability_score
    )

    return EmergencyStatusResponse(
        status=asdict(status),
        simulations=[asdict(s) for s in simulations],
        optimal_contribution=asdict(contribution),
        depletion_risk=asdict(risk),
        recommendations=emergency_recommendations(status, contribution, risk),
    )


@router.post("/finance/emergency-simulation", response_model=EmergencySimulationResponse)
def run_emergency_simulation(request_body: EmergencySimulationRequest, user_id: int = Depends(get_current_user_id)):
    """Run the fixed stress scenarios against caller-supplied figures"""
    simulations = simulate_emergency_scenarios(
        request_body.current_balance, request_body.monthly_expenses, request_body.monthly_income
    )

    selected = next((s for s in simulations if s.scenario == request_body.scenario), None)
    if selected is None:
        known = ", ".join(s.scenario for s in simulations)
        raise HTTPException(status_code=400, detail=f"Unknown scenario '{request_body.scenario}'. Expected one of: {known}")

    return EmergencySimulationResponse(
        simulation=asdict(selected),
        all_scenarios=[asdict(s) for s in simulations],
    )
