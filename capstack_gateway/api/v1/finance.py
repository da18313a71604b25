"""GET /v1/finance/* - Health, survival, income scores and insights"""

import logging
import time
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from capstack_gateway.api.v1.schemas import (
    AchievementNotificationRequest,
    AlertNotificationRequest,
    CalculateProfileRequest,
    CalculateResponse,
    HealthScoreResponse,
    IncomeScoreResponse,
    InsightsResponse,
    NotificationResponse,
    SurvivalResponse,
)
from capstack_gateway.api.dependencies import (
    get_current_user_id,
    get_notification_client,
    get_profile_repository,
    get_request_id,
)
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.infrastructure.database.repositories import SavingsPlanRepository
from capstack_gateway.infrastructure.clients.notifications import NotificationClient, deliver_in_background
from capstack_gateway.infrastructure.observability.metrics import record_score
from capstack_gateway.infrastructure.observability.logging import log_score
from capstack_gateway.domain.models import HealthScore, IncomeScoreResult, SurvivalResult
from capstack_gateway.domain.profiles import ProfileRepository, resolve_profile
from capstack_gateway.domain.health_score import HealthMetrics, calculate_health_score
from capstack_gateway.domain.survival import calculate_survival_months
from capstack_gateway.domain.income import calculate_income_score
from capstack_gateway.domain.savings import summarize_savings
from capstack_gateway.domain.insights import generate_insights_report

router = APIRouter()


def _health_response(result: HealthScore) -> HealthScoreResponse:
    return HealthScoreResponse(
        score=result.total_score,
        grade=result.grade,
        category_scores=result.category_scores,
        insights=result.insights,
        recommendations=result.recommendations,
    )


def _survival_response(result: SurvivalResult) -> SurvivalResponse:
    return SurvivalResponse(
        months=result.months,
        risk_level=result.risk_level,
        breakdown=asdict(result.breakdown),
        scenarios=asdict(result.scenarios),
        recommendations=result.recommendations,
    )


def _income_response(result: IncomeScoreResult) -> IncomeScoreResponse:
    return IncomeScoreResponse(
        score=result.total_score,
        grade=result.grade,
        risk_level=result.risk_level,
        category_scores=result.category_scores,
        insights=result.insights,
        recommendations=result.recommendations,
        projections=asdict(result.projections),
    )


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


@router.get("/finance/healthscore", response_model=HealthScoreResponse)
def get_health_score(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """
    Composite 0-100 financial health score.

    Falls back to the default profile when the user has none stored.
    """
    start_time = time.time()
    profile, used_default = resolve_profile(profiles, user_id)

    result = calculate_health_score(profile)

    record_score("health", result.grade, used_default)
    log_score(get_request_id(request), user_id, "health", result.total_score, used_default, _elapsed_ms(start_time))
    return _health_response(result)


@router.get("/finance/survival", response_model=SurvivalResponse)
def get_survival(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """Months the emergency fund lasts if income stops, with stress scenarios"""
    start_time = time.time()
    profile, used_default = resolve_profile(profiles, user_id)

    result = calculate_survival_months(profile)

    record_score("survival", result.risk_level, used_default)
    log_score(get_request_id(request), user_id, "survival", result.months, used_default, _elapsed_ms(start_time))
    return _survival_response(result)


@router.get("/finance/incomescore", response_model=IncomeScoreResponse)
def get_income_score(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """Income quality score: stability, growth, diversification, market and goal fit"""
    start_time = time.time()
    profile, used_default = resolve_profile(profiles, user_id)

    result = calculate_income_score(profile)

    record_score("income", result.grade, used_default)
    log_score(get_request_id(request), user_id, "income", result.total_score, used_default, _elapsed_ms(start_time))
    return _income_response(result)


@router.get("/finance/insights", response_model=InsightsResponse)
def get_insights(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repository),
    db: Session = Depends(get_db),
):
    """
    Alerts and insights derived from every calculator.

    Flow:
    1. Resolve profile (default on miss)
    2. Run health, survival and income calculators
    3. Summarize savings plans
    4. Merge into alerts, insights, counts and trends
    """
    start_time = time.time()
    profile, used_default = resolve_profile(profiles, user_id)

    health = calculate_health_score(profile)
    survival = calculate_survival_months(profile)
    income = calculate_income_score(profile)
    savings = summarize_savings(SavingsPlanRepository(db).get_plans_by_user(user_id), profile.monthly_income)

    report = generate_insights_report(user_id, health, survival, income, savings)

    log_score(get_request_id(request), user_id, "insights", None, used_default, _elapsed_ms(start_time))
    return InsightsResponse(**asdict(report))


@router.post("/finance/calculate", response_model=CalculateResponse)
def calculate(
    request: Request,
    request_body: Optional[CalculateProfileRequest] = None,
    user_id: int = Depends(get_current_user_id),
):
    """
    Score an ad-hoc profile without storing it.

    Missing or invalid fields are taken from the default profile, so an
    empty body scores the default profile outright.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    profile, defaulted_fields = (request_body or CalculateProfileRequest()).to_domain()
    used_default = bool(defaulted_fields)
    if used_default:
        logging.warning(
            "Ad-hoc profile completed from default profile",
            extra={"request_id": request_id, "user_id": user_id, "defaulted_fields": defaulted_fields},
        )

    health = calculate_health_score(profile)
    survival = calculate_survival_months(profile)
    income = calculate_income_score(profile)

    log_score(request_id, user_id, "calculate", health.total_score, used_default, _elapsed_ms(start_time))
    return CalculateResponse(
        expense_ratio=HealthMetrics.from_profile(profile).expense_ratio,
        used_default=used_default,
        defaulted_fields=defaulted_fields,
        health=_health_response(health),
        survival=_survival_response(survival),
        income=_income_response(income),
    )


@router.post("/finance/notify/alert", response_model=NotificationResponse, status_code=202)
def notify_alert(
    request_body: AlertNotificationRequest,
    background_tasks: BackgroundTasks,
    user_id: int = Depends(get_current_user_id),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Queue an alert for delivery to the notification webhook"""
    background_tasks.add_task(
        deliver_in_background,
        notifier.send_alert,
        user_id,
        request_body.email,
        request_body.message,
        request_body.type,
    )
    return NotificationResponse(queued=True)


@router.post("/finance/notify/achievement", response_model=NotificationResponse, status_code=202)
def notify_achievement(
    request_body: AchievementNotificationRequest,
    background_tasks: BackgroundTasks,
    user_id: int = Depends(get_current_user_id),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Queue an achievement for delivery to the notification webhook"""
    background_tasks.add_task(
        deliver_in_background,
        notifier.send_achievement,
        user_id,
        request_body.email,
        request_body.achievement,
        request_body.details,
    )
    return NotificationResponse(queued=True)
