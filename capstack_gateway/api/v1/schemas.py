"""Pydantic schemas for API request/response validation"""

import math
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from capstack_gateway.domain.models import (
    AllocatedAmounts,
    AssetAllocation,
    DEFAULT_PROFILE,
    FinancialProfile,
    RiskTolerance,
    SavingsPlan,
    Transaction,
)


# Auth

class RegisterRequest(BaseModel):
    """Request body for POST /v1/auth/register"""

    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=4)
    name: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request body for POST /v1/auth/login"""

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class UserSchema(BaseModel):
    id: int
    email: str
    name: str


class TokenResponse(BaseModel):
    token: str
    user: UserSchema


class VerifyResponse(BaseModel):
    valid: bool
    payload: Dict[str, Any]


# Profile

class ProfileSchema(BaseModel):
    """Financial profile inputs, monthly figures"""

    monthly_income: float = Field(..., ge=0)
    monthly_expenses: float = Field(..., ge=0)
    emergency_fund: float = Field(0, ge=0)
    debt_amount: float = Field(0, ge=0)
    job_stability_score: int = Field(5, ge=0, le=10)
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    age: int = Field(30, ge=0)
    dependents: int = Field(0, ge=0)
    location: str = "metro"
    industry: str = "technology"
    experience_years: int = Field(5, ge=0)

    def to_domain(self) -> FinancialProfile:
        return FinancialProfile(**self.model_dump())


class ProfileResponse(BaseModel):
    """Response for GET/PUT /v1/profile"""

    profile: ProfileSchema
    source: Literal["stored", "default"]


def _non_negative(value: float) -> bool:
    return value >= 0


def _non_empty(value: str) -> bool:
    return bool(value.strip())


# Acceptance rule per field; a value that fails its rule is taken from the fallback profile
CALCULATE_FIELD_RULES: Dict[str, Callable[[Any], bool]] = {
    "monthly_income": _non_negative,
    "monthly_expenses": _non_negative,
    "emergency_fund": _non_negative,
    "debt_amount": _non_negative,
    "job_stability_score": lambda v: 0 <= v <= 10,
    "risk_tolerance": lambda v: v in {r.value for r in RiskTolerance},
    "age": _non_negative,
    "dependents": _non_negative,
    "location": _non_empty,
    "industry": _non_empty,
    "experience_years": _non_negative,
}

TEXT_FIELDS = ("risk_tolerance", "location", "industry")
WHOLE_NUMBER_FIELDS = ("job_stability_score", "age", "dependents", "experience_years")


class CalculateProfileRequest(BaseModel):
    """
    Request body for POST /v1/finance/calculate.

    Unlike ProfileSchema nothing here is rejected: missing, unreadable or
    out-of-range values are filled from the default profile.
    """

    monthly_income: Optional[float] = None
    monthly_expenses: Optional[float] = None
    emergency_fund: Optional[float] = None
    debt_amount: Optional[float] = None
    job_stability_score: Optional[float] = None
    risk_tolerance: Optional[str] = None
    age: Optional[float] = None
    dependents: Optional[float] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    experience_years: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def unreadable_as_missing(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return None
        if info.field_name in TEXT_FIELDS:
            if not isinstance(value, str):
                return None
            return value.lower() if info.field_name == "risk_tolerance" else value
        if isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    def to_domain(self, fallback: FinancialProfile = DEFAULT_PROFILE) -> Tuple[FinancialProfile, List[str]]:
        """Returns the merged profile and the names of the fields taken from the fallback"""
        accepted: Dict[str, Any] = {}
        substituted: List[str] = []
        for name, is_valid in CALCULATE_FIELD_RULES.items():
            value = getattr(self, name)
            if value is None or not is_valid(value):
                substituted.append(name)
                continue
            if name in WHOLE_NUMBER_FIELDS:
                value = int(value)
            elif name == "risk_tolerance":
                value = RiskTolerance(value)
            accepted[name] = value

        return replace(fallback, **accepted), substituted


# Scores

class HealthScoreResponse(BaseModel):
    """Response for GET /v1/finance/healthscore"""

    score: int
    grade: str
    category_scores: Dict[str, int]
    insights: List[str]
    recommendations: List[str]


class SurvivalBreakdownSchema(BaseModel):
    emergency_fund: float
    monthly_expenses: float
    adjusted_expenses: float
    conservative_months: int
    moderate_months: int
    optimistic_months: int


class StressScenariosSchema(BaseModel):
    job_loss: int
    medical_emergency: int
    market_crash: int


class SurvivalResponse(BaseModel):
    """Response for GET /v1/finance/survival"""

    months: int
    risk_level: str
    breakdown: SurvivalBreakdownSchema
    scenarios: StressScenariosSchema
    recommendations: List[str]


class IncomeProjectionSchema(BaseModel):
    next_year: int
    five_year: int
    confidence: float


class IncomeScoreResponse(BaseModel):
    """Response for GET /v1/finance/incomescore"""

    score: int
    grade: str
    risk_level: str
    category_scores: Dict[str, int]
    insights: List[str]
    recommendations: List[str]
    projections: IncomeProjectionSchema


class CalculateResponse(BaseModel):
    """Response for POST /v1/finance/calculate"""

    expense_ratio: Optional[float]
    used_default: bool = False
    defaulted_fields: List[str] = []
    health: HealthScoreResponse
    survival: SurvivalResponse
    income: IncomeScoreResponse


class AlertSchema(BaseModel):
    id: str
    type: str
    priority: str
    category: str
    title: str
    message: str
    actionable: bool
    metadata: Dict[str, float] = {}


class InsightSchema(BaseModel):
    id: str
    type: str
    category: str
    title: str
    description: str
    impact: str
    confidence: float
    recommendations: List[str] = []


class InsightsResponse(BaseModel):
    """Response for GET /v1/finance/insights"""

    alerts: List[AlertSchema]
    insights: List[InsightSchema]
    summary: Dict[str, int]
    trends: Dict[str, str]


# Asset allocation

class AllocatedAmountsSchema(BaseModel):
    sip: float = Field(..., ge=0)
    stocks: float = Field(..., ge=0)
    bonds: float = Field(..., ge=0)
    lifestyle: float = Field(..., ge=0)
    emergency: float = Field(..., ge=0)


class AllocationSchema(BaseModel):
    sip_percentage: float = Field(..., ge=0, le=100)
    stocks_percentage: float = Field(..., ge=0, le=100)
    bonds_percentage: float = Field(..., ge=0, le=100)
    lifestyle_percentage: float = Field(..., ge=0, le=100)
    emergency_fund_percentage: float = Field(..., ge=0, le=100)
    allocated_amounts: AllocatedAmountsSchema
    reasoning: List[str] = []

    @model_validator(mode="after")
    def percentages_sum_to_100(self) -> "AllocationSchema":
        total = (
            self.sip_percentage
            + self.stocks_percentage
            + self.bonds_percentage
            + self.lifestyle_percentage
            + self.emergency_fund_percentage
        )
        if abs(total - 100) > 0.5:
            raise ValueError(f"Allocation percentages must sum to 100, got {total:g}")
        return self

    def to_domain(self) -> AssetAllocation:
        data = self.model_dump()
        data["allocated_amounts"] = AllocatedAmounts(**data["allocated_amounts"])
        return AssetAllocation(**data)


class FormulasSchema(BaseModel):
    sip_cagr: float
    emergency_months: float
    debt_to_income: float
    savings_rate: float
    investment_risk_score: float
    stability_index: int


class AllocationResponse(BaseModel):
    """Response for GET /v1/finance/asset-allocation"""

    allocation: AllocationSchema
    formulas: FormulasSchema


class AllocationUpdateRequest(BaseModel):
    """Request body for POST /v1/finance/asset-allocation/update"""

    allocation: AllocationSchema


class AllocationUpdateResponse(BaseModel):
    success: bool
    message: str
    allocation: AllocationSchema


class SipPlanRequest(BaseModel):
    """Request body for POST /v1/finance/sip-plan"""

    monthly_investment: float = Field(..., gt=0)
    years: int = Field(..., gt=0, le=50)
    expected_return: float = Field(12.0, ge=0, le=100, description="Annual return in percent")


class SipPlanResponse(BaseModel):
    monthly_investment: float
    years: int
    expected_return: float
    future_value: int
    total_invested: float
    wealth_gained: int
    growth_percentage: float


# Emergency fund

class EmergencyStatusSchema(BaseModel):
    current_balance: float
    target_months: int
    monthly_burn_rate: float
    months_coverage: float
    status: str
    recommended_action: str
    alerts: List[str]


class EmergencySimulationSchema(BaseModel):
    scenario: str
    description: str
    monthly_shortfall: float
    months_covered: Optional[float]
    survives_target: bool


class ContributionPlanSchema(BaseModel):
    monthly_contribution: float
    target_amount: float
    gap: float
    months_to_target: Optional[int]


class DepletionRiskSchema(BaseModel):
    level: str
    probability: float
    months_until_depletion: Optional[float]


class EmergencyStatusResponse(BaseModel):
    """Response for GET /v1/finance/emergency-status"""

    status: EmergencyStatusSchema
    simulations: List[EmergencySimulationSchema]
    optimal_contribution: ContributionPlanSchema
    depletion_risk: DepletionRiskSchema
    recommendations: List[str]


class EmergencySimulationRequest(BaseModel):
    """Request body for POST /v1/finance/emergency-simulation"""

    scenario: str = "job_loss"
    current_balance: float = Field(..., ge=0)
    monthly_expenses: float = Field(..., ge=0)
    monthly_income: float = Field(..., ge=0)


class EmergencySimulationResponse(BaseModel):
    simulation: EmergencySimulationSchema
    all_scenarios: List[EmergencySimulationSchema]


# Savings discipline

class TransactionSchema(BaseModel):
    amount: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    type: Literal["income", "expense"] = "expense"
    transaction_id: Optional[str] = None

    def to_domain(self) -> Transaction:
        return Transaction(**self.model_dump())


class SpendingCheckResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None


class ProtocolOutcomeResponse(BaseModel):
    blocked: bool
    message: str
    reason: Optional[str] = None
    alternative_actions: List[str] = []
    auto_saved: Optional[int] = None


class AutoSaveRequest(BaseModel):
    income_amount: float = Field(..., ge=0)


class AutoSaveResponse(BaseModel):
    success: bool
    saved_amount: int
    locked_amount: int
    available_amount: int


class SavingsPlanCreate(BaseModel):
    """Request body for POST /v1/savings/plans"""

    name: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(0, ge=0)
    monthly_contribution: float = Field(0, ge=0)
    lock_percentage: float = Field(80, ge=0, le=100, description="Percent of contributions auto-locked")
    target_date: Optional[date] = None

    def to_domain(self) -> SavingsPlan:
        return SavingsPlan(
            name=self.name,
            target_amount=self.target_amount,
            current_amount=self.current_amount,
            monthly_contribution=self.monthly_contribution,
            lock_percentage=self.lock_percentage / 100,
            target_date=self.target_date,
        )


class SavingsPlanSchema(BaseModel):
    id: Optional[int] = None
    name: str
    target_amount: float
    current_amount: float
    monthly_contribution: float
    lock_percentage: float
    target_date: Optional[date] = None


class SavingsPlanCreateResponse(BaseModel):
    success: bool
    plan: SavingsPlanSchema
    auto_lock_scheduled: bool


class SavingsStatusResponse(BaseModel):
    """Response for GET /v1/savings/status"""

    total_saved: float
    locked: float
    available: float
    monthly_auto_save: int
    discipline_score: int
    plans: List[SavingsPlanSchema]


# Notifications

class AlertNotificationRequest(BaseModel):
    email: str = Field(..., min_length=3)
    message: str = Field(..., min_length=1)
    type: Literal["critical", "warning", "info", "success"] = "info"


class AchievementNotificationRequest(BaseModel):
    email: str = Field(..., min_length=3)
    achievement: str = Field(..., min_length=1)
    details: Dict[str, Any] = {}


class NotificationResponse(BaseModel):
    queued: bool
