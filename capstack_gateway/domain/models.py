"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class RiskTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class FinancialProfile:
    """Per-request snapshot of a user's finances (monthly figures)"""

    monthly_income: float
    monthly_expenses: float
    emergency_fund: float
    debt_amount: float
    job_stability_score: int  # 0-10
    risk_tolerance: RiskTolerance
    age: int = 30
    dependents: int = 0
    location: str = "metro"  # metro | tier1 | tier2 | rural
    industry: str = "technology"
    experience_years: int = 5


# Demo profile served whenever the stored profile is missing or unreadable
DEFAULT_PROFILE = FinancialProfile(
    monthly_income=52000,
    monthly_expenses=31000,
    emergency_fund=186000,
    debt_amount=50000,
    job_stability_score=7,
    risk_tolerance=RiskTolerance.MEDIUM,
)


@dataclass
class HealthScore:
    """Weighted composite of the six health categories"""

    total_score: int
    category_scores: Dict[str, int]
    grade: str
    insights: List[str]
    recommendations: List[str]


@dataclass
class SurvivalBreakdown:
    emergency_fund: float
    monthly_expenses: float
    adjusted_expenses: float
    conservative_months: int
    moderate_months: int
    optimistic_months: int


@dataclass
class StressScenarios:
    job_loss: int
    medical_emergency: int
    market_crash: int


@dataclass
class SurvivalResult:
    """Months of solvency under an emergency scenario"""

    months: int
    breakdown: SurvivalBreakdown
    risk_level: str  # low | medium | high | critical
    scenarios: StressScenarios
    recommendations: List[str]


@dataclass
class IncomeSource:
    type: str  # salary | freelance | business | investment | other
    amount: float
    frequency: str  # monthly | irregular
    stability: float  # 0-1


@dataclass
class IncomeProjection:
    next_year: int
    five_year: int
    confidence: float


@dataclass
class IncomeScoreResult:
    """Income quality across five weighted dimensions"""

    total_score: int
    category_scores: Dict[str, int]
    grade: str
    risk_level: str  # low | medium | high
    insights: List[str]
    recommendations: List[str]
    projections: IncomeProjection


@dataclass
class Transaction:
    """Money movement checked against the discipline protocol"""

    amount: float
    category: str
    type: str  # "income" or "expense"
    transaction_id: Optional[str] = None


@dataclass
class SpendingCheck:
    allowed: bool
    reason: Optional[str] = None


@dataclass
class AutoSaveResult:
    saved_amount: int
    locked_amount: int
    available_amount: int


@dataclass
class ProtocolOutcome:
    """Result of running a transaction through the discipline protocol"""

    blocked: bool
    message: str
    reason: Optional[str] = None
    alternative_actions: List[str] = field(default_factory=list)
    auto_saved: Optional[int] = None


@dataclass
class SavingsPlan:
    name: str
    target_amount: float
    current_amount: float = 0.0
    monthly_contribution: float = 0.0
    lock_percentage: float = 0.8  # 0-1
    target_date: Optional[date] = None
    id: Optional[int] = None


@dataclass
class SavingsSummary:
    total_saved: float
    locked: float
    available: float
    monthly_auto_save: int
    discipline_score: int
    plans: List[SavingsPlan]


@dataclass
class AllocatedAmounts:
    sip: float
    stocks: float
    bonds: float
    lifestyle: float
    emergency: float


@dataclass
class AssetAllocation:
    """Percentages (summing to 100) of the monthly surplus per bucket"""

    sip_percentage: float
    stocks_percentage: float
    bonds_percentage: float
    lifestyle_percentage: float
    emergency_fund_percentage: float
    allocated_amounts: AllocatedAmounts
    reasoning: List[str]


@dataclass
class AllocationFormulas:
    sip_cagr: float
    emergency_months: float
    debt_to_income: float
    savings_rate: float
    investment_risk_score: float
    stability_index: int


@dataclass
class EmergencyFundStatus:
    current_balance: float
    target_months: int
    monthly_burn_rate: float
    months_coverage: float
    status: str  # excellent | good | adequate | insufficient | critical
    recommended_action: str
    alerts: List[str]


@dataclass
class EmergencySimulation:
    scenario: str
    description: str
    monthly_shortfall: float
    months_covered: Optional[float]
    survives_target: bool


@dataclass
class ContributionPlan:
    monthly_contribution: float
    target_amount: float
    gap: float
    months_to_target: Optional[int]


@dataclass
class DepletionRisk:
    level: str  # low | medium | high
    probability: float
    months_until_depletion: Optional[float]


@dataclass
class Alert:
    id: str
    type: str  # critical | warning | info | success
    priority: str  # high | medium | low
    category: str
    title: str
    message: str
    actionable: bool = True
    metadata: Dict[str, float] = field(default_factory=dict)


@dataclass
class Insight:
    id: str
    type: str  # trend | opportunity | risk | achievement
    category: str
    title: str
    description: str
    impact: str
    confidence: float
    recommendations: List[str] = field(default_factory=list)


@dataclass
class InsightsReport:
    alerts: List[Alert]
    insights: List[Insight]
    summary: Dict[str, int]
    trends: Dict[str, str]
