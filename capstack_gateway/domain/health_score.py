"""Financial health score - weighted composite of six category scores"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from capstack_gateway.domain.models import FinancialProfile, HealthScore
from capstack_gateway.domain.tables import DEFAULT_TABLES, ScoringTables, clamp_score, round_half_up


@dataclass
class HealthMetrics:
    """Ratios the category formulas work on.

    ``None`` marks a ratio whose denominator was zero or negative; the
    matching category then scores 0.
    """

    monthly_income: float
    monthly_expenses: float
    savings_rate: float
    emergency_fund_months: Optional[float]
    debt_to_income_ratio: Optional[float]
    income_stability: float  # 0-1
    investment_diversification: float  # 0-1

    @classmethod
    def from_profile(cls, profile: FinancialProfile, tables: ScoringTables = DEFAULT_TABLES) -> "HealthMetrics":
        income = profile.monthly_income
        expenses = profile.monthly_expenses
        risk = getattr(profile.risk_tolerance, "value", profile.risk_tolerance)

        return cls(
            monthly_income=income,
            monthly_expenses=expenses,
            savings_rate=(income - expenses) / income if income > 0 else 0.0,
            emergency_fund_months=profile.emergency_fund / expenses if expenses > 0 else None,
            debt_to_income_ratio=profile.debt_amount / income if income > 0 else None,
            income_stability=profile.job_stability_score / 10,
            investment_diversification=tables.risk_tolerance_diversification.get(
                risk, tables.risk_tolerance_diversification["low"]
            ),
        )

    @property
    def expense_ratio(self) -> Optional[float]:
        if self.monthly_income <= 0:
            return None
        return self.monthly_expenses / self.monthly_income


def category_scores(metrics: HealthMetrics) -> Dict[str, float]:
    """
    Unrounded 0-100 score per category.

    - income_stability:       stability * 100
    - expense_management:     100 - expense_ratio * 100
    - savings_discipline:     savings_rate * 400 (25% savings = 100)
    - emergency_preparedness: emergency_months / 12 * 100
    - debt_management:        100 - debt_to_income * 200
    - investment_strategy:    diversification * 100
    """
    expense_ratio = metrics.expense_ratio

    return {
        "income_stability": clamp_score(metrics.income_stability * 100),
        "expense_management": 0.0 if expense_ratio is None else clamp_score(100 - expense_ratio * 100),
        "savings_discipline": clamp_score(metrics.savings_rate * 400),
        "emergency_preparedness": (
            0.0
            if metrics.emergency_fund_months is None
            else clamp_score(metrics.emergency_fund_months / 12 * 100)
        ),
        "debt_management": (
            0.0
            if metrics.debt_to_income_ratio is None
            else clamp_score(100 - metrics.debt_to_income_ratio * 200)
        ),
        "investment_strategy": clamp_score(metrics.investment_diversification * 100),
    }


def weighted_total(scores: Dict[str, float], weights) -> int:
    return round_half_up(sum(weights[name] * score for name, score in scores.items()))


def generate_insights(metrics: HealthMetrics, scores: Dict[str, float]) -> Tuple[List[str], List[str]]:
    """Template text selected by fixed thresholds per category"""
    insights: List[str] = []
    recommendations: List[str] = []

    if scores["income_stability"] < 70:
        insights.append("Your income shows some variability that could impact financial stability")
        recommendations.append(
            "Consider building multiple income streams or emergency savings to buffer income fluctuations"
        )
    else:
        insights.append("Your income stability provides a solid foundation for financial planning")

    expense_ratio = metrics.expense_ratio
    if expense_ratio is None or expense_ratio > 0.7:
        insights.append("Your expense ratio is high, leaving limited room for savings and investments")
        recommendations.append("Aim to reduce monthly expenses to below 70% of income for better financial health")
    elif expense_ratio < 0.5:
        insights.append("Excellent expense management with significant surplus for savings and investments")

    if metrics.savings_rate < 0.2:
        insights.append("Your savings rate needs improvement to build financial security")
        recommendations.append("Target saving at least 20% of your income monthly")
    else:
        insights.append(f"Strong savings discipline with {round_half_up(metrics.savings_rate * 100)}% savings rate")

    months = metrics.emergency_fund_months
    if months is None or months < 6:
        insights.append("Emergency fund coverage is below recommended 6 months")
        recommendations.append("Build emergency fund to cover 6-12 months of expenses")
    else:
        insights.append(f"Well-prepared with {round(months, 1):g} months of emergency coverage")

    dti = metrics.debt_to_income_ratio
    if dti is None or dti > 0.4:
        insights.append("Debt-to-income ratio is high and may impact financial flexibility")
        recommendations.append("Focus on debt reduction strategies and consider debt consolidation")
    else:
        insights.append("Debt levels are well-managed relative to income")

    if scores["investment_strategy"] < 60:
        insights.append("Investment portfolio could benefit from better diversification")
        recommendations.append("Consider diversifying investments across different asset classes and risk levels")
    else:
        insights.append("Investment strategy shows good diversification and risk management")

    return insights, recommendations


def score_from_metrics(metrics: HealthMetrics, tables: ScoringTables = DEFAULT_TABLES) -> HealthScore:
    scores = category_scores(metrics)
    total = weighted_total(scores, tables.health_weights)
    insights, recommendations = generate_insights(metrics, scores)

    return HealthScore(
        total_score=total,
        category_scores={name: round_half_up(score) for name, score in scores.items()},
        grade=tables.grade_for(total),
        insights=insights,
        recommendations=recommendations,
    )


def calculate_health_score(profile: FinancialProfile, tables: ScoringTables = DEFAULT_TABLES) -> HealthScore:
    """
    Main entry point: derive ratios from the profile and score them.

    Never raises for degenerate numbers; zero income or expenses give the
    affected categories their worst score.
    """
    return score_from_metrics(HealthMetrics.from_profile(profile, tables), tables)
