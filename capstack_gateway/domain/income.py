"""Income suitability - stability, growth, diversification, market fit and goal capacity"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from capstack_gateway.domain.models import (
    FinancialProfile,
    IncomeProjection,
    IncomeScoreResult,
    IncomeSource,
)
from capstack_gateway.domain.tables import DEFAULT_TABLES, ScoringTables, clamp_score, round_half_up

DEFAULT_GROWTH_RATE = 0.05


@dataclass
class IncomeProfile:
    monthly_income: float
    income_history: List[float]  # last 12 months
    income_sources: List[IncomeSource] = field(default_factory=list)
    growth_rate: float = DEFAULT_GROWTH_RATE  # year-over-year
    location: str = "metro"
    industry: str = "technology"
    experience_years: int = 5

    @classmethod
    def from_profile(cls, profile: FinancialProfile) -> "IncomeProfile":
        """Stored profiles carry no history, so assume a flat year from a single salary"""
        return cls(
            monthly_income=profile.monthly_income,
            income_history=[profile.monthly_income] * 12,
            income_sources=[
                IncomeSource(
                    type="salary",
                    amount=profile.monthly_income,
                    frequency="monthly",
                    stability=profile.job_stability_score / 10,
                )
            ],
            location=profile.location,
            industry=profile.industry,
            experience_years=profile.experience_years,
        )


def coefficient_of_variation(history: List[float]) -> float:
    """Population standard deviation over mean; infinite when the mean is not positive"""
    if not history:
        return math.inf
    mean = sum(history) / len(history)
    if mean <= 0:
        return math.inf
    variance = sum((value - mean) ** 2 for value in history) / len(history)
    return math.sqrt(variance) / mean


def stability_score(data: IncomeProfile) -> float:
    cv = coefficient_of_variation(data.income_history)
    cv_score = 0.0 if math.isinf(cv) else max(0.0, 100 - cv * 1000)

    weighted_stability = 0.0
    if data.monthly_income > 0:
        weighted_stability = sum(
            source.stability * (source.amount / data.monthly_income) for source in data.income_sources
        )

    return clamp_score(cv_score * 0.6 + weighted_stability * 100 * 0.4)


def growth_score(data: IncomeProfile, tables: ScoringTables = DEFAULT_TABLES) -> float:
    base = min(100.0, data.growth_rate * 1000)  # 10% growth = 100
    experience_multiplier = min(1.5, 1 + data.experience_years * 0.05)
    return clamp_score(base * experience_multiplier * tables.industry_growth(data.industry))


def herfindahl_index(amounts: List[float]) -> float:
    total = sum(amounts)
    if total <= 0:
        return 1.0
    return sum((amount / total) ** 2 for amount in amounts)


def diversification_score(data: IncomeProfile, tables: ScoringTables = DEFAULT_TABLES) -> float:
    sources = data.income_sources
    if len(sources) == 1:
        return tables.single_source_diversification
    if not sources or sum(source.amount for source in sources) <= 0:
        return 0.0

    hhi = herfindahl_index([source.amount for source in sources])
    concentration_score = max(0.0, 100 - hhi * 100)
    type_bonus = min(20, len({source.type for source in sources}) * 5)

    return min(100.0, concentration_score + type_bonus)


def market_alignment_score(data: IncomeProfile, tables: ScoringTables = DEFAULT_TABLES) -> float:
    location_multiplier = tables.market_location_multipliers.get(
        data.location, tables.market_default_location_multiplier
    )
    expected_income = tables.industry_baseline(data.industry) * location_multiplier
    ratio = data.monthly_income / expected_income if expected_income > 0 else 0.0

    score = 50.0
    if ratio > 1.2:
        score += 30
    elif ratio > 1.0:
        score += 15
    elif ratio > 0.8:
        score += 5
    elif ratio > 0.6:
        score -= 10
    else:
        score -= 25

    experience_bonus = min(15, data.experience_years * 2)
    return clamp_score(score + experience_bonus)


def goal_suitability_score(data: IncomeProfile) -> float:
    """Bands comparing income with the cost of funding common goals"""
    income = data.monthly_income
    if income <= 0:
        return 20.0

    emergency_fund = income * 6
    retirement = income * 0.15
    investment = income * 0.20
    major_purchase = income * 12

    if income >= emergency_fund + retirement + investment:
        return 100.0
    elif income >= emergency_fund + retirement:
        return 80.0
    elif income >= emergency_fund + investment:
        return 70.0
    elif income >= emergency_fund:
        return 60.0
    elif income >= major_purchase * 0.5:
        return 40.0
    return 20.0


def risk_level_for_score(score: int) -> str:
    if score >= 70:
        return "low"
    elif score >= 50:
        return "medium"
    return "high"


def project_income(data: IncomeProfile) -> IncomeProjection:
    next_year = data.monthly_income * (1 + data.growth_rate)
    five_year = data.monthly_income * (1 + data.growth_rate) ** 5
    confidence = max(0.6, 1 - data.growth_rate * 0.5)

    return IncomeProjection(
        next_year=round_half_up(next_year),
        five_year=round_half_up(five_year),
        confidence=round(confidence, 2),
    )


def income_insights(data: IncomeProfile, scores: Dict[str, float]) -> Tuple[List[str], List[str]]:
    insights: List[str] = []
    recommendations: List[str] = []

    if scores["stability"] >= 80:
        insights.append("Excellent income stability with consistent earnings pattern")
    elif scores["stability"] >= 60:
        insights.append("Good income stability with minor variations")
    else:
        insights.append("Income shows significant variability that may impact financial planning")
        recommendations.append("Consider building additional income streams to improve stability")

    if scores["growth"] >= 80:
        insights.append(f"Strong income growth trajectory ({round_half_up(data.growth_rate * 100)}% annually)")
    elif scores["growth"] >= 60:
        insights.append("Moderate income growth potential")
    else:
        insights.append("Limited income growth potential in current role/industry")
        recommendations.append("Explore career advancement opportunities or skill development")

    if scores["diversification"] >= 70:
        insights.append("Well-diversified income sources provide good risk protection")
    else:
        insights.append("Income heavily dependent on single source")
        recommendations.append("Develop additional income streams (freelance, investments, side business)")

    if scores["market_alignment"] >= 80:
        insights.append("Income well-aligned with market expectations for your industry and location")
    elif scores["market_alignment"] >= 60:
        insights.append("Income reasonably aligned with market standards")
    else:
        insights.append("Income below market expectations for your experience level")
        recommendations.append("Consider salary negotiation or career transition to higher-paying roles")

    if scores["goal_suitability"] >= 80:
        insights.append("Income level supports comprehensive financial goal achievement")
    elif scores["goal_suitability"] >= 60:
        insights.append("Income supports most major financial goals")
    else:
        insights.append("Income may limit ability to achieve multiple financial goals simultaneously")
        recommendations.append("Prioritize financial goals and consider phased approach")

    return insights, recommendations


def score_income(data: IncomeProfile, tables: ScoringTables = DEFAULT_TABLES) -> IncomeScoreResult:
    """
    Score income quality.

    Weights: stability 30%, growth 25%, diversification 20%,
    market alignment 15%, goal suitability 10%.
    """
    scores = {
        "stability": stability_score(data),
        "growth": growth_score(data, tables),
        "diversification": diversification_score(data, tables),
        "market_alignment": market_alignment_score(data, tables),
        "goal_suitability": goal_suitability_score(data),
    }
    total = round_half_up(sum(tables.income_weights[name] * score for name, score in scores.items()))
    insights, recommendations = income_insights(data, scores)

    return IncomeScoreResult(
        total_score=total,
        category_scores={name: round_half_up(score) for name, score in scores.items()},
        grade=tables.grade_for(total),
        risk_level=risk_level_for_score(total),
        insights=insights,
        recommendations=recommendations,
        projections=project_income(data),
    )


def calculate_income_score(profile: FinancialProfile, tables: ScoringTables = DEFAULT_TABLES) -> IncomeScoreResult:
    return score_income(IncomeProfile.from_profile(profile), tables)
