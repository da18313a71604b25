"""Cross-calculator alerts and insights"""

from typing import List

from capstack_gateway.domain.models import (
    Alert,
    HealthScore,
    IncomeScoreResult,
    Insight,
    InsightsReport,
    SavingsSummary,
    SurvivalResult,
)


def build_alerts(
    user_id: int,
    health: HealthScore,
    survival: SurvivalResult,
    income: IncomeScoreResult,
    savings: SavingsSummary,
) -> List[Alert]:
    alerts: List[Alert] = []

    if health.total_score < 50:
        alerts.append(
            Alert(
                id=f"health_critical_{user_id}",
                type="critical",
                priority="high",
                category="emergency",
                title="Critical Financial Health Alert",
                message=f"Your financial health score is critically low at {health.total_score}. "
                "Immediate action required.",
                metadata={"score": health.total_score},
            )
        )
    elif health.total_score < 70:
        alerts.append(
            Alert(
                id=f"health_warning_{user_id}",
                type="warning",
                priority="medium",
                category="savings",
                title="Financial Health Needs Attention",
                message=f"Your financial health score of {health.total_score} indicates areas for improvement.",
                metadata={"score": health.total_score},
            )
        )

    if survival.risk_level == "critical":
        alerts.append(
            Alert(
                id=f"emergency_critical_{user_id}",
                type="critical",
                priority="high",
                category="emergency",
                title="Emergency Fund Critical",
                message=f"You can only survive {survival.months} months financially. "
                "Build emergency fund immediately.",
                metadata={"months": survival.months},
            )
        )
    elif survival.risk_level == "high":
        alerts.append(
            Alert(
                id=f"emergency_warning_{user_id}",
                type="warning",
                priority="medium",
                category="emergency",
                title="Emergency Fund Low",
                message=f"Your emergency coverage of {survival.months} months is below recommended levels.",
                metadata={"months": survival.months},
            )
        )

    if savings.discipline_score < 60:
        alerts.append(
            Alert(
                id=f"discipline_warning_{user_id}",
                type="warning",
                priority="medium",
                category="savings",
                title="Savings Discipline Alert",
                message=f"Your savings discipline score is {savings.discipline_score}. "
                "Consider strengthening your saving habits.",
                metadata={"score": savings.discipline_score},
            )
        )

    if income.risk_level == "high":
        alerts.append(
            Alert(
                id=f"income_warning_{user_id}",
                type="warning",
                priority="medium",
                category="income",
                title="Income Stability Concern",
                message=f"Your income stability score of {income.total_score} "
                "indicates potential financial vulnerability.",
                metadata={"score": income.total_score},
            )
        )

    return alerts


def build_insights(
    user_id: int,
    health: HealthScore,
    survival: SurvivalResult,
    income: IncomeScoreResult,
    savings: SavingsSummary,
) -> List[Insight]:
    insights: List[Insight] = []

    if health.total_score >= 80:
        insights.append(
            Insight(
                id=f"achievement_health_{user_id}",
                type="achievement",
                category="health",
                title="Financial Health Champion",
                description=f"Congratulations! Your financial health score of {health.total_score} "
                f"({health.grade}) demonstrates excellent financial management.",
                impact="high",
                confidence=1.0,
            )
        )

    if survival.months >= 12:
        insights.append(
            Insight(
                id=f"achievement_emergency_{user_id}",
                type="achievement",
                category="emergency",
                title="Emergency Preparedness Master",
                description=f"Outstanding! You have {survival.months} months of emergency coverage, "
                "providing excellent financial security.",
                impact="high",
                confidence=1.0,
            )
        )

    if income.category_scores["growth"] < 70:
        insights.append(
            Insight(
                id=f"opportunity_growth_{user_id}",
                type="opportunity",
                category="income",
                title="Income Growth Opportunity",
                description="Your industry and experience suggest potential for higher earnings. "
                "Consider skill development or career advancement.",
                impact="high",
                confidence=0.8,
                recommendations=[
                    "Pursue professional certifications",
                    "Network with industry leaders",
                    "Consider higher-paying roles in your field",
                ],
            )
        )

    if savings.discipline_score >= 85:
        insights.append(
            Insight(
                id=f"opportunity_investment_{user_id}",
                type="opportunity",
                category="investment",
                title="Investment Ready",
                description="Your strong savings discipline indicates readiness for investment opportunities.",
                impact="medium",
                confidence=0.9,
                recommendations=[
                    "Consider diversified investment portfolio",
                    "Explore tax-advantaged investment options",
                    "Consult with financial advisor for personalized strategy",
                ],
            )
        )

    if income.category_scores["diversification"] < 60:
        insights.append(
            Insight(
                id=f"risk_diversification_{user_id}",
                type="risk",
                category="income",
                title="Income Concentration Risk",
                description="Heavy reliance on single income source increases financial vulnerability.",
                impact="high",
                confidence=0.85,
                recommendations=[
                    "Develop side income streams",
                    "Build freelance or consulting skills",
                    "Consider passive income investments",
                ],
            )
        )

    if savings.monthly_auto_save > 0:
        insights.append(
            Insight(
                id=f"trend_savings_{user_id}",
                type="trend",
                category="savings",
                title="Positive Savings Momentum",
                description=f"Auto-saving ₹{savings.monthly_auto_save} monthly shows strong financial discipline.",
                impact="medium",
                confidence=0.9,
            )
        )

    return insights


def generate_insights_report(
    user_id: int,
    health: HealthScore,
    survival: SurvivalResult,
    income: IncomeScoreResult,
    savings: SavingsSummary,
) -> InsightsReport:
    """Combine all calculator outputs into alerts, insights, counts and trend labels"""
    alerts = build_alerts(user_id, health, survival, income, savings)
    insights = build_insights(user_id, health, survival, income, savings)

    summary = {
        "critical_count": sum(1 for a in alerts if a.type == "critical"),
        "warning_count": sum(1 for a in alerts if a.type == "warning"),
        "opportunity_count": sum(1 for i in insights if i.type == "opportunity"),
        "achievements_count": sum(1 for i in insights if i.type == "achievement"),
    }

    # No history is stored yet, so trends only reflect current levels
    trends = {
        "spending_trend": "stable",
        "savings_trend": "improving" if savings.discipline_score > 80 else "stable",
        "health_trend": "improving" if health.total_score > 75 else "stable",
    }

    return InsightsReport(alerts=alerts, insights=insights, summary=summary, trends=trends)
