"""Tests for insight generation."""

import pytest

from athlete_analytics.analysis.records import Athlete, Metric
from athlete_analytics.analysis.injury_risk import InjuryRisk, InjuryRiskFactors
from athlete_analytics.analysis.readiness import CompetitionReadiness, ReadinessFactors
from athlete_analytics.analysis.trends import PerformanceTrend, TrendDirection
from athlete_analytics.analysis.insights import (
    DEFAULT_ACTIONS,
    DEFAULT_RECOMMENDATION,
    METRIC_ADVICE,
    InsightPriority,
    InsightType,
    generate_insights,
    get_action_items,
    get_performance_recommendation,
)


def make_trend(metric, trend=TrendDirection.STABLE, rate=0.0, confidence=0.3):
    return PerformanceTrend(
        metric=metric,
        trend=trend,
        change_rate_per_week=rate,
        predicted_value=70.0,
        confidence=confidence,
        timeframe_weeks=12,
    )


def stable_trends(**overrides):
    """One stable trend per metric, replacing the given metrics."""
    return [overrides.get(m.value, make_trend(m)) for m in Metric]


class TestGenerateInsights:
    """Test the insight rules and their ordering."""

    def setup_method(self):
        self.athlete = Athlete(id="a1")
        self.low_risk = InjuryRisk(overall=20.0, factors=InjuryRiskFactors())
        self.ready = CompetitionReadiness(overall=80.0, factors=ReadinessFactors())

    def test_nothing_to_report(self):
        insights = generate_insights(self.athlete, [], stable_trends(), self.low_risk, self.ready)

        assert insights == []

    def test_steep_decline_is_one_high_warning(self):
        trends = stable_trends(speed=make_trend(Metric.SPEED, TrendDirection.DECLINING, -15, 0.9))

        insights = generate_insights(self.athlete, [], trends, self.low_risk, self.ready)

        assert len(insights) == 1
        insight = insights[0]
        assert insight.kind == InsightType.WARNING
        assert insight.priority == InsightPriority.HIGH
        assert insight.title == "Declining speed Performance"
        assert insight.confidence == pytest.approx(0.9)
        assert insight.recommendation == METRIC_ADVICE[Metric.SPEED].declining
        assert insight.action_items == list(METRIC_ADVICE[Metric.SPEED].declining_actions)

    def test_mild_decline_is_medium(self):
        trends = stable_trends(power=make_trend(Metric.POWER, TrendDirection.DECLINING, -5, 0.75))

        insights = generate_insights(self.athlete, [], trends, self.low_risk, self.ready)

        assert [i.priority for i in insights] == [InsightPriority.MEDIUM]
        assert insights[0].action_items == list(DEFAULT_ACTIONS)

    def test_low_confidence_decline_is_ignored(self):
        trends = stable_trends(speed=make_trend(Metric.SPEED, TrendDirection.DECLINING, -15, 0.7))

        assert generate_insights(self.athlete, [], trends, self.low_risk, self.ready) == []

    def test_improvement(self):
        trends = stable_trends(endurance=make_trend(Metric.ENDURANCE, TrendDirection.IMPROVING, 4.2, 0.85))

        insights = generate_insights(self.athlete, [], trends, self.low_risk, self.ready)

        assert len(insights) == 1
        assert insights[0].kind == InsightType.IMPROVEMENT
        assert insights[0].priority == InsightPriority.MEDIUM
        assert insights[0].recommendation == (
            "Continue current training approach for endurance. Consider gradually increasing intensity."
        )
        assert insights[0].action_items == [
            "Maintain current endurance training protocol",
            "Consider progressive overload",
        ]

    def test_improvement_needs_high_confidence(self):
        trends = stable_trends(endurance=make_trend(Metric.ENDURANCE, TrendDirection.IMPROVING, 4.2, 0.8))

        assert generate_insights(self.athlete, [], trends, self.low_risk, self.ready) == []

    def test_high_injury_risk_is_critical_and_first(self):
        trends = stable_trends(speed=make_trend(Metric.SPEED, TrendDirection.DECLINING, -5, 0.9))
        risk = InjuryRisk(
            overall=75.0,
            factors=InjuryRiskFactors(fatigue=90),
            recommendations=["Take 2-3 days complete rest"],
        )

        insights = generate_insights(self.athlete, [], trends, risk, self.ready)

        assert [i.priority for i in insights] == [InsightPriority.CRITICAL, InsightPriority.MEDIUM]
        assert insights[0].title == "High Injury Risk Detected"
        assert insights[0].confidence == pytest.approx(0.85)
        assert insights[0].action_items == ["Take 2-3 days complete rest"]

    def test_injury_risk_at_threshold_is_not_reported(self):
        risk = InjuryRisk(overall=70.0, factors=InjuryRiskFactors())

        assert generate_insights(self.athlete, [], stable_trends(), risk, self.ready) == []

    def test_low_readiness(self):
        readiness = CompetitionReadiness(
            overall=45.0,
            factors=ReadinessFactors(),
            recommendations=["Increase aerobic base training"],
        )

        insights = generate_insights(self.athlete, [], stable_trends(), self.low_risk, readiness)

        assert len(insights) == 1
        assert insights[0].title == "Competition Readiness Below Optimal"
        assert insights[0].confidence == pytest.approx(0.8)
        assert insights[0].action_items == ["Increase aerobic base training"]

    def test_para_athlete_without_details(self):
        athlete = Athlete(id="a1", is_disabled=True)

        assert generate_insights(athlete, [], stable_trends(), self.low_risk, self.ready) == []

    def test_para_athlete_insights(self):
        athlete = Athlete(
            id="a1",
            is_disabled=True,
            disability_type="Visual Impairment",
            accommodations_needed=("Guide runner",),
        )

        insights = generate_insights(athlete, [], stable_trends(), self.low_risk, self.ready)

        assert [i.title for i in insights] == [
            "Equipment Optimization Opportunity",
            "Disability-Specific Training Optimization",
        ]
        assert [i.confidence for i in insights] == [0.8, 0.75]
        assert "Visual Impairment" in insights[1].description

    def test_accommodations_ignored_for_non_disabled_athlete(self):
        athlete = Athlete(id="a1", accommodations_needed=("Ramp access",))

        assert generate_insights(athlete, [], stable_trends(), self.low_risk, self.ready) == []

    def test_generation_order_kept_within_priority(self):
        athlete = Athlete(id="a1", is_disabled=True, accommodations_needed=("Wheelchair",))
        trends = stable_trends(
            speed=make_trend(Metric.SPEED, TrendDirection.DECLINING, -5, 0.9),
            technique=make_trend(Metric.TECHNIQUE, TrendDirection.DECLINING, -12, 0.95),
        )
        readiness = CompetitionReadiness(overall=50.0, factors=ReadinessFactors())

        insights = generate_insights(athlete, [], trends, self.low_risk, readiness)

        assert [i.title for i in insights] == [
            "Declining technique Performance",
            "Declining speed Performance",
            "Competition Readiness Below Optimal",
            "Equipment Optimization Opportunity",
        ]


class TestAdviceLookup:

    def test_stable_trend_uses_default(self):
        assert get_performance_recommendation(Metric.SPEED, TrendDirection.STABLE) == DEFAULT_RECOMMENDATION

    def test_metric_without_action_items(self):
        assert get_action_items(Metric.TECHNIQUE, TrendDirection.DECLINING) == list(DEFAULT_ACTIONS)

    def test_accuracy_improving_actions(self):
        assert get_action_items(Metric.ACCURACY, TrendDirection.IMPROVING) == [
            "Gradually increase difficulty",
            "Maintain current approach",
            "Track consistency metrics",
        ]
