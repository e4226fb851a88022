"""Analysis module for athlete performance analytics."""

from .records import Athlete, Exercise, HeartRate, Metric, PerformanceScores, TrainingSession
from .trends import PerformanceTrend, TrendDirection, analyze_trends
from .injury_risk import InjuryRisk, InjuryRiskFactors, assess_injury_risk
from .readiness import CompetitionReadiness, ReadinessFactors, evaluate_competition_readiness
from .insights import AIInsight, InsightCategory, InsightPriority, InsightType, generate_insights
from .pipeline import AnalyticsReport, run_analytics

__all__ = [
    "Athlete",
    "Exercise",
    "HeartRate",
    "Metric",
    "PerformanceScores",
    "TrainingSession",
    "PerformanceTrend",
    "TrendDirection",
    "analyze_trends",
    "InjuryRisk",
    "InjuryRiskFactors",
    "assess_injury_risk",
    "CompetitionReadiness",
    "ReadinessFactors",
    "evaluate_competition_readiness",
    "AIInsight",
    "InsightCategory",
    "InsightPriority",
    "InsightType",
    "generate_insights",
    "AnalyticsReport",
    "run_analytics",
]
