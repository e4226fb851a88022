"""
Insight generation

Aggregates trend, injury risk and readiness results into a prioritized list of
human-readable insights with recommended actions.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..config import config
from .injury_risk import InjuryRisk
from .readiness import CompetitionReadiness
from .records import Athlete, Metric, TrainingSession
from .trends import PerformanceTrend, TrendDirection

logger = logging.getLogger(__name__)

DECLINE_CONFIDENCE = 0.7
IMPROVEMENT_CONFIDENCE = 0.8
STEEP_DECLINE_RATE = -10


class InsightType(Enum):
    IMPROVEMENT = "improvement"
    WARNING = "warning"
    RECOMMENDATION = "recommendation"
    PREDICTION = "prediction"


class InsightCategory(Enum):
    TECHNIQUE = "technique"
    FITNESS = "fitness"
    RECOVERY = "recovery"
    NUTRITION = "nutrition"
    MENTAL = "mental"
    STRATEGY = "strategy"


class InsightPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK = {
    InsightPriority.CRITICAL: 4,
    InsightPriority.HIGH: 3,
    InsightPriority.MEDIUM: 2,
    InsightPriority.LOW: 1,
}


@dataclass(frozen=True)
class AIInsight:
    """A prioritized, actionable finding."""
    kind: InsightType
    category: InsightCategory
    priority: InsightPriority
    title: str
    description: str
    recommendation: str
    confidence: float  # 0-1
    data_points: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MetricAdvice:
    """Coaching advice for a metric, by trend direction."""
    declining: str
    improving: str
    declining_actions: Optional[Tuple[str, ...]] = None
    improving_actions: Optional[Tuple[str, ...]] = None


DEFAULT_RECOMMENDATION = "Consult with coaching staff for personalized recommendations."
DEFAULT_ACTIONS = ("Monitor closely", "Adjust training as needed")
CONTINUE_PLAN_RECOMMENDATION = (
    "Continue current training approach for {metric}. Consider gradually increasing intensity."
)

METRIC_ADVICE: Dict[Metric, MetricAdvice] = {
    Metric.SPEED: MetricAdvice(
        declining="Focus on explosive power training and sprint intervals. Check for fatigue or overtraining.",
        improving="Continue current speed training protocol with progressive overload.",
        declining_actions=("Reduce training volume by 20%", "Add 2 extra rest days", "Schedule biomechanical analysis"),
        improving_actions=("Maintain current protocol", "Consider progressive overload", "Document successful strategies"),
    ),
    Metric.ACCURACY: MetricAdvice(
        declining="Reduce intensity and focus on technique refinement. Consider shorter, more focused sessions.",
        improving="Maintain current technical training while gradually increasing complexity.",
        declining_actions=("Focus on basic drills", "Reduce session intensity", "Increase rest between repetitions"),
        improving_actions=("Gradually increase difficulty", "Maintain current approach", "Track consistency metrics"),
    ),
    Metric.POWER: MetricAdvice(
        declining="Incorporate strength training and plyometrics. Ensure adequate recovery between sessions.",
        improving="Progress to higher intensity power exercises while maintaining current volume.",
    ),
    Metric.ENDURANCE: MetricAdvice(
        declining="Increase aerobic base training volume. Check nutrition and hydration strategies.",
        improving="Add lactate threshold training to current endurance protocol.",
    ),
    Metric.TECHNIQUE: MetricAdvice(
        declining="Reduce training volume and focus on fundamentals. Consider video analysis.",
        improving="Gradually increase complexity while maintaining technical consistency.",
    ),
}


def get_performance_recommendation(metric: Metric, trend: TrendDirection) -> str:
    advice = METRIC_ADVICE.get(metric)
    if advice is None:
        return DEFAULT_RECOMMENDATION
    if trend == TrendDirection.DECLINING:
        return advice.declining
    if trend == TrendDirection.IMPROVING:
        return advice.improving
    return DEFAULT_RECOMMENDATION


def get_action_items(metric: Metric, trend: TrendDirection) -> List[str]:
    advice = METRIC_ADVICE.get(metric)
    actions = None
    if advice is not None:
        if trend == TrendDirection.DECLINING:
            actions = advice.declining_actions
        elif trend == TrendDirection.IMPROVING:
            actions = advice.improving_actions
    return list(actions or DEFAULT_ACTIONS)


def _trend_insights(trends: List[PerformanceTrend]) -> List[AIInsight]:
    insights = []

    for trend in trends:
        name = trend.metric.value

        if trend.trend == TrendDirection.DECLINING and trend.confidence > DECLINE_CONFIDENCE:
            priority = InsightPriority.HIGH if trend.change_rate_per_week < STEEP_DECLINE_RATE else InsightPriority.MEDIUM
            insights.append(AIInsight(
                kind=InsightType.WARNING,
                category=InsightCategory.FITNESS,
                priority=priority,
                title=f"Declining {name} Performance",
                description=(
                    f"{name} has decreased by {abs(trend.change_rate_per_week):.1f}% per week "
                    f"over the last {trend.timeframe_weeks} weeks."
                ),
                recommendation=get_performance_recommendation(trend.metric, TrendDirection.DECLINING),
                confidence=trend.confidence,
                data_points=[f"{name} trend", "training sessions", "performance metrics"],
                action_items=get_action_items(trend.metric, TrendDirection.DECLINING),
            ))

        if trend.trend == TrendDirection.IMPROVING and trend.confidence > IMPROVEMENT_CONFIDENCE:
            insights.append(AIInsight(
                kind=InsightType.IMPROVEMENT,
                category=InsightCategory.FITNESS,
                priority=InsightPriority.MEDIUM,
                title=f"Improving {name} Performance",
                description=f"Excellent progress! {name} has improved by {trend.change_rate_per_week:.1f}% per week.",
                recommendation=CONTINUE_PLAN_RECOMMENDATION.format(metric=name),
                confidence=trend.confidence,
                data_points=[f"{name} trend", "training consistency"],
                action_items=[f"Maintain current {name} training protocol", "Consider progressive overload"],
            ))

    return insights


def _para_athlete_insights(athlete: Athlete) -> List[AIInsight]:
    insights = []

    if athlete.accommodations_needed:
        insights.append(AIInsight(
            kind=InsightType.RECOMMENDATION,
            category=InsightCategory.STRATEGY,
            priority=InsightPriority.MEDIUM,
            title="Equipment Optimization Opportunity",
            description="Regular equipment assessment can improve performance and prevent injury.",
            recommendation="Schedule monthly equipment fitting and optimization sessions.",
            confidence=0.8,
            data_points=["accommodation needs", "training consistency"],
            action_items=[
                "Check equipment fit and function",
                "Explore latest adaptive technology",
                "Ensure backup equipment availability",
            ],
        ))

    if athlete.disability_type:
        insights.append(AIInsight(
            kind=InsightType.RECOMMENDATION,
            category=InsightCategory.TECHNIQUE,
            priority=InsightPriority.MEDIUM,
            title="Disability-Specific Training Optimization",
            description=f"Training can be optimized for {athlete.disability_type} athletes.",
            recommendation="Incorporate classification-specific training protocols.",
            confidence=0.75,
            data_points=["disability type", "performance metrics"],
            action_items=[
                "Research best practices for classification",
                "Connect with specialized coaches",
                "Attend para-sport specific workshops",
            ],
        ))

    return insights


def sort_by_priority(insights: List[AIInsight]) -> List[AIInsight]:
    """Order insights critical first, keeping generation order within a priority."""
    return sorted(insights, key=lambda insight: insight.priority.rank, reverse=True)


def generate_insights(
    athlete: Athlete,
    sessions: List[TrainingSession],
    trends: List[PerformanceTrend],
    injury_risk: InjuryRisk,
    competition_readiness: CompetitionReadiness,
) -> List[AIInsight]:
    """Generate prioritized insights from the analyzer outputs.

    Rules are applied in a fixed order (trend declines and improvements,
    injury risk, competition readiness, para-athlete guidance) and the
    result is stably sorted by priority.
    """
    insights = _trend_insights(trends)

    if injury_risk.overall > config.INJURY_RISK_ALERT_THRESHOLD:
        insights.append(AIInsight(
            kind=InsightType.WARNING,
            category=InsightCategory.RECOVERY,
            priority=InsightPriority.CRITICAL,
            title="High Injury Risk Detected",
            description=f"Current injury risk is {injury_risk.overall:.0f}%. Immediate action required.",
            recommendation="Reduce training intensity and focus on recovery protocols.",
            confidence=0.85,
            data_points=["workload analysis", "recovery metrics", "fatigue levels"],
            action_items=list(injury_risk.recommendations),
        ))

    if competition_readiness.overall < config.READINESS_ALERT_THRESHOLD:
        insights.append(AIInsight(
            kind=InsightType.RECOMMENDATION,
            category=InsightCategory.STRATEGY,
            priority=InsightPriority.MEDIUM,
            title="Competition Readiness Below Optimal",
            description=f"Current readiness is {competition_readiness.overall:.0f}%. Focus areas identified.",
            recommendation="Target specific weaknesses in training preparation.",
            confidence=0.8,
            data_points=["fitness metrics", "technique analysis", "mental preparation"],
            action_items=list(competition_readiness.recommendations),
        ))

    if athlete.is_disabled:
        insights.extend(_para_athlete_insights(athlete))

    logger.debug(f"Generated {len(insights)} insights for athlete {athlete.id} from {len(sessions)} sessions")
    return sort_by_priority(insights)
