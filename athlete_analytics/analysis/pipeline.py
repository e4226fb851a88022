"""Full analytics run over an athlete's training history."""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .injury_risk import InjuryRisk, InjuryRiskFactors, assess_injury_risk
from .insights import AIInsight, generate_insights
from .readiness import CompetitionReadiness, ReadinessFactors, evaluate_competition_readiness
from .records import Athlete, TrainingSession
from .trends import PerformanceTrend, analyze_trends

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsReport:
    """Results of one analytics run."""
    trends: List[PerformanceTrend]
    injury_risk: InjuryRisk
    competition_readiness: CompetitionReadiness
    insights: List[AIInsight]
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.error is None

    @classmethod
    def insufficient_data(cls, error: str = "Insufficient data") -> "AnalyticsReport":
        """Zeroed report used when the analysis could not be completed."""
        return cls(
            trends=[],
            injury_risk=InjuryRisk(overall=0.0, factors=InjuryRiskFactors()),
            competition_readiness=CompetitionReadiness(overall=0.0, factors=ReadinessFactors()),
            insights=[],
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation (enum values, ISO dates)."""
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def run_analytics(
    athlete: Athlete,
    sessions: List[TrainingSession],
    reference_date: Optional[datetime] = None,
) -> AnalyticsReport:
    """Run trends, injury risk and readiness, then derive insights.

    Unexpected failures are logged and reported as an insufficient-data
    report instead of being raised to the caller.
    """
    try:
        trends = analyze_trends(sessions)
        injury_risk = assess_injury_risk(athlete, sessions, reference_date=reference_date)
        readiness = evaluate_competition_readiness(athlete, sessions, reference_date=reference_date)
        insights = generate_insights(athlete, sessions, trends, injury_risk, readiness)
    except Exception as e:
        logger.exception(f"Analytics calculation failed for athlete {athlete.id}")
        return AnalyticsReport.insufficient_data(str(e))

    return AnalyticsReport(
        trends=trends,
        injury_risk=injury_risk,
        competition_readiness=readiness,
        insights=insights,
    )
