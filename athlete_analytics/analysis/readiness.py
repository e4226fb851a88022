"""Competition readiness evaluation."""

import logging
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..config import config
from .records import Athlete, Metric, TrainingSession, recent_sessions, sort_by_date

logger = logging.getLogger(__name__)

FITNESS_METRICS = (Metric.SPEED, Metric.POWER, Metric.ENDURANCE)
MENTAL_WINDOW = 10
RECOVERY_WINDOW = 7
RECOMMENDATION_THRESHOLD = 70
WEAKEST_AREAS = 2

# Two pieces of advice per readiness factor
FACTOR_ADVICE: Dict[str, Tuple[str, str]] = {
    "fitness": ("Increase aerobic base training", "Add sport-specific conditioning"),
    "technique": ("Schedule additional technical sessions", "Video analysis of movement patterns"),
    "mental": ("Practice competition simulation", "Work with sports psychologist"),
    "recovery": ("Optimize sleep and nutrition", "Implement recovery protocols"),
    "consistency": ("Maintain regular training schedule", "Avoid training gaps"),
}


@dataclass(frozen=True)
class ReadinessFactors:
    """Readiness sub-scores, each 0-100."""
    fitness: float = 0.0
    technique: float = 0.0
    mental: float = 0.0
    recovery: float = 0.0
    consistency: float = 0.0

    def items(self) -> List[Tuple[str, float]]:
        """(name, score) pairs in declaration order."""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]


@dataclass(frozen=True)
class CompetitionReadiness:
    """Composite competition readiness assessment."""
    overall: float  # 0-100
    factors: ReadinessFactors
    recommendations: List[str] = field(default_factory=list)
    optimal_competition_date: Optional[datetime] = None


def calculate_fitness_level(sessions: List[TrainingSession]) -> float:
    """Mean of speed, power and endurance across sessions, 0-1.

    Absent metrics are flattened to 0 before averaging, so a session
    without e.g. a power score pulls the level down.
    """
    if not sessions:
        return 0.0
    scores = [s.performance.value_or_zero(metric) for s in sessions for metric in FITNESS_METRICS]
    return float(np.mean(scores)) / 100


def calculate_technique_level(sessions: List[TrainingSession]) -> float:
    """Mean recorded technique score, 0-1. Zero scores are skipped."""
    scores = [s.performance.value_or_zero(Metric.TECHNIQUE) for s in sessions]
    scores = [score for score in scores if score > 0]
    if not scores:
        return 0.0
    return float(np.mean(scores)) / 100


def calculate_mental_readiness(sessions: List[TrainingSession]) -> float:
    """Mental readiness from progression and steadiness of recent all-metric means."""
    recent_scores = [s.all_metrics_mean() for s in sessions[-MENTAL_WINDOW:]]
    if not recent_scores:
        return 0.0

    if len(recent_scores) > 1:
        trend = (recent_scores[-1] - recent_scores[0]) / len(recent_scores)
    else:
        trend = 0.0

    mean = float(np.mean(recent_scores))
    consistency = 1 - float(np.std(recent_scores)) / mean if mean > 0 else 0.0

    return float(np.clip((consistency + trend / 100) / 2, 0, 1))


def calculate_recovery_state(sessions: List[TrainingSession]) -> float:
    """Inverse of mean fatigue over the last sessions, 0-1."""
    if not sessions:
        return 0.0
    avg_fatigue = float(np.mean([s.fatigue for s in sessions[-RECOVERY_WINDOW:]]))
    return max(0.0, (10 - avg_fatigue) / 10)


def calculate_training_consistency(sessions: List[TrainingSession], weeks: int = None) -> float:
    """Share of expected sessions completed in the window, capped at 1."""
    if not sessions:
        return 0.0
    return min(1.0, len(sessions) / config.expected_sessions(weeks))


def generate_competition_recommendations(factors: ReadinessFactors) -> List[str]:
    """Advice for the two weakest factors that score below the threshold.

    Ties keep declaration order (fitness, technique, mental, recovery,
    consistency).
    """
    recommendations = []
    weakest_areas = sorted(factors.items(), key=lambda item: item[1])[:WEAKEST_AREAS]

    for area, score in weakest_areas:
        if score < RECOMMENDATION_THRESHOLD:
            recommendations.extend(FACTOR_ADVICE[area])

    return recommendations


def find_last_peak(sessions: List[TrainingSession]) -> Optional[datetime]:
    """Date of the most recent session whose composite score is a strict local maximum."""
    if len(sessions) < 3:
        return None

    scores = [s.composite_score() for s in sessions]
    for i in range(len(scores) - 2, 0, -1):
        if scores[i] > scores[i - 1] and scores[i] > scores[i + 1]:
            return sessions[i].date

    return None


def calculate_optimal_competition_date(sessions: List[TrainingSession]) -> Optional[datetime]:
    """Project the next performance peak one training cycle after the last one."""
    if len(sessions) < config.MIN_SESSIONS_FOR_OPTIMAL_DATE:
        return None

    last_peak = find_last_peak(sort_by_date(sessions))
    if last_peak is None:
        logger.debug("No performance peak found in session history")
        return None

    return last_peak + timedelta(days=config.COMPETITION_CYCLE_DAYS)


def evaluate_competition_readiness(
    athlete: Athlete,
    sessions: List[TrainingSession],
    upcoming_competition: Optional[datetime] = None,
    reference_date: Optional[datetime] = None,
) -> CompetitionReadiness:
    """Evaluate how prepared the athlete is to compete.

    Args:
        athlete: Athlete profile
        sessions: Full session history
        upcoming_competition: Date of the next competition (not used in scoring yet)
        reference_date: Point in time the lookback window ends at (defaults to now)

    Returns:
        CompetitionReadiness with factors, recommendations and, when the
        history allows it, a predicted optimal competition date
    """
    weeks = config.READINESS_LOOKBACK_WEEKS
    window = sort_by_date(recent_sessions(sessions, weeks, reference_date))

    factors = ReadinessFactors(
        fitness=calculate_fitness_level(window) * 100,
        technique=calculate_technique_level(window) * 100,
        mental=calculate_mental_readiness(window) * 100,
        recovery=calculate_recovery_state(window) * 100,
        consistency=calculate_training_consistency(window, weeks) * 100,
    )

    weights = config.readiness_weights()
    overall = sum(score * weights[name] for name, score in factors.items())

    return CompetitionReadiness(
        overall=overall,
        factors=factors,
        recommendations=generate_competition_recommendations(factors),
        optimal_competition_date=calculate_optimal_competition_date(sessions),
    )
