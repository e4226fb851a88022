"""Training log and athlete profile records consumed by the analytics engine.

These records are read-only snapshots supplied by a session-log provider and
an athlete-profile provider. None of the analyzers mutate them.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class Metric(Enum):
    """Performance metrics tracked per session, in analysis order."""
    SPEED = "speed"
    ACCURACY = "accuracy"
    POWER = "power"
    ENDURANCE = "endurance"
    TECHNIQUE = "technique"


class DisabilityType:
    """Disability classifications recorded on athlete profiles."""
    PHYSICAL = "Physical Disability"
    VISUAL = "Visual Impairment"
    HEARING = "Hearing Impairment"
    INTELLECTUAL = "Intellectual Disability"
    MENTAL_HEALTH = "Mental Health Condition"
    NEUROLOGICAL = "Neurological Condition"
    CHRONIC_ILLNESS = "Chronic Illness"
    MULTIPLE = "Multiple Disabilities"
    OTHER = "Other"

    ALL = (
        PHYSICAL, VISUAL, HEARING, INTELLECTUAL, MENTAL_HEALTH,
        NEUROLOGICAL, CHRONIC_ILLNESS, MULTIPLE, OTHER,
    )


@dataclass(frozen=True)
class PerformanceScores:
    """Per-session metric scores (0-100). Any metric may be absent."""
    speed: Optional[float] = None
    accuracy: Optional[float] = None
    power: Optional[float] = None
    endurance: Optional[float] = None
    technique: Optional[float] = None

    def value(self, metric: Metric) -> Optional[float]:
        """Get the recorded score for a metric, or None when absent."""
        return getattr(self, metric.value)

    def value_or_zero(self, metric: Metric) -> float:
        """Get the score for a metric, flattening absence to 0."""
        value = self.value(metric)
        return value if value is not None else 0.0

    def present_values(self) -> List[float]:
        """Non-zero recorded scores in metric order."""
        return [v for v in (self.value(m) for m in Metric) if v]


@dataclass(frozen=True)
class HeartRate:
    """Session heart rate summary."""
    avg: float
    max: float
    zone_fractions: Tuple[float, float, float, float, float] = (0.0, 0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Exercise:
    """Single exercise performed in a session."""
    id: str
    name: str
    sets: int
    reps: int
    performance_score: float  # 0-100, from the real-time scorer
    weight: Optional[float] = None
    distance: Optional[float] = None
    time: Optional[float] = None


@dataclass(frozen=True)
class TrainingSession:
    """A logged training session."""
    id: str
    athlete_id: str
    date: datetime
    duration_minutes: float
    fatigue: int  # 1-10 self-reported exertion
    exercises: Tuple[Exercise, ...] = ()
    performance: PerformanceScores = field(default_factory=PerformanceScores)
    heart_rate: Optional[HeartRate] = None
    notes: Optional[str] = None

    def mean_exercise_score(self) -> float:
        """Average exercise performance score, 0 for a session without exercises."""
        if not self.exercises:
            return 0.0
        return float(np.mean([ex.performance_score for ex in self.exercises]))

    @property
    def load(self) -> float:
        """Session load: duration scaled by mean exercise performance."""
        return self.duration_minutes * self.mean_exercise_score() / 100

    def all_metrics_mean(self) -> float:
        """Mean over all five metrics, absent scores counting as 0."""
        return sum(self.performance.value_or_zero(m) for m in Metric) / len(Metric)

    def composite_score(self) -> float:
        """Mean of the present, non-zero performance scores (0 when none)."""
        values = self.performance.present_values()
        if not values:
            return 0.0
        return float(np.mean(values))


@dataclass(frozen=True)
class Athlete:
    """Athlete profile attributes relevant to analytics."""
    id: str
    age: int = 25
    is_disabled: bool = False
    disability_type: Optional[str] = None
    accommodations_needed: Tuple[str, ...] = ()
    name: Optional[str] = None


def sort_by_date(sessions: List[TrainingSession]) -> List[TrainingSession]:
    """Stable chronological ordering of sessions."""
    return sorted(sessions, key=lambda s: s.date)


def default_reference_date(sessions: List[TrainingSession]) -> datetime:
    """Current time, timezone-aware only when the session dates are."""
    if any(s.date.tzinfo is not None for s in sessions):
        return datetime.now(timezone.utc)
    return datetime.now()


def recent_sessions(
    sessions: List[TrainingSession],
    weeks: int,
    reference_date: Optional[datetime] = None,
) -> List[TrainingSession]:
    """Sessions dated within the last ``weeks`` weeks of ``reference_date``."""
    if reference_date is None:
        reference_date = default_reference_date(sessions)
    cutoff = reference_date - timedelta(days=weeks * 7)
    return [s for s in sessions if s.date >= cutoff]
