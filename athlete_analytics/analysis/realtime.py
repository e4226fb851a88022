"""Real-time session capture: heart rate summaries, exercise scoring and recording."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

import numpy as np

from .records import Exercise, HeartRate, PerformanceScores, TrainingSession

logger = logging.getLogger(__name__)

# Upper bounds of zones 1-4 as fractions of the stream average; zone 5 is open ended
ZONE_BOUNDS = (0.6, 0.7, 0.8, 0.9)
BASELINE_SCORE = 50
MAX_VOLUME_BONUS = 30
MAX_WEIGHT_BONUS = 20
DEFAULT_FATIGUE = 5


class RecordingError(Exception):
    """Raised when a session recorder is used outside of a recording."""


def process_heart_rate(heart_rate_stream: List[float]) -> Optional[HeartRate]:
    """Summarize a heart rate stream into average, max and zone fractions."""
    if len(heart_rate_stream) == 0:
        return None

    stream = np.asarray(heart_rate_stream, dtype=float)
    avg = float(np.mean(stream))
    edges = [-np.inf] + [avg * bound for bound in ZONE_BOUNDS] + [np.inf]

    zones = tuple(
        float(np.count_nonzero((stream >= low) & (stream < high)) / len(stream))
        for low, high in zip(edges[:-1], edges[1:])
    )

    return HeartRate(avg=round(avg), max=float(np.max(stream)), zone_fractions=zones)


def calculate_performance_score(sets: int, reps: int, weight: Optional[float] = None) -> float:
    """Score an exercise from its volume and load (0-100)."""
    score = BASELINE_SCORE

    if sets and reps:
        score += min(sets * reps / 10, MAX_VOLUME_BONUS)

    if weight:
        score += min(weight / 10, MAX_WEIGHT_BONUS)

    return float(min(max(score, 0), 100))


class SessionRecorder:
    """Build a TrainingSession incrementally while it is being performed."""

    def __init__(self, athlete_id: str):
        self.athlete_id = athlete_id
        self._session: Optional[TrainingSession] = None
        self._started_at: Optional[datetime] = None

    @property
    def is_recording(self) -> bool:
        return self._session is not None

    @property
    def current_session(self) -> Optional[TrainingSession]:
        return self._session

    def start(self, session_id: str = None, date: datetime = None, notes: str = None) -> TrainingSession:
        """Start recording a new session."""
        if self.is_recording:
            raise RecordingError("A session is already being recorded")

        self._started_at = date or datetime.now()
        self._session = TrainingSession(
            id=session_id or str(uuid.uuid4()),
            athlete_id=self.athlete_id,
            date=self._started_at,
            duration_minutes=0,
            fatigue=DEFAULT_FATIGUE,
            notes=notes,
        )
        logger.debug(f"Started recording session {self._session.id} for athlete {self.athlete_id}")
        return self._session

    def _require_session(self) -> TrainingSession:
        if self._session is None:
            raise RecordingError("No session is being recorded")
        return self._session

    def add_exercise(
        self,
        name: str,
        sets: int,
        reps: int,
        weight: float = None,
        distance: float = None,
        time: float = None,
    ) -> Exercise:
        """Append an exercise, scoring it with the real-time scorer."""
        session = self._require_session()
        exercise = Exercise(
            id=str(uuid.uuid4()),
            name=name,
            sets=sets,
            reps=reps,
            weight=weight,
            distance=distance,
            time=time,
            performance_score=calculate_performance_score(sets, reps, weight),
        )
        self._session = replace(session, exercises=session.exercises + (exercise,))
        return exercise

    def update_performance(self, **scores: float) -> PerformanceScores:
        """Merge metric scores (speed=..., technique=...) into the session."""
        session = self._require_session()
        performance = replace(session.performance, **scores)
        self._session = replace(session, performance=performance)
        return performance

    def set_fatigue(self, fatigue: int) -> None:
        session = self._require_session()
        self._session = replace(session, fatigue=fatigue)

    def set_heart_rate(self, heart_rate_stream: List[float]) -> Optional[HeartRate]:
        session = self._require_session()
        heart_rate = process_heart_rate(heart_rate_stream)
        self._session = replace(session, heart_rate=heart_rate)
        return heart_rate

    def finish(self, ended_at: datetime = None) -> TrainingSession:
        """Stop recording and return the completed session."""
        session = self._require_session()
        ended_at = ended_at or datetime.now()
        duration = max((ended_at - self._started_at).total_seconds() / 60, 0)

        finished = replace(session, duration_minutes=duration)
        self._session = None
        self._started_at = None
        logger.debug(f"Finished session {finished.id}: {duration:.1f} minutes, {len(finished.exercises)} exercises")
        return finished
