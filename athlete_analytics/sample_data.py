"""Synthetic training logs for demos and manual testing of the analytics."""

from datetime import datetime, timedelta, timezone
from typing import List

import numpy as np

from .analysis.records import Exercise, HeartRate, PerformanceScores, TrainingSession
from .analysis.realtime import calculate_performance_score

EXERCISE_CATALOG = [
    ("Sprint intervals", 6, 1, None),
    ("Back squat", 4, 8, 80.0),
    ("Box jumps", 3, 10, None),
    ("Tempo run", 1, 1, None),
    ("Bench press", 4, 6, 60.0),
    ("Agility ladder", 5, 4, None),
]


def generate_sample_sessions(
    athlete_id: str,
    weeks: int = 8,
    sessions_per_week: int = 4,
    seed: int = 42,
    end_date: datetime = None,
) -> List[TrainingSession]:
    """Generate a plausible training log ending at ``end_date``.

    Scores drift upward slowly with noise, fatigue follows a three-week build
    and one-week recovery pattern. The same seed always yields the same log.
    """
    rng = np.random.default_rng(seed)
    end_date = end_date or datetime.now(timezone.utc).replace(hour=17, minute=0, second=0, microsecond=0)
    total = weeks * sessions_per_week
    spacing = 7 / sessions_per_week

    sessions = []
    for i in range(total):
        date = end_date - timedelta(days=(total - 1 - i) * spacing)
        week = i // sessions_per_week
        build_week = week % 4 != 3

        def score(base):
            return float(np.clip(round(base + i * 0.4 + rng.normal(0, 3), 1), 0, 100))

        picks = rng.choice(len(EXERCISE_CATALOG), size=3, replace=False)
        exercises = tuple(
            Exercise(
                id=f"{athlete_id}-{i}-{j}",
                name=EXERCISE_CATALOG[k][0],
                sets=EXERCISE_CATALOG[k][1],
                reps=EXERCISE_CATALOG[k][2],
                weight=EXERCISE_CATALOG[k][3],
                performance_score=calculate_performance_score(*EXERCISE_CATALOG[k][1:]),
            )
            for j, k in enumerate(picks)
        )

        avg_hr = int(rng.integers(130, 160))
        zones = rng.dirichlet(np.ones(5))
        sessions.append(TrainingSession(
            id=f"{athlete_id}-session-{i}",
            athlete_id=athlete_id,
            date=date,
            duration_minutes=float(rng.integers(45, 95)),
            fatigue=int(np.clip(rng.integers(5, 9) if build_week else rng.integers(2, 5), 1, 10)),
            exercises=exercises,
            performance=PerformanceScores(
                speed=score(62),
                accuracy=score(70) if i % 3 else None,
                power=score(58),
                endurance=score(65),
                technique=score(72),
            ),
            heart_rate=HeartRate(
                avg=avg_hr,
                max=avg_hr + int(rng.integers(15, 30)),
                zone_fractions=tuple(float(z) for z in zones),
            ),
        ))

    return sessions
