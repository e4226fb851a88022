"""Mapping between training log rows, JSON documents and analysis records."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..analysis.records import Athlete, Exercise, HeartRate, Metric, PerformanceScores, TrainingSession
from .database import Database
from .models import AthleteProfile, ExerciseRecord, TrainingSessionRecord

logger = logging.getLogger(__name__)


def _parse_date(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _to_naive_utc(date: datetime) -> datetime:
    if date.tzinfo is None:
        return date
    return date.astimezone(timezone.utc).replace(tzinfo=None)


def session_from_dict(data: Dict[str, Any], athlete_id: Optional[str] = None) -> TrainingSession:
    """Build a TrainingSession from a JSON document.

    Accepts both ``camelCase`` keys as produced by the web client and
    ``snake_case`` keys.
    """
    def pick(*keys, default=None):
        for key in keys:
            if key in data:
                return data[key]
        return default

    exercises = tuple(
        Exercise(
            id=str(ex.get("id", i)),
            name=ex.get("name", ""),
            sets=ex.get("sets", 0),
            reps=ex.get("reps", 0),
            weight=ex.get("weight"),
            distance=ex.get("distance"),
            time=ex.get("time"),
            performance_score=ex.get("performanceScore", ex.get("performance_score")),
        )
        for i, ex in enumerate(pick("exercises", default=[]))
    )

    performance_data = pick("performance", default={}) or {}
    performance = PerformanceScores(**{m.value: performance_data.get(m.value) for m in Metric})

    heart_rate = None
    heart_rate_data = pick("heartRate", "heart_rate")
    if heart_rate_data:
        zones = heart_rate_data.get("zones", heart_rate_data.get("zone_fractions", [0.0] * 5))
        if isinstance(zones, dict):
            zones = [zones.get(f"zone{i}", 0.0) for i in range(1, 6)]
        heart_rate = HeartRate(avg=heart_rate_data["avg"], max=heart_rate_data["max"], zone_fractions=tuple(zones))

    return TrainingSession(
        id=str(pick("id", "session_id")),
        athlete_id=str(pick("athleteId", "athlete_id", default=athlete_id)),
        date=_parse_date(pick("date")),
        duration_minutes=pick("duration", "durationMinutes", "duration_minutes"),
        fatigue=pick("fatigue"),
        exercises=exercises,
        performance=performance,
        heart_rate=heart_rate,
        notes=pick("notes"),
    )


def session_to_dict(session: TrainingSession) -> Dict[str, Any]:
    """JSON document for a TrainingSession (``camelCase`` keys)."""
    data = {
        "id": session.id,
        "athleteId": session.athlete_id,
        "date": session.date.isoformat(),
        "duration": session.duration_minutes,
        "fatigue": session.fatigue,
        "exercises": [
            {
                "id": ex.id,
                "name": ex.name,
                "sets": ex.sets,
                "reps": ex.reps,
                "weight": ex.weight,
                "distance": ex.distance,
                "time": ex.time,
                "performanceScore": ex.performance_score,
            }
            for ex in session.exercises
        ],
        "performance": {
            m.value: session.performance.value(m)
            for m in Metric
            if session.performance.value(m) is not None
        },
    }
    if session.heart_rate is not None:
        data["heartRate"] = {
            "avg": session.heart_rate.avg,
            "max": session.heart_rate.max,
            "zones": list(session.heart_rate.zone_fractions),
        }
    if session.notes:
        data["notes"] = session.notes
    return data


def _athlete_from_row(row: AthleteProfile) -> Athlete:
    return Athlete(
        id=row.athlete_id,
        age=row.age if row.age is not None else 25,
        is_disabled=bool(row.is_disabled),
        disability_type=row.disability_type,
        accommodations_needed=tuple(json.loads(row.accommodations_needed or "[]")),
        name=row.name,
    )


def save_athlete(db: Database, athlete: Athlete) -> None:
    """Insert or update an athlete profile."""
    with db.get_session() as session:
        row = session.query(AthleteProfile).filter_by(athlete_id=athlete.id).first()
        if row is None:
            row = AthleteProfile(athlete_id=athlete.id)
            session.add(row)
        row.name = athlete.name
        row.age = athlete.age
        row.is_disabled = athlete.is_disabled
        row.disability_type = athlete.disability_type
        row.accommodations_needed = json.dumps(list(athlete.accommodations_needed))


def get_athlete(db: Database, athlete_id: str) -> Optional[Athlete]:
    with db.get_session() as session:
        row = session.query(AthleteProfile).filter_by(athlete_id=athlete_id).first()
        return _athlete_from_row(row) if row else None


def save_sessions(db: Database, sessions: List[TrainingSession]) -> int:
    """Store sessions in the log, skipping ids that are already present.

    Returns:
        Number of sessions inserted
    """
    imported = 0
    with db.get_session() as session:
        for training_session in sessions:
            existing = session.query(TrainingSessionRecord).filter_by(session_id=training_session.id).first()
            if existing:
                logger.debug(f"Skipping duplicate session {training_session.id}")
                continue

            performance = training_session.performance
            heart_rate = training_session.heart_rate
            session.add(TrainingSessionRecord(
                session_id=training_session.id,
                athlete_id=training_session.athlete_id,
                date=_to_naive_utc(training_session.date),
                duration_minutes=training_session.duration_minutes,
                fatigue=training_session.fatigue,
                speed=performance.speed,
                accuracy=performance.accuracy,
                power=performance.power,
                endurance=performance.endurance,
                technique=performance.technique,
                avg_heart_rate=heart_rate.avg if heart_rate else None,
                max_heart_rate=heart_rate.max if heart_rate else None,
                heart_rate_zones=json.dumps(list(heart_rate.zone_fractions)) if heart_rate else None,
                notes=training_session.notes,
            ))
            for position, exercise in enumerate(training_session.exercises):
                session.add(ExerciseRecord(
                    exercise_id=exercise.id,
                    session_id=training_session.id,
                    position=position,
                    name=exercise.name,
                    sets=exercise.sets,
                    reps=exercise.reps,
                    weight=exercise.weight,
                    distance=exercise.distance,
                    time=exercise.time,
                    performance_score=exercise.performance_score,
                ))
            imported += 1

    return imported


def load_sessions(db: Database, athlete_id: str) -> List[TrainingSession]:
    """Load an athlete's sessions in date order, dated in UTC."""
    with db.get_session() as session:
        rows = session.query(TrainingSessionRecord).filter_by(
            athlete_id=athlete_id
        ).order_by(TrainingSessionRecord.date).all()

        session_ids = [row.session_id for row in rows]
        exercises: Dict[str, List[Exercise]] = {session_id: [] for session_id in session_ids}
        if session_ids:
            exercise_rows = session.query(ExerciseRecord).filter(
                ExerciseRecord.session_id.in_(session_ids)
            ).order_by(ExerciseRecord.session_id, ExerciseRecord.position).all()
            for ex in exercise_rows:
                exercises[ex.session_id].append(Exercise(
                    id=ex.exercise_id,
                    name=ex.name,
                    sets=ex.sets,
                    reps=ex.reps,
                    weight=ex.weight,
                    distance=ex.distance,
                    time=ex.time,
                    performance_score=ex.performance_score,
                ))

        sessions = []
        for row in rows:
            heart_rate = None
            if row.avg_heart_rate is not None:
                heart_rate = HeartRate(
                    avg=row.avg_heart_rate,
                    max=row.max_heart_rate,
                    zone_fractions=tuple(json.loads(row.heart_rate_zones or "[0, 0, 0, 0, 0]")),
                )
            sessions.append(TrainingSession(
                id=row.session_id,
                athlete_id=row.athlete_id,
                date=row.date.replace(tzinfo=timezone.utc),
                duration_minutes=row.duration_minutes,
                fatigue=row.fatigue,
                exercises=tuple(exercises[row.session_id]),
                performance=PerformanceScores(
                    speed=row.speed,
                    accuracy=row.accuracy,
                    power=row.power,
                    endurance=row.endurance,
                    technique=row.technique,
                ),
                heart_rate=heart_rate,
                notes=row.notes,
            ))

        return sessions
