"""Database models for athlete profiles and the training log."""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AthleteProfile(Base):
    """Athlete profile attributes used by the analytics."""

    __tablename__ = "athletes"

    id = Column(Integer, primary_key=True)
    athlete_id = Column(String(50), unique=True, nullable=False)
    name = Column(String(255))
    age = Column(Integer)
    is_disabled = Column(Boolean, default=False)
    disability_type = Column(String(100))
    accommodations_needed = Column(Text)  # JSON list of strings
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<AthleteProfile(athlete_id={self.athlete_id}, name={self.name})>"


class TrainingSessionRecord(Base):
    """Logged training session."""

    __tablename__ = "training_sessions"

    id = Column(Integer, primary_key=True)
    session_id = Column(String(50), unique=True, nullable=False)
    athlete_id = Column(String(50), nullable=False, index=True)
    date = Column(DateTime, nullable=False)  # naive UTC
    duration_minutes = Column(Float, nullable=False)
    fatigue = Column(Integer, nullable=False)  # 1-10

    # Performance scores (0-100), NULL when not recorded
    speed = Column(Float)
    accuracy = Column(Float)
    power = Column(Float)
    endurance = Column(Float)
    technique = Column(Float)

    # Heart rate
    avg_heart_rate = Column(Float)
    max_heart_rate = Column(Float)
    heart_rate_zones = Column(Text)  # JSON list of five zone fractions

    notes = Column(Text)
    created_at = Column(DateTime, default=_utcnow)

    def __repr__(self):
        return f"<TrainingSessionRecord(session_id={self.session_id}, athlete_id={self.athlete_id}, date={self.date})>"


class ExerciseRecord(Base):
    """Exercise performed within a logged session."""

    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True)
    exercise_id = Column(String(50), nullable=False)
    session_id = Column(String(50), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # order within the session
    name = Column(String(255), nullable=False)
    sets = Column(Integer, default=0)
    reps = Column(Integer, default=0)
    weight = Column(Float)
    distance = Column(Float)
    time = Column(Float)
    performance_score = Column(Float, nullable=False)

    def __repr__(self):
        return f"<ExerciseRecord(session_id={self.session_id}, name={self.name}, score={self.performance_score})>"
