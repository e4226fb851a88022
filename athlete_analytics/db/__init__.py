"""Database module for the local training log."""

from .database import Database, get_db, close_db
from .models import AthleteProfile, TrainingSessionRecord, ExerciseRecord

__all__ = ["Database", "get_db", "close_db", "AthleteProfile", "TrainingSessionRecord", "ExerciseRecord"]
