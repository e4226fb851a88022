"""Database connection and session management for the training log."""

import logging
from typing import Dict, Generator, Optional
from contextlib import contextmanager
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..config import config
from .models import Base, AthleteProfile, TrainingSessionRecord, ExerciseRecord

logger = logging.getLogger(__name__)


class Database:
    """Training log database connection manager."""

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database connection.

        Args:
            database_url: SQLAlchemy URL, defaults to ``config.DATABASE_URL``.
                ``sqlite://`` gives a private in-memory log.
        """
        self.database_url = database_url or config.DATABASE_URL

        # In-memory SQLite only survives on a single shared connection
        if self.database_url.startswith("sqlite"):
            self.engine = create_engine(
                self.database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(self.database_url)

        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def create_tables(self):
        """Create the athlete, session and exercise tables."""
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self):
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Transactional session: commits on success, rolls back on error."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def table_counts(self) -> Dict[str, int]:
        """Row counts of the training log tables."""
        with self.get_session() as session:
            return {
                model.__tablename__: session.scalar(select(func.count()).select_from(model))
                for model in (AthleteProfile, TrainingSessionRecord, ExerciseRecord)
            }

    def close(self):
        self.engine.dispose()


# Global database instance
_db: Optional[Database] = None


def get_db() -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database()
        _db.create_tables()
        logger.debug(f"Opened training log at {_db.database_url}")
    return _db


def close_db():
    """Close the global database connection."""
    global _db
    if _db is not None:
        _db.close()
        _db = None
