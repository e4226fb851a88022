"""Configuration management for the athlete performance analytics tool."""

import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./athlete_analytics.db")

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    REFRESH_INTERVAL_SECONDS: int = int(os.getenv("REFRESH_INTERVAL_SECONDS", "300"))  # 5 minutes

    # Lookback windows (weeks)
    TREND_TIMEFRAME_WEEKS: int = int(os.getenv("TREND_TIMEFRAME_WEEKS", "12"))
    INJURY_TIMEFRAME_WEEKS: int = int(os.getenv("INJURY_TIMEFRAME_WEEKS", "4"))
    READINESS_LOOKBACK_WEEKS: int = int(os.getenv("READINESS_LOOKBACK_WEEKS", "8"))

    # Readiness parameters
    EXPECTED_SESSIONS_PER_WEEK: int = int(os.getenv("EXPECTED_SESSIONS_PER_WEEK", "4"))
    COMPETITION_CYCLE_DAYS: int = int(os.getenv("COMPETITION_CYCLE_DAYS", "28"))
    MIN_SESSIONS_FOR_OPTIMAL_DATE: int = int(os.getenv("MIN_SESSIONS_FOR_OPTIMAL_DATE", "10"))

    # Injury risk composite weights
    INJURY_WEIGHT_WORKLOAD: float = float(os.getenv("INJURY_WEIGHT_WORKLOAD", "0.30"))
    INJURY_WEIGHT_RECOVERY: float = float(os.getenv("INJURY_WEIGHT_RECOVERY", "0.25"))
    INJURY_WEIGHT_TECHNIQUE: float = float(os.getenv("INJURY_WEIGHT_TECHNIQUE", "0.25"))
    INJURY_WEIGHT_FATIGUE: float = float(os.getenv("INJURY_WEIGHT_FATIGUE", "0.20"))

    # Injury risk athlete multipliers
    AGE_OVER_30_MULTIPLIER: float = float(os.getenv("AGE_OVER_30_MULTIPLIER", "1.10"))
    AGE_OVER_40_MULTIPLIER: float = float(os.getenv("AGE_OVER_40_MULTIPLIER", "1.20"))
    DISABILITY_MULTIPLIER: float = float(os.getenv("DISABILITY_MULTIPLIER", "1.15"))

    # Competition readiness composite weights
    READINESS_WEIGHT_FITNESS: float = float(os.getenv("READINESS_WEIGHT_FITNESS", "0.30"))
    READINESS_WEIGHT_TECHNIQUE: float = float(os.getenv("READINESS_WEIGHT_TECHNIQUE", "0.25"))
    READINESS_WEIGHT_MENTAL: float = float(os.getenv("READINESS_WEIGHT_MENTAL", "0.20"))
    READINESS_WEIGHT_RECOVERY: float = float(os.getenv("READINESS_WEIGHT_RECOVERY", "0.15"))
    READINESS_WEIGHT_CONSISTENCY: float = float(os.getenv("READINESS_WEIGHT_CONSISTENCY", "0.10"))

    # Insight thresholds
    INJURY_RISK_ALERT_THRESHOLD: float = float(os.getenv("INJURY_RISK_ALERT_THRESHOLD", "70"))
    READINESS_ALERT_THRESHOLD: float = float(os.getenv("READINESS_ALERT_THRESHOLD", "60"))

    @classmethod
    def injury_weights(cls) -> dict:
        """Get composite weights keyed by injury risk factor."""
        return {
            "workload_spike": cls.INJURY_WEIGHT_WORKLOAD,
            "recovery_deficit": cls.INJURY_WEIGHT_RECOVERY,
            "technique_issues": cls.INJURY_WEIGHT_TECHNIQUE,
            "fatigue": cls.INJURY_WEIGHT_FATIGUE,
        }

    @classmethod
    def readiness_weights(cls) -> dict:
        """Get composite weights keyed by readiness factor."""
        return {
            "fitness": cls.READINESS_WEIGHT_FITNESS,
            "technique": cls.READINESS_WEIGHT_TECHNIQUE,
            "mental": cls.READINESS_WEIGHT_MENTAL,
            "recovery": cls.READINESS_WEIGHT_RECOVERY,
            "consistency": cls.READINESS_WEIGHT_CONSISTENCY,
        }

    @classmethod
    def expected_sessions(cls, weeks: int = None) -> int:
        """Number of sessions expected over a readiness lookback window."""
        weeks = weeks if weeks is not None else cls.READINESS_LOOKBACK_WEEKS
        return weeks * cls.EXPECTED_SESSIONS_PER_WEEK


config = Config()
