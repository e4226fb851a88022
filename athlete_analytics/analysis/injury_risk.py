"""Injury risk assessment from workload, recovery, technique and fatigue signals."""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import numpy as np
import pandas as pd

from ..config import config
from .records import Athlete, TrainingSession, recent_sessions, sort_by_date

logger = logging.getLogger(__name__)

MIN_SESSIONS_FOR_SPIKE = 4
PREVIOUS_WEEKS_FOR_SPIKE = 3
NEUTRAL_FATIGUE = 5


@dataclass(frozen=True)
class InjuryRiskFactors:
    """Individual risk factors, each 0-100."""
    workload_spike: float = 0.0
    recovery_deficit: float = 0.0
    technique_issues: float = 0.0
    fatigue: float = 0.0


@dataclass(frozen=True)
class InjuryRisk:
    """Composite injury risk assessment."""
    overall: float  # 0-100
    factors: InjuryRiskFactors
    recommendations: List[str] = field(default_factory=list)


def week_key(date: datetime) -> str:
    """Calendar week bucket for a date, counted from January 1st."""
    year_start = date.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    days = (date - year_start).total_seconds() / 86400
    return f"{date.year}-W{math.ceil((days + 1) / 7)}"


def weekly_loads(sessions: List[TrainingSession]) -> List[float]:
    """Summed session load per calendar week, oldest week first."""
    if not sessions:
        return []
    ordered = sort_by_date(sessions)
    loads = pd.Series(
        [s.load for s in ordered],
        index=[week_key(s.date) for s in ordered],
    )
    return loads.groupby(level=0, sort=False).sum().tolist()


def calculate_workload_spike(sessions: List[TrainingSession]) -> float:
    """Fractional increase of the latest week's load over the prior weeks.

    Compares the most recent calendar week against the mean of up to three
    preceding weeks. Returns 0 when there is too little history.
    """
    if len(sessions) < MIN_SESSIONS_FOR_SPIKE:
        return 0.0

    loads = weekly_loads(sessions)
    if len(loads) < 2:
        return 0.0

    current_week = loads[-1]
    previous_weeks = loads[-(PREVIOUS_WEEKS_FOR_SPIKE + 1):-1]
    avg_previous = float(np.mean(previous_weeks))

    if avg_previous <= 0:
        return 1.0 if current_week > 0 else 0.0

    return max(0.0, (current_week - avg_previous) / avg_previous)


def calculate_recovery_deficit(sessions: List[TrainingSession]) -> float:
    """Mean fatigue above the neutral midpoint, normalised to 0-1."""
    if not sessions:
        return 0.0
    avg_fatigue = calculate_average_fatigue(sessions)
    return max(0.0, (avg_fatigue - NEUTRAL_FATIGUE) / NEUTRAL_FATIGUE)


def analyze_technique_consistency(sessions: List[TrainingSession]) -> float:
    """Coefficient of variation of the recorded technique scores."""
    scores = [s.performance.technique for s in sessions if s.performance.technique]
    if not scores:
        return 0.0
    scores = np.asarray(scores, dtype=float)
    return float(np.std(scores) / np.mean(scores))


def calculate_average_fatigue(sessions: List[TrainingSession]) -> float:
    if not sessions:
        return 0.0
    return float(np.mean([s.fatigue for s in sessions]))


def generate_injury_prevention_recommendations(factors: InjuryRiskFactors, athlete: Athlete) -> List[str]:
    """Threshold rules applied in fixed order; every matching rule contributes."""
    recommendations = []

    if factors.workload_spike > 50:
        recommendations.append("Reduce training volume by 20-30% for the next week")
        recommendations.append("Implement gradual load progression (10% rule)")

    if factors.recovery_deficit > 60:
        recommendations.append("Prioritize sleep (8+ hours nightly)")
        recommendations.append("Add extra rest day between intense sessions")
        recommendations.append("Consider massage or active recovery sessions")

    if factors.technique_issues > 40:
        recommendations.append("Schedule technical coaching session")
        recommendations.append("Reduce intensity and focus on form")

    if factors.fatigue > 70:
        recommendations.append("Take 2-3 days complete rest")
        recommendations.append("Assess nutrition and hydration status")

    if athlete.is_disabled:
        recommendations.append("Ensure adaptive equipment is properly fitted")
        recommendations.append("Monitor for disability-specific overuse patterns")

    return recommendations


def apply_athlete_adjustments(risk: float, athlete: Athlete) -> float:
    """Scale the composite risk for age and disability.

    Athletes over 40 receive both the over-30 and the over-40 multiplier.
    """
    age = athlete.age if athlete.age is not None else 25
    if age > 30:
        risk *= config.AGE_OVER_30_MULTIPLIER
    if age > 40:
        risk *= config.AGE_OVER_40_MULTIPLIER
    if athlete.is_disabled:
        risk *= config.DISABILITY_MULTIPLIER
    return risk


def assess_injury_risk(
    athlete: Athlete,
    sessions: List[TrainingSession],
    timeframe_weeks: int = None,
    reference_date: Optional[datetime] = None,
) -> InjuryRisk:
    """Assess injury risk over the recent training window.

    Args:
        athlete: Athlete profile
        sessions: Full session history
        timeframe_weeks: Lookback window in weeks
        reference_date: Point in time the window ends at (defaults to now)

    Returns:
        InjuryRisk with factors and overall score clamped to 0-100
    """
    if timeframe_weeks is None:
        timeframe_weeks = config.INJURY_TIMEFRAME_WEEKS

    window = recent_sessions(sessions, timeframe_weeks, reference_date)
    if not window:
        logger.debug(f"No sessions in the last {timeframe_weeks} weeks for athlete {athlete.id}")

    factors = InjuryRiskFactors(
        workload_spike=min(calculate_workload_spike(window) * 100, 100.0),
        recovery_deficit=min(calculate_recovery_deficit(window) * 100, 100.0),
        technique_issues=min(analyze_technique_consistency(window) * 100, 100.0),
        fatigue=min(calculate_average_fatigue(window) * 10, 100.0),
    )

    weights = config.injury_weights()
    overall_risk = (
        factors.workload_spike * weights["workload_spike"] +
        factors.recovery_deficit * weights["recovery_deficit"] +
        factors.technique_issues * weights["technique_issues"] +
        factors.fatigue * weights["fatigue"]
    )
    overall_risk = apply_athlete_adjustments(overall_risk, athlete)

    return InjuryRisk(
        overall=float(np.clip(overall_risk, 0, 100)),
        factors=factors,
        recommendations=generate_injury_prevention_recommendations(factors, athlete),
    )
