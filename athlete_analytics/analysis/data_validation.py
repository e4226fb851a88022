"""Validation of training session records before they reach the analytics engine.

The analyzers assume well-typed, in-range input. Callers that ingest data from
outside (file imports, manual entry) run it through the validator first and
drop what fails.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from .records import Metric, TrainingSession

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of validating one session."""
    is_valid: bool
    reasons: List[str] = field(default_factory=list)


class SessionValidator:
    """Range and type checks for training sessions."""

    BOUNDS: Dict[str, Dict[str, float]] = {
        'duration_minutes': {'min': 0, 'max': 1440, 'exclusive_min': True},
        'fatigue': {'min': 1, 'max': 10},
        'performance': {'min': 0, 'max': 100},
        'performance_score': {'min': 0, 'max': 100},
        'heart_rate': {'min': 20, 'max': 250},
        'zone_fraction': {'min': 0, 'max': 1},
    }

    def _check_range(self, name: str, value, bound_key: str, reasons: List[str]) -> None:
        bounds = self.BOUNDS[bound_key]
        if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
            reasons.append(f"{name} is not numeric: {value!r}")
            return
        if math.isnan(value) or math.isinf(value):
            reasons.append(f"{name} is not a finite number")
            return
        too_low = value <= bounds['min'] if bounds.get('exclusive_min') else value < bounds['min']
        if too_low or value > bounds['max']:
            reasons.append(f"{name} {value} outside range [{bounds['min']}, {bounds['max']}]")

    def validate_session(self, session: TrainingSession) -> ValidationResult:
        """Validate a single session."""
        reasons = []

        self._check_range("duration_minutes", session.duration_minutes, 'duration_minutes', reasons)
        self._check_range("fatigue", session.fatigue, 'fatigue', reasons)
        if isinstance(session.fatigue, float) and not session.fatigue.is_integer():
            reasons.append(f"fatigue {session.fatigue} is not a whole number")

        for metric in Metric:
            value = session.performance.value(metric)
            if value is not None:
                self._check_range(f"performance.{metric.value}", value, 'performance', reasons)

        for exercise in session.exercises:
            self._check_range(f"exercise '{exercise.name}' score", exercise.performance_score,
                              'performance_score', reasons)

        if session.heart_rate is not None:
            self._check_range("heart_rate.avg", session.heart_rate.avg, 'heart_rate', reasons)
            self._check_range("heart_rate.max", session.heart_rate.max, 'heart_rate', reasons)
            if len(session.heart_rate.zone_fractions) != 5:
                reasons.append("heart_rate.zone_fractions must have five entries")
            for i, fraction in enumerate(session.heart_rate.zone_fractions, start=1):
                self._check_range(f"heart_rate.zone{i}", fraction, 'zone_fraction', reasons)

        return ValidationResult(is_valid=not reasons, reasons=reasons)

    def partition(self, sessions: List[TrainingSession]) -> Tuple[List[TrainingSession], List[TrainingSession]]:
        """Split sessions into (valid, rejected), logging each rejection."""
        valid, rejected = [], []

        for session in sessions:
            result = self.validate_session(session)
            if result.is_valid:
                valid.append(session)
            else:
                rejected.append(session)
                logger.warning(f"Rejected session {session.id}: {'; '.join(result.reasons)}")

        return valid, rejected

    def generate_validation_report(self, sessions: List[TrainingSession]) -> Dict[str, object]:
        """Summary of validity across a batch of sessions."""
        results = [self.validate_session(s) for s in sessions]
        invalid = [r for r in results if not r.is_valid]

        issue_counts: Dict[str, int] = {}
        for result in invalid:
            for reason in result.reasons:
                field_name = reason.split(" ")[0]
                issue_counts[field_name] = issue_counts.get(field_name, 0) + 1

        return {
            'total_sessions': len(results),
            'invalid_sessions': len(invalid),
            'validity_rate': (len(results) - len(invalid)) / len(results) if results else 1.0,
            'issues': issue_counts,
        }
