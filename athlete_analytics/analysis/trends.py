"""Per-metric performance trend detection using linear regression."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

import numpy as np

from ..config import config
from .records import Metric, TrainingSession

logger = logging.getLogger(__name__)

MIN_TREND_SAMPLES = 3
FALLBACK_CONFIDENCE = 0.3
CORRELATION_THRESHOLD = 0.3
STABLE_SLOPE_THRESHOLD = 0.01
# Each sample is treated as one day, so a week is seven samples.
SAMPLES_PER_WEEK = 7


class TrendDirection(Enum):
    """Short-term direction of a metric."""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    FLUCTUATING = "fluctuating"


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least squares fit of value against sample index."""
    slope: float
    intercept: float
    correlation: float


@dataclass(frozen=True)
class PerformanceTrend:
    """Trend of a single metric over the analysed sessions."""
    metric: Metric
    trend: TrendDirection
    change_rate_per_week: float  # signed percentage
    predicted_value: float
    confidence: float  # 0-1
    timeframe_weeks: int


def linear_regression(values: Sequence[float]) -> RegressionResult:
    """Fit ``value = slope * index + intercept`` over the sample indices.

    The Pearson correlation between index and value is reported alongside the
    fit. When either axis has zero variance the correlation is 0.
    """
    y = np.asarray(values, dtype=float)
    n = len(y)
    if n == 0:
        return RegressionResult(0.0, 0.0, 0.0)
    x = np.arange(n, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_xx = (x * x).sum()

    denominator = n * sum_xx - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator if denominator else 0.0
    intercept = (sum_y - slope * sum_x) / n

    dx = x - sum_x / n
    dy = y - sum_y / n
    denom_x = np.sqrt((dx ** 2).sum())
    denom_y = np.sqrt((dy ** 2).sum())
    # The mean of identical floats can differ from them by a rounding residue,
    # so zero variance is tested on the values themselves.
    if denom_x == 0 or np.ptp(y) == 0:
        correlation = 0.0
    else:
        correlation = (dx * dy).sum() / (denom_x * denom_y)

    return RegressionResult(float(slope), float(intercept), float(correlation))


def classify_trend(slope: float, correlation: float) -> TrendDirection:
    """Classify a regression into a trend direction."""
    if abs(correlation) < CORRELATION_THRESHOLD:
        return TrendDirection.FLUCTUATING
    if abs(slope) < STABLE_SLOPE_THRESHOLD:
        return TrendDirection.STABLE
    return TrendDirection.IMPROVING if slope > 0 else TrendDirection.DECLINING


def _metric_samples(sessions: List[TrainingSession], metric: Metric) -> List[tuple]:
    # A score of 0 counts as not recorded.
    samples = [
        (s.date, s.performance.value(metric))
        for s in sessions
        if s.performance.value(metric)
    ]
    samples.sort(key=lambda sample: sample[0])
    return samples


def analyze_metric_trend(
    sessions: List[TrainingSession],
    metric: Metric,
    timeframe_weeks: int = None,
) -> PerformanceTrend:
    """Analyze the trend of one metric across the given sessions.

    Args:
        sessions: Training sessions in any order
        metric: Metric to analyze
        timeframe_weeks: Forecast horizon for the predicted value

    Returns:
        PerformanceTrend for the metric. With fewer than three samples a
        low-confidence ``stable`` trend is returned.
    """
    if timeframe_weeks is None:
        timeframe_weeks = config.TREND_TIMEFRAME_WEEKS

    samples = _metric_samples(sessions, metric)
    values = [value for _, value in samples]

    if len(values) < MIN_TREND_SAMPLES:
        logger.debug(f"Only {len(values)} samples for {metric.value}, using stable fallback")
        return PerformanceTrend(
            metric=metric,
            trend=TrendDirection.STABLE,
            change_rate_per_week=0.0,
            predicted_value=float(values[-1]) if values else 0.0,
            confidence=FALLBACK_CONFIDENCE,
            timeframe_weeks=timeframe_weeks,
        )

    regression = linear_regression(values)
    future_x = len(values) + timeframe_weeks

    return PerformanceTrend(
        metric=metric,
        trend=classify_trend(regression.slope, regression.correlation),
        change_rate_per_week=regression.slope * SAMPLES_PER_WEEK,
        predicted_value=regression.slope * future_x + regression.intercept,
        confidence=abs(regression.correlation),
        timeframe_weeks=timeframe_weeks,
    )


def analyze_trends(sessions: List[TrainingSession], timeframe_weeks: int = None) -> List[PerformanceTrend]:
    """Analyze every tracked metric, one trend per metric in metric order."""
    return [analyze_metric_trend(sessions, metric, timeframe_weeks) for metric in Metric]
