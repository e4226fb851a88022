"""Athlete performance analytics: trends, injury risk, competition readiness and insights."""

__version__ = "0.1.0"
