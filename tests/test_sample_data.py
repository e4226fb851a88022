"""Tests for synthetic training log generation."""

from datetime import datetime, timezone

from athlete_analytics.analysis.data_validation import SessionValidator
from athlete_analytics.sample_data import generate_sample_sessions

END_DATE = datetime(2024, 6, 30, 17, 0, tzinfo=timezone.utc)


class TestGenerateSampleSessions:

    def test_size_and_span(self):
        sessions = generate_sample_sessions("a1", weeks=6, sessions_per_week=3, end_date=END_DATE)

        assert len(sessions) == 18
        assert sessions[-1].date == END_DATE
        assert [s.date for s in sessions] == sorted(s.date for s in sessions)
        assert len({s.id for s in sessions}) == 18
        assert all(s.athlete_id == "a1" for s in sessions)

    def test_same_seed_same_log(self):
        first = generate_sample_sessions("a1", seed=7, end_date=END_DATE)
        second = generate_sample_sessions("a1", seed=7, end_date=END_DATE)
        other = generate_sample_sessions("a1", seed=8, end_date=END_DATE)

        assert first == second
        assert first != other

    def test_sessions_pass_validation(self):
        sessions = generate_sample_sessions("a1", weeks=12, end_date=END_DATE)

        valid, rejected = SessionValidator().partition(sessions)

        assert rejected == []

    def test_recovery_weeks_are_lighter(self):
        sessions = generate_sample_sessions("a1", weeks=4, sessions_per_week=4, end_date=END_DATE)

        build = [s.fatigue for s in sessions[:12]]
        recovery = [s.fatigue for s in sessions[12:]]

        assert min(build) > max(recovery)
