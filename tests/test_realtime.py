"""Tests for real-time session capture."""

import pytest
from datetime import datetime, timedelta

from athlete_analytics.analysis.realtime import (
    RecordingError,
    SessionRecorder,
    calculate_performance_score,
    process_heart_rate,
)


class TestHeartRate:

    def test_empty_stream(self):
        assert process_heart_rate([]) is None

    def test_summary_and_zones(self):
        heart_rate = process_heart_rate([50, 100, 150])

        assert heart_rate.avg == 100
        assert heart_rate.max == 150
        assert heart_rate.zone_fractions == pytest.approx((1 / 3, 0, 0, 0, 2 / 3))

    def test_zone_fractions_sum_to_one(self):
        heart_rate = process_heart_rate([120, 135, 142, 150, 161, 170, 155, 128])

        assert sum(heart_rate.zone_fractions) == pytest.approx(1.0)
        assert len(heart_rate.zone_fractions) == 5


class TestPerformanceScore:

    def test_baseline_plus_volume(self):
        assert calculate_performance_score(3, 10) == pytest.approx(53)

    def test_volume_bonus_is_capped(self):
        assert calculate_performance_score(20, 20) == pytest.approx(80)

    def test_weight_bonus(self):
        assert calculate_performance_score(3, 10, 80) == pytest.approx(61)
        assert calculate_performance_score(10, 10, 300) == pytest.approx(80)

    def test_weight_without_volume(self):
        assert calculate_performance_score(0, 10, 50) == pytest.approx(55)


class TestSessionRecorder:
    """Test incremental session recording."""

    def setup_method(self):
        self.recorder = SessionRecorder("a1")
        self.started = datetime(2024, 5, 1, 9, 0)

    def test_full_recording(self):
        self.recorder.start(session_id="live-1", date=self.started)
        exercise = self.recorder.add_exercise("Back squat", 4, 8, weight=100)
        self.recorder.update_performance(speed=72, technique=81)
        self.recorder.update_performance(speed=74)
        self.recorder.set_fatigue(7)
        self.recorder.set_heart_rate([130, 145, 160])

        session = self.recorder.finish(ended_at=self.started + timedelta(minutes=45))

        assert session.id == "live-1"
        assert session.athlete_id == "a1"
        assert session.duration_minutes == pytest.approx(45)
        assert session.fatigue == 7
        assert session.exercises == (exercise,)
        assert exercise.performance_score == pytest.approx(50 + 3.2 + 10)
        assert session.performance.speed == 74
        assert session.performance.technique == 81
        assert session.heart_rate.max == 160
        assert not self.recorder.is_recording

    def test_default_fatigue(self):
        session = self.recorder.start(date=self.started)

        assert session.fatigue == 5
        assert self.recorder.is_recording
        assert self.recorder.current_session is session

    def test_cannot_start_twice(self):
        self.recorder.start(date=self.started)

        with pytest.raises(RecordingError):
            self.recorder.start(date=self.started)

    def test_operations_require_recording(self):
        with pytest.raises(RecordingError):
            self.recorder.add_exercise("Sprint", 6, 1)
        with pytest.raises(RecordingError):
            self.recorder.set_fatigue(4)
        with pytest.raises(RecordingError):
            self.recorder.finish()

    def test_recorder_can_be_reused(self):
        self.recorder.start(session_id="first", date=self.started)
        self.recorder.finish(ended_at=self.started + timedelta(minutes=30))

        self.recorder.start(session_id="second", date=self.started + timedelta(hours=2))

        assert self.recorder.current_session.id == "second"
        assert self.recorder.current_session.exercises == ()
