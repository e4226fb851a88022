"""Tests for competition readiness evaluation."""

import pytest
from datetime import datetime, timedelta

from athlete_analytics.analysis.records import Athlete, PerformanceScores, TrainingSession
from athlete_analytics.analysis.readiness import (
    FACTOR_ADVICE,
    ReadinessFactors,
    calculate_fitness_level,
    calculate_mental_readiness,
    calculate_optimal_competition_date,
    calculate_recovery_state,
    calculate_technique_level,
    calculate_training_consistency,
    evaluate_competition_readiness,
    find_last_peak,
    generate_competition_recommendations,
)

BASE_DATE = datetime(2024, 3, 1)


def make_session(day, fatigue=5, **scores):
    return TrainingSession(
        id=f"s{day}",
        athlete_id="a1",
        date=BASE_DATE + timedelta(days=day),
        duration_minutes=60,
        fatigue=fatigue,
        performance=PerformanceScores(**scores),
    )


class TestReadinessFactors:
    """Test the individual readiness factors."""

    def test_fitness_counts_missing_metrics_as_zero(self):
        sessions = [
            make_session(0, speed=60, power=60, endurance=60),
            make_session(1, speed=90),
        ]

        # (60 * 3 + 90) / 6
        assert calculate_fitness_level(sessions) == pytest.approx(0.45)

    def test_technique_skips_missing_scores(self):
        sessions = [make_session(0, technique=80), make_session(1), make_session(2, technique=60)]

        assert calculate_technique_level(sessions) == pytest.approx(0.7)

    def test_mental_readiness_steady_scores(self):
        sessions = [make_session(i, speed=80, accuracy=80) for i in range(5)]

        # consistency 1, trend 0
        assert calculate_mental_readiness(sessions) == pytest.approx(0.5)

    def test_mental_readiness_uses_last_ten_sessions(self):
        sessions = [make_session(i, speed=10) for i in range(5)]
        sessions += [make_session(5 + i, speed=80) for i in range(10)]

        assert calculate_mental_readiness(sessions) == pytest.approx(0.5)

    def test_mental_readiness_single_session(self):
        assert calculate_mental_readiness([make_session(0, speed=70)]) == pytest.approx(0.5)

    def test_mental_readiness_without_scores(self):
        assert calculate_mental_readiness([make_session(0)]) == 0

    def test_mental_readiness_counts_missing_metrics_as_zero(self):
        sessions = [make_session(0, speed=80), make_session(1, speed=80, accuracy=80)]

        # per-session means over all five metrics are 16 and 32
        assert calculate_mental_readiness(sessions) == pytest.approx((1 - 8 / 24 + 8 / 100) / 2)

    def test_recovery_state_uses_last_seven_sessions(self):
        sessions = [make_session(i, fatigue=10) for i in range(3)]
        sessions += [make_session(3 + i, fatigue=3) for i in range(7)]

        assert calculate_recovery_state(sessions) == pytest.approx(0.7)

    def test_recovery_state_empty(self):
        assert calculate_recovery_state([]) == 0

    def test_training_consistency(self):
        sessions = [make_session(i) for i in range(16)]

        assert calculate_training_consistency(sessions, weeks=8) == pytest.approx(0.5)
        assert calculate_training_consistency(sessions, weeks=2) == 1.0


class TestRecommendations:

    def test_two_weakest_below_threshold(self):
        factors = ReadinessFactors(fitness=80, technique=50, mental=90, recovery=40, consistency=100)

        assert generate_competition_recommendations(factors) == [
            *FACTOR_ADVICE["recovery"],
            *FACTOR_ADVICE["technique"],
        ]

    def test_only_areas_below_threshold(self):
        factors = ReadinessFactors(fitness=80, technique=65, mental=90, recovery=75, consistency=100)

        assert generate_competition_recommendations(factors) == list(FACTOR_ADVICE["technique"])

    def test_ties_keep_declaration_order(self):
        factors = ReadinessFactors()

        assert generate_competition_recommendations(factors) == [
            *FACTOR_ADVICE["fitness"],
            *FACTOR_ADVICE["technique"],
        ]

    def test_strong_athlete_gets_no_advice(self):
        factors = ReadinessFactors(fitness=90, technique=85, mental=80, recovery=75, consistency=100)

        assert generate_competition_recommendations(factors) == []


class TestOptimalCompetitionDate:
    """Test peak detection and the optimal date projection."""

    def setup_method(self):
        scores = [50, 55, 60, 65, 70, 80, 70, 65, 60, 55, 50, 45]
        self.sessions = [make_session(i * 3, speed=s, technique=s) for i, s in enumerate(scores)]

    def test_last_peak(self):
        assert find_last_peak(self.sessions) == BASE_DATE + timedelta(days=15)

    def test_peak_plus_cycle(self):
        expected = BASE_DATE + timedelta(days=15 + 28)

        assert calculate_optimal_competition_date(self.sessions) == expected
        assert calculate_optimal_competition_date(list(reversed(self.sessions))) == expected

    def test_most_recent_peak_wins(self):
        sessions = self.sessions + [make_session(40, speed=70), make_session(43, speed=60)]

        assert find_last_peak(sessions) == BASE_DATE + timedelta(days=40)

    def test_not_enough_sessions(self):
        assert calculate_optimal_competition_date(self.sessions[:9]) is None

    def test_no_peak(self):
        sessions = [make_session(i, speed=50 + i) for i in range(12)]

        assert calculate_optimal_competition_date(sessions) is None


class TestEvaluateCompetitionReadiness:
    """Test the composite readiness evaluation."""

    def setup_method(self):
        self.athlete = Athlete(id="a1")
        self.reference_date = BASE_DATE + timedelta(days=60)

    def test_empty_sessions(self):
        readiness = evaluate_competition_readiness(self.athlete, [], reference_date=self.reference_date)

        assert readiness.overall == 0
        assert readiness.factors == ReadinessFactors()
        assert readiness.optimal_competition_date is None

    def test_weighted_overall(self):
        sessions = [
            make_session(30 + i, fatigue=4, speed=70, power=70, endurance=70, technique=80)
            for i in range(16)
        ]

        readiness = evaluate_competition_readiness(self.athlete, sessions, reference_date=self.reference_date)

        assert readiness.factors.fitness == pytest.approx(70)
        assert readiness.factors.technique == pytest.approx(80)
        assert readiness.factors.recovery == pytest.approx(60)
        assert readiness.factors.consistency == pytest.approx(50)
        expected = (
            70 * 0.30 +
            80 * 0.25 +
            readiness.factors.mental * 0.20 +
            60 * 0.15 +
            50 * 0.10
        )
        assert readiness.overall == pytest.approx(expected)

    def test_window_excludes_old_sessions(self):
        old = [make_session(i, fatigue=10, speed=20) for i in range(4)]
        recent = [make_session(55 + i, fatigue=2, speed=90) for i in range(4)]

        readiness = evaluate_competition_readiness(self.athlete, old + recent, reference_date=self.reference_date)

        assert readiness.factors.recovery == pytest.approx(80)

    def test_unordered_input(self):
        sessions = [make_session(30 + i, fatigue=3 + i % 4, speed=60 + i) for i in range(12)]

        forward = evaluate_competition_readiness(self.athlete, sessions, reference_date=self.reference_date)
        backward = evaluate_competition_readiness(
            self.athlete, list(reversed(sessions)), reference_date=self.reference_date
        )

        assert forward == backward
