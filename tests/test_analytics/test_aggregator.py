"""
Tests for Performance Aggregation
"""

import math

import pytest

from scouting.analytics.aggregator import (
    build_performance_timeline,
    build_rating_trend,
    calculate_all_team_stats,
    calculate_consistency,
    calculate_team_stats,
    phase_averages,
)
from scouting.analytics.scoring import calculate_performance
from scouting.models.observation import HangLevel
from scouting.models.team import INITIAL_ELO, RATING_FLOOR


class TestCalculateConsistency:
    """Tests for the consistency score."""

    def test_identical_scores(self):
        assert calculate_consistency([80, 80, 80]) == 1.0

    def test_population_std_dev(self):
        # mean 20, population std dev 10
        assert calculate_consistency([10, 30]) == pytest.approx(0.5)

    def test_clamped_at_zero(self):
        assert calculate_consistency([0, 0, 300]) == 0.0

    def test_zero_mean(self):
        assert calculate_consistency([0, 0, 0]) == 0.0

    def test_empty(self):
        assert calculate_consistency([]) == 0.0


class TestRatingTrend:
    """Tests for the points-based rating trend."""

    def test_steps_are_rounded(self, strong_observations):
        perfs = [calculate_performance(o) for o in strong_observations]

        rating, trend = build_rating_trend(perfs, 1500)

        # each match moves the rating by (101 - 50) / 5 = 10.2
        assert trend == [1500, 1510, 1520, 1531, 1541, 1551]
        assert rating == 1551

    def test_only_window_counts(self, make_observation):
        perfs = [calculate_performance(make_observation(match_number=n)) for n in range(1, 8)]

        rating, trend = build_rating_trend(perfs, 1500, momentum_window=5)

        # seven scoreless matches, only five move the rating by -10
        assert len(trend) == 6
        assert rating == 1450

    def test_no_performances(self):
        rating, trend = build_rating_trend([], 1620)

        assert rating == 1620
        assert trend == [1620]

    def test_floored_at_minimum(self, make_observation):
        perfs = [calculate_performance(make_observation(match_number=n)) for n in range(1, 6)]

        rating, trend = build_rating_trend(perfs, 1020)

        assert trend == [1020, 1010, 1000, 1000, 1000, 1000]
        assert rating == RATING_FLOOR

    def test_recovers_from_floor(self, make_observation, strong_observations):
        perfs = [calculate_performance(make_observation(match_number=1))]
        perfs.append(calculate_performance(strong_observations[0]))

        rating, trend = build_rating_trend(perfs, 1000)

        # the scoreless match holds at the floor, then 101 points add 10.2
        assert trend == [1000, 1000, 1010]
        assert rating == 1010

    def test_prior_below_floor_is_raised(self):
        rating, trend = build_rating_trend([], 940)

        assert rating == RATING_FLOOR
        assert trend == [RATING_FLOOR]

    def test_custom_floor(self, make_observation):
        perfs = [calculate_performance(make_observation(match_number=n)) for n in range(1, 4)]

        rating, trend = build_rating_trend(perfs, 1210, rating_floor=1200)

        assert rating == 1200
        assert min(trend) == 1200


class TestCalculateTeamStats:
    """Tests for TeamStats aggregation."""

    def test_strong_team(self, strong_observations, event_id):
        stats = calculate_team_stats(1234, event_id, strong_observations)

        assert stats.team_number == 1234
        assert stats.event_id == event_id
        assert stats.matches_played == 5
        assert stats.avg_auto_samples == 3
        assert stats.avg_teleop_specimens == 2
        assert stats.avg_total_points == pytest.approx(101)
        assert stats.auto_success_rate == 1.0
        assert stats.hang_success_rate == 1.0
        assert stats.avg_driver_skill == 5
        assert stats.consistency == 1.0
        assert stats.elo_rating == 1551

    def test_ignores_other_teams(self, strong_observations, make_observation, event_id):
        observations = strong_observations + [make_observation(5678, 1, teleop_sample_scored=20)]

        stats = calculate_team_stats(1234, event_id, observations)

        assert stats.matches_played == 5
        assert stats.avg_total_points == pytest.approx(101)

    def test_no_observations(self, event_id):
        stats = calculate_team_stats(1234, event_id, [], prior_rating=1580)

        assert stats.matches_played == 0
        assert stats.elo_rating == 1580
        assert stats.elo_trend == [1580]
        assert stats.consistency == 0.0
        assert stats.avg_total_points == 0.0

    def test_parked_only_counts_as_auto_success(self, make_observation, event_id):
        observations = [
            make_observation(match_number=1, auto_parked=True),
            make_observation(match_number=2),
        ]

        stats = calculate_team_stats(1234, event_id, observations)

        assert stats.auto_success_rate == 0.5

    def test_hang_rate(self, make_observation, event_id):
        observations = [
            make_observation(match_number=1, endgame_hanging=HangLevel.LOW),
            make_observation(match_number=2, endgame_parked=True),
            make_observation(match_number=3, endgame_hanging=HangLevel.HIGH),
            make_observation(match_number=4),
        ]

        stats = calculate_team_stats(1234, event_id, observations)

        assert stats.hang_success_rate == 0.5

    def test_scoreless_team_has_finite_stats(self, make_observation, event_id):
        observations = [make_observation(match_number=n) for n in range(1, 4)]

        stats = calculate_team_stats(1234, event_id, observations)

        assert stats.avg_total_points == 0.0
        assert stats.consistency == 0.0
        for value in (stats.avg_total_points, stats.consistency, stats.elo_rating):
            assert math.isfinite(value)

    def test_sample_averages(self, make_observation, event_id):
        observations = [
            make_observation(match_number=1, auto_sample_scored=2, teleop_sample_scored=4),
            make_observation(match_number=2, auto_sample_scored=4, teleop_sample_scored=6),
        ]

        stats = calculate_team_stats(1234, event_id, observations)

        assert stats.avg_auto_samples == 3
        assert stats.avg_teleop_samples == 5

    def test_hang_rate_two_of_three(self, make_observation, event_id):
        observations = [
            make_observation(match_number=1, endgame_hanging=HangLevel.HIGH),
            make_observation(match_number=2, endgame_hanging=HangLevel.NONE),
            make_observation(match_number=3, endgame_hanging=HangLevel.LOW),
        ]

        stats = calculate_team_stats(1234, event_id, observations)

        assert stats.hang_success_rate == pytest.approx(2 / 3)

    def test_rating_never_below_floor(self, make_observation, event_id):
        observations = [make_observation(match_number=n) for n in range(1, 6)]

        stats = calculate_team_stats(1234, event_id, observations, prior_rating=1020)

        assert stats.elo_rating == RATING_FLOOR
        assert min(stats.elo_trend) >= RATING_FLOOR

    def test_pure_round_trip(self, strong_observations, event_id):
        first = calculate_team_stats(1234, event_id, strong_observations, updated_at=1_700_000_000_000)
        second = calculate_team_stats(1234, event_id, strong_observations, updated_at=1_700_000_000_000)

        assert first == second
        assert first.last_updated == 1_700_000_000_000

    def test_custom_baseline(self, strong_observations, event_id):
        stats = calculate_team_stats(
            1234, event_id, strong_observations, baseline_score=101
        )

        assert stats.elo_rating == INITIAL_ELO


class TestCalculateAllTeamStats:
    """Tests for multi-team aggregation."""

    def test_carries_prior_ratings(self, strong_observations, make_stats, event_id):
        existing = {1234: make_stats(1234, elo_rating=1600)}

        stats_map = calculate_all_team_stats(
            [1234, 5678], event_id, strong_observations, existing_stats=existing
        )

        assert set(stats_map) == {1234, 5678}
        assert stats_map[1234].elo_trend[0] == 1600
        assert stats_map[1234].elo_rating == 1651
        assert stats_map[5678].matches_played == 0
        assert stats_map[5678].elo_rating == INITIAL_ELO

    def test_default_rating(self, event_id):
        stats_map = calculate_all_team_stats([42], event_id, [], default_rating=1400)

        assert stats_map[42].elo_rating == 1400

    def test_prior_rating_near_floor(self, make_observation, make_stats, event_id):
        observations = [make_observation(match_number=n) for n in range(1, 4)]
        existing = {1234: make_stats(1234, elo_rating=1005)}

        stats_map = calculate_all_team_stats([1234], event_id, observations, existing_stats=existing)

        assert stats_map[1234].elo_trend == [1005, 1000, 1000, 1000]
        assert stats_map[1234].elo_rating == RATING_FLOOR

    def test_teams_share_update_stamp(self, strong_observations, event_id):
        stats_map = calculate_all_team_stats([1234, 5678], event_id, strong_observations)

        assert stats_map[1234].last_updated == stats_map[5678].last_updated

    def test_fixed_update_stamp(self, strong_observations, event_id):
        stats_map = calculate_all_team_stats(
            [1234, 5678], event_id, strong_observations, updated_at=42
        )

        assert {s.last_updated for s in stats_map.values()} == {42}


class TestPerformanceTimeline:
    """Tests for per-match timelines."""

    def test_sorted_oldest_first(self, make_observation):
        observations = [
            make_observation(match_number=3, teleop_sample_scored=3),
            make_observation(match_number=1, teleop_sample_scored=1),
            make_observation(match_number=2, teleop_sample_scored=2),
            make_observation(9999, 1, teleop_sample_scored=10),
        ]

        timeline = build_performance_timeline(1234, observations)

        assert [p.match_id for p in timeline] == ["Q1", "Q2", "Q3"]
        assert [p.match_index for p in timeline] == [1, 2, 3]
        assert [p.teleop_points for p in timeline] == [4, 8, 12]

    def test_phase_averages(self, make_observation):
        observations = [
            make_observation(match_number=1, auto_sample_scored=1, endgame_hanging=HangLevel.LOW),
            make_observation(match_number=2, auto_sample_scored=2, teleop_sample_scored=5),
        ]

        averages = phase_averages(build_performance_timeline(1234, observations))

        assert averages == {"auto": 9, "teleop": 10, "endgame": 8}

    def test_phase_averages_empty(self):
        assert phase_averages([]) == {}
