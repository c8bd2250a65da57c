"""
Tests for Scouting Data Models
"""

import pytest
from pydantic import ValidationError

from scouting.models.base import round_half_up, round_half_up_to
from scouting.models.match import Match, MatchPrediction, MatchStatus
from scouting.models.observation import (
    HangLevel,
    Observation,
    SyncStatus,
    sort_chronologically,
)
from scouting.models.team import (
    INITIAL_ELO,
    TeamStats,
    default_team_stats,
    resolve_team_stats,
)


class TestRoundHalfUp:
    """Tests for half-up rounding."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.4, 2), (-0.5, 0), (-1.5, -1), (1500.0, 1500)],
    )
    def test_halves_round_up(self, value, expected):
        assert round_half_up(value) == expected

    @pytest.mark.parametrize(
        "value,ndigits,expected",
        [(0.25, 1, 0.3), (0.125, 2, 0.13), (0.375, 2, 0.38), (0.6124, 3, 0.612), (-0.25, 1, -0.2)],
    )
    def test_decimal_halves_round_up(self, value, ndigits, expected):
        assert round_half_up_to(value, ndigits) == pytest.approx(expected)


class TestObservation:
    """Tests for Observation model."""

    def test_defaults(self, make_observation):
        obs = make_observation()

        assert obs.auto_sample_scored == 0
        assert obs.endgame_hanging == HangLevel.NONE
        assert obs.driver_skill == 3
        assert obs.sync_status == SyncStatus.PENDING
        assert obs.version == 1

    def test_accepts_camel_case_keys(self):
        """Test records written by the scouting app validate."""
        obs = Observation.model_validate(
            {
                "eventId": "evt",
                "matchId": "Q7",
                "teamNumber": 4321,
                "autoSampleScored": 2,
                "teleopSpecimenScored": 3,
                "endgameHanging": "high",
                "driverSkill": 5,
            }
        )

        assert obs.team_number == 4321
        assert obs.auto_sample_scored == 2
        assert obs.teleop_specimen_scored == 3
        assert obs.endgame_hanging == HangLevel.HIGH
        assert obs.driver_skill == 5

    def test_rejects_negative_counts(self, make_observation):
        with pytest.raises(ValidationError):
            make_observation(teleop_sample_scored=-1)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rejects_out_of_range_ratings(self, make_observation, rating):
        with pytest.raises(ValidationError):
            make_observation(robot_speed=rating)

    def test_rejects_unknown_hang_level(self, make_observation):
        with pytest.raises(ValidationError):
            make_observation(endgame_hanging="middle")

    def test_is_immutable(self, make_observation):
        obs = make_observation()

        with pytest.raises(ValidationError):
            obs.auto_sample_scored = 5

    def test_piece_properties(self, make_observation):
        obs = make_observation(
            auto_sample_scored=2,
            auto_specimen_scored=1,
            teleop_sample_scored=5,
            teleop_specimen_scored=2,
            endgame_hanging=HangLevel.LOW,
        )

        assert obs.auto_pieces == 3
        assert obs.teleop_pieces == 7
        assert obs.did_hang is True

    def test_with_sync_status(self, make_observation):
        obs = make_observation()
        synced = obs.with_sync_status(SyncStatus.SYNCED)

        assert synced.sync_status == SyncStatus.SYNCED
        assert synced.version == 2
        assert obs.sync_status == SyncStatus.PENDING
        assert synced.team_number == obs.team_number

    def test_sort_chronologically(self, make_observation):
        later = make_observation(match_number=3)
        earlier = make_observation(match_number=1)

        assert sort_chronologically([later, earlier]) == [earlier, later]


class TestTeamStats:
    """Tests for TeamStats model and defaults."""

    def test_default_profile(self, event_id):
        stats = default_team_stats(9999, event_id)

        assert stats.team_number == 9999
        assert stats.matches_played == 0
        assert stats.avg_auto_samples == 2
        assert stats.avg_auto_specimens == 1
        assert stats.avg_teleop_samples == 4
        assert stats.avg_teleop_specimens == 2
        assert stats.avg_total_points == 50
        assert stats.auto_success_rate == 0.5
        assert stats.hang_success_rate == 0.3
        assert stats.elo_rating == INITIAL_ELO
        assert stats.elo_trend == [INITIAL_ELO]
        assert stats.consistency == 0.5

    def test_resolve_prefers_known_stats(self, make_stats, event_id):
        known = make_stats(1234, avg_total_points=99)
        stats_map = {1234: known}

        assert resolve_team_stats(stats_map, 1234, event_id) is known
        assert resolve_team_stats(stats_map, 5678, event_id).avg_total_points == 50

    def test_momentum(self, make_stats):
        stats = make_stats(elo_trend=[1500, 1510, 1530, 1540])

        assert stats.momentum == pytest.approx(10.0)

    def test_momentum_without_trend(self, make_stats):
        assert make_stats(elo_trend=[1500]).momentum == 0.0
        assert make_stats(elo_trend=[]).momentum == 0.0

    def test_consistency_bounds(self, make_stats):
        with pytest.raises(ValidationError):
            make_stats(consistency=1.5)

    def test_round_trip_json(self, make_stats):
        stats = make_stats(elo_trend=[1500, 1504])

        restored = TeamStats.model_validate(stats.model_dump(mode="json"))

        assert restored == stats


class TestMatch:
    """Tests for Match and MatchPrediction models."""

    def test_teams_and_result(self, make_match):
        match = make_match(red=[1, 2], blue=[3, 4])

        assert match.teams == [1, 2, 3, 4]
        assert match.has_result is False
        assert match.status == MatchStatus.PENDING

    def test_has_result(self, make_match):
        match = make_match(red_score=80, blue_score=75, status=MatchStatus.COMPLETED)

        assert match.has_result is True

    def test_accepts_camel_case_keys(self):
        match = Match.model_validate(
            {
                "id": "m1",
                "eventId": "evt",
                "matchNumber": 4,
                "redAlliance": [1, 2],
                "blueAlliance": [3, 4],
                "status": "completed",
                "redScore": 10,
                "blueScore": 20,
            }
        )

        assert match.match_number == 4
        assert match.status == MatchStatus.COMPLETED
        assert match.blue_score == 20

    def test_prediction_winner(self):
        prediction = MatchPrediction(
            match_id="m1",
            red_win_probability=0.6,
            blue_win_probability=0.4,
            predicted_red_score=100,
            predicted_blue_score=90,
            confidence_band=0.3,
        )

        assert prediction.predicted_winner == "red"
