"""
Tests for Elo Ratings
"""

import pytest

from scouting.analytics.elo import (
    RatingLedger,
    expected_score,
    margin_multiplier,
    update_ratings,
)
from scouting.models.match import MatchStatus


class TestExpectedScore:
    """Tests for the Elo expectation."""

    def test_equal_ratings(self):
        assert expected_score(1500, 1500) == pytest.approx(0.5)

    def test_400_point_gap(self):
        assert expected_score(1900, 1500) == pytest.approx(10 / 11)

    def test_symmetric(self):
        assert expected_score(1620, 1480) + expected_score(1480, 1620) == pytest.approx(1.0)


class TestUpdateRatings:
    """Tests for head-to-head rating updates."""

    def test_equal_ratings_no_margin(self):
        update = update_ratings(1500, 1500)

        assert margin_multiplier(0) == 1.0
        assert update.new_winner_rating == 1516
        assert update.new_loser_rating == 1484

    def test_margin_increases_change(self):
        update = update_ratings(1500, 1500, margin=20)

        # multiplier = ln(21) / 10 + 1
        assert update.new_winner_rating == 1521
        assert update.new_loser_rating == 1479

    def test_negative_margin_uses_magnitude(self):
        assert update_ratings(1500, 1500, margin=-20) == update_ratings(1500, 1500, margin=20)

    def test_rating_floor(self):
        update = update_ratings(1500, 1000)

        assert update.new_winner_rating == 1502
        assert update.new_loser_rating == 1000

    def test_results_are_integers(self):
        update = update_ratings(1537.4, 1462.9, margin=7)

        assert isinstance(update.new_winner_rating, int)
        assert isinstance(update.new_loser_rating, int)


class TestRatingLedger:
    """Tests for ratings over played matches."""

    def test_record_red_win(self, make_match):
        ledger = RatingLedger()
        match = make_match(
            red=[1, 2], blue=[3, 4], red_score=100, blue_score=80, status=MatchStatus.COMPLETED
        )

        assert ledger.record_match(match) is True
        assert ledger.rating(1) == 1521
        assert ledger.rating(2) == 1521
        assert ledger.rating(3) == 1479
        assert ledger.rating(4) == 1479
        assert ledger.history[0]["winner"] == "red"

    def test_record_blue_win(self, make_match):
        ledger = RatingLedger()
        match = make_match(red=[1], blue=[2], red_score=10, blue_score=40)

        ledger.record_match(match)

        assert ledger.rating(2) > ledger.rating(1)

    def test_skips_unplayed_and_tied(self, make_match):
        ledger = RatingLedger()

        assert ledger.record_match(make_match()) is False
        assert ledger.record_match(make_match(red_score=50, blue_score=50)) is False
        assert ledger.record_match(make_match(red=[], red_score=50, blue_score=20)) is False
        assert ledger.ratings == {}

    def test_alliance_member_held_at_floor(self, make_match):
        ledger = RatingLedger(ratings={3: 1000, 4: 1600})
        match = make_match(red=[1, 2], blue=[3, 4], red_score=51, blue_score=50)

        ledger.record_match(match)

        # losing alliance at 1300 drops 8
        assert ledger.rating(3) == 1000
        assert ledger.rating(4) == 1592
        assert ledger.rating(1) == 1508

    def test_unseen_team_has_initial_rating(self):
        assert RatingLedger(initial_rating=1400).rating(9999) == 1400

    def test_process_matches_in_time_order(self, make_match):
        first = make_match(red=[1], blue=[2], match_number=2, red_score=90, blue_score=30, actual_time=100)
        second = make_match(red=[2], blue=[1], match_number=1, red_score=90, blue_score=30, actual_time=200)

        ledger = RatingLedger()
        applied = ledger.process_matches([second, first])

        assert applied == 2
        assert [h["match_id"] for h in ledger.history] == ["match-2", "match-1"]

    def test_rankings(self, make_match):
        ledger = RatingLedger()
        ledger.process_matches(
            [
                make_match(red=[1], blue=[2], match_number=1, red_score=60, blue_score=20),
                make_match(red=[1], blue=[3], match_number=2, red_score=60, blue_score=20),
            ]
        )

        rankings = ledger.rankings()

        assert rankings[0][0] == 1
        assert [r for _, r in rankings] == sorted((r for _, r in rankings), reverse=True)
