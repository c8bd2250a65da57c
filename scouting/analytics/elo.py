"""
Elo Rating Engine

Head-to-head Elo ratings with margin-of-victory scaling and a rating floor.

The rating trend inside TeamStats is produced by the aggregator's
points-based momentum window; this engine is a separate mechanism driven
by actual match results.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from scouting.models.base import round_half_up
from scouting.models.match import Match
from scouting.models.team import INITIAL_ELO, RATING_FLOOR

K_FACTOR = 32
ELO_SCALE = 400  # A 400-point gap is ~91% win probability


@dataclass(frozen=True)
class RatingUpdate:
    """New ratings after a decided head-to-head result."""

    new_winner_rating: int
    new_loser_rating: int


def expected_score(rating_a: float, rating_b: float) -> float:
    """Probability that side A beats side B under the Elo logistic curve."""
    return 1 / (1 + 10 ** ((rating_b - rating_a) / ELO_SCALE))


def margin_multiplier(margin: float) -> float:
    """Rating-change multiplier for a margin of victory (1.0 at margin 0)."""
    return math.log(abs(margin) + 1) / 10 + 1


def update_ratings(
    winner_rating: float,
    loser_rating: float,
    margin: float = 0,
    k_factor: float = K_FACTOR,
    rating_floor: float = RATING_FLOOR,
) -> RatingUpdate:
    """
    Update two ratings after a match.

    Args:
        winner_rating: Rating of the winning side before the match
        loser_rating: Rating of the losing side before the match
        margin: Score margin; larger margins move ratings further
        k_factor: Maximum rating change per match at margin 0
        rating_floor: Lowest rating the loser can drop to

    Returns:
        RatingUpdate with the rounded new ratings
    """
    expected_winner = expected_score(winner_rating, loser_rating)
    expected_loser = 1 - expected_winner
    multiplier = margin_multiplier(margin)

    new_winner = winner_rating + k_factor * multiplier * (1 - expected_winner)
    new_loser = loser_rating + k_factor * multiplier * (0 - expected_loser)

    return RatingUpdate(
        new_winner_rating=round_half_up(new_winner),
        new_loser_rating=max(rating_floor, round_half_up(new_loser)),
    )


@dataclass
class RatingLedger:
    """
    Running head-to-head ratings over played matches.

    Alliances are rated by the mean of their members. The winning and
    losing alliance deltas from update_ratings are applied to every
    member of the respective alliance.

    Usage:
        ledger = RatingLedger()
        ledger.process_matches(completed_matches)
        print(ledger.rankings()[:10])
    """

    initial_rating: float = INITIAL_ELO
    k_factor: float = K_FACTOR
    rating_floor: float = RATING_FLOOR

    ratings: dict[int, float] = field(default_factory=dict, repr=False)
    history: list[dict] = field(default_factory=list, repr=False)

    def rating(self, team_number: int) -> float:
        """Current rating for a team (initial rating if unseen)."""
        return self.ratings.get(team_number, self.initial_rating)

    def alliance_rating(self, alliance: list[int]) -> float:
        """Mean rating of an alliance."""
        if not alliance:
            return self.initial_rating
        return sum(self.rating(t) for t in alliance) / len(alliance)

    def record_match(self, match: Match) -> bool:
        """
        Apply one played match to the ratings.

        Returns:
            True if ratings changed, False if the match was skipped
            (no result, a tie, or an empty alliance)
        """
        if not match.has_result:
            logger.debug(f"Skipping match {match.id}: no recorded score")
            return False
        if match.red_score == match.blue_score:
            logger.debug(f"Skipping match {match.id}: tied {match.red_score}-{match.blue_score}")
            return False
        if not match.red_alliance or not match.blue_alliance:
            logger.warning(f"Skipping match {match.id}: alliance missing teams")
            return False

        red_won = match.red_score > match.blue_score
        winners = match.red_alliance if red_won else match.blue_alliance
        losers = match.blue_alliance if red_won else match.red_alliance

        winner_before = self.alliance_rating(winners)
        loser_before = self.alliance_rating(losers)
        update = update_ratings(
            winner_before,
            loser_before,
            margin=match.red_score - match.blue_score,
            k_factor=self.k_factor,
            rating_floor=self.rating_floor,
        )

        winner_delta = update.new_winner_rating - winner_before
        loser_delta = update.new_loser_rating - loser_before
        for team in winners:
            self.ratings[team] = max(self.rating_floor, self.rating(team) + winner_delta)
        for team in losers:
            self.ratings[team] = max(self.rating_floor, self.rating(team) + loser_delta)

        self.history.append(
            {
                "match_id": match.id,
                "winner": "red" if red_won else "blue",
                "expected_winner_score": expected_score(winner_before, loser_before),
                "winner_delta": winner_delta,
                "loser_delta": loser_delta,
            }
        )
        return True

    def process_matches(self, matches: Iterable[Match]) -> int:
        """
        Apply matches in chronological order.

        Matches are ordered by actual time, then scheduled time, then
        match number.

        Returns:
            Number of matches that changed ratings
        """
        ordered = sorted(
            matches,
            key=lambda m: (m.actual_time or m.scheduled_time or 0, m.match_number),
        )
        applied = sum(1 for match in ordered if self.record_match(match))
        logger.info(f"Rating ledger applied {applied} of {len(ordered)} matches")
        return applied

    def rankings(self) -> list[tuple[int, float]]:
        """Teams and ratings, highest first."""
        return sorted(self.ratings.items(), key=lambda item: item[1], reverse=True)
