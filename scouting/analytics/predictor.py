"""
Match Predictor

Closed-form match outcome prediction from team profiles. Win probability
comes from the Elo expectation between alliance mean ratings, predicted
scores from summed average points.
"""

from collections.abc import Iterable, Mapping

from loguru import logger

from scouting.analytics.elo import expected_score
from scouting.exceptions import AnalyticsError
from scouting.models.base import round_half_up, round_half_up_to
from scouting.models.match import Match, MatchPrediction, MatchStatus, PredictionFactors
from scouting.models.team import TeamStats, resolve_team_stats

# Confidence band parameters
MAX_CONFIDENCE_BAND = 0.5
MIN_CONFIDENCE_BAND = 0.1
CONSISTENCY_BAND_WEIGHT = 0.2
EXPERIENCE_BAND_WEIGHT = 0.02
EXPERIENCE_CAP_MATCHES = 10


def alliance_rating(stats: list[TeamStats]) -> float:
    """Mean rating of an alliance."""
    return sum(s.elo_rating for s in stats) / len(stats)


def alliance_score(stats: list[TeamStats]) -> float:
    """Expected alliance score: the sum of member averages."""
    return sum(s.avg_total_points for s in stats)


def alliance_momentum(stats: list[TeamStats]) -> float:
    """Mean per-member momentum; members without a trend count as 0."""
    return sum(s.momentum for s in stats) / len(stats)


def confidence_band(stats: list[TeamStats]) -> float:
    """
    Uncertainty band around the win probability.

    Shrinks with team consistency and with the number of scouted matches
    (capped at 10). Always in [0.1, 0.5]; lower means more confident.
    """
    count = len(stats)
    avg_consistency = sum(s.consistency for s in stats) / count
    avg_matches = sum(s.matches_played for s in stats) / count
    band = (
        MAX_CONFIDENCE_BAND
        - avg_consistency * CONSISTENCY_BAND_WEIGHT
        - min(avg_matches, EXPERIENCE_CAP_MATCHES) * EXPERIENCE_BAND_WEIGHT
    )
    return min(MAX_CONFIDENCE_BAND, max(MIN_CONFIDENCE_BAND, band))


def predict_match(match: Match, team_stats_map: Mapping[int, TeamStats]) -> MatchPrediction:
    """
    Predict a match outcome.

    Teams missing from team_stats_map use the default profile.

    Args:
        match: Match to predict
        team_stats_map: Team number to TeamStats

    Returns:
        MatchPrediction with rounded probabilities, scores and factors

    Raises:
        AnalyticsError: If either alliance has no teams
    """
    if not match.red_alliance or not match.blue_alliance:
        raise AnalyticsError(f"Match {match.id} needs teams on both alliances")

    red_stats = [resolve_team_stats(team_stats_map, t, match.event_id) for t in match.red_alliance]
    blue_stats = [resolve_team_stats(team_stats_map, t, match.event_id) for t in match.blue_alliance]

    red_elo = alliance_rating(red_stats)
    blue_elo = alliance_rating(blue_stats)

    red_win_probability = round_half_up_to(expected_score(red_elo, blue_elo), 3)

    prediction = MatchPrediction(
        match_id=match.id,
        red_win_probability=red_win_probability,
        blue_win_probability=round_half_up_to(1 - red_win_probability, 3),
        predicted_red_score=round_half_up(alliance_score(red_stats)),
        predicted_blue_score=round_half_up(alliance_score(blue_stats)),
        confidence_band=round_half_up_to(confidence_band(red_stats + blue_stats), 2),
        factors=PredictionFactors(
            red_elo=round_half_up(red_elo),
            blue_elo=round_half_up(blue_elo),
            red_momentum=round_half_up_to(alliance_momentum(red_stats), 1),
            blue_momentum=round_half_up_to(alliance_momentum(blue_stats), 1),
        ),
    )

    logger.debug(
        f"Predicted {match.id}: red {prediction.red_win_probability:.1%} "
        f"({prediction.predicted_red_score}-{prediction.predicted_blue_score}) "
        f"+/-{prediction.confidence_band:.0%}"
    )
    return prediction


def predict_matches(
    matches: Iterable[Match],
    team_stats_map: Mapping[int, TeamStats],
    status: MatchStatus | None = MatchStatus.PENDING,
) -> list[tuple[Match, MatchPrediction]]:
    """
    Predict every match with the given status, earliest scheduled first.

    Pass status=None to predict all matches regardless of status.
    """
    selected = [m for m in matches if status is None or m.status == status]
    selected.sort(key=lambda m: (m.scheduled_time or 0, m.match_number))
    return [(m, predict_match(m, team_stats_map)) for m in selected]
