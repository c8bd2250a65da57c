"""
Performance Aggregator

Builds per-team performance profiles (TeamStats) from raw scouting
observations:
- Averages of scored game pieces and total points
- Autonomous and hang success rates
- Consistency (inverse coefficient of variation of total points)
- Points-based rating trend over a fixed momentum window, floored at 1000
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import numpy as np
from loguru import logger

from scouting.analytics.scoring import PerformanceBreakdown, calculate_performance
from scouting.models.base import round_half_up, timestamp_ms
from scouting.models.observation import Observation, sort_chronologically
from scouting.models.team import INITIAL_ELO, RATING_FLOOR, TeamStats

# Rating trend parameters
MOMENTUM_WINDOW = 5  # Observations that move the rating trend
BASELINE_MATCH_SCORE = 50  # Points an average robot is expected to score
RATING_STEP_DIVISOR = 5


@dataclass
class TimelinePoint:
    """One match in a team's chronological performance timeline."""

    match_index: int  # 1-based, oldest first
    match_id: str
    auto_points: int
    teleop_points: int
    endgame_points: int
    total_points: int
    driver_skill: int
    robot_speed: int
    defense_rating: int


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    return float(np.mean(values)) if values else 0.0


def _fraction(flags: Iterable[bool]) -> float:
    flags = list(flags)
    return sum(flags) / len(flags) if flags else 0.0


def calculate_consistency(total_points: list[float]) -> float:
    """
    Consistency score in [0, 1].

    1 minus the coefficient of variation of total points, using the
    population standard deviation. Zero when the mean is zero.
    """
    if not total_points:
        return 0.0
    mean = float(np.mean(total_points))
    if mean <= 0:
        return 0.0
    std_dev = float(np.std(total_points))
    return max(0.0, 1 - std_dev / mean)


def build_rating_trend(
    performances: list[PerformanceBreakdown],
    prior_rating: float,
    momentum_window: int = MOMENTUM_WINDOW,
    baseline_score: float = BASELINE_MATCH_SCORE,
    rating_floor: float = RATING_FLOOR,
) -> tuple[float, list[float]]:
    """
    Advance a rating through the first observations of the window.

    Each step moves the rating by (points - baseline) / 5. Only the first
    `momentum_window` performances count, in the order given. The running
    rating is clamped at `rating_floor` after every step.

    Returns:
        Tuple of (final rating, trend starting with the prior rating)
    """
    current = max(rating_floor, prior_rating)
    trend = [current]
    for perf in performances[:momentum_window]:
        step = (perf.total_points - baseline_score) / RATING_STEP_DIVISOR
        current = max(rating_floor, current + step)
        trend.append(round_half_up(current))

    if len(trend) == 1:
        return current, trend
    return round_half_up(current), trend


def calculate_team_stats(
    team_number: int,
    event_id: str,
    observations: Iterable[Observation],
    prior_rating: float = INITIAL_ELO,
    momentum_window: int = MOMENTUM_WINDOW,
    baseline_score: float = BASELINE_MATCH_SCORE,
    rating_floor: float = RATING_FLOOR,
    updated_at: int | None = None,
) -> TeamStats:
    """
    Calculate a team's performance profile from scouting observations.

    Observations for other teams are ignored. The input order is kept, so
    callers should pass observations oldest first: the rating trend only
    looks at the first `momentum_window` of them. With a fixed `updated_at`
    the result depends on the inputs alone.

    Args:
        team_number: Team to aggregate
        event_id: Event the observations belong to
        observations: Observations for any number of teams
        prior_rating: Rating carried in from earlier processing
        momentum_window: Number of observations that move the rating
        baseline_score: Points treated as an average match
        rating_floor: Lowest rating the trend can reach
        updated_at: Epoch ms stamped on the result, defaults to now

    Returns:
        TeamStats for the team
    """
    team_obs = [o for o in observations if o.team_number == team_number]
    if updated_at is None:
        updated_at = timestamp_ms()

    performances = [calculate_performance(o) for o in team_obs]
    totals = [p.total_points for p in performances]

    elo_rating, elo_trend = build_rating_trend(
        performances, prior_rating, momentum_window, baseline_score, rating_floor
    )

    if not team_obs:
        return TeamStats(
            team_number=team_number,
            event_id=event_id,
            matches_played=0,
            elo_rating=elo_rating,
            elo_trend=elo_trend,
            consistency=0.0,
            last_updated=updated_at,
        )

    stats = TeamStats(
        team_number=team_number,
        event_id=event_id,
        matches_played=len(team_obs),
        avg_auto_samples=_mean(o.auto_sample_scored for o in team_obs),
        avg_auto_specimens=_mean(o.auto_specimen_scored for o in team_obs),
        avg_teleop_samples=_mean(o.teleop_sample_scored for o in team_obs),
        avg_teleop_specimens=_mean(o.teleop_specimen_scored for o in team_obs),
        avg_total_points=_mean(totals),
        auto_success_rate=_fraction(
            o.auto_parked or o.auto_sample_scored > 0 or o.auto_specimen_scored > 0
            for o in team_obs
        ),
        hang_success_rate=_fraction(o.did_hang for o in team_obs),
        avg_driver_skill=_mean(o.driver_skill for o in team_obs),
        avg_robot_speed=_mean(o.robot_speed for o in team_obs),
        avg_defense_rating=_mean(o.defense_rating for o in team_obs),
        elo_rating=elo_rating,
        elo_trend=elo_trend,
        consistency=calculate_consistency(totals),
        last_updated=updated_at,
    )

    logger.debug(
        f"Team {team_number}: {stats.matches_played} matches, "
        f"{stats.avg_total_points:.1f} avg pts, rating {stats.elo_rating}"
    )
    return stats


def calculate_all_team_stats(
    team_numbers: Iterable[int],
    event_id: str,
    observations: Iterable[Observation],
    existing_stats: Mapping[int, TeamStats] | None = None,
    default_rating: float = INITIAL_ELO,
    updated_at: int | None = None,
    **kwargs,
) -> dict[int, TeamStats]:
    """
    Calculate TeamStats for every listed team.

    Prior ratings come from existing_stats when a team is present there,
    otherwise default_rating is used. Every team shares one `updated_at`
    stamp. Extra keyword arguments are passed to calculate_team_stats().
    """
    observations = list(observations)
    existing_stats = existing_stats or {}
    if updated_at is None:
        updated_at = timestamp_ms()

    stats_map: dict[int, TeamStats] = {}
    for team_number in team_numbers:
        previous = existing_stats.get(team_number)
        prior_rating = previous.elo_rating if previous is not None else default_rating
        stats_map[team_number] = calculate_team_stats(
            team_number, event_id, observations, prior_rating, updated_at=updated_at, **kwargs
        )

    logger.info(
        f"Aggregated stats for {len(stats_map)} teams from "
        f"{len(observations)} observations"
    )
    return stats_map


def build_performance_timeline(
    team_number: int,
    observations: Iterable[Observation],
) -> list[TimelinePoint]:
    """Per-match points for a team, oldest first."""
    team_obs = sort_chronologically(
        [o for o in observations if o.team_number == team_number]
    )

    timeline = []
    for index, obs in enumerate(team_obs, start=1):
        perf = calculate_performance(obs)
        timeline.append(
            TimelinePoint(
                match_index=index,
                match_id=obs.match_id,
                auto_points=perf.auto_points,
                teleop_points=perf.teleop_points,
                endgame_points=perf.endgame_points,
                total_points=perf.total_points,
                driver_skill=perf.driver_skill,
                robot_speed=perf.robot_speed,
                defense_rating=perf.defense_rating,
            )
        )
    return timeline


def phase_averages(timeline: list[TimelinePoint]) -> dict[str, int]:
    """Rounded average points per phase over a timeline."""
    if not timeline:
        return {}
    return {
        "auto": round_half_up(_mean(p.auto_points for p in timeline)),
        "teleop": round_half_up(_mean(p.teleop_points for p in timeline)),
        "endgame": round_half_up(_mean(p.endgame_points for p in timeline)),
    }
