"""
Monte Carlo Simulation Engine

Simulates FTC match scores from team profiles. Each trial perturbs every
team's average output by a random factor whose spread grows with the
team's inconsistency, scores the perturbed counts with the match point
table, and adds a probabilistic hang.
"""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np
from loguru import logger

from scouting.analytics.scoring import (
    AUTO_SAMPLE_POINTS,
    AUTO_SPECIMEN_POINTS,
    HANG_POINTS,
    TELEOP_SAMPLE_POINTS,
    TELEOP_SPECIMEN_POINTS,
)
from scouting.exceptions import InvalidSimulationError
from scouting.models.base import round_half_up
from scouting.models.match import Match
from scouting.models.observation import HangLevel
from scouting.models.team import TeamStats, resolve_team_stats
from simulation.models import (
    DEFAULT_ITERATIONS,
    ConfidenceInterval,
    SimulationConfig,
    SimulationResult,
)

# Hang rate above which a successful hang is assumed to be high
HIGH_HANG_RATE = 0.7


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


class MonteCarloEngine:
    """
    Monte Carlo match simulation engine.

    Trials are vectorized per team: every trial draws one uniform random
    factor per team, shared by that team's four scoring counts, and one
    uniform draw for the hang attempt.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        """
        Initialize the simulation engine.

        Args:
            config: Simulation configuration (iterations, seed)
            rng: Random generator to use instead of one seeded from config
        """
        self.config = config or SimulationConfig()
        self._rng = rng if rng is not None else np.random.default_rng(self.config.random_seed)

    def simulate_team_scores(self, stats: TeamStats, iterations: int) -> np.ndarray:
        """
        Simulate one team's points over many trials.

        Args:
            stats: Team profile
            iterations: Number of trials

        Returns:
            Array of simulated points, one per trial
        """
        spread = 1 - stats.consistency
        factors = 1 + (self._rng.random(iterations) - 0.5) * spread

        def count(avg: float) -> np.ndarray:
            return _round_half_up(np.maximum(0, avg * factors))

        auto_points = (
            count(stats.avg_auto_samples) * AUTO_SAMPLE_POINTS
            + count(stats.avg_auto_specimens) * AUTO_SPECIMEN_POINTS
        )
        teleop_points = (
            count(stats.avg_teleop_samples) * TELEOP_SAMPLE_POINTS
            + count(stats.avg_teleop_specimens) * TELEOP_SPECIMEN_POINTS
        )

        hang_value = HANG_POINTS[
            HangLevel.HIGH if stats.hang_success_rate > HIGH_HANG_RATE else HangLevel.LOW
        ]
        hung = self._rng.random(iterations) < stats.hang_success_rate
        endgame_points = np.where(hung, hang_value, 0)

        return auto_points + teleop_points + endgame_points

    def simulate_alliance_scores(self, alliance: list[TeamStats], iterations: int) -> np.ndarray:
        """Simulated alliance totals: member scores summed per trial."""
        totals = np.zeros(iterations)
        for stats in alliance:
            totals += self.simulate_team_scores(stats, iterations)
        return totals

    def simulate(
        self,
        match: Match,
        team_stats_map: Mapping[int, TeamStats],
        iterations: int | None = None,
    ) -> SimulationResult:
        """
        Run a complete simulation of one match.

        Teams missing from team_stats_map use the default profile.

        Args:
            match: Match to simulate
            team_stats_map: Team number to TeamStats
            iterations: Trials to run; defaults to the configured count

        Returns:
            SimulationResult with win probabilities and score intervals

        Raises:
            InvalidSimulationError: On a non-positive iteration count or an
                empty alliance
        """
        iterations = self.config.iterations if iterations is None else iterations
        validate_iterations(iterations)
        if not match.red_alliance or not match.blue_alliance:
            raise InvalidSimulationError(f"Match {match.id} needs teams on both alliances")

        red_stats = [resolve_team_stats(team_stats_map, t, match.event_id) for t in match.red_alliance]
        blue_stats = [resolve_team_stats(team_stats_map, t, match.event_id) for t in match.blue_alliance]

        red_scores = self.simulate_alliance_scores(red_stats, iterations)
        blue_scores = self.simulate_alliance_scores(blue_stats, iterations)

        red_wins = int(np.sum(red_scores > blue_scores))
        ties = int(np.sum(red_scores == blue_scores))

        red_mean, red_std = float(np.mean(red_scores)), float(np.std(red_scores))
        blue_mean, blue_std = float(np.mean(blue_scores)), float(np.std(blue_scores))
        multiplier = self.config.confidence_multiplier

        result = SimulationResult(
            match_id=match.id,
            simulations=iterations,
            red_wins=red_wins,
            ties=ties,
            predicted_red_score=round_half_up(red_mean),
            predicted_blue_score=round_half_up(blue_mean),
            confidence_interval=ConfidenceInterval(
                red_score_low=max(0, round_half_up(red_mean - multiplier * red_std)),
                red_score_high=round_half_up(red_mean + multiplier * red_std),
                blue_score_low=max(0, round_half_up(blue_mean - multiplier * blue_std)),
                blue_score_high=round_half_up(blue_mean + multiplier * blue_std),
            ),
            variance=(red_std + blue_std) / 2,
        )

        logger.debug(
            f"Simulated {match.id} x{iterations}: red {result.red_win_probability:.1%} "
            f"({result.predicted_red_score}-{result.predicted_blue_score}), "
            f"ties {result.tie_probability:.1%}"
        )
        return result


def validate_iterations(iterations: int) -> None:
    """Reject iteration counts that cannot produce a result."""
    if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)):
        raise InvalidSimulationError(f"iterations must be an integer, got {iterations!r}")
    if iterations < 1:
        raise InvalidSimulationError(f"iterations must be at least 1, got {iterations}")


def run_monte_carlo_simulation(
    match: Match,
    team_stats_map: Mapping[int, TeamStats],
    iterations: int = DEFAULT_ITERATIONS,
    rng: np.random.Generator | None = None,
) -> SimulationResult:
    """
    Simulate a match many times.

    Args:
        match: Match to simulate
        team_stats_map: Team number to TeamStats
        iterations: Number of trials
        rng: Optional random generator (seed it for reproducible results)

    Returns:
        SimulationResult
    """
    return MonteCarloEngine(rng=rng).simulate(match, team_stats_map, iterations)
