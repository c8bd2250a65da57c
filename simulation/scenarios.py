"""
Scenario Analysis Module

What-if alliance matchups, brute-force alliance optimization and playoff
bracket prediction, all driven by the Monte Carlo engine.
"""

from __future__ import annotations

import functools
import itertools
import math
from collections.abc import Iterator, Mapping, Sequence

import numpy as np
from loguru import logger

from scouting.exceptions import CombinationLimitError, InvalidSimulationError
from scouting.models.base import timestamp_ms
from scouting.models.match import Match, MatchStatus, MatchType
from scouting.models.team import TeamStats
from simulation.engine import MonteCarloEngine
from simulation.models import (
    SCENARIO_ITERATIONS,
    AllianceCombination,
    PlayoffMatchPrediction,
    PlayoffRound,
    WhatIfScenario,
)

DEFAULT_MAX_COMBINATIONS = 500
# Win probabilities closer than this are ranked by expected score instead
WIN_PROBABILITY_BUCKET = 0.05

# Quarterfinal pairings by seed index: 1v8, 2v7, 3v6, 4v5
QUARTERFINAL_PAIRINGS = [(0, 7), (1, 6), (2, 5), (3, 4)]
BRACKET_SIZE = 8


def analyze_what_if_scenario(
    scenario_name: str,
    red_alliance: list[int],
    blue_alliance: list[int],
    event_id: str,
    team_stats_map: Mapping[int, TeamStats],
    iterations: int = SCENARIO_ITERATIONS,
    engine: MonteCarloEngine | None = None,
) -> WhatIfScenario:
    """
    Simulate a hypothetical match between two chosen alliances.

    Args:
        scenario_name: Label for the scenario
        red_alliance: Red team numbers
        blue_alliance: Blue team numbers
        event_id: Event the teams' stats belong to
        team_stats_map: Team number to TeamStats
        iterations: Trials to run
        engine: Engine to reuse (shares its random generator)

    Returns:
        WhatIfScenario with the simulation result
    """
    engine = engine or MonteCarloEngine()
    match = Match(
        id=f"scenario-{timestamp_ms()}",
        event_id=event_id,
        match_number=0,
        match_type=MatchType.QUALIFICATION,
        red_alliance=list(red_alliance),
        blue_alliance=list(blue_alliance),
        status=MatchStatus.PENDING,
    )
    result = engine.simulate(match, team_stats_map, iterations)
    return WhatIfScenario(
        scenario_name=scenario_name,
        red_alliance=list(red_alliance),
        blue_alliance=list(blue_alliance),
        result=result,
    )


def generate_combinations(items: Sequence[int], size: int) -> Iterator[list[int]]:
    """
    Yield every size-element combination of items, in input order.

    Produces C(len(items), size) combinations; callers bound the input
    with count_combinations() before enumerating.
    """
    for combo in itertools.combinations(items, size):
        yield list(combo)


def count_combinations(pool_size: int, size: int) -> int:
    """Number of combinations generate_combinations() will yield."""
    return math.comb(pool_size, size)


def _compare_combinations(a: AllianceCombination, b: AllianceCombination) -> int:
    """Win probability first; near-ties fall back to expected score."""
    if abs(a.win_probability - b.win_probability) > WIN_PROBABILITY_BUCKET:
        return -1 if a.win_probability > b.win_probability else 1
    return b.expected_score - a.expected_score


def find_optimal_alliance(
    available_teams: Sequence[int],
    opponent_alliance: list[int],
    event_id: str,
    team_stats_map: Mapping[int, TeamStats],
    alliance_size: int = 2,
    iterations: int = SCENARIO_ITERATIONS,
    max_combinations: int = DEFAULT_MAX_COMBINATIONS,
    rng: np.random.Generator | None = None,
) -> list[AllianceCombination]:
    """
    Evaluate every possible alliance against a fixed opponent.

    Each combination is simulated as the red alliance. Results are ranked
    by win probability; combinations within 0.05 of each other are ranked
    by expected score. This is a bucketed comparison, not a strict
    two-key sort.

    Args:
        available_teams: Pool of team numbers to choose from
        opponent_alliance: Opposing team numbers
        event_id: Event the teams' stats belong to
        team_stats_map: Team number to TeamStats
        alliance_size: Teams per alliance
        iterations: Trials per combination
        max_combinations: Largest C(n, k) allowed
        rng: Optional random generator

    Returns:
        All combinations, best first

    Raises:
        InvalidSimulationError: If alliance_size is outside 1..len(available_teams)
        CombinationLimitError: If C(n, k) exceeds max_combinations
    """
    pool = list(available_teams)
    if alliance_size < 1 or alliance_size > len(pool):
        raise InvalidSimulationError(
            f"alliance_size must be between 1 and {len(pool)} available teams, got {alliance_size}"
        )

    total = count_combinations(len(pool), alliance_size)
    if total > max_combinations:
        raise CombinationLimitError(len(pool), alliance_size, total, max_combinations)
    if total > max_combinations * 0.8:
        logger.warning(
            f"Alliance search will simulate {total} combinations "
            f"(limit {max_combinations})"
        )

    engine = MonteCarloEngine(rng=rng)
    combinations = []
    for combo in generate_combinations(pool, alliance_size):
        scenario = analyze_what_if_scenario(
            "Optimization", combo, opponent_alliance, event_id, team_stats_map,
            iterations=iterations, engine=engine,
        )
        combinations.append(
            AllianceCombination(
                teams=combo,
                expected_score=scenario.result.predicted_red_score,
                win_probability=scenario.result.red_win_probability,
                variance=scenario.result.variance,
            )
        )

    combinations.sort(key=functools.cmp_to_key(_compare_combinations))

    if combinations:
        best = combinations[0]
        logger.info(
            f"Evaluated {len(combinations)} alliances vs {opponent_alliance}; "
            f"best {best.teams} at {best.win_probability:.1%}"
        )
    return combinations


def simulate_playoff_bracket(
    seeds: Sequence[list[int]],
    event_id: str,
    team_stats_map: Mapping[int, TeamStats],
    iterations: int = SCENARIO_ITERATIONS,
    rng: np.random.Generator | None = None,
) -> list[PlayoffRound]:
    """
    Predict the quarterfinal round of an 8-alliance bracket.

    Seeds are alliances in seed order. Only the quarterfinals are
    modeled; any other bracket size yields no rounds.

    Returns:
        List with one Quarterfinals round, or an empty list
    """
    if len(seeds) != BRACKET_SIZE:
        logger.warning(
            f"Bracket simulation needs {BRACKET_SIZE} alliances, got {len(seeds)}"
        )
        return []

    engine = MonteCarloEngine(rng=rng)
    quarterfinals = PlayoffRound(round="Quarterfinals")
    for match_number, (red_seed, blue_seed) in enumerate(QUARTERFINAL_PAIRINGS, start=1):
        red, blue = list(seeds[red_seed]), list(seeds[blue_seed])
        scenario = analyze_what_if_scenario(
            "QF", red, blue, event_id, team_stats_map, iterations=iterations, engine=engine
        )
        probability = scenario.result.red_win_probability
        quarterfinals.matches.append(
            PlayoffMatchPrediction(
                match_number=match_number,
                red_alliance=red,
                blue_alliance=blue,
                red_win_probability=probability,
                predicted_winner="red" if probability > 0.5 else "blue",
            )
        )

    return [quarterfinals]
