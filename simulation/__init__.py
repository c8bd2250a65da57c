"""
Simulation Module

This module contains the Monte Carlo match simulation engine for FTC
scouting analytics.

Components:
    - models: Data models for simulation configuration and results
    - engine: Core Monte Carlo simulation framework
    - scenarios: What-if matchups, alliance optimization, playoff brackets

Usage:
    from simulation import MonteCarloEngine, SimulationConfig
    from simulation.scenarios import find_optimal_alliance

    # Configure simulation
    config = SimulationConfig(iterations=10000, random_seed=42)

    # Run simulation
    engine = MonteCarloEngine(config)
    result = engine.simulate(match, team_stats_map)
    print(result.get_summary())

    # Rank possible alliances against an opponent
    ranked = find_optimal_alliance(available, [111, 222], "2025-usca", team_stats_map)
"""

from simulation.models import (
    AllianceCombination,
    ConfidenceInterval,
    PlayoffMatchPrediction,
    PlayoffRound,
    SimulationConfig,
    SimulationResult,
    WhatIfScenario,
)
from simulation.engine import (
    MonteCarloEngine,
    run_monte_carlo_simulation,
)
from simulation.scenarios import (
    analyze_what_if_scenario,
    count_combinations,
    find_optimal_alliance,
    generate_combinations,
    simulate_playoff_bracket,
)

__all__ = [
    # Models
    "AllianceCombination",
    "ConfidenceInterval",
    "PlayoffMatchPrediction",
    "PlayoffRound",
    "SimulationConfig",
    "SimulationResult",
    "WhatIfScenario",
    # Engine
    "MonteCarloEngine",
    "run_monte_carlo_simulation",
    # Scenarios
    "analyze_what_if_scenario",
    "count_combinations",
    "find_optimal_alliance",
    "generate_combinations",
    "simulate_playoff_bracket",
]
