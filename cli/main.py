#!/usr/bin/env python3
"""
CLI for FTC Scouting Analytics

Runs the analytics and simulation pipelines over scouting data exported
by the scouting app (JSON or YAML).

Usage:
    python -m cli.main stats --observations data/observations.json
    python -m cli.main predict --observations data/observations.json --matches data/matches.json
    python -m cli.main simulate --observations data/observations.json --red 1234 5678 --blue 1111 2222
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
from loguru import logger

from scouting.analytics.aggregator import (
    build_performance_timeline,
    calculate_all_team_stats,
    phase_averages,
)
from scouting.analytics.elo import RatingLedger
from scouting.analytics.insights import (
    analyze_performance_trend,
    classify_team,
    detect_anomalies,
    predict_mechanical_issues,
    recommend_alliance_partners,
)
from scouting.analytics.picklist import PickList, compatibility_badge, rank_available_teams
from scouting.analytics.predictor import predict_matches
from scouting.config import AnalyticsConfig, load_config
from scouting.exceptions import AnalyticsError
from scouting.loader import (
    load_alliances,
    load_matches,
    load_observations,
    load_team_stats,
    save_team_stats,
)
from scouting.models.match import MatchStatus
from scouting.models.observation import Observation, sort_chronologically
from scouting.models.team import TeamStats
from simulation.engine import MonteCarloEngine
from simulation.models import SimulationConfig
from simulation.scenarios import (
    analyze_what_if_scenario,
    find_optimal_alliance,
    simulate_playoff_bracket,
)


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI usage."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<level>{level}</level>: {message}",
    )


def print_header(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)
    print()


def _resolve_seed(args: argparse.Namespace, config: AnalyticsConfig) -> int | None:
    return args.seed if args.seed is not None else config.simulation.random_seed


def _iterations(args: argparse.Namespace, default: int) -> int:
    return args.iterations if args.iterations is not None else default


def _resolve_event(args: argparse.Namespace, observations: list[Observation]) -> str:
    if getattr(args, "event", None):
        return args.event
    if observations:
        return observations[0].event_id
    return "unknown"


def build_team_stats(
    args: argparse.Namespace,
    config: AnalyticsConfig,
) -> tuple[str, list[Observation], dict[int, TeamStats]]:
    """
    Load observations and aggregate stats for every scouted team.

    Unscouted teams are not in the map; prediction and simulation use
    the default profile for them.

    Returns:
        Tuple of (event id, chronologically sorted observations, stats map)
    """
    observations = sort_chronologically(load_observations(args.observations))
    event_id = _resolve_event(args, observations)
    observations = [o for o in observations if o.event_id == event_id]

    team_numbers = sorted({o.team_number for o in observations})
    existing = load_team_stats(args.prior_stats) if getattr(args, "prior_stats", None) else None

    ratings = config.ratings
    stats_map = calculate_all_team_stats(
        team_numbers,
        event_id,
        observations,
        existing_stats=existing,
        default_rating=ratings.initial_rating,
        momentum_window=ratings.momentum_window,
        baseline_score=ratings.baseline_match_score,
        rating_floor=ratings.rating_floor,
    )
    return event_id, observations, stats_map


def cmd_stats(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Aggregate team stats and print a ranking table."""
    event_id, observations, stats_map = build_team_stats(args, config)

    print_header(f"Team Stats ({event_id}, {len(observations)} observations)")
    print(f"{'Team':<7} {'MP':<4} {'Avg Pts':<9} {'Auto':<6} {'TeleOp':<7} {'Hang%':<7} {'Cons':<6} {'Rating':<7}")
    print("-" * 60)

    ranked = sorted(stats_map.values(), key=lambda s: s.avg_total_points, reverse=True)
    for s in ranked:
        print(
            f"{s.team_number:<7} {s.matches_played:<4} {s.avg_total_points:<9.1f} "
            f"{s.avg_auto_pieces:<6.1f} {s.avg_teleop_pieces:<7.1f} "
            f"{s.hang_success_rate * 100:<7.0f} {s.consistency:<6.2f} {s.elo_rating:<7.0f}"
        )

    if args.output:
        save_team_stats(stats_map, args.output)
        print()
        print(f"Stats saved to: {args.output}")

    return 0


def cmd_predict(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Predict scheduled matches from team stats."""
    _, _, stats_map = build_team_stats(args, config)
    matches = load_matches(args.matches)

    status = None if args.all else MatchStatus.PENDING
    predictions = predict_matches(matches, stats_map, status=status)

    print_header(f"Match Predictions ({len(predictions)} matches)")
    if not predictions:
        print("No matches to predict.")
        return 0

    print(f"{'Match':<7} {'Red':<14} {'Blue':<14} {'Red%':<7} {'Score':<10} {'Band':<5}")
    print("-" * 60)
    for match, prediction in predictions:
        red = ",".join(str(t) for t in match.red_alliance)
        blue = ",".join(str(t) for t in match.blue_alliance)
        print(
            f"{match.match_number:<7} {red:<14} {blue:<14} "
            f"{prediction.red_win_probability * 100:<7.1f} "
            f"{prediction.predicted_red_score:>3}-{prediction.predicted_blue_score:<6} "
            f"±{prediction.confidence_band:.0%}"
        )

    return 0


def cmd_simulate(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Simulate a scheduled match by id, or a hypothetical one between two alliances."""
    event_id, _, stats_map = build_team_stats(args, config)
    iterations = _iterations(args, config.simulation.default_iterations)

    engine = MonteCarloEngine(
        SimulationConfig(iterations=iterations, random_seed=_resolve_seed(args, config))
    )

    if args.match_id:
        if not args.matches:
            print("ERROR: --match-id needs --matches")
            return 1
        match = next((m for m in load_matches(args.matches) if m.id == args.match_id), None)
        if match is None:
            print(f"ERROR: Match {args.match_id} not found in {args.matches}")
            return 1
        result = engine.simulate(match, stats_map, iterations)
        red, blue = match.red_alliance, match.blue_alliance
    elif args.red and args.blue:
        red, blue = args.red, args.blue
        scenario = analyze_what_if_scenario(
            "CLI", red, blue, event_id, stats_map, iterations=iterations, engine=engine
        )
        result = scenario.result
    else:
        print("ERROR: Give --match-id, or both --red and --blue")
        return 1

    summary = result.get_summary()

    print_header(f"Simulation: {red} vs {blue} ({iterations:,} iterations)")
    print(f"  Red win probability:  {summary['red_win_probability']:.1%}")
    print(f"  Blue win probability: {summary['blue_win_probability']:.1%}")
    print(f"  Tie probability:      {summary['tie_probability']:.1%}")
    print()
    print(f"  Predicted score: {summary['predicted_red_score']} - {summary['predicted_blue_score']}")
    print(f"  Red range:  {summary['red_score_range'][0]}-{summary['red_score_range'][1]}")
    print(f"  Blue range: {summary['blue_score_range'][0]}-{summary['blue_score_range'][1]}")
    print(f"  Variance: {summary['variance']}")
    if result.is_high_variance:
        print()
        print("  Toss-up: neither alliance is a clear favorite")

    return 0


def cmd_optimize(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Rank every alliance drawn from a pool against an opponent."""
    event_id, _, stats_map = build_team_stats(args, config)
    iterations = _iterations(args, config.simulation.scenario_iterations)

    combinations = find_optimal_alliance(
        args.available,
        args.opponent,
        event_id,
        stats_map,
        alliance_size=args.size,
        iterations=iterations,
        max_combinations=config.simulation.max_combinations,
        rng=np.random.default_rng(_resolve_seed(args, config)),
    )

    print_header(f"Optimal Alliances vs {args.opponent}")
    print(f"{'#':<4} {'Alliance':<22} {'Win%':<8} {'Exp Score':<10} {'Variance':<8}")
    print("-" * 60)
    for position, combo in enumerate(combinations[: args.top], start=1):
        teams = ",".join(str(t) for t in combo.teams)
        print(
            f"{position:<4} {teams:<22} {combo.win_probability * 100:<8.1f} "
            f"{combo.expected_score:<10} {combo.variance:<8.1f}"
        )

    return 0


def cmd_bracket(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Predict playoff quarterfinals for eight seeded alliances."""
    seeds = load_alliances(args.seeds)
    event_id, _, stats_map = build_team_stats(args, config)

    rounds = simulate_playoff_bracket(
        seeds,
        event_id,
        stats_map,
        iterations=_iterations(args, config.simulation.scenario_iterations),
        rng=np.random.default_rng(_resolve_seed(args, config)),
    )
    if not rounds:
        print(f"ERROR: Bracket needs 8 alliances, got {len(seeds)}")
        return 1

    for playoff_round in rounds:
        print_header(playoff_round.round)
        for m in playoff_round.matches:
            print(
                f"  QF{m.match_number}: {m.red_alliance} vs {m.blue_alliance} -> "
                f"{m.predicted_winner.upper()} ({m.red_win_probability:.1%} red)"
            )
        print()

    return 0


def cmd_insights(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Print the full insight report for one team."""
    _, observations, stats_map = build_team_stats(args, config)
    team = args.team
    stats = stats_map.get(team)
    if stats is None or stats.matches_played == 0:
        print(f"ERROR: No observations for team {team}")
        return 1

    classification = classify_team(team, stats, observations)
    trend = analyze_performance_trend(team, observations, stats)
    anomalies = detect_anomalies(team, observations, stats)
    mechanical = predict_mechanical_issues(team, observations)
    phases = phase_averages(build_performance_timeline(team, observations))

    print_header(f"Team {team} Insights")
    print(f"Archetype: {classification.archetype.value} ({classification.confidence:.0%})")
    for line in classification.characteristics:
        print(f"  * {line}")
    if classification.strengths:
        print(f"Strengths: {', '.join(classification.strengths)}")
    if classification.weaknesses:
        print(f"Weaknesses: {', '.join(classification.weaknesses)}")
    print()

    print(f"Phase averages: auto {phases['auto']}, teleop {phases['teleop']}, endgame {phases['endgame']}")
    print(
        f"Trend: {trend.trend.value} (strength {trend.trend_strength:+.2f}), "
        f"next match ~{trend.next_match_score} pts"
    )
    print()

    print(f"Anomalies ({len(anomalies)}):")
    for anomaly in anomalies:
        print(f"  [{anomaly.severity.value}] {anomaly.match_id}: {anomaly.description}")

    if mechanical.has_concern:
        print()
        print(f"Mechanical concerns ({mechanical.confidence:.0%} confidence):")
        for concern in mechanical.concerns:
            print(f"  ! {concern}")

    partners = recommend_alliance_partners(team, stats_map.keys(), stats_map, observations)
    if partners:
        print()
        print("Top partners:")
        for rec in partners[: args.top]:
            notes = ", ".join(rec.synergies + rec.reasons) or "-"
            print(f"  {rec.team_number:<7} {rec.score:<8.0f} {notes}")

    return 0


def cmd_ratings(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Compute head-to-head ratings from played matches."""
    matches = load_matches(args.matches)
    ledger = RatingLedger(
        initial_rating=config.ratings.initial_rating,
        k_factor=config.ratings.k_factor,
        rating_floor=config.ratings.rating_floor,
    )
    applied = ledger.process_matches(matches)

    print_header(f"Match Ratings ({applied} of {len(matches)} matches applied)")
    for position, (team, rating) in enumerate(ledger.rankings()[: args.top], start=1):
        print(f"  {position:>3}. {team:<7} {rating:.0f}")

    return 0


def cmd_picklist(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    """Build a pick list of the best-fitting available teams."""
    _, _, stats_map = build_team_stats(args, config)

    pick_list = PickList()
    for team in rank_available_teams(stats_map.keys(), stats_map, my_team_number=args.team)[: args.top]:
        pick_list.add(team)

    my_stats = stats_map.get(args.team) if args.team is not None else None
    print_header(f"Pick List ({len(pick_list)} teams)")
    for entry in pick_list.entries:
        stats = stats_map[entry.team_number]
        badge = compatibility_badge(my_stats, stats)
        print(
            f"  {entry.rank:>3}. {entry.team_number:<7} {stats.avg_total_points:>6.1f} pts"
            + (f"  [{badge}]" if badge else "")
        )

    if args.output:
        pick_list.export_csv(args.output, stats_map)
        print()
        print(f"Pick list saved to: {args.output}")

    return 0


COMMANDS = {
    "stats": cmd_stats,
    "predict": cmd_predict,
    "simulate": cmd_simulate,
    "optimize": cmd_optimize,
    "bracket": cmd_bracket,
    "insights": cmd_insights,
    "ratings": cmd_ratings,
    "picklist": cmd_picklist,
}


def _add_observation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--observations",
        type=Path,
        required=True,
        help="Scouting observations file (JSON or YAML)",
    )
    parser.add_argument(
        "--event",
        type=str,
        default=None,
        help="Event ID to analyze (default: event of the first observation)",
    )
    parser.add_argument(
        "--prior-stats",
        type=Path,
        default=None,
        help="Previously saved team stats to carry ratings forward from",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="FTC Scouting Analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Team stats table, saved for the next event day
  python -m cli.main stats --observations data/obs.json --output data/stats.json

  # Predict pending qualification matches
  python -m cli.main predict --observations data/obs.json --matches data/matches.json

  # Scheduled match by id, or a what-if match (reproducible with --seed)
  python -m cli.main simulate --observations data/obs.json --matches data/matches.json --match-id Q12
  python -m cli.main --seed 42 simulate --observations data/obs.json --red 1234 5678 --blue 1111 2222

  # Best two-team alliance from a pool
  python -m cli.main optimize --observations data/obs.json --available 1 2 3 4 5 --opponent 8 9

  # Playoff quarterfinals
  python -m cli.main bracket --observations data/obs.json --seeds data/alliances.yaml

  # Team report, ratings and pick list
  python -m cli.main insights --observations data/obs.json --team 1234
  python -m cli.main ratings --matches data/matches.json
  python -m cli.main picklist --observations data/obs.json --team 1234 --output picklist.csv
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Analytics config file (default: config/analytics.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for simulations (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Aggregate team stats")
    _add_observation_args(stats_parser)
    stats_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write team stats JSON to this path",
    )

    # Predict command
    predict_parser = subparsers.add_parser("predict", help="Predict scheduled matches")
    _add_observation_args(predict_parser)
    predict_parser.add_argument("--matches", type=Path, required=True, help="Matches file")
    predict_parser.add_argument(
        "--all",
        action="store_true",
        help="Predict every match, not only pending ones",
    )

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Monte Carlo match simulation")
    _add_observation_args(sim_parser)
    sim_parser.add_argument("--match-id", type=str, default=None, help="Match to simulate")
    sim_parser.add_argument("--matches", type=Path, default=None, help="Matches file for --match-id")
    sim_parser.add_argument("--red", type=int, nargs="+", default=None, help="Red team numbers")
    sim_parser.add_argument("--blue", type=int, nargs="+", default=None, help="Blue team numbers")
    sim_parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Simulation iterations (default: from config)",
    )

    # Optimize command
    opt_parser = subparsers.add_parser("optimize", help="Find the best alliance from a pool")
    _add_observation_args(opt_parser)
    opt_parser.add_argument("--available", type=int, nargs="+", required=True, help="Team pool")
    opt_parser.add_argument("--opponent", type=int, nargs="+", required=True, help="Opposing alliance")
    opt_parser.add_argument("--size", type=int, default=2, help="Teams per alliance (default: 2)")
    opt_parser.add_argument("--iterations", type=int, default=None, help="Iterations per combination")
    opt_parser.add_argument("--top", type=int, default=10, help="Combinations to show (default: 10)")

    # Bracket command
    bracket_parser = subparsers.add_parser("bracket", help="Predict playoff quarterfinals")
    _add_observation_args(bracket_parser)
    bracket_parser.add_argument(
        "--seeds",
        type=Path,
        required=True,
        help="File with 8 alliances in seed order",
    )
    bracket_parser.add_argument("--iterations", type=int, default=None, help="Iterations per match")

    # Insights command
    insights_parser = subparsers.add_parser("insights", help="Team insight report")
    _add_observation_args(insights_parser)
    insights_parser.add_argument("--team", type=int, required=True, help="Team number")
    insights_parser.add_argument("--top", type=int, default=5, help="Partners to show (default: 5)")

    # Ratings command
    ratings_parser = subparsers.add_parser("ratings", help="Head-to-head ratings from results")
    ratings_parser.add_argument("--matches", type=Path, required=True, help="Matches file")
    ratings_parser.add_argument("--top", type=int, default=20, help="Teams to show (default: 20)")

    # Pick list command
    pick_parser = subparsers.add_parser("picklist", help="Build an alliance selection pick list")
    _add_observation_args(pick_parser)
    pick_parser.add_argument("--team", type=int, default=None, help="Your team number")
    pick_parser.add_argument("--top", type=int, default=12, help="Teams to list (default: 12)")
    pick_parser.add_argument("--output", type=Path, default=None, help="Write CSV to this path")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
        return command(args, config)
    except (AnalyticsError, OSError, ValueError) as e:
        logger.debug(f"{args.command} failed: {e!r}")
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
