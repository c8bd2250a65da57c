"""
CLI Module for FTC Scouting Analytics

Provides the command-line interface for team stats, match predictions,
Monte Carlo simulations and alliance selection reports.

Usage:
    python -m cli.main --help
"""

from cli.main import build_parser, main

__all__ = ["build_parser", "main"]
