"""
Pytest Configuration and Fixtures

Shared fixtures and configuration for the FTC scouting analytics test suite.
"""

from collections.abc import Callable
from typing import Any

import numpy as np
import pytest

from scouting.models.match import Match, MatchStatus
from scouting.models.observation import HangLevel, Observation
from scouting.models.team import TeamStats

EVENT_ID = "2025-usca-test"


@pytest.fixture
def event_id() -> str:
    return EVENT_ID


@pytest.fixture
def make_observation() -> Callable[..., Observation]:
    """Factory for observations; created_at defaults to the match number."""

    def _make(team_number: int = 1234, match_number: int = 1, **overrides: Any) -> Observation:
        fields: dict[str, Any] = {
            "id": f"obs-{team_number}-{match_number}",
            "event_id": EVENT_ID,
            "match_id": f"Q{match_number}",
            "team_number": team_number,
            "created_at": match_number * 1000,
            "updated_at": match_number * 1000,
        }
        fields.update(overrides)
        return Observation(**fields)

    return _make


@pytest.fixture
def strong_observations(make_observation) -> list[Observation]:
    """Five matches of a high-scoring team (1234)."""
    return [
        make_observation(
            1234,
            n,
            auto_sample_scored=3,
            auto_specimen_scored=1,
            auto_parked=True,
            teleop_sample_scored=6,
            teleop_specimen_scored=2,
            endgame_hanging=HangLevel.HIGH,
            driver_skill=5,
            robot_speed=4,
        )
        for n in range(1, 6)
    ]


@pytest.fixture
def make_stats() -> Callable[..., TeamStats]:
    """Factory for TeamStats with a middle-of-the-pack profile."""

    def _make(team_number: int = 1234, **overrides: Any) -> TeamStats:
        fields: dict[str, Any] = {
            "team_number": team_number,
            "event_id": EVENT_ID,
            "matches_played": 5,
            "avg_auto_samples": 2,
            "avg_auto_specimens": 1,
            "avg_teleop_samples": 4,
            "avg_teleop_specimens": 2,
            "avg_total_points": 60,
            "auto_success_rate": 0.6,
            "hang_success_rate": 0.5,
            "avg_driver_skill": 3,
            "avg_robot_speed": 3,
            "avg_defense_rating": 3,
            "elo_rating": 1500,
            "elo_trend": [1500],
            "consistency": 0.6,
        }
        fields.update(overrides)
        return TeamStats(**fields)

    return _make


@pytest.fixture
def make_match() -> Callable[..., Match]:
    def _make(
        red: list[int] | None = None,
        blue: list[int] | None = None,
        match_number: int = 1,
        **overrides: Any,
    ) -> Match:
        fields: dict[str, Any] = {
            "id": f"match-{match_number}",
            "event_id": EVENT_ID,
            "match_number": match_number,
            "red_alliance": red if red is not None else [1111, 2222],
            "blue_alliance": blue if blue is not None else [3333, 4444],
            "status": MatchStatus.PENDING,
        }
        fields.update(overrides)
        return Match(**fields)

    return _make


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator for reproducible simulations."""
    return np.random.default_rng(42)
