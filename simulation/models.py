"""
Simulation Data Models

Pydantic and dataclass models for the Monte Carlo match simulator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_ITERATIONS = 10000
SCENARIO_ITERATIONS = 5000


class SimulationConfig(BaseModel):
    """Configuration for a simulation run."""

    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=1, le=1_000_000)
    random_seed: int | None = None

    # Width of the reported score interval, in standard deviations
    confidence_multiplier: float = Field(default=1.96, gt=0)


@dataclass
class ConfidenceInterval:
    """Score interval per alliance (mean +/- multiplier * std dev)."""

    red_score_low: int = 0
    red_score_high: int = 0
    blue_score_low: int = 0
    blue_score_high: int = 0


@dataclass
class SimulationResult:
    """Complete results from a simulation run."""

    match_id: str
    simulations: int
    red_wins: int
    ties: int = 0

    # Win probability; ties count toward blue so the two always sum to 1
    red_win_probability: float = 0.0
    blue_win_probability: float = 0.0

    predicted_red_score: int = 0
    predicted_blue_score: int = 0
    confidence_interval: ConfidenceInterval = field(default_factory=ConfidenceInterval)

    # Mean of the two alliance score standard deviations
    variance: float = 0.0

    def __post_init__(self) -> None:
        """Calculate derived metrics."""
        if self.simulations > 0:
            self.red_win_probability = self.red_wins / self.simulations
            self.blue_win_probability = (self.simulations - self.red_wins) / self.simulations

    @property
    def tie_probability(self) -> float:
        """Share of trials that ended level."""
        return self.ties / self.simulations if self.simulations > 0 else 0.0

    @property
    def predicted_winner(self) -> str:
        """Alliance color favored by the simulation."""
        return "red" if self.red_win_probability > 0.5 else "blue"

    @property
    def is_high_variance(self) -> bool:
        """Check if the match is close to a coin flip."""
        return abs(self.red_win_probability - self.blue_win_probability) < 0.1

    def get_summary(self) -> dict[str, Any]:
        """Get summary dictionary for reporting."""
        return {
            "match_id": self.match_id,
            "simulations": self.simulations,
            "red_win_probability": round(self.red_win_probability, 4),
            "blue_win_probability": round(self.blue_win_probability, 4),
            "tie_probability": round(self.tie_probability, 4),
            "predicted_red_score": self.predicted_red_score,
            "predicted_blue_score": self.predicted_blue_score,
            "red_score_range": (
                self.confidence_interval.red_score_low,
                self.confidence_interval.red_score_high,
            ),
            "blue_score_range": (
                self.confidence_interval.blue_score_low,
                self.confidence_interval.blue_score_high,
            ),
            "variance": round(self.variance, 2),
        }


@dataclass
class WhatIfScenario:
    """A hypothetical match between two chosen alliances."""

    scenario_name: str
    red_alliance: list[int]
    blue_alliance: list[int]
    result: SimulationResult


@dataclass
class AllianceCombination:
    """One candidate alliance evaluated against a fixed opponent."""

    teams: list[int]
    expected_score: int
    win_probability: float
    variance: float


@dataclass
class PlayoffMatchPrediction:
    """Predicted outcome of one bracket match."""

    match_number: int
    red_alliance: list[int]
    blue_alliance: list[int]
    red_win_probability: float
    predicted_winner: str  # "red" or "blue"


@dataclass
class PlayoffRound:
    """Predictions for one bracket round."""

    round: str
    matches: list[PlayoffMatchPrediction] = field(default_factory=list)
