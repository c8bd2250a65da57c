"""
Match Data Model

Pydantic models for scheduled and played matches and their predictions.
"""

from enum import Enum

from pydantic import Field

from scouting.models.base import ScoutingModel, timestamp_ms


class MatchType(str, Enum):
    """Match type enumeration."""

    QUALIFICATION = "qualification"
    SEMIFINAL = "semifinal"
    FINAL = "final"


class MatchStatus(str, Enum):
    """Match status enumeration."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Match(ScoutingModel):
    """A match between a red and a blue alliance."""

    id: str
    event_id: str
    match_number: int = 0
    match_type: MatchType = MatchType.QUALIFICATION
    red_alliance: list[int] = Field(default_factory=list)
    blue_alliance: list[int] = Field(default_factory=list)
    red_score: int | None = None
    blue_score: int | None = None
    scheduled_time: int | None = None
    actual_time: int | None = None
    status: MatchStatus = MatchStatus.PENDING
    created_at: int = Field(default_factory=timestamp_ms)
    updated_at: int = Field(default_factory=timestamp_ms)

    @property
    def teams(self) -> list[int]:
        """All competing team numbers, red first."""
        return self.red_alliance + self.blue_alliance

    @property
    def has_result(self) -> bool:
        """Whether both alliance scores are recorded."""
        return self.red_score is not None and self.blue_score is not None


class PredictionFactors(ScoutingModel):
    """Inputs behind a closed-form match prediction."""

    red_elo: int = 0
    blue_elo: int = 0
    red_momentum: float = 0.0
    blue_momentum: float = 0.0


class MatchPrediction(ScoutingModel):
    """Closed-form prediction of a match outcome."""

    match_id: str
    red_win_probability: float
    blue_win_probability: float
    predicted_red_score: int
    predicted_blue_score: int
    confidence_band: float  # +/- around the win probability, lower is tighter
    factors: PredictionFactors = Field(default_factory=PredictionFactors)
    created_at: int = Field(default_factory=timestamp_ms)

    @property
    def predicted_winner(self) -> str:
        """Alliance color favored by the prediction."""
        return "red" if self.red_win_probability > self.blue_win_probability else "blue"
