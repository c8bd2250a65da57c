"""
Observation Data Model

Pydantic model for a single team's scouted performance in a single match.
"""

from enum import Enum

from pydantic import ConfigDict, Field

from scouting.models.base import ScoutingModel, timestamp_ms


class Alliance(str, Enum):
    """Alliance color."""

    RED = "red"
    BLUE = "blue"


class HangLevel(str, Enum):
    """Endgame hang state."""

    NONE = "none"
    LOW = "low"
    HIGH = "high"


class SyncStatus(str, Enum):
    """Sync state of a record owned by a scouting device."""

    PENDING = "pending"
    SYNCED = "synced"
    CONFLICT = "conflict"


class Observation(ScoutingModel):
    """
    Scouted performance of one team in one match.

    Records are immutable once created; only the sync status moves, via
    with_sync_status().
    """

    model_config = ConfigDict(frozen=True)

    # Identifiers
    id: str = ""
    event_id: str
    match_id: str
    team_number: int
    alliance: Alliance = Alliance.RED
    scout_id: str = ""
    scout_name: str = ""
    device_id: str = ""

    # Autonomous
    auto_sample_scored: int = Field(default=0, ge=0)
    auto_specimen_scored: int = Field(default=0, ge=0)
    auto_parked: bool = False
    auto_notes: str = ""

    # TeleOp
    teleop_sample_scored: int = Field(default=0, ge=0)
    teleop_specimen_scored: int = Field(default=0, ge=0)
    teleop_notes: str = ""

    # Endgame
    endgame_parked: bool = False
    endgame_hanging: HangLevel = HangLevel.NONE
    endgame_notes: str = ""

    # Subjective ratings (1-5)
    driver_skill: int = Field(default=3, ge=1, le=5)
    robot_speed: int = Field(default=3, ge=1, le=5)
    defense_rating: int = Field(default=3, ge=1, le=5)
    overall_notes: str = ""

    # Sync metadata
    local_timestamp: int = Field(default_factory=timestamp_ms)
    server_timestamp: int | None = None
    sync_status: SyncStatus = SyncStatus.PENDING
    version: int = 1

    created_at: int = Field(default_factory=timestamp_ms)
    updated_at: int = Field(default_factory=timestamp_ms)

    @property
    def auto_pieces(self) -> int:
        """Game pieces scored in autonomous."""
        return self.auto_sample_scored + self.auto_specimen_scored

    @property
    def teleop_pieces(self) -> int:
        """Game pieces scored in teleop."""
        return self.teleop_sample_scored + self.teleop_specimen_scored

    @property
    def did_hang(self) -> bool:
        """Whether the robot finished hanging at any level."""
        return self.endgame_hanging != HangLevel.NONE

    def with_sync_status(self, status: SyncStatus) -> "Observation":
        """Return a copy with a new sync status and a bumped version."""
        return self.model_copy(
            update={
                "sync_status": status,
                "version": self.version + 1,
                "updated_at": timestamp_ms(),
            }
        )


def sort_chronologically(observations: list[Observation]) -> list[Observation]:
    """Sort observations oldest first by creation time."""
    return sorted(observations, key=lambda o: o.created_at)
