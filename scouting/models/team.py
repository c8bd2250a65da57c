"""
Team Statistics Model

Pydantic model for a team's derived performance profile at an event, and
the default profile used for teams nobody has scouted yet.
"""

from collections.abc import Mapping

from pydantic import Field

from scouting.models.base import ScoutingModel, timestamp_ms

INITIAL_ELO = 1500
RATING_FLOOR = 1000  # No rating ever drops below this


class TeamStats(ScoutingModel):
    """
    Aggregated team performance at one event.

    Always recomputed from the full observation set; never mutated
    incrementally.
    """

    team_number: int
    event_id: str
    matches_played: int = 0

    # Averages
    avg_auto_samples: float = 0.0
    avg_auto_specimens: float = 0.0
    avg_teleop_samples: float = 0.0
    avg_teleop_specimens: float = 0.0
    avg_total_points: float = 0.0

    # Success rates (0-1)
    auto_success_rate: float = 0.0
    hang_success_rate: float = 0.0

    # Subjective ratings
    avg_driver_skill: float = 0.0
    avg_robot_speed: float = 0.0
    avg_defense_rating: float = 0.0

    # Elo-style rating, trend is oldest to newest
    elo_rating: float = INITIAL_ELO
    elo_trend: list[float] = Field(default_factory=lambda: [INITIAL_ELO])

    consistency: float = Field(default=0.0, ge=0.0, le=1.0)

    last_updated: int = Field(default_factory=timestamp_ms)

    @property
    def avg_auto_pieces(self) -> float:
        """Average game pieces scored in autonomous."""
        return self.avg_auto_samples + self.avg_auto_specimens

    @property
    def avg_teleop_pieces(self) -> float:
        """Average game pieces scored in teleop."""
        return self.avg_teleop_samples + self.avg_teleop_specimens

    @property
    def momentum(self) -> float:
        """Average rating change per trend point, 0 without a trend."""
        if len(self.elo_trend) < 2:
            return 0.0
        return (self.elo_trend[-1] - self.elo_trend[0]) / len(self.elo_trend)


def default_team_stats(team_number: int, event_id: str) -> TeamStats:
    """Profile assumed for a team with no scouting data."""
    return TeamStats(
        team_number=team_number,
        event_id=event_id,
        matches_played=0,
        avg_auto_samples=2,
        avg_auto_specimens=1,
        avg_teleop_samples=4,
        avg_teleop_specimens=2,
        avg_total_points=50,
        auto_success_rate=0.5,
        hang_success_rate=0.3,
        avg_driver_skill=3,
        avg_robot_speed=3,
        avg_defense_rating=3,
        elo_rating=INITIAL_ELO,
        elo_trend=[INITIAL_ELO],
        consistency=0.5,
    )


def resolve_team_stats(
    stats_map: Mapping[int, TeamStats],
    team_number: int,
    event_id: str,
) -> TeamStats:
    """Look up a team's stats, falling back to the default profile."""
    stats = stats_map.get(team_number)
    if stats is None:
        return default_team_stats(team_number, event_id)
    return stats
