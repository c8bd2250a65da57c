"""
Match Scoring Module

Converts a scouted observation into per-phase points using the
INTO THE DEEP point table.
"""

from dataclasses import dataclass

from scouting.models.observation import HangLevel, Observation

# Autonomous
AUTO_SAMPLE_POINTS = 6
AUTO_SPECIMEN_POINTS = 10
AUTO_PARK_POINTS = 3

# TeleOp
TELEOP_SAMPLE_POINTS = 4
TELEOP_SPECIMEN_POINTS = 8

# Endgame
ENDGAME_PARK_POINTS = 3
HANG_POINTS = {
    HangLevel.NONE: 0,
    HangLevel.LOW: 15,
    HangLevel.HIGH: 30,
}


@dataclass(frozen=True)
class PerformanceBreakdown:
    """Points earned by one team in one match, by phase."""

    auto_points: int
    teleop_points: int
    endgame_points: int
    driver_skill: int
    robot_speed: int
    defense_rating: int

    @property
    def total_points(self) -> int:
        """Total points across all phases."""
        return self.auto_points + self.teleop_points + self.endgame_points


def piece_points(
    auto_samples: int,
    auto_specimens: int,
    teleop_samples: int,
    teleop_specimens: int,
) -> tuple[int, int]:
    """Auto and teleop points for game pieces only (no park bonus)."""
    auto = auto_samples * AUTO_SAMPLE_POINTS + auto_specimens * AUTO_SPECIMEN_POINTS
    teleop = teleop_samples * TELEOP_SAMPLE_POINTS + teleop_specimens * TELEOP_SPECIMEN_POINTS
    return auto, teleop


def endgame_points(parked: bool, hanging: HangLevel) -> int:
    """Endgame points: park bonus plus hang bonus."""
    return (ENDGAME_PARK_POINTS if parked else 0) + HANG_POINTS[hanging]


def calculate_performance(observation: Observation) -> PerformanceBreakdown:
    """
    Score a single observation.

    Args:
        observation: Scouted match performance

    Returns:
        PerformanceBreakdown with points per phase
    """
    auto, teleop = piece_points(
        observation.auto_sample_scored,
        observation.auto_specimen_scored,
        observation.teleop_sample_scored,
        observation.teleop_specimen_scored,
    )
    if observation.auto_parked:
        auto += AUTO_PARK_POINTS

    return PerformanceBreakdown(
        auto_points=auto,
        teleop_points=teleop,
        endgame_points=endgame_points(observation.endgame_parked, observation.endgame_hanging),
        driver_skill=observation.driver_skill,
        robot_speed=observation.robot_speed,
        defense_rating=observation.defense_rating,
    )
