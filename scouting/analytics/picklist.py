"""
Alliance Selection Helpers

Pick list management, needs-based compatibility ranking, opponent
comparison and CSV export for alliance selection.
"""

import csv
import io
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from scouting.models.base import round_half_up
from scouting.models.team import TeamStats

# Needs-based compatibility weights
AUTO_NEED_THRESHOLD = 2  # My avg auto samples below this
HANG_NEED_THRESHOLD = 0.5  # My hang rate below this
TELEOP_NEED_THRESHOLD = 3  # My avg teleop samples below this
AUTO_NEED_WEIGHT = 50
HANG_NEED_WEIGHT = 200
TELEOP_NEED_WEIGHT = 30

COMPARISON_NEUTRAL_PCT = 10

CSV_HEADERS = ["Rank", "Team Number", "Team Name", "ELO", "Avg Points", "Consistency"]


@dataclass
class PickListEntry:
    """A team on the pick list."""

    team_number: int
    rank: int
    notes: str = ""


@dataclass
class PickList:
    """Ordered alliance selection pick list; ranks always run 1..n."""

    entries: list[PickListEntry] = field(default_factory=list)

    def __contains__(self, team_number: int) -> bool:
        return any(e.team_number == team_number for e in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def team_numbers(self) -> list[int]:
        return [e.team_number for e in self.entries]

    def add(self, team_number: int, notes: str = "") -> PickListEntry:
        """Append a team at the bottom of the list."""
        if team_number in self:
            raise ValueError(f"Team {team_number} is already on the pick list")
        entry = PickListEntry(team_number=team_number, rank=len(self.entries) + 1, notes=notes)
        self.entries.append(entry)
        return entry

    def remove(self, team_number: int) -> None:
        """Remove a team and close the gap in the ranking."""
        self.entries = [e for e in self.entries if e.team_number != team_number]
        self._rerank()

    def move_up(self, index: int) -> None:
        """Swap the entry at index with the one above it."""
        if 0 < index < len(self.entries):
            self.entries[index - 1], self.entries[index] = self.entries[index], self.entries[index - 1]
            self._rerank()

    def move_down(self, index: int) -> None:
        """Swap the entry at index with the one below it."""
        if 0 <= index < len(self.entries) - 1:
            self.entries[index + 1], self.entries[index] = self.entries[index], self.entries[index + 1]
            self._rerank()

    def _rerank(self) -> None:
        for position, entry in enumerate(self.entries, start=1):
            entry.rank = position

    def to_csv(
        self,
        team_stats_map: Mapping[int, TeamStats],
        team_names: Mapping[int, str] | None = None,
    ) -> str:
        """Render the pick list as CSV text."""
        team_names = team_names or {}
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for entry in self.entries:
            stats = team_stats_map.get(entry.team_number)
            writer.writerow(
                [
                    entry.rank,
                    entry.team_number,
                    team_names.get(entry.team_number, "Unknown"),
                    round_half_up(stats.elo_rating) if stats else 0,
                    f"{stats.avg_total_points:.1f}" if stats else "0.0",
                    f"{(stats.consistency if stats else 0) * 100:.0f}%",
                ]
            )
        return buffer.getvalue()

    def export_csv(
        self,
        path: str | Path,
        team_stats_map: Mapping[int, TeamStats],
        team_names: Mapping[int, str] | None = None,
    ) -> Path:
        """Write the pick list CSV to a file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_csv(team_stats_map, team_names))
        logger.info(f"Exported pick list ({len(self.entries)} teams) to {path}")
        return path


def compatibility_score(my_stats: TeamStats | None, their_stats: TeamStats | None) -> float:
    """
    Needs-based value of a partner.

    Starts from the partner's rating and adds weight for the capabilities
    my team lacks. Without my stats, the rating alone is used.
    """
    if their_stats is None:
        return 0.0
    score = their_stats.elo_rating
    if my_stats is None:
        return score

    if my_stats.avg_auto_samples < AUTO_NEED_THRESHOLD:
        score += their_stats.avg_auto_samples * AUTO_NEED_WEIGHT
    if my_stats.hang_success_rate < HANG_NEED_THRESHOLD:
        score += their_stats.hang_success_rate * HANG_NEED_WEIGHT
    if my_stats.avg_teleop_samples < TELEOP_NEED_THRESHOLD:
        score += their_stats.avg_teleop_samples * TELEOP_NEED_WEIGHT
    return score


def compatibility_badge(my_stats: TeamStats | None, their_stats: TeamStats | None) -> str | None:
    """Headline reason a partner fits my team's needs, if any."""
    if my_stats is None or their_stats is None:
        return None

    if my_stats.avg_auto_samples < AUTO_NEED_THRESHOLD and their_stats.avg_auto_samples > 2.5:
        return "Strong Auto"
    if my_stats.hang_success_rate < HANG_NEED_THRESHOLD and their_stats.hang_success_rate > 0.8:
        return "Reliable Hang"
    if my_stats.avg_teleop_samples < TELEOP_NEED_THRESHOLD and their_stats.avg_teleop_samples > 4:
        return "High TeleOp"
    return None


def rank_available_teams(
    team_numbers: Iterable[int],
    team_stats_map: Mapping[int, TeamStats],
    my_team_number: int | None = None,
    pick_list: PickList | None = None,
) -> list[int]:
    """
    Teams still available to pick, best fit first.

    Excludes my own team and teams already on the pick list.
    """
    my_stats = team_stats_map.get(my_team_number) if my_team_number is not None else None
    available = [
        t for t in team_numbers
        if t != my_team_number and (pick_list is None or t not in pick_list)
    ]
    return sorted(
        available,
        key=lambda t: compatibility_score(my_stats, team_stats_map.get(t)),
        reverse=True,
    )


@dataclass
class MetricComparison:
    """My team versus an opponent on one metric."""

    label: str
    my_value: float
    their_value: float
    status: str  # "neutral", "threat", "advantage"


# (label, attribute, higher is better)
COMPARISON_METRICS = [
    ("Avg Points", "avg_total_points", True),
    ("Auto Samples", "avg_auto_samples", True),
    ("Auto Specimens", "avg_auto_specimens", True),
    ("TeleOp Samples", "avg_teleop_samples", True),
    ("TeleOp Specimens", "avg_teleop_specimens", True),
    ("Hang Rate", "hang_success_rate", True),
    ("Consistency", "consistency", True),
    ("Driver Skill", "avg_driver_skill", True),
    ("Defense", "avg_defense_rating", True),
]


def compare_metric(
    label: str,
    my_value: float,
    their_value: float,
    higher_is_better: bool = True,
) -> MetricComparison:
    """Classify one metric as neutral (<10% apart), threat or advantage."""
    diff = their_value - my_value
    percent_diff = diff / my_value * 100 if my_value > 0 else 0.0

    if abs(percent_diff) < COMPARISON_NEUTRAL_PCT:
        status = "neutral"
    else:
        they_are_better = diff > 0 if higher_is_better else diff < 0
        status = "threat" if they_are_better else "advantage"
    return MetricComparison(label, my_value, their_value, status)


def compare_teams(my_stats: TeamStats, their_stats: TeamStats) -> list[MetricComparison]:
    """Compare my team against an opponent across the standard metrics."""
    return [
        compare_metric(label, getattr(my_stats, attr), getattr(their_stats, attr), higher)
        for label, attr, higher in COMPARISON_METRICS
    ]
