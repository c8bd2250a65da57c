"""
Data Loader

Reads scouting records exported by the scouting app from JSON or YAML
files and validates them into models.

A file holds either a list of records or a mapping with the list under
"observations", "matches", "teams" or "alliances".
"""

import json
from pathlib import Path
from typing import Any, TypeVar

import yaml
from loguru import logger
from pydantic import BaseModel

from scouting.models.match import Match
from scouting.models.observation import Observation
from scouting.models.team import TeamStats

ModelT = TypeVar("ModelT", bound=BaseModel)


def _read_file(path: Path) -> Any:
    """Parse a JSON or YAML file by extension."""
    with open(path) as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def _load_records(path: str | Path, key: str, model: type[ModelT]) -> list[ModelT]:
    path = Path(path)
    data = _read_file(path)

    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of {key} or a '{key}' mapping")

    records = [model.model_validate(item) for item in data]
    logger.debug(f"Loaded {len(records)} {key} from {path}")
    return records


def load_observations(path: str | Path) -> list[Observation]:
    """Load scouting observations."""
    return _load_records(path, "observations", Observation)


def load_matches(path: str | Path) -> list[Match]:
    """Load matches."""
    return _load_records(path, "matches", Match)


def load_team_stats(path: str | Path) -> dict[int, TeamStats]:
    """Load previously computed team stats, keyed by team number."""
    return {s.team_number: s for s in _load_records(path, "teams", TeamStats)}


def save_team_stats(stats: dict[int, TeamStats], path: str | Path) -> Path:
    """Write team stats as JSON under a "teams" key."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"teams": [s.model_dump(mode="json") for s in stats.values()]}
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)
    logger.info(f"Saved stats for {len(stats)} teams to {path}")
    return path


def load_alliances(path: str | Path) -> list[list[int]]:
    """Load playoff alliances in seed order, one list of team numbers each."""
    path = Path(path)
    data = _read_file(path)

    if isinstance(data, dict):
        data = data.get("alliances", [])
    if not isinstance(data, list) or not all(isinstance(a, list) for a in data):
        raise ValueError(f"{path}: expected a list of alliances or an 'alliances' mapping")

    alliances = [[int(team) for team in alliance] for alliance in data]
    logger.debug(f"Loaded {len(alliances)} alliances from {path}")
    return alliances
