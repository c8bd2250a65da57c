"""
Shared Model Helpers

Base model configuration and timestamp helpers used by all scouting models.
"""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def timestamp_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(datetime.now().timestamp() * 1000)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return math.floor(value + 0.5)


def round_half_up_to(value: float, ndigits: int) -> float:
    """Round to ndigits decimal places, with halves always rounding up."""
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


class ScoutingModel(BaseModel):
    """
    Base model for scouting records.

    Accepts both snake_case field names and the camelCase keys written by
    the scouting app's sync layer.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
