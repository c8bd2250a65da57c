"""
Analytics Exceptions

Raised only for caller misuse at the public boundary. Missing data and
zero denominators are handled with guarded defaults, never exceptions.
"""


class AnalyticsError(ValueError):
    """Base class for invalid analytics requests."""


class InvalidSimulationError(AnalyticsError):
    """Simulation request with unusable parameters (iterations, alliances)."""


class CombinationLimitError(AnalyticsError):
    """Alliance search would enumerate more combinations than allowed."""

    def __init__(self, pool_size: int, alliance_size: int, count: int, limit: int) -> None:
        self.pool_size = pool_size
        self.alliance_size = alliance_size
        self.count = count
        self.limit = limit
        super().__init__(
            f"C({pool_size}, {alliance_size}) = {count} combinations exceeds "
            f"the limit of {limit}"
        )
