"""
Exception types raised by the safe route engine.

Only InvalidInputError is meant to reach callers of the planner; every other
error is absorbed by the fallback of the stage that raised it.
"""


class RoutingError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(RoutingError, ValueError):
    """Missing, non-numeric or out-of-range request coordinates."""


class DataLoadError(RoutingError):
    """Incident source unavailable or unparseable."""


class NoPathError(RoutingError):
    """The destination node cannot be reached from the start node."""


class PenaltyComputationError(RoutingError):
    """Crime penalty could not be computed for a single edge."""


class NodeNotFoundError(RoutingError, KeyError):
    """A node id was looked up that the graph does not contain."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable in logs
        return str(self.args[0]) if self.args else ''
