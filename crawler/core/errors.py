"""
Exception hierarchy for the simulator.

Every error raised by the simulation core derives from CrawlerError, so hosts
can catch a single base class. Resource errors carry the numbers needed to
tell the player what they are missing.
"""

from typing import Any


class CrawlerError(Exception):
    """Base exception for all simulator errors."""


class ProgrammerError(CrawlerError, LookupError):
    """An identifier that should exist in a catalog does not."""


class InvalidPlayerInput(CrawlerError, ValueError):
    """The player chose something outside the options offered to them."""


class DataLoadError(CrawlerError):
    """A catalog file is missing, unreadable or fails validation."""


class InsufficientResource(CrawlerError):
    """
    Raised when an operation needs more of a resource than the player has.

    The check always happens before any mutation, so the player state is
    unchanged when this is raised.

    Attributes:
        resource (str):
            The name of the missing resource (e.g. "keys", "gold").
        required (int):
            The amount the operation needs.
        available (int):
            The amount the player has.
    """

    def __init__(self, resource: str, required: int, available: int) -> None:
        self.resource = resource
        self.required = required
        self.available = available
        super().__init__(
            f"Not enough {resource}: need {required}, have {available} "
            f"(short by {self.shortfall})."
        )

    @property
    def shortfall(self) -> int:
        """Returns how much of the resource is missing."""
        return max(0, self.required - self.available)

    def to_dict(self) -> dict[str, Any]:
        """Returns the error details as plain data for the host to render."""
        return {
            "resource": self.resource,
            "required": self.required,
            "available": self.available,
            "shortfall": self.shortfall,
        }


class InventoryFull(InsufficientResource):
    """Raised when a bounded container (such as carried chests) is full."""

    def __init__(self, resource: str, capacity: int, used: int) -> None:
        # Capacity needed is one more slot than what is left.
        super().__init__(resource, required=1, available=max(0, capacity - used))
        self.capacity = capacity
        self.used = used
