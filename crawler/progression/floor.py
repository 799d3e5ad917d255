"""
Floor state module for the simulator.

Tracks which floor a player is on, how many times it has been explored, and
the deepest floor reached. Every transition returns a new FloorState.
"""

from catchery import log_info, log_warning
from pydantic import BaseModel, Field

from crawler.core.errors import InsufficientResource


def max_explorations(floor: int) -> int:
    """
    Returns how many explorations a floor allows.

    Args:
        floor (int): The floor number.

    Returns:
        int: 3 up to floor 9, 5 up to floor 20, then one more every ten
            floors, up to 10.

    """
    if floor <= 9:
        return 3
    if floor <= 20:
        return 5
    return min(10, 5 + (floor - 20) // 10)


class FloorState(BaseModel):
    """Position of a player in the dungeon."""

    current_floor: int = Field(
        default=0,
        ge=0,
        description="The floor the player is on, 0 before entering the dungeon.",
    )
    exploration_count: int = Field(
        default=0,
        ge=0,
        description="Explorations already spent on the current floor.",
    )
    highest_floor: int = Field(
        default=0,
        ge=0,
        description="The deepest floor ever reached.",
    )

    @property
    def max_explorations(self) -> int:
        return max_explorations(self.current_floor)

    @property
    def explorations_left(self) -> int:
        return max(0, self.max_explorations - self.exploration_count)

    @property
    def in_dungeon(self) -> bool:
        return self.current_floor > 0

    def enter_dungeon(self) -> "FloorState":
        """Returns the state of a player standing on the first floor."""
        if self.in_dungeon:
            return self
        return FloorState(
            current_floor=1,
            exploration_count=0,
            highest_floor=max(1, self.highest_floor),
        )

    def record_exploration(self) -> "FloorState":
        """
        Spends one exploration of the current floor.

        Returns:
            FloorState: The new state with the count incremented.

        Raises:
            InsufficientResource: If the floor has no explorations left.

        """
        if self.explorations_left <= 0:
            log_warning(
                f"No explorations left on floor {self.current_floor}",
                {
                    "floor": self.current_floor,
                    "explorations": self.exploration_count,
                    "max_explorations": self.max_explorations,
                },
            )
            raise InsufficientResource("explorations", 1, 0)
        return self.model_copy(update={"exploration_count": self.exploration_count + 1})

    def descend(self) -> "FloorState":
        """
        Moves to the next floor, resetting the exploration count.

        Returns:
            FloorState: The state on the next floor.

        """
        next_floor = self.current_floor + 1
        log_info(f"Descending to floor {next_floor}", {"floor": next_floor})
        return FloorState(
            current_floor=next_floor,
            exploration_count=0,
            highest_floor=max(self.highest_floor, next_floor),
        )
