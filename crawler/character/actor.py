"""
Actor module for the simulator.

Defines the single combatant type shared by heroes and monsters. Health and
mana are only changed through the mutators below, which clamp both pools to
`[0, max]` so the invariants hold after every operation.
"""

from pydantic import BaseModel, Field

from crawler.core.utils import make_bar


class Actor(BaseModel):
    """
    A combatant: either the player's hero or a monster instance.

    Attributes mirror the catalog template the actor was created from, with
    current pools seeded to their maximum.
    """

    id: str = Field(
        description="The catalog id the actor was created from.",
    )
    name: str = Field(
        description="The display name of the actor.",
    )
    is_monster: bool = Field(
        default=False,
        description="Whether the actor is a monster rather than a hero.",
    )
    max_health: int = Field(
        ge=1,
        description="Maximum health.",
    )
    current_health: int = Field(
        ge=0,
        description="Current health, between 0 and max_health.",
    )
    max_mana: int = Field(
        default=0,
        ge=0,
        description="Maximum mana.",
    )
    current_mana: int = Field(
        default=0,
        ge=0,
        description="Current mana, between 0 and max_mana.",
    )
    armor: int = Field(
        default=0,
        ge=0,
        description="Flat damage reduction applied to every hit taken.",
    )
    crit_chance: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Percent chance that a weapon hit deals double damage.",
    )
    weapons: list[str] = Field(
        default_factory=list,
        description="Ids of the weapons the actor can attack with.",
    )
    abilities: list[str] = Field(
        default_factory=list,
        description="Ids of the abilities the actor knows.",
    )
    spells: list[str] = Field(
        default_factory=list,
        description="Ids of the spells the actor knows.",
    )
    active_effects: list[str] = Field(
        default_factory=list,
        description="Status effects currently applied to the actor.",
    )

    def model_post_init(self, _) -> None:
        if self.current_health > self.max_health:
            raise ValueError(
                f"{self.name}: current_health {self.current_health} exceeds "
                f"max_health {self.max_health}"
            )
        if self.current_mana > self.max_mana:
            raise ValueError(
                f"{self.name}: current_mana {self.current_mana} exceeds "
                f"max_mana {self.max_mana}"
            )

    # ============================================================================
    # STATUS
    # ============================================================================

    def is_alive(self) -> bool:
        return self.current_health > 0

    def is_dead(self) -> bool:
        return self.current_health <= 0

    # ============================================================================
    # MUTATORS
    # ============================================================================

    def take_damage(self, amount: int) -> int:
        """
        Removes health, never going below 0.

        Args:
            amount (int): The damage to apply. Negative amounts apply nothing.

        Returns:
            int: The health actually lost.

        """
        lost = min(max(0, amount), self.current_health)
        self.current_health -= lost
        return lost

    def heal(self, amount: int) -> int:
        """
        Restores health, never going above max_health.

        Args:
            amount (int): The health to restore.

        Returns:
            int: The health actually restored.

        """
        gained = min(max(0, amount), self.max_health - self.current_health)
        self.current_health += gained
        return gained

    def spend_mana(self, amount: int) -> int:
        """
        Removes mana, never going below 0.

        Args:
            amount (int): The mana to remove.

        Returns:
            int: The mana actually spent.

        """
        spent = min(max(0, amount), self.current_mana)
        self.current_mana -= spent
        return spent

    def restore_mana(self, amount: int) -> int:
        """Restores mana, never going above max_mana, and returns the amount gained."""
        gained = min(max(0, amount), self.max_mana - self.current_mana)
        self.current_mana += gained
        return gained

    def restore_all(self) -> None:
        """Refills health and mana, and clears active effects."""
        self.current_health = self.max_health
        self.current_mana = self.max_mana
        self.active_effects.clear()

    # ============================================================================
    # DISPLAY
    # ============================================================================

    def get_status_line(self, show_bars: bool = True) -> str:
        """
        Builds a one-line status summary for console output.

        Args:
            show_bars (bool): Whether to draw health and mana bars.

        Returns:
            str: A rich-markup status line.

        """
        color = "bold red" if self.is_monster else "bold blue"
        line = f"[{color}]{self.name:<20}[/] "
        line += f"HP {self.current_health:>3}/{self.max_health:<3} "
        if show_bars:
            line += make_bar(self.current_health, self.max_health, color="red") + " "
        if self.max_mana > 0:
            line += f"MP {self.current_mana:>3}/{self.max_mana:<3} "
            if show_bars:
                line += make_bar(self.current_mana, self.max_mana, color="blue") + " "
        if self.armor:
            line += f"AR {self.armor}"
        return line.rstrip()
