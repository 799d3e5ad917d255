from pydantic import BaseModel, Field

from crawler.character.actor import Actor
from crawler.core.constants import MAX_CARRIED_CHESTS, MAX_KEYS, Currency
from crawler.items.chest import CarriedChest
from crawler.progression.floor import FloorState
from crawler.rewards.ledger import Economy
from crawler.rewards.reward import ItemDrop


class PlayerState(BaseModel):
    """
    Everything the simulation knows about one player.

    Operations never mutate a PlayerState in place: they return an updated
    deep copy, so a failed operation leaves the original untouched.
    """

    player_id: str = Field(
        description="Opaque identifier assigned by the host.",
    )
    economy: Economy = Field(
        default_factory=Economy,
        description="Currency balances.",
    )
    keys: int = Field(
        default=0,
        ge=0,
        le=MAX_KEYS,
        description="Keys used to open chests and locked rooms.",
    )
    items: list[ItemDrop] = Field(
        default_factory=list,
        description="Items collected so far.",
    )
    consumables: dict[str, int] = Field(
        default_factory=dict,
        description="Quantity of each consumable, by name.",
    )
    carried_chests: list[CarriedChest] = Field(
        default_factory=list,
        max_length=MAX_CARRIED_CHESTS,
        description="Unopened chests carried for later.",
    )
    division: Currency = Field(
        default=Currency.GOLD,
        description="The division the player is currently playing in.",
    )
    floor: FloorState = Field(
        default_factory=FloorState,
        description="Position in the dungeon.",
    )
    hero: Actor | None = Field(
        default=None,
        description="The hero the player is playing, once selected.",
    )

    @property
    def gold(self) -> int:
        return self.economy.gold

    @property
    def current_floor(self) -> int:
        return self.floor.current_floor

    def copy_state(self) -> "PlayerState":
        """Returns a deep copy that can be modified freely."""
        return self.model_copy(deep=True)
