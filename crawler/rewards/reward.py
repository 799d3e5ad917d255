from pydantic import BaseModel, Field

from crawler.core.constants import Rarity


class ItemDrop(BaseModel):
    """
    An item granted by a reward.

    Chest items are only described by their rarity, the host decides which
    concrete item they become. Loose finds carry an item id instead.
    """

    rarity: Rarity | None = Field(
        default=None,
        description="The rarity of the item, for chest drops.",
    )
    item_id: str | None = Field(
        default=None,
        description="The id of a concrete item (e.g. 'repair_kit').",
    )

    def model_post_init(self, _) -> None:
        if self.rarity is None and self.item_id is None:
            raise ValueError("An item drop needs a rarity or an item id.")

    def __str__(self) -> str:
        return self.item_id or f"{self.rarity.value} item"


class Reward(BaseModel):
    """Gold, keys, items and consumables granted to a player at once."""

    gold: int = Field(
        default=0,
        ge=0,
        description="Gold credited to the player's gold balance.",
    )
    keys: int = Field(
        default=0,
        ge=0,
        description="Keys added to the player's key ring.",
    )
    items: list[ItemDrop] = Field(
        default_factory=list,
        description="Items appended to the player's inventory.",
    )
    consumables: list[str] = Field(
        default_factory=list,
        description="Names of consumables, one entry per unit.",
    )

    @property
    def is_empty(self) -> bool:
        return not (self.gold or self.keys or self.items or self.consumables)

    def combine(self, other: "Reward") -> "Reward":
        """Returns a reward granting both this reward and `other`."""
        return Reward(
            gold=self.gold + other.gold,
            keys=self.keys + other.keys,
            items=self.items + other.items,
            consumables=self.consumables + other.consumables,
        )

    def describe(self) -> str:
        """Returns a short human readable summary of the reward."""
        parts = []
        if self.gold:
            parts.append(f"{self.gold} gold")
        if self.keys:
            parts.append(f"{self.keys} keys")
        parts.extend(str(item) for item in self.items)
        parts.extend(self.consumables)
        return ", ".join(parts) if parts else "nothing"
