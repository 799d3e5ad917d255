from pydantic import BaseModel, ConfigDict, Field

from crawler.core.constants import ITEM_RARITIES, Rarity


class ValueRange(BaseModel):
    """An inclusive integer range, used for gold and key rewards."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0, description="The lowest value that can be rolled.")
    max: int = Field(ge=0, description="The highest value that can be rolled.")

    def model_post_init(self, _) -> None:
        if self.max < self.min:
            raise ValueError(f"Invalid range: max {self.max} < min {self.min}")


class RewardPools(BaseModel):
    """The tables a chest draws its reward from."""

    model_config = ConfigDict(frozen=True)

    gold: ValueRange = Field(
        description="Range of gold rolled before floor scaling.",
    )
    items: dict[Rarity, int] = Field(
        description="Relative weights of each item rarity.",
    )
    keys: ValueRange = Field(
        description="Range of keys found inside the chest.",
    )
    consumables: list[str] = Field(
        default_factory=list,
        description="Consumables that may each be included.",
    )

    def model_post_init(self, _) -> None:
        if not self.items or sum(self.items.values()) <= 0:
            raise ValueError("Item rarity table needs at least one positive weight.")
        for rarity, weight in self.items.items():
            if rarity not in ITEM_RARITIES:
                raise ValueError(f"Items cannot have rarity '{rarity.value}'.")
            if weight < 0:
                raise ValueError(f"Negative weight for rarity '{rarity.value}'.")


class ChestTemplate(BaseModel):
    """
    Represents a chest from the catalog.

    Keyed chests cost `keys_required` keys to open. The mysterious chest costs
    nothing but hides a mimic with probability `mimic_chance`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="The unique identifier of the chest.",
    )
    name: str = Field(
        description="The display name of the chest.",
    )
    rarity: Rarity = Field(
        description="The chest rarity.",
    )
    keys_required: int = Field(
        default=0,
        ge=0,
        description="Keys consumed when opening the chest.",
    )
    mimic_chance: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Probability that opening the chest reveals a mimic.",
    )
    reward_pools: RewardPools = Field(
        description="The tables the reward is drawn from.",
    )
    description: str = Field(
        default="",
        description="A description of the chest.",
    )

    def model_post_init(self, _) -> None:
        if self.is_mysterious and self.mimic_chance is None:
            raise ValueError(f"Mysterious chest '{self.id}' needs a mimic_chance.")
        if not self.is_mysterious and self.mimic_chance is not None:
            raise ValueError(f"Only mysterious chests can hide a mimic ('{self.id}').")

    @property
    def is_mysterious(self) -> bool:
        return self.rarity == Rarity.MYSTERIOUS


class CarriedChest(BaseModel):
    """An unopened chest the player has picked up to open later."""

    model_config = ConfigDict(frozen=True)

    chest_id: str = Field(
        description="The catalog id of the chest.",
    )
    rarity: Rarity = Field(
        description="The chest rarity.",
    )
    floor_found: int = Field(
        ge=1,
        description="The floor the chest was found on, used to scale its reward.",
    )
