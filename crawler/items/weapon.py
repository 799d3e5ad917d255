from pydantic import BaseModel, ConfigDict, Field

from crawler.core.constants import Rarity, WeaponType


class WeaponEffect(BaseModel):
    """A status effect a weapon may inflict, with its trigger chance."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(
        description="The status effect identifier (e.g. 'bleeding').",
    )
    chance: int = Field(
        default=100,
        ge=0,
        le=100,
        description="Percent chance of applying the effect on hit.",
    )


class Weapon(BaseModel):
    """
    Represents a weapon from the catalog.

    Weapons deal their catalog damage, scaled by floor, whenever a combatant
    picks them as their action for the turn.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="The unique identifier of the weapon.",
    )
    name: str = Field(
        description="The display name of the weapon.",
    )
    weapon_type: WeaponType = Field(
        default=WeaponType.MELEE,
        description="How the weapon is wielded.",
    )
    rarity: Rarity = Field(
        default=Rarity.COMMON,
        description="The rarity tier of the weapon.",
    )
    damage: int = Field(
        ge=0,
        description="Base damage before floor scaling.",
    )
    mana_cost: int = Field(
        default=0,
        ge=0,
        description="Mana the weapon nominally consumes per use.",
    )
    effects: list[WeaponEffect] = Field(
        default_factory=list,
        description="Status effects the weapon may apply.",
    )
    gold_value: int = Field(
        default=0,
        ge=0,
        description="Shop value of the weapon in gold.",
    )
    description: str = Field(
        default="",
        description="A description of the weapon.",
    )

    def model_post_init(self, _) -> None:
        if self.rarity == Rarity.MYSTERIOUS:
            raise ValueError(f"Weapon '{self.id}' cannot have mysterious rarity.")
