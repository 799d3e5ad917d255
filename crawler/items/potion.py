"""
Potion module for the simulator.

Handles potions scaled to the floor they drop on: the tier band of the floor
sets both the strength and the name prefix of the potion.
"""

import random

from pydantic import BaseModel, ConfigDict, Field

from crawler.core.constants import PotionType
from crawler.core.utils import uniform_choice
from crawler.progression.scaling import potion_tier, potion_value


class Potion(BaseModel):
    """A consumable potion with its floor-scaled strength."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Identifier combining type and tier (e.g. 'health_potion_1.5').",
    )
    name: str = Field(
        description="Display name including the tier prefix.",
    )
    potion_type: PotionType = Field(
        description="The potion family.",
    )
    tier_name: str = Field(
        description="Name of the tier band the potion belongs to.",
    )
    multiplier: float = Field(
        description="Multiplier of the tier band.",
    )
    value: int = Field(
        ge=0,
        description="Amount of health or mana restored.",
    )


def generate_scaled_potion(potion_type: PotionType, floor: int) -> Potion:
    """
    Builds a potion of `potion_type` scaled for `floor`.

    Args:
        potion_type (PotionType): The potion family.
        floor (int): The floor the potion drops on.

    Returns:
        Potion: The scaled potion.

    """
    tier = potion_tier(floor)
    return Potion(
        id=f"{potion_type.value}_potion_{tier.multiplier}",
        name=f"{tier.name} {potion_type.base_name}",
        potion_type=potion_type,
        tier_name=tier.name,
        multiplier=tier.multiplier,
        value=potion_value(potion_type.base_value, floor),
    )


def available_potion_types(floor: int) -> list[PotionType]:
    """Returns the potion families that can drop on `floor`."""
    return [p for p in PotionType if floor >= p.unlock_floor]


def generate_random_potion(floor: int, rng: random.Random | None = None) -> Potion:
    """Builds a scaled potion of a random family available on `floor`."""
    return generate_scaled_potion(uniform_choice(available_potion_types(floor), rng), floor)
