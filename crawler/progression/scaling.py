"""
Scaling module for the simulator.

Handles every floor-indexed formula of the dungeon: monster stats, weapon
damage, gold, drop rates and potion tiers. All formulas are pure and read the
floor through `effective_floor`, which caps growth at MAX_SCALING_FLOOR.

Multipliers are computed in tenths with integer arithmetic, so that a 1.2
multiplier really is 1.2 and rounding never drifts on float error.
"""

import math

from pydantic import BaseModel, ConfigDict, Field

from crawler.core.constants import (
    DROP_RATE_STEP_FLOORS,
    GOLD_SCALING_PER_FLOOR,
    MAX_SCALING_FLOOR,
    POTION_TIERS,
    SCALING_CYCLE_LENGTH,
)


class PotionTier(BaseModel):
    """A band of floors sharing the same potion strength."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Name prefix of potions in this band.")
    multiplier: float = Field(description="Multiplier applied to base potion values.")
    max_floor: int = Field(description="Highest effective floor of the band.")


class ScalingInfo(BaseModel):
    """A summary of how a floor scales, for display by the host."""

    model_config = ConfigDict(frozen=True)

    floor: int = Field(description="The requested floor.")
    effective_floor: int = Field(description="The floor after applying the cap.")
    is_capped: bool = Field(description="Whether the cap is in effect.")
    monster_multiplier: float = Field(description="Monster stat multiplier.")
    potion_tier: PotionTier = Field(description="Potion band of the floor.")


# ============================================================================
# FLOOR HELPERS
# ============================================================================


def effective_floor(floor: int) -> int:
    """
    Caps a floor to the highest floor scaling is computed for.

    Args:
        floor (int): The real floor number.

    Returns:
        int: `min(floor, MAX_SCALING_FLOOR)`.

    """
    return min(floor, MAX_SCALING_FLOOR)


def scaling_cycles(floor: int) -> int:
    """
    Returns how many 10% steps the monster multiplier has taken at `floor`.

    Floors up to one full cycle are unscaled, after which every further cycle
    adds one step.
    """
    ef = effective_floor(floor)
    if ef <= SCALING_CYCLE_LENGTH:
        return 0
    return (ef - 1) // SCALING_CYCLE_LENGTH


def _tenths(floor: int) -> int:
    return 10 + scaling_cycles(floor)


# ============================================================================
# MONSTERS AND WEAPONS
# ============================================================================


def monster_stat_multiplier(floor: int) -> float:
    """
    Returns the multiplier applied to monster health and mana on `floor`.

    Args:
        floor (int): The floor the monster is fought on.

    Returns:
        float: 1.0 up to floor 20, then 1.1, 1.2, ... every 20 floors.

    """
    return _tenths(floor) / 10


def scale_monster_stat(base: int, floor: int) -> int:
    """Scales a monster stat for `floor`, rounding down."""
    return base * _tenths(floor) // 10


def scale_weapon_damage(base: int, floor: int) -> int:
    """
    Scales weapon damage for `floor`, rounding up.

    Args:
        base (int): The catalog damage of the weapon.
        floor (int): The floor the battle takes place on.

    Returns:
        int: The scaled damage. Equal to `base` up to floor 20.

    """
    return -(-base * _tenths(floor) // 10)


# ============================================================================
# GOLD AND DROPS
# ============================================================================


def additive_gold(base: int, floor: int) -> int:
    """Adds the flat per-floor gold bonus to `base`."""
    return base + effective_floor(floor) * GOLD_SCALING_PER_FLOOR


def multiplicative_gold(rolled: int, floor: int) -> int:
    """
    Scales a chest gold roll by 10% per floor.

    Args:
        rolled (int): The gold rolled from the chest's range.
        floor (int): The floor the chest is opened on.

    Returns:
        int: `floor(rolled * (1 + floor * 0.1))`.

    """
    return rolled * (10 + effective_floor(floor)) // 10


def drop_rate(base: float, floor: int, factor: float) -> float:
    """
    Raises a drop chance by `factor` every 25 floors.

    The result is not clamped, callers apply their own ceiling.
    """
    return base + (effective_floor(floor) // DROP_RATE_STEP_FLOORS) * factor


# ============================================================================
# POTIONS
# ============================================================================


def potion_tier(floor: int) -> PotionTier:
    """
    Returns the potion band for `floor`.

    Args:
        floor (int): The floor the potion drops on.

    Returns:
        PotionTier: Small (1.0) up to floor 40, rising by 0.5 every 40
            floors, and Ultimate (6.0) from floor 361 onwards.

    """
    ef = effective_floor(floor)
    for max_floor, multiplier, name in POTION_TIERS:
        if ef <= max_floor:
            return PotionTier(name=name, multiplier=multiplier, max_floor=max_floor)
    max_floor, multiplier, name = POTION_TIERS[-1]
    return PotionTier(name=name, multiplier=multiplier, max_floor=max_floor)


def potion_value(base: int, floor: int) -> int:
    """Scales a base potion value by the potion tier of `floor`, rounding down."""
    return math.floor(base * potion_tier(floor).multiplier)


def scaling_info(floor: int) -> ScalingInfo:
    """
    Summarises the scaling in effect on `floor`.

    Args:
        floor (int): The floor to describe.

    Returns:
        ScalingInfo: The effective floor, cap flag and multipliers.

    """
    return ScalingInfo(
        floor=floor,
        effective_floor=effective_floor(floor),
        is_capped=floor > MAX_SCALING_FLOOR,
        monster_multiplier=monster_stat_multiplier(floor),
        potion_tier=potion_tier(floor),
    )
