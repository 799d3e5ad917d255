"""
Rooms module for the simulator.

Handles the loot found while exploring: loose treasure, and hidden rooms
which may be locked behind keys and may hide a trap.
"""

import math
import random

from catchery import log_info, log_warning
from pydantic import BaseModel, Field

from crawler.character.player import PlayerState
from crawler.core.constants import (
    HIDDEN_ROOM_GOLD_MULTIPLIER,
    HIDDEN_ROOM_KEYS,
    HIDDEN_ROOM_LOCKED_CHANCE,
    LOCKED_ROOM_GOLD_MULTIPLIER,
    ROOM_ITEMS,
    TREASURE_ITEMS,
)
from crawler.core.errors import InsufficientResource
from crawler.core.utils import get_rng, roll_chance, uniform_choice, uniform_int
from crawler.items.potion import generate_random_potion
from crawler.progression.scaling import additive_gold
from crawler.rewards.economy import apply_reward
from crawler.rewards.reward import ItemDrop, Reward


class HiddenRoom(BaseModel):
    """A room discovered while exploring, possibly locked."""

    locked: bool = Field(
        default=False,
        description="Whether keys are needed to get in.",
    )
    keys_required: int = Field(
        default=0,
        ge=0,
        description="Keys consumed when entering, 0 for unlocked rooms.",
    )

    def model_post_init(self, _) -> None:
        if self.locked != (self.keys_required > 0):
            raise ValueError("Only locked rooms require keys, and they always do.")


class RoomEntry(BaseModel):
    """What happened when the player went into a room."""

    player: PlayerState = Field(description="The player after entering.")
    reward: Reward = Field(description="The loot found inside.")
    trap_damage: int = Field(default=0, ge=0, description="Damage rolled by a trap.")
    health_lost: int = Field(default=0, ge=0, description="Health actually lost to the trap.")


# ============================================================================
# LOOSE FINDS
# ============================================================================


def _roll_find(
    floor: int,
    potion_chance: float,
    others: tuple[str, ...],
    rng: random.Random,
) -> tuple[list[ItemDrop], list[str]]:
    """Rolls one found object: a scaled potion, or one of `others`."""
    if roll_chance(potion_chance, rng):
        return [], [generate_random_potion(floor, rng).id]
    return [ItemDrop(item_id=uniform_choice(others, rng))], []


def generate_treasure(floor: int, rng: random.Random | None = None) -> Reward:
    """
    Rolls the loose treasure found while exploring.

    Args:
        floor (int): The floor being explored.
        rng (random.Random | None): Optional generator.

    Returns:
        Reward: Floor-scaled gold with a 20% swing either way, and a chance
            of keys and of a single item.

    """
    rng = get_rng(rng)
    base = uniform_int(0, floor * 5 - 1, rng)
    gold = math.floor(additive_gold(base, floor) * (0.8 + rng.random() * 0.4))

    keys = 0
    if roll_chance(0.3 + floor * 0.02, rng):
        keys = uniform_int(1, 3, rng)

    items: list[ItemDrop] = []
    consumables: list[str] = []
    if roll_chance(0.2 + floor * 0.03, rng):
        items, consumables = _roll_find(floor, 0.6, TREASURE_ITEMS, rng)

    return Reward(gold=gold, keys=keys, items=items, consumables=consumables)


# ============================================================================
# HIDDEN ROOMS
# ============================================================================


def generate_hidden_room(rng: random.Random | None = None) -> HiddenRoom:
    """Rolls whether a discovered room is locked, and how many keys it needs."""
    rng = get_rng(rng)
    if roll_chance(HIDDEN_ROOM_LOCKED_CHANCE, rng):
        return HiddenRoom(locked=True, keys_required=uniform_int(*HIDDEN_ROOM_KEYS, rng))
    return HiddenRoom(locked=False, keys_required=0)


def generate_room_contents(
    room: HiddenRoom,
    floor: int,
    rng: random.Random | None = None,
) -> tuple[Reward, int]:
    """
    Rolls what is inside a room.

    Args:
        room (HiddenRoom): The room, locked rooms hold twice the gold.
        floor (int): The floor being explored.
        rng (random.Random | None): Optional generator.

    Returns:
        tuple[Reward, int]: The loot, and the trap damage (0 when no trap).

    """
    rng = get_rng(rng)
    multiplier = LOCKED_ROOM_GOLD_MULTIPLIER if room.locked else HIDDEN_ROOM_GOLD_MULTIPLIER
    base = uniform_int(0, floor * 8 - 1, rng)
    gold = math.floor(additive_gold(base, floor) * multiplier)

    keys = 0
    if roll_chance(0.4 + floor * 0.03, rng):
        keys = uniform_int(1, 4, rng)

    items: list[ItemDrop] = []
    consumables: list[str] = []
    if roll_chance(0.3 + floor * 0.04, rng):
        items, consumables = _roll_find(floor, 0.7, ROOM_ITEMS, rng)

    trap_damage = 0
    if roll_chance(0.15 + floor * 0.02, rng):
        trap_damage = uniform_int(0, 2, rng) + floor

    reward = Reward(gold=gold, keys=keys, items=items, consumables=consumables)
    return reward, trap_damage


def enter_room(
    room: HiddenRoom,
    player: PlayerState,
    floor: int,
    rng: random.Random | None = None,
) -> RoomEntry:
    """
    Enters a hidden room, paying its keys and collecting what is inside.

    A trap never takes the hero below 1 health.

    Args:
        room (HiddenRoom): The room to enter.
        player (PlayerState): The player entering.
        floor (int): The floor being explored.
        rng (random.Random | None): Optional generator.

    Returns:
        RoomEntry: The updated player and what was found.

    Raises:
        InsufficientResource: If the player has fewer keys than the room
            needs. The player is not modified.

    """
    if player.keys < room.keys_required:
        error = InsufficientResource("keys", room.keys_required, player.keys)
        log_warning(
            "Not enough keys to unlock the room",
            {"player_id": player.player_id, **error.to_dict()},
        )
        raise error

    reward, trap_damage = generate_room_contents(room, floor, rng)

    updated = player.copy_state()
    updated.keys -= room.keys_required
    updated = apply_reward(updated, reward)

    health_lost = 0
    if trap_damage and updated.hero is not None:
        hero = updated.hero
        health_lost = hero.take_damage(min(trap_damage, max(0, hero.current_health - 1)))

    log_info(
        f"Explored a {'locked' if room.locked else 'hidden'} room on floor {floor}",
        {
            "player_id": player.player_id,
            "reward": reward.describe(),
            "trap_damage": trap_damage,
        },
    )
    return RoomEntry(
        player=updated,
        reward=reward,
        trap_damage=trap_damage,
        health_lost=health_lost,
    )
