"""
Reward generator module for the simulator.

Handles the multi-table reward rolls: chest rewards (gold, keys, item
rarities, consumables), monster kill rewards, and floor-scaled potion drops.
Every roll goes through an injectable random generator.
"""

import math
import random

from catchery import log_debug

from crawler.character.actor import Actor
from crawler.core.constants import (
    CHEST_CONSUMABLE_CHANCE,
    CHEST_ITEM_COUNT,
    FLOOR_BOSS_GOLD_MULTIPLIER,
    KILL_GOLD_PER_FLOOR,
    KILL_GOLD_PER_HEALTH,
    KILL_POTION_CHANCE,
    KILL_POTION_NAME,
    POTION_BASE_DROP_CHANCE,
    POTION_BATTLE_BONUS,
    POTION_DROP_FACTOR,
    POTION_MAX_DROP_CHANCE,
    BattleType,
    Currency,
    Rarity,
)
from crawler.core.utils import get_rng, roll_chance, uniform_int, weighted_choice
from crawler.items.chest import ChestTemplate
from crawler.items.potion import Potion, generate_random_potion
from crawler.progression.scaling import drop_rate, multiplicative_gold
from crawler.rewards.reward import ItemDrop, Reward


def roll_item_rarity(
    table: dict[Rarity, int],
    rng: random.Random | None = None,
) -> Rarity:
    """
    Draws one item rarity from a weight table.

    The weights are relative: the draw is normalised by their sum, so tables
    that do not add up to 100 behave the same as if they did.

    Args:
        table (dict[Rarity, int]): Weight of each rarity.
        rng (random.Random | None): Optional generator.

    Returns:
        Rarity: The drawn rarity.

    """
    return weighted_choice(table.items(), rng)


def generate_chest_reward(
    chest: ChestTemplate,
    floor: int,
    rng: random.Random | None = None,
) -> Reward:
    """
    Rolls the reward found inside an opened chest.

    Args:
        chest (ChestTemplate): The chest being opened.
        floor (int): The floor it is opened on, which scales the gold.
        rng (random.Random | None): Optional generator.

    Returns:
        Reward: Scaled gold, keys, one to three items and any consumables.

    """
    rng = get_rng(rng)
    pools = chest.reward_pools

    gold = multiplicative_gold(uniform_int(pools.gold.min, pools.gold.max, rng), floor)
    keys = uniform_int(pools.keys.min, pools.keys.max, rng)

    item_count = uniform_int(*CHEST_ITEM_COUNT, rng)
    items = [ItemDrop(rarity=roll_item_rarity(pools.items, rng)) for _ in range(item_count)]

    consumables = [
        name for name in pools.consumables if roll_chance(CHEST_CONSUMABLE_CHANCE, rng)
    ]

    reward = Reward(gold=gold, keys=keys, items=items, consumables=consumables)
    log_debug(
        f"Rolled {chest.name} reward on floor {floor}: {reward.describe()}",
        {"chest_id": chest.id, "floor": floor},
    )
    return reward


def generate_kill_reward(
    monster: Actor,
    floor: int,
    battle_type: BattleType,
    division: Currency = Currency.GOLD,
    rng: random.Random | None = None,
) -> Reward:
    """
    Rolls the reward for defeating a monster.

    Gold is five per point of the monster's maximum health plus two per floor,
    doubled for floor bosses and multiplied by the division multiplier.

    Args:
        monster (Actor): The defeated monster.
        floor (int): The floor of the battle.
        battle_type (BattleType): The kind of battle that was won.
        division (Currency): The division the player is playing in.
        rng (random.Random | None): Optional generator.

    Returns:
        Reward: The gold and, with a flat chance, one health potion.

    """
    gold = math.floor(monster.max_health * KILL_GOLD_PER_HEALTH) + math.floor(
        floor * KILL_GOLD_PER_FLOOR
    )
    if battle_type == BattleType.FLOOR_BOSS:
        gold *= FLOOR_BOSS_GOLD_MULTIPLIER
    gold *= division.reward_multiplier

    consumables = [KILL_POTION_NAME] if roll_chance(KILL_POTION_CHANCE, rng) else []
    return Reward(gold=gold, consumables=consumables)


def potion_drop_chance(floor: int, battle_type: BattleType) -> float:
    """
    Returns the chance that a battle drops a scaled potion.

    Args:
        floor (int): The floor of the battle.
        battle_type (BattleType): Bosses, mimics and detected monsters drop
            potions more often.

    Returns:
        float: The drop chance, never above 0.8.

    """
    chance = drop_rate(POTION_BASE_DROP_CHANCE, floor, POTION_DROP_FACTOR)
    chance += POTION_BATTLE_BONUS.get(battle_type, 0.0)
    return min(POTION_MAX_DROP_CHANCE, chance)


def roll_potion_drop(
    floor: int,
    battle_type: BattleType,
    rng: random.Random | None = None,
) -> Potion | None:
    """Rolls for a scaled potion after a battle, returning None on a miss."""
    rng = get_rng(rng)
    if not roll_chance(potion_drop_chance(floor, battle_type), rng):
        return None
    return generate_random_potion(floor, rng)
