"""
Economy module for the simulator.

Handles every operation that changes what a player owns: applying rewards,
entering a division, exchanging currencies along the 1000:1 ladder, and the
gold and item penalties for fleeing a stronger monster.

All operations are pure: they validate first, then return an updated deep
copy of the PlayerState, so a rejected operation changes nothing.
"""

import random
from collections import Counter

from catchery import log_info, log_warning

from crawler.character.player import PlayerState
from crawler.combat.battle import FleeResult
from crawler.core.constants import (
    EXCHANGE_RATE,
    FLEE_PENALTY_DIVISOR,
    MAX_KEYS,
    Currency,
)
from crawler.core.errors import InsufficientResource, InvalidPlayerInput
from crawler.core.utils import uniform_int
from crawler.rewards.reward import Reward


def apply_reward(player: PlayerState, reward: Reward) -> PlayerState:
    """
    Credits a reward to a player.

    Gold goes to the gold balance, keys are added up to the key cap, items
    are appended and consumables are counted by name.

    Args:
        player (PlayerState): The player receiving the reward.
        reward (Reward): The reward to apply.

    Returns:
        PlayerState: The updated player.

    """
    updated = player.copy_state()
    updated.economy = updated.economy.credit(Currency.GOLD, reward.gold)
    updated.keys = min(MAX_KEYS, updated.keys + reward.keys)
    updated.items.extend(item.model_copy() for item in reward.items)
    for name, quantity in Counter(reward.consumables).items():
        updated.consumables[name] = updated.consumables.get(name, 0) + quantity
    if player.keys + reward.keys > MAX_KEYS:
        log_info(
            "Key ring is full, extra keys were discarded",
            {
                "player_id": player.player_id,
                "discarded": player.keys + reward.keys - MAX_KEYS,
            },
        )
    return updated


def enter_division(player: PlayerState, division: Currency) -> PlayerState:
    """
    Moves a player into a division, charging its entry cost.

    Args:
        player (PlayerState): The player entering the division.
        division (Currency): The division to play in.

    Returns:
        PlayerState: The updated player.

    Raises:
        InsufficientResource: If the player cannot pay the entry cost.

    """
    try:
        economy = player.economy.debit(division, division.entry_cost)
    except InsufficientResource as e:
        log_warning(
            f"Cannot enter the {division.display_name} division",
            {"player_id": player.player_id, **e.to_dict()},
        )
        raise
    updated = player.copy_state()
    updated.economy = economy
    updated.division = division
    log_info(
        f"Player entered the {division.display_name} division",
        {"player_id": player.player_id, "multiplier": division.reward_multiplier},
    )
    return updated


def exchange(
    player: PlayerState,
    from_currency: Currency,
    to_currency: Currency,
    units: int = 1,
) -> PlayerState:
    """
    Exchanges currency one step up the ladder at 1000:1.

    Args:
        player (PlayerState): The player exchanging.
        from_currency (Currency): The currency to pay with.
        to_currency (Currency): The next currency up the ladder.
        units (int): How many units of `to_currency` to buy.

    Returns:
        PlayerState: The updated player.

    Raises:
        InvalidPlayerInput: If the pair is not a ladder step or units < 1.
        InsufficientResource: If the player cannot pay; nothing is debited.

    """
    if from_currency.next_tier != to_currency:
        raise InvalidPlayerInput(
            f"Cannot exchange {from_currency.value} into {to_currency.value}"
        )
    if units < 1:
        raise InvalidPlayerInput(f"Must exchange at least one unit, got {units}")

    cost = units * EXCHANGE_RATE
    try:
        economy = player.economy.debit(from_currency, cost)
    except InsufficientResource as e:
        log_warning(
            f"Exchange {from_currency.value} -> {to_currency.value} rejected",
            {"player_id": player.player_id, **e.to_dict()},
        )
        raise
    updated = player.copy_state()
    updated.economy = economy.credit(to_currency, units)
    return updated


def apply_flee_penalty(
    player: PlayerState,
    result: FleeResult,
    rng: random.Random | None = None,
) -> PlayerState:
    """
    Applies the penalties of a flee from a stronger monster.

    A tenth of the gold (rounded down) is lost. When the flee also rolled an
    item loss, one random item is removed; a player without items loses
    nothing more.

    Args:
        player (PlayerState): The player who fled.
        result (FleeResult): The outcome of the flee.
        rng (random.Random | None): Optional generator picking the lost item.

    Returns:
        PlayerState: The updated player, unchanged when no penalty applies.

    """
    if not result.gold_penalty_applies and not result.item_lost:
        return player
    updated = player.copy_state()
    if result.gold_penalty_applies:
        penalty = player.gold // FLEE_PENALTY_DIVISOR
        updated.economy = updated.economy.debit(Currency.GOLD, penalty)
        log_info(
            f"Fleeing cost {penalty} gold",
            {"player_id": player.player_id, "penalty": penalty},
        )
    if result.item_lost and updated.items:
        lost = updated.items.pop(uniform_int(0, len(updated.items) - 1, rng))
        log_info(
            "Fleeing cost an item",
            {"player_id": player.player_id, "item": str(lost)},
        )
    return updated
