"""
Chests module for the simulator.

Handles opening chests: the key gate of regular chests, the mimic trial of
mysterious chests, carrying unopened chests for later, and the floor-weighted
rarity roll for chests found in the dungeon.
"""

import random

from catchery import log_info, log_warning
from pydantic import BaseModel, Field

from crawler.character.actor import Actor
from crawler.character.monster import get_mimic, scale_monster_for_floor
from crawler.character.player import PlayerState
from crawler.core.constants import (
    MAX_CARRIED_CHESTS,
    MYSTERIOUS_CHEST_RARITY_WEIGHTS,
    BattleType,
    Rarity,
)
from crawler.core.content import ContentRepository
from crawler.core.errors import InsufficientResource, InvalidPlayerInput, InventoryFull
from crawler.core.utils import get_rng, roll_chance, weighted_choice
from crawler.items.chest import CarriedChest, ChestTemplate
from crawler.rewards.economy import apply_reward
from crawler.rewards.generator import generate_chest_reward
from crawler.rewards.reward import Reward


class ChestOpening(BaseModel):
    """The result of opening a chest: either a reward, or a mimic to fight."""

    player: PlayerState = Field(
        description="The player after opening the chest.",
    )
    reward: Reward | None = Field(
        default=None,
        description="The reward found, None when the chest was a mimic.",
    )
    reward_rarity: Rarity | None = Field(
        default=None,
        description="The rarity whose reward table was used.",
    )
    mimic: Actor | None = Field(
        default=None,
        description="The scaled mimic to fight, when the chest was one.",
    )
    battle_type: BattleType | None = Field(
        default=None,
        description="BattleType.MIMIC when a mimic battle must start.",
    )

    @property
    def is_mimic(self) -> bool:
        return self.mimic is not None


# ============================================================================
# RARITY ROLLS
# ============================================================================


def chest_rarity_weights(floor: int, luck: int = 0) -> dict[Rarity, float]:
    """
    Returns the weights used to pick the rarity of a chest found on `floor`.

    Deeper floors shift weight from each rarity to the one above it, every
    ten floors up to floor 50. Luck moves up to 20 points of weight away from
    common chests, favouring rare and epic ones the most.

    Args:
        floor (int): The floor the chest is found on.
        luck (int): The player's luck bonus.

    Returns:
        dict[Rarity, float]: Non-negative weights for every item rarity.

    """
    weights: dict[Rarity, float] = {
        Rarity.COMMON: 40,
        Rarity.UNCOMMON: 30,
        Rarity.RARE: 20,
        Rarity.EPIC: 8,
        Rarity.LEGENDARY: 2,
        Rarity.MYTHICAL: 0,
    }
    # (minimum floor, rarity losing weight, rarity gaining weight, amount)
    shifts = (
        (10, Rarity.COMMON, Rarity.UNCOMMON, 10),
        (20, Rarity.UNCOMMON, Rarity.RARE, 10),
        (30, Rarity.RARE, Rarity.EPIC, 5),
        (40, Rarity.EPIC, Rarity.LEGENDARY, 3),
        (50, Rarity.LEGENDARY, Rarity.MYTHICAL, 2),
    )
    for min_floor, loser, gainer, amount in shifts:
        if floor >= min_floor:
            weights[loser] -= amount
            weights[gainer] += amount

    if luck > 0:
        boost = min(luck * 2, 20)
        weights[Rarity.COMMON] -= boost
        weights[Rarity.MYTHICAL] += boost * 0.1
        weights[Rarity.LEGENDARY] += boost * 0.2
        weights[Rarity.EPIC] += boost * 0.3
        weights[Rarity.RARE] += boost * 0.4

    return {rarity: max(0.0, weight) for rarity, weight in weights.items()}


def roll_chest_rarity(
    floor: int,
    luck: int = 0,
    rng: random.Random | None = None,
) -> Rarity:
    """Rolls the rarity of a chest found on `floor`."""
    return weighted_choice(chest_rarity_weights(floor, luck).items(), rng)


# ============================================================================
# OPENING
# ============================================================================


def _open_mysterious(
    chest: ChestTemplate,
    floor: int,
    player: PlayerState,
    repo: ContentRepository,
    rng: random.Random,
) -> ChestOpening:
    if roll_chance(chest.mimic_chance or 0.0, rng):
        mimic = scale_monster_for_floor(get_mimic(repo), floor)
        log_info(
            "The mysterious chest was a mimic!",
            {"player_id": player.player_id, "floor": floor},
        )
        return ChestOpening(player=player, mimic=mimic, battle_type=BattleType.MIMIC)

    rarity = weighted_choice(MYSTERIOUS_CHEST_RARITY_WEIGHTS, rng)
    reward = generate_chest_reward(repo.get_chest(rarity), floor, rng)
    log_info(
        f"The mysterious chest held a {rarity.display_name} reward",
        {"player_id": player.player_id, "reward": reward.describe()},
    )
    return ChestOpening(
        player=apply_reward(player, reward),
        reward=reward,
        reward_rarity=rarity,
    )


def _open_keyed(
    chest: ChestTemplate,
    floor: int,
    player: PlayerState,
    rng: random.Random,
) -> ChestOpening:
    if player.keys < chest.keys_required:
        error = InsufficientResource("keys", chest.keys_required, player.keys)
        log_warning(
            f"Not enough keys to open {chest.name}",
            {"player_id": player.player_id, **error.to_dict()},
        )
        raise error

    reward = generate_chest_reward(chest, floor, rng)
    updated = player.copy_state()
    updated.keys -= chest.keys_required
    updated = apply_reward(updated, reward)
    log_info(
        f"Opened {chest.name} on floor {floor}",
        {"player_id": player.player_id, "reward": reward.describe()},
    )
    return ChestOpening(player=updated, reward=reward, reward_rarity=chest.rarity)


def open_chest(
    chest: ChestTemplate,
    floor: int,
    player: PlayerState,
    rng: random.Random | None = None,
    repo: ContentRepository | None = None,
) -> ChestOpening:
    """
    Opens a chest.

    A mysterious chest costs nothing but hides a mimic with probability
    `mimic_chance`; otherwise its reward comes from a randomly picked rarity.
    Any other chest costs `keys_required` keys, debited together with the
    reward being credited.

    Args:
        chest (ChestTemplate): The chest to open.
        floor (int): The floor it is opened on.
        player (PlayerState): The player opening it.
        rng (random.Random | None): Optional generator.
        repo (ContentRepository | None): The catalogs to read from.

    Returns:
        ChestOpening: The updated player with the reward, or the mimic to
            fight (the player is then unchanged).

    Raises:
        InsufficientResource: If the player lacks keys. The player is not
            modified.

    """
    rng = get_rng(rng)
    repo = repo or ContentRepository()
    if chest.is_mysterious:
        return _open_mysterious(chest, floor, player, repo, rng)
    return _open_keyed(chest, floor, player, rng)


# ============================================================================
# CARRYING
# ============================================================================


def take_chest(chest: ChestTemplate, player: PlayerState, floor: int) -> PlayerState:
    """
    Picks up a chest to open later.

    Args:
        chest (ChestTemplate): The chest to carry.
        player (PlayerState): The player carrying it.
        floor (int): The floor it was found on.

    Returns:
        PlayerState: The updated player.

    Raises:
        InventoryFull: If the player already carries the maximum of chests.

    """
    if len(player.carried_chests) >= MAX_CARRIED_CHESTS:
        error = InventoryFull("chest slots", MAX_CARRIED_CHESTS, len(player.carried_chests))
        log_warning(
            "Cannot carry another chest",
            {"player_id": player.player_id, "capacity": MAX_CARRIED_CHESTS},
        )
        raise error
    updated = player.copy_state()
    updated.carried_chests.append(
        CarriedChest(chest_id=chest.id, rarity=chest.rarity, floor_found=floor)
    )
    return updated


def open_carried_chest(
    player: PlayerState,
    index: int,
    rng: random.Random | None = None,
    repo: ContentRepository | None = None,
) -> ChestOpening:
    """
    Opens one of the chests the player carries, scaled to the floor it was
    found on.

    Args:
        player (PlayerState): The player opening the chest.
        index (int): Position of the chest in `player.carried_chests`.
        rng (random.Random | None): Optional generator.
        repo (ContentRepository | None): The catalogs to read from.

    Returns:
        ChestOpening: As for `open_chest`, with the chest removed from the
            carried list.

    Raises:
        InvalidPlayerInput: If there is no chest at `index`.
        InsufficientResource: If the player lacks keys.

    """
    if not 0 <= index < len(player.carried_chests):
        raise InvalidPlayerInput(f"No carried chest at position {index}.")
    repo = repo or ContentRepository()
    carried = player.carried_chests[index]
    chest = repo.chests.get(carried.chest_id) or repo.get_chest(carried.rarity)

    remaining = player.copy_state()
    del remaining.carried_chests[index]
    opening = open_chest(chest, carried.floor_found, remaining, rng, repo)
    return opening
