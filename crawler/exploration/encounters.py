"""
Encounters module for the simulator.

Handles what happens each time a player explores a floor: one roll against
the fixed encounter table, then the payload of the selected outcome (a
monster, a hidden room, a mysterious chest or loose treasure).
"""

import random

from catchery import log_info
from pydantic import BaseModel, Field

from crawler.character.actor import Actor
from crawler.character.monster import MonsterTemplate, scale_monster_for_floor
from crawler.combat.battle import FleeResult
from crawler.combat.damage import apply_escape_penalty
from crawler.core.constants import (
    ENCOUNTER_ROLL_RANGE,
    ENCOUNTER_TABLE,
    MONSTER_TIERS,
    BattleType,
    OutcomeType,
    Rarity,
)
from crawler.core.content import ContentRepository
from crawler.core.errors import ProgrammerError
from crawler.core.utils import get_rng, pick_by_roll, weighted_choice
from crawler.exploration.rooms import HiddenRoom, generate_hidden_room, generate_treasure
from crawler.items.chest import ChestTemplate
from crawler.rewards.reward import Reward


class EncounterOutcome(BaseModel):
    """The result of exploring a floor once."""

    outcome: OutcomeType = Field(
        description="Which entry of the encounter table was rolled.",
    )
    floor: int = Field(
        ge=1,
        description="The floor being explored.",
    )
    roll: float = Field(
        description="The roll that selected the outcome, in [0, 100).",
    )
    monster: Actor | None = Field(
        default=None,
        description="The scaled monster, for detected monsters and ambushes.",
    )
    battle_type: BattleType | None = Field(
        default=None,
        description="The battle the monster starts, if any.",
    )
    room: HiddenRoom | None = Field(
        default=None,
        description="The room found, for hidden rooms.",
    )
    chest: ChestTemplate | None = Field(
        default=None,
        description="The chest found, for mysterious chests.",
    )
    reward: Reward | None = Field(
        default=None,
        description="The loot found, for treasure.",
    )


def outcome_for_roll(roll: float) -> OutcomeType:
    """
    Maps a roll in [0, 100) onto the encounter table.

    The table is cumulative: below 25 nothing happens, below 35 a mysterious
    chest, below 50 a detected monster, below 65 an ambush, below 80 a hidden
    room, and treasure otherwise. Rolls outside the range give treasure.
    """
    return pick_by_roll(ENCOUNTER_TABLE, roll)


# ============================================================================
# RANDOM MONSTERS
# ============================================================================


def monster_tier_weights(floor: int) -> dict[str, float]:
    """
    Returns the weight of each monster tier on `floor`.

    Every five floors, weaker monsters become rarer and stronger ones more
    common, until the low tier bottoms out at 0.1 and the high tier tops out
    at 0.7.

    Args:
        floor (int): The floor being explored.

    Returns:
        dict[str, float]: Weights for the "low", "mid" and "high" tiers.

    """
    group = (floor - 1) // 5 + 1
    return {
        "low": max(0.1, 0.7 - 0.1 * (group - 1)),
        "mid": 0.4,
        "high": min(0.7, 0.1 + 0.1 * (group - 1)),
    }


def select_random_monster(
    floor: int,
    repo: ContentRepository | None = None,
    rng: random.Random | None = None,
) -> MonsterTemplate:
    """
    Picks a wandering monster for a detected or ambush encounter.

    Each catalog monster is weighted by its tier. Floor-independent monsters
    such as the Mimic are never picked.

    Args:
        floor (int): The floor being explored.
        repo (ContentRepository | None): The catalogs to read from.
        rng (random.Random | None): Optional generator.

    Returns:
        MonsterTemplate: The picked template, not yet scaled.

    """
    repo = repo or ContentRepository()
    weights = monster_tier_weights(floor)
    candidates: list[tuple[MonsterTemplate, float]] = []
    for template in repo.monsters.values():
        if template.floor_number is None:
            continue
        for tier, (low, high) in MONSTER_TIERS.items():
            if low <= template.floor_number <= high:
                candidates.append((template, weights[tier]))
                break
    if not candidates:
        raise ProgrammerError("Monster catalog has no floor monsters to pick from.")
    return weighted_choice(candidates, rng)


# ============================================================================
# RESOLUTION
# ============================================================================


def resolve_encounter(
    floor: int,
    rng: random.Random | None = None,
    repo: ContentRepository | None = None,
) -> EncounterOutcome:
    """
    Explores `floor` once.

    Args:
        floor (int): The floor being explored.
        rng (random.Random | None): Optional generator.
        repo (ContentRepository | None): The catalogs to read from.

    Returns:
        EncounterOutcome: The rolled outcome and its payload.

    """
    rng = get_rng(rng)
    repo = repo or ContentRepository()
    roll = rng.random() * ENCOUNTER_ROLL_RANGE
    outcome = outcome_for_roll(roll)
    result = EncounterOutcome(outcome=outcome, floor=floor, roll=roll)

    if outcome in (OutcomeType.DETECTED_MONSTER, OutcomeType.AMBUSH):
        template = select_random_monster(floor, repo, rng)
        result.monster = scale_monster_for_floor(template, floor)
        result.battle_type = (
            BattleType.AMBUSH if outcome == OutcomeType.AMBUSH else BattleType.DETECTED
        )
    elif outcome == OutcomeType.HIDDEN_ROOM:
        result.room = generate_hidden_room(rng)
    elif outcome == OutcomeType.MYSTERIOUS_CHEST:
        result.chest = repo.get_chest(Rarity.MYSTERIOUS)
    elif outcome == OutcomeType.TREASURE:
        result.reward = generate_treasure(floor, rng)

    log_info(
        f"Exploring floor {floor}: {outcome.display_name}",
        {"floor": floor, "roll": round(roll, 2)},
    )
    return result


def escape_ambush(hero: Actor) -> FleeResult:
    """
    Runs from an ambush before the fight starts.

    The hero loses a tenth of current health and mana, rounded up, but never
    drops below 1 health.

    Args:
        hero (Actor): The hero, modified in place.

    Returns:
        FleeResult: The losses taken.

    """
    health_lost, mana_lost = apply_escape_penalty(hero, round_up=True)
    return FleeResult(health_lost=health_lost, mana_lost=mana_lost)


def sneak_away() -> FleeResult:
    """Leaves a detected monster alone. The monster never noticed, so it is free."""
    return FleeResult()
