"""
Damage module for the simulator.

Handles the raw damage of each kind of action, armor mitigation, and the
health and mana cost of escaping a fight.
"""

import random

from crawler.actions.action import CombatAction
from crawler.character.actor import Actor
from crawler.core.constants import (
    FLEE_PENALTY_DIVISOR,
    SPELL_PLACEHOLDER_DAMAGE,
    UNKNOWN_ABILITY_DAMAGE,
    UNKNOWN_WEAPON_DAMAGE,
    ActionType,
)
from crawler.core.content import ContentRepository
from crawler.core.utils import get_rng
from crawler.progression.scaling import scale_weapon_damage


def apply_armor(raw_damage: int, armor: int) -> int:
    """Reduces damage by a flat armor value, never below 0."""
    return max(0, raw_damage - armor)


def roll_critical(crit_chance: int, rng: random.Random | None = None) -> bool:
    """Rolls a critical hit: succeeds when `u * 100 < crit_chance`."""
    return get_rng(rng).random() * 100 < crit_chance


def can_afford_ability(actor: Actor, ability_id: str, repo: ContentRepository) -> bool:
    """Checks the actor's mana against an ability; unknown abilities cost nothing."""
    ability = repo.get_ability(ability_id)
    return ability is None or ability.is_affordable(actor.current_mana)


def evaluate_action(
    actor: Actor,
    action: CombatAction,
    floor: int,
    repo: ContentRepository,
    rng: random.Random | None = None,
) -> tuple[int, int, bool]:
    """
    Computes what an action does, without applying it.

    Weapons deal their catalog damage scaled for the floor, doubled on a
    critical hit. Abilities deal their own damage and cost mana. Spells deal
    a placeholder damage and cost nothing. Unknown weapons and abilities deal
    a single point of damage.

    Args:
        actor (Actor): The combatant acting, as it was before the turn.
        action (CombatAction): The action taken.
        floor (int): The floor of the battle.
        repo (ContentRepository): The catalogs to read from.
        rng (random.Random | None): Optional generator for critical hits.

    Returns:
        tuple[int, int, bool]: The raw damage, the mana to debit, and whether
            the hit was critical.

    """
    if action.type == ActionType.WEAPON:
        weapon = repo.get_weapon(action.id)
        base = weapon.damage if weapon else UNKNOWN_WEAPON_DAMAGE
        damage = scale_weapon_damage(base, floor)
        critical = roll_critical(actor.crit_chance, rng)
        if critical:
            damage *= 2
        return damage, 0, critical

    if action.type == ActionType.ABILITY:
        ability = repo.get_ability(action.id)
        if ability is None:
            return UNKNOWN_ABILITY_DAMAGE, 0, False
        return ability.effective_damage, ability.mana_cost, False

    spell = repo.get_spell(action.id)
    return (spell.damage if spell else SPELL_PLACEHOLDER_DAMAGE), 0, False


def apply_escape_penalty(actor: Actor, round_up: bool = False) -> tuple[int, int]:
    """
    Takes the cost of escaping a fight from an actor.

    The actor loses a tenth of its current health and mana. Escaping never
    kills: health stops at 1.

    Args:
        actor (Actor): The escaping actor, modified in place.
        round_up (bool): Round the tenth up (ambushes) instead of down.

    Returns:
        tuple[int, int]: The health and mana actually lost.

    """
    health_cost = _tenth(actor.current_health, round_up)
    mana_cost = _tenth(actor.current_mana, round_up)
    health_lost = actor.take_damage(min(health_cost, max(0, actor.current_health - 1)))
    mana_lost = actor.spend_mana(mana_cost)
    return health_lost, mana_lost


def _tenth(value: int, round_up: bool) -> int:
    if round_up:
        return -(-value // FLEE_PENALTY_DIVISOR)
    return value // FLEE_PENALTY_DIVISOR
