"""
Combat manager module for the simulator.

Drives a Battle through its state machine, one simultaneous turn at a time:

    AWAITING_PLAYER_ACTION -> RESOLVING -> AWAITING_PLAYER_ACTION
                                        -> PLAYER_VICTORY
                                        -> PLAYER_DEFEAT

Both sides act against the same pre-turn snapshot, so the order in which
their damage is applied never matters. A successful flee moves the battle to
the FLED terminal state.
"""

import random

from catchery import log_critical, log_debug, log_info, log_warning

from crawler.actions.action import CombatAction
from crawler.character.actor import Actor
from crawler.combat.battle import ActionOutcome, Battle, FleeResult, TurnResult
from crawler.combat.damage import (
    apply_armor,
    apply_escape_penalty,
    can_afford_ability,
    evaluate_action,
)
from crawler.core.constants import (
    BASIC_ATTACK_ID,
    FLEE_ITEM_LOSS_CHANCE,
    STRONG_MONSTER_ABILITIES,
    STRONG_MONSTER_FLOOR,
    STRONG_MONSTER_HEALTH,
    ActionType,
    BattleType,
    CombatState,
    TieBreakPolicy,
)
from crawler.core.content import ContentRepository
from crawler.core.errors import InvalidPlayerInput, ProgrammerError
from crawler.core.utils import get_rng, roll_chance, uniform_choice


def start_battle(
    hero: Actor,
    monster: Actor,
    battle_type: BattleType,
    floor: int,
    tie_break: TieBreakPolicy = TieBreakPolicy.PLAYER_DEATH_FIRST,
) -> Battle:
    """
    Creates a battle awaiting the player's first action.

    Args:
        hero (Actor): The player's hero.
        monster (Actor): A scaled monster instance, owned by the battle.
        battle_type (BattleType): The circumstances of the battle.
        floor (int): The floor the battle takes place on.
        tie_break (TieBreakPolicy): Outcome of a mutual kill.

    Returns:
        Battle: The new battle, at turn 1.

    """
    log_info(
        f"{hero.name} engages {monster.name} on floor {floor}",
        {"battle_type": battle_type.value, "floor": floor, "monster_id": monster.id},
    )
    return Battle(
        hero=hero,
        monster=monster,
        battle_type=battle_type,
        floor=floor,
        tie_break=tie_break,
    )


def is_stronger_monster(monster: Actor, floor: int) -> bool:
    """
    Checks whether fleeing from `monster` also costs gold.

    Args:
        monster (Actor): The monster fled from.
        floor (int): The floor of the battle.

    Returns:
        bool: True from floor 5 onwards, or for monsters with a lot of health
            or more than two abilities.

    """
    return (
        floor >= STRONG_MONSTER_FLOOR
        or monster.max_health > STRONG_MONSTER_HEALTH
        or len(monster.abilities) > STRONG_MONSTER_ABILITIES
    )


class CombatResolver:
    """
    Resolves turns of combat against the content catalogs.

    The resolver holds no battle state of its own: everything lives in the
    Battle passed to each call, so a single resolver can serve many battles.
    """

    def __init__(self, repo: ContentRepository | None = None) -> None:
        """
        Initialize the CombatResolver.

        Args:
            repo (ContentRepository | None): The catalogs used to look up
                weapons, abilities and spells.

        """
        self.repo: ContentRepository = repo or ContentRepository()

    # ============================================================================
    # OPTIONS
    # ============================================================================

    def available_player_actions(self, battle: Battle) -> list[CombatAction]:
        """
        Lists the actions offered to the player this turn.

        Every owned weapon and spell is offered. Abilities are offered only
        while the hero has enough mana to pay for them.

        Args:
            battle (Battle): The battle in progress.

        Returns:
            list[CombatAction]: The valid choices.

        """
        hero = battle.hero
        options = [CombatAction.weapon(weapon_id) for weapon_id in hero.weapons]
        options.extend(
            CombatAction.ability(ability_id)
            for ability_id in hero.abilities
            if can_afford_ability(hero, ability_id, self.repo)
        )
        options.extend(CombatAction.spell(spell_id) for spell_id in hero.spells)
        return options

    def select_monster_action(
        self,
        monster: Actor,
        rng: random.Random | None = None,
    ) -> CombatAction:
        """
        Picks the monster's action uniformly over all its weapons, abilities
        and spells, falling back to a basic attack when it has none.
        """
        pool = (
            [CombatAction.weapon(i) for i in monster.weapons]
            + [CombatAction.ability(i) for i in monster.abilities]
            + [CombatAction.spell(i) for i in monster.spells]
        )
        if not pool:
            return CombatAction.weapon(BASIC_ATTACK_ID)
        return uniform_choice(pool, rng)

    # ============================================================================
    # TURN RESOLUTION
    # ============================================================================

    def _require_monster(self, battle: Battle) -> Actor:
        if battle.monster is None:
            message = "Battle has no monster to fight."
            log_critical(message, {"hero_id": battle.hero.id, "floor": battle.floor})
            raise ProgrammerError(message)
        return battle.monster

    def _validate_player_action(self, battle: Battle, action: CombatAction) -> None:
        if battle.state != CombatState.AWAITING_PLAYER_ACTION or not battle.active:
            log_warning(
                "Action submitted to a battle that is not awaiting one",
                {"state": battle.state.value, "action": str(action)},
            )
            raise InvalidPlayerInput(
                f"Battle is not awaiting an action (state: {battle.state.value})."
            )
        if action not in self.available_player_actions(battle):
            log_warning(
                "Action is not among the offered options",
                {"hero_id": battle.hero.id, "action": str(action)},
            )
            raise InvalidPlayerInput(f"Action '{action}' is not available.")

    def resolve_turn(
        self,
        battle: Battle,
        player_action: CombatAction,
        rng: random.Random | None = None,
    ) -> TurnResult:
        """
        Resolves one simultaneous turn of combat.

        Args:
            battle (Battle): The battle in progress, updated in place.
            player_action (CombatAction): The player's chosen action.
            rng (random.Random | None): Optional generator.

        Returns:
            TurnResult: What both sides did and the resulting state.

        Raises:
            ProgrammerError: If the battle has no monster.
            InvalidPlayerInput: If the battle is not awaiting an action, or the
                action is not offered. The battle is left unchanged.

        """
        rng = get_rng(rng)
        monster = self._require_monster(battle)
        self._validate_player_action(battle, player_action)
        hero = battle.hero

        battle.state = CombatState.RESOLVING
        monster_action = self.select_monster_action(monster, rng)

        # Both actions are evaluated before either is applied.
        hero_before = hero.model_copy(deep=True)
        monster_before = monster.model_copy(deep=True)
        hero_raw, hero_cost, hero_crit = evaluate_action(
            hero_before, player_action, battle.floor, self.repo, rng
        )
        monster_raw, monster_cost, monster_crit = evaluate_action(
            monster_before, monster_action, battle.floor, self.repo, rng
        )

        hero_spent = hero.spend_mana(hero_cost)
        monster_spent = monster.spend_mana(monster_cost)
        dealt = monster.take_damage(apply_armor(hero_raw, monster_before.armor))
        received = hero.take_damage(apply_armor(monster_raw, hero_before.armor))

        self._record_stats(battle, player_action, dealt, received, hero_spent, hero_crit)
        battle.last_player_action = player_action
        battle.last_monster_action = monster_action

        resolved_turn = battle.turn_number
        battle.state = self._next_state(battle, hero, monster)
        if battle.state.is_terminal:
            battle.active = False
            log_info(
                f"Battle against {monster.name} ended: {battle.state.display_name}",
                {"turns": battle.stats.turns, "floor": battle.floor},
            )
        else:
            battle.turn_number += 1

        log_debug(
            f"Turn {resolved_turn}: {hero.name} {player_action} -> {dealt}, "
            f"{monster.name} {monster_action} -> {received}",
            {"hero_health": hero.current_health, "monster_health": monster.current_health},
        )
        return TurnResult(
            turn_number=resolved_turn,
            player=ActionOutcome(
                actor_id=hero.id,
                action=player_action,
                raw_damage=hero_raw,
                damage_dealt=dealt,
                mana_spent=hero_spent,
                critical=hero_crit,
            ),
            monster=ActionOutcome(
                actor_id=monster.id,
                action=monster_action,
                raw_damage=monster_raw,
                damage_dealt=received,
                mana_spent=monster_spent,
                critical=monster_crit,
            ),
            state=battle.state,
            hero_health=hero.current_health,
            hero_mana=hero.current_mana,
            monster_health=monster.current_health,
            monster_mana=monster.current_mana,
        )

    @staticmethod
    def _next_state(battle: Battle, hero: Actor, monster: Actor) -> CombatState:
        hero_down = hero.is_dead()
        monster_down = monster.is_dead()
        if hero_down and monster_down:
            if battle.tie_break == TieBreakPolicy.PLAYER_FAVOURED:
                return CombatState.PLAYER_VICTORY
            return CombatState.PLAYER_DEFEAT
        if hero_down:
            return CombatState.PLAYER_DEFEAT
        if monster_down:
            return CombatState.PLAYER_VICTORY
        return CombatState.AWAITING_PLAYER_ACTION

    @staticmethod
    def _record_stats(
        battle: Battle,
        action: CombatAction,
        dealt: int,
        received: int,
        mana_spent: int,
        critical: bool,
    ) -> None:
        stats = battle.stats
        stats.turns += 1
        stats.damage_dealt += dealt
        stats.damage_received += received
        stats.mana_used += mana_spent
        if critical:
            stats.critical_hits += 1
        if action.type == ActionType.WEAPON:
            stats.weapon_attacks += 1
        elif action.type == ActionType.ABILITY:
            stats.abilities_used += 1
        else:
            stats.spells_cast += 1

    # ============================================================================
    # FLEEING
    # ============================================================================

    def flee(self, battle: Battle, rng: random.Random | None = None) -> FleeResult:
        """
        Runs away from the battle.

        The hero loses a tenth of current health (rounded down, never below 1)
        and of current mana. Against a stronger monster the result also flags
        a gold penalty and, one time in ten, the loss of a random item. Both
        are applied by `apply_flee_penalty`. A floor boss cannot be fled.

        Args:
            battle (Battle): The battle in progress, ended in place.
            rng (random.Random | None): Optional generator for the item loss.

        Returns:
            FleeResult: The losses taken.

        Raises:
            InvalidPlayerInput: If the battle is not awaiting an action, or
                is a floor boss battle.

        """
        monster = self._require_monster(battle)
        if battle.state != CombatState.AWAITING_PLAYER_ACTION or not battle.active:
            raise InvalidPlayerInput(
                f"Cannot flee a battle in state {battle.state.value}."
            )
        if battle.battle_type == BattleType.FLOOR_BOSS:
            log_warning(
                "Flee attempted against a floor boss",
                {"hero_id": battle.hero.id, "monster_id": monster.id, "floor": battle.floor},
            )
            raise InvalidPlayerInput(f"Cannot flee from the floor boss {monster.name}.")
        health_lost, mana_lost = apply_escape_penalty(battle.hero, round_up=False)
        battle.state = CombatState.FLED
        battle.active = False
        stronger = is_stronger_monster(monster, battle.floor)
        result = FleeResult(
            health_lost=health_lost,
            mana_lost=mana_lost,
            gold_penalty_applies=stronger,
            item_lost=stronger and roll_chance(FLEE_ITEM_LOSS_CHANCE, rng),
        )
        log_info(
            f"{battle.hero.name} fled from {monster.name}",
            {"floor": battle.floor, **result.model_dump()},
        )
        return result


def resolve_combat_turn(
    battle: Battle,
    player_action: CombatAction,
    rng: random.Random | None = None,
) -> TurnResult:
    """Resolves one turn of `battle` with the shared content catalogs."""
    return CombatResolver().resolve_turn(battle, player_action, rng)


def flee_battle(battle: Battle, rng: random.Random | None = None) -> FleeResult:
    """Flees `battle` with the shared content catalogs."""
    return CombatResolver().flee(battle, rng)
