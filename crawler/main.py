"""
Main entry point for the dungeon crawl simulator.

Runs a short, non-interactive demonstration of the simulation core: a hero
enters the dungeon, explores each floor, fights whatever it meets, opens
chests and rooms, then faces the floor boss before descending.

The demo plays the host's role: it picks actions with a simple policy and
prints every result with rich.
"""

import argparse
import logging
import random

from crawler.actions.action import CombatAction
from crawler.character.actor import Actor
from crawler.character.hero import create_hero
from crawler.character.monster import get_monster_for_floor, scale_monster_for_floor
from crawler.character.player import PlayerState
from crawler.combat.battle import Battle
from crawler.combat.combat_manager import CombatResolver, start_battle
from crawler.core.constants import ActionType, BattleType, CombatState, OutcomeType
from crawler.core.content import ContentRepository
from crawler.core.errors import InsufficientResource
from crawler.core.logging import setup_logging
from crawler.core.utils import cprint, crule
from crawler.exploration.chests import open_chest
from crawler.exploration.encounters import escape_ambush, resolve_encounter
from crawler.exploration.rooms import enter_room
from crawler.rewards.economy import apply_flee_penalty, apply_reward
from crawler.rewards.generator import generate_kill_reward, roll_potion_drop
from crawler.rewards.reward import Reward

# Below this fraction of its health the hero runs away.
FLEE_HEALTH_FRACTION = 0.25


def choose_action(resolver: CombatResolver, battle: Battle) -> CombatAction:
    """Picks the offered action with the highest expected damage."""
    options = resolver.available_player_actions(battle)

    def expected_damage(action: CombatAction) -> int:
        if action.type == ActionType.WEAPON:
            weapon = resolver.repo.get_weapon(action.id)
            return weapon.damage if weapon else 0
        if action.type == ActionType.ABILITY:
            ability = resolver.repo.get_ability(action.id)
            return ability.effective_damage if ability else 0
        return 0

    return max(options, key=expected_damage)


def fight(
    resolver: CombatResolver,
    player: PlayerState,
    monster: Actor,
    battle_type: BattleType,
    rng: random.Random,
) -> tuple[PlayerState, CombatState]:
    """
    Fights a battle to its end, fleeing when the hero is close to dying.

    Args:
        resolver (CombatResolver): The turn resolver.
        player (PlayerState): The player fighting, with a hero.
        monster (Actor): The scaled monster.
        battle_type (BattleType): The circumstances of the battle.
        rng (random.Random): The generator driving the fight.

    Returns:
        tuple[PlayerState, CombatState]: The updated player and how the
            battle ended.

    """
    assert player.hero is not None
    floor = player.current_floor
    battle = start_battle(player.hero, monster, battle_type, floor)

    while battle.active:
        hero = battle.hero
        if (
            battle_type != BattleType.FLOOR_BOSS
            and hero.current_health < hero.max_health * FLEE_HEALTH_FRACTION
        ):
            result = resolver.flee(battle, rng)
            cprint(
                f"  {hero.name} flees, losing {result.health_lost} HP "
                f"and {result.mana_lost} MP.",
                style="yellow",
            )
            if result.item_lost:
                cprint("  Something falls out of the pack while running.", style="yellow")
            return apply_flee_penalty(player, result, rng), battle.state

        turn = resolver.resolve_turn(battle, choose_action(resolver, battle), rng)
        cprint(
            f"  Turn {turn.turn_number}: {turn.player.action} deals "
            f"{turn.player.damage_dealt}{' (crit)' if turn.player.critical else ''}, "
            f"{turn.monster.action} deals {turn.monster.damage_dealt}"
        )

    cprint(f"  {battle.hero.get_status_line()}")
    if battle.state != CombatState.PLAYER_VICTORY:
        cprint(f"  {battle.hero.name} has fallen.", style="bold red")
        return player, battle.state

    reward = generate_kill_reward(monster, floor, battle_type, player.division, rng)
    potion = roll_potion_drop(floor, battle_type, rng)
    if potion is not None:
        reward = reward.combine(Reward(consumables=[potion.id]))
    cprint(f"  Victory over {monster.name}: {reward.describe()}", style="bold green")
    return apply_reward(player, reward), battle.state


def explore_floor(
    resolver: CombatResolver,
    player: PlayerState,
    rng: random.Random,
) -> PlayerState:
    """Spends every exploration of the current floor. Returns the updated player."""
    floor = player.current_floor
    while player.floor.explorations_left > 0 and player.hero.is_alive():
        player.floor = player.floor.record_exploration()
        encounter = resolve_encounter(floor, rng, resolver.repo)
        cprint(f"[bold]{encounter.outcome.display_name}[/] (roll {encounter.roll:.1f})")

        if encounter.outcome == OutcomeType.AMBUSH and (
            player.hero.current_health < player.hero.max_health * FLEE_HEALTH_FRACTION
        ):
            result = escape_ambush(player.hero)
            cprint(f"  Escaped the ambush, losing {result.health_lost} HP.", style="yellow")
        elif encounter.monster is not None and encounter.battle_type is not None:
            player, _ = fight(resolver, player, encounter.monster, encounter.battle_type, rng)
        elif encounter.chest is not None:
            chest = encounter.chest
            cprint(f"  {chest.rarity.emoji} {chest.rarity.colorize(chest.name)}")
            opening = open_chest(chest, floor, player, rng, resolver.repo)
            if opening.mimic is not None and opening.battle_type is not None:
                cprint("  The chest was a mimic!", style="bold red")
                player, _ = fight(resolver, player, opening.mimic, opening.battle_type, rng)
            else:
                player = opening.player
                rarity = opening.reward_rarity or chest.rarity
                cprint(f"  Chest ({rarity.colored_name}): {opening.reward.describe()}")
        elif encounter.room is not None:
            try:
                entry = enter_room(encounter.room, player, floor, rng)
            except InsufficientResource as e:
                cprint(f"  The room is locked ({e.shortfall} keys short).", style="dim")
            else:
                player = entry.player
                cprint(f"  Room: {entry.reward.describe()}", style="green")
                if entry.trap_damage:
                    cprint(f"  A trap deals {entry.health_lost} damage.", style="red")
        elif encounter.reward is not None:
            player = apply_reward(player, encounter.reward)
            cprint(f"  Treasure: {encounter.reward.describe()}", style="green")
    return player


def run_demo(floors: int, hero_id: str | None, seed: int | None) -> PlayerState:
    """
    Plays `floors` floors with one hero.

    Args:
        floors (int): How many floors to attempt.
        hero_id (str | None): The hero to play, the first catalog hero if None.
        seed (int | None): Seed of the generator driving the demo.

    Returns:
        PlayerState: The player at the end of the run.

    """
    rng = random.Random(seed)
    repo = ContentRepository()
    resolver = CombatResolver(repo)

    template = repo.require_hero(hero_id) if hero_id else next(iter(repo.heroes.values()))
    player = PlayerState(player_id="demo", hero=create_hero(template))
    player.floor = player.floor.enter_dungeon()
    cprint(f"Playing as [bold]{template.name}[/]: {template.description}")

    for _ in range(floors):
        floor = player.current_floor
        crule(f"Floor {floor}", style="bold green")
        player = explore_floor(resolver, player, rng)
        if not player.hero.is_alive():
            break

        boss = scale_monster_for_floor(get_monster_for_floor(floor, repo), floor)
        cprint(f"[bold red]Floor boss:[/] {boss.get_status_line()}")
        player, state = fight(resolver, player, boss, BattleType.FLOOR_BOSS, rng)
        if state != CombatState.PLAYER_VICTORY:
            break

        player.hero.restore_all()
        player.floor = player.floor.descend()

    crule("Summary", style="bold green", characters="=")
    cprint(f"Deepest floor: {player.floor.highest_floor}")
    cprint(f"Gold: {player.gold}, keys: {player.keys}, items: {len(player.items)}")
    cprint(f"Consumables: {player.consumables or 'none'}")
    return player


def main() -> None:
    parser = argparse.ArgumentParser(description="Dungeon crawl simulation demo.")
    parser.add_argument("--floors", type=int, default=3, help="Floors to attempt.")
    parser.add_argument("--hero", default=None, help="Id of the hero to play.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.debug else logging.WARNING)
    crule("Dungeon Crawl Simulator", style="bold green")
    run_demo(args.floors, args.hero, args.seed)


if __name__ == "__main__":
    main()
