"""
Tests for simultaneous turn resolution and fleeing.
"""

import random

import pytest

from crawler.actions.action import CombatAction
from crawler.character.hero import create_hero
from crawler.character.monster import scale_monster_for_floor
from crawler.combat.combat_manager import (
    CombatResolver,
    flee_battle,
    is_stronger_monster,
    resolve_combat_turn,
    start_battle,
)
from crawler.combat.damage import apply_armor, can_afford_ability, evaluate_action
from crawler.core.constants import BattleType, CombatState, TieBreakPolicy
from crawler.core.errors import InvalidPlayerInput, ProgrammerError


@pytest.fixture
def resolver(repo):
    return CombatResolver(repo)


@pytest.fixture
def rat_battle(repo, hero):
    """Grim Stonebeard against the floor 1 Rat."""
    rat = scale_monster_for_floor(repo.require_monster("rat"), 1)
    return start_battle(hero, rat, BattleType.FLOOR_BOSS, 1)


@pytest.fixture
def rat_skirmish(repo, hero):
    """Grim Stonebeard against a wandering Rat that can be fled."""
    rat = scale_monster_for_floor(repo.require_monster("rat"), 1)
    return start_battle(hero, rat, BattleType.DETECTED, 1)


def test_battle_starts_awaiting_action(rat_battle):
    """
    Test the initial state of a new battle.
    """
    assert rat_battle.state == CombatState.AWAITING_PLAYER_ACTION
    assert rat_battle.turn_number == 1
    assert rat_battle.active


def test_rat_fight_ends_in_victory(resolver, rat_battle, rng):
    """
    Test a full fight against the Rat: two sword hits at most, and the hero survives.
    """
    sword = CombatAction.weapon("sword")
    results = []
    while rat_battle.active:
        results.append(resolver.resolve_turn(rat_battle, sword, rng))
    assert rat_battle.state == CombatState.PLAYER_VICTORY
    assert len(results) <= 2
    assert results[-1].is_over
    assert results[-1].monster_health == 0
    assert rat_battle.hero.current_health >= 6
    assert rat_battle.stats.turns == len(results)
    assert rat_battle.stats.weapon_attacks == len(results)


def test_heavy_hit_kills_rat_in_one_turn(resolver, repo, actor_factory, rng):
    """
    Test that a 5 damage weapon ends the Rat fight on the first turn, whatever the Rat does.
    """
    hero = actor_factory(
        "Hero", is_monster=False, health=20, mana=10, weapons=["dragon_slayer_sword"]
    )
    rat = scale_monster_for_floor(repo.require_monster("rat"), 1)
    battle = start_battle(hero, rat, BattleType.DETECTED, 1)
    result = resolver.resolve_turn(battle, CombatAction.weapon("dragon_slayer_sword"), rng)
    assert result.monster_health == 0
    assert battle.state == CombatState.PLAYER_VICTORY
    assert battle.hero.current_health >= 18


def test_armor_never_makes_damage_negative(resolver, actor_factory, rng):
    """
    Test that armor above the raw damage absorbs everything and nothing more.
    """
    assert apply_armor(1, 5) == 0
    assert apply_armor(7, 2) == 5
    hero = actor_factory("Hero", is_monster=False)
    monster = actor_factory("Golem", is_monster=True, armor=5)
    battle = start_battle(hero, monster, BattleType.DETECTED, 1)
    result = resolver.resolve_turn(battle, CombatAction.weapon("sword"), rng)
    assert result.player.raw_damage == 1
    assert result.player.damage_dealt == 0
    assert monster.current_health == monster.max_health


def test_values_stay_clamped_every_turn(resolver, repo, hero, rng):
    """
    Test that health and mana stay within bounds after every turn of a hard fight.
    """
    dragon = scale_monster_for_floor(repo.require_monster("black_dragon"), 20)
    battle = start_battle(hero, dragon, BattleType.FLOOR_BOSS, 20)
    for _ in range(200):
        if not battle.active:
            break
        action = resolver.available_player_actions(battle)[-1]
        result = resolver.resolve_turn(battle, action, rng)
        for actor in (battle.hero, dragon):
            assert 0 <= actor.current_health <= actor.max_health
            assert 0 <= actor.current_mana <= actor.max_mana
        assert result.hero_health == battle.hero.current_health
    assert battle.state.is_terminal


def test_unaffordable_ability_is_rejected_without_mutation(resolver, rat_battle, rng):
    """
    Test that an ability the hero cannot pay for is refused and changes nothing.
    """
    rat_battle.hero.current_mana = 0
    before = rat_battle.model_dump()
    with pytest.raises(InvalidPlayerInput):
        resolver.resolve_turn(rat_battle, CombatAction.ability("pound"), rng)
    assert rat_battle.model_dump() == before


def test_unowned_weapon_is_rejected(resolver, rat_battle, rng):
    """
    Test that a weapon the hero does not own is refused.
    """
    with pytest.raises(InvalidPlayerInput):
        resolver.resolve_turn(rat_battle, CombatAction.weapon("excalibur"), rng)
    assert rat_battle.turn_number == 1


def test_available_actions_respect_mana(resolver, rat_battle):
    """
    Test that abilities are only offered while affordable.
    """
    offered = resolver.available_player_actions(rat_battle)
    assert CombatAction.weapon("hammer") in offered
    assert CombatAction.ability("pound") in offered
    rat_battle.hero.current_mana = 1
    offered = resolver.available_player_actions(rat_battle)
    assert CombatAction.ability("pound") not in offered
    assert CombatAction.ability("heal") in offered


def test_ability_affordability(repo, hero):
    """
    Test the mana check on catalog abilities, and that unknown abilities cost nothing.
    """
    pound = repo.get_ability("pound")
    hero.current_mana = pound.mana_cost
    assert pound.is_affordable(hero.current_mana)
    assert can_afford_ability(hero, "pound", repo)
    hero.current_mana = pound.mana_cost - 1
    assert not can_afford_ability(hero, "pound", repo)
    assert can_afford_ability(hero, "forgotten_technique", repo)


def test_ability_spends_mana(resolver, rat_battle, rng):
    """
    Test that using an ability debits its mana cost and deals its damage.
    """
    result = resolver.resolve_turn(rat_battle, CombatAction.ability("pound"), rng)
    assert result.player.mana_spent == 3
    assert result.hero_mana == 2
    assert result.player.raw_damage == 3
    assert rat_battle.stats.abilities_used == 1


def test_finished_battle_rejects_actions(resolver, rat_battle, rng):
    """
    Test that no turn can be resolved once the battle is over.
    """
    rat_battle.monster.current_health = 1
    resolver.resolve_turn(rat_battle, CombatAction.weapon("sword"), rng)
    assert not rat_battle.active
    with pytest.raises(InvalidPlayerInput):
        resolver.resolve_turn(rat_battle, CombatAction.weapon("sword"), rng)


def test_missing_monster_is_a_programmer_error(resolver, hero, rng):
    """
    Test that a battle without a monster cannot be resolved.
    """
    battle = start_battle(hero, hero.model_copy(update={"is_monster": True}), BattleType.DETECTED, 1)
    battle.monster = None
    with pytest.raises(ProgrammerError):
        resolver.resolve_turn(battle, CombatAction.weapon("sword"), rng)


@pytest.mark.parametrize(
    "policy, expected",
    [
        (TieBreakPolicy.PLAYER_DEATH_FIRST, CombatState.PLAYER_DEFEAT),
        (TieBreakPolicy.PLAYER_FAVOURED, CombatState.PLAYER_VICTORY),
    ],
)
def test_mutual_kill_follows_tie_break(resolver, actor_factory, rng, policy, expected):
    """
    Test that both sides dying in the same turn is settled by the tie-break policy.
    """
    hero = actor_factory("Hero", is_monster=False, health=1)
    monster = actor_factory("Twin", is_monster=True, health=1)
    battle = start_battle(hero, monster, BattleType.DETECTED, 1, tie_break=policy)
    result = resolver.resolve_turn(battle, CombatAction.weapon("sword"), rng)
    assert result.hero_health == 0
    assert result.monster_health == 0
    assert battle.state == expected


def test_both_sides_use_the_pre_turn_snapshot(resolver, actor_factory, rng):
    """
    Test that a monster killed this turn still deals its damage.
    """
    hero = actor_factory("Hero", is_monster=False, health=5)
    monster = actor_factory("Glass", is_monster=True, health=1)
    battle = start_battle(hero, monster, BattleType.DETECTED, 1)
    result = resolver.resolve_turn(battle, CombatAction.weapon("sword"), rng)
    assert result.monster.damage_dealt == 1
    assert hero.current_health == 4
    assert battle.state == CombatState.PLAYER_VICTORY


def test_monster_without_actions_uses_basic_attack(resolver, actor_factory, rng):
    """
    Test the fallback action of a monster with an empty pool.
    """
    monster = actor_factory("Blob", is_monster=True, weapons=[])
    assert resolver.select_monster_action(monster, rng) == CombatAction.weapon("basic_attack")


def test_spells_deal_placeholder_damage(repo, actor_factory, rng):
    """
    Test that spells deal a single point of damage and cost no mana.
    """
    caster = actor_factory("Caster", is_monster=True, mana=5, spells=["death_bolt"])
    damage, cost, critical = evaluate_action(caster, CombatAction.spell("death_bolt"), 1, repo, rng)
    assert (damage, cost, critical) == (1, 0, False)


def test_critical_hit_doubles_weapon_damage(repo, actor_factory, mocker):
    """
    Test that a critical roll doubles the scaled weapon damage.
    """
    mocker.patch("crawler.combat.damage.roll_critical", return_value=True)
    attacker = actor_factory("Lucky", is_monster=False, crit_chance=100)
    damage, cost, critical = evaluate_action(attacker, CombatAction.weapon("sword"), 21, repo)
    assert critical
    assert damage == 4
    assert cost == 0


def test_same_seed_same_fight(repo):
    """
    Test that replaying a fight with the same seed gives the same turns.
    """

    def play(seed):
        battle = start_battle(
            create_hero(repo.require_hero("grim_stonebeard")),
            scale_monster_for_floor(repo.require_monster("orc"), 7),
            BattleType.DETECTED,
            7,
        )
        generator = random.Random(seed)
        turns = []
        while battle.active and len(turns) < 50:
            turns.append(resolve_combat_turn(battle, CombatAction.weapon("hammer"), generator))
        return turns

    assert play(42) == play(42)


def test_flee_costs_a_tenth_rounded_down(rat_skirmish):
    """
    Test the health and mana lost when fleeing, and the terminal state.
    """
    result = flee_battle(rat_skirmish)
    assert result.health_lost == 1
    assert result.mana_lost == 0
    assert rat_skirmish.state == CombatState.FLED
    assert not rat_skirmish.active
    assert not result.gold_penalty_applies
    assert not result.item_lost


def test_flee_never_kills(resolver, rat_skirmish):
    """
    Test that a hero at 1 health survives fleeing.
    """
    rat_skirmish.hero.current_health = 1
    result = resolver.flee(rat_skirmish)
    assert rat_skirmish.hero.current_health == 1
    assert result.health_lost == 0


def test_flee_from_stronger_monster_flags_gold_penalty(repo, hero, resolver):
    """
    Test that fleeing from floor 5 onwards costs gold.
    """
    necromancer = scale_monster_for_floor(repo.require_monster("necromancer"), 5)
    battle = start_battle(hero, necromancer, BattleType.DETECTED, 5)
    assert resolver.flee(battle).gold_penalty_applies


def test_cannot_flee_a_floor_boss(resolver, rat_battle):
    """
    Test that fleeing a floor boss is refused and the hero keeps everything.
    """
    before = rat_battle.hero.model_dump()
    with pytest.raises(InvalidPlayerInput):
        flee_battle(rat_battle)
    assert rat_battle.hero.model_dump() == before
    assert rat_battle.state == CombatState.AWAITING_PLAYER_ACTION
    assert rat_battle.active


def test_flee_from_stronger_monster_can_lose_an_item(repo, hero, resolver, mocker):
    """
    Test that a successful item loss roll is only flagged against stronger monsters.
    """
    mocker.patch("crawler.combat.combat_manager.roll_chance", return_value=True)
    necromancer = scale_monster_for_floor(repo.require_monster("necromancer"), 5)
    strong = start_battle(hero, necromancer, BattleType.DETECTED, 5)
    assert resolver.flee(strong).item_lost

    rat = scale_monster_for_floor(repo.require_monster("rat"), 1)
    weak = start_battle(hero.model_copy(deep=True), rat, BattleType.DETECTED, 1)
    assert not resolver.flee(weak).item_lost


def test_flee_item_loss_is_rare(repo, hero, resolver, rng):
    """
    Test that about one flee in ten from a stronger monster loses an item.
    """
    necromancer = repo.require_monster("necromancer")
    losses = 0
    for _ in range(3000):
        battle = start_battle(
            hero.model_copy(deep=True),
            scale_monster_for_floor(necromancer, 5),
            BattleType.DETECTED,
            5,
        )
        losses += resolver.flee(battle, rng).item_lost
    assert 0.07 < losses / 3000 < 0.13


def test_is_stronger_monster(actor_factory):
    """
    Test the three conditions that make a monster stronger.
    """
    weak = actor_factory("Weak", is_monster=True, health=10)
    assert not is_stronger_monster(weak, 4)
    assert is_stronger_monster(weak, 5)
    assert is_stronger_monster(actor_factory("Big", is_monster=True, health=51), 1)
    skilled = actor_factory("Skilled", is_monster=True, abilities=["dodge", "counter", "silence"])
    assert is_stronger_monster(skilled, 1)


def test_cannot_flee_a_finished_battle(resolver, rat_skirmish):
    """
    Test that fleeing twice is refused.
    """
    resolver.flee(rat_skirmish)
    with pytest.raises(InvalidPlayerInput):
        resolver.flee(rat_skirmish)
