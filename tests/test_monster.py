"""
Tests for monster selection and scaling.
"""

import pytest

from crawler.character.monster import (
    catalog_floor,
    get_mimic,
    get_monster_for_floor,
    scale_monster_for_floor,
)
from crawler.exploration.encounters import monster_tier_weights, select_random_monster


def test_catalog_loops_every_twenty_floors():
    """
    Test that floors above 20 reuse the catalog from the start.
    """
    assert catalog_floor(1) == 1
    assert catalog_floor(20) == 20
    assert catalog_floor(21) == 1
    assert catalog_floor(25) == 5
    assert catalog_floor(40) == 20
    with pytest.raises(ValueError):
        catalog_floor(0)


def test_floor_25_has_the_floor_5_monster(repo):
    """
    Test that floor 25 is guarded by the same template as floor 5.
    """
    assert get_monster_for_floor(25, repo).id == get_monster_for_floor(5, repo).id
    assert get_monster_for_floor(5, repo).id == "necromancer"


def test_floor_monster_is_never_the_mimic(repo):
    """
    Test that the floor lookup never returns the Mimic.
    """
    for floor in range(1, 101):
        assert get_monster_for_floor(floor, repo).id != "mimic"


def test_random_monster_is_never_the_mimic(repo, rng):
    """
    Test that wandering monsters never include the Mimic.
    """
    for floor in (1, 7, 15, 60):
        for _ in range(300):
            assert select_random_monster(floor, repo, rng).id != "mimic"


def test_monster_tier_weights_shift_with_depth():
    """
    Test that deeper floors favour stronger monsters, within bounds.
    """
    assert monster_tier_weights(1) == pytest.approx({"low": 0.7, "mid": 0.4, "high": 0.1})
    assert monster_tier_weights(6) == pytest.approx({"low": 0.6, "mid": 0.4, "high": 0.2})
    deep = monster_tier_weights(200)
    assert deep["low"] == pytest.approx(0.1)
    assert deep["high"] == pytest.approx(0.7)


def test_scale_monster_for_floor(repo):
    """
    Test that health and mana are scaled while armor and crit are kept.
    """
    dragon = repo.require_monster("black_dragon")
    monster = scale_monster_for_floor(dragon, 41)
    assert monster.is_monster
    assert monster.max_health == 24
    assert monster.current_health == 24
    assert monster.max_mana == 24
    assert monster.armor == dragon.armor
    assert monster.crit_chance == dragon.crit_chance


def test_scaling_does_not_touch_the_template(repo):
    """
    Test that a scaled instance is independent of its template.
    """
    rat = repo.require_monster("rat")
    monster = scale_monster_for_floor(rat, 1)
    monster.take_damage(1)
    monster.weapons.append("sword")
    assert rat.health == 2
    assert "sword" not in rat.weapons


def test_scaling_is_deterministic(repo):
    """
    Test that scaling the same template for the same floor gives equal monsters.
    """
    orc = repo.require_monster("orc")
    assert scale_monster_for_floor(orc, 77) == scale_monster_for_floor(orc, 77)


def test_get_mimic(repo):
    """
    Test that the Mimic template can be fetched directly.
    """
    assert get_mimic(repo).name == "Mimic"
