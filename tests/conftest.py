"""
Shared fixtures for the simulator tests.
"""

import random

import pytest

from crawler.character.actor import Actor
from crawler.character.hero import create_hero
from crawler.character.player import PlayerState
from crawler.core.content import ContentRepository


@pytest.fixture
def repo():
    """The content catalogs shipped with the package."""
    return ContentRepository()


@pytest.fixture
def rng():
    """A seeded generator, so every test run draws the same numbers."""
    return random.Random(1234)


@pytest.fixture
def hero(repo):
    """A fresh Grim Stonebeard: 10 HP, 5 MP, no armor."""
    return create_hero(repo.require_hero("grim_stonebeard"))


@pytest.fixture
def player(hero):
    """A player standing on floor 1 with the default hero."""
    state = PlayerState(player_id="tester", hero=hero)
    state.floor = state.floor.enter_dungeon()
    return state


def make_actor(
    name: str,
    is_monster: bool,
    health: int = 10,
    mana: int = 0,
    armor: int = 0,
    crit_chance: int = 0,
    weapons: list[str] | None = None,
    abilities: list[str] | None = None,
    spells: list[str] | None = None,
) -> Actor:
    """Builds an actor at full health and mana."""
    return Actor(
        id=name.lower().replace(" ", "_"),
        name=name,
        is_monster=is_monster,
        max_health=health,
        current_health=health,
        max_mana=mana,
        current_mana=mana,
        armor=armor,
        crit_chance=crit_chance,
        weapons=weapons if weapons is not None else ["sword"],
        abilities=abilities or [],
        spells=spells or [],
    )


@pytest.fixture
def actor_factory():
    """Returns the `make_actor` builder."""
    return make_actor
