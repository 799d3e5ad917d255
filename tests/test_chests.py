"""
Tests for opening, carrying and rolling chests.
"""

import random

import pytest

from crawler.core.constants import BattleType, Rarity
from crawler.core.errors import InsufficientResource, InvalidPlayerInput, InventoryFull
from crawler.core.utils import roll_chance
from crawler.exploration.chests import (
    chest_rarity_weights,
    open_carried_chest,
    open_chest,
    roll_chest_rarity,
    take_chest,
)


@pytest.fixture
def mysterious_chest(repo):
    return repo.get_chest(Rarity.MYSTERIOUS)


def test_mimic_rate_is_about_half(repo, player, mysterious_chest, rng):
    """
    Test that about half of the mysterious chests opened are mimics.
    """
    openings = [open_chest(mysterious_chest, 3, player, rng, repo) for _ in range(4000)]
    mimics = [opening for opening in openings if opening.is_mimic]
    assert 0.46 < len(mimics) / len(openings) < 0.54


def test_mimic_roll_converges_over_a_million_openings(mysterious_chest):
    """
    Test that the mimic roll lands within half a percent of 500,000 over a million openings.
    """
    generator = random.Random(2024)
    mimics = sum(roll_chance(mysterious_chest.mimic_chance, generator) for _ in range(1_000_000))
    assert mysterious_chest.mimic_chance == 0.5
    assert 495_000 <= mimics <= 505_000


def test_mimic_gives_a_battle_and_no_reward(repo, player, mysterious_chest, mocker, rng):
    """
    Test that a mimic comes scaled for the floor, with nothing credited.
    """
    mocker.patch("crawler.exploration.chests.roll_chance", return_value=True)
    opening = open_chest(mysterious_chest, 41, player, rng, repo)
    assert opening.is_mimic
    assert opening.reward is None
    assert opening.battle_type == BattleType.MIMIC
    assert opening.mimic.id == "mimic"
    assert opening.mimic.max_health == 12
    assert opening.player == player


def test_safe_mysterious_chest_pays_out(repo, player, mysterious_chest, mocker, rng):
    """
    Test that a mysterious chest that is not a mimic credits a reward for free.
    """
    mocker.patch("crawler.exploration.chests.roll_chance", return_value=False)
    opening = open_chest(mysterious_chest, 1, player, rng, repo)
    assert not opening.is_mimic
    assert opening.reward_rarity in (
        Rarity.COMMON,
        Rarity.UNCOMMON,
        Rarity.RARE,
        Rarity.EPIC,
        Rarity.LEGENDARY,
        Rarity.MYTHICAL,
    )
    assert opening.player.gold == opening.reward.gold
    assert opening.player.keys == opening.reward.keys


def test_keyed_chest_needs_keys(repo, player, rng):
    """
    Test that a rare chest with two keys out of three is refused.
    """
    player.keys = 2
    with pytest.raises(InsufficientResource) as excinfo:
        open_chest(repo.get_chest(Rarity.RARE), 1, player, rng, repo)
    assert excinfo.value.required == 3
    assert excinfo.value.available == 2
    assert player.keys == 2


def test_keyed_chest_spends_keys(repo, player, rng):
    """
    Test that opening a chest spends its keys and credits its reward.
    """
    player.keys = 3
    chest = repo.get_chest(Rarity.RARE)
    opening = open_chest(chest, 1, player, rng, repo)
    assert opening.player.keys == min(100, 3 - 3 + opening.reward.keys)
    assert 55 <= opening.reward.gold <= 220
    assert 1 <= len(opening.reward.items) <= 3
    assert player.keys == 3


def test_take_chest_until_full(repo, player):
    """
    Test that at most ten chests can be carried.
    """
    chest = repo.get_chest(Rarity.COMMON)
    for _ in range(10):
        player = take_chest(chest, player, 2)
    assert len(player.carried_chests) == 10
    with pytest.raises(InventoryFull):
        take_chest(chest, player, 2)
    assert len(player.carried_chests) == 10


def test_open_carried_chest(repo, player, rng):
    """
    Test that a carried chest is removed once opened.
    """
    player.keys = 1
    player = take_chest(repo.get_chest(Rarity.COMMON), player, 4)
    opening = open_carried_chest(player, 0, rng, repo)
    assert opening.player.carried_chests == []
    assert len(player.carried_chests) == 1
    # Gold is scaled for the floor the chest was found on.
    assert 14 <= opening.reward.gold <= 70


def test_open_carried_chest_bad_index(player, rng):
    """
    Test that opening a chest that is not carried is refused.
    """
    with pytest.raises(InvalidPlayerInput):
        open_carried_chest(player, 0, rng)


def test_rarity_weights_shift_with_depth():
    """
    Test the weights on the first floor and from floor 50 on.
    """
    shallow = chest_rarity_weights(1)
    assert shallow[Rarity.COMMON] == 40
    assert shallow[Rarity.MYTHICAL] == 0
    deep = chest_rarity_weights(50)
    assert deep == {
        Rarity.COMMON: 30,
        Rarity.UNCOMMON: 30,
        Rarity.RARE: 25,
        Rarity.EPIC: 10,
        Rarity.LEGENDARY: 3,
        Rarity.MYTHICAL: 2,
    }
    assert sum(deep.values()) == 100


def test_luck_moves_weight_away_from_common():
    """
    Test that luck is capped and never makes a weight negative.
    """
    lucky = chest_rarity_weights(50, luck=10)
    assert lucky[Rarity.COMMON] == pytest.approx(10)
    assert lucky[Rarity.RARE] == pytest.approx(33)
    assert chest_rarity_weights(50, luck=1000) == chest_rarity_weights(50, luck=10)
    assert all(weight >= 0 for weight in chest_rarity_weights(1, luck=50).values())


def test_shallow_floors_never_roll_mythical(rng):
    """
    Test that a zero weight rarity is never rolled.
    """
    rolled = {roll_chest_rarity(1, rng=rng) for _ in range(2000)}
    assert Rarity.MYTHICAL not in rolled
    assert Rarity.MYSTERIOUS not in rolled
