"""
Tests for chest, kill and potion reward generation.
"""

from collections import Counter

import pytest

from crawler.character.monster import scale_monster_for_floor
from crawler.core.constants import BattleType, Currency, PotionType, Rarity
from crawler.items.potion import available_potion_types, generate_scaled_potion
from crawler.rewards.generator import (
    generate_chest_reward,
    generate_kill_reward,
    potion_drop_chance,
    roll_item_rarity,
    roll_potion_drop,
)
from crawler.rewards.reward import ItemDrop, Reward


@pytest.fixture
def rat(repo):
    return scale_monster_for_floor(repo.require_monster("rat"), 1)


def test_item_rarity_follows_weights(rng):
    """
    Test that item rarities are drawn in proportion to their weights.
    """
    table = {Rarity.COMMON: 80, Rarity.UNCOMMON: 20}
    counts = Counter(roll_item_rarity(table, rng) for _ in range(5000))
    assert set(counts) == {Rarity.COMMON, Rarity.UNCOMMON}
    assert counts[Rarity.COMMON] / 5000 == pytest.approx(0.8, abs=0.03)


def test_item_rarity_weights_are_normalised(rng):
    """
    Test that tables not adding up to 100 still work.
    """
    table = {Rarity.RARE: 1, Rarity.EPIC: 1}
    counts = Counter(roll_item_rarity(table, rng) for _ in range(4000))
    assert counts[Rarity.RARE] / 4000 == pytest.approx(0.5, abs=0.04)


def test_common_chest_reward_bounds(repo, rng):
    """
    Test that a common chest stays within its reward pools.
    """
    chest = repo.get_chest(Rarity.COMMON)
    for _ in range(300):
        reward = generate_chest_reward(chest, 1, rng)
        assert 11 <= reward.gold <= 55
        assert 0 <= reward.keys <= 2
        assert 1 <= len(reward.items) <= 3
        assert all(item.rarity in (Rarity.COMMON, Rarity.UNCOMMON) for item in reward.items)
        assert set(reward.consumables) <= {"Health Potion", "Mana Potion"}


def test_kill_reward_gold(rat, mocker):
    """
    Test the kill gold formula, the boss bonus and the division multiplier.
    """
    mocker.patch("crawler.rewards.generator.roll_chance", return_value=False)
    assert generate_kill_reward(rat, 1, BattleType.DETECTED).gold == 12
    assert generate_kill_reward(rat, 1, BattleType.FLOOR_BOSS).gold == 24
    assert generate_kill_reward(rat, 1, BattleType.FLOOR_BOSS, Currency.TOKENS).gold == 48
    assert generate_kill_reward(rat, 1, BattleType.DETECTED, Currency.ETH).gold == 240


def test_kill_reward_potion(rat, mocker):
    """
    Test that a successful roll adds a health potion.
    """
    mocker.patch("crawler.rewards.generator.roll_chance", return_value=True)
    reward = generate_kill_reward(rat, 1, BattleType.DETECTED)
    assert reward.consumables == ["health_potion"]


def test_potion_drop_chance():
    """
    Test the battle bonuses and the drop chance ceiling.
    """
    assert potion_drop_chance(1, BattleType.AMBUSH) == pytest.approx(0.25)
    assert potion_drop_chance(1, BattleType.DETECTED) == pytest.approx(0.35)
    assert potion_drop_chance(1, BattleType.FLOOR_BOSS) == pytest.approx(0.55)
    assert potion_drop_chance(500, BattleType.FLOOR_BOSS) == pytest.approx(0.8)


def test_roll_potion_drop(mocker, rng):
    """
    Test that a drop gives a potion scaled for the floor, and a miss gives None.
    """
    mocker.patch("crawler.rewards.generator.roll_chance", return_value=False)
    assert roll_potion_drop(41, BattleType.FLOOR_BOSS, rng) is None
    mocker.patch("crawler.rewards.generator.roll_chance", return_value=True)
    potion = roll_potion_drop(41, BattleType.FLOOR_BOSS, rng)
    assert potion.multiplier == 1.5
    assert potion.name.startswith("Medium ")


def test_scaled_potion(rng):
    """
    Test the name, id and value of a scaled potion.
    """
    potion = generate_scaled_potion(PotionType.HEALTH, 41)
    assert potion.id == "health_potion_1.5"
    assert potion.name == "Medium Health Potion"
    assert potion.value == 7


def test_potion_types_unlock_with_depth():
    """
    Test which potion families can drop on each floor.
    """
    assert available_potion_types(1) == [PotionType.HEALTH, PotionType.MANA]
    assert PotionType.HEALING in available_potion_types(20)
    assert PotionType.ENERGY not in available_potion_types(39)
    assert len(available_potion_types(40)) == 4


def test_reward_combine_and_describe():
    """
    Test merging two rewards and describing the result.
    """
    merged = Reward(gold=5, keys=1).combine(
        Reward(items=[ItemDrop(item_id="repair_kit")], consumables=["Mana Potion"])
    )
    assert merged.gold == 5
    assert merged.keys == 1
    assert merged.describe() == "5 gold, 1 keys, repair_kit, Mana Potion"
    assert Reward().is_empty
    assert Reward().describe() == "nothing"


def test_item_drop_needs_rarity_or_id():
    """
    Test that an item drop cannot be empty.
    """
    with pytest.raises(ValueError):
        ItemDrop()
