"""
Constants and enumerations for the simulator.

Defines the balance constants of the dungeon (scaling caps, encounter and
rarity tables, reward chances, economy rates) together with the enumerations
for rarities, action types, battle types, combat states and currencies.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", " ").capitalize()


# ============================================================================
# RARITIES
# ============================================================================


class Rarity(NiceEnum):
    """Defines the rarity tiers shared by items and chests."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHICAL = "mythical"
    MYSTERIOUS = "mysterious"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this rarity."""
        return {
            Rarity.COMMON: "🗃️",
            Rarity.UNCOMMON: "🧰",
            Rarity.RARE: "🗄️",
            Rarity.EPIC: "🧳",
            Rarity.LEGENDARY: "🎁",
            Rarity.MYTHICAL: "🏺",
            Rarity.MYSTERIOUS: "📦",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this rarity."""
        return {
            Rarity.COMMON: "white",
            Rarity.UNCOMMON: "green",
            Rarity.RARE: "blue",
            Rarity.EPIC: "magenta",
            Rarity.LEGENDARY: "yellow",
            Rarity.MYTHICAL: "bold red",
            Rarity.MYSTERIOUS: "cyan",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies rarity color formatting to a message."""
        return f"[{self.color}]{message}[/]"


# Rarities an item (or a keyed chest) can have, in ascending order.
ITEM_RARITIES: tuple[Rarity, ...] = (
    Rarity.COMMON,
    Rarity.UNCOMMON,
    Rarity.RARE,
    Rarity.EPIC,
    Rarity.LEGENDARY,
    Rarity.MYTHICAL,
)


# ============================================================================
# ACTIONS AND COMBAT
# ============================================================================


class ActionType(NiceEnum):
    """Defines the kind of action a combatant can take in a turn."""

    WEAPON = "weapon"
    ABILITY = "ability"
    SPELL = "spell"


class WeaponType(NiceEnum):
    """Defines how a weapon is wielded."""

    MELEE = "melee"
    RANGED = "ranged"
    MAGIC = "magic"


class BattleType(NiceEnum):
    """Defines the circumstances a battle was started under."""

    FLOOR_BOSS = "floor_boss"
    EXPLORATION = "exploration"
    AMBUSH = "ambush"
    DETECTED = "detected"
    MIMIC = "mimic"


class CombatState(NiceEnum):
    """Defines the states of the combat resolution state machine."""

    AWAITING_PLAYER_ACTION = "awaiting_player_action"
    RESOLVING = "resolving"
    PLAYER_VICTORY = "player_victory"
    PLAYER_DEFEAT = "player_defeat"
    FLED = "fled"

    @property
    def is_terminal(self) -> bool:
        """Returns True if no further turn can be resolved from this state."""
        return self in (
            CombatState.PLAYER_VICTORY,
            CombatState.PLAYER_DEFEAT,
            CombatState.FLED,
        )


class TieBreakPolicy(NiceEnum):
    """Decides the outcome when both combatants drop to 0 in the same turn."""

    PLAYER_DEATH_FIRST = "player_death_first"
    PLAYER_FAVOURED = "player_favoured"


# ============================================================================
# EXPLORATION
# ============================================================================


class OutcomeType(NiceEnum):
    """Defines the possible results of exploring a floor once."""

    NOTHING = "nothing"
    MYSTERIOUS_CHEST = "mysterious_chest"
    DETECTED_MONSTER = "detected_monster"
    AMBUSH = "ambush"
    HIDDEN_ROOM = "hidden_room"
    TREASURE = "treasure"


# Cumulative thresholds are derived from this order, the weights sum to 100.
ENCOUNTER_TABLE: tuple[tuple[OutcomeType, int], ...] = (
    (OutcomeType.NOTHING, 25),
    (OutcomeType.MYSTERIOUS_CHEST, 10),
    (OutcomeType.DETECTED_MONSTER, 15),
    (OutcomeType.AMBUSH, 15),
    (OutcomeType.HIDDEN_ROOM, 15),
    (OutcomeType.TREASURE, 20),
)
ENCOUNTER_ROLL_RANGE = 100

# Monster tiers used by the random picker, by catalog floor number.
MONSTER_TIERS: dict[str, tuple[int, int]] = {
    "low": (1, 5),
    "mid": (6, 10),
    "high": (11, 20),
}

HIDDEN_ROOM_LOCKED_CHANCE = 0.4
HIDDEN_ROOM_KEYS = (1, 3)
LOCKED_ROOM_GOLD_MULTIPLIER = 2.0
HIDDEN_ROOM_GOLD_MULTIPLIER = 1.2

# Loose items that may be found in treasure and rooms besides potions.
TREASURE_ITEMS: tuple[str, ...] = (
    "scroll_of_healing",
    "enchantment_scroll",
    "repair_kit",
)
ROOM_ITEMS: tuple[str, ...] = TREASURE_ITEMS + ("lockpick",)

# Running from a fight costs a tenth of current health, mana and (sometimes) gold.
FLEE_PENALTY_DIVISOR = 10
FLEE_ITEM_LOSS_CHANCE = 0.1

# ============================================================================
# SCALING
# ============================================================================

MAX_SCALING_FLOOR = 500
MONSTER_LOOP_LENGTH = 20
SCALING_CYCLE_LENGTH = 20
GOLD_SCALING_PER_FLOOR = 3
DROP_RATE_STEP_FLOORS = 25

# (highest effective floor of the band, multiplier, name suffix)
POTION_TIERS: tuple[tuple[int, float, str], ...] = (
    (40, 1.0, "Small"),
    (80, 1.5, "Medium"),
    (120, 2.0, "Large"),
    (160, 2.5, "Great"),
    (200, 3.0, "Superior"),
    (240, 3.5, "Master"),
    (280, 4.0, "Legendary"),
    (320, 4.5, "Mythical"),
    (360, 5.0, "Divine"),
    (MAX_SCALING_FLOOR, 6.0, "Ultimate"),
)


class PotionType(NiceEnum):
    """Defines the potion families that can drop in the dungeon."""

    HEALTH = "health"
    MANA = "mana"
    HEALING = "healing"
    ENERGY = "energy"

    @property
    def base_value(self) -> int:
        """Returns the amount restored by the smallest potion of this type."""
        return {
            PotionType.HEALTH: 5,
            PotionType.MANA: 3,
            PotionType.HEALING: 8,
            PotionType.ENERGY: 4,
        }[self]

    @property
    def base_name(self) -> str:
        """Returns the name used for the smallest potion of this type."""
        return {
            PotionType.HEALTH: "Health Potion",
            PotionType.MANA: "Mana Potion",
            PotionType.HEALING: "Healing Elixir",
            PotionType.ENERGY: "Energy Potion",
        }[self]

    @property
    def unlock_floor(self) -> int:
        """Returns the floor from which this potion type can drop."""
        return {
            PotionType.HEALTH: 0,
            PotionType.MANA: 0,
            PotionType.HEALING: 20,
            PotionType.ENERGY: 40,
        }[self]


POTION_BASE_DROP_CHANCE = 0.25
POTION_DROP_FACTOR = 0.04
POTION_MAX_DROP_CHANCE = 0.8
POTION_BATTLE_BONUS: dict[BattleType, float] = {
    BattleType.FLOOR_BOSS: 0.3,
    BattleType.MIMIC: 0.2,
    BattleType.DETECTED: 0.1,
}

# ============================================================================
# REWARDS AND CHESTS
# ============================================================================

# Fixed weights used to pick the rarity of an opened mysterious chest.
MYSTERIOUS_CHEST_RARITY_WEIGHTS: tuple[tuple[Rarity, int], ...] = (
    (Rarity.COMMON, 25),
    (Rarity.UNCOMMON, 25),
    (Rarity.RARE, 20),
    (Rarity.EPIC, 15),
    (Rarity.LEGENDARY, 10),
    (Rarity.MYTHICAL, 5),
)

CHEST_ITEM_COUNT = (1, 3)
CHEST_CONSUMABLE_CHANCE = 0.2

KILL_GOLD_PER_HEALTH = 5
KILL_GOLD_PER_FLOOR = 2
FLOOR_BOSS_GOLD_MULTIPLIER = 2
KILL_POTION_CHANCE = 0.3
KILL_POTION_NAME = "health_potion"

MAX_KEYS = 100
MAX_CARRIED_CHESTS = 10

# Monsters above any of these are considered stronger and cost gold to flee.
STRONG_MONSTER_FLOOR = 5
STRONG_MONSTER_HEALTH = 50
STRONG_MONSTER_ABILITIES = 2

# ============================================================================
# ECONOMY
# ============================================================================


class Currency(NiceEnum):
    """Defines the five parallel currencies, each gating its own division."""

    GOLD = "gold"
    TOKENS = "tokens"
    DNG = "dng"
    HERO = "hero"
    ETH = "eth"

    @property
    def entry_cost(self) -> int:
        """Returns the cost, in this currency, of entering its division."""
        return {
            Currency.GOLD: 0,
            Currency.TOKENS: 1,
            Currency.DNG: 1,
            Currency.HERO: 1,
            Currency.ETH: 0,
        }[self]

    @property
    def reward_multiplier(self) -> int:
        """Returns the reward multiplier granted while in this division."""
        return {
            Currency.GOLD: 1,
            Currency.TOKENS: 2,
            Currency.DNG: 5,
            Currency.HERO: 10,
            Currency.ETH: 20,
        }[self]

    @property
    def next_tier(self) -> "Currency | None":
        """Returns the currency this one can be exchanged into, if any."""
        ladder = list(Currency)
        index = ladder.index(self)
        return ladder[index + 1] if index + 1 < len(ladder) else None


EXCHANGE_RATE = 1000

# ============================================================================
# COMBAT DEFAULTS
# ============================================================================

BASIC_ATTACK_ID = "basic_attack"
# Damage dealt by any spell until spell effects are designed.
SPELL_PLACEHOLDER_DAMAGE = 1
UNKNOWN_WEAPON_DAMAGE = 1
UNKNOWN_ABILITY_DAMAGE = 1
