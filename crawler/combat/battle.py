from pydantic import BaseModel, Field

from crawler.actions.action import CombatAction
from crawler.character.actor import Actor
from crawler.core.constants import BattleType, CombatState, TieBreakPolicy


class BattleStats(BaseModel):
    """Running totals of a battle, from the hero's point of view."""

    turns: int = Field(default=0, ge=0, description="Turns resolved so far.")
    damage_dealt: int = Field(default=0, ge=0, description="Damage dealt to the monster.")
    damage_received: int = Field(default=0, ge=0, description="Damage taken by the hero.")
    mana_used: int = Field(default=0, ge=0, description="Mana spent by the hero.")
    critical_hits: int = Field(default=0, ge=0, description="Critical hits landed by the hero.")
    weapon_attacks: int = Field(default=0, ge=0, description="Weapon actions taken.")
    abilities_used: int = Field(default=0, ge=0, description="Ability actions taken.")
    spells_cast: int = Field(default=0, ge=0, description="Spell actions taken.")


class Battle(BaseModel):
    """
    One fight between the player's hero and a single monster.

    The battle owns its monster instance and a reference to the hero actor;
    the resolver updates both in place as turns are resolved.
    """

    hero: Actor = Field(
        description="The player's hero.",
    )
    monster: Actor | None = Field(
        default=None,
        description="The monster instance being fought.",
    )
    battle_type: BattleType = Field(
        description="The circumstances the battle was started under.",
    )
    floor: int = Field(
        ge=1,
        description="The floor the battle takes place on.",
    )
    turn_number: int = Field(
        default=1,
        ge=1,
        description="The turn awaiting resolution, starting at 1.",
    )
    state: CombatState = Field(
        default=CombatState.AWAITING_PLAYER_ACTION,
        description="The state of the combat state machine.",
    )
    active: bool = Field(
        default=True,
        description="False once either side is defeated or the hero fled.",
    )
    tie_break: TieBreakPolicy = Field(
        default=TieBreakPolicy.PLAYER_DEATH_FIRST,
        description="Outcome when both combatants fall in the same turn.",
    )
    last_player_action: CombatAction | None = Field(
        default=None,
        description="The action the hero took in the last resolved turn.",
    )
    last_monster_action: CombatAction | None = Field(
        default=None,
        description="The action the monster took in the last resolved turn.",
    )
    stats: BattleStats = Field(
        default_factory=BattleStats,
        description="Running totals of the battle.",
    )

    def model_post_init(self, _) -> None:
        if self.monster is not None and not self.monster.is_monster:
            raise ValueError(f"'{self.monster.name}' is not a monster actor.")
        if self.hero.is_monster:
            raise ValueError(f"'{self.hero.name}' is not a hero actor.")


class ActionOutcome(BaseModel):
    """What one side's action did during a turn."""

    actor_id: str = Field(description="Id of the acting combatant.")
    action: CombatAction = Field(description="The action taken.")
    raw_damage: int = Field(ge=0, description="Damage before the target's armor.")
    damage_dealt: int = Field(ge=0, description="Health actually removed from the target.")
    mana_spent: int = Field(default=0, ge=0, description="Mana debited from the actor.")
    critical: bool = Field(default=False, description="Whether the hit was critical.")


class TurnResult(BaseModel):
    """The outcome of one resolved turn."""

    turn_number: int = Field(description="The turn that was resolved.")
    player: ActionOutcome = Field(description="The hero's action and its effect.")
    monster: ActionOutcome = Field(description="The monster's action and its effect.")
    state: CombatState = Field(description="The battle state after the turn.")
    hero_health: int = Field(description="Hero health after the turn.")
    hero_mana: int = Field(description="Hero mana after the turn.")
    monster_health: int = Field(description="Monster health after the turn.")
    monster_mana: int = Field(description="Monster mana after the turn.")

    @property
    def is_over(self) -> bool:
        return self.state.is_terminal


class FleeResult(BaseModel):
    """The cost of running away from a monster."""

    health_lost: int = Field(default=0, ge=0, description="Health lost while escaping.")
    mana_lost: int = Field(default=0, ge=0, description="Mana lost while escaping.")
    gold_penalty_applies: bool = Field(
        default=False,
        description="Whether the player also loses part of their gold.",
    )
    item_lost: bool = Field(
        default=False,
        description="Whether the player also loses a random item.",
    )
