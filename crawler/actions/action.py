from pydantic import BaseModel, ConfigDict, Field

from crawler.core.constants import ActionType


class CombatAction(BaseModel):
    """The action a combatant submits for one turn: a kind and a catalog id."""

    model_config = ConfigDict(frozen=True)

    type: ActionType = Field(
        description="Whether the action uses a weapon, an ability or a spell.",
    )
    id: str = Field(
        description="The catalog id of the weapon, ability or spell used.",
    )

    def __str__(self) -> str:
        return f"{self.type.value}:{self.id}"

    @classmethod
    def weapon(cls, weapon_id: str) -> "CombatAction":
        return cls(type=ActionType.WEAPON, id=weapon_id)

    @classmethod
    def ability(cls, ability_id: str) -> "CombatAction":
        return cls(type=ActionType.ABILITY, id=ability_id)

    @classmethod
    def spell(cls, spell_id: str) -> "CombatAction":
        return cls(type=ActionType.SPELL, id=spell_id)
