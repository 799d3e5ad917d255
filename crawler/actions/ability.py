from pydantic import BaseModel, ConfigDict, Field

from crawler.core.constants import UNKNOWN_ABILITY_DAMAGE


class Ability(BaseModel):
    """
    Represents an ability from the catalog.

    Abilities cost mana. Offensive abilities carry their own damage, every
    other ability falls back to a single point of damage when used.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="The unique identifier of the ability.",
    )
    name: str = Field(
        description="The display name of the ability.",
    )
    mana_cost: int = Field(
        default=0,
        ge=0,
        description="Mana debited from the user each time the ability is used.",
    )
    damage: int | None = Field(
        default=None,
        ge=0,
        description="Damage dealt by the ability, if it is offensive.",
    )
    category: str = Field(
        default="utility",
        description="Loose grouping (offensive, defensive, healing, ...).",
    )
    description: str = Field(
        default="",
        description="A description of the ability.",
    )

    @property
    def effective_damage(self) -> int:
        """Returns the damage dealt when the ability is used."""
        return self.damage if self.damage is not None else UNKNOWN_ABILITY_DAMAGE

    def is_affordable(self, current_mana: int) -> bool:
        """Checks whether an actor with `current_mana` can use this ability."""
        return current_mana >= self.mana_cost
