from pydantic import BaseModel, ConfigDict, Field

from crawler.core.constants import SPELL_PLACEHOLDER_DAMAGE


class Spell(BaseModel):
    """
    Represents a spell from the catalog.

    Spell effects are not designed yet: every spell deals a fixed placeholder
    damage and costs no mana, for heroes and monsters alike.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="The unique identifier of the spell.",
    )
    name: str = Field(
        description="The display name of the spell.",
    )
    element: str = Field(
        default="arcane",
        description="Flavour element of the spell.",
    )
    description: str = Field(
        default="",
        description="A description of the spell.",
    )

    @property
    def damage(self) -> int:
        return SPELL_PLACEHOLDER_DAMAGE
