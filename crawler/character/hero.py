from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field

from crawler.character.actor import Actor


class HeroTemplate(BaseModel):
    """A playable hero from the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="The unique identifier of the hero.",
    )
    name: str = Field(
        description="The display name of the hero.",
    )
    health: int = Field(
        ge=1,
        description="Starting maximum health.",
    )
    mana: int = Field(
        default=0,
        ge=0,
        description="Starting maximum mana.",
    )
    armor: int = Field(
        default=0,
        ge=0,
        description="Flat damage reduction.",
    )
    crit_chance: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Percent chance of a critical weapon hit.",
    )
    weapons: list[str] = Field(
        default_factory=list,
        description="Ids of the weapons the hero starts with.",
    )
    abilities: list[str] = Field(
        default_factory=list,
        description="Ids of the abilities the hero knows.",
    )
    spells: list[str] = Field(
        default_factory=list,
        description="Ids of the spells the hero knows.",
    )
    unlock_floor: int = Field(
        default=0,
        ge=0,
        description="Highest floor a player must reach to unlock the hero.",
    )
    description: str = Field(
        default="",
        description="A description of the hero.",
    )

    def model_post_init(self, _) -> None:
        if not self.weapons:
            raise ValueError(f"Hero '{self.id}' must start with at least one weapon.")


def create_hero(template: HeroTemplate) -> Actor:
    """
    Creates a full-health hero actor from its template.

    Args:
        template (HeroTemplate): The hero to instantiate.

    Returns:
        Actor: A new actor with health and mana at their maximum.

    """
    log_debug(f"Creating hero {template.name}", {"hero_id": template.id})
    return Actor(
        id=template.id,
        name=template.name,
        is_monster=False,
        max_health=template.health,
        current_health=template.health,
        max_mana=template.mana,
        current_mana=template.mana,
        armor=template.armor,
        crit_chance=template.crit_chance,
        weapons=list(template.weapons),
        abilities=list(template.abilities),
        spells=list(template.spells),
    )
