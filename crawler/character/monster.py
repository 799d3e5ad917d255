"""
Monster module for the simulator.

Handles the monster catalog lookups (one template per floor, looping every 20
floors, plus the floor-independent Mimic) and the creation of scaled monster
instances for a battle.
"""

from catchery import log_critical, log_debug
from pydantic import BaseModel, ConfigDict, Field

from crawler.character.actor import Actor
from crawler.core.constants import MONSTER_LOOP_LENGTH
from crawler.core.content import ContentRepository
from crawler.core.errors import ProgrammerError
from crawler.progression.scaling import scale_monster_stat

MIMIC_ID = "mimic"


class MonsterTemplate(BaseModel):
    """
    An immutable monster entry from the catalog.

    Templates are shared process-wide; battles always fight a scaled copy
    produced by `scale_monster_for_floor`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="The unique identifier of the monster.",
    )
    name: str = Field(
        description="The display name of the monster.",
    )
    floor_number: int | None = Field(
        default=None,
        ge=1,
        le=MONSTER_LOOP_LENGTH,
        description="The floor the monster guards, None if it can appear anywhere.",
    )
    health: int = Field(
        ge=1,
        description="Base maximum health.",
    )
    mana: int = Field(
        default=0,
        ge=0,
        description="Base maximum mana.",
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
        description="Ids of the weapons the monster attacks with.",
    )
    abilities: list[str] = Field(
        default_factory=list,
        description="Ids of the abilities the monster knows.",
    )
    spells: list[str] = Field(
        default_factory=list,
        description="Ids of the spells the monster knows.",
    )
    reward_gold: int | None = Field(
        default=None,
        ge=0,
        description="Flavour hint of the gold the monster guards.",
    )

    @property
    def is_floor_independent(self) -> bool:
        return self.floor_number is None


def catalog_floor(floor: int) -> int:
    """
    Maps any floor onto the 1..20 range of the monster catalog.

    Args:
        floor (int): The real floor number, starting at 1.

    Returns:
        int: The catalog floor, looping every 20 floors.

    """
    if floor < 1:
        raise ValueError(f"Floors start at 1, got {floor}")
    return ((floor - 1) % MONSTER_LOOP_LENGTH) + 1


def get_monster_for_floor(
    floor: int,
    repo: ContentRepository | None = None,
) -> MonsterTemplate:
    """
    Returns the template of the monster guarding `floor`.

    Floors above 20 reuse the catalog from the start (floor 25 is guarded by
    the floor 5 monster). The Mimic is never returned.

    Args:
        floor (int): The floor number, starting at 1.
        repo (ContentRepository | None): The catalogs to read from.

    Returns:
        MonsterTemplate: The matching template.

    Raises:
        ProgrammerError: If the catalog has no monster for that floor.

    """
    repo = repo or ContentRepository()
    target = catalog_floor(floor)
    candidates = repo.monsters_on_floor(target)
    if not candidates:
        message = f"No monster template for catalog floor {target}"
        log_critical(message, {"floor": floor, "catalog_floor": target})
        raise ProgrammerError(message)
    return candidates[0]


def get_mimic(repo: ContentRepository | None = None) -> MonsterTemplate:
    """Returns the Mimic template."""
    repo = repo or ContentRepository()
    return repo.require_monster(MIMIC_ID)


def scale_monster_for_floor(template: MonsterTemplate, floor: int) -> Actor:
    """
    Creates a battle-ready monster for `floor` from its template.

    Health and mana are multiplied by the monster stat multiplier of the floor
    and rounded down. Armor and critical chance are left unchanged. The
    result depends only on its inputs.

    Args:
        template (MonsterTemplate): The catalog entry to instantiate.
        floor (int): The floor the monster is fought on.

    Returns:
        Actor: A monster actor with health and mana at their maximum.

    """
    health = max(1, scale_monster_stat(template.health, floor))
    mana = scale_monster_stat(template.mana, floor)
    log_debug(
        f"Scaling {template.name} for floor {floor}",
        {"monster_id": template.id, "floor": floor, "health": health, "mana": mana},
    )
    return Actor(
        id=template.id,
        name=template.name,
        is_monster=True,
        max_health=health,
        current_health=health,
        max_mana=mana,
        current_mana=mana,
        armor=template.armor,
        crit_chance=template.crit_chance,
        weapons=list(template.weapons),
        abilities=list(template.abilities),
        spells=list(template.spells),
    )
