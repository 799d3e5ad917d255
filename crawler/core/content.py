"""
Content repository for the simulator.

Loads the read-only JSON catalogs (monsters, heroes, weapons, abilities,
spells, chests) once into validated pydantic models keyed by id.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from catchery import log_critical, log_debug, log_warning
from pydantic import BaseModel

from crawler.core.constants import Rarity
from crawler.core.errors import DataLoadError, ProgrammerError
from crawler.core.utils import Singleton

if TYPE_CHECKING:
    from crawler.actions.ability import Ability
    from crawler.actions.spell import Spell
    from crawler.character.hero import HeroTemplate
    from crawler.character.monster import MonsterTemplate
    from crawler.items.chest import ChestTemplate
    from crawler.items.weapon import Weapon

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class ContentRepository(metaclass=Singleton):
    """
    One-stop registry for every read-only catalog that needs fast by-id access.

    The first construction loads every JSON file from `data_dir`; later calls
    return the same, already loaded, instance. To load catalogs from another
    directory, call `ContentRepository.reset()` before constructing it again,
    or call `reload()` on the shared instance.
    """

    monsters: dict[str, MonsterTemplate]
    heroes: dict[str, HeroTemplate]
    weapons: dict[str, Weapon]
    abilities: dict[str, Ability]
    spells: dict[str, Spell]
    chests: dict[str, ChestTemplate]

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the ContentRepository.

        Args:
            data_dir (Path | None):
                The directory containing the catalog files. Defaults to the
                catalogs shipped with the package.

        """
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self.reload(self.data_dir)

    def reload(self, root: Path) -> None:
        """
        (Re)load all JSON catalogs from disk.

        Args:
            root (Path):
                The directory containing data files to load.

        Raises:
            DataLoadError: If a file is missing, malformed, or holds
                duplicate or invalid entries.

        """
        from crawler.actions.ability import Ability
        from crawler.actions.spell import Spell
        from crawler.character.hero import HeroTemplate
        from crawler.character.monster import MonsterTemplate
        from crawler.items.chest import ChestTemplate
        from crawler.items.weapon import Weapon

        self.monsters = _load_json_file(
            root / "monsters.json",
            _index_by_id(MonsterTemplate),
            "monsters",
        )
        self.heroes = _load_json_file(
            root / "heroes.json",
            _index_by_id(HeroTemplate),
            "heroes",
        )
        self.weapons = _load_json_file(
            root / "weapons.json",
            _index_by_id(Weapon),
            "weapons",
        )
        self.abilities = _load_json_file(
            root / "abilities.json",
            _index_by_id(Ability),
            "abilities",
        )
        self.spells = _load_json_file(
            root / "spells.json",
            _index_by_id(Spell),
            "spells",
        )
        self.chests = _load_json_file(
            root / "chests.json",
            _index_by_id(ChestTemplate),
            "chests",
        )

    # ============================================================================
    # LOOKUPS
    # ============================================================================

    def _get_from_collection(self, collection_name: str, item_id: str) -> Any | None:
        """
        Generic helper to get an entry from any collection.

        Args:
            collection_name (str):
                Name of the collection attribute (e.g., 'weapons', 'spells').
            item_id (str):
                Identifier of the entry to retrieve.

        Returns:
            Any | None:
                The entry if found, None otherwise.

        """
        collection = getattr(self, collection_name, None)
        if collection is None:
            log_warning(
                f"Collection '{collection_name}' not found in ContentRepository.",
                {"collection_name": collection_name, "item_id": item_id},
            )
            return None
        return collection.get(item_id)

    def _require(self, collection_name: str, item_id: str) -> Any:
        """Like `_get_from_collection`, but a missing entry is a ProgrammerError."""
        entry = self._get_from_collection(collection_name, item_id)
        if entry is None:
            message = f"Unknown id '{item_id}' in {collection_name} catalog."
            log_critical(
                message,
                {"collection_name": collection_name, "item_id": item_id},
            )
            raise ProgrammerError(message)
        return entry

    def get_monster(self, monster_id: str) -> MonsterTemplate | None:
        """Get a monster template by id, or None if not found."""
        return self._get_from_collection("monsters", monster_id)

    def get_hero(self, hero_id: str) -> HeroTemplate | None:
        """Get a hero template by id, or None if not found."""
        return self._get_from_collection("heroes", hero_id)

    def get_weapon(self, weapon_id: str) -> Weapon | None:
        """Get a weapon by id, or None if not found."""
        return self._get_from_collection("weapons", weapon_id)

    def get_ability(self, ability_id: str) -> Ability | None:
        """Get an ability by id, or None if not found."""
        return self._get_from_collection("abilities", ability_id)

    def get_spell(self, spell_id: str) -> Spell | None:
        """Get a spell by id, or None if not found."""
        return self._get_from_collection("spells", spell_id)

    def require_monster(self, monster_id: str) -> MonsterTemplate:
        return self._require("monsters", monster_id)

    def require_hero(self, hero_id: str) -> HeroTemplate:
        return self._require("heroes", hero_id)

    def get_chest(self, rarity: Rarity) -> ChestTemplate:
        """
        Get the chest template of the given rarity.

        Args:
            rarity (Rarity): The chest rarity, including MYSTERIOUS.

        Returns:
            ChestTemplate: The matching template.

        Raises:
            ProgrammerError: If no chest of that rarity is in the catalog.

        """
        for chest in self.chests.values():
            if chest.rarity == rarity:
                return chest
        message = f"No chest of rarity '{rarity.value}' in chests catalog."
        log_critical(message, {"rarity": rarity.value})
        raise ProgrammerError(message)

    def monsters_on_floor(self, floor_number: int) -> list[MonsterTemplate]:
        """Returns every template whose catalog floor equals `floor_number`."""
        return [m for m in self.monsters.values() if m.floor_number == floor_number]

    def heroes_unlocked_at(self, floor: int) -> list[HeroTemplate]:
        """Returns every hero unlocked at or before `floor`."""
        return [h for h in self.heroes.values() if h.unlock_floor <= floor]


def _index_by_id(model: type[BaseModel]) -> Callable[[list[dict]], dict[str, Any]]:
    """
    Builds a loader that validates entries into `model` and indexes them by id.

    Args:
        model (type[BaseModel]): The pydantic model every entry must satisfy.

    Returns:
        Callable[[list[dict]], dict[str, Any]]: The loader.

    """

    def loader(data: list[dict]) -> dict[str, Any]:
        entries: dict[str, Any] = {}
        for entry_data in data:
            entry = model(**entry_data)
            entry_id = getattr(entry, "id")
            if entry_id in entries:
                raise ValueError(f"Duplicate {model.__name__} id: {entry_id}")
            entries[entry_id] = entry
        return entries

    loader.__name__ = f"load_{model.__name__.lower()}"
    return loader


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[str, Any]],
    description: str,
) -> dict[str, Any]:
    """Helper to load and validate JSON files"""
    try:
        log_debug(
            f"Loading {description} using {loader_func.__name__}...",
            {"file": str(filepath)},
        )
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not data:
            raise ValueError(f"Empty data list in {filepath}")
        if not isinstance(data, list):
            raise ValueError(f"Expected list in {filepath}, got {type(data).__name__}")
        return loader_func(data)
    except (json.JSONDecodeError, FileNotFoundError, ValueError) as e:
        raise DataLoadError(f"File {filepath} raised an error: {e}") from e
