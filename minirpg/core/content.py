import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from catchery import log_warning

from minirpg.core.logging import log_debug
from minirpg.core.utils import Singleton
from minirpg.entities.enemy import EnemyArchetype


class ContentRepository(metaclass=Singleton):
    """
    One-stop registry for the game data that needs fast by-name access.
    """

    archetypes: dict[str, EnemyArchetype]

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the ContentRepository.

        Args:
            data_dir (Path | None):
                The directory containing data files to load.

        """
        if data_dir:
            self.reload(data_dir)
            self.loaded = True
        elif not hasattr(self, "loaded"):
            raise ValueError(
                "ContentRepository must be initialized with a valid data_dir on first use."
            )

    def reload(self, root: Path) -> None:
        """
        (Re)load all JSON assets from disk.

        Args:
            root (Path):
                The directory containing data files to load.
        """
        self.archetypes = _load_json_file(
            root / "archetypes.json",
            self._load_archetypes,
            "enemy archetypes",
        )

    def get_archetype(self, name: str) -> EnemyArchetype | None:
        """Get an enemy archetype by name, or None if not found."""
        entry = self.archetypes.get(name)
        if entry is None:
            log_warning(
                f"Archetype '{name}' not found in ContentRepository.",
                {"item_name": name, "known": list(self.archetypes)},
            )
        return entry

    def archetype_pool(self) -> list[EnemyArchetype]:
        """Returns every archetype, in data file order."""
        return list(self.archetypes.values())

    @staticmethod
    def _load_archetypes(data: list[dict]) -> dict[str, EnemyArchetype]:
        """
        Load enemy archetypes from JSON data.

        Args:
            data (list[dict]): List of archetype data dictionaries.

        Returns:
            dict[str, EnemyArchetype]: Dictionary mapping names to archetypes.

        Raises:
            ValueError: If duplicate archetype names are found.

        """
        archetypes: dict[str, EnemyArchetype] = {}
        for archetype_data in data:
            archetype = EnemyArchetype(**archetype_data)
            if archetype.name in archetypes:
                raise ValueError(f"Duplicate archetype name: {archetype.name}")
            archetypes[archetype.name] = archetype
        return archetypes


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[str, Any]],
    description: str,
) -> dict[str, Any]:
    """Helper to load and validate JSON files"""
    try:
        log_debug(
            f"Loading {description} using {loader_func.__name__}",
            {"path": str(filepath)},
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
        raise ValueError(f"File {filepath} raised an error: {e}") from e
