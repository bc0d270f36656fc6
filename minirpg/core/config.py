"""
Configuration module for the game.

Holds the tunable, non-rule settings of a game session, such as encounter
rates and presentation pacing. A JSON file can override any subset of the
defaults.
"""

import json
from pathlib import Path

from catchery import log_warning
from pydantic import BaseModel, Field, ValidationError

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class GameConfig(BaseModel):
    """Settings for a game session."""

    encounter_rate_grass: float = Field(
        default=0.12,
        ge=0.0,
        le=1.0,
        description="Random encounter probability per step on grass.",
    )
    encounter_rate_floor: float = Field(
        default=0.02,
        ge=0.0,
        le=1.0,
        description="Random encounter probability per step on a floor tile.",
    )
    enemy_turn_delay: float = Field(
        default=0.28,
        ge=0.0,
        description="Seconds the UI waits between the hero's action and the enemy turn.",
    )
    log_capacity: int = Field(
        default=70,
        ge=1,
        description="Maximum number of lines kept in the adventure log.",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the random source. None seeds from system entropy.",
    )
    save_path: Path = Field(
        default=Path("minirpg_save.json"),
        description="Where the save file is written.",
    )
    data_dir: Path = Field(
        default=DEFAULT_DATA_DIR,
        description="Directory holding the content data files.",
    )


def load_config(path: Path | None) -> GameConfig:
    """
    Loads a GameConfig from a JSON file, falling back to defaults.

    Args:
        path (Path | None):
            The JSON file to read. None, a missing file or an invalid file all
            produce the default configuration.

    Returns:
        GameConfig:
            The loaded configuration.

    """
    if path is None:
        return GameConfig()
    if not path.exists():
        log_warning(
            f"Config file '{path}' not found, using defaults",
            {"path": str(path)},
        )
        return GameConfig()
    try:
        with path.open("r", encoding="utf-8") as f:
            return GameConfig.model_validate(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        log_warning(
            f"Invalid config file '{path}', using defaults",
            {"path": str(path), "error": str(e)},
        )
        return GameConfig()
