"""
Persistence module for the game.

Serializes a game session to a JSON save file and reads it back. A save
file that is unreadable, or that lacks the hero or the world state, is
rejected as a whole: the caller keeps its current state.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from minirpg.combat.combat_session import CombatRecord
from minirpg.entities.hero import Hero
from minirpg.world.state import QuestLog, WorldState

SAVE_VERSION = 2


class SaveError(ValueError):
    """Raised when a save file cannot be read or is malformed."""


class SaveMeta(BaseModel):
    """Bookkeeping stored alongside the game state."""

    version: int = Field(
        default=SAVE_VERSION,
        description="Format version of the save file.",
    )
    saved_at: str | None = Field(
        default=None,
        description="ISO 8601 timestamp of when the file was written.",
    )
    seed: int | None = Field(
        default=None,
        description="Seed the session's random source was created with.",
    )


class SaveRecord(BaseModel):
    """Everything needed to resume a game session."""

    meta: SaveMeta = Field(
        default_factory=SaveMeta,
        description="Save file bookkeeping.",
    )
    hero: Hero = Field(
        description="The hero, including status effects.",
    )
    world: WorldState = Field(
        description="World flags.",
    )
    quests: QuestLog = Field(
        default_factory=QuestLog,
        description="Quest progress.",
    )
    turn: int = Field(
        default=0,
        ge=0,
        description="The world turn counter.",
    )
    log: list[str] = Field(
        default_factory=list,
        description="The adventure log, newest first.",
    )
    combat: CombatRecord | None = Field(
        default=None,
        description="The combat session in progress, if any.",
    )


def write_save(record: SaveRecord, path: Path) -> SaveRecord:
    """
    Stamps a record with the current time and writes it to disk.

    Args:
        record (SaveRecord):
            The record to write.
        path (Path):
            Destination file.

    Returns:
        SaveRecord:
            The record as written.

    """
    stamped = record.model_copy(
        update={
            "meta": record.meta.model_copy(
                update={
                    "version": SAVE_VERSION,
                    "saved_at": datetime.now(timezone.utc).isoformat(),
                }
            )
        }
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(stamped.model_dump_json(indent=2))
    return stamped


def read_save(path: Path) -> SaveRecord:
    """
    Reads and validates a save file.

    Args:
        path (Path):
            The save file.

    Returns:
        SaveRecord:
            The validated record.

    Raises:
        FileNotFoundError: If there is no save file.
        SaveError: If the file cannot be read, is not valid UTF-8 JSON, or is
            missing required state.

    """
    if not path.exists():
        raise FileNotFoundError(f"No save file at {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SaveError(f"Save file {path} cannot be read: {e}") from e
    except ValueError as e:
        raise SaveError(f"Save file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict) or data.get("hero") is None or data.get("world") is None:
        raise SaveError(f"Save file {path} is missing the hero or world state.")
    try:
        return SaveRecord.model_validate(data)
    except ValueError as e:
        raise SaveError(f"Save file {path} is malformed: {e}") from e
