"""
World state module for the game.

Defines the persistent, non-hero state of an adventure: world flags and
the elder's quest.
"""

from pydantic import BaseModel, Field

from minirpg.core.constants import QuestState


class WorldState(BaseModel):
    """Flags describing what the hero has done in the world."""

    current_map: str = Field(
        default="town",
        description="The map the hero is on.",
    )
    boss_defeated: bool = Field(
        default=False,
        description="Set once the dungeon boss has been defeated.",
    )
    sign_read: bool = Field(
        default=False,
        description="Whether the town sign has been read.",
    )
    opened_chests: set[str] = Field(
        default_factory=set,
        description="Keys ('map:x,y') of chests already opened.",
    )


class QuestLog(BaseModel):
    """Progress of the game's quests."""

    elder: QuestState = Field(
        default=QuestState.NOT_STARTED,
        description="State of the elder's quest to defeat the dungeon boss.",
    )

    def advance_on_boss_defeat(self) -> bool:
        """
        Moves the elder's quest to BOSS_DEFEATED if it is active.

        Returns:
            bool:
                True if the quest advanced.

        """
        if self.elder == QuestState.ACTIVE:
            self.elder = QuestState.BOSS_DEFEATED
            return True
        return False
