"""
Enemy module for the game.

Defines the enemy archetypes loaded from the content data and the enemy
instances spawned fresh for every encounter.
"""

from typing import Any

from pydantic import BaseModel, Field

from minirpg.core.constants import EnemyIntent
from minirpg.entities.combatant import Combatant


class EnemyArchetype(BaseModel):
    """Level-1 template an ordinary enemy is scaled from."""

    name: str = Field(
        description="The name given to enemies of this archetype.",
    )
    hp: int = Field(
        ge=1,
        description="Base hit points.",
    )
    atk: int = Field(
        ge=0,
        description="Base attack.",
    )
    defense: int = Field(
        ge=0,
        description="Base defense.",
    )
    xp: int = Field(
        ge=0,
        description="Base experience reward.",
    )
    gold: tuple[int, int] = Field(
        description="Inclusive range of the base gold reward.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates the gold range."""
        low, high = self.gold
        if low < 0 or high < low:
            raise ValueError(
                f"Invalid gold range {self.gold} for archetype '{self.name}'."
            )


class Enemy(Combatant):
    """
    An enemy in an encounter.

    Owned exclusively by the combat session and discarded when it ends.
    """

    level: int = Field(
        ge=1,
        description="The enemy's level.",
    )
    atk: int = Field(
        ge=0,
        description="Attack, raised permanently by Enrage.",
    )
    defense: int = Field(
        ge=0,
        description="Defense.",
    )
    xp_reward: int = Field(
        ge=0,
        description="Experience awarded on victory.",
    )
    gold_reward: int = Field(
        ge=0,
        description="Gold awarded on victory.",
    )
    intent: EnemyIntent = Field(
        default=EnemyIntent.ATTACK,
        description="Last chosen action, for display.",
    )
    enraged: bool = Field(
        default=False,
        description="Whether the one-time Enrage has been used.",
    )
    is_boss: bool = Field(
        default=False,
        description="Whether this is the dungeon boss.",
    )
