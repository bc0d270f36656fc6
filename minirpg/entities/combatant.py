"""
Combatant module for the game.

Defines the state shared by both sides of an encounter: a bounded hit
point pool and a map of status effects keyed by their kind.
"""

from typing import Any

from pydantic import BaseModel, Field

from minirpg.core.constants import StatusKind
from minirpg.core.utils import clamp
from minirpg.effects.status_effect import AnyStatus, StatusMap


class Combatant(BaseModel):
    """
    Base model for the hero and enemies.

    Hit points are always kept within [0, hp_max]; every change goes
    through `adjust_hp`.
    """

    name: str = Field(
        description="The name of the combatant.",
    )
    hp: int = Field(
        ge=0,
        description="Current hit points.",
    )
    hp_max: int = Field(
        ge=1,
        description="Maximum hit points.",
    )
    statuses: StatusMap = Field(
        default_factory=dict,
        description="Active status effects, at most one per kind.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates the hit point bounds."""
        if self.hp > self.hp_max:
            raise ValueError(
                f"{self.name} has hp {self.hp} above hp_max {self.hp_max}."
            )

    @property
    def log_name(self) -> str:
        """Returns how the combatant is referred to in log lines."""
        return self.name

    def adjust_hp(self, amount: int) -> int:
        """
        Adjusts hit points by the given amount, clamped to [0, hp_max].

        Args:
            amount (int):
                Positive to heal, negative to damage.

        Returns:
            int:
                The signed change actually applied.

        """
        before = self.hp
        self.hp = clamp(self.hp + amount, 0, self.hp_max)
        return self.hp - before

    def is_dead(self) -> bool:
        """Checks if the combatant has no hit points left."""
        return self.hp <= 0

    def has_status(self, kind: StatusKind) -> bool:
        """Checks if a status of the given kind is present."""
        return kind in self.statuses

    def add_status(self, status: AnyStatus) -> None:
        """Adds a status, replacing any existing status of the same kind."""
        self.statuses[status.kind] = status.model_copy()

    def remove_status(self, kind: StatusKind) -> None:
        """Removes the status of the given kind, if present."""
        self.statuses.pop(kind, None)

    def status_labels(self) -> list[str]:
        """Returns display labels for the active statuses."""
        return [status.label for status in self.statuses.values()]
