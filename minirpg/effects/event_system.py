"""
Event system module for the game.

Defines the structured records the combat engine reports back to its
caller for every resolved action: log lines, damage events, status events
and the session outcome after the action.
"""

from pydantic import BaseModel, Field

from minirpg.core.constants import (
    CombatantSide,
    SessionOutcome,
    StatusChange,
    StatusKind,
)


class DamageEvent(BaseModel):
    """Damage dealt to one side, by a hit or a status tick."""

    target: CombatantSide = Field(
        description="The side that took the damage.",
    )
    amount: int = Field(
        ge=0,
        description="The amount of hp removed.",
    )
    source: str = Field(
        default="hit",
        description="What caused the damage (e.g. 'attack', 'poison').",
    )


class StatusEvent(BaseModel):
    """A status effect being applied to, or expiring on, one side."""

    target: CombatantSide = Field(
        description="The side the status belongs to.",
    )
    kind: StatusKind = Field(
        description="The kind of status effect.",
    )
    change: StatusChange = Field(
        description="Whether the status was applied or expired.",
    )


class ActionResult(BaseModel):
    """
    Everything that happened while resolving a hero action (and any enemy
    turns that followed it).
    """

    log_lines: list[str] = Field(
        default_factory=list,
        description="Player-facing log lines, oldest first.",
    )
    damage_events: list[DamageEvent] = Field(
        default_factory=list,
        description="Damage events, in the order they happened.",
    )
    status_events: list[StatusEvent] = Field(
        default_factory=list,
        description="Status applications and expirations, in order.",
    )
    session_outcome: SessionOutcome = Field(
        default=SessionOutcome.IN_PROGRESS,
        description="The outcome of the session after this action.",
    )
    turn_consumed: bool = Field(
        default=False,
        description="False when the action was rejected as a no-op.",
    )

    def log(self, line: str) -> None:
        """Appends a log line."""
        self.log_lines.append(line)

    def damage(self, target: CombatantSide, amount: int, source: str = "hit") -> None:
        """Records a damage event."""
        self.damage_events.append(
            DamageEvent(target=target, amount=amount, source=source)
        )

    def status(
        self, target: CombatantSide, kind: StatusKind, change: StatusChange
    ) -> None:
        """Records a status event."""
        self.status_events.append(
            StatusEvent(target=target, kind=kind, change=change)
        )

    def merge(self, other: "ActionResult") -> None:
        """
        Appends the events of another result to this one and adopts its
        outcome.

        Args:
            other (ActionResult):
                The result to merge in.

        """
        self.log_lines.extend(other.log_lines)
        self.damage_events.extend(other.damage_events)
        self.status_events.extend(other.status_events)
        self.session_outcome = other.session_outcome
        self.turn_consumed = self.turn_consumed or other.turn_consumed
