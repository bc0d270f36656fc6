"""
Status effect module for the game.

Defines the closed tagged variant of status effects a combatant can carry:
Poison and Burn deal damage each tick, Stun makes the owner lose a turn.
Each variant carries its own typed payload and is discriminated by
`status_type`, whose value names its StatusKind.
"""

from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, Field

from minirpg.core.constants import StatusKind


class StatusEffect(BaseModel):
    """
    Base class for all status effects.

    A target holds at most one instance per kind; applying a kind that is
    already present replaces the previous instance.
    """

    status_type: str = Field(
        description="The variant tag; matches a StatusKind value.",
    )
    remaining_turns: int = Field(
        ge=1,
        description="Number of ticks left before the effect expires.",
    )

    @property
    def kind(self) -> StatusKind:
        """Returns the status kind named by the variant tag."""
        return StatusKind(self.status_type)

    @property
    def label(self) -> str:
        """Returns a short label for display, e.g. 'Poison(3)'."""
        return f"{self.kind.display_name}({self.remaining_turns})"


class DamageOverTimeStatus(StatusEffect):
    """A status effect that deals a fixed amount of damage every tick."""

    damage_per_turn: int = Field(
        ge=0,
        description="Damage dealt to the owner on every tick.",
    )


class PoisonStatus(DamageOverTimeStatus):
    """Poison: damage over time."""

    status_type: Literal["poison"] = "poison"


class BurnStatus(DamageOverTimeStatus):
    """Burn: damage over time, resolved after poison."""

    status_type: Literal["burn"] = "burn"


class StunStatus(StatusEffect):
    """Stun: the owner loses its next turn while the effect is present."""

    status_type: Literal["stun"] = "stun"


AnyStatus: TypeAlias = Annotated[
    PoisonStatus | BurnStatus | StunStatus,
    Field(discriminator="status_type"),
]

StatusMap: TypeAlias = dict[StatusKind, AnyStatus]


def poison(turns: int, damage_per_turn: int) -> PoisonStatus:
    """Builds a poison status."""
    return PoisonStatus(remaining_turns=turns, damage_per_turn=damage_per_turn)


def burn(turns: int, damage_per_turn: int) -> BurnStatus:
    """Builds a burn status."""
    return BurnStatus(remaining_turns=turns, damage_per_turn=damage_per_turn)


def stun(turns: int = 1) -> StunStatus:
    """Builds a stun status."""
    return StunStatus(remaining_turns=turns)
