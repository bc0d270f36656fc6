"""
Status effect engine for the game.

Applies status effects to combatants and resolves their per-turn ticks.
A tick resolves Poison, then Burn, then Stun. Damage from a tick is checked
immediately: once the owner drops to 0 hp the remaining effects of that
pass are not resolved.
"""

from pydantic import BaseModel, Field

from minirpg.core.constants import (
    STATUS_TICK_ORDER,
    CombatantSide,
    StatusChange,
    StatusKind,
)
from minirpg.core.logging import log_debug
from minirpg.effects.event_system import ActionResult
from minirpg.effects.status_effect import AnyStatus, DamageOverTimeStatus
from minirpg.entities.combatant import Combatant


class TickOutcome(BaseModel):
    """What a status tick did to its owner."""

    skip_turn: bool = Field(
        default=False,
        description="True if the owner carried Stun and loses its next turn.",
    )
    defeated: bool = Field(
        default=False,
        description="True if a damage tick dropped the owner to 0 hp.",
    )


def apply_status(
    target: Combatant,
    side: CombatantSide,
    status: AnyStatus,
    result: ActionResult,
) -> None:
    """
    Applies a status to a target, replacing any status of the same kind.

    Args:
        target (Combatant):
            The combatant receiving the status.
        side (CombatantSide):
            Which side the target is on, for event reporting.
        status (AnyStatus):
            The status to apply.
        result (ActionResult):
            The result collecting the status event.

    """
    if target.has_status(status.kind):
        log_debug(
            f"Replacing {status.kind.display_name} on {target.name}",
            {"old": target.statuses[status.kind].label, "new": status.label},
        )
    target.add_status(status)
    result.status(side, status.kind, StatusChange.APPLIED)


def _tick_damage(
    target: Combatant,
    side: CombatantSide,
    status: DamageOverTimeStatus,
    result: ActionResult,
) -> None:
    dealt = -target.adjust_hp(-status.damage_per_turn)
    result.damage(side, dealt, source=status.kind.value)
    result.log(
        f"{status.kind.display_name} deals {status.damage_per_turn} damage to "
        f"{target.log_name}."
    )


def tick_statuses(
    target: Combatant,
    side: CombatantSide,
    result: ActionResult,
) -> TickOutcome:
    """
    Resolves one tick of every status carried by the target.

    Args:
        target (Combatant):
            The combatant whose statuses tick.
        side (CombatantSide):
            Which side the target is on, for event reporting.
        result (ActionResult):
            The result collecting log lines and events.

    Returns:
        TickOutcome:
            Whether the owner loses its next turn, and whether it was defeated
            by the tick.

    """
    outcome = TickOutcome()
    for kind in STATUS_TICK_ORDER:
        status = target.statuses.get(kind)
        if status is None:
            continue

        if isinstance(status, DamageOverTimeStatus):
            _tick_damage(target, side, status, result)
        elif kind == StatusKind.STUN:
            outcome.skip_turn = True

        status.remaining_turns -= 1
        if status.remaining_turns <= 0:
            target.remove_status(kind)
            result.status(side, kind, StatusChange.EXPIRED)
            log_debug(f"{kind.display_name} expired on {target.name}")

        if target.is_dead():
            outcome.defeated = True
            break
    return outcome
