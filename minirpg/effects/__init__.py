"""
Effects system module for the Mini RPG.

This module contains the status effects a combatant can carry (poison, burn
and stun), the engine that applies and ticks them, and the structured
events reported back for every resolved action.
"""

# Import the status effect variants.
from .status_effect import (
    AnyStatus,
    BurnStatus,
    DamageOverTimeStatus,
    PoisonStatus,
    StatusEffect,
    StatusMap,
    StunStatus,
    burn,
    poison,
    stun,
)

# Import the event system.
from .event_system import (
    ActionResult,
    DamageEvent,
    StatusEvent,
)

__all__ = [
    "AnyStatus",
    "BurnStatus",
    "DamageOverTimeStatus",
    "PoisonStatus",
    "StatusEffect",
    "StatusMap",
    "StunStatus",
    "burn",
    "poison",
    "stun",
    "ActionResult",
    "DamageEvent",
    "StatusEvent",
]
