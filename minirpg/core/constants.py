"""
Constants and enumerations for the game.

Defines the closed enumerations used throughout the combat engine (status
kinds, hero actions, enemy intents, turn owners and session outcomes) plus
the overworld tile kinds and quest states consumed by the game session.
"""

from enum import Enum

# Hard bounds for a single damage roll.
MIN_DAMAGE = 1
MAX_DAMAGE = 999

# Extra defense granted by the hero's Defend action, for one incoming hit.
DEFEND_BONUS = 3

# Level bounds for spawned enemies.
MIN_ENEMY_LEVEL = 1
MAX_ENEMY_LEVEL = 99


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


class StatusKind(NiceEnum):
    """The closed set of status effects a combatant can carry."""

    POISON = "poison"
    BURN = "burn"
    STUN = "stun"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this status kind."""
        return {
            StatusKind.POISON: "☠️",
            StatusKind.BURN: "🔥",
            StatusKind.STUN: "💫",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this status kind."""
        return {
            StatusKind.POISON: "bold green",
            StatusKind.BURN: "bold red",
            StatusKind.STUN: "bold yellow",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies status color formatting to a message."""
        return f"[{self.color}]{message}[/]"


# Order in which statuses are resolved during a tick.
STATUS_TICK_ORDER: tuple[StatusKind, ...] = (
    StatusKind.POISON,
    StatusKind.BURN,
    StatusKind.STUN,
)


class HeroAction(NiceEnum):
    """Actions the hero can submit during their turn."""

    ATTACK = "attack"
    DEFEND = "defend"
    HEAL = "heal"
    RUN = "run"
    FIREBALL = "fireball"
    POISON_STRIKE = "poison"
    STUN_BASH = "stun"

    @property
    def mp_cost(self) -> int:
        """Returns the mana cost of the action (0 for non-skills)."""
        return {
            HeroAction.FIREBALL: 4,
            HeroAction.POISON_STRIKE: 3,
            HeroAction.STUN_BASH: 2,
        }.get(self, 0)

    @property
    def is_skill(self) -> bool:
        return self.mp_cost > 0


class EnemyIntent(NiceEnum):
    """Actions the enemy policy can pick, also shown to the player as intent."""

    DEFEND = "defend"
    ENRAGE = "enrage"
    POISON = "poison"
    BOLT = "bolt"
    ATTACK = "attack"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this intent."""
        return {
            EnemyIntent.DEFEND: "🛡️",
            EnemyIntent.ENRAGE: "💢",
            EnemyIntent.POISON: "🧪",
            EnemyIntent.BOLT: "✨",
            EnemyIntent.ATTACK: "⚔️",
        }.get(self, "❔")


class TurnOwner(NiceEnum):
    """Which side currently holds the turn."""

    HERO = "hero"
    ENEMY = "enemy"


class CombatantSide(NiceEnum):
    """Identifies a combatant in damage and status events."""

    HERO = "hero"
    ENEMY = "enemy"


class SessionOutcome(NiceEnum):
    """The outcome of a combat session."""

    IN_PROGRESS = "in_progress"
    VICTORY = "victory"
    ESCAPE = "escape"
    DEFEAT = "defeat"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionOutcome.IN_PROGRESS


class StatusChange(NiceEnum):
    """Lifecycle change reported for a status effect."""

    APPLIED = "applied"
    EXPIRED = "expired"


class TileKind(NiceEnum):
    """Overworld tile kinds relevant to encounter rolls."""

    FLOOR = "floor"
    WALL = "wall"
    GRASS = "grass"


class QuestState(NiceEnum):
    """Progress of the elder's quest."""

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    BOSS_DEFEATED = "boss_defeated"
    COMPLETED = "completed"
