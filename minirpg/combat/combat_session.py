"""
Combat session module for the game.

A CombatSession owns one encounter between the hero and a single enemy,
from the first hero turn to Victory, Escape or Defeat. Turn resolution is
synchronous and deterministic given the injected Dice; any presentation
pacing between the hero's action and the enemy's turn belongs to the caller
(see `resolve_hero_action(..., defer_enemy_turn=True)`).
"""

from collections.abc import Callable

from catchery import log_warning
from pydantic import BaseModel, Field

from minirpg.combat.damage import (
    ARCANE_BOLT,
    ENEMY_ATTACK,
    FIREBALL,
    HERO_ATTACK,
    POISON_BITE,
    POISON_STRIKE,
    STUN_BASH,
    DamageProfile,
    defended,
    roll_profile,
)
from minirpg.combat.npc_ai import EnemyPolicy
from minirpg.combat.progression import apply_defeat, award_victory
from minirpg.core.constants import (
    CombatantSide,
    EnemyIntent,
    HeroAction,
    SessionOutcome,
    TurnOwner,
)
from minirpg.core.logging import log_debug, log_info
from minirpg.core.rng import Dice
from minirpg.core.utils import clamp, round_half_up
from minirpg.effects.event_system import ActionResult
from minirpg.effects.status_effect import burn, poison, stun
from minirpg.effects.status_engine import apply_status, tick_statuses
from minirpg.entities.enemy import Enemy
from minirpg.entities.hero import Hero
from minirpg.world.state import QuestLog, WorldState

# Escape odds: base, per level of difference, and clamp bounds.
RUN_BASE_CHANCE = 0.45
RUN_LEVEL_STEP = 0.05
RUN_MIN_CHANCE = 0.15
RUN_MAX_CHANCE = 0.9

# Potion heal: fraction of max hp plus a small random bonus.
POTION_HEAL_RATIO = 0.35
POTION_BONUS_RANGE = (2, 6)

# Skill side effects.
BURN_CHANCE = 0.35
STUN_CHANCE = 0.35
ENRAGE_ATK_BONUS = 3


def escape_chance(hero_level: int, enemy_level: int) -> float:
    """Returns the probability that Run succeeds."""
    p = RUN_BASE_CHANCE + RUN_LEVEL_STEP * (hero_level - enemy_level)
    return clamp(p, RUN_MIN_CHANCE, RUN_MAX_CHANCE)


def potion_heal_amount(hero: Hero, dice: Dice) -> int:
    """Rolls the hit points restored by one potion."""
    low, high = POTION_BONUS_RANGE
    return round_half_up(hero.hp_max * POTION_HEAL_RATIO) + dice.randint(low, high)


class CombatSnapshot(BaseModel):
    """Detached view of a combat session, for display."""

    enemy_name: str
    enemy_level: int
    enemy_hp: int
    enemy_hp_max: int
    enemy_intent: EnemyIntent
    enemy_statuses: list[str] = Field(default_factory=list)
    enemy_is_boss: bool = False
    hero_hp: int
    hero_hp_max: int
    hero_mp: int
    hero_mp_max: int
    hero_statuses: list[str] = Field(default_factory=list)
    hero_defending: bool = False
    turn_owner: TurnOwner
    outcome: SessionOutcome


class CombatRecord(BaseModel):
    """Plain record of a combat session in progress, for persistence."""

    enemy: Enemy = Field(
        description="The enemy, including its status map.",
    )
    turn_owner: TurnOwner = Field(
        default=TurnOwner.HERO,
        description="Which side holds the turn.",
    )
    hero_defending: bool = Field(
        default=False,
        description="Whether the hero's Defend bonus is pending.",
    )
    last_action: str | None = Field(
        default=None,
        description="Tag of the hero's last action, e.g. 'fireball-fail'.",
    )


class CombatSession:
    """
    Manages the flow of a single encounter between the hero and an enemy.

    The session starts on the hero's turn. Every hero action consumes the
    turn, even when it fails for lack of mana or potions. The session is the
    sole mutator of the hero's combat state and of its enemy until its
    outcome leaves IN_PROGRESS.
    """

    def __init__(
        self,
        hero: Hero,
        enemy: Enemy,
        world: WorldState,
        quests: QuestLog,
        dice: Dice,
        policy: EnemyPolicy | None = None,
        turn_owner: TurnOwner = TurnOwner.HERO,
        hero_defending: bool = False,
        last_action: str | None = None,
    ) -> None:
        """
        Initialize the CombatSession.

        Args:
            hero (Hero):
                The hero, shared with the game session.
            enemy (Enemy):
                The enemy, owned by this session.
            world (WorldState):
                World flags, updated on a boss victory.
            quests (QuestLog):
                Quest progress, updated on a boss victory.
            dice (Dice):
                The random source for every roll in the encounter.
            policy (EnemyPolicy | None):
                The enemy decision policy. Defaults to one sharing `dice`.
            turn_owner (TurnOwner):
                Which side holds the turn; restored sessions may start on the
                enemy's turn.
            hero_defending (bool):
                Whether the Defend bonus is pending.
            last_action (str | None):
                Tag of the hero's last action.

        """
        self.hero = hero
        self.enemy = enemy
        self.world = world
        self.quests = quests
        self.dice = dice
        self.policy = policy or EnemyPolicy(dice)
        self.turn_owner = turn_owner
        self.hero_defending = hero_defending
        self.last_action = last_action
        self.outcome = SessionOutcome.IN_PROGRESS

        self._hero_actions: dict[HeroAction, Callable[[ActionResult], bool]] = {
            HeroAction.ATTACK: self._hero_attack,
            HeroAction.DEFEND: self._hero_defend,
            HeroAction.HEAL: self._hero_heal,
            HeroAction.RUN: self._hero_run,
            HeroAction.FIREBALL: self._hero_fireball,
            HeroAction.POISON_STRIKE: self._hero_poison_strike,
            HeroAction.STUN_BASH: self._hero_stun_bash,
        }
        self._enemy_actions: dict[EnemyIntent, Callable[[ActionResult], None]] = {
            EnemyIntent.DEFEND: self._enemy_defend,
            EnemyIntent.ENRAGE: self._enemy_enrage,
            EnemyIntent.POISON: self._enemy_poison_bite,
            EnemyIntent.BOLT: self._enemy_arcane_bolt,
            EnemyIntent.ATTACK: self._enemy_attack,
        }

    # ==========================================================================
    # STATE
    # ==========================================================================

    @property
    def is_over(self) -> bool:
        """True once the session has reached Victory, Escape or Defeat."""
        return self.outcome.is_terminal

    @property
    def session_outcome(self) -> SessionOutcome:
        return self.outcome

    def renderable_snapshot(self) -> CombatSnapshot:
        """
        Returns a display snapshot that shares no mutable state with the
        session.
        """
        return CombatSnapshot(
            enemy_name=self.enemy.name,
            enemy_level=self.enemy.level,
            enemy_hp=self.enemy.hp,
            enemy_hp_max=self.enemy.hp_max,
            enemy_intent=self.enemy.intent,
            enemy_statuses=self.enemy.status_labels(),
            enemy_is_boss=self.enemy.is_boss,
            hero_hp=self.hero.hp,
            hero_hp_max=self.hero.hp_max,
            hero_mp=self.hero.mp,
            hero_mp_max=self.hero.mp_max,
            hero_statuses=self.hero.status_labels(),
            hero_defending=self.hero_defending,
            turn_owner=self.turn_owner,
            outcome=self.outcome,
        )

    def to_record(self) -> CombatRecord:
        """Returns a plain record of the session, detached from live state."""
        return CombatRecord(
            enemy=self.enemy.model_copy(deep=True),
            turn_owner=self.turn_owner,
            hero_defending=self.hero_defending,
            last_action=self.last_action,
        )

    @classmethod
    def from_record(
        cls,
        record: CombatRecord,
        hero: Hero,
        world: WorldState,
        quests: QuestLog,
        dice: Dice,
    ) -> "CombatSession":
        """Rebuilds a session in progress from its record."""
        return cls(
            hero=hero,
            enemy=record.enemy.model_copy(deep=True),
            world=world,
            quests=quests,
            dice=dice,
            turn_owner=record.turn_owner,
            hero_defending=record.hero_defending,
            last_action=record.last_action,
        )

    # ==========================================================================
    # HERO TURN
    # ==========================================================================

    def resolve_hero_action(
        self,
        action: HeroAction | str,
        defer_enemy_turn: bool = False,
    ) -> ActionResult:
        """
        Resolves the hero's action and, unless deferred, the enemy turns that
        follow it.

        After the action: a dead enemy means Victory; a successful Run means
        Escape; otherwise the enemy's statuses tick (a lethal tick is also a
        Victory). A stunned enemy loses its turn and the hero acts again;
        otherwise the turn passes to the enemy.

        Args:
            action (HeroAction | str):
                The action, or its string value.
            defer_enemy_turn (bool):
                Stop once the turn has passed to the enemy. The caller is then
                responsible for calling `resolve_enemy_turn`.

        Returns:
            ActionResult:
                Everything that happened. An action submitted out of turn, or
                after the session ended, is a no-op with `turn_consumed`
                False.

        """
        result = ActionResult(session_outcome=self.outcome)

        if self.is_over or self.turn_owner != TurnOwner.HERO:
            log_warning(
                "Ignoring hero action outside of the hero's turn",
                {
                    "action": str(action),
                    "turn_owner": str(self.turn_owner),
                    "outcome": str(self.outcome),
                },
            )
            return result

        try:
            action = HeroAction(action)
        except ValueError:
            log_warning(f"Ignoring unknown hero action '{action}'", {"action": action})
            return result

        result.turn_consumed = True
        escaped = self._hero_actions[action](result)

        if self.enemy.is_dead():
            result.log(f"{self.enemy.name} is defeated.")
            self._finish(SessionOutcome.VICTORY, result)
            return result

        if escaped:
            self._finish(SessionOutcome.ESCAPE, result)
            return result

        tick = tick_statuses(self.enemy, CombatantSide.ENEMY, result)
        if tick.defeated:
            result.log(f"{self.enemy.name} is defeated.")
            self._finish(SessionOutcome.VICTORY, result)
            return result

        if tick.skip_turn:
            result.log(f"{self.enemy.name} is stunned and skips its turn!")
            return result

        self.turn_owner = TurnOwner.ENEMY
        if not defer_enemy_turn:
            result.merge(self.run_enemy_turns())
        return result

    def _hit_enemy(self, profile: DamageProfile, result: ActionResult) -> int:
        damage = roll_profile(
            profile, self.hero.effective_atk, self.enemy.defense, self.dice
        )
        self.enemy.adjust_hp(-damage)
        result.damage(CombatantSide.ENEMY, damage, source=profile.name.lower())
        return damage

    def _spend_for(self, action: HeroAction, result: ActionResult) -> bool:
        if self.hero.spend_mp(action.mp_cost):
            return True
        result.log(f"Not enough MP for {action.display_name}!")
        self.last_action = f"{action.value}-fail"
        log_debug(
            f"Hero cannot afford {action.display_name}",
            {"mp": self.hero.mp, "cost": action.mp_cost},
        )
        return False

    def _hero_attack(self, result: ActionResult) -> bool:
        damage = self._hit_enemy(HERO_ATTACK, result)
        result.log(f"You attack {self.enemy.name} for {damage} damage!")
        self.last_action = HeroAction.ATTACK.value
        return False

    def _hero_defend(self, result: ActionResult) -> bool:
        self.hero_defending = True
        result.log("You defend (+3 DEF until the next hit).")
        self.last_action = HeroAction.DEFEND.value
        return False

    def _hero_heal(self, result: ActionResult) -> bool:
        if self.hero.potions <= 0:
            result.log("No potions left!")
            self.last_action = "heal-fail"
            return False
        self.hero.potions -= 1
        amount = potion_heal_amount(self.hero, self.dice)
        self.hero.adjust_hp(amount)
        result.log(f"You drink a potion and restore {amount} HP.")
        self.last_action = HeroAction.HEAL.value
        return False

    def _hero_run(self, result: ActionResult) -> bool:
        if self.dice.chance(escape_chance(self.hero.level, self.enemy.level)):
            result.log("You escape!")
            self.last_action = HeroAction.RUN.value
            return True
        result.log("You fail to run away!")
        self.last_action = "run-fail"
        return False

    def _hero_fireball(self, result: ActionResult) -> bool:
        if not self._spend_for(HeroAction.FIREBALL, result):
            return False
        damage = self._hit_enemy(FIREBALL, result)
        result.log(f"You cast Fireball for {damage} damage!")
        if self.dice.chance(BURN_CHANCE):
            apply_status(self.enemy, CombatantSide.ENEMY, burn(3, 3), result)
            result.log(f"{self.enemy.name} is burning!")
        self.last_action = HeroAction.FIREBALL.value
        return False

    def _hero_poison_strike(self, result: ActionResult) -> bool:
        if not self._spend_for(HeroAction.POISON_STRIKE, result):
            return False
        damage = self._hit_enemy(POISON_STRIKE, result)
        result.log(f"You slash with Poison Strike for {damage} damage!")
        apply_status(
            self.enemy,
            CombatantSide.ENEMY,
            poison(4, 2 + self.hero.level // 3),
            result,
        )
        result.log(f"{self.enemy.name} is poisoned!")
        self.last_action = HeroAction.POISON_STRIKE.value
        return False

    def _hero_stun_bash(self, result: ActionResult) -> bool:
        if not self._spend_for(HeroAction.STUN_BASH, result):
            return False
        damage = self._hit_enemy(STUN_BASH, result)
        result.log(f"You smash for {damage} damage!")
        if self.dice.chance(STUN_CHANCE):
            apply_status(self.enemy, CombatantSide.ENEMY, stun(1), result)
            result.log(f"{self.enemy.name} is stunned!")
        self.last_action = HeroAction.STUN_BASH.value
        return False

    # ==========================================================================
    # ENEMY TURN
    # ==========================================================================

    def resolve_enemy_turn(self) -> ActionResult:
        """
        Resolves a single enemy turn.

        The enemy acts, then the hero's statuses tick. If the hero carried
        Stun, the hero's turn is skipped and the enemy holds the turn again.

        Returns:
            ActionResult:
                Everything that happened. Calling this outside of the enemy's
                turn is a no-op.

        """
        result = ActionResult(session_outcome=self.outcome)
        if self.is_over or self.turn_owner != TurnOwner.ENEMY:
            log_warning(
                "Ignoring enemy turn outside of the enemy's turn",
                {"turn_owner": str(self.turn_owner), "outcome": str(self.outcome)},
            )
            return result

        result.turn_consumed = True
        intent = self.policy.decide(self.enemy, self.hero)
        self._enemy_actions[intent](result)

        if self.hero.is_dead():
            self._finish(SessionOutcome.DEFEAT, result)
            return result

        tick = tick_statuses(self.hero, CombatantSide.HERO, result)
        if tick.defeated:
            self._finish(SessionOutcome.DEFEAT, result)
            return result

        if tick.skip_turn:
            result.log("You are stunned and lose your turn!")
            return result

        self.turn_owner = TurnOwner.HERO
        return result

    def run_enemy_turns(self) -> ActionResult:
        """Resolves enemy turns until the hero holds the turn or the session ends."""
        result = ActionResult(session_outcome=self.outcome)
        while not self.is_over and self.turn_owner == TurnOwner.ENEMY:
            result.merge(self.resolve_enemy_turn())
        return result

    def _hit_hero(self, profile: DamageProfile, result: ActionResult) -> int:
        defense = defended(self.hero.effective_def, self.hero_defending)
        damage = roll_profile(profile, self.enemy.atk, defense, self.dice)
        self.hero.adjust_hp(-damage)
        self.hero_defending = False
        result.damage(CombatantSide.HERO, damage, source=profile.name.lower())
        return damage

    def _enemy_defend(self, result: ActionResult) -> None:
        result.log(f"{self.enemy.name} braces for impact.")

    def _enemy_enrage(self, result: ActionResult) -> None:
        self.enemy.enraged = True
        self.enemy.atk += ENRAGE_ATK_BONUS
        result.log(f"{self.enemy.name} becomes enraged! (+ATK)")

    def _enemy_poison_bite(self, result: ActionResult) -> None:
        damage = self._hit_hero(POISON_BITE, result)
        result.log(f"{self.enemy.name} uses Poison Bite for {damage} damage!")
        apply_status(self.hero, CombatantSide.HERO, poison(3, 2), result)
        result.log("You are poisoned!")

    def _enemy_arcane_bolt(self, result: ActionResult) -> None:
        damage = self._hit_hero(ARCANE_BOLT, result)
        result.log(f"{self.enemy.name} casts Arcane Bolt for {damage} damage!")

    def _enemy_attack(self, result: ActionResult) -> None:
        damage = self._hit_hero(ENEMY_ATTACK, result)
        result.log(f"{self.enemy.name} attacks you for {damage} damage!")

    # ==========================================================================
    # RESOLUTION
    # ==========================================================================

    def _finish(self, outcome: SessionOutcome, result: ActionResult) -> None:
        if outcome == SessionOutcome.VICTORY:
            award_victory(
                self.hero, self.enemy, self.world, self.quests, self.dice, result
            )
        elif outcome == SessionOutcome.DEFEAT:
            apply_defeat(self.hero, result)
        self.outcome = outcome
        result.session_outcome = outcome
        log_info(
            f"Combat against {self.enemy.name} ended",
            {"outcome": str(outcome), "hero_hp": self.hero.hp},
        )
