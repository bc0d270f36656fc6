"""
Enemy decision logic for the game.

The enemy policy is a fixed priority list of probabilistic rules. Bosses
pass their probability checks more often than ordinary enemies.
"""

from minirpg.core.constants import EnemyIntent, StatusKind
from minirpg.core.logging import log_debug
from minirpg.core.rng import Dice
from minirpg.entities.enemy import Enemy
from minirpg.entities.hero import Hero

BOSS_SMARTS = 0.45
REGULAR_SMARTS = 0.22

# Chance that an enemy suffering damage over time turtles up.
DEFEND_WHEN_HURTING_CHANCE = 0.25
# Fraction of max hp at or below which an enemy may enrage.
ENRAGE_HP_RATIO = 0.35
# Scale applied to the smarts roll for Arcane Bolt.
BOLT_SMARTS_SCALE = 0.6


def smarts(enemy: Enemy) -> float:
    """Returns the probability an enemy passes its tactical checks."""
    return BOSS_SMARTS if enemy.is_boss else REGULAR_SMARTS


class EnemyPolicy:
    """Chooses an enemy's action for its turn."""

    def __init__(self, dice: Dice) -> None:
        """
        Initialize the EnemyPolicy.

        Args:
            dice (Dice):
                The random source used for every probability check.

        """
        self.dice = dice

    def decide(self, enemy: Enemy, hero: Hero) -> EnemyIntent:
        """
        Decides the enemy's action for this turn and records it as intent.

        Rules, first match wins:
            1. Suffering poison or burn, 25%: Defend.
            2. At or below 35% hp and not yet enraged, `smart`: Enrage.
            3. Hero not poisoned, `smart`: Poison Bite.
            4. `smart * 0.6`: Arcane Bolt.
            5. Otherwise: Attack.

        Args:
            enemy (Enemy):
                The acting enemy.
            hero (Hero):
                The hero, whose statuses are inspected.

        Returns:
            EnemyIntent:
                The chosen action.

        """
        intent = self._choose(enemy, hero)
        enemy.intent = intent
        log_debug(
            f"{enemy.name} decides to {intent.display_name}",
            {"hp": f"{enemy.hp}/{enemy.hp_max}", "boss": enemy.is_boss},
        )
        return intent

    def _choose(self, enemy: Enemy, hero: Hero) -> EnemyIntent:
        smart = smarts(enemy)

        hurting = enemy.has_status(StatusKind.POISON) or enemy.has_status(
            StatusKind.BURN
        )
        if hurting and self.dice.chance(DEFEND_WHEN_HURTING_CHANCE):
            return EnemyIntent.DEFEND

        low_hp = enemy.hp <= enemy.hp_max * ENRAGE_HP_RATIO
        if low_hp and not enemy.enraged and self.dice.chance(smart):
            return EnemyIntent.ENRAGE

        if not hero.has_status(StatusKind.POISON) and self.dice.chance(smart):
            return EnemyIntent.POISON

        if self.dice.chance(smart * BOLT_SMARTS_SCALE):
            return EnemyIntent.BOLT

        return EnemyIntent.ATTACK
