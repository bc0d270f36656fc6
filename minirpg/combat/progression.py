"""
Progression module for the game.

Awards experience and gold after a victory, runs the level-up loop, and
applies the soft-defeat penalty when the hero falls.
"""

from minirpg.core.logging import log_info
from minirpg.core.rng import Dice
from minirpg.core.utils import round_half_up
from minirpg.effects.event_system import ActionResult
from minirpg.entities.enemy import Enemy
from minirpg.entities.hero import Hero
from minirpg.world.state import QuestLog, WorldState

# Fraction of carried gold lost on defeat.
DEFEAT_GOLD_PENALTY = 0.25


def award_victory(
    hero: Hero,
    enemy: Enemy,
    world: WorldState,
    quests: QuestLog,
    dice: Dice,
    result: ActionResult,
) -> int:
    """
    Grants the rewards of a defeated enemy and levels the hero up.

    Args:
        hero (Hero):
            The victorious hero.
        enemy (Enemy):
            The defeated enemy.
        world (WorldState):
            World flags, updated when the boss falls.
        quests (QuestLog):
            Quest progress, advanced when the boss falls.
        dice (Dice):
            The random source for stat growth.
        result (ActionResult):
            The result collecting log lines.

    Returns:
        int:
            The number of levels gained.

    """
    hero.xp += enemy.xp_reward
    hero.gold += enemy.gold_reward
    result.log(f"Victory! You gain +{enemy.xp_reward} XP and +{enemy.gold_reward} gold.")

    if enemy.is_boss:
        world.boss_defeated = True
        quests.advance_on_boss_defeat()
        result.log("Boss defeated! Return to the Elder in town.")

    return level_up(hero, dice, result)


def level_up(hero: Hero, dice: Dice, result: ActionResult) -> int:
    """
    Levels the hero up for as long as the experience covers the threshold.

    Each level grows max hp by 6-9, attack by 1-2, defense by 0-1 and max
    mana by 3-5, then fully restores the hero. The threshold grows to
    round(xp_to_next * 1.35 + 10).

    Args:
        hero (Hero):
            The hero to level up.
        dice (Dice):
            The random source for stat growth.
        result (ActionResult):
            The result collecting log lines.

    Returns:
        int:
            The number of levels gained.

    """
    gained = 0
    while hero.xp >= hero.xp_to_next:
        hero.xp -= hero.xp_to_next
        hero.level += 1

        hp_gain = 6 + dice.randint(0, 3)
        atk_gain = 1 + (1 if dice.chance(0.5) else 0)
        def_gain = 1 if dice.chance(0.6) else 0
        mp_gain = 3 + dice.randint(0, 2)

        hero.hp_max += hp_gain
        hero.atk += atk_gain
        hero.defense += def_gain
        hero.mp_max += mp_gain
        hero.restore()

        hero.xp_to_next = round_half_up(hero.xp_to_next * 1.35 + 10)
        gained += 1

        result.log(
            f"Level up! Lv {hero.level}. +{hp_gain} HP, +{atk_gain} ATK, "
            f"+{def_gain} DEF, +{mp_gain} MP."
        )
        log_info(
            "Hero levelled up",
            {"level": hero.level, "xp": hero.xp, "xp_to_next": hero.xp_to_next},
        )
    return gained


def apply_defeat(hero: Hero, result: ActionResult) -> int:
    """
    Applies the soft-defeat penalty: a quarter of the gold is lost and the
    hero wakes up fully restored. Experience and gear are kept.

    Args:
        hero (Hero):
            The defeated hero.
        result (ActionResult):
            The result collecting log lines.

    Returns:
        int:
            The gold lost.

    """
    lost = int(hero.gold * DEFEAT_GOLD_PENALTY)
    hero.gold -= lost
    hero.restore()
    result.log("You are defeated... You wake up at full HP but lose some gold.")
    result.log(f"You dropped {lost} gold in the chaos.")
    log_info("Hero defeated", {"gold_lost": lost, "gold_left": hero.gold})
    return lost
