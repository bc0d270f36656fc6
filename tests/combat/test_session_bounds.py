"""
Tests that whole encounters keep every combatant within its bounds.
"""

import pytest

from minirpg.combat.combat_session import CombatSession
from minirpg.combat.encounter import EncounterGenerator
from minirpg.core.constants import HeroAction, SessionOutcome, TurnOwner
from minirpg.core.rng import Dice
from minirpg.entities.hero import Hero
from minirpg.world.state import QuestLog, WorldState

SESSIONS_PER_SEED = 12
MAX_STEPS_PER_SESSION = 500


def assert_within_bounds(session):
    hero, enemy = session.hero, session.enemy
    assert 0 <= hero.hp <= hero.hp_max
    assert 0 <= hero.mp <= hero.mp_max
    assert hero.potions >= 0
    assert hero.gold >= 0
    assert 0 <= enemy.hp <= enemy.hp_max


def play_session(session, dice):
    """Plays a session to its end with random hero actions."""
    actions = list(HeroAction)
    for _ in range(MAX_STEPS_PER_SESSION):
        if session.is_over:
            return session.session_outcome
        if session.turn_owner == TurnOwner.HERO:
            session.resolve_hero_action(dice.choice(actions), defer_enemy_turn=True)
        else:
            session.resolve_enemy_turn()
        assert_within_bounds(session)
    pytest.fail("Session did not end")


@pytest.mark.parametrize("seed", range(30))
def test_random_sessions_stay_in_bounds(seed, goblin_archetype, slime_archetype):
    """
    Test that hp and mp stay within [0, max] after every hero action and
    every enemy turn, across victories, escapes, defeats and level-ups.
    """
    dice = Dice(seed)
    hero = Hero()
    world = WorldState()
    quests = QuestLog()
    generator = EncounterGenerator(dice, [slime_archetype, goblin_archetype])

    for index in range(SESSIONS_PER_SEED):
        enemy = generator.spawn(hero.level, is_boss=index % 4 == 3)
        session = CombatSession(hero, enemy, world, quests, dice)
        assert_within_bounds(session)

        outcome = play_session(session, dice)

        assert outcome in (
            SessionOutcome.VICTORY,
            SessionOutcome.ESCAPE,
            SessionOutcome.DEFEAT,
        )
        assert_within_bounds(session)


def test_random_sessions_reach_defeats_and_level_ups(goblin_archetype, slime_archetype):
    """
    Test that the random sessions above exercise defeats and level-ups.
    """
    outcomes = []
    max_level = 1
    for seed in range(30):
        dice = Dice(seed)
        hero = Hero()
        world = WorldState()
        quests = QuestLog()
        generator = EncounterGenerator(dice, [slime_archetype, goblin_archetype])
        for index in range(SESSIONS_PER_SEED):
            enemy = generator.spawn(hero.level, is_boss=index % 4 == 3)
            session = CombatSession(hero, enemy, world, quests, dice)
            outcomes.append(play_session(session, dice))
        max_level = max(max_level, hero.level)

    assert SessionOutcome.DEFEAT in outcomes
    assert SessionOutcome.VICTORY in outcomes
    assert max_level > 1
