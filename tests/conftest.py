"""
Shared fixtures for the test suite.
"""

from collections import deque

import pytest

from minirpg.combat.combat_session import CombatSession
from minirpg.core.rng import Dice
from minirpg.entities.enemy import Enemy, EnemyArchetype
from minirpg.entities.hero import Hero
from minirpg.world.state import QuestLog, WorldState


class ScriptedDice(Dice):
    """
    Dice double that replays scripted draws.

    When a queue runs dry, `randint` returns the midpoint of its range (so
    damage variance rolls 0) and `random` returns 0.99 (so every ordinary
    probability check fails).
    """

    def __init__(self, randints=(), randoms=()) -> None:
        super().__init__(seed=0)
        self.randints = deque(randints)
        self.randoms = deque(randoms)

    def randint(self, low: int, high: int) -> int:
        if self.randints:
            value = self.randints.popleft()
            assert low <= value <= high, f"scripted {value} outside [{low}, {high}]"
            return value
        return (low + high) // 2

    def random(self) -> float:
        if self.randoms:
            return self.randoms.popleft()
        return 0.99

    def script(self, randints=(), randoms=()) -> "ScriptedDice":
        """Queues more draws and returns self."""
        self.randints.extend(randints)
        self.randoms.extend(randoms)
        return self


@pytest.fixture
def dice():
    return ScriptedDice()


@pytest.fixture
def hero():
    """A fresh level-1 hero: 30 HP, 12 MP, 6 ATK, 2 DEF, 2 potions."""
    return Hero()


@pytest.fixture
def slime():
    """A level-1 slime: 16 HP, 4 ATK, 1 DEF."""
    return Enemy(
        name="Slime",
        level=1,
        hp=16,
        hp_max=16,
        atk=4,
        defense=1,
        xp_reward=10,
        gold_reward=4,
    )


@pytest.fixture
def goblin_archetype():
    return EnemyArchetype(name="Goblin", hp=22, atk=6, defense=2, xp=14, gold=(4, 10))


@pytest.fixture
def slime_archetype():
    return EnemyArchetype(name="Slime", hp=16, atk=4, defense=1, xp=10, gold=(2, 6))


@pytest.fixture
def world():
    return WorldState()


@pytest.fixture
def quests():
    return QuestLog()


@pytest.fixture
def session(hero, slime, world, quests, dice):
    """A combat session between the fresh hero and the slime."""
    return CombatSession(hero, slime, world, quests, dice)
