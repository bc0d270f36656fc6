"""
Tests for the damage model.
"""

from minirpg.combat.damage import (
    FIREBALL,
    HERO_ATTACK,
    defended,
    roll_damage,
    roll_profile,
)
from minirpg.core.rng import Dice


def test_hero_attack_range_against_slime():
    """
    Test that a 6 ATK attack against 1 DEF lands in [3, 7] and covers the range.
    """
    dice = Dice(seed=1234)
    rolls = {roll_profile(HERO_ATTACK, 6, 1, dice) for _ in range(500)}
    assert rolls == {3, 4, 5, 6, 7}


def test_damage_floor_is_one():
    """
    Test that a hit always deals at least 1 damage.
    """
    dice = Dice(seed=7)
    assert all(roll_damage(1, 50, 2, dice) == 1 for _ in range(50))


def test_damage_ceiling_is_999():
    """
    Test that a single hit never exceeds 999 damage.
    """
    assert roll_damage(5000, 0, 0, Dice(seed=0)) == 999


def test_profile_adds_attack_bonus(dice):
    """
    Test that a profile's attack bonus is added before subtracting defense.
    """
    assert roll_profile(FIREBALL, 6, 1, dice) == 9


def test_variance_roll_is_added(dice):
    """
    Test that the variance roll shifts the damage.
    """
    dice.script(randints=[-2, 2])
    assert roll_damage(6, 1, 2, dice) == 3
    assert roll_damage(6, 1, 2, dice) == 7


def test_defend_bonus():
    """
    Test that defending adds 3 to the defense used for a hit.
    """
    assert defended(2, True) == 5
    assert defended(2, False) == 2
