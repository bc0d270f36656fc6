"""
Damage module for the game.

Every hit in the game, from either side, is resolved by `roll_damage`:
attack minus defense plus a symmetric random variance, clamped so a hit
always deals at least 1 and at most 999 damage.
"""

from pydantic import BaseModel, Field

from minirpg.core.constants import DEFEND_BONUS, MAX_DAMAGE, MIN_DAMAGE
from minirpg.core.rng import Dice
from minirpg.core.utils import clamp


class DamageProfile(BaseModel):
    """Attack bonus and variance of one kind of hit."""

    name: str = Field(
        description="The name of the hit, as shown in the log.",
    )
    atk_bonus: int = Field(
        default=0,
        description="Flat bonus added to the attacker's attack.",
    )
    variance: int = Field(
        ge=0,
        description="The roll is drawn uniformly from [-variance, +variance].",
    )


# Hero hits.
HERO_ATTACK = DamageProfile(name="Attack", variance=2)
FIREBALL = DamageProfile(name="Fireball", atk_bonus=4, variance=3)
POISON_STRIKE = DamageProfile(name="Poison Strike", variance=2)
STUN_BASH = DamageProfile(name="Stun Bash", atk_bonus=1, variance=1)

# Enemy hits.
ENEMY_ATTACK = DamageProfile(name="Attack", variance=2)
POISON_BITE = DamageProfile(name="Poison Bite", variance=1)
ARCANE_BOLT = DamageProfile(name="Arcane Bolt", atk_bonus=3, variance=3)


def roll_damage(attacker_atk: int, defender_def: int, variance: int, dice: Dice) -> int:
    """
    Rolls the damage of a single hit.

    Args:
        attacker_atk (int):
            The attacker's effective attack.
        defender_def (int):
            The defender's effective defense.
        variance (int):
            Half-width of the uniform roll added to the raw damage.
        dice (Dice):
            The random source.

    Returns:
        int:
            The damage, always within [1, 999].

    """
    raw = attacker_atk - defender_def
    roll = dice.randint(-variance, variance)
    return clamp(raw + roll, MIN_DAMAGE, MAX_DAMAGE)


def roll_profile(
    profile: DamageProfile, attacker_atk: int, defender_def: int, dice: Dice
) -> int:
    """Rolls the damage of a hit described by a profile."""
    return roll_damage(
        attacker_atk + profile.atk_bonus, defender_def, profile.variance, dice
    )


def defended(defense: int, defending: bool) -> int:
    """Returns the defense to use for an incoming hit, with the Defend bonus."""
    return defense + (DEFEND_BONUS if defending else 0)
