"""
Equipment module for the game.

Defines the weapon and armor pieces the hero can equip, their rarity
tiers, and the random gear generator used by chests and the shop.
"""

from pydantic import BaseModel, Field

from minirpg.core.constants import NiceEnum
from minirpg.core.rng import Dice
from minirpg.core.utils import round_half_up

WEAPON_BASE_NAMES = [
    "Iron Dagger",
    "Steel Shortsword",
    "Knight Blade",
    "Hunter Spear",
    "Moonfang",
]
WEAPON_PREFIXES = ["Plain", "Sharpened", "Vicious", "Gleaming", "Runed"]

ARMOR_BASE_NAMES = [
    "Leather Vest",
    "Chain Shirt",
    "Guard Plate",
    "Wolfhide Cloak",
    "Starsewn Mail",
]
ARMOR_PREFIXES = ["Sturdy", "Padded", "Blessed", "Reinforced", "Runed"]


class Rarity(NiceEnum):
    """Rarity tier of a generated piece of gear."""

    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"

    @property
    def multiplier(self) -> float:
        """Returns the bonus multiplier for this rarity."""
        return {
            Rarity.COMMON: 1.0,
            Rarity.RARE: 1.25,
            Rarity.EPIC: 1.55,
        }[self]

    @property
    def color(self) -> str:
        """Returns the color string associated with this rarity."""
        return {
            Rarity.COMMON: "white",
            Rarity.RARE: "bold blue",
            Rarity.EPIC: "bold magenta",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies rarity color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class Weapon(BaseModel):
    """A weapon adds a flat bonus to the hero's attack."""

    name: str = Field(
        description="The name of the weapon.",
    )
    atk: int = Field(
        default=0,
        ge=0,
        description="Attack bonus granted while equipped.",
    )
    rarity: Rarity = Field(
        default=Rarity.COMMON,
        description="Rarity tier, used to color the name.",
    )

    def __str__(self) -> str:
        return f"{self.name} (+{self.atk} ATK)"


class Armor(BaseModel):
    """An armor piece adds a flat bonus to the hero's defense."""

    name: str = Field(
        description="The name of the armor piece.",
    )
    defense: int = Field(
        default=0,
        ge=0,
        description="Defense bonus granted while equipped.",
    )
    rarity: Rarity = Field(
        default=Rarity.COMMON,
        description="Rarity tier, used to color the name.",
    )

    def __str__(self) -> str:
        return f"{self.name} (+{self.defense} DEF)"


def roll_rarity(dice: Dice) -> Rarity:
    """Rolls a rarity tier: 70% common, 23% rare, 7% epic."""
    r = dice.random()
    if r < 0.70:
        return Rarity.COMMON
    if r < 0.93:
        return Rarity.RARE
    return Rarity.EPIC


def _roll_bonus(dice: Dice, level: int, rarity: Rarity) -> int:
    base = dice.randint(1, 5) + level // 2
    return max(1, round_half_up(base * rarity.multiplier))


def random_weapon(dice: Dice, level: int) -> Weapon:
    """
    Generates a random weapon scaled to the hero's level.

    Args:
        dice (Dice):
            The random source.
        level (int):
            The hero's level.

    Returns:
        Weapon:
            The generated weapon.

    """
    rarity = roll_rarity(dice)
    atk = _roll_bonus(dice, level, rarity)
    prefix = dice.choice(WEAPON_PREFIXES)
    base_name = dice.choice(WEAPON_BASE_NAMES)
    return Weapon(
        name=f"{rarity.display_name} {prefix} {base_name}", atk=atk, rarity=rarity
    )


def random_armor(dice: Dice, level: int) -> Armor:
    """Generates a random armor piece scaled to the hero's level."""
    rarity = roll_rarity(dice)
    defense = _roll_bonus(dice, level, rarity)
    prefix = dice.choice(ARMOR_PREFIXES)
    base_name = dice.choice(ARMOR_BASE_NAMES)
    return Armor(
        name=f"{rarity.display_name} {prefix} {base_name}",
        defense=defense,
        rarity=rarity,
    )
