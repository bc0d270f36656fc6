"""
Hero module for the game.

Defines the player character: level and experience, currencies, hit and
mana pools, base stats and equipped gear.
"""

from typing import Any

from pydantic import Field

from minirpg.core.utils import clamp
from minirpg.entities.combatant import Combatant
from minirpg.items.equipment import Armor, Weapon


class Hero(Combatant):
    """
    The player character.

    Owned by the game session. During an encounter only the combat session
    and the progression rules mutate it.
    """

    name: str = Field(
        default="Hero",
        description="The name of the hero.",
    )
    level: int = Field(
        default=1,
        ge=1,
        description="Current level.",
    )
    xp: int = Field(
        default=0,
        ge=0,
        description="Experience accumulated towards the next level.",
    )
    xp_to_next: int = Field(
        default=25,
        ge=1,
        description="Experience needed for the next level.",
    )
    gold: int = Field(
        default=0,
        ge=0,
        description="Gold carried.",
    )
    hp: int = Field(
        default=30,
        ge=0,
        description="Current hit points.",
    )
    hp_max: int = Field(
        default=30,
        ge=1,
        description="Maximum hit points.",
    )
    mp: int = Field(
        default=12,
        ge=0,
        description="Current mana points.",
    )
    mp_max: int = Field(
        default=12,
        ge=0,
        description="Maximum mana points.",
    )
    atk: int = Field(
        default=6,
        description="Base attack, before the weapon bonus.",
    )
    defense: int = Field(
        default=2,
        description="Base defense, before the armor bonus.",
    )
    potions: int = Field(
        default=2,
        ge=0,
        description="Healing potions carried.",
    )
    weapon: Weapon = Field(
        default_factory=lambda: Weapon(name="Rusty Sword", atk=0),
        description="The equipped weapon.",
    )
    armor: Armor = Field(
        default_factory=lambda: Armor(name="Worn Coat", defense=0),
        description="The equipped armor.",
    )

    def model_post_init(self, context: Any) -> None:
        """Validates the hit point and mana bounds."""
        super().model_post_init(context)
        if self.mp > self.mp_max:
            raise ValueError(f"Hero has mp {self.mp} above mp_max {self.mp_max}.")

    @property
    def log_name(self) -> str:
        return "you"

    @property
    def effective_atk(self) -> int:
        """Returns base attack plus the weapon bonus."""
        return self.atk + self.weapon.atk

    @property
    def effective_def(self) -> int:
        """Returns base defense plus the armor bonus."""
        return self.defense + self.armor.defense

    def adjust_mp(self, amount: int) -> int:
        """
        Adjusts mana by the given amount, clamped to [0, mp_max].

        Returns:
            int:
                The signed change actually applied.

        """
        before = self.mp
        self.mp = clamp(self.mp + amount, 0, self.mp_max)
        return self.mp - before

    def spend_mp(self, cost: int) -> bool:
        """
        Spends mana if enough is available.

        Returns:
            bool:
                True if the mana was spent, False if the hero could not afford it.

        """
        if self.mp < cost:
            return False
        self.adjust_mp(-cost)
        return True

    def restore(self) -> None:
        """Refills hit points and mana."""
        self.hp = self.hp_max
        self.mp = self.mp_max
