"""
Shop module for the game.

The town shop sells potions and randomly generated gear at fixed prices.
"""

from minirpg.core.constants import NiceEnum
from minirpg.core.logging import log_debug
from minirpg.core.rng import Dice
from minirpg.entities.hero import Hero
from minirpg.items.equipment import random_armor, random_weapon
from minirpg.world.loot import equip_if_better


class ShopItem(NiceEnum):
    """Wares sold by the town shop."""

    POTION = "potion"
    WEAPON = "weapon"
    ARMOR = "armor"

    @property
    def price(self) -> int:
        """Returns the price of the item in gold."""
        return {
            ShopItem.POTION: 10,
            ShopItem.WEAPON: 35,
            ShopItem.ARMOR: 35,
        }[self]


def buy(hero: Hero, item: ShopItem, dice: Dice) -> tuple[bool, str]:
    """
    Buys an item for the hero.

    Gear is generated at the hero's level and equipped only if it beats the
    current piece; otherwise it is bought anyway and discarded.

    Args:
        hero (Hero):
            The buyer.
        item (ShopItem):
            What to buy.
        dice (Dice):
            The random source for generated gear.

    Returns:
        tuple[bool, str]:
            Whether the purchase went through, and the message to log.

    """
    if hero.gold < item.price:
        return False, "Not enough gold."
    hero.gold -= item.price
    log_debug(f"Hero bought a {item.display_name}", {"gold_left": hero.gold})

    if item == ShopItem.POTION:
        hero.potions += 1
        return True, "Bought 1 potion."

    if item == ShopItem.WEAPON:
        gear = random_weapon(dice, hero.level)
    else:
        gear = random_armor(dice, hero.level)
    if equip_if_better(hero, gear):
        return True, f"Bought & equipped: {gear}."
    return True, f"Bought: {gear}. Not better than current."
