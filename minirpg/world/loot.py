"""
Loot module for the game.

Resolves treasure chests and equips generated gear when it beats what the
hero is wearing.
"""

from minirpg.core.rng import Dice
from minirpg.entities.hero import Hero
from minirpg.items.equipment import Armor, Weapon, random_armor, random_weapon

CHEST_GOLD_RANGE = (8, 20)
CHEST_POTION_CHANCE = 0.55
CHEST_GEAR_CHANCE = 0.25
CHEST_WEAPON_CHANCE = 0.5


def equip_if_better(hero: Hero, item: Weapon | Armor) -> bool:
    """
    Equips a weapon or armor piece if its bonus is strictly higher than the
    equipped one.

    Args:
        hero (Hero):
            The hero.
        item (Weapon | Armor):
            The candidate piece.

    Returns:
        bool:
            True if the piece was equipped.

    """
    if isinstance(item, Weapon):
        if item.atk > hero.weapon.atk:
            hero.weapon = item
            return True
        return False
    if item.defense > hero.armor.defense:
        hero.armor = item
        return True
    return False


def open_chest(hero: Hero, dice: Dice) -> str:
    """
    Rolls the contents of a chest and gives them to the hero.

    Args:
        hero (Hero):
            The hero opening the chest.
        dice (Dice):
            The random source.

    Returns:
        str:
            A description of the loot, e.g. '+12 gold and +1 potion'.

    """
    low, high = CHEST_GOLD_RANGE
    gold = dice.randint(low, high)
    hero.gold += gold
    parts = [f"+{gold} gold"]

    if dice.chance(CHEST_POTION_CHANCE):
        hero.potions += 1
        parts.append("+1 potion")

    if dice.chance(CHEST_GEAR_CHANCE):
        item: Weapon | Armor
        if dice.chance(CHEST_WEAPON_CHANCE):
            item = random_weapon(dice, hero.level)
        else:
            item = random_armor(dice, hero.level)
        verb = "equipped" if equip_if_better(hero, item) else "found"
        parts.append(f"{verb} {item}")

    return " and ".join(parts)
