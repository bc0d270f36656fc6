"""
Tests for the shop and treasure chests.
"""

from minirpg.items.equipment import Armor, Weapon
from minirpg.world.loot import equip_if_better, open_chest
from minirpg.world.shop import ShopItem, buy


def test_equip_only_strictly_better(hero):
    """
    Test that gear is equipped only when its bonus is strictly higher.
    """
    hero.weapon = Weapon(name="Iron Dagger", atk=3)
    assert not equip_if_better(hero, Weapon(name="Other Dagger", atk=3))
    assert hero.weapon.name == "Iron Dagger"

    assert equip_if_better(hero, Weapon(name="Moonfang", atk=4))
    assert hero.weapon.name == "Moonfang"

    assert equip_if_better(hero, Armor(name="Chain Shirt", defense=1))
    assert hero.armor.name == "Chain Shirt"


def test_chest_gold_only(hero, dice):
    """
    Test a chest that only holds gold.
    """
    dice.script(randints=[8])
    assert open_chest(hero, dice) == "+8 gold"
    assert hero.gold == 8
    assert hero.potions == 2


def test_chest_potion_and_weapon(hero, dice):
    """
    Test a chest with a potion and a weapon that beats the starting sword.
    """
    # Gold 20; potion, gear and weapon checks pass; then a common weapon.
    dice.script(
        randints=[20, 2, 0, 0],
        randoms=[0.1, 0.1, 0.1, 0.1],
    )
    message = open_chest(hero, dice)

    assert message == "+20 gold and +1 potion and equipped Common Plain Iron Dagger (+2 ATK)"
    assert hero.potions == 3
    assert hero.weapon.atk == 2


def test_chest_armor_not_better(hero, dice):
    """
    Test that gear which is not better is reported as found, not equipped.
    """
    hero.armor = Armor(name="Starsewn Mail", defense=9)
    dice.script(
        randints=[10, 1, 0, 0],
        randoms=[0.9, 0.1, 0.9, 0.1],
    )
    message = open_chest(hero, dice)

    assert message == "+10 gold and found Common Sturdy Leather Vest (+1 DEF)"
    assert hero.armor.name == "Starsewn Mail"


def test_buy_potion(hero, dice):
    """
    Test buying a potion.
    """
    hero.gold = 12
    assert buy(hero, ShopItem.POTION, dice) == (True, "Bought 1 potion.")
    assert hero.gold == 2
    assert hero.potions == 3


def test_buy_without_gold(hero, dice):
    """
    Test that buying without enough gold changes nothing.
    """
    hero.gold = 34
    assert buy(hero, ShopItem.WEAPON, dice) == (False, "Not enough gold.")
    assert hero.gold == 34
    assert hero.weapon.name == "Rusty Sword"


def test_buy_weapon_is_equipped(hero, dice):
    """
    Test that a bought weapon better than the current one is equipped.
    """
    hero.gold = 40
    dice.script(randoms=[0.1], randints=[3, 1, 1])
    bought, message = buy(hero, ShopItem.WEAPON, dice)

    assert bought
    assert message == "Bought & equipped: Common Sharpened Steel Shortsword (+3 ATK)."
    assert hero.gold == 5


def test_shop_prices():
    """
    Test the shop price list.
    """
    assert ShopItem.POTION.price == 10
    assert ShopItem.WEAPON.price == 35
    assert ShopItem.ARMOR.price == 35
