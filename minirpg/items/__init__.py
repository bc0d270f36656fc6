"""
Items system module for the Mini RPG.

This module contains the weapons and armor the hero can equip, their rarity
tiers and the random gear generator.
"""
