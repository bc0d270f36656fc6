"""
World module for the Mini RPG.

This module holds everything outside of combat: world flags and quests, the
game session, chests, the shop and save files.
"""
