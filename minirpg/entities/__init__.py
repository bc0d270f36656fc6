"""
Entities module for the Mini RPG.

This module defines the combatants: the shared combatant base, the hero and
the enemies with their archetypes.
"""
