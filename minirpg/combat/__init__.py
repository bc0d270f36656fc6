"""
Combat system module for the Mini RPG.

This module handles all combat mechanics including damage calculation, the
combat session state machine, enemy decision making, encounter generation
and post-combat progression.
"""
