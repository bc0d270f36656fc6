"""
Mini RPG package.

This package contains the turn-based combat engine of a small tile-based
RPG, the game session that owns the hero and the world between encounters,
and a terminal front end.
"""
