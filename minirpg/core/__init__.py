"""
Core module for the Mini RPG.

This module holds the shared building blocks: enumerations and constants,
configuration, content loading, logging, the random source and small
console and arithmetic helpers.
"""
