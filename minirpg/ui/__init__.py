"""
User interface module for the Mini RPG.

This module provides the command-line interface, including the hero and
combat tables, the command prompt and combat pacing.
"""
