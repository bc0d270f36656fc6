"""
Main entry point for the Mini RPG.

Loads the configuration and the content data, then starts the terminal
front end on a fresh adventure:
- explore the town and the dungeon, where tall grass hides random encounters
- fight turn by turn with attacks, potions and mana-costing skills
- accept the Elder's quest and defeat the beast on the dungeon altar
- save and load the adventure
"""

import argparse
import asyncio
import logging
from pathlib import Path

from minirpg.core.config import load_config
from minirpg.core.logging import setup_logging
from minirpg.core.rng import Dice
from minirpg.ui.cli_interface import GameInterface
from minirpg.world.game_session import GameSession


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="minirpg", description="A tiny turn-based RPG.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file overriding the default settings.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random source, for reproducible runs.",
    )
    parser.add_argument(
        "--load",
        action="store_true",
        help="Load the save file on start.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show rule-level debug logging.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.WARNING)

    config = load_config(args.config)
    if args.seed is not None:
        config = config.model_copy(update={"seed": args.seed})

    game = GameSession(config, Dice(config.seed))
    game.new_game()
    if args.load:
        game.load()

    asyncio.run(GameInterface(game).run())


if __name__ == "__main__":
    main()
