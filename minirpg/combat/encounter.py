"""
Encounter generation module for the game.

Spawns enemies for random encounters, scaling an archetype to a level near
the hero's, and builds the fixed dungeon boss. Also decides whether a step
on a given tile triggers a random encounter.
"""

from collections.abc import Sequence

from minirpg.core.config import GameConfig
from minirpg.core.constants import MAX_ENEMY_LEVEL, MIN_ENEMY_LEVEL, TileKind
from minirpg.core.logging import log_debug
from minirpg.core.rng import Dice
from minirpg.core.utils import clamp, round_half_up
from minirpg.entities.enemy import Enemy, EnemyArchetype

BOSS_NAME = "Dungeon Beast"

# Stat growth per enemy level above 1.
LEVEL_SCALE_STEP = 0.12


def level_scale(level: int) -> float:
    """Returns the stat multiplier for an enemy of the given level."""
    return 1 + (level - 1) * LEVEL_SCALE_STEP


def build_boss(hero_level: int) -> Enemy:
    """
    Builds the dungeon boss, scaled to the hero's level.

    Args:
        hero_level (int):
            The hero's level when the fight starts.

    Returns:
        Enemy:
            The boss.

    """
    hp = 80 + 10 * hero_level
    return Enemy(
        name=BOSS_NAME,
        level=max(3, hero_level + 1),
        hp=hp,
        hp_max=hp,
        atk=10 + int(hero_level * 1.2),
        defense=4 + hero_level // 2,
        xp_reward=60 + 10 * hero_level,
        gold_reward=50,
        is_boss=True,
    )


class EncounterGenerator:
    """Creates the enemy for each encounter."""

    def __init__(
        self,
        dice: Dice,
        archetypes: Sequence[EnemyArchetype],
        config: GameConfig | None = None,
    ) -> None:
        """
        Initialize the EncounterGenerator.

        Args:
            dice (Dice):
                The random source.
            archetypes (Sequence[EnemyArchetype]):
                The default archetype pool for random encounters.
            config (GameConfig | None):
                Encounter rates. Defaults to the standard configuration.

        """
        self.dice = dice
        self.archetypes = list(archetypes)
        self.config = config or GameConfig()

    def spawn(
        self,
        hero_level: int,
        archetype_pool: Sequence[EnemyArchetype] | None = None,
        is_boss: bool = False,
    ) -> Enemy:
        """
        Spawns the enemy for an encounter.

        Args:
            hero_level (int):
                The hero's level.
            archetype_pool (Sequence[EnemyArchetype] | None):
                Archetypes to pick from. Defaults to the generator's pool.
            is_boss (bool):
                Build the dungeon boss instead of a random enemy.

        Returns:
            Enemy:
                The freshly spawned enemy.

        """
        if is_boss:
            return build_boss(hero_level)

        pool = list(archetype_pool) if archetype_pool else self.archetypes
        if not pool:
            raise ValueError("Cannot spawn an enemy from an empty archetype pool.")

        archetype = self.dice.choice(pool)
        level = clamp(
            hero_level + self.dice.randint(-1, 1), MIN_ENEMY_LEVEL, MAX_ENEMY_LEVEL
        )
        scale = level_scale(level)
        hp = round_half_up(archetype.hp * scale)
        gold_low, gold_high = archetype.gold

        enemy = Enemy(
            name=archetype.name,
            level=level,
            hp=hp,
            hp_max=hp,
            atk=round_half_up(archetype.atk * scale),
            defense=round_half_up(archetype.defense * scale),
            xp_reward=round_half_up(archetype.xp * scale),
            gold_reward=self.dice.randint(gold_low, gold_high) + level // 2,
        )
        log_debug(
            f"Spawned {enemy.name}",
            {"level": level, "hp": hp, "atk": enemy.atk, "def": enemy.defense},
        )
        return enemy

    def encounter_chance(self, tile: TileKind) -> float:
        """Returns the per-step encounter probability of a tile."""
        if tile == TileKind.GRASS:
            return self.config.encounter_rate_grass
        if tile == TileKind.FLOOR:
            return self.config.encounter_rate_floor
        return 0.0

    def roll_encounter(self, tile: TileKind, hero_level: int) -> Enemy | None:
        """
        Rolls for a random encounter after a successful step onto a tile.

        Args:
            tile (TileKind):
                The tile stepped onto.
            hero_level (int):
                The hero's level.

        Returns:
            Enemy | None:
                The spawned enemy, or None if nothing happens.

        """
        probability = self.encounter_chance(tile)
        if probability > 0 and self.dice.chance(probability):
            return self.spawn(hero_level)
        return None
