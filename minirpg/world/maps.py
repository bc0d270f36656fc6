"""
Map layout data for the game.

The terminal front end does not render the tile grid; it only needs to know
which maps exist and where their chests sit, since chests are remembered by
position.
"""

TOWN = "town"
DUNGEON = "dungeon"
MAP_NAMES: tuple[str, ...] = (TOWN, DUNGEON)

# Chest positions (x, y) on each map.
CHEST_LOCATIONS: dict[str, list[tuple[int, int]]] = {
    TOWN: [(22, 4), (7, 9), (3, 12)],
    DUNGEON: [(22, 4), (3, 12)],
}


def chest_key(map_name: str, x: int, y: int) -> str:
    """Returns the key under which an opened chest is remembered."""
    return f"{map_name}:{x},{y}"
