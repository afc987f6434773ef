# Tile constants centralized for modular imports; grids are row-major tiles[y][x]
WALL = 0
FLOOR = 1
EXIT = 2

WALKABLE = frozenset({FLOOR, EXIT})

# Room roles carried on FloorMap rooms
ENTRANCE_ROOM = "entrance"
NORMAL_ROOM = "normal"
BOSS_ROOM = "boss"
EXIT_ROOM = "exit"

# Themes for otherwise normal rooms; clients decorate them, combat ignores them
TRAP_ROOM = "trap"
TREASURE_ROOM = "treasure"
SHRINE_ROOM = "shrine"
ARMORY_ROOM = "armory"
LIBRARY_ROOM = "library"

__all__ = [
    "WALL",
    "FLOOR",
    "EXIT",
    "WALKABLE",
    "ENTRANCE_ROOM",
    "NORMAL_ROOM",
    "BOSS_ROOM",
    "EXIT_ROOM",
    "TRAP_ROOM",
    "TREASURE_ROOM",
    "SHRINE_ROOM",
    "ARMORY_ROOM",
    "LIBRARY_ROOM",
]
