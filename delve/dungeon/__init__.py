"""Public dungeon package interface: floors, encounters, difficulty and branching paths."""

from .config import (
    DIFFICULTY_MULTIPLIERS,
    Difficulty,
    FloorConfig,
    get_difficulty_for_floor,
    harder,
)  # noqa: F401
from .encounters import (
    ENEMY_TEMPLATES,
    create_enemy,
    generate_encounter,
    get_dungeon_name,
    is_boss_room,
    scale_enemy_stats,
)  # noqa: F401
from .generator import FloorMap, generate_floor  # noqa: F401
from .paths import (
    BranchingPath,
    ZoneBonus,
    ZoneType,
    generate_branching_paths,
    get_special_zone_bonus,
)  # noqa: F401
from .tiles import EXIT, FLOOR, WALL  # noqa: F401

__all__ = [
    "DIFFICULTY_MULTIPLIERS",
    "Difficulty",
    "FloorConfig",
    "get_difficulty_for_floor",
    "harder",
    "ENEMY_TEMPLATES",
    "create_enemy",
    "generate_encounter",
    "get_dungeon_name",
    "is_boss_room",
    "scale_enemy_stats",
    "FloorMap",
    "generate_floor",
    "BranchingPath",
    "ZoneBonus",
    "ZoneType",
    "generate_branching_paths",
    "get_special_zone_bonus",
    "EXIT",
    "FLOOR",
    "WALL",
]
