from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    NIGHTMARE = "nightmare"


DIFFICULTY_ORDER = [Difficulty.EASY, Difficulty.NORMAL, Difficulty.HARD, Difficulty.NIGHTMARE]

DIFFICULTY_MULTIPLIERS = {
    Difficulty.EASY: 0.7,
    Difficulty.NORMAL: 1.0,
    Difficulty.HARD: 1.15,
    Difficulty.NIGHTMARE: 1.4,
}

# Grid (width, height) per difficulty
FLOOR_SIZES = {
    Difficulty.EASY: (60, 30),
    Difficulty.NORMAL: (80, 40),
    Difficulty.HARD: (90, 45),
    Difficulty.NIGHTMARE: (100, 50),
}

# (trap, treasure) chance for normal rooms; trap chance grows 5% per floor past
# the first on every difficulty except easy
ROOM_THEME_CHANCES = {
    Difficulty.EASY: (0.05, 0.25),
    Difficulty.NORMAL: (0.12, 0.18),
    Difficulty.HARD: (0.2, 0.12),
    Difficulty.NIGHTMARE: (0.25, 0.1),
}
SHRINE_CHANCE = 0.08
ARMORY_CHANCE = 0.08
LIBRARY_CHANCE = 0.06


@dataclass
class FloorConfig:
    width: int = 80
    height: int = 40
    min_leaf: int = 10
    min_room: int = 4
    max_room: int = 10
    loop_chance: float = 0.12
    irregular_chance: float = 0.45
    trap_chance: float = 0.15
    treasure_chance: float = 0.15
    seed: Optional[int] = None

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty, seed: Optional[int] = None, depth: int = 1) -> "FloorConfig":
        difficulty = Difficulty(difficulty)
        width, height = FLOOR_SIZES[difficulty]
        trap, treasure = ROOM_THEME_CHANCES[difficulty]
        if difficulty != Difficulty.EASY:
            trap *= 1 + (depth - 1) * 0.05
        return cls(width=width, height=height, trap_chance=trap, treasure_chance=treasure, seed=seed)


def get_difficulty_for_floor(depth: int) -> Difficulty:
    if depth <= 3:
        return Difficulty.EASY
    if depth <= 6:
        return Difficulty.NORMAL
    if depth <= 9:
        return Difficulty.HARD
    return Difficulty.NIGHTMARE


def harder(difficulty: Difficulty) -> Difficulty:
    """One tier up, capped at nightmare."""
    idx = DIFFICULTY_ORDER.index(Difficulty(difficulty))
    return DIFFICULTY_ORDER[min(idx + 1, len(DIFFICULTY_ORDER) - 1)]


__all__ = [
    "Difficulty",
    "DIFFICULTY_ORDER",
    "DIFFICULTY_MULTIPLIERS",
    "FLOOR_SIZES",
    "ROOM_THEME_CHANCES",
    "FloorConfig",
    "get_difficulty_for_floor",
    "harder",
]
