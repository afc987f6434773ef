"""Experience point (XP) progression utilities.

Each level costs 15% more than the previous one, starting at 100 XP for the
step from level 1 to 2. Progress within a level is stored as the XP carried
toward the next level, not as a lifetime total.
"""

from __future__ import annotations

import math
from typing import Dict

BASE_XP = 100
GROWTH = 1.15


def xp_for_next_level(level: int) -> int:
    """Return the XP needed to advance from ``level`` to ``level + 1``.

    Args:
        level: 1-based current level. Values <1 are treated as level 1.

    Returns:
        ``floor(100 * 1.15 ** (level - 1))``.
    """
    level = max(1, int(level))
    return math.floor(BASE_XP * GROWTH ** (level - 1))


def calculate_level_up(level: int, xp: int, gained: int) -> Dict[str, int]:
    """Apply ``gained`` XP to a character at ``level`` holding ``xp`` progress.

    Multiple levels can be gained at once; leftover XP carries into the new
    level. Returns ``{"newLevel", "newXp", "levelsGained"}``.
    """
    new_level = max(1, int(level))
    new_xp = max(0, int(xp)) + max(0, int(gained))
    gained_levels = 0
    needed = xp_for_next_level(new_level)
    while new_xp >= needed:
        new_xp -= needed
        new_level += 1
        gained_levels += 1
        needed = xp_for_next_level(new_level)
    return {"newLevel": new_level, "newXp": new_xp, "levelsGained": gained_levels}


__all__ = ["xp_for_next_level", "calculate_level_up"]
