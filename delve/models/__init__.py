# Model package init
from .models import Character, DungeonRun  # noqa: F401 re-export

__all__ = [
    "Character",
    "DungeonRun",
]
