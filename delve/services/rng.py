"""Seeded random streams keyed by a context string.

A room's encounter roll, a floor's branching paths and a combat turn each get
their own stream derived from stable identifiers, so the same inputs always
replay the same outcome without storing the rolled result.
"""

from __future__ import annotations

import hashlib
import random

SQLITE_MAX_INT = 9223372036854775807


def seed_from_key(context_key) -> int:
    """Convert a context key (int or str) into a bounded 64-bit seed."""
    if isinstance(context_key, int):
        return context_key % SQLITE_MAX_INT
    h = hashlib.sha256(str(context_key).encode("utf-8")).digest()
    return int.from_bytes(h[:8], "big") % SQLITE_MAX_INT


def stream_for(context_key) -> random.Random:
    """Return an independent generator for ``context_key``.

    Same key, same sequence; ``rng.random()`` yields floats in [0, 1).
    """
    return random.Random(seed_from_key(context_key))


def new_seed() -> int:
    """Fresh OS-entropy seed for a new run or floor."""
    return random.SystemRandom().randint(1, 2**31 - 1)


def room_key(dungeon_id: str, depth: int, room_id: int) -> str:
    return f"{dungeon_id}-floor-{depth}-room-{room_id}"


def turn_key(dungeon_id: str, depth: int, room_id: int, encounter: int, turn: int) -> str:
    return f"{dungeon_id}-floor-{depth}-room-{room_id}-enc-{encounter}-turn-{turn}"


def loot_key(dungeon_id: str, depth: int, room_id: int, encounter: int) -> str:
    return f"{dungeon_id}-floor-{depth}-room-{room_id}-enc-{encounter}-loot"


__all__ = ["seed_from_key", "stream_for", "new_seed", "room_key", "turn_key", "loot_key"]
