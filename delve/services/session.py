"""Per-connection dungeon session state and the registry that owns it."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from delve.dungeon.config import Difficulty
from delve.dungeon.generator import FloorMap
from delve.dungeon.paths import BranchingPath, ZoneBonus, ZoneType
from delve.models.entities import Combatant


class SessionState(str, Enum):
    IDLE = "idle"
    DUNGEON_ACTIVE = "dungeon_active"
    IN_ENCOUNTER = "in_encounter"
    FLOOR_TRANSITION = "floor_transition"
    PATH_CHOICE = "path_choice"
    COMPLETE = "complete"
    ABANDONED = "abandoned"
    DEFEATED = "defeated"


# States from which no further floor/room/combat operation is accepted
TERMINAL_STATES = (SessionState.COMPLETE, SessionState.ABANDONED, SessionState.DEFEATED)


class DungeonError(Exception):
    """Rejected dungeon operation; surfaces to the client as ``dungeon_error``.

    ``code`` is a stable machine-readable token, ``field`` names the payload
    key at fault when there is one.
    """

    def __init__(self, code: str, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        d = {"message": self.message, "code": self.code}
        if self.field:
            d["field"] = self.field
        return d


@dataclass
class DungeonSession:
    dungeon_id: str
    player_id: str
    character_id: int
    char_class: str
    player: Combatant
    floor: FloorMap
    seed: int
    level: int = 1
    xp: int = 0
    magic_find: float = 0.0
    state: SessionState = SessionState.DUNGEON_ACTIVE
    depth: int = 1
    current_room_id: int = 0
    turn: int = 0
    encounter: int = 0
    enemies: List[Combatant] = field(default_factory=list)
    defeated: List[str] = field(default_factory=list)
    cleared_rooms: Set[int] = field(default_factory=set)
    offered_paths: List[BranchingPath] = field(default_factory=list)
    zone: Optional[ZoneType] = None
    zone_bonus: Optional[ZoneBonus] = None
    rarity_boost: float = 1.0
    gold: int = 0
    xp_earned: int = 0
    items: List[Dict[str, Any]] = field(default_factory=list)
    materials: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def difficulty(self) -> Difficulty:
        return self.floor.difficulty

    @property
    def living_enemies(self) -> List[Combatant]:
        return [e for e in self.enemies if e.alive]

    def player_stats(self) -> Dict[str, Any]:
        return {
            "hp": self.player.hp,
            "maxHp": self.player.max_hp,
            "attack": self.player.attack,
            "defense": self.player.defense,
            "level": self.level,
            "xp": self.xp,
            "class": self.char_class,
        }


class SessionRegistry:
    """Connection id -> DungeonSession. The only structure shared between handlers."""

    def __init__(self):
        self._sessions: Dict[str, DungeonSession] = {}
        self._lock = threading.Lock()

    def get(self, sid: str) -> Optional[DungeonSession]:
        with self._lock:
            return self._sessions.get(sid)

    def put(self, sid: str, session: DungeonSession) -> Optional[DungeonSession]:
        """Store ``session`` for ``sid``; returns the session it replaced, if any."""
        with self._lock:
            previous = self._sessions.get(sid)
            self._sessions[sid] = session
            return previous

    def pop(self, sid: str) -> Optional[DungeonSession]:
        with self._lock:
            return self._sessions.pop(sid, None)

    def __contains__(self, sid) -> bool:
        with self._lock:
            return sid in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["SessionState", "TERMINAL_STATES", "DungeonError", "DungeonSession", "SessionRegistry"]
