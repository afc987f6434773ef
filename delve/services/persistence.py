"""SQLAlchemy-backed collaborators for the dungeon service.

``DungeonService`` only needs two duck-typed collaborators:

    CharacterStore.fetch(player_id, character_id) -> CharacterRecord | None
    RunSink.record_start(player_id, character_id, seed, difficulty) -> run_id
    RunSink.record_outcome(run_id, status, **totals) -> None

The implementations below read and write the ``Character`` and ``DungeonRun``
models. Database errors at start time become DungeonError (the client sees
``dungeon_error``); outcome writes run off the socket handler, so their
failures are logged and rolled back.
"""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from delve import db
from delve.logging_utils import get_logger
from delve.models.models import Character, DungeonRun

from .session import DungeonError

log = get_logger("persistence")


@dataclass(frozen=True)
class CharacterRecord:
    id: int
    player_id: str
    name: str
    char_class: str
    level: int
    xp: int
    max_hp: int
    attack: int
    defense: int
    speed: int
    magic_find: float

    @classmethod
    def from_model(cls, row: Character) -> "CharacterRecord":
        return cls(
            id=row.id,
            player_id=row.player_id,
            name=row.name,
            char_class=row.char_class or "warrior",
            level=row.level or 1,
            xp=row.xp or 0,
            max_hp=row.max_hp or 100,
            attack=row.attack or 15,
            defense=row.defense or 8,
            speed=row.speed or 10,
            magic_find=row.magic_find or 0.0,
        )


class SqlCharacterStore:
    def fetch(self, player_id, character_id) -> Optional[CharacterRecord]:
        try:
            row = db.session.get(Character, int(character_id))
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.error(event="character_lookup_failed", player_id=player_id, character_id=character_id, error=str(exc))
            raise DungeonError("character_lookup_failed", "Failed to load character") from exc
        if row is None or str(row.player_id) != str(player_id):
            return None
        return CharacterRecord.from_model(row)


class SqlRunSink:
    """Appends run records. ``app`` is needed for outcome writes on background tasks."""

    def __init__(self, app=None):
        self.app = app

    def record_start(self, player_id, character_id, seed: int, difficulty) -> str:
        run = DungeonRun(
            player_id=str(player_id),
            character_id=int(character_id),
            seed=seed,
            difficulty=getattr(difficulty, "value", difficulty),
            depth=1,
            status="active",
        )
        try:
            db.session.add(run)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.error(event="run_start_failed", player_id=player_id, character_id=character_id, error=str(exc))
            raise DungeonError("persist_failed", "Failed to start dungeon") from exc
        return run.id

    def record_outcome(
        self,
        run_id: str,
        status: str,
        depth: int = 1,
        gold: int = 0,
        xp: int = 0,
        items: Optional[List[Dict[str, Any]]] = None,
        character_level: Optional[int] = None,
        character_xp: Optional[int] = None,
    ) -> bool:
        if self.app is not None:
            with self.app.app_context():
                return self._write_outcome(run_id, status, depth, gold, xp, items, character_level, character_xp)
        return self._write_outcome(run_id, status, depth, gold, xp, items, character_level, character_xp)

    def _write_outcome(self, run_id, status, depth, gold, xp, items, character_level, character_xp) -> bool:
        try:
            run = db.session.get(DungeonRun, run_id)
            if run is None:
                log.warn(event="run_outcome_missing", run_id=run_id, status=status)
                return False
            run.status = status
            run.depth = max(run.depth or 1, depth)
            run.gold = gold
            run.xp = xp
            run.items_json = json.dumps(items or [])
            run.ended_at = datetime.datetime.now(datetime.timezone.utc)
            if character_level is not None:
                char = db.session.get(Character, run.character_id)
                if char is not None:
                    char.level = character_level
                    if character_xp is not None:
                        char.xp = character_xp
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.error(event="run_outcome_failed", run_id=run_id, status=status, error=str(exc))
            return False
        log.info(event="run_recorded", run_id=run_id, status=status, depth=depth, gold=gold, xp=xp)
        return True


__all__ = ["CharacterRecord", "SqlCharacterStore", "SqlRunSink"]
