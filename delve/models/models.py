"""
project: Delve
module: models.py
License: MIT

Database models used by the Delve dungeon service.

Notes:
- Only two tables: the character roster a run starts from, and the run
  records appended as runs begin and end. Live combat state never touches
  the database.
- Run loot is stored as a JSON string for simplicity; consider normalizing
  into related tables if item history becomes queryable.
"""

import datetime
import json
import uuid

from delve import db


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Character(db.Model):
    """A playable character owned by a player.

    Attributes:
        player_id: External player identifier (authentication lives elsewhere)
        name: Character name
        char_class: warrior | mage | rogue | paladin (selects the on-hit ability pool)
        xp: Progress toward the next level (see delve.models.xp)
        max_hp, attack, defense, speed: Combat stats copied into each run
        magic_find: Percentage bonus applied to loot rarity rolls
    """

    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(80), nullable=False)
    char_class = db.Column(db.String(20), nullable=False, default="warrior")
    level = db.Column(db.Integer, nullable=False, default=1)
    xp = db.Column(db.Integer, nullable=False, default=0)
    max_hp = db.Column(db.Integer, nullable=False, default=100)
    attack = db.Column(db.Integer, nullable=False, default=15)
    defense = db.Column(db.Integer, nullable=False, default=8)
    speed = db.Column(db.Integer, nullable=False, default=10)
    magic_find = db.Column(db.Float, nullable=False, default=0.0)
    created_at = db.Column(db.DateTime, default=_utcnow)

    def __repr__(self):
        return f"<Character {self.id} {self.name!r} player={self.player_id}>"


class DungeonRun(db.Model):
    """One dungeon run, appended at start and updated once with its outcome.

    Attributes:
        id: UUID string; doubles as the session's dungeon id on the wire
        status: active | complete | abandoned | defeated
        depth: Deepest floor reached
        gold, xp: Rewards accumulated over the run
        items_json: JSON list of item dicts collected during the run
    """

    __tablename__ = "dungeon_runs"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    player_id = db.Column(db.String(64), nullable=False, index=True)
    character_id = db.Column(db.Integer, db.ForeignKey("character.id"), nullable=False)
    seed = db.Column(db.BigInteger, nullable=False)
    difficulty = db.Column(db.String(20), nullable=False, default="easy")
    depth = db.Column(db.Integer, nullable=False, default=1)
    max_depth = db.Column(db.Integer, nullable=False, default=10)
    status = db.Column(db.String(20), nullable=False, default="active")
    gold = db.Column(db.Integer, nullable=False, default=0)
    xp = db.Column(db.Integer, nullable=False, default=0)
    items_json = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    ended_at = db.Column(db.DateTime, nullable=True)

    @property
    def items(self):
        try:
            return json.loads(self.items_json or "[]")
        except ValueError:
            return []

    def __repr__(self):
        return f"<DungeonRun {self.id} player={self.player_id} status={self.status} depth={self.depth}>"
