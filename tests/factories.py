"""Builders for in-memory combat state used across the engine tests."""

from delve.dungeon.encounters import create_enemy
from delve.dungeon.generator import generate_floor
from delve.models.entities import Combatant
from delve.services.session import DungeonSession, SessionState


class ScriptedRng:
    """Replays ``values`` from ``random()``; repeats the last one once exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        idx = min(self.calls, len(self.values) - 1)
        self.calls += 1
        return self.values[idx]


def make_player(**overrides):
    fields = dict(id="player", name="Hero", kind="player", hp=100, max_hp=100, attack=15, defense=8, speed=10)
    fields.update(overrides)
    return Combatant(**fields)


def make_enemy(kind="goblin", enemy_id="e1", level=1, **overrides):
    enemy = create_enemy(kind, level, enemy_id)
    for key, val in overrides.items():
        setattr(enemy, key, val)
    return enemy


_FLOOR_CACHE = {}


def _floor(seed=42):
    if seed not in _FLOOR_CACHE:
        _FLOOR_CACHE[seed] = generate_floor(seed, "easy", 1)
    return _FLOOR_CACHE[seed]


def make_session(enemies=None, player=None, char_class="warrior", dungeon_id="run-1", **overrides):
    """A session already inside an encounter with ``enemies`` (one goblin by default)."""
    session = DungeonSession(
        dungeon_id=dungeon_id,
        player_id="p1",
        character_id=1,
        char_class=char_class,
        player=player or make_player(),
        floor=_floor(),
        seed=42,
        state=SessionState.IN_ENCOUNTER,
        current_room_id=1,
        encounter=1,
        enemies=list(enemies) if enemies is not None else [make_enemy()],
    )
    for key, val in overrides.items():
        setattr(session, key, val)
    return session
