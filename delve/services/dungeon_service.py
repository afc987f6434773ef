"""Dungeon session state machine.

One DungeonSession per Socket.IO connection, kept in a SessionRegistry owned
by DungeonService. Every public operation takes the connection id (``sid``),
validates the request against the session state, mutates the session and
returns the list of Reply(event, payload) to emit back on that connection.

States::

    idle -> dungeon_active <-> in_encounter
                 |   ^
                 v   |
         floor_transition -> path_choice -> dungeon_active
                 |
                 v
              complete            (also: abandoned, defeated)

Rejected operations raise DungeonError and leave the session unchanged.
Run outcomes (complete / defeated / abandoned) are written through the run
sink on the dispatcher (``socketio.start_background_task`` in the app, a
plain call in tests) so a slow database never delays the reply.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, NamedTuple, Optional

from delve.dungeon.config import get_difficulty_for_floor
from delve.dungeon.encounters import (
    ENEMY_TEMPLATES,
    create_enemy,
    generate_encounter,
    get_dungeon_name,
    is_boss_room,
)
from delve.dungeon.generator import generate_floor
from delve.dungeon.paths import ZONE_DESCRIPTIONS, generate_branching_paths, get_special_zone_bonus
from delve.logging_utils import get_logger
from delve.loot.generator import LootContext, LootDrop, generate_loot_from_table, generic_table
from delve.loot.tables import ENEMY_LOOT_TABLES
from delve.models.entities import Combatant
from delve.models.xp import calculate_level_up

from .combat_service import FLED, LOST, WON, attempt_flee, resolve_turn
from .rng import loot_key, new_seed, room_key, stream_for, turn_key
from .session import (
    TERMINAL_STATES,
    DungeonError,
    DungeonSession,
    SessionRegistry,
    SessionState,
)

log = get_logger("dungeon")

MAX_DEPTH = 10
ENCOUNTER_CHANCE = 0.4
FLEE_CHANCE = 0.5
COMPLETION_REWARD = {"gold": 5000, "xp": 10000}


class Reply(NamedTuple):
    event: str
    payload: Dict[str, Any]


def _call_now(fn, *args, **kwargs):
    return fn(*args, **kwargs)


class DungeonService:
    def __init__(
        self,
        characters,
        runs,
        dispatch: Optional[Callable[..., Any]] = None,
        max_depth: int = MAX_DEPTH,
        encounter_chance: float = ENCOUNTER_CHANCE,
        flee_chance: float = FLEE_CHANCE,
        seed_source: Callable[[], int] = new_seed,
        registry: Optional[SessionRegistry] = None,
    ):
        self.characters = characters
        self.runs = runs
        self.dispatch = dispatch or _call_now
        self.max_depth = max_depth
        self.encounter_chance = encounter_chance
        self.flee_chance = flee_chance
        self.seed_source = seed_source
        self.sessions = registry or SessionRegistry()

    # --- lookups -----------------------------------------------------------
    def _session(self, sid: str, dungeon_id: Optional[str] = None) -> DungeonSession:
        session = self.sessions.get(sid)
        if session is None:
            raise DungeonError("no_session", "No active dungeon")
        if dungeon_id is not None and dungeon_id != session.dungeon_id:
            raise DungeonError("unknown_session", "Dungeon id does not match the active run", field="dungeonId")
        return session

    def _live_session(self, sid: str, dungeon_id: Optional[str] = None) -> DungeonSession:
        session = self._session(sid, dungeon_id)
        if session.state in TERMINAL_STATES:
            raise DungeonError("run_over", f"This run has ended ({session.state.value})")
        return session

    def _record_outcome(self, session: DungeonSession, status: str):
        self.dispatch(
            self.runs.record_outcome,
            session.dungeon_id,
            status,
            depth=session.depth,
            gold=session.gold,
            xp=session.xp_earned,
            items=list(session.items),
            character_level=session.level,
            character_xp=session.xp,
        )

    def _map_payload(self, session: DungeonSession) -> Dict[str, Any]:
        return session.floor.to_dict()

    def _reset_floor_state(self, session: DungeonSession):
        session.current_room_id = session.floor.entrance_room_id
        session.cleared_rooms = {session.floor.entrance_room_id}
        session.enemies = []
        session.defeated = []

    # --- operations --------------------------------------------------------
    def start_dungeon(self, sid: str, player_id, character_id) -> List[Reply]:
        record = self.characters.fetch(player_id, character_id)
        if record is None:
            raise DungeonError("character_not_found", "Character not found", field="characterId")

        seed = self.seed_source()
        difficulty = get_difficulty_for_floor(1)
        run_id = self.runs.record_start(player_id, character_id, seed, difficulty)
        floor = generate_floor(seed, difficulty, 1, record.level)

        player = Combatant(
            id="player",
            name=record.name,
            kind="player",
            hp=record.max_hp,
            max_hp=record.max_hp,
            attack=record.attack,
            defense=record.defense,
            speed=record.speed,
            level=record.level,
        )
        session = DungeonSession(
            dungeon_id=run_id,
            player_id=str(player_id),
            character_id=record.id,
            char_class=record.char_class,
            player=player,
            floor=floor,
            seed=seed,
            level=record.level,
            xp=record.xp,
            magic_find=record.magic_find,
        )
        self._reset_floor_state(session)
        previous = self.sessions.put(sid, session)
        if previous is not None and previous.state not in TERMINAL_STATES:
            log.info(event="session_replaced", sid=sid, dungeon_id=previous.dungeon_id)
            self._record_outcome(previous, SessionState.ABANDONED.value)

        log.info(event="dungeon_started", sid=sid, dungeon_id=run_id, player_id=player_id, seed=seed, rooms=len(floor.rooms))
        return [
            Reply(
                "dungeon_started",
                {
                    "dungeonId": run_id,
                    "floor": session.depth,
                    "difficulty": difficulty.value,
                    "dungeonName": get_dungeon_name(session.depth),
                    "map": self._map_payload(session),
                    "playerStats": session.player_stats(),
                },
            )
        ]

    def enter_room(self, sid: str, dungeon_id: str, room_id: int) -> List[Reply]:
        session = self._live_session(sid, dungeon_id)
        if session.state == SessionState.IN_ENCOUNTER:
            raise DungeonError("in_encounter", "Finish the current encounter first")
        if not session.floor.has_room(room_id):
            raise DungeonError("unknown_room", f"No room {room_id} on this floor", field="roomId")
        if session.state == SessionState.PATH_CHOICE:
            # Walking on declines the offered branches
            session.offered_paths = []
            session.state = SessionState.DUNGEON_ACTIVE

        session.current_room_id = room_id
        if room_id in session.cleared_rooms:
            return [Reply("room_clear", {"roomId": room_id, "message": "This room is empty."})]

        rng = stream_for(room_key(session.dungeon_id, session.depth, room_id))
        if rng.random() >= self.encounter_chance:
            session.cleared_rooms.add(room_id)
            return [Reply("room_clear", {"roomId": room_id, "message": "This room is empty."})]

        enemy_types = generate_encounter(room_id, session.difficulty, session.depth, session.level, rng)
        session.encounter += 1
        session.enemies = [
            create_enemy(kind, session.level, f"e{session.depth}-{room_id}-{session.encounter}-{i}")
            for i, kind in enumerate(enemy_types)
        ]
        session.defeated = []
        session.turn = 0
        session.player.effects = []
        session.state = SessionState.IN_ENCOUNTER
        boss = is_boss_room(room_id, session.depth)
        log.info(
            event="encounter_started",
            dungeon_id=session.dungeon_id,
            depth=session.depth,
            room_id=room_id,
            enemies=",".join(enemy_types),
            boss=boss,
        )
        return [
            Reply(
                "encounter_started",
                {
                    "roomId": room_id,
                    "enemies": [e.to_dict() for e in session.enemies],
                    "playerEffects": [],
                    "isBossRoom": boss,
                },
            )
        ]

    def submit_action(self, sid: str, dungeon_id: str, action: str, target_id: Optional[str] = None) -> List[Reply]:
        session = self._live_session(sid, dungeon_id)
        if action == "flee":
            return self.flee(sid)
        rng = stream_for(
            turn_key(session.dungeon_id, session.depth, session.current_room_id, session.encounter, session.turn + 1)
        )
        outcome = resolve_turn(session, action, target_id, rng)
        if outcome.outcome == LOST:
            return [self._defeat(session, outcome)]
        if outcome.outcome == WON:
            return [self._victory(session, outcome)]
        return [Reply("turn_result", outcome.to_dict())]

    def flee(self, sid: str) -> List[Reply]:
        session = self.sessions.get(sid)
        if session is None:
            return []
        if session.state in TERMINAL_STATES:
            raise DungeonError("run_over", f"This run has ended ({session.state.value})")
        rng = stream_for(
            turn_key(session.dungeon_id, session.depth, session.current_room_id, session.encounter, session.turn + 1)
            + "-flee"
        )
        outcome = attempt_flee(session, rng, self.flee_chance)
        if outcome.outcome == FLED:
            session.enemies = []
            session.defeated = []
            session.state = SessionState.DUNGEON_ACTIVE
            log.info(event="fled", dungeon_id=session.dungeon_id, room_id=session.current_room_id, turn=outcome.turn)
            return [Reply("fled_successfully", {"message": "You escaped!", "roomId": session.current_room_id})]

        replies = [Reply("flee_failed", dict(outcome.to_dict(), message="Unable to escape!"))]
        if outcome.outcome == LOST:
            replies.append(self._defeat(session, outcome))
        elif outcome.outcome == WON:
            replies.append(self._victory(session, outcome))
        return replies

    def _defeat(self, session: DungeonSession, outcome) -> Reply:
        session.state = SessionState.DEFEATED
        session.enemies = []
        self._record_outcome(session, SessionState.DEFEATED.value)
        log.info(event="encounter_lost", dungeon_id=session.dungeon_id, depth=session.depth, turn=outcome.turn)
        return Reply(
            "encounter_lost",
            {
                "message": "You have been defeated!",
                "turnMessages": outcome.messages,
                "effectEvents": outcome.effect_events,
                "playerEffects": outcome.player_effects,
            },
        )

    def _roll_rewards(self, session: DungeonSession) -> LootDrop:
        rng = stream_for(loot_key(session.dungeon_id, session.depth, session.current_room_id, session.encounter))
        drop = LootDrop(id=f"drop-{session.dungeon_id}-{session.depth}-{session.encounter}")
        for kind in session.defeated:
            template = ENEMY_TEMPLATES.get(kind)
            table = ENEMY_LOOT_TABLES.get(kind)
            if table is None:
                table = generic_table(template.gold_drop if template else 100, template.xp_drop if template else 200)
            ctx = LootContext(
                difficulty=session.difficulty,
                depth=session.depth,
                player_level=session.level,
                magic_find=session.magic_find,
                rarity_boost=session.rarity_boost,
                zone_type=session.zone.value if session.zone else None,
                is_boss=bool(template and template.boss),
            )
            drop.merge(generate_loot_from_table(table, ctx, rng))
        if session.zone_bonus is not None:
            drop.gold = round(drop.gold * session.zone_bonus.gold_mult)
            drop.xp = round(drop.xp * session.zone_bonus.xp_mult)
        return drop

    def _victory(self, session: DungeonSession, outcome) -> Reply:
        drop = self._roll_rewards(session)
        level_up = calculate_level_up(session.level, session.xp, drop.xp)
        session.level = level_up["newLevel"]
        session.xp = level_up["newXp"]
        session.player.level = session.level
        session.gold += drop.gold
        session.xp_earned += drop.xp
        session.items.extend(drop.items)
        session.materials.extend(drop.materials)
        session.cleared_rooms.add(session.current_room_id)
        session.enemies = []
        session.defeated = []
        session.state = SessionState.DUNGEON_ACTIVE
        log.info(
            event="encounter_won",
            dungeon_id=session.dungeon_id,
            depth=session.depth,
            room_id=session.current_room_id,
            gold=drop.gold,
            xp=drop.xp,
            items=len(drop.items),
            levels_gained=level_up["levelsGained"],
        )
        return Reply(
            "encounter_won",
            {
                "gold": drop.gold,
                "xp": drop.xp,
                "items": drop.items,
                "materials": drop.materials,
                "levelUp": level_up["levelsGained"] > 0,
                "newLevel": level_up["newLevel"],
                "totalXp": level_up["newXp"],
                "zoneBonus": session.zone_bonus.to_dict() if session.zone_bonus else None,
                "playerHp": session.player.hp,
                "playerMaxHp": session.player.max_hp,
                "turnMessages": outcome.messages,
                "effectEvents": outcome.effect_events,
                "combatStats": {"turnsElapsed": outcome.turn},
            },
        )

    def next_floor(self, sid: str, dungeon_id: str) -> List[Reply]:
        session = self._live_session(sid, dungeon_id)
        if session.state == SessionState.IN_ENCOUNTER:
            raise DungeonError("in_encounter", "Finish the current encounter first")

        if session.depth >= self.max_depth:
            session.gold += COMPLETION_REWARD["gold"]
            session.xp_earned += COMPLETION_REWARD["xp"]
            session.state = SessionState.COMPLETE
            self._record_outcome(session, SessionState.COMPLETE.value)
            self.sessions.pop(sid)
            log.info(event="dungeon_complete", dungeon_id=session.dungeon_id, depth=session.depth, gold=session.gold)
            return [
                Reply(
                    "dungeon_complete",
                    {
                        "message": "You reached the bottom of the dungeon!",
                        "reward": dict(COMPLETION_REWARD),
                        "totalGold": session.gold,
                        "totalXp": session.xp_earned,
                    },
                )
            ]

        session.state = SessionState.FLOOR_TRANSITION
        session.depth += 1
        difficulty = get_difficulty_for_floor(session.depth)
        seed = self.seed_source()
        session.floor = generate_floor(seed, difficulty, session.depth, session.level)
        session.zone = None
        session.zone_bonus = None
        session.rarity_boost = 1.0
        self._reset_floor_state(session)
        paths = generate_branching_paths(session.depth, seed)
        session.offered_paths = paths
        session.state = SessionState.PATH_CHOICE if paths else SessionState.DUNGEON_ACTIVE
        log.info(event="floor_changed", dungeon_id=session.dungeon_id, depth=session.depth, seed=seed, paths=len(paths))
        return [
            Reply(
                "floor_changed",
                {
                    "floor": session.depth,
                    "difficulty": difficulty.value,
                    "dungeonName": get_dungeon_name(session.depth),
                    "map": self._map_payload(session),
                    "branchingPaths": [p.to_dict() for p in paths] if paths else None,
                },
            )
        ]

    def choose_path(self, sid: str, dungeon_id: str, path_id: str, zone_type: str) -> List[Reply]:
        session = self._live_session(sid, dungeon_id)
        if session.state == SessionState.IN_ENCOUNTER:
            raise DungeonError("in_encounter", "Finish the current encounter first")
        if not session.offered_paths:
            raise DungeonError("no_paths", "No branching paths are on offer")
        path = next((p for p in session.offered_paths if p.path_id == path_id), None)
        if path is None:
            raise DungeonError("unknown_path", f"Path {path_id} was not offered", field="pathId")
        if path.zone_type.value != zone_type:
            raise DungeonError("unknown_path", f"Path {path_id} does not lead to {zone_type}", field="zoneType")

        session.zone = path.zone_type
        session.zone_bonus = get_special_zone_bonus(path.zone_type)
        session.rarity_boost = path.rarity_boost
        seed = self.seed_source()
        session.floor = generate_floor(seed, path.difficulty, session.depth, session.level)
        session.offered_paths = []
        self._reset_floor_state(session)
        session.state = SessionState.DUNGEON_ACTIVE
        log.info(event="path_chosen", dungeon_id=session.dungeon_id, depth=session.depth, zone=path.zone_type.value)
        return [
            Reply(
                "path_chosen",
                {
                    "pathId": path.path_id,
                    "zoneType": path.zone_type.value,
                    "zoneDescription": f"Entered the {path.zone_type.value.replace('_', ' ')}! {ZONE_DESCRIPTIONS[path.zone_type]}",
                    "difficulty": path.difficulty.value,
                    "map": self._map_payload(session),
                    "bonuses": session.zone_bonus.to_dict(),
                },
            )
        ]

    def abandon(self, sid: str, dungeon_id: Optional[str] = None) -> List[Reply]:
        session = self.sessions.get(sid)
        if session is None:
            return []
        if dungeon_id is not None and dungeon_id != session.dungeon_id:
            raise DungeonError("unknown_session", "Dungeon id does not match the active run", field="dungeonId")
        self.sessions.pop(sid)
        if session.state not in TERMINAL_STATES:
            session.state = SessionState.ABANDONED
            self._record_outcome(session, SessionState.ABANDONED.value)
        log.info(event="dungeon_abandoned", dungeon_id=session.dungeon_id, depth=session.depth)
        return [Reply("dungeon_abandoned", {"message": "Dungeon abandoned", "dungeonId": session.dungeon_id})]

    def disconnect(self, sid: str) -> None:
        session = self.sessions.pop(sid)
        if session is None:
            return
        if session.state not in TERMINAL_STATES:
            self._record_outcome(session, SessionState.ABANDONED.value)
        log.info(event="session_removed", sid=sid, dungeon_id=session.dungeon_id, state=session.state.value)


__all__ = ["Reply", "DungeonService", "DungeonSession", "DungeonError", "SessionState", "SessionRegistry"]
