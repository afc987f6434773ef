"""Socket.IO dungeon handlers.

Events:
    - start_dungeon:   { playerId, characterId }
    - enter_room:      { dungeonId, roomId }
    - dungeon_action:  { dungeonId, action, targetId? }
    - flee_encounter:  no payload
    - next_floor:      { dungeonId }
    - choose_path:     { dungeonId, pathId, zoneType }
    - abandon_dungeon: { dungeonId }

Emits whatever replies DungeonService returns (dungeon_started,
encounter_started, room_clear, turn_result, encounter_won, encounter_lost,
fled_successfully, flee_failed, floor_changed, dungeon_complete,
path_chosen, dungeon_abandoned) on the requesting connection only.
Rejected requests emit dungeon_error { message, code, field? }; unexpected
failures are logged and reported as code ``internal_error``.
"""

from flask import current_app, request
from flask_socketio import emit

from delve import socketio
from delve.logging_utils import get_logger
from delve.services.session import DungeonError

from .validation import (
    ABANDON_DUNGEON,
    CHOOSE_PATH,
    DUNGEON_ACTION,
    ENTER_ROOM,
    NEXT_FLOOR,
    START_DUNGEON,
    validate,
)

_log = get_logger("dungeon_ws")


def _service():
    return current_app.extensions["delve"]


def _invalid(event, result):
    emit(
        "dungeon_error",
        {"message": f"Invalid {event}: {result['error']}", "field": result["field"], "code": result["code"]},
    )
    _log.warn(event="invalid_payload", handler=event, field=result["field"], code=result["code"])


def _run(event, fn, *args):
    try:
        replies = fn(*args)
    except DungeonError as exc:
        emit("dungeon_error", exc.to_dict())
        _log.warn(event="dungeon_error", handler=event, sid=request.sid, code=exc.code)
        return
    except Exception as exc:
        _log.error(event="handler_failed", handler=event, sid=request.sid, error=repr(exc))
        emit("dungeon_error", {"message": "Action failed", "code": "internal_error"})
        return
    for reply in replies:
        emit(reply.event, reply.payload)


@socketio.on("start_dungeon")
def handle_start_dungeon(data):
    ok, result = validate(data or {}, START_DUNGEON)
    if not ok:
        _invalid("start_dungeon", result)
        return
    _run("start_dungeon", _service().start_dungeon, request.sid, result["playerId"], result["characterId"])


@socketio.on("enter_room")
def handle_enter_room(data):
    ok, result = validate(data or {}, ENTER_ROOM)
    if not ok:
        _invalid("enter_room", result)
        return
    _run("enter_room", _service().enter_room, request.sid, result["dungeonId"], result["roomId"])


@socketio.on("dungeon_action")
def handle_dungeon_action(data):
    ok, result = validate(data or {}, DUNGEON_ACTION)
    if not ok:
        _invalid("dungeon_action", result)
        return
    _run(
        "dungeon_action",
        _service().submit_action,
        request.sid,
        result["dungeonId"],
        result["action"],
        result.get("targetId"),
    )


@socketio.on("flee_encounter")
def handle_flee_encounter(data=None):
    _run("flee_encounter", _service().flee, request.sid)


@socketio.on("next_floor")
def handle_next_floor(data):
    ok, result = validate(data or {}, NEXT_FLOOR)
    if not ok:
        _invalid("next_floor", result)
        return
    _run("next_floor", _service().next_floor, request.sid, result["dungeonId"])


@socketio.on("choose_path")
def handle_choose_path(data):
    ok, result = validate(data or {}, CHOOSE_PATH)
    if not ok:
        _invalid("choose_path", result)
        return
    _run("choose_path", _service().choose_path, request.sid, result["dungeonId"], result["pathId"], result["zoneType"])


@socketio.on("abandon_dungeon")
def handle_abandon_dungeon(data=None):
    ok, result = validate(data or {}, ABANDON_DUNGEON)
    if not ok:
        _invalid("abandon_dungeon", result)
        return
    _run("abandon_dungeon", _service().abandon, request.sid, result.get("dungeonId"))


@socketio.on("disconnect")
def handle_disconnect(reason=None):
    _service().disconnect(request.sid)
