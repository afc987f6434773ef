import pytest
from sqlalchemy.exc import SQLAlchemyError

from delve import db
from delve.models.entities import EffectType
from delve.models.models import Character, DungeonRun
from delve.services import dungeon_service as dungeon_mod
from delve.services.persistence import SqlCharacterStore, SqlRunSink
from delve.services.session import DungeonError, SessionState
from delve.services.status_effects import apply_effect

SID = "sid-1"


def _start(service, char, sid=SID):
    (reply,) = service.start_dungeon(sid, char.player_id, char.id)
    return reply.payload["dungeonId"]


def _events(replies):
    return [r.event for r in replies]


def _fight_room(service, dungeon_id, sid=SID, room_id=1):
    """Enter ``room_id`` with encounters forced on; returns the live session."""
    service.encounter_chance = 1.0
    replies = service.enter_room(sid, dungeon_id, room_id)
    assert _events(replies) == ["encounter_started"]
    return service.sessions.get(sid)


def _win_now(service, dungeon_id, session, sid=SID):
    session.enemies = session.enemies[:1]
    session.enemies[0].hp = 1
    session.player.attack = 500
    return service.submit_action(sid, dungeon_id, "attack")


def test_start_dungeon_payload_and_run_record(service, make_character):
    char = make_character(player_id="starter")
    (reply,) = service.start_dungeon(SID, "starter", char.id)
    assert reply.event == "dungeon_started"
    payload = reply.payload
    assert payload["floor"] == 1
    assert payload["difficulty"] == "easy"
    assert payload["dungeonName"] == "Goblin Caverns"
    assert payload["playerStats"]["hp"] == 100
    assert payload["map"]["entranceRoomId"] == 0
    run = db.session.get(DungeonRun, payload["dungeonId"])
    assert run.status == "active"
    assert run.seed == 1000


def test_start_with_foreign_character_rejected(service, make_character):
    char = make_character(player_id="owner")
    with pytest.raises(DungeonError) as exc:
        service.start_dungeon(SID, "someone-else", char.id)
    assert exc.value.code == "character_not_found"
    assert SID not in service.sessions


def test_room_errors(service, make_character):
    char = make_character()
    with pytest.raises(DungeonError) as exc:
        service.enter_room(SID, "nope", 1)
    assert exc.value.code == "no_session"
    dungeon_id = _start(service, char)
    with pytest.raises(DungeonError) as exc:
        service.enter_room(SID, "wrong-id", 1)
    assert exc.value.code == "unknown_session"
    with pytest.raises(DungeonError) as exc:
        service.enter_room(SID, dungeon_id, 999)
    assert exc.value.code == "unknown_room"


def test_entrance_is_always_clear(service, make_character):
    dungeon_id = _start(service, make_character())
    service.encounter_chance = 1.0
    assert _events(service.enter_room(SID, dungeon_id, 0)) == ["room_clear"]


def test_empty_room_stays_empty(service, make_character):
    dungeon_id = _start(service, make_character())
    service.encounter_chance = 0.0
    assert _events(service.enter_room(SID, dungeon_id, 1)) == ["room_clear"]
    service.encounter_chance = 1.0
    assert _events(service.enter_room(SID, dungeon_id, 1)) == ["room_clear"]


def test_forced_encounter_win(service, make_character):
    dungeon_id = _start(service, make_character())
    session = _fight_room(service, dungeon_id)
    assert session.state == SessionState.IN_ENCOUNTER
    assert [e.id for e in session.enemies] == ["e1-1-1-0"]
    with pytest.raises(DungeonError) as exc:
        service.enter_room(SID, dungeon_id, 0)
    assert exc.value.code == "in_encounter"

    (reply,) = _win_now(service, dungeon_id, session)
    assert reply.event == "encounter_won"
    assert reply.payload["gold"] > 0
    assert reply.payload["xp"] > 0
    assert session.enemies == []
    assert session.state == SessionState.DUNGEON_ACTIVE
    assert session.gold == reply.payload["gold"]
    assert _events(service.enter_room(SID, dungeon_id, 1)) == ["room_clear"]


def test_stunned_player_turn_result(service, make_character):
    dungeon_id = _start(service, make_character())
    session = _fight_room(service, dungeon_id)
    session.player.hp = 1
    apply_effect(session.player, EffectType.STUN, "e", bonus_duration=1)
    for enemy in session.enemies:
        apply_effect(enemy, EffectType.STUN, "player")

    (reply,) = service.submit_action(SID, dungeon_id, "attack")
    assert reply.event == "turn_result"
    assert reply.payload["playerDamage"] == 0
    assert any(e["type"] == "stun" for e in reply.payload["playerEffects"])


def test_invalid_target_is_rejected(service, make_character):
    dungeon_id = _start(service, make_character())
    _fight_room(service, dungeon_id)
    with pytest.raises(DungeonError) as exc:
        service.submit_action(SID, dungeon_id, "attack", "ghost")
    assert exc.value.code == "invalid_target"


def test_flee_paths(service, make_character):
    dungeon_id = _start(service, make_character())
    assert service.flee("unknown-sid") == []

    session = _fight_room(service, dungeon_id)
    service.flee_chance = 0.0
    replies = service.submit_action(SID, dungeon_id, "flee")
    assert replies[0].event == "flee_failed"
    assert replies[0].payload["message"] == "Unable to escape!"

    # one enemy turn cannot take a fresh character down
    assert session.state == SessionState.IN_ENCOUNTER

    service.flee_chance = 1.0
    (reply,) = service.flee(SID)
    assert reply.event == "fled_successfully"
    assert session.state == SessionState.DUNGEON_ACTIVE
    assert session.enemies == []
    # the room was not cleared, so its encounter returns
    assert _events(service.enter_room(SID, dungeon_id, 1)) == ["encounter_started"]
    assert session.encounter == 2


def test_defeat_records_outcome_and_locks_session(service, make_character):
    dungeon_id = _start(service, make_character())
    session = _fight_room(service, dungeon_id)
    session.player.hp = 1
    apply_effect(session.player, EffectType.BURN, "e")
    for enemy in session.enemies:
        apply_effect(enemy, EffectType.STUN, "player")

    (reply,) = service.submit_action(SID, dungeon_id, "defend")
    assert reply.event == "encounter_lost"
    assert session.state == SessionState.DEFEATED
    assert db.session.get(DungeonRun, dungeon_id).status == "defeated"

    with pytest.raises(DungeonError) as exc:
        service.enter_room(SID, dungeon_id, 0)
    assert exc.value.code == "run_over"

    assert _events(service.abandon(SID, dungeon_id)) == ["dungeon_abandoned"]
    assert db.session.get(DungeonRun, dungeon_id).status == "defeated"


def test_next_floor(service, make_character):
    dungeon_id = _start(service, make_character())
    session = _fight_room(service, dungeon_id)
    with pytest.raises(DungeonError) as exc:
        service.next_floor(SID, dungeon_id)
    assert exc.value.code == "in_encounter"
    _win_now(service, dungeon_id, session)

    (reply,) = service.next_floor(SID, dungeon_id)
    assert reply.event == "floor_changed"
    assert reply.payload["floor"] == 2
    assert reply.payload["branchingPaths"] is None
    assert session.depth == 2
    assert session.cleared_rooms == {0}
    assert session.state == SessionState.DUNGEON_ACTIVE


def test_each_floor_takes_the_next_run_seed(service, make_character):
    dungeon_id = _start(service, make_character())
    session = service.sessions.get(SID)
    assert session.floor.seed == 1000

    (reply,) = service.next_floor(SID, dungeon_id)
    assert reply.payload["map"]["seed"] == 1001
    assert session.floor.seed == 1001


def test_run_completes_at_max_depth(service, make_character):
    dungeon_id = _start(service, make_character())
    floors = []
    for _ in range(9):
        (reply,) = service.next_floor(SID, dungeon_id)
        floors.append(reply.payload["floor"])
    assert floors == list(range(2, 11))

    (reply,) = service.next_floor(SID, dungeon_id)
    assert reply.event == "dungeon_complete"
    assert reply.payload["reward"] == {"gold": 5000, "xp": 10000}
    assert SID not in service.sessions
    run = db.session.get(DungeonRun, dungeon_id)
    assert run.status == "complete"
    assert run.depth == 10

    with pytest.raises(DungeonError) as exc:
        service.next_floor(SID, dungeon_id)
    assert exc.value.code == "no_session"


def _reach_branch(service, dungeon_id):
    for _ in range(4):
        (reply,) = service.next_floor(SID, dungeon_id)
    assert reply.payload["floor"] == 5
    return reply.payload["branchingPaths"]


def test_choose_path(service, make_character):
    dungeon_id = _start(service, make_character())
    paths = _reach_branch(service, dungeon_id)
    session = service.sessions.get(SID)
    assert len(paths) == 2
    assert session.state == SessionState.PATH_CHOICE

    with pytest.raises(DungeonError) as exc:
        service.choose_path(SID, dungeon_id, "path-9-9", paths[0]["zoneType"])
    assert exc.value.code == "unknown_path"
    other_zone = next(z for z in ("boss_chamber", "shadow_den") if z != paths[0]["zoneType"])
    with pytest.raises(DungeonError) as exc:
        service.choose_path(SID, dungeon_id, paths[0]["pathId"], other_zone)
    assert exc.value.field == "zoneType"

    (reply,) = service.choose_path(SID, dungeon_id, paths[0]["pathId"], paths[0]["zoneType"])
    assert reply.event == "path_chosen"
    assert reply.payload["difficulty"] == "hard"
    assert session.rarity_boost == paths[0]["rarityBoost"]
    assert session.zone.value == paths[0]["zoneType"]
    assert session.state == SessionState.DUNGEON_ACTIVE

    with pytest.raises(DungeonError) as exc:
        service.choose_path(SID, dungeon_id, paths[1]["pathId"], paths[1]["zoneType"])
    assert exc.value.code == "no_paths"


def test_entering_room_declines_paths(service, make_character):
    dungeon_id = _start(service, make_character())
    _reach_branch(service, dungeon_id)
    service.encounter_chance = 0.0
    service.enter_room(SID, dungeon_id, 1)
    session = service.sessions.get(SID)
    assert session.state == SessionState.DUNGEON_ACTIVE
    assert session.offered_paths == []


def test_zone_boost_reaches_loot_roll(service, make_character, monkeypatch):
    seen = []
    real = dungeon_mod.generate_loot_from_table

    def spy(table, ctx, rng):
        drop = real(table, ctx, rng)
        seen.append((ctx, drop.gold))
        return drop

    monkeypatch.setattr(dungeon_mod, "generate_loot_from_table", spy)
    dungeon_id = _start(service, make_character())
    paths = _reach_branch(service, dungeon_id)
    service.choose_path(SID, dungeon_id, paths[0]["pathId"], paths[0]["zoneType"])
    session = _fight_room(service, dungeon_id)

    (reply,) = _win_now(service, dungeon_id, session)
    assert reply.event == "encounter_won"
    assert len(seen) == 1
    ctx, raw_gold = seen[0]
    assert ctx.rarity_boost == paths[0]["rarityBoost"]
    assert ctx.zone_type == paths[0]["zoneType"]
    assert reply.payload["gold"] == round(raw_gold * session.zone_bonus.gold_mult)
    assert reply.payload["zoneBonus"]["goldMult"] == session.zone_bonus.gold_mult

    # zone bonus does not survive the next descent
    service.next_floor(SID, dungeon_id)
    assert session.zone is None
    assert session.rarity_boost == 1.0


def test_level_up_persists_with_outcome(service, make_character):
    char = make_character(xp=99)
    dungeon_id = _start(service, char)
    session = _fight_room(service, dungeon_id)
    (reply,) = _win_now(service, dungeon_id, session)
    assert reply.payload["levelUp"] is True
    assert reply.payload["newLevel"] >= 2
    service.abandon(SID, dungeon_id)
    refreshed = db.session.get(Character, char.id)
    assert refreshed.level == reply.payload["newLevel"]
    run = db.session.get(DungeonRun, dungeon_id)
    assert run.status == "abandoned"
    assert run.gold == reply.payload["gold"]
    assert len(run.items) == len(reply.payload["items"])


def test_abandon_and_disconnect(service, make_character):
    char = make_character()
    dungeon_id = _start(service, char)
    with pytest.raises(DungeonError) as exc:
        service.abandon(SID, "other-run")
    assert exc.value.code == "unknown_session"
    (reply,) = service.abandon(SID, dungeon_id)
    assert reply.payload["dungeonId"] == dungeon_id
    assert service.abandon(SID) == []

    second = _start(service, char)
    service.disconnect(SID)
    assert SID not in service.sessions
    assert db.session.get(DungeonRun, second).status == "abandoned"
    service.disconnect(SID)


def test_restart_abandons_previous_run(service, make_character):
    char = make_character()
    first = _start(service, char)
    second = _start(service, char)
    assert first != second
    assert db.session.get(DungeonRun, first).status == "abandoned"
    assert service.sessions.get(SID).dungeon_id == second


def test_sessions_are_per_connection(service, make_character):
    char = make_character()
    a = _start(service, char, sid="a")
    b = _start(service, char, sid="b")
    assert len(service.sessions) == 2
    service.abandon("a", a)
    assert service.sessions.get("b").dungeon_id == b


def test_character_lookup_failure_surfaces(monkeypatch):
    def boom(*args, **kwargs):
        raise SQLAlchemyError("db down")

    monkeypatch.setattr(db.session, "get", boom)
    with pytest.raises(DungeonError) as exc:
        SqlCharacterStore().fetch("p1", 1)
    assert exc.value.code == "character_lookup_failed"


def test_outcome_for_missing_run_is_reported():
    assert SqlRunSink().record_outcome("no-such-run", "abandoned") is False
