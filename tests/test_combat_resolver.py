import pytest

from delve.models.entities import EffectType
from delve.services.combat_service import FLED, LOST, ONGOING, WON, attempt_flee, resolve_turn
from delve.services.combat_utils import roll_damage, strike
from delve.services.rng import stream_for, turn_key
from delve.services.session import DungeonError, SessionState
from delve.services.status_effects import apply_effect

from factories import ScriptedRng, make_enemy, make_player, make_session


def _rng(session):
    return stream_for(turn_key(session.dungeon_id, session.depth, session.current_room_id, session.encounter, session.turn + 1))


def test_roll_damage_formula():
    assert roll_damage(15, 1.0, 8, 0.12, ScriptedRng([0.5, 0.99])) == (11, False)
    assert roll_damage(15, 1.0, 8, 0.12, ScriptedRng([0.5, 0.0])) == (16, True)
    # variance floor(0 * 7) - 3 = -3, still at least one damage
    assert roll_damage(1, 1.0, 100, 0.0, ScriptedRng([0.0, 0.5])) == (1, False)


def test_weakness_lowers_damage():
    assert roll_damage(10, 0.5, 0, 0.0, ScriptedRng([0.5, 0.5])) == (5, False)


def test_strike_on_defending_target():
    attacker = make_player(attack=15)
    target = make_enemy(defense=8, hp=50, max_hp=50)
    apply_effect(target, EffectType.DEFEND, target.id)
    hit = strike(attacker, target, 0.0, (), 1, ScriptedRng([0.5, 0.5]))
    assert hit.damage == 6
    assert target.hp == 44


def test_lethal_attack_wins_encounter():
    session = make_session(enemies=[make_enemy(hp=1)], player=make_player(attack=30))
    out = resolve_turn(session, "attack", None, _rng(session))
    assert out.outcome == WON
    assert out.player_damage >= 1
    assert out.defeated == ["e1"]
    assert session.enemies == []
    assert session.defeated == ["goblin"]
    assert out.enemy_actions == []


def test_stunned_player_deals_no_damage():
    enemy = make_enemy(hp=25)
    apply_effect(enemy, EffectType.STUN, "player")
    player = make_player(hp=1)
    apply_effect(player, EffectType.STUN, enemy.id, bonus_duration=1)
    session = make_session(enemies=[enemy], player=player)

    out = resolve_turn(session, "attack", None, _rng(session))
    payload = out.to_dict()
    assert payload["playerDamage"] == 0
    assert payload["playerAction"] == "stunned"
    assert payload["outcome"] == ONGOING
    assert enemy.hp == 25
    assert [e["type"] for e in payload["playerEffects"]] == ["stun"]
    assert payload["playerEffects"][0]["duration"] == 1
    assert payload["enemyActions"][0]["stunned"] is True
    assert any(ev["type"] == "stun" and ev["target"] == "player" for ev in payload["effectEvents"])


def test_invalid_target_leaves_session_untouched():
    session = make_session()
    with pytest.raises(DungeonError) as exc:
        resolve_turn(session, "attack", "nobody", _rng(session))
    assert exc.value.code == "invalid_target"
    assert exc.value.field == "targetId"
    assert session.turn == 0
    assert session.enemies[0].hp == session.enemies[0].max_hp


def test_unknown_action_rejected():
    session = make_session()
    with pytest.raises(DungeonError) as exc:
        resolve_turn(session, "dance", None, _rng(session))
    assert exc.value.code == "invalid_action"


def test_no_encounter_rejected():
    session = make_session(enemies=[], state=SessionState.DUNGEON_ACTIVE)
    with pytest.raises(DungeonError) as exc:
        resolve_turn(session, "attack", None, _rng(session))
    assert exc.value.code == "not_in_encounter"


def test_turn_replays_identically():
    def run():
        session = make_session(enemies=[make_enemy("orc", "e1"), make_enemy("skeleton", "e2")])
        outcomes = []
        for _ in range(3):
            if session.state != SessionState.IN_ENCOUNTER or not session.enemies:
                break
            out = resolve_turn(session, "attack", None, _rng(session))
            outcomes.append(out.to_dict())
            if out.outcome != ONGOING:
                break
        return outcomes

    assert run() == run()


def test_every_living_enemy_acts_in_order():
    session = make_session(enemies=[make_enemy("orc", "e1"), make_enemy("orc", "e2")], player=make_player(attack=1))
    out = resolve_turn(session, "defend", None, _rng(session))
    assert [a["enemyId"] for a in out.enemy_actions] == ["e1", "e2"]
    # defend lasts through the enemy phase, then expires
    assert session.player.find_effect(EffectType.DEFEND) is None


def test_explicit_target_is_hit():
    session = make_session(enemies=[make_enemy("goblin", "e1"), make_enemy("goblin", "e2")])
    resolve_turn(session, "attack", "e2", _rng(session))
    assert session.enemies[0].hp == session.enemies[0].max_hp


def test_dot_kill_counts_as_defeat():
    enemy = make_enemy(hp=1)
    apply_effect(enemy, EffectType.POISON, "player")
    session = make_session(enemies=[enemy])
    out = resolve_turn(session, "defend", None, _rng(session))
    assert out.outcome == WON
    assert out.enemy_dot_results["e1"]["damage"] == 1


def test_player_death_is_loss():
    player = make_player(hp=1)
    apply_effect(player, EffectType.BURN, "e1")
    enemy = make_enemy(hp=25)
    apply_effect(enemy, EffectType.STUN, "player")
    session = make_session(enemies=[enemy], player=player)
    out = resolve_turn(session, "defend", None, _rng(session))
    assert out.outcome == LOST
    assert session.player.hp == 0


def test_flee_success_consumes_one_draw():
    session = make_session()
    rng = ScriptedRng([0.1])
    out = attempt_flee(session, rng, 0.5)
    assert out.outcome == FLED
    assert rng.calls == 1
    assert session.turn == 1


def test_failed_flee_gives_enemies_their_turn():
    enemy = make_enemy("orc", "e1")
    session = make_session(enemies=[enemy])
    out = attempt_flee(session, stream_for("flee-fail"), 0.0)
    assert out.outcome in (ONGOING, LOST)
    assert [a["enemyId"] for a in out.enemy_actions] == ["e1"]
    assert "Unable to escape!" in out.messages
