from delve.models.entities import EffectType
from delve.services.status_effects import (
    EFFECT_CONFIG,
    MIN_EFFECT_CHANCE,
    PLAYER_EFFECT_ABILITIES,
    EffectAbility,
    apply_effect,
    effect_chance,
    get_attack_modifier,
    get_incoming_damage_modifier,
    get_speed_modifier,
    is_stunned,
    roll_attack_effects,
    tick,
)

from factories import ScriptedRng, make_player

def test_poison_stacks_and_caps():
    p = make_player()
    for _ in range(10):
        apply_effect(p, EffectType.POISON, "e1")
    eff = p.find_effect(EffectType.POISON)
    assert eff.stacks == EFFECT_CONFIG[EffectType.POISON].max_stacks
    assert eff.duration <= EFFECT_CONFIG[EffectType.POISON].max_duration
    assert len(p.effects) == 1

def test_apply_at_cap_returns_none():
    p = make_player()
    apply_effect(p, EffectType.STUN, "e1", bonus_duration=5)
    assert apply_effect(p, EffectType.STUN, "e1", bonus_duration=5) is None

def test_defend_is_exclusive():
    p = make_player()
    apply_effect(p, EffectType.DEFEND, "player", turn=1)
    apply_effect(p, EffectType.DEFEND, "player", turn=2)
    defends = [e for e in p.effects if e.type == EffectType.DEFEND]
    assert len(defends) == 1
    assert defends[0].applied_turn == 2

def test_tick_dot_damage_then_expiry():
    p = make_player(hp=100, max_hp=100)
    apply_effect(p, EffectType.BURN, "e1")
    result = tick(p)
    # burn: 4% of max hp per stack
    assert result.total_damage == 4
    assert p.hp == 96
    assert p.find_effect(EffectType.BURN).duration == 2
    tick(p)
    tick(p)
    assert p.find_effect(EffectType.BURN) is None

def test_tick_never_drops_below_zero():
    p = make_player(hp=1, max_hp=100)
    apply_effect(p, EffectType.BLEED, "e1", bonus_stacks=2)
    tick(p)
    assert p.hp == 0

def test_dot_minimum_one_damage():
    p = make_player(hp=10, max_hp=10)
    apply_effect(p, EffectType.POISON, "e1")
    assert tick(p).total_damage == 1

def test_stun_lasts_for_its_duration():
    p = make_player()
    apply_effect(p, EffectType.STUN, "e1", bonus_duration=1)
    assert p.find_effect(EffectType.STUN).duration == 2
    assert is_stunned(p)
    tick(p)
    assert is_stunned(p)
    tick(p)
    assert not is_stunned(p)
    assert p.effects == []

def test_modifiers_and_floors():
    p = make_player()
    assert get_attack_modifier(p) == 1.0
    apply_effect(p, EffectType.WEAKNESS, "e1", bonus_stacks=2)
    assert abs(get_attack_modifier(p) - 0.7) < 1e-9
    apply_effect(p, EffectType.SLOW, "e1", bonus_stacks=1)
    assert abs(get_speed_modifier(p) - 0.7) < 1e-9
    apply_effect(p, EffectType.DEFEND, "player")
    assert abs(get_incoming_damage_modifier(p) - 0.6) < 1e-9

def test_effect_chance_defense_resist_and_crit():
    ability = EffectAbility(EffectType.POISON, 0.1)
    base = effect_chance(ability, 0, False)
    assert abs(base - 0.45) < 1e-9
    assert effect_chance(ability, 50, False) < base
    assert effect_chance(ability, 50, True) > effect_chance(ability, 50, False)
    assert effect_chance(EffectAbility(EffectType.STUN), 1000, False) == MIN_EFFECT_CHANCE

def test_roll_attack_effects_declared_order():
    target = make_player()
    # first ability lands, second misses
    applied = roll_attack_effects(PLAYER_EFFECT_ABILITIES["warrior"], target, "player", 1, 0, False, ScriptedRng([0.0, 0.99]))
    assert [a.effect for a in applied] == [EffectType.BLEED]
    assert target.find_effect(EffectType.BLEED) is not None
    assert target.find_effect(EffectType.STUN) is None
