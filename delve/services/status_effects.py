"""Stacking status effects framework.

Effects live on a Combatant as an ordered list of StatusEffectInstance:

    StatusEffectInstance(type=EffectType.POISON, duration=4, stacks=2,
                         source_id="enemy-3", applied_turn=5)

Rules:
- ``defend`` is exclusive: re-applying replaces the old instance.
- Stackable types add a stack (up to ``max_stacks``) and refresh duration
  (never beyond ``max_duration``).
- ``tick`` runs once per combatant at end of turn: damage-over-time first,
  then every duration drops by one and expired instances are removed.
- ``stun`` makes ``is_stunned`` true while its duration is positive; the
  combat resolver skips that combatant's action.

New damage-over-time types only need a handler in EFFECT_TICK.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from delve.models.entities import Combatant, EffectType, StatusEffectInstance


@dataclass(frozen=True)
class EffectConfig:
    label: str
    max_stacks: int
    base_duration: int
    max_duration: int
    damage_per_stack: float  # fraction of max hp per stack per tick
    prevents_action: bool
    base_chance: float
    exclusive: bool = False
    modifier: Optional[str] = None  # attack | speed | incoming
    modifier_per_stack: float = 0.0


EFFECT_CONFIG: Dict[EffectType, EffectConfig] = {
    EffectType.POISON: EffectConfig("Poison", 5, 4, 6, 0.02, False, 0.35),
    EffectType.STUN: EffectConfig("Stun", 1, 1, 2, 0.0, True, 0.20),
    EffectType.BLEED: EffectConfig("Bleed", 3, 3, 5, 0.03, False, 0.30),
    EffectType.BURN: EffectConfig("Burn", 3, 3, 4, 0.04, False, 0.25),
    EffectType.DEFEND: EffectConfig(
        "Defend", 1, 1, 1, 0.0, False, 1.0, exclusive=True, modifier="incoming", modifier_per_stack=-0.4
    ),
    EffectType.WEAKNESS: EffectConfig("Weakness", 3, 2, 4, 0.0, False, 0.25, modifier="attack", modifier_per_stack=-0.10),
    EffectType.SLOW: EffectConfig("Slow", 2, 2, 3, 0.0, False, 0.30, modifier="speed", modifier_per_stack=-0.15),
}

# Lowest multiplier each modifier category can reach
MODIFIER_FLOORS = {"attack": 0.5, "speed": 0.5, "incoming": 0.25}

# Crit makes on-hit effects more likely; defense makes them less likely (capped)
CRIT_EFFECT_BONUS = 0.15
DEFENSE_RESIST_PER_POINT = 0.003
DEFENSE_RESIST_CAP = 0.3
MIN_EFFECT_CHANCE = 0.05


@dataclass(frozen=True)
class EffectAbility:
    effect: EffectType
    bonus_chance: float = 0.0
    bonus_stacks: int = 0
    bonus_duration: int = 0


# Declared order is evaluation order.
ENEMY_EFFECT_ABILITIES: Dict[str, Tuple[EffectAbility, ...]] = {
    "goblin": (EffectAbility(EffectType.POISON, 0.1),),
    "skeleton": (EffectAbility(EffectType.BLEED, 0.05), EffectAbility(EffectType.WEAKNESS, 0.1)),
    "orc": (EffectAbility(EffectType.STUN, 0.1), EffectAbility(EffectType.BLEED, 0.15, 1)),
    "wraith": (EffectAbility(EffectType.POISON, 0.2, 1, 1), EffectAbility(EffectType.SLOW, 0.15)),
    "boss_skeleton": (
        EffectAbility(EffectType.BLEED, 0.25, 2, 1),
        EffectAbility(EffectType.STUN, 0.15, 0, 1),
        EffectAbility(EffectType.WEAKNESS, 0.2, 1, 1),
    ),
    "boss_dragon": (EffectAbility(EffectType.BURN, 0.4, 2, 1), EffectAbility(EffectType.STUN, 0.1)),
    "boss_lich": (
        EffectAbility(EffectType.POISON, 0.35, 3, 2),
        EffectAbility(EffectType.WEAKNESS, 0.3, 2, 1),
        EffectAbility(EffectType.SLOW, 0.25, 1, 1),
    ),
}

PLAYER_EFFECT_ABILITIES: Dict[str, Tuple[EffectAbility, ...]] = {
    "warrior": (EffectAbility(EffectType.BLEED, 0.15), EffectAbility(EffectType.STUN, 0.05)),
    "mage": (EffectAbility(EffectType.BURN, 0.2, 1), EffectAbility(EffectType.SLOW, 0.1)),
    "rogue": (EffectAbility(EffectType.POISON, 0.25, 1, 1), EffectAbility(EffectType.BLEED, 0.15)),
    "paladin": (EffectAbility(EffectType.STUN, 0.2), EffectAbility(EffectType.BURN, 0.1)),
}


@dataclass
class EffectApplication:
    target_id: str
    effect: EffectType
    stacks: int
    duration: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "targetId": self.target_id,
            "effect": self.effect.value,
            "stacks": self.stacks,
            "duration": self.duration,
            "message": self.message,
        }


@dataclass
class TickResult:
    new_hp: int
    total_damage: int = 0
    results: List[Dict[str, Any]] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "newHp": self.new_hp,
            "totalDamage": self.total_damage,
            "results": self.results,
            "messages": self.messages,
        }


def apply_effect(
    target: Combatant,
    effect_type: EffectType,
    source_id: str = "",
    turn: int = 0,
    bonus_stacks: int = 0,
    bonus_duration: int = 0,
) -> Optional[StatusEffectInstance]:
    """Insert or refresh an effect on ``target``.

    Returns the live instance, or None when the effect was already at its
    stack cap with nothing left to refresh.
    """
    cfg = EFFECT_CONFIG[effect_type]
    duration = min(cfg.max_duration, cfg.base_duration + bonus_duration)
    existing = target.find_effect(effect_type)
    if cfg.exclusive:
        target.effects = [e for e in target.effects if e.type != effect_type]
        inst = StatusEffectInstance(effect_type, duration, 1, source_id, turn)
        target.effects.append(inst)
        return inst
    if existing is not None:
        new_stacks = min(cfg.max_stacks, existing.stacks + 1 + bonus_stacks)
        new_duration = min(cfg.max_duration, max(existing.duration, duration))
        if new_stacks == existing.stacks and new_duration == existing.duration:
            return None
        existing.stacks = new_stacks
        existing.duration = new_duration
        existing.source_id = source_id
        existing.applied_turn = turn
        return existing
    inst = StatusEffectInstance(effect_type, duration, min(cfg.max_stacks, 1 + bonus_stacks), source_id, turn)
    target.effects.append(inst)
    return inst


def _dot_tick(target: Combatant, effect: StatusEffectInstance) -> Tuple[int, List[str]]:
    cfg = EFFECT_CONFIG[effect.type]
    dmg = max(1, math.floor(target.max_hp * cfg.damage_per_stack * effect.stacks))
    target.hp = max(0, target.hp - dmg)
    stack_note = f" x{effect.stacks}" if effect.stacks > 1 else ""
    return dmg, [f"{target.name} suffers {dmg} {effect.type.value}{stack_note} damage ({target.hp})"]


EFFECT_TICK = {
    EffectType.POISON: _dot_tick,
    EffectType.BLEED: _dot_tick,
    EffectType.BURN: _dot_tick,
}


def tick(target: Combatant) -> TickResult:
    """End-of-turn processing: damage-over-time, then duration decay."""
    result = TickResult(new_hp=target.hp)
    for eff in list(target.effects):
        handler = EFFECT_TICK.get(eff.type)
        if handler is None:
            continue
        dmg, msgs = handler(target, eff)
        result.total_damage += dmg
        result.messages.extend(msgs)
        result.results.append(
            {"targetId": target.id, "effect": eff.type.value, "damage": dmg, "stacks": eff.stacks}
        )
    remaining = []
    for eff in target.effects:
        eff.duration -= 1
        if eff.duration > 0:
            remaining.append(eff)
        else:
            result.messages.append(f"{EFFECT_CONFIG[eff.type].label} on {target.name} wore off")
    target.effects = remaining
    result.new_hp = target.hp
    return result


def is_stunned(target: Combatant) -> bool:
    return any(e.type == EffectType.STUN and e.duration > 0 for e in target.effects)


def get_modifier(target: Combatant, category: str) -> float:
    delta = 0.0
    for eff in target.effects:
        cfg = EFFECT_CONFIG[eff.type]
        if cfg.modifier == category:
            delta += cfg.modifier_per_stack * eff.stacks
    return max(MODIFIER_FLOORS.get(category, 0.0), 1.0 + delta)


def get_attack_modifier(target: Combatant) -> float:
    return get_modifier(target, "attack")


def get_speed_modifier(target: Combatant) -> float:
    return get_modifier(target, "speed")


def get_incoming_damage_modifier(target: Combatant) -> float:
    return get_modifier(target, "incoming")


def effect_chance(ability: EffectAbility, target_defense: int, was_critical: bool) -> float:
    cfg = EFFECT_CONFIG[ability.effect]
    resist = min(DEFENSE_RESIST_CAP, target_defense * DEFENSE_RESIST_PER_POINT)
    chance = cfg.base_chance + ability.bonus_chance - resist
    if was_critical:
        chance += CRIT_EFFECT_BONUS
    return max(MIN_EFFECT_CHANCE, chance)


def roll_attack_effects(
    ability_pool: Sequence[EffectAbility],
    target: Combatant,
    source_id: str,
    turn: int,
    target_defense: int,
    was_critical: bool,
    rng,
) -> List[EffectApplication]:
    """Roll each on-hit ability in declared order; apply the ones that land."""
    applied: List[EffectApplication] = []
    for ability in ability_pool:
        chance = effect_chance(ability, target_defense, was_critical)
        if rng.random() >= chance:
            continue
        inst = apply_effect(target, ability.effect, source_id, turn, ability.bonus_stacks, ability.bonus_duration)
        if inst is None:
            continue
        label = EFFECT_CONFIG[ability.effect].label
        stack_note = f" (x{inst.stacks})" if inst.stacks > 1 else ""
        applied.append(
            EffectApplication(
                target_id=target.id,
                effect=ability.effect,
                stacks=inst.stacks,
                duration=inst.duration,
                message=f"{target.name} is afflicted with {label}{stack_note}",
            )
        )
    return applied


__all__ = [
    "EFFECT_CONFIG",
    "ENEMY_EFFECT_ABILITIES",
    "PLAYER_EFFECT_ABILITIES",
    "EffectAbility",
    "EffectApplication",
    "TickResult",
    "apply_effect",
    "tick",
    "is_stunned",
    "get_attack_modifier",
    "get_speed_modifier",
    "get_incoming_damage_modifier",
    "roll_attack_effects",
]
