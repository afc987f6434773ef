"""Combat utility helpers.

Damage model shared by the player and monsters:

  damage = max(1, floor(attack * attack_mod) - floor(defense * 0.5) + variance)

where ``variance = floor(rng * 7) - 3`` (an integer in -3..3) and
``attack_mod`` comes from the attacker's status effects (weakness). A critical
hit (12% player, 8% monster) multiplies the result by 1.5, floored. A
defending target then applies its incoming-damage modifier (defend: x0.6).

Draw order per strike: variance, crit, then one draw per on-hit ability in
the attacker's pool. Keep it stable; replays depend on it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from delve.models.entities import Combatant
from delve.services.status_effects import (
    EffectAbility,
    EffectApplication,
    get_attack_modifier,
    get_incoming_damage_modifier,
    roll_attack_effects,
)

PLAYER_CRIT_CHANCE = 0.12
ENEMY_CRIT_CHANCE = 0.08
CRIT_MULTIPLIER = 1.5
DEFENSE_FACTOR = 0.5


@dataclass
class Strike:
    attacker_id: str
    target_id: str
    damage: int
    critical: bool
    effects: List[EffectApplication] = field(default_factory=list)


def roll_damage(attack: int, attack_modifier: float, target_defense: int, crit_chance: float, rng) -> Tuple[int, bool]:
    base = math.floor(attack * attack_modifier)
    variance = math.floor(rng.random() * 7) - 3
    critical = rng.random() < crit_chance
    dmg = max(1, base - math.floor(target_defense * DEFENSE_FACTOR) + variance)
    if critical:
        dmg = math.floor(dmg * CRIT_MULTIPLIER)
    return dmg, critical


def strike(
    attacker: Combatant,
    target: Combatant,
    crit_chance: float,
    ability_pool: Sequence[EffectAbility],
    turn: int,
    rng,
) -> Strike:
    """Resolve one hit from ``attacker`` on ``target`` and roll on-hit effects."""
    dmg, critical = roll_damage(attacker.attack, get_attack_modifier(attacker), target.defense, crit_chance, rng)
    incoming = get_incoming_damage_modifier(target)
    if incoming != 1.0:
        dmg = math.floor(dmg * incoming)
    target.hp = max(0, target.hp - dmg)
    effects = roll_attack_effects(ability_pool, target, attacker.id, turn, target.defense, critical, rng)
    return Strike(attacker.id, target.id, dmg, critical, effects)


__all__ = ["PLAYER_CRIT_CHANCE", "ENEMY_CRIT_CHANCE", "Strike", "roll_damage", "strike"]
