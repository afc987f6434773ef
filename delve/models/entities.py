"""In-memory combat entities shared by the player and monsters.

These never touch the database; a DungeonSession owns them for the lifetime
of a run and serializes them into outbound payloads with ``to_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EffectType(str, Enum):
    POISON = "poison"
    STUN = "stun"
    BLEED = "bleed"
    BURN = "burn"
    DEFEND = "defend"
    WEAKNESS = "weakness"
    SLOW = "slow"


@dataclass
class StatusEffectInstance:
    type: EffectType
    duration: int
    stacks: int = 1
    source_id: str = ""
    applied_turn: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "duration": self.duration,
            "stacks": self.stacks,
            "sourceId": self.source_id,
            "appliedTurn": self.applied_turn,
        }


@dataclass
class Combatant:
    id: str
    name: str
    kind: str
    hp: int
    max_hp: int
    attack: int
    defense: int
    speed: int = 10
    level: int = 1
    is_boss: bool = False
    effects: List[StatusEffectInstance] = field(default_factory=list)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def hp_fraction(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.hp / self.max_hp

    def find_effect(self, effect_type: EffectType) -> Optional[StatusEffectInstance]:
        for eff in self.effects:
            if eff.type == effect_type:
                return eff
        return None

    def to_dict(self) -> Dict[str, Any]:
        # Local import keeps entities free of engine imports at module load
        from delve.services.status_effects import get_speed_modifier

        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "hp": self.hp,
            "maxHp": self.max_hp,
            "attack": self.attack,
            "defense": self.defense,
            "speed": int(self.speed * get_speed_modifier(self)),
            "level": self.level,
            "isBoss": self.is_boss,
            "effects": [e.to_dict() for e in self.effects],
        }


__all__ = ["EffectType", "StatusEffectInstance", "Combatant"]
