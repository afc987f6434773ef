"""Branching paths into special zones (offered from depth 5)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from delve.services.rng import stream_for
from delve.services.weighted import choice

from .config import Difficulty, get_difficulty_for_floor, harder

BRANCHING_MIN_FLOOR = 5
THREE_PATH_FLOOR = 8
RARITY_BOOSTS = (1.3, 1.6, 2.0)


class ZoneType(str, Enum):
    BOSS_CHAMBER = "boss_chamber"
    TREASURE_VAULT = "treasure_vault"
    CURSED_HALL = "cursed_hall"
    DRAGON_LAIR = "dragon_lair"
    ARCANE_SANCTUM = "arcane_sanctum"
    SHADOW_DEN = "shadow_den"


ZONE_DESCRIPTIONS = {
    ZoneType.BOSS_CHAMBER: "Encounter a powerful boss with high rewards",
    ZoneType.TREASURE_VAULT: "Find rare materials and equipment",
    ZoneType.CURSED_HALL: "Face cursed enemies with unique drops",
    ZoneType.DRAGON_LAIR: "Battle dragon-type enemies for legendary gear",
    ZoneType.ARCANE_SANCTUM: "Discover magical essences and artifacts",
    ZoneType.SHADOW_DEN: "Shadows hold secrets and rare resources",
}


@dataclass(frozen=True)
class ZoneBonus:
    gold_mult: float = 1.0
    xp_mult: float = 1.0
    rarity_mult: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        return {"goldMult": self.gold_mult, "xpMult": self.xp_mult, "rarityMult": self.rarity_mult}


SPECIAL_ZONE_BONUSES = {
    ZoneType.BOSS_CHAMBER: ZoneBonus(1.5, 2.0, 1.5),
    ZoneType.TREASURE_VAULT: ZoneBonus(2.5, 1.5, 2.0),
    ZoneType.CURSED_HALL: ZoneBonus(1.6, 1.8, 1.4),
    ZoneType.DRAGON_LAIR: ZoneBonus(2.0, 2.2, 1.8),
    ZoneType.ARCANE_SANCTUM: ZoneBonus(1.7, 1.9, 1.7),
    ZoneType.SHADOW_DEN: ZoneBonus(1.8, 1.7, 1.6),
}


@dataclass(frozen=True)
class BranchingPath:
    path_id: str
    floor: int
    zone_type: ZoneType
    description: str
    difficulty: Difficulty
    rarity_boost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pathId": self.path_id,
            "floor": self.floor,
            "zoneType": self.zone_type.value,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "rarityBoost": self.rarity_boost,
        }


def get_special_zone_bonus(zone_type) -> ZoneBonus:
    return SPECIAL_ZONE_BONUSES[ZoneType(zone_type)]


def generate_branching_paths(floor: int, seed) -> List[BranchingPath]:
    """Alternative special-zone routes for ``floor``; reproducible from ``seed``."""
    if floor < BRANCHING_MIN_FLOOR:
        return []
    rng = stream_for(str(seed))
    count = 3 if floor >= THREE_PATH_FLOOR else 2
    zones = list(ZoneType)
    difficulty = harder(get_difficulty_for_floor(floor))
    paths = []
    for i in range(count):
        zone = choice(zones, rng)
        boost = choice(RARITY_BOOSTS, rng)
        paths.append(
            BranchingPath(
                path_id=f"path-{floor}-{i}",
                floor=floor,
                zone_type=zone,
                description=ZONE_DESCRIPTIONS[zone],
                difficulty=difficulty,
                rarity_boost=boost,
            )
        )
    return paths


__all__ = [
    "ZoneType",
    "ZoneBonus",
    "BranchingPath",
    "ZONE_DESCRIPTIONS",
    "SPECIAL_ZONE_BONUSES",
    "get_special_zone_bonus",
    "generate_branching_paths",
]
