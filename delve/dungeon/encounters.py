"""Enemy templates, encounter composition and stat scaling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from delve.models.entities import Combatant
from delve.services.weighted import choice

MAX_ENCOUNTER_SIZE = 4


@dataclass(frozen=True)
class EnemyTemplate:
    type: str
    name: str
    base_level: int
    hp: int
    attack: int
    defense: int
    speed: int
    gold_drop: int
    xp_drop: int
    boss: bool = False


ENEMY_TEMPLATES: Dict[str, EnemyTemplate] = {
    "goblin": EnemyTemplate("goblin", "Goblin", 1, 25, 8, 3, 12, 50, 100),
    "orc": EnemyTemplate("orc", "Orc", 3, 45, 12, 6, 9, 100, 250),
    "skeleton": EnemyTemplate("skeleton", "Skeleton", 2, 35, 10, 4, 11, 75, 150),
    "wraith": EnemyTemplate("wraith", "Wraith", 5, 40, 14, 2, 15, 150, 400),
    "boss_skeleton": EnemyTemplate("boss_skeleton", "Skeletal Lord", 8, 100, 18, 8, 10, 500, 1000, boss=True),
    "boss_dragon": EnemyTemplate("boss_dragon", "Ancient Dragon", 10, 200, 25, 12, 12, 1000, 2500, boss=True),
    "boss_lich": EnemyTemplate("boss_lich", "Lich King", 10, 150, 22, 10, 14, 800, 2000, boss=True),
}

REGULAR_POOL = ["goblin", "skeleton", "orc", "wraith"]

DUNGEON_NAMES = [
    "Goblin Caverns",
    "Skeletal Tombs",
    "Orc Stronghold",
    "Phantom Depths",
    "Dragon's Lair",
    "Cursed Crypt",
    "Shadowy Abyss",
    "Hellfire Pit",
    "The Forbidden Tower",
    "God's Tomb",
]


def get_dungeon_name(depth: int) -> str:
    idx = min(max(depth, 1), len(DUNGEON_NAMES)) - 1
    return DUNGEON_NAMES[idx]


def is_boss_room(room_id: int, depth: int) -> bool:
    """Every fifth room from depth 3, and every room from depth 9, is a boss fight."""
    return (room_id % 5 == 4 and depth >= 3) or depth >= 9


def boss_for_depth(depth: int) -> str:
    if depth <= 5:
        return "boss_skeleton"
    if depth <= 8:
        return "boss_dragon"
    return "boss_lich"


def eligible_enemies(depth: int) -> List[str]:
    """Regular types whose base level is within one of the current depth."""
    return [t for t in REGULAR_POOL if ENEMY_TEMPLATES[t].base_level <= depth + 1]


def generate_encounter(room_id: int, difficulty, depth: int, player_level: int, rng) -> List[str]:
    if is_boss_room(room_id, depth):
        return [boss_for_depth(depth)]
    count = min(1 + depth // 2, MAX_ENCOUNTER_SIZE)
    pool = eligible_enemies(depth)
    return [choice(pool, rng) for _ in range(count)]


def scale_enemy_stats(template: EnemyTemplate, player_level: int) -> Dict[str, int]:
    scale = 1 + (player_level - template.base_level) * 0.1
    return {
        "hp": max(1, round(template.hp * scale)),
        "attack": max(0, round(template.attack * scale)),
        "defense": max(0, round(template.defense * scale)),
        "speed": template.speed,
    }


def create_enemy(enemy_type: str, player_level: int, enemy_id: str) -> Combatant:
    template = ENEMY_TEMPLATES[enemy_type]
    stats = scale_enemy_stats(template, player_level)
    return Combatant(
        id=enemy_id,
        name=template.name,
        kind=template.type,
        hp=stats["hp"],
        max_hp=stats["hp"],
        attack=stats["attack"],
        defense=stats["defense"],
        speed=stats["speed"],
        level=max(template.base_level, player_level),
        is_boss=template.boss,
    )


__all__ = [
    "EnemyTemplate",
    "ENEMY_TEMPLATES",
    "DUNGEON_NAMES",
    "get_dungeon_name",
    "is_boss_room",
    "boss_for_depth",
    "eligible_enemies",
    "generate_encounter",
    "scale_enemy_stats",
    "create_enemy",
]
