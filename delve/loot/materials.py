"""Crafting materials that drop alongside equipment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping


@dataclass(frozen=True)
class Material:
    id: str
    name: str
    type: str  # metal | essence | crystal | gem | catalyst
    rarity: str
    description: str
    drop_rate: float
    min_floor: int
    properties: Mapping[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "rarity": self.rarity,
            "description": self.description,
            "minFloor": self.min_floor,
            "properties": dict(self.properties),
        }


_ROWS = [
    ("iron_ore", "Iron Ore", "metal", "common", "Basic ore for weapon crafting", 0.3, 1, {"attack": 2, "defense": 1}),
    ("steel_ingot", "Steel Ingot", "metal", "uncommon", "Superior metal for quality gear", 0.15, 3, {"attack": 5, "defense": 3}),
    (
        "mithril_ore", "Mithril Ore", "metal", "rare", "Legendary metal with ethereal properties", 0.08, 6,
        {"attack": 10, "defense": 8, "speed": 2},
    ),
    (
        "adamantite_shard", "Adamantite Shard", "metal", "epic", "Unbreakable metal from the deep earth", 0.04, 8,
        {"attack": 15, "defense": 15, "accuracy": 5},
    ),
    (
        "orichalcum", "Orichalcum", "metal", "legendary", "Divine metal that channels cosmic energy", 0.01, 10,
        {"attack": 25, "defense": 20, "speed": 5, "accuracy": 10},
    ),
    ("fire_essence", "Fire Essence", "essence", "uncommon", "Captured flame for enchantments", 0.1, 2, {"attack": 3}),
    ("ice_essence", "Ice Essence", "essence", "uncommon", "Frozen magic for defensive enchantments", 0.1, 2, {"defense": 3}),
    (
        "lightning_essence", "Lightning Essence", "essence", "rare", "Crackling energy for speed enchantments", 0.08, 5,
        {"speed": 5, "attack": 5},
    ),
    (
        "shadow_essence", "Shadow Essence", "essence", "epic", "Darkness embodied, grants evasion", 0.05, 7,
        {"evasion": 10, "accuracy": 3},
    ),
    (
        "arcane_essence", "Arcane Essence", "essence", "legendary", "Pure magic that transcends elements", 0.02, 9,
        {"attack": 10, "defense": 10, "accuracy": 10},
    ),
    ("quartz_crystal", "Quartz Crystal", "crystal", "common", "Basic crystal for reinforcement", 0.25, 1, {"defense": 2}),
    (
        "amethyst_crystal", "Amethyst Crystal", "crystal", "uncommon", "Purple crystal enhancing magical power", 0.12, 4,
        {"attack": 4, "accuracy": 2},
    ),
    ("sapphire_gem", "Sapphire Gem", "crystal", "rare", "Blue gem granting water resistance", 0.06, 5, {"defense": 8, "speed": 2}),
    ("emerald_gem", "Emerald Gem", "crystal", "epic", "Green gem of vitality and growth", 0.03, 7, {"defense": 12, "accuracy": 5}),
    ("diamond_core", "Diamond Core", "crystal", "legendary", "Hardest substance, ultimate defense", 0.01, 10, {"defense": 25, "attack": 10}),
    ("dragon_scale", "Dragon Scale", "gem", "epic", "Shed scale from an ancient dragon", 0.02, 9, {"defense": 15, "attack": 10}),
    ("void_shard", "Void Shard", "catalyst", "legendary", "Fragment of the void itself", 0.005, 10, {"attack": 20, "evasion": 15}),
]

MATERIALS: Dict[str, Material] = {row[0]: Material(*row) for row in _ROWS}


def get_materials_for_floor(floor: int) -> List[Material]:
    return [m for m in MATERIALS.values() if m.min_floor <= floor]


def get_material_drop_chance(material_id: str, floor: int) -> float:
    """Drop chance grows 5% per floor past the unlock floor, capped at 80%."""
    material = MATERIALS.get(material_id)
    if material is None or material.min_floor > floor:
        return 0.0
    floor_bonus = 1 + (floor - material.min_floor) * 0.05
    return min(0.8, material.drop_rate * floor_bonus)


__all__ = ["Material", "MATERIALS", "get_materials_for_floor", "get_material_drop_chance"]
