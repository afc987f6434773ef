"""Loot: rarity ladder, affixes, uniques, sets, materials and drop rolling."""

from .generator import (
    LootContext,
    LootDrop,
    generate_loot,
    generate_loot_from_table,
    roll_affixes,
    roll_rarity,
)  # noqa: F401
from .materials import MATERIALS, get_material_drop_chance, get_materials_for_floor  # noqa: F401
from .sets import calculate_set_bonuses, format_item_tooltip, get_total_item_stats  # noqa: F401
from .tables import ENEMY_LOOT_TABLES, RARITY_ORDER, Rarity  # noqa: F401

__all__ = [
    "LootContext",
    "LootDrop",
    "generate_loot",
    "generate_loot_from_table",
    "roll_affixes",
    "roll_rarity",
    "MATERIALS",
    "get_material_drop_chance",
    "get_materials_for_floor",
    "calculate_set_bonuses",
    "format_item_tooltip",
    "get_total_item_stats",
    "ENEMY_LOOT_TABLES",
    "RARITY_ORDER",
    "Rarity",
]
