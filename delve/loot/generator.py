"""Loot generation utilities.

Rolls gold, xp, equipment (rarity + affixes), named uniques and crafting
materials for a defeated enemy. Every function takes an explicit ``rng``
(anything with ``random()``), so a drop replays identically from its seed.

Pipeline for one table roll:
1. gold / xp inside the table range, scaled by difficulty and depth
2. guaranteed drops (each tries the unique path first)
3. one depth/difficulty-scaled base drop roll, one table bonus roll
4. one material roll plus an optional zone bonus material
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from delve.dungeon.config import DIFFICULTY_MULTIPLIERS, Difficulty
from delve.services.weighted import choice, weighted_index, weighted_select

from .materials import get_materials_for_floor, MATERIALS
from .tables import (
    AFFIXES_BY_ID,
    ALL_UNIQUES,
    BASE_ITEM_POOLS,
    ENEMY_LOOT_TABLES,
    GENERIC_ENTRIES,
    MAX_AFFIXES,
    PREFIX_POOL,
    RARITY_ORDER,
    RARITY_STAT_MULT,
    RARITY_VALUE_MULT,
    RARITY_WEIGHTS,
    SUFFIX_POOL,
    ZONE_LOOT_MODIFIERS,
    Affix,
    BaseItem,
    LootTable,
    LootTableEntry,
    Rarity,
    set_for_piece,
)

DEPTH_LOOT_GROWTH = 1.12
UNIQUE_BASE_CHANCE = 0.02
UNIQUE_BOSS_CHANCE = 0.08
MATERIAL_DROP_CHANCE = 0.5


@dataclass
class LootContext:
    difficulty: Difficulty = Difficulty.NORMAL
    depth: int = 1
    player_level: int = 1
    magic_find: float = 0.0
    rarity_boost: float = 1.0
    zone_type: Optional[str] = None
    is_boss: bool = False

    @property
    def item_level(self) -> int:
        return self.depth + self.player_level


@dataclass
class LootDrop:
    id: str
    gold: int = 0
    xp: int = 0
    items: List[Dict[str, Any]] = field(default_factory=list)
    materials: List[Dict[str, Any]] = field(default_factory=list)

    def merge(self, other: "LootDrop") -> "LootDrop":
        self.gold += other.gold
        self.xp += other.xp
        self.items.extend(other.items)
        self.materials.extend(other.materials)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "gold": self.gold, "xp": self.xp, "items": self.items, "materials": self.materials}


def _rng_id(prefix: str, rng) -> str:
    return f"{prefix}-{int(rng.random() * 16**12):012x}"


def roll_rarity(rng, ctx: LootContext) -> Rarity:
    """Weighted draw over the rarity ladder.

    Magic find and the zone boost scale every tier above common, so mass
    shifts upward without ever removing common from the table.
    """
    boost = (1 + ctx.magic_find / 100) * ctx.rarity_boost
    weights = []
    for rarity in RARITY_ORDER:
        w = RARITY_WEIGHTS[rarity]
        if rarity != Rarity.COMMON:
            w = round(w * boost)
        weights.append(w)
    return RARITY_ORDER[weighted_index(weights, rng)]


def select_base_item(item_type: str, ctx: LootContext, rng) -> BaseItem:
    pool = BASE_ITEM_POOLS[item_type]
    chosen = weighted_select(
        pool,
        lambda t: 1 + max(0, t.required_level - 1) * (ctx.depth / 5),
        rng,
        predicate=lambda t: t.required_level <= ctx.player_level + 2,
    )
    return chosen or pool[0]


def max_affix_tier(item_level: int) -> int:
    return min(5, math.ceil(item_level / 2))


def roll_affixes(
    rarity: Rarity,
    item_level: int,
    rng,
    min_affixes: Optional[int] = None,
    max_affixes: Optional[int] = None,
    guaranteed_affix: Optional[str] = None,
) -> List[Affix]:
    rarity = Rarity(rarity)
    cap = MAX_AFFIXES[rarity]
    if max_affixes is not None:
        cap = min(max_affixes, cap)
    if cap <= 0:
        return []
    minimum = min_affixes if min_affixes is not None else (1 if rarity.rank >= 3 else 0)
    count = min(cap, max(minimum, int(rng.random() * (cap + 1))))
    if count <= 0:
        return []

    tier_cap = max_affix_tier(item_level)
    affixes: List[Affix] = []
    used = set()
    found = AFFIXES_BY_ID.get(guaranteed_affix) if guaranteed_affix else None
    # Same tier gate as rolled affixes
    if found is not None and found.tier <= tier_cap:
        affixes.append(found)
        used.add(found.id)

    rank = rarity.rank
    for i in range(len(affixes), count):
        pool = PREFIX_POOL if i % 2 == 0 else SUFFIX_POOL
        picked = weighted_select(
            pool,
            lambda a: 3 if a.tier == tier_cap else (2 if a.rarity.rank == rank else 1),
            rng,
            predicate=lambda a: a.tier <= tier_cap and a.id not in used and a.rarity.rank <= rank + 1,
        )
        # Exhausted pool for this slot: the item simply carries fewer affixes
        if picked is None:
            continue
        affixes.append(picked)
        used.add(picked.id)
    return affixes


def build_item(base: BaseItem, rarity: Rarity, affixes: List[Affix], item_level: int, rng) -> Dict[str, Any]:
    rarity = Rarity(rarity)
    mult = RARITY_STAT_MULT[rarity]
    stats: Dict[str, int] = {k: round(v * mult) for k, v in base.base_stats.items()}
    for affix in affixes:
        for key, val in affix.bonuses.items():
            stats[key] = stats.get(key, 0) + val

    prefixes = " ".join(a.name for a in affixes if a.slot == "prefix")
    suffixes = " ".join(a.name for a in affixes if a.slot == "suffix")
    name = " ".join(part for part in (prefixes, base.name, suffixes) if part)
    price = round(base.base_price * RARITY_VALUE_MULT[rarity] * (1 + len(affixes) * 0.3))

    visual = None
    for affix in sorted((a for a in affixes if a.visual_effect), key=lambda a: -a.tier):
        visual = affix
        break

    item = {
        "id": _rng_id("itm", rng),
        "baseId": base.id,
        "name": name,
        "type": base.type,
        "rarity": rarity.value,
        "itemLevel": item_level,
        "stats": stats,
        "affixes": [a.to_dict() for a in affixes],
        "price": price,
        "requiredLevel": base.required_level,
    }
    if visual is not None:
        if visual.damage_type:
            item["damageType"] = visual.damage_type
        item["visualEffect"] = visual.visual_effect
    if base.flavor_text:
        item["flavorText"] = base.flavor_text
    return item


def try_unique_item(ctx: LootContext, rng) -> Optional[Dict[str, Any]]:
    chance = (UNIQUE_BOSS_CHANCE if ctx.is_boss else UNIQUE_BASE_CHANCE) + ctx.magic_find / 1000
    if rng.random() > chance:
        return None
    chosen = weighted_select(ALL_UNIQUES, lambda u: u.drop_weight, rng, predicate=lambda u: u.min_floor <= ctx.depth)
    if chosen is None:
        return None
    affixes = [AFFIXES_BY_ID[a].to_dict() for a in chosen.fixed_affixes if a in AFFIXES_BY_ID]
    item = {
        "id": _rng_id("itm", rng),
        "baseId": chosen.id,
        "name": chosen.name,
        "type": chosen.type,
        "rarity": Rarity.LEGENDARY.value,
        "itemLevel": ctx.item_level,
        "stats": dict(chosen.fixed_stats),
        "affixes": affixes,
        "isUnique": True,
        "flavorText": chosen.flavor_text,
        "price": chosen.price,
        "requiredLevel": chosen.required_level,
        "soulbound": True,
    }
    if chosen.damage_type:
        item["damageType"] = chosen.damage_type
    if chosen.visual_effect:
        item["visualEffect"] = chosen.visual_effect
    item_set = set_for_piece(chosen.id)
    if item_set is not None:
        item["setId"] = item_set.id
    return item


def generate_single_item(entry: LootTableEntry, ctx: LootContext, rng) -> Dict[str, Any]:
    rarity = entry.rarity_override or roll_rarity(rng, ctx)
    base = select_base_item(entry.item_pool, ctx, rng)
    affixes = roll_affixes(rarity, ctx.item_level, rng, entry.min_affixes, entry.max_affixes, entry.guaranteed_affix)
    return build_item(base, rarity, affixes, ctx.item_level, rng)


def _roll_table_item(table: LootTable, ctx: LootContext, rng, allow_unique: bool = True) -> Optional[Dict[str, Any]]:
    if allow_unique:
        unique = try_unique_item(ctx, rng)
        if unique is not None:
            return unique
    entry = weighted_select(table.entries, lambda e: e.weight, rng)
    if entry is None:
        return None
    return generate_single_item(entry, ctx, rng)


def generate_loot_from_table(table: LootTable, ctx: LootContext, rng) -> LootDrop:
    diff_mult = DIFFICULTY_MULTIPLIERS.get(Difficulty(ctx.difficulty), 1.0)
    mult = diff_mult * DEPTH_LOOT_GROWTH ** (ctx.depth - 1)

    gold_lo, gold_hi = table.gold_range
    xp_lo, xp_hi = table.xp_range
    gold = round((gold_lo + rng.random() * (gold_hi - gold_lo)) * mult)
    xp = round((xp_lo + rng.random() * (xp_hi - xp_lo)) * mult)

    items: List[Dict[str, Any]] = []
    for _ in range(table.guaranteed_drops):
        item = _roll_table_item(table, ctx, rng)
        if item is not None:
            items.append(item)

    base_chance = 0.4 + (ctx.depth / 10) * 0.3 + (diff_mult - 1) * 0.2
    if rng.random() < base_chance:
        item = _roll_table_item(table, ctx, rng)
        if item is not None:
            items.append(item)

    if table.bonus_drop_chance and rng.random() < table.bonus_drop_chance:
        item = _roll_table_item(table, ctx, rng, allow_unique=False)
        if item is not None:
            items.append(item)

    materials: List[Dict[str, Any]] = []
    floor_materials = get_materials_for_floor(ctx.depth)
    if rng.random() < MATERIAL_DROP_CHANCE and floor_materials:
        material = choice(floor_materials, rng)
        materials.append({"materialId": material.id, "quantity": int(rng.random() * 3) + 1})

    zone_mod = ZONE_LOOT_MODIFIERS.get(ctx.zone_type) if ctx.zone_type else None
    if zone_mod is not None and rng.random() < zone_mod.bonus_drop_chance:
        mat_id = choice(zone_mod.bonus_materials, rng)
        if mat_id in MATERIALS:
            materials.append({"materialId": mat_id, "quantity": int(rng.random() * 2) + 1})

    return LootDrop(id=_rng_id("drop", rng), gold=gold, xp=xp, items=items, materials=materials)


def generic_table(gold: float, xp: float) -> LootTable:
    return LootTable(
        "generic",
        "Generic Loot",
        GENERIC_ENTRIES,
        (gold * 0.8, gold * 1.2),
        (xp * 0.8, xp * 1.2),
        bonus_drop_chance=0.15,
    )


def generate_loot(
    gold: float,
    xp: float,
    difficulty,
    depth: int,
    rng,
    enemy_type: Optional[str] = None,
    magic_find: float = 0,
    zone_type: Optional[str] = None,
    is_boss: bool = False,
    rarity_boost: Optional[float] = None,
    player_level: Optional[int] = None,
) -> LootDrop:
    """Roll a drop for ``enemy_type`` (or a generic +/-20% table around gold/xp)."""
    if rarity_boost is None:
        zone_mod = ZONE_LOOT_MODIFIERS.get(zone_type) if zone_type else None
        rarity_boost = zone_mod.rarity_boost if zone_mod else 1.0
    ctx = LootContext(
        difficulty=Difficulty(difficulty),
        depth=depth,
        player_level=player_level if player_level is not None else max(1, math.floor(depth * 1.2)),
        magic_find=magic_find or 0,
        rarity_boost=rarity_boost,
        zone_type=zone_type,
        is_boss=is_boss,
    )
    table = ENEMY_LOOT_TABLES.get(enemy_type) if enemy_type else None
    if table is None:
        table = generic_table(gold, xp)
    return generate_loot_from_table(table, ctx, rng)


__all__ = [
    "LootContext",
    "LootDrop",
    "roll_rarity",
    "select_base_item",
    "max_affix_tier",
    "roll_affixes",
    "build_item",
    "try_unique_item",
    "generate_single_item",
    "generate_loot_from_table",
    "generic_table",
    "generate_loot",
]
