"""Set bonuses and stat aggregation over equipped items."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .tables import ITEM_SETS, STAT_KEYS

STAT_LABELS = {
    "attack": " ATK",
    "defense": " DEF",
    "speed": " SPD",
    "accuracy": " ACC",
    "evasion": " EVA",
    "hp": " HP",
    "critChance": "% Crit",
    "critDamage": "% Crit DMG",
    "lifeSteal": "% Lifesteal",
    "thorns": " Thorns",
    "magicFind": "% MF",
}


def _base_id(item: Dict[str, Any]) -> str:
    return item.get("baseId") or item.get("id", "")


def calculate_set_bonuses(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Active set bonuses for the equipped ``items``.

    A piece counts once however many copies are equipped. Each set reports
    every tier whose ``pieces_required`` is met.
    """
    equipped = {_base_id(i) for i in items}
    active = []
    for item_set in ITEM_SETS:
        count = sum(1 for piece in item_set.pieces if piece in equipped)
        if count == 0:
            continue
        tiers = [b for b in item_set.set_bonuses if count >= b.pieces_required]
        if not tiers:
            continue
        active.append(
            {
                "setId": item_set.id,
                "setName": item_set.name,
                "pieces": count,
                "total": len(item_set.pieces),
                "bonuses": [{"piecesRequired": b.pieces_required, "bonuses": dict(b.bonuses), "description": b.description} for b in tiers],
            }
        )
    return active


def get_total_item_stats(items: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    items = list(items)
    totals = {key: 0 for key in STAT_KEYS}
    for item in items:
        for key, val in (item.get("stats") or {}).items():
            totals[key] = totals.get(key, 0) + val
    for active in calculate_set_bonuses(items):
        for tier in active["bonuses"]:
            for key, val in tier["bonuses"].items():
                totals[key] = totals.get(key, 0) + val
    return totals


def format_item_stats(stats: Dict[str, int]) -> List[str]:
    lines = []
    for key in STAT_KEYS:
        val = stats.get(key)
        if not val:
            continue
        sign = "+" if val > 0 else ""
        lines.append(f"{sign}{val}{STAT_LABELS[key]}")
    return lines


def format_item_tooltip(item: Dict[str, Any]) -> str:
    lines = [item.get("name", "?"), f"{item.get('rarity', 'common').title()} {item.get('type', '')}".rstrip()]
    lines.extend(format_item_stats(item.get("stats") or {}))
    for affix in item.get("affixes") or []:
        if affix.get("description"):
            lines.append(f"  {affix['name']}: {affix['description']}")
    if item.get("flavorText"):
        lines.append(f'"{item["flavorText"]}"')
    if item.get("requiredLevel"):
        lines.append(f"Requires level {item['requiredLevel']}")
    return "\n".join(lines)


__all__ = ["calculate_set_bonuses", "get_total_item_stats", "format_item_stats", "format_item_tooltip"]
