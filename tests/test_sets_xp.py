from delve.loot.sets import calculate_set_bonuses, format_item_stats, format_item_tooltip, get_total_item_stats
from delve.models.xp import calculate_level_up, xp_for_next_level


def _piece(base_id, **stats):
    return {"id": f"itm-{base_id}", "baseId": base_id, "name": base_id, "stats": stats}


def test_two_piece_bonus_active():
    active = calculate_set_bonuses([_piece("dragonslayer_blade"), _piece("dragonslayer_plate")])
    assert len(active) == 1
    assert active[0]["setId"] == "dragonslayer"
    assert active[0]["pieces"] == 2
    assert [t["piecesRequired"] for t in active[0]["bonuses"]] == [2]


def test_duplicate_piece_counts_once():
    assert calculate_set_bonuses([_piece("shadow_fang"), _piece("shadow_fang")]) == []


def test_full_set_reports_every_tier():
    items = [_piece("arcane_staff"), _piece("arcane_robe"), _piece("eye_of_eternity")]
    (active,) = calculate_set_bonuses(items)
    assert [t["piecesRequired"] for t in active["bonuses"]] == [2, 3]


def test_total_stats_include_set_bonus():
    items = [_piece("dragonslayer_blade", attack=30), _piece("dragonslayer_plate", defense=25)]
    totals = get_total_item_stats(items)
    assert totals["attack"] == 40
    assert totals["defense"] == 35
    assert totals["magicFind"] == 0


def test_format_item_stats_ordering_and_signs():
    assert format_item_stats({"critChance": 3, "attack": 5, "hp": -2}) == ["+5 ATK", "-2 HP", "+3% Crit"]


def test_tooltip_lines():
    text = format_item_tooltip(
        {"name": "Keen Short Sword", "rarity": "uncommon", "type": "weapon", "stats": {"attack": 8}, "requiredLevel": 2}
    )
    lines = text.split("\n")
    assert lines[0] == "Keen Short Sword"
    assert lines[1] == "Uncommon weapon"
    assert "+8 ATK" in lines
    assert lines[-1] == "Requires level 2"


def test_xp_curve():
    assert xp_for_next_level(1) == 100
    # 100 * 1.15 is just under 115 in binary floating point
    assert xp_for_next_level(2) == 114
    assert xp_for_next_level(3) == 132
    assert xp_for_next_level(0) == 100


def test_single_level_up_carries_leftover():
    assert calculate_level_up(1, 90, 20) == {"newLevel": 2, "newXp": 10, "levelsGained": 1}


def test_multi_level_up():
    assert calculate_level_up(1, 0, 220) == {"newLevel": 3, "newXp": 6, "levelsGained": 2}


def test_no_level_up():
    assert calculate_level_up(4, 10, 5) == {"newLevel": 4, "newXp": 15, "levelsGained": 0}
