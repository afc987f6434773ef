import pytest

from delve.dungeon.encounters import (
    DUNGEON_NAMES,
    ENEMY_TEMPLATES,
    MAX_ENCOUNTER_SIZE,
    boss_for_depth,
    create_enemy,
    eligible_enemies,
    generate_encounter,
    get_dungeon_name,
    is_boss_room,
    scale_enemy_stats,
)
from delve.dungeon.config import Difficulty
from delve.dungeon.paths import (
    RARITY_BOOSTS,
    ZoneType,
    generate_branching_paths,
    get_special_zone_bonus,
)
from delve.services.rng import stream_for


def test_boss_room_rule():
    assert not is_boss_room(4, 2)
    assert is_boss_room(4, 3)
    assert is_boss_room(9, 5)
    assert not is_boss_room(3, 5)
    assert is_boss_room(0, 9)


def test_boss_encounter_is_single_boss():
    assert generate_encounter(4, Difficulty.NORMAL, 5, 5, stream_for("x")) == ["boss_skeleton"]
    assert boss_for_depth(7) == "boss_dragon"
    assert boss_for_depth(10) == "boss_lich"


@pytest.mark.parametrize("depth", [1, 2, 4, 8])
def test_encounter_size_and_eligibility(depth):
    rng = stream_for(f"enc-{depth}")
    enemies = generate_encounter(1, Difficulty.EASY, depth, 1, rng)
    assert len(enemies) == min(1 + depth // 2, MAX_ENCOUNTER_SIZE)
    for kind in enemies:
        assert ENEMY_TEMPLATES[kind].base_level <= depth + 1
        assert not ENEMY_TEMPLATES[kind].boss


def test_depth_one_pool_excludes_orcs():
    assert set(eligible_enemies(1)) == {"goblin", "skeleton"}


def test_scaling_never_negative():
    stats = scale_enemy_stats(ENEMY_TEMPLATES["boss_dragon"], 1)
    # scale = 1 + (1 - 10) * 0.1 = 0.1
    assert stats["hp"] == 20
    assert stats["attack"] >= 0 and stats["defense"] >= 0
    tiny = scale_enemy_stats(ENEMY_TEMPLATES["boss_lich"], -5)
    assert tiny["hp"] == 1
    assert tiny["attack"] == 0


def test_create_enemy_fields():
    enemy = create_enemy("orc", 5, "e1-2-1-0")
    assert enemy.id == "e1-2-1-0"
    assert enemy.hp == enemy.max_hp == round(45 * 1.2)
    assert enemy.kind == "orc"
    assert enemy.level == 5


def test_dungeon_names_clamped():
    assert get_dungeon_name(1) == DUNGEON_NAMES[0]
    assert get_dungeon_name(50) == DUNGEON_NAMES[-1]


def test_no_paths_before_floor_five():
    assert generate_branching_paths(4, 123) == []


def test_path_counts_and_fields():
    two = generate_branching_paths(5, 99)
    three = generate_branching_paths(8, 99)
    assert len(two) == 2
    assert len(three) == 3
    for p in three:
        assert p.rarity_boost in RARITY_BOOSTS
        assert p.difficulty == Difficulty.NIGHTMARE
        assert p.floor == 8
    assert len({p.path_id for p in three}) == 3


def test_paths_reproducible_from_seed():
    assert generate_branching_paths(6, 4242) == generate_branching_paths(6, 4242)


def test_zone_bonus_lookup():
    bonus = get_special_zone_bonus("treasure_vault")
    assert bonus.gold_mult == 2.5
    assert bonus.to_dict()["rarityMult"] == 2.0
    assert get_special_zone_bonus(ZoneType.DRAGON_LAIR).xp_mult == 2.2
