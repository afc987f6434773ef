"""Static loot data: rarity ladder, affix pools, base items, uniques, sets and drop tables.

Everything here is immutable configuration read by ``delve.loot.generator``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    @property
    def rank(self) -> int:
        return RARITY_ORDER.index(self)


RARITY_ORDER = [Rarity.COMMON, Rarity.UNCOMMON, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY, Rarity.MYTHIC]

# Rarity weight configuration (higher = more common)
RARITY_WEIGHTS = {
    Rarity.COMMON: 5500,
    Rarity.UNCOMMON: 2500,
    Rarity.RARE: 1200,
    Rarity.EPIC: 550,
    Rarity.LEGENDARY: 200,
    Rarity.MYTHIC: 50,
}

MAX_AFFIXES = {
    Rarity.COMMON: 0,
    Rarity.UNCOMMON: 1,
    Rarity.RARE: 2,
    Rarity.EPIC: 3,
    Rarity.LEGENDARY: 4,
    Rarity.MYTHIC: 6,
}

RARITY_STAT_MULT = {
    Rarity.COMMON: 1.0,
    Rarity.UNCOMMON: 1.2,
    Rarity.RARE: 1.5,
    Rarity.EPIC: 1.9,
    Rarity.LEGENDARY: 2.5,
    Rarity.MYTHIC: 3.5,
}

RARITY_VALUE_MULT = {
    Rarity.COMMON: 1,
    Rarity.UNCOMMON: 2,
    Rarity.RARE: 5,
    Rarity.EPIC: 12,
    Rarity.LEGENDARY: 30,
    Rarity.MYTHIC: 100,
}

STAT_KEYS = (
    "attack",
    "defense",
    "speed",
    "accuracy",
    "evasion",
    "hp",
    "critChance",
    "critDamage",
    "lifeSteal",
    "thorns",
    "magicFind",
)


@dataclass(frozen=True)
class Affix:
    id: str
    name: str
    slot: str  # prefix | suffix
    tier: int
    rarity: Rarity
    bonuses: Mapping[str, int]
    description: str = ""
    damage_type: Optional[str] = None
    visual_effect: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "name": self.name,
            "slot": self.slot,
            "tier": self.tier,
            "rarity": self.rarity.value,
            "bonuses": dict(self.bonuses),
            "description": self.description,
        }
        if self.damage_type:
            d["damageType"] = self.damage_type
        if self.visual_effect:
            d["visualEffect"] = self.visual_effect
        return d


def _prefix(id, name, tier, rarity, bonuses, description, damage_type=None, visual=None):
    return Affix(id, name, "prefix", tier, Rarity(rarity), bonuses, description, damage_type, visual)


def _suffix(id, name, tier, rarity, bonuses, description):
    return Affix(id, name, "suffix", tier, Rarity(rarity), bonuses, description)


PREFIX_POOL: Tuple[Affix, ...] = (
    _prefix("sturdy", "Sturdy", 1, "common", {"defense": 3}, "Slightly reinforced"),
    _prefix("keen", "Keen", 1, "common", {"attack": 3}, "Sharpened edge"),
    _prefix("quick", "Quick", 1, "common", {"speed": 2}, "Light and agile"),
    _prefix("tough", "Tough", 1, "common", {"hp": 15}, "Durable construction"),
    _prefix("mighty", "Mighty", 2, "uncommon", {"attack": 6, "critChance": 2}, "Empowered with force"),
    _prefix("reinforced", "Reinforced", 2, "uncommon", {"defense": 6, "hp": 10}, "Extra protective layers"),
    _prefix("swift", "Swift", 2, "uncommon", {"speed": 5, "accuracy": 3}, "Fast and precise"),
    _prefix("flaming", "Flaming", 2, "uncommon", {"attack": 8}, "Wreathed in flames", "fire", "fire"),
    _prefix("frozen", "Frozen", 2, "uncommon", {"defense": 8, "speed": -1}, "Coated in frost", "ice", "ice"),
    _prefix(
        "thundering",
        "Thundering",
        3,
        "rare",
        {"attack": 10, "speed": 8, "critChance": 5},
        "Crackles with lightning",
        "lightning",
        "lightning",
    ),
    _prefix(
        "shadow", "Shadow", 3, "rare", {"evasion": 10, "accuracy": 5, "critDamage": 15}, "Shrouded in darkness", "shadow", "shadow"
    ),
    _prefix("vampiric", "Vampiric", 3, "rare", {"attack": 7, "lifeSteal": 5}, "Drains life force"),
    _prefix("thorned", "Thorned", 3, "rare", {"defense": 5, "thorns": 8}, "Reflects damage to attackers"),
    _prefix(
        "arcane",
        "Arcane",
        4,
        "epic",
        {"attack": 12, "defense": 8, "accuracy": 10, "critChance": 8},
        "Infused with pure magic",
        "arcane",
        "arcane",
    ),
    _prefix("draconic", "Draconic", 4, "epic", {"attack": 15, "defense": 10, "hp": 25}, "Forged in dragonfire", "fire", "fire"),
    _prefix(
        "abyssal", "Abyssal", 4, "epic", {"attack": 14, "evasion": 8, "lifeSteal": 8}, "From the depths of the abyss", "shadow", "shadow"
    ),
    _prefix(
        "divine", "Divine", 5, "legendary", {"attack": 20, "defense": 15, "speed": 10, "hp": 40}, "Blessed by the gods", "holy", "holy"
    ),
    _prefix(
        "primordial",
        "Primordial",
        5,
        "legendary",
        {"attack": 25, "critChance": 12, "critDamage": 30, "lifeSteal": 5},
        "Power from creation itself",
    ),
    _prefix(
        "cosmic",
        "Cosmic",
        5,
        "mythic",
        {"attack": 30, "defense": 20, "speed": 15, "accuracy": 15, "critChance": 15, "critDamage": 40},
        "Channeling stellar energy",
        None,
        "cosmic",
    ),
)

SUFFIX_POOL: Tuple[Affix, ...] = (
    _suffix("of_strength", "of Strength", 1, "common", {"attack": 3}, "Grants physical power"),
    _suffix("of_iron", "of Iron", 1, "common", {"defense": 3}, "Hard as iron"),
    _suffix("of_the_wind", "of the Wind", 1, "common", {"speed": 2}, "Light as the breeze"),
    _suffix("of_precision", "of Precision", 2, "uncommon", {"accuracy": 8, "critChance": 3}, "Deadly precision"),
    _suffix("of_haste", "of Haste", 2, "uncommon", {"speed": 6, "evasion": 3}, "Enhances agility"),
    _suffix("of_vitality", "of Vitality", 2, "uncommon", {"hp": 25, "defense": 2}, "Grants life force"),
    _suffix("of_evasion", "of Evasion", 2, "uncommon", {"evasion": 8}, "Grants dodge chance"),
    _suffix("of_the_warrior", "of the Warrior", 3, "rare", {"attack": 10, "defense": 5, "critDamage": 10}, "Empowers warriors"),
    _suffix("of_the_guardian", "of the Guardian", 3, "rare", {"defense": 12, "hp": 20, "thorns": 5}, "Steadfast protection"),
    _suffix("of_the_hunter", "of the Hunter", 3, "rare", {"accuracy": 10, "critChance": 8, "speed": 3}, "Predator instincts"),
    _suffix("of_fortune", "of Fortune", 3, "rare", {"magicFind": 15, "evasion": 5}, "Luck favors the bold"),
    _suffix("of_the_titan", "of the Titan", 4, "epic", {"attack": 15, "defense": 10, "hp": 30, "critDamage": 20}, "Titan-forged"),
    _suffix(
        "of_the_phantom", "of the Phantom", 4, "epic", {"evasion": 15, "speed": 8, "critChance": 10, "lifeSteal": 3}, "Ghostly agility"
    ),
    _suffix(
        "of_the_archmage", "of the Archmage", 4, "epic", {"accuracy": 15, "magicFind": 20, "critChance": 8}, "Supreme magical knowledge"
    ),
    _suffix(
        "of_infinity",
        "of Infinity",
        5,
        "legendary",
        {"attack": 15, "defense": 15, "accuracy": 10, "evasion": 10, "critChance": 10, "critDamage": 25},
        "Limitless power",
    ),
    _suffix("of_the_gods", "of the Gods", 5, "legendary", {"attack": 20, "defense": 20, "hp": 50, "magicFind": 25}, "Divinely empowered"),
    _suffix(
        "of_oblivion",
        "of Oblivion",
        5,
        "mythic",
        {"attack": 25, "critChance": 15, "critDamage": 50, "lifeSteal": 10, "magicFind": 30},
        "Annihilating force",
    ),
)

AFFIXES_BY_ID: Dict[str, Affix] = {a.id: a for a in PREFIX_POOL + SUFFIX_POOL}


@dataclass(frozen=True)
class BaseItem:
    id: str
    name: str
    type: str
    base_stats: Mapping[str, int]
    base_price: int
    required_level: int
    flavor_text: Optional[str] = None


def _bases(item_type: str, rows) -> Tuple[BaseItem, ...]:
    return tuple(BaseItem(r[0], r[1], item_type, r[2], r[3], r[4], r[5] if len(r) > 5 else None) for r in rows)


BASE_WEAPONS = _bases(
    "weapon",
    [
        ("iron_sword", "Iron Sword", {"attack": 5}, 80, 1),
        ("steel_blade", "Steel Blade", {"attack": 8, "accuracy": 2}, 150, 3),
        ("war_axe", "War Axe", {"attack": 12, "critDamage": 10}, 250, 5),
        ("battle_staff", "Battle Staff", {"attack": 7, "accuracy": 5, "speed": 3}, 200, 4),
        ("longbow", "Longbow", {"attack": 9, "accuracy": 8}, 220, 4),
        ("curved_dagger", "Curved Dagger", {"attack": 6, "speed": 5, "critChance": 5}, 180, 3),
        ("great_hammer", "Great Hammer", {"attack": 15, "speed": -3, "critDamage": 15}, 300, 6),
        ("runic_wand", "Runic Wand", {"attack": 10, "accuracy": 10, "critChance": 3}, 350, 7),
        ("obsidian_blade", "Obsidian Blade", {"attack": 18, "critChance": 5, "critDamage": 20}, 500, 9),
        ("void_scythe", "Void Scythe", {"attack": 22, "lifeSteal": 3, "critDamage": 25}, 700, 10),
    ],
)

BASE_ARMORS = _bases(
    "armor",
    [
        ("leather_vest", "Leather Vest", {"defense": 4, "speed": 1}, 60, 1),
        ("iron_mail", "Iron Mail", {"defense": 8}, 140, 3),
        ("steel_plate", "Steel Plate", {"defense": 12, "speed": -2}, 250, 5),
        ("chain_hauberk", "Chain Hauberk", {"defense": 10, "evasion": 3}, 200, 4),
        ("mage_robe", "Mage Robe", {"defense": 5, "speed": 3, "accuracy": 3}, 180, 4),
        ("scale_armor", "Scale Armor", {"defense": 15, "hp": 15}, 350, 6),
        ("enchanted_plate", "Enchanted Plate", {"defense": 18, "hp": 20, "thorns": 3}, 500, 8),
        ("shadow_cloak", "Shadow Cloak", {"defense": 8, "evasion": 12, "speed": 5}, 450, 7),
        ("dragonscale_mail", "Dragonscale Mail", {"defense": 22, "hp": 30}, 650, 9),
        ("void_vestments", "Void Vestments", {"defense": 20, "evasion": 10, "lifeSteal": 2}, 700, 10),
    ],
)

BASE_ACCESSORIES = _bases(
    "accessory",
    [
        ("copper_ring", "Copper Ring", {"attack": 2}, 40, 1),
        ("silver_ring", "Silver Ring", {"speed": 3}, 80, 2),
        ("jade_amulet", "Jade Amulet", {"accuracy": 5, "evasion": 3}, 150, 3),
        ("gold_bracers", "Gold Bracers", {"defense": 4, "attack": 3}, 200, 4),
        ("ruby_pendant", "Ruby Pendant", {"attack": 6, "critChance": 3}, 280, 5),
        ("sapphire_crown", "Sapphire Crown", {"defense": 6, "hp": 20}, 320, 6),
        ("emerald_cloak", "Emerald Cloak", {"evasion": 8, "magicFind": 10}, 400, 7),
        ("obsidian_belt", "Obsidian Belt", {"defense": 5, "hp": 15, "thorns": 5}, 350, 6),
        ("phoenix_feather", "Phoenix Feather", {"speed": 8, "critChance": 5, "lifeSteal": 2}, 500, 8),
        ("void_gem", "Void Gem", {"attack": 10, "accuracy": 8, "critDamage": 15}, 600, 9),
    ],
)

BASE_CONSUMABLES = _bases(
    "consumable",
    [
        ("health_potion", "Health Potion", {"hp": 50}, 30, 1),
        ("greater_health_potion", "Greater Health Potion", {"hp": 120}, 80, 5),
        ("elixir_of_power", "Elixir of Power", {"attack": 10}, 100, 3, "Temporarily boosts attack"),
        ("elixir_of_iron", "Elixir of Iron", {"defense": 10}, 100, 3, "Temporarily boosts defense"),
        ("elixir_of_haste", "Elixir of Haste", {"speed": 10}, 100, 3, "Temporarily boosts speed"),
        ("scroll_of_fortune", "Scroll of Fortune", {"magicFind": 50}, 200, 5, "Increases loot quality for one encounter"),
    ],
)

BASE_ITEM_POOLS: Dict[str, Tuple[BaseItem, ...]] = {
    "weapon": BASE_WEAPONS,
    "armor": BASE_ARMORS,
    "accessory": BASE_ACCESSORIES,
    "consumable": BASE_CONSUMABLES,
}


@dataclass(frozen=True)
class UniqueItemDef:
    id: str
    name: str
    type: str
    fixed_stats: Mapping[str, int]
    fixed_affixes: Tuple[str, ...]
    flavor_text: str
    price: int
    required_level: int
    drop_weight: int
    min_floor: int
    damage_type: Optional[str] = None
    visual_effect: Optional[str] = None


UNIQUE_ITEMS: Tuple[UniqueItemDef, ...] = (
    UniqueItemDef(
        "excalibur", "Excalibur", "weapon",
        {"attack": 40, "accuracy": 15, "critChance": 10, "critDamage": 30, "hp": 25}, ("divine",),
        "The blade that chose its wielder, forged in the light of a dying star.", 10000, 10, 5, 8, "holy", "holy",
    ),
    UniqueItemDef(
        "frostmourne", "Frostmourne", "weapon",
        {"attack": 35, "lifeSteal": 10, "critChance": 8, "speed": -2}, ("frozen",),
        "Whomever wields this blade shall command the dead.", 9000, 9, 5, 7, "ice", "ice",
    ),
    UniqueItemDef(
        "thunderfury", "Thunderfury, Blessed Blade of the Windseeker", "weapon",
        {"attack": 30, "speed": 12, "accuracy": 10, "critChance": 12}, ("thundering",),
        "Did someone say [Thunderfury]?", 9500, 9, 4, 8, "lightning", "lightning",
    ),
    UniqueItemDef(
        "aegis_of_the_immortal", "Aegis of the Immortal", "armor",
        {"defense": 45, "hp": 60, "thorns": 10, "lifeSteal": 3}, ("divine",),
        "An impenetrable shield said to have turned aside the wrath of gods.", 12000, 10, 4, 9, "holy", "holy",
    ),
    UniqueItemDef(
        "shadow_mantle", "Shadow Mantle", "armor",
        {"defense": 20, "evasion": 25, "speed": 10, "critChance": 8}, ("shadow",),
        "Woven from the fabric of midnight itself.", 8000, 8, 6, 6, "shadow", "shadow",
    ),
    UniqueItemDef(
        "eye_of_eternity", "Eye of Eternity", "accessory",
        {"attack": 15, "defense": 10, "accuracy": 15, "magicFind": 40, "critChance": 8}, ("arcane",),
        "Gazing into its depths reveals every timeline at once.", 15000, 10, 3, 9, "arcane", "arcane",
    ),
    UniqueItemDef(
        "ring_of_the_leech_king", "Ring of the Leech King", "accessory",
        {"attack": 12, "lifeSteal": 15, "critChance": 5, "hp": 30}, ("vampiric",),
        "Its previous owner never truly died.", 7000, 7, 6, 5, "shadow", "shadow",
    ),
)

# Set pieces drop through the same named-item path as uniques
SET_PIECE_DEFS: Tuple[UniqueItemDef, ...] = (
    UniqueItemDef(
        "dragonslayer_blade", "Dragonslayer's Blade", "weapon", {"attack": 28, "critChance": 8, "critDamage": 20},
        ("draconic",), "Bathed in the blood of a hundred dragons.", 6000, 8, 8, 7, "fire", "fire",
    ),
    UniqueItemDef(
        "dragonslayer_plate", "Dragonslayer's Plate", "armor", {"defense": 30, "hp": 40, "thorns": 5},
        ("draconic",), "Forged from dragon bones and tempered in flame.", 6000, 8, 8, 7, "fire", "fire",
    ),
    UniqueItemDef(
        "dragonslayer_helm", "Dragonslayer's Helm", "accessory", {"defense": 12, "attack": 8, "hp": 25, "critDamage": 15},
        ("draconic",), "The visage of the beast, claimed as a trophy.", 5000, 8, 8, 7, "fire", "fire",
    ),
    UniqueItemDef(
        "shadow_fang", "Shadow Fang", "weapon", {"attack": 20, "speed": 10, "critChance": 12, "lifeSteal": 3},
        ("shadow",), "It strikes before you see it.", 5500, 7, 8, 6, "shadow", "shadow",
    ),
    UniqueItemDef(
        "shadow_band", "Shadow Band", "accessory", {"evasion": 12, "speed": 6, "critChance": 8, "magicFind": 10},
        ("shadow",), "Slip between the cracks of reality.", 4500, 7, 8, 6, "shadow", "shadow",
    ),
    UniqueItemDef(
        "arcane_staff", "Staff of the Archmage", "weapon", {"attack": 22, "accuracy": 15, "critChance": 6, "magicFind": 15},
        ("arcane",), "Knowledge is the ultimate weapon.", 5500, 8, 8, 7, "arcane", "arcane",
    ),
    UniqueItemDef(
        "arcane_robe", "Robe of the Archmage", "armor", {"defense": 15, "accuracy": 12, "hp": 25, "magicFind": 20},
        ("arcane",), "Woven with threads of pure mana.", 5500, 8, 8, 7, "arcane", "arcane",
    ),
)

ALL_UNIQUES: Tuple[UniqueItemDef, ...] = UNIQUE_ITEMS + SET_PIECE_DEFS


@dataclass(frozen=True)
class SetBonus:
    pieces_required: int
    bonuses: Mapping[str, int]
    description: str


@dataclass(frozen=True)
class ItemSet:
    id: str
    name: str
    pieces: Tuple[str, ...]
    set_bonuses: Tuple[SetBonus, ...]


ITEM_SETS: Tuple[ItemSet, ...] = (
    ItemSet(
        "dragonslayer",
        "Dragonslayer's Regalia",
        ("dragonslayer_blade", "dragonslayer_plate", "dragonslayer_helm"),
        (
            SetBonus(2, {"attack": 10, "defense": 10}, "+10 ATK, +10 DEF"),
            SetBonus(3, {"critChance": 15, "critDamage": 30, "hp": 40}, "+15% Crit, +30% Crit DMG, +40 HP"),
        ),
    ),
    ItemSet(
        "shadow_assassin",
        "Shadow Assassin's Garb",
        ("shadow_fang", "shadow_mantle", "shadow_band"),
        (
            SetBonus(2, {"evasion": 15, "speed": 8}, "+15 EVA, +8 SPD"),
            SetBonus(3, {"critChance": 20, "lifeSteal": 8, "magicFind": 15}, "+20% Crit, +8% Lifesteal, +15% MF"),
        ),
    ),
    ItemSet(
        "arcane_scholar",
        "Arcane Scholar's Vestments",
        ("arcane_staff", "arcane_robe", "eye_of_eternity"),
        (
            SetBonus(2, {"accuracy": 15, "magicFind": 20}, "+15 ACC, +20% MF"),
            SetBonus(3, {"attack": 20, "critDamage": 40, "hp": 30}, "+20 ATK, +40% Crit DMG, +30 HP"),
        ),
    ),
)


def set_for_piece(piece_id: str) -> Optional[ItemSet]:
    for item_set in ITEM_SETS:
        if piece_id in item_set.pieces:
            return item_set
    return None


@dataclass(frozen=True)
class LootTableEntry:
    weight: int
    item_pool: str
    rarity_override: Optional[Rarity] = None
    min_affixes: Optional[int] = None
    max_affixes: Optional[int] = None
    guaranteed_affix: Optional[str] = None


@dataclass(frozen=True)
class LootTable:
    id: str
    name: str
    entries: Tuple[LootTableEntry, ...]
    gold_range: Tuple[float, float]
    xp_range: Tuple[float, float]
    guaranteed_drops: int = 0
    bonus_drop_chance: float = 0.0


def _e(weight, pool, min_affixes=None, max_affixes=None):
    return LootTableEntry(weight, pool, min_affixes=min_affixes, max_affixes=max_affixes)


ENEMY_LOOT_TABLES: Dict[str, LootTable] = {
    "goblin": LootTable(
        "goblin", "Goblin Loot",
        (_e(60, "weapon", None, 1), _e(30, "consumable", None, 0), _e(10, "accessory", None, 1)),
        (30, 80), (60, 120), bonus_drop_chance=0.1,
    ),
    "skeleton": LootTable(
        "skeleton", "Skeleton Loot",
        (_e(50, "weapon", None, 1), _e(40, "armor", None, 1), _e(10, "accessory", None, 1)),
        (50, 100), (100, 180), bonus_drop_chance=0.15,
    ),
    "orc": LootTable(
        "orc", "Orc Loot",
        (_e(45, "weapon", None, 2), _e(35, "armor", None, 2), _e(15, "consumable", None, 0), _e(5, "accessory", None, 1)),
        (80, 150), (180, 300), bonus_drop_chance=0.2,
    ),
    "wraith": LootTable(
        "wraith", "Wraith Loot",
        (_e(30, "weapon", None, 2), _e(20, "armor", None, 2), _e(30, "accessory", None, 2), _e(20, "consumable", None, 0)),
        (100, 200), (300, 500), bonus_drop_chance=0.25,
    ),
    "boss_skeleton": LootTable(
        "boss_skeleton", "Skeletal Lord Loot",
        (_e(35, "weapon", 1, 3), _e(35, "armor", 1, 3), _e(20, "accessory", 1, 2), _e(10, "consumable", None, 0)),
        (300, 600), (800, 1200), guaranteed_drops=2, bonus_drop_chance=0.4,
    ),
    "boss_dragon": LootTable(
        "boss_dragon", "Ancient Dragon Loot",
        (_e(30, "weapon", 2, 4), _e(30, "armor", 2, 4), _e(25, "accessory", 1, 3), _e(15, "consumable", None, 0)),
        (700, 1200), (2000, 3000), guaranteed_drops=3, bonus_drop_chance=0.5,
    ),
    "boss_lich": LootTable(
        "boss_lich", "Lich King Loot",
        (_e(25, "weapon", 2, 4), _e(25, "armor", 2, 4), _e(30, "accessory", 2, 3), _e(20, "consumable", None, 0)),
        (600, 1000), (1600, 2400), guaranteed_drops=3, bonus_drop_chance=0.5,
    ),
}

GENERIC_ENTRIES = (_e(40, "weapon", None, 2), _e(30, "armor", None, 2), _e(20, "accessory", None, 1), _e(10, "consumable", None, 0))


@dataclass(frozen=True)
class ZoneLootModifier:
    rarity_boost: float
    bonus_materials: Tuple[str, ...] = field(default_factory=tuple)
    bonus_drop_chance: float = 0.0


ZONE_LOOT_MODIFIERS: Dict[str, ZoneLootModifier] = {
    "boss_chamber": ZoneLootModifier(1.5, ("adamantite_shard", "dragon_scale"), 0.3),
    "treasure_vault": ZoneLootModifier(2.0, ("diamond_core", "arcane_essence"), 0.5),
    "cursed_hall": ZoneLootModifier(1.4, ("shadow_essence", "void_shard"), 0.2),
    "dragon_lair": ZoneLootModifier(1.8, ("dragon_scale", "orichalcum"), 0.4),
    "arcane_sanctum": ZoneLootModifier(1.7, ("arcane_essence", "emerald_gem"), 0.35),
    "shadow_den": ZoneLootModifier(1.6, ("shadow_essence", "sapphire_gem"), 0.25),
}
