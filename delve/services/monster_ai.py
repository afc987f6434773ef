"""Monster AI action selection.

Pure decision function: ``decide(profile, snapshot, rng)`` returns one of
attack / defend / ability / flee and never mutates its inputs. The caller
passes the draw source so a turn replays identically from its seed.

Non-boss order of evaluation:
1. Below a positive flee threshold -> flee.
2. Hurt (<50% hp) and facing a hit worth more than 20% of current hp ->
   maybe defend (rolled against defensiveness, skipped if already defending).
3. Roll ranged preference -> ability.
4. Roll defensiveness -> defend, otherwise attack.

Bosses replace steps 3-4 with four hp phases that trend from aggressive to
desperate, and never flee.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class AIBehavior(str, Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    RANGED = "ranged"
    SUPPORT = "support"
    BOSS = "boss"


class AIAction(str, Enum):
    ATTACK = "attack"
    DEFEND = "defend"
    ABILITY = "ability"
    FLEE = "flee"


@dataclass(frozen=True)
class EnemyAIProfile:
    behavior: AIBehavior
    aggressiveness: float
    defensiveness: float
    ranged_preference: float
    flee_threshold: float


@dataclass(frozen=True)
class BattleSnapshot:
    enemy_hp: int
    enemy_max_hp: int
    enemy_defense: int
    player_hp: int
    player_max_hp: int
    player_attack: int
    enemy_defended: bool = False
    turn: int = 0

    @property
    def hp_fraction(self) -> float:
        return self.enemy_hp / self.enemy_max_hp if self.enemy_max_hp > 0 else 0.0


AI_PROFILES: Dict[str, EnemyAIProfile] = {
    "goblin": EnemyAIProfile(AIBehavior.AGGRESSIVE, 0.7, 0.2, 0.3, 0.2),
    "skeleton": EnemyAIProfile(AIBehavior.AGGRESSIVE, 0.8, 0.3, 0.2, 0.0),
    "orc": EnemyAIProfile(AIBehavior.AGGRESSIVE, 0.9, 0.2, 0.1, 0.0),
    "wraith": EnemyAIProfile(AIBehavior.RANGED, 0.6, 0.5, 0.9, 0.3),
    "boss_skeleton": EnemyAIProfile(AIBehavior.BOSS, 1.0, 0.7, 0.4, 0.0),
    "boss_dragon": EnemyAIProfile(AIBehavior.BOSS, 1.0, 0.6, 0.8, 0.0),
    "boss_lich": EnemyAIProfile(AIBehavior.BOSS, 0.8, 0.9, 1.0, 0.0),
}

DEFAULT_PROFILE = EnemyAIProfile(AIBehavior.AGGRESSIVE, 0.7, 0.3, 0.2, 0.0)


def profile_for(enemy_type: str) -> EnemyAIProfile:
    return AI_PROFILES.get(enemy_type, DEFAULT_PROFILE)


def _boss_phase(hp_fraction: float, rng) -> AIAction:
    if hp_fraction > 0.75:
        return AIAction.ATTACK if rng.random() < 0.7 else AIAction.ABILITY
    roll = rng.random()
    if hp_fraction > 0.5:
        if roll < 0.3:
            return AIAction.DEFEND
        return AIAction.ABILITY if roll < 0.6 else AIAction.ATTACK
    if hp_fraction > 0.25:
        if roll < 0.4:
            return AIAction.DEFEND
        return AIAction.ABILITY if roll < 0.7 else AIAction.ATTACK
    # Desperate: all-in
    return AIAction.ABILITY if roll < 0.6 else AIAction.ATTACK


def decide(profile: EnemyAIProfile, snapshot: BattleSnapshot, rng) -> AIAction:
    hp_fraction = snapshot.hp_fraction
    is_boss = profile.behavior == AIBehavior.BOSS

    if not is_boss and profile.flee_threshold > 0 and hp_fraction < profile.flee_threshold:
        return AIAction.FLEE

    predicted = snapshot.player_attack - snapshot.enemy_defense + rng.random() * 10 - 5
    if hp_fraction < 0.5 and predicted > snapshot.enemy_hp * 0.2:
        if not snapshot.enemy_defended and profile.defensiveness > rng.random():
            return AIAction.DEFEND

    if is_boss:
        return _boss_phase(hp_fraction, rng)

    roll = rng.random()
    if profile.ranged_preference > rng.random():
        return AIAction.ABILITY
    if profile.defensiveness > roll:
        return AIAction.DEFEND
    return AIAction.ATTACK


__all__ = ["AIBehavior", "AIAction", "EnemyAIProfile", "BattleSnapshot", "AI_PROFILES", "profile_for", "decide"]
