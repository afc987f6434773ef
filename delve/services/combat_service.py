"""Turn resolution for a dungeon encounter.

``resolve_turn(session, action, target_id, rng)`` mutates the session's
player and enemy Combatants in place and returns a TurnOutcome describing
what happened. Step order within a turn:

1. Player phase: stunned players forfeit; ``attack`` hits one living enemy
   and rolls the class on-hit abilities; ``defend`` sets a one-turn defend.
2. Enemy phase: every enemy still alive acts once in list order through the
   monster AI (attack / ability hit, defend, flee = cower). Stunned enemies skip.
3. End of turn: damage-over-time ticks for the player, then every living
   enemy; dead enemies leave the encounter and are recorded as defeated.
4. Outcome: player at 0 hp -> lost; no enemies left -> won; else ongoing.

Every random draw comes from ``rng`` so a turn replays exactly from its seed.
Input errors raise DungeonError before anything is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from delve.logging_utils import get_logger
from delve.models.entities import Combatant, EffectType

from .combat_utils import ENEMY_CRIT_CHANCE, PLAYER_CRIT_CHANCE, strike
from .monster_ai import AIAction, BattleSnapshot, decide, profile_for
from .session import DungeonError, DungeonSession, SessionState
from .status_effects import (
    ENEMY_EFFECT_ABILITIES,
    PLAYER_EFFECT_ABILITIES,
    apply_effect,
    is_stunned,
    tick,
)

log = get_logger("combat")

PLAYER_ACTIONS = ("attack", "defend")
ONGOING, WON, LOST, FLED = "ongoing", "won", "lost", "fled"


@dataclass
class TurnOutcome:
    turn: int
    player_action: str
    outcome: str = ONGOING
    player_damage: int = 0
    player_critical: bool = False
    player_hp: int = 0
    player_max_hp: int = 0
    player_effects: List[Dict[str, Any]] = field(default_factory=list)
    enemies: List[Dict[str, Any]] = field(default_factory=list)
    enemy_actions: List[Dict[str, Any]] = field(default_factory=list)
    enemy_dot_results: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    defeated: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    effect_events: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerAction": self.player_action,
            "playerDamage": self.player_damage,
            "playerCritical": self.player_critical,
            "playerHp": self.player_hp,
            "playerMaxHp": self.player_max_hp,
            "playerEffects": self.player_effects,
            "enemies": self.enemies,
            "enemyActions": self.enemy_actions,
            "enemyDotResults": self.enemy_dot_results,
            "turnMessages": self.messages,
            "effectEvents": self.effect_events,
            "turnNumber": self.turn,
            "outcome": self.outcome,
        }


def _require_encounter(session: DungeonSession):
    if session.state != SessionState.IN_ENCOUNTER or not session.enemies:
        raise DungeonError("not_in_encounter", "No active encounter")


def _pick_target(session: DungeonSession, target_id: Optional[str]) -> Combatant:
    living = session.living_enemies
    if target_id is None:
        return living[0]
    for enemy in living:
        if enemy.id == target_id:
            return enemy
    raise DungeonError("invalid_target", f"No living enemy with id {target_id}", field="targetId")


def _player_phase(session: DungeonSession, action: str, target: Optional[Combatant], out: TurnOutcome, rng):
    player = session.player
    if is_stunned(player):
        out.player_action = "stunned"
        out.messages.append("You are stunned and cannot act!")
        out.effect_events.append({"type": "stun", "target": "player", "message": "Stunned! Turn skipped."})
        return
    if action == "defend":
        apply_effect(player, EffectType.DEFEND, "player", session.turn)
        out.messages.append("You brace for incoming attacks! (40% damage reduction)")
        return
    pool = PLAYER_EFFECT_ABILITIES.get(session.char_class) or PLAYER_EFFECT_ABILITIES["warrior"]
    hit = strike(player, target, PLAYER_CRIT_CHANCE, pool, session.turn, rng)
    out.player_damage = hit.damage
    out.player_critical = hit.critical
    if hit.critical:
        out.messages.append("Critical hit!")
    out.messages.append(f"You hit {target.name} for {hit.damage} damage ({target.hp})")
    for applied in hit.effects:
        out.messages.append(applied.message)
        out.effect_events.append({"type": applied.effect.value, "target": target.id, "message": applied.message})


def _enemy_phase(session: DungeonSession, out: TurnOutcome, rng):
    player = session.player
    for enemy in session.living_enemies:
        if is_stunned(enemy):
            out.enemy_actions.append(
                {"enemyId": enemy.id, "enemyName": enemy.name, "action": "stunned", "damage": 0, "effectsApplied": [], "stunned": True}
            )
            out.messages.append(f"{enemy.name} is stunned!")
            out.effect_events.append({"type": "stun", "target": enemy.id, "message": f"{enemy.name} stunned"})
            continue

        snapshot = BattleSnapshot(
            enemy_hp=enemy.hp,
            enemy_max_hp=enemy.max_hp,
            enemy_defense=enemy.defense,
            player_hp=player.hp,
            player_max_hp=player.max_hp,
            player_attack=player.attack,
            enemy_defended=enemy.find_effect(EffectType.DEFEND) is not None,
            turn=session.turn,
        )
        decision = decide(profile_for(enemy.kind), snapshot, rng)
        record = {
            "enemyId": enemy.id,
            "enemyName": enemy.name,
            "action": decision.value,
            "damage": 0,
            "effectsApplied": [],
            "stunned": False,
        }
        if decision in (AIAction.ATTACK, AIAction.ABILITY):
            hit = strike(enemy, player, ENEMY_CRIT_CHANCE, ENEMY_EFFECT_ABILITIES.get(enemy.kind, ()), session.turn, rng)
            record["damage"] = hit.damage
            record["effectsApplied"] = [a.to_dict() for a in hit.effects]
            if hit.critical:
                out.messages.append(f"{enemy.name} lands a critical hit for {hit.damage} damage!")
            else:
                out.messages.append(f"{enemy.name} attacks for {hit.damage} damage!")
            for applied in hit.effects:
                out.messages.append(f"{enemy.name}: {applied.message}")
                out.effect_events.append({"type": applied.effect.value, "target": "player", "message": applied.message})
        elif decision == AIAction.DEFEND:
            apply_effect(enemy, EffectType.DEFEND, enemy.id, session.turn)
            out.messages.append(f"{enemy.name} takes a defensive stance!")
        else:
            out.messages.append(f"{enemy.name} cowers in fear!")
        out.enemy_actions.append(record)


def _end_of_turn(session: DungeonSession, out: TurnOutcome):
    player_tick = tick(session.player)
    for msg in player_tick.messages:
        out.messages.append(f"[You] {msg}")
    for r in player_tick.results:
        out.effect_events.append({"type": r["effect"], "target": "player", "message": f"{r['effect']} deals {r['damage']}"})

    for enemy in session.living_enemies:
        enemy_tick = tick(enemy)
        out.enemy_dot_results[enemy.id] = {"damage": enemy_tick.total_damage, "messages": list(enemy_tick.messages)}
        for msg in enemy_tick.messages:
            out.messages.append(f"[{enemy.name}] {msg}")
        for r in enemy_tick.results:
            out.effect_events.append({"type": r["effect"], "target": enemy.id, "message": f"{r['effect']} deals {r['damage']}"})

    survivors = []
    for enemy in session.enemies:
        if enemy.alive:
            survivors.append(enemy)
        else:
            session.defeated.append(enemy.kind)
            out.defeated.append(enemy.id)
            out.messages.append(f"{enemy.name} is defeated!")
    session.enemies = survivors


def _finish(session: DungeonSession, out: TurnOutcome) -> TurnOutcome:
    player = session.player
    if not player.alive:
        out.outcome = LOST
    elif not session.enemies:
        out.outcome = WON
    out.player_hp = player.hp
    out.player_max_hp = player.max_hp
    out.player_effects = [e.to_dict() for e in player.effects]
    out.enemies = [e.to_dict() for e in session.enemies]
    log.debug(
        event="turn_resolved",
        dungeon_id=session.dungeon_id,
        turn=out.turn,
        action=out.player_action,
        outcome=out.outcome,
        player_hp=player.hp,
        enemies=len(session.enemies),
    )
    return out


def resolve_turn(session: DungeonSession, action: str, target_id: Optional[str], rng) -> TurnOutcome:
    _require_encounter(session)
    if action not in PLAYER_ACTIONS:
        raise DungeonError("invalid_action", f"Unknown action: {action}", field="action")
    target = _pick_target(session, target_id) if action == "attack" else None

    session.turn += 1
    out = TurnOutcome(turn=session.turn, player_action=action)
    _player_phase(session, action, target, out, rng)
    _enemy_phase(session, out, rng)
    _end_of_turn(session, out)
    return _finish(session, out)


def attempt_flee(session: DungeonSession, rng, chance: float = 0.5) -> TurnOutcome:
    """Try to escape. On failure the enemies get their phase and effects tick."""
    _require_encounter(session)
    session.turn += 1
    out = TurnOutcome(turn=session.turn, player_action="flee")
    if rng.random() < chance:
        out.outcome = FLED
        out.messages.append("You escaped!")
        out.player_hp = session.player.hp
        out.player_max_hp = session.player.max_hp
        out.player_effects = [e.to_dict() for e in session.player.effects]
        return out
    out.messages.append("Unable to escape!")
    _enemy_phase(session, out, rng)
    _end_of_turn(session, out)
    return _finish(session, out)


__all__ = ["TurnOutcome", "PLAYER_ACTIONS", "ONGOING", "WON", "LOST", "FLED", "resolve_turn", "attempt_flee"]
