"""Dungeon engine services: rng streams, status effects, monster AI, combat and the session state machine."""
