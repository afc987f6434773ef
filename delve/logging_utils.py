"""Structured event log for dungeon sessions.

One line per event: ``level=info ts=... event=... key=value`` (spaces in
values become underscores), or a compact JSON object when DELVE_LOG_JSON is
set. Errors go to stderr, everything else to stdout. Fields set to None are
dropped.

    log = get_logger("delve.session")
    log.info(event="encounter_won", dungeon_id=run_id, gold=42)
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("DELVE_LOG_LEVEL", "info").lower(), LEVELS["info"])
JSON_MODE = os.getenv("DELVE_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _kv(value) -> str:
    if isinstance(value, (int, float)):
        return str(value)
    return str(value).replace(" ", "_")


def render(level: str, fields: dict) -> str:
    """Format one event line; ``level`` and ``ts`` always come first."""
    now = int(time.time())
    kept = {k: v for k, v in fields.items() if v is not None}
    if JSON_MODE:
        return json.dumps({"level": level, "ts": now, **kept}, separators=(",", ":"), default=str)
    return " ".join([f"level={level}", f"ts={now}"] + [f"{k}={_kv(v)}" for k, v in kept.items()])


class EventLogger:
    def __init__(self, name: str):
        self.name = name

    def emit(self, level: str, **fields):
        if LEVELS[level] < CURRENT_LEVEL:
            return
        fields.setdefault("logger", self.name)
        stream = sys.stderr if level == "error" else sys.stdout
        print(render(level, fields), file=stream)

    def debug(self, **fields):
        self.emit("debug", **fields)

    def info(self, **fields):
        self.emit("info", **fields)

    def warn(self, **fields):
        self.emit("warn", **fields)

    def error(self, **fields):
        self.emit("error", **fields)


_loggers: dict[str, EventLogger] = {}


def get_logger(name: str) -> EventLogger:
    return _loggers.setdefault(name, EventLogger(name))


log = get_logger("delve")
