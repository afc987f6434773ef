"""Payload checks for the dungeon websocket events.

Each schema maps a camelCase field to ``(type, required, extras)``.
``validate`` walks it in order and stops at the first bad field, returning
``(False, {'field', 'error', 'code'})``; otherwise ``(True, data)`` with
strings stripped and ``id`` values coerced to ``str``.

Types: ``str``, ``int`` (bools refused) and ``id`` (str or int).
Extras: ``min`` for ints; ``min_len``, ``max_len``, ``choices`` for the rest.

    >>> validate({'dungeonId': 'abc', 'roomId': 'x'}, ENTER_ROOM)
    (False, {'field': 'roomId', 'error': 'expected int', 'code': 'type'})
"""
from __future__ import annotations
from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': (str,),
    'int': (int,),
    'id': (str, int),
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload is not an object', 'type')
    out = {}
    for name, spec in schema.items():
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'field is required', 'required')
            continue
        value = payload[name]
        if isinstance(value, bool) or not isinstance(value, PRIMITIVES[type_name]):
            return _fail(name, f'expected {type_name}', 'type')
        if type_name == 'int':
            if 'min' in extras and value < extras['min']:
                return _fail(name, f"must be >= {extras['min']}", 'min')
            out[name] = value
            continue
        s = str(value).strip()
        if len(s) == 0:
            return _fail(name, 'is blank', 'empty')
        if 'max_len' in extras and len(s) > extras['max_len']:
            return _fail(name, f"longer than {extras['max_len']}", 'max_len')
        if 'min_len' in extras and len(s) < extras['min_len']:
            return _fail(name, f"shorter than {extras['min_len']}", 'min_len')
        if 'choices' in extras and s not in extras['choices']:
            return _fail(name, f"must be one of {', '.join(extras['choices'])}", 'choice')
        out[name] = s
    return True, out


# Event schemas
_DUNGEON_ID = ('str', True, {'max_len': 64})

START_DUNGEON = {
    'playerId': ('id', True, {'max_len': 64}),
    'characterId': ('int', True, {'min': 1}),
}
ENTER_ROOM = {
    'dungeonId': _DUNGEON_ID,
    'roomId': ('int', True, {'min': 0}),
}
DUNGEON_ACTION = {
    'dungeonId': _DUNGEON_ID,
    'action': ('str', True, {'choices': ('attack', 'defend', 'flee')}),
    'targetId': ('str', False, {'max_len': 64}),
}
NEXT_FLOOR = {
    'dungeonId': _DUNGEON_ID,
}
CHOOSE_PATH = {
    'dungeonId': _DUNGEON_ID,
    'pathId': ('str', True, {'max_len': 64}),
    'zoneType': ('str', True, {'max_len': 32}),
}
ABANDON_DUNGEON = {
    'dungeonId': ('str', False, {'max_len': 64}),
}
