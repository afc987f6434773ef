from collections import Counter

import pytest

from delve.services.rng import loot_key, room_key, seed_from_key, stream_for, turn_key
from delve.services.weighted import choice, weighted_index, weighted_select

from factories import ScriptedRng


def test_same_key_same_stream():
    a = stream_for("run-1-floor-1-room-3")
    b = stream_for("run-1-floor-1-room-3")
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]


def test_different_keys_diverge():
    a = stream_for(room_key("run-1", 1, 3))
    b = stream_for(room_key("run-1", 1, 4))
    assert [a.random() for _ in range(3)] != [b.random() for _ in range(3)]


def test_seed_from_key_bounded():
    assert 0 <= seed_from_key("anything") < 2**63
    assert seed_from_key(12345) == 12345


def test_context_keys_are_distinct():
    keys = {room_key("d", 1, 2), turn_key("d", 1, 2, 1, 1), turn_key("d", 1, 2, 1, 2), loot_key("d", 1, 2, 1)}
    assert len(keys) == 4


def test_weighted_select_respects_predicate():
    picked = weighted_select(["a", "b", "c"], lambda c: 1, ScriptedRng([0.0]), predicate=lambda c: c != "a")
    assert picked == "b"


@pytest.mark.parametrize("candidates", [[], ["a", "b"]])
def test_weighted_select_none_when_nothing_eligible(candidates):
    assert weighted_select(candidates, lambda c: 0, ScriptedRng([0.5])) is None


def test_weighted_select_consumes_one_draw():
    rng = ScriptedRng([0.99])
    assert weighted_select(["x", "y"], lambda c: 1, rng) == "y"
    assert rng.calls == 1


def test_weighted_select_proportional():
    rng = stream_for("weighted-proportional")
    counts = Counter(weighted_select(["heavy", "light"], lambda c: 9 if c == "heavy" else 1, rng) for _ in range(4000))
    assert 0.85 < counts["heavy"] / 4000 < 0.95


def test_weighted_index_boundaries():
    assert weighted_index([5, 5], ScriptedRng([0.0])) == 0
    assert weighted_index([5, 5], ScriptedRng([0.5])) == 1
    assert weighted_index([0, 0], ScriptedRng([0.3])) == 0


def test_choice_uniform_pick():
    assert choice(["a", "b", "c", "d"], ScriptedRng([0.6])) == "c"
