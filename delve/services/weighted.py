"""Filter-then-weighted-select.

One roulette-wheel routine shared by loot table entries, base item choice,
affix rolls, unique drops and the rarity ladder.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


def weighted_select(
    candidates: Iterable[T],
    weight_fn: Callable[[T], float],
    rng,
    predicate: Optional[Callable[[T], bool]] = None,
) -> Optional[T]:
    """Pick one candidate with probability proportional to ``weight_fn``.

    Candidates failing ``predicate`` are dropped first. Returns None when
    nothing is eligible or every weight is zero. Exactly one ``rng.random()``
    draw is consumed when a choice is made.
    """
    pool: List[Tuple[T, float]] = []
    for c in candidates:
        if predicate is not None and not predicate(c):
            continue
        pool.append((c, float(weight_fn(c))))
    total = sum(w for _, w in pool)
    if not pool or total <= 0:
        return None
    roll = rng.random() * total
    for c, w in pool:
        roll -= w
        if roll <= 0:
            return c
    return pool[-1][0]


def weighted_index(weights: Sequence[int], rng) -> int:
    """Integer-weight variant: ``floor(rng * total)`` walked with a strict bound.

    Returns the index of the chosen weight (the first index when weights sum to 0).
    """
    total = sum(weights)
    if total <= 0:
        return 0
    roll = int(rng.random() * total)
    for idx, w in enumerate(weights):
        roll -= w
        if roll < 0:
            return idx
    return 0


def choice(seq: Sequence[T], rng) -> T:
    """Uniform pick using a single ``rng.random()`` draw."""
    return seq[int(rng.random() * len(seq))]


__all__ = ["weighted_select", "weighted_index", "choice"]
