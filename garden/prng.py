"""Deterministic pseudo-random helpers keyed by a numeric seed."""

from __future__ import annotations

import math

__all__ = ["seeded_key", "seeded_random", "seeded_value"]


def seeded_random(seed: float) -> float:
    """Return a value in ``[0, 1)`` that only depends on ``seed``."""

    x = math.sin(seed) * 10000.0
    value = x - math.floor(x)
    # floor() can round a tiny negative fraction up to 1.0
    return value if value < 1.0 else 0.0


def seeded_key(seed: float, depth: int = 0, path: int = 0, salt: int = 0) -> float:
    """Combine a tree seed with structural coordinates into a single PRNG key."""

    return seed * (salt + 1) + depth * 101.37 + path * 17.713 + salt * 7.31


def seeded_value(seed: float, depth: int = 0, path: int = 0, salt: int = 0) -> float:
    return seeded_random(seeded_key(seed, depth, path, salt))
