# FILE: spin_core/rng.py
"""
Injectable randomness.

Every engine function takes a ``RandomSource``: a zero-argument callable that
returns a float in [0, 1). Seeded numpy generators back the default source so
results are reproducible under a fixed seed.
"""
from __future__ import annotations
import itertools
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar
import numpy as np

T = TypeVar("T")

RandomSource = Callable[[], float]


def default_source(seed: Optional[int] = None) -> RandomSource:
    rng = np.random.default_rng(seed)
    return lambda: float(rng.random())


def generator_source(rng: np.random.Generator) -> RandomSource:
    return lambda: float(rng.random())


def sequence_source(values: Iterable[float]) -> RandomSource:
    """Cycle through fixed values (tests, replays)."""
    vals = list(values)
    if not vals:
        raise ValueError("sequence_source needs at least one value")
    for v in vals:
        if not 0.0 <= v < 1.0:
            raise ValueError(f"random values must lie in [0, 1), got {v}")
    it = itertools.cycle(vals)
    return lambda: next(it)


def ensure_source(rand: Optional[RandomSource]) -> RandomSource:
    return rand if rand is not None else default_source()


def uniform(rand: RandomSource, low: float, high: float) -> float:
    return low + (high - low) * rand()


def randint_below(rand: RandomSource, n: int) -> int:
    # clamp: float rounding on values close to 1.0 must not index past n-1
    return min(int(rand() * n), n - 1)


def shuffled(items: Sequence[T], rand: RandomSource) -> List[T]:
    """Fisher-Yates shuffle into a new list; each permutation equally likely."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = randint_below(rand, i + 1)
        out[i], out[j] = out[j], out[i]
    return out
