from __future__ import annotations
import random
from typing import Optional, Protocol

import numpy as np

from . import exceptions
from .seed import derive_seed
from .types import GenerationConfiguration

_SEED_SPACE = 2**64


class RandomSource(Protocol):
    """Pseudo-random stream used by a single generation run."""

    @property
    def is_deterministic(self) -> bool: ...

    @property
    def seed(self) -> Optional[int]: ...

    def next_double(self) -> float: ...

    def next_int(self, low: int, high: Optional[int] = None) -> int: ...

    def next_bytes(self, n: int) -> bytes: ...


def _int_bounds(low: int, high: Optional[int]) -> tuple[int, int]:
    """
    Normalise next_int arguments to a half-open [low, high) pair:
      - next_int(max)      → [0, max), max must be > 0
      - next_int(min, max) → [min, max), min must be < max
    """
    if high is None:
        exceptions.require(low > 0, f"max must be positive, got {low}.")
        return 0, low
    exceptions.require(low < high, f"min ({low}) must be less than max ({high}).")
    return low, high


class DeterministicRandomSource:
    """Seeded stream: the same seed and call sequence yields identical output."""

    def __init__(self, seed: int):
        exceptions.require(isinstance(seed, int), f"seed must be an int, got {seed!r}.")
        self._seed = seed
        # numpy only takes non-negative seeds; two's complement keeps negatives distinct
        self._rng = np.random.default_rng(seed % _SEED_SPACE)

    @property
    def is_deterministic(self) -> bool:
        return True

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def next_double(self) -> float:
        return float(self._rng.random())

    def next_int(self, low: int, high: Optional[int] = None) -> int:
        lo, hi = _int_bounds(low, high)
        return int(self._rng.integers(lo, hi))

    def next_bytes(self, n: int) -> bytes:
        return self._rng.bytes(n)

    def __repr__(self) -> str:
        return f"DeterministicRandomSource(seed={self._seed})"


class NonDeterministicRandomSource:
    """
    Unseeded stream backed by the OS entropy pool (random.SystemRandom).

    SystemRandom keeps no state between calls, so one instance can be used
    from several threads without locking.
    """

    def __init__(self):
        self._rng = random.SystemRandom()

    @property
    def is_deterministic(self) -> bool:
        return False

    @property
    def seed(self) -> Optional[int]:
        return None

    def next_double(self) -> float:
        return self._rng.random()

    def next_int(self, low: int, high: Optional[int] = None) -> int:
        lo, hi = _int_bounds(low, high)
        return self._rng.randrange(lo, hi)

    def next_bytes(self, n: int) -> bytes:
        return self._rng.randbytes(n)

    def __repr__(self) -> str:
        return "NonDeterministicRandomSource()"


def create_deterministic(seed: int) -> DeterministicRandomSource:
    return DeterministicRandomSource(seed)


def create_non_deterministic() -> NonDeterministicRandomSource:
    return NonDeterministicRandomSource()


def create_random_source(config: GenerationConfiguration) -> RandomSource:
    """
    Pick the stream for a run:
      - deterministic=False → fresh NonDeterministicRandomSource
      - deterministic=True  → DeterministicRandomSource seeded with config.seed,
        or with a seed derived from the configuration when none is given
    """
    if not config.deterministic:
        return create_non_deterministic()

    seed = config.seed if config.seed is not None else derive_seed(config)
    return create_deterministic(seed)
