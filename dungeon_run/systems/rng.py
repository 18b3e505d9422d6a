"""Domain-separated deterministic RNG using xxhash.

The run is reproducible from its seed alone: every draw is
``Hash(Seed, Domain, Key, Step)``, so the plan, the spawn counts, the spawn
point picks and the stagger delays each live in their own stream and never
shift each other when one of them draws more or fewer values.
"""

from __future__ import annotations

import secrets
import struct

import xxhash

from dungeon_run.core.enums import Domain

_SEED_LIMIT = (1 << 31) - 1


def resolve_seed(seed: int) -> int:
    """Return ``seed`` unless it is 0, in which case draw a fresh nonzero one."""
    if seed != 0:
        return seed
    return secrets.randbelow(_SEED_LIMIT) + 1


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, key, step).
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, step: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, step)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, step: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, step) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, step: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, step)
        return low + int(f * (high - low + 1))

    def stream(self, domain: Domain, key: int = 0) -> SeededRNG:
        return SeededRNG(self, domain, key)


class SeededRNG:
    """Sequential sampler over one (domain, key) stream.

    Exposes the integer-range contract the orchestrator depends on:
    ``next(low, high_exclusive)``.
    """

    __slots__ = ("_rng", "_domain", "_key", "_step")

    def __init__(self, rng: DeterministicRNG, domain: Domain, key: int = 0) -> None:
        self._rng = rng
        self._domain = domain
        self._key = key
        self._step = 0

    @property
    def seed(self) -> int:
        return self._rng.seed

    @property
    def draws(self) -> int:
        return self._step

    def _advance(self) -> float:
        f = self._rng.next_float(self._domain, self._key, self._step)
        self._step += 1
        return f

    def next(self, low: int, high_exclusive: int) -> int:
        """Return an integer in [low, high_exclusive).  ``low == high`` yields low."""
        if high_exclusive < low:
            raise ValueError(f"high_exclusive ({high_exclusive}) < low ({low})")
        f = self._advance()
        if high_exclusive == low:
            return low
        return low + int(f * (high_exclusive - low))

    def uniform(self, a: float, b: float) -> float:
        """Return a float between ``a`` and ``b``."""
        return a + (b - a) * self._advance()
