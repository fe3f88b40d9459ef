"""Random sources for reel landings."""
import random
import secrets
from abc import ABC, abstractmethod


class RNGBase(ABC):
    """Abstract RNG interface used by the spin controller."""

    @abstractmethod
    def randbelow(self, n: int) -> int:
        """Return random int in [0, n)."""
        pass

    def landing_index(self, pool_length: int) -> int:
        """Draw a uniform landing index over a reel pool."""
        if pool_length <= 0:
            raise ValueError(f"Cannot land on an empty reel (length={pool_length})")
        return self.randbelow(pool_length)


class ProductionRNG(RNGBase):
    """
    Production RNG.

    Uses cryptographically secure source, no fixed seed.
    """

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)


class SeededRNG(RNGBase):
    """
    Test/Simulation RNG.

    Deterministic, fully controlled by seed.
    """

    def __init__(self, seed: int | str):
        self._rng = random.Random(seed)
        self.seed = seed

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)


class ScriptedRNG(RNGBase):
    """Replays a fixed sequence of landing indices (tests and demos)."""

    def __init__(self, indices: list[int]):
        self._indices = list(indices)
        self._pos = 0

    def randbelow(self, n: int) -> int:
        if self._pos >= len(self._indices):
            raise RuntimeError("ScriptedRNG exhausted")
        value = self._indices[self._pos]
        self._pos += 1
        if not 0 <= value < n:
            raise ValueError(f"Scripted index {value} outside [0, {n})")
        return value
