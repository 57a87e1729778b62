"""Random numbers from a 32-bit Mersenne Twister seeded like mt19937."""

from __future__ import annotations

import random
import secrets

_MASK32 = 0xFFFFFFFF
_STATE_SIZE = 624
_DEFAULT_SEED = 5489


def _mt19937_state(seed: int) -> tuple[int, ...]:
    state = [seed & _MASK32]
    for i in range(1, _STATE_SIZE):
        prev = state[-1]
        state.append((1812433253 * (prev ^ (prev >> 30)) + i) & _MASK32)
    return tuple(state)


class RandomGenerator:
    """Uniform integers, floats and 3-vectors from one engine."""

    def __init__(self, seed: int | None = None) -> None:
        self._engine = random.Random()
        self.seed(secrets.randbits(32) if seed is None else seed)

    def seed(self, seed: int) -> None:
        """Reseed so the output matches an mt19937 seeded with ``seed``."""
        self._engine.setstate((3, _mt19937_state(seed) + (_STATE_SIZE,), None))

    def _next(self) -> int:
        return self._engine.getrandbits(32)

    def uint(self, low: int | None = None, high: int | None = None) -> int:
        """A 32-bit unsigned integer, or one in ``[low, high]``."""
        if low is None and high is None:
            return self._next()
        if low is None or high is None:
            raise TypeError("low and high must be given together")
        if low > high:
            raise ValueError("low must not exceed high")
        return low + self._next() % (high - low + 1)

    def uniform(self, low: float | None = None, high: float | None = None) -> float:
        """A float in ``[0, 1]``, or one in ``[low, high]``."""
        unit = self._next() / _MASK32
        if low is None and high is None:
            return unit
        if low is None or high is None:
            raise TypeError("low and high must be given together")
        return low + unit * (high - low)

    def vec3(self, low: float | None = None, high: float | None = None) -> tuple[float, float, float]:
        return (self.uniform(low, high), self.uniform(low, high), self.uniform(low, high))


_default = RandomGenerator(_DEFAULT_SEED)


def init() -> None:
    """Reseed the shared generator from the system's entropy source."""
    _default.seed(secrets.randbits(32))


def set_seed(seed: int) -> None:
    _default.seed(seed)


def uint(low: int | None = None, high: int | None = None) -> int:
    return _default.uint(low, high)


def uniform(low: float | None = None, high: float | None = None) -> float:
    return _default.uniform(low, high)


def vec3(low: float | None = None, high: float | None = None) -> tuple[float, float, float]:
    return _default.vec3(low, high)