"""Seedable random stream and the selection helpers built on top of it."""

from __future__ import annotations

import hashlib
import math
import secrets
from typing import Callable, Optional, Sequence, TypeVar

from .exceptions import InvariantViolation

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x6D2B79F5

Rng = Callable[[], float]


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


class RandomStream:
    """Mulberry32 generator.

    Every draw advances an internal cursor, so one stream must belong to a
    single request's call chain. Instances are callable and return a float in
    ``[0, 1)``.
    """

    __slots__ = ("seed", "_state", "draws")

    def __init__(self, seed: int) -> None:
        self.seed = int(seed) & _MASK
        self._state = self.seed
        self.draws = 0

    @classmethod
    def from_entropy(cls) -> "RandomStream":
        return cls(secrets.randbits(32))

    def next(self) -> float:
        self._state = (self._state + _GOLDEN_GAMMA) & _MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        self.draws += 1
        return ((t ^ (t >> 14)) & _MASK) / 4294967296.0

    def __call__(self) -> float:
        return self.next()

    def __repr__(self) -> str:
        return f"RandomStream(seed={self.seed}, draws={self.draws})"


def derive_seed(text: str) -> int:
    """Map arbitrary text onto a 32-bit seed; integers keep their value."""
    stripped = text.strip()
    try:
        return int(stripped) & _MASK
    except ValueError:
        digest = hashlib.sha256(stripped.encode("utf-8")).digest()
        return int.from_bytes(digest[:4], byteorder="big", signed=False)


def select_random(items: Sequence[T], rng: Rng) -> T:
    if not items:
        raise InvariantViolation("select_random called with an empty candidate list")
    return items[math.floor(rng() * len(items))]


def pick_random(items: Sequence[T], rng: Rng) -> Optional[T]:
    if not items:
        return None
    return items[math.floor(rng() * len(items))]


def shuffle(items: Sequence[T], rng: Rng) -> list[T]:
    """Fisher-Yates shuffle returning a new list."""
    result = list(items)
    for index in range(len(result) - 1, 0, -1):
        swap = math.floor(rng() * (index + 1))
        result[index], result[swap] = result[swap], result[index]
    return result


def select_random_n(items: Sequence[T], count: int, rng: Rng) -> list[T]:
    if count > len(items):
        raise InvariantViolation(
            f"select_random_n asked for {count} items from a pool of {len(items)}"
        )
    if count <= 0:
        return []
    return shuffle(items, rng)[:count]


def random_int_inclusive(low: int, high: int, rng: Rng) -> int:
    if high < low:
        raise InvariantViolation(f"random_int_inclusive got inverted bounds {low}..{high}")
    return low + math.floor(rng() * (high - low + 1))


def roll_chance(chance: Optional[float], rng: Rng) -> bool:
    if chance is None:
        return True
    return rng() <= chance
