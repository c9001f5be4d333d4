"""Seedable random sources used to make generation and search reproducible."""

from __future__ import annotations

import hashlib
import random
from typing import Optional, Tuple

from .exceptions import InvalidArgumentError

_MASK32 = 0xFFFFFFFF
# xorshift32 has a fixed point at zero, so a zero seed is remapped.
_ZERO_SEED_SUBSTITUTE = 0x9E3779B9


class XorShift32(random.Random):
    """Tiny 32-bit xorshift generator exposed through the ``random.Random`` API.

    Only :meth:`random` is native; every other helper (``shuffle``,
    ``choice``, ``randint``...) comes from ``random.Random`` and therefore
    draws from the xorshift stream too.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._state = _ZERO_SEED_SUBSTITUTE
        super().__init__(seed)

    def seed(self, a=None, version: int = 2) -> None:
        if a is None:
            a = random.SystemRandom().getrandbits(32)
        elif isinstance(a, str):
            a = a.encode("utf-8")
        if isinstance(a, (bytes, bytearray)):
            # Digest-based so text seeds are stable across processes, unlike hash().
            a = int.from_bytes(hashlib.sha512(a).digest(), "big")
        if not isinstance(a, int):
            raise InvalidArgumentError(f"Seed must be an int, str or bytes, got {type(a).__name__}")
        self._state = (a & _MASK32) or _ZERO_SEED_SUBSTITUTE
        self.gauss_next = None

    def next_uint32(self) -> int:
        s = self._state
        s ^= (s << 13) & _MASK32
        s ^= s >> 17
        s ^= (s << 5) & _MASK32
        self._state = s
        return s

    def random(self) -> float:
        return (self.next_uint32() % _MASK32) / _MASK32

    def getrandbits(self, k: int) -> int:
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        value = 0
        produced = 0
        while produced < k:
            value = (value << 32) | self.next_uint32()
            produced += 32
        return value >> (produced - k)

    def getstate(self) -> Tuple[int, int]:
        return (1, self._state)

    def setstate(self, state: Tuple[int, int]) -> None:
        _, self._state = state

