"""
Deterministic random stream (Mulberry32).

Every value the engine draws comes from a single RandomStream owned by one
generation run, consumed in a fixed order. Bit operations must stay exactly as
written: scenes are only reproducible across implementations while the
constants, shifts and multiplication order match.
"""

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_NORMALIZER = 4294967296.0  # 2**32


class RandomStream:
    """Seeded stream of floats in [0, 1). Not thread-safe; one owner per run."""

    __slots__ = ("_state",)

    def __init__(self, seed: int):
        self._state = int(seed) & _MASK32

    def next(self) -> float:
        self._state = t = (self._state + _INCREMENT) & _MASK32
        r = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        r ^= (r + (((r ^ (r >> 7)) * (r | 61)) & _MASK32)) & _MASK32
        return ((r ^ (r >> 14)) & _MASK32) / _NORMALIZER

    __call__ = next

    def take(self, n: int):
        """Draw n values in order."""
        return [self.next() for _ in range(n)]
