"""
Deterministic pseudo-random number generation for synthetic bridge data.

Two pieces:
1. hash_to_seed - FNV-1a (32-bit) over the UTF-16 code units of a string
2. Mulberry32 - a small 32-bit generator producing floats in [0, 1)

Everything is pure integer arithmetic masked to 32 bits, so the same seed
string yields the same stream on every platform and interpreter, and the
streams match the dashboard front end bit for bit.

A generator is an explicit object. Each period generation creates its own
instance and threads it through every sampling step; there is no module-level
generator state.
"""

from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

# =============================================================================
# CONSTANTS
# =============================================================================

UINT32_MASK: int = 0xFFFFFFFF

# FNV-1a 32-bit parameters
FNV_OFFSET_BASIS: int = 2166136261
FNV_PRIME: int = 16777619

# Mulberry32 Weyl increment
MULBERRY_INCREMENT: int = 0x6D2B79F5

# 2 ** 32, divisor mapping a uint32 onto [0, 1)
UINT32_RANGE: float = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply with wrap-around (unsigned result)."""
    return (a * b) & UINT32_MASK


# =============================================================================
# Seed Hashing
# =============================================================================


def hash_to_seed(text: str) -> int:
    """
    Hash a string to an unsigned 32-bit seed using FNV-1a.

    The hash walks UTF-16 code units, so characters outside the Basic
    Multilingual Plane contribute their surrogate pair like they do in a
    browser.

    Args:
        text: Any string, typically "seed|YYYY-MM|segment|offset"

    Returns:
        Unsigned 32-bit integer

    Example:
        >>> hash_to_seed("")
        2166136261
        >>> hex(hash_to_seed("a"))
        '0xe40c292c'
    """
    h = FNV_OFFSET_BASIS
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h ^= code_unit
        h = _imul(h, FNV_PRIME)
    return h & UINT32_MASK


# =============================================================================
# Generator
# =============================================================================


class Mulberry32:
    """
    Mulberry32 generator over a 32-bit state.

    Each call to next_float() advances the state by a fixed odd increment, so
    the state sequence has full period 2**32. The helper methods below are the
    only way the generator services draw randomness.
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = seed & UINT32_MASK

    @property
    def state(self) -> int:
        return self._state

    def next_float(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + MULBERRY_INCREMENT) & UINT32_MASK
        t = self._state
        r = _imul(t ^ (t >> 15), 1 | t)
        r ^= (r + _imul(r ^ (r >> 7), 61 | r)) & UINT32_MASK
        return ((r ^ (r >> 14)) & UINT32_MASK) / UINT32_RANGE

    __call__ = next_float

    def uniform(self, low: float, high: float) -> float:
        """Draw from [low, high)."""
        return low + self.next_float() * (high - low)

    def symmetric(self, half_width: float) -> float:
        """Draw from [-half_width, half_width)."""
        return (self.next_float() * 2 - 1) * half_width

    def randint(self, low: int, high: int) -> int:
        """Draw an integer from the closed range [low, high]."""
        return low + int(self.next_float() * (high - low + 1))

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[int(self.next_float() * len(items))]

    def sample(self, items: Sequence[T], k: int) -> List[T]:
        """
        Select k elements without replacement.

        Runs a Fisher-Yates shuffle over a copy and keeps the first k
        elements, so the result order is also random.
        """
        pool = list(items)
        for i in range(len(pool) - 1, 0, -1):
            j = int(self.next_float() * (i + 1))
            pool[i], pool[j] = pool[j], pool[i]
        return pool[:max(0, min(k, len(pool)))]


def seed_to_stream(seed: int) -> Callable[[], float]:
    """
    Create a stateful uniform stream from a 32-bit seed.

    Args:
        seed: Unsigned 32-bit seed (larger values are masked)

    Returns:
        A zero-argument callable returning the next float in [0, 1)
    """
    return Mulberry32(seed).next_float
