"""
Uniform Random Samplers for cryptokit

Bias-free sampling built directly on a secure random-byte source:

- uniform(n): integers in [0, n) for 1 <= n <= 2^53, by rejection
  sampling (no modulo bias)
- uniform_01(): floating-point numbers in [0, 1], distributed as a
  uniform real rounded to the nearest double. The exponent is drawn
  geometrically and the significand uniformly, rather than scaling an
  integer, so small outputs keep their full precision.
- random_int(min, max): integers in [min, max), API compatible with
  npm random-lib

Usage:
    sampler = UniformSampler()            # libsodium randombytes
    sampler.uniform(6)
    sampler.uniform_01()

    uniform(6)                            # module-level default sampler
"""

import logging
import math
from typing import Callable, Optional

from cryptokit import config
from cryptokit.crypto.primitives import random_bytes
from cryptokit.errors import InvalidBound, RandomSourceError

logger = logging.getLogger(__name__)

MAX_SAFE_BOUND = 2 ** 53

# emin = -1022; emin - 53 = -1054; emin - 64 = -1088 leaves a margin
# for fenceposts. Anything this small rounds to zero anyway.
UNIFORM_01_MAX_EXPONENT = 1088

RandomSource = Callable[[int], bytes]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class UniformSampler:
    """
    Uniform sampler over an injected random-byte source.

    The source must be cryptographically secure and safe to call from
    every thread that shares the sampler; there is no fallback PRNG.
    """

    def __init__(self, source: RandomSource = random_bytes,
                 max_rejections: Optional[int] = None):
        """
        Args:
            source: Callable returning n secure random bytes
            max_rejections: Redraw limit for rejection loops, at least 1
                (default: CRYPTOKIT_MAX_REJECTIONS)

        Raises:
            InvalidBound: If max_rejections is not a positive integer
        """
        if max_rejections is None:
            max_rejections = config.MAX_REJECTIONS
        if not _is_int(max_rejections) or max_rejections < 1:
            raise InvalidBound("max_rejections must be a positive integer")
        self._source = source
        self._max_rejections = max_rejections

    def _uniform32(self) -> int:
        return int.from_bytes(self._source(4), "little")

    def uniform(self, n: int) -> int:
        """
        Sample uniformly from {0, 1, ..., n - 1}.

        Each attempt takes 7 bytes: the low 32 bits come from bytes 0-3
        (little-endian), the high 21 bits from bytes 4-6. Candidates
        below 2^53 mod n are redrawn, leaving a range whose size is a
        multiple of n.

        Raises:
            InvalidBound: If n is not an integer in [1, 2^53]
        """
        if not _is_int(n) or n <= 0 or n > MAX_SAFE_BOUND:
            raise InvalidBound("Bound must be positive integer at most 2^53.")

        minimum = MAX_SAFE_BOUND % n
        for _ in range(self._max_rejections):
            b = self._source(7)
            l32 = b[0] | (b[1] << 8) | (b[2] << 16) | (b[3] << 24)
            h21 = b[4] | (b[5] << 8) | ((b[6] & 0x1F) << 16)
            x = (h21 << 32) | l32
            if x >= minimum:
                return x % n

        logger.error("uniform(%d): %d consecutive rejections", n, self._max_rejections)
        raise RandomSourceError("random source failed rejection sampling")

    def uniform_01(self) -> float:
        """Sample uniformly from floating-point numbers in [0, 1]."""
        # Draw an exponent with geometric distribution.
        e = 0
        x = self._uniform32()
        while x == 0:
            if e >= UNIFORM_01_MAX_EXPONENT:
                logger.warning("uniform_01: random source returned %d zero bits", e)
                return 0.0
            e += 32
            x = self._uniform32()
        e += 32 - x.bit_length()

        # Normal, odd 64-bit significand. The odd low bit breaks rounding
        # ties, which otherwise occur only on a set of measure zero.
        hi = self._uniform32() | 0x80000000
        lo = self._uniform32() | 0x00000001
        s = (hi << 32) | lo

        # s / 2^64 lies in [1/2, 1]; apply the exponent.
        return math.ldexp(float(s), -64 - e)

    def random_int(self, min_value: int = 0, max_value: Optional[int] = None) -> int:
        """
        Sample uniformly from {min_value, ..., max_value - 1}.

        Raises:
            InvalidBound: If the bounds are not ascending integers in
                [-2^53, 2^53], or differ by more than 2^53
        """
        if (not _is_int(min_value) or min_value < -MAX_SAFE_BOUND
                or not _is_int(max_value) or max_value > MAX_SAFE_BOUND
                or min_value >= max_value):
            raise InvalidBound("Bounds must be ascending integers from -2^53 to 2^53.")
        if max_value - (min_value + 1) >= MAX_SAFE_BOUND:
            raise InvalidBound("Bounds must not differ by more than 2^53.")
        return min_value + self.uniform(max_value - min_value)


_default_sampler = UniformSampler()


def uniform(n: int) -> int:
    return _default_sampler.uniform(n)


def uniform_01() -> float:
    return _default_sampler.uniform_01()


def random_int(min_value: int = 0, max_value: Optional[int] = None) -> int:
    return _default_sampler.random_int(min_value, max_value)
