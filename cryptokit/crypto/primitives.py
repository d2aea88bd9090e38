"""
External Primitives for cryptokit

Thin adapters over PyNaCl. Nothing in this package implements a hash,
a signature scheme or a random generator itself; everything funnels
through here or through crypto.signing.
"""

from dataclasses import dataclass
from typing import Callable

import nacl.encoding
import nacl.hash
import nacl.utils


@dataclass(frozen=True)
class HashFunction:
    """An unkeyed hash plus the sizes HMAC needs to know about it."""
    name: str
    digest_size: int
    block_size: int
    digest: Callable[[bytes], bytes]

    def __call__(self, data: bytes) -> bytes:
        return self.digest(data)


def _sha512(data: bytes) -> bytes:
    return nacl.hash.sha512(bytes(data), encoder=nacl.encoding.RawEncoder)


SHA512 = HashFunction(name="sha512", digest_size=64, block_size=128, digest=_sha512)


def random_bytes(size: int) -> bytes:
    """Cryptographically secure random bytes (libsodium randombytes)."""
    return nacl.utils.random(size)
