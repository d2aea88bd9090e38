"""
HMAC Module for cryptokit

Keyed hash over an unkeyed hash primitive (RFC 2104), HMAC-SHA512 by
default. Used directly for message authentication and as the PRF under
HKDF.

Flow:
1. Keys longer than the hash block are replaced by hash(key)
2. inner = hash((ipad ^ key) || message)
3. mac = hash((opad ^ key) || inner)
"""

import hmac

from cryptokit.crypto.encoding import BytesLike, ensure_bytes
from cryptokit.crypto.primitives import SHA512, HashFunction

IPAD = 0x36
OPAD = 0x5C


def _pad_key(key: bytes, pad: int, block_size: int) -> bytes:
    padded = bytearray([pad]) * block_size
    for i, b in enumerate(key):
        padded[i] ^= b
    return bytes(padded)


def compute_hmac(message: BytesLike, key: BytesLike,
                 hash_function: HashFunction = SHA512) -> bytes:
    """
    Compute HMAC of a message.

    Args:
        message: Data to authenticate
        key: HMAC key, any length
        hash_function: Underlying hash; defaults to SHA-512

    Returns:
        bytes: MAC of `hash_function.digest_size` bytes (64 for SHA-512)

    Raises:
        InvalidInputType: If message or key is not a byte buffer
    """
    message = ensure_bytes(message, "message")
    key = ensure_bytes(key, "key")

    if len(key) > hash_function.block_size:
        key = hash_function(key)

    inner = hash_function(_pad_key(key, IPAD, hash_function.block_size) + message)
    return hash_function(_pad_key(key, OPAD, hash_function.block_size) + inner)


def verify_hmac(message: BytesLike, key: BytesLike, mac: BytesLike,
                hash_function: HashFunction = SHA512) -> bool:
    """
    Verify an HMAC.

    Returns:
        bool: True if `mac` matches; compared in constant time
    """
    expected = compute_hmac(message, key, hash_function)
    return hmac.compare_digest(expected, ensure_bytes(mac, "mac"))
