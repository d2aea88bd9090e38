"""
HKDF Module for cryptokit

RFC 5869 extract-and-expand key derivation over compute_hmac.

Usage:
    okm = hkdf(seed, info=b"\\x00", length=32, salt=salt)
"""

from typing import Optional

from cryptokit.crypto.encoding import BytesLike, ensure_bytes
from cryptokit.crypto.hmac import compute_hmac
from cryptokit.crypto.primitives import SHA512, HashFunction
from cryptokit.errors import InvalidLength

MAX_BLOCKS = 255


def hkdf_extract(ikm: BytesLike, salt: Optional[BytesLike] = None,
                 hash_function: HashFunction = SHA512) -> bytes:
    """
    PRK = HMAC(salt, IKM).

    An absent or empty salt is replaced by `digest_size` zero bytes.
    """
    salt = ensure_bytes(salt, "salt") if salt is not None else b""
    if not salt:
        salt = bytes(hash_function.digest_size)
    return compute_hmac(ikm, salt, hash_function)


def hkdf_expand(prk: BytesLike, info: Optional[BytesLike], length: int,
                hash_function: HashFunction = SHA512) -> bytes:
    """
    OKM = T(1) || T(2) || ... truncated to `length` bytes.

    Only as many blocks as needed are computed.

    Raises:
        InvalidLength: If `length` is not an int in [0, 255 * digest_size]
    """
    _check_length(length, hash_function)
    info = ensure_bytes(info, "info") if info is not None else b""

    okm = bytearray()
    t = b""
    counter = 1
    while len(okm) < length:
        t = compute_hmac(t + info + bytes([counter]), prk, hash_function)
        okm += t[:length - len(okm)]
        counter += 1
    return bytes(okm)


def hkdf(ikm: BytesLike, info: Optional[BytesLike] = b"", length: Optional[int] = None,
         salt: Optional[BytesLike] = None,
         hash_function: HashFunction = SHA512) -> bytes:
    """
    Derive `length` bytes of output keying material.

    Args:
        ikm: Input keying material
        info: Context-specific info; None or absent means empty
        length: Output length in bytes, at most 255 * digest_size;
            required, usually passed by keyword when info is omitted
        salt: Optional salt; None or empty means a zero block
        hash_function: Underlying hash; defaults to SHA-512

    Returns:
        bytes: Exactly `length` bytes

    Raises:
        InvalidLength: If `length` is missing or out of range
        InvalidInputType: If ikm, info or salt is not a byte buffer
    """
    _check_length(length, hash_function)
    prk = hkdf_extract(ikm, salt, hash_function)
    return hkdf_expand(prk, info, length, hash_function)


def _check_length(length: int, hash_function: HashFunction) -> None:
    limit = MAX_BLOCKS * hash_function.digest_size
    if isinstance(length, bool) or not isinstance(length, int) or not 0 <= length <= limit:
        raise InvalidLength(f"invalid extract length: must be an integer from 0 to {limit}")
