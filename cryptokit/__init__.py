"""
cryptokit - Cryptographic Primitives Toolkit

HMAC/HKDF key derivation, unbiased random sampling and Ed25519 header
signatures on top of libsodium (PyNaCl).
"""

from .config import DEFAULT_SEED_SIZE
from .crypto import (
    bytes_to_hex,
    compute_hmac,
    derive_signing_keys_from_seed,
    generate_seed,
    hex_to_bytes,
    hkdf,
    random_int,
    uniform,
    uniform_01,
)
from .protocol import sign_headers, verify_headers

__all__ = [
    'DEFAULT_SEED_SIZE',
    'bytes_to_hex',
    'compute_hmac',
    'derive_signing_keys_from_seed',
    'generate_seed',
    'hex_to_bytes',
    'hkdf',
    'random_int',
    'uniform',
    'uniform_01',
    'sign_headers',
    'verify_headers'
]

__version__ = '1.0.0'
