"""
cryptokit - Crypto Module

Provides the cryptographic primitives:
- HMAC / HKDF over SHA-512 (RFC 4231 / RFC 5869)
- Ed25519 key derivation from a seed, detached signatures
- Hex encoding
- Bias-free uniform sampling of integers and of reals in [0, 1]
"""

from .encoding import bytes_to_hex, hex_to_bytes
from .kdf import hkdf, hkdf_expand, hkdf_extract
from .hmac import compute_hmac, verify_hmac
from .primitives import SHA512, HashFunction
from .random import UniformSampler, random_int, uniform, uniform_01
from .signing import (
    SigningKeyPair,
    derive_signing_keys_from_seed,
    generate_seed,
    sign_detached,
    verify_detached,
)

__all__ = [
    'bytes_to_hex',
    'hex_to_bytes',
    'hkdf',
    'hkdf_expand',
    'hkdf_extract',
    'compute_hmac',
    'verify_hmac',
    'SHA512',
    'HashFunction',
    'UniformSampler',
    'random_int',
    'uniform',
    'uniform_01',
    'SigningKeyPair',
    'derive_signing_keys_from_seed',
    'generate_seed',
    'sign_detached',
    'verify_detached'
]
