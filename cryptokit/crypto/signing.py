"""
Ed25519 Key Derivation and Detached Signatures for cryptokit

Signing keypairs are derived deterministically from a caller-supplied
seed via HKDF-SHA512; the signature scheme itself is libsodium's, reached
through PyNaCl.

Usage:
    seed = generate_seed()
    pair = derive_signing_keys_from_seed(seed, salt)
    sig = sign_detached(b"message", pair.secret_key)
    assert verify_detached(b"message", sig, pair.public_key)
"""

import logging
from dataclasses import dataclass
from typing import Optional

import nacl.bindings
from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from cryptokit.config import DEFAULT_SEED_SIZE
from cryptokit.crypto.encoding import BytesLike, bytes_to_hex, ensure_bytes
from cryptokit.crypto.kdf import hkdf
from cryptokit.crypto.primitives import random_bytes
from cryptokit.errors import InvalidLength

logger = logging.getLogger(__name__)

SEED_LENGTH = nacl.bindings.crypto_sign_SEEDBYTES
PUBLIC_KEY_LENGTH = nacl.bindings.crypto_sign_PUBLICKEYBYTES
SECRET_KEY_LENGTH = nacl.bindings.crypto_sign_SECRETKEYBYTES
SIGNATURE_LENGTH = nacl.bindings.crypto_sign_BYTES

# HKDF info byte for the Ed25519 signing key
SIGNING_KEY_INFO = b"\x00"


@dataclass(frozen=True)
class SigningKeyPair:
    """Ed25519 keypair; secret_key is libsodium's 64-byte seed || public key."""
    secret_key: bytes
    public_key: bytes

    @property
    def secret_key_hex(self) -> str:
        return bytes_to_hex(self.secret_key)

    @property
    def public_key_hex(self) -> str:
        return bytes_to_hex(self.public_key)

    def __repr__(self) -> str:
        return f"SigningKeyPair(public_key={self.public_key_hex!r})"


def generate_seed(size: int = DEFAULT_SEED_SIZE) -> bytes:
    """
    Generate a random seed.

    Args:
        size: Seed size in bytes (default: 32)

    Returns:
        bytes: Cryptographically secure random seed
    """
    return random_bytes(size)


def keypair_from_seed(seed: BytesLike) -> SigningKeyPair:
    """Expand a 32-byte Ed25519 seed into a keypair."""
    seed = ensure_bytes(seed, "seed")
    if len(seed) != SEED_LENGTH:
        raise InvalidLength(f"Ed25519 seed must be exactly {SEED_LENGTH} bytes")
    public_key, secret_key = nacl.bindings.crypto_sign_seed_keypair(seed)
    return SigningKeyPair(secret_key=secret_key, public_key=public_key)


def derive_signing_keys_from_seed(seed: BytesLike,
                                  salt: Optional[BytesLike] = None) -> SigningKeyPair:
    """
    Derive an Ed25519 keypair from a random seed and optional HKDF salt.

    The same (seed, salt) always yields the same keypair; no randomness
    is drawn here.

    Args:
        seed: Random seed, recommended length 32
        salt: Random salt, recommended length 64

    Returns:
        SigningKeyPair: Derived keypair

    Raises:
        InvalidInputType: If seed (or salt) is not a byte buffer
    """
    seed = ensure_bytes(seed, "seed")
    output = hkdf(seed, SIGNING_KEY_INFO, SEED_LENGTH, salt)
    return keypair_from_seed(output)


def sign_detached(message: BytesLike, secret_key: BytesLike) -> bytes:
    """
    Sign a message and return only the 64-byte signature.

    Args:
        message: Data to sign
        secret_key: 64-byte secret key, or a bare 32-byte seed

    Raises:
        InvalidLength: If secret_key is neither 32 nor 64 bytes
    """
    message = ensure_bytes(message, "message")
    secret_key = ensure_bytes(secret_key, "secret_key")

    if len(secret_key) == SEED_LENGTH:
        secret_key = keypair_from_seed(secret_key).secret_key
    if len(secret_key) != SECRET_KEY_LENGTH:
        raise InvalidLength(
            f"secret key must be {SECRET_KEY_LENGTH} bytes (or a {SEED_LENGTH}-byte seed)")

    signed = nacl.bindings.crypto_sign(message, secret_key)
    return signed[:SIGNATURE_LENGTH]


def verify_detached(message: BytesLike, signature: BytesLike,
                    public_key: BytesLike) -> bool:
    """
    Verify a detached signature.

    Returns:
        bool: True if valid, False if the signature does not match
            (including a signature of the wrong size)

    Raises:
        InvalidLength: If public_key is not 32 bytes
    """
    message = ensure_bytes(message, "message")
    signature = ensure_bytes(signature, "signature")
    public_key = ensure_bytes(public_key, "public_key")

    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise InvalidLength(f"public key must be exactly {PUBLIC_KEY_LENGTH} bytes")
    if len(signature) != SIGNATURE_LENGTH:
        logger.debug("Rejecting signature of %d bytes", len(signature))
        return False

    try:
        VerifyKey(public_key).verify(message, signature)
        return True
    except BadSignatureError:
        return False


if __name__ == '__main__':
    print("=== Ed25519 Key Derivation Test ===")

    seed = generate_seed()
    salt = generate_seed(64)
    pair = derive_signing_keys_from_seed(seed, salt)
    print(f"Public Key: {pair.public_key_hex}")
    print(f"Deterministic: {pair == derive_signing_keys_from_seed(seed, salt)}")

    sig = sign_detached(b"hello", pair.secret_key)
    print(f"Signature Valid: {verify_detached(b'hello', sig, pair.public_key)}")
    print(f"Tampered Valid: {verify_detached(b'hellO', sig, pair.public_key)}")
