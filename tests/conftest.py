"""
Shared fixtures for the cryptokit test suite.
"""

import pytest


class ByteSource:
    """Deterministic stand-in for a random-byte source."""

    def __init__(self, data: bytes = b"", fill=None):
        self._data = bytes(data)
        self._pos = 0
        self._fill = fill
        self.calls = []

    def __call__(self, n: int) -> bytes:
        self.calls.append(n)
        chunk = self._data[self._pos:self._pos + n]
        self._pos += len(chunk)
        if len(chunk) < n:
            if self._fill is None:
                raise AssertionError("byte source exhausted")
            chunk += bytes([self._fill]) * (n - len(chunk))
        return chunk


@pytest.fixture
def byte_source():
    """Factory: byte_source(data, fill=None) -> ByteSource."""
    return ByteSource


@pytest.fixture
def signing_pair():
    """Fixed Ed25519 keypair (libsodium 64-byte secret key layout)."""
    secret_key_hex = (
        "9f8362f87a484a954e6e740c5b4c0e84229139a20aa8ab56ff66586f6a7d29c5"
        "26b40b8f93fff3d897112f7ebc582b232dbd72517d082fe83cfb30ddce43d1bb"
    )
    secret_key = bytes.fromhex(secret_key_hex)
    return secret_key, secret_key[32:]
