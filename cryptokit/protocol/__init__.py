"""
cryptokit - Protocol Module

- Signed header descriptors (Ed25519, draft-cavage style)
- Passphrase encoding of 32-byte keys through pluggable word codecs
"""

from .http_signature import (
    HeaderSigner,
    HeaderVerifier,
    SignatureDescriptor,
    VerificationResult,
    sign_headers,
    verify_headers,
)
from .passphrase import Bip39Codec, FunctionCodec, PassphraseCodec, WordCodec

__all__ = [
    'HeaderSigner',
    'HeaderVerifier',
    'SignatureDescriptor',
    'VerificationResult',
    'sign_headers',
    'verify_headers',
    'Bip39Codec',
    'FunctionCodec',
    'PassphraseCodec',
    'WordCodec'
]
