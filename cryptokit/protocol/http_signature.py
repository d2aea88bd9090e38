"""
Header Signature Module for cryptokit

Signs and verifies an ordered set of message headers with Ed25519, in the
style of draft-cavage-http-signatures-12.

Canonical message: one "name: value" line per header, in the order the
caller supplied them, joined by "\\n" (no trailing newline).

Descriptor wire format:
    keyId="<id>",algorithm="ed25519",headers="<name1 name2>",signature="<base64>"

Usage:
    descriptor = sign_headers("my-key", secret_key_hex, {"foo": "bar"})
    result = verify_headers(public_key_hex, {"foo": "bar", "signature": descriptor})
    if result.verified:
        ...
"""

import base64
import binascii
import logging
import re
from typing import List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from cryptokit.config import SIGNATURE_ALGORITHM
from cryptokit.crypto.encoding import BytesLike, to_bytes
from cryptokit.crypto.signing import sign_detached, verify_detached
from cryptokit.errors import (
    MalformedDescriptor,
    MissingHeaders,
    MissingKey,
    MissingKeyId,
    MissingPublicKey,
    MissingSignatureHeader,
    UnsupportedAlgorithm,
)

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "signature"

_NON_BASE64_RE = re.compile(r"[^A-Za-z0-9+/]")

HeaderValue = Union[str, Sequence[str]]
HeaderLike = Mapping[str, HeaderValue]
KeyLike = Union[BytesLike, str]


# ============================================================================
# Records
# ============================================================================

class SignatureDescriptor(BaseModel):
    """Parsed or freshly built signature header."""
    model_config = ConfigDict(populate_by_name=True)

    key_id: str = Field(..., alias="keyId")
    algorithm: str = SIGNATURE_ALGORITHM
    headers: List[str]
    signature: str = Field(..., description="Base64 Ed25519 signature")

    def to_header(self) -> str:
        """Serialize to the descriptor wire format."""
        return (
            f'keyId="{self.key_id}",'
            f'algorithm="{self.algorithm}",'
            f'headers="{" ".join(self.headers)}",'
            f'signature="{self.signature}"'
        )

    @classmethod
    def parse(cls, header: str) -> "SignatureDescriptor":
        """
        Parse a descriptor string.

        Fields are split on commas and then on the first '='; quotes are
        stripped and empty values ignored.

        Raises:
            MalformedDescriptor: If algorithm, signature, keyId or headers
                is missing
            UnsupportedAlgorithm: If the algorithm is not ed25519
        """
        fields = {}
        for part in header.split(","):
            name, sep, value = part.partition("=")
            if not sep:
                continue
            value = value.replace('"', "")
            if value:
                fields[name] = value

        if "algorithm" not in fields:
            raise MalformedDescriptor("no algorithm was parsed")
        if fields["algorithm"] != SIGNATURE_ALGORITHM:
            raise UnsupportedAlgorithm(f"unsupported algorithm, use {SIGNATURE_ALGORITHM}")
        if "signature" not in fields:
            raise MalformedDescriptor("no signature was parsed")
        if "keyId" not in fields:
            raise MalformedDescriptor("no keyId was parsed")
        if "headers" not in fields:
            raise MalformedDescriptor("no headers were parsed")

        return cls(
            key_id=fields["keyId"],
            algorithm=fields["algorithm"],
            headers=fields["headers"].split(" "),
            signature=fields["signature"],
        )


class VerificationResult(SignatureDescriptor):
    """Descriptor fields plus the outcome of verification."""
    verified: bool


# ============================================================================
# Canonical message
# ============================================================================

def _render_value(value: HeaderValue) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def canonical_message(headers: HeaderLike, names: Optional[Sequence[str]] = None) -> str:
    """
    Build the signed message.

    Args:
        headers: Header map
        names: Header names to include, in order (default: all of `headers`)

    Raises:
        KeyError: If a name is not present in `headers`
    """
    if names is None:
        names = list(headers)
    return "\n".join(f"{name}: {_render_value(headers[name])}" for name in names)


def _decode_signature(value: str) -> Optional[bytes]:
    """
    Decode base64 leniently: URL-safe letters are accepted, padding may
    be missing and stray characters are dropped. None if nothing sane
    remains.
    """
    value = _NON_BASE64_RE.sub("", value.replace("-", "+").replace("_", "/"))
    try:
        return base64.b64decode(value + "=" * (-len(value) % 4))
    except binascii.Error:
        return None


# ============================================================================
# Signer / Verifier
# ============================================================================

class HeaderSigner:
    """
    Signs header maps with one Ed25519 key.
    """

    def __init__(self, key_id: str, secret_key: KeyLike):
        """
        Args:
            key_id: Opaque id the verifier uses to look up the public key
            secret_key: 64-byte secret key (bytes or hex)
        """
        if not secret_key:
            raise MissingKey("secret key is required")
        if not key_id:
            raise MissingKeyId("key id is required")
        self._key_id = key_id
        self._secret_key = to_bytes(secret_key, "secret_key")

    @property
    def key_id(self) -> str:
        return self._key_id

    def sign_descriptor(self, headers: HeaderLike) -> SignatureDescriptor:
        """Sign `headers` and return the descriptor record."""
        if not headers:
            raise MissingHeaders("headers are required")

        names = list(headers)
        message = canonical_message(headers, names)
        signature = sign_detached(message.encode("utf-8"), self._secret_key)

        return SignatureDescriptor(
            key_id=self._key_id,
            headers=names,
            signature=base64.b64encode(signature).decode("utf-8"),
        )

    def sign(self, headers: HeaderLike) -> str:
        """
        Sign `headers`.

        Returns:
            str: Descriptor string, ready to send as the signature header
        """
        return self.sign_descriptor(headers).to_header()


class HeaderVerifier:
    """
    Verifies signed header maps against one Ed25519 public key.
    """

    def __init__(self, public_key: KeyLike):
        """
        Args:
            public_key: 32-byte public key (bytes or hex)
        """
        if not public_key:
            raise MissingPublicKey("public key is required")
        self._public_key = to_bytes(public_key, "public_key")

    def verify(self, headers: HeaderLike) -> VerificationResult:
        """
        Verify the descriptor carried in headers["signature"].

        Only the header names listed in the descriptor are checked, in
        the listed order. A listed header that is missing, a value that
        changed, or a signature that does not decode gives verified=False
        rather than an error.

        Raises:
            MissingSignatureHeader: If there is no signature header
            MalformedDescriptor: If the descriptor cannot be parsed
            UnsupportedAlgorithm: If the descriptor is not ed25519
        """
        header = headers.get(SIGNATURE_HEADER)
        if not header:
            raise MissingSignatureHeader("header signature is required")

        descriptor = SignatureDescriptor.parse(header)
        signature = _decode_signature(descriptor.signature)

        missing = [name for name in descriptor.headers if name not in headers]
        if signature is None:
            logger.debug("keyId=%s: signature is not base64", descriptor.key_id)
            verified = False
        elif missing:
            logger.debug("keyId=%s: signed headers missing: %s", descriptor.key_id, missing)
            verified = False
        else:
            message = canonical_message(headers, descriptor.headers)
            verified = verify_detached(message.encode("utf-8"), signature, self._public_key)

        if not verified:
            logger.debug("keyId=%s: signature did not verify", descriptor.key_id)

        return VerificationResult(**descriptor.model_dump(), verified=verified)


# Convenience functions
def sign_headers(key_id: str, secret_key: KeyLike, headers: HeaderLike) -> str:
    """Quick sign without creating a HeaderSigner."""
    return HeaderSigner(key_id, secret_key).sign(headers)


def verify_headers(public_key: KeyLike, headers: HeaderLike) -> VerificationResult:
    """Quick verify without creating a HeaderVerifier."""
    return HeaderVerifier(public_key).verify(headers)


if __name__ == '__main__':
    from cryptokit.crypto.signing import derive_signing_keys_from_seed, generate_seed

    print("=== Header Signature Test ===")

    pair = derive_signing_keys_from_seed(generate_seed())
    headers = {"foo": "bar", "fizz": "buzz"}

    descriptor = sign_headers("demo-key", pair.secret_key, headers)
    print(f"Signature Header: {descriptor}")

    result = verify_headers(pair.public_key, {**headers, "signature": descriptor})
    print(f"Verified: {result.verified}")

    result = verify_headers(pair.public_key, {"foo": "bar", "signature": descriptor})
    print(f"Missing Header Verified: {result.verified}")
