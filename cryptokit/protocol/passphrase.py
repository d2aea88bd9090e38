"""
Passphrase Module for cryptokit

Converts 32-byte keys to and from human-readable word lists. Word codecs
are injected; a phrase is routed back to its codec by word count
(24 words for bip39, 16 for niceware).

Usage:
    codec = PassphraseCodec([Bip39Codec(), niceware_codec])
    phrase = codec.from_bytes_or_hex(seed)                  # bip39 (default)
    phrase = codec.from_bytes_or_hex(seed, "niceware")
    seed = codec.to_bytes32(phrase)
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Union

from mnemonic import Mnemonic

from cryptokit import config
from cryptokit.crypto.encoding import BytesLike, bytes_to_hex, ensure_bytes, hex_to_bytes
from cryptokit.errors import InvalidInputType, UnrecognizedPhraseLength

logger = logging.getLogger(__name__)


class WordCodec(Protocol):
    """Anything that maps bytes to words and back."""
    name: str
    word_count: int  # words produced for a 32-byte payload

    def bytes_to_words(self, data: bytes) -> List[str]: ...
    def words_to_bytes(self, words: List[str]) -> bytes: ...


class Bip39Codec:
    """BIP-39 mnemonic codec backed by the `mnemonic` package."""

    name = "bip39"
    word_count = config.BIP39_32_BYTE_WORD_COUNT

    def __init__(self, language: str = config.BIP39_LANGUAGE):
        self._mnemonic = Mnemonic(language)

    def bytes_to_words(self, data: bytes) -> List[str]:
        return self._mnemonic.to_mnemonic(bytes(data)).split()

    def words_to_bytes(self, words: List[str]) -> bytes:
        return bytes(self._mnemonic.to_entropy(words))


@dataclass(frozen=True)
class FunctionCodec:
    """Adapts a pair of plain functions (e.g. a niceware library) to WordCodec."""
    name: str
    word_count: int
    encode: Callable[[bytes], List[str]]
    decode: Callable[[List[str]], bytes]

    def bytes_to_words(self, data: bytes) -> List[str]:
        return list(self.encode(data))

    def words_to_bytes(self, words: List[str]) -> bytes:
        return bytes(self.decode(words))


class PassphraseCodec:
    """
    Routes passphrases to the codec registered for their word count.
    """

    def __init__(self, codecs: Iterable[WordCodec], default: Optional[str] = None):
        """
        Args:
            codecs: Codecs to register; word counts must be distinct
            default: Name of the codec used for encoding when none is
                given (default: the first codec)
        """
        self._by_name: Dict[str, WordCodec] = {}
        self._by_count: Dict[int, WordCodec] = {}
        for codec in codecs:
            if codec.word_count in self._by_count:
                raise ValueError(
                    f"codecs {self._by_count[codec.word_count].name} and {codec.name} "
                    f"both use {codec.word_count} words")
            self._by_name[codec.name] = codec
            self._by_count[codec.word_count] = codec

        if not self._by_name:
            raise ValueError("at least one codec is required")
        self._default = default or next(iter(self._by_name))
        if self._default not in self._by_name:
            raise ValueError(f"unknown default codec: {self._default}")

    @property
    def word_counts(self) -> List[int]:
        return sorted(self._by_count)

    def codec(self, name: Optional[str] = None) -> WordCodec:
        name = name or self._default
        try:
            return self._by_name[name]
        except KeyError:
            raise ValueError(f"unknown passphrase codec: {name}") from None

    def from_bytes_or_hex(self, data: Union[BytesLike, str],
                          codec_name: Optional[str] = None) -> str:
        """
        Convert bytes (or their hex, without 0x) to a passphrase.

        Args:
            data: Bytes or hex string to convert
            codec_name: Codec to use (default: the default codec)

        Returns:
            str: Space-separated words
        """
        if isinstance(data, str):
            data = hex_to_bytes(data)
        else:
            data = ensure_bytes(data, "data")
        return " ".join(self.codec(codec_name).bytes_to_words(data))

    def _split(self, passphrase: str) -> List[str]:
        if not isinstance(passphrase, str):
            raise InvalidInputType("passphrase must be a string")
        return passphrase.split()

    def _codec_for(self, words: List[str]) -> WordCodec:
        codec = self._by_count.get(len(words))
        if codec is None:
            expected = " or ".join(str(c) for c in self.word_counts)
            raise UnrecognizedPhraseLength(
                f"Input words length {len(words)} is not {expected}.")
        logger.debug("Decoding %d-word passphrase with %s", len(words), codec.name)
        return codec

    def to_bytes32(self, passphrase: str) -> bytes:
        """
        Convert a 32-byte passphrase back to bytes, picking the codec by
        word count. Extra whitespace is ignored.

        Raises:
            UnrecognizedPhraseLength: If no codec uses that many words
        """
        words = self._split(passphrase)
        return self._codec_for(words).words_to_bytes(words)

    def to_hex32(self, passphrase: str) -> str:
        """Like to_bytes32, but returns hex."""
        return bytes_to_hex(self.to_bytes32(passphrase))
