"""
cryptokit Errors

Every error also derives from the builtin exception a caller would
expect (TypeError, ValueError, ...), so `except ValueError` keeps working.
"""


class CryptoKitError(Exception):
    """Base class for all cryptokit errors."""


class InvalidInputType(CryptoKitError, TypeError):
    """An input has the wrong shape (e.g. str where bytes are required)."""


class InvalidLength(CryptoKitError, ValueError):
    """A length parameter or key size is out of range."""


class InvalidBound(InvalidLength):
    """A sampler bound is out of range."""


class InvalidFormat(CryptoKitError, ValueError):
    """Text input could not be decoded."""


class MalformedDescriptor(InvalidFormat):
    """A signature descriptor is missing a required field."""


class MissingField(CryptoKitError, ValueError):
    """A required value was not supplied."""


class MissingKey(MissingField):
    pass


class MissingKeyId(MissingField):
    pass


class MissingHeaders(MissingField):
    pass


class MissingPublicKey(MissingField):
    pass


class MissingSignatureHeader(MissingField):
    pass


class UnsupportedAlgorithm(CryptoKitError, ValueError):
    pass


class UnrecognizedPhraseLength(CryptoKitError, ValueError):
    """A passphrase word count matches no registered codec."""


class RandomSourceError(CryptoKitError, RuntimeError):
    """The random source kept producing rejected samples."""
