"""
Exception hierarchy shared by the cipher, envelope and transport modules
"""

__all__ = [
    "CryptoError",
    "InvalidKeyLengthError",
    "RandomSourceError",
    "LengthHeaderOverflowError",
    "AuthenticationError",
    "LengthParseError",
    "LengthOutOfRangeError",
    "MalformedContainerError",
    "CodecError",
    "DeserializeError",
]


class CryptoError(Exception):
    """Base exception for every failure raised by this library."""


class InvalidKeyLengthError(CryptoError, ValueError):
    """Raised when the AES primitive rejects the key size."""


class RandomSourceError(CryptoError):
    """Raised when the OS random source cannot produce an IV."""


class LengthHeaderOverflowError(CryptoError):
    """Raised when the plaintext length does not fit the length block."""


class AuthenticationError(CryptoError):
    """Raised on a tag mismatch or a missing tag."""


class LengthParseError(CryptoError):
    """Raised when the decrypted length header is not a decimal integer."""


class LengthOutOfRangeError(CryptoError):
    """Raised when the decrypted length exceeds the decrypted data."""


class MalformedContainerError(CryptoError):
    """Raised when an authentic container has unusable field sizes."""


class CodecError(CryptoError, ValueError):
    """Raised by transport codecs on input they cannot decode."""


class DeserializeError(CryptoError):
    """Raised when bytes do not hold a valid serialized container."""
