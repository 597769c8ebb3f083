"""
Authenticated encryption of raw bytes: AES-CBC with an encrypt-then-MAC
HMAC-SHA256 tag and an encrypted plaintext-length block
"""

import logging
import os
from dataclasses import replace

from cryptography.hazmat.primitives import constant_time, hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from container import BLOCK_SIZE, KEY_SIZES, Container
from errors import (
    AuthenticationError,
    InvalidKeyLengthError,
    LengthHeaderOverflowError,
    LengthOutOfRangeError,
    LengthParseError,
    MalformedContainerError,
    RandomSourceError,
)

logger = logging.getLogger(__name__)


# AES primitive for the key; the library's complaint is surfaced as ours
def _aes(key):
    try:
        algorithm = algorithms.AES(key)
    except ValueError as exc:
        raise InvalidKeyLengthError(str(exc)) from exc
    # AES() also takes 512-bit XTS keys, which CBC cannot use
    if len(key) not in KEY_SIZES:
        raise InvalidKeyLengthError(f"Invalid key size ({len(key) * 8}) for AES-CBC.")
    return algorithm

# One CBC pass over block-aligned input
def _cbc_encrypt(algorithm, iv, data):
    encryptor = Cipher(algorithm, modes.CBC(iv)).encryptor()
    return encryptor.update(data) + encryptor.finalize()

def _cbc_decrypt(algorithm, iv, data):
    decryptor = Cipher(algorithm, modes.CBC(iv)).decryptor()
    return decryptor.update(data) + decryptor.finalize()

# HMAC-SHA256 over the given parts, in order
def _tag(key, *parts):
    h = hmac.HMAC(key, hashes.SHA256())
    for part in parts:
        h.update(part)
    return h.finalize()

def _full_tag(container, key):
    return _tag(key, container.iv, container.length, container.data)

def _tags_equal(expected, actual):
    return constant_time.bytes_eq(expected, bytes(actual))


# Decimal size, left-aligned in one block and filled with 0x00
def _length_header(size):
    digits = str(size).encode("ascii")
    if len(digits) > BLOCK_SIZE:
        raise LengthHeaderOverflowError(
            f"plaintext length {size} does not fit in a {BLOCK_SIZE}-byte header"
        )
    return digits.ljust(BLOCK_SIZE, b"\x00")

def _parse_length_header(header):
    # every NUL is dropped, not only the trailing fill
    digits = header.replace(b"\x00", b"")
    if not digits.isdigit():
        raise LengthParseError("decrypted length header is not a decimal integer")
    return int(digits)

def _zero_pad(data):
    remainder = len(data) % BLOCK_SIZE
    if remainder == 0:
        return data
    return data + b"\x00" * (BLOCK_SIZE - remainder)

def _random_iv():
    try:
        return os.urandom(BLOCK_SIZE)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(f"could not read IV from the OS random source: {exc}") from exc


# Returns a copy of the container signed over iv, length and data
def sign_container(container, key):
    return replace(container, hmac=_full_tag(container, key))

# Returns a copy of the container signed over data only (see verify_data)
def sign_data(container, key):
    return replace(container, hmac=_tag(key, container.data))


# Encrypt length block and zero-padded data as two CBC sessions under one IV, then sign
def encrypt(plaintext, key):
    plaintext = bytes(plaintext)
    algorithm = _aes(key)
    header = _length_header(len(plaintext))
    padded = _zero_pad(plaintext)
    iv = _random_iv()

    container = Container(
        iv=iv,
        length=_cbc_encrypt(algorithm, iv, header),
        data=_cbc_encrypt(algorithm, iv, padded),
    )
    logger.debug("Encrypted %d bytes into %d data bytes", len(plaintext), len(padded))
    return sign_container(container, key)


# Check the tag first, in constant time, then decrypt and trim to the stored length
def decrypt(container, key):
    if not _tags_equal(_full_tag(container, key), container.hmac):
        logger.debug("Rejected container: HMAC mismatch")
        raise AuthenticationError("HMAC mismatch")

    algorithm = _aes(key)
    if len(container.iv) != BLOCK_SIZE:
        raise MalformedContainerError(f"IV must be {BLOCK_SIZE} bytes, got {len(container.iv)}")
    if len(container.length) != BLOCK_SIZE:
        raise MalformedContainerError(
            f"length block must be {BLOCK_SIZE} bytes, got {len(container.length)}"
        )
    if len(container.data) % BLOCK_SIZE != 0:
        raise MalformedContainerError(
            f"data must be a multiple of {BLOCK_SIZE} bytes, got {len(container.data)}"
        )

    header = _cbc_decrypt(algorithm, container.iv, container.length)
    data = _cbc_decrypt(algorithm, container.iv, container.data)

    original_length = _parse_length_header(header)
    if original_length > len(data):
        raise LengthOutOfRangeError(
            f"length header {original_length} exceeds {len(data)} decrypted bytes"
        )
    logger.debug("Decrypted %d data bytes into %d bytes", len(data), original_length)
    return data[:original_length]


# Tag over data only; containers from encrypt() need verify_container()
def verify_data(container, key):
    if not container.is_signed():
        raise AuthenticationError("HMAC missing")
    _aes(key)
    return _tags_equal(_tag(key, container.data), container.hmac)


# Boolean form of the check decrypt() performs first
def verify_container(container, key):
    if not container.is_signed():
        raise AuthenticationError("HMAC missing")
    _aes(key)
    return _tags_equal(_full_tag(container, key), container.hmac)
