"""
Envelope layer: canonical binary form of a Container, wrapped in a transport
codec, plus one-shot encrypt/serialize and deserialize/decrypt helpers.

Wire layout (integers big-endian):

    "CTK" | version (1 byte) | 4 x [ tag (1 byte) | size (4 bytes) | bytes ]

Fields are always written as iv, length, data, hmac (tags 1-4), empty ones
with size 0.
"""

import logging
import struct

from aead import decrypt, encrypt
from container import Container
from errors import DeserializeError
from transport import no_decoding, no_encoding

logger = logging.getLogger(__name__)

MAGIC = b"CTK"
VERSION = 1

_HEADER = struct.Struct(">3sB")
_FIELD = struct.Struct(">BI")

# (tag, attribute) in wire order
_FIELDS = (
    (1, "iv"),
    (2, "length"),
    (3, "data"),
    (4, "hmac"),
)


def _pack(container):
    parts = [_HEADER.pack(MAGIC, VERSION)]
    for tag, name in _FIELDS:
        value = bytes(getattr(container, name))
        parts.append(_FIELD.pack(tag, len(value)))
        parts.append(value)
    return b"".join(parts)

def _unpack(raw):
    if len(raw) < _HEADER.size:
        raise DeserializeError("envelope too short")
    magic, version = _HEADER.unpack_from(raw, 0)
    if magic != MAGIC:
        raise DeserializeError("not a container envelope")
    if version != VERSION:
        raise DeserializeError(f"unsupported envelope version {version}")

    offset = _HEADER.size
    values = {}
    for expected_tag, name in _FIELDS:
        if len(raw) - offset < _FIELD.size:
            raise DeserializeError(f"envelope truncated before field {name!r}")
        tag, size = _FIELD.unpack_from(raw, offset)
        if tag != expected_tag:
            raise DeserializeError(f"unexpected field tag {tag}, wanted {expected_tag}")
        offset += _FIELD.size
        if len(raw) - offset < size:
            raise DeserializeError(f"envelope truncated inside field {name!r}")
        values[name] = raw[offset:offset + size]
        offset += size

    if offset != len(raw):
        raise DeserializeError(f"{len(raw) - offset} trailing bytes after envelope")
    return Container(**values)


# Serialize the container and pass it through the transport encoder
def serialize_container(container, encode=no_encoding):
    return encode(_pack(container))

# Undo the transport encoding, then parse the envelope
def deserialize_container(blob, decode=no_decoding):
    raw = bytes(decode(blob))
    return _unpack(raw)


# Encrypt plaintext and return the encoded envelope
def encrypt_object(plaintext, key, encode=no_encoding):
    container = encrypt(plaintext, key)
    blob = serialize_container(container, encode)
    logger.debug("Sealed %d plaintext bytes into a %d-byte envelope", len(plaintext), len(blob))
    return blob

# Decode and parse an envelope, then authenticate and decrypt it
def decrypt_object(blob, key, decode=no_decoding):
    container = deserialize_container(blob, decode)
    return decrypt(container, key)
