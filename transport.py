"""
Transport codecs: byte-to-byte wrappers applied to a serialized envelope
"""

import base64
import binascii

from errors import CodecError

# Identity codec
def no_encoding(data):
    return bytes(data)

def no_decoding(data):
    return bytes(data)

# Lowercase hex, doubles the size
def hex_encoding(data):
    return binascii.hexlify(data)

def hex_decoding(data):
    try:
        return binascii.unhexlify(data)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise CodecError(f"invalid hex input: {exc}") from exc

# Standard alphabet with "=" padding
def base64_encoding(data):
    return base64.b64encode(data)

def base64_decoding(data):
    try:
        if isinstance(data, str):
            data = data.encode("ascii")
        data = bytes(data)
        # b64decode ignores surplus "=" and anything after it
        unpadded = data.rstrip(b"=")
        if len(data) % 4 != 0 or len(data) - len(unpadded) > 2 or b"=" in unpadded:
            raise binascii.Error("Incorrect padding")
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise CodecError(f"invalid base64 input: {exc}") from exc


# (encode, decode) pairs by name
CODECS = {
    "none": (no_encoding, no_decoding),
    "hex": (hex_encoding, hex_decoding),
    "base64": (base64_encoding, base64_decoding),
}

def get_codec(name):
    try:
        return CODECS[name]
    except KeyError:
        raise CodecError(f"unknown codec: {name!r}") from None
