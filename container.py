"""
Container: the four-field authenticated ciphertext envelope
"""

from dataclasses import dataclass

# AES block size and HMAC-SHA256 output size, in bytes
BLOCK_SIZE = 16
TAG_SIZE = 32

# AES-128/192/256
KEY_SIZES = (16, 24, 32)


@dataclass(frozen=True)
class Container:
    """Signed block holding the IV, the encrypted length, the data and the HMAC.

    The length is the size of the plaintext before padding, written as a
    0x00-filled decimal string and encrypted into one block. The data is the
    plaintext zero-padded to the block size and CBC-encrypted. The HMAC
    covers iv, length and data under the encryption key.
    """

    iv: bytes = b""
    length: bytes = b""
    data: bytes = b""
    hmac: bytes = b""

    def is_signed(self):
        return len(self.hmac) > 0
