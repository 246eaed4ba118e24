import base64
import binascii
import logging
import re
from typing import Sequence

from .compat import random
from .exceptions import InvalidEncoding, InvalidParameter

logger = logging.getLogger(__name__)

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
HEX_ALPHABET = "ABCDEF0123456789"

KEY_TYPES = ("base32", "hex", "base64")

# key length class in bits -> raw key bytes
KEY_BYTES = {80: 10, 160: 20}

_HEX_RE = re.compile(r"\A[0-9a-fA-F]*\Z")


def encode_base32(data: bytes) -> str:
    # The otpauth scheme does not use base32 padding.
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode_base32(text: str) -> bytes:
    """
    Decodes RFC 4648 base32 text into raw bytes.

    Trailing ``=`` padding is stripped and the input is uppercased first.
    Each character contributes 5 bits; whole bytes are emitted as they
    complete and any leftover bits (fewer than 8) are dropped.

    :param text: base32 text, padded or not
    :returns: decoded bytes
    :raises InvalidEncoding: on a character outside ``A-Z2-7``
    """
    if not text.isascii():
        raise InvalidEncoding("base32 string must be ASCII")
    buffer = 0
    bits = 0
    result = bytearray()
    for char in text.rstrip("=").upper():
        value = BASE32_ALPHABET.find(char)
        if value == -1:
            raise InvalidEncoding("Invalid character in base32 string: {!r}".format(char))
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            result.append((buffer >> bits) & 0xFF)
    return bytes(result)


def encode_hex(data: bytes) -> str:
    return bytes(data).hex()


def decode_hex(text: str) -> bytes:
    if len(text) % 2 != 0:
        raise InvalidEncoding("Hex string must have an even length")
    if not _HEX_RE.match(text):
        raise InvalidEncoding("Hex string contains non-hex characters")
    return bytes.fromhex(text)


def encode_base64(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_base64(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise InvalidEncoding("Malformed base64 string") from e


def detect_key_type(secret: str) -> str:
    """
    Guesses the encoding of a secret from its length.

    16 or 32 characters are base32, 20 or 40 are hex, everything else is
    base64. This is lossy (a 40 character base32 secret reads as hex), so
    callers should pass an explicit key type wherever they know it.
    """
    length = len(secret)
    if length in (16, 32):
        return "base32"
    if length in (20, 40):
        return "hex"
    return "base64"


def decode_key(key_type: str, secret: str) -> bytes:
    """
    Decodes a textual secret into raw key bytes.

    :param key_type: one of ``base32``, ``hex`` or ``base64``
    :param secret: the encoded secret
    :returns: key bytes, never empty
    """
    if key_type == "base32":
        key = decode_base32(secret)
    elif key_type == "hex":
        key = decode_hex(secret)
    elif key_type == "base64":
        key = decode_base64(secret)
    else:
        raise InvalidParameter("key type must be one of {}".format(", ".join(KEY_TYPES)))

    if not key:
        raise InvalidParameter("key must not be empty")
    return key


def generate_random_key(bits: int, random_provider) -> str:
    """
    Draws a fresh key from the CSPRNG and returns it base32 encoded.

    :param bits: key length class, 80 or 160
    :param random_provider: object exposing ``random_bytes(n)``
    :returns: 16 or 32 base32 characters
    """
    if bits not in KEY_BYTES:
        raise InvalidParameter("bits must be 80 or 160")
    return encode_base32(random_provider.random_bytes(KEY_BYTES[bits]))


def random_base32(length: int = 32, chars: Sequence[str] = BASE32_ALPHABET) -> str:
    # Lengths not divisible by 8 decode with slack bits; some third-party
    # tools mishandle such secrets.
    if length < 32:
        raise InvalidParameter("Secrets should be at least 160 bits")

    return "".join(random.choice(chars) for _ in range(length))


def random_hex(length: int = 40, chars: Sequence[str] = HEX_ALPHABET) -> str:
    if length < 40:
        raise InvalidParameter("Secrets should be at least 160 bits")
    return "".join(random.choice(chars) for _ in range(length))
