from typing import Optional

from .exceptions import InvalidParameter
from .providers import HashlibHmacProvider, HmacProvider, normalize_algorithm

DIGITS = (6, 8)

MAX_COUNTER = 2**64 - 1


def validate_digits(digits: int) -> int:
    if digits not in DIGITS:
        raise InvalidParameter("Digits may only be 6 or 8")
    return digits


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret
    """
    if i < 0 or i > MAX_COUNTER:
        raise InvalidParameter("counter must be an unsigned 64-bit integer")
    result = bytearray()
    while i != 0:
        result.append(i & 0xFF)
        i >>= 8
    return bytes(bytearray(reversed(result)).rjust(padding, b"\0"))


def truncate(digest: bytes, digits: int) -> str:
    """
    Dynamic truncation (RFC 4226 section 5.3).

    The low nibble of the final digest byte selects four bytes, which form
    a 31-bit integer reduced modulo ``10**digits``.

    :param digest: HMAC output, at least 20 bytes
    :param digits: length of the code
    :returns: code left-padded with zeros to ``digits`` characters
    """
    hmac_hash = bytearray(digest)
    offset = hmac_hash[-1] & 0xF
    code = (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )
    return str(code % 10**digits).rjust(digits, "0")


async def generate_otp(
    algorithm: str,
    key: bytes,
    counter: int,
    digits: int = 6,
    hmac_provider: Optional[HmacProvider] = None,
) -> str:
    """
    Computes the HOTP value for ``counter``.

    Arguments are checked before the digest is requested.

    :param algorithm: sha1, sha256 or sha512
    :param key: raw key bytes
    :param counter: HMAC counter, an unsigned 64-bit integer
    :param digits: 6 or 8
    :param hmac_provider: HMAC backend, defaults to the standard library one
    :returns: OTP
    """
    # Implements RFC 4226
    algorithm = normalize_algorithm(algorithm)
    validate_digits(digits)
    if not key:
        raise InvalidParameter("key must not be empty")
    message = int_to_bytestring(counter)

    if hmac_provider is None:
        hmac_provider = HashlibHmacProvider()
    digest = await hmac_provider.hmac(algorithm, bytes(key), message)
    return truncate(digest, digits)


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(
        self,
        key: bytes,
        digits: int = 6,
        algorithm: str = "sha1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        hmac_provider: Optional[HmacProvider] = None,
    ) -> None:
        if not key:
            raise InvalidParameter("key must not be empty")
        self.key = bytes(key)
        self.digits = validate_digits(digits)
        self.algorithm = normalize_algorithm(algorithm)
        self.name = name
        self.issuer = issuer
        self.hmac_provider = hmac_provider or HashlibHmacProvider()

    async def generate_otp(self, counter: int) -> str:
        """
        :param counter: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        return await generate_otp(self.algorithm, self.key, counter, self.digits, self.hmac_provider)
