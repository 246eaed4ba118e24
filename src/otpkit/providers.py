import asyncio
import hashlib
import hmac
import secrets
from typing import Any, Dict

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from .exceptions import UnsupportedAlgorithm

ALGORITHMS: Dict[str, Any] = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
    "sha512": hashlib.sha512,
}

_CRYPTOGRAPHY_HASHES = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha512": hashes.SHA512,
}


def normalize_algorithm(name: str) -> str:
    """
    Returns the lowercase algorithm tag for ``name``.

    Accepts ``SHA1``, ``sha1`` and ``SHA-1`` spellings alike.
    """
    tag = str(name).replace("-", "").lower()
    if tag not in ALGORITHMS:
        raise UnsupportedAlgorithm("Invalid value for algorithm, must be SHA1, SHA256 or SHA512")
    return tag


class HmacProvider(object):
    """
    Keyed-hash capability used by the OTP algorithm.

    Every backend exposes the same awaitable call so the truncation logic
    is written once, whichever environment computes the digest.
    """

    async def hmac(self, algorithm: str, key: bytes, message: bytes) -> bytes:
        raise NotImplementedError


class HashlibHmacProvider(HmacProvider):
    """
    Native backend: the standard library ``hmac`` module, computed inline.
    """

    async def hmac(self, algorithm: str, key: bytes, message: bytes) -> bytes:
        return hmac.new(key, message, ALGORITHMS[normalize_algorithm(algorithm)]).digest()


class CryptographyHmacProvider(HmacProvider):
    """
    Offloaded backend built on ``cryptography``.

    The primitive runs in the event loop's default executor, the way a
    sandboxed crypto API hands back a pending result.
    """

    def __init__(self, executor: Any = None) -> None:
        self.executor = executor

    @staticmethod
    def _sign(algorithm: str, key: bytes, message: bytes) -> bytes:
        h = crypto_hmac.HMAC(key, _CRYPTOGRAPHY_HASHES[algorithm]())
        h.update(message)
        return h.finalize()

    async def hmac(self, algorithm: str, key: bytes, message: bytes) -> bytes:
        tag = normalize_algorithm(algorithm)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self._sign, tag, bytes(key), bytes(message))


class RandomProvider(object):
    """
    Source of cryptographically secure random bytes.
    """

    def random_bytes(self, n: int) -> bytes:
        raise NotImplementedError


class SystemRandomProvider(RandomProvider):
    def random_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)
