import logging
import time
from typing import Optional

from . import encoding, totp
from .config import DEFAULT, DEFAULT_OPTIONS, TotpOptions, TotpParameter, TotpResult
from .otp import generate_otp
from .providers import HashlibHmacProvider, HmacProvider, RandomProvider, SystemRandomProvider
from .utils import build_uri

logger = logging.getLogger(__name__)


class Authenticator(object):
    """
    Creates, generates and verifies TOTP credentials.

    The HMAC backend, random source and clock are fixed at construction,
    so tests and alternative runtimes inject their own instead of relying
    on environment detection.
    """

    def __init__(
        self,
        hmac_provider: Optional[HmacProvider] = None,
        random_provider: Optional[RandomProvider] = None,
        clock: Optional[totp.Clock] = None,
    ) -> None:
        self.hmac_provider = hmac_provider or HashlibHmacProvider()
        self.random_provider = random_provider or SystemRandomProvider()
        self.clock = clock or time.time

    def _decode_secret(self, secret: str, key_type: Optional[str]) -> bytes:
        if key_type is None:
            key_type = encoding.detect_key_type(secret)
            logger.debug("No key type given, guessed %s from secret length", key_type)
        return encoding.decode_key(key_type, secret)

    async def create_credential(self, config: Optional[TotpParameter] = None, **overrides) -> TotpResult:
        """
        Enrolls a credential.

        :param config: enrollment settings, defaults to ``DEFAULT``
        :param overrides: field values replacing those of ``config``
        :returns: the key as base32, hex and base64 plus its provisioning URI
        """
        config = config or DEFAULT
        if overrides:
            config = config.replace(**overrides)

        if config.secure_key is not None:
            key = encoding.decode_key(config.key_type, config.secure_key)
            if config.key_type == "base32":
                base32 = config.secure_key
            else:
                base32 = encoding.encode_base32(key)
        else:
            base32 = encoding.generate_random_key(config.bits, self.random_provider)
            key = encoding.decode_base32(base32)

        logger.debug(
            "Created %s credential (supplied key: %s, %d-bit class)",
            config.alg.upper(),
            config.secure_key is not None,
            config.bits,
        )
        return TotpResult(
            base32=base32,
            hex=encoding.encode_hex(key),
            base64=encoding.encode_base64(key),
            uri=build_uri(config, base32),
        )

    async def generate_code(
        self,
        secret: str,
        options: Optional[TotpOptions] = None,
        key_type: Optional[str] = None,
        for_time: Optional[totp.TimeLike] = None,
    ) -> str:
        """
        Returns the code for ``secret`` at the current time step.

        :param secret: base32, hex or base64 text
        :param options: algorithm, digits and period
        :param key_type: encoding of ``secret``; guessed from its length when omitted
        :param for_time: generate for this time instead of now
        """
        options = options or DEFAULT_OPTIONS
        key = self._decode_secret(secret, key_type)
        counter = totp.derive_counter(options.period, for_time, self.clock)
        return await generate_otp(options.alg, key, counter, options.digits, self.hmac_provider)

    async def verify_code(
        self,
        secret: str,
        code: str,
        window: int = 1,
        options: Optional[TotpOptions] = None,
        key_type: Optional[str] = None,
        for_time: Optional[totp.TimeLike] = None,
    ) -> bool:
        """
        Verifies ``code`` for ``secret`` allowing ``window`` periods of drift.

        :param secret: base32, hex or base64 text
        :param code: the code submitted by the user
        :param window: 1, 2 or 3
        :param options: algorithm, digits and period
        :param key_type: encoding of ``secret``; guessed from its length when omitted
        :param for_time: verify at this time instead of now
        :returns: True if the code matches a counter within the window
        """
        options = options or DEFAULT_OPTIONS
        totp.validate_window(window, minimum=1)
        key = self._decode_secret(secret, key_type)
        return await totp.verify(
            options.alg,
            key,
            code,
            window=window,
            period=options.period,
            digits=options.digits,
            hmac_provider=self.hmac_provider,
            clock=self.clock,
            for_time=for_time,
        )


_default = Authenticator()


async def create_credential(config: Optional[TotpParameter] = None, **overrides) -> TotpResult:
    return await _default.create_credential(config, **overrides)


async def generate_code(
    secret: str,
    options: Optional[TotpOptions] = None,
    key_type: Optional[str] = None,
    for_time: Optional[totp.TimeLike] = None,
) -> str:
    return await _default.generate_code(secret, options, key_type, for_time)


async def verify_code(
    secret: str,
    code: str,
    window: int = 1,
    options: Optional[TotpOptions] = None,
    key_type: Optional[str] = None,
    for_time: Optional[totp.TimeLike] = None,
) -> bool:
    return await _default.verify_code(secret, code, window, options, key_type, for_time)
