import datetime
import logging
import time
from typing import Callable, Optional, Union

from . import utils
from .config import TotpParameter, validate_period
from .encoding import encode_base32
from .exceptions import InvalidParameter
from .otp import OTP, generate_otp, validate_digits
from .providers import HashlibHmacProvider, HmacProvider, normalize_algorithm

logger = logging.getLogger(__name__)

MAX_WINDOW = 3

Clock = Callable[[], float]
TimeLike = Union[int, float, datetime.datetime]


def _timestamp(for_time: TimeLike) -> float:
    if isinstance(for_time, datetime.datetime):
        return for_time.timestamp()
    return for_time


def derive_counter(period: int, for_time: Optional[TimeLike] = None, clock: Clock = time.time) -> int:
    """
    Maps a point in time to a TOTP counter, ``floor(t / period)``.

    The clock is read at most once per call.

    :param period: time step in seconds
    :param for_time: Unix time or datetime; the clock is used when omitted
    :param clock: zero-argument callable returning Unix seconds
    """
    validate_period(period)
    if for_time is None:
        for_time = clock()
    return int(_timestamp(for_time) // period)


def validate_window(window: int, minimum: int = 0) -> int:
    if isinstance(window, bool) or not isinstance(window, int) or not minimum <= window <= MAX_WINDOW:
        raise InvalidParameter("window must be between {} and {}".format(minimum, MAX_WINDOW))
    return window


async def verify(
    algorithm: str,
    key: bytes,
    candidate: str,
    window: int = 1,
    period: int = 30,
    digits: int = 6,
    hmac_provider: Optional[HmacProvider] = None,
    clock: Clock = time.time,
    for_time: Optional[TimeLike] = None,
) -> bool:
    """
    Checks ``candidate`` against every counter within ``window`` steps of now.

    The window counts whole periods, so ``window=1`` accepts the previous,
    current and next code. A non-matching code is not an error.

    :param algorithm: sha1, sha256 or sha512
    :param key: raw key bytes
    :param candidate: code submitted by the user
    :param window: drift tolerance in periods, 0 to 3
    :param period: time step in seconds
    :param digits: 6 or 8
    :param hmac_provider: HMAC backend
    :param clock: zero-argument callable returning Unix seconds
    :param for_time: check at this time instead of now
    :returns: True on the first match
    """
    algorithm = normalize_algorithm(algorithm)
    validate_window(window)
    validate_digits(digits)
    if not key:
        raise InvalidParameter("key must not be empty")
    if hmac_provider is None:
        hmac_provider = HashlibHmacProvider()

    candidate = str(candidate)
    if len(candidate) != digits:
        return False

    now_counter = derive_counter(period, for_time, clock)
    for i in range(-window, window + 1):
        counter = now_counter - i
        if counter < 0:
            continue
        code = await generate_otp(algorithm, key, counter, digits, hmac_provider)
        if utils.strings_equal(candidate, code):
            logger.debug("OTP accepted at drift %+d", -i)
            return True
    logger.debug("OTP rejected within a window of %d", window)
    return False


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        key: bytes,
        digits: int = 6,
        algorithm: str = "sha1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = 30,
        hmac_provider: Optional[HmacProvider] = None,
        clock: Clock = time.time,
    ) -> None:
        """
        :param key: raw key bytes
        :param digits: number of integers in the OTP, 6 or 8
        :param algorithm: digest used in the HMAC
        :param name: account name
        :param issuer: issuer
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param hmac_provider: HMAC backend
        :param clock: zero-argument callable returning Unix seconds
        """
        self.interval = validate_period(interval)
        self.clock = clock
        super().__init__(
            key, digits=digits, algorithm=algorithm, name=name, issuer=issuer, hmac_provider=hmac_provider
        )

    def timecode(self, for_time: Optional[TimeLike] = None) -> int:
        """
        Accepts either a timezone naive (`for_time.tzinfo is None`) or
        a timezone aware datetime as argument and returns the
        corresponding counter value (timecode).
        """
        return derive_counter(self.interval, for_time, self.clock)

    async def at(self, for_time: TimeLike, counter_offset: int = 0) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :param counter_offset: the amount of ticks to add to the time counter
        :returns: OTP value
        """
        return await self.generate_otp(self.timecode(for_time) + counter_offset)

    async def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return await self.generate_otp(self.timecode())

    async def verify(self, otp: str, for_time: Optional[TimeLike] = None, valid_window: int = 0) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: Time to check OTP at (defaults to now)
        :param valid_window: extends the validity to this many counter ticks before and after the current one
        :returns: True if verification succeeded, False otherwise
        """
        return await verify(
            self.algorithm,
            self.key,
            otp,
            window=valid_window,
            period=self.interval,
            digits=self.digits,
            hmac_provider=self.hmac_provider,
            clock=self.clock,
            for_time=for_time,
        )

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer
        :returns: provisioning URI
        """
        config = TotpParameter(
            alg=self.algorithm,
            period=self.interval,
            digits=self.digits,
            issuer=issuer_name if issuer_name else self.issuer,
            account=name if name else self.name,
        )
        return utils.build_uri(config, encode_base32(self.key))
