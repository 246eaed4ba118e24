from typing import Optional

from . import utils
from .otp import OTP
from .providers import HmacProvider


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.
    """

    def __init__(
        self,
        key: bytes,
        digits: int = 6,
        algorithm: str = "sha1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
        hmac_provider: Optional[HmacProvider] = None,
    ) -> None:
        """
        :param key: raw key bytes
        :param digits: number of integers in the OTP, 6 or 8
        :param algorithm: digest used in the HMAC (expected to be sha1)
        :param name: account name
        :param issuer: issuer
        :param initial_count: starting HMAC counter value, defaults to 0
        :param hmac_provider: HMAC backend
        """
        self.initial_count = initial_count
        super().__init__(
            key, digits=digits, algorithm=algorithm, name=name, issuer=issuer, hmac_provider=hmac_provider
        )

    async def at(self, count: int) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return await self.generate_otp(self.initial_count + count)

    async def verify(self, otp: str, counter: int) -> bool:
        """
        Verifies the OTP passed in against the current counter OTP.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        """
        return utils.strings_equal(str(otp), await self.at(counter))
