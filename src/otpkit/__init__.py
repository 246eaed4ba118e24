from re import split
from typing import Any, Dict
from urllib.parse import parse_qsl, unquote, urlparse

from .authenticator import Authenticator as Authenticator
from .authenticator import create_credential as create_credential
from .authenticator import generate_code as generate_code
from .authenticator import verify_code as verify_code
from .config import DEFAULT as DEFAULT
from .config import DEFAULT_OPTIONS as DEFAULT_OPTIONS
from .config import TotpOptions as TotpOptions
from .config import TotpParameter as TotpParameter
from .config import TotpResult as TotpResult
from .encoding import decode_base32 as decode_base32
from .encoding import decode_base64 as decode_base64
from .encoding import decode_hex as decode_hex
from .encoding import decode_key as decode_key
from .encoding import encode_base32 as encode_base32
from .encoding import random_base32 as random_base32
from .encoding import random_hex as random_hex
from .exceptions import InvalidEncoding as InvalidEncoding
from .exceptions import InvalidParameter as InvalidParameter
from .exceptions import OTPError as OTPError
from .exceptions import UnsupportedAlgorithm as UnsupportedAlgorithm
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .otp import generate_otp as generate_otp
from .providers import CryptographyHmacProvider as CryptographyHmacProvider
from .providers import HashlibHmacProvider as HashlibHmacProvider
from .providers import HmacProvider as HmacProvider
from .providers import RandomProvider as RandomProvider
from .providers import SystemRandomProvider as SystemRandomProvider
from .totp import TOTP as TOTP
from .totp import derive_counter as derive_counter
from .totp import verify as verify
from .utils import build_uri as build_uri


def parse_uri(uri: str) -> TotpParameter:
    """
    Parses a TOTP provisioning URI back into enrollment settings.

    The secret is returned as ``secure_key`` with key type base32. A label
    written as ``Issuer:Account`` is split on the first colon; a label
    without a colon is read as the account name.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the totp URI to parse
    :returns: TotpParameter
    """

    # Secret (to be filled in later)
    secret = None

    # Data we'll pass to the constructor
    otp_data: Dict[str, Any] = {}

    # Parse with URLlib
    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise InvalidParameter("Not an otpauth URI")
    if parsed_uri.netloc != "totp":
        raise InvalidParameter("Not a supported OTP type")

    # Parse issuer/accountname info
    label = unquote(parsed_uri.path[1:])
    accountinfo_parts = split(":", label, maxsplit=1)
    if len(accountinfo_parts) == 1:
        if accountinfo_parts[0]:
            otp_data["account"] = accountinfo_parts[0]
    else:
        otp_data["issuer"] = accountinfo_parts[0]
        otp_data["account"] = accountinfo_parts[1]

    # Parse values
    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value
        elif key == "issuer":
            if "issuer" in otp_data and otp_data["issuer"] != value:
                raise InvalidParameter("If issuer is specified in both label and parameters, it should be equal.")
            otp_data["issuer"] = value
        elif key == "algorithm":
            otp_data["alg"] = value
        elif key == "digits":
            otp_data["digits"] = _int_param(key, value)
        elif key == "period":
            otp_data["period"] = _int_param(key, value)

    # Every OTP needs a secret
    if not secret:
        raise InvalidParameter("No secret found in URI")
    decode_key("base32", secret)

    return TotpParameter(secure_key=secret, **otp_data)


def _int_param(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise InvalidParameter("{} must be an integer".format(key)) from e
