from dataclasses import asdict, dataclass, replace
from typing import Dict, Optional

from .encoding import KEY_BYTES, KEY_TYPES
from .exceptions import InvalidParameter
from .otp import validate_digits
from .providers import normalize_algorithm


def validate_period(period: int) -> int:
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise InvalidParameter("period must be a positive number of seconds")
    return period


@dataclass(frozen=True)
class TotpParameter:
    """
    Enrollment settings for one credential.

    ``secure_key`` is used verbatim when given; otherwise a fresh key of
    ``bits`` length is generated.
    """

    alg: str = "sha1"
    key_type: str = "base32"
    period: int = 30
    bits: int = 160
    digits: int = 6
    issuer: Optional[str] = None
    account: Optional[str] = None
    secure_key: Optional[str] = None

    def __post_init__(self) -> None:
        # frozen, so normalised values go through object.__setattr__
        object.__setattr__(self, "alg", normalize_algorithm(self.alg))
        if self.key_type not in KEY_TYPES:
            raise InvalidParameter("key type must be one of {}".format(", ".join(KEY_TYPES)))
        validate_period(self.period)
        if self.bits not in KEY_BYTES:
            raise InvalidParameter("bits must be 80 or 160")
        validate_digits(self.digits)
        if self.secure_key is not None and not self.secure_key:
            raise InvalidParameter("secure key must not be empty")

    def replace(self, **changes) -> "TotpParameter":
        return replace(self, **changes)


@dataclass(frozen=True)
class TotpOptions:
    alg: str = "sha1"
    digits: int = 6
    period: int = 30

    def __post_init__(self) -> None:
        object.__setattr__(self, "alg", normalize_algorithm(self.alg))
        validate_digits(self.digits)
        validate_period(self.period)


@dataclass(frozen=True)
class TotpResult:
    base32: str
    hex: str
    base64: str
    uri: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


DEFAULT = TotpParameter()
DEFAULT_OPTIONS = TotpOptions()
