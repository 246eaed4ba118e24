import unicodedata
from hmac import compare_digest
from typing import Dict, Union
from urllib.parse import quote, urlencode


def build_uri(config, encoded_key: str) -> str:
    """
    Returns the provisioning URI for a TOTP credential.

    This can then be encoded in a QR Code and used to provision an
    authenticator app. Optional parameters appear only when they differ
    from the scheme defaults (SHA1, 6 digits, 30 seconds).

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param config: a ``TotpParameter``
    :param encoded_key: the base32 secret
    :returns: provisioning uri
    """
    base_uri = "otpauth://totp/{0}?{1}"
    url_args: Dict[str, Union[int, str]] = {"secret": encoded_key}

    # issuer and account are quoted separately and joined without a separator
    label = ""
    if config.issuer:
        label += quote(config.issuer, safe="")
    if config.account:
        label += quote(config.account, safe="")

    if config.issuer:
        url_args["issuer"] = config.issuer
    if config.alg != "sha1":
        url_args["algorithm"] = config.alg.upper()
    if config.digits != 6:
        url_args["digits"] = config.digits
    if config.period != 30:
        url_args["period"] = config.period

    return base_uri.format(label, urlencode(url_args, quote_via=quote, safe=""))


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
