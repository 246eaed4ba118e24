class OTPError(ValueError):
    """
    Base class for caller and configuration errors raised by otpkit.
    """


class InvalidEncoding(OTPError):
    """
    Key text is not valid base32, hex or base64.
    """


class UnsupportedAlgorithm(OTPError):
    """
    Algorithm tag is not one of SHA1, SHA256 or SHA512.
    """


class InvalidParameter(OTPError):
    """
    A period, digit count, window, key length or counter is out of range.
    """
