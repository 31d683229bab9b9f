class OTPError(ValueError):
    """
    Base class for errors raised by otpkit.
    """


class UnsupportedAlgorithm(OTPError):
    """Algorithm is not one of SHA1, SHA256 or SHA512."""


class NoDigits(OTPError):
    """Passcode length must be a positive number of digits."""


class EmptyIssuer(OTPError):
    """Issuer must be a non-empty string."""


class PeriodInvalid(OTPError):
    """TOTP period must be a positive number of seconds."""


class SkewInvalid(OTPError):
    """TOTP skew must be a non-negative number of time steps."""


class CodeLengthMismatch(OTPError):
    """Passcode length differs from the configured number of digits."""


class CodeInvalid(OTPError):
    """Passcode does not match any accepted counter."""


class EncodingInvalid(OTPError):
    """Secret is not valid base32."""


class InvalidURI(OTPError):
    """Text is not a parseable otpauth:// key URI."""


class CounterInvalid(OTPError):
    """Counter is outside the unsigned 64-bit range."""
