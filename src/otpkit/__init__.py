import secrets
from typing import Sequence

from .exceptions import CodeInvalid as CodeInvalid
from .exceptions import CodeLengthMismatch as CodeLengthMismatch
from .exceptions import CounterInvalid as CounterInvalid
from .exceptions import EmptyIssuer as EmptyIssuer
from .exceptions import EncodingInvalid as EncodingInvalid
from .exceptions import InvalidURI as InvalidURI
from .exceptions import NoDigits as NoDigits
from .exceptions import OTPError as OTPError
from .exceptions import PeriodInvalid as PeriodInvalid
from .exceptions import SkewInvalid as SkewInvalid
from .exceptions import UnsupportedAlgorithm as UnsupportedAlgorithm
from .hotp import HOTP as HOTP
from .key import Key as Key
from .otp import Algorithm as Algorithm
from .otp import Digits as Digits
from .totp import TOTP as TOTP


def random_base32(length: int = 32, chars: Sequence[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567") -> str:
    # Note: the otpauth scheme DOES NOT use base32 padding for secret lengths not divisible by 8.
    # Some third-party tools have bugs when dealing with such secrets.
    if length < 32:
        raise ValueError("Secrets should be at least 160 bits")

    return "".join(secrets.choice(chars) for _ in range(length))


def parse_uri(uri: str) -> Key:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :returns: Key; use ``to_hotp()`` or ``to_totp()`` for an engine
    """
    return Key.parse(uri)
