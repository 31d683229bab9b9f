import base64
import binascii
import enum
import hashlib
import hmac
from typing import Any, Union

from .exceptions import CounterInvalid, EncodingInvalid, NoDigits, UnsupportedAlgorithm

# Counters are unsigned 64-bit integers (RFC 4226 section 5.2).
MAX_COUNTER = 2**64 - 1


class Algorithm(enum.Enum):
    """
    Hash function used in the HMAC.

    ``UNKNOWN`` is what a parsed key reports when the URI carries no
    (or an unrecognized) algorithm; the engines refuse it.
    """

    UNKNOWN = ""
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    def __str__(self) -> str:
        return self.value

    @property
    def digest(self) -> Any:
        """
        The hashlib constructor for this algorithm.

        :raises UnsupportedAlgorithm: for ``UNKNOWN``
        """
        if self is Algorithm.SHA1:
            return hashlib.sha1
        if self is Algorithm.SHA256:
            return hashlib.sha256
        if self is Algorithm.SHA512:
            return hashlib.sha512
        raise UnsupportedAlgorithm("algorithm must be SHA1, SHA256 or SHA512")

    @classmethod
    def from_name(cls, name: str) -> "Algorithm":
        """
        Maps a canonical name ("SHA1", "SHA256", "SHA512") to a member,
        anything else to ``UNKNOWN``.
        """
        for member in (cls.SHA1, cls.SHA256, cls.SHA512):
            if member.value == name:
                return member
        return cls.UNKNOWN

    @classmethod
    def coerce(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """
        Validates an engine's algorithm argument.

        :param value: an ``Algorithm`` member or its canonical name
        :raises UnsupportedAlgorithm: if the value is not a supported hash
        """
        if isinstance(value, str):
            value = cls.from_name(value)
        if not isinstance(value, cls) or value is cls.UNKNOWN:
            raise UnsupportedAlgorithm("algorithm must be SHA1, SHA256 or SHA512")
        return value


class Digits(int):
    """
    Number of decimal digits in a passcode.
    """

    def __new__(cls, value: int) -> "Digits":
        if isinstance(value, bool) or not isinstance(value, int):
            raise NoDigits("digits must be an integer")
        if value <= 0:
            raise NoDigits("digits must be a positive integer")
        return super().__new__(cls, value)

    @property
    def length(self) -> int:
        return int(self)

    @property
    def modulus(self) -> int:
        return 10 ** int(self)

    def format(self, n: int) -> str:
        # 0 <= n < modulus, so only left padding is ever needed
        return str(n).rjust(int(self), "0")


def byte_secret(secret: str) -> bytes:
    """
    Decodes a base32 secret, tolerating missing padding and lower case.

    :param secret: base32 text
    :raises EncodingInvalid: on illegal characters or an impossible length
    """
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingInvalid("secret is not valid base32") from e


def b32encode_nopad(raw: bytes) -> str:
    """
    Base32 text without '=' padding, as the otpauth scheme expects.
    """
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret
    """
    result = bytearray()
    while i != 0:
        result.append(i & 0xFF)
        i >>= 8
    return bytes(bytearray(reversed(result)).rjust(padding, b"\0"))


def generate_otp(secret: str, counter: int, algorithm: Algorithm, digits: Digits) -> str:
    """
    Implements RFC 4226 section 5.3.

    :param secret: shared secret in base32
    :param counter: moving factor, in [0, 2**64)
    :param algorithm: HMAC hash
    :param digits: passcode length
    :returns: zero-padded decimal passcode
    :raises CounterInvalid: the counter is negative or wider than 64 bits
    """
    if counter < 0 or counter > MAX_COUNTER:
        raise CounterInvalid("counter must be an unsigned 64-bit integer")
    hasher = hmac.new(byte_secret(secret), int_to_bytestring(counter), algorithm.digest)
    hmac_hash = bytearray(hasher.digest())

    # dynamic truncation, RFC 4226 section 5.4
    offset = hmac_hash[-1] & 0xF
    code = (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )
    return digits.format(code % digits.modulus)
