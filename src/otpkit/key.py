import re
from typing import Dict, Optional
from urllib.parse import parse_qsl, unquote, urlsplit

from .exceptions import InvalidURI
from .hotp import HOTP
from .otp import MAX_COUNTER, Algorithm
from .totp import TOTP

DEFAULT_PERIOD = 30

_UNSIGNED = re.compile(r"[0-9]+")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL = re.compile(r"[\x00-\x20\x7f]")


def _parse_unsigned(value: Optional[str], default: int) -> int:
    if value is None or not _UNSIGNED.fullmatch(value):
        return default
    n = int(value)
    # unsigned 64-bit, anything wider falls back like a malformed value
    return n if n <= MAX_COUNTER else default


class Key(object):
    """
    A parsed ``otpauth://`` key URI.

    The key is a read-only view: accessors read the parsed URI on demand
    and :meth:`__str__` gives back the exact text that was parsed.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format
    """

    def __init__(self, uri: str) -> None:
        """
        :param uri: the hotp/totp URI to parse
        :raises InvalidURI: the text is not an otpauth URI
        """
        if _CONTROL.search(uri) or _BAD_ESCAPE.search(uri):
            raise InvalidURI("{!r} is not a valid URI".format(uri))
        try:
            parsed_uri = urlsplit(uri)
        except ValueError as e:
            raise InvalidURI("{!r} is not a valid URI".format(uri)) from e
        if parsed_uri.scheme != "otpauth":
            raise InvalidURI("Not an otpauth URI")

        path = unquote(parsed_uri.path)
        if path.startswith("/"):
            path = path[1:]

        # first occurrence wins for repeated parameters
        values: Dict[str, str] = {}
        for k, v in parse_qsl(parsed_uri.query, keep_blank_values=True):
            values.setdefault(k, v)

        self._uri = uri
        self._host = parsed_uri.netloc
        self._label = path
        self._values = values

    @classmethod
    def parse(cls, uri: str) -> "Key":
        return cls(uri)

    def __str__(self) -> str:
        return self._uri

    def __repr__(self) -> str:
        return "Key({!r})".format(self._uri)

    @property
    def type(self) -> str:
        """Either "hotp" or "totp"."""
        return self._host

    @property
    def secret(self) -> str:
        return self._values.get("secret", "")

    @property
    def issuer(self) -> str:
        """
        The ``issuer`` parameter, falling back to the label prefix.
        """
        issuer = self._values.get("issuer", "")
        if issuer:
            return issuer
        prefix, sep, _ = self._label.partition(":")
        return prefix if sep else ""

    @property
    def account(self) -> str:
        _, sep, account = self._label.partition(":")
        return account if sep else self._label

    @property
    def period(self) -> int:
        return _parse_unsigned(self._values.get("period"), DEFAULT_PERIOD)

    @property
    def digits(self) -> int:
        return _parse_unsigned(self._values.get("digits"), 0)

    @property
    def counter(self) -> int:
        return _parse_unsigned(self._values.get("counter"), 0)

    @property
    def algorithm(self) -> Algorithm:
        return Algorithm.from_name(self._values.get("algorithm", ""))

    def _engine_args(self) -> Dict:
        return {
            "digits": self.digits or 6,
            "algorithm": self._values.get("algorithm", Algorithm.SHA1),
        }

    def to_hotp(self) -> HOTP:
        """
        Builds an HOTP engine from this key; absent digits and algorithm
        default to 6 and SHA1.
        """
        return HOTP(self.issuer, **self._engine_args())

    def to_totp(self, skew: int = 1) -> TOTP:
        """
        Builds a TOTP engine from this key; absent digits and algorithm
        default to 6 and SHA1.

        :param skew: steps tolerated on each side when validating
        """
        return TOTP(self.issuer, period=self.period, skew=skew, **self._engine_args())
