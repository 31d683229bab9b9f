import calendar
import datetime
import math
import time
from typing import Iterator, Union

from . import utils
from .exceptions import CodeInvalid, CodeLengthMismatch, PeriodInvalid, SkewInvalid
from .hotp import HOTP
from .otp import MAX_COUNTER, Algorithm, Digits, b32encode_nopad

Timestamp = Union[datetime.datetime, int, float]


class TOTP(object):
    """
    Handler for time-based OTP counters.

    Wraps an :class:`HOTP` whose counter is the number of ``period``
    second steps since the Unix epoch.
    """

    def __init__(
        self,
        issuer: str,
        digits: int = 6,
        algorithm: Union[Algorithm, str] = Algorithm.SHA1,
        period: int = 30,
        skew: int = 1,
    ) -> None:
        """
        :param issuer: the name of the OTP issuer
        :param digits: number of integers in the OTP
        :param algorithm: hash used in the HMAC
        :param period: the time step in seconds
        :param skew: number of steps accepted on each side of the current
            one when validating; 0 accepts the current step only
        :raises PeriodInvalid: period is not a positive integer
        :raises SkewInvalid: skew is negative
        """
        hotp = HOTP(issuer, digits=digits, algorithm=algorithm)
        if isinstance(period, bool) or not isinstance(period, int) or period < 1:
            raise PeriodInvalid("period must be a positive number of seconds")
        if isinstance(skew, bool) or not isinstance(skew, int) or skew < 0:
            raise SkewInvalid("skew must be a non-negative integer")

        self._hotp = hotp
        self._period = period
        self._skew = skew

    @property
    def hotp(self) -> HOTP:
        return self._hotp

    @property
    def algorithm(self) -> Algorithm:
        return self._hotp.algorithm

    @property
    def digits(self) -> Digits:
        return self._hotp.digits

    @property
    def issuer(self) -> str:
        return self._hotp.issuer

    @property
    def period(self) -> int:
        return self._period

    @property
    def skew(self) -> int:
        return self._skew

    def timecode(self, for_time: Timestamp) -> int:
        """
        Accepts either a timezone naive (`for_time.tzinfo is None`) or
        a timezone aware datetime as argument, or a number of seconds
        since the epoch, and returns the corresponding counter value.
        Naive datetimes are taken as local time.
        """
        if isinstance(for_time, datetime.datetime):
            if for_time.tzinfo:
                seconds = calendar.timegm(for_time.utctimetuple())
            else:
                seconds = int(time.mktime(for_time.timetuple()))
        else:
            seconds = math.floor(for_time)
        return seconds // self._period

    def generate_code(self, secret: str, timestamp: Timestamp) -> str:
        """
        Generates the OTP for the time step containing ``timestamp``.

        :param secret: shared secret in base32
        :param timestamp: the time to generate an OTP for
        :returns: OTP
        """
        return self._hotp.generate_code(self.timecode(timestamp), secret)

    def now(self, secret: str) -> str:
        """
        Generates the current time OTP.
        """
        return self.generate_code(secret, datetime.datetime.now(datetime.timezone.utc))

    def _candidates(self, counter: int) -> Iterator[int]:
        yield counter
        for i in range(1, self._skew + 1):
            yield counter + i
            yield counter - i

    def validate(self, passcode: str, timestamp: Timestamp, secret: str) -> None:
        """
        Checks the passcode against the time step containing ``timestamp``
        and up to ``skew`` steps on either side of it.

        Steps are tried nearest first (0, +1, -1, +2, -2, ...). Steps that
        fall outside the counter range, e.g. before the epoch, never match.

        :param passcode: the OTP to check
        :param timestamp: the time to check the OTP at
        :param secret: shared secret in base32
        :raises CodeLengthMismatch: the passcode has the wrong length
        :raises CodeInvalid: no step within the window matches
        """
        if len(passcode) != self.digits.length:
            raise CodeLengthMismatch("passcode must be {} digits long".format(self.digits))

        for counter in self._candidates(self.timecode(timestamp)):
            if counter < 0 or counter > MAX_COUNTER:
                continue
            try:
                self._hotp.validate(passcode, counter, secret)
            except CodeInvalid:
                continue
            return
        raise CodeInvalid("passcode is not valid")

    def verify(self, passcode: str, timestamp: Timestamp, secret: str) -> bool:
        """
        Like :meth:`validate`, but reports a wrong passcode as ``False``.
        """
        try:
            self.validate(passcode, timestamp, secret)
        except (CodeLengthMismatch, CodeInvalid):
            return False
        return True

    def generate_url(self, account: str, secret: bytes, **kwargs: str) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        :param account: name of the user account
        :param secret: raw secret bytes; embedded as unpadded base32
        :param kwargs: extra query parameters, e.g. ``image``
        :returns: provisioning URI
        """
        return utils.build_uri(
            "totp",
            b32encode_nopad(secret),
            name=account,
            issuer=self.issuer,
            algorithm=str(self.algorithm),
            digits=self.digits,
            period=self._period,
            extra=kwargs,
        )

    def __repr__(self) -> str:
        return "TOTP(issuer={!r}, digits={}, algorithm={}, period={}, skew={})".format(
            self.issuer, self.digits, self.algorithm, self._period, self._skew
        )
