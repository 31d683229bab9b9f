from typing import Union

from . import utils
from .exceptions import CodeInvalid, CodeLengthMismatch, EmptyIssuer
from .otp import Algorithm, Digits, b32encode_nopad, generate_otp


class HOTP(object):
    """
    Handler for HMAC-based OTP counters.

    Instances are read-only once constructed; the counter itself is
    tracked by the caller.
    """

    def __init__(
        self,
        issuer: str,
        digits: int = 6,
        algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    ) -> None:
        """
        :param issuer: the name of the OTP issuer
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param algorithm: hash used in the HMAC, an ``Algorithm`` or its name
        :raises UnsupportedAlgorithm: algorithm is not SHA1, SHA256 or SHA512
        :raises NoDigits: digits is not a positive integer
        :raises EmptyIssuer: issuer is empty
        """
        algorithm = Algorithm.coerce(algorithm)
        digits = Digits(digits)
        if not issuer:
            raise EmptyIssuer("issuer must not be empty")

        self._algorithm = algorithm
        self._digits = digits
        self._issuer = issuer

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def digits(self) -> Digits:
        return self._digits

    @property
    def issuer(self) -> str:
        return self._issuer

    def generate_code(self, counter: int, secret: str) -> str:
        """
        Generates the OTP for the given counter.

        :param counter: the OTP HMAC counter
        :param secret: shared secret in base32
        :returns: OTP
        :raises EncodingInvalid: the secret is not valid base32
        """
        return generate_otp(secret, counter, self._algorithm, self._digits)

    def validate(self, passcode: str, counter: int, secret: str) -> None:
        """
        Checks the passcode against the OTP for the given counter.

        :param passcode: the OTP to check
        :param counter: the OTP HMAC counter
        :param secret: shared secret in base32
        :raises CodeLengthMismatch: the passcode has the wrong length
        :raises CodeInvalid: the passcode does not match
        """
        if len(passcode) != self._digits.length:
            raise CodeLengthMismatch("passcode must be {} digits long".format(self._digits))
        if not utils.strings_equal(passcode, self.generate_code(counter, secret)):
            raise CodeInvalid("passcode is not valid")

    def verify(self, passcode: str, counter: int, secret: str) -> bool:
        """
        Like :meth:`validate`, but reports a wrong passcode as ``False``.
        """
        try:
            self.validate(passcode, counter, secret)
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
            "hotp",
            b32encode_nopad(secret),
            name=account,
            issuer=self._issuer,
            algorithm=str(self._algorithm),
            digits=self._digits,
            extra=kwargs,
        )

    def __repr__(self) -> str:
        return "HOTP(issuer={!r}, digits={}, algorithm={})".format(self._issuer, self._digits, self._algorithm)
