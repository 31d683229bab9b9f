from hmac import compare_digest
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode, urlparse

# Query keys written by the generator itself; callers may not supply them.
RESERVED_PARAMS = frozenset(["algorithm", "counter", "digits", "issuer", "period", "secret"])

# Characters left unescaped in the label, besides the unreserved set.
LABEL_SAFE = "@!$&'()*+,;="


def build_uri(
    otp_type: str,
    secret: str,
    name: str,
    issuer: str,
    algorithm: str,
    digits: int,
    period: Optional[int] = None,
    extra: Optional[Dict[str, str]] = None,
) -> str:
    """
    Returns the provisioning URI for the OTP; works for either TOTP or HOTP.

    Query parameters are emitted in sorted key order so the same inputs
    always yield the same text.

    For module-internal use.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param otp_type: "hotp" or "totp"
    :param secret: the secret in unpadded base32
    :param name: name of the account
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param algorithm: the algorithm used in the OTP generation.
    :param digits: the length of the OTP generated code.
    :param period: the number of seconds the OTP generator is set to
        expire every code; only for TOTP.
    :param extra: other query string parameters to include in the URI
    :returns: provisioning uri
    """
    url_args: Dict[str, Union[int, str]] = {
        "algorithm": algorithm,
        "digits": digits,
        "issuer": issuer,
        "secret": secret,
    }
    if period is not None:
        url_args["period"] = period

    for k, v in (extra or {}).items():
        if not isinstance(v, str):
            raise ValueError("All otpauth uri parameters must be strings")
        if k in RESERVED_PARAMS:
            raise ValueError("{} is set by the generator and cannot be overridden".format(k))
        if k == "image":
            image_uri = urlparse(v)
            if image_uri.scheme != "https" or not image_uri.netloc or not image_uri.path:
                raise ValueError("{} is not a valid url".format(image_uri))
        url_args[k] = v

    label = quote(issuer, safe=LABEL_SAFE) + ":" + quote(name, safe=LABEL_SAFE)
    query = urlencode(sorted(url_args.items())).replace("+", "%20")
    return "otpauth://{0}/{1}?{2}".format(otp_type, label, query)


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length. The strings are compared byte for byte, with no Unicode
    normalization, so only the exact ASCII passcode matches.
    """
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
