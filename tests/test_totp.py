import datetime

import pytest

from otpkit import (
    HOTP,
    TOTP,
    Algorithm,
    CodeInvalid,
    CodeLengthMismatch,
    CounterInvalid,
    EmptyIssuer,
    NoDigits,
    PeriodInvalid,
    SkewInvalid,
    UnsupportedAlgorithm,
)

UTC = datetime.timezone.utc

# RFC 6238 appendix B
RFC6238_VECTORS = [
    (59, "94287082", Algorithm.SHA1),
    (59, "46119246", Algorithm.SHA256),
    (59, "90693936", Algorithm.SHA512),
    (1111111109, "07081804", Algorithm.SHA1),
    (1111111109, "68084774", Algorithm.SHA256),
    (1111111109, "25091201", Algorithm.SHA512),
    (1111111111, "14050471", Algorithm.SHA1),
    (1111111111, "67062674", Algorithm.SHA256),
    (1111111111, "99943326", Algorithm.SHA512),
    (1234567890, "89005924", Algorithm.SHA1),
    (1234567890, "91819424", Algorithm.SHA256),
    (1234567890, "93441116", Algorithm.SHA512),
    (2000000000, "69279037", Algorithm.SHA1),
    (2000000000, "90698825", Algorithm.SHA256),
    (2000000000, "38618901", Algorithm.SHA512),
    (20000000000, "65353130", Algorithm.SHA1),
    (20000000000, "77737706", Algorithm.SHA256),
    (20000000000, "47863826", Algorithm.SHA512),
]


@pytest.mark.parametrize("skew", [0, 1])
@pytest.mark.parametrize("ts,code,algorithm", RFC6238_VECTORS)
def test_rfc6238_vectors(rfc_secrets, ts, code, algorithm, skew):
    totp = TOTP("cristalhq", digits=8, algorithm=algorithm, period=30, skew=skew)
    secret = rfc_secrets[algorithm]
    at = datetime.datetime.fromtimestamp(ts, UTC)

    assert totp.generate_code(secret, at) == code
    assert totp.generate_code(secret, ts) == code
    totp.validate(code, at, secret)
    assert totp.verify(code, ts, secret)


def test_ten_digits():
    totp = TOTP("cristalhq", digits=10, algorithm=Algorithm.SHA1, period=30, skew=2)
    at = datetime.datetime(2023, 11, 26, 12, 15, 18, tzinfo=UTC)
    code = totp.generate_code("JBSWY3DPEHPK3PXP", at)
    assert code == "0462778229"
    totp.validate(code, at, "JBSWY3DPEHPK3PXP")


def test_timecode():
    totp = TOTP("cristalhq", period=30)
    assert totp.timecode(0) == 0
    assert totp.timecode(29.9) == 0
    assert totp.timecode(59) == 1
    assert totp.timecode(60) == 2
    assert totp.timecode(datetime.datetime(1970, 1, 1, 0, 1, tzinfo=UTC)) == 2
    assert totp.timecode(-1) == -1


def test_timecode_naive_datetime_is_local_time():
    totp = TOTP("cristalhq", period=30)
    aware = datetime.datetime(2023, 11, 26, 12, 15, 18, tzinfo=UTC)
    naive = aware.astimezone().replace(tzinfo=None)
    assert totp.timecode(naive) == totp.timecode(aware)


@pytest.mark.parametrize("skew", [0, 1, 2, 5])
def test_skew_window(secret_sha1, skew):
    totp = TOTP("cristalhq", digits=8, period=30, skew=skew)
    base = 1111111109 // 30
    code = totp.hotp.generate_code(base, secret_sha1)

    for offset in range(-skew - 2, skew + 3):
        at = (base + offset) * 30 + 7
        if abs(offset) <= skew:
            totp.validate(code, at, secret_sha1)
        else:
            with pytest.raises(CodeInvalid):
                totp.validate(code, at, secret_sha1)


def test_skew_near_epoch_skips_negative_counters(secret_sha1):
    totp = TOTP("cristalhq", digits=8, period=30, skew=3)
    code = totp.hotp.generate_code(2, secret_sha1)
    totp.validate(code, 0, secret_sha1)
    with pytest.raises(CodeInvalid):
        totp.validate("00000000", 0, secret_sha1)


def test_validate_length_checked_before_hashing():
    totp = TOTP("cristalhq", digits=8)
    with pytest.raises(CodeLengthMismatch):
        totp.validate("123456", 59, "!!!")
    assert not totp.verify("123456", 59, "!!!")


def test_now(secret_sha1):
    totp = TOTP("cristalhq", skew=1)
    code = totp.now(secret_sha1)
    assert len(code) == 6
    assert totp.verify(code, datetime.datetime.now(UTC), secret_sha1)


def test_composition():
    totp = TOTP("cristalhq", digits=8, algorithm="SHA512", period=60, skew=0)
    assert isinstance(totp.hotp, HOTP)
    assert not isinstance(totp, HOTP)
    assert totp.issuer == "cristalhq"
    assert totp.digits == 8
    assert totp.algorithm is Algorithm.SHA512
    assert totp.period == 60
    assert totp.skew == 0


@pytest.mark.parametrize(
    "kwargs,error",
    [
        ({"algorithm": Algorithm.UNKNOWN}, UnsupportedAlgorithm),
        ({"issuer": ""}, EmptyIssuer),
        ({"digits": 0}, NoDigits),
        ({"period": 0}, PeriodInvalid),
        ({"period": -30}, PeriodInvalid),
        ({"period": 30.0}, PeriodInvalid),
        ({"skew": -1}, SkewInvalid),
    ],
)
def test_construction_errors(kwargs, error):
    args = {"issuer": "cristalhq", "digits": 8, "algorithm": Algorithm.SHA1, "period": 30, "skew": 1}
    args.update(kwargs)
    with pytest.raises(error):
        TOTP(**args)


def test_generate_url():
    totp = TOTP("cristalhq", digits=8, algorithm=Algorithm.SHA1, period=30, skew=1)

    url = totp.generate_url("alice@bob.com", b"SECRET_STRING")
    assert url == "otpauth://totp/cristalhq:alice@bob.com?algorithm=SHA1&digits=8&issuer=cristalhq&period=30&secret=KNCUGUSFKRPVGVCSJFHEO"

    url = totp.generate_url("bob@alice.com", b"SECRET_STRING")
    assert url == "otpauth://totp/cristalhq:bob@alice.com?algorithm=SHA1&digits=8&issuer=cristalhq&period=30&secret=KNCUGUSFKRPVGVCSJFHEO"
    assert url == totp.generate_url("bob@alice.com", b"SECRET_STRING")


def test_generate_code_before_epoch(secret_sha1):
    totp = TOTP("cristalhq")
    with pytest.raises(CounterInvalid):
        totp.generate_code(secret_sha1, -1)
    with pytest.raises(CodeInvalid):
        totp.validate("123456", -1000, secret_sha1)


def test_generate_url_extra_params():
    totp = TOTP("cristalhq", digits=8)
    url = totp.generate_url("alice", b"SECRET_STRING", image="https://example.com/logo.png")
    assert url == (
        "otpauth://totp/cristalhq:alice?algorithm=SHA1&digits=8"
        "&image=https%3A%2F%2Fexample.com%2Flogo.png&issuer=cristalhq&period=30"
        "&secret=KNCUGUSFKRPVGVCSJFHEO"
    )
    with pytest.raises(ValueError):
        totp.generate_url("alice", b"SECRET_STRING", period="60")
