import base64

import pytest

from otpkit import Algorithm


def _b32(raw: bytes) -> str:
    return base64.b32encode(raw).decode("ascii")


@pytest.fixture
def rfc_secrets():
    """Seeds from RFC 6238 appendix B, one per hash, base32 encoded."""
    return {
        Algorithm.SHA1: _b32(b"12345678901234567890"),
        Algorithm.SHA256: _b32(b"12345678901234567890123456789012"),
        Algorithm.SHA512: _b32(b"1234567890123456789012345678901234567890123456789012345678901234"),
    }


@pytest.fixture
def secret_sha1(rfc_secrets):
    return rfc_secrets[Algorithm.SHA1]
