import pytest

from otpkit import CryptographyHmacProvider, HashlibHmacProvider


@pytest.fixture(params=[HashlibHmacProvider, CryptographyHmacProvider], ids=["hashlib", "cryptography"])
def hmac_provider(request):
    return request.param()
