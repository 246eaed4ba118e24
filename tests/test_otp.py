import asyncio

import pytest

from otpkit import HOTP, CryptographyHmacProvider, HashlibHmacProvider, generate_otp
from otpkit.exceptions import InvalidParameter, UnsupportedAlgorithm
from otpkit.otp import int_to_bytestring, truncate
from otpkit.providers import normalize_algorithm

from .vectors import HOTP_SHA1, SEED_SHA1, SEEDS, TOTP_VECTORS


def test_int_to_bytestring():
    assert int_to_bytestring(0) == b"\x00" * 8
    assert int_to_bytestring(1) == b"\x00" * 7 + b"\x01"
    assert int_to_bytestring(0x0102030405060708) == b"\x01\x02\x03\x04\x05\x06\x07\x08"
    assert int_to_bytestring(2**64 - 1) == b"\xff" * 8


@pytest.mark.parametrize("counter", [-1, 2**64])
def test_int_to_bytestring_rejects_out_of_range(counter):
    with pytest.raises(InvalidParameter):
        int_to_bytestring(counter)


def test_truncate_rfc4226_example():
    # RFC 4226 section 5.4
    digest = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")
    assert truncate(digest, 6) == "872921"
    assert truncate(digest, 8) == "57872921"


def test_truncate_masks_high_bit_and_pads():
    # offset 0, first four bytes 0xff 0x00 0x00 0x01 -> 0x7f000001
    digest = b"\xff\x00\x00\x01" + b"\x00" * 15 + b"\x00"
    assert truncate(digest, 6) == str(0x7F000001 % 10**6).rjust(6, "0")
    digest = b"\x00" * 19 + b"\x00"
    assert truncate(digest, 8) == "00000000"


@pytest.mark.parametrize("counter,expected", list(enumerate(HOTP_SHA1)))
def test_hotp_rfc4226_vectors(hmac_provider, counter, expected):
    assert asyncio.run(generate_otp("sha1", SEED_SHA1, counter, 6, hmac_provider)) == expected


@pytest.mark.parametrize("for_time,sha1,sha256,sha512", TOTP_VECTORS)
def test_rfc6238_vectors(hmac_provider, for_time, sha1, sha256, sha512):
    counter = for_time // 30
    for algorithm, expected in (("sha1", sha1), ("sha256", sha256), ("sha512", sha512)):
        code = asyncio.run(generate_otp(algorithm, SEEDS[algorithm], counter, 8, hmac_provider))
        assert code == expected


def test_known_vector_at_time_59():
    assert asyncio.run(generate_otp("SHA1", SEED_SHA1, 1, 8)) == "94287082"


@pytest.mark.parametrize("algorithm", ["sha1", "sha256", "sha512"])
def test_backends_agree(algorithm):
    async def both(counter):
        return await asyncio.gather(
            generate_otp(algorithm, SEEDS[algorithm], counter, 8, HashlibHmacProvider()),
            generate_otp(algorithm, SEEDS[algorithm], counter, 8, CryptographyHmacProvider()),
        )

    for counter in (0, 1, 37037036, 2**40 + 7):
        native, offloaded = asyncio.run(both(counter))
        assert native == offloaded


@pytest.mark.parametrize("digits", [6, 8])
def test_output_length_is_exactly_digits(hmac_provider, digits):
    async def codes():
        return [await generate_otp("sha256", SEEDS["sha256"], c, digits, hmac_provider) for c in range(50)]

    for code in asyncio.run(codes()):
        assert len(code) == digits
        assert code.isdigit()


def test_generate_otp_is_deterministic():
    first = asyncio.run(generate_otp("sha512", SEEDS["sha512"], 12345, 6))
    second = asyncio.run(generate_otp("sha512", SEEDS["sha512"], 12345, 6))
    assert first == second


class RecordingProvider(HashlibHmacProvider):
    def __init__(self):
        self.calls = []

    async def hmac(self, algorithm, key, message):
        self.calls.append((algorithm, key, message))
        return await super().hmac(algorithm, key, message)


@pytest.mark.parametrize(
    "kwargs,error",
    [
        ({"algorithm": "md5"}, UnsupportedAlgorithm),
        ({"digits": 7}, InvalidParameter),
        ({"key": b""}, InvalidParameter),
        ({"counter": -1}, InvalidParameter),
    ],
)
def test_generate_otp_validates_before_hashing(kwargs, error):
    provider = RecordingProvider()
    args = {"algorithm": "sha1", "key": SEED_SHA1, "counter": 0, "digits": 6, "hmac_provider": provider}
    args.update(kwargs)
    with pytest.raises(error):
        asyncio.run(generate_otp(**args))
    assert provider.calls == []


def test_provider_receives_big_endian_counter():
    provider = RecordingProvider()
    asyncio.run(generate_otp("sha1", SEED_SHA1, 0x0102, 6, provider))
    assert provider.calls == [("sha1", SEED_SHA1, b"\x00\x00\x00\x00\x00\x00\x01\x02")]


@pytest.mark.parametrize("name,tag", [("SHA1", "sha1"), ("sha-256", "sha256"), ("SHA-512", "sha512")])
def test_normalize_algorithm(name, tag):
    assert normalize_algorithm(name) == tag


def test_hotp_at_and_verify(hmac_provider):
    hotp = HOTP(SEED_SHA1, hmac_provider=hmac_provider)
    assert asyncio.run(hotp.at(0)) == "755224"
    assert asyncio.run(hotp.verify("287082", 1)) is True
    assert asyncio.run(hotp.verify("287082", 2)) is False
    assert asyncio.run(hotp.verify("000000", 0)) is False


def test_hotp_initial_count():
    hotp = HOTP(SEED_SHA1, initial_count=5)
    assert asyncio.run(hotp.at(2)) == HOTP_SHA1[7]


def test_hotp_rejects_bad_configuration():
    with pytest.raises(InvalidParameter):
        HOTP(b"")
    with pytest.raises(InvalidParameter):
        HOTP(SEED_SHA1, digits=10)
    with pytest.raises(UnsupportedAlgorithm):
        HOTP(SEED_SHA1, algorithm="md5")
