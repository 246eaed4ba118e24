# RFC 6238 appendix B seeds
SEED_SHA1 = b"12345678901234567890"
SEED_SHA256 = b"12345678901234567890123456789012"
SEED_SHA512 = b"1234567890123456789012345678901234567890123456789012345678901234"

SEEDS = {"sha1": SEED_SHA1, "sha256": SEED_SHA256, "sha512": SEED_SHA512}

SEED_SHA1_BASE32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
SEED_SHA1_HEX = "3132333435363738393031323334353637383930"
SEED_SHA1_BASE64 = "MTIzNDU2Nzg5MDEyMzQ1Njc4OTA="

# RFC 4226 appendix D, counters 0 to 9
HOTP_SHA1 = ["755224", "287082", "359152", "969429", "338314", "254676", "287922", "162583", "399871", "520489"]

# RFC 6238 appendix B: (unix time, sha1, sha256, sha512), 8 digits, 30 second period
TOTP_VECTORS = [
    (59, "94287082", "46119246", "90693936"),
    (1111111109, "07081804", "68084774", "25091201"),
    (1111111111, "14050471", "67062674", "99943326"),
    (1234567890, "89005924", "91819424", "93441116"),
    (2000000000, "69279037", "90698825", "38618901"),
    (20000000000, "65353130", "77737706", "47863826"),
]


class FixedClock(object):
    """Clock stub returning a fixed instant and counting reads."""

    def __init__(self, now: float) -> None:
        self.now = now
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        return self.now


class CountingRandom(object):
    def __init__(self) -> None:
        self.requests = []

    def random_bytes(self, n: int) -> bytes:
        self.requests.append(n)
        return bytes(range(len(self.requests), len(self.requests) + n))
