"""Shared fixtures."""

import base64

import pytest

from vc_revocation import RevocationEngine, RevocationMetadata


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StaticProvider:
    """Provider with fixed answers that records what it was asked."""

    def __init__(self, name, revoked=False, available=True, metadata=None, error=None):
        self.name = name
        self.description = f"Static provider {name}"
        self.revoked = revoked
        self.available = available
        self.metadata = metadata
        self.error = error
        self.checked = []

    async def is_available(self):
        return self.available

    async def check_revocation(self, credential_or_id):
        self.checked.append(credential_or_id)
        if self.error:
            raise self.error
        return self.revoked

    async def get_metadata(self, credential_or_id):
        return self.metadata


def encode_bits(bits: str) -> str:
    """Base64-encode a string of 0s and 1s (length multiple of 8)."""
    data = int(bits, 2).to_bytes(len(bits) // 8, byteorder="big")
    return base64.b64encode(data).decode("ascii")


def make_metadata(reason: str = "Key compromise", **overrides) -> RevocationMetadata:
    fields = {
        "issuer_did": "did:cheqd:testnet:test-issuer",
        "revoked_date": "2024-01-15T10:00:00Z",
        "reason": reason,
        "source": "manual",
    }
    fields.update(overrides)
    return RevocationMetadata(**fields)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return RevocationEngine(clock=clock)


@pytest.fixture
def metadata():
    return make_metadata()
