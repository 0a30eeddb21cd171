"""End-to-end tests for the revocation engine."""

import asyncio
import json
import time

import pytest

from conftest import FakeClock, StaticProvider, make_metadata
from vc_revocation import RevocationConfig, RevocationEngine
from vc_revocation.core.errors import ListCodecError, ProviderNotFoundError


@pytest.mark.asyncio
async def test_unknown_credential_not_revoked(engine):
    """Credentials never added are not revoked."""
    assert await engine.is_revoked("urn:uuid:never-added") is False

    status = await engine.check_revocation_status("urn:uuid:never-added")
    assert status.is_revoked is False
    assert status.source == "local"
    assert status.confirmed is True


@pytest.mark.asyncio
async def test_add_then_remove(engine, metadata):
    """Adding revokes, removing reinstates."""
    await engine.add_revoked_credential("urn:uuid:cred-1", metadata)
    assert await engine.is_revoked("urn:uuid:cred-1") is True

    status = await engine.check_revocation_status("urn:uuid:cred-1")
    assert status.source == "local"
    assert status.reason == "Key compromise"
    assert status.revoked_date == metadata.revoked_date
    assert status.metadata.last_checked is not None

    assert await engine.remove_revoked_credential("urn:uuid:cred-1") is True
    assert await engine.is_revoked("urn:uuid:cred-1") is False


@pytest.mark.asyncio
async def test_add_invalidates_cached_negative(engine, metadata):
    """A cached not-revoked answer does not survive a registration."""
    assert await engine.is_revoked("urn:uuid:late") is False
    assert engine.get_cache_stats().size == 1

    await engine.add_revoked_credential("urn:uuid:late", metadata)
    assert await engine.is_revoked("urn:uuid:late") is True


@pytest.mark.asyncio
async def test_cache_hit_within_ttl(engine, clock, metadata):
    """Within the TTL the same status is returned; after it a fresh one."""
    await engine.add_revoked_credential("urn:uuid:cached", metadata)

    first = await engine.check_revocation_status("urn:uuid:cached")
    clock.advance(120)
    second = await engine.check_revocation_status("urn:uuid:cached")
    assert second.last_checked == first.last_checked

    clock.advance(300)
    third = await engine.check_revocation_status("urn:uuid:cached")
    assert third is not first
    assert third.last_checked >= first.last_checked


@pytest.mark.asyncio
async def test_cache_serves_provider_answers(engine):
    """A provider answer is cached and the provider is not asked again."""
    provider = StaticProvider("remote", revoked=True)
    await engine.register_revocation_provider(provider)

    await engine.check_revocation_status("urn:uuid:remote")
    await engine.check_revocation_status("urn:uuid:remote")

    assert provider.checked == ["urn:uuid:remote"]


@pytest.mark.asyncio
async def test_correct_with_cache_disabled(metadata):
    """The cache is an optimization only."""
    engine = RevocationEngine(config=RevocationConfig(cache_ttl=0))

    assert await engine.is_revoked("urn:uuid:x") is False
    await engine.add_revoked_credential("urn:uuid:x", metadata)
    assert await engine.is_revoked("urn:uuid:x") is True
    assert engine.get_cache_stats().size == 0


@pytest.mark.asyncio
async def test_broken_cache_does_not_change_answers(engine, metadata):
    """Cache failures are logged and ignored."""

    class BrokenCache:
        def get(self, credential_id):
            raise RuntimeError("cache down")

        def set(self, credential_id, status):
            raise RuntimeError("cache down")

        def invalidate(self, credential_id):
            raise RuntimeError("cache down")

    engine.cache = BrokenCache()
    await engine.add_revoked_credential("urn:uuid:x", metadata)

    assert await engine.is_revoked("urn:uuid:x") is True
    assert await engine.is_revoked("urn:uuid:y") is False


@pytest.mark.asyncio
async def test_local_registry_wins(engine, metadata):
    """A locally revoked credential stays revoked whatever providers say."""
    provider = StaticProvider("says-clean", revoked=False)
    await engine.register_revocation_provider(provider)
    await engine.add_revoked_credential("urn:uuid:local", metadata)

    status = await engine.check_revocation_status("urn:uuid:local")

    assert status.is_revoked is True
    assert status.source == "local"
    assert provider.checked == []


@pytest.mark.asyncio
async def test_provider_order(engine):
    """The first provider answering revoked names the source."""
    a = StaticProvider("provider-a", revoked=False)
    b = StaticProvider(
        "provider-b",
        revoked=True,
        metadata=make_metadata("Provider revocation", source="provider"),
    )
    await engine.register_revocation_provider(a)
    await engine.register_revocation_provider(b)

    status = await engine.check_revocation_status("urn:uuid:fallback")

    assert status.is_revoked is True
    assert status.source == "provider-b"
    assert status.reason == "Provider revocation"
    assert a.checked == ["urn:uuid:fallback"]


@pytest.mark.asyncio
async def test_provider_errors_never_propagate(engine):
    """A failing provider degrades to not revoked, flagged as unconfirmed."""
    await engine.register_revocation_provider(
        StaticProvider("broken", error=ConnectionError("unreachable"))
    )

    status = await engine.check_revocation_status("urn:uuid:x")

    assert status.is_revoked is False
    assert status.unresolved_providers == ["broken"]
    assert status.confirmed is False


@pytest.mark.asyncio
async def test_providers_receive_full_credential(engine):
    """When given a credential, providers see the credential itself."""
    provider = StaticProvider("inspect")
    await engine.register_revocation_provider(provider)
    vc = {"id": "urn:uuid:vc", "status": {"statusListIndex": "1"}}

    await engine.check_revocation_status(vc)

    assert provider.checked == [vc]


@pytest.mark.asyncio
async def test_status_requires_identifier(engine):
    with pytest.raises(ValueError):
        await engine.check_revocation_status({"type": "VerifiableCredential"})


@pytest.mark.asyncio
async def test_validate_credential(engine, metadata):
    """Revoked credentials are invalid with a warning."""
    await engine.add_revoked_credential("urn:uuid:revoked", metadata)

    revoked = await engine.validate_credential({"id": "urn:uuid:revoked"})
    assert revoked.is_valid is False
    assert revoked.warnings == ["Credential has been revoked"]
    assert revoked.validation_errors == []
    assert revoked.revocation_status.is_revoked is True

    clean = await engine.validate_credential({"id": "urn:uuid:clean"})
    assert clean.is_valid is True
    assert bool(clean) is True
    assert clean.warnings == []


@pytest.mark.asyncio
async def test_validate_credential_missing_id(engine):
    """A credential without id is a validation failure, not an exception."""
    for bad in (None, {}, {"type": "VerifiableCredential"}, "urn:uuid:bare"):
        result = await engine.validate_credential(bad)
        assert result.is_valid is False
        assert result.validation_errors == ["Invalid credential: missing id"]
        assert result.revocation_status.is_revoked is False


@pytest.mark.asyncio
async def test_validate_revocation_as_error(metadata):
    """Revocation can be configured to be a validation error."""
    engine = RevocationEngine(config=RevocationConfig(revocation_is_error=True))
    await engine.add_revoked_credential("urn:uuid:revoked", metadata)

    result = await engine.validate_credential({"id": "urn:uuid:revoked"})

    assert result.is_valid is False
    assert result.validation_errors == ["Credential has been revoked"]
    assert result.warnings == []


@pytest.mark.asyncio
async def test_batch_check(engine, metadata):
    """Results match the input one for one."""
    await engine.add_revoked_credential("b", metadata)

    result = await engine.batch_revocation_check(["a", "b", "c"])

    assert result.total_checked == 3
    assert result.revoked_count == 1
    assert len(result.results) == 3
    assert [r.credential_id for r in result.results] == ["a", "b", "c"]
    assert [r.is_revoked for r in result.results] == [False, True, False]


@pytest.mark.asyncio
async def test_batch_failures_are_isolated(engine, metadata):
    """One failing lookup resolves to not revoked without affecting others."""
    await engine.add_revoked_credential("b", metadata)

    result = await engine.batch_revocation_check(["a", {"no": "id"}, "b"])

    assert result.total_checked == 3
    assert result.revoked_count == 1
    assert result.results[1].credential_id == ""
    assert result.results[1].is_revoked is False


@pytest.mark.asyncio
async def test_batch_runs_concurrently(engine):
    """Slow providers are awaited concurrently across a batch."""
    running = 0
    peak = 0

    class Concurrent(StaticProvider):
        async def check_revocation(self, credential_or_id):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return False

    await engine.register_revocation_provider(Concurrent("concurrent"))
    await engine.batch_revocation_check([f"urn:uuid:{i}" for i in range(5)])

    assert peak == 5


@pytest.mark.asyncio
async def test_removal_waits_for_in_flight_read(engine, metadata):
    """A removal racing a read of the same id cannot leave a stale positive."""
    started = asyncio.Event()
    release = asyncio.Event()

    class Gated(StaticProvider):
        async def check_revocation(self, credential_or_id):
            started.set()
            await release.wait()
            return True

    await engine.register_revocation_provider(Gated("gated"))
    read = asyncio.create_task(engine.check_revocation_status("urn:uuid:race"))
    await started.wait()

    removal = asyncio.create_task(engine.remove_revoked_credential("urn:uuid:race"))
    await asyncio.sleep(0)
    assert not removal.done()

    release.set()
    assert (await read).is_revoked is True
    await removal
    assert engine.get_cache_stats().size == 0


@pytest.mark.asyncio
async def test_import_revocation_list(engine):
    """Imported entries are revoked and re-stamped."""
    revocation_list = {
        "version": "1.0.0",
        "created": "2024-01-10T10:00:00Z",
        "updated": "2024-01-10T10:00:00Z",
        "issuerDID": "did:cheqd:testnet:test-issuer",
        "revokedCredentials": [
            {
                "credentialId": "urn:uuid:imported-1",
                "metadata": {
                    "issuerDID": "did:cheqd:testnet:test-issuer",
                    "revokedDate": "2024-01-10T10:00:00Z",
                    "reason": "Imported reason 1",
                    "source": "import",
                },
            },
            {
                "credentialId": "urn:uuid:imported-2",
                "metadata": {
                    "issuerDID": "did:cheqd:testnet:test-issuer",
                    "revokedDate": "2024-01-12T10:00:00Z",
                    "source": "import",
                },
            },
        ],
        "metadata": {"name": "Test Revocation List", "source": "test"},
    }

    assert await engine.import_revocation_list(revocation_list) == 2
    assert await engine.is_revoked("urn:uuid:imported-1") is True
    assert await engine.is_revoked("urn:uuid:imported-2") is True

    entries = await engine.get_revoked_credentials()
    assert all(e.metadata.last_checked is not None for e in entries)


@pytest.mark.asyncio
async def test_import_invalid_list(engine):
    with pytest.raises(ListCodecError):
        await engine.import_revocation_list({"revokedCredentials": [{"credentialId": "x"}]})


@pytest.mark.asyncio
async def test_import_rejects_non_iso_revoked_date(engine):
    """One non-ISO revokedDate rejects the whole list; nothing is imported."""
    entry = {
        "issuerDID": "did:example:issuer",
        "source": "import",
    }
    revocation_list = {
        "revokedCredentials": [
            {
                "credentialId": "urn:uuid:good",
                "metadata": {**entry, "revokedDate": "2024-01-15T10:00:00Z"},
            },
            {
                "credentialId": "urn:uuid:bad",
                "metadata": {**entry, "revokedDate": "Jan 15 2024"},
            },
        ]
    }

    with pytest.raises(ListCodecError):
        await engine.import_revocation_list(revocation_list)
    assert await engine.get_revoked_credentials() == []


@pytest.mark.asyncio
async def test_export_json(engine, metadata):
    """The JSON export is a versioned revocation list document."""
    await engine.add_revoked_credential("urn:uuid:export-test", metadata)

    parsed = json.loads(await engine.export_revocation_list("json"))

    assert parsed["version"] == "1.0.0"
    assert parsed["issuerDID"] == "local"
    assert parsed["metadata"]["name"] == "Local Revocation List"
    assert len(parsed["revokedCredentials"]) == 1
    assert parsed["revokedCredentials"][0]["credentialId"] == "urn:uuid:export-test"
    assert parsed["revokedCredentials"][0]["metadata"]["reason"] == "Key compromise"


@pytest.mark.asyncio
async def test_export_import_round_trip(engine, metadata):
    """Exported JSON imports into another engine with the same ids."""
    for cid in ("urn:uuid:1", "urn:uuid:2", "urn:uuid:3"):
        await engine.add_revoked_credential(cid, metadata)

    other = RevocationEngine()
    await other.import_revocation_list(await engine.export_revocation_list("json"))

    exported_ids = {e.credential_id for e in await engine.get_revoked_credentials()}
    imported_ids = {e.credential_id for e in await other.get_revoked_credentials()}
    assert imported_ids == exported_ids


@pytest.mark.asyncio
async def test_export_csv(engine):
    """CSV export starts with the fixed header and quotes awkward fields."""
    await engine.add_revoked_credential(
        "urn:uuid:csv-export-test", make_metadata("CSV export test")
    )
    await engine.add_revoked_credential(
        "urn:uuid:comma", make_metadata("superseded, reissued")
    )

    exported = await engine.export_revocation_list("csv")
    lines = exported.split("\n")

    assert lines[0] == "credentialId,issuerDID,revokedDate,reason,source"
    assert lines[1] == (
        "urn:uuid:csv-export-test,did:cheqd:testnet:test-issuer,"
        "2024-01-15T10:00:00Z,CSV export test,manual"
    )
    assert '"superseded, reissued"' in lines[2]


@pytest.mark.asyncio
async def test_export_unknown_format(engine):
    with pytest.raises(ListCodecError):
        await engine.export_revocation_list("xml")


@pytest.mark.asyncio
async def test_check_with_provider(engine):
    """Direct provider checks bypass the registry and raise for unknown names."""
    provider = StaticProvider("test-provider", revoked=True)
    await engine.register_revocation_provider(provider)

    assert await engine.check_with_provider("urn:uuid:provider-test", "test-provider") is True
    assert provider.checked == ["urn:uuid:provider-test"]

    with pytest.raises(ProviderNotFoundError, match="Provider unknown not found"):
        await engine.check_with_provider("urn:uuid:provider-test", "unknown")


@pytest.mark.asyncio
async def test_clear_cache_and_stats(engine, metadata):
    await engine.add_revoked_credential("urn:uuid:x", metadata)
    await engine.check_revocation_status("urn:uuid:x")

    stats = engine.get_cache_stats()
    assert stats.size == 1
    assert stats.ttl == 300

    engine.clear_cache()
    assert engine.get_cache_stats().size == 0


@pytest.mark.asyncio
async def test_clear_data_keeps_providers(engine, metadata):
    await engine.register_revocation_provider(StaticProvider("kept"))
    await engine.add_revoked_credential("urn:uuid:x", metadata)

    engine.clear_data()

    assert await engine.get_revoked_credentials() == []
    assert engine.providers.names() == ["kept"]


@pytest.mark.asyncio
async def test_clear_drops_everything(engine, metadata):
    await engine.register_revocation_provider(StaticProvider("dropped"))
    await engine.add_revoked_credential("urn:uuid:x", metadata)
    assert await engine.is_revoked("urn:uuid:x") is True

    engine.clear()

    assert await engine.is_revoked("urn:uuid:x") is False
    assert await engine.get_revoked_credentials() == []
    assert engine.providers.names() == []


@pytest.mark.asyncio
async def test_negative_ttl_from_config(metadata):
    """Provider-sourced clean answers can be configured to expire sooner."""
    clock = FakeClock()
    engine = RevocationEngine(
        config=RevocationConfig(cache_ttl=300, negative_cache_ttl=30), clock=clock
    )
    provider = StaticProvider("remote")
    await engine.register_revocation_provider(provider)

    await engine.check_revocation_status("urn:uuid:x")
    clock.advance(31)
    await engine.check_revocation_status("urn:uuid:x")

    assert len(provider.checked) == 2


@pytest.mark.asyncio
async def test_batch_not_stalled_by_blocking_provider():
    """A blocking synchronous provider times out per credential, concurrently."""

    class BlockingProvider:
        name = "blocking"
        description = "Sleeps in its thread"

        def is_available(self):
            return True

        def check_revocation(self, credential_or_id):
            time.sleep(0.5)
            return True

    engine = RevocationEngine(config=RevocationConfig(provider_timeout=0.05))
    await engine.register_revocation_provider(BlockingProvider())

    started = time.monotonic()
    result = await engine.batch_revocation_check(["urn:uuid:1", "urn:uuid:2", "urn:uuid:3"])

    assert time.monotonic() - started < 0.5
    assert result.revoked_count == 0
    for entry in result.results:
        assert entry.status.unresolved_providers == ["blocking"]
        assert not entry.status.confirmed


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
