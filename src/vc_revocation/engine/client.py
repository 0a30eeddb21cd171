"""Revocation engine: registry, cache and provider chain behind one API."""

import asyncio
import logging
import time
from typing import Any, Callable, Iterable, Optional

import httpx

from ..core.config import RevocationConfig
from ..core.credential import credential_id
from ..core.models import (
    BatchEntry,
    BatchRevocationResult,
    CacheStats,
    RevocationMetadata,
    RevocationStatus,
    RevokedCredential,
    ValidationResult,
)
from ..providers.base import RevocationProvider
from ..providers.status_list import StatusListProvider
from . import codec
from .cache import StatusCache
from .chain import ProviderChain
from .locks import KeyedLock
from .registry import RevocationRegistry

logger = logging.getLogger(__name__)

LOCAL_SOURCE = "local"


class RevocationEngine:
    """Answers revocation queries for verifiable credentials.

    Resolution order is cache, then the local registry (authoritative), then
    registered providers in registration order. Every answer, including the
    not-revoked default, is written back to the cache. Registry mutations
    invalidate the affected cache entry under a per-credential lock.
    """

    def __init__(
        self,
        config: Optional[RevocationConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the engine.

        Args:
            config: Engine configuration (default: RevocationConfig())
            clock: Time source for the cache, in seconds
        """
        self.config = config or RevocationConfig()
        self.registry = RevocationRegistry()
        self.cache = StatusCache(
            ttl=self.config.cache_ttl,
            negative_ttl=self.config.negative_cache_ttl,
            clock=clock or time.time,
        )
        self.providers = ProviderChain(timeout=self.config.provider_timeout)
        self._locks = KeyedLock()

    # Local registry

    async def add_revoked_credential(
        self, credential_id: str, metadata: RevocationMetadata
    ) -> RevokedCredential:
        """Record a credential as revoked and drop its cached status."""
        async with self._locks.hold(credential_id):
            entry = self.registry.add(credential_id, metadata)
            self._cache_invalidate(credential_id)
        return entry

    async def remove_revoked_credential(self, credential_id: str) -> bool:
        """Remove a credential from the registry and drop its cached status."""
        async with self._locks.hold(credential_id):
            removed = self.registry.remove(credential_id)
            self._cache_invalidate(credential_id)
        return removed

    async def get_revoked_credentials(self) -> list[RevokedCredential]:
        return self.registry.get_all()

    # Queries

    async def is_revoked(self, credential_or_id: Any) -> bool:
        """Check if a credential is revoked."""
        status = await self.check_revocation_status(credential_or_id)
        return status.is_revoked

    async def check_revocation_status(self, credential_or_id: Any) -> RevocationStatus:
        """Resolve the revocation status of a credential.

        Args:
            credential_or_id: Credential identifier, or a credential mapping or
                object with an ``id``. Providers receive it unchanged, so
                pass the full credential for status-list checks.

        Returns:
            RevocationStatus naming the layer that produced the answer

        Raises:
            ValueError: If no credential identifier can be determined
        """
        cid = credential_id(credential_or_id)
        if cid is None:
            raise ValueError("Credential identifier is required")

        async with self._locks.hold(cid):
            cached = self._cache_get(cid)
            if cached is not None:
                return cached

            status = await self._resolve(cid, credential_or_id)
            self._cache_set(cid, status)
            return status

    async def _resolve(self, cid: str, credential_or_id: Any) -> RevocationStatus:
        entry = self.registry.get(cid)
        if entry is not None:
            logger.debug("Credential %s revoked in local registry", cid)
            return RevocationStatus(
                is_revoked=True,
                revoked_date=entry.metadata.revoked_date,
                reason=entry.metadata.reason,
                source=LOCAL_SOURCE,
                metadata=entry.metadata,
            )

        resolution = await self.providers.resolve(credential_or_id)
        if resolution.revoked is not None:
            metadata = resolution.revoked.metadata
            logger.debug("Credential %s revoked by provider %s", cid, resolution.revoked.provider)
            return RevocationStatus(
                is_revoked=True,
                revoked_date=metadata.revoked_date if metadata else None,
                reason=metadata.reason if metadata else None,
                source=resolution.revoked.provider,
                metadata=metadata,
                unresolved_providers=resolution.unresolved,
            )

        return RevocationStatus(
            is_revoked=False,
            source=LOCAL_SOURCE,
            unresolved_providers=resolution.unresolved,
        )

    async def validate_credential(self, credential: Any) -> ValidationResult:
        """Validate a credential against revocation data.

        A credential without an id is invalid. A revoked credential is
        invalid and reported as a warning, or as an error when
        ``revocation_is_error`` is configured.
        """
        errors: list[str] = []
        warnings: list[str] = []

        if credential is None or isinstance(credential, str) or credential_id(credential) is None:
            errors.append("Invalid credential: missing id")
            return ValidationResult(
                is_valid=False,
                revocation_status=RevocationStatus(is_revoked=False, source=LOCAL_SOURCE),
                validation_errors=errors,
                warnings=warnings,
            )

        status = await self.check_revocation_status(credential)
        if status.is_revoked:
            message = "Credential has been revoked"
            if self.config.revocation_is_error:
                errors.append(message)
            else:
                warnings.append(message)

        return ValidationResult(
            is_valid=not errors and not status.is_revoked,
            revocation_status=status,
            validation_errors=errors,
            warnings=warnings,
        )

    async def batch_revocation_check(self, credentials: Iterable[Any]) -> BatchRevocationResult:
        """Check many credentials concurrently.

        One credential failing never affects the others; a failed lookup is
        reported as not revoked.
        """
        credentials = list(credentials)
        outcomes = await asyncio.gather(
            *(self.check_revocation_status(c) for c in credentials),
            return_exceptions=True,
        )

        results = []
        for credential, outcome in zip(credentials, outcomes):
            cid = credential_id(credential) or ""
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning("Revocation check for %r failed: %s", cid, outcome)
                outcome = RevocationStatus(is_revoked=False, source=LOCAL_SOURCE)
            results.append(
                BatchEntry(credential_id=cid, is_revoked=outcome.is_revoked, status=outcome)
            )

        return BatchRevocationResult(
            total_checked=len(credentials),
            revoked_count=sum(1 for r in results if r.is_revoked),
            results=results,
        )

    # Import / export

    async def import_revocation_list(self, revocation_list: codec.RevocationListInput) -> int:
        """Add every entry of a revocation list to the registry.

        Args:
            revocation_list: RevocationList, mapping, or JSON text

        Returns:
            Number of credentials imported

        Raises:
            ListCodecError: If the list is malformed. Every ``revokedDate``
                must be an ISO 8601 timestamp; one bad entry rejects the
                whole list and nothing is imported.
        """
        parsed = codec.parse_list(revocation_list)
        for entry in parsed.revoked_credentials:
            await self.add_revoked_credential(entry.credential_id, entry.metadata)

        logger.info(
            "Imported %d revoked credentials from %s",
            len(parsed.revoked_credentials),
            parsed.issuer_did,
        )
        return len(parsed.revoked_credentials)

    async def export_revocation_list(self, format: str = "json") -> str:
        """Serialize the registry as "json", "csv" or "yaml".

        Raises:
            ListCodecError: If the format is unknown
        """
        revocation_list = codec.build_list(
            self.registry.get_all(),
            issuer_did=self.config.list_issuer_did,
            metadata=self.config.list_metadata,
        )
        return codec.dumps(revocation_list, format)

    # Providers

    async def register_revocation_provider(self, provider: RevocationProvider) -> None:
        self.providers.register(provider)
        logger.info("Registered revocation provider %s", provider.name)

    async def register_status_list_provider(
        self, http_client: Optional[httpx.AsyncClient] = None
    ) -> StatusListProvider:
        """Register a StatusListProvider using ``status_list_timeout`` from the config.

        Args:
            http_client: Optional HTTP client for status list fetches

        Returns:
            The registered provider
        """
        provider = StatusListProvider(
            timeout=self.config.status_list_timeout, http_client=http_client
        )
        await self.register_revocation_provider(provider)
        return provider

    async def unregister_revocation_provider(self, name: str) -> bool:
        return self.providers.unregister(name)

    async def check_with_provider(self, credential_or_id: Any, provider_name: str) -> bool:
        """Ask one named provider, bypassing registry and cache.

        Raises:
            ProviderNotFoundError: If the provider is not registered
            ProviderUnavailableError: If the provider is not available
            ProviderTimeoutError: If the provider does not answer in time
        """
        return await self.providers.check_with_provider(credential_or_id, provider_name)

    # Cache

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def _cache_get(self, cid: str) -> Optional[RevocationStatus]:
        try:
            return self.cache.get(cid)
        except Exception as e:
            logger.warning("Status cache read failed for %s: %s", cid, e)
            return None

    def _cache_set(self, cid: str, status: RevocationStatus) -> None:
        try:
            self.cache.set(cid, status)
        except Exception as e:
            logger.warning("Status cache write failed for %s: %s", cid, e)

    def _cache_invalidate(self, cid: str) -> None:
        try:
            self.cache.invalidate(cid)
        except Exception as e:
            logger.warning("Status cache invalidation failed for %s: %s", cid, e)

    # Reset

    def clear_data(self) -> None:
        """Drop all registry entries and cached statuses, keeping providers."""
        self.registry.clear()
        self.cache.clear()

    def clear(self) -> None:
        """Drop registry entries, cached statuses and providers."""
        self.clear_data()
        self.providers.clear()
