"""Ordered chain of revocation providers."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.errors import (
    ProviderNotFoundError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from ..core.models import ProviderOutcome, ProviderResult, RevocationMetadata
from ..providers.base import RevocationProvider, call

logger = logging.getLogger(__name__)


@dataclass
class ChainResolution:
    """What the chain learned about one credential.

    ``revoked`` is the first provider result that reported a revocation, or
    None. ``results`` holds every provider result in the order consulted.
    """

    revoked: Optional[ProviderResult] = None
    results: list[ProviderResult] = field(default_factory=list)

    @property
    def unresolved(self) -> list[str]:
        """Names of providers that gave no answer."""
        return [r.provider for r in self.results if not r.answered]


class ProviderChain:
    """Consults registered providers in registration order."""

    def __init__(self, timeout: Optional[float] = 10.0):
        """Initialize an empty chain.

        Args:
            timeout: Per-call timeout in seconds (None disables it)
        """
        self.timeout = timeout
        self._providers: dict[str, RevocationProvider] = {}

    def register(self, provider: RevocationProvider) -> None:
        """Register a provider.

        Re-registering a name replaces the provider and keeps its position.
        """
        if not getattr(provider, "name", None):
            raise ValueError("Revocation provider must have a non-empty name")
        self._providers[provider.name] = provider

    def unregister(self, name: str) -> bool:
        return self._providers.pop(name, None) is not None

    def get(self, name: str) -> Optional[RevocationProvider]:
        return self._providers.get(name)

    def names(self) -> list[str]:
        return list(self._providers)

    def clear(self) -> None:
        self._providers.clear()

    def __len__(self) -> int:
        return len(self._providers)

    async def _call(self, method, *args) -> Any:
        task = asyncio.ensure_future(call(method, *args))
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout)
        finally:
            if not task.done():
                task.cancel()
        if task not in done:
            raise ProviderTimeoutError(f"Provider call timed out after {self.timeout}s")
        return task.result()

    async def query(self, provider: RevocationProvider, credential_or_id: Any) -> ProviderResult:
        """Ask one provider about a credential, never raising.

        Args:
            provider: Provider to ask
            credential_or_id: Credential or identifier passed to the provider

        Returns:
            ProviderResult with an explicit outcome
        """
        name = provider.name
        try:
            if not await self._call(provider.is_available):
                logger.debug("Revocation provider %s is not available", name)
                return ProviderResult(provider=name, outcome=ProviderOutcome.UNAVAILABLE)

            if not await self._call(provider.check_revocation, credential_or_id):
                return ProviderResult(provider=name, outcome=ProviderOutcome.NOT_REVOKED)
        except ProviderTimeoutError:
            logger.warning("Revocation provider %s timed out after %ss", name, self.timeout)
            return ProviderResult(
                provider=name, outcome=ProviderOutcome.UNAVAILABLE, error="timeout"
            )
        except Exception as e:
            logger.warning("Revocation provider %s failed: %s", name, e)
            return ProviderResult(provider=name, outcome=ProviderOutcome.ERROR, error=str(e))

        return ProviderResult(
            provider=name,
            outcome=ProviderOutcome.REVOKED,
            metadata=await self._metadata(provider, credential_or_id),
        )

    async def _metadata(
        self, provider: RevocationProvider, credential_or_id: Any
    ) -> Optional[RevocationMetadata]:
        try:
            metadata = await self._call(provider.get_metadata, credential_or_id)
        except Exception as e:
            # A revoked answer stands even without details
            logger.warning("Revocation provider %s metadata lookup failed: %s", provider.name, e)
            return None

        if metadata is None or isinstance(metadata, RevocationMetadata):
            return metadata
        try:
            return RevocationMetadata.model_validate(metadata)
        except Exception as e:
            logger.warning("Revocation provider %s returned invalid metadata: %s", provider.name, e)
            return None

    async def resolve(self, credential_or_id: Any) -> ChainResolution:
        """Walk the chain until a provider reports the credential revoked.

        Args:
            credential_or_id: Credential or identifier passed to each provider

        Returns:
            ChainResolution; ``revoked`` is None if no provider said revoked
        """
        resolution = ChainResolution()
        for provider in list(self._providers.values()):
            result = await self.query(provider, credential_or_id)
            resolution.results.append(result)
            if result.outcome is ProviderOutcome.REVOKED:
                resolution.revoked = result
                break
        return resolution

    async def check_with_provider(self, credential_or_id: Any, name: str) -> bool:
        """Ask one named provider directly.

        Raises:
            ProviderNotFoundError: If no provider has this name
            ProviderUnavailableError: If the provider is not available
            ProviderTimeoutError: If the provider does not answer in time
        """
        provider = self._providers.get(name)
        if provider is None:
            raise ProviderNotFoundError(f"Provider {name} not found")

        if not await self._call(provider.is_available):
            raise ProviderUnavailableError(f"Provider {name} is not available")

        return bool(await self._call(provider.check_revocation, credential_or_id))
