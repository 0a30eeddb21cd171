"""Published revocation list provider for batch revocation checking."""

import time
from typing import Any, Optional

import httpx

from ..core.credential import credential_id
from ..core.errors import ListCodecError, ProviderError
from ..core.models import RevocationList, RevocationMetadata, RevokedCredential
from ..engine import codec
from .base import RevocationProvider


class CRLRevocationProvider(RevocationProvider):
    """Downloads a published revocation list and answers membership queries.

    The list uses the same JSON document format as
    RevocationEngine.export_revocation_list("json"), so one engine's export
    can back another engine's provider.
    """

    def __init__(
        self,
        list_url: str,
        name: str = "crl",
        description: str = "Published revocation list",
        timeout: float = 10.0,
        cache_ttl: float = 3600,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the provider.

        Args:
            list_url: Revocation list distribution URL
            name: Provider name used in the chain
            description: Human-readable description
            timeout: Request timeout in seconds
            cache_ttl: Cache TTL in seconds (default: 1 hour)
            http_client: Optional HTTP client to use
        """
        self.list_url = list_url
        self.name = name
        self.description = description
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._http_client = http_client
        self._cached: Optional[tuple[dict[str, RevokedCredential], float]] = None

    async def download_list(self) -> dict[str, RevokedCredential]:
        """Download the revocation list.

        Returns:
            Revoked credentials keyed by credential id

        Raises:
            ProviderError: If the list cannot be downloaded or parsed
        """
        if self._cached is not None:
            revoked, cached_at = self._cached
            if time.time() - cached_at < self.cache_ttl:
                return revoked

        try:
            if self._http_client is not None:
                response = await self._http_client.get(self.list_url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.list_url)
            response.raise_for_status()
            revocation_list: RevocationList = codec.from_json(response.content)
        except (httpx.HTTPError, ListCodecError) as e:
            raise ProviderError(f"Failed to download revocation list: {e}") from e

        revoked = {rc.credential_id: rc for rc in revocation_list.revoked_credentials}
        self._cached = (revoked, time.time())
        return revoked

    async def is_available(self) -> bool:
        return True

    async def check_revocation(self, credential_or_id: Any) -> bool:
        revoked = await self.download_list()
        return credential_id(credential_or_id) in revoked

    async def get_metadata(self, credential_or_id: Any) -> Optional[RevocationMetadata]:
        revoked = await self.download_list()
        entry = revoked.get(credential_id(credential_or_id) or "")
        return entry.metadata if entry else None

    def clear_cache(self):
        """Clear the downloaded list."""
        self._cached = None
