"""Online status responder provider for real-time revocation checking."""

import time
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from ..core.credential import credential_id
from ..core.errors import ProviderError
from ..core.models import RevocationMetadata, utcnow
from .base import RevocationProvider


class OCSPStatus(str, Enum):
    """Responder status codes."""

    GOOD = "good"
    REVOKED = "revoked"
    UNKNOWN = "unknown"


class OCSPResponse(BaseModel):
    """A status responder answer for one credential."""

    status: OCSPStatus = OCSPStatus.UNKNOWN
    produced_at: datetime = Field(default_factory=utcnow)
    this_update: datetime = Field(default_factory=utcnow, description="When this status became valid")
    next_update: Optional[datetime] = None
    revocation_time: Optional[datetime] = None
    revocation_reason: Optional[str] = None
    issuer_did: Optional[str] = Field(default=None, alias="issuer")

    model_config = {"populate_by_name": True}

    def is_valid(self) -> bool:
        """Check if credential is good (not revoked)."""
        return self.status is OCSPStatus.GOOD

    def is_revoked(self) -> bool:
        return self.status is OCSPStatus.REVOKED


class OCSPRevocationProvider(RevocationProvider):
    """Queries an HTTP status responder, one credential per request.

    The responder is asked ``GET {responder_url}?id=<credential id>`` and
    answers with a JSON body as produced by MockOCSPResponder.get_status.
    """

    def __init__(
        self,
        responder_url: str,
        name: str = "ocsp",
        description: str = "Online credential status responder",
        timeout: float = 5,
        cache_ttl: float = 300,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the provider.

        Args:
            responder_url: Status responder URL
            name: Provider name used in the chain
            description: Human-readable description
            timeout: Request timeout in seconds
            cache_ttl: Cache TTL in seconds
            http_client: Optional HTTP client to use
        """
        self.responder_url = responder_url
        self.name = name
        self.description = description
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._http_client = http_client
        self._cache: dict[str, tuple[OCSPResponse, float]] = {}

    async def is_available(self) -> bool:
        return True

    async def query(self, credential_or_id: Any) -> OCSPResponse:
        """Fetch the responder's answer for a credential.

        Raises:
            ProviderError: If the credential has no id or the query fails
        """
        cid = credential_id(credential_or_id)
        if cid is None:
            raise ProviderError("Status responder query requires a credential id")

        if cid in self._cache:
            response, cached_at = self._cache[cid]
            if time.time() - cached_at < self.cache_ttl:
                return response

        try:
            if self._http_client is not None:
                http_response = await self._http_client.get(
                    self.responder_url, params={"id": cid}
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    http_response = await client.get(self.responder_url, params={"id": cid})
            http_response.raise_for_status()
            response = OCSPResponse.model_validate(http_response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"Status responder query failed: {e}") from e

        self._cache[cid] = (response, time.time())
        return response

    async def check_revocation(self, credential_or_id: Any) -> bool:
        response = await self.query(credential_or_id)
        return response.is_revoked()

    async def get_metadata(self, credential_or_id: Any) -> Optional[RevocationMetadata]:
        response = await self.query(credential_or_id)
        if not response.is_revoked():
            return None
        return RevocationMetadata(
            issuer_did=response.issuer_did or "unknown",
            revoked_date=response.revocation_time or response.this_update,
            reason=response.revocation_reason,
            source=self.name,
        )

    def clear_cache(self):
        """Clear the responder answer cache."""
        self._cache.clear()


class MockOCSPResponder:
    """In-memory status responder for tests and demos."""

    def __init__(self, issuer_did: str = "did:example:issuer"):
        """Initialize the mock responder."""
        self.issuer_did = issuer_did
        self._revoked: dict[str, dict] = {}

    def revoke_credential(
        self,
        credential_id: str,
        revocation_time: Optional[datetime] = None,
        reason: str = "key_compromise",
    ):
        """Mark a credential as revoked.

        Args:
            credential_id: Credential identifier to revoke
            revocation_time: When revoked (default: now)
            reason: Revocation reason
        """
        self._revoked[credential_id] = {
            "revocation_time": revocation_time or utcnow(),
            "reason": reason,
        }

    def unrevoke_credential(self, credential_id: str):
        """Remove a credential from the revoked set."""
        self._revoked.pop(credential_id, None)

    def get_status(self, credential_id: str) -> dict:
        """Get the responder payload for a credential.

        Args:
            credential_id: Credential identifier

        Returns:
            Dictionary with the responder answer
        """
        now = utcnow()
        response = {
            "status": OCSPStatus.GOOD.value,
            "issuer": self.issuer_did,
            "produced_at": now.isoformat(),
            "this_update": now.isoformat(),
            "next_update": (now + timedelta(hours=24)).isoformat(),
        }

        if credential_id in self._revoked:
            info = self._revoked[credential_id]
            response["status"] = OCSPStatus.REVOKED.value
            response["revocation_time"] = info["revocation_time"].isoformat()
            response["revocation_reason"] = info["reason"]

        return response

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Answer an httpx request, for use as a mock transport handler."""
        return httpx.Response(200, json=self.get_status(request.url.params.get("id", "")))
