"""Core data models for vc-revocation."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class RevocationMetadata(BaseModel):
    """Facts recorded about a revoked credential."""

    issuer_did: str = Field(alias="issuerDID", description="DID of the credential issuer")
    revoked_date: datetime = Field(alias="revokedDate", description="When the credential was revoked")
    reason: Optional[str] = Field(default=None, description="Revocation reason")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    source: str = Field(description="Where the revocation fact came from")
    last_checked: Optional[datetime] = Field(
        default=None, alias="lastChecked", description="Refreshed on every registry add"
    )

    model_config = {"populate_by_name": True}


class RevokedCredential(BaseModel):
    """A credential recorded as revoked in the local registry."""

    credential_id: str = Field(alias="credentialId", description="Credential identifier")
    metadata: RevocationMetadata

    model_config = {"populate_by_name": True}


class RevocationStatus(BaseModel):
    """Result of a revocation query."""

    is_revoked: bool = Field(alias="isRevoked")
    revoked_date: Optional[datetime] = Field(default=None, alias="revokedDate")
    reason: Optional[str] = None
    last_checked: datetime = Field(default_factory=utcnow, alias="lastChecked")
    source: str = Field(default="local", description="Layer that produced the answer")
    metadata: Optional[RevocationMetadata] = None

    # Providers that could not answer while this status was resolved
    unresolved_providers: list[str] = Field(
        default_factory=list, alias="unresolvedProviders"
    )

    model_config = {"populate_by_name": True}

    @property
    def confirmed(self) -> bool:
        """True unless a not-revoked answer was reached with providers missing."""
        return self.is_revoked or not self.unresolved_providers


class ProviderOutcome(str, Enum):
    """Outcome of a single provider call."""

    REVOKED = "revoked"
    NOT_REVOKED = "not_revoked"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


class ProviderResult(BaseModel):
    """Explicit outcome of asking one provider about one credential."""

    provider: str
    outcome: ProviderOutcome
    metadata: Optional[RevocationMetadata] = None
    error: Optional[str] = None

    @property
    def answered(self) -> bool:
        return self.outcome in (ProviderOutcome.REVOKED, ProviderOutcome.NOT_REVOKED)


class StatusListEntry(BaseModel):
    """A credential's pointer into a W3C status list."""

    status_list_credential: str = Field(alias="statusListCredential")
    status_list_index: Union[int, str] = Field(alias="statusListIndex")
    status_purpose: Optional[str] = Field(default=None, alias="statusPurpose")
    type: Optional[str] = None
    id: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ValidationResult(BaseModel):
    """Result of validating a credential against revocation data."""

    is_valid: bool = Field(alias="isValid")
    revocation_status: RevocationStatus = Field(alias="revocationStatus")
    validation_errors: list[str] = Field(default_factory=list, alias="validationErrors")
    warnings: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def __bool__(self) -> bool:
        """Allow using ValidationResult in boolean context."""
        return self.is_valid


class BatchEntry(BaseModel):
    """One credential's row in a batch check."""

    credential_id: str = Field(alias="credentialId")
    is_revoked: bool = Field(alias="isRevoked")
    status: RevocationStatus

    model_config = {"populate_by_name": True}


class BatchRevocationResult(BaseModel):
    """Aggregated result of checking many credentials."""

    total_checked: int = Field(alias="totalChecked")
    revoked_count: int = Field(alias="revokedCount")
    results: list[BatchEntry] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class CacheStats(BaseModel):
    """Cache size and TTL in seconds."""

    size: int
    ttl: float


class RevocationListMetadata(BaseModel):
    """Descriptive metadata of a revocation list document."""

    name: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    maintainer: Optional[str] = None


class RevocationList(BaseModel):
    """Transport form of the local registry, used for import and export."""

    version: str = Field(default="1.0.0", description="Document format version")
    created: datetime = Field(default_factory=utcnow)
    updated: datetime = Field(default_factory=utcnow)
    issuer_did: str = Field(default="local", alias="issuerDID")
    revoked_credentials: list[RevokedCredential] = Field(
        default_factory=list, alias="revokedCredentials"
    )
    metadata: RevocationListMetadata = Field(default_factory=RevocationListMetadata)

    model_config = {"populate_by_name": True}
