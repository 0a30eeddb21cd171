"""Core functionality for vc-revocation."""

from .bitstring import Bitstring, decode_status_list
from .config import RevocationConfig
from .credential import credential_id, status_reference
from .errors import (
    RevocationError,
    ProviderError,
    ProviderNotFoundError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    StatusListError,
    MissingStatusReferenceError,
    InvalidStatusIndexError,
    StatusListFetchError,
    MalformedStatusListError,
    ListCodecError,
    ConfigurationError,
)
from .models import (
    BatchEntry,
    BatchRevocationResult,
    CacheStats,
    ProviderOutcome,
    ProviderResult,
    RevocationList,
    RevocationListMetadata,
    RevocationMetadata,
    RevocationStatus,
    RevokedCredential,
    StatusListEntry,
    ValidationResult,
)

__all__ = [
    # Bitstring
    "Bitstring",
    "decode_status_list",
    # Config
    "RevocationConfig",
    # Credential accessors
    "credential_id",
    "status_reference",
    # Errors
    "RevocationError",
    "ProviderError",
    "ProviderNotFoundError",
    "ProviderTimeoutError",
    "ProviderUnavailableError",
    "StatusListError",
    "MissingStatusReferenceError",
    "InvalidStatusIndexError",
    "StatusListFetchError",
    "MalformedStatusListError",
    "ListCodecError",
    "ConfigurationError",
    # Models
    "BatchEntry",
    "BatchRevocationResult",
    "CacheStats",
    "ProviderOutcome",
    "ProviderResult",
    "RevocationList",
    "RevocationListMetadata",
    "RevocationMetadata",
    "RevocationStatus",
    "RevokedCredential",
    "StatusListEntry",
    "ValidationResult",
]
