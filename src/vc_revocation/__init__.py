"""vc-revocation - Revocation and status checking for verifiable credentials."""

from .core import (
    Bitstring,
    RevocationConfig,
    RevocationError,
    RevocationList,
    RevocationMetadata,
    RevocationStatus,
    RevokedCredential,
    ValidationResult,
    decode_status_list,
)
from .engine import RevocationEngine
from .providers import RevocationProvider, StatusListProvider

__version__ = "0.1.0"

__all__ = [
    # Engine
    "RevocationEngine",
    # Core
    "RevocationConfig",
    "RevocationError",
    "RevocationList",
    "RevocationMetadata",
    "RevocationStatus",
    "RevokedCredential",
    "ValidationResult",
    "Bitstring",
    "decode_status_list",
    # Providers
    "RevocationProvider",
    "StatusListProvider",
]
