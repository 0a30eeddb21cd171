"""Local revocation registry, the authoritative source of revocation facts."""

from typing import Optional

from ..core.models import RevocationMetadata, RevokedCredential, utcnow


class RevocationRegistry:
    """In-memory store of explicitly revoked credentials.

    Entries keep insertion order; re-adding an identifier overwrites its
    metadata in place. Cache coherence is the caller's concern, see
    RevocationEngine.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._revoked: dict[str, RevokedCredential] = {}

    def add(self, credential_id: str, metadata: RevocationMetadata) -> RevokedCredential:
        """Record a credential as revoked.

        Args:
            credential_id: Credential identifier
            metadata: Revocation metadata (last_checked is refreshed)

        Returns:
            The stored RevokedCredential
        """
        entry = RevokedCredential(
            credential_id=credential_id,
            metadata=metadata.model_copy(update={"last_checked": utcnow()}),
        )
        self._revoked[credential_id] = entry
        return entry

    def remove(self, credential_id: str) -> bool:
        """Remove a credential from the registry.

        Returns:
            True if an entry was removed
        """
        return self._revoked.pop(credential_id, None) is not None

    def get(self, credential_id: str) -> Optional[RevokedCredential]:
        return self._revoked.get(credential_id)

    def contains(self, credential_id: str) -> bool:
        return credential_id in self._revoked

    def get_all(self) -> list[RevokedCredential]:
        """Snapshot of all entries in insertion order."""
        return list(self._revoked.values())

    def clear(self) -> None:
        self._revoked.clear()

    def __len__(self) -> int:
        return len(self._revoked)

    def __contains__(self, credential_id: object) -> bool:
        return credential_id in self._revoked
