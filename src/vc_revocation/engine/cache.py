"""TTL-bounded cache of resolved revocation statuses."""

import time
from typing import Callable, Optional

from ..core.models import CacheStats, RevocationStatus


class StatusCache:
    """Memo of RevocationStatus keyed by credential identifier.

    Expiry is lazy: a stale entry is dropped when it is next read. Revoked
    answers live for ``ttl`` seconds, not-revoked answers for
    ``negative_ttl`` seconds (defaults to ``ttl``). A TTL of zero or less
    disables caching for that kind of answer.
    """

    def __init__(
        self,
        ttl: float = 300,
        negative_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache.

        Args:
            ttl: TTL in seconds for revoked answers (default: 5 minutes)
            negative_ttl: TTL in seconds for not-revoked answers
            clock: Time source returning seconds
        """
        self.ttl = ttl
        self.negative_ttl = ttl if negative_ttl is None else negative_ttl
        self._clock = clock
        self._entries: dict[str, tuple[RevocationStatus, float]] = {}

    def _ttl_for(self, status: RevocationStatus) -> float:
        return self.ttl if status.is_revoked else self.negative_ttl

    def get(self, credential_id: str) -> Optional[RevocationStatus]:
        """Return the cached status if it is still fresh."""
        entry = self._entries.get(credential_id)
        if entry is None:
            return None

        status, cached_at = entry
        if self._clock() - cached_at < self._ttl_for(status):
            return status

        self._entries.pop(credential_id, None)
        return None

    def set(self, credential_id: str, status: RevocationStatus) -> None:
        if self._ttl_for(status) <= 0:
            return
        self._entries[credential_id] = (status, self._clock())

    def invalidate(self, credential_id: str) -> None:
        self._entries.pop(credential_id, None)

    def clear(self) -> None:
        """Clear the status cache."""
        self._entries.clear()

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._entries), ttl=self.ttl)

    def __len__(self) -> int:
        return len(self._entries)
