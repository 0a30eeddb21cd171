"""W3C Status List 2021 revocation provider.

https://www.w3.org/TR/vc-status-list/
"""

import time
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError

from ..core.bitstring import Bitstring, decode_status_list
from ..core.credential import status_reference
from ..core.errors import (
    InvalidStatusIndexError,
    MalformedStatusListError,
    MissingStatusReferenceError,
    StatusListFetchError,
)
from ..core.models import RevocationMetadata, StatusListEntry
from .base import RevocationProvider

# A credential's status is either one entry or a list of entries
StatusReference = Union[StatusListEntry, list[StatusListEntry]]

ACCEPT = "application/vc+ld+json, application/ld+json, application/json"


def _qualifies(raw: Any) -> bool:
    return (
        isinstance(raw, Mapping)
        and bool(raw.get("statusListCredential"))
        and raw.get("statusListIndex") is not None
    )


def _entry(raw: Any) -> StatusListEntry:
    try:
        return StatusListEntry.model_validate(raw)
    except ValidationError as e:
        raise MissingStatusReferenceError(
            "Credential missing statusListCredential or statusListIndex"
        ) from e


def parse_status_reference(raw: Any) -> StatusReference:
    """Parse a raw status value into a StatusReference.

    Raises:
        MissingStatusReferenceError: If no entry has both required fields
    """
    if isinstance(raw, list):
        entries = [_entry(item) for item in raw if _qualifies(item)]
        if not entries:
            raise MissingStatusReferenceError(
                "Credential missing statusListCredential or statusListIndex"
            )
        return entries

    if not _qualifies(raw):
        raise MissingStatusReferenceError(
            "Credential missing statusListCredential or statusListIndex"
        )
    return _entry(raw)


def select_entry(reference: StatusReference) -> StatusListEntry:
    """Pick the entry to check: the only one, or the first of a list."""
    if isinstance(reference, StatusListEntry):
        return reference
    return reference[0]


def parse_index(value: Union[int, str]) -> int:
    """Parse a statusListIndex value.

    Raises:
        InvalidStatusIndexError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise InvalidStatusIndexError(f"Invalid statusListIndex: {value!r}")
    try:
        index = int(str(value).strip(), 10)
    except ValueError as e:
        raise InvalidStatusIndexError(f"Invalid statusListIndex: {value!r}") from e
    if index < 0:
        raise InvalidStatusIndexError(f"Invalid statusListIndex: {value!r}")
    return index


class StatusListProvider(RevocationProvider):
    """Checks revocation bits in W3C Status List 2021 credentials."""

    name = "status-list"
    description = "W3C Status List 2021 provider"

    def __init__(
        self,
        timeout: float = 10.0,
        cache_ttl: float = 300,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the provider.

        Args:
            timeout: HTTP request timeout in seconds
            cache_ttl: How long a fetched status list is reused (0 disables)
            http_client: Optional HTTP client to use
        """
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._http_client = http_client
        self._cache: dict[str, tuple[Bitstring, float]] = {}

    async def is_available(self) -> bool:
        return True

    async def check_revocation(self, credential_or_id: Any) -> bool:
        """Check the revocation bit referenced by a credential's status.

        Args:
            credential_or_id: The full credential; a bare identifier carries
                no status reference and is rejected

        Returns:
            True if the referenced bit is set

        Raises:
            MissingStatusReferenceError: If there is no usable status entry
            InvalidStatusIndexError: If the index is not an integer or is
                outside the list
            StatusListFetchError: If the status list cannot be fetched
            MalformedStatusListError: If the status list is malformed
        """
        raw = status_reference(credential_or_id)
        if raw is None:
            raise MissingStatusReferenceError(
                "StatusListProvider requires the full credential with a status property"
            )

        entry = select_entry(parse_status_reference(raw))
        index = parse_index(entry.status_list_index)
        bitstring = await self.fetch_status_list(entry.status_list_credential)
        return bitstring.is_set(index)

    async def get_metadata(self, credential_or_id: Any) -> Optional[RevocationMetadata]:
        """Status lists carry no per-credential details."""
        return None

    async def fetch_status_list(self, url: str) -> Bitstring:
        """Fetch a status list credential and decode its bitstring.

        Raises:
            StatusListFetchError: On transport errors or a non-2xx response
            MalformedStatusListError: If encodedList is missing or invalid
        """
        if url in self._cache:
            bitstring, cached_at = self._cache[url]
            if time.time() - cached_at < self.cache_ttl:
                return bitstring

        try:
            if self._http_client is not None:
                response = await self._http_client.get(url, headers={"Accept": ACCEPT})
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, headers={"Accept": ACCEPT})
        except httpx.HTTPError as e:
            raise StatusListFetchError(f"Network error fetching status list from {url}: {e}") from e

        if not response.is_success:
            raise StatusListFetchError(
                f"Failed to fetch status list credential: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            status_list_vc = response.json()
        except ValueError as e:
            raise MalformedStatusListError(f"Invalid JSON in status list from {url}") from e

        subject = status_list_vc.get("credentialSubject") if isinstance(status_list_vc, dict) else None
        encoded_list = subject.get("encodedList") if isinstance(subject, dict) else None
        if not encoded_list:
            raise MalformedStatusListError("Status list credential missing credentialSubject.encodedList")

        bitstring = decode_status_list(encoded_list)
        if self.cache_ttl > 0:
            self._cache[url] = (bitstring, time.time())
        return bitstring

    def clear_cache(self):
        """Clear the status list cache."""
        self._cache.clear()
