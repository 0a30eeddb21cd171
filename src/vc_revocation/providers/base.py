"""Revocation provider contract."""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.models import RevocationMetadata


class RevocationProvider(ABC):
    """External source of revocation truth consulted after the local registry.

    Subclassing is optional: any object with ``name``, ``description``,
    ``is_available``, ``check_revocation`` and ``get_metadata`` can be
    registered. The three methods may be coroutines or plain functions.
    """

    name: str = ""
    description: str = ""

    @abstractmethod
    async def is_available(self) -> bool:
        """Whether the provider can currently answer queries."""

    @abstractmethod
    async def check_revocation(self, credential_or_id: Any) -> bool:
        """Return True if the provider knows the credential to be revoked."""

    async def get_metadata(self, credential_or_id: Any) -> Optional[RevocationMetadata]:
        """Return revocation details, or None if the provider has none."""
        return None


async def call(method, *args) -> Any:
    """Call a provider method that may or may not be a coroutine function.

    Plain functions run in a worker thread so a blocking provider never
    stalls the event loop.
    """
    if inspect.iscoroutinefunction(method):
        return await method(*args)

    result = await asyncio.to_thread(method, *args)
    if inspect.isawaitable(result):
        result = await result
    return result
