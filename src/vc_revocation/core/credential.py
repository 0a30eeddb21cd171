"""Accessors for credential-like values.

The engine accepts a bare identifier, a mapping (parsed JSON credential) or
any object exposing ``id`` and optionally ``status``/``credentialStatus``.
"""

from collections.abc import Mapping
from typing import Any, Optional

STATUS_FIELDS = ("status", "credentialStatus")


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def credential_id(credential_or_id: Any) -> Optional[str]:
    """Return the credential identifier, or None if there is none."""
    if credential_or_id is None:
        return None
    if isinstance(credential_or_id, str):
        return credential_or_id or None
    cid = _field(credential_or_id, "id")
    return str(cid) if cid else None


def status_reference(credential: Any) -> Any:
    """Return the raw status reference of a credential, or None."""
    if credential is None or isinstance(credential, str):
        return None
    for name in STATUS_FIELDS:
        status = _field(credential, name)
        if status:
            return status
    return None
