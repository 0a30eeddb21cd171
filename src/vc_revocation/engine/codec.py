"""Serialization of revocation lists to JSON, CSV and YAML."""

import csv
import io
import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..core.errors import ListCodecError
from ..core.models import (
    RevocationList,
    RevocationListMetadata,
    RevocationMetadata,
    RevokedCredential,
    utcnow,
)

LIST_VERSION = "1.0.0"
CSV_HEADER = ["credentialId", "issuerDID", "revokedDate", "reason", "source"]
FORMATS = ("json", "csv", "yaml")

RevocationListInput = Union[RevocationList, Mapping[str, Any], str, bytes]


def build_list(
    entries: Iterable[RevokedCredential],
    issuer_did: str = "local",
    metadata: Optional[RevocationListMetadata] = None,
) -> RevocationList:
    """Wrap registry entries in a freshly stamped RevocationList."""
    now = utcnow()
    return RevocationList(
        version=LIST_VERSION,
        created=now,
        updated=now,
        issuer_did=issuer_did,
        revoked_credentials=list(entries),
        metadata=metadata or RevocationListMetadata(),
    )


def _document(revocation_list: RevocationList) -> dict[str, Any]:
    return revocation_list.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_json(revocation_list: RevocationList) -> str:
    return json.dumps(_document(revocation_list), indent=2)


def from_json(text: Union[str, bytes]) -> RevocationList:
    """Parse a JSON revocation list document.

    Raises:
        ListCodecError: If the text is not a valid revocation list
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ListCodecError(f"Invalid JSON in revocation list: {e}") from e
    return parse_list(data)


def parse_list(data: Any) -> RevocationList:
    """Validate a revocation list given as a model, mapping or JSON text."""
    if isinstance(data, RevocationList):
        return data
    if isinstance(data, (str, bytes)):
        return from_json(data)
    if not isinstance(data, Mapping):
        raise ListCodecError(f"Revocation list must be an object, got {type(data).__name__}")
    try:
        return RevocationList.model_validate(data)
    except ValidationError as e:
        raise ListCodecError(f"Invalid revocation list: {e}") from e


def to_yaml(revocation_list: RevocationList) -> str:
    return yaml.safe_dump(_document(revocation_list), default_flow_style=False, sort_keys=False)


def from_yaml(text: str) -> RevocationList:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ListCodecError(f"Invalid YAML in revocation list: {e}") from e
    return parse_list(data)


def to_csv(entries: Iterable[RevokedCredential]) -> str:
    """Render entries as CSV, one row per credential.

    Fields are quoted per RFC 4180 where needed, so reasons may contain
    commas, quotes or newlines.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for entry in entries:
        metadata = entry.metadata.model_dump(mode="json", by_alias=True)
        writer.writerow(
            [
                entry.credential_id,
                metadata["issuerDID"],
                metadata["revokedDate"],
                metadata.get("reason") or "",
                metadata["source"],
            ]
        )
    return buffer.getvalue().rstrip("\n")


def from_csv(text: str) -> list[RevokedCredential]:
    """Parse CSV produced by to_csv.

    Raises:
        ListCodecError: If the header or a row is invalid
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header != CSV_HEADER:
        raise ListCodecError(f"Unexpected CSV header: {header}")

    entries = []
    for line_number, row in enumerate(reader, start=2):
        if not row:
            continue
        if len(row) != len(CSV_HEADER):
            raise ListCodecError(
                f"CSV line {line_number}: expected {len(CSV_HEADER)} fields, got {len(row)}"
            )
        credential_id, issuer_did, revoked_date, reason, source = row
        try:
            entries.append(
                RevokedCredential(
                    credential_id=credential_id,
                    metadata=RevocationMetadata(
                        issuer_did=issuer_did,
                        revoked_date=revoked_date,
                        reason=reason or None,
                        source=source or "import",
                    ),
                )
            )
        except ValidationError as e:
            raise ListCodecError(f"CSV line {line_number}: {e}") from e
    return entries


def dumps(revocation_list: RevocationList, format: str = "json") -> str:
    """Serialize a revocation list in one of FORMATS.

    Raises:
        ListCodecError: If the format is unknown
    """
    if format == "json":
        return to_json(revocation_list)
    if format == "csv":
        return to_csv(revocation_list.revoked_credentials)
    if format == "yaml":
        return to_yaml(revocation_list)
    raise ListCodecError(f"Unsupported revocation list format: {format}")


def loads(text: str, format: str = "json") -> RevocationList:
    """Parse a revocation list serialized in one of FORMATS."""
    if format == "json":
        return from_json(text)
    if format == "csv":
        return build_list(from_csv(text), issuer_did="import")
    if format == "yaml":
        return from_yaml(text)
    raise ListCodecError(f"Unsupported revocation list format: {format}")


def _format_for(path: Path) -> str:
    suffix = path.suffix.lower().lstrip(".")
    return "yaml" if suffix == "yml" else suffix


def load(path: Union[str, Path]) -> RevocationList:
    """Load a revocation list file; the format follows the file suffix."""
    path = Path(path)
    if not path.exists():
        raise ListCodecError(f"Revocation list file not found: {path}")
    return loads(path.read_text(encoding="utf-8"), _format_for(path))


def save(revocation_list: RevocationList, path: Union[str, Path]) -> None:
    """Write a revocation list file; the format follows the file suffix."""
    path = Path(path)
    path.write_text(dumps(revocation_list, _format_for(path)), encoding="utf-8")
