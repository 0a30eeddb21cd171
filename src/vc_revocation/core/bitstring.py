"""W3C Status List 2021 bitstring decoding.

The ``encodedList`` of a status list credential is a base64 or base64url
string. Published lists are gzip-compressed before encoding; uncompressed
lists are accepted too. Bit 0 is the most significant bit of byte 0.
https://www.w3.org/TR/vc-status-list/
"""

import base64
import binascii
import gzip
import zlib

from .errors import InvalidStatusIndexError, MalformedStatusListError

GZIP_MAGIC = b"\x1f\x8b"


class Bitstring:
    """Bit-addressable view over a decoded status list."""

    def __init__(self, data: bytes):
        self._data = bytes(data)

    @property
    def data(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data) * 8

    def __str__(self) -> str:
        return "".join(format(byte, "08b") for byte in self._data)

    def __repr__(self) -> str:
        return f"Bitstring(bits={len(self)})"

    def bit(self, index: int) -> str:
        """Return '1' (revoked) or '0' (active) for a status index.

        Raises:
            InvalidStatusIndexError: If index is outside the list
        """
        total_bits = len(self)
        if index < 0 or index >= total_bits:
            raise InvalidStatusIndexError(
                f"Status list index {index} out of range [0, {total_bits})"
            )

        byte_index = index // 8
        bit_position = 7 - (index % 8)
        return "1" if (self._data[byte_index] >> bit_position) & 1 else "0"

    def is_set(self, index: int) -> bool:
        """Check whether the bit at index is set."""
        return self.bit(index) == "1"


def _b64decode(encoded: str) -> bytes:
    normalized = "".join(encoded.split()).replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedStatusListError(f"Invalid base64 in encoded status list: {e}") from e


def decode_status_list(encoded: str) -> Bitstring:
    """Decode a base64/base64url status list into a Bitstring.

    Args:
        encoded: The ``encodedList`` value

    Returns:
        Bitstring over the decoded bytes, inflated when they are a gzip
        stream. Bytes that merely start with the gzip magic but do not
        inflate are used as-is.

    Raises:
        MalformedStatusListError: If the value cannot be decoded
    """
    if not isinstance(encoded, str):
        raise MalformedStatusListError("Encoded status list must be a string")

    raw = _b64decode(encoded)
    if raw.startswith(GZIP_MAGIC):
        try:
            raw = gzip.decompress(raw)
        except (OSError, EOFError, zlib.error):
            # Uncompressed list whose first byte pair equals the gzip magic
            pass

    return Bitstring(raw)
