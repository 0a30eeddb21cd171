"""Revocation providers consulted after the local registry."""

from .base import RevocationProvider
from .blockchain import BlockchainRevocationProvider
from .crl import CRLRevocationProvider
from .ocsp import MockOCSPResponder, OCSPRevocationProvider
from .status_list import StatusListProvider

__all__ = [
    "RevocationProvider",
    "StatusListProvider",
    "OCSPRevocationProvider",
    "MockOCSPResponder",
    "CRLRevocationProvider",
    "BlockchainRevocationProvider",
]
