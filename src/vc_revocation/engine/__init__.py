"""Revocation engine: registry, cache, provider chain and list codec."""

from .cache import StatusCache
from .chain import ChainResolution, ProviderChain
from .client import RevocationEngine
from .registry import RevocationRegistry

__all__ = [
    "RevocationEngine",
    "RevocationRegistry",
    "StatusCache",
    "ProviderChain",
    "ChainResolution",
]
