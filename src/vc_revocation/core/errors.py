"""Exception hierarchy for vc-revocation."""

from typing import Optional


class RevocationError(Exception):
    """Base exception for all vc-revocation errors."""

    pass


# Provider errors
class ProviderError(RevocationError):
    """Base exception for revocation provider errors."""

    pass


class ProviderNotFoundError(ProviderError):
    """No provider is registered under the requested name."""

    pass


class ProviderUnavailableError(ProviderError):
    """Provider reported itself as unavailable."""

    pass


class ProviderTimeoutError(ProviderError):
    """Provider call exceeded the configured timeout."""

    pass


# Status list errors
class StatusListError(RevocationError):
    """Base exception for W3C Status List errors."""

    pass


class MissingStatusReferenceError(StatusListError):
    """Credential carries no usable status list reference."""

    pass


class InvalidStatusIndexError(StatusListError):
    """Status list index is not an integer or is out of range."""

    pass


class StatusListFetchError(StatusListError):
    """Status list credential could not be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedStatusListError(StatusListError):
    """Status list credential or its encoded bitstring is malformed."""

    pass


# List import/export errors
class ListCodecError(RevocationError):
    """Revocation list could not be serialized or parsed."""

    pass


# Configuration errors
class ConfigurationError(RevocationError):
    """Invalid or unreadable configuration."""

    pass
