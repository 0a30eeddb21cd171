"""Engine configuration."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .models import RevocationListMetadata


def default_list_metadata() -> RevocationListMetadata:
    return RevocationListMetadata(
        name="Local Revocation List",
        description="User-defined revocation list",
        source="local",
        maintainer="user",
    )


class RevocationConfig(BaseModel):
    """Tunables for a RevocationEngine."""

    cache_ttl: float = Field(default=300.0, description="Cache TTL in seconds")
    negative_cache_ttl: Optional[float] = Field(
        default=None, description="TTL for not-revoked answers (default: cache_ttl)"
    )
    provider_timeout: float = Field(
        default=10.0, description="Timeout for each provider call in seconds"
    )
    status_list_timeout: float = Field(
        default=10.0, description="HTTP timeout for status list fetches"
    )
    revocation_is_error: bool = Field(
        default=False,
        description="Report revocation as a validation error instead of a warning",
    )
    list_issuer_did: str = Field(default="local", description="issuerDID of exported lists")
    list_metadata: RevocationListMetadata = Field(default_factory=default_list_metadata)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "RevocationConfig":
        """Load configuration from a YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            RevocationConfig instance

        Raises:
            ConfigurationError: If the file cannot be loaded or parsed
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            return cls.model_validate(data.get("revocation", data))
        except Exception as e:
            raise ConfigurationError(f"Failed to load revocation config: {e}") from e

    def save(self, config_path: str | Path) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path to save YAML config
        """
        data = {"revocation": self.model_dump(mode="json", exclude_none=True)}
        with open(Path(config_path), "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
