"""Settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (CLOUDSIFT_ prefix)
  2. YAML config file (if specified)
  3. Default values

``ClientConfig`` is the per-client view the request builder works from. Its
``api_version`` additionally honours the ``CLOUDSEARCH_API_VERSION``
environment variable, read every time the value is needed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, DotEnvSettingsSource, EnvSettingsSource, SettingsConfigDict

from cloudsift.exceptions import MissingSearchDomainException

DEFAULT_API_VERSION = "2011-02-01"
STRUCTURED_API_VERSION = "2013-01-01"
DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_SERVICE_HOST = "cloudsearch.amazonaws.com"


class Mode(str, Enum):
    """Whether a client talks to the service or answers with canned data."""

    LIVE = "live"
    SANDBOX = "sandbox"


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Nested settings use double underscores: CLOUDSIFT_OBSERVABILITY__LOG_LEVEL=debug

    Example:
        CLOUDSIFT_MODE=live
        CLOUDSIFT_SEARCH_DOMAIN=my-domain-abc123
        CLOUDSIFT_AWS_REGION=eu-west-1
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOUDSIFT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mode: Mode = Field(default=Mode.SANDBOX, description="live or sandbox")
    search_domain: str | None = Field(default=None, description="CloudSearch domain name")
    aws_region: str | None = Field(default=None, description="AWS region of the domain")
    api_version: str | None = Field(default=None, description="CloudSearch API version")
    service_host: str | None = Field(default=None, description="Service host suffix")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        env_values = _merge(DotEnvSettingsSource(cls)(), EnvSettingsSource(cls)())
        return cls(**_merge(data, env_values))


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``override`` on ``base``; nested dicts merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ApiVersionOverride(BaseSettings):
    """Process-environment override for the API version (``CLOUDSEARCH_API_VERSION``)."""

    model_config = SettingsConfigDict(env_prefix="CLOUDSEARCH_", case_sensitive=False, extra="ignore")

    api_version: str | None = None


class ClientConfig:
    """Connection settings owned by one client.

    Each accessor falls back in order: explicit value, environment override
    (``api_version`` only), built-in default. ``search_domain`` has no
    default and raises ``MissingSearchDomainException`` when read unset.
    """

    def __init__(
        self,
        search_domain: str | None = None,
        aws_region: str | None = None,
        *,
        api_version: str | None = None,
        service_host: str | None = None,
    ) -> None:
        self._search_domain = search_domain
        self._aws_region = aws_region
        self._api_version = api_version
        self._service_host = service_host

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientConfig:
        return cls(
            settings.search_domain,
            settings.aws_region,
            api_version=settings.api_version,
            service_host=settings.service_host,
        )

    @property
    def search_domain(self) -> str:
        if not self._search_domain:
            raise MissingSearchDomainException()
        return self._search_domain

    @search_domain.setter
    def search_domain(self, value: str | None) -> None:
        self._search_domain = value

    @property
    def aws_region(self) -> str:
        return self._aws_region or DEFAULT_AWS_REGION

    @aws_region.setter
    def aws_region(self, value: str | None) -> None:
        self._aws_region = value

    @property
    def api_version(self) -> str:
        return self._api_version or ApiVersionOverride().api_version or DEFAULT_API_VERSION

    @api_version.setter
    def api_version(self, value: str | None) -> None:
        self._api_version = value

    @property
    def service_host(self) -> str:
        return self._service_host or DEFAULT_SERVICE_HOST

    @service_host.setter
    def service_host(self, value: str | None) -> None:
        self._service_host = value

    @property
    def is_structured(self) -> bool:
        """True when the 2013-01-01 parameter conventions apply."""
        return self.api_version == STRUCTURED_API_VERSION

    def __repr__(self) -> str:
        return (
            f"ClientConfig(search_domain={self._search_domain!r}, aws_region={self.aws_region!r}, "
            f"api_version={self.api_version!r}, service_host={self.service_host!r})"
        )
