"""
Client configuration state.

Combines an optional YAML file with ``BIGCOMMERCE_*`` environment overrides,
type validation, and sensible defaults. Keys may be written in snake_case or
in the camelCase used by the BigCommerce app dashboard (``clientId``,
``storeHash``...).
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from bigcommerce_client.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "api.bigcommerce.com"
DEFAULT_LOGIN_URL = "login.bigcommerce.com"

_API_VERSION_RE = re.compile(r"^v\d+$")


class BigCommerceConfig(BaseModel):
    """Credentials and behavior for one BigCommerce store session."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    client_id: str | None = Field(default=None)
    secret: str | None = Field(default=None)
    callback: str | None = Field(default=None)
    access_token: str | None = Field(default=None)
    store_hash: str | None = Field(default=None)

    api_version: str = Field(default="v2")
    response_type: str = Field(default="json")
    api_url: str = Field(default=DEFAULT_API_URL)
    login_url: str = Field(default=DEFAULT_LOGIN_URL)
    headers: dict[str, str] = Field(default_factory=dict)

    fail_on_limit_reached: bool = Field(default=False)
    max_retry_delay: float = Field(default=5.0, ge=0)
    timeout: float = Field(default=60.0, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        """API versions look like v2, v3."""
        if not _API_VERSION_RE.match(v):
            raise ValueError(f"api_version must look like 'v3', got {v!r}")
        return v

    @field_validator("response_type")
    @classmethod
    def validate_response_type(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "xml"):
            raise ValueError(f"response_type must be 'json' or 'xml', got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return v


def build_config(data: "BigCommerceConfig | dict[str, Any] | None") -> BigCommerceConfig:
    """Coerce a mapping into a validated BigCommerceConfig.

    Raises:
        ConfigError: If data is missing or fails validation
    """
    if data is None:
        raise ConfigError("Config is required to create a BigCommerce client")
    if isinstance(data, BigCommerceConfig):
        return data
    try:
        return BigCommerceConfig(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid BigCommerce configuration: {e}") from e


# =============================================================================
# CONFIG LOADER
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration.

    Merges:
      1. Defaults declared on BigCommerceConfig
      2. bigcommerce.yaml from config_dir
      3. Environment variable overrides
    """

    ENV_OVERRIDES = {
        "BIGCOMMERCE_CLIENT_ID": "client_id",
        "BIGCOMMERCE_CLIENT_SECRET": "secret",
        "BIGCOMMERCE_CALLBACK": "callback",
        "BIGCOMMERCE_ACCESS_TOKEN": "access_token",
        "BIGCOMMERCE_STORE_HASH": "store_hash",
        "BIGCOMMERCE_API_VERSION": "api_version",
        "BIGCOMMERCE_RESPONSE_TYPE": "response_type",
        "BIGCOMMERCE_API_URL": "api_url",
        "BIGCOMMERCE_LOGIN_URL": "login_url",
        "LOG_LEVEL": "log_level",
    }

    def __init__(self, config_dir: str | None = None, filename: str = "bigcommerce.yaml"):
        self.config_dir = Path(config_dir or os.getenv("BIGCOMMERCE_CONFIG_DIR", "./config"))
        self.filename = filename

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file; a missing file means defaults."""
        if not path.exists():
            logger.debug(f"Config file not found (using defaults): {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        for env_name, field_name in self.ENV_OVERRIDES.items():
            if value := os.getenv(env_name):
                config.pop(to_camel(field_name), None)
                config[field_name] = value

        if fail_flag := os.getenv("BIGCOMMERCE_FAIL_ON_LIMIT_REACHED"):
            config.pop("failOnLimitReached", None)
            config["fail_on_limit_reached"] = fail_flag.strip().lower() in ("1", "true", "yes")

        return config

    def load(self) -> BigCommerceConfig:
        """
        Load complete configuration.

        Returns:
            BigCommerceConfig: Validated configuration object

        Raises:
            ConfigError: If configuration is invalid
        """
        path = self.config_dir / self.filename
        logger.info(f"Loading BigCommerce configuration from {path}")

        config = self._load_yaml(path)
        config = self._apply_env_overrides(config)

        return build_config(config)
