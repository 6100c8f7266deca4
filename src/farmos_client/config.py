"""Configuration management for the farmOS client."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# farmOS 1.x RESTWS stays below ~2000 URL characters with 99 ``id[n]`` params
DEFAULT_BATCH_SIZE = 99
DEFAULT_MAX_PAGES = 1000


class FarmOSConfig(BaseModel):
    """Connection settings for one farmOS server."""

    host: str = Field(..., description="farmOS base URL, e.g. https://farm.example.com")
    client_id: str = Field(
        default="farmos_development", description="OAuth2 client id"
    )
    # Cannot be None: it is encoded into the Basic Authorization header
    client_secret: str = Field(default="", description="OAuth2 client secret")
    scope: str = Field(default="user_access", description="OAuth2 scope to request")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE,
        ge=1,
        le=DEFAULT_BATCH_SIZE,
        description="Maximum number of ids sent in a single batched request",
    )
    max_pages: int = Field(
        default=DEFAULT_MAX_PAGES,
        ge=1,
        description="Upper bound on pages fetched by a single paginated walk",
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")

    @field_validator("host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("host must not be empty")
        return v

    @field_validator("client_secret", mode="before")
    @classmethod
    def secret_never_none(cls, v: Any) -> Any:
        return "" if v is None else v


class ConfigManager:
    """Loads and saves FarmOSConfig from JSON with environment overrides."""

    DEFAULT_CONFIG_PATH = Path(".farmos/config.json")

    ENV_OVERRIDES = {
        "FARMOS_HOST": "host",
        "FARMOS_CLIENT_ID": "client_id",
        "FARMOS_CLIENT_SECRET": "client_secret",
        "FARMOS_SCOPE": "scope",
        "FARMOS_TIMEOUT": "timeout",
        "FARMOS_BATCH_SIZE": "batch_size",
        "FARMOS_MAX_PAGES": "max_pages",
        "FARMOS_VERIFY_SSL": "verify_ssl",
    }

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environ: Optional[Dict[str, str]] = None,
    ):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._environ = environ if environ is not None else os.environ
        self._config: Optional[FarmOSConfig] = None

    def load(self) -> FarmOSConfig:
        """Load configuration from file, then apply FARMOS_* environment variables."""
        data: Dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ValueError(f"Failed to load config from {self.config_path}: {e}")
            logger.debug(f"Loaded farmOS config from {self.config_path}")

        for env_name, field_name in self.ENV_OVERRIDES.items():
            if env_name in self._environ:
                data[field_name] = self._environ[env_name]

        try:
            self._config = FarmOSConfig(**data)
        except ValueError as e:
            raise ValueError(f"Invalid farmOS configuration: {e}")
        return self._config

    def save(self, config: Optional[FarmOSConfig] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self._config

        if config is None:
            raise ValueError("No configuration to save")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            json.dump(config.model_dump(), f, indent=2)
