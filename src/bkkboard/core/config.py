"""Configuration management with Pydantic validation.

Provides type-safe configuration with:
- Pydantic models for validation
- YAML file loading
- A process-wide singleton
- ``BKK_API_KEY`` environment override for the API key
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/bkkboard.yaml")
API_KEY_ENV = "BKK_API_KEY"


# =============================================================================
# Configuration Models
# =============================================================================


class TransitConfig(BaseModel):
    """BKK FUTÁR API access."""

    base_url: str = Field(
        "https://futar.bkk.hu/api/query/v1/ws/otp/api/where",
        description="FUTÁR OTP 'where' endpoint",
    )
    api_key: SecretStr = Field(default=SecretStr(""), description="FUTÁR API key")
    app_version: str = Field("apiary-1.0", description="appVersion query parameter")
    timeout: float = Field(10.0, gt=0, le=60, description="HTTP timeout in seconds")
    minutes_after: int = Field(60, ge=1, le=240, description="Look-ahead window in minutes")
    vehicle_radius: int = Field(1000, ge=50, le=20000, description="Vehicle search radius (m)")
    mock: bool = Field(False, description="Serve canned data instead of calling the API")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Keep the base URL joinable with endpoint names."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v.rstrip("/")

    @property
    def use_mock(self) -> bool:
        """True when no real API calls should be made."""
        return self.mock or not self.api_key.get_secret_value()


class BoardConfig(BaseModel):
    """Departure board behaviour and appearance."""

    stop_id: str = Field("F01755", description="Default stop shown by the poller")
    stops_file: str = Field("data/stops.txt", description="GTFS stops.txt path")
    poll_interval: float = Field(5.0, ge=1.0, le=300.0, description="Seconds between refreshes")
    max_lines: int = Field(6, ge=1, le=20, description="Departure lines shown")
    max_boards: int = Field(20, ge=1, le=200, description="Stops polled on behalf of web visitors")
    viewport_width: int = Field(390, ge=200, le=3840, description="Layout width in px")
    pixel_pitch: int = Field(3, ge=1, le=32, description="Rendered size of one dot")
    lit_color: str = Field("#FFB000", description="Lit dot colour (hex)")
    unlit_color: str | None = Field(
        "#2A1E00", description="Unlit dot colour (hex); dimmed lit colour when null"
    )

    @field_validator("lit_color", "unlit_color")
    @classmethod
    def validate_hex(cls, v: str | None) -> str | None:
        """Accept #RGB and #RRGGBB."""
        import re

        if v is None:
            return v
        if not re.match(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$", v):
            raise ValueError(f"Invalid hex colour: {v}")
        return v


class WebConfig(BaseModel):
    """Web server configuration."""

    host: str = Field("127.0.0.1", description="Server bind address")
    port: int = Field(8080, ge=1, le=65535, description="Server port")
    enable_docs: bool = Field(True, description="Expose /api/docs")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    format: str = Field("simple", description="Format: simple, structured")
    file: str | None = Field(None, description="Log file path")
    max_size_mb: int = Field(10, ge=1, description="Max log file size")
    backup_count: int = Field(3, ge=0, description="Number of backup files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class Config(BaseModel):
    """Root configuration model."""

    transit: TransitConfig = Field(default_factory=TransitConfig)
    board: BoardConfig = Field(default_factory=BoardConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Thread-safe configuration manager backed by a YAML file.

    A missing file means defaults. The file is read once; restart the
    process to pick up changes.

    Usage:
        manager = ConfigManager("config/bkkboard.yaml")
        config = manager.get()
    """

    _instance: "ConfigManager | None" = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(self, config_path: str | Path) -> None:
        self._config_path = Path(config_path)
        self._config: Config
        self._lock = threading.RLock()
        self._load()

    @classmethod
    def get_instance(cls, config_path: str | Path | None = None) -> "ConfigManager":
        """Get singleton instance.

        Args:
            config_path: Path to config file (only used on first call)
        """
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls(config_path or DEFAULT_CONFIG_PATH)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (for testing)."""
        with cls._instance_lock:
            cls._instance = None

    @property
    def path(self) -> Path:
        return self._config_path

    def _load(self) -> None:
        """Load and validate configuration from file.

        Raises:
            ConfigurationError: If the file exists but is not valid
        """
        data: dict[str, Any] = {}
        if self._config_path.exists():
            try:
                with open(self._config_path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(
                    "Cannot read config file",
                    details={"path": str(self._config_path)},
                    cause=e,
                ) from e
            logger.info("Loaded config from %s", self._config_path)
        else:
            logger.info("Config file %s not found, using defaults", self._config_path)

        try:
            config = Config.model_validate(data)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e}",
                details={"path": str(self._config_path)},
                cause=e,
            ) from e

        env_key = os.environ.get(API_KEY_ENV)
        if env_key:
            config.transit.api_key = SecretStr(env_key)

        self._config = config

    def get(self) -> Config:
        """Get current configuration (deep copy)."""
        with self._lock:
            return self._config.model_copy(deep=True)


# =============================================================================
# Convenience Functions
# =============================================================================


def get_config() -> Config:
    """Get current configuration from singleton manager."""
    return ConfigManager.get_instance().get()
