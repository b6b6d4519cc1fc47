"""Core infrastructure module.

Provides foundational components:
- Configuration management with validation
- Custom exception hierarchy
- Structured logging
- Retry logic with exponential backoff
- Thread-safe primitives
"""

from .config import Config, ConfigManager, get_config
from .errors import (
    BoardError,
    ConfigurationError,
    NetworkError,
    RateLimitError,
    APIError,
    TransitError,
    ValidationError,
)
from .logging import setup_logging, get_logger
from .retry import async_retry, RetryConfig
from .threading import LockedValue, StoppableThread

__all__ = [
    # Config
    "Config",
    "ConfigManager",
    "get_config",
    # Errors
    "BoardError",
    "ConfigurationError",
    "NetworkError",
    "RateLimitError",
    "APIError",
    "TransitError",
    "ValidationError",
    # Logging
    "setup_logging",
    "get_logger",
    # Retry
    "async_retry",
    "RetryConfig",
    # Threading
    "LockedValue",
    "StoppableThread",
]
