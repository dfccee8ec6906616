"""
Remembear - Configuration
"""
from .settings import (
    Settings,
    ConfigError,
    ConfigFileReadError,
    ConfigSyntaxError,
    is_enabled,
    load_env_file,
)
from .logging import (
    setup_logging,
    get_logger,
    log_error,
    JSONFormatter,
    ColoredFormatter,
)

__all__ = [
    "Settings",
    "ConfigError",
    "ConfigFileReadError",
    "ConfigSyntaxError",
    "is_enabled",
    "load_env_file",
    # Logging
    "setup_logging",
    "get_logger",
    "log_error",
    "JSONFormatter",
    "ColoredFormatter",
]
