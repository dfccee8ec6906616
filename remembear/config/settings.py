"""
Remembear - Configuration Settings
"""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import find_dotenv, load_dotenv


TRUE_VALUES = ("1", "true", "yes", "on")


def load_env_file(dotenv_path: Optional[Union[str, Path]] = None) -> bool:
    """
    Load a `.env` file into os.environ without overriding set variables.

    Args:
        dotenv_path: Explicit .env path (default: search upwards from cwd)

    Returns:
        True if a file was loaded
    """
    return load_dotenv(dotenv_path or find_dotenv(usecwd=True))


class ConfigError(Exception):
    """Base exception for configuration errors."""

    def __init__(self, message: str, filename: str):
        super().__init__(message)
        self.filename = filename


class ConfigFileReadError(ConfigError):
    """The config file could not be read."""
    pass


class ConfigSyntaxError(ConfigError):
    """The config file is not valid JSON or has the wrong shape."""
    pass


def is_enabled(value: Any) -> bool:
    """Interpret a config flag given as bool or string."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


@dataclass
class Settings:
    """Main settings container."""
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None
    snapshot_path: Path = field(default_factory=lambda: Path("data/remembear.json"))
    # integration name -> integration options, e.g. {"console": {"enabled": "true"}}
    integrations: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def enabled_integrations(self) -> Dict[str, Dict[str, Any]]:
        """Return the option blocks of integrations switched on."""
        return {
            name: options
            for name, options in self.integrations.items()
            if is_enabled(options.get("enabled", False))
        }

    @classmethod
    def from_env(cls, dotenv_path: Optional[Union[str, Path]] = None) -> "Settings":
        """
        Build settings from environment variables.

        A `.env` file is loaded first; variables already set win.

        Args:
            dotenv_path: Explicit .env path (default: search from cwd)
        """
        load_env_file(dotenv_path)

        settings = cls()
        settings.apply_env(os.environ)
        return settings

    def apply_env(self, env) -> None:
        """Override fields from a REMEMBEAR_* environment mapping."""
        if env.get("REMEMBEAR_LOG_LEVEL"):
            self.log_level = env["REMEMBEAR_LOG_LEVEL"].upper()
        if env.get("REMEMBEAR_JSON_LOGS"):
            self.json_logs = is_enabled(env["REMEMBEAR_JSON_LOGS"])
        if env.get("REMEMBEAR_LOG_FILE"):
            self.log_file = env["REMEMBEAR_LOG_FILE"]
        if env.get("REMEMBEAR_SNAPSHOT"):
            self.snapshot_path = Path(env["REMEMBEAR_SNAPSHOT"])
        if env.get("REMEMBEAR_INTEGRATIONS"):
            for name in env["REMEMBEAR_INTEGRATIONS"].split(","):
                name = name.strip()
                if name:
                    self.integrations.setdefault(name, {})["enabled"] = True

    @classmethod
    def load(cls, filename: Union[str, Path]) -> "Settings":
        """
        Read settings from a JSON config file.

        Args:
            filename: Path to the config file

        Returns:
            Settings with file values over the defaults

        Raises:
            ConfigFileReadError: File is missing or unreadable
            ConfigSyntaxError: File is not a JSON object of known settings
        """
        filename = str(filename)

        try:
            with open(filename, encoding="utf-8") as f:
                raw = f.read()
        except OSError as e:
            raise ConfigFileReadError(
                f"Failed to read config file {filename}: {e}", filename
            ) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigSyntaxError(
                f"Invalid syntax for config file {filename}: {e}", filename
            ) from e

        if not isinstance(data, dict):
            raise ConfigSyntaxError(
                f"Invalid syntax for config file {filename}: expected an object", filename
            )

        settings = cls()
        integrations = data.pop("integrations", {})
        if not isinstance(integrations, dict) or not all(
            isinstance(options, dict) for options in integrations.values()
        ):
            raise ConfigSyntaxError(
                f"Invalid syntax for config file {filename}: "
                "integrations must map names to option objects",
                filename,
            )
        settings.integrations = integrations

        for key, value in data.items():
            if key not in ("log_level", "json_logs", "log_file", "snapshot_path"):
                raise ConfigSyntaxError(
                    f"Invalid syntax for config file {filename}: unknown setting {key!r}",
                    filename,
                )

            if key == "json_logs":
                if not isinstance(value, (bool, str)):
                    raise ConfigSyntaxError(
                        f"Invalid syntax for config file {filename}: "
                        "json_logs must be a boolean or string",
                        filename,
                    )
                value = is_enabled(value)
            elif key == "log_file" and value is None:
                pass
            elif not isinstance(value, str):
                raise ConfigSyntaxError(
                    f"Invalid syntax for config file {filename}: {key} must be a string",
                    filename,
                )
            elif key == "log_level":
                value = value.upper()
            elif key == "snapshot_path":
                value = Path(value)

            setattr(settings, key, value)

        return settings
