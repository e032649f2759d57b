"""Configuration utilities for link-trace."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_FILE_NAME = "link-trace.toml"
DEFAULT_WIDTH = 120
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@dataclass
class Config:
    """Runtime configuration parameters."""

    use_json: bool = False
    always_terse: bool = False
    always_verbose: bool = False
    width: int = DEFAULT_WIDTH
    timeout: float = 8.0
    header_timeout: float = 5.0
    user_agent: str = DEFAULT_USER_AGENT
    clear_screen: bool = True


def parse_bool(value: str) -> bool:
    return value.lower() in {"1", "true", "yes", "on"}


def default_config_path() -> Path:
    xdg_config_home = os.getenv("XDG_CONFIG_HOME")
    config_dir = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return config_dir / CONFIG_FILE_NAME


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Error loading configuration from {path}: {exc}") from exc


def _checked_width(width: int) -> int:
    # A zero width means "not set".
    if width == 0:
        return DEFAULT_WIDTH
    if width < 1:
        raise ConfigError(f"Invalid configuration value: width must be at least 1, got {width}")
    return width


def _apply_file_values(config: Config, values: Dict[str, Any]) -> None:
    try:
        if "use_json" in values:
            config.use_json = bool(values["use_json"])
        if "always_terse" in values:
            config.always_terse = bool(values["always_terse"])
        if "always_verbose" in values:
            config.always_verbose = bool(values["always_verbose"])
        if "clear_screen" in values:
            config.clear_screen = bool(values["clear_screen"])
        config.width = _checked_width(int(values.get("width") or 0))
        if "timeout" in values:
            config.timeout = float(values["timeout"])
        if "header_timeout" in values:
            config.header_timeout = float(values["header_timeout"])
        if "user_agent" in values:
            config.user_agent = str(values["user_agent"])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration value: {exc}") from exc


def _apply_env_values(config: Config) -> None:
    try:
        config.use_json = parse_bool(os.getenv("LINK_TRACE_JSON", str(config.use_json)))
        config.always_terse = parse_bool(os.getenv("LINK_TRACE_TERSE", str(config.always_terse)))
        config.always_verbose = parse_bool(
            os.getenv("LINK_TRACE_VERBOSE", str(config.always_verbose))
        )
        config.clear_screen = parse_bool(
            os.getenv("LINK_TRACE_CLEAR_SCREEN", str(config.clear_screen))
        )
        config.width = _checked_width(int(os.getenv("LINK_TRACE_WIDTH", config.width)))
        config.timeout = float(os.getenv("LINK_TRACE_TIMEOUT", config.timeout))
        config.header_timeout = float(
            os.getenv("LINK_TRACE_HEADER_TIMEOUT", config.header_timeout)
        )
        config.user_agent = os.getenv("LINK_TRACE_USER_AGENT", config.user_agent)
    except ValueError as exc:
        raise ConfigError(f"Invalid environment value: {exc}") from exc


def load_config(config_path: Optional[Path] = None, env_file: Optional[str] = ".env") -> Config:
    """Load configuration from the TOML file, environment and optional .env file.

    Environment variables take precedence over the file. A missing file simply
    leaves the defaults in place.
    """

    if env_file:
        load_dotenv(env_file, override=False)

    config = Config()
    _apply_file_values(config, _read_toml(config_path or default_config_path()))
    _apply_env_values(config)
    return config


__all__ = ["Config", "ConfigError", "load_config", "default_config_path", "parse_bool"]
