"""Configuration loading for png2rle.

Settings live in a ``[png2rle]`` table of a TOML file:

    [png2rle]
    log_level = "DEBUG"
    log_format = "%(asctime)s %(levelname)s %(message)s"

The file is located through PNG2RLE_CONFIG, an explicit path, or the
default candidates ``./png2rle.toml`` and ``~/png2rle.toml``. With no file
at all, defaults apply.
"""

from __future__ import annotations

import os
from typing import Any, Literal, cast

from pydantic import BaseModel, Field, ValidationError

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

from png2rle.core.log import DEFAULT_FORMAT

CONFIG_ENV = "PNG2RLE_CONFIG"
CONFIG_TABLE = "png2rle"


class Settings(BaseModel):
    """Validated runtime settings.

    Attributes:
        log_level: Level name for the package logger
        log_format: ``logging.Formatter`` format string
    """

    model_config = {"extra": "forbid", "frozen": True}

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: str = Field(default=DEFAULT_FORMAT, min_length=1)


def _resolve_config_path(config_path: str | None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults."""
    env_config = os.environ.get(CONFIG_ENV)
    if env_config:
        return env_config
    if config_path:
        return config_path
    candidates = [
        "png2rle.toml",
        os.path.expanduser("~/png2rle.toml"),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_settings(config_path: str | None = None) -> Settings:
    """Load settings from TOML, falling back to defaults.

    Args:
        config_path: Path to png2rle.toml (auto-detected if None)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
        ValueError: If the file is not valid TOML or has invalid values
    """
    resolved_path = _resolve_config_path(config_path)
    if resolved_path is None:
        return Settings()
    if not os.path.exists(resolved_path):
        raise FileNotFoundError(
            f"Config file not found at {resolved_path}. "
            f"Set {CONFIG_ENV} or create png2rle.toml"
        )

    with open(resolved_path, "rb") as f:
        try:
            config = cast(dict[str, Any], tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse {resolved_path}: {e}") from e

    table = config.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ValueError(f"[{CONFIG_TABLE}] in {resolved_path} must be a table")
    if isinstance(table.get("log_level"), str):
        table["log_level"] = table["log_level"].upper()

    try:
        return Settings(**table)
    except ValidationError as e:
        raise ValueError(f"Invalid settings in {resolved_path}: {e}") from e
