"""Configuration for assetdeploy."""

import logging
from pathlib import Path
from typing import Any

import tomllib
from platformdirs import user_config_dir
from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

APP_NAME = "assetdeploy"


def user_config_path() -> Path:
    """Per-user config file location (platform specific)."""
    return Path(user_config_dir(APP_NAME)) / "config.toml"


def config_search_paths() -> list[Path]:
    return [
        Path.cwd() / "assetdeploy.toml",
        Path.cwd() / "config.toml",
        user_config_path(),
    ]


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Settings may sit at the top level or under an ``[assetdeploy]`` table.
    An explicitly given path that does not exist raises FileNotFoundError;
    the default search paths are skipped silently.
    """
    if path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        paths_to_try = [path]
    else:
        paths_to_try = config_search_paths()

    for config_path in paths_to_try:
        if config_path.exists():
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            logger.info(f"Loaded config from {config_path}")
            return data.get(APP_NAME, data)

    return {}


class Config(BaseSettings):
    """Extraction configuration.

    Configuration is loaded from (in order of priority, highest first):
    1. CLI arguments
    2. Environment variables (prefixed with ASSETDEPLOY_)
    3. TOML config file (assetdeploy.toml, config.toml, or the user config dir)
    4. Default values
    """

    model_config = {"env_prefix": "ASSETDEPLOY_", "extra": "ignore"}

    log_level: str = "INFO"

    # Bytes read per chunk when streaming resources and archive entries
    chunk_size: int = Field(default=64 * 1024, gt=0)

    # Keep source timestamps when copying loose files
    preserve_times: bool = True

    # Package that relative resource names are looked up in
    anchor_package: str = APP_NAME
