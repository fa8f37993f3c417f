"""Configuration saver for persisting wikit config changes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import tomli_w

from wikit.config.loader import user_config_path
from wikit.config.schema import WikitConfig

logger = logging.getLogger(__name__)


def _config_to_dict(config: WikitConfig) -> dict[str, Any]:
    """Convert WikitConfig to a TOML-compatible dictionary.

    Args:
        config: WikitConfig instance to convert.

    Returns:
        Dictionary suitable for TOML serialization.
    """
    data = config.model_dump(mode="python", exclude_none=True)

    # Path objects are not TOML-serializable
    if "logging" in data and "file" in data["logging"]:
        data["logging"]["file"] = str(data["logging"]["file"])

    return data


def save_config(config: WikitConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    Args:
        config: WikitConfig instance to save.
        path: Path to save to. Defaults to ~/.config/wikit/config.toml.

    Returns:
        The path written.

    Raises:
        OSError: If unable to write the config file.
    """
    if path is None:
        path = user_config_path()

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "wb") as f:
        tomli_w.dump(_config_to_dict(config), f)

    # API keys live in this file
    path.chmod(0o600)
    logger.info("Saved configuration to %s", path)
    return path
