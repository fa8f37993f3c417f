"""Configuration loader with TOML support and merge capability."""

from __future__ import annotations

import logging
import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from wikit.config.schema import InstanceConfig, WikitConfig
from wikit.errors import ConfigError

logger = logging.getLogger(__name__)

_API_URL_SUFFIX = re.compile(r"^(?P<prefix>[A-Za-z0-9_]+)_API_URL$")


def user_config_path() -> Path:
    """Default location of the per-user config file."""
    return Path.home() / ".config" / "wikit" / "config.toml"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expandvars(str(path))).expanduser()


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def label_from_prefix(prefix: str) -> str:
    """Human label for an environment prefix (``MY_WIKI`` -> ``My Wiki``)."""
    words = [word for word in prefix.split("_") if word]
    return " ".join(word.capitalize() for word in words)


def instances_from_env(environ: Mapping[str, str] | None = None) -> dict[str, dict[str, str]]:
    """Detect instances from ``<PREFIX>_API_URL`` / ``<PREFIX>_API_KEY`` pairs.

    The instance id is the lowercased prefix. Prefixes without both variables
    are skipped.
    """
    env = os.environ if environ is None else environ
    instances: dict[str, dict[str, str]] = {}
    for name in sorted(env):
        match = _API_URL_SUFFIX.match(name)
        if not match:
            continue
        prefix = match.group("prefix")
        url = env.get(name)
        key = env.get(f"{prefix}_API_KEY")
        if not url or not key:
            logger.debug("Skipping %s: missing URL or key", prefix)
            continue
        instances[prefix.lower()] = {
            "url": url,
            "key": key,
            "label": label_from_prefix(prefix),
        }
    return instances


def load_config(
    config_path: Path | None = None,
    merge_user: bool = True,
    environ: Mapping[str, str] | None = None,
) -> WikitConfig:
    """Load configuration with precedence.

    Priority (highest to lowest):
    1. Provided config_path (or WIKIT_CONFIG_PATH)
    2. ./wikit.toml (project-local)
    3. ~/.config/wikit/config.toml (user)
    4. Built-in defaults (schema)

    Instances found in the environment (``<PREFIX>_API_URL`` and
    ``<PREFIX>_API_KEY``) are added when no file defines the same id.
    ``WIKIT_DEFAULT_INSTANCE`` overrides ``default_instance``.

    Args:
        config_path: Explicit path to config file.
        merge_user: Whether to merge the user config file.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Merged WikitConfig instance.
    """
    env = os.environ if environ is None else environ

    env_config = env.get("WIKIT_CONFIG_PATH")
    if config_path is None and env_config:
        config_path = Path(env_config).expanduser()

    config_data: dict[str, Any] = {}

    if merge_user:
        user_path = user_config_path()
        if user_path.exists():
            config_data = _deep_merge(config_data, _read_toml(user_path))

    local_path = Path("wikit.toml")
    if local_path.exists():
        config_data = _deep_merge(config_data, _read_toml(local_path))

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        config_data = _deep_merge(config_data, _read_toml(config_path))

    instances = config_data.setdefault("instances", {})
    for instance_id, settings in instances_from_env(env).items():
        if instance_id not in instances:
            instances[instance_id] = settings

    default_instance = env.get("WIKIT_DEFAULT_INSTANCE")
    if default_instance:
        config_data["default_instance"] = default_instance.lower()

    if "logging" in config_data and "file" in config_data["logging"]:
        config_data["logging"]["file"] = _expand_path(config_data["logging"]["file"])

    try:
        return WikitConfig(**config_data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def read_config_file(path: Path | None = None) -> WikitConfig:
    """Load a single config file without merging or environment detection.

    Used before saving so that merged or environment-only values are not
    written back. A missing file yields the defaults.
    """
    path = path or user_config_path()
    if not path.exists():
        return WikitConfig()
    try:
        return WikitConfig(**_read_toml(path))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def add_instance(
    config: WikitConfig,
    instance_id: str,
    url: str,
    key: str,
    label: str | None = None,
    make_default: bool = False,
) -> WikitConfig:
    """Return a copy of ``config`` with an instance added or replaced."""
    instances = dict(config.instances)
    instances[instance_id] = InstanceConfig(url=url, key=key, label=label)
    update: dict[str, Any] = {"instances": instances}
    if make_default or config.default_instance is None:
        update["default_instance"] = instance_id
    return config.model_copy(update=update)


def remove_instance(config: WikitConfig, instance_id: str) -> WikitConfig:
    """Return a copy of ``config`` without ``instance_id``."""
    if instance_id not in config.instances:
        raise ConfigError(f"Unknown instance '{instance_id}'")
    instances = {k: v for k, v in config.instances.items() if k != instance_id}
    update: dict[str, Any] = {"instances": instances}
    if config.default_instance == instance_id:
        update["default_instance"] = next(iter(instances), None)
    return config.model_copy(update=update)
