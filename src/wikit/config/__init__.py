"""wikit configuration."""

from wikit.config.loader import (
    add_instance,
    instances_from_env,
    load_config,
    read_config_file,
    remove_instance,
    user_config_path,
)
from wikit.config.saver import save_config
from wikit.config.schema import (
    HttpConfig,
    InstanceConfig,
    LoggingConfig,
    TuiConfig,
    WikitConfig,
)

__all__ = [
    "HttpConfig",
    "InstanceConfig",
    "LoggingConfig",
    "TuiConfig",
    "WikitConfig",
    "add_instance",
    "instances_from_env",
    "load_config",
    "read_config_file",
    "remove_instance",
    "save_config",
    "user_config_path",
]
