"""Pydantic configuration models for wikit."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from wikit.errors import ConfigError


class InstanceConfig(BaseModel):
    """Connection settings for one Wiki.js instance."""

    url: str
    key: str
    label: Optional[str] = None

    def display_name(self, instance_id: str) -> str:
        return self.label or instance_id


class TuiConfig(BaseModel):
    """Terminal UI behaviour."""

    success_duration_ms: int = 3000
    status_flash_seconds: float = 3.0
    items_limit: int = 5


class LoggingConfig(BaseModel):
    """Log output settings."""

    level: str = "INFO"
    file: Path = Field(
        default_factory=lambda: Path.home() / ".local" / "state" / "wikit" / "wikit.log"
    )


class HttpConfig(BaseModel):
    """HTTP client settings."""

    timeout: float = 30.0


class WikitConfig(BaseModel):
    """Root configuration model."""

    default_instance: Optional[str] = None
    instances: dict[str, InstanceConfig] = Field(default_factory=dict)
    tui: TuiConfig = Field(default_factory=TuiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    def instance_ids(self) -> list[str]:
        """Configured instance ids in definition order."""
        return list(self.instances.keys())

    def resolve_instance(self, name: str | None = None) -> str:
        """Pick the instance to use.

        Order: explicit name, ``default_instance``, first configured.

        Raises:
            ConfigError: Unknown name or no instances configured.
        """
        if name:
            if name not in self.instances:
                available = ", ".join(self.instances) or "none"
                raise ConfigError(f"Unknown instance '{name}' (available: {available})")
            return name
        if self.default_instance and self.default_instance in self.instances:
            return self.default_instance
        if not self.instances:
            raise ConfigError(
                "No instances configured. Run `wikit config add NAME URL KEY` "
                "or set <NAME>_API_URL and <NAME>_API_KEY."
            )
        return next(iter(self.instances))

    def get_instance(self, name: str | None = None) -> tuple[str, InstanceConfig]:
        """Resolve and return ``(instance_id, settings)``."""
        instance_id = self.resolve_instance(name)
        return instance_id, self.instances[instance_id]
