"""Shared state for CLI commands."""

from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console

from wikit.api.client import GraphQLClient
from wikit.config import WikitConfig, load_config
from wikit.core import get_instance_context
from wikit.errors import WikitError

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


@dataclass
class CliState:
    """Global options shared by every command."""
    instance: Optional[str] = None
    config_path: Optional[Path] = None
    verbose: bool = False
    _config: Optional[WikitConfig] = None

    @property
    def config(self) -> WikitConfig:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def resolve_instance(self) -> str:
        """Resolve the instance for this invocation and make it active."""
        instance_id = self.config.resolve_instance(self.instance)
        get_instance_context().set_instance(instance_id)
        return instance_id

    def client(self, instance_id: Optional[str] = None) -> GraphQLClient:
        instance_id = instance_id or self.resolve_instance()
        return GraphQLClient.from_config(self.config, instance_id)


def get_state(ctx: typer.Context) -> CliState:
    """CLI state stored on the root context."""
    root = ctx.find_root()
    if not isinstance(root.obj, CliState):
        root.obj = CliState()
    return root.obj


def run_async(coro: Awaitable[T]) -> T:
    """Run a coroutine to completion from a sync command."""
    return asyncio.run(coro)  # type: ignore[arg-type]


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Print ``WikitError`` in red and exit with code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except WikitError as e:
            logger.error(f"{func.__name__} failed: {e}")
            err_console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    return wrapper
