"""Shared plumbing for CLI commands."""

from __future__ import annotations

import functools
import logging
import sys
from collections.abc import Callable
from typing import Any, TypeVar

import click

from .client import GeminiClient
from .config import ClientConfig
from .exceptions import GemctlError
from .output import OutputFormat

F = TypeVar("F", bound=Callable[..., Any])

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: int) -> None:
    """WARNING by default, INFO with ``-v``, DEBUG with ``-vv``."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def get_config(ctx: click.Context) -> ClientConfig:
    config = ctx.find_object(ClientConfig)
    if config is None:
        raise click.UsageError("gemctl configuration was not initialised")
    return config


def get_format(ctx: click.Context) -> OutputFormat:
    return OutputFormat(get_config(ctx).format)


def get_client(ctx: click.Context) -> GeminiClient:
    return GeminiClient(get_config(ctx))


def handle_errors(fn: F) -> F:
    """Print ``Error: <message>`` to stderr and exit 1 on any gemctl error."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except (GemctlError, ImportError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    return wrapper  # type: ignore[return-value]
