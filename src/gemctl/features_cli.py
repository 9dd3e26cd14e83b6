"""CLI commands for engine feature flags."""

from __future__ import annotations

import click

from .context import get_client, get_config, get_format, handle_errors
from .models import FEATURE_STATE_OFF, FEATURE_STATE_ON
from .naming import engine_name, looks_like_feature, normalize_feature_key, parse_engine_feature_args
from .output import format_engine_features


@click.group()
def features() -> None:
    """Manage engine feature flags such as agent-gallery or prompt-gallery."""


@features.command("list")
@click.argument("engine_id")
@click.pass_context
@handle_errors
def features_list(ctx: click.Context, engine_id: str) -> None:
    """List feature flag states for an engine."""
    client = get_client(ctx)
    engine = client.get_engine(engine_name(engine_id, get_config(ctx)))
    click.echo(format_engine_features(engine, get_format(ctx)))


def _apply(ctx: click.Context, args: tuple[str, ...], state: str) -> None:
    engine_id, names = parse_engine_feature_args(args)
    updates = {normalize_feature_key(n): state for n in names}
    for key in updates:
        if not looks_like_feature(key):
            click.echo(f"Warning: '{key}' is not a known feature", err=True)

    client = get_client(ctx)
    engine = client.update_engine_features(engine_name(engine_id, get_config(ctx)), updates)
    click.echo(format_engine_features(engine, get_format(ctx)))


@features.command("enable")
@click.argument("args", nargs=-1, required=True)
@click.pass_context
@handle_errors
def features_enable(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Enable features: ENGINE_ID FEATURE [FEATURE...].

    The engine ID may also come last, e.g. ``enable agent-gallery my-engine``.
    """
    _apply(ctx, args, FEATURE_STATE_ON)


@features.command("disable")
@click.argument("args", nargs=-1, required=True)
@click.pass_context
@handle_errors
def features_disable(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Disable features: ENGINE_ID FEATURE [FEATURE...]."""
    _apply(ctx, args, FEATURE_STATE_OFF)
