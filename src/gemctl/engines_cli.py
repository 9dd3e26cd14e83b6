"""CLI commands for engines (Gemini Enterprise apps)."""

from __future__ import annotations

import click

from .agents_cli import agents
from .client import DEFAULT_SEARCH_TIER
from .context import get_client, get_config, get_format, handle_errors
from .features_cli import features
from .naming import engine_name
from .output import (
    format_create_result,
    format_delete_result,
    format_engine_details,
    format_engines,
)
from .snapshot_cli import snapshot
from .workforce_cli import workforce


@click.group()
def engines() -> None:
    """Manage Gemini Enterprise engines (apps).

    Engines tie data stores, feature flags and agents together into a
    search or assistant experience.
    """


@engines.command("list")
@click.pass_context
@handle_errors
def engines_list(ctx: click.Context) -> None:
    """List all engines in the collection."""
    client = get_client(ctx)
    click.echo(format_engines(client.list_engines(), get_format(ctx)))


@engines.command("describe")
@click.argument("engine_id")
@click.option("--full", is_flag=True, help="Include the configuration of linked data stores.")
@click.pass_context
@handle_errors
def engines_describe(ctx: click.Context, engine_id: str, full: bool) -> None:
    """Describe an engine.

    ENGINE_ID may be the short ID or the full resource name.
    """
    client = get_client(ctx)
    name = engine_name(engine_id, get_config(ctx))
    if full:
        engine, data_stores = client.get_engine_full_config(name)
        click.echo(format_engine_details(engine, get_format(ctx), data_stores))
    else:
        click.echo(format_engine_details(client.get_engine(name), get_format(ctx)))


@engines.command("create")
@click.argument("engine_id")
@click.argument("display_name")
@click.argument("data_store_ids", nargs=-1)
@click.option(
    "--search-tier",
    default=DEFAULT_SEARCH_TIER,
    show_default=True,
    help="Search tier (SEARCH_TIER_STANDARD, SEARCH_TIER_ENTERPRISE).",
)
@click.pass_context
@handle_errors
def engines_create(
    ctx: click.Context,
    engine_id: str,
    display_name: str,
    data_store_ids: tuple[str, ...],
    search_tier: str,
) -> None:
    """Create a search engine over existing data stores."""
    client = get_client(ctx)
    result = client.create_search_engine(engine_id, display_name, list(data_store_ids), search_tier)
    click.echo(format_create_result(result, get_format(ctx)))


@engines.command("delete")
@click.argument("engine_id")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
@click.pass_context
@handle_errors
def engines_delete(ctx: click.Context, engine_id: str, force: bool) -> None:
    """Delete an engine."""
    name = engine_name(engine_id, get_config(ctx))
    if not force:
        click.confirm(f"Are you sure you want to delete engine '{engine_id}'?", abort=True)
    client = get_client(ctx)
    click.echo(format_delete_result(client.delete_engine(name), get_format(ctx)))


engines.add_command(features)
engines.add_command(agents)
engines.add_command(workforce)
engines.add_command(snapshot)
