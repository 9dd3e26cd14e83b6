"""CLI commands for data stores."""

from __future__ import annotations

import click

from .client import DEFAULT_BRANCH
from .context import get_client, get_config, get_format, handle_errors
from .naming import data_store_name
from .output import (
    format_create_result,
    format_data_store_details,
    format_data_stores,
    format_delete_result,
    format_documents,
)


@click.group("data-stores")
def data_stores() -> None:
    """Manage Discovery Engine data stores."""


@data_stores.command("list")
@click.pass_context
@handle_errors
def data_stores_list(ctx: click.Context) -> None:
    """List all data stores in the collection."""
    client = get_client(ctx)
    click.echo(format_data_stores(client.list_data_stores(), get_format(ctx)))


@data_stores.command("describe")
@click.argument("data_store_id")
@click.pass_context
@handle_errors
def data_stores_describe(ctx: click.Context, data_store_id: str) -> None:
    """Describe a data store."""
    client = get_client(ctx)
    data_store = client.get_data_store(data_store_name(data_store_id, get_config(ctx)))
    click.echo(format_data_store_details(data_store, get_format(ctx)))


@data_stores.command("create-from-gcs")
@click.argument("data_store_id")
@click.argument("display_name")
@click.argument("gcs_uri")
@click.option(
    "--data-schema",
    type=click.Choice(["content", "custom", "csv", "document"]),
    default="content",
    show_default=True,
    help="Data schema of the imported files",
)
@click.option(
    "--reconciliation-mode",
    type=click.Choice(["INCREMENTAL", "FULL"]),
    default="INCREMENTAL",
    show_default=True,
    help="Import mode",
)
@click.pass_context
@handle_errors
def data_stores_create_from_gcs(
    ctx: click.Context,
    data_store_id: str,
    display_name: str,
    gcs_uri: str,
    data_schema: str,
    reconciliation_mode: str,
) -> None:
    """Create a data store and import documents from a gs:// URI.

    \b
    Example:
        gemctl data-stores create-from-gcs docs "Company Docs" "gs://bucket/docs/*"
    """
    client = get_client(ctx)
    result = client.create_data_store_from_gcs(
        data_store_id, display_name, gcs_uri, data_schema, reconciliation_mode
    )
    click.echo(format_create_result(result, get_format(ctx)))


@data_stores.command("list-documents")
@click.argument("data_store_id")
@click.option("--branch", default=DEFAULT_BRANCH, show_default=True, help="Branch name")
@click.pass_context
@handle_errors
def data_stores_list_documents(ctx: click.Context, data_store_id: str, branch: str) -> None:
    """List documents in a data store branch."""
    client = get_client(ctx)
    docs = client.list_documents(data_store_name(data_store_id, get_config(ctx)), branch)
    click.echo(format_documents(docs, data_store_id, branch, get_format(ctx)))


@data_stores.command("delete")
@click.argument("data_store_id")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
@click.pass_context
@handle_errors
def data_stores_delete(ctx: click.Context, data_store_id: str, force: bool) -> None:
    """Delete a data store.

    Engines that still reference the data store stop serving its documents.
    """
    name = data_store_name(data_store_id, get_config(ctx))
    if not force:
        click.confirm(f"Are you sure you want to delete data store '{data_store_id}'?", abort=True)
    client = get_client(ctx)
    click.echo(format_delete_result(client.delete_data_store(name), get_format(ctx)))
