"""CLI commands for the project's workforce identity pool linkage."""

from __future__ import annotations

import click

from .context import get_client, get_format, handle_errors
from .exceptions import ValidationError
from .naming import DEFAULT_WORKFORCE_LOCATION, build_workforce_resource
from .output import format_workforce_config


@click.group()
def workforce() -> None:
    """Manage the workforce identity pool used by Gemini Enterprise."""


@workforce.command("show")
@click.pass_context
@handle_errors
def workforce_show(ctx: click.Context) -> None:
    """Show the current workforce identity configuration."""
    client = get_client(ctx)
    click.echo(format_workforce_config(client.get_workforce_identity_config(), get_format(ctx)))


@workforce.command("set")
@click.option(
    "--resource",
    "--pool",
    "resource",
    default="",
    help="Full workforce pool resource (locations/.../workforcePools/POOL[/providers/PROVIDER])",
)
@click.option("--workforce-id", default="", help="Workforce pool ID component")
@click.option("--provider-id", default="", help="Workforce provider ID component")
@click.option(
    "--workforce-location",
    default=DEFAULT_WORKFORCE_LOCATION,
    show_default=True,
    help="Workforce pool location",
)
@click.option("--clear", is_flag=True, help="Disable workforce identity")
@click.pass_context
@handle_errors
def workforce_set(
    ctx: click.Context,
    resource: str,
    workforce_id: str,
    provider_id: str,
    workforce_location: str,
    clear: bool,
) -> None:
    """Link a workforce pool, or disable workforce identity with --clear."""
    if clear:
        if resource or workforce_id or provider_id:
            raise ValidationError("--clear", True, "--clear cannot be combined with other flags")
        value = ""
    else:
        if not resource and not workforce_id:
            raise ValidationError(
                "workforce pool", "", "provide --resource, --workforce-id or use --clear"
            )
        value = build_workforce_resource(resource, workforce_location, workforce_id, provider_id)

    client = get_client(ctx)
    config = client.set_workforce_identity_config(value)
    click.echo(format_workforce_config(config, get_format(ctx)))
