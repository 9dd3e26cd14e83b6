"""Command-line interface for Gemini Enterprise administration."""

import click

from .config import OUTPUT_FORMATS, resolve_config
from .context import configure_logging, handle_errors
from .datastores_cli import data_stores
from .engines_cli import engines


@click.group()
@click.version_option(package_name="gemctl")
@click.option(
    "--project",
    "-p",
    envvar="GOOGLE_CLOUD_PROJECT",
    help="Google Cloud project ID (default: GOOGLE_CLOUD_PROJECT or gcloud config)",
)
@click.option(
    "--location",
    "-l",
    help="Location for resources, e.g. global, us, eu (default: AGENTSPACE_LOCATION or global)",
)
@click.option(
    "--collection",
    "-c",
    help="Collection ID (default: default_collection)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--use-service-account",
    is_flag=True,
    help="Use Application Default Credentials instead of the gcloud user token",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase log verbosity (-v info, -vv debug)",
)
@click.pass_context
@handle_errors
def cli(
    ctx: click.Context,
    project: str | None,
    location: str | None,
    collection: str | None,
    output_format: str,
    use_service_account: bool,
    verbose: int,
) -> None:
    """Manage Gemini Enterprise engines, agents, data stores and snapshots."""
    configure_logging(verbose)
    ctx.obj = resolve_config(
        project=project,
        location=location,
        collection=collection,
        format=output_format,
        use_service_account=use_service_account,
    )


cli.add_command(engines)
cli.add_command(data_stores)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
