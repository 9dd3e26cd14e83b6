"""CLI commands for engine snapshots (capture, diff, restore)."""

from __future__ import annotations

import click

from .context import get_client, get_config, get_format, handle_errors
from .exceptions import PreconditionFailedError, ValidationError
from .naming import engine_name
from .output import format_restore_result, format_snapshot_diff
from .snapshot import (
    EngineSnapshot,
    RestoreOptions,
    capture_engine_snapshot,
    diff_snapshot_with_engine,
    diff_snapshots,
    restore_engine_snapshot,
)


@click.group()
def snapshot() -> None:
    """Capture, compare and restore engine snapshots.

    A snapshot is a JSON document holding an engine's configuration,
    feature flags and agent registrations.
    """


@snapshot.command("create")
@click.argument("engine_id")
@click.option("--output", "-o", "output_path", default="", help="Write the snapshot to PATH (default: stdout)")
@click.option("--notes", default="", help="Notes stored in snapshot metadata")
@click.option("--description", default="", help="Description stored in snapshot metadata")
@click.pass_context
@handle_errors
def snapshot_create(
    ctx: click.Context, engine_id: str, output_path: str, notes: str, description: str
) -> None:
    """Capture the current state of an engine."""
    config = get_config(ctx)
    client = get_client(ctx)
    snap = capture_engine_snapshot(client, engine_name(engine_id, config), config=config)
    snap = snap.with_overrides(notes=notes or None, description=description or None)

    if not output_path:
        click.echo(snap.dumps())
        return
    try:
        snap.write(output_path)
    except OSError as e:
        raise click.FileError(output_path, hint=str(e)) from e
    click.echo(f"Snapshot written to {output_path}")


@snapshot.command("diff")
@click.argument("snapshot_a", type=click.Path(dir_okay=False))
@click.argument("snapshot_b", type=click.Path(dir_okay=False), required=False)
@click.option("--engine", "engine_id", default="", help="Engine ID to diff a single snapshot against")
@click.pass_context
@handle_errors
def snapshot_diff(
    ctx: click.Context, snapshot_a: str, snapshot_b: str | None, engine_id: str
) -> None:
    """Compare two snapshots, or a snapshot against a live engine.

    With two files SNAPSHOT_A is the base and SNAPSHOT_B the newer state.
    With one file the snapshot is compared to the engine given by --engine.
    """
    base = EngineSnapshot.load(snapshot_a)
    if snapshot_b:
        diff = diff_snapshots(EngineSnapshot.load(snapshot_b), base)
    else:
        if not engine_id:
            raise ValidationError(
                "--engine", engine_id, "engine ID is required when diffing snapshot against live state"
            )
        client = get_client(ctx)
        diff = diff_snapshot_with_engine(client, base, engine_name(engine_id, get_config(ctx)))
    click.echo(format_snapshot_diff(diff, get_format(ctx)))


@snapshot.command("restore")
@click.argument("snapshot_path", type=click.Path(dir_okay=False))
@click.argument("engine_arg", metavar="[ENGINE_ID]", required=False)
@click.option("--engine-id", "target_engine_id", default="", help="Target engine ID (default: from snapshot metadata)")
@click.option("--new-engine-id", default="", help="Create a new engine with this ID")
@click.option("--allow-create", is_flag=True, help="Create the engine if it does not exist")
@click.option(
    "--update-existing/--no-update-existing",
    default=True,
    show_default=True,
    help="Patch engine fields when the engine exists",
)
@click.option("--dry-run", is_flag=True, help="Preview changes without applying them")
@click.option("--force", is_flag=True, help="Apply changes without confirmation")
@click.option("--notes", default="", help="Override snapshot notes before restore")
@click.pass_context
@handle_errors
def snapshot_restore(
    ctx: click.Context,
    snapshot_path: str,
    engine_arg: str | None,
    target_engine_id: str,
    new_engine_id: str,
    allow_create: bool,
    update_existing: bool,
    dry_run: bool,
    force: bool,
    notes: str,
) -> None:
    """Restore a snapshot onto an existing engine or into a new one.

    Metadata differences (notes, description) appear in the preview but are
    never written, so on their own they do not trigger a restore.

    \b
    Examples:
        gemctl engines snapshot restore snap.json my-engine --dry-run
        gemctl engines snapshot restore snap.json my-engine
        gemctl engines snapshot restore snap.json --new-engine-id cloned-engine
    """
    snap = EngineSnapshot.load(snapshot_path).with_overrides(notes=notes or None)

    target = target_engine_id or engine_arg or ""
    if new_engine_id:
        target = new_engine_id
        allow_create = True
        update_existing = False
    if not target:
        target = snap.metadata.original_engine_id
    if not target:
        raise PreconditionFailedError("target engine ID is required")

    config = get_config(ctx)
    output_format = get_format(ctx)
    client = get_client(ctx)
    options = RestoreOptions(
        target_engine_name=engine_name(target, config),
        create_if_missing=allow_create,
        update_existing=update_existing,
        dry_run=True,
    )

    _, preview = restore_engine_snapshot(client, snap, options)
    click.echo("=== Restore Preview ===")
    click.echo(format_snapshot_diff(preview, output_format))

    if dry_run:
        click.echo("Dry run complete. No changes applied.")
        return
    if not preview.has_live_changes():
        click.echo("No changes detected; restore skipped.")
        return
    if not force and not click.confirm("Apply these changes?", default=False):
        click.echo("Restore cancelled.")
        return

    result, _ = restore_engine_snapshot(
        client,
        snap,
        RestoreOptions(
            target_engine_name=options.target_engine_name,
            create_if_missing=allow_create,
            update_existing=update_existing,
        ),
    )
    click.echo(format_restore_result(result, output_format))
