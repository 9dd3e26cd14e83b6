"""Capture live engine state as a snapshot."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from ..naming import extract_resource_id, parse_engine_name
from .differ import SnapshotDiff, diff_snapshots
from .models import SNAPSHOT_VERSION, EngineConfigSnapshot, EngineSnapshot, SnapshotMetadata

if TYPE_CHECKING:
    from ..config import ClientConfig
    from ..models import Agent, Engine
    from .protocol import SnapshotBackend

logger = logging.getLogger(__name__)


def format_timestamp(now: datetime | None = None) -> str:
    """RFC3339 timestamp in UTC with second precision."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def snapshot_from_live(
    engine: Engine,
    agents: list[Agent],
    config: ClientConfig | None = None,
    now: datetime | None = None,
) -> EngineSnapshot:
    """
    Build a snapshot from an engine and its agents.

    Source project, location and collection come from the engine name,
    falling back to ``config`` when the name is not fully qualified. All
    maps and lists are copied.
    """
    parts = parse_engine_name(engine.name)
    if parts is not None:
        project, location, collection = parts.project, parts.location, parts.collection
    elif config is not None:
        project, location, collection = config.project_id, config.location, config.collection
    else:
        project = location = collection = ""

    metadata = SnapshotMetadata(
        version=SNAPSHOT_VERSION,
        original_engine_name=engine.name,
        original_engine_id=extract_resource_id(engine.name),
        source_project_id=project,
        source_location=location,
        source_collection=collection,
        taken_at=format_timestamp(now),
        display_name=engine.display_name,
    )
    return EngineSnapshot(
        metadata=metadata,
        engine=EngineConfigSnapshot.from_engine(engine),
        agents=[agent.clone() for agent in agents],
    )


def capture_engine_snapshot(
    backend: SnapshotBackend,
    engine_name: str,
    config: ClientConfig | None = None,
    now: datetime | None = None,
) -> EngineSnapshot:
    """
    Read an engine and its agents and return them as a snapshot.

    Raises:
        NotFoundError: If the engine does not exist
        TransportError: If either read fails
    """
    engine = backend.get_engine(engine_name)
    agents = backend.list_agents(engine_name)
    logger.info("Captured engine %s with %d agent(s)", engine.name, len(agents))
    return snapshot_from_live(engine, agents, config=config, now=now)


def diff_snapshot_with_engine(
    backend: SnapshotBackend,
    snapshot: EngineSnapshot,
    engine_name: str,
) -> SnapshotDiff:
    """Diff a snapshot (desired) against the live engine (actual)."""
    live = capture_engine_snapshot(backend, engine_name)
    return diff_snapshots(snapshot, live)
