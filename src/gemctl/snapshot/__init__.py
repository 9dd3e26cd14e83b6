"""Point-in-time engine snapshots: capture, diff and restore."""

from .capture import capture_engine_snapshot, diff_snapshot_with_engine, snapshot_from_live
from .differ import (
    AgentChangeType,
    AgentDiff,
    FeatureDiff,
    FieldDiff,
    SnapshotDiff,
    agent_snapshot_key,
    diff_agent_fields,
    diff_agents,
    diff_engine_config,
    diff_features,
    diff_metadata,
    diff_snapshots,
)
from .models import (
    SNAPSHOT_VERSION,
    EngineConfigSnapshot,
    EngineSnapshot,
    SnapshotMetadata,
)
from .protocol import SnapshotBackend
from .restore import RestoreOptions, RestoreResult, restore_engine_snapshot

__all__ = [
    "SNAPSHOT_VERSION",
    "AgentChangeType",
    "AgentDiff",
    "EngineConfigSnapshot",
    "EngineSnapshot",
    "FeatureDiff",
    "FieldDiff",
    "RestoreOptions",
    "RestoreResult",
    "SnapshotBackend",
    "SnapshotDiff",
    "SnapshotMetadata",
    "agent_snapshot_key",
    "capture_engine_snapshot",
    "diff_agent_fields",
    "diff_agents",
    "diff_engine_config",
    "diff_features",
    "diff_metadata",
    "diff_snapshot_with_engine",
    "diff_snapshots",
    "restore_engine_snapshot",
    "snapshot_from_live",
]
