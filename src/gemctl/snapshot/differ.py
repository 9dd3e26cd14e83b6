"""Structural diff between two engine snapshots.

All functions take ``(desired, actual)``. Each change carries ``old`` (the
actual value) and ``new`` (the desired value), so a diff reads as "what
would change if desired were applied to actual".

Map keys are sorted before anything is emitted; identical inputs always
produce identical diffs.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..models import Agent, SearchEngineConfig, _put
from .models import EngineConfigSnapshot, EngineSnapshot, SnapshotMetadata

AGENT_DIALOGFLOW_MASK = "dialogflowAgentDefinition.dialogflowAgent"


@dataclass(frozen=True)
class FieldDiff:
    """A changed scalar or composite field."""

    field: str
    old: Any = None
    new: Any = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"field": self.field}
        _put(out, "old", self.old)
        _put(out, "new", self.new)
        return out


@dataclass(frozen=True)
class FeatureDiff:
    """A changed feature flag. A missing flag is reported as ``""``."""

    feature: str
    old: str = ""
    new: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"feature": self.feature}
        _put(out, "old", self.old)
        _put(out, "new", self.new)
        return out


class AgentChangeType(str, Enum):
    """How an agent differs between desired and actual."""

    ADDED = "added"
    REMOVED = "removed"
    UPDATED = "updated"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AgentDiff:
    """
    A change to one agent, matched by its snapshot key.

    Attributes:
        key: Derived identity (see ``agent_snapshot_key``)
        change_type: added, removed or updated
        old: The actual agent (None when added)
        new: The desired agent (None when removed)
        update_mask: Field paths that differ (updated only)
    """

    key: str
    change_type: AgentChangeType
    old: Agent | None = None
    new: Agent | None = None
    update_mask: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"key": self.key, "changeType": self.change_type.value}
        if self.old is not None:
            out["old"] = self.old.to_dict()
        if self.new is not None:
            out["new"] = self.new.to_dict()
        _put(out, "updateMask", list(self.update_mask))
        return out


@dataclass(frozen=True)
class SnapshotDiff:
    """Every difference between two snapshots, grouped by section."""

    metadata_changes: list[FieldDiff] = field(default_factory=list)
    engine_changes: list[FieldDiff] = field(default_factory=list)
    feature_changes: list[FeatureDiff] = field(default_factory=list)
    agent_changes: list[AgentDiff] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.metadata_changes
            or self.engine_changes
            or self.feature_changes
            or self.agent_changes
        )

    def has_live_changes(self) -> bool:
        """True if any change needs an API write. Metadata is never written."""
        return bool(self.engine_changes or self.feature_changes or self.agent_changes)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "metadataChanges", [c.to_dict() for c in self.metadata_changes])
        _put(out, "engineChanges", [c.to_dict() for c in self.engine_changes])
        _put(out, "featureChanges", [c.to_dict() for c in self.feature_changes])
        _put(out, "agentChanges", [c.to_dict() for c in self.agent_changes])
        return out


def agent_snapshot_key(agent: Agent | None) -> str:
    """
    Derive the identity used to match agents across snapshots.

    Precedence: Dialogflow agent link, display name, server name. The
    result is lowercased. Agents with none of these all share the empty
    key and collapse into a single entry.
    """
    if agent is None:
        return ""
    if agent.dialogflow_agent:
        return agent.dialogflow_agent.lower()
    if agent.display_name:
        return agent.display_name.lower()
    return agent.name.lower()


def diff_metadata(desired: SnapshotMetadata, actual: SnapshotMetadata) -> list[FieldDiff]:
    diffs: list[FieldDiff] = []
    for name, attr in (
        ("displayName", "display_name"),
        ("description", "description"),
        ("notes", "notes"),
    ):
        old, new = getattr(actual, attr), getattr(desired, attr)
        if old != new:
            diffs.append(FieldDiff(name, old, new))
    return diffs


def _search_config_dict(config: SearchEngineConfig | None) -> dict[str, Any] | None:
    return config.to_dict() if config is not None else None


def diff_engine_config(
    desired: EngineConfigSnapshot, actual: EngineConfigSnapshot
) -> list[FieldDiff]:
    """
    Compare engine configuration field by field.

    ``dataStoreIds`` is compared as an ordered list. ``commonConfig`` and
    ``searchConfig`` are compared structurally and reported as one
    composite change each.
    """
    diffs: list[FieldDiff] = []
    for name, attr in (
        ("displayName", "display_name"),
        ("solutionType", "solution_type"),
        ("industryVertical", "industry_vertical"),
        ("appType", "app_type"),
    ):
        old, new = getattr(actual, attr), getattr(desired, attr)
        if old != new:
            diffs.append(FieldDiff(name, old, new))

    if list(actual.data_store_ids) != list(desired.data_store_ids):
        diffs.append(
            FieldDiff("dataStoreIds", list(actual.data_store_ids), list(desired.data_store_ids))
        )

    if actual.common_config != desired.common_config:
        diffs.append(
            FieldDiff(
                "commonConfig",
                copy.deepcopy(actual.common_config),
                copy.deepcopy(desired.common_config),
            )
        )

    if actual.search_config != desired.search_config:
        diffs.append(
            FieldDiff(
                "searchConfig",
                _search_config_dict(actual.search_config),
                _search_config_dict(desired.search_config),
            )
        )
    return diffs


def diff_features(desired: dict[str, str], actual: dict[str, str]) -> list[FeatureDiff]:
    """Compare two feature maps over the union of their keys, in sorted order.

    A key missing on either side counts as ``""``.
    """
    diffs: list[FeatureDiff] = []
    for key in sorted(set(actual) | set(desired)):
        old = actual.get(key, "")
        new = desired.get(key, "")
        if old != new:
            diffs.append(FeatureDiff(feature=key, old=old, new=new))
    return diffs


def diff_agent_fields(actual: Agent, desired: Agent) -> list[str]:
    """
    Return the update mask needed to turn ``actual`` into ``desired``.

    ``reasoningEngine`` and the Dialogflow link are only included when the
    desired value is set; an empty desired value means "keep". The icon URI
    and content are compared as one field.
    """
    mask: list[str] = []
    if actual.display_name != desired.display_name:
        mask.append("displayName")
    if actual.description != desired.description:
        mask.append("description")
    if desired.reasoning_engine and actual.reasoning_engine != desired.reasoning_engine:
        mask.append("reasoningEngine")
    if desired.dialogflow_agent and actual.dialogflow_agent != desired.dialogflow_agent:
        mask.append(AGENT_DIALOGFLOW_MASK)
    if (actual.icon_uri, actual.icon_content) != (desired.icon_uri, desired.icon_content):
        mask.append("icon")
    return mask


def _index_agents(agents: list[Agent]) -> dict[str, Agent]:
    # Later duplicates win, matching how the agents would be applied.
    return {agent_snapshot_key(agent): agent for agent in agents}


def diff_agents(desired: list[Agent], actual: list[Agent]) -> list[AgentDiff]:
    """
    Reconcile two agent lists by snapshot key.

    Added and updated changes come first in sorted key order, then removed
    changes in sorted key order.
    """
    desired_by_key = _index_agents(desired)
    actual_by_key = _index_agents(actual)

    changes: list[AgentDiff] = []
    for key in sorted(desired_by_key):
        want = desired_by_key[key]
        have = actual_by_key.get(key)
        if have is None:
            changes.append(AgentDiff(key=key, change_type=AgentChangeType.ADDED, new=want))
            continue
        mask = diff_agent_fields(have, want)
        if mask:
            changes.append(
                AgentDiff(
                    key=key,
                    change_type=AgentChangeType.UPDATED,
                    old=have,
                    new=want,
                    update_mask=tuple(mask),
                )
            )

    for key in sorted(set(actual_by_key) - set(desired_by_key)):
        changes.append(
            AgentDiff(key=key, change_type=AgentChangeType.REMOVED, old=actual_by_key[key])
        )
    return changes


def diff_snapshots(desired: EngineSnapshot, actual: EngineSnapshot) -> SnapshotDiff:
    """Compute every difference between a desired and an actual snapshot."""
    return SnapshotDiff(
        metadata_changes=diff_metadata(desired.metadata, actual.metadata),
        engine_changes=diff_engine_config(desired.engine, actual.engine),
        feature_changes=diff_features(desired.engine.features, actual.engine.features),
        agent_changes=diff_agents(desired.agents, actual.agents),
    )
