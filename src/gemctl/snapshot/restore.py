"""Restore a snapshot onto a live engine.

The reconciler reads the target and diffs the snapshot against it to build
a preview. Outside dry-run it then converges the target one call at a time
in a fixed order:

1. create the engine, or patch the fields that differ
2. apply the snapshot's feature flags to an existing engine
3. create, update and delete agents

The first failing call aborts the sequence. Nothing is rolled back; running
the restore again re-diffs against the live state and picks up where the
last run stopped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..exceptions import (
    GemctlError,
    NotFoundError,
    PreconditionFailedError,
    TransportError,
    ValidationError,
)
from ..models import (
    Agent,
    AgentIcon,
    AgentInput,
    DialogflowAgentDefinition,
    Engine,
    SearchEngineConfig,
)
from ..naming import engine_parent, extract_resource_id
from .capture import snapshot_from_live
from .differ import (
    AgentChangeType,
    AgentDiff,
    FeatureDiff,
    SnapshotDiff,
    diff_agents,
    diff_features,
    diff_snapshots,
)
from .models import EngineConfigSnapshot, EngineSnapshot

if TYPE_CHECKING:
    from .protocol import SnapshotBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestoreOptions:
    """
    How a restore should behave.

    Attributes:
        target_engine_name: Full resource name of the engine to converge
        create_if_missing: Create the engine when it does not exist
        update_existing: Patch engine fields when the engine exists
        dry_run: Only compute the preview; issue no writes
    """

    target_engine_name: str
    create_if_missing: bool = False
    update_existing: bool = True
    dry_run: bool = False


@dataclass
class RestoreResult:
    """What a restore actually changed."""

    engine_name: str
    created: bool = False
    engine_patched: bool = False
    feature_changes: list[FeatureDiff] = field(default_factory=list)
    agent_changes: list[AgentDiff] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(
            self.created or self.engine_patched or self.feature_changes or self.agent_changes
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "engineName": self.engine_name,
            "created": self.created,
            "enginePatched": self.engine_patched,
        }
        if self.feature_changes:
            out["featureChanges"] = [c.to_dict() for c in self.feature_changes]
        if self.agent_changes:
            out["agentChanges"] = [c.to_dict() for c in self.agent_changes]
        return out


def restore_engine_snapshot(
    backend: SnapshotBackend,
    snapshot: EngineSnapshot,
    options: RestoreOptions,
) -> tuple[RestoreResult | None, SnapshotDiff]:
    """
    Converge a live engine toward a snapshot.

    Args:
        backend: Remote platform operations
        snapshot: Desired state
        options: Target and behavior switches

    Returns:
        ``(result, preview)``. ``result`` is None for a dry run.

    Raises:
        PreconditionFailedError: If no target is given, or the target is
            missing and creation is disabled
        ValidationError: If a snapshot agent cannot be created as written
        TransportError: If any call fails; ``operation`` names the step
    """
    target = options.target_engine_name
    if not target:
        raise PreconditionFailedError("Target engine name is required")

    live_engine: Engine | None = None
    live_agents: list[Agent] = []
    try:
        live_engine = backend.get_engine(target)
    except NotFoundError:
        if not options.create_if_missing:
            raise PreconditionFailedError(
                f"Engine {target} not found and creation is disabled"
            ) from None
        logger.info("Engine %s not found; it will be created", target)
    else:
        live_agents = backend.list_agents(target)

    if live_engine is not None:
        actual = snapshot_from_live(live_engine, live_agents)
    else:
        actual = EngineSnapshot.empty(target)
    preview = diff_snapshots(snapshot, actual)

    if options.dry_run:
        logger.info("Dry run: no changes applied to %s", target)
        return None, preview

    result = RestoreResult(engine_name=target)
    if live_engine is not None and not preview.has_live_changes():
        logger.info("Engine %s already matches the snapshot", target)
        return result, preview

    agent_changes = diff_agents(snapshot.agents, live_agents)
    _validate_agent_creates(agent_changes)

    # Engine
    if live_engine is None:
        parent = engine_parent(target)
        _run_step(
            "create-engine",
            target,
            backend.create_engine,
            parent,
            extract_resource_id(target),
            _engine_for_create(snapshot.engine),
        )
        result.created = True
    elif options.update_existing:
        patch, mask = _engine_patch(live_engine, snapshot.engine)
        if mask:
            _run_step("patch-engine", target, backend.patch_engine, target, patch, mask)
            result.engine_patched = True

    # Features. A created engine already got them in the create payload.
    desired_features = snapshot.engine.features
    if desired_features:
        if live_engine is not None:
            _run_step(
                "update-features",
                target,
                backend.update_engine_features,
                target,
                dict(desired_features),
            )
        live_features = live_engine.features if live_engine is not None else {}
        result.feature_changes = diff_features(desired_features, live_features)

    # Agents
    for change in agent_changes:
        _apply_agent_change(backend, target, change)
        result.agent_changes.append(change)

    return result, preview


def _run_step(operation: str, resource: str, fn: Callable[..., Any], *args: Any) -> Any:
    logger.info("%s %s", operation, resource)
    try:
        return fn(*args)
    except GemctlError as e:
        raise TransportError(
            f"Restore step {operation} failed: {e}",
            operation=operation,
            resource=resource,
            status=getattr(e, "status", None),
        ) from e


def _engine_for_create(cfg: EngineConfigSnapshot) -> Engine:
    """Seed a new engine. Of ``commonConfig`` only ``companyName`` is sent."""
    company = cfg.company_name
    search = cfg.search_config
    return Engine(
        display_name=cfg.display_name,
        solution_type=cfg.solution_type,
        industry_vertical=cfg.industry_vertical,
        app_type=cfg.app_type,
        data_store_ids=list(cfg.data_store_ids),
        common_config={"companyName": company} if company else {},
        features=dict(cfg.features),
        search_engine_config=(
            SearchEngineConfig(search.search_tier, list(search.search_add_ons))
            if search is not None
            else None
        ),
    )


def _engine_patch(current: Engine, cfg: EngineConfigSnapshot) -> tuple[Engine, list[str]]:
    """
    Build the narrowest patch that moves ``current`` to ``cfg``.

    Empty desired scalars mean "keep". The data store list is compared in
    order. Search config is only patched when the snapshot has one.
    """
    mask: list[str] = []
    changes: dict[str, Any] = {}

    if cfg.display_name and cfg.display_name != current.display_name:
        changes["display_name"] = cfg.display_name
        mask.append("displayName")
    if cfg.industry_vertical and cfg.industry_vertical != current.industry_vertical:
        changes["industry_vertical"] = cfg.industry_vertical
        mask.append("industryVertical")
    if cfg.app_type and cfg.app_type != current.app_type:
        changes["app_type"] = cfg.app_type
        mask.append("appType")
    if list(cfg.data_store_ids) != list(current.data_store_ids):
        changes["data_store_ids"] = list(cfg.data_store_ids)
        mask.append("dataStoreIds")

    if cfg.search_config is not None:
        have = current.search_engine_config or SearchEngineConfig()
        want = cfg.search_config
        if (want.search_tier, list(want.search_add_ons)) != (
            have.search_tier,
            list(have.search_add_ons),
        ):
            changes["search_engine_config"] = SearchEngineConfig(
                want.search_tier, list(want.search_add_ons)
            )
            mask.append("searchEngineConfig")

    return Engine(name=current.name, **changes), mask


def _validate_agent_creates(changes: list[AgentDiff]) -> None:
    for change in changes:
        if change.change_type is not AgentChangeType.ADDED or change.new is None:
            continue
        agent = change.new
        if agent.dialogflow_agent_definition is not None and not agent.dialogflow_agent:
            raise ValidationError(
                "snapshot agent",
                agent.display_name,
                f"agent {agent.display_name!r} has a Dialogflow definition without an agent resource",
            )


def _agent_input(agent: Agent, default_reasoning_engine: str = "") -> AgentInput:
    icon = None
    if agent.icon is not None:
        icon = AgentIcon(uri=agent.icon.uri, content=agent.icon.content)
    definition = None
    if agent.dialogflow_agent_definition is not None:
        definition = DialogflowAgentDefinition(dialogflow_agent=agent.dialogflow_agent)
    return AgentInput(
        display_name=agent.display_name,
        description=agent.description,
        icon=icon,
        dialogflow_agent_definition=definition,
        reasoning_engine=agent.reasoning_engine or default_reasoning_engine,
    )


def _apply_agent_change(backend: SnapshotBackend, engine_name: str, change: AgentDiff) -> None:
    if change.change_type is AgentChangeType.ADDED and change.new is not None:
        # New agents without a reasoning engine are bound to the target engine.
        _run_step(
            "create-agent",
            change.new.display_name or change.key,
            backend.create_agent,
            engine_name,
            _agent_input(change.new, default_reasoning_engine=engine_name),
        )
    elif change.change_type is AgentChangeType.UPDATED and change.old and change.new:
        _run_step(
            "update-agent",
            change.old.name,
            backend.update_agent,
            change.old.name,
            _agent_input(change.new),
            list(change.update_mask),
        )
    elif change.change_type is AgentChangeType.REMOVED and change.old is not None:
        _run_step("delete-agent", change.old.name, backend.delete_agent, change.old.name)
