"""Tests for restoring snapshots onto live engines."""

from dataclasses import replace

import pytest

from gemctl.exceptions import PreconditionFailedError, TransportError, ValidationError
from gemctl.models import Agent, DialogflowAgentDefinition
from gemctl.snapshot import (
    AgentChangeType,
    EngineSnapshot,
    RestoreOptions,
    RestoreResult,
    capture_engine_snapshot,
    restore_engine_snapshot,
)
from tests.fixtures.backend import FakeBackend
from tests.fixtures.resources import ENGINE_NAME, FIXED_NOW, make_agent, make_engine

NEW_ENGINE = "projects/test-project/locations/global/collections/default_collection/engines/clone"


@pytest.fixture
def snapshot(backend) -> EngineSnapshot:
    """Snapshot of the backend's engine as it is now."""
    return capture_engine_snapshot(backend, ENGINE_NAME, now=FIXED_NOW)


class TestRestorePreconditions:
    """Tests for target resolution."""

    def test_empty_target(self, backend, snapshot):
        with pytest.raises(PreconditionFailedError):
            restore_engine_snapshot(backend, snapshot, RestoreOptions(target_engine_name=""))

    def test_missing_target_without_create(self, backend, snapshot):
        """A missing engine with creation disabled fails and writes nothing."""
        with pytest.raises(PreconditionFailedError, match="not found"):
            restore_engine_snapshot(backend, snapshot, RestoreOptions(NEW_ENGINE))
        assert backend.writes == []


class TestRestoreDryRun:
    """Dry runs compute a preview and never write."""

    @pytest.mark.parametrize("create_if_missing", [True, False])
    @pytest.mark.parametrize("update_existing", [True, False])
    def test_existing_target(self, backend, snapshot, create_if_missing, update_existing):
        backend.engine = replace(backend.engine, display_name="Drifted")
        options = RestoreOptions(
            ENGINE_NAME,
            create_if_missing=create_if_missing,
            update_existing=update_existing,
            dry_run=True,
        )

        result, preview = restore_engine_snapshot(backend, snapshot, options)

        assert result is None
        assert not preview.is_empty()
        assert backend.writes == []

    def test_missing_target_previews_everything_as_added(self, backend, snapshot):
        options = RestoreOptions(NEW_ENGINE, create_if_missing=True, dry_run=True)

        result, preview = restore_engine_snapshot(backend, snapshot, options)

        assert result is None
        assert backend.writes == []
        assert {c.field for c in preview.engine_changes} >= {"displayName", "dataStoreIds"}
        assert len(preview.feature_changes) == 2
        assert all(c.old == "" for c in preview.feature_changes)
        assert [c.change_type for c in preview.agent_changes] == [AgentChangeType.ADDED] * 2


class TestRestoreIdempotence:
    """A converged target produces no writes."""

    def test_converged_target(self, backend, snapshot):
        result, preview = restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        assert preview.is_empty()
        assert backend.writes == []
        assert result == RestoreResult(engine_name=ENGINE_NAME)
        assert not result.changed

    def test_repeated_restore_converges(self, backend, snapshot):
        """After applying a restore, a second run against the result is a no-op."""
        backend.engine = replace(backend.engine, display_name="Drifted")
        restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))
        assert "patch_engine" in backend.write_ops

        # Simulate the server applying the patch.
        backend.engine = replace(backend.engine, display_name="Support App")
        backend.writes.clear()

        result, preview = restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))
        assert preview.is_empty()
        assert backend.writes == []
        assert not result.changed

    def test_metadata_only_changes_issue_no_writes(self, backend, snapshot):
        """Notes and description are reported but never block convergence."""
        annotated = snapshot.with_overrides(notes="restored", description="weekly")

        result, preview = restore_engine_snapshot(backend, annotated, RestoreOptions(ENGINE_NAME))

        assert [c.field for c in preview.metadata_changes] == ["description", "notes"]
        assert not preview.has_live_changes()
        assert backend.writes == []
        assert not result.changed


class TestRestoreCreate:
    """Restoring into a new engine."""

    def test_create_sequence(self, backend, snapshot):
        result, preview = restore_engine_snapshot(
            backend, snapshot, RestoreOptions(NEW_ENGINE, create_if_missing=True)
        )

        assert result.created is True
        assert result.engine_patched is False
        assert backend.write_ops == ["create_engine", "create_agent", "create_agent"]
        assert [c.change_type for c in result.agent_changes] == [AgentChangeType.ADDED] * 2

    def test_create_payload(self, backend, snapshot):
        restore_engine_snapshot(
            backend, snapshot, RestoreOptions(NEW_ENGINE, create_if_missing=True)
        )

        parent, engine_id, engine = backend.calls("create_engine")[0]
        assert parent == "projects/test-project/locations/global/collections/default_collection"
        assert engine_id == "clone"
        assert engine.name == ""
        assert engine.display_name == "Support App"
        assert engine.data_store_ids == ["docs", "faq"]
        assert engine.common_config == {"companyName": "Acme"}
        assert engine.features == snapshot.engine.features
        assert engine.search_engine_config.search_tier == "SEARCH_TIER_ENTERPRISE"

    def test_only_company_name_sent(self, backend):
        backend.engine = replace(
            backend.engine, common_config={"companyName": "Acme", "favicon": "x"}
        )
        snap = capture_engine_snapshot(backend, ENGINE_NAME)

        restore_engine_snapshot(backend, snap, RestoreOptions(NEW_ENGINE, create_if_missing=True))

        _, _, engine = backend.calls("create_engine")[0]
        assert engine.common_config == {"companyName": "Acme"}

    def test_new_agents_default_reasoning_engine(self, backend, snapshot):
        """Agents without a reasoning engine are bound to the target."""
        restore_engine_snapshot(
            backend, snapshot, RestoreOptions(NEW_ENGINE, create_if_missing=True)
        )
        payloads = {p.display_name: p for _, p in backend.calls("create_agent")}
        assert payloads["FAQ Bot"].reasoning_engine == NEW_ENGINE
        assert payloads["Invoice Helper"].reasoning_engine == ENGINE_NAME
        assert (
            payloads["Invoice Helper"].dialogflow_agent_definition.dialogflow_agent
            == "projects/df/locations/global/agents/AAA"
        )

    def test_created_engine_gets_features_from_create(self, backend, snapshot):
        """No separate feature update follows a create."""
        result, _ = restore_engine_snapshot(
            backend, snapshot, RestoreOptions(NEW_ENGINE, create_if_missing=True)
        )
        assert backend.calls("update_engine_features") == []
        _, _, engine = backend.calls("create_engine")[0]
        assert engine.features == snapshot.engine.features
        assert result.feature_changes

    def test_feature_changes_against_empty(self, backend, snapshot):
        result, _ = restore_engine_snapshot(
            backend, snapshot, RestoreOptions(NEW_ENGINE, create_if_missing=True)
        )
        assert {(c.feature, c.old) for c in result.feature_changes} == {
            ("agent-gallery", ""),
            ("prompt-gallery", ""),
        }


class TestRestoreUpdate:
    """Restoring onto an existing engine."""

    def test_patch_mask_is_narrow(self, backend, snapshot):
        backend.engine = replace(
            backend.engine, display_name="Drifted", data_store_ids=["faq", "docs"]
        )

        result, _ = restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        name, patch, mask = backend.calls("patch_engine")[0]
        assert name == ENGINE_NAME
        assert mask == ["displayName", "dataStoreIds"]
        assert patch.display_name == "Support App"
        assert patch.data_store_ids == ["docs", "faq"]
        assert result.engine_patched is True

    def test_search_config_patch(self, backend, snapshot):
        backend.engine = replace(backend.engine, search_engine_config=None)
        restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))
        _, patch, mask = backend.calls("patch_engine")[0]
        assert mask == ["searchEngineConfig"]
        assert patch.search_engine_config.search_add_ons == ["SEARCH_ADD_ON_LLM"]

    def test_update_existing_disabled(self, backend, snapshot):
        backend.engine = replace(backend.engine, display_name="Drifted")
        result, _ = restore_engine_snapshot(
            backend, snapshot, RestoreOptions(ENGINE_NAME, update_existing=False)
        )
        assert "patch_engine" not in backend.write_ops
        assert result.engine_patched is False

    def test_features_applied_and_reported(self, backend, snapshot):
        backend.engine = replace(
            backend.engine,
            features={"agent-gallery": "FEATURE_STATE_OFF", "notebook-lm": "FEATURE_STATE_ON"},
        )

        result, _ = restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        name, features = backend.calls("update_engine_features")[0]
        assert features == snapshot.engine.features
        assert [(c.feature, c.old, c.new) for c in result.feature_changes] == [
            ("agent-gallery", "FEATURE_STATE_OFF", "FEATURE_STATE_ON"),
            ("notebook-lm", "FEATURE_STATE_ON", ""),
            ("prompt-gallery", "", "FEATURE_STATE_OFF"),
        ]

    def test_agents_reconciled(self, backend, snapshot):
        """Live agents are updated, created and deleted to match the snapshot."""
        invoice, faq = backend.agents
        backend.agents = [
            replace(invoice, description="stale"),
            make_agent("999", "Rogue Bot"),
        ]

        result, _ = restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        assert backend.write_ops == ["update_engine_features", "create_agent", "update_agent", "delete_agent"]
        update_name, payload, mask = backend.calls("update_agent")[0]
        assert update_name == invoice.name
        assert payload.description == "Extracts invoice data"
        assert mask == ["description"]
        assert backend.calls("delete_agent")[0] == (
            f"{ENGINE_NAME}/assistants/default_assistant/agents/999",
        )
        assert [c.change_type.value for c in result.agent_changes] == ["added", "updated", "removed"]


class TestRestoreFailures:
    """The first failing call aborts the sequence."""

    def test_failure_names_operation(self, backend, snapshot):
        backend.engine = replace(backend.engine, display_name="Drifted")
        backend.agents = []
        backend.fail_on = "create_agent"

        with pytest.raises(TransportError) as exc_info:
            restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        assert exc_info.value.operation == "create-agent"
        assert exc_info.value.status == 500
        assert isinstance(exc_info.value.__cause__, TransportError)
        # Engine and features were applied before the failure; nothing is rolled back.
        assert backend.write_ops == ["patch_engine", "update_engine_features"]

    def test_engine_failure_stops_everything(self, backend, snapshot):
        backend.fail_on = "create_engine"
        with pytest.raises(TransportError) as exc_info:
            restore_engine_snapshot(
                backend, snapshot, RestoreOptions(NEW_ENGINE, create_if_missing=True)
            )
        assert exc_info.value.operation == "create-engine"
        assert exc_info.value.resource == NEW_ENGINE
        assert backend.writes == []

    @pytest.mark.parametrize("operation", ["get_engine", "list_agents"])
    @pytest.mark.parametrize("dry_run", [False, True])
    def test_read_failure_propagates(self, backend, snapshot, operation, dry_run):
        """A failing read is not mistaken for a missing engine."""
        backend.fail_on = operation
        with pytest.raises(TransportError) as exc_info:
            restore_engine_snapshot(
                backend,
                snapshot,
                RestoreOptions(ENGINE_NAME, create_if_missing=True, dry_run=dry_run),
            )
        assert exc_info.value.resource == ENGINE_NAME
        assert backend.writes == []

    def test_feature_failure_stops_agents(self, backend, snapshot):
        backend.agents = []
        backend.fail_on = "update_engine_features"

        with pytest.raises(TransportError) as exc_info:
            restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        assert exc_info.value.operation == "update-features"
        assert exc_info.value.resource == ENGINE_NAME
        assert backend.writes == []

    def test_agent_update_failure_stops_deletes(self, backend, snapshot):
        invoice, faq = backend.agents
        backend.agents = [invoice, replace(faq, description="stale"), make_agent("444", "Zed Bot")]
        backend.fail_on = "update_agent"

        with pytest.raises(TransportError) as exc_info:
            restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        assert exc_info.value.operation == "update-agent"
        assert exc_info.value.resource == faq.name
        assert backend.write_ops == ["update_engine_features"]

    def test_agent_delete_failure_stops_remaining_deletes(self, backend, snapshot):
        backend.agents = [
            *backend.agents,
            make_agent("333", "Rogue Bot"),
            make_agent("444", "Zed Bot"),
        ]
        backend.fail_on = "delete_agent"

        with pytest.raises(TransportError) as exc_info:
            restore_engine_snapshot(backend, snapshot, RestoreOptions(ENGINE_NAME))

        assert exc_info.value.operation == "delete-agent"
        assert exc_info.value.resource == (
            f"{ENGINE_NAME}/assistants/default_assistant/agents/333"
        )
        assert backend.write_ops == ["update_engine_features"]

    def test_invalid_agent_rejected_before_writes(self, backend):
        snap = capture_engine_snapshot(backend, ENGINE_NAME)
        broken = Agent(display_name="Broken", dialogflow_agent_definition=DialogflowAgentDefinition(""))
        snap = replace(snap, agents=[*snap.agents, broken])

        with pytest.raises(ValidationError):
            restore_engine_snapshot(
                backend, snap, RestoreOptions(NEW_ENGINE, create_if_missing=True)
            )
        assert backend.writes == []

    def test_missing_target_restored_with_other_live_engine(self):
        """A backend with a different engine still treats the target as missing."""
        other = FakeBackend(engine=make_engine(name=ENGINE_NAME))
        snap = EngineSnapshot.empty(NEW_ENGINE)
        result, _ = restore_engine_snapshot(
            other, snap, RestoreOptions(NEW_ENGINE, create_if_missing=True)
        )
        assert result.created is True
        assert other.write_ops == ["create_engine"]


class TestRestoreResult:
    def test_to_dict(self):
        result = RestoreResult(engine_name="e", created=True)
        assert result.to_dict() == {"engineName": "e", "created": True, "enginePatched": False}
        assert result.changed
