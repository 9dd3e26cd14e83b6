"""Tests for output rendering."""

import json

import yaml

from gemctl.models import (
    CreateResult,
    DataStore,
    DeleteResult,
    Engine,
    WorkforceIdentityConfig,
)
from gemctl.output import (
    OutputFormat,
    format_agents,
    format_create_result,
    format_delete_result,
    format_engine_details,
    format_engine_features,
    format_engines,
    format_restore_result,
    format_snapshot_diff,
    format_workforce_config,
    render,
    to_plain,
)
from gemctl.output.formatters import render_feature_state
from gemctl.output.table import TableRenderer, truncate
from gemctl.snapshot import (
    AgentChangeType,
    AgentDiff,
    FeatureDiff,
    FieldDiff,
    RestoreResult,
    SnapshotDiff,
)
from tests.fixtures.resources import make_agent, make_engine


class TestTableRenderer:
    """Tests for bordered tables."""

    def test_render(self):
        out = TableRenderer().render(["ID", "NAME"], [["a", "Alpha"], ["bb", "B"]])
        assert out.splitlines() == [
            "+----+-------+",
            "| ID | NAME  |",
            "+----+-------+",
            "| a  | Alpha |",
            "| bb | B     |",
            "+----+-------+",
        ]

    def test_right_alignment(self):
        out = TableRenderer(alignments=["r"]).render(["COUNT"], [["7"]])
        assert "|     7 |" in out

    def test_max_width_truncates(self):
        out = TableRenderer(max_widths=[6]).render(["NAME"], [["abcdefghij"]])
        assert "| abc... |" in out

    def test_short_rows_padded(self):
        out = TableRenderer().render(["A", "B"], [["x"]])
        assert "| x |   |" in out

    def test_no_headers(self):
        assert TableRenderer().render([], [["x"]]) == ""

    def test_truncate(self):
        assert truncate("abcdef", 10) == "abcdef"
        assert truncate("abcdef", 5) == "ab..."
        assert truncate("abcdef", 2) == "ab"
        assert truncate("abcdef", 0) == "abcdef"


class TestRender:
    def test_json(self):
        out = render(Engine(name="e", display_name="E"), OutputFormat.JSON, lambda: "table")
        assert json.loads(out) == {"name": "e", "displayName": "E"}

    def test_yaml_keeps_key_order(self):
        out = render({"b": 1, "a": [CreateResult(name="x")]}, OutputFormat.YAML, lambda: "")
        assert out.splitlines()[0] == "b: 1"
        assert yaml.safe_load(out) == {"b": 1, "a": [{"name": "x", "status": "success"}]}

    def test_table_is_lazy(self):
        calls = []
        render([], OutputFormat.JSON, lambda: calls.append(1) or "")
        assert calls == []

    def test_to_plain_nested(self):
        assert to_plain({"k": (DeleteResult(name="n"),)}) == {
            "k": [{"name": "n", "status": "success"}]
        }


class TestEngineFormatters:
    def test_engines_table(self):
        out = format_engines([make_engine()], OutputFormat.TABLE)
        assert "| app " in out
        assert "SEARCH" in out
        assert out.endswith("Total: 1 engine(s)")

    def test_engines_empty(self):
        assert format_engines([], OutputFormat.TABLE) == "No engines found."

    def test_engines_json(self):
        data = json.loads(format_engines([make_engine()], OutputFormat.JSON))
        assert data[0]["dataStoreIds"] == ["docs", "faq"]

    def test_details_lists_enabled_features(self):
        out = format_engine_details(make_engine(), OutputFormat.TABLE)
        assert "Features (1/2 enabled):" in out
        assert "  + agent-gallery" in out
        assert "  companyName: Acme" in out
        assert "Search Tier: SEARCH_TIER_ENTERPRISE" in out

    def test_full_details_json(self):
        ds = DataStore(name="projects/p/locations/l/collections/c/dataStores/docs", display_name="Docs")
        data = json.loads(format_engine_details(make_engine(), OutputFormat.JSON, [ds]))
        assert data["engine"]["displayName"] == "Support App"
        assert data["dataStores"][0]["displayName"] == "Docs"

    def test_features_table(self):
        out = format_engine_features(make_engine(), OutputFormat.TABLE)
        lines = out.splitlines()
        assert any(line.startswith("agent-gallery") and "ON" in line for line in lines)
        assert lines[-1] == "Enabled: 1/2"

    def test_features_json_is_map(self):
        data = json.loads(format_engine_features(make_engine(), OutputFormat.JSON))
        assert data == {"agent-gallery": "FEATURE_STATE_ON", "prompt-gallery": "FEATURE_STATE_OFF"}

    def test_render_feature_state(self):
        assert render_feature_state("FEATURE_STATE_ON") == "ON"
        assert render_feature_state("off") == "OFF"
        assert render_feature_state("FEATURE_STATE_UNSPECIFIED") == "FEATURE_STATE_UNSPECIFIED"


class TestOtherFormatters:
    def test_agents_table(self):
        agents = [make_agent("111", "Bot", dialogflow_agent="projects/df/locations/global/agents/A")]
        out = format_agents(agents, OutputFormat.TABLE)
        assert "| 111 " in out
        assert "projects/df/locations/global/agents/A" in out

    def test_agents_empty(self):
        assert format_agents([], OutputFormat.TABLE) == "No agents registered for this engine."

    def test_create_result(self):
        out = format_create_result(
            CreateResult(name="e", message="started", operation="op/1"), OutputFormat.TABLE
        )
        assert out == "Created: e\nstarted\nOperation: op/1"

    def test_delete_result_default_message(self):
        assert format_delete_result(DeleteResult(name="x"), OutputFormat.TABLE) == "Deleted: x"

    def test_workforce_disabled(self):
        config = WorkforceIdentityConfig(idp_type="IDP_TYPE_UNSPECIFIED")
        out = format_workforce_config(config, OutputFormat.TABLE)
        assert out == "Workforce identity: disabled (IDP_TYPE_UNSPECIFIED)"


class TestSnapshotFormatters:
    """Tests for diff and restore rendering."""

    def test_empty_diff(self):
        assert format_snapshot_diff(SnapshotDiff(), OutputFormat.TABLE) == "No differences found."

    def test_diff_markers(self):
        diff = SnapshotDiff(
            engine_changes=[FieldDiff("displayName", "Old", "New")],
            feature_changes=[
                FeatureDiff("a", "", "ON"),
                FeatureDiff("b", "ON", ""),
                FeatureDiff("c", "OFF", "ON"),
            ],
            agent_changes=[
                AgentDiff("new bot", AgentChangeType.ADDED),
                AgentDiff("old bot", AgentChangeType.REMOVED),
                AgentDiff("bot", AgentChangeType.UPDATED, update_mask=("displayName", "icon")),
            ],
        )

        lines = format_snapshot_diff(diff, OutputFormat.TABLE).splitlines()

        assert "  ~ displayName: Old -> New" in lines
        assert "  + a: (none) -> ON" in lines
        assert "  - b: ON -> (none)" in lines
        assert "  ~ c: OFF -> ON" in lines
        assert "  + new bot" in lines
        assert "  - old bot" in lines
        assert "  ~ bot: displayName, icon" in lines

    def test_diff_json(self):
        diff = SnapshotDiff(feature_changes=[FeatureDiff("a", "OFF", "ON")])
        data = json.loads(format_snapshot_diff(diff, OutputFormat.JSON))
        assert data == {"featureChanges": [{"feature": "a", "old": "OFF", "new": "ON"}]}

    def test_restore_nothing(self):
        assert format_restore_result(None, OutputFormat.TABLE) == "No changes applied."
        assert format_restore_result(RestoreResult("e"), OutputFormat.TABLE) == "No changes applied."

    def test_restore_applied(self):
        result = RestoreResult(
            "engines/e",
            created=True,
            feature_changes=[FeatureDiff("a", "", "ON")],
            agent_changes=[AgentDiff("bot", AgentChangeType.ADDED)],
        )
        out = format_restore_result(result, OutputFormat.TABLE)
        assert "Target Engine: engines/e" in out
        assert "Engine created." in out
        assert "  a: (none) -> ON" in out
        assert "  bot: added" in out
