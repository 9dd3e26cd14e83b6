"""
Per-resource formatters.

Each ``format_*`` function returns the full text for one command result.
JSON and YAML output is the resource's API shape; the table form is
written for terminals.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ..models import FEATURE_STATE_OFF, FEATURE_STATE_ON, feature_enabled
from ..naming import extract_resource_id
from . import OutputFormat, render
from .table import TableRenderer

if TYPE_CHECKING:
    from ..models import (
        Agent,
        CreateResult,
        DataStore,
        DeleteResult,
        Document,
        Engine,
        WorkforceIdentityConfig,
    )
    from ..snapshot import RestoreResult, SnapshotDiff

RULE = "=" * 80
THIN_RULE = "-" * 80


def _show(value: Any) -> str:
    if value is None or value == "" or value == [] or value == {}:
        return "(none)"
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def render_feature_state(state: str) -> str:
    """Shorten ``FEATURE_STATE_ON``/``OFF`` to ``ON``/``OFF``; other states pass through."""
    if state == FEATURE_STATE_ON:
        return "ON"
    if state == FEATURE_STATE_OFF:
        return "OFF"
    if state.upper() in ("ON", "OFF"):
        return state.upper()
    return state


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------


def format_engines(engines: list[Engine], output_format: OutputFormat) -> str:
    def table() -> str:
        if not engines:
            return "No engines found."
        rows = [
            [
                e.engine_id,
                e.display_name,
                e.solution_type.replace("SOLUTION_TYPE_", "", 1),
            ]
            for e in engines
        ]
        body = TableRenderer(max_widths=[60, 30, 0]).render(["ID", "DISPLAY NAME", "TYPE"], rows)
        return f"{body}\n\nTotal: {len(engines)} engine(s)"

    return render(engines, output_format, table)


def format_engine_details(
    engine: Engine,
    output_format: OutputFormat,
    data_stores: list[DataStore] | None = None,
) -> str:
    """Engine details; with ``data_stores`` the linked stores are included too."""
    data: Any = engine
    if data_stores is not None:
        data = {"engine": engine, "dataStores": data_stores}

    def table() -> str:
        lines = [
            RULE,
            f"Engine: {engine.display_name}",
            RULE,
            f"Name: {engine.name}",
            f"Solution Type: {engine.solution_type}",
            f"Industry Vertical: {engine.industry_vertical}",
            f"App Type: {engine.app_type}",
        ]

        if engine.common_config:
            lines.append("")
            lines.append("Common Config:")
            for key in sorted(engine.common_config):
                lines.append(f"  {key}: {_show(engine.common_config[key])}")

        search = engine.search_engine_config
        if search is not None:
            lines.append("")
            lines.append("Search Config:")
            lines.append(f"  Search Tier: {search.search_tier}")
            if search.search_add_ons:
                lines.append(f"  Search Add-ons: {', '.join(search.search_add_ons)}")

        if engine.data_store_ids:
            lines.append("")
            lines.append(f"Data Stores ({len(engine.data_store_ids)}):")
            lines.extend(f"  - {ds}" for ds in engine.data_store_ids)

        if engine.features:
            enabled = sorted(k for k, v in engine.features.items() if feature_enabled(v))
            lines.append("")
            lines.append(f"Features ({len(enabled)}/{len(engine.features)} enabled):")
            lines.extend(f"  + {name}" for name in enabled)

        for ds in data_stores or []:
            lines.append("")
            lines.append(f"Data Store: {ds.display_name} ({ds.data_store_id})")
            lines.append(f"  Content Config: {ds.content_config}")
            if ds.solution_types:
                lines.append(f"  Solution Types: {', '.join(ds.solution_types)}")

        return "\n".join(lines)

    return render(data, output_format, table)


def format_engine_features(engine: Engine, output_format: OutputFormat) -> str:
    features = engine.features

    def table() -> str:
        if not features:
            return "No feature configuration found for this engine."
        enabled = sum(1 for state in features.values() if feature_enabled(state))
        lines = [
            RULE,
            f"Features for engine: {engine.display_name}",
            RULE,
            f"{'FEATURE':<40} {'STATE':<20}",
            THIN_RULE,
        ]
        for key in sorted(features):
            lines.append(f"{key:<40} {render_feature_state(features[key]):<20}")
        lines.append("")
        lines.append(f"Enabled: {enabled}/{len(features)}")
        return "\n".join(lines)

    return render(dict(features), output_format, table)


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------


def format_agents(agents: list[Agent], output_format: OutputFormat) -> str:
    def table() -> str:
        if not agents:
            return "No agents registered for this engine."
        rows = [
            [
                extract_resource_id(a.name),
                a.display_name,
                a.dialogflow_agent or "N/A",
            ]
            for a in agents
        ]
        body = TableRenderer(max_widths=[30, 35, 45]).render(
            ["AGENT ID", "DISPLAY NAME", "DIALOGFLOW AGENT"], rows
        )
        return f"{body}\n\nTotal: {len(agents)} agent(s)"

    return render(agents, output_format, table)


def format_agent_details(agent: Agent, output_format: OutputFormat) -> str:
    def table() -> str:
        lines = [
            RULE,
            f"Agent: {agent.display_name}",
            RULE,
            f"Name: {agent.name}",
            f"Description: {agent.description}",
            f"Reasoning Engine: {agent.reasoning_engine}",
        ]
        if agent.dialogflow_agent_definition is not None:
            lines.append(f"Dialogflow Agent: {agent.dialogflow_agent}")
        if agent.icon_uri:
            lines.append(f"Icon URI: {agent.icon_uri}")
        elif agent.icon_content:
            lines.append("Icon: [embedded Base64 content]")

        if agent.capabilities:
            lines.append("")
            lines.append(f"Capabilities ({len(agent.capabilities)}):")
            lines.extend(f"  - {c}" for c in agent.capabilities)
        for title, mapping in (("Labels", agent.labels), ("Annotations", agent.annotations)):
            if mapping:
                lines.append("")
                lines.append(f"{title}:")
                lines.extend(f"  {k}: {mapping[k]}" for k in sorted(mapping))

        if agent.create_time:
            lines.append("")
            lines.append(f"Created: {agent.create_time}")
        if agent.update_time:
            lines.append(f"Updated: {agent.update_time}")
        return "\n".join(lines)

    return render(agent, output_format, table)


# ---------------------------------------------------------------------------
# Data stores
# ---------------------------------------------------------------------------


def format_data_stores(data_stores: list[DataStore], output_format: OutputFormat) -> str:
    def table() -> str:
        if not data_stores:
            return "No data stores found."
        rows = [[ds.data_store_id, ds.display_name, ds.content_config] for ds in data_stores]
        body = TableRenderer(max_widths=[50, 30, 0]).render(
            ["ID", "DISPLAY NAME", "CONTENT CONFIG"], rows
        )
        return f"{body}\n\nTotal: {len(data_stores)} data store(s)"

    return render(data_stores, output_format, table)


def format_data_store_details(data_store: DataStore, output_format: OutputFormat) -> str:
    def table() -> str:
        lines = [
            RULE,
            f"Data Store: {data_store.display_name}",
            RULE,
            f"Name: {data_store.name}",
            f"Industry Vertical: {data_store.industry_vertical}",
            f"Content Config: {data_store.content_config}",
            f"Created: {data_store.create_time}",
        ]
        if data_store.solution_types:
            lines.append(f"Solution Types: {', '.join(data_store.solution_types)}")
        if data_store.default_schema_id:
            lines.append(f"Default Schema: {data_store.default_schema_id}")
        return "\n".join(lines)

    return render(data_store, output_format, table)


def format_documents(
    documents: list[Document],
    data_store_id: str,
    branch: str,
    output_format: OutputFormat,
) -> str:
    def table() -> str:
        if not documents:
            return "No documents found in this data store."
        rows = [[d.id, d.uri or "N/A", d.index_time or "N/A"] for d in documents]
        body = TableRenderer(max_widths=[40, 50, 25]).render(["ID", "URI", "INDEX TIME"], rows)
        header = f"Documents in Data Store: {data_store_id}\nBranch: {branch}"
        return f"{header}\n{body}\n\nTotal: {len(documents)} document(s)"

    return render(documents, output_format, table)


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------


def format_create_result(result: CreateResult, output_format: OutputFormat) -> str:
    def table() -> str:
        lines = [f"Created: {result.name}"]
        if result.message:
            lines.append(result.message)
        if result.operation:
            lines.append(f"Operation: {result.operation}")
        return "\n".join(lines)

    return render(result, output_format, table)


def format_delete_result(result: DeleteResult, output_format: OutputFormat) -> str:
    def table() -> str:
        return result.message or f"Deleted: {result.name}"

    return render(result, output_format, table)


def format_workforce_config(config: WorkforceIdentityConfig, output_format: OutputFormat) -> str:
    def table() -> str:
        if not config.workforce_pool_name:
            state = config.idp_type or "not configured"
            return f"Workforce identity: disabled ({state})"
        lines = [
            RULE,
            "Workforce Identity",
            RULE,
            f"IdP Type: {config.idp_type}",
            f"Workforce Pool: {config.workforce_pool_name}",
        ]
        if config.workforce_location:
            lines.append(f"Location: {config.workforce_location}")
        if config.workforce_pool_id:
            lines.append(f"Pool ID: {config.workforce_pool_id}")
        if config.workforce_provider_id:
            lines.append(f"Provider ID: {config.workforce_provider_id}")
        return "\n".join(lines)

    return render(config, output_format, table)


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


def format_snapshot_diff(diff: SnapshotDiff, output_format: OutputFormat) -> str:
    """Markers: ``~`` changed, ``+`` added, ``-`` removed."""

    def table() -> str:
        if diff.is_empty():
            return "No differences found."
        lines: list[str] = []
        for title, changes in (
            ("Metadata changes", diff.metadata_changes),
            ("Engine changes", diff.engine_changes),
        ):
            if changes:
                lines.append(f"{title}:")
                lines.extend(
                    f"  ~ {c.field}: {_show(c.old)} -> {_show(c.new)}" for c in changes
                )

        if diff.feature_changes:
            lines.append("Feature changes:")
            for c in diff.feature_changes:
                marker = "+" if not c.old else "-" if not c.new else "~"
                lines.append(f"  {marker} {c.feature}: {_show(c.old)} -> {_show(c.new)}")

        if diff.agent_changes:
            lines.append("Agent changes:")
            for c in diff.agent_changes:
                if c.change_type.value == "added":
                    lines.append(f"  + {c.key or '(unnamed)'}")
                elif c.change_type.value == "removed":
                    lines.append(f"  - {c.key or '(unnamed)'}")
                else:
                    fields = ", ".join(c.update_mask)
                    lines.append(f"  ~ {c.key or '(unnamed)'}: {fields}")
        return "\n".join(lines)

    return render(diff, output_format, table)


def format_restore_result(result: RestoreResult | None, output_format: OutputFormat) -> str:
    def table() -> str:
        if result is None or not result.changed:
            return "No changes applied."
        lines = [f"Target Engine: {result.engine_name}"]
        if result.created:
            lines.append("Engine created.")
        if result.engine_patched:
            lines.append("Engine configuration updated.")
        if result.feature_changes:
            lines.append("")
            lines.append("Feature changes:")
            lines.extend(
                f"  {c.feature}: {_show(c.old)} -> {_show(c.new)}" for c in result.feature_changes
            )
        if result.agent_changes:
            lines.append("")
            lines.append("Agent changes:")
            lines.extend(
                f"  {c.key or '(unnamed)'}: {c.change_type.value}" for c in result.agent_changes
            )
        return "\n".join(lines)

    return render(result, output_format, table)


__all__ = [
    "format_agent_details",
    "format_agents",
    "format_create_result",
    "format_data_store_details",
    "format_data_stores",
    "format_delete_result",
    "format_documents",
    "format_engine_details",
    "format_engine_features",
    "format_engines",
    "format_restore_result",
    "format_snapshot_diff",
    "format_workforce_config",
    "render_feature_state",
]
