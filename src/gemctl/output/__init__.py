"""
Output rendering for CLI commands.

Every command renders in one of three formats:
- TABLE: human-readable text (default)
- JSON: the resource's API shape, 2-space indented
- YAML: the same document as JSON, in block style

Example:
    from gemctl.output import OutputFormat, format_engines

    click.echo(format_engines(engines, OutputFormat.JSON))
"""

from __future__ import annotations

import json
from collections.abc import Callable
from enum import Enum
from typing import Any

import yaml


class OutputFormat(Enum):
    """Output format for command results."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def to_plain(data: Any) -> Any:
    """Convert models (anything with ``to_dict``) into plain JSON-able values."""
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, dict):
        return {k: to_plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_plain(v) for v in data]
    return data


def render(data: Any, output_format: OutputFormat, table: Callable[[], str]) -> str:
    """
    Render ``data`` as JSON or YAML, or call ``table`` for the text form.

    Args:
        data: Model, list of models, or plain value
        output_format: Requested format
        table: Builds the table-format text lazily
    """
    if output_format is OutputFormat.JSON:
        return json.dumps(to_plain(data), indent=2, ensure_ascii=False)
    if output_format is OutputFormat.YAML:
        return yaml.safe_dump(
            to_plain(data), sort_keys=False, default_flow_style=False, allow_unicode=True
        ).rstrip("\n")
    return table()


from .formatters import (  # noqa: E402
    format_agent_details,
    format_agents,
    format_create_result,
    format_data_store_details,
    format_data_stores,
    format_delete_result,
    format_documents,
    format_engine_details,
    format_engine_features,
    format_engines,
    format_restore_result,
    format_snapshot_diff,
    format_workforce_config,
)

__all__ = [
    "OutputFormat",
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
    "render",
    "to_plain",
]
