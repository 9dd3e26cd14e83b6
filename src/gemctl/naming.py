"""Resource naming utilities.

This module centralizes construction and parsing of Discovery Engine
resource names:

- Engines: ``projects/{p}/locations/{l}/collections/{c}/engines/{id}``
- Data stores: ``projects/{p}/locations/{l}/collections/{c}/dataStores/{id}``
- Agents: ``{engine}/assistants/default_assistant/agents/{id}``

Any identifier that already contains a ``/`` is treated as a full resource
name and passed through unchanged.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple

from .exceptions import ValidationError

if TYPE_CHECKING:
    from .config import ClientConfig

DEFAULT_ASSISTANT_ID = "default_assistant"
"""Assistant that agent registrations hang off."""

DEFAULT_WORKFORCE_LOCATION = "locations/global"

KNOWN_FEATURES: frozenset[str] = frozenset(
    {
        "*",
        "agent-gallery",
        "no-code-agent-builder",
        "prompt-gallery",
        "model-selector",
        "notebook-lm",
        "people-search",
        "people-search-org-chart",
        "bi-directional-audio",
        "feedback",
        "session-sharing",
        "personalization-memory",
        "disable-agent-sharing",
        "disable-image-generation",
        "disable-video-generation",
        "disable-onedrive-upload",
        "disable-talk-to-content",
        "disable-google-drive-upload",
        "agent-sharing-without-admin-approval",
    }
)
"""Feature flag names the CLI recognizes when telling engine IDs from features."""

ENGINE_NAME_PATTERN = re.compile(
    r"^projects/(?P<project>[^/]+)/locations/(?P<location>[^/]+)"
    r"/collections/(?P<collection>[^/]+)/engines/(?P<engine>[^/]+)$"
)

DIALOGFLOW_AGENT_PATTERN = re.compile(r"^projects/[^/]+/locations/[^/]+/agents/[^/]+$")


class EngineNameParts(NamedTuple):
    """Components of a fully-qualified engine name."""

    project: str
    location: str
    collection: str
    engine_id: str


def collection_parent(config: ClientConfig) -> str:
    """Return ``projects/{p}/locations/{l}/collections/{c}`` for the config."""
    return (
        f"projects/{config.require_project()}/locations/{config.location}"
        f"/collections/{config.collection}"
    )


def engine_name(engine_id: str, config: ClientConfig) -> str:
    """Build the full engine resource name from an ID."""
    if not engine_id:
        raise ValidationError("engine ID", engine_id, "engine ID cannot be empty")
    if "/" in engine_id:
        return engine_id
    return f"{collection_parent(config)}/engines/{engine_id}"


def data_store_name(data_store_id: str, config: ClientConfig) -> str:
    """Build the full data store resource name from an ID."""
    if not data_store_id:
        raise ValidationError("data store ID", data_store_id, "data store ID cannot be empty")
    if "/" in data_store_id:
        return data_store_id
    return f"{collection_parent(config)}/dataStores/{data_store_id}"


def agent_name(engine: str, agent_id: str) -> str:
    """Build the full agent registration name under an engine's default assistant."""
    if "/" in agent_id:
        return agent_id
    return f"{engine}/assistants/{DEFAULT_ASSISTANT_ID}/agents/{agent_id}"


def parse_engine_name(name: str) -> EngineNameParts | None:
    """Split a fully-qualified engine name, or return None if it is not one."""
    match = ENGINE_NAME_PATTERN.match(name.strip("/"))
    if match is None:
        return None
    return EngineNameParts(
        project=match["project"],
        location=match["location"],
        collection=match["collection"],
        engine_id=match["engine"],
    )


def engine_parent(name: str) -> str:
    """Return the collection that owns an engine (everything before ``/engines/``)."""
    parent, sep, _ = name.rpartition("/engines/")
    if not sep or not parent:
        raise ValidationError("engine name", name, "expected .../collections/{c}/engines/{id}")
    return parent


def extract_resource_id(name: str) -> str:
    """Return the last path segment of a resource name."""
    if not name:
        return ""
    return name.rstrip("/").split("/")[-1]


def resolve_dialogflow_agent_resource(
    full_resource: str = "",
    project_id: str = "",
    location: str = "",
    agent_id: str = "",
) -> str:
    """
    Resolve the Dialogflow agent resource from a full name or its components.

    Args:
        full_resource: ``projects/{p}/locations/{l}/agents/{id}``
        project_id: Dialogflow project component
        location: Dialogflow location component
        agent_id: Dialogflow agent ID component

    Returns:
        The resource name, or an empty string if nothing was provided.

    Raises:
        ValidationError: If the full name is malformed or the components
            are incomplete
    """
    full_resource = full_resource.strip()
    project_id = project_id.strip()
    location = location.strip()
    agent_id = agent_id.strip()

    if full_resource:
        if not DIALOGFLOW_AGENT_PATTERN.match(full_resource):
            raise ValidationError(
                "dialogflow agent",
                full_resource,
                "must be in the form projects/PROJECT/locations/LOCATION/agents/AGENT_ID",
            )
        return full_resource

    if not (project_id or location or agent_id):
        return ""

    if not (project_id and location and agent_id):
        raise ValidationError(
            "dialogflow agent",
            f"{project_id}/{location}/{agent_id}",
            "requires --dialogflow-project-id, --dialogflow-location, and --dialogflow-agent-id",
        )

    return f"projects/{project_id}/locations/{location}/agents/{agent_id}"


def build_workforce_resource(
    resource: str = "",
    location: str = DEFAULT_WORKFORCE_LOCATION,
    pool_id: str = "",
    provider_id: str = "",
) -> str:
    """
    Build a workforce pool resource from a full name or its components.

    Returns:
        ``locations/{l}/workforcePools/{pool}[/providers/{provider}]``

    Raises:
        ValidationError: If neither a resource nor a pool ID is given
    """
    if resource.strip():
        return resource.strip()
    if not pool_id.strip():
        raise ValidationError(
            "workforce pool ID", pool_id, "required when using component flags"
        )

    loc = location.strip() or DEFAULT_WORKFORCE_LOCATION
    if not loc.startswith("locations/"):
        loc = f"locations/{loc}"

    value = f"{loc}/workforcePools/{pool_id.strip()}"
    if provider_id.strip():
        value = f"{value}/providers/{provider_id.strip()}"
    return value


def normalize_feature_key(feature: str) -> str:
    return feature.strip().lower()


def looks_like_feature(value: str) -> bool:
    """True if the value names a known feature flag."""
    key = normalize_feature_key(value)
    return bool(key) and key in KNOWN_FEATURES


def parse_engine_feature_args(args: list[str] | tuple[str, ...]) -> tuple[str, list[str]]:
    """
    Split positional arguments into an engine ID and feature names.

    The engine ID is normally first. When the first argument is a known
    feature and the last one is not, the engine ID is taken from the end
    (``enable agent-gallery my-engine``).

    Raises:
        ValidationError: If fewer than two arguments are given
    """
    if len(args) < 2:
        raise ValidationError(
            "arguments", list(args), "engine ID and at least one feature are required"
        )

    engine_id = args[0]
    features = list(args[1:])

    last = args[-1]
    if looks_like_feature(engine_id) and not looks_like_feature(last):
        engine_id = last
        features = list(args[:-1])

    return engine_id, features
