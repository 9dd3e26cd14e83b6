"""
gemctl: administration toolkit for Gemini Enterprise (Discovery Engine).

This package provides:
- A REST client for engines, agents, data stores and workforce identity
- Engine snapshots that can be captured, diffed and restored
- The ``gemctl`` command-line interface

Example:
    from gemctl import GeminiClient, resolve_config
    from gemctl.snapshot import capture_engine_snapshot

    config = resolve_config(project="my-project")
    client = GeminiClient(config)
    snapshot = capture_engine_snapshot(
        client, "projects/my-project/locations/global/collections/default_collection/engines/app"
    )
    snapshot.write("app.json")
"""

from .client import GeminiClient
from .config import ClientConfig, resolve_config
from .exceptions import (
    AuthenticationError,
    GemctlError,
    NotFoundError,
    PreconditionFailedError,
    ResourceError,
    SnapshotDecodeError,
    SnapshotError,
    TransportError,
    ValidationError,
)
from .models import (
    Agent,
    AgentIcon,
    AgentInput,
    DataStore,
    DialogflowAgentDefinition,
    Document,
    Engine,
    WorkforceIdentityConfig,
)

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Client
    "GeminiClient",
    "ClientConfig",
    "resolve_config",
    # Models
    "Agent",
    "AgentIcon",
    "AgentInput",
    "DataStore",
    "DialogflowAgentDefinition",
    "Document",
    "Engine",
    "WorkforceIdentityConfig",
    # Exceptions
    "GemctlError",
    "ResourceError",
    "SnapshotError",
    "NotFoundError",
    "PreconditionFailedError",
    "TransportError",
    "AuthenticationError",
    "ValidationError",
    "SnapshotDecodeError",
]
