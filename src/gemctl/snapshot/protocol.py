"""Backend protocol for snapshot capture and restore.

Capture and restore never talk HTTP themselves. They call the operations
below on a backend object; ``GeminiClient`` is the production backend and
tests pass an in-memory fake.
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models import Agent, AgentInput, Engine


@runtime_checkable
class SnapshotBackend(Protocol):
    """
    Operations the snapshot subsystem needs from the remote platform.

    Every method is a blocking round trip. A missing resource raises
    ``NotFoundError``; any other failure raises ``TransportError``.

    Example:
        class InMemoryBackend:
            def get_engine(self, name: str) -> Engine:
                ...

        backend = InMemoryBackend()
        assert isinstance(backend, SnapshotBackend)  # duck typed
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_engine(self, name: str) -> "Engine":
        """Fetch an engine by full resource name."""
        ...

    def list_agents(self, engine_name: str) -> list["Agent"]:
        """List every agent registered with the engine's default assistant."""
        ...

    # -------------------------------------------------------------------------
    # Engine writes
    # -------------------------------------------------------------------------

    def create_engine(self, parent: str, engine_id: str, engine: "Engine") -> Any:
        """
        Create an engine under a collection.

        Args:
            parent: ``projects/{p}/locations/{l}/collections/{c}``
            engine_id: Short ID for the new engine
            engine: Desired configuration (``name`` is ignored)
        """
        ...

    def patch_engine(self, name: str, engine: "Engine", update_mask: list[str]) -> Any:
        """Update only the fields named in ``update_mask``."""
        ...

    def update_engine_features(self, name: str, features: dict[str, str]) -> Any:
        """Set feature flag states, leaving flags not mentioned untouched."""
        ...

    # -------------------------------------------------------------------------
    # Agent writes
    # -------------------------------------------------------------------------

    def create_agent(self, engine_name: str, agent: "AgentInput") -> "Agent":
        """Register a new agent with the engine's default assistant."""
        ...

    def update_agent(self, name: str, agent: "AgentInput", update_mask: list[str]) -> "Agent":
        """Update only the agent fields named in ``update_mask``."""
        ...

    def delete_agent(self, name: str) -> Any:
        """Delete an agent registration by full resource name."""
        ...
