"""Engine snapshot document model.

A snapshot is a JSON document with three top-level keys::

    {
      "metadata": {"version": "v1", "originalEngineName": "...", ...},
      "engine": {"displayName": "...", "features": {...}, ...},
      "agents": [{"displayName": "...", ...}]
    }

Keys are camelCase and empty optional values are omitted, so
``EngineSnapshot.loads(s.dumps()).dumps() == s.dumps()``. Unknown keys in
``commonConfig`` and in agent passthrough maps are preserved verbatim.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from ..exceptions import SnapshotDecodeError
from ..models import Agent, Engine, SearchEngineConfig, _put

SNAPSHOT_VERSION = "v1"
SUPPORTED_VERSIONS = frozenset({SNAPSHOT_VERSION})


@dataclass(frozen=True)
class SnapshotMetadata:
    """
    Provenance of a snapshot.

    Attributes:
        version: Document schema version
        original_engine_name: Fully-qualified name of the captured engine
        original_engine_id: Short ID of the captured engine
        source_project_id: Project the engine lived in
        source_location: Location the engine lived in
        source_collection: Collection the engine lived in
        taken_at: Capture time, UTC RFC3339
        display_name: Display name (defaults to the engine's)
        description: Free-form description
        notes: Free-form notes
    """

    version: str = SNAPSHOT_VERSION
    original_engine_name: str = ""
    original_engine_id: str = ""
    source_project_id: str = ""
    source_location: str = ""
    source_collection: str = ""
    taken_at: str = ""
    display_name: str = ""
    description: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SnapshotMetadata:
        return cls(
            version=d.get("version", ""),
            original_engine_name=d.get("originalEngineName", ""),
            original_engine_id=d.get("originalEngineId", ""),
            source_project_id=d.get("sourceProjectId", ""),
            source_location=d.get("sourceLocation", ""),
            source_collection=d.get("sourceCollection", ""),
            taken_at=d.get("takenAt", ""),
            display_name=d.get("displayName", ""),
            description=d.get("description", ""),
            notes=d.get("notes", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "version": self.version,
            "originalEngineName": self.original_engine_name,
            "originalEngineId": self.original_engine_id,
            "sourceProjectId": self.source_project_id,
            "sourceLocation": self.source_location,
            "sourceCollection": self.source_collection,
            "takenAt": self.taken_at,
        }
        _put(out, "displayName", self.display_name)
        _put(out, "description", self.description)
        _put(out, "notes", self.notes)
        return out


@dataclass(frozen=True)
class EngineConfigSnapshot:
    """The portable subset of an engine's configuration."""

    display_name: str = ""
    solution_type: str = ""
    industry_vertical: str = ""
    app_type: str = ""
    data_store_ids: list[str] = field(default_factory=list)
    common_config: dict[str, Any] = field(default_factory=dict)
    features: dict[str, str] = field(default_factory=dict)
    search_config: SearchEngineConfig | None = None

    @classmethod
    def from_engine(cls, engine: Engine) -> EngineConfigSnapshot:
        """Copy the portable fields of a live engine; nothing is aliased."""
        search = engine.search_engine_config
        return cls(
            display_name=engine.display_name,
            solution_type=engine.solution_type,
            industry_vertical=engine.industry_vertical,
            app_type=engine.app_type,
            data_store_ids=list(engine.data_store_ids),
            common_config=copy.deepcopy(engine.common_config),
            features=dict(engine.features),
            search_config=copy.deepcopy(search) if search is not None else None,
        )

    @property
    def company_name(self) -> str:
        value = self.common_config.get("companyName")
        return value if isinstance(value, str) else ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EngineConfigSnapshot:
        return cls(
            display_name=d.get("displayName", ""),
            solution_type=d.get("solutionType", ""),
            industry_vertical=d.get("industryVertical", ""),
            app_type=d.get("appType", ""),
            data_store_ids=list(d.get("dataStoreIds") or []),
            common_config=copy.deepcopy(d.get("commonConfig") or {}),
            features=dict(d.get("features") or {}),
            search_config=SearchEngineConfig.from_dict(d.get("searchConfig")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "displayName": self.display_name,
            "solutionType": self.solution_type,
            "industryVertical": self.industry_vertical,
            "appType": self.app_type,
        }
        _put(out, "dataStoreIds", list(self.data_store_ids))
        _put(out, "commonConfig", copy.deepcopy(self.common_config))
        _put(out, "features", dict(self.features))
        if self.search_config is not None:
            out["searchConfig"] = self.search_config.to_dict()
        return out


@dataclass(frozen=True)
class EngineSnapshot:
    """Metadata, engine configuration and registered agents at one point in time."""

    metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)
    engine: EngineConfigSnapshot = field(default_factory=EngineConfigSnapshot)
    agents: list[Agent] = field(default_factory=list)

    @classmethod
    def empty(cls, engine_name: str = "") -> EngineSnapshot:
        """A snapshot of an engine that does not exist yet."""
        engine_id = engine_name.rstrip("/").split("/")[-1] if engine_name else ""
        return cls(
            metadata=SnapshotMetadata(
                original_engine_name=engine_name, original_engine_id=engine_id
            )
        )

    def with_overrides(
        self, *, notes: str | None = None, description: str | None = None
    ) -> EngineSnapshot:
        """Return a copy with notes and/or description replaced (None keeps the current value)."""
        changes: dict[str, str] = {}
        if notes is not None:
            changes["notes"] = notes
        if description is not None:
            changes["description"] = description
        if not changes:
            return self
        return replace(self, metadata=replace(self.metadata, **changes))

    # -----------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "metadata": self.metadata.to_dict(),
            "engine": self.engine.to_dict(),
        }
        if self.agents:
            out["agents"] = [agent.to_dict() for agent in self.agents]
        return out

    def dumps(self) -> str:
        """Serialize to the persisted JSON form (2-space indent)."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    def write(self, path: str | Path) -> None:
        Path(path).write_text(self.dumps() + "\n", encoding="utf-8")

    @classmethod
    def from_dict(cls, data: Any, source: str = "<dict>") -> EngineSnapshot:
        """
        Build a snapshot from a decoded document.

        Raises:
            SnapshotDecodeError: If the document shape or field types are wrong
        """
        if not isinstance(data, dict):
            raise SnapshotDecodeError(source, "top-level value must be an object")

        metadata = _expect_object(data, "metadata", source)
        engine = _expect_object(data, "engine", source)

        _check_metadata_types(metadata, source)
        version = metadata.get("version", "")
        if version and version not in SUPPORTED_VERSIONS:
            raise SnapshotDecodeError(source, f"unsupported snapshot version {version!r}")

        _check_engine_types(engine, source)

        agents_raw = data.get("agents") or []
        if not isinstance(agents_raw, list):
            raise SnapshotDecodeError(source, "'agents' must be a list")
        for i, agent in enumerate(agents_raw):
            if not isinstance(agent, dict):
                raise SnapshotDecodeError(source, f"agents[{i}] must be an object")
            _check_agent_types(agent, f"agents[{i}]", source)

        return cls(
            metadata=SnapshotMetadata.from_dict(metadata),
            engine=EngineConfigSnapshot.from_dict(engine),
            agents=[Agent.from_dict(agent) for agent in agents_raw],
        )

    @classmethod
    def loads(cls, text: str | bytes, source: str = "<string>") -> EngineSnapshot:
        """Parse a snapshot JSON document."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotDecodeError(source, str(e)) from e
        return cls.from_dict(data, source)

    @classmethod
    def load(cls, path: str | Path) -> EngineSnapshot:
        """Read and parse a snapshot file."""
        p = Path(path)
        try:
            text = p.read_bytes()
        except OSError as e:
            raise SnapshotDecodeError(str(p), f"cannot read file: {e}") from e
        return cls.loads(text, source=str(p))


def _expect_object(data: dict[str, Any], key: str, source: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SnapshotDecodeError(source, f"'{key}' must be an object")
    return value


def _check_engine_types(engine: dict[str, Any], source: str) -> None:
    for key in ("displayName", "solutionType", "industryVertical", "appType"):
        if key in engine and not isinstance(engine[key], str):
            raise SnapshotDecodeError(source, f"engine.{key} must be a string")

    ids = engine.get("dataStoreIds")
    if ids is not None and (
        not isinstance(ids, list) or not all(isinstance(i, str) for i in ids)
    ):
        raise SnapshotDecodeError(source, "engine.dataStoreIds must be a list of strings")

    common = engine.get("commonConfig")
    if common is not None and not isinstance(common, dict):
        raise SnapshotDecodeError(source, "engine.commonConfig must be an object")

    features = engine.get("features")
    if features is not None and (
        not isinstance(features, dict) or not all(isinstance(v, str) for v in features.values())
    ):
        raise SnapshotDecodeError(source, "engine.features must map names to strings")

    search = engine.get("searchConfig")
    if search is not None and not isinstance(search, dict):
        raise SnapshotDecodeError(source, "engine.searchConfig must be an object")
    if search:
        if not isinstance(search.get("searchTier", ""), str):
            raise SnapshotDecodeError(source, "engine.searchConfig.searchTier must be a string")
        add_ons = search.get("searchAddOns")
        if add_ons is not None and not _is_str_list(add_ons):
            raise SnapshotDecodeError(
                source, "engine.searchConfig.searchAddOns must be a list of strings"
            )


_AGENT_STRINGS = (
    "name",
    "displayName",
    "description",
    "reasoningEngine",
    "createTime",
    "updateTime",
)
_AGENT_OBJECTS = (
    "icon",
    "dialogflowAgentDefinition",
    "connectorDefinition",
    "additionalAgentProperties",
    "annotations",
    "labels",
    "agentMonitoringState",
    "metadata",
)


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _check_metadata_types(metadata: dict[str, Any], source: str) -> None:
    for key, value in metadata.items():
        if value is not None and not isinstance(value, str):
            raise SnapshotDecodeError(source, f"metadata.{key} must be a string")


def _check_agent_types(agent: dict[str, Any], path: str, source: str) -> None:
    for key in _AGENT_STRINGS:
        if key in agent and not isinstance(agent[key], str):
            raise SnapshotDecodeError(source, f"{path}.{key} must be a string")
    for key in _AGENT_OBJECTS:
        value = agent.get(key)
        if value is not None and not isinstance(value, dict):
            raise SnapshotDecodeError(source, f"{path}.{key} must be an object")

    for key, inner in (
        ("icon", ("uri", "content")),
        ("dialogflowAgentDefinition", ("dialogflowAgent",)),
    ):
        nested = agent.get(key) or {}
        for name in inner:
            if not isinstance(nested.get(name, ""), str):
                raise SnapshotDecodeError(source, f"{path}.{key}.{name} must be a string")

    envs = agent.get("environmentConfigurations")
    if envs is not None and (
        not isinstance(envs, list) or not all(isinstance(e, dict) for e in envs)
    ):
        raise SnapshotDecodeError(
            source, f"{path}.environmentConfigurations must be a list of objects"
        )
    capabilities = agent.get("capabilities")
    if capabilities is not None and not _is_str_list(capabilities):
        raise SnapshotDecodeError(source, f"{path}.capabilities must be a list of strings")
