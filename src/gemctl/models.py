"""Discovery Engine resource models.

Each model converts to and from the REST API's camelCase JSON with
``from_dict``/``to_dict``. ``to_dict`` omits empty values, so a round trip
through JSON preserves the original document.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

FEATURE_STATE_ON = "FEATURE_STATE_ON"
FEATURE_STATE_OFF = "FEATURE_STATE_OFF"


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` only when ``value`` is non-empty."""
    if value is None or value == "" or value == [] or value == {}:
        return
    out[key] = value


def feature_enabled(state: str) -> bool:
    """True for ``FEATURE_STATE_ON`` and the plain ``ON`` variants."""
    return "ON" in state.upper()


@dataclass(frozen=True)
class SearchEngineConfig:
    """Search tier and add-ons of an engine."""

    search_tier: str = ""
    search_add_ons: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> SearchEngineConfig | None:
        if d is None:
            return None
        return cls(
            search_tier=d.get("searchTier", ""),
            search_add_ons=list(d.get("searchAddOns") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "searchTier", self.search_tier)
        _put(out, "searchAddOns", list(self.search_add_ons))
        return out


@dataclass(frozen=True)
class Engine:
    """An engine (AI app) as returned by the API."""

    name: str = ""
    display_name: str = ""
    solution_type: str = ""
    industry_vertical: str = ""
    app_type: str = ""
    data_store_ids: list[str] = field(default_factory=list)
    common_config: dict[str, Any] = field(default_factory=dict)
    features: dict[str, str] = field(default_factory=dict)
    search_engine_config: SearchEngineConfig | None = None
    create_time: str = ""
    update_time: str = ""

    @property
    def engine_id(self) -> str:
        return self.name.rstrip("/").split("/")[-1] if self.name else ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Engine:
        return cls(
            name=d.get("name", ""),
            display_name=d.get("displayName", ""),
            solution_type=d.get("solutionType", ""),
            industry_vertical=d.get("industryVertical", ""),
            app_type=d.get("appType", ""),
            data_store_ids=list(d.get("dataStoreIds") or []),
            common_config=copy.deepcopy(d.get("commonConfig") or {}),
            features=dict(d.get("features") or {}),
            search_engine_config=SearchEngineConfig.from_dict(d.get("searchEngineConfig")),
            create_time=d.get("createTime", ""),
            update_time=d.get("updateTime", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "name", self.name)
        _put(out, "displayName", self.display_name)
        _put(out, "solutionType", self.solution_type)
        _put(out, "industryVertical", self.industry_vertical)
        _put(out, "appType", self.app_type)
        _put(out, "dataStoreIds", list(self.data_store_ids))
        _put(out, "commonConfig", copy.deepcopy(self.common_config))
        _put(out, "features", dict(self.features))
        if self.search_engine_config is not None:
            out["searchEngineConfig"] = self.search_engine_config.to_dict()
        _put(out, "createTime", self.create_time)
        _put(out, "updateTime", self.update_time)
        return out


@dataclass(frozen=True)
class AgentIcon:
    """Agent icon, given as a public URI or Base64 content."""

    uri: str = ""
    content: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> AgentIcon | None:
        if d is None:
            return None
        return cls(uri=d.get("uri", ""), content=d.get("content", ""))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "uri", self.uri)
        _put(out, "content", self.content)
        return out


@dataclass(frozen=True)
class DialogflowAgentDefinition:
    """Link from an agent registration to a Dialogflow CX agent."""

    dialogflow_agent: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> DialogflowAgentDefinition | None:
        if d is None:
            return None
        return cls(dialogflow_agent=d.get("dialogflowAgent", ""))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "dialogflowAgent", self.dialogflow_agent)
        return out


@dataclass(frozen=True)
class Agent:
    """
    An agent registered with an engine's default assistant.

    Only ``name`` is server-assigned. Maps and lists beyond the modelled
    fields are carried through untouched.
    """

    name: str = ""
    display_name: str = ""
    description: str = ""
    icon: AgentIcon | None = None
    dialogflow_agent_definition: DialogflowAgentDefinition | None = None
    reasoning_engine: str = ""
    create_time: str = ""
    update_time: str = ""
    connector_definition: dict[str, Any] = field(default_factory=dict)
    additional_agent_properties: dict[str, Any] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    environment_configurations: list[dict[str, Any]] = field(default_factory=list)
    agent_monitoring_state: dict[str, Any] = field(default_factory=dict)
    capabilities: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def dialogflow_agent(self) -> str:
        if self.dialogflow_agent_definition is None:
            return ""
        return self.dialogflow_agent_definition.dialogflow_agent

    @property
    def icon_uri(self) -> str:
        return self.icon.uri if self.icon else ""

    @property
    def icon_content(self) -> str:
        return self.icon.content if self.icon else ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Agent:
        return cls(
            name=d.get("name", ""),
            display_name=d.get("displayName", ""),
            description=d.get("description", ""),
            icon=AgentIcon.from_dict(d.get("icon")),
            dialogflow_agent_definition=DialogflowAgentDefinition.from_dict(
                d.get("dialogflowAgentDefinition")
            ),
            reasoning_engine=d.get("reasoningEngine", ""),
            create_time=d.get("createTime", ""),
            update_time=d.get("updateTime", ""),
            connector_definition=copy.deepcopy(d.get("connectorDefinition") or {}),
            additional_agent_properties=copy.deepcopy(d.get("additionalAgentProperties") or {}),
            annotations=dict(d.get("annotations") or {}),
            labels=dict(d.get("labels") or {}),
            environment_configurations=copy.deepcopy(d.get("environmentConfigurations") or []),
            agent_monitoring_state=copy.deepcopy(d.get("agentMonitoringState") or {}),
            capabilities=list(d.get("capabilities") or []),
            metadata=copy.deepcopy(d.get("metadata") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "name", self.name)
        _put(out, "displayName", self.display_name)
        _put(out, "description", self.description)
        if self.icon is not None:
            out["icon"] = self.icon.to_dict()
        if self.dialogflow_agent_definition is not None:
            out["dialogflowAgentDefinition"] = self.dialogflow_agent_definition.to_dict()
        _put(out, "reasoningEngine", self.reasoning_engine)
        _put(out, "createTime", self.create_time)
        _put(out, "updateTime", self.update_time)
        _put(out, "connectorDefinition", copy.deepcopy(self.connector_definition))
        _put(out, "additionalAgentProperties", copy.deepcopy(self.additional_agent_properties))
        _put(out, "annotations", dict(self.annotations))
        _put(out, "labels", dict(self.labels))
        _put(out, "environmentConfigurations", copy.deepcopy(self.environment_configurations))
        _put(out, "agentMonitoringState", copy.deepcopy(self.agent_monitoring_state))
        _put(out, "capabilities", list(self.capabilities))
        _put(out, "metadata", copy.deepcopy(self.metadata))
        return out

    def clone(self) -> Agent:
        """Deep copy, so later mutation of nested maps cannot leak across."""
        return copy.deepcopy(self)


@dataclass(frozen=True)
class AgentInput:
    """Request body for creating or updating an agent registration."""

    display_name: str = ""
    description: str = ""
    icon: AgentIcon | None = None
    dialogflow_agent_definition: DialogflowAgentDefinition | None = None
    reasoning_engine: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "displayName", self.display_name)
        _put(out, "description", self.description)
        if self.icon is not None:
            out["icon"] = self.icon.to_dict()
        if self.dialogflow_agent_definition is not None:
            out["dialogflowAgentDefinition"] = self.dialogflow_agent_definition.to_dict()
        _put(out, "reasoningEngine", self.reasoning_engine)
        return out


@dataclass(frozen=True)
class DataStore:
    """A data store backing one or more engines."""

    name: str = ""
    display_name: str = ""
    industry_vertical: str = ""
    solution_types: list[str] = field(default_factory=list)
    content_config: str = ""
    default_schema_id: str = ""
    create_time: str = ""

    @property
    def data_store_id(self) -> str:
        return self.name.rstrip("/").split("/")[-1] if self.name else ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DataStore:
        return cls(
            name=d.get("name", ""),
            display_name=d.get("displayName", ""),
            industry_vertical=d.get("industryVertical", ""),
            solution_types=list(d.get("solutionTypes") or []),
            content_config=d.get("contentConfig", ""),
            default_schema_id=d.get("defaultSchemaId", ""),
            create_time=d.get("createTime", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "name", self.name)
        _put(out, "displayName", self.display_name)
        _put(out, "industryVertical", self.industry_vertical)
        _put(out, "solutionTypes", list(self.solution_types))
        _put(out, "contentConfig", self.content_config)
        _put(out, "defaultSchemaId", self.default_schema_id)
        _put(out, "createTime", self.create_time)
        return out


@dataclass(frozen=True)
class Document:
    """A document inside a data store branch."""

    name: str = ""
    id: str = ""
    schema_id: str = ""
    uri: str = ""
    mime_type: str = ""
    index_time: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Document:
        content = d.get("content") or {}
        index_status = d.get("indexStatus") or {}
        return cls(
            name=d.get("name", ""),
            id=d.get("id", ""),
            schema_id=d.get("schemaId", ""),
            uri=content.get("uri", ""),
            mime_type=content.get("mimeType", ""),
            index_time=index_status.get("indexTime", "") or d.get("indexTime", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "name", self.name)
        _put(out, "id", self.id)
        _put(out, "schemaId", self.schema_id)
        _put(out, "uri", self.uri)
        _put(out, "mimeType", self.mime_type)
        _put(out, "indexTime", self.index_time)
        return out


@dataclass(frozen=True)
class WorkforceIdentityConfig:
    """Workforce identity pool linkage of a project/location."""

    idp_type: str = ""
    workforce_pool_name: str = ""
    workforce_location: str = ""
    workforce_pool_id: str = ""
    workforce_provider_id: str = ""

    @classmethod
    def from_acl_config(cls, d: dict[str, Any]) -> WorkforceIdentityConfig:
        """Build from an ``aclConfig`` resource, deriving pool components."""
        idp = d.get("idpConfig") or {}
        pool_name = (idp.get("externalIdpConfig") or {}).get("workforcePoolName", "")

        location = pool_id = provider_id = ""
        segments = pool_name.strip().split("/") if pool_name.strip() else []
        for i, segment in enumerate(segments[:-1]):
            nxt = segments[i + 1]
            if segment == "locations":
                location = f"locations/{nxt}"
            elif segment == "workforcePools":
                pool_id = nxt
            elif segment == "providers":
                provider_id = nxt

        return cls(
            idp_type=idp.get("idpType", ""),
            workforce_pool_name=pool_name,
            workforce_location=location,
            workforce_pool_id=pool_id,
            workforce_provider_id=provider_id,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"idpType": self.idp_type}
        _put(out, "workforcePoolName", self.workforce_pool_name)
        _put(out, "workforceLocation", self.workforce_location)
        _put(out, "workforcePoolId", self.workforce_pool_id)
        _put(out, "workforceProviderId", self.workforce_provider_id)
        return out


@dataclass
class CreateResult:
    """Outcome of a create call (engines are created by long-running operation)."""

    name: str
    status: str = "success"
    message: str = ""
    operation: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "status": self.status}
        _put(out, "message", self.message)
        _put(out, "operation", self.operation)
        return out


@dataclass
class DeleteResult:
    """Outcome of a delete call."""

    name: str
    status: str = "success"
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "status": self.status}
        _put(out, "message", self.message)
        return out
