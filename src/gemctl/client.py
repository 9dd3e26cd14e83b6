"""REST client for the Discovery Engine (Gemini Enterprise) API.

Engines and agents are served by ``v1alpha`` (engine feature flags and
agent registrations are not in ``v1``); data stores and the workforce ACL
config use ``v1``. Every call is a single blocking round trip with no
retry.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from .auth import TokenProvider, default_token_provider
from .config import ClientConfig
from .exceptions import NotFoundError, TransportError
from .models import (
    Agent,
    AgentInput,
    CreateResult,
    DataStore,
    DeleteResult,
    Document,
    Engine,
    WorkforceIdentityConfig,
)
from .naming import (
    DEFAULT_ASSISTANT_ID,
    collection_parent,
    data_store_name,
    extract_resource_id,
)

logger = logging.getLogger(__name__)

API_V1 = "v1"
API_V1ALPHA = "v1alpha"

DEFAULT_TIMEOUT = 60.0
DEFAULT_PAGE_SIZE = 100
DEFAULT_BRANCH = "default_branch"
DEFAULT_SEARCH_TIER = "SEARCH_TIER_STANDARD"

IDP_TYPE_THIRD_PARTY = "THIRD_PARTY"
IDP_TYPE_UNSPECIFIED = "IDP_TYPE_UNSPECIFIED"


class GeminiClient:
    """
    Discovery Engine API client.

    Implements ``SnapshotBackend`` so it can be handed directly to snapshot
    capture and restore.

    Example:
        config = resolve_config(project="my-project")
        client = GeminiClient(config)
        for engine in client.list_engines():
            print(engine.display_name)
    """

    def __init__(
        self,
        config: ClientConfig,
        session: requests.Session | None = None,
        token_provider: TokenProvider | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.config = config
        self._session = session if session is not None else requests.Session()
        self._token_provider = token_provider or default_token_provider(
            config.use_service_account
        )
        self._timeout = timeout
        self._token: str | None = None

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        if self._token is None:
            self._token = self._token_provider()
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        if self.config.project_id:
            headers["X-Goog-User-Project"] = self.config.project_id
        return headers

    def _url(self, version: str, path: str) -> str:
        return f"{self.config.api_endpoint.rstrip('/')}/{version}/{path.strip('/')}"

    def _request(
        self,
        method: str,
        version: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Issue one request and decode the JSON response.

        Raises:
            NotFoundError: On HTTP 404
            TransportError: On any other HTTP error, network failure or
                undecodable response
        """
        url = self._url(version, path)
        started = time.monotonic()
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=body,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(
                f"Request failed: {e}", operation=method, resource=path
            ) from e

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.debug("%s %s -> %d in %d ms", method, path, response.status_code, elapsed_ms)

        if response.status_code == 404:
            raise NotFoundError(path)
        if response.status_code >= 400:
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise TransportError(
                "API request failed",
                operation=method,
                resource=path,
                status=response.status_code,
                body=response.text.strip(),
            )

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON response: {e}",
                operation=method,
                resource=path,
                status=response.status_code,
            ) from e
        return data if isinstance(data, dict) else {}

    def _paginate(
        self,
        version: str,
        path: str,
        key: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Collect ``key`` from every page, following ``nextPageToken``."""
        query: dict[str, Any] = {"pageSize": DEFAULT_PAGE_SIZE, **(params or {})}
        items: list[dict[str, Any]] = []
        while True:
            page = self._request("GET", version, path, params=query)
            items.extend(page.get(key) or [])
            token = page.get("nextPageToken")
            if not token:
                return items
            query["pageToken"] = token

    # -------------------------------------------------------------------------
    # Engines
    # -------------------------------------------------------------------------

    def list_engines(self) -> list[Engine]:
        path = f"{collection_parent(self.config)}/engines"
        return [Engine.from_dict(d) for d in self._paginate(API_V1ALPHA, path, "engines")]

    def get_engine(self, name: str) -> Engine:
        return Engine.from_dict(self._request("GET", API_V1ALPHA, name))

    def get_engine_full_config(self, name: str) -> tuple[Engine, list[DataStore]]:
        """
        Fetch an engine together with each data store it references.

        Data stores that no longer exist are skipped with a warning.
        """
        engine = self.get_engine(name)
        data_stores: list[DataStore] = []
        for data_store_id in engine.data_store_ids:
            try:
                data_stores.append(self.get_data_store(data_store_name(data_store_id, self.config)))
            except NotFoundError:
                logger.warning("Engine %s references missing data store %s", name, data_store_id)
        return engine, data_stores

    def create_search_engine(
        self,
        engine_id: str,
        display_name: str,
        data_store_ids: list[str],
        search_tier: str = DEFAULT_SEARCH_TIER,
    ) -> CreateResult:
        """Create an enterprise search app over existing data stores."""
        engine = Engine(
            display_name=display_name,
            solution_type="SOLUTION_TYPE_SEARCH",
            industry_vertical="GENERIC",
            app_type="APP_TYPE_INTRANET",
            data_store_ids=[extract_resource_id(d) for d in data_store_ids],
            common_config={},
        )
        body = engine.to_dict()
        body["searchEngineConfig"] = {
            "searchTier": search_tier,
            "searchAddOns": ["SEARCH_ADD_ON_LLM"],
        }
        parent = collection_parent(self.config)
        operation = self._request(
            "POST", API_V1ALPHA, f"{parent}/engines", params={"engineId": engine_id}, body=body
        )
        return CreateResult(
            name=f"{parent}/engines/{engine_id}",
            message="Engine creation started",
            operation=operation.get("name", ""),
        )

    def create_engine(self, parent: str, engine_id: str, engine: Engine) -> CreateResult:
        body = engine.to_dict()
        body.pop("name", None)
        operation = self._request(
            "POST", API_V1ALPHA, f"{parent}/engines", params={"engineId": engine_id}, body=body
        )
        return CreateResult(
            name=f"{parent}/engines/{engine_id}",
            message="Engine creation started",
            operation=operation.get("name", ""),
        )

    def patch_engine(self, name: str, engine: Engine, update_mask: list[str]) -> Engine:
        body = engine.to_dict()
        body.pop("name", None)
        data = self._request(
            "PATCH", API_V1ALPHA, name, params={"updateMask": ",".join(update_mask)}, body=body
        )
        return Engine.from_dict(data)

    def delete_engine(self, name: str) -> DeleteResult:
        self._request("DELETE", API_V1ALPHA, name)
        return DeleteResult(name=name, message="Engine deletion started")

    def update_engine_features(self, name: str, features: dict[str, str]) -> Engine:
        """Merge ``features`` into the engine's current feature map."""
        merged = dict(self.get_engine(name).features)
        merged.update(features)
        data = self._request(
            "PATCH",
            API_V1ALPHA,
            name,
            params={"updateMask": "features"},
            body={"features": merged},
        )
        return Engine.from_dict(data)

    # -------------------------------------------------------------------------
    # Agents
    # -------------------------------------------------------------------------

    def _agents_path(self, engine_name: str) -> str:
        return f"{engine_name.strip('/')}/assistants/{DEFAULT_ASSISTANT_ID}/agents"

    def list_agents(self, engine_name: str) -> list[Agent]:
        items = self._paginate(API_V1ALPHA, self._agents_path(engine_name), "agents")
        return [Agent.from_dict(d) for d in items]

    def get_agent(self, name: str) -> Agent:
        return Agent.from_dict(self._request("GET", API_V1ALPHA, name))

    def create_agent(self, engine_name: str, agent: AgentInput) -> Agent:
        data = self._request(
            "POST", API_V1ALPHA, self._agents_path(engine_name), body=agent.to_dict()
        )
        return Agent.from_dict(data)

    def update_agent(self, name: str, agent: AgentInput, update_mask: list[str]) -> Agent:
        params = {"updateMask": ",".join(update_mask)} if update_mask else None
        data = self._request("PATCH", API_V1ALPHA, name, params=params, body=agent.to_dict())
        return Agent.from_dict(data)

    def delete_agent(self, name: str) -> DeleteResult:
        self._request("DELETE", API_V1ALPHA, name)
        return DeleteResult(name=name, message="Agent deleted successfully")

    # -------------------------------------------------------------------------
    # Data stores
    # -------------------------------------------------------------------------

    def list_data_stores(self) -> list[DataStore]:
        path = f"{collection_parent(self.config)}/dataStores"
        return [DataStore.from_dict(d) for d in self._paginate(API_V1, path, "dataStores")]

    def get_data_store(self, name: str) -> DataStore:
        return DataStore.from_dict(self._request("GET", API_V1, name))

    def create_data_store_from_gcs(
        self,
        data_store_id: str,
        display_name: str,
        gcs_uri: str,
        data_schema: str = "content",
        reconciliation_mode: str = "INCREMENTAL",
    ) -> CreateResult:
        """
        Create a data store and start importing documents from Cloud Storage.

        Returns:
            CreateResult whose ``operation`` is the import operation
        """
        parent = collection_parent(self.config)
        content_config = "CONTENT_REQUIRED" if data_schema in ("content", "document") else "NO_CONTENT"
        self._request(
            "POST",
            API_V1,
            f"{parent}/dataStores",
            params={"dataStoreId": data_store_id},
            body={
                "displayName": display_name,
                "industryVertical": "GENERIC",
                "solutionTypes": ["SOLUTION_TYPE_SEARCH"],
                "contentConfig": content_config,
            },
        )

        name = f"{parent}/dataStores/{data_store_id}"
        operation = self._request(
            "POST",
            API_V1,
            f"{name}/branches/{DEFAULT_BRANCH}/documents:import",
            body={
                "gcsSource": {"inputUris": [gcs_uri], "dataSchema": data_schema},
                "reconciliationMode": reconciliation_mode,
            },
        )
        return CreateResult(
            name=name,
            message=f"Data store created; importing from {gcs_uri}",
            operation=operation.get("name", ""),
        )

    def list_documents(self, data_store: str, branch: str = DEFAULT_BRANCH) -> list[Document]:
        path = f"{data_store.strip('/')}/branches/{branch}/documents"
        return [Document.from_dict(d) for d in self._paginate(API_V1, path, "documents")]

    def delete_data_store(self, name: str) -> DeleteResult:
        self._request("DELETE", API_V1, name)
        return DeleteResult(name=name, message="Data store deletion started")

    # -------------------------------------------------------------------------
    # Workforce identity
    # -------------------------------------------------------------------------

    def _acl_config_name(self) -> str:
        return f"projects/{self.config.require_project()}/locations/{self.config.location}/aclConfig"

    def get_workforce_identity_config(self) -> WorkforceIdentityConfig:
        """Return the workforce pool linkage; empty when none is configured."""
        try:
            data = self._request("GET", API_V1, self._acl_config_name())
        except NotFoundError:
            return WorkforceIdentityConfig()
        return WorkforceIdentityConfig.from_acl_config(data)

    def set_workforce_identity_config(self, resource: str) -> WorkforceIdentityConfig:
        """
        Link a workforce pool, or disable workforce identity.

        Args:
            resource: ``locations/{l}/workforcePools/{pool}[/providers/{p}]``,
                or empty to disable
        """
        name = self._acl_config_name()
        if resource.strip():
            idp_config: dict[str, Any] = {
                "idpType": IDP_TYPE_THIRD_PARTY,
                "externalIdpConfig": {"workforcePoolName": resource.strip()},
            }
        else:
            idp_config = {"idpType": IDP_TYPE_UNSPECIFIED}
        data = self._request("PATCH", API_V1, name, body={"name": name, "idpConfig": idp_config})
        return WorkforceIdentityConfig.from_acl_config(data)
