"""Client configuration.

Each setting is resolved from an explicit value (usually a CLI flag), then
the environment, then a default. The project ID additionally falls back to
the active ``gcloud`` configuration.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

PROJECT_ENV_VAR = "GOOGLE_CLOUD_PROJECT"
"""Environment variable holding the Google Cloud project ID."""

LOCATION_ENV_VAR = "AGENTSPACE_LOCATION"
"""Environment variable holding the Discovery Engine location."""

COLLECTION_ENV_VAR = "GEMCTL_COLLECTION"
"""Environment variable overriding the collection ID."""

ENDPOINT_ENV_VAR = "GEMCTL_API_ENDPOINT"
"""Environment variable overriding the API endpoint (tests, private endpoints)."""

DEFAULT_LOCATION = "global"
DEFAULT_COLLECTION = "default_collection"
DEFAULT_FORMAT = "table"

OUTPUT_FORMATS = ("table", "json", "yaml")


@dataclass(frozen=True)
class ClientConfig:
    """
    Resolved settings shared by every command.

    Attributes:
        project_id: Google Cloud project ID (may be empty until required)
        location: Discovery Engine location (``global``, ``us``, ``eu``...)
        collection: Collection ID holding engines and data stores
        format: Output format (table, json, yaml)
        use_service_account: Use Application Default Credentials instead of
            the gcloud user token
        api_endpoint: Base URL of the Discovery Engine API
    """

    project_id: str = ""
    location: str = DEFAULT_LOCATION
    collection: str = DEFAULT_COLLECTION
    format: str = DEFAULT_FORMAT
    use_service_account: bool = False
    api_endpoint: str = ""

    def __post_init__(self) -> None:
        if self.format not in OUTPUT_FORMATS:
            raise ValidationError(
                "format", self.format, f"must be one of {', '.join(OUTPUT_FORMATS)}"
            )
        if not self.api_endpoint:
            object.__setattr__(self, "api_endpoint", default_endpoint(self.location))

    def require_project(self) -> str:
        """Return the project ID, raising if none was configured."""
        if not self.project_id:
            raise ValidationError(
                "project",
                self.project_id,
                f"no project set; pass --project or set {PROJECT_ENV_VAR}",
            )
        return self.project_id


def default_endpoint(location: str) -> str:
    """Regional endpoint for a location; ``global`` uses the unprefixed host."""
    if not location or location == DEFAULT_LOCATION:
        return "https://discoveryengine.googleapis.com"
    return f"https://{location}-discoveryengine.googleapis.com"


def gcloud_project() -> str:
    """Read the active project from ``gcloud config``; empty if unavailable."""
    gcloud = shutil.which("gcloud")
    if gcloud is None:
        return ""
    try:
        result = subprocess.run(
            [gcloud, "config", "get-value", "project"],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("gcloud project lookup failed: %s", e)
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def resolve_config(
    *,
    project: str | None = None,
    location: str | None = None,
    collection: str | None = None,
    format: str | None = None,
    use_service_account: bool = False,
    api_endpoint: str | None = None,
) -> ClientConfig:
    """
    Build a ClientConfig from explicit values and the environment.

    Args:
        project: Explicit project ID
        location: Explicit location
        collection: Explicit collection ID
        format: Output format
        use_service_account: Use ADC credentials
        api_endpoint: Explicit API endpoint

    Returns:
        Resolved configuration
    """
    project_id = project or os.environ.get(PROJECT_ENV_VAR, "") or gcloud_project()
    return ClientConfig(
        project_id=project_id,
        location=location or os.environ.get(LOCATION_ENV_VAR, "") or DEFAULT_LOCATION,
        collection=collection or os.environ.get(COLLECTION_ENV_VAR, "") or DEFAULT_COLLECTION,
        format=format or DEFAULT_FORMAT,
        use_service_account=use_service_account,
        api_endpoint=api_endpoint or os.environ.get(ENDPOINT_ENV_VAR, ""),
    )
