"""Pytest fixtures for gemctl tests."""

import pytest

from gemctl.config import ClientConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host configuration out of tests."""
    for var in (
        "GOOGLE_CLOUD_PROJECT",
        "AGENTSPACE_LOCATION",
        "GEMCTL_COLLECTION",
        "GEMCTL_API_ENDPOINT",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config() -> ClientConfig:
    """Client configuration for project ``test-project`` in ``global``."""
    return ClientConfig(project_id="test-project", location="global")
