"""Unit test fixtures."""

import pytest

from gemctl.models import Agent, Engine
from tests.fixtures.backend import FakeBackend
from tests.fixtures.resources import make_engine, sample_agents


@pytest.fixture
def engine() -> Engine:
    return make_engine()


@pytest.fixture
def agents() -> list[Agent]:
    return sample_agents()


@pytest.fixture
def backend(engine, agents) -> FakeBackend:
    """Backend holding a live engine with two agents."""
    return FakeBackend(engine=engine, agents=agents)
