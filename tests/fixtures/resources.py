"""Factories for sample Discovery Engine resources."""

from datetime import UTC, datetime

from gemctl.models import Agent, DialogflowAgentDefinition, Engine, SearchEngineConfig

ENGINE_NAME = "projects/test-project/locations/global/collections/default_collection/engines/app"
FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
FIXED_TIMESTAMP = "2025-01-02T03:04:05Z"


def make_engine(name: str = ENGINE_NAME, **overrides) -> Engine:
    """Helper to create a fully populated engine."""
    fields = dict(
        name=name,
        display_name="Support App",
        solution_type="SOLUTION_TYPE_SEARCH",
        industry_vertical="GENERIC",
        app_type="APP_TYPE_INTRANET",
        data_store_ids=["docs", "faq"],
        common_config={"companyName": "Acme"},
        features={"agent-gallery": "FEATURE_STATE_ON", "prompt-gallery": "FEATURE_STATE_OFF"},
        search_engine_config=SearchEngineConfig("SEARCH_TIER_ENTERPRISE", ["SEARCH_ADD_ON_LLM"]),
    )
    fields.update(overrides)
    return Engine(**fields)


def make_agent(
    agent_id: str,
    display_name: str,
    dialogflow_agent: str = "",
    description: str = "",
    reasoning_engine: str = "",
    engine_name: str = ENGINE_NAME,
) -> Agent:
    """Helper to create an agent registered under ``engine_name``."""
    return Agent(
        name=f"{engine_name}/assistants/default_assistant/agents/{agent_id}",
        display_name=display_name,
        description=description,
        reasoning_engine=reasoning_engine,
        dialogflow_agent_definition=(
            DialogflowAgentDefinition(dialogflow_agent) if dialogflow_agent else None
        ),
    )


def sample_agents() -> list[Agent]:
    """One Dialogflow-linked agent and one keyed by display name."""
    return [
        make_agent(
            "111",
            "Invoice Helper",
            dialogflow_agent="projects/df/locations/global/agents/AAA",
            description="Extracts invoice data",
            reasoning_engine=ENGINE_NAME,
        ),
        make_agent("222", "FAQ Bot", description="Answers questions"),
    ]
