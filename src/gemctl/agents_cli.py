"""CLI commands for agent registrations on an engine's default assistant."""

from __future__ import annotations

import click

from .context import get_client, get_config, get_format, handle_errors
from .exceptions import ValidationError
from .models import AgentIcon, AgentInput, DialogflowAgentDefinition
from .naming import agent_name, engine_name, resolve_dialogflow_agent_resource
from .output import format_agent_details, format_agents, format_delete_result


def dialogflow_options(fn):
    """Attach the Dialogflow linkage flags shared by create and update."""
    fn = click.option("--dialogflow-agent-id", default=None, help="Dialogflow agent ID")(fn)
    fn = click.option(
        "--dialogflow-location", default=None, help="Dialogflow agent location (e.g. global, us-central1)"
    )(fn)
    fn = click.option("--dialogflow-project-id", default=None, help="Dialogflow agent project ID")(fn)
    fn = click.option(
        "--dialogflow-agent", default=None, help="Fully qualified Dialogflow agent resource name"
    )(fn)
    return fn


@click.group()
def agents() -> None:
    """Manage Dialogflow agents connected to an engine assistant."""


@agents.command("list")
@click.argument("engine_id")
@click.pass_context
@handle_errors
def agents_list(ctx: click.Context, engine_id: str) -> None:
    """List agents registered to an engine."""
    client = get_client(ctx)
    items = client.list_agents(engine_name(engine_id, get_config(ctx)))
    click.echo(format_agents(items, get_format(ctx)))


@agents.command("describe")
@click.argument("engine_id")
@click.argument("agent_id")
@click.pass_context
@handle_errors
def agents_describe(ctx: click.Context, engine_id: str, agent_id: str) -> None:
    """Describe an agent registration.

    AGENT_ID may be the numeric ID or the full agent resource name.
    """
    client = get_client(ctx)
    name = agent_name(engine_name(engine_id, get_config(ctx)), agent_id)
    click.echo(format_agent_details(client.get_agent(name), get_format(ctx)))


@agents.command("create")
@click.argument("engine_id")
@click.option("--display-name", default="", help="Display name for the agent (required)")
@click.option("--description", default="", help="Description of the agent's purpose (required)")
@click.option("--reasoning-engine", default="", help="Fully qualified reasoning engine resource (required)")
@click.option("--icon-uri", default="", help="Public URI for the agent icon")
@click.option("--icon-content", default="", help="Base64-encoded image content for the agent icon")
@dialogflow_options
@click.pass_context
@handle_errors
def agents_create(
    ctx: click.Context,
    engine_id: str,
    display_name: str,
    description: str,
    reasoning_engine: str,
    icon_uri: str,
    icon_content: str,
    dialogflow_agent: str | None,
    dialogflow_project_id: str | None,
    dialogflow_location: str | None,
    dialogflow_agent_id: str | None,
) -> None:
    """Register a Dialogflow agent with an engine assistant.

    \b
    Example:
        gemctl engines agents create my-engine \\
          --display-name "Support Bot" \\
          --description "Handles support FAQs" \\
          --reasoning-engine projects/p/locations/global/collections/default_collection/engines/my-engine \\
          --dialogflow-agent projects/df/locations/global/agents/123
    """
    for flag, value in (
        ("--display-name", display_name),
        ("--description", description),
        ("--reasoning-engine", reasoning_engine),
    ):
        if not value.strip():
            raise ValidationError(flag, value, f"{flag} is required")

    resource = resolve_dialogflow_agent_resource(
        dialogflow_agent or "",
        dialogflow_project_id or "",
        dialogflow_location or "",
        dialogflow_agent_id or "",
    )
    if not resource:
        raise ValidationError(
            "dialogflow agent",
            resource,
            "required via --dialogflow-agent or the project/location/agent ID flags",
        )

    payload = AgentInput(
        display_name=display_name,
        description=description,
        reasoning_engine=reasoning_engine,
        dialogflow_agent_definition=DialogflowAgentDefinition(dialogflow_agent=resource),
        icon=AgentIcon(uri=icon_uri, content=icon_content) if icon_uri or icon_content else None,
    )
    client = get_client(ctx)
    agent = client.create_agent(engine_name(engine_id, get_config(ctx)), payload)
    click.echo(format_agent_details(agent, get_format(ctx)))


@agents.command("update")
@click.argument("engine_id")
@click.argument("agent_id")
@click.option("--display-name", default=None, help="Updated display name")
@click.option("--description", default=None, help="Updated description")
@click.option("--reasoning-engine", default=None, help="Updated reasoning engine resource")
@click.option("--icon-uri", default=None, help="Updated icon URI")
@click.option("--icon-content", default=None, help="Updated icon content (Base64)")
@click.option("--clear-icon", is_flag=True, help="Clear the agent icon")
@dialogflow_options
@click.pass_context
@handle_errors
def agents_update(
    ctx: click.Context,
    engine_id: str,
    agent_id: str,
    display_name: str | None,
    description: str | None,
    reasoning_engine: str | None,
    icon_uri: str | None,
    icon_content: str | None,
    clear_icon: bool,
    dialogflow_agent: str | None,
    dialogflow_project_id: str | None,
    dialogflow_location: str | None,
    dialogflow_agent_id: str | None,
) -> None:
    """Update an agent registration.

    Only the fields given on the command line are sent, and the update
    mask lists exactly those fields.
    """
    fields: dict = {}
    mask: list[str] = []

    if display_name is not None:
        fields["display_name"] = display_name
        mask.append("displayName")
    if description is not None:
        fields["description"] = description
        mask.append("description")
    if reasoning_engine is not None:
        if not reasoning_engine.strip():
            raise ValidationError(
                "--reasoning-engine", reasoning_engine, "cannot be empty when specified"
            )
        fields["reasoning_engine"] = reasoning_engine
        mask.append("reasoningEngine")
    if clear_icon:
        fields["icon"] = AgentIcon()
        mask.append("icon")
    elif icon_uri is not None or icon_content is not None:
        fields["icon"] = AgentIcon(uri=icon_uri or "", content=icon_content or "")
        mask.append("icon")

    df_flags = (dialogflow_agent, dialogflow_project_id, dialogflow_location, dialogflow_agent_id)
    if any(flag is not None for flag in df_flags):
        resource = resolve_dialogflow_agent_resource(*(flag or "" for flag in df_flags))
        if not resource:
            raise ValidationError(
                "dialogflow agent", resource, "required when updating the Dialogflow linkage"
            )
        fields["dialogflow_agent_definition"] = DialogflowAgentDefinition(dialogflow_agent=resource)
        mask.append("dialogflowAgentDefinition.dialogflowAgent")

    if not mask:
        raise ValidationError("update", agent_id, "no fields specified for update")

    client = get_client(ctx)
    name = agent_name(engine_name(engine_id, get_config(ctx)), agent_id)
    agent = client.update_agent(name, AgentInput(**fields), mask)
    click.echo(format_agent_details(agent, get_format(ctx)))


@agents.command("delete")
@click.argument("engine_id")
@click.argument("agent_id")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
@click.pass_context
@handle_errors
def agents_delete(ctx: click.Context, engine_id: str, agent_id: str, force: bool) -> None:
    """Delete an agent registration."""
    name = agent_name(engine_name(engine_id, get_config(ctx)), agent_id)
    if not force:
        click.confirm(f"Are you sure you want to delete agent '{agent_id}'?", abort=True)
    client = get_client(ctx)
    click.echo(format_delete_result(client.delete_agent(name), get_format(ctx)))
