"""Click CLI entry point.

Usage:
    campaign-flow run --goal "Launch X" --audience devs --content-type blog --platform twitter
    campaign-flow run ... --platform twitter --platform linkedin --budget 5000 --engine langgraph
    campaign-flow graph
    campaign-flow serve --port 8000
"""

from __future__ import annotations

import asyncio
import json

import click

from campaign_flow.config import settings
from campaign_flow.engine.backends import ENGINES
from campaign_flow.utils.logging import GREEN, YELLOW, BOLD, DIM, RESET, get_logger

log = get_logger()


@click.group()
def cli() -> None:
    """Campaign-planning workflow CLI."""
    pass


@cli.command()
@click.option("--goal", "campaign_goal", required=True, help="Campaign goal")
@click.option("--audience", "target_audience", required=True, help="Target audience")
@click.option("--content-type", required=True, help="Content type (blog, video, ...)")
@click.option("--platform", "platforms", multiple=True, required=True, help="Platform (repeatable)")
@click.option("--budget", default=None, type=float, help="Campaign budget")
@click.option("--timeline", default=None, help="Campaign timeline")
@click.option("--engine", default=None, type=click.Choice(ENGINES), help="Workflow interpreter")
def run(
    campaign_goal: str,
    target_audience: str,
    content_type: str,
    platforms: tuple[str, ...],
    budget: float | None,
    timeline: str | None,
    engine: str | None,
) -> None:
    """Run the campaign workflow and print the final state as JSON."""
    from campaign_flow.main import CampaignRequest, build_initial_state, safe_request

    body = CampaignRequest(
        campaignGoal=campaign_goal,
        targetAudience=target_audience,
        contentType=content_type,
        platforms=list(platforms),
        budget=budget,
        timeline=timeline,
    )
    result, error = asyncio.run(safe_request(lambda: _run(build_initial_state(body), engine)))
    if error:
        click.echo(f"Error: {error}", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(result, indent=2, default=str))


async def _run(initial_state: dict, engine: str | None) -> dict:
    from campaign_flow.agents.pipeline import run_marketing_workflow
    from campaign_flow.agents.state import is_complete

    state = await run_marketing_workflow(initial_state, engine=engine)
    if is_complete(state):
        log.info(f"  {GREEN}✓{RESET} Workflow completed")
    else:
        log.info(f"  {YELLOW}⚠{RESET} Workflow ended early: {state.get('skipReason', state['status'])}")
    return state


@cli.command()
def graph() -> None:
    """Show the assembled workflow's nodes and transitions."""
    from campaign_flow.agents.pipeline import build_marketing_workflow

    # Graph assembly never builds a model client, so no API key is needed here
    workflow = build_marketing_workflow(llm_factory=lambda temperature: None)
    click.echo(f"\n{BOLD}Campaign workflow{RESET}\n")
    for node in workflow.nodes:
        for i, transition in enumerate(workflow.transitions_from(node), 1):
            guard = "always" if transition.condition is None else "conditional"
            click.echo(f"  {node:<14} {DIM}#{i}{RESET} → {transition.target:<14} {DIM}({guard}){RESET}")
    click.echo("")


@cli.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", default=None, type=int, help="Port (default from settings)")
def serve(host: str | None, port: int | None) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "campaign_flow.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    cli()
