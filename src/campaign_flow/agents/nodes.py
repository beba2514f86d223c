"""Node handlers for the campaign-planning workflow.

Each node builds its text generator, checks that the previous step
succeeded, asks the model for one artefact and returns a copy of the state
with that artefact and a new status. A node whose prerequisite status is
missing takes its skip branch: only `status` and `skipReason` change.

The generator is built before the prerequisite check, so a missing API key
aborts the run even on a skip path.
"""

from __future__ import annotations

from campaign_flow.agents.llm import LLMFactory, get_text_generator, prompt_temperature, render_prompt
from campaign_flow.agents.state import MarketingState, WorkflowStatus
from campaign_flow.text.lists import split_numbered_list
from campaign_flow.utils.logging import get_logger, DIM, YELLOW, RESET

log = get_logger()

REQUIRED_FIELDS = ("campaignGoal", "targetAudience", "contentType", "platforms")


def _skip(state: MarketingState, status: WorkflowStatus, expected: WorkflowStatus) -> MarketingState:
    reason = f"expected status {expected.value}, got {_status_value(state.get('status'))}"
    log.info(f"  {YELLOW}↷{RESET} {status.value}: {reason}")
    return {**state, "status": status, "skipReason": reason}


def _status_value(status) -> str:
    return getattr(status, "value", status) or "(none)"


def _platform_list(state: MarketingState) -> list[str]:
    platforms = state["platforms"]
    return [platforms] if isinstance(platforms, str) else list(platforms)


def _platforms(state: MarketingState) -> str:
    return ", ".join(_platform_list(state))


async def generate_marketing_strategy(
    state: MarketingState,
    llm_factory: LLMFactory = get_text_generator,
) -> MarketingState:
    """Strategy node: campaign parameters → strategyPlan."""
    generate = llm_factory(prompt_temperature("strategy"), node="strategy")

    missing = [name for name in REQUIRED_FIELDS if not state.get(name)]
    if missing:
        raise ValueError(f"Strategy node is missing required fields: {', '.join(missing)}")

    prompt = render_prompt(
        "strategy",
        campaignGoal=state["campaignGoal"],
        targetAudience=state["targetAudience"],
        contentType=state["contentType"],
        platforms=_platforms(state),
        budget=state.get("budget") or "Unspecified",
        timeline=state.get("timeline") or "Unspecified",
    )
    strategy_plan = await generate(prompt)
    log.debug(f"  {DIM}strategy: {len(strategy_plan)} chars{RESET}")

    return {
        **state,
        "platforms": _platform_list(state),
        "strategyPlan": strategy_plan,
        "status": WorkflowStatus.STRATEGY_CREATED,
    }


async def generate_content_ideas(
    state: MarketingState,
    llm_factory: LLMFactory = get_text_generator,
) -> MarketingState:
    """Content node: strategyPlan → contentIdeas."""
    generate = llm_factory(prompt_temperature("content"), node="content")

    if state.get("status") != WorkflowStatus.STRATEGY_CREATED:
        return _skip(state, WorkflowStatus.CONTENT_SKIPPED, WorkflowStatus.STRATEGY_CREATED)

    prompt = render_prompt(
        "content",
        campaignGoal=state["campaignGoal"],
        targetAudience=state["targetAudience"],
        contentType=state["contentType"],
        strategyPlan=state.get("strategyPlan", ""),
    )
    content_ideas = split_numbered_list(await generate(prompt))
    log.debug(f"  {DIM}content: {len(content_ideas)} ideas{RESET}")

    return {**state, "contentIdeas": content_ideas, "status": WorkflowStatus.CONTENT_PLANNED}


async def create_distribution_plan(
    state: MarketingState,
    llm_factory: LLMFactory = get_text_generator,
) -> MarketingState:
    """Distribution node: contentIdeas + platforms → distributionPlan."""
    generate = llm_factory(prompt_temperature("distribution"), node="distribution")

    if state.get("status") != WorkflowStatus.CONTENT_PLANNED:
        return _skip(state, WorkflowStatus.DISTRIBUTION_SKIPPED, WorkflowStatus.CONTENT_PLANNED)

    ideas = state.get("contentIdeas") or []
    prompt = render_prompt(
        "distribution",
        campaignGoal=state["campaignGoal"],
        targetAudience=state["targetAudience"],
        contentIdeas="\n\n".join(ideas) or "No content ideas available",
        platforms=_platforms(state),
        timeline=state.get("timeline") or "Unspecified",
    )
    distribution_plan = await generate(prompt)

    return {**state, "distributionPlan": distribution_plan, "status": WorkflowStatus.DISTRIBUTION_PLANNED}


async def setup_analytics(
    state: MarketingState,
    llm_factory: LLMFactory = get_text_generator,
) -> MarketingState:
    """Analytics node: campaign parameters → analyticsSetup. Terminal on success."""
    generate = llm_factory(prompt_temperature("analytics"), node="analytics")

    if state.get("status") != WorkflowStatus.DISTRIBUTION_PLANNED:
        return _skip(state, WorkflowStatus.ANALYTICS_SKIPPED, WorkflowStatus.DISTRIBUTION_PLANNED)

    prompt = render_prompt(
        "analytics",
        campaignGoal=state["campaignGoal"],
        targetAudience=state["targetAudience"],
        contentType=state["contentType"],
        platforms=_platforms(state),
    )
    analytics_setup = await generate(prompt)

    return {**state, "analyticsSetup": analytics_setup, "status": WorkflowStatus.COMPLETED}
