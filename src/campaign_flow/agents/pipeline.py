"""Campaign-planning workflow: strategy → content → distribution → analytics.

Each node's success status leads to the next node; any other status leads
straight to `end`, so a skipped step terminates the run early without
raising.
"""

from __future__ import annotations

from campaign_flow.agents.llm import LLMFactory, get_text_generator
from campaign_flow.agents.nodes import (
    create_distribution_plan,
    generate_content_ideas,
    generate_marketing_strategy,
    setup_analytics,
)
from campaign_flow.agents.state import MarketingState, WorkflowStatus
from campaign_flow.engine.backends import run_workflow
from campaign_flow.engine.graph import END, START, Workflow

# node name, handler, success status, node that follows success
PIPELINE = (
    ("strategy", generate_marketing_strategy, WorkflowStatus.STRATEGY_CREATED, "content"),
    ("content", generate_content_ideas, WorkflowStatus.CONTENT_PLANNED, "distribution"),
    ("distribution", create_distribution_plan, WorkflowStatus.DISTRIBUTION_PLANNED, "analytics"),
    ("analytics", setup_analytics, WorkflowStatus.COMPLETED, END),
)


def _bind(node_fn, llm_factory: LLMFactory):
    async def handler(state: MarketingState) -> MarketingState:
        return await node_fn(state, llm_factory)

    handler.__name__ = node_fn.__name__
    return handler


def _status_is(status: WorkflowStatus):
    return lambda state: state.get("status") == status


def _status_is_not(status: WorkflowStatus):
    return lambda state: state.get("status") != status


def build_marketing_workflow(llm_factory: LLMFactory | None = None) -> Workflow:
    """Assemble and validate the four-node campaign workflow."""
    llm_factory = llm_factory or get_text_generator
    workflow = Workflow()

    for name, node_fn, _, _ in PIPELINE:
        workflow.add_node(name, _bind(node_fn, llm_factory))

    workflow.add_transition(START, PIPELINE[0][0])
    for name, _, success, following in PIPELINE:
        workflow.add_transition(name, following, _status_is(success))
        workflow.add_transition(name, END, _status_is_not(success))

    return workflow.validate()


async def run_marketing_workflow(
    initial_state: MarketingState,
    llm_factory: LLMFactory | None = None,
    engine: str | None = None,
) -> MarketingState:
    """Build a fresh workflow and run it to completion on the chosen engine."""
    workflow = build_marketing_workflow(llm_factory)
    return await run_workflow(workflow, initial_state, engine=engine, state_schema=MarketingState)
