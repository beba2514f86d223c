"""State schema for the campaign-planning workflow."""

from __future__ import annotations

from enum import Enum
from typing import TypedDict


class WorkflowStatus(str, Enum):
    """Status discriminator. Transitions are chosen by matching these values."""

    INITIALIZED = "initialized"
    STRATEGY_CREATED = "strategy_created"
    CONTENT_PLANNED = "content_planned"
    DISTRIBUTION_PLANNED = "distribution_planned"
    COMPLETED = "completed"
    CONTENT_SKIPPED = "content_skipped"
    DISTRIBUTION_SKIPPED = "distribution_skipped"
    ANALYTICS_SKIPPED = "analytics_skipped"


SKIPPED_STATUSES = (
    WorkflowStatus.CONTENT_SKIPPED,
    WorkflowStatus.DISTRIBUTION_SKIPPED,
    WorkflowStatus.ANALYTICS_SKIPPED,
)


class MarketingState(TypedDict, total=False):
    """State passed between graph nodes.

    Keys use the request/response field names. Nodes add output keys and
    overwrite `status`; nothing is ever removed. `skipReason` is only set
    when a node took its skip branch.
    """

    campaignGoal: str
    targetAudience: str
    contentType: str
    platforms: list[str]
    budget: float | None
    timeline: str | None
    status: WorkflowStatus
    skipReason: str
    strategyPlan: str
    contentIdeas: list[str]
    distributionPlan: str
    analyticsSetup: str


def is_complete(state: MarketingState) -> bool:
    """True only when every node ran its success branch."""
    return state.get("status") == WorkflowStatus.COMPLETED


def is_skipped(state: MarketingState) -> bool:
    """True when a node short-circuited. A skipped run is incomplete, not successful."""
    return state.get("status") in SKIPPED_STATUSES
