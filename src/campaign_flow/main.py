"""FastAPI application — REST API for the campaign-planning workflow.

Endpoints:
    POST /create-marketing-workflow — Validate a campaign brief and run the workflow
    GET  /health                    — Model credential check (never runs the graph)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Awaitable, Callable, TypeVar

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from campaign_flow.agents.llm import LLMFactory, get_text_generator
from campaign_flow.agents.nodes import REQUIRED_FIELDS
from campaign_flow.agents.pipeline import run_marketing_workflow
from campaign_flow.agents.state import MarketingState, WorkflowStatus
from campaign_flow.config import settings
from campaign_flow.utils.logging import get_logger, BOLD, RED, RESET

log = get_logger()

T = TypeVar("T")


class MissingFieldsError(ValueError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "Missing required fields: campaignGoal, targetAudience, contentType, or platforms"
        )


class CampaignRequest(BaseModel):
    """Campaign brief. Required fields are checked by build_initial_state()."""

    campaignGoal: str | None = None
    targetAudience: str | None = None
    contentType: str | None = None
    platforms: list[str] | str | None = None
    budget: float | None = None
    timeline: str | None = None


def build_initial_state(body: CampaignRequest) -> MarketingState:
    """Validate the brief and turn it into the workflow's initial state."""
    missing = [name for name in REQUIRED_FIELDS if not getattr(body, name)]
    if missing:
        raise MissingFieldsError(missing)

    platforms = body.platforms if isinstance(body.platforms, list) else [body.platforms]
    return {
        "campaignGoal": body.campaignGoal,
        "targetAudience": body.targetAudience,
        "contentType": body.contentType,
        "platforms": platforms,
        "budget": body.budget,
        "timeline": body.timeline,
        "status": WorkflowStatus.INITIALIZED,
    }


async def safe_request(fn: Callable[[], Awaitable[T]]) -> tuple[T | None, str | None]:
    """Await `fn` and return (result, None), or (None, error message) if it raised."""
    try:
        return await fn(), None
    except Exception as e:
        log.error(f"  {RED}✗{RESET} Workflow request error: {e}")
        message = str(e) or "Unknown workflow error"
        if "OpenAI" in message:
            return None, "OpenAI API error: " + message
        return None, message


def get_llm_factory() -> LLMFactory:
    """Model factory used by workflow nodes. Overridden in tests."""
    return get_text_generator


app = FastAPI(
    title="Campaign Flow API",
    description="Campaign-planning workflow engine",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same 400 {error} shape as missing fields."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


@app.post("/create-marketing-workflow")
async def create_marketing_workflow(
    body: CampaignRequest,
    llm_factory: LLMFactory = Depends(get_llm_factory),
):
    """Run strategy → content → distribution → analytics for one campaign."""

    async def run() -> MarketingState:
        initial_state = build_initial_state(body)
        log.info(f"{BOLD}WORKFLOW{RESET} — {initial_state['campaignGoal'][:60]}")
        return await run_marketing_workflow(initial_state, llm_factory=llm_factory)

    result, error = await safe_request(run)
    if error:
        return JSONResponse(status_code=400, content={"error": error})
    return {"success": True, "result": result}


@app.get("/health")
async def health():
    """Credential check only — does not build or execute the workflow."""
    if not settings.openai_api_key:
        return {
            "status": "error",
            "openai": "disconnected",
            "workflow": "available",
            "message": "OpenAI API key is not set",
        }
    return {
        "status": "ok",
        "openai": "connected",
        "workflow": "available",
        "engine": settings.workflow_engine,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
