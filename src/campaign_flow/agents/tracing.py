"""Langfuse Cloud tracing for workflow model calls.

Each node's model call becomes one LangChain run named after the node, so a
campaign run shows up in Langfuse as strategy → content → distribution →
analytics spans tagged with the model and the node.
"""

from __future__ import annotations

import os
from typing import Any

from campaign_flow.config import settings
from campaign_flow.utils.logging import get_logger, YELLOW, DIM, RESET

log = get_logger()

_handler = None


def get_langfuse_handler():
    """Return the shared Langfuse callback handler, or None when tracing is off.

    A failed initialization is logged and not retried for the process.
    """
    global _handler
    if _handler is not None:
        return _handler or None

    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        log.debug(f"  {DIM}Langfuse not configured (skipping tracing){RESET}")
        return None

    try:
        from langfuse.langchain import CallbackHandler

        # Langfuse v3 reads config from env vars
        os.environ.setdefault("LANGFUSE_PUBLIC_KEY", settings.langfuse_public_key)
        os.environ.setdefault("LANGFUSE_SECRET_KEY", settings.langfuse_secret_key)
        os.environ.setdefault("LANGFUSE_HOST", settings.langfuse_base_url)

        _handler = CallbackHandler()
        log.info(f"  {DIM}Langfuse tracing enabled{RESET}")
    except Exception as e:
        log.warning(f"  {YELLOW}Langfuse init failed: {e}{RESET}")
        _handler = False
    return _handler or None


def trace_config(node: str | None = None) -> dict[str, Any]:
    """Runnable config naming the call after its workflow node.

    Tags are passed both as LangChain tags and as `langfuse_tags` metadata,
    which Langfuse lifts onto the trace.
    """
    tags = ["campaign_flow", f"model:{settings.openai_model}"]
    if node:
        tags.append(f"node:{node}")

    config: dict[str, Any] = {
        "run_name": f"campaign_flow.{node}" if node else "campaign_flow",
        "tags": tags,
        "metadata": {"langfuse_tags": tags, "workflow_node": node},
    }
    handler = get_langfuse_handler()
    if handler:
        config["callbacks"] = [handler]
    return config
