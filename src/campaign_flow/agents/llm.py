"""Language-model access for workflow nodes.

Nodes only see a `TextGenerator`: an async callable turning a prompt into
text. `get_text_generator` is the production factory backed by ChatOpenAI;
tests and callers can pass any other factory with the same signature.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Awaitable, Callable

import yaml
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_openai import ChatOpenAI

from campaign_flow.agents.tracing import trace_config
from campaign_flow.config import settings

_PROMPTS_DIR = Path(__file__).parent / "prompts"

TextGenerator = Callable[[str], Awaitable[str]]
# Called as factory(temperature, node=<node name>)
LLMFactory = Callable[..., TextGenerator]


class ConfigurationError(RuntimeError):
    """The model client cannot be built (e.g. no API key)."""


def _get_llm(temperature: float) -> ChatOpenAI:
    """Create the OpenAI-backed chat model, failing fast without a key."""
    if not settings.openai_api_key:
        raise ConfigurationError("OpenAI API key is not set")
    return ChatOpenAI(
        model=settings.openai_model,
        api_key=settings.openai_api_key,
        base_url=settings.llm_base_url,
        temperature=temperature,
        timeout=settings.request_timeout,
    )


def get_text_generator(temperature: float, node: str | None = None) -> TextGenerator:
    """Build a prompt → text callable at the given sampling temperature.

    `node` names the workflow node the calls are traced under.
    """
    chain = _get_llm(temperature) | StrOutputParser()
    config = trace_config(node)

    async def generate(prompt: str) -> str:
        return await chain.ainvoke(prompt, config=config)

    return generate


@lru_cache(maxsize=None)
def load_prompt(name: str, version: str = "v1") -> dict:
    """Load a prompt definition (template + temperature) from YAML."""
    path = _PROMPTS_DIR / f"{name}_{version}.yaml"
    with open(path) as f:
        return yaml.safe_load(f)


def prompt_temperature(name: str) -> float:
    return float(load_prompt(name).get("temperature", 0.7))


def render_prompt(name: str, **values: Any) -> str:
    """Fill the named template's {placeholders} with `values`."""
    template = PromptTemplate.from_template(load_prompt(name)["template"])
    return template.format(**values)
