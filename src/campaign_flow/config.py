from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenAI config for the campaign pipeline nodes
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    # LLM base URL — change to switch provider (OpenRouter, Ollama, LM Studio, etc.)
    llm_base_url: str = "https://api.openai.com/v1"
    # Seconds before a single model call is abandoned. The engine itself has no timeout.
    request_timeout: float = 120.0
    log_level: str = "info"
    # "native" interprets the workflow directly, "langgraph" compiles it to a StateGraph
    workflow_engine: Literal["native", "langgraph"] = "native"
    # HTTP service
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    # Langfuse Cloud observability
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://us.cloud.langfuse.com"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
