from campaign_flow.agents import tracing
from campaign_flow.agents.tracing import trace_config
from campaign_flow.config import settings


def _tracing_off(monkeypatch):
    monkeypatch.setattr(settings, "langfuse_public_key", "")
    monkeypatch.setattr(settings, "langfuse_secret_key", "")
    monkeypatch.setattr(tracing, "_handler", None)


def test_trace_config_names_run_after_node(monkeypatch):
    _tracing_off(monkeypatch)
    monkeypatch.setattr(settings, "openai_model", "gpt-test")
    config = trace_config("content")
    assert config["run_name"] == "campaign_flow.content"
    assert config["tags"] == ["campaign_flow", "model:gpt-test", "node:content"]
    assert config["metadata"]["langfuse_tags"] == config["tags"]
    assert config["metadata"]["workflow_node"] == "content"
    assert "callbacks" not in config


def test_trace_config_without_node(monkeypatch):
    _tracing_off(monkeypatch)
    config = trace_config()
    assert config["run_name"] == "campaign_flow"
    assert not any(tag.startswith("node:") for tag in config["tags"])


def test_handler_attached_when_available(monkeypatch):
    sentinel = object()
    monkeypatch.setattr(tracing, "_handler", sentinel)
    assert trace_config("strategy")["callbacks"] == [sentinel]


def test_failed_init_is_not_retried(monkeypatch):
    monkeypatch.setattr(tracing, "_handler", False)
    assert tracing.get_langfuse_handler() is None
