import pytest

from campaign_flow.config import settings

CANNED_RESPONSES = {
    "analytics and tracking plan": "Track CTR per platform, weekly reports, A/B test headlines.",
    "content distribution plan": "Post on Twitter at 9am and 5pm, three times a week.",
    "compelling content ideas": "1. Launch thread: what X solves\n2. Demo video walkthrough\n3. Customer story",
    "comprehensive marketing strategy": "Lead with developer pain points, seed early adopters, measure signups.",
}


class FakeLLM:
    """Stands in for the model factory; answers by matching the prompt text."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.prompts: list[str] = []
        self.temperatures: list[float] = []
        self.nodes: list[str | None] = []

    def __call__(self, temperature: float, node: str | None = None):
        self.temperatures.append(temperature)
        self.nodes.append(node)

        async def generate(prompt: str) -> str:
            self.prompts.append(prompt)
            for marker, response in CANNED_RESPONSES.items():
                if marker in prompt:
                    if self.fail_on == marker:
                        raise RuntimeError(f"model call failed for {marker}")
                    return response
            raise AssertionError(f"unexpected prompt: {prompt[:80]}")

        return generate


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def brief():
    return {
        "campaignGoal": "Launch X",
        "targetAudience": "devs",
        "contentType": "blog",
        "platforms": ["twitter"],
        "budget": None,
        "timeline": None,
        "status": "initialized",
    }


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "")


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "sk-test")
