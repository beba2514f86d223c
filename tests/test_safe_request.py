import pytest

from campaign_flow.main import CampaignRequest, MissingFieldsError, build_initial_state, safe_request


@pytest.mark.asyncio
async def test_safe_request_returns_result():
    async def ok():
        return {"status": "completed"}

    assert await safe_request(ok) == ({"status": "completed"}, None)


@pytest.mark.asyncio
async def test_safe_request_returns_message():
    async def fails():
        raise RuntimeError("No valid transition from node \"content\"")

    assert await safe_request(fails) == (None, 'No valid transition from node "content"')


@pytest.mark.asyncio
async def test_safe_request_prefixes_openai_errors():
    async def fails():
        raise RuntimeError("OpenAI rate limit reached")

    assert await safe_request(fails) == (None, "OpenAI API error: OpenAI rate limit reached")


@pytest.mark.asyncio
async def test_safe_request_empty_message():
    async def fails():
        raise RuntimeError()

    assert await safe_request(fails) == (None, "Unknown workflow error")


def test_build_initial_state():
    body = CampaignRequest(campaignGoal="Launch X", targetAudience="devs", contentType="blog", platforms="twitter")
    state = build_initial_state(body)
    assert state["platforms"] == ["twitter"]
    assert state["status"] == "initialized"
    assert state["budget"] is None


def test_build_initial_state_lists_missing_fields():
    with pytest.raises(MissingFieldsError) as exc_info:
        build_initial_state(CampaignRequest(campaignGoal="Launch X"))
    assert exc_info.value.missing == ["targetAudience", "contentType", "platforms"]
