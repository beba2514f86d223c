import pytest
from fastapi.testclient import TestClient

from campaign_flow.main import app, get_llm_factory
from conftest import FakeLLM

VALID_BRIEF = {
    "campaignGoal": "Launch X",
    "targetAudience": "devs",
    "contentType": "blog",
    "platforms": ["twitter"],
}


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def client(llm):
    app.dependency_overrides[get_llm_factory] = lambda: llm
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_create_workflow_completes(client, llm):
    response = client.post("/create-marketing-workflow", json=VALID_BRIEF)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    result = body["result"]
    assert result["status"] == "completed"
    for field in ("strategyPlan", "contentIdeas", "distributionPlan", "analyticsSetup"):
        assert result[field]
    assert result["contentIdeas"][0] == "Launch thread: what X solves"


def test_single_platform_string_becomes_list(client):
    response = client.post("/create-marketing-workflow", json={**VALID_BRIEF, "platforms": "twitter"})
    assert response.status_code == 200
    assert response.json()["result"]["platforms"] == ["twitter"]


def test_optional_fields_are_passed_through(client, llm):
    brief = {**VALID_BRIEF, "budget": 5000, "timeline": "Q3"}
    response = client.post("/create-marketing-workflow", json=brief)
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["budget"] == 5000
    assert result["timeline"] == "Q3"
    assert "Budget: 5000" in llm.prompts[0]
    assert "Timeline: Q3" in llm.prompts[0]


def test_node_failure_returns_400_without_result(client):
    app.dependency_overrides[get_llm_factory] = lambda: FakeLLM(fail_on="compelling content ideas")
    response = client.post("/create-marketing-workflow", json=VALID_BRIEF)
    assert response.status_code == 400
    body = response.json()
    assert body == {"error": "model call failed for compelling content ideas"}
    assert "result" not in body


def test_missing_field_rejected_before_any_node(client, llm):
    brief = {k: v for k, v in VALID_BRIEF.items() if k != "targetAudience"}
    response = client.post("/create-marketing-workflow", json=brief)
    assert response.status_code == 400
    assert "Missing required fields" in response.json()["error"]
    assert llm.temperatures == []
    assert llm.prompts == []


def test_empty_platforms_rejected(client, llm):
    response = client.post("/create-marketing-workflow", json={**VALID_BRIEF, "platforms": []})
    assert response.status_code == 400
    assert llm.prompts == []


def test_malformed_body_gets_400(client):
    response = client.post("/create-marketing-workflow", json={**VALID_BRIEF, "budget": "lots"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request: budget")


def test_missing_api_key_surfaces_as_openai_error(no_api_key):
    response = TestClient(app).post("/create-marketing-workflow", json=VALID_BRIEF)
    assert response.status_code == 400
    assert response.json() == {"error": "OpenAI API error: OpenAI API key is not set"}


def test_health_without_key(no_api_key):
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "error",
        "openai": "disconnected",
        "workflow": "available",
        "message": "OpenAI API key is not set",
    }


def test_health_with_key(api_key):
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["openai"] == "connected"
    assert body["workflow"] == "available"
    assert "timestamp" in body
