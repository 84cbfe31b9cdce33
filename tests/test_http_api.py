"""Integration tests for the FastAPI surface, driven through TestClient."""

import pytest
from fastapi.testclient import TestClient

from career_agents.agents import ResumeCriticAgent
from career_agents.api.http_api import app
from career_agents.core import engine
from career_agents.core.engine import build_orchestrator, set_default_orchestrator
from career_agents.llm.client import LLMClientError
from career_agents.memory.session_store import SessionStore

from conftest import ScriptedLLMClient


@pytest.fixture
def llm():
    return ScriptedLLMClient(default="Looks good overall.")


@pytest.fixture
def client(llm, monkeypatch):
    monkeypatch.setattr(engine, "_DEFAULT_SESSION_STORE", SessionStore())
    set_default_orchestrator(build_orchestrator(llm))
    yield TestClient(app)
    set_default_orchestrator(None)


def chat(client, message, session_id="s-1", user="alice"):
    headers = {"X-User-Id": user} if user else {}
    return client.post(
        "/api/v1/chat",
        params={"session_id": session_id},
        json={"message": message},
        headers=headers,
    )


# ==================================================================
# CHAT
# ==================================================================

class TestChat:

    def test_missing_identity_is_unauthenticated(self, client):
        assert chat(client, "review my resume", user=None).status_code == 401

    def test_successful_chat_returns_audited_response(self, client):
        response = chat(client, "critique my resume")

        assert response.status_code == 200
        body = response.json()
        assert body["capabilityName"] == "ResumeCriticAgent"
        assert body["content"] == "Looks good overall."
        assert body["confidenceScore"] == 0.9
        assert body["decisionTrace"] == [
            "Orchestrator: Routed to ResumeCriticAgent based on intent analysis."
        ]
        assert body["auditMetadata"]["governance_audit"] == "passed"

    def test_other_user_is_forbidden(self, client):
        chat(client, "critique my resume", user="alice")
        response = chat(client, "critique my resume", user="mallory")
        assert response.status_code == 403

    def test_model_failure_is_bad_gateway(self, client, llm):
        llm.error = LLMClientError("OPENAI HTTP ERROR (500)")
        response = chat(client, "critique my resume")
        assert response.status_code == 502
        assert "OPENAI HTTP ERROR" in response.json()["error"]

    def test_unregistered_route_is_server_error(self, client, llm):
        set_default_orchestrator(build_orchestrator(llm, [ResumeCriticAgent(llm)]))

        # first review of a session chains into ContentStrengthAgent
        response = chat(client, "review my resume")

        assert response.status_code == 500
        body = response.json()
        assert body["capability"] == "ContentStrengthAgent"
        assert body["registered"] == ["ResumeCriticAgent"]
        assert engine.get_session_store().get("s-1", "alice").history == []


# ==================================================================
# AGENTS
# ==================================================================

class TestAgents:

    def test_lists_registered_agents(self, client):
        response = client.get("/api/v1/agents")
        assert response.status_code == 200
        assert set(response.json()) == {
            "ResumeCriticAgent",
            "ContentStrengthAgent",
            "JobAlignmentAgent",
            "InterviewCoachAgent",
        }

    def test_prompt_update(self, client):
        response = client.put(
            "/api/v1/agents/ResumeCriticAgent/prompt",
            json={"prompt": "Focus on ATS keywords."},
            headers={"X-User-Id": "admin"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "name": "ResumeCriticAgent",
            "systemPrompt": "Focus on ATS keywords.",
        }
        assert client.get("/api/v1/agents").json()["ResumeCriticAgent"] == "Focus on ATS keywords."

    def test_prompt_update_unknown_agent(self, client):
        response = client.put(
            "/api/v1/agents/SalaryAgent/prompt",
            json={"prompt": "x"},
            headers={"X-User-Id": "admin"},
        )
        assert response.status_code == 404

    def test_prompt_update_requires_identity(self, client):
        response = client.put("/api/v1/agents/ResumeCriticAgent/prompt", json={"prompt": "x"})
        assert response.status_code == 401


# ==================================================================
# SESSIONS
# ==================================================================

class TestSessions:

    def test_owner_sees_history_and_trace(self, client):
        chat(client, "critique my resume")
        chat(client, "critique it again")

        response = client.get("/api/v1/sessions/s-1", headers={"X-User-Id": "alice"})

        assert response.status_code == 200
        body = response.json()
        assert body["ownerId"] == "alice"
        assert len(body["history"]) == 2
        assert len(body["decisionTrace"]) == 2

    def test_other_user_is_forbidden(self, client):
        chat(client, "critique my resume")
        response = client.get("/api/v1/sessions/s-1", headers={"X-User-Id": "mallory"})
        assert response.status_code == 403

    def test_unknown_session(self, client):
        response = client.get("/api/v1/sessions/nope", headers={"X-User-Id": "alice"})
        assert response.status_code == 404
