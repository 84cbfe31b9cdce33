"""Shared fakes for orchestration, routing, governance, and API tests."""

import threading
import time

import pytest

from career_agents.core.models import AgentResponse, SessionContext


class ScriptedLLMClient:
    """LLM client returning queued responses, then a default, or raising."""

    def __init__(self, responses=None, default="ok", error=None):
        self.responses = list(responses or [])
        self.default = default
        self.error = error
        self.calls = []

    def generate(self, system_instruction, user_text):
        self.calls.append((system_instruction, user_text))
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return self.default


class FakeCapability:
    """Capability recording its inputs and tracking concurrent executions."""

    def __init__(self, name, confidence=0.9, content=None, delay=0.0, error=None):
        self.name = name
        self.confidence = confidence
        self.content = content
        self.delay = delay
        self.error = error
        self.system_prompt = f"You are {name}."
        self.inputs = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def get_system_prompt(self):
        return self.system_prompt

    def update_system_prompt(self, new_prompt):
        self.system_prompt = new_prompt

    def process(self, user_input, context):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            self.inputs.append(user_input)
            if self.delay:
                time.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return AgentResponse(
                capability_name=self.name,
                content=self.content or f"{self.name} output",
                reasoning="fake",
                confidence_score=self.confidence,
                decision_trace=[],
                audit_metadata={},
            )
        finally:
            with self._lock:
                self.active -= 1


class FixedRouter:
    """Router stub returning a fixed capability chain."""

    def __init__(self, chain):
        self.chain = list(chain)

    def classify(self, user_input, context):
        return list(self.chain)


def make_response(name="ResumeCriticAgent", content="text", confidence=0.9, metadata=None):
    return AgentResponse(
        capability_name=name,
        content=content,
        reasoning="r",
        confidence_score=confidence,
        decision_trace=[],
        audit_metadata=dict(metadata or {}),
    )


@pytest.fixture
def session():
    return SessionContext(session_id="s-1", owner_id="alice")


@pytest.fixture
def llm_client():
    return ScriptedLLMClient()


@pytest.fixture
def fake_capabilities():
    return {
        name: FakeCapability(name)
        for name in (
            "ResumeCriticAgent",
            "ContentStrengthAgent",
            "JobAlignmentAgent",
            "InterviewCoachAgent",
        )
    }
