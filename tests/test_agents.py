"""Tests for the built-in model-backed capabilities."""

import json

import pytest

from career_agents.agents import (
    ContentStrengthAgent,
    InterviewCoachAgent,
    JobAlignmentAgent,
    ResumeCriticAgent,
)
from career_agents.agents.interview_coach import HISTORY_KEY, MAX_HISTORY_TURNS
from career_agents.agents.job_alignment import compute_confidence
from career_agents.core.engine import Orchestrator
from career_agents.core.registry import CapabilityRegistry

from conftest import FixedRouter, ScriptedLLMClient


# ==================================================================
# RESUME CRITIC
# ==================================================================

class TestResumeCritic:

    def test_returns_model_text_with_fixed_confidence(self, session):
        client = ScriptedLLMClient(["Use stronger verbs."])
        agent = ResumeCriticAgent(client)

        response = agent.process("my resume", session)

        assert response.content == "Use stronger verbs."
        assert response.confidence_score == 0.9
        assert client.calls == [(agent.get_system_prompt(), "my resume")]

    def test_updated_prompt_is_used_for_next_call(self, session):
        client = ScriptedLLMClient()
        agent = ResumeCriticAgent(client)

        agent.update_system_prompt("Be harsh.")
        agent.process("my resume", session)

        assert agent.get_system_prompt() == "Be harsh."
        assert client.calls[0][0] == "Be harsh."


# ==================================================================
# CONTENT STRENGTH
# ==================================================================

class TestContentStrength:

    def test_confidence_is_mean_of_section_means(self, session):
        payload = {
            "skills": [{"confidenceScore": 0.9}, {"confidenceScore": 0.7}],
            "achievements": [{"confidenceScore": 0.6}],
            "suggestions": [],
            "hallucinationRisk": 0.2,
            "summary": "Strong technical core.",
        }
        raw = "Result:\n" + json.dumps(payload)
        agent = ContentStrengthAgent(ScriptedLLMClient([raw]))

        response = agent.process("resume text", session)

        # (0.8 + 0.6) / 2, empty suggestions skipped
        assert response.confidence_score == pytest.approx(0.7)
        assert response.content == raw
        assert response.reasoning == "Strong technical core."
        assert response.audit_metadata["hallucinationRisk"] == 0.2
        assert response.audit_metadata["overallConfidence"] == pytest.approx(0.7)

    def test_section_counts_survive_orchestration(self, session):
        payload = {
            "skills": [{"confidenceScore": 0.9}, {"confidenceScore": 0.7}],
            "achievements": [{"confidenceScore": 0.6}],
            "suggestions": [],
            "hallucinationRisk": 0.1,
        }
        agent = ContentStrengthAgent(ScriptedLLMClient([json.dumps(payload)]))
        orchestrator = Orchestrator(
            CapabilityRegistry([agent]),
            FixedRouter(["ContentStrengthAgent"]),
        )

        response = orchestrator.orchestrate("resume text", session)

        assert response.audit_metadata["skillsCount"] == 2
        assert response.audit_metadata["achievementsCount"] == 1
        assert response.audit_metadata["suggestionsCount"] == 0
        assert response.decision_trace == [
            "Orchestrator: Routed to ContentStrengthAgent based on intent analysis."
        ]

    def test_malformed_output_gives_zero_confidence(self, session):
        agent = ContentStrengthAgent(ScriptedLLMClient(["Sorry, no JSON today."]))

        response = agent.process("resume text", session)

        assert response.confidence_score == 0.0
        assert response.content == "Sorry, no JSON today."
        assert response.audit_metadata["hallucinationRisk"] == 0.0


# ==================================================================
# JOB ALIGNMENT
# ==================================================================

class TestJobAlignment:

    @pytest.mark.parametrize("fit, missing, expected", [
        (78, ["Kubernetes", "Go"], 0.74),
        (100, [], 0.95),
        (20, ["a", "b", "c"], 0.3),
        (50, [], 0.5),
    ])
    def test_confidence_formula(self, fit, missing, expected):
        assert compute_confidence(fit, missing) == pytest.approx(expected)

    def test_parsed_report_becomes_summary(self, session):
        report = {
            "fitScore": 78,
            "skillsMatch": ["Python", "SQL"],
            "missingSkills": ["Kubernetes", "Go"],
            "reasoning": "Backend heavy role.",
        }
        agent = JobAlignmentAgent(ScriptedLLMClient([json.dumps(report)]))

        response = agent.process("resume + jd", session)

        assert response.confidence_score == pytest.approx(0.74)
        assert "Fit Score: 78/100" in response.content
        assert "Python, SQL" in response.content
        assert "Kubernetes, Go" in response.content
        assert response.reasoning == "Backend heavy role."
        assert response.audit_metadata == {
            "fitScore": 78,
            "skillsMatch": ["Python", "SQL"],
            "missingSkills": ["Kubernetes", "Go"],
        }

    @pytest.mark.parametrize("raw", [
        "I cannot score this.",
        json.dumps({"fitScore": "high"}),
        json.dumps({"skillsMatch": ["Python"]}),
    ])
    def test_unparsable_report_keeps_raw_text(self, session, raw):
        agent = JobAlignmentAgent(ScriptedLLMClient([raw]))

        response = agent.process("resume + jd", session)

        assert response.content == raw
        assert response.confidence_score == 0.88
        assert response.audit_metadata == {}


# ==================================================================
# INTERVIEW COACH
# ==================================================================

class TestInterviewCoach:

    def test_first_turn_sends_input_unchanged(self, session):
        client = ScriptedLLMClient(["Tell me about a conflict."])
        agent = InterviewCoachAgent(client)

        response = agent.process("Let's practice", session)

        assert client.calls[0][1] == "Let's practice"
        assert response.confidence_score == 0.85
        assert session.shared_memory[HISTORY_KEY] == [
            {"role": "candidate", "text": "Let's practice"},
            {"role": "coach", "text": "Tell me about a conflict."},
        ]

    def test_follow_up_includes_transcript(self, session):
        client = ScriptedLLMClient(["Question one?", "Good answer."])
        agent = InterviewCoachAgent(client)

        agent.process("Start a mock interview", session)
        agent.process("I resolved it by listening.", session)

        follow_up = client.calls[1][1]
        assert "Previous coaching turns:" in follow_up
        assert "coach: Question one?" in follow_up
        assert follow_up.endswith("I resolved it by listening.")

    def test_transcript_is_capped(self, session):
        agent = InterviewCoachAgent(ScriptedLLMClient())

        for turn in range(10):
            agent.process(f"answer {turn}", session)

        transcript = session.shared_memory[HISTORY_KEY]
        assert len(transcript) == MAX_HISTORY_TURNS
        assert transcript[-2] == {"role": "candidate", "text": "answer 9"}
