"""Tests for the hybrid rule-first / model-fallback intent router."""

import pytest

from career_agents.core.registry import CapabilityRegistry
from career_agents.llm.client import LLMClientError
from career_agents.nlp.intent_router import IntentRouter

from conftest import FakeCapability, ScriptedLLMClient, make_response


@pytest.fixture
def registry(fake_capabilities):
    return CapabilityRegistry(fake_capabilities.values())


@pytest.fixture
def router(registry, llm_client):
    return IntentRouter(registry, llm_client)


# ==================================================================
# KEYWORD RULES
# ==================================================================

class TestKeywordRules:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_uses_default(self, router, session, text):
        assert router.classify(text, session) == ["ResumeCriticAgent"]

    def test_interview_keyword_regardless_of_history(self, router, session):
        text = "Can you help me with interview prep?"
        assert router.classify(text, session) == ["InterviewCoachAgent"]

        session.add_to_history(make_response())
        assert router.classify(text, session) == ["InterviewCoachAgent"]

    def test_review_starts_chain_on_empty_history(self, router, session):
        assert router.classify("review my resume", session) == [
            "ResumeCriticAgent",
            "ContentStrengthAgent",
        ]

    def test_review_uses_critic_alone_after_history(self, router, session):
        session.add_to_history(make_response())
        assert router.classify("review my resume", session) == ["ResumeCriticAgent"]

    @pytest.mark.parametrize("text, expected", [
        ("Which skills stand out?", "ContentStrengthAgent"),
        ("Please improve my resume", "ContentStrengthAgent"),
        ("Is my evidence convincing?", "ContentStrengthAgent"),
        ("Run a MOCK session", "InterviewCoachAgent"),
        ("behavioral questions please", "InterviewCoachAgent"),
        ("Does this job suit me?", "JobAlignmentAgent"),
        ("Where is the gap in my profile?", "JobAlignmentAgent"),
    ])
    def test_single_capability_rules(self, router, session, text, expected):
        assert router.classify(text, session) == [expected]

    def test_first_matching_rule_wins(self, router, session):
        # both content-strength and interview keywords; content strength ranks first
        assert router.classify("interview skills", session) == ["ContentStrengthAgent"]
        # interview outranks job alignment
        assert router.classify("practice for the job", session) == ["InterviewCoachAgent"]
        # job alignment outranks review
        assert router.classify("review the job match", session) == ["JobAlignmentAgent"]

    def test_rules_do_not_call_the_model(self, router, session, llm_client):
        router.classify("critique this", session)
        assert llm_client.calls == []

    def test_decision_records_rule_and_keyword(self, router, session):
        decision = router.decide("Give me feedback", session)
        assert decision.source == "rule"
        assert decision.matched_keyword == "feedback"


# ==================================================================
# MODEL-ASSISTED FALLBACK
# ==================================================================

class TestModelFallback:

    def test_model_choice_is_validated_against_registry(self, registry, session):
        client = ScriptedLLMClient(['Sure: ["JobAlignmentAgent", "UnknownAgent", 3, "InterviewCoachAgent"]'])
        router = IntentRouter(registry, client)

        assert router.classify("Where should I start?", session) == [
            "JobAlignmentAgent",
            "InterviewCoachAgent",
        ]

    def test_prompt_embeds_input_and_history_size(self, registry, session):
        client = ScriptedLLMClient(['["ResumeCriticAgent"]'])
        session.add_to_history(make_response())
        session.add_to_history(make_response())

        IntentRouter(registry, client).classify("Where should I start?", session)

        _, prompt = client.calls[0]
        assert "Where should I start?" in prompt
        assert "2 previous agent responses" in prompt
        assert "JobAlignmentAgent" in prompt

    @pytest.mark.parametrize("output", [
        "I think the critic.",
        "[not, json]",
        '["UnknownAgent"]',
        "[]",
        "",
    ])
    def test_unusable_output_falls_back_to_default(self, registry, session, output):
        router = IntentRouter(registry, ScriptedLLMClient([output]))
        decision = router.decide("Where should I start?", session)
        assert decision.capabilities == ["ResumeCriticAgent"]
        assert decision.source == "fallback"

    def test_client_failure_falls_back_to_default(self, registry, session):
        client = ScriptedLLMClient(error=LLMClientError("LOCAL HTTP ERROR"))
        router = IntentRouter(registry, client)
        assert router.classify("Where should I start?", session) == ["ResumeCriticAgent"]

    def test_no_client_falls_back_to_default(self, registry, session):
        router = IntentRouter(registry, None)
        assert router.classify("Where should I start?", session) == ["ResumeCriticAgent"]

    def test_custom_registry_changes_validation(self, session):
        registry = CapabilityRegistry([FakeCapability("ResumeCriticAgent"), FakeCapability("SalaryAgent")])
        client = ScriptedLLMClient(['["SalaryAgent", "JobAlignmentAgent"]'])
        router = IntentRouter(registry, client)
        assert router.classify("What should I earn?", session) == ["SalaryAgent"]
