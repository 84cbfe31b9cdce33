"""Intent router producing `RoutingDecision` for core orchestration.

Intent classification logic:
- Blank input goes straight to the default capability.
- Constant keyword sets are matched case-insensitively as substrings, in a fixed
  priority order. The first matching rule wins.
- When no rule matches, the LLM client is asked for a JSON array of capability
  names (model-assisted fallback).

Interaction with core:
- Returns `RoutingDecision` / capability-name lists consumed by `career_agents.core.engine`.
- Fallback names are validated against the live `CapabilityRegistry`, so a
  deployment with a different capability set changes validation transparently.

Temporal handling:
- The review rule and the fallback prompt use the session history size.

Determinism:
- Rule layer is deterministic.
- Fallback output depends on the remote model.

Failure handling:
- Malformed model output, unknown names, or client failures fall back to
  `ResumeCriticAgent`. Nothing in this module raises to the caller.
"""

import logging

from career_agents.core.models import SessionContext
from career_agents.core.registry import CapabilityRegistry
from career_agents.core.routing_types import (
    DEFAULT_CAPABILITY,
    SOURCE_DEFAULT,
    SOURCE_FALLBACK,
    SOURCE_MODEL,
    SOURCE_RULE,
    RoutingDecision,
)
from career_agents.governance.heuristics import extract_json_array
from career_agents.llm.service import LanguageModelClient
from career_agents.prompting.prompt_builder import INTENT_SYSTEM_INSTRUCTION, build_intent_prompt


logger = logging.getLogger(__name__)


# =========================================================
# KEYWORD RULES (priority order)
# =========================================================

CONTENT_STRENGTH_KEYWORDS = (
    "skill",
    "strength",
    "phrasing",
    "achievement",
    "evidence",
    "improve my resume",
)

INTERVIEW_KEYWORDS = (
    "interview",
    "mock",
    "behavioral",
    "practice",
)

JOB_ALIGNMENT_KEYWORDS = (
    "job",
    "alignment",
    "match",
    "gap",
)

REVIEW_KEYWORDS = (
    "analyze",
    "critique",
    "review",
    "feedback",
)

KEYWORD_RULES = [
    (CONTENT_STRENGTH_KEYWORDS, ["ContentStrengthAgent"]),
    (INTERVIEW_KEYWORDS, ["InterviewCoachAgent"]),
    (JOB_ALIGNMENT_KEYWORDS, ["JobAlignmentAgent"]),
]

FIRST_REVIEW_CHAIN = ["ResumeCriticAgent", "ContentStrengthAgent"]
FOLLOWUP_REVIEW_CHAIN = ["ResumeCriticAgent"]


def _first_match(text: str, keywords) -> str | None:
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None


class IntentRouter:
    """Hybrid rule-first, model-second capability selector."""

    def __init__(self, registry: CapabilityRegistry, llm_client: LanguageModelClient | None = None):
        self.registry = registry
        self.llm_client = llm_client

    def classify(self, user_input: str, context: SessionContext) -> list[str]:
        """Return the ordered capability names that should handle `user_input`."""
        return list(self.decide(user_input, context).capabilities)

    def decide(self, user_input: str, context: SessionContext) -> RoutingDecision:
        """
        Classify user input into an ordered capability chain.

        Rule order:
        1. Blank input -> default capability.
        2. Content-strength keywords.
        3. Interview keywords.
        4. Job-alignment keywords.
        5. Review keywords -> two-step chain on an empty history, critic otherwise.
        6. Model-assisted fallback.
        """

        if not user_input or not user_input.strip():
            return RoutingDecision([DEFAULT_CAPABILITY], SOURCE_DEFAULT)

        text = user_input.lower()

        for keywords, capabilities in KEYWORD_RULES:
            keyword = _first_match(text, keywords)
            if keyword is not None:
                return self._rule_decision(capabilities, keyword)

        keyword = _first_match(text, REVIEW_KEYWORDS)
        if keyword is not None:
            chain = FOLLOWUP_REVIEW_CHAIN if context.history else FIRST_REVIEW_CHAIN
            return self._rule_decision(chain, keyword)

        return self._classify_with_model(user_input, context)

    def _rule_decision(self, capabilities: list[str], keyword: str) -> RoutingDecision:
        logger.info("intent_rule keyword=%r capabilities=%s", keyword, capabilities)
        return RoutingDecision(list(capabilities), SOURCE_RULE, keyword)

    # -----------------------------------------------------
    # MODEL-ASSISTED FALLBACK
    # -----------------------------------------------------

    def _classify_with_model(self, user_input: str, context: SessionContext) -> RoutingDecision:
        """Ask the LLM client for a capability chain and validate it.

        Edge cases:
        - No client configured -> default capability.
        - Client raises -> logged, default capability.
        - Output without a decodable JSON array -> default capability.
        - Names not in the registry and non-string items are dropped.
        """
        if self.llm_client is None:
            return RoutingDecision([DEFAULT_CAPABILITY], SOURCE_FALLBACK)

        prompt = build_intent_prompt(user_input, len(context.history), self.registry.names())

        try:
            raw_output = self.llm_client.generate(INTENT_SYSTEM_INSTRUCTION, prompt)
        except Exception:
            logger.exception("Intent fallback classification failed")
            return RoutingDecision([DEFAULT_CAPABILITY], SOURCE_FALLBACK)

        candidates = extract_json_array(raw_output) or []
        capabilities = [
            name for name in candidates
            if isinstance(name, str) and name in self.registry
        ]

        if not capabilities:
            logger.info("intent_model returned no usable capabilities: %r", raw_output)
            return RoutingDecision([DEFAULT_CAPABILITY], SOURCE_FALLBACK)

        logger.info("intent_model capabilities=%s", capabilities)
        return RoutingDecision(capabilities, SOURCE_MODEL)
