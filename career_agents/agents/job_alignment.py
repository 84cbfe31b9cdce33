"""Job-fit scoring capability.

Asks the model for a JSON fit report and derives confidence from it:

    confidence = clamp(fitScore / 100 - 0.02 * len(missingSkills), 0.3, 0.95)

When the report cannot be parsed, or carries no `fitScore`, the raw text is
returned with a fixed confidence of 0.88.
"""

from typing import Any

from career_agents.agents.base import BaseAgent
from career_agents.core.models import AgentResponse, SessionContext
from career_agents.governance.heuristics import extract_json_object


SYSTEM_PROMPT = """You are a Job Alignment specialist. Evaluate how well a resume matches a specific job description.

Compare the candidate resume against the job description and return JSON with:
- skillsMatch (list of strings)
- missingSkills (list of strings)
- experienceMatch (short summary)
- fitScore (0-100 integer)
- reasoning (short explanation)
"""

DEFAULT_CONFIDENCE = 0.88
MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.95
MISSING_SKILL_PENALTY = 0.02


def compute_confidence(fit_score: float, missing_skills: list) -> float:
    base = fit_score / 100.0
    penalty = len(missing_skills) * MISSING_SKILL_PENALTY
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, base - penalty))


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def build_summary(fit_score: int, matched: list[str], missing: list[str]) -> str:
    return (
        "JD Alignment Summary\n"
        "--------------------\n"
        f"Fit Score: {fit_score}/100\n\n"
        "Matched Skills:\n"
        f"{', '.join(matched) or 'none'}\n\n"
        "Missing Skills:\n"
        f"{', '.join(missing) or 'none'}\n"
    )


class JobAlignmentAgent(BaseAgent):
    name = "JobAlignmentAgent"

    def __init__(self, llm_client, system_prompt: str = SYSTEM_PROMPT):
        super().__init__(llm_client, system_prompt)

    def process(self, user_input: str, context: SessionContext) -> AgentResponse:
        raw_output = self.call_model(user_input)
        report = extract_json_object(raw_output) or {}

        fit_score = report.get("fitScore")
        if isinstance(fit_score, bool) or not isinstance(fit_score, (int, float)):
            return AgentResponse(
                capability_name=self.name,
                content=raw_output,
                reasoning="Evaluated alignment between resume and job description.",
                confidence_score=DEFAULT_CONFIDENCE,
                decision_trace=[],
                audit_metadata={},
            )

        fit_score = int(fit_score)
        matched = _string_list(report.get("skillsMatch"))
        missing = _string_list(report.get("missingSkills"))

        return AgentResponse(
            capability_name=self.name,
            content=build_summary(fit_score, matched, missing),
            reasoning=str(report.get("reasoning") or "No reasoning provided."),
            confidence_score=compute_confidence(fit_score, missing),
            decision_trace=[],
            audit_metadata={
                "fitScore": fit_score,
                "skillsMatch": matched,
                "missingSkills": missing,
            },
        )
