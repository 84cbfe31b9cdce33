"""Content strength and skills reasoning capability.

Produces a structured JSON analysis of skills, achievements, and faithful
rephrasing suggestions. The raw model output is returned as `content` so the
governance auditor can validate the embedded payload itself.

Confidence aggregation:
    The mean `confidenceScore` is computed per non-empty section (`skills`,
    `achievements`, `suggestions`); the response confidence is the mean of those
    section means, or 0.0 when no section has entries.
"""

from typing import Any

from career_agents.agents.base import BaseAgent
from career_agents.core.models import AgentResponse, SessionContext
from career_agents.governance.heuristics import extract_json_object


SYSTEM_PROMPT = """You are a Content Strength & Skills Reasoning Agent. Your role is to analyze resumes to identify key skills, achievements, and evidence of impact.

## Your Responsibilities
1. Identify key skills and achievements from the resume
2. Evaluate the strength of evidence supporting each claim
3. Suggest stronger phrasing WITHOUT fabricating new content
4. Apply confidence scoring and consistency checks

## Evidence Strength Classification
- HIGH: Quantifiable results (e.g., "increased revenue by 25%", "led team of 12")
- MEDIUM: Specific details but not quantified (e.g., "led cross-functional team")
- LOW: Vague claims (e.g., "improved processes", "worked on various projects")

## Faithful Transformation Rules
- NEVER invent new skills, achievements, or experiences
- NEVER add numbers or metrics that don't exist in the original
- ONLY suggest phrasing that preserves the original meaning
- If you cannot improve phrasing without fabrication, mark it as faithful=false

## Output Format
Return a JSON object with this exact structure:
{
  "skills": [
    {"name": "...", "category": "Technical|Soft|Domain|Tool", "confidenceScore": 0.0-1.0,
     "evidenceStrength": "HIGH|MEDIUM|LOW", "evidence": "direct quote from resume"}
  ],
  "achievements": [
    {"description": "...", "impact": "HIGH|MEDIUM|LOW", "quantifiable": true|false,
     "confidenceScore": 0.0-1.0, "originalText": "original text from resume"}
  ],
  "suggestions": [
    {"original": "...", "suggested": "...", "rationale": "...",
     "faithful": true|false, "confidenceScore": 0.0-1.0}
  ],
  "hallucinationRisk": 0.0-1.0,
  "summary": "brief summary of analysis"
}

## Hallucination Risk Calculation
- 0.0-0.2: All claims well-evidenced, suggestions fully faithful
- 0.3-0.5: Some vague claims, minor rewording suggestions
- 0.6-0.8: Multiple unsupported claims, some aggressive suggestions
- 0.9-1.0: High risk of fabrication, flag for human review
"""

SECTIONS = ("skills", "achievements", "suggestions")


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def section_confidence(entries: list) -> float:
    scores = [
        _as_float(item["confidenceScore"])
        for item in entries
        if isinstance(item, dict) and "confidenceScore" in item
    ]
    return sum(scores) / len(scores) if scores else 0.0


def overall_confidence(payload: dict[str, Any]) -> float:
    section_means = [
        section_confidence(payload[section])
        for section in SECTIONS
        if isinstance(payload.get(section), list) and payload[section]
    ]
    if not section_means:
        return 0.0
    return sum(section_means) / len(section_means)


def _count(payload: dict[str, Any], section: str) -> int:
    value = payload.get(section)
    return len(value) if isinstance(value, list) else 0


class ContentStrengthAgent(BaseAgent):
    name = "ContentStrengthAgent"

    def __init__(self, llm_client, system_prompt: str = SYSTEM_PROMPT):
        super().__init__(llm_client, system_prompt)

    def process(self, user_input: str, context: SessionContext) -> AgentResponse:
        raw_result = self.call_model(user_input)
        payload = extract_json_object(raw_result) or {}

        confidence = overall_confidence(payload)
        hallucination_risk = _as_float(payload.get("hallucinationRisk"))

        return AgentResponse(
            capability_name=self.name,
            content=raw_result,
            reasoning=str(payload.get("summary") or ""),
            confidence_score=confidence,
            decision_trace=[],
            audit_metadata={
                "hallucinationRisk": hallucination_risk,
                "overallConfidence": confidence,
                "skillsCount": _count(payload, "skills"),
                "achievementsCount": _count(payload, "achievements"),
                "suggestionsCount": _count(payload, "suggestions"),
            },
        )
