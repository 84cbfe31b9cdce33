"""Interview coaching capability.

Keeps a short rolling transcript of coaching turns in
`shared_memory["interview_history"]` so follow-up practice rounds can refer to
earlier questions. Only the transcript is sent back to the model, not the full
session history.
"""

from career_agents.agents.base import BaseAgent
from career_agents.core.models import AgentResponse, SessionContext


SYSTEM_PROMPT = (
    "You are an expert Interview Coach. Provide feedback and simulation for "
    "interview preparation."
)

HISTORY_KEY = "interview_history"
MAX_HISTORY_TURNS = 6


class InterviewCoachAgent(BaseAgent):
    name = "InterviewCoachAgent"

    def __init__(self, llm_client, system_prompt: str = SYSTEM_PROMPT):
        super().__init__(llm_client, system_prompt)

    def _build_input(self, user_input: str, transcript: list[dict]) -> str:
        if not transcript:
            return user_input

        lines = [f"{turn['role']}: {turn['text']}" for turn in transcript]
        return (
            "Previous coaching turns:\n"
            + "\n".join(lines)
            + "\n\nCandidate:\n"
            + user_input
        )

    def process(self, user_input: str, context: SessionContext) -> AgentResponse:
        transcript = context.shared_memory.setdefault(HISTORY_KEY, [])

        result = self.call_model(self._build_input(user_input, transcript))

        transcript.append({"role": "candidate", "text": user_input})
        transcript.append({"role": "coach", "text": result})
        del transcript[:-MAX_HISTORY_TURNS]

        return AgentResponse(
            capability_name=self.name,
            content=result,
            reasoning="Generated interview coaching feedback.",
            confidence_score=0.85,
            decision_trace=[],
            audit_metadata={},
        )
