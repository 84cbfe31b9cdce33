"""Resume critique capability: structure, ATS compatibility, and impact."""

from career_agents.agents.base import BaseAgent
from career_agents.core.models import AgentResponse, SessionContext


SYSTEM_PROMPT = (
    "You are an expert Resume Critic. Analyze the resume for structure, "
    "ATS compatibility, and impact."
)


class ResumeCriticAgent(BaseAgent):
    name = "ResumeCriticAgent"

    def __init__(self, llm_client, system_prompt: str = SYSTEM_PROMPT):
        super().__init__(llm_client, system_prompt)

    def process(self, user_input: str, context: SessionContext) -> AgentResponse:
        result = self.call_model(user_input)
        return AgentResponse(
            capability_name=self.name,
            content=result,
            reasoning="Analyzed resume structure and content impact.",
            confidence_score=0.9,
            decision_trace=[],
            audit_metadata={},
        )
