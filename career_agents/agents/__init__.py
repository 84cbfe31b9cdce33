"""Capability providers ("agents").

Each capability exposes `name`, `process(user_input, context)`,
`get_system_prompt()`, and `update_system_prompt(text)`. The orchestration core
treats them as opaque handles looked up by name.
"""

from career_agents.agents.content_strength import ContentStrengthAgent
from career_agents.agents.interview_coach import InterviewCoachAgent
from career_agents.agents.job_alignment import JobAlignmentAgent
from career_agents.agents.resume_critic import ResumeCriticAgent


def build_default_agents(llm_client) -> list:
    """Instantiate every built-in capability against one LLM client."""
    return [
        ResumeCriticAgent(llm_client),
        ContentStrengthAgent(llm_client),
        JobAlignmentAgent(llm_client),
        InterviewCoachAgent(llm_client),
    ]


__all__ = [
    "ContentStrengthAgent",
    "InterviewCoachAgent",
    "JobAlignmentAgent",
    "ResumeCriticAgent",
    "build_default_agents",
]
