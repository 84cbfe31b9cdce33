"""Capability contract and shared model-backed base class.

Architectural role:
    `Capability` is the interface the orchestration engine and registry depend on.
    `BaseAgent` is the common implementation for capabilities that answer by
    sending their system prompt plus the step input to the LLM client.

Failure handling:
    `LLMClientError` from the client is not caught here. A failing capability is a
    fatal orchestration failure.
"""

import logging
from typing import Protocol

from career_agents.core.models import AgentResponse, SessionContext
from career_agents.llm.service import LanguageModelClient


logger = logging.getLogger(__name__)


class Capability(Protocol):
    """Pluggable text-analysis unit invoked by name."""

    name: str

    def process(self, user_input: str, context: SessionContext) -> AgentResponse:
        """Analyze one input within a session and return a response."""
        ...

    def get_system_prompt(self) -> str:
        ...

    def update_system_prompt(self, new_prompt: str) -> None:
        ...


class BaseAgent:
    """Model-backed capability with a mutable system prompt."""

    name = "BaseAgent"

    def __init__(self, llm_client: LanguageModelClient, system_prompt: str):
        self.llm_client = llm_client
        self.system_prompt = system_prompt

    def get_system_prompt(self) -> str:
        return self.system_prompt

    def update_system_prompt(self, new_prompt: str) -> None:
        self.system_prompt = new_prompt
        logger.info("System prompt updated for %s (%d chars)", self.name, len(new_prompt))

    def call_model(self, user_input: str) -> str:
        return self.llm_client.generate(self.system_prompt, user_input)

    def process(self, user_input: str, context: SessionContext) -> AgentResponse:
        raise NotImplementedError
