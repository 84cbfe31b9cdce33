"""Instruction-to-payload adapter for LLM invocation.

Architectural role:
    Provides the canonical text-generation entrypoint used by the intent router's
    fallback path and by capabilities. This module bridges prompt construction to
    transport (`career_agents.llm.client`).

Model call flow:
    (system instruction, user text) -> payload construction -> `client.send_request`.

Determinism:
    Payload construction is deterministic for fixed inputs and configuration.
    Generated output remains non-deterministic because inference runs remotely.
"""

from typing import Protocol

from career_agents.llm.provider_config import MODEL_NAME, TEMPERATURE, TOP_P, MAX_TOKENS
from career_agents.llm.client import send_request


class LanguageModelClient(Protocol):
    """Minimal synchronous interface consumed by routing and capabilities."""

    def generate(self, system_instruction: str, user_text: str) -> str:
        """Return generated text for one system instruction and user turn."""
        ...


def generate_answer(system_instruction: str, user_text: str) -> str:
    """Invoke the configured model with shared generation defaults.

    Args:
        system_instruction: Capability or router instruction sent as system role.
        user_text: Input text sent as the single user turn.

    Returns:
        Final response string from the provider.

    Parameter semantics:
        - `temperature` (env `LLM_TEMPERATURE`, default 0.3): low randomness so
          structured JSON answers stay parseable.
        - `top_p=0.9`: nucleus sampling cap.
        - `max_tokens` (env `LLM_MAX_TOKENS`).

    Failure scenarios:
        Transport/provider failures raise `LLMClientError` from `client`.
    """

    payload = {
        "model": MODEL_NAME,
        "messages": [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": user_text}
        ],
        "temperature": TEMPERATURE,
        "top_p": TOP_P,
        "max_tokens": MAX_TOKENS,
        "stream": False
    }

    return send_request(payload)


class ConfiguredLLMClient:
    """`LanguageModelClient` backed by the environment-configured provider."""

    def generate(self, system_instruction: str, user_text: str) -> str:
        return generate_answer(system_instruction, user_text)
