"""Shared response and session data contracts for orchestration.

Architectural role:
    Defines the records passed between capabilities, the intent router, the
    governance auditor, and the orchestration engine.

Mutation model:
    - `AgentResponse.decision_trace` is only ever replaced by a longer copy that
      starts with the previous entries; entries are never reordered or removed.
    - `AgentResponse.audit_metadata` is written by the governance auditor.
      Capabilities may seed values (for example `hallucinationRisk`) that the
      auditor validates and overwrites.
    - `SessionContext.history` is append-only through `add_to_history`.

Ownership:
    `SessionContext.owner_id` is bound when the session is created and is never
    reassigned. Ownership checks are enforced by `career_agents.memory.session_store`.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AgentResponse:
    """Uniform output of one capability invocation.

    Attributes:
        capability_name: Registry name of the producing capability.
        content: Free text, possibly embedding a JSON payload.
        reasoning: Short natural-language justification.
        confidence_score: Self-reported confidence in `[0, 1]`.
        decision_trace: Ordered routing/audit trace lines.
        audit_metadata: Governance verdicts and risk metrics.
    """

    capability_name: str
    content: str
    reasoning: str
    confidence_score: float
    decision_trace: list[str]
    audit_metadata: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the camelCase transport shape."""
        return {
            "capabilityName": self.capability_name,
            "content": self.content,
            "reasoning": self.reasoning,
            "confidenceScore": self.confidence_score,
            "decisionTrace": list(self.decision_trace),
            "auditMetadata": dict(self.audit_metadata),
        }


@dataclass
class SessionContext:
    """Per-conversation state shared by all capabilities of one user session."""

    session_id: str
    owner_id: str
    shared_memory: dict[str, Any] = field(default_factory=dict)
    history: list[AgentResponse] = field(default_factory=list)
    decision_trace: list[str] = field(default_factory=list)

    def add_to_history(self, response: AgentResponse) -> None:
        self.history.append(response)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "ownerId": self.owner_id,
            "history": [item.to_dict() for item in self.history],
            "decisionTrace": list(self.decision_trace),
        }
