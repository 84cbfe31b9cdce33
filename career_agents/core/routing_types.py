"""Routing decision data contracts for `career_agents.core.engine`.

Architectural role:
    Defines the schema returned by the intent router and consumed by the
    orchestration engine when selecting which capabilities to run, and in what order.

Determinism:
    The data class is purely structural and state-free. Determinism depends on the
    router that populates it, not on this module.
"""

from dataclasses import dataclass, field


DEFAULT_CAPABILITY = "ResumeCriticAgent"

SOURCE_DEFAULT = "default"
SOURCE_RULE = "rule"
SOURCE_MODEL = "model"
SOURCE_FALLBACK = "fallback"


@dataclass
class RoutingDecision:
    """Ordered capability selection produced by the intent router.

    Attributes:
        capabilities: Capability names to run, in execution order.
        source: How the selection was made (`default`, `rule`, `model`, `fallback`).
        matched_keyword: Keyword that triggered a rule, when `source == "rule"`.
    """

    capabilities: list[str] = field(default_factory=lambda: [DEFAULT_CAPABILITY])
    source: str = SOURCE_DEFAULT
    matched_keyword: str | None = None
