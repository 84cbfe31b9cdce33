"""Career agents: routed, chained, and governance-audited resume capabilities."""

__version__ = "0.1.0"
