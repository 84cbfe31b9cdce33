"""NLP utilities for intent routing.

Module scope:
- Intent classification into capability chains (`intent_router`).

Determinism profile:
- Deterministic keyword rules with a model-backed fallback.
"""
