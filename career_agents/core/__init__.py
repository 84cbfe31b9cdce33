"""Core orchestration package.

Architectural role:
    Exposes the request-orchestration layer that sits between API/CLI entrypoints
    and lower-level subsystems (routing, capabilities, governance, sessions, and
    LLM adapters).

Composition:
    - `engine`: Main control-flow implementation for request processing.
    - `models`: Response and session data contracts.
    - `registry`: Read-only capability lookup.
    - `routing_types`: Routing decision schema produced by the intent router.
    - `errors`: Fatal orchestration error types.

Determinism and side effects:
    Package import itself is deterministic and side-effect free. Runtime side effects
    are performed by `engine` during request processing.
"""
