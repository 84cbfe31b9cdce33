"""Fatal orchestration error types.

Recoverable conditions (routing ambiguity, malformed capability payloads) never
raise; they are handled where they occur. Everything defined here aborts the
current orchestration call and reaches the caller unchanged.
"""


class OrchestrationError(Exception):
    """Base class for fatal orchestration failures."""


class CapabilityNotFoundError(OrchestrationError):
    """Raised when a routed capability name is absent from the registry."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Capability {name!r} is not registered. "
            f"Registered capabilities: {self.available}"
        )


class SessionOwnershipError(OrchestrationError):
    """Raised when a caller touches a session bound to a different owner."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Unauthorized access to session {session_id!r}")


class OrchestrationTimeoutError(OrchestrationError):
    """Raised when one orchestration call exceeds its caller-level timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Orchestration did not finish within {timeout:g}s")


class OrchestrationCancelledError(OrchestrationError):
    """Raised inside a worker whose caller already gave up on the call.

    The caller has seen `OrchestrationTimeoutError`; this only stops the
    abandoned chain before it records anything further.
    """
