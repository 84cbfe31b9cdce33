"""Core request orchestration for routing, capability chaining, and governance.

Architectural role:
    Provides the main execution pipeline used by API/CLI layers to transform one user
    message into an audited capability response recorded in session state.

Control-flow model:
    1. Classify intent into an ordered capability chain (`IntentRouter`).
    2. Resolve every capability name against the registry before running anything.
    3. For each capability: process, append a routing trace line, audit, record in
       session history, and build the chained input for the next step.
    4. Return the last audited response.

Routing behavior:
    Chains are executed strictly sequentially. Step i+1 never starts before step i
    has been audited and recorded. There is no parallel fan-out.

Interaction surface:
    - Routing: `career_agents.nlp.intent_router.IntentRouter`.
    - Capabilities: `career_agents.core.registry.CapabilityRegistry`.
    - Governance: `career_agents.governance.auditor.GovernanceAuditor`.
    - Sessions: `career_agents.memory.session_store.SessionStore`.
    - Prompting: `prompt_builder.build_chained_input`.

Error handling strategy:
    - Unresolvable capability names raise `CapabilityNotFoundError`; nothing is
      recorded in the session.
    - Capability failures (including `LLMClientError`) propagate unchanged.
    - Caller-level timeouts raise `OrchestrationTimeoutError` and signal the worker,
      which stops at the next step boundary with `OrchestrationCancelledError`.
    - No retries anywhere in this module.

Side effects:
    - Appends to `SessionContext.history` and overwrites `SessionContext.decision_trace`.
    - Emits routing logs.

Determinism:
    Chain selection is deterministic for rule-matched input. Capability output and
    the routing fallback depend on the remote model.
"""

import asyncio
import logging
import os
import threading
from typing import Any, Awaitable

from dotenv import load_dotenv

from career_agents.agents import build_default_agents
from career_agents.core.errors import (
    CapabilityNotFoundError,
    OrchestrationCancelledError,
    OrchestrationTimeoutError,
)
from career_agents.core.models import AgentResponse, SessionContext
from career_agents.core.registry import CapabilityRegistry
from career_agents.core.routing_types import DEFAULT_CAPABILITY
from career_agents.governance.auditor import GovernanceAuditor
from career_agents.llm.service import ConfiguredLLMClient, LanguageModelClient
from career_agents.memory.session_store import SessionStore
from career_agents.nlp.intent_router import IntentRouter
from career_agents.prompting.prompt_builder import build_chained_input


load_dotenv()

logger = logging.getLogger(__name__)

ORCHESTRATION_TIMEOUT = float(os.getenv("ORCHESTRATION_TIMEOUT", "120"))
ROUTING_TRACE_TEMPLATE = "Orchestrator: Routed to {name} based on intent analysis."


async def _run_with_timeout(
    awaitable: Awaitable[Any],
    timeout: float | None,
    cancelled: threading.Event,
) -> Any:
    """Await `awaitable` under a caller-level timeout.

    Edge cases:
        - `timeout=None` waits indefinitely.
        - On timeout `cancelled` is set. A worker thread cannot be interrupted, so
          a chain already running stops at its next step boundary and records
          nothing further; its result is discarded.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        cancelled.set()
        raise OrchestrationTimeoutError(timeout) from None


def _raise_if_cancelled(cancelled: threading.Event | None, session_id: str) -> None:
    if cancelled is not None and cancelled.is_set():
        logger.warning("Abandoning timed-out orchestration for session %s", session_id)
        raise OrchestrationCancelledError()


class Orchestrator:
    """Drive capability chains for one request at a time per session."""

    def __init__(
        self,
        registry: CapabilityRegistry,
        router: IntentRouter,
        auditor: GovernanceAuditor | None = None,
    ):
        self.registry = registry
        self.router = router
        self.auditor = auditor or GovernanceAuditor()

    def orchestrate(
        self,
        user_input: str,
        context: SessionContext,
        cancelled: threading.Event | None = None,
    ) -> AgentResponse:
        """Route, run, audit, and record one user request.

        Args:
            user_input: Raw user message.
            context: Session owned exclusively by this call.
            cancelled: Set by the caller when it stops waiting. Checked before each
                step runs and again before its response is recorded.

        Returns:
            The audited response of the last capability in the chain.

        Important behavior:
            - An empty routing result becomes `[ResumeCriticAgent]`.
            - Every step's trace is a copy of `context.decision_trace` plus one
              routing line, so an N-step chain grows the trace by exactly N.
            - Each step is audited against its own input, not the original request.
            - Steps after the first receive chained input built from the original
              request and the previous step's content.

        Raises:
            CapabilityNotFoundError: A routed name is not registered. Raised before
                any capability runs.
            OrchestrationCancelledError: `cancelled` was set mid-chain.
            Exception: Whatever a capability raises, unchanged.
        """
        capability_names = self.router.classify(user_input, context)
        if not capability_names:
            logger.info(
                "Routing returned no capabilities for session %s; using %s",
                context.session_id,
                DEFAULT_CAPABILITY,
            )
            capability_names = [DEFAULT_CAPABILITY]

        capabilities = [self.registry.resolve(name) for name in capability_names]

        logger.info(
            "orchestrate session=%s chain=%s",
            context.session_id,
            capability_names,
        )

        current_input = user_input
        response = None

        for position, (name, capability) in enumerate(zip(capability_names, capabilities)):
            _raise_if_cancelled(cancelled, context.session_id)
            response = capability.process(current_input, context)
            _raise_if_cancelled(cancelled, context.session_id)

            trace = list(context.decision_trace)
            trace.append(ROUTING_TRACE_TEMPLATE.format(name=name))
            response.decision_trace = trace

            self.auditor.audit(response, current_input)

            context.add_to_history(response)
            context.decision_trace = list(trace)

            if position < len(capability_names) - 1:
                current_input = build_chained_input(user_input, name, response.content)

        return response

    async def orchestrate_async(
        self,
        user_input: str,
        context: SessionContext,
        timeout: float | None = ORCHESTRATION_TIMEOUT,
    ) -> AgentResponse:
        """Run `orchestrate` in a worker thread under a timeout.

        Raises:
            OrchestrationTimeoutError: The chain did not finish within `timeout`.
        """
        cancelled = threading.Event()
        return await _run_with_timeout(
            asyncio.to_thread(self.orchestrate, user_input, context, cancelled),
            timeout,
            cancelled,
        )

    def list_capabilities(self) -> dict[str, str]:
        """Return registered capability names with their current system prompts."""
        return self.registry.describe()

    def update_system_prompt(self, name: str, prompt: str) -> str:
        """Replace one capability's system prompt and return the stored value."""
        capability = self.registry.resolve(name)
        capability.update_system_prompt(prompt)
        return capability.get_system_prompt()


def build_orchestrator(llm_client: LanguageModelClient, capabilities: list | None = None) -> Orchestrator:
    """Wire registry, router, and auditor around one LLM client.

    Args:
        llm_client: Client shared by the capabilities and the routing fallback.
        capabilities: Capability instances; defaults to the built-in agents.
    """
    if capabilities is None:
        capabilities = build_default_agents(llm_client)

    registry = CapabilityRegistry(capabilities)
    router = IntentRouter(registry, llm_client)
    return Orchestrator(registry, router, GovernanceAuditor())


_DEFAULT_ORCHESTRATOR: Orchestrator | None = None
_DEFAULT_SESSION_STORE = SessionStore()


def set_default_orchestrator(orchestrator: Orchestrator | None) -> None:
    """Override or clear the default orchestrator used by `process_message`."""
    global _DEFAULT_ORCHESTRATOR
    _DEFAULT_ORCHESTRATOR = orchestrator


def get_default_orchestrator() -> Orchestrator:
    """Lazily build and cache the environment-configured orchestrator."""
    global _DEFAULT_ORCHESTRATOR
    if _DEFAULT_ORCHESTRATOR is None:
        _DEFAULT_ORCHESTRATOR = build_orchestrator(ConfiguredLLMClient())
        logger.info(
            "Default orchestrator ready with capabilities %s",
            _DEFAULT_ORCHESTRATOR.registry.names(),
        )
    return _DEFAULT_ORCHESTRATOR


def get_session_store() -> SessionStore:
    return _DEFAULT_SESSION_STORE


async def process_message(
    message: str,
    session_id: str,
    owner_id: str,
    orchestrator: Orchestrator | None = None,
    store: SessionStore | None = None,
    timeout: float | None = ORCHESTRATION_TIMEOUT,
) -> AgentResponse:
    """Process one user message for one session under the caller-level timeout.

    Args:
        message: Raw user message.
        session_id: Session key; the session is created on first use.
        owner_id: Authenticated caller identity.
        orchestrator: Optional override of the default orchestrator.
        store: Optional override of the process-wide session store.
        timeout: Seconds before the call fails with `OrchestrationTimeoutError`.

    Returns:
        The final audited response.

    Important behavior:
        - Ownership is checked before anything runs.
        - Callers of a busy session queue on its `asyncio.Lock` in the event loop,
          so they hold no worker thread while waiting and other sessions keep
          running in parallel. The chain itself runs in a worker thread under the
          session's `threading.Lock`.
        - The timeout covers queueing and execution. A call that times out while
          queued never runs; one that times out mid-chain records no further steps.

    Raises:
        SessionOwnershipError, CapabilityNotFoundError, OrchestrationTimeoutError,
        or any capability failure.
    """
    if orchestrator is None:
        orchestrator = get_default_orchestrator()
    if store is None:
        store = _DEFAULT_SESSION_STORE

    session_lock = store.async_lock(session_id, owner_id)
    cancelled = threading.Event()

    def run_locked() -> AgentResponse:
        with store.session(session_id, owner_id) as context:
            _raise_if_cancelled(cancelled, session_id)
            return orchestrator.orchestrate(message, context, cancelled)

    async def run_queued() -> AgentResponse:
        async with session_lock:
            return await asyncio.to_thread(run_locked)

    return await _run_with_timeout(run_queued(), timeout, cancelled)
