"""
HTTP API adapter for the career-agents orchestration engine.

Architectural role:
- Expose the orchestration entry point and capability introspection over HTTP.
- Map the caller credential (`X-User-Id` header) to a user identity.
- Delegate routing/capability/governance work to `career_agents.core.engine`.
- Translate fatal orchestration errors into HTTP status codes.

Endpoint responsibilities:
- `POST /api/v1/chat?session_id=...`: run one orchestration call for a session.
- `GET /api/v1/agents`: list capability names with their system prompts.
- `PUT /api/v1/agents/{name}/prompt`: replace one capability's system prompt.
- `GET /api/v1/sessions/{session_id}`: return the caller's session history/trace.

Error mapping:
- Missing identity -> HTTP 401.
- Session owned by another user -> HTTP 403.
- Unknown capability on prompt update -> HTTP 404.
- Unresolvable routed capability -> HTTP 500 (includes registry listing).
- LLM provider failure during capability execution -> HTTP 502.
- Orchestration timeout -> HTTP 504.

Response formatting:
- Audited responses are returned in the camelCase `AgentResponse.to_dict()` shape,
  flagged or not.

Side effects:
- Creates sessions in the process-wide session store on first use.
- Emits debug logs only when `DEBUG == "true"`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from career_agents.core import engine
from career_agents.core.errors import (
    CapabilityNotFoundError,
    OrchestrationTimeoutError,
    SessionOwnershipError,
)
from career_agents.llm.client import LLMClientError


logger = logging.getLogger(__name__)

app = FastAPI(title="Career Agents")
# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"


# ============================================================
# Request Schemas
# ============================================================

class ChatRequest(BaseModel):
    message: str


class PromptUpdateRequest(BaseModel):
    prompt: str


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


# ============================================================
# Chat
# ============================================================

@app.post("/api/v1/chat")
async def chat(
    session_id: str,
    request: ChatRequest,
    x_user_id: str | None = Header(default=None),
):
    """
    Run one orchestration call for the caller's session.

    Request lifecycle:
    1. Resolve caller identity from `X-User-Id`.
    2. Delegate to `engine.process_message` (ownership check, per-session lock,
       timeout, routing, capabilities, governance).
    3. Return the final audited response.
    """
    if not x_user_id:
        return _error(401, "Unauthenticated request.")

    if DEBUG:
        logger.info("chat session=%s user=%s message=%r", session_id, x_user_id, request.message)

    try:
        response = await engine.process_message(
            request.message,
            session_id,
            x_user_id,
            orchestrator=engine.get_default_orchestrator(),
            store=engine.get_session_store(),
        )
    except SessionOwnershipError:
        return _error(403, "Unauthorized access to session")
    except CapabilityNotFoundError as err:
        logger.error("Routing produced unregistered capability %r", err.name)
        return _error(500, str(err), capability=err.name, registered=err.available)
    except LLMClientError as err:
        logger.error("Capability model call failed: %s", err)
        return _error(502, str(err))
    except OrchestrationTimeoutError as err:
        logger.error("Orchestration timed out for session %s", session_id)
        return _error(504, str(err))

    if DEBUG:
        logger.info("chat result=%r", response.to_dict())

    return response.to_dict()


# ============================================================
# Capability Introspection
# ============================================================

@app.get("/api/v1/agents")
def list_agents():
    """Return registered capability names mapped to their system prompts."""
    return engine.get_default_orchestrator().list_capabilities()


@app.put("/api/v1/agents/{name}/prompt")
def update_agent_prompt(
    name: str,
    request: PromptUpdateRequest,
    x_user_id: str | None = Header(default=None),
):
    if not x_user_id:
        return _error(401, "Unauthenticated request.")

    try:
        prompt = engine.get_default_orchestrator().update_system_prompt(name, request.prompt)
    except CapabilityNotFoundError as err:
        return _error(404, str(err))

    logger.info("System prompt of %s replaced by %s", name, x_user_id)
    return {"name": name, "systemPrompt": prompt}


# ============================================================
# Session Inspection
# ============================================================

@app.get("/api/v1/sessions/{session_id}")
def get_session(session_id: str, x_user_id: str | None = Header(default=None)):
    if not x_user_id:
        return _error(401, "Unauthenticated request.")

    try:
        context = engine.get_session_store().get(session_id, x_user_id)
    except SessionOwnershipError:
        return _error(403, "Unauthorized access to session")

    if context is None:
        return _error(404, "Unknown session")

    return context.to_dict()
