"""
Interactive CLI adapter for the career-agents orchestration engine.

Architectural role:
- Provides a terminal interface over one local session.
- Displays registered capabilities at startup.
- Delegates all routing, capability work, and governance to
  `career_agents.core.engine.process_message`.

Request lifecycle (per user turn):
1. Read a single line from stdin.
2. Handle local control commands (`exit`/`quit`, `/agents`, `/trace`).
3. Forward regular input to `process_message` under the local session id.
4. Print the response content and its governance verdict.

Error handling strategy:
- EOF and keyboard interrupts end the loop without traceback output.
- Fatal orchestration errors are printed and the loop continues with the same
  session.
"""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import getpass
import sys
import uuid

from career_agents.core import engine
from career_agents.core.errors import OrchestrationError
from career_agents.llm.client import LLMClientError


# =========================================================
# UTF-8 SAFE STDOUT
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
    except Exception:
        pass


def print_verdict(response) -> None:
    metadata = response.audit_metadata
    status = metadata.get("governance_audit", "unknown")
    flags = metadata.get("audit_flags") or []

    print(f"[{response.capability_name}] confidence={response.confidence_score:.2f} governance={status}")
    if flags:
        print(f"Flags: {', '.join(flags)}")


def main():
    """
    Run the interactive terminal session.

    Interaction with core:
    - Calls `process_message(question, session_id, owner_id)` for every
      non-control input, on one session created for this process.
    """
    orchestrator = engine.get_default_orchestrator()
    store = engine.get_session_store()

    owner_id = getpass.getuser()
    session_id = f"cli-{uuid.uuid4().hex[:8]}"

    print("Career agents started. (Type 'exit' to quit)\n")
    print(f"Session: {session_id}")
    print("Agents: " + ", ".join(orchestrator.registry.names()))
    print("-" * 60)

    while True:

        try:
            question = input("You: ").strip()

        except (EOFError, KeyboardInterrupt):
            print("\nShutting down.")
            break

        if not question:
            continue

        if question.lower() in ("exit", "quit"):
            print("Shutting down.")
            break

        if question.lower() == "/agents":
            for name, prompt in orchestrator.list_capabilities().items():
                print(f"\n{name}:\n{prompt}")
            print()
            continue

        if question.lower() == "/trace":
            context = store.get(session_id, owner_id)
            for line in (context.decision_trace if context else []):
                print(f" - {line}")
            continue

        try:
            response = asyncio.run(
                engine.process_message(
                    question,
                    session_id,
                    owner_id,
                    orchestrator=orchestrator,
                    store=store,
                )
            )
        except (OrchestrationError, LLMClientError) as err:
            print(f"\nError: {err}\n")
            continue

        print("\nResponse:\n")
        print(response.content)
        print()
        print_verdict(response)
        print("\n" + "-" * 60 + "\n")


if __name__ == "__main__":
    main()
