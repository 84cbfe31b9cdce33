"""Prompt assembly helpers used by routing and orchestration.

This module only builds prompt strings from already-selected inputs. Routing
decisions, model invocation, and response parsing happen outside this module.

Design constraints:
    - Deterministic construction for identical inputs.
    - Fixed ordering of prompt components.
    - No hidden side effects (no I/O, no global state mutation).

Prompt safety model:
    - Safety is instruction-led, not parser-enforced.
    - User text and capability output are interpolated as raw strings; consumers of
      model output parse it defensively.
"""


# =========================================================
# INTENT CLASSIFICATION PROMPT
# =========================================================
# Used by the intent router when no keyword rule matched.
# Prompt component order:
#   1) Instruction + allowed capability names
#   2) History-size summary
#   3) User input
#   4) Output-format constraint (JSON array only)

INTENT_SYSTEM_INSTRUCTION = (
    "You are an intent classifier for a career-assistant system.\n"
    "Select which specialist agents should handle the user's request.\n"
    "Respond with a JSON array of agent names only, in execution order.\n"
)


def build_intent_prompt(user_input: str, history_size: int, capability_names: list[str]) -> str:
    """Build the user-turn text for model-assisted intent classification.

    Args:
        user_input: Raw user input that matched no keyword rule.
        history_size: Number of responses already recorded in the session.
        capability_names: Names the model may choose from.

    Returns:
        Prompt text ending with the output-format constraint.
    """
    if history_size:
        history_summary = f"The session already contains {history_size} previous agent responses."
    else:
        history_summary = "This is the first request of the session."

    return (
        "Available agents:\n"
        + "\n".join(f"- {name}" for name in capability_names)
        + "\n\nConversation context:\n"
        + history_summary
        + "\n\nUser input:\n"
        + user_input.strip()
        + "\n\nReturn ONLY a JSON array of agent names, for example "
        '["ResumeCriticAgent"].\n'
    )


# =========================================================
# CHAINED INPUT
# =========================================================
# Used by orchestration between chain steps.
# Component order:
#   1) Original user request (never the previous chained text)
#   2) Labeled block with the previous capability's name and content
#   3) Continuation instruction

def build_chained_input(original_input: str, previous_capability: str, previous_content: str) -> str:
    """Build the input for the next chain step from the previous step's output."""
    return (
        f"{original_input}\n\n"
        f"--- Output from {previous_capability} ---\n"
        f"{previous_content}\n"
        f"--- End of {previous_capability} output ---\n\n"
        "Continue the analysis using the context above."
    )
