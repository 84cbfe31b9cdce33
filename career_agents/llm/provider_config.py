"""Provider/runtime configuration for the LLM layer.

Architectural role:
    Centralizes model/provider selection, request defaults, and credential lookup
    for `career_agents.llm.service` and `career_agents.llm.client`.

Model call flow integration:
    - `service.generate_answer` consumes `MODEL_NAME` and the sampling defaults.
    - `client.send_request` consumes provider endpoint maps and key resolution.

Determinism:
    Values are resolved once at import time from the process environment (and a
    `.env` file, when present). Key files are read lazily by `load_key`.

Failure behavior:
    Missing key material is represented as `None` and turned into an
    `LLMClientError` by `client`.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Primary model routing controls.
PROVIDER = os.getenv("PROVIDER", "local")
MODEL_NAME = os.getenv("MODEL_NAME", "qwen2.5:3b")

# Per-request HTTP timeout in seconds. No retries are layered on top.
REQUEST_TIMEOUT = float(os.getenv("LLM_REQUEST_TIMEOUT", "120"))

# Low temperature keeps the JSON-producing capabilities parseable.
TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.3"))
TOP_P = 0.9
MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2048"))

# Directory holding `<provider>.key` files.
KEY_DIR = os.getenv("LLM_KEY_DIR", "config")

LOCAL_URL = os.getenv("LOCAL_LLM_URL", "http://127.0.0.1:8080/v1/chat/completions")


def _key_path(provider_name):
    return os.path.join(KEY_DIR, f"{provider_name}.key")


# Endpoint map. Every provider except `anthropic` and `gemini` speaks the
# OpenAI chat-completions dialect.
PROVIDERS = {
    "local": {"url": LOCAL_URL, "key_file": None},
    "openai": {"url": "https://api.openai.com/v1/chat/completions", "key_file": _key_path("openai")},
    "groq": {"url": "https://api.groq.com/openai/v1/chat/completions", "key_file": _key_path("groq")},
    "openrouter": {"url": "https://openrouter.ai/api/v1/chat/completions", "key_file": _key_path("openrouter")},
    "mistral": {"url": "https://api.mistral.ai/v1/chat/completions", "key_file": _key_path("mistral")},
    "anthropic": {"url": "https://api.anthropic.com/v1/messages", "key_file": _key_path("anthropic")},
    "gemini": {
        "url": "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
        "key_file": _key_path("gemini"),
    },
}

ANTHROPIC_URL = PROVIDERS["anthropic"]["url"]
GEMINI_URL_TEMPLATE = PROVIDERS["gemini"]["url"]


def load_key(path):
    """Return the API key for a configured key file path.

    `<STEM>_API_KEY` in the environment wins over the file itself, so
    `config/openai.key` is shadowed by `OPENAI_API_KEY`. A `None` path or a
    missing file yields `None`.
    """
    if not path:
        return None

    stem = os.path.splitext(os.path.basename(path))[0]
    env_value = os.getenv(f"{stem.upper()}_API_KEY")
    if env_value:
        return env_value

    if not os.path.isfile(path):
        return None

    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip() or None
