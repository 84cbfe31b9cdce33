"""Provider-specific transport client for LLM requests.

Architectural role:
    Executes HTTP requests against configured model providers and normalizes the
    provider response into a single text string.

Model invocation flow:
    `service.generate_answer` -> `send_request(payload)` -> provider branch
    (OpenAI-compatible / Anthropic / Gemini) -> parsed text.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with
    `REQUEST_TIMEOUT`.

Determinism:
    Provider routing and payload transformation are deterministic for fixed config and
    payload. Output text remains non-deterministic due to remote model inference.

Failure handling model:
    Every failure raises `LLMClientError` with a sanitized, provider-labeled
    message. Callers decide whether the failure is recoverable (routing fallback)
    or fatal (capability execution).
"""

import requests

from career_agents.llm.provider_config import (
    PROVIDER,
    MODEL_NAME,
    PROVIDERS,
    ANTHROPIC_URL,
    GEMINI_URL_TEMPLATE,
    REQUEST_TIMEOUT,
    load_key,
)


class LLMClientError(RuntimeError):
    """Raised when a provider request fails or returns an unusable body."""


def _build_sanitized_http_error(provider_name: str, err: requests.exceptions.RequestException) -> str:
    """Build provider-labeled HTTP error text without exposing raw internals.

    Args:
        provider_name: Active provider label.
        err: Request exception instance.

    Returns:
        Sanitized error string with optional status code.
    """
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    label = str(provider_name or "provider").upper()
    if status_code:
        return f"{label} HTTP ERROR ({status_code})"
    return f"{label} HTTP ERROR"


def _split_system_message(messages: list) -> tuple[str | None, list[dict]]:
    """Separate the system instruction from user/assistant turns."""
    system_prompt = None
    turns = []

    for msg in messages:
        if not isinstance(msg, dict):
            continue

        role = msg.get("role")
        content = msg.get("content", "")

        if role == "system":
            if isinstance(content, str) and content.strip():
                system_prompt = content.strip()
        elif role in ["user", "assistant"]:
            turns.append({"role": role, "content": content})

    return system_prompt, turns


def _send_openai_compatible(payload: dict) -> str:
    config = PROVIDERS[PROVIDER]

    headers = {
        "Content-Type": "application/json"
    }

    if config["key_file"]:
        api_key = load_key(config["key_file"])
        if not api_key:
            raise LLMClientError(f"{PROVIDER.upper()} KEY FILE NOT FOUND")
        headers["Authorization"] = f"Bearer {api_key}"

    response = requests.post(
        config["url"],
        headers=headers,
        json=payload,
        timeout=REQUEST_TIMEOUT,
    )

    response.raise_for_status()
    data = response.json()

    return data["choices"][0]["message"]["content"].strip()


def _send_anthropic(payload: dict) -> str:
    api_key = load_key(PROVIDERS["anthropic"]["key_file"])
    if not api_key:
        raise LLMClientError("ANTHROPIC KEY FILE NOT FOUND")

    headers = {
        "x-api-key": api_key,
        "anthropic-version": "2023-06-01",
        "Content-Type": "application/json",
    }

    system_prompt, turns = _split_system_message(payload.get("messages", []))

    anthropic_payload = {
        "model": payload.get("model", MODEL_NAME),
        "max_tokens": payload.get("max_tokens", 1024),
        "messages": turns,
    }

    if system_prompt:
        anthropic_payload["system"] = system_prompt

    if "temperature" in payload:
        anthropic_payload["temperature"] = payload["temperature"]
    if "top_p" in payload:
        anthropic_payload["top_p"] = payload["top_p"]

    response = requests.post(
        ANTHROPIC_URL,
        headers=headers,
        json=anthropic_payload,
        timeout=REQUEST_TIMEOUT,
    )

    response.raise_for_status()
    data = response.json()

    return data["content"][0]["text"].strip()


def _send_gemini(payload: dict) -> str:
    api_key = load_key(PROVIDERS["gemini"]["key_file"])
    if not api_key:
        raise LLMClientError("GEMINI KEY FILE NOT FOUND")

    url = GEMINI_URL_TEMPLATE.format(model=payload.get("model", MODEL_NAME))

    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }

    system_prompt, turns = _split_system_message(payload.get("messages", []))

    gemini_payload = {
        "contents": [
            {
                "role": "model" if turn["role"] == "assistant" else "user",
                "parts": [{"text": str(turn["content"])}],
            }
            for turn in turns
            if turn["content"]
        ],
    }

    if system_prompt:
        gemini_payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

    generation_config = {}
    if "temperature" in payload:
        generation_config["temperature"] = payload["temperature"]
    if "top_p" in payload:
        generation_config["topP"] = payload["top_p"]
    if "max_tokens" in payload:
        generation_config["maxOutputTokens"] = payload["max_tokens"]
    if generation_config:
        gemini_payload["generationConfig"] = generation_config

    response = requests.post(
        url,
        headers=headers,
        json=gemini_payload,
        timeout=REQUEST_TIMEOUT,
    )

    response.raise_for_status()
    data = response.json()

    return data["candidates"][0]["content"]["parts"][0]["text"].strip()


def send_request(payload: dict) -> str:
    """Send one request to the configured provider and return the response text.

    Args:
        payload: Provider-agnostic chat payload produced by `service`.

    Returns:
        Final response string.

    Provider handling:
        - OpenAI-compatible providers: direct pass-through payload.
        - Anthropic: message remap + optional `system` + default `max_tokens=1024`.
        - Gemini: message remap to `contents`, `systemInstruction`, and
          `generationConfig` mapping.

    Raises:
        LLMClientError: Missing keys, unsupported provider, HTTP/transport errors,
        or response bodies that do not match the provider schema.
    """
    try:
        if PROVIDER == "anthropic":
            return _send_anthropic(payload)

        if PROVIDER == "gemini":
            return _send_gemini(payload)

        if PROVIDER in PROVIDERS:
            return _send_openai_compatible(payload)

        raise LLMClientError(f"INVALID PROVIDER {PROVIDER!r}")

    except requests.exceptions.RequestException as err:
        raise LLMClientError(_build_sanitized_http_error(PROVIDER, err)) from err

    except (KeyError, IndexError, TypeError, ValueError) as err:
        raise LLMClientError(f"{PROVIDER.upper()} MALFORMED RESPONSE") from err
