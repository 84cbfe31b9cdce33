"""Text heuristics for governance audits.

Purpose:
    Deterministic helpers the auditor (and any other caller) can use without a
    model: defensive JSON extraction from free text, quantifiable-claim detection,
    and a lexical hallucination-risk estimate.

Validation model:
    - Rule-based only (regular expressions and set arithmetic).
    - No I/O, no global state mutation.

Failure handling:
    Extraction helpers never raise on malformed text; they return `None` so the
    caller can record a recoverable parse failure.

Bypass risk:
    The hallucination estimate is lexical. Paraphrased fabrications with no new
    words, numbers, or capitalized names score low.
"""

import json
import re
from typing import Any


QUANTIFIABLE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\d+%",
        r"\$\d+",
        r"\d+\s*(years?|months?|weeks?)",
        r"\d+\s*(people|team members|employees)",
        r"\d+\s*(projects?|clients?|customers?)",
        r"increased?\s+by\s+\d+",
        r"reduced?\s+by\s+\d+",
        r"saved\s+\d+",
        r"improved\s+.*\d+",
    )
]

NUMBER_PATTERN = re.compile(r"\d+")
PROPER_NOUN_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
WORD_SPLIT_PATTERN = re.compile(r"[^a-z0-9]+")

MIN_SIGNIFICANT_WORD_LENGTH = 4

NOVEL_WORD_WEIGHT = 0.5
NEW_NUMBER_PENALTY = 0.3
NEW_PROPER_NOUN_PENALTY = 0.2


def _find_balanced_region(text: str, opener: str, closer: str) -> str | None:
    """Return the first balanced `opener ... closer` region of `text`.

    Brackets inside JSON string literals (including escaped quotes) are ignored,
    so prose such as `"use {braces}"` inside a value does not end the region.
    """
    start = text.find(opener)
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    return None


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Decode the first balanced `{...}` region of free text.

    Args:
        text: Capability output, possibly with prose around a JSON payload.

    Returns:
        Decoded dict, or `None` when no region exists, decoding fails, or the
        decoded value is not an object.
    """
    if not text:
        return None

    region = _find_balanced_region(text, "{", "}")
    if region is None:
        return None

    try:
        decoded = json.loads(region)
    except ValueError:
        return None

    return decoded if isinstance(decoded, dict) else None


def extract_json_array(text: str | None) -> list[Any] | None:
    """Decode the first balanced `[...]` region of free text.

    Returns:
        Decoded list, or `None` on any extraction/decoding failure.
    """
    if not text:
        return None

    region = _find_balanced_region(text, "[", "]")
    if region is None:
        return None

    try:
        decoded = json.loads(region)
    except ValueError:
        return None

    return decoded if isinstance(decoded, list) else None


def contains_quantifiable_claim(text: str | None) -> bool:
    """Return whether text states a measurable result.

    Covers percentages, currency amounts, durations, team/headcount counts,
    project/client counts, and change verbs followed by a number
    ("increased by 20", "reduced by 3", "saved 40", "improved ... 15").
    """
    if not text:
        return False

    return any(pattern.search(text) for pattern in QUANTIFIABLE_PATTERNS)


def extract_significant_words(text: str) -> set[str]:
    """Lowercase alphanumeric tokens longer than three characters."""
    return {
        token
        for token in WORD_SPLIT_PATTERN.split(text.lower())
        if len(token) >= MIN_SIGNIFICANT_WORD_LENGTH
    }


def contains_new_numbers(original: str, generated: str) -> bool:
    original_numbers = set(NUMBER_PATTERN.findall(original))
    return any(number not in original_numbers for number in NUMBER_PATTERN.findall(generated))


def contains_new_proper_nouns(original: str, generated: str) -> bool:
    original_nouns = {match.lower() for match in PROPER_NOUN_PATTERN.findall(original)}
    return any(
        match.lower() not in original_nouns
        for match in PROPER_NOUN_PATTERN.findall(generated)
    )


def calculate_hallucination_risk(original: str | None, generated: str | None) -> float:
    """Estimate how much of `generated` is unsupported by `original`.

    Args:
        original: Source text the generation should be grounded in.
        generated: Model output to score.

    Returns:
        Risk in `[0, 1]`:
        - novel significant words / generated significant words * 0.5
          (0 when the generated text has no significant words),
        - +0.3 when the generated text contains a number absent from the source,
        - +0.2 when it contains a capitalized-word sequence absent from the source,
        - clamped to 1.0.

    Edge cases:
        - `None` for either text returns 1.0 (nothing to compare against).
    """
    if original is None or generated is None:
        return 1.0

    original_words = extract_significant_words(original)
    generated_words = extract_significant_words(generated)

    risk = 0.0
    if generated_words:
        new_words = generated_words - original_words
        risk = len(new_words) / len(generated_words) * NOVEL_WORD_WEIGHT

    if contains_new_numbers(original, generated):
        risk += NEW_NUMBER_PENALTY

    if contains_new_proper_nouns(original, generated):
        risk += NEW_PROPER_NOUN_PENALTY

    return min(risk, 1.0)
