"""Post-generation governance audit.

Purpose:
    Stamp every capability response with explicit pass/fail verdicts and risk
    metrics before it reaches the caller.

Validation model:
    - Always-run checks: confidence threshold and self-reported hallucination risk.
    - Deep validation for content-analysis capabilities: the JSON payload embedded
      in `content` is extracted defensively and inspected for hallucination risk,
      unfaithful rewrite suggestions, quantified achievements, and evidence strength.

Verdict model:
    - `governance_audit`: `"passed"` or `"flagged"`.
    - `audit_flags`: the specific reasons. Unfaithful suggestions replace the
      flag list with `["unfaithful_suggestions", "requires_human_review"]`.
    - Flagged responses are still returned; acting on the flags is the caller's job.

Failure handling:
    A malformed payload is recorded as `content_parse_error` and never raises.

Determinism:
    Deterministic for identical responses, apart from `audit_timestamp`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from career_agents.core.models import AgentResponse
from career_agents.governance.heuristics import extract_json_object


logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.3
HALLUCINATION_RISK_THRESHOLD = 0.7

CONTENT_ANALYSIS_CAPABILITIES = frozenset({"ContentStrengthAgent"})

STATUS_PASSED = "passed"
STATUS_FLAGGED = "flagged"

FLAG_HALLUCINATION_RISK = "hallucination_risk"
FLAG_LOW_CONFIDENCE = "low_confidence"
FLAG_CONTENT_PARSE_ERROR = "content_parse_error"
UNFAITHFUL_OVERRIDE_FLAGS = ("unfaithful_suggestions", "requires_human_review")


@dataclass
class ContentFindings:
    """Outcome of deep validation for one content-analysis payload."""

    parsed: bool
    hallucination_passed: bool | None = None
    unfaithful_count: int = 0


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _is_false(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "false"
    return value is False


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _dict_items(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class GovernanceAuditor:
    """Attach trust and risk verdicts to capability responses."""

    def __init__(
        self,
        confidence_threshold: float = CONFIDENCE_THRESHOLD,
        hallucination_threshold: float = HALLUCINATION_RISK_THRESHOLD,
        content_capabilities: frozenset[str] = CONTENT_ANALYSIS_CAPABILITIES,
    ):
        self.confidence_threshold = confidence_threshold
        self.hallucination_threshold = hallucination_threshold
        self.content_capabilities = content_capabilities

    def audit(self, response: AgentResponse, original_input: str | None = None) -> AgentResponse:
        """Populate `response.audit_metadata` with verdicts and return `response`.

        Args:
            response: Capability output with `confidence_score` already set.
            original_input: Text the response was produced from. Absent or empty
                input skips the hallucination comparison.

        Returns:
            The same response object with metadata merged and overwritten.

        Evaluation order:
            1. Confidence and self-reported hallucination checks.
            2. Deep validation for content-analysis capabilities, which may replace
               the provisional hallucination verdict.
            3. Flag assembly, with the unfaithful-suggestion override applied last.
        """
        metadata = dict(response.audit_metadata or {})

        hallucination_passed = self._check_hallucination(metadata, original_input)
        confidence_passed = response.confidence_score >= self.confidence_threshold

        findings = None
        if response.capability_name in self.content_capabilities:
            findings = self._validate_content_analysis(response.content, metadata)
            if findings.hallucination_passed is not None:
                hallucination_passed = findings.hallucination_passed

        metadata["hallucination_check_passed"] = hallucination_passed
        metadata["confidence_check_passed"] = confidence_passed

        flags: list[str] = []
        if not hallucination_passed:
            flags.append(FLAG_HALLUCINATION_RISK)
        if not confidence_passed:
            flags.append(FLAG_LOW_CONFIDENCE)
        if findings is not None and not findings.parsed:
            flags.append(FLAG_CONTENT_PARSE_ERROR)
        if findings is not None and findings.unfaithful_count > 0:
            flags = list(UNFAITHFUL_OVERRIDE_FLAGS)

        metadata["governance_audit"] = STATUS_FLAGGED if flags else STATUS_PASSED
        metadata["audit_flags"] = flags
        metadata["audit_timestamp"] = datetime.now(timezone.utc).isoformat()

        response.audit_metadata = metadata

        if flags:
            logger.warning(
                "governance_audit capability=%s status=flagged flags=%s confidence=%.2f",
                response.capability_name,
                flags,
                response.confidence_score,
            )
        else:
            logger.info(
                "governance_audit capability=%s status=passed confidence=%.2f",
                response.capability_name,
                response.confidence_score,
            )

        return response

    def _check_hallucination(self, metadata: dict[str, Any], original_input: str | None) -> bool:
        if not original_input:
            return True

        if "hallucinationRisk" in metadata:
            return _as_float(metadata["hallucinationRisk"]) < self.hallucination_threshold

        return True

    def _validate_content_analysis(self, content: str, metadata: dict[str, Any]) -> ContentFindings:
        """Inspect the JSON payload of a content-analysis response.

        Writes `hallucinationRisk`, `unfaithful_suggestions`, `total_suggestions`,
        `has_quantified_achievements`, and `high_evidence_skills_count` when the
        corresponding payload sections exist.
        """
        payload = extract_json_object(content)

        if payload is None:
            metadata["content_parse_error"] = True
            logger.warning("governance_audit content payload could not be parsed")
            return ContentFindings(parsed=False)

        metadata.pop("content_parse_error", None)

        risk = _as_float(payload.get("hallucinationRisk"))
        metadata["hallucinationRisk"] = risk
        findings = ContentFindings(
            parsed=True,
            hallucination_passed=risk < self.hallucination_threshold,
        )

        suggestions = payload.get("suggestions")
        if isinstance(suggestions, list):
            findings.unfaithful_count = sum(
                1 for item in _dict_items(suggestions) if _is_false(item.get("faithful"))
            )
            metadata["unfaithful_suggestions"] = findings.unfaithful_count
            metadata["total_suggestions"] = len(suggestions)

        achievements = payload.get("achievements")
        if isinstance(achievements, list):
            metadata["has_quantified_achievements"] = any(
                _is_true(item.get("quantifiable")) for item in _dict_items(achievements)
            )

        skills = payload.get("skills")
        if isinstance(skills, list):
            metadata["high_evidence_skills_count"] = sum(
                1
                for item in _dict_items(skills)
                if str(item.get("evidenceStrength", "")).upper() == "HIGH"
            )

        return findings
