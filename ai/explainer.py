# ai/explainer.py
# CodeMentor — Code explanation via the generation API.
# Builds the prompt, makes one upstream call, scores the reply heuristically.
# Imports from: ai/gemini_client.py, schemas/explanation.py, utils/*

import math
from typing import Optional

from ai.gemini_client import MISSING_KEY_MESSAGE, TextGenerator
from schemas.explanation import ExplanationRequest, ExplanationResult
from utils.config import Settings
from utils.constants import (
    CONFIDENCE_BASE,
    CONFIDENCE_LENGTH_DIVISOR,
    CONFIDENCE_LINE_PENALTY,
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    EXPLAIN_MAX_TOKENS,
    EXPLAIN_MODE_DETAILED,
    EXPLAIN_TEMPERATURE,
    FALLBACK_EXPLANATION,
)
from utils.errors import ConfigurationError, UpstreamStatusError
from utils.logger import get_logger

log = get_logger("ai.explainer")


# ─────────────────────────────────────────────
# Prompt builder
# ─────────────────────────────────────────────

def build_explanation_prompt(
    code:        str,
    language:    str,
    line_number: Optional[int] = None,
    mode:        str = "simple",
) -> str:
    """Pure function of its arguments. Detailed mode asks for a five-part breakdown."""
    if mode == EXPLAIN_MODE_DETAILED:
        prompt = (
            f"Explain this {language} code in detail, including:\n"
            "1. What each line does\n"
            "2. The algorithm/logic being used\n"
            "3. Time and space complexity\n"
            "4. Potential improvements\n"
            "5. Common pitfalls to avoid\n"
            "\n"
            f"Code:\n{code}"
        )
        focus = "Focus specifically on line {n}:"
    else:
        prompt = f"Explain this {language} code in simple terms:\n{code}"
        focus = "Focus on line {n}:"

    if line_number:
        prompt = f"{prompt}\n\n{focus.format(n=line_number)}"
    return prompt


# ─────────────────────────────────────────────
# Confidence heuristic
# Crude proxy: longer code lowers it, a longer reply raises it.
# Not a probability. The formula is fixed; clients display it verbatim.
# ─────────────────────────────────────────────

def count_lines(code: str) -> int:
    """Newline-separated segments; a trailing newline counts as an extra line."""
    return len(code.split("\n"))


def compute_confidence(line_count: int, reply_length: int) -> int:
    raw = (
        CONFIDENCE_BASE
        - CONFIDENCE_LINE_PENALTY * line_count
        + reply_length / CONFIDENCE_LENGTH_DIVISOR
    )
    clamped = min(CONFIDENCE_MAX, max(CONFIDENCE_MIN, raw))
    # halves round up, e.g. 81.5 -> 82
    return int(math.floor(clamped + 0.5))


# ─────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────

class ExplanationService:
    """
    explain() failure policy:
        - no API key            → ConfigurationError, before any network call
        - transport failure     → UpstreamError propagates
        - non-2xx / empty reply → fixed fallback text, request still succeeds
    """

    def __init__(self, settings: Settings, client: TextGenerator) -> None:
        self._settings = settings
        self._client   = client

    def explain(self, request: ExplanationRequest) -> ExplanationResult:
        if not self._settings.has_gemini_key:
            log.error("explain_missing_api_key")
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        prompt = build_explanation_prompt(
            code=request.code,
            language=request.language,
            line_number=request.line_number,
            mode=request.mode,
        )
        line_count = count_lines(request.code)

        log.info(
            "explain_call_start",
            language=request.language,
            mode=request.mode,
            line_number=request.line_number,
            line_count=line_count,
        )

        try:
            reply = self._client.generate_text(
                prompt,
                temperature=EXPLAIN_TEMPERATURE,
                max_output_tokens=EXPLAIN_MAX_TOKENS,
            )
        except UpstreamStatusError as exc:
            log.warning("explain_upstream_status", status=exc.status)
            reply = ""

        if not reply.strip():
            log.warning("explain_fallback_used", reply_length=len(reply))
            explanation = FALLBACK_EXPLANATION
            reply = ""
        else:
            explanation = reply

        confidence = compute_confidence(line_count, len(reply))

        log.info(
            "explain_call_success",
            explanation_length=len(explanation),
            confidence=confidence,
        )
        return ExplanationResult(explanation=explanation, confidence=confidence)
