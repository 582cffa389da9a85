# ai/gemini_client.py
# CodeMentor — Minimal client for the Gemini generateContent REST endpoint.
# One POST per call. No retries, no streaming.
# Imports from: utils/config.py, utils/errors.py, utils/logger.py

from typing import Any, Optional, Protocol

import requests

from utils.config import Settings
from utils.constants import GEMINI_BASE_URL, GEMINI_MODEL, GEMINI_TIMEOUT_S
from utils.errors import ConfigurationError, UpstreamError, UpstreamStatusError
from utils.logger import get_logger

log = get_logger("ai.gemini_client")

MISSING_KEY_MESSAGE = "GEMINI_API_KEY not found"


class TextGenerator(Protocol):
    """Anything with GeminiClient.generate_text's signature; tests pass fakes."""

    def generate_text(self, prompt: str, temperature: float, max_output_tokens: int) -> str: ...


# ─────────────────────────────────────────────
# Response helpers
# ─────────────────────────────────────────────

def extract_candidate_text(data: Any) -> str:
    """
    Returns candidates[0].content.parts[0].text, or "" when any step of that
    path is missing or has the wrong type.
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


def _upstream_error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))
    return ""


# ─────────────────────────────────────────────
# Client
# ─────────────────────────────────────────────

class GeminiClient:
    """
    Wraps the generateContent endpoint.

    generate_text() raises:
        ConfigurationError  : no API key configured (no request is made)
        UpstreamError       : timeout, connection failure, non-JSON body
        UpstreamStatusError : the API answered with a non-2xx status
    """

    def __init__(
        self,
        api_key:   Optional[str],
        model:     str = GEMINI_MODEL,
        base_url:  str = GEMINI_BASE_URL,
        timeout_s: float = GEMINI_TIMEOUT_S,
    ) -> None:
        self.api_key   = api_key
        self.model     = model
        self.base_url  = base_url.rstrip("/")
        self.timeout_s = timeout_s

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_s=settings.gemini_timeout_s,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate_text(
        self,
        prompt:            str,
        temperature:       float,
        max_output_tokens: int,
    ) -> str:
        if not self.api_key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature":     temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }
        headers = {
            "Content-Type":   "application/json",
            "x-goog-api-key": self.api_key,
        }

        try:
            resp = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout_s)
        except requests.exceptions.Timeout:
            log.warning("gemini_timeout", model=self.model, timeout_s=self.timeout_s)
            raise UpstreamError("Generation API request timed out")
        except requests.exceptions.ConnectionError:
            log.error("gemini_connection_error", model=self.model)
            raise UpstreamError("Could not connect to the generation API")
        except requests.exceptions.RequestException as exc:
            log.error("gemini_request_failed", model=self.model, error=str(exc))
            raise UpstreamError(f"Generation API request failed: {exc}")

        if not resp.ok:
            detail = _upstream_error_message(resp)
            log.warning("gemini_http_error", model=self.model, status=resp.status_code, detail=detail)
            message = f"Generation API returned HTTP {resp.status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise UpstreamStatusError(message, status=resp.status_code)

        try:
            data = resp.json()
        except ValueError:
            log.error("gemini_non_json_body", model=self.model, preview=resp.text[:200])
            raise UpstreamError("Generation API returned a non-JSON body")

        text = extract_candidate_text(data)
        log.debug("gemini_call_complete", model=self.model, text_length=len(text))
        return text
