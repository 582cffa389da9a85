# ai/problem_generator.py
# CodeMentor — Practice-problem generation via the generation API.
# Prompt → one upstream call → JSON extraction → validation → one insert.
# Imports from: ai/gemini_client.py, database/*, schemas/problem.py, utils/*

import json
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ai.gemini_client import MISSING_KEY_MESSAGE, TextGenerator
from database.db import session_scope
from database.models import PracticeProblem
from schemas.problem import GeneratedProblem, PracticeProblemRecord, PracticeProblemRequest
from utils.config import Settings
from utils.constants import PROBLEM_MAX_TOKENS, PROBLEM_TEMPERATURE
from utils.errors import ConfigurationError, InvalidResponseFormatError, PersistenceError
from utils.logger import get_logger

log = get_logger("ai.problem_generator")

INVALID_FORMAT_MESSAGE = "Invalid response format"


# ─────────────────────────────────────────────
# Prompt builder
# ─────────────────────────────────────────────

_RESPONSE_SHAPE = (
    "{\n"
    '  "title": "Problem title",\n'
    '  "description": "Clear problem description",\n'
    '  "starterCode": "Starter code template",\n'
    '  "solution": "Complete solution",\n'
    '  "testCases": [{"input": "test input", "output": "expected output"}],\n'
    '  "hints": ["hint1", "hint2"],\n'
    '  "concepts": ["concept1", "concept2"]\n'
    "}"
)


def build_problem_prompt(language: str, difficulty: str, topic: str) -> str:
    return (
        f"Generate a {difficulty} level {language} programming practice problem about {topic}.\n"
        "\n"
        "Return a JSON object with:\n"
        f"{_RESPONSE_SHAPE}"
    )


# ─────────────────────────────────────────────
# JSON extraction
# ─────────────────────────────────────────────

def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the "}" closing the "{" at `start`, or None if it never closes."""
    depth     = 0
    in_string = False
    escaped   = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i

    return None


def extract_json_object(text: str) -> Optional[str]:
    """
    Returns the first balanced {...} span. Braces inside JSON string literals
    do not count. A "{" that is never closed is skipped and the scan resumes
    at the next "{". Returns None when no "{" closes.

    Best-effort: any balanced span is accepted, including one that is not
    the object the prompt asked for.
    """
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find("{", start + 1)
    return None


def _summarise_validation(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:3]:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts)


def parse_generated_problem(text: str) -> GeneratedProblem:
    """
    Turns raw model text into a GeneratedProblem.
    Raises InvalidResponseFormatError when no object is found, it is not
    valid JSON, or its shape does not match.
    """
    span = extract_json_object(text)
    if span is None:
        raise InvalidResponseFormatError(INVALID_FORMAT_MESSAGE)

    try:
        obj: Any = json.loads(span)
    except json.JSONDecodeError as exc:
        raise InvalidResponseFormatError(f"{INVALID_FORMAT_MESSAGE}: {exc.msg}")

    try:
        return GeneratedProblem.model_validate(obj)
    except ValidationError as exc:
        raise InvalidResponseFormatError(f"{INVALID_FORMAT_MESSAGE}: {_summarise_validation(exc)}")


# ─────────────────────────────────────────────
# Persistence
# ─────────────────────────────────────────────

def _store_problem(
    problem: GeneratedProblem,
    request: PracticeProblemRequest,
    db:      Session,
) -> PracticeProblem:
    row = PracticeProblem(
        title=problem.title,
        description=problem.description,
        starter_code=problem.starter_code,
        solution=problem.solution,
        test_cases=json.dumps([tc.model_dump() for tc in problem.test_cases]),
        hints=json.dumps(problem.hints),
        concepts=json.dumps(problem.concepts),
        language=request.language,
        difficulty=request.difficulty,
        topic=request.topic,
        created_by=request.user_id,
    )
    db.add(row)
    db.flush()
    return row


# ─────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────

class ProblemGenerationService:
    """
    generate() writes exactly one row on success and none on any failure:
        - no API key           → ConfigurationError, before any network call
        - transport / status   → UpstreamError / UpstreamStatusError
        - unusable model text  → InvalidResponseFormatError
        - insert failure       → PersistenceError
    """

    def __init__(
        self,
        settings:        Settings,
        client:          TextGenerator,
        session_factory: sessionmaker[Session],
    ) -> None:
        self._settings        = settings
        self._client          = client
        self._session_factory = session_factory

    def generate(self, request: PracticeProblemRequest) -> PracticeProblemRecord:
        if not self._settings.has_gemini_key:
            log.error("generate_missing_api_key")
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        log.info(
            "generate_call_start",
            language=request.language,
            difficulty=request.difficulty,
            topic=request.topic,
            user_id=request.user_id,
        )

        prompt = build_problem_prompt(request.language, request.difficulty, request.topic)
        raw = self._client.generate_text(
            prompt,
            temperature=PROBLEM_TEMPERATURE,
            max_output_tokens=PROBLEM_MAX_TOKENS,
        )

        try:
            problem = parse_generated_problem(raw)
        except InvalidResponseFormatError as exc:
            log.warning("generate_parse_failed", error=exc.message, raw_preview=raw[:300])
            raise

        try:
            with session_scope(self._session_factory) as db:
                row = _store_problem(problem, request, db)
                record = PracticeProblemRecord.from_row(row)
        except SQLAlchemyError as exc:
            log.exception("generate_store_failed", error=str(exc))
            raise PersistenceError("Failed to store practice problem")

        log.info(
            "generate_call_success",
            problem_id=record.id,
            test_case_count=len(record.test_cases),
            hint_count=len(record.hints),
        )
        return record
