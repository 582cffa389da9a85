# schemas/problem.py
# CodeMentor — Pydantic models for practice problems.
# Used by: api/routes_practice.py, ai/problem_generator.py
# Imports from: pydantic only.

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─────────────────────────────────────────────
# Shared sub-models
# ─────────────────────────────────────────────

class ProblemTestCase(BaseModel):
    """
    Single example case. Models sometimes emit numbers or lists as
    input/output; those are stored as their JSON text.
    """
    model_config = ConfigDict(extra="forbid")

    input:  str
    output: str

    @field_validator("input", "output", mode="before")
    @classmethod
    def render_as_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return json.dumps(v)


# ─────────────────────────────────────────────
# Request — POST /generate-practice
# ─────────────────────────────────────────────

class PracticeProblemRequest(BaseModel):
    model_config = _CAMEL

    language:   str = Field(..., min_length=1, max_length=64)
    difficulty: str = Field(..., min_length=1, max_length=32)
    topic:      str = Field(..., min_length=1, max_length=200)
    user_id:    str = Field(..., min_length=1, max_length=128)

    @field_validator("language", "difficulty", "topic", "user_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


# ─────────────────────────────────────────────
# Generated problem — the object parsed out of model text.
# Rejects missing and unexpected keys before anything is persisted.
# ─────────────────────────────────────────────

class GeneratedProblem(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    title:        str = Field(..., max_length=300)
    description:  str
    starter_code: str
    solution:     str
    test_cases:   list[ProblemTestCase] = Field(..., min_length=1)
    hints:        list[str]
    concepts:     list[str]

    @field_validator("title", "description", "solution")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("hints")
    @classmethod
    def drop_blank_hints(cls, v: list[str]) -> list[str]:
        return [h.strip() for h in v if h.strip()]

    @field_validator("concepts")
    @classmethod
    def unique_concepts(cls, v: list[str]) -> list[str]:
        """Concepts behave as a set; first occurrence wins, order kept."""
        seen: set[str] = set()
        out: list[str] = []
        for concept in v:
            c = concept.strip()
            if c and c.lower() not in seen:
                seen.add(c.lower())
                out.append(c)
        return out


# ─────────────────────────────────────────────
# Stored record — returned by POST /generate-practice and the GET routes
# ─────────────────────────────────────────────

class PracticeProblemRecord(BaseModel):
    model_config = _CAMEL

    id:           str
    title:        str
    description:  str
    starter_code: str
    solution:     str
    test_cases:   list[ProblemTestCase]
    hints:        list[str]
    concepts:     list[str]
    language:     str
    difficulty:   str
    topic:        str
    created_by:   str
    created_at:   datetime

    @classmethod
    def from_row(cls, row: Any) -> "PracticeProblemRecord":
        """
        Builds a record from a PracticeProblem ORM row (list columns are JSON
        text). Rows are written in UTC, but SQLite hands timestamps back
        without an offset, so a naive created_at is read as UTC.
        """
        created_at = row.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=row.id,
            title=row.title,
            description=row.description,
            starter_code=row.starter_code,
            solution=row.solution,
            test_cases=json.loads(row.test_cases),
            hints=json.loads(row.hints),
            concepts=json.loads(row.concepts),
            language=row.language,
            difficulty=row.difficulty,
            topic=row.topic,
            created_by=row.created_by,
            created_at=created_at,
        )


class PracticeProblemList(BaseModel):
    """GET /practice-problems response body."""
    total:    int
    problems: list[PracticeProblemRecord]
