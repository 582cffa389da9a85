# schemas/explanation.py
# CodeMentor — Pydantic models for POST /explain-code.
# Used by: api/routes_explain.py, ai/explainer.py
# Imports from: pydantic, utils/constants.py

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from utils.constants import CONFIDENCE_MAX, CONFIDENCE_MIN, PROVENANCE_LABEL


class ExplanationRequest(BaseModel):
    """
    Request body. Wire names are camelCase (`lineNumber`); snake_case is
    accepted too.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code:        str
    language:    str = Field(..., min_length=1, max_length=64)
    line_number: Optional[int] = Field(default=None, gt=0)
    mode:        Literal["simple", "detailed"] = "simple"

    @field_validator("code")
    @classmethod
    def code_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("code must not be empty")
        return v

    @field_validator("language")
    @classmethod
    def language_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("language must not be empty")
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def mode_default_when_null(cls, v):
        # explicit null counts as absent
        return "simple" if v is None else v


class ExplanationResult(BaseModel):
    """Service-level result. `confidence` is a heuristic, not a probability."""
    explanation: str
    confidence:  int = Field(..., ge=CONFIDENCE_MIN, le=CONFIDENCE_MAX)


class ExplanationResponse(ExplanationResult):
    provenance: str = PROVENANCE_LABEL
