# api/routes_explain.py
# CodeMentor — POST /explain-code. OPTIONS is answered by api/responses.cors_middleware.
# Imports from: ai/explainer.py, api/deps.py, schemas/explanation.py

from fastapi import APIRouter, Depends

from ai.explainer import ExplanationService
from api.deps import get_explanation_service
from schemas.explanation import ExplanationRequest, ExplanationResponse

router = APIRouter(tags=["explain"])


@router.post(
    "/explain-code",
    response_model=ExplanationResponse,
    summary="Explain a code snippet, optionally focusing on one line",
)
def explain_code(
    payload: ExplanationRequest,
    service: ExplanationService = Depends(get_explanation_service),
) -> ExplanationResponse:
    """
    Returns `{explanation, confidence, provenance}`.

    An empty or error reply from the generation API still returns 200 with
    the fallback explanation. A missing API key or a transport failure
    returns 400 `{error, code}`.
    """
    result = service.explain(payload)
    return ExplanationResponse(
        explanation=result.explanation,
        confidence=result.confidence,
    )
