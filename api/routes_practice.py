# api/routes_practice.py
# CodeMentor — Practice problems:
#   POST    /generate-practice
#   GET     /practice-problems
#   GET     /practice-problems/{problem_id}
# OPTIONS is answered by api/responses.cors_middleware.
# Imports from: ai/problem_generator.py, api/deps.py, database/models.py,
#               schemas/problem.py, utils/*

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ai.problem_generator import ProblemGenerationService
from api.deps import get_db, get_problem_service
from database.models import PracticeProblem
from schemas.problem import PracticeProblemList, PracticeProblemRecord, PracticeProblemRequest
from utils.constants import PROBLEM_LIST_DEFAULT_LIMIT, PROBLEM_LIST_MAX_LIMIT
from utils.errors import NotFoundError, PersistenceError
from utils.logger import get_logger

router = APIRouter(tags=["practice"])
log    = get_logger("api.routes_practice")


# ─────────────────────────────────────────────
# POST /generate-practice
# ─────────────────────────────────────────────

@router.post(
    "/generate-practice",
    response_model=PracticeProblemRecord,
    summary="Generate and store a new practice problem",
)
def generate_practice(
    payload: PracticeProblemRequest,
    service: ProblemGenerationService = Depends(get_problem_service),
) -> PracticeProblemRecord:
    """
    Asks the generation API for a problem, stores it, and returns the stored
    row. Not idempotent: every call inserts a new problem.
    """
    return service.generate(payload)


# ─────────────────────────────────────────────
# GET /practice-problems
# ─────────────────────────────────────────────

@router.get(
    "/practice-problems",
    response_model=PracticeProblemList,
    summary="List the most recently generated practice problems",
)
def list_practice_problems(
    limit: int = Query(PROBLEM_LIST_DEFAULT_LIMIT, ge=1, le=PROBLEM_LIST_MAX_LIMIT),
    db:    Session = Depends(get_db),
) -> PracticeProblemList:
    """Newest first; rows with equal timestamps are ordered by id, descending."""
    try:
        total = db.scalar(select(func.count()).select_from(PracticeProblem)) or 0
        rows = db.scalars(
            select(PracticeProblem)
            .order_by(PracticeProblem.created_at.desc(), PracticeProblem.id.desc())
            .limit(limit)
        ).all()
    except SQLAlchemyError as exc:
        log.error("list_problems_failed", error=str(exc))
        raise PersistenceError("Failed to load practice problems")

    log.info("list_problems", limit=limit, returned=len(rows), total=total)
    return PracticeProblemList(
        total=total,
        problems=[PracticeProblemRecord.from_row(r) for r in rows],
    )


# ─────────────────────────────────────────────
# GET /practice-problems/{problem_id}
# ─────────────────────────────────────────────

@router.get(
    "/practice-problems/{problem_id}",
    response_model=PracticeProblemRecord,
    summary="Get one stored practice problem",
)
def get_practice_problem(
    problem_id: str,
    db:         Session = Depends(get_db),
) -> PracticeProblemRecord:
    try:
        row: Optional[PracticeProblem] = db.get(PracticeProblem, problem_id)
    except SQLAlchemyError as exc:
        log.error("get_problem_failed", problem_id=problem_id, error=str(exc))
        raise PersistenceError("Failed to load practice problem")

    if row is None:
        raise NotFoundError(f"Practice problem '{problem_id}' not found.")
    return PracticeProblemRecord.from_row(row)
