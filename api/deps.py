# api/deps.py
# CodeMentor — FastAPI dependencies. Services and the session factory live on
# app.state (set by main.create_app) so tests can swap them per app instance.

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from ai.explainer import ExplanationService
from ai.problem_generator import ProblemGenerationService
from database.db import session_scope


def get_explanation_service(request: Request) -> ExplanationService:
    return request.app.state.explanation_service


def get_problem_service(request: Request) -> ProblemGenerationService:
    return request.app.state.problem_service


def get_db(request: Request) -> Generator[Session, None, None]:
    with session_scope(request.app.state.session_factory) as db:
        yield db
