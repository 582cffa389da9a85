# database/models.py
# CodeMentor — SQLAlchemy ORM model for generated practice problems.
# Imports from: sqlalchemy, utils/constants.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, String, Text
from sqlalchemy.orm import declarative_base

from utils.constants import PRACTICE_PROBLEMS_TABLE

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


# ─────────────────────────────────────────────
# TABLE: practice_problems
# Written once by ProblemGenerationService; never updated.
# ─────────────────────────────────────────────

class PracticeProblem(Base):
    __tablename__ = PRACTICE_PROBLEMS_TABLE
    __table_args__ = (
        Index("ix_practice_problems_created_at", "created_at"),
    )

    id              = Column(String, primary_key=True, default=_uuid)
    title           = Column(String, nullable=False)
    description     = Column(Text, nullable=False)
    starter_code    = Column(Text, nullable=False, default="")
    solution        = Column(Text, nullable=False)

    # Stored as JSON strings — e.g. '[{"input": "1", "output": "2"}]'
    test_cases      = Column(Text, nullable=False)
    hints           = Column(Text, nullable=False, default="[]")
    concepts        = Column(Text, nullable=False, default="[]")

    language        = Column(String, nullable=False)
    difficulty      = Column(String, nullable=False)
    topic           = Column(String, nullable=False)
    created_by      = Column(String, nullable=False)          # requesting user id
    created_at      = Column(DateTime(timezone=True), nullable=False, default=_now)

    def __repr__(self) -> str:
        return f"<PracticeProblem id={self.id} title={self.title} difficulty={self.difficulty}>"
