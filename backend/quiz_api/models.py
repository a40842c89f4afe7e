"""SQLModel data models.

The service stores a single table, `responses`, with one row per
participant. Per-question detail and justifications are JSON columns keyed
by question identifier.
"""

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Submission(SQLModel, table=True):
    """A participant's quiz submission and its grading state.

    Fields:
    - `email`: unique per submission
    - `ip`: unique per submission when known
    - `answers`: question id -> {value, correct, message, score?, comment?}
    - `justifications`: question id -> free text
    - `corrected`: set once an administrator overrides any question
    """
    __tablename__ = "responses"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    email: str = Field(index=True, unique=True, nullable=False)
    ip: Optional[str] = Field(default=None, index=True, unique=True)
    submission_type: str
    submitted_at: str
    score: int = 0
    total: int = 0
    answers: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    justifications: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    corrected: bool = False
