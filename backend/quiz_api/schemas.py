"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. Request field names follow the public wire
format (`nombre`, `correo`, `studentEmail`, ...), which existing frontends
already send.
"""

from enum import IntEnum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Question identifiers are the string keys of the question bank (e.g. "q1").
QuestionId = str


class QuestionOption(BaseModel):
    """One selectable option of a question."""
    value: str
    text: str


class Question(BaseModel):
    """A question as stored in the static question bank."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    id: QuestionId
    question: Optional[str] = None
    options: List[QuestionOption]
    correct_answer: str = Field(alias="correctAnswer")

    def correct_option_text(self) -> str:
        """Display text of the correct option, or the raw value if no option matches."""
        for opt in self.options:
            if opt.value == self.correct_answer:
                return opt.text
        return self.correct_answer


class OverrideScore(IntEnum):
    """Administrator verdict for a single question."""
    MARK_INCORRECT = 0
    MARK_CORRECT = 1


class AnswerDetail(BaseModel):
    """Stored per-question grading detail."""
    value: str
    correct: bool
    message: str
    score: Optional[OverrideScore] = None
    comment: Optional[str] = None


class SubmissionIn(BaseModel):
    """Payload of `POST /submit`.

    Name fields are optional here so that missing values produce the
    service's own 400 message rather than a schema error.
    """
    nombre: Optional[str] = None
    apellido: Optional[str] = None
    correo: Optional[str] = None
    answers: Optional[Dict[QuestionId, Optional[str]]] = None
    type: Optional[str] = None
    justifications: Optional[Dict[QuestionId, Optional[str]]] = None
    ip: Optional[str] = None


class AdminIn(BaseModel):
    """Payload carrying only the administrator password."""
    password: Optional[str] = None


class FeedbackIn(BaseModel):
    """Payload of `POST /update-feedback`.

    Only the password is read before authorization; the service checks
    the remaining fields once the caller is known to be an administrator.
    """
    password: Optional[str] = None
    studentEmail: Optional[str] = None
    questionNumber: Optional[QuestionId] = None
    score: Optional[Union[int, str]] = None
    comment: Optional[str] = ""


def parse_override(value) -> OverrideScore:
    """Convert a posted verdict (0/1, or "0"/"1" from admin forms) to `OverrideScore`.

    Raises `ValueError` for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid override score: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValueError(f"invalid override score: {value!r}")
        value = int(value)
    return OverrideScore(value)
