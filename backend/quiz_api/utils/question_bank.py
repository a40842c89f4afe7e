"""Question bank loader.

The bank is a JSON array of questions stored as a static asset. It is
read on every call so edits to the file take effect without a restart.
"""

import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError as SchemaError

from ..errors import QuestionBankError
from ..schemas import Question, QuestionId

_LOGGER = logging.getLogger("quiz_api.questions")


def load_questions(path: Path) -> List[Question]:
    """Read and validate the question bank at `path`.

    Raises `QuestionBankError` if the file is missing, unreadable, not
    valid JSON, or does not match the question schema.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        _LOGGER.error("question bank unreadable at %s: %s", path, exc)
        raise QuestionBankError() from exc
    if not isinstance(raw, list):
        _LOGGER.error("question bank at %s is not a JSON array", path)
        raise QuestionBankError()
    try:
        questions = [Question.model_validate(item) for item in raw]
    except SchemaError as exc:
        _LOGGER.error("question bank at %s failed validation: %s", path, exc)
        raise QuestionBankError() from exc
    ids = question_ids(questions)
    if len(set(ids)) != len(ids):
        _LOGGER.error("question bank at %s has duplicate ids", path)
        raise QuestionBankError()
    return questions


def question_ids(questions: List[Question]) -> List[QuestionId]:
    """Return question identifiers in bank order."""
    return [q.id for q in questions]
