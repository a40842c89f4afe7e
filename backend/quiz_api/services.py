"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate the repository,
the question bank and the grading rules. Services are intentionally thin:
they perform validation, execute domain logic and persist the submission
aggregate via the repository. Failures are raised as `errors.QuizError`
subclasses so controllers never have to translate them.
"""

import logging
import secrets
from datetime import datetime
from pathlib import Path
from typing import Dict, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import Session

from . import database, models, repositories
from .errors import AuthError, ConflictError, NotFoundError, ValidationError
from .schemas import AnswerDetail, QuestionId, parse_override
from .utils.formatting import format_responses
from .utils.grading import grade_answers, override_delta
from .utils.question_bank import load_questions, question_ids

logger = logging.getLogger("quiz_api.services")

MANUAL_SENTINEL = "manual"
TYPE_MANUAL = "Manual"
TYPE_AUTOMATIC = "Automático"
MSG_FEEDBACK_FIELDS = "Por favor indica el correo, la pregunta y la puntuación."
MSG_FEEDBACK_SCORE = "La puntuación debe ser 0 o 1."


def spanish_timestamp(now: Optional[datetime] = None) -> str:
    """Format `now` the way es-ES locales print dates: `18/10/2026, 9:05:03`."""
    now = now or datetime.now()
    return f"{now.day}/{now.month}/{now.year}, {now.hour}:{now:%M:%S}"


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class SubmissionService:
    """Accept participant submissions and serve their results."""
    def __init__(self, session: Session, questions_path: Path):
        self.session = session
        self.questions_path = questions_path
        self.repo = repositories.SubmissionRepository(session)

    def submit(
        self,
        name: Optional[str],
        surname: Optional[str],
        email: Optional[str],
        ip: Optional[str],
        submission_type: Optional[str],
        answers: Optional[Mapping[QuestionId, Optional[str]]],
        justifications: Optional[Mapping[QuestionId, Optional[str]]],
    ) -> dict:
        """Grade and store a submission.

        Raises `ValidationError` for missing name/surname/email or unknown
        question ids and `ConflictError` when the email or ip already has
        a submission. Nothing is written on either failure. The response
        deliberately omits the score until an administrator reviews it.
        """
        name, surname, email = _clean(name), _clean(surname), _clean(email)
        if not name or not surname or not email:
            raise ValidationError()
        ip = _clean(ip) or None
        answers = dict(answers or {})
        justifications = {k: v for k, v in (justifications or {}).items() if v is not None}

        questions = load_questions(self.questions_path)
        known = set(question_ids(questions))
        for qid in list(answers) + list(justifications):
            if qid not in known:
                raise ValidationError(f"Pregunta desconocida: {qid}.")

        existing = self.repo.find_by_email_or_ip(email, ip)
        if existing:
            logger.warning("duplicate submission blocked existing_id=%s", existing.id)
            raise ConflictError()

        score, detail = grade_answers(questions, answers, justifications)
        row = models.Submission(
            first_name=name,
            last_name=surname,
            email=email,
            ip=ip,
            submission_type=TYPE_MANUAL if submission_type == MANUAL_SENTINEL else TYPE_AUTOMATIC,
            submitted_at=spanish_timestamp(),
            score=score,
            total=len(questions),
            answers={qid: d.model_dump(mode="json", exclude_none=True) for qid, d in detail.items()},
            justifications=justifications,
            corrected=False,
        )
        try:
            self.repo.create(row)
        except IntegrityError:
            # lost a race against a concurrent submission for the same email/ip
            logger.warning("duplicate submission rejected by unique constraint")
            raise ConflictError()
        logger.info("submission stored id=%s score=%s/%s", row.id, score, row.total)
        return {"success": True, "message": "Cuestionario enviado. La corrección está en proceso."}

    def check_results(self, email: Optional[str]) -> dict:
        """Return the stored grading state for `email`.

        Raises `NotFoundError` (a soft failure) when no submission exists.
        """
        row = self.repo.get_by_email(_clean(email)) if _clean(email) else None
        if not row:
            raise NotFoundError()
        return {
            "success": True,
            "corrected": row.corrected,
            "score": row.score,
            "total": row.total,
            "answers": row.answers,
            "justifications": row.justifications,
        }


class AdminService:
    """Password-protected review, correction and reset operations."""
    def __init__(self, session: Session, admin_password: Optional[str]):
        self.session = session
        self.admin_password = admin_password
        self.repo = repositories.SubmissionRepository(session)

    def _authorize(self, password: Optional[str]):
        """Raise `AuthError` unless `password` matches the configured secret.

        With no secret configured every attempt is rejected.
        """
        if not self.admin_password or password is None:
            raise AuthError()
        if not secrets.compare_digest(password.encode("utf-8"), self.admin_password.encode("utf-8")):
            logger.warning("admin password mismatch")
            raise AuthError()

    def list_all_responses(self, password: Optional[str]) -> str:
        """Return every submission rendered as text, ascending by id."""
        self._authorize(password)
        return format_responses(self.repo.list_all())

    def update_feedback(
        self,
        password: Optional[str],
        email: Optional[str],
        question_id: Optional[QuestionId],
        override,
        comment: Optional[str],
    ) -> dict:
        """Record an administrator verdict and comment for one question.

        The aggregate score is measured against the auto-grade flag stored
        at submission time, so repeating a verdict leaves it unchanged. The
        submission is marked corrected. `override` may be an `OverrideScore`
        or the raw posted value; it is checked only after authorization.
        """
        self._authorize(password)
        email, question_id = _clean(email), _clean(question_id)
        if not email or not question_id or override is None:
            raise ValidationError(MSG_FEEDBACK_FIELDS)
        try:
            override = parse_override(override)
        except ValueError:
            raise ValidationError(MSG_FEEDBACK_SCORE)
        row = self.repo.get_by_email(email)
        if not row:
            raise NotFoundError()
        answers: Dict[str, dict] = dict(row.answers or {})
        if question_id not in answers:
            raise ValidationError("Pregunta no encontrada en el cuestionario.")
        detail = AnswerDetail.model_validate(answers[question_id])
        delta = override_delta(detail.correct, override, detail.score)
        detail.score = override
        detail.comment = comment or ""
        answers[question_id] = detail.model_dump(mode="json", exclude_none=True)
        row.answers = answers
        flag_modified(row, "answers")
        row.score = row.score + delta
        row.corrected = True
        self.repo.save(row)
        logger.info("feedback updated id=%s question=%s override=%s delta=%s", row.id, question_id, int(override), delta)
        return {"success": True, "message": "Corrección actualizada."}

    def reset_all(self, password: Optional[str]) -> dict:
        """Delete every submission, compact storage and re-provision the table."""
        self._authorize(password)
        removed = self.repo.delete_all()
        bind = self.session.get_bind()
        database.compact(bind)
        database.create_db_and_tables(bind)
        logger.info("quiz reset removed=%s", removed)
        return {"success": True, "message": "Cuestionario reseteado correctamente."}
