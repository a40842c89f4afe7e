"""Repository classes encapsulating database operations.

The service has a single aggregate, the participant submission, so there
is a single repository. It returns SQLModel objects and performs
commits/refreshes where appropriate.
"""

from typing import List, Optional

from sqlalchemy import delete, or_
from sqlmodel import Session, select

from . import models


class SubmissionRepository:
    """CRUD operations for `Submission` rows."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, submission: models.Submission) -> models.Submission:
        """Persist a new submission and return the managed instance.

        Unique constraint violations propagate as `IntegrityError` after
        the session has been rolled back.
        """
        self.session.add(submission)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(submission)
        return submission

    def get_by_email(self, email: str) -> Optional[models.Submission]:
        """Return the submission for `email` or `None` if not found."""
        stmt = select(models.Submission).where(models.Submission.email == email)
        return self.session.exec(stmt).first()

    def find_by_email_or_ip(self, email: str, ip: Optional[str]) -> Optional[models.Submission]:
        """Return any submission matching `email`, or `ip` when one is given."""
        cond = models.Submission.email == email
        if ip:
            cond = or_(cond, models.Submission.ip == ip)
        stmt = select(models.Submission).where(cond)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.Submission]:
        """Return every submission ordered by ascending id."""
        stmt = select(models.Submission).order_by(models.Submission.id)
        return self.session.exec(stmt).all()

    def save(self, submission: models.Submission) -> models.Submission:
        """Flush changes made to a loaded submission."""
        self.session.add(submission)
        self.session.commit()
        self.session.refresh(submission)
        return submission

    def delete_all(self) -> int:
        """Delete every submission and return the number of rows removed."""
        result = self.session.connection().execute(delete(models.Submission))
        self.session.commit()
        return result.rowcount
