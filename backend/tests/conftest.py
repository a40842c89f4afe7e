import os
import tempfile
from pathlib import Path

import pytest

# Point the app at throwaway storage and a fixed question bank before it is imported.
_TMP = Path(tempfile.mkdtemp(prefix="quiz_api_tests_"))
DATA_DIR = Path(__file__).resolve().parent / "data"
ADMIN_PASSWORD = "test-admin"
os.environ["ENV"] = "dev"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["QUESTIONS_PATH"] = str(DATA_DIR / "questions.json")
os.environ["ADMIN_PASSWORD"] = ADMIN_PASSWORD

from sqlmodel import Session  # noqa: E402

from quiz_api.database import engine, create_db_and_tables  # noqa: E402
from quiz_api.repositories import SubmissionRepository  # noqa: E402


@pytest.fixture(autouse=True)
def clean_store():
    """Start every test with an empty `responses` table."""
    create_db_and_tables()
    with Session(engine) as session:
        SubmissionRepository(session).delete_all()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def questions_path():
    return DATA_DIR / "questions.json"
