"""Application settings and validation.

Values come from the process environment first and then from an optional
`backend/.env` file, so a deployment can keep the admin password out of
the shell profile.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    ADMIN_PASSWORD: Optional[str]
    DATABASE_URL: str
    QUESTIONS_PATH: Path
    ADMIN_PAGE_PATH: Path
    ALLOW_DEV_CORS: bool
    LOG_LEVEL: str
    HOST: str
    PORT: int

    def __init__(self, env_file: Optional[Path] = None):
        env_file = Path(env_file) if env_file else BACKEND_DIR / ".env"
        # process environment wins over the file
        self._values = {**dotenv_values(env_file), **os.environ}
        self.ENV = self._get("ENV", "dev").lower()
        self.ADMIN_PASSWORD = self._get("ADMIN_PASSWORD") or None
        self.DATABASE_URL = self._get("DATABASE_URL", f"sqlite:///{BACKEND_DIR / 'quiz.db'}")
        self.QUESTIONS_PATH = Path(self._get("QUESTIONS_PATH", str(BACKEND_DIR / "data" / "questions.json")))
        self.ADMIN_PAGE_PATH = Path(self._get("ADMIN_PAGE_PATH", str(BACKEND_DIR / "static" / "admin.html")))
        self.ALLOW_DEV_CORS = self._get("ALLOW_DEV_CORS", "true").lower() == "true"
        self.LOG_LEVEL = self._get("LOG_LEVEL", "INFO").upper()
        self.HOST = self._get("HOST", "127.0.0.1")
        self.PORT = int(self._get("PORT", "3000"))
        self._validate()

    def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._values.get(key)
        return default if value is None else value

    def _validate(self):
        if self.ENV != "dev" and not self.ADMIN_PASSWORD:
            raise RuntimeError("ADMIN_PASSWORD must be set in non-dev environments")


settings = Settings()
