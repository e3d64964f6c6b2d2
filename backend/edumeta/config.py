"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    SQL_ECHO: bool
    LOG_LEVEL: str
    PASSWORD_HASH_ROUNDS: int
    ALLOW_DEV_CORS: bool

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'app.db'}")
        self.SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "29000"))
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self._validate()

    def _validate(self):
        if self.PASSWORD_HASH_ROUNDS < 1:
            raise RuntimeError("PASSWORD_HASH_ROUNDS must be a positive integer")
        if self.ENV != "dev" and self.PASSWORD_HASH_ROUNDS < 10000:
            raise RuntimeError("PASSWORD_HASH_ROUNDS must be at least 10000 in non-dev environments")


settings = Settings()
