from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Settings are read at import time by the db module, so the environment must be
# in place before any auth_backend import.
_TMP = Path(tempfile.mkdtemp(prefix="auth-backend-tests-"))
os.environ.setdefault("JWT_ACCESS_TOKEN_SECRET", "test-secret-0123456789abcdef0123456789abcdef")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP / 'auth.db'}")
os.environ.setdefault("LOG_FILE", str(_TMP / "app.log"))
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402

from auth_backend.infrastructure.db import ENGINE, Base, init_db  # noqa: E402


@pytest.fixture()
def reset_database():
    init_db()
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)
