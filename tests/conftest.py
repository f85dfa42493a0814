import os
import tempfile

# Point the app at a throwaway database and log dir before it is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="canonical-url-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR}/test.db")
os.environ.setdefault("CANONICAL_LOG_DIR", os.path.join(_TMP_DIR, "logs"))
os.environ.setdefault("BASE_URL", "http://testserver")

import pytest  # noqa: E402

from canonical_url.db import Base, SessionLocal, engine  # noqa: E402
from canonical_url import models  # noqa: E402,F401


@pytest.fixture
def clean_database():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


@pytest.fixture
def session(clean_database):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
