"""
Point the app at a throwaway SQLite file before anything imports logit.db,
then create the schema once for the whole run.
"""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="logit-tests-")
os.environ.setdefault("DATABASE_URL_OVERRIDE", f"sqlite:///{os.path.join(_DB_DIR, 'logit.db')}")

from logit.db import Base, engine  # noqa: E402
from logit import models  # noqa: E402,F401

Base.metadata.create_all(engine)
