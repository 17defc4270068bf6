import os
import tempfile

import pytest

# configuration is read at import time, so the environment goes first
_TMP = tempfile.mkdtemp(prefix="lounge-tests-")
os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["RECEIPT_DIR"] = os.path.join(_TMP, "receipts")
os.environ.setdefault("HOURLY_RATE", "20")
os.environ.setdefault("FREE_MINUTES", "5")
os.environ.setdefault("DOWN_PAYMENT", "50")

from fastapi.testclient import TestClient  # noqa: E402

from main import app  # noqa: E402


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def receipt_dir():
    return os.environ["RECEIPT_DIR"]
