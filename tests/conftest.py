import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'pinsound' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import stubs as test_stubs


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep real vendor credentials from leaking into tests."""
    for name in (
        "SPOTIPY_CLIENT_ID",
        "SPOTIPY_CLIENT_SECRET",
        "GOOGLE_VISION_API_KEY",
        "GEMINI_API_KEY",
        "PINTEREST_CLIENT_ID",
        "PINTEREST_CLIENT_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def app(tmp_path):
    import app as app_module

    db_path = Path(tmp_path) / "test.sqlite"
    application = app_module.create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path.as_posix()}",
            "SPOTIPY_CLIENT_ID": "test-client-id",
            "SPOTIPY_CLIENT_SECRET": "test-client-secret",
            "PINTEREST_CLIENT_ID": "pin-client",
            "PINTEREST_CLIENT_SECRET": "pin-secret",
            "GOOGLE_VISION_API_KEY": None,
            "GEMINI_API_KEY": None,
            "FRONTEND_URL": "http://frontend.test",
        }
    )
    yield application


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def stubs():
    return test_stubs


@pytest.fixture
def client(app):
    return app.test_client()
