"""
Shared fixtures. The app module builds its database at import time, so the
in-memory SQLite URL has to be in the environment before anything imports it.
"""
import os
from datetime import date

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest  # noqa: E402

from progress import MemoryGateway, ProgressStore  # noqa: E402

FIXED_DAY = date(2024, 3, 7)


@pytest.fixture
def gateway():
    return MemoryGateway()


@pytest.fixture
def store(gateway):
    return ProgressStore(gateway, today=lambda: FIXED_DAY)


@pytest.fixture
def flask_app():
    import app as app_module

    app_module.app.config["TESTING"] = True
    with app_module.app.app_context():
        app_module.progress.reset()
    yield app_module.app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()
