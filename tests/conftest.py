import os
import tempfile
from pathlib import Path

# must be set before config is imported so the static mount sees it
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="playcenter-uploads-")

import mongomock
import pytest
from fastapi.testclient import TestClient

import config
import database
from main import app


@pytest.fixture
def db(monkeypatch):
    mock_db = mongomock.MongoClient()["playcenter_test"]
    monkeypatch.setattr(database, "_db", mock_db)
    return mock_db


@pytest.fixture
def upload_dir():
    path = Path(config.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    yield path
    for f in path.iterdir():
        f.unlink()


@pytest.fixture
def client(db, upload_dir):
    return TestClient(app)


@pytest.fixture
def lenient_client(db, upload_dir):
    """Client that returns 500 responses instead of re-raising server errors."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def category(client):
    return client.post("/api/categories", json={"name": "Puzzle"}).json()


@pytest.fixture
def reservation(client):
    payload = {
        "adultName": "Dana",
        "kidName": "Sam",
        "phone": "0501234567",
        "adultAge": 35,
        "kidAge": 7,
        "bookingDate": "2026-10-20",
        "bookingHour": "16:00",
        "duration": 2,
        "games": ["Lego", "Chess"],
    }
    return client.post("/api/reservations", json=payload).json()
