import os

# Must be set before the application package is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from edumeta.database import create_db_and_tables, create_db_engine
from edumeta.main import create_app


@pytest.fixture()
def engine():
    """A fresh in-memory database per test."""
    engine = create_db_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client():
    app = create_app(database_url="sqlite://")
    with TestClient(app) as c:
        yield c
    app.state.engine.dispose()


@pytest.fixture()
def make_user(client):
    """Create a user through the API and return the response data."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "password": "secret123",
        }
        payload.update(overrides)
        r = client.post("/users", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make


@pytest.fixture()
def make_course(client, make_user):
    def _make(professor_id=None, **overrides):
        if professor_id is None:
            professor_id = make_user(role="professor")["id"]
        payload = {"title": "Intro to Solidity", "professorId": professor_id}
        payload.update(overrides)
        r = client.post("/courses", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make


@pytest.fixture()
def make_lesson(client):
    def _make(course_id, lesson_type="text", title="Lesson"):
        m = client.post("/modules", json={"courseId": course_id, "title": "Module"})
        assert m.status_code == 201, m.text
        r = client.post("/lessons", json={"moduleId": m.json()["data"]["id"], "title": title, "type": lesson_type})
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make
