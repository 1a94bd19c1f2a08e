"""Shared fixtures: an in-memory database per test and a TestClient bound to it."""

import os
import sys

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from classroll.database import Base, get_db
from classroll.ids import new_id
from classroll.main import app
from classroll.middleware.auth import create_access_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def token_for(account: dict, kind: str, account_type: str) -> str:
    return create_access_token({
        "sub": account["id"],
        "email": account["email"],
        "role": f"{kind}:{account['id']}",
        "type": account_type,
    })


@pytest.fixture
def admin_headers():
    admin = {"id": new_id(), "email": "root@classroll.dev"}
    return bearer(token_for(admin, "admin", "user"))


@pytest.fixture
def factory(client):
    """Creates accounts and catalogue entries through the public API."""
    return Factory(client)


class Factory:
    def __init__(self, client: TestClient):
        self.client = client

    def teacher(self, name="Ada Lovelace", email="ada@school.edu") -> dict:
        resp = self.client.post("/teachers", json={"name": name, "email": email, "password": PASSWORD})
        assert resp.status_code == 201, resp.text
        teacher = resp.json()["teacher"]
        teacher["headers"] = bearer(token_for(teacher, "teacher", "teacher"))
        return teacher

    def user(self, name="Grace Hopper", email="grace@school.edu") -> dict:
        resp = self.client.post("/users", json={"name": name, "email": email, "password": PASSWORD})
        assert resp.status_code == 201, resp.text
        user = resp.json()["user"]
        user["headers"] = bearer(token_for(user, "student", "user"))
        return user

    def course(self, teacher: dict, title="Algorithms") -> str:
        resp = self.client.post(
            "/courses",
            json={
                "title": title,
                "description": "Sorting, searching and graphs",
                "department": "Computer Science",
                "workload": "60h",
            },
            headers=teacher["headers"],
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["courseID"]

    def class_(self, teacher: dict, course_id: str, name="Turma A", semester="2025.1") -> dict:
        resp = self.client.post(
            "/classes",
            json={
                "courseId": course_id,
                "teacherId": teacher["id"],
                "name": name,
                "semester": semester,
                "schedule": "Mon & Wed 19h-21h",
            },
            headers=teacher["headers"],
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["class"]

    def enrollment(self, user: dict, class_id: str) -> dict:
        resp = self.client.post(
            "/enrollments",
            json={"userId": user["id"], "classId": class_id},
            headers=user["headers"],
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["enrollment"]
