import os
import tempfile

# Point the app at a throwaway database before anything imports config.
_TEST_DIR = tempfile.mkdtemp(prefix="vidyavichar-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from app import app
from core.database import SessionLocal, engine
from models.base import Base


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def register(client, name, role, email=None, password="correct horse"):
    """Register a user and return its public record plus auth headers."""
    email = email or f"{name.lower().replace(' ', '.')}@example.edu"
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {"user": body["user"], "headers": {"Authorization": f"Bearer {body['token']}"}}


def create_class(client, owner, name="Linear Algebra", description="Vectors and matrices", subject="Mathematics"):
    response = client.post(
        "/api/classes",
        json={"name": name, "description": description, "subject": subject},
        headers=owner["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


def post_question(client, author, class_id, text="What is an eigenvector, intuitively?"):
    response = client.post(
        "/api/questions",
        json={"text": text, "classId": class_id},
        headers=author["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def teacher(client):
    return register(client, "Asha Rao", "teacher")


@pytest.fixture
def other_teacher(client):
    return register(client, "Vikram Iyer", "teacher")


@pytest.fixture
def student(client):
    return register(client, "Meera Nair", "student")


@pytest.fixture
def ta(client):
    return register(client, "Kabir Das", "TA")
