import os

# must be set before the app modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def token(client):
    r = client.post("/auth/signup", json={"name": "Alice", "email": "alice@example.com", "password": "secret123"})
    return r.json()["data"]["token"]


@pytest.fixture
def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def electronics(client):
    r = client.post("/categories", json={"name": "Electronics"})
    return r.json()["data"]
