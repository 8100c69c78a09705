import os

# Configure the app for tests before anything from portal is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["N8N_WEBHOOK_SECRET"] = "test-n8n-secret"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from portal.auth import get_current_user  # noqa: E402
from portal.database import Base, SessionLocal, engine, get_db  # noqa: E402
from portal.main import app  # noqa: E402
from portal.models import User  # noqa: E402

N8N_SECRET = "test-n8n-secret"
API_KEY = "test-api-key"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def account(db):
    user = User(
        firebase_uid="firebase-uid-1",
        email="owner@example.com",
        full_name="Anna Beispiel",
        company_name="Bistro Beispiel",
        api_key=API_KEY,
        status="active",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def client(db, account):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: account
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def n8n_headers():
    return {"x-n8n-signature": N8N_SECRET}


@pytest.fixture
def api_key_headers():
    return {"x-api-key": API_KEY}
