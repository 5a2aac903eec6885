import os
import tempfile

# Settings and the file logger read these at import time
_tmp_dir = tempfile.mkdtemp(prefix="salonsuite-tests-")
os.environ.setdefault("DATABASE_PATH", os.path.join(_tmp_dir, "salonsuite.db"))
os.environ.setdefault("SALONSUITE_LOG_DIR", os.path.join(_tmp_dir, "logs"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salonsuite.core.cache import cache_clear
from salonsuite.core.database import Base, get_db
from salonsuite.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    cache_clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    cache_clear()


def make_tenant(client, tenant_id="glow-studio", **overrides):
    payload = {"id": tenant_id, "name": "Glow Studio"}
    payload.update(overrides)
    response = client.post("/api/v1/tenants/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def tenant(client):
    return make_tenant(client)


@pytest.fixture()
def headers(tenant):
    return {"X-Tenant-ID": tenant["id"]}


@pytest.fixture()
def other_headers(client):
    other = make_tenant(client, tenant_id="silk-spa", name="Silk Spa")
    return {"X-Tenant-ID": other["id"]}


@pytest.fixture()
def customer(client, headers):
    response = client.post(
        "/api/v1/customers/",
        json={"name": "Asha Rao", "phone": "9876543210"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def service(client, headers):
    response = client.post(
        "/api/v1/services/",
        json={"name": "Haircut", "price": "1000", "duration_minutes": 45},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
