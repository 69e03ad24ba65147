import os
import tempfile
from datetime import date

import pytest

_TMP_DIR = tempfile.mkdtemp(prefix="rentman-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/rentman_test.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)

from httpx import ASGITransport, AsyncClient  # noqa: E402

from app import app  # noqa: E402
from core.get_db import Base, async_engine  # noqa: E402
from models.utils import utcnow  # noqa: E402


@pytest.fixture
async def db_tables():
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # pooled aiosqlite connections are bound to this test's event loop
    await async_engine.dispose()


@pytest.fixture
async def client(db_tables):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


async def register(client, email="landlord@example.com", password="secret123"):
    res = await client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "confirm_password": password},
    )
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
async def auth_headers(client):
    body = await register(client)
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
async def other_headers(client):
    body = await register(client, email="someone.else@example.com")
    return {"Authorization": f"Bearer {body['token']}"}


def tenant_payload(**overrides):
    payload = {
        "name": "Asha Verma",
        "property_name": "Block A, Flat 2",
        "monthly_rent": 15000,
        "security_deposit": 30000,
        "start_date": "2024-01-01",
        "start_meter_reading": 1250,
        "property_type": "residential",
        "phone_number": "+919876543210",
        "notes": "Pays by UPI",
    }
    payload.update(overrides)
    return payload


def rent_log_payload(tenant_id, **overrides):
    payload = {
        "tenant_id": str(tenant_id),
        "tenant_name": "Asha Verma",
        "date": utcnow().date().isoformat(),
        "rent_paid": 15000,
        "previous_meter_reading": 1250,
        "current_meter_reading": 1380,
        "units": 130,
        "unit_price": 8,
        "meter_bill": 1040,
        "total": 16040,
        "collector": "Ravi",
        "payment_mode": "cash",
        "notes": "",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def tenant(client, auth_headers):
    res = await client.post("/api/tenants/", json=tenant_payload(), headers=auth_headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


@pytest.fixture
def today() -> date:
    return utcnow().date()
