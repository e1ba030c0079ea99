import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("VAPI_PRIVATE_API_KEY", "test-vapi-key")
os.environ.setdefault("AI_CALL_LIMITS_ENABLED", "false")

from datetime import datetime, timedelta, timezone

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient

from maxfit import db as maxfit_db
from maxfit.main import app
from maxfit.models.user import AccountInDB
from maxfit.services import sessions
from maxfit.services.vapi import VapiClient, vapi_client_factory
from maxfit.stores import accounts
from maxfit.utils.security import get_password_hash

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def mongo(monkeypatch):
    """Swap the real collections for in-memory ones, indexes included."""
    database = mongomock.MongoClient()["maxfit_test"]
    monkeypatch.setattr(maxfit_db, "users_collection", database["users"])
    monkeypatch.setattr(maxfit_db, "otp_verifications_collection", database["otp_verifications"])
    maxfit_db.ensure_indexes()
    yield database


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow, hash once
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
def make_account(password_hash):
    def _make(email="a@x.com", **overrides):
        fields = dict(
            email=email,
            firstName="Ada",
            lastName="Lovelace",
            gender="female",
            passwordHash=password_hash,
            language="en",
            createdAt=datetime.now(timezone.utc),
        )
        fields.update(overrides)
        return accounts.create_account(AccountInDB(**fields))
    return _make


@pytest.fixture
def auth_header():
    def _header(account):
        return {"Authorization": f"Bearer {sessions.issue_token(account)}"}
    return _header


@pytest.fixture
def insert_code(mongo):
    def _insert(email="new@x.com", otp="123456", expires_in=timedelta(minutes=10), verified=False):
        now = datetime.now(timezone.utc)
        result = mongo["otp_verifications"].insert_one({
            "email": email,
            "otp": otp,
            "expiresAt": now + expires_in,
            "verified": verified,
            "createdAt": now,
        })
        return result.inserted_id
    return _insert


@pytest.fixture
def vapi_call():
    def _call(call_id, email, **extra):
        call = {
            "id": call_id,
            "orgId": "org-1",
            "createdAt": "2025-01-01T10:00:00.000Z",
            "type": "webCall",
            "status": "ended",
            "assistantOverrides": {"variableValues": {"email": email}},
        }
        call.update(extra)
        return call
    return _call


@pytest.fixture
def use_vapi():
    """Point the call-history route at a mocked Vapi.

    Pass ``calls`` for a 200 response, ``status``/``text`` for an error
    response, or ``error`` to raise a transport exception.
    """
    seen = []

    def _use(calls=None, status=200, text="", error=None):
        def handler(request: httpx.Request):
            seen.append(request)
            if error is not None:
                raise error
            if status != 200:
                return httpx.Response(status, text=text)
            return httpx.Response(200, json=calls or [])

        transport = httpx.MockTransport(handler)
        app.dependency_overrides[vapi_client_factory] = lambda: (
            lambda: VapiClient("test-vapi-key", base_url="https://vapi.test", transport=transport)
        )
        return seen

    yield _use
    app.dependency_overrides.pop(vapi_client_factory, None)
