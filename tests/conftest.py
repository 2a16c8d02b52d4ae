"""
Shared pytest fixtures.

API tests run the real app through TestClient against a throwaway SQLite
database per test; the schema is created by the app's own startup.
"""
import pytest
from fastapi.testclient import TestClient

from quotify_api.core import db
from quotify_api.core.config import settings
from quotify_api.main import app

COMPANY = {
    "companyName": "Acme Interiors",
    "email": "sales@acme-interiors.com",
    "phone": "+91 98765 43210",
    "website": "https://acme-interiors.com",
    "street": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postalCode": "560001",
    "country": "India",
    "gst": "29ABCDE1234F1Z5",
}

QUOTATION = {
    "customer": "Ravi Traders",
    "quotation_data": [
        {"product_name": "Office Chair", "quantity": 2, "per_item_price": 500},
        {"product_name": "Desk", "quantity": 1, "per_item_price": 1500},
    ],
    "total_amount": 2950.0,
}


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setattr(settings, "LIVEKIT_URL", None)
    monkeypatch.setattr(settings, "LIVEKIT_API_KEY", None)
    monkeypatch.setattr(settings, "LIVEKIT_API_SECRET", None)
    monkeypatch.setattr(db, "_engine", None)
    monkeypatch.setattr(db, "_SessionLocal", None)

    with TestClient(app) as c:
        yield c


def _signup(client, email="owner@acme-interiors.com", password="s3cret-pass", company_name="Acme"):
    res = client.post(
        "/auth/signup",
        json={"email": email, "password": password, "full_name": "Owner", "company_name": company_name},
    )
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture
def signup(client):
    def make(**kwargs):
        return _signup(client, **kwargs)

    return make


@pytest.fixture
def auth_headers(signup):
    return signup()


@pytest.fixture
def company():
    return dict(COMPANY)


@pytest.fixture
def quotation_body():
    return {**QUOTATION, "quotation_data": [dict(line) for line in QUOTATION["quotation_data"]]}


@pytest.fixture
def with_template(client, auth_headers):
    res = client.put("/templates/me", headers=auth_headers, json={"template_data": {}})
    assert res.status_code == 200, res.text
    return res.json()
