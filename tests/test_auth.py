from quotify_api.auth.security import AGENT_SCOPE, create_access_token, decode_token


def test_signup_returns_token_and_me_resolves_organization(client, signup):
    headers = signup(email="Ana@Example.com")

    res = client.get("/auth/me", headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["email"] == "ana@example.com"
    assert body["full_name"] == "Owner"
    assert isinstance(body["organization_id"], int)


def test_signup_rejects_duplicate_email(client, signup):
    signup()
    res = client.post("/auth/signup", json={"email": "owner@acme-interiors.com", "password": "another-pass"})
    assert res.status_code == 409
    assert res.json() == {
        "status": "error",
        "error": "conflict",
        "message": "An account with this email already exists",
    }


def test_login(client, signup):
    signup()
    ok = client.post("/auth/login", json={"email": "owner@acme-interiors.com", "password": "s3cret-pass"})
    assert ok.status_code == 200
    assert decode_token(ok.json()["access_token"]).sub == "owner@acme-interiors.com"

    bad = client.post("/auth/login", json={"email": "owner@acme-interiors.com", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid credentials"


def test_me_requires_bearer_token(client):
    assert client.get("/auth/me").status_code == 401
    res = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token"


def test_agent_token_is_limited_to_session_endpoints(client, signup):
    signup()
    agent = {"Authorization": f"Bearer {create_access_token(sub='owner@acme-interiors.com', scope=AGENT_SCOPE)}"}

    assert client.get("/auth/me", headers=agent).status_code == 200
    assert client.get("/conversation-logs", headers=agent).status_code == 200
    assert client.get("/organizations/me", headers=agent).status_code == 403
    assert client.put("/templates/me", headers=agent, json={"template_data": {}}).status_code == 403
