def test_defaults_when_no_template(client, auth_headers):
    res = client.get("/templates/me", headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["exists"] is False
    assert body["template_data"]["primaryColor"] == "#3b82f6"
    assert body["template_data"]["content"]["customerSectionTitle"] == "Bill To"
    assert body["template_data"]["advanced"]["pageMargin"] == 20


def test_upsert_updates_the_same_row(client, auth_headers):
    first = client.put(
        "/templates/me",
        headers=auth_headers,
        json={
            "template_name": "Showroom",
            "template_data": {"primaryColor": "#111111", "table": {"showHSN": True}},
        },
    )
    assert first.status_code == 200, first.text

    second = client.put(
        "/templates/me",
        headers=auth_headers,
        json={"template_data": {"primaryColor": "#222222", "ribbon": "gold"}},
    )
    assert second.json()["id"] == first.json()["id"]

    body = client.get("/templates/me", headers=auth_headers).json()
    assert body["exists"] is True
    assert body["template_name"] == "Showroom"
    assert body["template_data"]["primaryColor"] == "#222222"
    assert body["template_data"]["table"]["showHSN"] is False
    # keys the server does not model survive
    assert body["template_data"]["ribbon"] == "gold"


def test_invalid_choice_is_rejected(client, auth_headers):
    res = client.put(
        "/templates/me",
        headers=auth_headers,
        json={"template_data": {"pageSize": "A0"}},
    )
    assert res.status_code == 422
