import sqlite3


def test_save_requires_template(client, auth_headers, quotation_body):
    res = client.post("/quotations", headers=auth_headers, json=quotation_body)
    assert res.status_code == 404
    assert res.json()["message"] == "No quotation template found for user"


def test_save_rejects_invalid_documents(client, auth_headers, with_template):
    for body in (
        {"customer": "Ravi Traders", "quotation_data": []},
        {"quotation_data": [{"product_name": "Desk", "quantity": 1, "per_item_price": 10}]},
        {"customer": "Ravi Traders", "quotation_data": "Desk"},
        ["not", "an", "object"],
    ):
        res = client.post("/quotations", headers=auth_headers, json=body)
        assert res.status_code == 400, body
        assert res.json() == {
            "status": "error",
            "error": "invalid_request",
            "message": "Invalid quotation data",
        }


def test_save_requires_authentication(client, quotation_body):
    assert client.post("/quotations", json=quotation_body).status_code == 401


def test_numbering_increments_per_organization(client, signup, quotation_body):
    owner = signup()
    other = signup(email="someone@else.com", company_name="Else")
    for headers in (owner, other):
        client.put("/templates/me", headers=headers, json={"template_data": {}})

    a = client.post("/quotations", headers=owner, json=quotation_body).json()
    b = client.post("/quotations", headers=owner, json=quotation_body).json()
    c = client.post("/quotations", headers=other, json=quotation_body).json()

    assert a["status"] == "success"
    assert a["message"] == "Quotation saved successfully"
    assert a["total_amount"] == 2950.0
    assert (a["quote_number"], b["quote_number"], c["quote_number"]) == ("QT-1", "QT-2", "QT-1")

    org = client.get("/organizations/me", headers=owner).json()
    assert org["org_data"]["quotationNumbering"]["currentNumber"] == 3


def test_total_amount_defaults_to_zero(client, auth_headers, with_template, quotation_body):
    del quotation_body["total_amount"]
    res = client.post("/quotations", headers=auth_headers, json=quotation_body)
    assert res.status_code == 200
    assert res.json()["total_amount"] == 0


def test_detail_includes_template_and_organization(client, auth_headers, with_template, quotation_body):
    saved = client.post("/quotations", headers=auth_headers, json=quotation_body).json()

    res = client.get(f"/quotations/{saved['quotation_id']}", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["quote_number"] == "QT-1"
    assert data["quotation_data"]["customer"] == "Ravi Traders"
    assert data["quotation_data"]["quotation_data"][0]["product_name"] == "Office Chair"
    assert data["template"]["template_data"]["headerText"] == "QUOTATION"
    assert data["organization"]["name"] == "Acme"


def test_detail_is_scoped_to_the_organization(client, signup, quotation_body):
    owner = signup()
    client.put("/templates/me", headers=owner, json={"template_data": {}})
    saved = client.post("/quotations", headers=owner, json=quotation_body).json()

    stranger = signup(email="stranger@else.com")
    res = client.get(f"/quotations/{saved['quotation_id']}", headers=stranger)
    assert res.status_code == 404
    assert res.json()["message"] == "Quotation not found"


def test_list_newest_first(client, auth_headers, with_template, quotation_body):
    client.post("/quotations", headers=auth_headers, json=quotation_body)
    quotation_body["customer"] = "Meera Stores"
    client.post("/quotations", headers=auth_headers, json=quotation_body)

    body = client.get("/quotations", headers=auth_headers).json()
    assert body["count"] == 2
    assert [q["customer"] for q in body["quotations"]] == ["Meera Stores", "Ravi Traders"]
    assert body["quotations"][0]["quote_number"] == "QT-2"


def test_preview_renders_printable_html(client, auth_headers, company, quotation_body):
    client.put("/organizations/me", headers=auth_headers, json=company)
    client.put(
        "/templates/me",
        headers=auth_headers,
        json={"template_data": {"content": {"notesContent": "Delivery in 7 days"}}},
    )
    saved = client.post("/quotations", headers=auth_headers, json=quotation_body).json()

    res = client.get(f"/quotations/{saved['quotation_id']}/preview", headers=auth_headers)
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")

    html = res.text
    assert "<title>Quotation_QT-1_" in html
    assert "Ravi Traders" in html
    assert "Acme Interiors" in html
    assert "12 MG Road, Bengaluru, Karnataka, India, 560001" in html
    assert "Delivery in 7 days" in html
    # 2 x 500 + 1 x 1500, GST at 18%, grand total as stored
    assert "₹2,500.00" in html
    assert "₹450.00" in html
    assert "₹2,950.00" in html
    assert "window.print()" in html
    assert "@page { size: A4;" in html


def test_preview_of_unknown_quotation(client, auth_headers):
    res = client.get("/quotations/does-not-exist/preview", headers=auth_headers)
    assert res.status_code == 404


def test_preview_without_template_shows_not_found_page(client, auth_headers, with_template, quotation_body, tmp_path):
    saved = client.post("/quotations", headers=auth_headers, json=quotation_body).json()
    with sqlite3.connect(tmp_path / "test.db") as conn:
        conn.execute("UPDATE quotations SET template_id = NULL WHERE id = ?", (saved["quotation_id"],))

    res = client.get(f"/quotations/{saved['quotation_id']}/preview", headers=auth_headers)
    assert res.status_code == 404
    assert res.headers["content-type"].startswith("text/html")
    assert "Template Not Found" in res.text


def test_save_stores_the_document_as_sent(client, auth_headers, with_template, quotation_body):
    quotation_body["total_amount"] = None
    quotation_body["quotation_data"].append({"product_name": "Sample", "quantity": 0, "per_item_price": 0})
    quotation_body["notes"] = "call before delivery"

    res = client.post("/quotations", headers=auth_headers, json=quotation_body)
    assert res.status_code == 200, res.text
    assert res.json()["total_amount"] == 0

    stored = client.get(f"/quotations/{res.json()['quotation_id']}", headers=auth_headers).json()
    assert stored["data"]["quotation_data"] == quotation_body
    quantity = stored["data"]["quotation_data"]["quotation_data"][0]["quantity"]
    assert quantity == 2 and isinstance(quantity, int)


def test_save_accepts_non_string_customer(client, auth_headers, with_template, quotation_body):
    quotation_body["customer"] = 42
    res = client.post("/quotations", headers=auth_headers, json=quotation_body)
    assert res.status_code == 200, res.text

    listed = client.get("/quotations", headers=auth_headers).json()
    assert listed["quotations"][0]["customer"] == 42
