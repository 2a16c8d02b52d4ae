def _log(**overrides):
    body = {
        "speaker": "user",
        "text": "Two office chairs at five hundred",
        "timestamp": "2024-05-01T10:00:05Z",
        "session_id": "user_session_1",
        "room_name": "user_session_1",
    }
    body.update(overrides)
    return body


def test_missing_fields(client, auth_headers):
    body = _log()
    del body["text"]
    res = client.post("/conversation-logs", headers=auth_headers, json=body)
    assert res.status_code == 400
    assert res.json()["message"] == (
        "Missing required fields: speaker, text, timestamp, session_id, room_name"
    )


def test_invalid_speaker(client, auth_headers):
    res = client.post("/conversation-logs", headers=auth_headers, json=_log(speaker="bot"))
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid speaker value. Must be one of: user, agent, system"


def test_store_and_list_in_timestamp_order(client, auth_headers):
    later = client.post(
        "/conversation-logs",
        headers=auth_headers,
        json=_log(speaker="agent", text="Added.", timestamp="2024-05-01T10:00:09Z", metadata={"turn": 2}),
    )
    assert later.status_code == 200
    assert later.json()["status"] == "success"
    assert isinstance(later.json()["log_id"], int)

    client.post("/conversation-logs", headers=auth_headers, json=_log())
    client.post(
        "/conversation-logs",
        headers=auth_headers,
        json=_log(session_id="user_session_2", room_name="user_session_2"),
    )

    body = client.get(
        "/conversation-logs", headers=auth_headers, params={"session_id": "user_session_1"}
    ).json()
    assert body["status"] == "success"
    assert body["count"] == 2
    assert [log["speaker"] for log in body["logs"]] == ["user", "agent"]
    assert body["logs"][1]["metadata"] == {"turn": 2}

    everything = client.get("/conversation-logs", headers=auth_headers).json()
    assert everything["count"] == 3


def test_logs_are_private_to_the_user(client, signup):
    owner = signup()
    client.post("/conversation-logs", headers=owner, json=_log())

    other = signup(email="someone@else.com")
    assert client.get("/conversation-logs", headers=other).json()["count"] == 0
