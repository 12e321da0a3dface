"""HTTP surface around the session store."""


def test_health_reports_store_backend(client):
    assert client.get("/api/health").json() == {"ok": True, "store": "memory"}


def test_create_then_fetch_session(client):
    response = client.post("/api/session")
    assert response.status_code == 201
    session_id = response.json()["sessionId"]

    session = client.get(f"/api/session/{session_id}").json()
    assert session["id"] == session_id
    assert isinstance(session["createdAt"], int)


def test_missing_session_is_404(client):
    response = client.get("/api/session/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"detail": "Session not found"}


def test_append_transcript_message(client):
    session_id = client.post("/api/session").json()["sessionId"]
    response = client.post(f"/api/session/{session_id}/messages", json={"role": "agent", "text": " Hello! "})
    assert response.json() == {"sessionId": session_id, "messageCount": 1}

    messages = client.get(f"/api/session/{session_id}").json()["messages"]
    assert messages[0]["role"] == "agent"
    assert messages[0]["text"] == "Hello!"


def test_append_message_rejects_unknown_role(client):
    session_id = client.post("/api/session").json()["sessionId"]
    response = client.post(f"/api/session/{session_id}/messages", json={"role": "robot", "text": "hi"})
    assert response.status_code == 422


def test_patch_brief_merges_and_logs(client):
    session_id = client.post("/api/session").json()["sessionId"]
    client.patch(f"/api/session/{session_id}/brief", json={"constraints": {"size": "large"}})
    response = client.patch(
        f"/api/session/{session_id}/brief",
        json={"rooms": ["living room"], "timeline": "june", "constraints": {"frame": "oak"}},
    )

    brief = response.json()["brief"]
    assert brief["rooms"] == ["living room"]
    assert brief["timeline"] == "june"
    assert brief["constraints"] == {"size": "large", "frame": "oak"}
    approvals = client.get(f"/api/session/{session_id}").json()["approvals"]
    assert approvals[-1]["text"] == "BRIEF_UPDATE constraints, rooms, timeline"


def test_push_to_missing_session_is_404(client):
    response = client.post("/api/session/nobody/prompts", json={"promptId": "style", "title": "Style"})
    assert response.status_code == 404


def test_empty_todo_list_is_rejected(client):
    session_id = client.post("/api/session").json()["sessionId"]
    response = client.post(f"/api/session/{session_id}/todos", json={"items": ["  "]})
    assert response.status_code == 400


def test_dashboard_listing_summarises_sessions(client):
    session_id = client.post("/api/session").json()["sessionId"]
    client.patch(f"/api/session/{session_id}/brief", json={"style": "moody"})

    listing = client.get("/api/sessions").json()
    assert len(listing) == 1
    assert listing[0]["id"] == session_id
    assert listing[0]["brief"]["style"] == "moody"
    assert listing[0]["approvalCount"] == 1
    assert listing[0]["todoCount"] == 0


def test_requests_for_missing_sessions_leave_no_lock_behind(client, store):
    for idx in range(5):
        assert client.post(f"/api/session/ghost{idx}/messages", json={"role": "client", "text": "hi"}).status_code == 404
        assert client.patch(f"/api/session/ghost{idx}/brief", json={"style": "bold"}).status_code == 404
        assert client.post(f"/api/session/ghost{idx}/todos", json={"items": ["Prime walls"]}).status_code == 404

    assert len(store._locks) == 0
    assert client.get("/api/sessions").json() == []
