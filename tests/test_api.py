def register(client, username, password="secret"):
    response = client.post("/api/register", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.json()


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_register_twice_returns_400(client):
    register(client, "alice", "secret1")

    response = client.post("/api/register", json={"username": "alice", "password": "other"})

    assert response.status_code == 400


def test_register_missing_fields_returns_400(client):
    assert client.post("/api/register", json={"username": "alice"}).status_code == 400
    assert client.post("/api/register", json={"username": "", "password": "x"}).status_code == 400


def test_login_failure_returns_401(client):
    register(client, "alice", "secret1")

    response = client.post("/api/login", json={"username": "alice", "password": "nope"})

    assert response.status_code == 401


def test_chat_scenario(client):
    alice = register(client, "alice", "secret1")
    bob = register(client, "bob", "secret2")

    login = client.post("/api/login", json={"username": "alice", "password": "secret1"}).json()
    assert login["user"] == alice
    assert login["sessionId"]

    users = client.get("/api/users", params={"currentUserId": bob["id"]}).json()
    assert users == [{**alice, "online": True}]

    sent = client.post(
        "/api/messages", json={"senderId": bob["id"], "receiverId": alice["id"], "text": "hi"}
    ).json()
    assert sent["read"] is False

    messages = client.get(f"/api/messages/{alice['id']}/{bob['id']}").json()
    assert [(m["text"], m["read"]) for m in messages] == [("hi", False)]

    response = client.post("/api/messages/read", json={"userId": alice["id"], "senderId": bob["id"]})
    assert response.json() == {"success": True, "updated": 1}

    messages = client.get(f"/api/messages/{alice['id']}/{bob['id']}").json()
    assert messages[0]["read"] is True

    client.post("/api/logout", json={"sessionId": login["sessionId"]})
    users = client.get("/api/users", params={"currentUserId": bob["id"]}).json()
    assert users[0]["online"] is False


def test_messages_since_last_id(client):
    ids = [
        client.post("/api/messages", json={"senderId": "a", "receiverId": "b", "text": text}).json()["id"]
        for text in ("m1", "m2", "m3")
    ]

    response = client.get("/api/messages/a/b", params={"lastMessageId": ids[0]})

    assert [m["id"] for m in response.json()] == ids[1:]


def test_message_missing_text_returns_400(client):
    response = client.post("/api/messages", json={"senderId": "a", "receiverId": "b"})

    assert response.status_code == 400


def test_heartbeat_unknown_session_is_ok(client):
    assert client.post("/api/heartbeat", json={"sessionId": "missing"}).json() == {"success": True}


def test_typing_indicator(client):
    client.post("/api/typing", json={"userId": "a", "receiverId": "b", "isTyping": True})
    assert client.get("/api/typing/a/b").json() == {"isTyping": True}
    assert client.get("/api/typing/b/a").json() == {"isTyping": False}

    client.post("/api/typing", json={"userId": "a", "receiverId": "b", "isTyping": False})
    assert client.get("/api/typing/a/b").json() == {"isTyping": False}


def test_call_flow(client):
    offer = {"type": "offer", "sdp": "o"}
    call_id = client.post(
        "/api/call/offer",
        json={"callerId": "a", "receiverId": "b", "offer": offer, "callType": "video"},
    ).json()["callId"]

    check = client.get("/api/call/check/b").json()
    assert check["incomingCall"]["id"] == call_id
    assert check["incomingCall"]["offer"] == offer
    assert check["incomingCall"]["callType"] == "video"
    assert check["activeCall"] is None

    assert client.post("/api/call/answer", json={"callId": call_id, "answer": {"sdp": "a"}}).status_code == 200
    assert client.post(
        "/api/call/ice-candidate", json={"callId": call_id, "userId": "a", "candidate": {"c": 1}}
    ).status_code == 200

    check = client.get("/api/call/check/b", params={"lastCheck": 0}).json()
    assert check["activeCall"]["status"] == "active"
    assert [c["candidate"] for c in check["iceCandidates"]] == [{"c": 1}]
    assert client.get("/api/call/check/a").json()["iceCandidates"] == []

    assert client.post("/api/call/end", json={"callId": call_id, "userId": "a"}).json() == {"success": True}
    check = client.get("/api/call/check/b").json()
    assert check["activeCall"] is None
    assert check["endedCall"]["status"] == "ended"
    assert check["endedCall"]["endedBy"] == "a"


def test_call_errors(client):
    assert client.post("/api/call/offer", json={"callerId": "a", "offer": {}}).status_code == 400
    assert client.post("/api/call/answer", json={"callId": "nope", "answer": {}}).status_code == 404
    assert client.post(
        "/api/call/ice-candidate", json={"callId": "nope", "userId": "a", "candidate": "c"}
    ).status_code == 404
    assert client.post("/api/call/reject", json={"callId": "nope"}).json() == {"success": True}
    assert client.post("/api/call/end", json={"callId": "nope"}).json() == {"success": True}


def test_storage_failure_returns_500(client, db, monkeypatch):
    from barta.core.exceptions import StorageError

    def failing_write(records):
        raise StorageError("Failed to write collection messages: disk full")

    monkeypatch.setattr(db.messages, "_write", failing_write)

    response = client.post("/api/messages", json={"senderId": "a", "receiverId": "b", "text": "hi"})

    assert response.status_code == 500
    assert "disk full" in response.json()["detail"]


def test_login_with_overlong_password_returns_401(client):
    register(client, "alice", "secret1")

    response = client.post("/api/login", json={"username": "alice", "password": "x" * 200})

    assert response.status_code == 401


def test_register_with_overlong_password_returns_400(client):
    response = client.post("/api/register", json={"username": "alice", "password": "x" * 200})

    assert response.status_code == 400
