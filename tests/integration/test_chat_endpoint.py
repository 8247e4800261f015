import uuid

from fastapi.testclient import TestClient

from virtual_agent.main import app


client = TestClient(app)


def new_conversation(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


def send(conversation_id: str, content: str) -> dict:
    response = client.post("/chat", json={"conversation_id": conversation_id, "content": content})
    assert response.status_code == 200
    return response.json()


def test_chat_missing_content_returns_400():
    response = client.post("/chat", json={"conversation_id": "conv-err"})
    assert response.status_code == 400


def test_chat_blank_content_returns_400():
    response = client.post("/chat", json={"conversation_id": "conv-err", "content": "   "})
    assert response.status_code == 400


def test_chat_creates_specification_end_to_end(catalog):
    conversation_id = new_conversation("conv-create")

    payload = {}
    for content in ["specification", "create", "Widget", "A small widget", "1.0", "2024-01-01", "2025-01-01"]:
        payload = send(conversation_id, content)

    assert payload["stage"] == "initial"
    assert payload["error"] is False
    assert "Widget" in payload["messages"][0]["text"]
    assert [option["value"] for option in payload["messages"][0]["options"]][0] == "5_stars"

    [create] = catalog.calls_for("create")
    assert create[2]["u_name"] == "Widget"

    metrics = client.get("/metrics").json()
    assert metrics["total_turns"] >= 7
    assert metrics["turns_by_stage"]["collecting_spec_fields"] >= 5


def test_chat_gateway_failure_is_reported_and_retried(catalog):
    conversation_id = new_conversation("conv-fail")
    catalog.fail_on.add("list")

    send(conversation_id, "offering")
    failed = send(conversation_id, "view")

    assert failed["error"] is True
    assert failed["stage"] == "action_selection"
    assert failed["messages"][0]["text"].startswith("⚠️ Error: ")

    catalog.fail_on.clear()
    retried = send(conversation_id, "view")

    assert retried["error"] is False
    assert retried["stage"] == "item_selection"
    assert retried["messages"][0]["items"][0]["id"] == "off-1"


def test_chat_busy_session_returns_409(catalog):
    from virtual_agent import main

    class HeldLock:
        def locked(self) -> bool:
            return True

    conversation_id = new_conversation("conv-busy")
    send(conversation_id, "specification")
    session = main.session_store.get(conversation_id)
    idle_lock = session.lock
    session.lock = HeldLock()
    try:
        response = client.post("/chat", json={"conversation_id": conversation_id, "content": "create"})
    finally:
        session.lock = idle_lock

    assert response.status_code == 409
    assert session.state.stage.value == "action_selection"


def test_chat_rating_is_counted(catalog):
    conversation_id = new_conversation("conv-rating")

    for content in ["specification", "view", "spec-1"]:
        send(conversation_id, content)
    thanks = send(conversation_id, "4_stars")

    assert thanks["messages"][0]["text"] == "Thanks for your feedback!"
    assert thanks["stage"] == "category_selection"
    assert client.get("/metrics").json()["ratings"].get("4_stars", 0) >= 1
