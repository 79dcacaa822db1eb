"""HTTP and WebSocket surface, backed by the in-memory store and a scripted model."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from chatsync.domain.entities.identity import ASSISTANT_ID, ASSISTANT_NAME
from chatsync.fastapi_app import create_fastapi_app
from chatsync.setup.ioc.container import create_container

from conftest import _service_token

ASSISTANT_THREAD = f"{ASSISTANT_ID}_user-alice"


@pytest.fixture()
def client(ctx, auth_config):
    app = create_fastapi_app(create_container(ctx))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def bob_headers(auth_config):
    return {"Authorization": f"Bearer {_service_token(sub='user-bob', name='Bob')}"}


def sign_in(client, headers):
    response = client.post("/session", headers=headers)
    assert response.status_code == 200
    return response.json()


class TestAuth:
    def test_missing_token(self, client):
        assert client.get("/conversations").status_code in (401, 403)

    def test_expired_token(self, client):
        token = _service_token(ttl=-10)
        response = client.get("/conversations", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_assistant_subject_is_refused(self, client, auth_headers, ctx, llm):
        sign_in(client, auth_headers)
        token = _service_token(sub=ASSISTANT_ID, name=ASSISTANT_NAME)

        response = client.post(
            f"/conversations/thread/{ASSISTANT_THREAD}/messages",
            headers={"Authorization": f"Bearer {token}"},
            json={"text": "I am the assistant"},
        )
        client.portal.call(ctx.tasks.drain)
        history = client.get(
            f"/conversations/thread/{ASSISTANT_THREAD}/messages", headers=auth_headers
        ).json()

        assert response.status_code == 401
        assert history == []
        assert llm.requests == []

    def test_health_is_public(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestSession:
    def test_sign_in_creates_profile_and_assistant_thread(self, client, auth_headers):
        body = sign_in(client, auth_headers)

        assert body["profile"]["display_name"] == "Alice"
        assert body["assistant_thread_id"] == ASSISTANT_THREAD

        conversations = client.get("/conversations", headers=auth_headers).json()
        assert conversations["conversations"][0]["title"] == ASSISTANT_NAME
        assert conversations["conversations"][0]["is_assistant"] is True

    def test_sign_in_is_idempotent(self, client, auth_headers):
        sign_in(client, auth_headers)
        sign_in(client, auth_headers)

        profiles = client.get("/profiles", headers=auth_headers).json()
        assert sorted(p["id"] for p in profiles) == sorted([ASSISTANT_ID, "user-alice"])

    def test_update_profile(self, client, auth_headers):
        sign_in(client, auth_headers)

        response = client.patch(
            "/profiles/me", headers=auth_headers, json={"display_name": "Ali"}
        )

        assert response.status_code == 200
        assert response.json()["display_name"] == "Ali"


class TestConversations:
    def test_room_lifecycle(self, client, auth_headers, bob_headers):
        sign_in(client, auth_headers)
        room = client.post(
            "/conversations/rooms", headers=auth_headers, json={"name": "Team"}
        ).json()

        sent = client.post(
            f"/conversations/room/{room['id']}/messages",
            headers=auth_headers,
            json={"text": "  hello team "},
        )
        history = client.get(f"/conversations/room/{room['id']}/messages", headers=auth_headers)
        forbidden = client.get(f"/conversations/room/{room['id']}/messages", headers=bob_headers)

        assert room["members"] == ["user-alice"]
        assert sent.status_code == 201
        assert [m["text"] for m in history.json()] == ["hello team"]
        assert forbidden.status_code == 403

    def test_resolve_thread_and_titles(self, client, auth_headers, bob_headers):
        sign_in(client, auth_headers)
        sign_in(client, bob_headers)

        thread = client.post(
            "/conversations/threads", headers=auth_headers, json={"target_ids": ["user-bob"]}
        ).json()
        titles = {
            c["id"]: c["title"]
            for c in client.get("/conversations", headers=auth_headers).json()["conversations"]
        }

        assert thread["id"] == "user-alice_user-bob"
        assert thread["created"] is True
        assert titles["user-alice_user-bob"] == "Bob"

    def test_self_thread_is_invalid(self, client, auth_headers):
        response = client.post(
            "/conversations/threads", headers=auth_headers, json={"target_ids": ["user-alice"]}
        )

        assert response.status_code == 422

    def test_unknown_kind(self, client, auth_headers):
        response = client.get("/conversations/channel/x/messages", headers=auth_headers)

        assert response.status_code == 400

    def test_missing_room(self, client, auth_headers):
        response = client.get("/conversations/room/nope/messages", headers=auth_headers)

        assert response.status_code == 404

    def test_assistant_reply(self, client, auth_headers, ctx, llm):
        sign_in(client, auth_headers)
        llm.script("Hi Alice!")

        client.post(
            f"/conversations/thread/{ASSISTANT_THREAD}/messages",
            headers=auth_headers,
            json={"text": "hello"},
        )
        client.portal.call(ctx.tasks.drain)
        history = client.get(
            f"/conversations/thread/{ASSISTANT_THREAD}/messages", headers=auth_headers
        ).json()

        assert [(m["sender_id"], m["text"]) for m in history] == [
            ("user-alice", "hello"),
            (ASSISTANT_ID, "Hi Alice!"),
        ]


class TestAssistantEndpoints:
    def test_summary_of_empty_room(self, client, auth_headers, llm):
        sign_in(client, auth_headers)
        room = client.post(
            "/conversations/rooms", headers=auth_headers, json={"name": "Quiet"}
        ).json()

        response = client.post(f"/assistant/rooms/{room['id']}/summary", headers=auth_headers)

        assert response.json() == {
            "conversation_id": room["id"],
            "text": "No messages to summarize.",
        }
        assert llm.requests == []

    def test_draft_needs_message_from_someone_else(self, client, auth_headers, llm):
        sign_in(client, auth_headers)

        response = client.post(
            f"/assistant/threads/{ASSISTANT_THREAD}/draft", headers=auth_headers
        )

        assert response.json()["text"] == "Couldn't draft a reply."
        assert llm.requests == []


class TestSync:
    def test_rejects_bad_token(self, client):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/sync?token=garbage") as ws:
                ws.receive_json()

    def test_streams_view_and_selection(self, client, auth_headers):
        sign_in(client, auth_headers)
        token = auth_headers["Authorization"].split()[1]

        with client.websocket_connect(f"/sync?token={token}") as ws:
            first = ws.receive_json()
            assert first["type"] == "view"

            ws.send_json({"action": "select", "kind": "thread", "id": ASSISTANT_THREAD})
            view = ws.receive_json()["view"]
            while view["active"] is None:
                view = ws.receive_json()["view"]

            assert view["active"] == {"id": ASSISTANT_THREAD, "kind": "thread"}
            assert view["conversations"][0]["title"] == ASSISTANT_NAME


    def test_malformed_frame_keeps_session_open(self, client, auth_headers):
        sign_in(client, auth_headers)
        token = auth_headers["Authorization"].split()[1]

        with client.websocket_connect(f"/sync?token={token}") as ws:
            assert ws.receive_json()["type"] == "view"

            ws.send_text("not json")
            ws.send_json({"action": "bogus"})
            errors = []
            while len(errors) < 2:
                frame = ws.receive_json()
                if frame["type"] == "error":
                    errors.append(frame["detail"])

        assert errors == ["Expected a JSON object", "Unknown action: bogus"]


class TestMetrics:
    def test_metrics_exposed(self, client, auth_headers):
        sign_in(client, auth_headers)
        room = client.post(
            "/conversations/rooms", headers=auth_headers, json={"name": "Metrics"}
        ).json()
        client.post(
            f"/conversations/room/{room['id']}/messages",
            headers=auth_headers,
            json={"text": "counted"},
        )

        body = client.get("/metrics").text

        assert 'chat_messages_sent_total{kind="room"}' in body
