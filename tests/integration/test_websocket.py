"""
Integration Tests - Messaging WebSocket

Drives the real socket endpoint with Starlette's TestClient. Messages
are sent over REST and observed on the socket.
"""

import pytest
from starlette.websockets import WebSocketDisconnect

WS_PATH = "/api/ws"


class TestMessagingWebSocket:
    """Tests for the live session channel."""

    def test_connection_established(self, socket_env):
        token = socket_env.token_for(socket_env.seed.student.user_id)

        with socket_env.client.websocket_connect(f"{WS_PATH}?token={token}") as ws:
            hello = ws.receive_json()

        assert hello["type"] == "connection_established"
        assert hello["connectionId"]
        assert hello["timestamp"]

    def test_invalid_token_rejected(self, socket_env):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with socket_env.client.websocket_connect(f"{WS_PATH}?token=not-a-jwt") as ws:
                ws.receive_json()

        assert exc_info.value.code == 1008

    def test_join_and_receive_new_message(self, socket_env):
        seed = socket_env.seed
        token = socket_env.token_for(seed.student.user_id)

        with socket_env.client.websocket_connect(f"{WS_PATH}?token={token}") as ws:
            ws.receive_json()
            ws.send_json({"type": "join_session", "sessionId": seed.session.id})
            joined = ws.receive_json()
            assert joined == {
                "type": "joined_session",
                "sessionId": seed.session.id,
                "message": "Successfully joined session",
            }

            response = socket_env.client.post(
                "/api/v1/messages/send",
                json={"sessionId": seed.session.id, "content": "Hello from your mentor"},
                headers=socket_env.headers_for(seed.mentor.user_id),
            )
            assert response.status_code == 201

            pushed = ws.receive_json()

        assert pushed["type"] == "new_message"
        assert pushed["message"]["senderType"] == "mentor"
        assert pushed["message"]["senderName"] == "Dr. Mehta"

    def test_refused_join_is_silent(self, socket_env):
        seed = socket_env.seed

        with socket_env.client.websocket_connect(
            f"{WS_PATH}?studentId={seed.anonymous_student.id}"
        ) as ws:
            ws.receive_json()
            ws.send_json({"type": "join_session", "sessionId": seed.session.id})
            ws.send_json({"type": "join_session", "sessionId": seed.anonymous_session.id})

            # The first reply belongs to the permitted join
            reply = ws.receive_json()

        assert reply["type"] == "joined_session"
        assert reply["sessionId"] == seed.anonymous_session.id

    def test_invalid_format_reply(self, socket_env):
        token = socket_env.token_for(socket_env.seed.student.user_id)

        with socket_env.client.websocket_connect(f"{WS_PATH}?token={token}") as ws:
            ws.receive_json()
            ws.send_text("{broken")
            reply = ws.receive_json()

        assert reply == {"type": "error", "message": "Invalid message format"}

    def test_emergency_alert_pushed(self, socket_env):
        seed = socket_env.seed
        token = socket_env.token_for(seed.mentor.user_id)

        with socket_env.client.websocket_connect(f"{WS_PATH}?token={token}") as ws:
            ws.receive_json()
            ws.send_json({"type": "join_session", "sessionId": seed.anonymous_session.id})
            ws.receive_json()

            socket_env.client.post(
                "/api/v1/messages/send",
                params={"studentId": seed.anonymous_student.id},
                json={"sessionId": seed.anonymous_session.id, "content": "I think about suicide"},
            )

            first, second = ws.receive_json(), ws.receive_json()

        assert first["type"] == "new_message"
        assert second["type"] == "emergency_alert"

    def test_disconnect_releases_membership(self, socket_env):
        seed = socket_env.seed
        token = socket_env.token_for(seed.student.user_id)

        with socket_env.client.websocket_connect(f"{WS_PATH}?token={token}") as ws:
            ws.receive_json()
            ws.send_json({"type": "join_session", "sessionId": seed.session.id})
            ws.receive_json()
            assert len(socket_env.container.membership.members_of(seed.session.id)) == 1

        # Disconnect handling runs on the app loop; poll the readiness probe
        for _ in range(50):
            ready = socket_env.client.get("/api/v1/health/ready").json()
            if ready["components"]["activeSessions"] == 0:
                break

        assert socket_env.container.membership.members_of(seed.session.id) == frozenset()
        assert ready["components"]["connections"] == 0
