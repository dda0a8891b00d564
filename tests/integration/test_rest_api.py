"""
Integration Tests - REST API

Exercises the HTTP surface through httpx against the ASGI app.
"""

from mentorlink.domain.enums import SessionStatus


class TestMessageEndpoints:
    """Tests for /api/v1/messages."""

    async def test_send_and_fetch(self, api_client, auth_headers, seed):
        student = auth_headers(seed.student.user_id)
        mentor = auth_headers(seed.mentor.user_id)

        response = await api_client.post(
            "/api/v1/messages/send",
            json={"sessionId": seed.session.id, "content": "Hello"},
            headers=student,
        )
        assert response.status_code == 201
        message = response.json()["message"]
        assert message["senderType"] == "student"
        assert message["senderId"] == seed.student.id

        response = await api_client.get(f"/api/v1/messages/session/{seed.session.id}", headers=mentor)
        assert response.status_code == 200
        body = response.json()
        assert [m["content"] for m in body["messages"]] == ["Hello"]
        assert body["messages"][0]["senderName"] == "Riya"
        assert body["hasMore"] is False

    async def test_forged_sender_type_ignored(self, api_client, auth_headers, seed):
        response = await api_client.post(
            "/api/v1/messages/send",
            json={
                "sessionId": seed.session.id,
                "content": "Let's begin",
                "senderType": "student",
                "senderId": seed.student.id,
            },
            headers=auth_headers(seed.mentor.user_id),
        )

        assert response.status_code == 201
        assert response.json()["message"]["senderType"] == "mentor"
        assert response.json()["message"]["senderId"] == seed.mentor.id

    async def test_anonymous_send_with_body_student_id(self, api_client, seed):
        response = await api_client.post(
            "/api/v1/messages/send",
            json={"sessionId": seed.anonymous_session.id, "studentId": seed.anonymous_student.id, "content": "hi"},
        )
        assert response.status_code == 201

    async def test_anonymous_token_literal_with_query_student_id(self, api_client, seed):
        response = await api_client.get(
            f"/api/v1/messages/session/{seed.anonymous_session.id}",
            params={"studentId": seed.anonymous_student.id},
            headers={"Authorization": "Bearer anonymous"},
        )
        assert response.status_code == 200

    async def test_outsider_forbidden(self, api_client, auth_headers, seed):
        response = await api_client.get(
            f"/api/v1/messages/session/{seed.session.id}",
            headers=auth_headers(seed.outsider_principal.user_id),
        )
        assert response.status_code == 403
        assert "messages" not in response.json()

    async def test_unknown_session_not_found(self, api_client, auth_headers, seed):
        response = await api_client.get(
            "/api/v1/messages/session/no-such-session",
            headers=auth_headers(seed.student.user_id),
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Session not found"}

    async def test_validation_details(self, api_client, auth_headers, seed):
        response = await api_client.post(
            "/api/v1/messages/send",
            json={"sessionId": seed.session.id, "content": "x" * 4001},
            headers=auth_headers(seed.student.user_id),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation error"
        assert body["details"][0]["field"] == "content"

    async def test_missing_credentials(self, api_client, seed):
        response = await api_client.post(
            "/api/v1/messages/send",
            json={"sessionId": seed.session.id, "content": "hi"},
        )
        assert response.status_code == 401

    async def test_invalid_token_does_not_fall_back(self, api_client, seed):
        response = await api_client.get(
            f"/api/v1/messages/session/{seed.anonymous_session.id}",
            params={"studentId": seed.anonymous_student.id},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    async def test_unread_count(self, api_client, auth_headers, seed):
        mentor = auth_headers(seed.mentor.user_id)
        await api_client.post(
            "/api/v1/messages/send",
            json={"sessionId": seed.session.id, "content": "ping"},
            headers=auth_headers(seed.student.user_id),
        )

        response = await api_client.get("/api/v1/messages/unread", headers=mentor)
        assert response.json()["unreadCount"] == 1

        await api_client.get(f"/api/v1/messages/session/{seed.session.id}", headers=mentor)
        response = await api_client.get("/api/v1/messages/unread", headers=mentor)
        assert response.json()["unreadCount"] == 0


class TestSessionEndpoints:
    """Tests for /api/v1/sessions and /api/v1/students."""

    async def test_anonymous_student_flow(self, api_client, seed):
        response = await api_client.post("/api/v1/students/register", json={"displayName": "Quiet Fox"})
        assert response.status_code == 201
        student_id = response.json()["studentId"]
        assert response.json()["student"]["isAnonymous"] is True

        response = await api_client.post(
            "/api/v1/sessions/request",
            params={"studentId": student_id},
            json={"mentorId": seed.mentor.id, "initialConcern": "stress"},
        )
        assert response.status_code == 201
        session = response.json()["session"]
        assert session["status"] == "active"

        response = await api_client.get("/api/v1/sessions", params={"studentId": student_id})
        assert [s["id"] for s in response.json()["sessions"]] == [session["id"]]

    async def test_mentor_registration(self, api_client, auth_headers, seed):
        payload = {"name": "Avery", "email": "avery@example.org", "specialization": ["anxiety"]}

        response = await api_client.post(
            "/api/v1/mentors/register", json=payload, headers=auth_headers("new-mentor")
        )
        assert response.status_code == 201
        assert response.json()["mentor"]["verificationStatus"] == "pending"

        response = await api_client.post(
            "/api/v1/mentors/register", json=payload, headers=auth_headers("new-mentor")
        )
        assert response.status_code == 409
        assert response.json() == {"error": "Mentor profile already exists"}

        response = await api_client.post("/api/v1/mentors/register", json=payload)
        assert response.status_code == 401

    async def test_available_mentors(self, api_client, seed):
        response = await api_client.get("/api/v1/students/mentors/available")

        assert response.status_code == 200
        body = response.json()
        assert [m["id"] for m in body["mentors"]] == [seed.mentor.id]
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 1}

        response = await api_client.get(
            "/api/v1/students/mentors/available", params={"category": "career"}
        )
        assert response.json()["mentors"] == []

    async def test_request_unavailable_mentor(self, api_client, auth_headers, seed):
        response = await api_client.post(
            "/api/v1/sessions/request",
            json={"mentorId": seed.other_mentor.id},
            headers=auth_headers(seed.student.user_id),
        )
        assert response.status_code == 404

    async def test_detail_complete_rate(self, api_client, auth_headers, seed):
        student = auth_headers(seed.student.user_id)
        mentor = auth_headers(seed.mentor.user_id)

        response = await api_client.get(f"/api/v1/sessions/{seed.session.id}", headers=student)
        assert response.json()["mentor"]["name"] == "Dr. Mehta"

        response = await api_client.post(f"/api/v1/sessions/{seed.session.id}/complete", json={}, headers=student)
        assert response.status_code == 403

        response = await api_client.post(
            f"/api/v1/sessions/{seed.session.id}/complete",
            json={"summary": "Made a plan", "outcome": "resolved"},
            headers=mentor,
        )
        assert response.status_code == 200
        assert response.json()["session"]["status"] == SessionStatus.COMPLETED.value

        response = await api_client.post(
            f"/api/v1/sessions/{seed.session.id}/rate", json={"rating": 5}, headers=student
        )
        assert response.json()["session"]["rating"] == 5

        response = await api_client.post(
            f"/api/v1/sessions/{seed.session.id}/rate", json={"rating": 4}, headers=student
        )
        assert response.status_code == 409

    async def test_escalation_trail(self, api_client, auth_headers, seed):
        await api_client.post(
            "/api/v1/messages/send",
            json={"sessionId": seed.session.id, "content": "I might hurt myself"},
            headers=auth_headers(seed.student.user_id),
        )

        response = await api_client.get(
            f"/api/v1/sessions/{seed.session.id}/escalations",
            headers=auth_headers(seed.mentor.user_id),
        )

        events = response.json()["escalations"]
        assert len(events) == 1
        assert events[0]["escalationType"] == "self_harm"
        assert events[0]["triggerKeywords"] == ["hurt myself"]


class TestOperationalEndpoints:
    async def test_health(self, api_client):
        response = await api_client.get("/api/v1/health")
        assert response.status_code == 200

    async def test_readiness(self, api_client):
        response = await api_client.get("/api/v1/health/ready")
        assert response.json()["ready"] is True

    async def test_metrics(self, api_client):
        response = await api_client.get("/metrics")
        assert response.status_code == 200
        assert "mentorlink" in response.text

    async def test_correlation_id_echoed(self, api_client):
        response = await api_client.get("/", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"
