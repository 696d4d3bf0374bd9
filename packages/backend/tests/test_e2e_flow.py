"""Full-flow E2E integration test — the whole lifecycle through the API.

Learn: Walks the path a browser frontend takes, using the cookie the
way the browser would: signup → login → workspace → invite → decide →
update, with the cross-origin preflight in front of the first write.
"""

import pytest
from httpx import ASGITransport, AsyncClient

ORIGIN = "http://localhost:4200"


@pytest.mark.asyncio
async def test_full_decision_lifecycle(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as alice, \
            AsyncClient(transport=transport, base_url="http://test") as bob:
        # Both sign up and log in; each client keeps its own cookie.
        for c, email in ((alice, "alice@example.com"), (bob, "bob@example.com")):
            r = await c.post("/api/signup", json={"email": email, "password": "pw-123456"})
            assert r.status_code == 201
            r = await c.post("/api/login", json={"email": email, "password": "pw-123456"})
            assert r.status_code == 200

        # Browser preflight for the first write
        r = await alice.options(
            "/api/workspaces",
            headers={"Origin": ORIGIN, "Access-Control-Request-Method": "POST"},
        )
        assert r.status_code == 204

        r = await alice.post("/api/workspaces", json={"name": "Architecture"}, headers={"Origin": ORIGIN})
        assert r.status_code == 201
        assert r.headers["Access-Control-Allow-Origin"] == ORIGIN
        ws_id = r.json()["id"]

        # Bob is not a member yet
        r = await bob.post(
            f"/api/workspaces/{ws_id}/decisions",
            json={"title": "Use gRPC", "description": "Between services", "status": "proposed"},
        )
        assert r.status_code == 403

        r = await alice.post(f"/api/workspaces/{ws_id}/members", json={"email": "bob@example.com"})
        assert r.status_code == 201

        r = await bob.post(
            f"/api/workspaces/{ws_id}/decisions",
            json={"title": "Use gRPC", "description": "Between services", "status": "proposed"},
        )
        assert r.status_code == 201
        decision = r.json()

        # Alice owns the workspace, not the decision
        r = await alice.patch(f"/api/decisions/{decision['id']}", json={"status": "rejected"})
        assert r.status_code == 404

        r = await bob.patch(f"/api/decisions/{decision['id']}", json={"status": "accepted"})
        assert r.status_code == 200
        assert r.json()["status"] == "accepted"

        r = await alice.get(f"/api/workspaces/{ws_id}/decisions")
        assert [d["status"] for d in r.json()] == ["accepted"]

        # After logout the cookie is gone
        r = await bob.post("/api/logout")
        assert r.status_code == 204
        r = await bob.get("/api/me")
        assert r.status_code == 401
