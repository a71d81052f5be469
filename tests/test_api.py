import pytest
from httpx import ASGITransport, AsyncClient

from relations_api.config import settings
from relations_api.init_db import get_db
from relations_api.main import app
from relations_api.models import MutualRelation, RelationRequest
from tests.conftest import count_rows


def as_user(uid: str) -> dict:
    return {"X-Dev-User-Id": uid}


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def registered(client):
    for uid, username in [("uid-alice", "alice"), ("uid-bob", "bob"), ("uid-carol", "carol")]:
        response = await client.post("/users", json={"username": username}, headers=as_user(uid))
        assert response.status_code == 201


async def test_register_and_lookup(client):
    response = await client.post("/users", json={"username": "alice"}, headers=as_user("uid-alice"))
    assert response.status_code == 201
    assert response.json()["user"]["username"] == "alice"

    response = await client.get("/users/me", headers=as_user("uid-alice"))
    assert response.json()["user"]["id"] == "uid-alice"


async def test_username_taken(client, registered):
    response = await client.post("/users", json={"username": "alice"}, headers=as_user("uid-dave"))
    assert response.status_code == 409
    assert "error" in response.json()


async def test_unregistered_caller_is_forbidden(client):
    response = await client.get("/friendships", headers=as_user("uid-stranger"))
    assert response.status_code == 403
    assert response.json() == {"error": "Register a username before using this service."}


async def test_malformed_body_is_400(client, registered):
    response = await client.post("/friend-requests", json={}, headers=as_user("uid-alice"))
    assert response.status_code == 400
    assert response.json()["error"]["fields"]


async def test_friend_request_status_codes(client, registered):
    alice, bob = as_user("uid-alice"), as_user("uid-bob")

    response = await client.post("/friend-requests", json={"username": "bob"}, headers=alice)
    assert response.status_code == 201
    body = response.json()
    assert body["message"]
    assert body["request"]["sender_name"] == "alice"
    assert body["request"]["receiver_name"] == "bob"

    response = await client.post("/friend-requests", json={"username": "alice"}, headers=bob)
    assert response.status_code == 409

    response = await client.post("/friend-requests", json={"username": "alice"}, headers=alice)
    assert response.status_code == 405

    response = await client.post("/friend-requests", json={"username": "mallory"}, headers=alice)
    assert response.status_code == 404

    response = await client.delete("/friend-requests/does-not-exist", headers=alice)
    assert response.status_code == 409


async def test_request_confirm_remove_cycle(client, registered):
    alice, bob = as_user("uid-alice"), as_user("uid-bob")

    sent = await client.post("/friend-requests", json={"username": "bob"}, headers=alice)
    request_id = sent.json()["request"]["id"]

    received = await client.get("/friend-requests", params={"direction": "received"}, headers=bob)
    assert [r["id"] for r in received.json()["requests"]] == [request_id]

    response = await client.post(f"/friend-requests/{request_id}/confirm", headers=alice)
    assert response.status_code == 403

    response = await client.post(f"/friend-requests/{request_id}/confirm", headers=bob)
    assert response.status_code == 201
    assert {response.json()["friendship"]["user_one_name"], response.json()["friendship"]["user_two_name"]} == {"alice", "bob"}

    status = await client.get("/friendships/status/alice", headers=bob)
    assert status.json()["status"]["state"] == "established"

    response = await client.post("/friend-requests", json={"username": "alice"}, headers=bob)
    assert response.status_code == 409

    friendships = await client.get("/friendships", headers=alice)
    assert len(friendships.json()["friendships"]) == 1

    response = await client.delete("/friendships/bob", headers=alice)
    assert response.status_code == 200

    response = await client.delete("/friendships/bob", headers=alice)
    assert response.status_code == 409

    response = await client.post("/friend-requests", json={"username": "alice"}, headers=bob)
    assert response.status_code == 201


async def test_decline_request(client, registered):
    sent = await client.post("/friend-requests", json={"username": "bob"}, headers=as_user("uid-alice"))
    request_id = sent.json()["request"]["id"]

    response = await client.delete(f"/friend-requests/{request_id}", headers=as_user("uid-carol"))
    assert response.status_code == 403

    response = await client.delete(f"/friend-requests/{request_id}", headers=as_user("uid-bob"))
    assert response.status_code == 200
    assert response.json() == {"message": "You declined the friend request."}


async def test_trust_routes(client, registered):
    alice = as_user("uid-alice")

    response = await client.post("/relations/trust", json={"username": "bob"}, headers=alice)
    assert response.status_code == 201
    assert response.json()["relation"]["kind"] == "trust"

    response = await client.post("/relations/trust", json={"username": "bob"}, headers=alice)
    assert response.status_code == 409

    response = await client.post("/relations/trust", json={"username": "alice"}, headers=alice)
    assert response.status_code == 405

    received = await client.get("/relations/trust", params={"view": "received"}, headers=as_user("uid-bob"))
    assert [r["giver_name"] for r in received.json()["relations"]] == ["alice"]

    response = await client.delete("/relations/trust/bob", headers=alice)
    assert response.status_code == 200

    response = await client.delete("/relations/trust/bob", headers=alice)
    assert response.status_code == 409

    response = await client.post("/relations/follow", json={"username": "bob"}, headers=alice)
    assert response.status_code == 400


async def test_privileges_route(client, registered):
    await client.post("/friendships", json={"username": "bob"}, headers=as_user("uid-alice"))
    await client.post("/relations/trust", json={"username": "alice"}, headers=as_user("uid-carol"))

    response = await client.get("/users/alice/privileges", headers=as_user("uid-bob"))
    assert response.status_code == 200
    assert response.json()["privileges"] == {
        "user_id": "uid-alice",
        "username": "alice",
        "level": 2,
        "can_upvote": True,
        "can_endorse": True,
    }


async def test_delete_account_cascades(client, registered, session_factory):
    alice = as_user("uid-alice")
    await client.post("/friend-requests", json={"username": "bob"}, headers=alice)
    await client.post("/friendships", json={"username": "carol"}, headers=alice)

    response = await client.delete("/users/me", headers=alice)
    assert response.status_code == 200

    async with session_factory() as session:
        assert await count_rows(session, RelationRequest) == 0
        assert await count_rows(session, MutualRelation) == 0

    response = await client.get("/users/alice", headers=as_user("uid-bob"))
    assert response.status_code == 404


async def test_own_status_is_rejected(client, registered):
    response = await client.get("/friendships/status/alice", headers=as_user("uid-alice"))
    assert response.status_code == 405


async def test_dev_header_only_honoured_in_development(client, registered, monkeypatch):
    monkeypatch.setattr(settings, "environment", "staging")

    response = await client.get("/users/me", headers=as_user("uid-alice"))
    assert response.status_code == 403
    assert response.json() == {"error": "Not authenticated"}
