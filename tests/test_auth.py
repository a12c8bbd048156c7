from fieldbase.config import settings
from fieldbase.modules.auth.service import poll_until
from tests.conftest import PASSWORD
from tests.helpers import assert_failure, create_workspace, invite


def register_payload(email="carol@example.com", **overrides):
    payload = {
        "email": email,
        "password": PASSWORD,
        "confirm_password": PASSWORD,
        "full_name": "Carol Petit",
    }
    payload.update(overrides)
    return payload


def test_register_signs_the_user_in(client, fake):
    response = client.post("/api/v1/auth/register", json=register_payload())

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["email"] == "carol@example.com"
    assert data["access_token"]
    assert data["joined_organization_id"] is None

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.json()["data"]["full_name"] == "Carol Petit"
    assert [p["id"] for p in fake.db.rows["profiles"]] == [data["user_id"]]


def test_register_rejects_mismatched_passwords(client):
    response = client.post("/api/v1/auth/register", json=register_payload(confirm_password="something-else"))
    assert_failure(response, 422, "VALIDATION_ERROR")


def test_register_rejects_short_password(client):
    response = client.post("/api/v1/auth/register", json=register_payload(password="short", confirm_password="short"))
    assert_failure(response, 422, "VALIDATION_ERROR")


def test_register_duplicate_email(client, alice):
    response = client.post("/api/v1/auth/register", json=register_payload(email=alice.email))
    error = assert_failure(response, 422, "VALIDATION_ERROR")
    assert "already in use" in error["message"]


def test_register_continues_when_profile_never_appears(client, fake, monkeypatch):
    fake.identity.create_profiles = False
    monkeypatch.setattr(settings, "profile_poll_attempts", 2)
    monkeypatch.setattr(settings, "profile_poll_delay_ms", 0)

    response = client.post("/api/v1/auth/register", json=register_payload())

    assert response.status_code == 201
    assert response.json()["data"]["access_token"]
    assert fake.db.rows["profiles"] == []


def test_register_with_invitation_token_joins_the_workspace(client, fake, alice):
    workspace = create_workspace(client, alice)
    invitation = invite(client, alice, workspace["id"], "Carol@Example.com")

    response = client.post(
        "/api/v1/auth/register",
        json=register_payload(invitation_token=invitation["token"]),
    )

    data = response.json()["data"]
    assert data["joined_organization_id"] == workspace["id"]
    roles = {m["user_id"]: m["role"] for m in fake.db.rows["organization_members"]}
    assert roles[data["user_id"]] == "member"


def test_register_with_bad_invitation_token_still_succeeds(client, fake):
    response = client.post("/api/v1/auth/register", json=register_payload(invitation_token="nope"))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["access_token"]
    assert data["joined_organization_id"] is None
    assert fake.db.rows["organization_members"] == []


def test_login_and_logout(client, fake, alice):
    response = client.post("/api/v1/auth/login", json={"email": alice.email, "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]

    headers = {"Authorization": f"Bearer {token}"}
    response = client.post("/api/v1/auth/logout", headers=headers)
    assert response.json()["success"] is True
    assert fake.identity.revoked == [token]
    assert_failure(client.get("/api/v1/auth/me", headers=headers), 401, "AUTHENTICATION_ERROR")


def test_logout_only_revokes_its_own_token(client, fake, alice, bob):
    client.post("/api/v1/auth/logout", headers=alice.headers)

    assert fake.identity.revoked == [alice.token]
    assert client.get("/api/v1/auth/me", headers=bob.headers).status_code == 200


def test_login_leaves_no_session_on_the_shared_client(client, fake, alice):
    response = client.post("/api/v1/auth/login", json={"email": alice.email, "password": PASSWORD})
    assert response.status_code == 200

    response = client.post("/api/v1/auth/register", json=register_payload())
    assert response.status_code == 201

    assert fake.auth.session is None


def test_login_with_wrong_password(client, alice):
    response = client.post("/api/v1/auth/login", json={"email": alice.email, "password": "wrong-password"})
    assert_failure(response, 401, "AUTHENTICATION_ERROR")


def test_session_cookie_is_accepted(client, alice):
    client.cookies.set("access_token", alice.token)
    try:
        response = client.get("/api/v1/auth/me")
    finally:
        client.cookies.clear()
    assert response.json()["data"]["id"] == alice.id


def test_poll_until_stops_at_first_success():
    calls = []

    def condition():
        calls.append(1)
        return len(calls) == 3

    assert poll_until(condition, max_attempts=5, delay_ms=0) is True
    assert len(calls) == 3


def test_poll_until_gives_up():
    assert poll_until(lambda: False, max_attempts=3, delay_ms=0) is False
