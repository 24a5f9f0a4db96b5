import uuid

from gcash_portal.services.provisioning import provision_profile
from tests.conftest import auth_header


def test_get_own_profile(client, db_session, make_identity):
    user_id, email = make_identity("a@x.com")
    provision_profile(db_session, user_id, email)

    response = client.get("/profile/", headers=auth_header(user_id, email))

    assert response.status_code == 200
    assert response.json()["id"] == str(user_id)
    assert response.json()["email"] == "a@x.com"


def test_missing_profile_is_404(client, make_identity):
    user_id, email = make_identity("a@x.com")
    assert client.get("/profile/", headers=auth_header(user_id, email)).status_code == 404


def test_create_profile_once(client, make_identity):
    user_id, email = make_identity("a@x.com")
    headers = auth_header(user_id, email)

    response = client.post("/profile/", json={"full_name": "Ana Reyes"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["full_name"] == "Ana Reyes"
    assert response.json()["email"] == "a@x.com"

    assert client.post("/profile/", json={}, headers=headers).status_code == 400


def test_create_profile_without_identity_fails(client):
    response = client.post("/profile/", json={}, headers=auth_header(uuid.uuid4(), "ghost@x.com"))
    assert response.status_code == 400


def test_update_only_touches_own_profile(client, db_session, make_identity):
    a_id, a_email = make_identity("a@x.com")
    b_id, b_email = make_identity("b@x.com")
    provision_profile(db_session, a_id, a_email)
    provision_profile(db_session, b_id, b_email)

    response = client.put("/profile/", json={"full_name": "Ben Cruz", "avatar_url": "https://cdn.example/b.png"},
                          headers=auth_header(b_id, b_email))
    assert response.status_code == 200
    assert response.json()["id"] == str(b_id)
    assert response.json()["full_name"] == "Ben Cruz"

    a_profile = client.get("/profile/", headers=auth_header(a_id, a_email)).json()
    assert a_profile["full_name"] is None
    assert a_profile["avatar_url"] is None


def test_profiles_cannot_be_deleted(client, db_session, make_identity):
    user_id, email = make_identity("a@x.com")
    provision_profile(db_session, user_id, email)
    headers = auth_header(user_id, email)

    assert client.delete("/profile/", headers=headers).status_code == 405
    assert client.get("/profile/", headers=headers).status_code == 200
