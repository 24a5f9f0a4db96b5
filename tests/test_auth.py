import time
import uuid
from unittest.mock import MagicMock

import jwt
import pytest
from sqlalchemy.dialects import postgresql

from gcash_portal.config import settings
from gcash_portal.database import apply_caller_claims
from gcash_portal.routers.auth import decode_access_token
from tests.conftest import auth_header, make_token


def test_decode_returns_claims():
    user_id = uuid.uuid4()
    claims = decode_access_token(make_token(user_id, "a@x.com"))
    assert claims["sub"] == str(user_id)
    assert claims["email"] == "a@x.com"


def test_decode_rejects_wrong_audience():
    with pytest.raises(jwt.InvalidAudienceError):
        decode_access_token(make_token(uuid.uuid4(), "a@x.com", aud="anon"))


def test_missing_token_is_unauthorized(client):
    assert client.get("/transaction/").status_code == 401


@pytest.mark.parametrize("overrides", [
    {"exp": int(time.time()) - 60},
    {"aud": "service_role"},
    {"email": None},
    {"sub": "not-a-uuid"},
])
def test_bad_tokens_are_unauthorized(client, overrides):
    response = client.get("/transaction/", headers=auth_header(uuid.uuid4(), "a@x.com", **overrides))
    assert response.status_code == 401


def test_wrong_signature_is_unauthorized(client):
    token = jwt.encode({"sub": str(uuid.uuid4()), "email": "a@x.com", "aud": settings.JWT_AUDIENCE},
                       "another-secret-that-is-long-enough-for-hs256", algorithm="HS256")
    response = client.get("/transaction/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_caller_claims_are_set_on_postgres():
    connection = MagicMock()
    connection.dialect = postgresql.dialect()

    apply_caller_claims(connection, {"sub": "abc", "email": "a@x.com"})

    first, second = connection.execute.call_args_list
    assert "request.jwt.claims" in str(first.args[0])
    assert first.args[1]["sub"] == "abc"
    assert '"email": "a@x.com"' in first.args[1]["claims"]
    assert str(second.args[0]) == "set local role authenticated"


def test_caller_claims_skip_other_dialects(engine):
    with engine.connect() as conn:
        apply_caller_claims(conn, {"sub": "abc"})
