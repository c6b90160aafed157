import pytest

from account_service.schemas.auth_schema import LoginResponse
from account_service.serializers.authorization_serializer import serialize

CLAIMS = {
    "exp": 1792400000,
    "iat": 1792313600,
    "name": "Budi",
    "phone": "0812",
    "roleId": 2,
    "timestamp": "2026-10-20T08:00:00+00:00",
}


def test_serialize_login_response():
    out = serialize(LoginResponse(session_id="tok", claims=CLAIMS))
    assert out == {"sessionId": "tok", "claims": CLAIMS}


def test_serialize_flat_record_drops_unknown_fields():
    out = serialize({**CLAIMS, "token": "tok", "password": "secret"})
    assert out == {"sessionId": "tok", "claims": CLAIMS}


def test_serialize_list_uses_same_shape():
    records = [{**CLAIMS, "token": "a"}, LoginResponse(session_id="b", claims=CLAIMS)]
    out = serialize(records)
    assert [o["sessionId"] for o in out] == ["a", "b"]
    assert all(o["claims"] == CLAIMS for o in out)


def test_serialize_empty_list():
    assert serialize([]) == []


def test_serialize_missing_fields_are_null():
    out = serialize({"token": "tok", "name": "Budi"})
    assert out["claims"]["roleId"] is None
    assert out["claims"]["exp"] is None


def test_serialize_none():
    with pytest.raises(ValueError):
        serialize(None)
