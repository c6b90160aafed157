import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from pydantic import ValidationError as PydanticValidationError

from account_service.core.config import TokenConfig
from account_service.core.exceptions import CryptoError, HashingError, InvalidToken
from account_service.core.security import PasswordHasher, TokenManager
from tests.conftest import TEST_SECRET


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


# ------------------ Password Hasher ------------------ #

@pytest.mark.asyncio
async def test_hash_and_verify(hasher):
    hashed = await hasher.hash("s3cret")
    assert hashed != "s3cret"
    assert hashed.startswith("$2b$04$")
    assert await hasher.verify("s3cret", hashed) is True
    assert await hasher.verify("wrong", hashed) is False


@pytest.mark.asyncio
async def test_hash_is_salted(hasher):
    first = await hasher.hash("same-password")
    second = await hasher.hash("same-password")
    assert first != second


def test_verify_reads_cost_from_hash(hasher):
    strong = PasswordHasher(rounds=5, max_workers=1)
    try:
        hashed = strong.hash_sync("pw")
    finally:
        strong.close()
    assert hashed.startswith("$2b$05$")
    assert hasher.verify_sync("pw", hashed) is True


def test_long_passwords_are_not_truncated(hasher):
    base = "x" * 80
    hashed = hasher.hash_sync(base + "a")
    assert hasher.verify_sync(base + "a", hashed) is True
    assert hasher.verify_sync(base + "b", hashed) is False


def test_malformed_hash_raises_hashing_error(hasher):
    with pytest.raises(HashingError) as exc:
        hasher.verify_sync("pw", "not-a-bcrypt-hash")
    assert isinstance(exc.value, CryptoError)
    assert exc.value.kind == "crypto-error"


# ------------------ Token Manager ------------------ #

def test_issue_then_verify_returns_claims(tokens):
    claims = {"name": "Budi", "phone": "0812", "roleId": 1, "timestamp": "2026-10-20T00:00:00+00:00"}
    decoded = tokens.verify(tokens.issue(claims, timedelta(minutes=5)))
    assert {k: v for k, v in decoded.items() if k not in ("iat", "exp")} == claims
    assert decoded["exp"] - decoded["iat"] == 300


def test_issue_does_not_mutate_input(tokens):
    claims = {"name": "Budi"}
    tokens.issue(claims)
    assert claims == {"name": "Budi"}


def test_default_ttl_is_used(tokens):
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    claims = tokens.with_expiry({}, issued_at=now)
    assert claims["iat"] == int(now.timestamp())
    assert claims["exp"] == int((now + timedelta(hours=24)).timestamp())


def test_expired_token_is_rejected(tokens):
    token = tokens.issue({"name": "Budi"}, timedelta(seconds=-30))
    with pytest.raises(InvalidToken) as exc:
        tokens.verify(token)
    assert exc.value.message == "Token has expired."


def test_other_hmac_algorithm_is_rejected(tokens):
    token = jwt.encode({"name": "Budi"}, TEST_SECRET, algorithm="HS512")
    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_unsigned_token_is_rejected(tokens):
    token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64({'name': 'Budi'})}."
    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_tampered_payload_is_rejected(tokens):
    header, _, signature = tokens.issue({"name": "Budi", "roleId": 1}).split(".")
    forged = f"{header}.{_b64({'name': 'Budi', 'roleId': 99})}.{signature}"
    with pytest.raises(InvalidToken):
        tokens.verify(forged)


def test_wrong_secret_is_rejected(tokens):
    other = TokenManager(TokenConfig(secret=b"another-secret", ttl=timedelta(hours=1)))
    with pytest.raises(InvalidToken):
        tokens.verify(other.issue({"name": "Budi"}))


@pytest.mark.parametrize("token", ["", "garbage", "a.b", "a.b.c", None])
def test_malformed_token_is_rejected(tokens, token):
    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_token_manager_only_accepts_hs256():
    with pytest.raises(ValueError):
        TokenManager(TokenConfig(secret=TEST_SECRET, ttl=timedelta(hours=1), algorithm="RS256"))
    with pytest.raises(ValueError):
        TokenManager(TokenConfig(secret=b"", ttl=timedelta(hours=1)))


def test_settings_build_token_config(settings):
    config = settings.token_config()
    assert config.secret == TEST_SECRET
    assert config.algorithm == "HS256"
    assert config.ttl == timedelta(hours=24)


def test_token_config_is_immutable():
    config = TokenConfig(secret=TEST_SECRET, ttl=timedelta(hours=1))
    with pytest.raises(PydanticValidationError):
        config.secret = b"swapped"
    assert config.algorithm == "HS256"
