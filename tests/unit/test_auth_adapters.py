from datetime import UTC, datetime, timedelta

from src.adapters.auth.crypto import Argon2PasswordHasher
from src.api.auth_utils import create_access_token, decode_access_token


def test_argon2_round_trip():
    hasher = Argon2PasswordHasher()
    hashed = hasher.hash_password("secret-password")

    assert hashed != "secret-password"
    assert hasher.verify_password("secret-password", hashed) is True
    assert hasher.verify_password("other", hashed) is False


def test_argon2_rejects_garbage_hash():
    assert Argon2PasswordHasher().verify_password("x", "not-a-hash") is False


def test_token_carries_subject():
    token = create_access_token({"sub": "u-1"}, timedelta(minutes=5))
    payload = decode_access_token(token)
    assert payload is not None
    assert payload["sub"] == "u-1"


def test_expired_token_rejected():
    past = datetime.now(UTC) - timedelta(hours=2)
    token = create_access_token({"sub": "u-1"}, timedelta(minutes=5), now_utc=past)
    assert decode_access_token(token) is None


def test_tampered_token_rejected():
    token = create_access_token({"sub": "u-1"})
    header_and_claims = token.rsplit(".", 1)[0]
    assert decode_access_token(header_and_claims + ".bm90LWEtc2lnbmF0dXJl") is None
