from datetime import timedelta

import pytest
from src.core.auth import TokenError, create_access_token, decode_access_token


def test_create_and_decode_token_roundtrip() -> None:
    token = create_access_token("user-123", role="tutor", email="user@example.com")

    payload = decode_access_token(token)

    assert payload["sub"] == "user-123"
    assert payload["role"] == "tutor"
    assert payload["email"] == "user@example.com"


def test_unsupported_role_is_not_issued() -> None:
    with pytest.raises(TokenError):
        create_access_token("user-123", role="admin")


def test_expired_token_is_rejected() -> None:
    token = create_access_token("user-123", role="student", expires_delta=timedelta(seconds=-1))

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_tampered_token_is_rejected() -> None:
    header, _, signature = create_access_token("user-123", role="student").split(".")
    _, forged_payload, _ = create_access_token("user-999", role="tutor").split(".")

    with pytest.raises(TokenError):
        decode_access_token(".".join([header, forged_payload, signature]))
