import pytest

from contentkosh_api.core.security import (
    CurrentUser,
    create_access_token,
    decode_access_token,
    generate_refresh_token,
    get_password_hash,
    verify_password,
)
from contentkosh_api.db.models import UserRole


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_access_token_claims():
    token = create_access_token(7, 3, "TEACHER", "t@example.com")
    claims = decode_access_token(token)
    assert claims["id"] == 7
    assert claims["businessId"] == 3
    assert claims["role"] == "TEACHER"
    assert claims["type"] == "access"

    user = CurrentUser.from_claims(claims)
    assert user == CurrentUser(id=7, business_id=3, role=UserRole.TEACHER, email="t@example.com")
    assert not user.is_admin


def test_superadmin_without_business():
    user = CurrentUser.from_claims(decode_access_token(create_access_token(1, None, "SUPERADMIN", "s@example.com")))
    assert user.business_id is None
    assert user.is_superadmin
    assert user.is_admin


def test_token_signed_with_other_secret_is_rejected(monkeypatch):
    token = create_access_token(7, 3, "ADMIN", "a@example.com")
    monkeypatch.setenv("JWT_SECRET_KEY", "another-secret")
    assert decode_access_token(token) is None


def test_unknown_role_claim_is_rejected():
    claims = decode_access_token(create_access_token(7, 3, "JANITOR", "j@example.com"))
    with pytest.raises(ValueError):
        CurrentUser.from_claims(claims)


def test_refresh_tokens_are_unique_hex():
    first, second = generate_refresh_token(), generate_refresh_token()
    assert first != second
    assert len(first) == 128
    int(first, 16)
