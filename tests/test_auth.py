import asyncio

import pytest
from jose import jwt

from auth import TokenPayload, create_token, ensure_admin, get_current_user, verify_token
from errors import UnauthorizedError
from settings import Settings

TEST_SETTINGS = Settings(secret_key="test-secret", jwt_algorithm="HS256")


def test_create_token_carries_username_and_admin_flag():
    token = create_token("admin", is_admin=True, settings=TEST_SETTINGS)
    claims = jwt.decode(token, "test-secret", algorithms=["HS256"])
    assert claims == {"username": "admin", "isAdmin": True}


def test_verify_token_roundtrip():
    token = create_token("u1", settings=TEST_SETTINGS)
    payload = verify_token(token, TEST_SETTINGS)
    assert payload == TokenPayload(username="u1", is_admin=False)


def test_verify_token_rejects_wrong_secret():
    token = create_token("u1", settings=Settings(secret_key="other-secret"))
    with pytest.raises(UnauthorizedError):
        verify_token(token, TEST_SETTINGS)


def test_verify_token_rejects_payload_without_username():
    token = jwt.encode({"isAdmin": True}, "test-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        verify_token(token, TEST_SETTINGS)


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer not-a-jwt"])
def test_get_current_user_is_anonymous_without_valid_bearer(header):
    assert asyncio.run(get_current_user(header, TEST_SETTINGS)) is None


def test_get_current_user_with_valid_bearer():
    token = create_token("u1", settings=TEST_SETTINGS)
    user = asyncio.run(get_current_user(f"Bearer {token}", TEST_SETTINGS))
    assert user.username == "u1"
    assert user.is_admin is False


def test_ensure_admin():
    admin = TokenPayload(username="admin", is_admin=True)
    assert asyncio.run(ensure_admin(admin)) is admin

    with pytest.raises(UnauthorizedError):
        asyncio.run(ensure_admin(TokenPayload(username="u1")))
    with pytest.raises(UnauthorizedError):
        asyncio.run(ensure_admin(None))


def test_settings_fields():
    assert set(Settings.model_fields) == {"secret_key", "jwt_algorithm", "cors_origins"}
