from unittest.mock import MagicMock

import pytest

from bookagame_client.errors import ApiError, AuthError
from bookagame_client.models import ProfileUpdate, RegisterRequest
from bookagame_client.session import AuthSession
from bookagame_client.tokens import TokenStore

PROFILE = {"id": "u1", "email": "ali@example.com", "name": "Ali Khan", "role": "owner"}


@pytest.fixture
def client():
    c = MagicMock()
    c.tokens = TokenStore(path=None)
    return c


@pytest.fixture
def session(client):
    return AuthSession(client)


def test_login_stores_tokens_and_prefers_profile(session, client):
    client.login.return_value = {
        "access_token": "a1",
        "refresh_token": "r1",
        "user": {"id": "u1", "email": "ali@example.com"},
        "profile": PROFILE,
    }

    assert session.login("ali@example.com", "secret") is True

    assert session.is_authenticated
    assert session.user.role == "owner"
    assert session.is_owner
    assert client.tokens.get_access_token() == "a1"
    assert client.tokens.get_refresh_token() == "r1"
    assert session.is_loading is False


def test_login_without_tokens_fails_with_server_message(session, client):
    client.login.return_value = {"message": "Email not confirmed"}

    assert session.login("ali@example.com", "secret") is False
    assert session.error == "Email not confirmed"
    assert not session.is_authenticated


def test_login_api_error_sets_message(session, client):
    client.login.side_effect = ApiError("Invalid credentials", 401)

    assert session.login("ali@example.com", "wrong") is False
    assert session.error == "Invalid credentials"


def test_register_does_not_sign_in(session, client):
    client.register_owner.return_value = {"message": "Owner registered", "user": PROFILE}
    data = RegisterRequest(email="ali@example.com", password="secret1", name="Ali")

    assert session.register_owner(data) is True
    client.register_owner.assert_called_once_with(data)
    client.register_user.assert_not_called()
    assert not session.is_authenticated
    assert client.tokens.get_access_token() is None


def test_register_failure(session, client):
    client.register_user.return_value = {}
    data = RegisterRequest(email="ali@example.com", password="secret1", name="Ali")

    assert session.register_user(data) is False
    assert session.error == "Registration failed"


def test_logout_clears_state_even_when_api_fails(session, client):
    client.tokens.set_tokens("a1", "r1")
    client.get_me.return_value = {"profile": PROFILE}
    session.initialize()
    client.logout.side_effect = ApiError("Network error")

    session.logout()

    assert not session.is_authenticated
    assert session.user is None
    assert client.tokens.get_access_token() is None


def test_initialize_without_token_skips_profile(session, client):
    session.initialize()
    client.get_me.assert_not_called()
    assert not session.is_authenticated


def test_fetch_profile_failure_clears_tokens(session, client):
    client.tokens.set_tokens("a1", "r1")
    client.get_me.side_effect = ApiError("Unauthorized", 401)

    session.initialize()

    assert not session.is_authenticated
    assert client.tokens.get_refresh_token() is None


def test_update_profile(session, client):
    client.update_me.return_value = {"success": True, "data": {**PROFILE, "name": "Ali K."}}

    assert session.update_profile(ProfileUpdate(name="Ali K.")) is True
    assert session.user.name == "Ali K."


def test_update_profile_failure_message(session, client):
    client.update_me.return_value = {"success": False, "message": "Phone already in use"}

    assert session.update_profile(ProfileUpdate(phone="0300")) is False
    assert session.error == "Phone already in use"
    session.clear_error()
    assert session.error is None


def test_require_user_and_owner(session, client):
    with pytest.raises(AuthError):
        session.require_user()

    client.get_me.return_value = {"user": {**PROFILE, "role": "user"}}
    client.tokens.set_tokens("a1", "r1")
    session.initialize()

    assert session.require_user().id == "u1"
    with pytest.raises(AuthError):
        session.require_owner()


def test_actions_refuse_to_run_while_a_request_is_in_flight(session, client):
    session.is_loading = True

    assert session.login("ali@example.com", "secret") is False
    assert session.register_user(RegisterRequest(email="ali@example.com", password="secret", name="Ali")) is False
    assert session.update_profile(ProfileUpdate(name="Ali")) is False

    assert session.error == "Another request is still in progress"
    client.login.assert_not_called()
    client.register_user.assert_not_called()
    client.update_me.assert_not_called()
