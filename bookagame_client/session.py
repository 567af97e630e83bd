import logging
from typing import Dict, Optional

from pydantic import ValidationError

from bookagame_client.api import ApiClient
from bookagame_client.errors import AuthError, BookAGameError, get_error_message
from bookagame_client.models import LoginRequest, ProfileUpdate, RegisterRequest, User

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Another request is still in progress"


def _user_from(payload: Dict) -> Optional[User]:
    """Picks the user out of an auth response; ``profile`` carries the role, so it wins."""
    raw = payload.get("profile") or payload.get("user")
    if not isinstance(raw, dict):
        return None
    try:
        return User.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed user in auth response: {e}")
        return None


class AuthSession:
    """Who is signed in, backed by the tokens of an ``ApiClient``.

    Actions return True/False and leave a user-facing message in ``error``
    on failure, so a caller can report it and let the user retry.
    """

    def __init__(self, client: ApiClient):
        self.client = client
        self.user: Optional[User] = None
        self.is_authenticated = False
        self.is_loading = False
        self.error: Optional[str] = None

    @property
    def is_owner(self) -> bool:
        return self.user is not None and self.user.role in ("owner", "admin")

    def _reset(self):
        self.client.tokens.clear_tokens()
        self.user = None
        self.is_authenticated = False

    def _fail(self, message: str) -> bool:
        self.error = message
        logger.info(f"Auth action failed: {message}")
        return False

    def initialize(self):
        """Restores the session from stored tokens, if any."""
        if self.client.tokens.get_access_token():
            self.fetch_profile()
        else:
            logger.debug("No stored access token")

    def login(self, email: str, password: str) -> bool:
        if self.is_loading:
            return self._fail(BUSY_MESSAGE)
        self.is_loading = True
        self.error = None
        try:
            data = self.client.login(LoginRequest(email=email, password=password))
        except BookAGameError as e:
            return self._fail(get_error_message(e))
        finally:
            self.is_loading = False

        if data.get("access_token") and data.get("refresh_token"):
            self.client.tokens.set_tokens(data["access_token"], data["refresh_token"])
            self.user = _user_from(data)
            self.is_authenticated = True
            logger.info(f"Signed in as {email}")
            return True
        return self._fail(data.get("message") or "Login failed")

    def _register(self, data: RegisterRequest, owner: bool) -> bool:
        # Registration never signs in; the user logs in afterwards.
        if self.is_loading:
            return self._fail(BUSY_MESSAGE)
        self.is_loading = True
        self.error = None
        try:
            if owner:
                response = self.client.register_owner(data)
            else:
                response = self.client.register_user(data)
        except BookAGameError as e:
            return self._fail(get_error_message(e))
        finally:
            self.is_loading = False

        if response.get("message") or response.get("profile") or response.get("user"):
            return True
        return self._fail("Registration failed")

    def register_user(self, data: RegisterRequest) -> bool:
        return self._register(data, owner=False)

    def register_owner(self, data: RegisterRequest) -> bool:
        return self._register(data, owner=True)

    def logout(self):
        self.is_loading = True
        try:
            self.client.logout()
        except BookAGameError as e:
            # The server-side session may already be gone; local state is cleared regardless.
            logger.debug(f"Ignoring logout error: {e}")
        finally:
            self._reset()
            self.is_loading = False
            self.error = None

    def fetch_profile(self):
        self.is_loading = True
        try:
            data = self.client.get_me()
            user = _user_from(data)
        except BookAGameError as e:
            logger.warning(f"Could not restore session: {e}")
            user = None
        finally:
            self.is_loading = False

        if user is None:
            self._reset()
            return
        self.user = user
        self.is_authenticated = True

    def update_profile(self, changes: ProfileUpdate) -> bool:
        if self.is_loading:
            return self._fail(BUSY_MESSAGE)
        self.is_loading = True
        self.error = None
        try:
            response = self.client.update_me(changes)
        except BookAGameError as e:
            return self._fail(get_error_message(e))
        finally:
            self.is_loading = False

        if response.get("success") and isinstance(response.get("data"), dict):
            try:
                self.user = User.model_validate(response["data"])
            except ValidationError:
                return self._fail("Update failed")
            return True
        return self._fail(response.get("message") or "Update failed")

    def clear_error(self):
        self.error = None

    def require_user(self) -> User:
        if not self.is_authenticated or self.user is None:
            raise AuthError("Please log in first")
        return self.user

    def require_owner(self) -> User:
        user = self.require_user()
        if not self.is_owner:
            raise AuthError("This action is only available to venue owners")
        return user

