from typing import Optional

import requests

DEFAULT_ERROR_MESSAGE = "An error occurred"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class BookAGameError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(BookAGameError):
    """The API answered with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class ResponseParseError(BookAGameError):
    """The API answered 2xx but the body did not match the expected schema."""


class AuthError(BookAGameError):
    """The action needs a signed-in user (or an owner) and there is none."""


class FormError(BookAGameError):
    """User input failed client-side validation; nothing was sent."""


def message_from_response(response: requests.Response) -> str:
    """Extracts a human-readable message from an error response.

    Prefers the server's ``message`` field, then ``error``, then the HTTP
    reason phrase, then a generic string.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    if response.reason:
        return f"HTTP {response.status_code}: {response.reason}"
    return DEFAULT_ERROR_MESSAGE


def get_error_message(error: BaseException) -> str:
    """Normalises any exception into the message shown to the user."""
    if isinstance(error, BookAGameError):
        return error.message or DEFAULT_ERROR_MESSAGE
    if isinstance(error, requests.exceptions.RequestException):
        if error.response is not None:
            return message_from_response(error.response)
        return str(error) or DEFAULT_ERROR_MESSAGE
    if isinstance(error, Exception):
        return str(error) or UNEXPECTED_ERROR_MESSAGE
    return UNEXPECTED_ERROR_MESSAGE
