from unittest.mock import MagicMock

import requests

from bookagame_client.errors import ApiError, FormError, get_error_message, message_from_response


def test_message_from_response_prefers_server_message():
    response = MagicMock()
    response.status_code = 400
    response.reason = "Bad Request"
    response.json.return_value = {"message": "Court is closed on that date", "error": "closed"}
    assert message_from_response(response) == "Court is closed on that date"


def test_message_from_response_falls_back_to_reason():
    response = MagicMock()
    response.status_code = 502
    response.reason = "Bad Gateway"
    response.json.side_effect = ValueError("not json")
    assert message_from_response(response) == "HTTP 502: Bad Gateway"


def test_get_error_message():
    assert get_error_message(ApiError("Slot taken", 409)) == "Slot taken"
    assert get_error_message(FormError("Name is required")) == "Name is required"
    assert get_error_message(requests.exceptions.Timeout("timed out")) == "timed out"
    assert get_error_message(ValueError("")) == "An unexpected error occurred"
    assert ApiError("Unauthorized", 401).is_unauthorized
