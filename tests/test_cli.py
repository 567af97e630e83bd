from unittest.mock import MagicMock, patch

import pytest

from bookagame_client import cli
from bookagame_client.errors import ApiError


def test_parse_book_arguments():
    args = cli.parse_arguments(["-v", "book", "c1", "--date", "2025-01-01", "--slot", "09:00", "--slot", "10:00"])
    assert args.verbose is True
    assert args.command == "book"
    assert args.court_id == "c1"
    assert args.slots == ["09:00", "10:00"]


def test_parse_owner_arguments():
    args = cli.parse_arguments(["owner", "block", "c1", "--start", "06:00", "--end", "08:00"])
    assert args.command == "owner"
    assert args.owner_command == "block"
    assert args.date is None


@patch("bookagame_client.cli.commands.book")
@patch("bookagame_client.cli.build_session")
def test_main_dispatches_command(mock_build_session, mock_book):
    session = MagicMock()
    mock_build_session.return_value = session

    cli.main(["book", "c1", "--date", "2025-01-01", "--slot", "09:00"])

    session.initialize.assert_called_once()
    mock_book.assert_called_once_with(session, "c1", "2025-01-01", ["09:00"])


@patch("bookagame_client.cli.commands.login")
@patch("bookagame_client.cli.build_session")
def test_login_does_not_restore_session(mock_build_session, mock_login):
    session = MagicMock()
    mock_build_session.return_value = session

    cli.main(["login", "ali@example.com", "secret"])

    session.initialize.assert_not_called()
    mock_login.assert_called_once_with(session, "ali@example.com", "secret")


@patch("bookagame_client.cli.commands.list_bookings")
@patch("bookagame_client.cli.build_session")
def test_main_reports_errors_and_exits(mock_build_session, mock_list, capsys):
    mock_build_session.return_value = MagicMock()
    mock_list.side_effect = ApiError("Server unavailable", 503)

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["bookings", "--filter", "past"])

    assert exc_info.value.code == 1
    assert "Error: Server unavailable" in capsys.readouterr().err


@patch("bookagame_client.cli.build_session")
def test_api_url_option(mock_build_session):
    with patch("bookagame_client.cli.commands.list_sports"):
        cli.main(["--api-url", "https://api.example.com", "sports"])
    mock_build_session.assert_called_once_with("https://api.example.com")


@patch("bookagame_client.cli.commands.venue_availability")
@patch("bookagame_client.cli.build_session")
def test_availability_command(mock_build_session, mock_availability):
    session = MagicMock()
    mock_build_session.return_value = session

    cli.main(["availability", "v1"])

    mock_availability.assert_called_once_with(session, "v1")


@patch("bookagame_client.cli.getpass.getpass", return_value="prompted")
@patch("bookagame_client.cli.commands.login")
@patch("bookagame_client.cli.build_session")
def test_login_prompts_for_missing_password(mock_build_session, mock_login, mock_getpass):
    session = MagicMock()
    mock_build_session.return_value = session

    cli.main(["login", "ali@example.com"])

    mock_getpass.assert_called_once()
    mock_login.assert_called_once_with(session, "ali@example.com", "prompted")
