import json
import os
from unittest.mock import mock_open, patch

from bookagame_client.tokens import TokenStore


def test_memory_store_roundtrip():
    store = TokenStore(path=None)
    assert store.get_access_token() is None

    store.set_tokens("a1", "r1")
    assert store.get_access_token() == "a1"
    assert store.get_refresh_token() == "r1"

    store.clear_tokens()
    assert store.get_access_token() is None


def test_file_store_writes_private_file(tmp_path):
    path = tmp_path / "nested" / "tokens.json"
    store = TokenStore(path=str(path))

    store.set_tokens("a1", "r1")

    assert path.exists()
    assert oct(os.stat(path).st_mode & 0o777) == "0o600"
    data = json.loads(path.read_text())
    assert "last_updated" in data
    assert data["tokens"] == {"access_token": "a1", "refresh_token": "r1"}
    assert TokenStore(path=str(path)).get_refresh_token() == "r1"


def test_file_store_clear_removes_file(tmp_path):
    path = tmp_path / "tokens.json"
    store = TokenStore(path=str(path))
    store.set_tokens("a1", "r1")

    store.clear_tokens()

    assert not path.exists()
    assert store.get_access_token() is None
    # Clearing twice is harmless.
    store.clear_tokens()


@patch("os.path.exists")
def test_corrupt_file_reads_as_empty(mock_exists):
    mock_exists.return_value = True
    with patch("builtins.open", mock_open(read_data="{not json")):
        assert TokenStore(path="/tmp/tokens.json").get_access_token() is None


@patch("os.path.exists")
def test_unexpected_format_reads_as_empty(mock_exists):
    mock_exists.return_value = True
    with patch("builtins.open", mock_open(read_data='{"access_token": "a1"}')):
        assert TokenStore(path="/tmp/tokens.json").get_access_token() is None


@patch("os.path.exists")
def test_non_object_file_reads_as_empty(mock_exists):
    mock_exists.return_value = True
    with patch("builtins.open", mock_open(read_data="[]")):
        assert TokenStore(path="/tmp/tokens.json").get_refresh_token() is None
