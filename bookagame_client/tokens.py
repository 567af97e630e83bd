import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Optional

from bookagame_client import config

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"


class TokenStore:
    """Keeps the access and refresh tokens between CLI invocations.

    With a path the tokens live in a JSON file readable only by the current
    user; with ``path=None`` they are held in memory for the process lifetime.
    """

    def __init__(self, path: Optional[str] = config.TOKENS_FILE):
        self.path = path
        self._memory: Dict[str, str] = {}

    def _load(self) -> Dict[str, str]:
        if self.path is None:
            return self._memory
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data: Dict = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to read token file {self.path}: {e}")
            return {}
        tokens = data.get("tokens") if isinstance(data, dict) else None
        if not isinstance(tokens, dict):
            logger.warning("Token file has unexpected format. Ignoring it.")
            return {}
        return tokens

    def _save(self, tokens: Dict[str, str]):
        if self.path is None:
            self._memory = dict(tokens)
            return
        directory = os.path.dirname(self.path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        data = {"last_updated": datetime.now(timezone.utc).isoformat(), "tokens": tokens}
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved tokens to {self.path}")

    def get_access_token(self) -> Optional[str]:
        return self._load().get(ACCESS_TOKEN_KEY)

    def get_refresh_token(self) -> Optional[str]:
        return self._load().get(REFRESH_TOKEN_KEY)

    def set_tokens(self, access_token: str, refresh_token: str):
        self._save({ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token})

    def clear_tokens(self):
        """Forgets both tokens."""
        if self.path is None:
            self._memory = {}
            return
        if os.path.exists(self.path):
            try:
                os.remove(self.path)
                logger.debug(f"Removed token file {self.path}")
            except OSError as e:
                logger.error(f"Failed to remove token file: {e}")
