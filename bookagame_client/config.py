import logging
import os
from typing import Dict, List

logger = logging.getLogger(__name__)

# --- File Paths ---
DATA_DIR = os.environ.get("BOOKAGAME_DATA_DIR", os.path.join(os.path.expanduser("~"), ".bookagame"))
TOKENS_FILE = os.path.join(DATA_DIR, "tokens.json")

# --- URLs & API ---
API_URL = os.environ.get("BOOKAGAME_API_URL", "http://localhost:5050/api").rstrip("/")
REQUEST_TIMEOUT = float(os.environ.get("BOOKAGAME_TIMEOUT", "10"))

COMMON_HEADERS: Dict[str, str] = {
    "User-Agent": os.environ.get("BOOKAGAME_USER_AGENT", "BookAGameClient/1.0"),
    "Accept": "application/json",
    "Content-Type": "application/json",
}

# --- Slot selection ---
# A slot is one hour; a booking spans at most MAX_SLOTS consecutive slots.
MAX_SLOTS = int(os.environ.get("BOOKAGAME_MAX_SLOTS", "4"))
MIN_SLOTS = int(os.environ.get("BOOKAGAME_MIN_SLOTS", "1"))
SLOT_DURATION_MINUTES = 60

# Hourly options offered when blocking a time range.
TIME_OPTIONS: List[str] = [f"{hour:02d}:00" for hour in range(6, 23)]

SPORT_TYPES: List[str] = [
    "Cricket",
    "Football",
    "Badminton",
    "Tennis",
    "Basketball",
    "Volleyball",
    "Table Tennis",
    "Swimming",
]

MIN_PASSWORD_LENGTH = 6

if MIN_SLOTS > MAX_SLOTS:
    logger.warning(f"BOOKAGAME_MIN_SLOTS ({MIN_SLOTS}) exceeds BOOKAGAME_MAX_SLOTS ({MAX_SLOTS}).")
