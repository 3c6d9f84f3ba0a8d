# fleetscore/config.py
"""
Runtime configuration, read once from the environment (and a .env file if present).
"""

from __future__ import annotations

import logging
import os
from typing import Dict

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# STANDARDS
# =============================================================================

# Empty means "use the bundled fleet_standards.json"
STANDARDS_PATH = os.getenv("FLEET_STANDARDS_PATH", "").strip()

# =============================================================================
# TEXT ACQUISITION
# =============================================================================

OCR_ENABLED = _env_bool("FLEET_OCR_ENABLED", True)
OCR_LANG = os.getenv("FLEET_OCR_LANG", "eng")
OCR_MAX_PAGES = int(os.getenv("FLEET_OCR_MAX_PAGES", "10"))
MAX_UPLOAD_BYTES = int(os.getenv("FLEET_MAX_UPLOAD_MB", "50")) * 1024 * 1024

# =============================================================================
# BASIC AUTH
# =============================================================================

AUTH_USERS_STR = os.getenv("FLEET_AUTH_USERS", "")
AUTH_PASSWORD = os.getenv("FLEET_AUTH_PASSWORD", "")


def parse_auth_users(users: str, password: str) -> Dict[str, str]:
    """Comma-separated usernames sharing one password -> {username: password}."""
    authorized: Dict[str, str] = {}
    if users and password:
        for username in users.split(","):
            username = username.strip()
            if username:
                authorized[username] = password
    return authorized


AUTHORIZED_USERS = parse_auth_users(AUTH_USERS_STR, AUTH_PASSWORD)

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("FLEET_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
