"""Application settings."""

import os
import sys
from pathlib import Path

from loguru import logger

# Redis
REDIS_URL = os.getenv("REDIS_URL", "")
REDIS_TIMEOUT_MS = int(os.getenv("REDIS_TIMEOUT", "5000"))

# Logging
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_RETENTION = os.getenv("LOG_RETENTION", "7 days")

# Refresh
REFRESH_INTERVAL_MS = int(os.getenv("BADGE_FETCH_INTERVAL", str(60 * 60 * 1000)))
CACHE_TTL_MULTIPLIER = int(os.getenv("CACHE_TTL_MULTIPLIER", "2"))
CACHE_TTL_SECONDS = int(os.getenv("REDIS_TTL", str(REFRESH_INTERVAL_MS // 1000 * CACHE_TTL_MULTIPLIER)))
USER_CACHE_TTL = min(CACHE_TTL_SECONDS, 60 * 60)
CACHE_VERSION = os.getenv("CACHE_VERSION", "v1")
PRELOAD_ON_STARTUP = os.getenv("CACHE_PRELOAD_ON_STARTUP", "true") != "false"

# HTTP
HTTP_TIMEOUT_MS = int(os.getenv("HTTP_FETCH_TIMEOUT", "10000"))
HTTP_MAX_RETRIES = int(os.getenv("HTTP_FETCH_RETRIES", "3"))
PROJECT_URL = "https://heliopolis.live/creations/badgeAPI"
USER_AGENT = f"BadgeAPI {PROJECT_URL}"

# Git
CACHE_DIR = Path(os.getenv("BADGE_CACHE_DIR", "cache")).resolve()
GIT_LOCK_TTL = int(os.getenv("GIT_LOCK_TTL", "300"))
GIT_TIMEOUT = int(os.getenv("GIT_TIMEOUT", "120"))

# Tokens
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")

REQUIRED_VARIABLES = ["REDIS_URL"]


def verify_required_variables() -> None:
    """Exit when a required environment variable is missing or blank."""
    missing = [key for key in REQUIRED_VARIABLES if not os.getenv(key, "").strip()]
    for key in missing:
        logger.error("Missing or empty environment variable: {}", key)
    if missing:
        sys.exit(1)
