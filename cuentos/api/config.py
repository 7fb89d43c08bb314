"""API configuration constants.

Single source of truth for settings used across the API layer.
"""

import os

from dotenv import find_dotenv, load_dotenv

# Load .env from project root (find_dotenv searches parent directories)
load_dotenv(find_dotenv())


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


# Database (PostgreSQL). Persistence is skipped when unset.
DATABASE_URL = os.getenv("DATABASE_URL", "")

# Public base URL used to build share permalinks
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5173").rstrip("/")

# Origins we expect requests from. Unknown origins are logged, not blocked.
DEV_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]
ALLOWED_ORIGINS = DEV_ORIGINS + [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "").split(",") if origin.strip()
]

# Whether to trust X-Forwarded-For/X-Real-IP headers for client IP detection.
# Only enable this when running behind a trusted reverse proxy that sets these headers.
TRUST_PROXY_HEADERS = _env_flag("TRUST_PROXY_HEADERS", "true")

# Sliding-window rate limit per client IP
RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "10"))

# Logging
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
