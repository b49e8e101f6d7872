import os
from typing import Dict

from dotenv import load_dotenv

load_dotenv()


class MissingEnvError(RuntimeError):
    """Raised when a required environment variable is not set."""


def must_env(name: str) -> str:
    """Return the value of a required environment variable, failing fast if absent."""
    value = os.environ.get(name)
    if not value:
        raise MissingEnvError(f"Missing env var: {name}")
    return value


# WHOOP credentials (must be set in environment variables).
# Read on first use so a bad deployment fails on the first request.
def whoop_client_id() -> str:
    return must_env("WHOOP_CLIENT_ID")


def whoop_client_secret() -> str:
    return must_env("WHOOP_CLIENT_SECRET")


def whoop_redirect_uri() -> str:
    return must_env("WHOOP_REDIRECT_URI")


def http_timeout() -> float:
    return float(os.getenv("WHOOP_HTTP_TIMEOUT", "15"))


SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "whoop_session")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3001))

# In-memory session storage (demo only; replace with DB in production)
# session_id -> {"state": ..., "token": {...}}
SESSIONS: Dict[str, Dict] = {}
