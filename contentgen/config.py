"""Process-level runtime configuration shared by the CLI and HTTP adapters.

Scope:
    Environment-driven switches that are not provider specific. Provider and
    model selection lives in `contentgen.llm.provider_config`.

Determinism:
    Values are resolved once at import time after `.env` loading.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Sensitive prompt/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))

SESSION_COOKIE = "session_id"
# Upper bound on in-memory HTTP sessions; idle ones are evicted LRU-first.
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "1000"))


def configure_logging(level: str | None = None) -> None:
    """Install a root handler for entrypoints.

    Library modules only create loggers; handlers are attached here so that
    importing the package never reconfigures the host application's logging.
    """
    resolved = (level or ("DEBUG" if DEBUG else LOG_LEVEL)).upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
