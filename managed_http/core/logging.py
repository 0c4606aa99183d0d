# Centralized logging configuration for the managed_http package.

import logging
import sys
from datetime import UTC, datetime
from typing import Any, Dict, Optional

from managed_http.settings import Settings

# Recommended format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Default level if LOG_LEVEL env var is not set
DEFAULT_LOG_LEVEL = "INFO"

# Valid log levels
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Libraries known to be noisy that we might want to quiet down
NOISY_LIBRARIES = ["httpx", "httpcore"]


def setup_logging(settings: Optional[Settings] = None):
    """
    Routes the request layer's records (dispatch, cancellation, transport failures and
    the debug-level ``managed_http.requests`` bookkeeping) to stderr.

    Intended to be called once by the embedding application before building a
    ``RequestClient``, typically with the same ``Settings`` passed to
    ``RequestClient.from_settings``. The level comes from LOG_LEVEL (INFO when unset
    or invalid); set it to DEBUG to trace registry entries being added and removed.
    httpx and httpcore are held at WARNING so per-request connection chatter does
    not drown the layer's own records.
    """
    settings = settings or Settings()
    log_level_name = settings.get_log_level(default=DEFAULT_LOG_LEVEL)

    if log_level_name not in VALID_LOG_LEVELS:
        print(
            f"WARNING: Invalid LOG_LEVEL '{log_level_name}'. "
            f"Defaulting to {DEFAULT_LOG_LEVEL}. "
            f"Valid levels are: {', '.join(VALID_LOG_LEVELS)}",
            file=sys.stderr,
        )
        log_level_name = DEFAULT_LOG_LEVEL

    log_level = logging.getLevelName(log_level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    for lib_name in NOISY_LIBRARIES:
        logging.getLogger(lib_name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured with level {log_level_name}.")


def log_request_state(url: str, stage: str, details: Dict[str, Any]) -> None:
    """Log an in-flight request at a bookkeeping stage (registered, settled, cancel_requested)."""
    logger = logging.getLogger("managed_http.requests")
    logger.debug(
        f"[{url}] Request state at {stage}",
        extra={"stage": stage, "timestamp": datetime.now(UTC).isoformat(), **details},
    )
