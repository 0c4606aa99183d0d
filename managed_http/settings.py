import os
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

# Load .env file variables into environment
load_dotenv(verbose=True)

# The shared request instance waits up to five minutes per call.
DEFAULT_TIMEOUT_SECONDS = 60 * 5


class Settings:
    """Request layer configuration settings loaded from environment variables."""

    # --- Core Settings ---
    MANAGED_HTTP_BASE_URL: Optional[str] = None
    MANAGED_HTTP_TIMEOUT_SECONDS: float = DEFAULT_TIMEOUT_SECONDS

    # --- Helper Methods using os.getenv ---
    def get_base_url(self) -> Optional[str]:
        """Returns the base address prepended to relative request URLs, if set."""
        url = os.getenv("MANAGED_HTTP_BASE_URL")
        if url:
            parsed = urlparse(url)
            if not all([parsed.scheme, parsed.netloc]):
                raise ValueError(f"Invalid MANAGED_HTTP_BASE_URL format: {url}")
        return url

    def get_timeout_seconds(self) -> float:
        """Returns the overall per-request deadline in seconds."""
        raw = os.getenv("MANAGED_HTTP_TIMEOUT_SECONDS")
        if raw is None:
            return float(DEFAULT_TIMEOUT_SECONDS)
        try:
            timeout = float(raw)
        except ValueError:
            raise ValueError("MANAGED_HTTP_TIMEOUT_SECONDS environment variable must be a number.")
        if timeout <= 0:
            raise ValueError("MANAGED_HTTP_TIMEOUT_SECONDS environment variable must be positive.")
        return timeout

    # --- Logging Settings ---
    def get_log_level(self, default: str = "INFO") -> str:
        """Gets the configured log level, defaulting if not set."""
        return os.getenv("LOG_LEVEL", default).upper()
