"""Application configuration: environment variables and defaults.

All provider URLs and API keys live HERE. Keys are read once at startup;
a missing key only fails the provider call that needs it.
A ``.env`` file at the project root is loaded first if present.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_ROOT / ".env")


def _get(key: str, default: str = "") -> str:
    return (os.getenv(key) or default).strip()


class Settings:
    """Central configuration pulled from environment with safe defaults."""

    # Paths
    BASE_DIR: Path = _ROOT
    PACKAGE_DIR: Path = Path(__file__).resolve().parent
    STATIC_DIR: Path = PACKAGE_DIR / "static"
    TEMPLATES_DIR: Path = PACKAGE_DIR / "templates"
    LOGS_DIR: Path = Path(_get("LOGS_DIR", str(_ROOT / "logs")))

    # ── Provider API keys ──────────────────────────────────────────
    FINNHUB_API_KEY: str = _get("FINNHUB_API_KEY")
    TIINGO_API_KEY: str = _get("TIINGO_API_KEY")
    POLYGON_API_KEY: str = _get("POLYGON_API_KEY")

    # ── Provider URLs ──────────────────────────────────────────────
    FINNHUB_URL: str = _get("FINNHUB_URL", "https://finnhub.io/api/v1")
    TIINGO_URL: str = _get("TIINGO_URL", "https://api.tiingo.com")
    POLYGON_URL: str = _get("POLYGON_URL", "https://api.polygon.io")

    # Outbound HTTP timeout in seconds (httpx's own default)
    HTTP_TIMEOUT: float = float(_get("HTTP_TIMEOUT", "5.0"))

    # ── Transaction refresh ────────────────────────────────────────
    # Most-recent records requested from the transactions feed per refresh
    TRANSACTIONS_LIMIT: int = int(_get("TRANSACTIONS_LIMIT", "100"))
    REFRESH_INTERVAL_SECONDS: int = int(_get("REFRESH_INTERVAL_SECONDS", "60"))
    # Concurrent refresh runs allowed when the provider is slow (last writer wins)
    REFRESH_MAX_OVERLAP: int = int(_get("REFRESH_MAX_OVERLAP", "3"))

    # Logging: console threshold and how many per-run log files to keep
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO").upper()
    LOG_KEEP_FILES: int = int(_get("LOG_KEEP_FILES", "10"))

    # Server
    HOST: str = _get("HOST", "0.0.0.0")
    PORT: int = int(_get("PORT", "3000"))

    def __init__(self) -> None:
        """Ensure runtime directories exist."""
        self.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    def missing_keys(self) -> list[str]:
        """Names of provider API keys that are not configured."""
        keys = {
            "FINNHUB_API_KEY": self.FINNHUB_API_KEY,
            "TIINGO_API_KEY": self.TIINGO_API_KEY,
            "POLYGON_API_KEY": self.POLYGON_API_KEY,
        }
        return [name for name, value in keys.items() if not value]


settings = Settings()
