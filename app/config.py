"""Application settings and environment loading utilities."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


def _load_dotenv() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


_load_dotenv()


def _positive_number(value: str, name: str) -> float:
    number = float(value)
    if number <= 0:
        raise RuntimeError(f"Environment variable {name} must be positive")
    return number


@dataclass(frozen=True)
class Settings:
    """Runtime configuration derived from environment variables."""

    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    upstream_timeout_seconds: float = 60
    rate_limit_requests: int = 50
    rate_limit_window_seconds: int = 3 * 60 * 60
    rate_limit_sweep_seconds: int = 0
    max_file_bytes: int = 6 << 20
    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def generate_url(self) -> str:
        return f"{self.gemini_base_url.rstrip('/')}/models/{self.gemini_model}:generateContent"

    @classmethod
    def from_env(cls) -> "Settings":
        rate_limit_requests = int(os.getenv("RATE_LIMIT_REQUESTS", "50"))
        if rate_limit_requests < 0:
            raise RuntimeError("Environment variable RATE_LIMIT_REQUESTS must not be negative")
        rate_limit_window = int(
            _positive_number(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "10800"), "RATE_LIMIT_WINDOW_SECONDS")
        )
        timeout = _positive_number(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"), "GEMINI_TIMEOUT_SECONDS")
        sweep_seconds = int(os.getenv("RATE_LIMIT_SWEEP_SECONDS", "0"))
        if sweep_seconds < 0:
            raise RuntimeError("Environment variable RATE_LIMIT_SWEEP_SECONDS must not be negative")

        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", cls.gemini_model),
            gemini_base_url=os.getenv("GEMINI_BASE_URL", cls.gemini_base_url),
            upstream_timeout_seconds=timeout,
            rate_limit_requests=rate_limit_requests,
            rate_limit_window_seconds=rate_limit_window,
            rate_limit_sweep_seconds=sweep_seconds,
            max_file_bytes=int(os.getenv("MAX_FILE_BYTES", str(cls.max_file_bytes))),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", "8080")),
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings.from_env()
