"""Cross-origin headers for browser clients."""
from __future__ import annotations

from typing import Dict

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def cors_headers() -> Dict[str, str]:
    """Return a fresh copy of the permissive CORS header set."""

    return dict(CORS_HEADERS)
