"""Google Gemini REST client used to relay extraction requests."""
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional

import requests
from requests import Response

from app.config import Settings

LOGGER = logging.getLogger(__name__)


class GeminiError(RuntimeError):
    """Raised when the Gemini API cannot produce an answer."""


class GeminiConfigError(GeminiError):
    """Raised when the client is missing credentials."""


class GeminiClient:
    """Small HTTP client for ``generateContent`` with a per-call deadline."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def build_payload(self, prompt: str, document: Optional[bytes] = None) -> Dict[str, Any]:
        """Return the request body for a prompt and optional PDF document."""

        parts: List[Dict[str, Any]] = [{"text": prompt}]
        if document is not None:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": "application/pdf",
                        "data": base64.b64encode(document).decode("ascii"),
                    }
                }
            )
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {"temperature": 0.1},
        }

    def extract(self, prompt: str, document: Optional[bytes] = None) -> str:
        """Send the extraction request and return the model's JSON text."""

        api_key = self._settings.gemini_api_key
        if not api_key:
            raise GeminiConfigError("missing GEMINI_API_KEY")

        payload = self.build_payload(prompt, document)
        try:
            with self._session.post(
                self._settings.generate_url,
                json=payload,
                headers={"X-goog-api-key": api_key},
                timeout=self._settings.upstream_timeout_seconds,
            ) as response:
                self._raise_for_status(response)
                try:
                    body = response.json()
                except ValueError as exc:
                    LOGGER.warning("gemini decode error", extra={"status": response.status_code})
                    raise GeminiError("decode error") from exc
        except requests.RequestException as exc:
            LOGGER.warning("gemini request error: %s", exc)
            raise GeminiError("upstream error") from exc

        content = self._first_text(body)
        if not content.strip():
            content = "{}"
        LOGGER.debug("gemini response: %s", content)
        return content

    @staticmethod
    def _first_text(body: Any) -> str:
        try:
            candidates = body.get("candidates") or []
            if not candidates:
                return ""
            parts = (candidates[0].get("content") or {}).get("parts") or []
            if not parts:
                return ""
            text = parts[0].get("text") or ""
        except (AttributeError, TypeError, KeyError) as exc:
            LOGGER.warning("gemini response has unexpected shape: %s", exc)
            raise GeminiError("decode error") from exc
        if not isinstance(text, str):
            LOGGER.warning("gemini response text is not a string")
            raise GeminiError("decode error")
        return text

    def _raise_for_status(self, response: Response) -> None:
        if response.ok:
            return
        status = response.status_code
        LOGGER.error("gemini request failed: %s", response.text[:500], extra={"status": status})
        raise GeminiError("gemini error")
