"""FastAPI gateway that relays document extraction requests to Gemini."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response

from app.clients.gemini import GeminiClient, GeminiConfigError, GeminiError
from app.config import Settings, get_settings
from app.cors import cors_headers
from app.logging_config import configure_logging
from app.middleware import AdmissionMiddleware
from app.prompts import build_prompt
from app.rate_limit import SlidingWindowRateLimiter

configure_logging()
LOGGER = logging.getLogger(__name__)

settings = get_settings()
client = GeminiClient(settings)
rate_limiter = SlidingWindowRateLimiter(
    settings.rate_limit_requests,
    settings.rate_limit_window_seconds,
    sweep_interval_seconds=settings.rate_limit_sweep_seconds,
)

app = FastAPI(title="Document Extraction Gateway")
app.add_middleware(AdmissionMiddleware, limiter=rate_limiter, protected_paths=("/api/parse",))


def get_client(settings: Settings = Depends(get_settings)) -> GeminiClient:
    """Provide the configured Gemini client."""

    return client


@app.get("/healthz")
def healthz() -> JSONResponse:
    """Liveness probe."""

    return JSONResponse({"ok": True}, headers=cors_headers())


@app.post("/api/parse")
def parse_document(
    file: Optional[UploadFile] = File(None),
    schema_text: str = Form("", alias="schema"),
    gemini: GeminiClient = Depends(get_client),
) -> Response:
    """Extract structured data from an uploaded PDF and/or a field schema."""

    document = None
    if file is not None:
        try:
            document = file.file.read(settings.max_file_bytes)
        except OSError as exc:
            LOGGER.warning("error reading upload: %s", exc)
            raise HTTPException(status_code=400, detail="error reading file", headers=cors_headers()) from exc

    schema = schema_text.strip()
    if document is None and not schema:
        raise HTTPException(
            status_code=400, detail="either file or schema must be provided", headers=cors_headers()
        )

    prompt = build_prompt(schema, has_file=document is not None)
    try:
        content = gemini.extract(prompt, document)
    except GeminiConfigError as exc:
        LOGGER.error("gemini client not configured")
        raise HTTPException(status_code=500, detail=str(exc), headers=cors_headers()) from exc
    except GeminiError as exc:
        raise HTTPException(status_code=502, detail=str(exc), headers=cors_headers()) from exc

    return Response(content=content, media_type="application/json", headers=cors_headers())


def run() -> None:
    """Serve the gateway with uvicorn."""

    import uvicorn

    LOGGER.info("Backend listening on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
