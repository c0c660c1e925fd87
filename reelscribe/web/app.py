from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import Settings, get_settings
from ..errors import InvalidSourceError
from ..log import configure_logging
from ..pipeline.runner import PipelineFactory, PipelineRunner


logger = logging.getLogger(__name__)


TRANSCRIBE_PATH = "/api/transcribe"
INVALID_URL_MESSAGE = "Invalid Instagram URL"


class TranscribeRequest(BaseModel):
    url: Optional[str] = None


async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # A missing, malformed or non-string body is just another invalid URL.
    if request.url.path == TRANSCRIBE_PATH:
        return JSONResponse({"error": INVALID_URL_MESSAGE}, status_code=400)
    return await request_validation_exception_handler(request, exc)


def handle_transcribe(runner: PipelineRunner, body: TranscribeRequest) -> JSONResponse:
    try:
        result = runner.run(body.url)
    except InvalidSourceError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    status_code = 200 if result.ok else 500
    return JSONResponse(result.as_payload(), status_code=status_code)


def log_startup(settings: Settings) -> None:
    logger.info("environment check - RAPIDAPI_KEY: %s", "SET" if settings.rapidapi_key else "NOT SET")
    logger.info("environment check - OPENAI_API_KEY: %s", "SET" if settings.openai_api_key else "NOT SET")


def create_app(settings: Settings | None = None, runner: PipelineRunner | None = None) -> FastAPI:
    settings = settings or get_settings()
    runner = runner or PipelineFactory(settings).create()

    app = FastAPI(title="Reel Transcriber")
    app.add_exception_handler(RequestValidationError, invalid_body_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def _log_environment() -> None:
        log_startup(settings)

    # Plain ``def`` endpoints run in FastAPI's threadpool, so concurrent
    # pipelines never block the event loop.
    @app.post(TRANSCRIBE_PATH)
    def transcribe(body: TranscribeRequest) -> JSONResponse:
        return handle_transcribe(runner, body)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


def _default_app() -> FastAPI:
    configure_logging()
    return create_app()


app = _default_app()
