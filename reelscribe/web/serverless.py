"""Single-function adapter for serverless hosts.

Mirrors the standalone server's POST contract but answers CORS itself:
preflight ``OPTIONS`` gets an empty 200 and any other method a 405.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..log import configure_logging
from ..pipeline.runner import PipelineFactory, PipelineRunner
from .app import TRANSCRIBE_PATH, TranscribeRequest, handle_transcribe, invalid_body_handler


CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}


def create_serverless_app(settings: Settings | None = None, runner: PipelineRunner | None = None) -> FastAPI:
    settings = settings or get_settings()
    runner = runner or PipelineFactory(settings).create()

    app = FastAPI(title="Reel Transcriber (serverless)")
    app.add_exception_handler(RequestValidationError, invalid_body_handler)

    @app.middleware("http")
    async def _cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.options(TRANSCRIBE_PATH)
    def preflight() -> Response:
        return Response(status_code=200)

    @app.post(TRANSCRIBE_PATH)
    def transcribe(body: TranscribeRequest) -> JSONResponse:
        return handle_transcribe(runner, body)

    @app.api_route(TRANSCRIBE_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
    def method_not_allowed() -> JSONResponse:
        return JSONResponse({"error": "Method not allowed"}, status_code=405)

    return app


def _default_app() -> FastAPI:
    configure_logging()
    return create_serverless_app()


app = _default_app()
