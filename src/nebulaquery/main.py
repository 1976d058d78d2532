"""
FastAPI service that answers space and astronomy questions with an OpenAI chat model.
When NASA_API_KEY is set, the answer is decorated with NASA's Astronomy Picture of the Day.
Configure OPENAI_API_KEY, NASA_API_KEY, and related settings via environment variables or a .env file.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .apod import ApodFetcher
from .completions import AnswerGenerator, build_openai_client
from .config import Settings
from .errors import AskError, InternalError, MethodNotAllowed
from .log_utils import logger, set_level
from .orchestrator import AskOrchestrator
from .schemas import AskResponse, ErrorResponse

ASK_PATH = "/api/ask"


def build_orchestrator(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AskOrchestrator:
    """Wire the upstream clients from ``settings``.

    ``transport`` replaces the network for both upstreams; tests pass an
    ``httpx.MockTransport`` here.
    """
    generator: Optional[AnswerGenerator] = None
    if settings.has_openai_key:
        openai_http = httpx.AsyncClient(transport=transport) if transport else None
        generator = AnswerGenerator(
            client=build_openai_client(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                http_client=openai_http,
            ),
            model=settings.openai_model,
        )
    apod_fetcher = ApodFetcher(
        api_key=settings.nasa_api_key,
        url=settings.nasa_apod_url,
        client=httpx.AsyncClient(transport=transport) if transport else None,
    )
    return AskOrchestrator(
        settings=settings, generator=generator, apod_fetcher=apod_fetcher
    )


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[AskOrchestrator] = None,
) -> FastAPI:
    """Build the FastAPI application around a single orchestrator."""
    settings = settings or Settings()
    set_level(settings.log_level)
    orchestrator = orchestrator or build_orchestrator(settings)

    if not settings.has_openai_key:
        logger.warning("OPENAI_API_KEY is not set; /api/ask will answer with 500")
    if not settings.has_nasa_key:
        logger.info("NASA_API_KEY is not set; answers will not include APOD")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage startup and shutdown resources."""
        try:
            yield
        finally:
            await orchestrator.aclose()

    app = FastAPI(title="NebulaQuery", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AskError)
    async def ask_error_handler(request: Request, exc: AskError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # The router raises 405 for every verb a path does not accept.
        if exc.status_code == 405:
            return error_response(MethodNotAllowed(), headers=exc.headers)
        return await http_exception_handler(request, exc)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "service": "NebulaQuery",
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "ask": f"{ASK_PATH} (POST)",
                "docs": "/docs",
                "health": "/health",
            },
        }

    @app.post(
        ASK_PATH,
        response_model=AskResponse,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
        },
    )
    async def ask(request: Request) -> AskResponse:
        """Answer the question in the JSON body."""
        payload: Any
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to read request body")
            raise InternalError() from exc
        return await orchestrator.ask(payload)

    return app


def error_response(exc: AskError, headers: Optional[dict] = None) -> JSONResponse:
    """Render an ``AskError`` as the ``{"error": ...}`` envelope."""
    if isinstance(exc, MethodNotAllowed) and not headers:
        headers = {"Allow": "POST"}
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
        headers=headers,
    )


app = create_app()

# Run with: PYTHONPATH=src uvicorn nebulaquery.main:app --reload --host 0.0.0.0 --port 8000
