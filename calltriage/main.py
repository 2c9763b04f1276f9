"""
Call Triage - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from calltriage.config import Settings, get_settings
from calltriage.errors import TriageError
from calltriage.llm.adapter import get_llm_adapter
from calltriage.services.analyzer import SentimentAnalyzer
from calltriage.services.openmic import OpenMicClient
from calltriage.store import RecordStore, MemoryStore, seed_sample_data
from calltriage.api import bots, calls, patients, stats
from calltriage.webhooks import openmic as openmic_webhooks

VERSION = "1.0.0"

logger = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Configure structured logging"""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as "<field> is required" / "Invalid value for <field>" """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    fields = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = fields[-1] if fields else "Request body"

    if error.get("type") == "missing":
        return f"{field} is required"
    return f"Invalid value for {field}"


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as {"error": message}"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info("Request validation failed", path=request.url.path, error=message)
        return _error_response(400, message)

    @app.exception_handler(TriageError)
    async def triage_exception_handler(request: Request, exc: TriageError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        return _error_response(500, "Internal server error")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    analyzer: Optional[SentimentAnalyzer] = None,
    openmic: Optional[OpenMicClient] = None,
) -> FastAPI:
    """Build the application and its collaborators"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info(
            "Starting Call Triage API",
            version=VERSION,
            openmic_configured=app.state.openmic.is_configured,
            analyzer_provider=settings.analyzer_llm_provider,
        )
        if settings.seed_sample_data:
            await seed_sample_data(app.state.store)
        yield
        logger.info("Shutting down Call Triage API")

    app = FastAPI(
        title="Call Triage",
        description="Mental-health call triage: post-call crisis analysis and bot management",
        version=VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store or MemoryStore()
    app.state.analyzer = analyzer or SentimentAnalyzer(
        llm=get_llm_adapter(settings),
        timeout=settings.analyzer_timeout_seconds,
    )
    app.state.openmic = openmic or OpenMicClient(
        base_url=settings.openmic_api_url,
        api_key=settings.openmic_api_key,
        timeout=settings.openmic_timeout_seconds,
        demo_mode=settings.openmic_demo_mode,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        """Basic health check"""
        return {"status": "healthy", "service": "api", "version": VERSION}

    # OpenMic webhooks and in-call functions
    app.include_router(openmic_webhooks.router, prefix="/api", tags=["Webhooks"])

    # Dashboard API
    app.include_router(bots.router, prefix="/api/bots", tags=["Bots"])
    app.include_router(calls.router, prefix="/api/calls", tags=["Calls"])
    app.include_router(patients.router, prefix="/api/patients", tags=["Patients"])
    app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "calltriage.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
