import logging
import sys
import time
import uuid
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api import auth, categories, groups, public, special_events, users, worships
from config.settings import Settings, get_settings
from init_db import init_database
from utils.error_handlers import register_exception_handlers
from utils.logging_utils import ContextFilter, clear_logging_context, set_logging_context

APP_TITLE = "Church Services API"
APP_VERSION = "1.0.0"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    """
    Attach the rotating file handler and the console handler to the root
    logger. Calling it again is a no-op.
    """
    root_logger = logging.getLogger()
    if any(getattr(h, "_church_handler", False) for h in root_logger.handlers):
        return

    settings.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = settings.log_dir / "backend.log"
    log_formatter = logging.Formatter(LOG_FORMAT)
    context_filter = ContextFilter()

    # File handler with rotation (10MB per file, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    console_handler = logging.StreamHandler(sys.stdout)

    for handler in (file_handler, console_handler):
        handler.setFormatter(log_formatter)
        handler.addFilter(context_filter)
        handler._church_handler = True
        root_logger.addHandler(handler)

    root_logger.setLevel(settings.log_level)
    logger.info(f"Logging initialized: {log_file}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and seed defaults on startup"""
    logger.info(f"Starting {APP_TITLE} {APP_VERSION}")
    init_database()
    yield
    logger.info("Application shutdown complete")


async def log_requests(request: Request, call_next):
    """Tag every log line of a request with its id and log the outcome."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    set_logging_context(request_id=request_id, method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        principal = getattr(request.state, "principal", "anonymous")
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms, {principal})"
        )
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        clear_logging_context()


def create_app(settings: Settings = None, use_lifespan: bool = True) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment settings
        use_lifespan: Run schema creation and seeding on startup

    Returns:
        Configured application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=APP_TITLE,
        description="Members, groups, worship services and special events of a church",
        version=APP_VERSION,
        lifespan=lifespan if use_lifespan else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization", "refresh_token", "authorities", "error", "X-Request-ID"],
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api")
    app.include_router(public.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(categories.router, prefix="/api")
    app.include_router(groups.router, prefix="/api")
    app.include_router(worships.router, prefix="/api")
    app.include_router(special_events.router, prefix="/api")

    @app.get("/api/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "ok",
            "service": APP_TITLE,
            "version": APP_VERSION
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting {APP_TITLE} on http://0.0.0.0:8000...")
    uvicorn.run(app, host="0.0.0.0", port=8000)
