import asyncio
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from ledger_api.core.config import settings
from ledger_api.core.database import init_db
from ledger_api.core.exceptions import APIError
from ledger_api.core.logging_config import setup_logging
from ledger_api.api.endpoints import auth, health, listings, status, users
from ledger_api.services.status_broadcaster import StatusBroadcaster

setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up Ledger Listings API...")
    init_db()
    logger.info("Database initialized successfully")

    app.state.status_broadcaster = StatusBroadcaster(max_queue_size=settings.SSE_QUEUE_SIZE)
    app.state.event_loop = asyncio.get_running_loop()

    yield

    # Shutdown
    logger.info("Shutting down Ledger Listings API...")
    app.state.status_broadcaster.close()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Listing tables, user accounts and live scraper status for the ledger dashboard",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials="*" not in settings.BACKEND_CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Render service errors as {"error": message}."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters are plain 400s."""
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"{location}: {errors[0].get('msg')}" if location else errors[0].get("msg")
    else:
        message = "Invalid input"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# Include routers
app.include_router(health.router)
app.include_router(status.router)
app.include_router(auth.router)
app.include_router(listings.router)
app.include_router(users.router)


def end_status_streams(application: FastAPI) -> None:
    """Close every open status subscription from any thread or signal handler."""
    broadcaster = getattr(application.state, "status_broadcaster", None)
    loop = getattr(application.state, "event_loop", None)
    if broadcaster is None or loop is None or loop.is_closed():
        return
    loop.call_soon_threadsafe(broadcaster.close)


class LedgerServer(uvicorn.Server):
    """
    Uvicorn server that ends open status streams when shutdown starts.

    Uvicorn waits for open connections before running the lifespan shutdown,
    and a /status-updates stream never closes by itself.
    """

    def handle_exit(self, sig, frame) -> None:
        end_status_streams(app)
        super().handle_exit(sig, frame)


if __name__ == "__main__":
    config = uvicorn.Config(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
    )
    LedgerServer(config).run()
