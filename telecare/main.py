from fastapi import FastAPI, HTTPException
from contextlib import asynccontextmanager
from datetime import timedelta
import logging

from .config import settings
from .database import create_db_and_tables
from .middleware import LoggingMiddleware, ErrorHandlingMiddleware, PathExemptCORSMiddleware
from .exceptions import http_exception_handler
from .application.services.reminder_policy import MAX_POLL_INTERVAL
from .routers import reminders_router
from .schemas.common.common import HealthResponse, DatabaseStatus
from .utils import utcnow

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


def check_poll_interval() -> bool:
    """Warn when the scheduler cadence is wider than the tightest reminder window."""
    interval = timedelta(minutes=settings.REMINDER_POLL_INTERVAL_MINUTES)
    if interval > MAX_POLL_INTERVAL:
        logger.warning(
            f"REMINDER_POLL_INTERVAL_MINUTES={settings.REMINDER_POLL_INTERVAL_MINUTES} exceeds the "
            f"{int(MAX_POLL_INTERVAL.total_seconds() // 60)} minute reminder window; "
            "some 1_hour reminders will be missed"
        )
        return False
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.APP_NAME}...")
    app.state.db_init_ok = True
    app.state.db_init_error = None
    check_poll_interval()
    try:
        create_db_and_tables()
        logger.info("Database initialized successfully")
    except Exception as e:
        # Do not crash the app; report via health endpoint
        app.state.db_init_ok = False
        app.state.db_init_error = str(e)
        logger.exception("Database initialization failed")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url=("/docs" if settings.DOCS_ENABLED else None),
    redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
    openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
)

app.add_exception_handler(HTTPException, http_exception_handler)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)

# The reminder trigger answers its own preflight with a fixed permissive header set
app.add_middleware(
    PathExemptCORSMiddleware,
    exempt_paths=[reminders_router.DISPATCH_PATH],
    allow_origins=settings.allowed_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reminders_router.router)


if settings.HEALTH_CHECK_ENABLED:
    @app.get("/health", response_model=HealthResponse)
    def health_check():
        db_ok = getattr(app.state, "db_init_ok", True)
        return HealthResponse(
            status="healthy" if db_ok else "degraded",
            service=settings.APP_NAME,
            version=settings.APP_VERSION,
            timestamp=utcnow().isoformat(),
            database=DatabaseStatus(ok=db_ok, error=getattr(app.state, "db_init_error", None)),
            reminder_poll_interval_minutes=settings.REMINDER_POLL_INTERVAL_MINUTES,
        )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "telecare.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=1,
        log_level=settings.LOG_LEVEL.lower()
    )
