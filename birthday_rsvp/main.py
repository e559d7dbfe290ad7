from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from birthday_rsvp.core.database import session_manager, aget_db
from sqlalchemy.ext.asyncio import AsyncSession

from birthday_rsvp.api.v1.endpoints.events import router as events_router, options_router

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
import logging
from contextlib import asynccontextmanager
from birthday_rsvp.core.config import MailConfig, settings
from birthday_rsvp.core.limiter import limiter
from birthday_rsvp.schemas.errorSchema import ErrorCodes, error_detail
from birthday_rsvp.services.EventNotifications import EventNotifier
from birthday_rsvp.services.GraphMail import GraphMailClient

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def build_notifier() -> EventNotifier:
    """Wire the notifier to the Graph mail client from settings."""
    mail_config = MailConfig.from_settings(settings)
    mail_client = GraphMailClient(
        tenant_id=settings.MICROSOFT_TENANT_ID,
        client_id=settings.MICROSOFT_CLIENT_ID,
        client_secret=settings.MICROSOFT_CLIENT_SECRET,
        sender=mail_config.sender,
        sender_name=mail_config.sender_name,
    )
    return EventNotifier(mail_config, mail_client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async context manager for app lifespan events"""

    try:
        logger.info("🚀 Starting Birthday RSVP application...")

        logger.info("🔌 Initializing database connection pool...")
        await session_manager.init()
        logger.info("✅ Database connection pool ready")

        app.state.notifier = build_notifier()
        if not settings.MAIL_ENABLED:
            logger.warning("📭 Microsoft Graph credentials missing, emails will not be sent")

    except Exception as e:
        logger.critical(f"🔥 Application startup failed: {str(e)}")
        raise

    try:
        logger.info("🏁 Birthday RSVP application startup complete")
        yield
    finally:
        logger.info("🔌 Closing database connections...")
        await session_manager.close()
        logger.info("👋 Application shutdown complete")


app = FastAPI(
    title="Birthday RSVP API",
    description="Create birthday parties, share guest links, collect RSVPs and send calendar invites",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(f"Response status: {response.status_code}")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.warning(f"Validation Error: {details}")
    return JSONResponse(
        status_code=400,
        content={"detail": error_detail("Invalid request", ErrorCodes.VALIDATION_ERROR, details)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": error_detail("Internal server error", ErrorCodes.INTERNAL_ERROR)},
    )


@app.get("/", tags=["Health Check"])
async def health_check(db: AsyncSession = Depends(aget_db)):
    try:
        await db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "service": "Birthday RSVP API",
            "database": "connected",
            "mail": "enabled" if settings.MAIL_ENABLED else "disabled"
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "service": "Birthday RSVP API",
            "database": "disconnected",
            "error": str(e)
        }


app.include_router(events_router, prefix="/api/v1", tags=["Events"])
app.include_router(options_router, prefix="/api/v1", tags=["Options"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("birthday_rsvp.main:app", host="0.0.0.0", port=8000)
