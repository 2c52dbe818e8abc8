"""
Main FastAPI Application
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from bidwell.core.config import Settings, get_settings
from bidwell.core.database import engine, init_db
from bidwell.core.logging_config import setup_logging
from bidwell.core.metrics import metrics_payload
from bidwell.core.security import PasswordHasher, SessionManager
from bidwell.middleware.admin_guard import SessionGuardMiddleware
from bidwell.middleware.rate_limiter import limiter, rate_limit_handler
from bidwell.middleware.tracing import TracingMiddleware
from bidwell.services.errors import BidWellError

# Import routers
from bidwell.api import admin, auctions, auth, dashboard, pages

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown"""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    init_db()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection successful")

    yield

    engine.dispose()
    logger.info("Shutdown complete")


async def bidwell_error_handler(request: Request, exc: BidWellError):
    """Service errors as {"success": false, "error": ...}"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies answer 400 with a per-field message"""
    fields = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields[".".join(loc) or "body"] = error.get("msg", "invalid")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request", "fields": fields},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; the session secret comes from settings"""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        description="Silent auction: organizations, auctions, items and bids",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_manager = SessionManager.from_settings(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.limiter = limiter

    # Exception handlers
    app.add_exception_handler(BidWellError, bidwell_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    # Middleware (last added runs first)
    app.add_middleware(SessionGuardMiddleware, protected_prefixes=("/admin",), login_path="/login")
    app.add_middleware(TracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if STATIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # ========================================================================
    # INCLUDE ROUTERS
    # ========================================================================
    app.include_router(auth.router)
    app.include_router(auctions.router)
    app.include_router(admin.router)
    app.include_router(pages.router)
    app.include_router(dashboard.router)

    @app.get("/health", tags=["health"])
    def health_check():
        """Health check endpoint"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            db_status = "healthy"
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            db_status = "unhealthy"

        return JSONResponse(
            status_code=200 if db_status == "healthy" else 503,
            content={
                "status": db_status,
                "service": settings.APP_NAME,
                "version": settings.APP_VERSION,
                "database": db_status,
            },
        )

    @app.get("/metrics", tags=["health"], include_in_schema=False)
    def metrics():
        body, content_type = metrics_payload()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
