from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
import time
import uuid

from .config import settings
from .database import create_tables, SessionLocal
from .services.filter_service import FilterService
from .utils.errors import FilterTrackerError, MSG_STORAGE_FAILURE
from .utils.logging_config import (
    setup_logging, get_logger, set_request_context, clear_request_context
)
from .utils.rate_limiter import limiter

from .routers import filters, accessories, reports, health

logger = get_logger("filter_tracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(settings.log_level, json_format=settings.log_json)

    logger.info(f"Starting filter-tracker ({settings.environment})")
    logger.info(f"CORS origins: {settings.cors_origins}")

    create_tables()

    db = SessionLocal()
    try:
        created = FilterService(db).init_filters()
        if created:
            logger.info(f"Seeded {created} filters")
    finally:
        db.close()

    logger.info("Database ready, docs at /docs")

    yield

    logger.info("Shutting down filter-tracker")


app = FastAPI(
    title="Filter Tracker API",
    description="Filter fleet bookings and shared accessory availability",
    version=health.VERSION,
    lifespan=lifespan
)

# Rate limiter state
app.state.limiter = limiter


# ================================
# CORS MIDDLEWARE - MUST BE FIRST!
# ================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# Security Headers Middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


# Request ID Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        start = time.time()
        try:
            response = await call_next(request)
            logger.api_request(
                request.method,
                request.url.path,
                response.status_code,
                (time.time() - start) * 1000
            )
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIdMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests, try again later"}
    )


@app.exception_handler(FilterTrackerError)
async def filter_tracker_error_handler(request: Request, exc: FilterTrackerError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_detail()}
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": MSG_STORAGE_FAILURE}
    )


app.include_router(filters.router)
app.include_router(accessories.router)
app.include_router(reports.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "message": "Filter Tracker API",
        "version": health.VERSION,
        "docs": "/docs",
        "status": "running"
    }
