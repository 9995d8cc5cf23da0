"""
Health endpoints for load balancers and uptime checks.

/health/live answers as long as the process runs; /health/ready also needs the
database to answer and the filter fleet to be seeded.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone
import time

from ..database import get_db
from ..config import settings
from ..models.filter import Filter, FILTER_IDS

router = APIRouter(prefix="/health", tags=["Health"])

VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_db_health(db: Session) -> dict:
    """Round-trip a trivial query and report latency, or the failure."""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
        filter_count = db.query(Filter).count()
    except SQLAlchemyError as e:
        return {"status": "down", "error": str(e)[:100]}

    return {
        "status": "up",
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
        "backend": db.bind.dialect.name,
        "filters_seeded": filter_count == len(FILTER_IDS),
    }


@router.get("/live")
@router.get("/live/")
async def liveness_check():
    return {"status": "alive", "timestamp": _now()}


@router.get("/ready")
@router.get("/ready/")
async def readiness_check(db: Session = Depends(get_db)):
    database = get_db_health(db)
    if database["status"] == "up" and database["filters_seeded"]:
        return {"status": "ready", "timestamp": _now(), "database": database}

    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"status": "not_ready", "database": database, "timestamp": _now()},
    )


@router.get("")
@router.get("/")
async def simple_health_check():
    return {
        "status": "healthy",
        "version": VERSION,
        "environment": settings.environment,
        "timestamp": _now(),
    }
