"""
Health check endpoints with database pool monitoring.
"""

import time

from fastapi import APIRouter, Request

from app.config import settings
from app.db.pool import db_health_check
from app.infrastructure.observability.logging import log_health_check

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "job-search-tracker"}


@router.get("/readyz")
async def readyz(request: Request):
    """
    Readiness check covering the database pool, event tracker and configuration.
    """
    checks = {}
    overall_ok = True

    # 1) Database pool
    t0 = time.time()
    try:
        db_health = await db_health_check()
        is_healthy = db_health.get("healthy", False)

        checks["database"] = {
            "ok": is_healthy,
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }

        if "pool_stats" in db_health:
            pool_stats = db_health["pool_stats"]
            checks["database"].update(
                {
                    "pool_size": pool_stats.get("pool_size", 0),
                    "pool_available": pool_stats.get("pool_available", 0),
                    "pool_utilization_percent": pool_stats.get("pool_utilization_percent", 0),
                }
            )

        if not is_healthy:
            checks["database"]["error"] = db_health.get("error", "Database unhealthy")

        log_health_check(
            "database",
            is_healthy,
            checks["database"]["latency_ms"],
            checks["database"].get("error"),
        )
        overall_ok = overall_ok and is_healthy

    except Exception as e:
        checks["database"] = {
            "ok": False,
            "error": f"{type(e).__name__}: {e}",
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
        log_health_check(
            "database", False, checks["database"]["latency_ms"], checks["database"]["error"]
        )
        overall_ok = False

    # 2) Event tracking is optional; report it without gating readiness
    tracker = getattr(request.app.state, "event_tracker", None)
    checks["event_tracker"] = {
        "enabled": bool(tracker and tracker.enabled),
        "active": bool(tracker and tracker.is_active),
    }

    # 3) Configuration
    config_issues = []
    if not settings.SUPABASE_DB_URL:
        config_issues.append("SUPABASE_DB_URL not set")
    if not settings.SUPABASE_URL:
        config_issues.append("SUPABASE_URL not set")

    config_ok = not config_issues
    checks["configuration"] = {
        "ok": config_ok,
        "issues": config_issues or None,
        "environment": settings.environment,
    }
    overall_ok = overall_ok and config_ok

    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}


@router.get("/health/database")
async def database_health():
    """Detailed database pool health information."""
    t0 = time.time()
    db_health = await db_health_check()
    log_health_check(
        "database",
        db_health.get("healthy", False),
        round((time.time() - t0) * 1000, 1),
        db_health.get("error"),
    )
    return db_health
