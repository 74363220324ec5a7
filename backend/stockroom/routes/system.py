# backend/stockroom/routes/system.py
"""
System health endpoint.

Checks database connectivity; used by deploy probes. No authentication.
"""

import time
from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_database_health() -> dict:
    """
    Check database connectivity.

    Returns dict with status and latency.
    """
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    status = "healthy" if database["status"] == "healthy" else "unhealthy"
    body = {
        "status": status,
        "timestamp": to_utc_z(utcnow()),
        "checks": {"database": database},
    }
    return body, 200 if status == "healthy" else 503
