# backend/portpass/routes/system.py
"""
System health endpoint.

Reports whether the configured pass store answers basic queries.
"""

import time
from flask import Blueprint, current_app
from ..extensions import get_store
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def check_store_health() -> dict:
    """
    Check store connectivity with cheap reads.

    Returns dict with status and details.
    """
    start_time = time.time()
    store = get_store()
    try:
        staff_count = len(store.list_staff(include_inactive=True))
        has_passes = bool(store.recent_passes(1))

        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "backend": store.backend_name,
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "staff": staff_count,
                "has_passes": has_passes,
            }
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Store health check failed")
        return {
            "status": "unhealthy",
            "backend": store.backend_name,
            "latency_ms": round(elapsed_ms, 2),
            "error": "Store error"
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: store healthy
    - 503: store unhealthy
    """
    store_health = check_store_health()
    http_status = 200 if store_health["status"] == "healthy" else 503

    return {
        "status": store_health["status"],
        "timestamp": to_utc_z(utcnow()),
        "checks": {"store": store_health},
    }, http_status
