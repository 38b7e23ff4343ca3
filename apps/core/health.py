"""
Health check views for load balancers and deployment verification.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@never_cache
@require_GET
def health_check(request) -> JsonResponse:
    """
    Basic health check endpoint.

    Returns 200 OK if the application is running.

    Returns:
        JsonResponse: {"status": "ok", "version": "1.0.0", "environment": "..."}
    """
    return JsonResponse(
        {
            "status": "ok",
            "version": getattr(settings, "VERSION", "1.0.0"),
            "environment": getattr(settings, "ENVIRONMENT", "unknown"),
        }
    )


@never_cache
@require_GET
def health_check_detailed(request) -> JsonResponse:
    """
    Detailed health check endpoint with dependency checks.

    Checks database connectivity and the cache round trip.
    Returns 200 if all checks pass, 503 if any check fails.
    """
    health_status = {
        "status": "healthy",
        "version": getattr(settings, "VERSION", "1.0.0"),
        "environment": getattr(settings, "ENVIRONMENT", "unknown"),
        "checks": {},
    }

    all_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except DatabaseError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
        }
        all_healthy = False

    cache_key = "health_check_test"
    try:
        cache.set(cache_key, "ok", timeout=10)
        cache_ok = cache.get(cache_key) == "ok"
    except Exception as e:  # noqa: BLE001 - any backend error means the cache is down
        logger.error(f"Cache health check failed: {e}")
        cache_ok = False

    if cache_ok:
        health_status["checks"]["cache"] = {
            "status": "healthy",
            "message": "Cache connection successful",
        }
    else:
        health_status["checks"]["cache"] = {
            "status": "unhealthy",
            "message": "Cache round trip failed",
        }
        all_healthy = False

    if not all_healthy:
        health_status["status"] = "unhealthy"
        status_code = 503
    else:
        status_code = 200

    return JsonResponse(health_status, status=status_code)
