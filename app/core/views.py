"""
Infrastructure views.

health_check is used by container probes and load balancers. It is not
part of the versioned API and needs no authentication.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Report database and cache connectivity.

    The database is required: without it no payment can be recorded, so
    a failure returns 503. The cache only backs throttling and is
    reported without affecting the status code.

    Example Response:
        {"status": "healthy", "database": "connected", "cache": "connected"}
    """
    health_status = {"status": "healthy", "database": "connected", "cache": "connected"}
    status_code = 200

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.error("Health check: database unreachable", extra={"error": str(e)})
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        status_code = 503

    try:
        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") != "ok":
            health_status["cache"] = "disconnected"
    except Exception as e:
        logger.warning("Health check: cache unreachable", extra={"error": str(e)})
        health_status["cache"] = "disconnected"

    return JsonResponse(health_status, status=status_code)
