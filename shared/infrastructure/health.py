"""Liveness check used by load balancers and container orchestration."""

import structlog
from django.db import DatabaseError, connections
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET

logger = structlog.get_logger(__name__)


def check_database(alias: str = "default") -> str | None:
    """Return None when ``alias`` answers a trivial query, else the error text."""
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        return str(exc)
    return None


@csrf_exempt
@require_GET
def healthz(request):
    error = check_database()
    if error is not None:
        logger.error("healthz.database_unreachable", error=error)
        return JsonResponse({"service": "tripnest", "status": "unhealthy", "database": error}, status=503)
    return JsonResponse({"service": "tripnest", "status": "healthy", "database": "connected"})
