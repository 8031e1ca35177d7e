"""Default views for health checks."""

import logging

from django.db import DatabaseError
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from core.models import Website

logger = logging.getLogger(__name__)


@require_GET
def health_check(request):
    """
    Report whether the database answers, with the number of active websites.

    Returns:
        200: Database reachable
        503: Database query failed
    """
    try:
        active_websites = Website.objects.filter(is_active=True).count()
    except DatabaseError as e:
        logger.error(f"Health check failed: {e}")
        return JsonResponse({"status": "unhealthy", "error": str(e)}, status=503)

    return JsonResponse(
        {"status": "healthy", "database": "connected", "active_websites": active_websites}
    )
