"""Public RSS endpoint."""

import logging

from django.http import HttpResponse
from django.views.decorators.http import require_GET

from core.services.rss_service import RssService

logger = logging.getLogger(__name__)

RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"
RSS_CACHE_CONTROL = "public, max-age=3600"


@require_GET
def rss_feed_view(request, feed_id: str = ""):
    """
    Serve the RSS document for a feed.

    Returns:
        200: RSS XML, cacheable for an hour
        400: If the feed ID is missing
        404: If no feed has this ID
    """
    if not feed_id:
        return HttpResponse("Feed ID required", status=400, content_type="text/plain")

    rss_xml = RssService.render_feed(feed_id)
    if rss_xml is None:
        logger.info(f"RSS request for unknown feed '{feed_id}'")
        return HttpResponse("Feed not found", status=404, content_type="text/plain")

    response = HttpResponse(rss_xml, content_type=RSS_CONTENT_TYPE)
    response["Cache-Control"] = RSS_CACHE_CONTROL
    return response
