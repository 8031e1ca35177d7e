"""
Service for rendering a website's articles as an RSS 2.0 document.
"""

import logging
from typing import Optional

from django.template.loader import render_to_string
from django.utils.http import http_date

from ..models import Feed
from .article_service import FEED_ITEM_LIMIT, ArticleService

logger = logging.getLogger(__name__)

GENERATOR = "Custom RSS Generator"
RSS_TEMPLATE = "core/rss.xml"


class RssService:
    """Renders RSS documents for feeds."""

    @staticmethod
    def get_feed(feed_id: str) -> Optional[Feed]:
        return Feed.objects.select_related("website").filter(feed_id=feed_id).first()

    @staticmethod
    def render_feed(feed_id: str) -> Optional[str]:
        """
        Render the RSS document for a feed.

        Text fields are XML-escaped by the template engine; dates are
        formatted as HTTP dates. Items keep the query order, newest first.

        Args:
            feed_id: Public feed identifier, e.g. "feed_12"

        Returns:
            The RSS XML, or None if no feed has this identifier
        """
        feed = RssService.get_feed(feed_id)
        if feed is None:
            return None

        articles = ArticleService.latest_for_website(feed.website, FEED_ITEM_LIMIT)
        items = [
            {
                "title": article.title,
                "link": article.link,
                "description": article.description or "",
                "pub_date": http_date(article.pub_date.timestamp()),
                "guid": article.guid,
            }
            for article in articles
        ]

        logger.info(f"Rendering {len(items)} articles for feed '{feed.feed_id}'")
        return render_to_string(
            RSS_TEMPLATE,
            {
                "feed": feed,
                "last_build_date": http_date(feed.last_build_date.timestamp()),
                "generator": GENERATOR,
                "items": items,
            },
        )
