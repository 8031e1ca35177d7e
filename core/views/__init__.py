"""Core application views."""

from .default import health_check
from .rss import rss_feed_view
from .websites import (
    website_articles,
    website_collection,
    website_detail,
    website_scrape,
    website_toggle,
)

__all__ = [
    "health_check",
    "rss_feed_view",
    "website_articles",
    "website_collection",
    "website_detail",
    "website_scrape",
    "website_toggle",
]
