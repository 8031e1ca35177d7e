"""
Services package.
"""

from .article_service import ArticleService
from .rss_service import RssService
from .scraper_service import ScraperService
from .website_service import WebsiteService

__all__ = ["ArticleService", "RssService", "ScraperService", "WebsiteService"]
