"""
Django-Q2 tasks for scheduled scraping.
"""

import logging

from django.conf import settings

from core.services.article_service import ArticleService
from core.services.scraper_service import ScraperService

logger = logging.getLogger(__name__)


def scrape_all_websites():
    """Scheduled entry point: scrape every active website sequentially."""
    results = ScraperService().scrape_all_active(sync=True)
    failed = sum(1 for result in results if not result.get("success"))
    logger.info(f"Scheduled scrape finished: {len(results) - failed} succeeded, {failed} failed")
    return results


def scrape_website(website_id: int):
    """Scrape a single website; used when the daily run fans out into tasks."""
    return ScraperService().scrape_website_safe(website_id)


def delete_old_articles():
    """Drop articles older than SITEFEED_ARTICLE_RETENTION_DAYS."""
    days = settings.SITEFEED_ARTICLE_RETENTION_DAYS
    count = ArticleService.delete_old_articles(days=days)
    logger.info(f"Deleted {count} articles older than {days} days")
    return count
