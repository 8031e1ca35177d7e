"""Service for storing scraped articles."""

from datetime import timedelta
from typing import Any, Dict, List, Tuple

from django.conf import settings
from django.utils import timezone

from ..models import Article, Website

FEED_ITEM_LIMIT = 50


class ArticleService:
    """Service for persisting and querying articles."""

    @staticmethod
    def upsert_article(website: Website, candidate: Dict[str, Any]) -> Tuple[Article, bool]:
        """
        Insert an article or overwrite the one with the same GUID.

        The lookup is scoped to the website. With SITEFEED_GLOBAL_GUID_UPSERT
        set, an article with the GUID on another website is overwritten and
        moved here when this website has none.

        Args:
            website: Website the article was scraped from
            candidate: Normalized candidate with title, link, description,
                pub_date and guid

        Returns:
            Tuple of (article, created)
        """
        article = Article.objects.filter(website=website, guid=candidate["guid"]).first()
        if article is None and settings.SITEFEED_GLOBAL_GUID_UPSERT:
            article = Article.objects.filter(guid=candidate["guid"]).first()

        if article is None:
            article = Article.objects.create(
                website=website,
                title=candidate["title"],
                link=candidate["link"],
                description=candidate.get("description"),
                pub_date=candidate["pub_date"],
                guid=candidate["guid"],
            )
            return article, True

        article.website = website
        article.title = candidate["title"]
        article.link = candidate["link"]
        article.description = candidate.get("description")
        article.pub_date = candidate["pub_date"]
        article.save()
        return article, False

    @staticmethod
    def latest_for_website(website: Website, limit: int = FEED_ITEM_LIMIT) -> List[Article]:
        """
        Newest articles of a website.

        Returns:
            At most `limit` articles ordered by pub_date, newest first
        """
        return list(Article.objects.filter(website=website).order_by("-pub_date", "-id")[:limit])

    @staticmethod
    def delete_old_articles(days: int = 180) -> int:
        """
        Delete articles published more than `days` days ago.

        Returns:
            Number of deleted articles
        """
        cutoff_date = timezone.now() - timedelta(days=days)
        count, _ = Article.objects.filter(pub_date__lt=cutoff_date).delete()
        return count
