"""Service for managing the websites a user has registered."""

import logging
from typing import Any, Dict, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone

from ..exceptions import (
    AuthenticationRequiredError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from ..models import Article, Feed, Website
from .article_service import ArticleService

logger = logging.getLogger(__name__)

DUPLICATE_URL_MESSAGE = "Website already exists in your feeds"
ACCESS_DENIED_MESSAGE = "Website not found or access denied"


def _is_authenticated(user) -> bool:
    return user is not None and getattr(user, "is_authenticated", False)


class WebsiteService:
    """Ownership-checked CRUD over websites and their feeds."""

    @staticmethod
    def _require_user(user) -> None:
        if not _is_authenticated(user):
            raise AuthenticationRequiredError("Must be logged in")

    @staticmethod
    def get_owned(user, website_id: int) -> Website:
        """
        Fetch a website the user owns.

        Raises:
            AuthenticationRequiredError: If the user is anonymous
            NotFoundError: If no website has this ID
            PermissionDeniedError: If another user owns it
        """
        WebsiteService._require_user(user)
        try:
            website = Website.objects.get(id=website_id)
        except (Website.DoesNotExist, ValueError, TypeError) as e:
            raise NotFoundError(ACCESS_DENIED_MESSAGE) from e

        if website.user_id != user.id:
            raise PermissionDeniedError(ACCESS_DENIED_MESSAGE)
        return website

    @staticmethod
    def _check_url_available(user, url: str, exclude_id: Optional[int] = None) -> None:
        existing = Website.objects.filter(user=user, url=url)
        if exclude_id is not None:
            existing = existing.exclude(id=exclude_id)
        if existing.exists():
            raise ConflictError(DUPLICATE_URL_MESSAGE)

    @staticmethod
    def list_websites(user) -> List[Dict[str, Any]]:
        """
        List the user's websites with article counts.

        Args:
            user: Acting user

        Returns:
            List of dicts with website fields, articles_count and feed_id.
            Empty for anonymous users.
        """
        if not _is_authenticated(user):
            return []

        websites = (
            Website.objects.filter(user=user)
            .select_related("feed")
            .annotate(articles_count=Count("articles"))
        )

        results = []
        for website in websites:
            feed = getattr(website, "feed", None)
            results.append(
                {
                    "id": website.id,
                    "url": website.url,
                    "title": website.title,
                    "description": website.description,
                    "is_active": website.is_active,
                    "last_checked_at": website.last_checked_at,
                    "articles_count": website.articles_count,
                    "feed_id": feed.feed_id if feed else None,
                }
            )
        return results

    @staticmethod
    def add_website(user, url: str, title: str, description: Optional[str] = None) -> Website:
        """
        Register a website and create its feed.

        Args:
            user: Acting user, becomes the owner
            url: Website URL, unique per owner
            title: Display title, also used as the channel title
            description: Optional description

        Returns:
            The created Website

        Raises:
            AuthenticationRequiredError: If the user is anonymous
            ConflictError: If the user already registered this URL
        """
        WebsiteService._require_user(user)
        WebsiteService._check_url_available(user, url)

        try:
            with transaction.atomic():
                website = Website.objects.create(
                    url=url,
                    title=title,
                    description=description,
                    user=user,
                    is_active=True,
                )
                WebsiteService.create_feed(website)
        except IntegrityError as e:
            # Lost a race with a concurrent add of the same URL
            raise ConflictError(DUPLICATE_URL_MESSAGE) from e

        logger.info(f"User {user.id} added website {website.id} ({url})")
        return website

    @staticmethod
    def create_feed(website: Website) -> Feed:
        """Create the feed row for a freshly saved website."""
        return Feed.objects.create(
            website=website,
            feed_id=Feed.feed_id_for(website),
            title=website.title,
            description=Feed.description_for(website.title, website.description),
            link=website.url,
            last_build_date=timezone.now(),
        )

    @staticmethod
    def sync_feed(website: Website) -> Feed:
        """Refresh the feed metadata from the website, creating the feed if missing."""
        feed = Feed.objects.filter(website=website).first()
        if feed is None:
            return WebsiteService.create_feed(website)

        feed.title = website.title
        feed.description = Feed.description_for(website.title, website.description)
        feed.link = website.url
        feed.last_build_date = timezone.now()
        feed.save(update_fields=["title", "description", "link", "last_build_date"])
        return feed

    @staticmethod
    def update_website(
        user, website_id: int, url: str, title: str, description: Optional[str] = None
    ) -> Website:
        """
        Change a website's URL, title and description.

        The feed's title, description, link and last build date follow.

        Raises:
            AuthenticationRequiredError: If the user is anonymous
            NotFoundError: If the website does not exist
            PermissionDeniedError: If the user does not own the website
            ConflictError: If another of the user's websites has this URL
        """
        website = WebsiteService.get_owned(user, website_id)
        WebsiteService._check_url_available(user, url, exclude_id=website.id)

        try:
            with transaction.atomic():
                website.url = url
                website.title = title
                website.description = description
                website.save(update_fields=["url", "title", "description", "updated_at"])
                WebsiteService.sync_feed(website)
        except IntegrityError as e:
            raise ConflictError(DUPLICATE_URL_MESSAGE) from e

        return website

    @staticmethod
    def toggle_website(user, website_id: int) -> Website:
        """Flip whether the website takes part in the daily scrape."""
        website = WebsiteService.get_owned(user, website_id)

        website.is_active = not website.is_active
        website.save(update_fields=["is_active", "updated_at"])
        return website

    @staticmethod
    def remove_website(user, website_id: int) -> int:
        """
        Delete a website with its articles and feed.

        Dependents go first: articles, then the feed, then the website.

        Returns:
            Number of deleted articles
        """
        website = WebsiteService.get_owned(user, website_id)

        with transaction.atomic():
            article_count, _ = Article.objects.filter(website=website).delete()
            Feed.objects.filter(website=website).delete()
            website.delete()

        logger.info(f"User {user.id} removed website {website_id} and {article_count} articles")
        return article_count

    @staticmethod
    def get_articles(user, website_id: int) -> List[Article]:
        """Latest articles of an owned website; empty if missing, foreign or anonymous."""
        if not _is_authenticated(user):
            return []

        try:
            website = WebsiteService.get_owned(user, website_id)
        except (NotFoundError, PermissionDeniedError):
            return []

        return ArticleService.latest_for_website(website)
