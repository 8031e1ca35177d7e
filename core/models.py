"""Database models for the application."""

from django.db import models
from django.urls import reverse
from django.utils import timezone

FEED_ID_PREFIX = "feed_"


class Website(models.Model):
    """Website registered by a user for scraping."""

    url = models.URLField(max_length=2000)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    user = models.ForeignKey("auth.User", on_delete=models.CASCADE, related_name="websites")
    is_active = models.BooleanField(default=True)
    last_checked_at = models.DateTimeField(
        null=True, blank=True, help_text="Set by the scraper after each successful fetch."
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Website"
        verbose_name_plural = "Websites"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "url"], name="unique_website_url_per_user"),
        ]
        indexes = [
            models.Index(fields=["user"], name="website_user_idx"),
            models.Index(fields=["is_active"], name="website_is_active_idx"),
            models.Index(fields=["last_checked_at"], name="website_last_checked_idx"),
        ]

    def __str__(self):
        return self.title


class Article(models.Model):
    """Article extracted from a website by the scraper."""

    website = models.ForeignKey(Website, on_delete=models.CASCADE, related_name="articles")
    title = models.CharField(max_length=1000)
    link = models.TextField()
    description = models.TextField(blank=True, null=True)
    pub_date = models.DateTimeField(default=timezone.now)
    guid = models.CharField(max_length=1000)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Article"
        verbose_name_plural = "Articles"
        ordering = ["-pub_date", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["website", "guid"], name="unique_article_guid_per_website"),
        ]
        indexes = [
            models.Index(fields=["website"], name="article_website_idx"),
            models.Index(fields=["website", "pub_date"], name="article_website_pub_date_idx"),
            models.Index(fields=["guid"], name="article_guid_idx"),
        ]

    def __str__(self):
        return self.title

    def to_dict(self) -> dict:
        """Serialize in the shape the scraper reports extracted articles."""
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "pubDate": int(self.pub_date.timestamp() * 1000),
            "guid": self.guid,
        }


class Feed(models.Model):
    """RSS channel metadata, one per website."""

    website = models.OneToOneField(Website, on_delete=models.CASCADE, related_name="feed")
    feed_id = models.CharField(max_length=100, unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField()
    link = models.URLField(max_length=2000)
    last_build_date = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Feed"
        verbose_name_plural = "Feeds"
        ordering = ["feed_id"]

    def __str__(self):
        return self.feed_id

    @staticmethod
    def feed_id_for(website: Website) -> str:
        return f"{FEED_ID_PREFIX}{website.pk}"

    @staticmethod
    def description_for(title: str, description) -> str:
        return description or f"RSS feed for {title}"

    def get_absolute_url(self) -> str:
        return reverse("rss_feed", kwargs={"feed_id": self.feed_id})
