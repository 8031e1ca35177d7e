from datetime import datetime, timedelta, timezone as dt_timezone

from django.utils import timezone

import pytest

from core.models import Article
from core.services.article_service import ArticleService


def _candidate(guid="g1", title="A", pub_date=None, description=None):
    return {
        "title": title,
        "link": f"https://example.com/{guid}",
        "description": description,
        "pub_date": pub_date or datetime(2024, 1, 1, tzinfo=dt_timezone.utc),
        "guid": guid,
    }


@pytest.mark.django_db
class TestUpsertArticle:
    def test_insert_new_article(self, website):
        article, created = ArticleService.upsert_article(website, _candidate())

        assert created is True
        assert article.website == website
        assert article.guid == "g1"
        assert article.description is None

    def test_same_guid_overwrites_in_place(self, website):
        first, _ = ArticleService.upsert_article(website, _candidate(title="Old"))
        new_date = datetime(2024, 2, 1, tzinfo=dt_timezone.utc)

        second, created = ArticleService.upsert_article(
            website, _candidate(title="New", pub_date=new_date, description="Now described")
        )

        assert created is False
        assert second.id == first.id
        assert Article.objects.filter(guid="g1").count() == 1
        second.refresh_from_db()
        assert second.title == "New"
        assert second.description == "Now described"
        assert second.pub_date == new_date

    def test_same_guid_on_other_website_is_separate(self, website, other_website):
        ArticleService.upsert_article(website, _candidate())
        ArticleService.upsert_article(other_website, _candidate(title="Other copy"))

        assert Article.objects.filter(guid="g1").count() == 2
        assert Article.objects.get(website=website, guid="g1").title == "A"

    def test_global_guid_mode_moves_article(self, website, other_website, settings):
        settings.SITEFEED_GLOBAL_GUID_UPSERT = True
        first, _ = ArticleService.upsert_article(website, _candidate())

        second, created = ArticleService.upsert_article(
            other_website, _candidate(title="Moved")
        )

        assert created is False
        assert second.id == first.id
        second.refresh_from_db()
        assert second.website == other_website
        assert second.title == "Moved"


@pytest.mark.django_db
class TestLatestForWebsite:
    def test_limit_and_order(self, website, articles_batch):
        articles = ArticleService.latest_for_website(website)

        assert len(articles) == 50
        dates = [a.pub_date for a in articles]
        assert dates == sorted(dates, reverse=True)

    def test_custom_limit(self, website, articles_batch):
        assert len(ArticleService.latest_for_website(website, limit=5)) == 5


@pytest.mark.django_db
class TestDeleteOldArticles:
    def test_deletes_only_old_articles(self, website):
        now = timezone.now()
        Article.objects.create(
            website=website, title="Old", link="https://example.com/old", guid="old",
            pub_date=now - timedelta(days=200),
        )
        Article.objects.create(
            website=website, title="New", link="https://example.com/new", guid="new",
            pub_date=now - timedelta(days=10),
        )

        count = ArticleService.delete_old_articles(days=180)

        assert count == 1
        assert list(Article.objects.values_list("guid", flat=True)) == ["new"]
