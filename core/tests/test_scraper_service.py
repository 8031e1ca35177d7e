import json
from datetime import datetime, timezone as dt_timezone
from unittest.mock import MagicMock, patch

from django.utils import timezone

import pytest

from core.ai_client import AIClientError
from core.exceptions import FetchError, NotFoundError, ParseError
from core.models import Article
from core.services.scraper_service import (
    MAX_COMPLETION_TOKENS,
    SYSTEM_PROMPT,
    ScraperService,
    build_extraction_prompt,
    normalize_candidates,
    parse_llm_articles,
)
from core.services.website_service import WebsiteService

SCRAPED_AT = datetime(2024, 6, 1, 6, 0, tzinfo=dt_timezone.utc)


def _fetcher(html="<html><body>news</body></html>"):
    return MagicMock(return_value=html)


class TestBuildExtractionPrompt:
    def test_prompt_contains_url_limit_and_html(self):
        prompt = build_extraction_prompt("<html>page</html>", "https://example.com")

        assert "up to 20 recent articles" in prompt
        assert "https://example.com" in prompt
        assert prompt.endswith("HTML:\n<html>page</html>")
        assert "return an empty array" in prompt


class TestParseLlmArticles:
    def test_parses_array(self):
        assert parse_llm_articles('[{"title": "A"}]') == [{"title": "A"}]

    def test_empty_array(self):
        assert parse_llm_articles("[]") == []

    def test_strips_code_fence(self):
        assert parse_llm_articles('```json\n[{"guid": "g1"}]\n```') == [{"guid": "g1"}]

    def test_object_is_not_an_array(self):
        with pytest.raises(ParseError, match="Not an array"):
            parse_llm_articles('{"articles": []}')

    def test_invalid_json(self):
        with pytest.raises(ParseError, match="Failed to parse LLM response as JSON"):
            parse_llm_articles("not json")

    def test_null_content(self):
        with pytest.raises(ParseError):
            parse_llm_articles(None)


class TestNormalizeCandidates:
    def test_drops_candidates_missing_required_strings(self):
        items = [
            {"title": "A", "link": "https://e.com/a", "guid": "a"},
            {"title": "B", "link": "https://e.com/b"},
            {"title": 5, "link": "https://e.com/c", "guid": "c"},
            "not an object",
        ]

        result = normalize_candidates(items, SCRAPED_AT)

        assert [c["guid"] for c in result] == ["a"]

    def test_pub_date_from_ms(self):
        result = normalize_candidates(
            [{"title": "A", "link": "l", "guid": "a", "pubDate": 1000}], SCRAPED_AT
        )

        assert result[0]["pub_date"] == datetime(1970, 1, 1, 0, 0, 1, tzinfo=dt_timezone.utc)

    @pytest.mark.parametrize("pub_date", [None, "2024-01-01", True, float("nan"), 10**20])
    def test_unusable_pub_date_falls_back_to_scrape_time(self, pub_date):
        item = {"title": "A", "link": "l", "guid": "a"}
        if pub_date is not None:
            item["pubDate"] = pub_date

        result = normalize_candidates([item], SCRAPED_AT)

        assert result[0]["pub_date"] == SCRAPED_AT

    def test_non_string_description_becomes_none(self):
        result = normalize_candidates(
            [
                {"title": "A", "link": "l", "guid": "a", "description": 42},
                {"title": "B", "link": "l", "guid": "b", "description": "text"},
            ],
            SCRAPED_AT,
        )

        assert result[0]["description"] is None
        assert result[1]["description"] == "text"


@pytest.mark.django_db
class TestScrapeWebsite:
    def test_successful_scrape_stores_articles(self, website, ai_client):
        ai_client.complete.return_value = json.dumps(
            [{"title": "A", "link": "https://example.com/a", "guid": "g1", "pubDate": 1000}]
        )
        fetcher = _fetcher()
        service = ScraperService(ai_client=ai_client, fetcher=fetcher)

        result = service.scrape_website(website.id)

        assert result["success"] is True
        assert result["website_id"] == website.id
        assert result["articles_found"] == 1
        assert result["articles"][0]["pubDate"] == 1000
        assert result["articles"][0]["description"] is None
        assert isinstance(result["scraped_at"], int)

        article = Article.objects.get(website=website)
        assert article.guid == "g1"
        assert article.title == "A"
        assert article.description is None
        assert article.pub_date == datetime(1970, 1, 1, 0, 0, 1, tzinfo=dt_timezone.utc)

        website.refresh_from_db()
        assert website.last_checked_at is not None
        fetcher.assert_called_once_with("https://example.com")

    def test_completion_request(self, website, ai_client):
        service = ScraperService(ai_client=ai_client, fetcher=_fetcher("<p>page</p>"))

        service.scrape_website(website.id)

        args, kwargs = ai_client.complete.call_args
        messages = args[0]
        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1]["role"] == "user"
        assert messages[1]["content"] == build_extraction_prompt("<p>page</p>", website.url)
        assert kwargs == {"json_mode": True, "max_tokens": MAX_COMPLETION_TOKENS}

    def test_rescrape_overwrites_same_guid(self, website, ai_client):
        service = ScraperService(ai_client=ai_client, fetcher=_fetcher())
        ai_client.complete.return_value = json.dumps(
            [{"title": "A", "link": "https://example.com/a", "guid": "g1"}]
        )
        service.scrape_website(website.id)

        ai_client.complete.return_value = json.dumps(
            [{"title": "A (updated)", "link": "https://example.com/a", "guid": "g1"}]
        )
        service.scrape_website(website.id)

        articles = Article.objects.filter(website=website)
        assert articles.count() == 1
        assert articles.get().title == "A (updated)"

    def test_empty_result_still_marks_checked(self, website, ai_client):
        service = ScraperService(ai_client=ai_client, fetcher=_fetcher())

        result = service.scrape_website(website.id)

        assert result["articles_found"] == 0
        website.refresh_from_db()
        assert website.last_checked_at is not None

    def test_invalid_candidates_are_dropped(self, website, ai_client):
        ai_client.complete.return_value = json.dumps(
            [
                {"title": "A", "link": "https://example.com/a", "guid": "g1"},
                {"title": "No guid", "link": "https://example.com/b"},
            ]
        )
        service = ScraperService(ai_client=ai_client, fetcher=_fetcher())

        result = service.scrape_website(website.id)

        assert result["articles_found"] == 1
        assert list(Article.objects.values_list("guid", flat=True)) == ["g1"]

    def test_fetch_failure_leaves_website_unchecked(self, website, ai_client):
        fetcher = MagicMock(side_effect=FetchError("HTTP 500: Server Error", status_code=500))
        service = ScraperService(ai_client=ai_client, fetcher=fetcher)

        with pytest.raises(FetchError):
            service.scrape_website(website.id)

        website.refresh_from_db()
        assert website.last_checked_at is None
        assert Article.objects.count() == 0
        ai_client.complete.assert_not_called()

    @patch("core.utils.html_fetcher.requests.get")
    def test_default_fetcher_http_500(self, mock_get, website, ai_client):
        mock_get.return_value = MagicMock(ok=False, status_code=500, reason="Server Error")
        service = ScraperService(ai_client=ai_client)

        with pytest.raises(FetchError, match="HTTP 500"):
            service.scrape_website(website.id)

        website.refresh_from_db()
        assert website.last_checked_at is None

    def test_non_array_reply_fails_run(self, website, ai_client):
        ai_client.complete.return_value = '{"articles": []}'
        service = ScraperService(ai_client=ai_client, fetcher=_fetcher())

        with pytest.raises(ParseError):
            service.scrape_website(website.id)

        website.refresh_from_db()
        assert website.last_checked_at is None

    def test_missing_website(self, db, ai_client):
        service = ScraperService(ai_client=ai_client, fetcher=_fetcher())

        with pytest.raises(NotFoundError):
            service.scrape_website(999999)


@pytest.mark.django_db
class TestScrapeWebsiteSafe:
    def test_failure_is_reported(self, website, ai_client):
        ai_client.complete.side_effect = AIClientError("Completion request failed: 500")
        service = ScraperService(ai_client=ai_client, fetcher=_fetcher())

        result = service.scrape_website_safe(website.id)

        assert result == {
            "success": False,
            "website_id": website.id,
            "error": "Completion request failed: 500",
        }

    def test_missing_website_is_reported(self, db, ai_client):
        result = ScraperService(ai_client=ai_client, fetcher=_fetcher()).scrape_website_safe(42)

        assert result["success"] is False
        assert "not found" in result["error"]


@pytest.mark.django_db
class TestScrapeAllActive:
    def test_failure_does_not_stop_other_websites(self, user, ai_client):
        broken = WebsiteService.add_website(user, url="https://broken.example.com", title="B")
        working = WebsiteService.add_website(user, url="https://working.example.com", title="W")

        def fetch(url):
            if "broken" in url:
                raise FetchError("HTTP 500: Server Error", status_code=500)
            return "<html></html>"

        ai_client.complete.return_value = json.dumps(
            [{"title": "A", "link": "https://working.example.com/a", "guid": "w1"}]
        )
        service = ScraperService(ai_client=ai_client, fetcher=fetch)

        results = service.scrape_all_active()

        by_id = {r["website_id"]: r for r in results}
        assert by_id[broken.id]["success"] is False
        assert by_id[broken.id]["url"] == "https://broken.example.com"
        assert by_id[working.id]["success"] is True
        assert Article.objects.filter(website=working).count() == 1

        broken.refresh_from_db()
        working.refresh_from_db()
        assert broken.last_checked_at is None
        assert working.last_checked_at is not None

    def test_inactive_websites_are_skipped(self, website, ai_client):
        website.is_active = False
        website.save()
        fetcher = _fetcher()

        results = ScraperService(ai_client=ai_client, fetcher=fetcher).scrape_all_active()

        assert results == []
        fetcher.assert_not_called()

    @patch("core.services.scraper_service.async_task")
    def test_async_mode_queues_one_task_per_website(self, mock_async, website, ai_client):
        mock_async.return_value = "task-1"
        fetcher = _fetcher()

        results = ScraperService(ai_client=ai_client, fetcher=fetcher).scrape_all_active(
            sync=False
        )

        mock_async.assert_called_once_with(
            "core.tasks.scrape_website", website.id, task_name=f"scrape_website_{website.id}"
        )
        assert results[0]["task_id"] == "task-1"
        assert results[0]["status"] == "queued"
        fetcher.assert_not_called()

    def test_last_checked_at_is_recent(self, website, ai_client):
        before = timezone.now()

        ScraperService(ai_client=ai_client, fetcher=_fetcher()).scrape_all_active()

        website.refresh_from_db()
        assert website.last_checked_at >= before
