"""Service for scraping websites into articles with an LLM extraction step."""

import json
import logging
import math
import re
from datetime import datetime, timezone as dt_timezone
from typing import Any, Callable, Dict, List, Optional

from django.utils import timezone
from django_q.tasks import async_task

from ..ai_client import AIClient, AIClientError
from ..exceptions import NotFoundError, ParseError, ScrapeError, ValidationError
from ..models import Website
from ..utils.html_fetcher import fetch_html
from .article_service import ArticleService

logger = logging.getLogger(__name__)

MAX_ARTICLES = 20
MAX_COMPLETION_TOKENS = 4096
SYSTEM_PROMPT = "You are a helpful assistant."

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def build_extraction_prompt(html: str, url: str) -> str:
    """Build the instruction asking the model to extract articles from a page."""
    return (
        "You are an expert web scraper. Given the following HTML from a website, "
        f"extract up to {MAX_ARTICLES} recent articles as JSON objects with the following "
        "fields: title (string), link (string, absolute URL), description (string, optional), "
        "pubDate (number, ms since epoch), guid (string, unique per article). "
        f"Use the website URL as context: {url}. Return a JSON array. "
        "If you can't find articles, return an empty array.\n\n"
        f"HTML:\n{html}"
    )


def parse_llm_articles(content: Any) -> List[Any]:
    """
    Parse the completion reply into a list of candidates.

    A single Markdown code fence around the payload is tolerated.

    Raises:
        ParseError: If the content is missing, not JSON, or not a JSON array
    """
    try:
        if not isinstance(content, str):
            raise ValueError("LLM response content is null or not a string")

        text = content.strip()
        fenced = _CODE_FENCE_RE.match(text)
        if fenced:
            text = fenced.group(1)

        articles = json.loads(text)
        if not isinstance(articles, list):
            raise ValueError("Not an array")
    except ValueError as e:
        raise ParseError(f"Failed to parse LLM response as JSON: {e}") from e

    return articles


def _pub_date_from_ms(value: Any, fallback: datetime) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if isinstance(value, float) and not math.isfinite(value):
        return fallback
    try:
        return datetime.fromtimestamp(value / 1000, tz=dt_timezone.utc)
    except (OverflowError, OSError, ValueError):
        return fallback


def validate_candidate(item: Any) -> None:
    """
    Check that a candidate has string title, link and guid.

    Raises:
        ValidationError: If a required field is missing or not a string
    """
    if not isinstance(item, dict):
        raise ValidationError("Candidate is not an object")
    for field in ("title", "link", "guid"):
        if not isinstance(item.get(field), str):
            raise ValidationError(f"Candidate field '{field}' is missing or not a string")


def normalize_candidates(items: List[Any], scraped_at: datetime) -> List[Dict[str, Any]]:
    """
    Keep valid candidates and coerce their optional fields.

    Candidates without string title, link and guid are dropped. A non-string
    description becomes None and a missing or non-numeric pubDate becomes
    the scrape time.
    """
    valid = []
    for item in items:
        try:
            validate_candidate(item)
        except ValidationError as e:
            logger.debug(f"Dropping candidate: {e}")
            continue

        description = item.get("description")
        valid.append(
            {
                "title": item["title"],
                "link": item["link"],
                "description": description if isinstance(description, str) else None,
                "pub_date": _pub_date_from_ms(item.get("pubDate"), scraped_at),
                "guid": item["guid"],
            }
        )
    return valid


def _to_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class ScraperService:
    """Fetch a website, extract articles with the completion service and store them."""

    def __init__(
        self,
        ai_client: Optional[AIClient] = None,
        fetcher: Callable[[str], str] = fetch_html,
    ):
        self.ai_client = ai_client if ai_client is not None else AIClient()
        self.fetcher = fetcher

    def extract_articles(self, html: str, url: str) -> List[Any]:
        """Ask the completion service for the page's articles and parse the reply."""
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_extraction_prompt(html, url)},
        ]
        content = self.ai_client.complete(
            messages, json_mode=True, max_tokens=MAX_COMPLETION_TOKENS
        )
        return parse_llm_articles(content)

    def scrape_website(self, website_id: int) -> Dict[str, Any]:
        """
        Run the scrape pipeline for one website.

        Steps: resolve the website, fetch its HTML, extract candidates with the
        completion service, keep the valid ones, upsert them, then stamp
        last_checked_at. Upserts made before a failure stay committed.

        Args:
            website_id: ID of the website to scrape

        Returns:
            Dictionary with:
                - success: True
                - website_id: The website ID
                - articles_found: Number of articles stored in this run
                - articles: The stored candidates (pubDate in ms since epoch)
                - scraped_at: Scrape time in ms since epoch

        Raises:
            NotFoundError: If the website does not exist
            FetchError: If the page could not be fetched
            AIClientError: If the completion service call failed
            ParseError: If the reply is not a JSON array
        """
        website = Website.objects.filter(id=website_id).first()
        if website is None:
            raise NotFoundError(f"Website with ID {website_id} not found")

        html = self.fetcher(website.url)
        logger.info(f"Fetched {len(html)} bytes from {website.url}")

        items = self.extract_articles(html, website.url)

        scraped_at = timezone.now()
        candidates = normalize_candidates(items, scraped_at)
        dropped = len(items) - len(candidates)
        if dropped:
            logger.info(f"Dropped {dropped} invalid candidates for {website.url}")

        created_count = 0
        for candidate in candidates:
            _, created = ArticleService.upsert_article(website, candidate)
            if created:
                created_count += 1

        website.last_checked_at = timezone.now()
        website.save(update_fields=["last_checked_at"])

        logger.info(
            f"Scraped {website.url}: {len(candidates)} articles "
            f"({created_count} new, {len(candidates) - created_count} updated)"
        )

        return {
            "success": True,
            "website_id": website.id,
            "articles_found": len(candidates),
            "articles": [
                {
                    "title": c["title"],
                    "link": c["link"],
                    "description": c["description"],
                    "pubDate": _to_ms(c["pub_date"]),
                    "guid": c["guid"],
                }
                for c in candidates
            ],
            "scraped_at": _to_ms(scraped_at),
        }

    def scrape_website_safe(self, website_id: int) -> Dict[str, Any]:
        """
        Run the pipeline for a manual caller, reporting failure as a result.

        Returns:
            The scrape_website result, or a dict with success False and an
            error message
        """
        try:
            return self.scrape_website(website_id)
        except (NotFoundError, ScrapeError, AIClientError) as e:
            logger.warning(f"Scrape of website {website_id} failed: {e}")
            return {"success": False, "website_id": website_id, "error": str(e)}

    def scrape_all_active(self, sync: bool = True) -> List[Dict[str, Any]]:
        """
        Scrape every active website, one after another.

        A failing website is logged and skipped; the rest still run.

        Args:
            sync: If True (default), scrape in this process sequentially.
                  If False, queue one django-q task per website.

        Returns:
            If sync=True: One result dict per website
            If sync=False: One dict per website with the queued task_id
        """
        websites = list(Website.objects.filter(is_active=True).order_by("id"))
        logger.info(f"Starting daily scrape for {len(websites)} websites")

        results = []
        for website in websites:
            if not sync:
                task_id = async_task(
                    "core.tasks.scrape_website",
                    website.id,
                    task_name=f"scrape_website_{website.id}",
                )
                logger.info(f"Queued scrape task for website {website.id} ({website.url}): {task_id}")
                results.append(
                    {"website_id": website.id, "url": website.url, "task_id": task_id, "status": "queued"}
                )
                continue

            try:
                result = self.scrape_website(website.id)
                logger.info(f"Scraped {website.url}: success")
            except Exception as e:
                logger.error(f"Error scraping {website.url}: {e}")
                result = {"success": False, "website_id": website.id, "error": str(e)}
            result["url"] = website.url
            results.append(result)

        logger.info("Daily scraping completed")
        return results
