"""Pytest fixtures for core app tests."""

from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import MagicMock

from django.contrib.auth.models import User

import pytest

from core.models import Article
from core.services.website_service import WebsiteService


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="testuser", email="test@example.com", password="password"
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        username="otheruser", email="other@example.com", password="password"
    )


@pytest.fixture
def website(user):
    return WebsiteService.add_website(
        user, url="https://example.com", title="Example", description="Example site"
    )


@pytest.fixture
def other_website(other_user):
    return WebsiteService.add_website(other_user, url="https://other.example.com", title="Other")


@pytest.fixture
def articles_batch(website):
    articles = []
    base = datetime(2024, 1, 1, 12, 0, tzinfo=dt_timezone.utc)
    for i in range(60):
        articles.append(
            Article.objects.create(
                website=website,
                title=f"Article {i}",
                link=f"https://example.com/article/{i}",
                description=f"Description {i}",
                pub_date=base + timedelta(minutes=i),
                guid=f"guid-{i}",
            )
        )
    return articles


@pytest.fixture
def ai_client():
    """Completion client double; set return_value or side_effect on complete."""
    client = MagicMock()
    client.complete.return_value = "[]"
    return client


@pytest.fixture
def mock_html_content():
    return """
    <html>
        <head><title>Example</title></head>
        <body>
            <article><a href="/posts/1">First post</a></article>
            <article><a href="/posts/2">Second post</a></article>
        </body>
    </html>
    """


@pytest.fixture
def mock_completion_body():
    return {
        "id": "gen-1",
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": '[{"title": "A", "link": "https://example.com/a", "guid": "g1"}]',
                }
            }
        ],
    }
