"""Shared helpers for the scraper."""

from .html_fetcher import USER_AGENT, fetch_html

__all__ = ["USER_AGENT", "fetch_html"]
