"""JSON endpoints for managing websites and triggering scrapes."""

import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.exceptions import (
    AuthenticationRequiredError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from core.services import ScraperService, WebsiteService

logger = logging.getLogger(__name__)


def api_login_required(view_func):
    """Decorator returning 401 JSON instead of redirecting anonymous users."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            logger.warning(f"Unauthorized access attempt to {request.path}")
            return JsonResponse({"error": "Unauthorized"}, status=401)
        return view_func(request, *args, **kwargs)

    return wrapper


class BadRequest(Exception):
    pass


def _read_payload(request) -> dict:
    """Parse the JSON body and check the website fields."""
    try:
        payload = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequest("Invalid JSON body") from e

    if not isinstance(payload, dict):
        raise BadRequest("Expected a JSON object")

    url = payload.get("url")
    title = payload.get("title")
    description = payload.get("description") or None
    if not isinstance(url, str) or not url.strip():
        raise BadRequest("Field 'url' is required")
    if not isinstance(title, str) or not title.strip():
        raise BadRequest("Field 'title' is required")
    if description is not None and not isinstance(description, str):
        raise BadRequest("Field 'description' must be a string")

    return {"url": url.strip(), "title": title.strip(), "description": description}


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({"success": False, "error": message}, status=status)


def _website_dict(website) -> dict:
    return {
        "id": website.id,
        "url": website.url,
        "title": website.title,
        "description": website.description,
        "is_active": website.is_active,
        "last_checked_at": website.last_checked_at.isoformat() if website.last_checked_at else None,
    }


def _handle_service_errors(view_func):
    """Map registry errors onto HTTP status codes."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except BadRequest as e:
            return _error(str(e), 400)
        except AuthenticationRequiredError as e:
            return _error(str(e), 401)
        except (NotFoundError, PermissionDeniedError) as e:
            return _error(str(e), 404)
        except ConflictError as e:
            return _error(str(e), 409)

    return wrapper


@api_login_required
@require_http_methods(["GET", "POST"])
@_handle_service_errors
def website_collection(request):
    """
    List the user's websites (GET) or register a new one (POST).

    POST body: {"url": ..., "title": ..., "description": ...}
    """
    if request.method == "GET":
        websites = WebsiteService.list_websites(request.user)
        for website in websites:
            if website["last_checked_at"]:
                website["last_checked_at"] = website["last_checked_at"].isoformat()
            website["rss_url"] = (
                request.build_absolute_uri(f"/rss/{website['feed_id']}")
                if website["feed_id"]
                else None
            )
        return JsonResponse({"websites": websites})

    payload = _read_payload(request)
    website = WebsiteService.add_website(request.user, **payload)
    data = _website_dict(website)
    data["feed_id"] = website.feed.feed_id
    data["rss_url"] = request.build_absolute_uri(website.feed.get_absolute_url())
    return JsonResponse({"success": True, "website": data}, status=201)


@api_login_required
@require_http_methods(["POST", "DELETE"])
@_handle_service_errors
def website_detail(request, website_id: int):
    """Update (POST) or remove (DELETE) one of the user's websites."""
    if request.method == "DELETE":
        deleted = WebsiteService.remove_website(request.user, website_id)
        return JsonResponse({"success": True, "articles_deleted": deleted})

    payload = _read_payload(request)
    website = WebsiteService.update_website(request.user, website_id, **payload)
    return JsonResponse({"success": True, "website": _website_dict(website)})


@api_login_required
@require_POST
@_handle_service_errors
def website_toggle(request, website_id: int):
    """Pause or resume scheduled scraping for a website."""
    website = WebsiteService.toggle_website(request.user, website_id)
    return JsonResponse({"success": True, "website": _website_dict(website)})


@api_login_required
@require_GET
def website_articles(request, website_id: int):
    """Latest articles of a website; empty for websites the user does not own."""
    articles = WebsiteService.get_articles(request.user, website_id)
    return JsonResponse({"articles": [article.to_dict() for article in articles]})


@api_login_required
@require_POST
@_handle_service_errors
def website_scrape(request, website_id: int):
    """
    Scrape one website now.

    Returns:
        200: Pipeline result with articles_found and the extracted articles
        404: If the website is missing or not owned by the user
        502: If fetching, the completion call or parsing failed
    """
    WebsiteService.get_owned(request.user, website_id)

    result = ScraperService().scrape_website_safe(website_id)
    if not result["success"]:
        return JsonResponse(result, status=502)
    return JsonResponse(result)
