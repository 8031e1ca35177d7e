import logging
import time
from typing import Dict, List, Optional

import requests
from django.conf import settings as django_settings

logger = logging.getLogger(__name__)


class AIClientError(Exception):
    """Raised when the completion service cannot be reached or answers with an error."""

    pass


class AIClient:
    """Client for an OpenAI-compatible chat completion endpoint.

    Instances are constructed explicitly and handed to the scraper, so tests can
    pass a double instead.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[int] = None,
        max_retry_time: Optional[int] = None,
        app_title: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else django_settings.SITEFEED_AI_API_KEY
        self.api_url = (api_url or django_settings.SITEFEED_AI_API_URL).rstrip("/")
        self.model = model or django_settings.SITEFEED_AI_MODEL
        self.timeout = timeout if timeout is not None else django_settings.SITEFEED_AI_REQUEST_TIMEOUT
        self.max_retries = (
            max_retries if max_retries is not None else django_settings.SITEFEED_AI_MAX_RETRIES
        )
        self.retry_delay = (
            retry_delay if retry_delay is not None else django_settings.SITEFEED_AI_RETRY_DELAY
        )
        self.max_retry_time = (
            max_retry_time
            if max_retry_time is not None
            else django_settings.SITEFEED_AI_MAX_RETRY_TIME
        )
        self.app_title = app_title or django_settings.SITEFEED_AI_APP_TITLE

    def _post(self, url: str, headers: Dict[str, str], data: dict) -> requests.Response:
        """POST to the completion service, backing off on HTTP 429.

        The wait doubles per retry. Retrying stops after max_retries or when the
        next wait would end past max_retry_time, so a django-q task cannot time out
        while sleeping.
        """
        deadline = time.monotonic() + self.max_retry_time
        attempt = 0
        while True:
            response = requests.post(url, headers=headers, json=data, timeout=self.timeout)
            if response.status_code != 429 or attempt >= self.max_retries:
                response.raise_for_status()
                return response

            wait = self.retry_delay * 2**attempt
            if time.monotonic() + wait > deadline:
                logger.warning(
                    f"Completion service rate limited; a {wait}s wait exceeds the "
                    f"{self.max_retry_time}s retry budget"
                )
                response.raise_for_status()

            attempt += 1
            logger.warning(
                f"Completion service rate limited, retry {attempt}/{self.max_retries} in {wait}s"
            )
            if wait:
                time.sleep(wait)

    def complete(
        self,
        messages: List[Dict[str, str]],
        json_mode: bool = False,
        max_tokens: Optional[int] = None,
    ) -> Optional[str]:
        """
        Run a chat completion and return the first choice's message content.

        Args:
            messages: Chat messages, each a dict with 'role' and 'content'
            json_mode: Ask the service for a JSON object response
            max_tokens: Generation cap, defaults to SITEFEED_AI_MAX_TOKENS

        Returns:
            The reply content, which may be None if the service sent none

        Raises:
            AIClientError: On missing configuration, transport or HTTP errors,
                or an unexpected response shape
        """
        if not self.api_key:
            raise AIClientError("Completion service API key is not configured")

        url = f"{self.api_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": self.app_title,
        }

        data = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens or django_settings.SITEFEED_AI_MAX_TOKENS,
        }

        if json_mode:
            data["response_format"] = {"type": "json_object"}

        try:
            response = self._post(url, headers, data)
            result = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Completion request error: {e}")
            raise AIClientError(f"Completion request failed: {e}") from e
        except ValueError as e:
            raise AIClientError("Completion service returned a non-JSON body") from e

        try:
            return result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as err:
            logger.error(f"Unexpected completion response format: {result}")
            raise AIClientError("Unexpected completion response format") from err
