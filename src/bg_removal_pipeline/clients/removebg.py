"""remove.bg API client with rate-limit backoff."""

import random
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from ..core.exceptions import ApiError, ConfigurationError, RetryExhausted
from ..core.models import REMOVE_BG_API_URL
from ..core.protocols import LoggerProtocol

RATE_LIMIT_STATUS = 429

# remove.bg detects the real format, so one placeholder type covers all inputs
PLACEHOLDER_CONTENT_TYPE = "image/png"


def compute_backoff(attempt: int, jitter: float) -> float:
    """
    Wait time in seconds before retrying after a 429.

    Args:
        attempt: Zero-based attempt index
        jitter: Value in [0, 1)

    Returns:
        ``2 ** attempt + jitter``
    """
    return 2**attempt + jitter


class RemoveBgClient:
    """Client for removing backgrounds from images via the remove.bg API."""

    def __init__(
        self,
        api_key: Optional[str],
        logger: LoggerProtocol,
        api_url: str = REMOVE_BG_API_URL,
        max_retries: int = 5,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[], float] = random.random,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.max_retries = max_retries
        self.timeout = timeout
        self._logger = logger
        self._session = session or requests.Session()
        self._sleep = sleep
        self._jitter = jitter

    def _build_payload(
        self, image_bytes: bytes, display_name: str
    ) -> Tuple[Dict[str, str], Dict[str, Tuple[str, bytes, str]]]:
        data = {"size": "auto"}
        files = {
            "image_file": (display_name, image_bytes, PLACEHOLDER_CONTENT_TYPE)
        }
        return data, files

    def submit(self, image_bytes: bytes, display_name: str) -> bytes:
        """
        Remove the background from an image.

        Args:
            image_bytes: Input image bytes, any format remove.bg accepts
            display_name: File name sent with the upload

        Returns:
            PNG bytes with the background removed

        Raises:
            ConfigurationError: No API key configured
            ApiError: remove.bg answered with a non-429 error status
            RetryExhausted: Every attempt was rate limited
        """
        if not self.api_key:
            raise ConfigurationError("REMOVE_BG_API_KEY environment variable is not set")

        for attempt in range(self.max_retries):
            # Multipart bodies are single-use; build a new one per attempt
            data, files = self._build_payload(image_bytes, display_name)
            response = self._post(data, files)

            if 200 <= response.status_code < 300:
                return response.content

            if response.status_code == RATE_LIMIT_STATUS:
                wait_time = compute_backoff(attempt, self._jitter())
                self._logger.warning(
                    f"Rate limit hit, waiting {round(wait_time, 1)}s before retry "
                    f"{attempt + 1}/{self.max_retries}...",
                    display_name=display_name,
                )
                self._sleep(wait_time)
                continue

            raise ApiError(response.status_code, response.reason or "", response.text)

        raise RetryExhausted(self.max_retries)

    def _post(self, data: Dict[str, str], files: Dict[str, Any]) -> requests.Response:
        return self._session.post(
            self.api_url,
            data=data,
            files=files,
            headers={"X-Api-Key": self.api_key},
            timeout=self.timeout,
        )
