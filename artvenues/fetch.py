"""
HTTP client shared by all venue scrapers.

Requests identify the bot honestly (name + contact URL) rather than posing as
a browser, and callers space out requests to the same site with delay().
Nothing is retried; a failed request raises FetchError.
"""

import logging
import time
from typing import Any, Optional

import requests

from artvenues import __version__

logger = logging.getLogger(__name__)

DEFAULT_CONTACT_URL = "https://github.com/artvenues/artvenues"
DEFAULT_DELAY_MS = 2000
DEFAULT_TIMEOUT = 15


def user_agent(contact_url: str = DEFAULT_CONTACT_URL) -> str:
    return f"artvenues-bot/{__version__} (+{contact_url}) - London art events aggregator"


class FetchError(Exception):
    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        if status is not None:
            message = f"HTTP {status} fetching {url}"
        else:
            message = f"Request to {url} failed: {reason}"
        super().__init__(message)


class Fetcher:
    def __init__(
        self,
        delay_ms: int = DEFAULT_DELAY_MS,
        timeout: float = DEFAULT_TIMEOUT,
        contact_url: str = DEFAULT_CONTACT_URL,
    ):
        self.delay_ms = delay_ms
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent(contact_url),
            "Accept-Language": "en-GB,en;q=0.9",
        })

    @classmethod
    def from_config(cls, scraper_cfg: dict) -> "Fetcher":
        return cls(
            delay_ms=scraper_cfg.get("delay_ms", DEFAULT_DELAY_MS),
            timeout=scraper_cfg.get("timeout", DEFAULT_TIMEOUT),
            contact_url=scraper_cfg.get("contact_url", DEFAULT_CONTACT_URL),
        )

    def _get(self, url: str, accept: str, params: Optional[dict] = None) -> requests.Response:
        logger.debug("GET %s %s", url, params or "")
        try:
            response = self.session.get(
                url, params=params, timeout=self.timeout, headers={"Accept": accept},
            )
        except requests.RequestException as exc:
            raise FetchError(url, reason=str(exc)) from exc
        # Redirects are followed, so anything outside 2xx here is a failure
        if not 200 <= response.status_code < 300:
            raise FetchError(response.url or url, status=response.status_code)
        return response

    def fetch_page(self, url: str, params: Optional[dict] = None) -> str:
        """GET an HTML page. params are merged into any query string already on url."""
        return self._get(
            url, "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8", params,
        ).text

    def fetch_json(self, url: str, params: Optional[dict] = None) -> Any:
        return self._get(url, "application/json", params).json()

    def delay(self, ms: Optional[int] = None) -> None:
        """Pause between two requests to the same venue."""
        ms = self.delay_ms if ms is None else ms
        if ms > 0:
            time.sleep(ms / 1000)
