from abc import ABC, abstractmethod
from typing import Optional

from artvenues.fetch import Fetcher
from artvenues.models import CandidateEvent


class BaseScraper(ABC):
    # Subclasses must set these class attributes
    key: str = ""             # Registry key, matches the [scrapers.<key>] section in config.toml
    venue_slug: str = ""      # Venue the events belong to, matches [venues.<slug>]
    venue_name: str = ""
    default_url: str = ""
    # Set on scrapers for sites that block automated access
    unsupported_reason: Optional[str] = None

    def __init__(self, scraper_cfg: dict, fetcher: Optional[Fetcher] = None):
        """
        Args:
            scraper_cfg: The [scrapers.<key>] section from config.toml as a dict.
                         May contain 'url' to override default_url.
            fetcher:     HTTP client; a default Fetcher is created if omitted.
        """
        self.scraper_cfg = scraper_cfg
        self.url = scraper_cfg.get("url", self.default_url)
        self.fetcher = fetcher or Fetcher()

    @abstractmethod
    def fetch_events(self) -> list[CandidateEvent]:
        """Fetch and return the venue's current events, unique by source_url."""
        ...


class UnsupportedScraper(BaseScraper):
    """A venue whose site cannot be scraped. Returns no events; see unsupported_reason."""

    unsupported_reason = "site blocks automated access"

    def fetch_events(self) -> list[CandidateEvent]:
        return []
