"""
Serpentine Galleries scraper.

Listing page: https://www.serpentinegalleries.org/whats-on/
  - Cards: section.teaser
  - Title + link: h3.teaser__title a
  - Types: .teaser__pretitle a  (e.g. "Exhibition", "Talk")
  - Date:  last .meta__row  ("12 March - 23 August 2026", "26 February 2026, 7pm", "Ongoing")
  - Image: img.teaser__img (absolute CDN URL)
  - Text:  p.teaser__text
  - Pagination: WordPress <link rel="next" href="..."> in the head

"Ongoing" and unparseable dates start today.
"""

import logging
import re
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup, Tag

from artvenues.classify import infer_event_type
from artvenues.fetch import FetchError
from artvenues.models import CandidateEvent
from artvenues.normalize import parse_date_range
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import ITEM_ERRORS, absolute_url, first_text

logger = logging.getLogger(__name__)

_BASE = "https://www.serpentinegalleries.org"
_MAX_PAGES = 5
_ONGOING_RE = re.compile(r"ongoing", re.IGNORECASE)


def _parse_dates(text: str, today: date) -> tuple[Optional[date], Optional[date]]:
    if _ONGOING_RE.search(text):
        return today, None
    return parse_date_range(text, today)


def _parse_teaser(card: Tag, today: date) -> Optional[CandidateEvent]:
    link = card.select_one("h3.teaser__title a")
    if not link or not link.get("href"):
        return None
    title = link.get_text(" ", strip=True)
    if len(title) < 3:
        return None

    types = " ".join(a.get_text(strip=True) for a in card.select(".teaser__pretitle a"))
    rows = card.select(".meta__row")
    date_text = rows[-1].get_text(" ", strip=True) if rows else ""
    start_date, end_date = _parse_dates(date_text, today)
    description = first_text(card, "p.teaser__text")
    img = card.select_one("img.teaser__img")

    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description, types),
        start_date=start_date or today,
        end_date=end_date,
        image_url=(img.get("src") or None) if img else None,
        source_url=absolute_url(link["href"], _BASE),
    )


class SerpentineScraper(BaseScraper):
    key = "serpentine"
    venue_slug = "serpentine-galleries"
    venue_name = "Serpentine Galleries"
    default_url = f"{_BASE}/whats-on/"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        events: list[CandidateEvent] = []
        seen: set[str] = set()

        page_url: Optional[str] = self.url
        for page in range(1, _MAX_PAGES + 1):
            if page > 1:
                self.fetcher.delay()
            try:
                html = self.fetcher.fetch_page(page_url)
            except FetchError as exc:
                if page == 1:
                    raise
                logger.warning("Serpentine page %d failed, keeping %d events: %s", page, len(events), exc)
                break

            soup = BeautifulSoup(html, "lxml")
            cards = soup.select("section.teaser")
            if not cards:
                break

            for card in cards:
                try:
                    event = _parse_teaser(card, today)
                except ITEM_ERRORS as exc:
                    logger.debug("Skipping malformed Serpentine teaser: %s", exc)
                    continue
                if event is None or event.source_url in seen:
                    continue
                seen.add(event.source_url)
                events.append(event)

            next_link = soup.select_one('link[rel="next"]')
            page_url = absolute_url(next_link.get("href"), _BASE) if next_link else None
            if not page_url:
                break

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
