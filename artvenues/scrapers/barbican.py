"""
Barbican Centre scraper.

Listing page: https://www.barbican.org.uk/whats-on
  - Each event card is an <a href="/whats-on/..."> wrapping the whole card
  - Title: first h2 / h3 / [class*=title] inside the card
  - Date:  [class*=date], time or .subtitle  (e.g. "15 Mar - 20 Jun 2026")
  - Image: img[src] or img[data-src], usually relative
  - Pagination: ?page=N

Cards whose date cannot be parsed are dropped: the listing mixes events with
editorial links that carry no date at all.
"""

import logging
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup, Tag

from artvenues.classify import infer_event_type
from artvenues.fetch import FetchError
from artvenues.models import CandidateEvent
from artvenues.normalize import parse_date_range
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import (
    ITEM_ERRORS, absolute_url, first_line, first_text, free_signal, image_src,
    select_text, sold_out_signal,
)

logger = logging.getLogger(__name__)

_BASE = "https://www.barbican.org.uk"
_MAX_PAGES = 5


def _parse_card(card: Tag, today: date) -> Optional[CandidateEvent]:
    href = card.get("href", "")
    if not href or href.rstrip("/") == "/whats-on":
        return None

    title = first_text(card, "h2, h3, .title, [class*='title']") or first_line(card)
    if len(title) < 3:
        return None

    date_text = select_text(card, "[class*='date'], time, .subtitle") or first_text(card, "p")
    start_date, end_date = parse_date_range(date_text, today)
    if start_date is None:
        return None

    summaries = card.select("[class*='description'], [class*='summary'], p")
    description = summaries[-1].get_text(" ", strip=True) if summaries else ""

    card_text = card.get_text(" ", strip=True)
    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description),
        start_date=start_date,
        end_date=end_date,
        image_url=absolute_url(image_src(card), _BASE),
        source_url=absolute_url(href, _BASE),
        is_free=free_signal(card_text),
        is_sold_out=sold_out_signal(card_text),
    )


class BarbicanScraper(BaseScraper):
    key = "barbican"
    venue_slug = "barbican-centre"
    venue_name = "Barbican Centre"
    default_url = f"{_BASE}/whats-on"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        events: list[CandidateEvent] = []
        seen: set[str] = set()

        for page in range(1, _MAX_PAGES + 1):
            params = None
            if page > 1:
                params = {"page": page}
                self.fetcher.delay()
            try:
                html = self.fetcher.fetch_page(self.url, params=params)
            except FetchError as exc:
                if page == 1:
                    raise
                logger.warning("Barbican page %d failed, keeping %d events: %s", page, len(events), exc)
                break

            soup = BeautifulSoup(html, "lxml")
            cards = soup.select("a[href*='/whats-on/']")
            if not cards:
                break

            new_on_page = 0
            for card in cards:
                try:
                    event = _parse_card(card, today)
                except ITEM_ERRORS as exc:
                    logger.debug("Skipping malformed Barbican card: %s", exc)
                    continue
                if event is None or event.source_url in seen:
                    continue
                seen.add(event.source_url)
                events.append(event)
                new_on_page += 1

            if new_on_page == 0:
                break

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
