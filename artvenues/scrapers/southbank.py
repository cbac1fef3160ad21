"""
Southbank Centre scraper.

Listing page: https://www.southbankcentre.co.uk/whats-on
  - Event cards are links to /whats-on/<section>/<slug>
  - Links with a query string are filters and are skipped
  - Title: h2 / h3 / [class*=title];  Date: [class*=date], time
  - Description: first [class*=description], [class*=summary] or p

Undated cards start today. See timeout.py for the TimeOut-based alternative.
"""

import logging
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup, Tag

from artvenues.classify import infer_event_type
from artvenues.models import CandidateEvent
from artvenues.normalize import parse_date_range
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import (
    ITEM_ERRORS, absolute_url, first_line, first_text, free_signal, image_src,
    select_text, sold_out_signal,
)

logger = logging.getLogger(__name__)

_BASE = "https://www.southbankcentre.co.uk"


def _parse_card(link: Tag, today: date) -> Optional[CandidateEvent]:
    href = link.get("href", "")
    if not href or href.rstrip("/") == "/whats-on" or "?" in href:
        return None

    title = first_text(link, "h2, h3, [class*='title']") or first_line(link)
    if len(title) < 3 or len(title) > 200:
        return None

    date_text = select_text(link, "[class*='date'], time")
    start_date, end_date = parse_date_range(date_text, today)
    description = first_text(link, "[class*='description'], [class*='summary'], p")

    card_text = link.get_text(" ", strip=True)
    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description),
        start_date=start_date or today,
        end_date=end_date,
        image_url=absolute_url(image_src(link), _BASE),
        source_url=absolute_url(href, _BASE),
        is_free=free_signal(card_text),
        is_sold_out=sold_out_signal(card_text),
    )


class SouthbankCentreScraper(BaseScraper):
    key = "southbank"
    venue_slug = "southbank-centre"
    venue_name = "Southbank Centre"
    default_url = f"{_BASE}/whats-on"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        soup = BeautifulSoup(self.fetcher.fetch_page(self.url), "lxml")

        events: list[CandidateEvent] = []
        seen: set[str] = set()
        for link in soup.select("a[href*='/whats-on/']"):
            try:
                event = _parse_card(link, today)
            except ITEM_ERRORS as exc:
                logger.debug("Skipping malformed Southbank card: %s", exc)
                continue
            if event is None or event.source_url in seen:
                continue
            seen.add(event.source_url)
            events.append(event)

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
