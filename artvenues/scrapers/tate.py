"""
Tate Modern scraper.

Listing page: https://www.tate.org.uk/whats-on?gallery=tate-modern
  - Event cards are links to /whats-on/tate-modern/<slug> or /whats-on/tate-britain/<slug>
  - Filter links carry a query string and are skipped (except exhibition links)
  - Title: h2 / h3 / [class*=title];  Date: [class*=date], time, [class*=subtitle]
  - Price: "Free" on the card means free, "Members" means a paid exhibition

The same event is linked several times (image, title, button), so results are
deduplicated on URL. Undated cards start today.
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
    ITEM_ERRORS, absolute_url, first_line, first_text, image_src, select_text,
    sold_out_signal,
)

logger = logging.getLogger(__name__)

_BASE = "https://www.tate.org.uk"


def _price_signal(text: str) -> Optional[bool]:
    text = text.lower()
    if "free" in text:
        return True
    if "member" in text:
        return False
    return None


def _parse_card(link: Tag, today: date) -> Optional[CandidateEvent]:
    href = link.get("href", "")
    if not href:
        return None
    if "?" in href and "/exhibition/" not in href:
        return None

    title = first_text(link, "h2, h3, [class*='title']") or first_line(link)
    if len(title) < 3 or len(title) > 200:
        return None

    date_text = select_text(link, "[class*='date'], time, [class*='subtitle']")
    start_date, end_date = parse_date_range(date_text, today)
    description = select_text(link, "[class*='description'], [class*='summary']")

    card_text = link.get_text(" ", strip=True)
    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description),
        start_date=start_date or today,
        end_date=end_date,
        image_url=absolute_url(image_src(link), _BASE),
        source_url=absolute_url(href, _BASE),
        is_free=_price_signal(card_text),
        is_sold_out=sold_out_signal(card_text),
    )


class TateModernScraper(BaseScraper):
    key = "tate"
    venue_slug = "tate-modern"
    venue_name = "Tate Modern"
    default_url = f"{_BASE}/whats-on?gallery=tate-modern"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        soup = BeautifulSoup(self.fetcher.fetch_page(self.url), "lxml")

        events: list[CandidateEvent] = []
        seen: set[str] = set()
        for link in soup.select("a[href*='/whats-on/tate-modern/'], a[href*='/whats-on/tate-britain/']"):
            try:
                event = _parse_card(link, today)
            except ITEM_ERRORS as exc:
                logger.debug("Skipping malformed Tate card: %s", exc)
                continue
            if event is None or event.source_url in seen:
                continue
            seen.add(event.source_url)
            events.append(event)

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
