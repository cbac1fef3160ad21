"""
Design Museum scraper.

Listing page: https://designmuseum.org/exhibitions
  - Cards: div.page-item.clearfix
  - Title: first h2;  Link: first a[href]
  - Date:  time.icon-date  ("Until 29 March 2026", "Until August 2026",
           "1 May – 4 October 2026", sometimes followed by "Free")
  - Image: inline background-image on the figure
  - Description: div.rich-text

Cards without a date are skipped: they are promos ("Ticket Mate Fund") or
the permanent collection, not exhibitions. Dated cards whose text cannot be
parsed start today.
"""

import logging
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup, Tag

from artvenues.classify import infer_event_type
from artvenues.models import CandidateEvent
from artvenues.normalize import parse_date_range
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import ITEM_ERRORS, absolute_url, background_image, first_text, free_signal

logger = logging.getLogger(__name__)

_BASE = "https://designmuseum.org"
_SKIP_HREFS = ("past-exhibitions", "support-us", "ticket-mate")


def _parse_card(card: Tag, today: date) -> Optional[CandidateEvent]:
    title = first_text(card, "h2")
    if len(title) < 3:
        return None

    link = card.find("a", href=True)
    if not link:
        return None
    href = link["href"]
    if any(skip in href for skip in _SKIP_HREFS):
        return None

    date_text = first_text(card, "time.icon-date")
    if not date_text or "Permanent Collection" in date_text:
        return None
    start_date, end_date = parse_date_range(date_text, today)

    figure = card.find("figure")
    description = first_text(card, "div.rich-text")
    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description),
        start_date=start_date or today,
        end_date=end_date,
        image_url=background_image(figure.get("style") if figure else None, _BASE),
        source_url=absolute_url(href, _BASE),
        is_free=free_signal(date_text),
    )


class DesignMuseumScraper(BaseScraper):
    key = "designmuseum"
    venue_slug = "design-museum"
    venue_name = "Design Museum"
    default_url = f"{_BASE}/exhibitions"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        soup = BeautifulSoup(self.fetcher.fetch_page(self.url), "lxml")

        events: list[CandidateEvent] = []
        seen: set[str] = set()
        for card in soup.select("div.page-item.clearfix"):
            try:
                event = _parse_card(card, today)
            except ITEM_ERRORS as exc:
                logger.debug("Skipping malformed Design Museum card: %s", exc)
                continue
            if event is None or event.source_url in seen:
                continue
            seen.add(event.source_url)
            events.append(event)

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
