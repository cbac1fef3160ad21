"""
Whitechapel Gallery scraper.

Two pages, fetched one after the other:

1. Exhibitions: https://www.whitechapelgallery.org/exhibitions/
   - Cards: div.mediaBlock
   - Title + link: h4.category_name > a  (older cards: h4 > a)
   - Date: last p in the card  ("8 Oct - 1 Mar 2026")

2. Events: https://www.whitechapelgallery.org/events-2-2/
   - Cards: #AJAXcurrentEvents div.mediaBlock
   - Title + link: p.category_name--new > a
   - Date: p.category_date;  Category: p.category_orange
   - Subtitle: p.category_meta_title

Undated cards start today. If one page fails the other's events are still
returned.
"""

import logging
from datetime import date
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

from artvenues.classify import infer_event_type
from artvenues.fetch import FetchError
from artvenues.models import CandidateEvent
from artvenues.normalize import parse_date_range
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import ITEM_ERRORS, absolute_url, first_text, image_src

logger = logging.getLogger(__name__)

_BASE = "https://www.whitechapelgallery.org"


def _parse_exhibition(card: Tag, today: date) -> Optional[CandidateEvent]:
    link = card.select_one("h4.category_name > a") or card.select_one("h4 > a")
    if not link or not link.get("href"):
        return None
    title = link.get_text(" ", strip=True)
    if len(title) < 3:
        return None

    paragraphs = card.find_all("p")
    date_text = paragraphs[-1].get_text(" ", strip=True) if paragraphs else ""
    start_date, end_date = parse_date_range(date_text, today)

    return CandidateEvent(
        title=title,
        event_type="visual-arts",
        start_date=start_date or today,
        end_date=end_date,
        image_url=absolute_url(image_src(card), _BASE),
        source_url=absolute_url(link["href"], _BASE),
    )


def _parse_event(card: Tag, today: date) -> Optional[CandidateEvent]:
    link = card.select_one("p.category_name--new > a")
    if not link or not link.get("href"):
        return None
    title = link.get_text(" ", strip=True)
    if len(title) < 3:
        return None

    start_date, end_date = parse_date_range(first_text(card, "p.category_date"), today)
    category = first_text(card, "p.category_orange")
    description = first_text(card, "p.category_meta_title")

    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description, category),
        start_date=start_date or today,
        end_date=end_date,
        image_url=absolute_url(image_src(card), _BASE),
        source_url=absolute_url(link["href"], _BASE),
    )


class WhitechapelGalleryScraper(BaseScraper):
    key = "whitechapel"
    venue_slug = "whitechapel-gallery"
    venue_name = "Whitechapel Gallery"
    default_url = f"{_BASE}/exhibitions/"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        events: list[CandidateEvent] = []
        seen: set[str] = set()

        sources: list[tuple[str, str, Callable[[Tag, date], Optional[CandidateEvent]]]] = [
            (self.url, "div.mediaBlock", _parse_exhibition),
            (self.scraper_cfg.get("events_url", f"{_BASE}/events-2-2/"),
             "#AJAXcurrentEvents div.mediaBlock", _parse_event),
        ]
        failures: list[FetchError] = []

        for i, (url, selector, parse) in enumerate(sources):
            if i > 0:
                self.fetcher.delay()
            try:
                html = self.fetcher.fetch_page(url)
            except FetchError as exc:
                logger.warning("Whitechapel source failed: %s", exc)
                failures.append(exc)
                continue

            soup = BeautifulSoup(html, "lxml")
            for card in soup.select(selector):
                try:
                    event = parse(card, today)
                except ITEM_ERRORS as exc:
                    logger.debug("Skipping malformed Whitechapel card: %s", exc)
                    continue
                if event is None or event.source_url in seen:
                    continue
                seen.add(event.source_url)
                events.append(event)

        if len(failures) == len(sources):
            raise failures[0]

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
