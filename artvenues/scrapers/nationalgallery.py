"""
National Gallery scraper.

Two sources, fetched one after the other:

1. Exhibitions page: https://www.nationalgallery.org.uk/exhibitions
   - Cards: article.exhibition-card
   - Title: h3.exhibition-heading;  Link: a.card-link
   - Date:  .exhibition-date  ("Until 10 May 2026", "15 January – 5 April 2026")
   - Image: inline background-image on .card-img-top > div[style]
   - Free:  data-payment-type="free" on the article

2. Events card endpoint (the AJAX fragment the events page loads):
   https://www.nationalgallery.org.uk/umbraco/Surface/Events/EventsCards
   - Cards: li.ng-card-wrap > article.ng-event-card[data-dl-name]
   - Link:  a.dl-product-link;  Date: .date;  Category: .category
   - Cost:  .cost == "Free"
   - Image: .thumbnail-inner > div[style]

Undated cards start today. If one source fails the other's events are still
returned.
"""

import logging
from datetime import date
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

from artvenues.classify import infer_event_type
from artvenues.fetch import FetchError
from artvenues.models import CandidateEvent
from artvenues.normalize import clean_text, parse_date_range
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import ITEM_ERRORS, absolute_url, background_image, first_text

logger = logging.getLogger(__name__)

_BASE = "https://www.nationalgallery.org.uk"
_EVENTS_API = f"{_BASE}/umbraco/Surface/Events/EventsCards"


def _parse_exhibition(card: Tag, today: date) -> Optional[CandidateEvent]:
    title = first_text(card, "h3.exhibition-heading")
    if len(title) < 3:
        return None
    link = card.select_one("a.card-link")
    if not link or not link.get("href"):
        return None

    start_date, end_date = parse_date_range(first_text(card, ".exhibition-date"), today)
    bg = card.select_one(".card-img-top > div[style]")
    description = first_text(card, ".exhibition-description")
    payment = card.get("data-payment-type", "")

    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description),
        start_date=start_date or today,
        end_date=end_date,
        image_url=background_image(bg.get("style") if bg else None, _BASE),
        source_url=absolute_url(link["href"], _BASE),
        is_free=True if "free" in payment.lower() else None,
    )


def _parse_event_card(card: Tag, today: date) -> Optional[CandidateEvent]:
    article = card.select_one("article.ng-event-card")
    title = clean_text(article.get("data-dl-name", "")) if article else ""
    title = title or first_text(card, "h3.trimmed")
    if len(title) < 3:
        return None
    link = card.select_one("a.dl-product-link")
    if not link or not link.get("href"):
        return None

    start_date, end_date = parse_date_range(first_text(card, ".date"), today)
    bg = card.select_one(".thumbnail-inner > div[style]")
    category = first_text(card, ".category")
    cost = first_text(card, ".cost").lower()

    return CandidateEvent(
        title=title,
        event_type=infer_event_type(title, "", category),
        start_date=start_date or today,
        end_date=end_date,
        image_url=background_image(bg.get("style") if bg else None, _BASE),
        source_url=absolute_url(link["href"], _BASE),
        is_free=True if cost == "free" else None,
    )


class NationalGalleryScraper(BaseScraper):
    key = "nationalgallery"
    venue_slug = "national-gallery"
    venue_name = "National Gallery"
    default_url = f"{_BASE}/exhibitions"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        events: list[CandidateEvent] = []
        seen: set[str] = set()

        sources: list[tuple[str, str, Callable[[Tag, date], Optional[CandidateEvent]]]] = [
            (self.url, "article.exhibition-card", _parse_exhibition),
            (self.scraper_cfg.get("events_url", _EVENTS_API), "li.ng-card-wrap", _parse_event_card),
        ]
        failures: list[FetchError] = []

        for i, (url, selector, parse) in enumerate(sources):
            if i > 0:
                self.fetcher.delay()
            try:
                html = self.fetcher.fetch_page(url)
            except FetchError as exc:
                logger.warning("National Gallery source failed: %s", exc)
                failures.append(exc)
                continue

            soup = BeautifulSoup(html, "lxml")
            for card in soup.select(selector):
                try:
                    event = parse(card, today)
                except ITEM_ERRORS as exc:
                    logger.debug("Skipping malformed National Gallery card: %s", exc)
                    continue
                if event is None or event.source_url in seen:
                    continue
                seen.add(event.source_url)
                events.append(event)

        if len(failures) == len(sources):
            raise failures[0]

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
