"""
Saatchi Gallery scraper, reading the WordPress REST API.

Endpoint: https://www.saatchigallery.com/wp-json/wp/v2/exhibitions?per_page=20&_embed
  - link:              public exhibition URL
  - title.rendered:    HTML-encoded title
  - excerpt.rendered:  HTML paragraph(s)
  - _embedded["wp:featuredmedia"][0].source_url: image

The API exposes no exhibition dates, so every exhibition starts today.
"""

import logging
from datetime import date
from typing import Optional

from artvenues.classify import infer_event_type
from artvenues.models import CandidateEvent
from artvenues.normalize import strip_html
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import ITEM_ERRORS

logger = logging.getLogger(__name__)

_API_BASE = "https://www.saatchigallery.com/wp-json/wp/v2"


def _rendered(field) -> str:
    if isinstance(field, dict):
        return strip_html(field.get("rendered", ""))
    return strip_html(field or "")


def _featured_image(exhibition: dict) -> Optional[str]:
    media = (exhibition.get("_embedded") or {}).get("wp:featuredmedia") or []
    if media and isinstance(media[0], dict):
        return media[0].get("source_url") or None
    return None


def _parse_exhibition(exhibition: dict, today: date) -> Optional[CandidateEvent]:
    source_url = exhibition.get("link")
    title = _rendered(exhibition.get("title"))
    if not source_url or len(title) < 3:
        return None
    description = _rendered(exhibition.get("excerpt"))
    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(title, description),
        start_date=today,
        image_url=_featured_image(exhibition),
        source_url=source_url,
    )


class SaatchiGalleryScraper(BaseScraper):
    key = "saatchi"
    venue_slug = "saatchi-gallery"
    venue_name = "Saatchi Gallery"
    default_url = f"{_API_BASE}/exhibitions?per_page=20&_embed"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        exhibitions = self.fetcher.fetch_json(self.url)
        if not isinstance(exhibitions, list):
            raise ValueError(f"Unexpected Saatchi API response: {type(exhibitions).__name__}")

        events: list[CandidateEvent] = []
        seen: set[str] = set()
        for exhibition in exhibitions:
            try:
                event = _parse_exhibition(exhibition, today)
            except ITEM_ERRORS as exc:
                logger.debug("Skipping malformed Saatchi exhibition: %s", exc)
                continue
            if event is None or event.source_url in seen:
                continue
            seen.add(event.source_url)
            events.append(event)

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
