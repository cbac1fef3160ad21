"""
V&A scraper.

Listing page: https://www.vam.ac.uk/whatson

The page pushes a Google Analytics ecommerce payload into dataLayer:

    dataLayer.push({"ecommerce": {"impressions": [{"id": "...", "name": "...", "category": "..."}]}})

(newer GA4 builds use "items" with item_id / item_name / item_category).
That list is the most complete view of the programme, so it is preferred.
It carries no dates; events from it start "today".

When no payload is found the teaser list is scraped instead:
  - Event cards: li.b-event-teaser
  - Schema.org metas: meta[itemprop=name|description|startDate|endDate]
  - Link:  a.b-event-teaser__link[href]
  - Image: img.b-event-teaser__media-image
  - Free:  data-wo-free attribute present on the li
  - Type:  .b-event-teaser__type
Teasers whose date text is present but unparseable are dropped.
"""

import json
import logging
import re
from datetime import date
from typing import Iterator, Optional

from bs4 import BeautifulSoup, Tag

from artvenues.classify import infer_event_type
from artvenues.models import CandidateEvent
from artvenues.normalize import clean_text, parse_date_range, parse_iso_date
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import ITEM_ERRORS, absolute_url, first_text

logger = logging.getLogger(__name__)

_BASE = "https://www.vam.ac.uk"
_PUSH_RE = re.compile(r"dataLayer\.push\(\s*")


def _iter_datalayer_payloads(soup: BeautifulSoup) -> Iterator[dict]:
    decoder = json.JSONDecoder()
    for script in soup.find_all("script"):
        content = script.string or ""
        if "dataLayer" not in content:
            continue
        for m in _PUSH_RE.finditer(content):
            try:
                payload, _ = decoder.raw_decode(content, m.end())
            except json.JSONDecodeError:
                continue
            if isinstance(payload, dict):
                yield payload


def _impressions(payload: dict) -> list[dict]:
    """Product list from a dataLayer payload, in either GA ecommerce shape."""
    ecommerce = payload.get("ecommerce")
    if not isinstance(ecommerce, dict):
        return []
    for shape in ("impressions", "items"):
        items = ecommerce.get(shape)
        if isinstance(items, list):
            return [i for i in items if isinstance(i, dict)]
    return []


def _from_impression(item: dict, today: date) -> Optional[CandidateEvent]:
    item_id = item.get("id") or item.get("item_id")
    if not item_id:
        return None
    title = clean_text(item.get("name") or item.get("item_name")) or "Untitled"
    category = item.get("category") or item.get("item_category") or ""
    return CandidateEvent(
        title=title,
        event_type=infer_event_type(title, "", category),
        start_date=today,
        source_url=f"{_BASE}/event/{item_id}",
    )


def _meta(node: Tag, prop: str) -> str:
    el = node.select_one(f'meta[itemprop="{prop}"]')
    return clean_text(el.get("content", "")) if el else ""


def _from_teaser(teaser: Tag, today: date) -> Optional[CandidateEvent]:
    link = teaser.select_one("a.b-event-teaser__link")
    if not link or not link.get("href"):
        return None
    title = _meta(teaser, "name") or first_text(teaser, ".b-event-teaser__title")
    if len(title) < 3:
        return None

    start_date = parse_iso_date(_meta(teaser, "startDate"))
    end_date = parse_iso_date(_meta(teaser, "endDate"))
    if start_date is None:
        date_text = first_text(teaser, ".b-icon-list__icon--calendar .b-icon-list__item-text")
        if date_text:
            start_date, end_date = parse_date_range(date_text, today)
            if start_date is None:
                return None
        else:
            start_date = today

    description = _meta(teaser, "description")
    img = teaser.select_one("img.b-event-teaser__media-image")
    return CandidateEvent(
        title=title,
        description=description,
        event_type=infer_event_type(
            title, description,
            teaser.get("data-wo-type") or first_text(teaser, ".b-event-teaser__type"),
        ),
        start_date=start_date,
        end_date=end_date,
        image_url=absolute_url(img.get("src"), _BASE) if img else None,
        source_url=absolute_url(link["href"], _BASE),
        is_free=True if teaser.has_attr("data-wo-free") else None,
    )


class VandAScraper(BaseScraper):
    key = "vanda"
    venue_slug = "va-museum"
    venue_name = "V&A Museum"
    default_url = f"{_BASE}/whatson"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        soup = BeautifulSoup(self.fetcher.fetch_page(self.url), "lxml")

        events: list[CandidateEvent] = []
        seen: set[str] = set()

        for payload in _iter_datalayer_payloads(soup):
            for item in _impressions(payload):
                try:
                    event = _from_impression(item, today)
                except ITEM_ERRORS as exc:
                    logger.debug("Skipping malformed V&A impression: %s", exc)
                    continue
                if event is None or event.source_url in seen:
                    continue
                seen.add(event.source_url)
                events.append(event)

        if not events:
            for teaser in soup.select("li.b-event-teaser"):
                try:
                    event = _from_teaser(teaser, today)
                except ITEM_ERRORS as exc:
                    logger.debug("Skipping malformed V&A teaser: %s", exc)
                    continue
                if event is None or event.source_url in seen:
                    continue
                seen.add(event.source_url)
                events.append(event)

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
