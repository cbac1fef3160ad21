"""
Somerset House scraper.

Listing page: https://www.somersethouse.org.uk/whats-on

The page is server-rendered from a GraphQL query and the response is
serialised into a <script> block (recognisable by "EventDetailPage", the
__typename of each node). The edges list has been seen at:

    data.page.items.edges
    page.items.edges
    props.pageProps.data.page.items.edges

Each node has title, url, dateStart / dateEnd (ISO), dateText, priceFree,
eventTypes[].title and listingImage.src. If the script is not clean JSON the
edges array is sliced out of it directly, and if that fails too the
/whats-on/ links in the HTML are used.

Events without a usable date start today.
"""

import json
import logging
import re
from datetime import date
from typing import Any, Optional

from bs4 import BeautifulSoup

from artvenues.classify import infer_event_type
from artvenues.models import CandidateEvent
from artvenues.normalize import clean_text, parse_date_range, parse_iso_date
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.utils import ITEM_ERRORS, absolute_url, first_text

logger = logging.getLogger(__name__)

_BASE = "https://www.somersethouse.org.uk"
_MARKER = '"EventDetailPage"'
_EDGE_PATHS = (
    ("data", "page", "items", "edges"),
    ("page", "items", "edges"),
    ("props", "pageProps", "data", "page", "items", "edges"),
)
_EDGES_RE = re.compile(r'"items"\s*:\s*\{\s*"edges"\s*:\s*(?=\[)')


def _dig(data: Any, path: tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _edges_from_json(content: str) -> Optional[list]:
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        return None
    for path in _EDGE_PATHS:
        edges = _dig(parsed, path)
        if isinstance(edges, list):
            return edges
    return None


def _edges_from_slice(content: str) -> Optional[list]:
    m = _EDGES_RE.search(content)
    if not m:
        return None
    try:
        edges, _ = json.JSONDecoder().raw_decode(content, m.end())
    except json.JSONDecodeError:
        return None
    return edges if isinstance(edges, list) else None


def _find_nodes(soup: BeautifulSoup) -> list[dict]:
    for script in soup.find_all("script"):
        content = script.string or ""
        if _MARKER not in content:
            continue
        edges = _edges_from_json(content)
        if edges is None:
            edges = _edges_from_slice(content)
        if edges:
            return [e["node"] for e in edges if isinstance(e, dict) and isinstance(e.get("node"), dict)]
    return []


def _parse_node(node: dict, today: date) -> Optional[CandidateEvent]:
    title = clean_text(node.get("title"))
    url = node.get("url")
    if not title or not url:
        return None

    start_date = parse_iso_date(node.get("dateStart"))
    end_date = parse_iso_date(node.get("dateEnd"))
    if start_date is None and node.get("dateText"):
        start_date, end_date = parse_date_range(node["dateText"], today)

    event_types = " ".join(t.get("title") or "" for t in node.get("eventTypes") or [] if isinstance(t, dict))
    image = node.get("listingImage") or {}

    return CandidateEvent(
        title=title,
        event_type=infer_event_type(title, "", event_types),
        start_date=start_date or today,
        end_date=end_date,
        image_url=image.get("src") or None,
        source_url=absolute_url(url, _BASE),
        is_free=True if node.get("priceFree") is True else None,
    )


class SomersetHouseScraper(BaseScraper):
    key = "somersethouse"
    venue_slug = "somerset-house"
    venue_name = "Somerset House"
    default_url = f"{_BASE}/whats-on"

    def fetch_events(self) -> list[CandidateEvent]:
        today = date.today()
        soup = BeautifulSoup(self.fetcher.fetch_page(self.url), "lxml")

        events: list[CandidateEvent] = []
        seen: set[str] = set()

        for node in _find_nodes(soup):
            try:
                event = _parse_node(node, today)
            except ITEM_ERRORS as exc:
                logger.debug("Skipping malformed Somerset House node: %s", exc)
                continue
            if event is None or event.source_url in seen:
                continue
            seen.add(event.source_url)
            events.append(event)

        if not events:
            logger.debug("No embedded Somerset House data, falling back to HTML links")
            for link in soup.select('a[href*="/whats-on/"]'):
                href = link.get("href", "")
                if not href or href.rstrip("/") == "/whats-on":
                    continue
                title = first_text(link, "h3") or clean_text(link.get_text(" "))
                if len(title) < 3 or len(title) > 200:
                    continue
                source_url = absolute_url(href, _BASE)
                if source_url in seen:
                    continue
                seen.add(source_url)
                events.append(CandidateEvent(
                    title=title,
                    event_type=infer_event_type(title),
                    start_date=today,
                    source_url=source_url,
                ))

        logger.info("Found %d events from %s", len(events), self.venue_name)
        return events
