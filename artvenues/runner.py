import logging
import sqlite3
from dataclasses import dataclass
from typing import Iterable, Optional

from artvenues.reconcile import upsert_events
from artvenues.scrapers.base import BaseScraper

logger = logging.getLogger(__name__)


@dataclass
class VenueResult:
    scraper: str
    venue: str
    scraped: int = 0
    inserted: int = 0
    updated: int = 0
    errors: int = 0
    note: Optional[str] = None


def run_scrapers(conn: sqlite3.Connection, scrapers: Iterable[BaseScraper]) -> list[VenueResult]:
    """
    Run each scraper in turn and reconcile its events.

    Scrapers run one at a time so each venue's request delay is respected.
    A scraper that raises, or a venue missing from the database, is recorded
    as one error for that venue and the run moves on.
    """
    results: list[VenueResult] = []

    for scraper in scrapers:
        result = VenueResult(scraper=scraper.key, venue=scraper.venue_slug)
        results.append(result)

        if scraper.unsupported_reason:
            result.note = f"unsupported: {scraper.unsupported_reason}"
            logger.info("Skipping %s (%s)", scraper.venue_name, scraper.unsupported_reason)
            continue

        logger.info("Scraping %s ...", scraper.venue_name)
        try:
            events = scraper.fetch_events()
        except Exception as exc:
            logger.error("Scraping %s FAILED: %s", scraper.venue_name, exc)
            result.errors = 1
            result.note = str(exc)
            continue

        result.scraped = len(events)
        if not events:
            logger.info("  No events found")
            continue

        try:
            upserted = upsert_events(conn, scraper.venue_slug, events)
        except Exception as exc:
            logger.error("Saving events for %s FAILED: %s", scraper.venue_name, exc)
            result.errors = 1
            result.note = str(exc)
            continue

        result.inserted = upserted.inserted
        result.updated = upserted.updated
        result.errors = upserted.errors
        logger.info(
            "  DB: %d inserted, %d updated, %d errors",
            upserted.inserted, upserted.updated, upserted.errors,
        )

    return results


def total_errors(results: Iterable[VenueResult]) -> int:
    return sum(r.errors for r in results)


def format_summary(results: list[VenueResult]) -> str:
    headers = ("scraper", "venue", "scraped", "inserted", "updated", "errors")
    rows = [
        (r.scraper, r.venue, str(r.scraped), str(r.inserted), str(r.updated), str(r.errors))
        for r in results
    ]
    widths = [max([len(h)] + [len(row[i]) for row in rows]) for i, h in enumerate(headers)]
    lines = [
        "  ".join(h.ljust(w) for h, w in zip(headers, widths)),
        "  ".join("-" * w for w in widths),
    ]
    for row in rows:
        lines.append("  ".join(
            cell.ljust(w) if i < 2 else cell.rjust(w)
            for i, (cell, w) in enumerate(zip(row, widths))
        ))
    return "\n".join(lines)
