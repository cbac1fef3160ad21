"""
Reconcile a venue's freshly scraped events against the database.

Events are matched on source_hash (a fingerprint of the source URL), so a run
can be repeated any number of times: the first sighting inserts a row with a
new slug, later sightings update that row in place. A failure on one event is
logged and counted; the rest of the batch still goes through.
"""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Iterable

import artvenues.db as db_module
from artvenues.identity import fingerprint, resolve_slug, slugify
from artvenues.models import CandidateEvent

logger = logging.getLogger(__name__)


class VenueNotFoundError(LookupError):
    """The venue has not been seeded into the database (run `av seed`)."""


@dataclass
class UpsertResult:
    inserted: int = 0
    updated: int = 0
    errors: int = 0


def upsert_events(
    conn: sqlite3.Connection,
    venue_slug: str,
    candidates: Iterable[CandidateEvent],
) -> UpsertResult:
    venue = db_module.get_venue_by_slug(conn, venue_slug)
    if venue is None:
        raise VenueNotFoundError(f"Venue not found: {venue_slug}")

    result = UpsertResult()
    # Slugs already persisted plus those handed out during this run
    taken = db_module.get_all_slugs(conn)

    for candidate in candidates:
        try:
            source_hash = fingerprint(candidate.source_url)
            existing = db_module.find_event_by_source_hash(conn, venue.id, source_hash)
            if existing is not None:
                db_module.update_event(conn, existing.id, candidate)
                result.updated += 1
            else:
                slug = resolve_slug(slugify(candidate.title), taken)
                taken.add(slug)
                db_module.insert_event(conn, venue.id, slug, source_hash, candidate)
                result.inserted += 1
        except Exception:
            logger.exception("Error upserting %r for %s", candidate.title, venue_slug)
            conn.rollback()
            result.errors += 1

    return result
