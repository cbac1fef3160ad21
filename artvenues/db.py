import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from artvenues.models import CandidateEvent, Event, Venue


def connect(db_path: Path) -> sqlite3.Connection:
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    _create_schema(conn)
    return conn


def _create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS venues (
            id           INTEGER PRIMARY KEY AUTOINCREMENT,
            name         TEXT NOT NULL,
            slug         TEXT NOT NULL UNIQUE,
            website_url  TEXT NOT NULL,
            area         TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS events (
            id           INTEGER PRIMARY KEY AUTOINCREMENT,
            venue_id     INTEGER NOT NULL REFERENCES venues(id),
            title        TEXT NOT NULL,
            slug         TEXT NOT NULL UNIQUE,
            description  TEXT NOT NULL DEFAULT '',
            event_type   TEXT NOT NULL,
            start_date   TEXT NOT NULL,
            end_date     TEXT,
            image_url    TEXT,
            source_url   TEXT NOT NULL,
            is_free      INTEGER,
            is_sold_out  INTEGER,
            created_at   TEXT NOT NULL,
            updated_at   TEXT NOT NULL,
            source_hash  TEXT NOT NULL,
            UNIQUE(venue_id, source_hash)
        );

        CREATE INDEX IF NOT EXISTS events_start_date_idx ON events(start_date);
        CREATE INDEX IF NOT EXISTS events_event_type_idx ON events(event_type);
    """)
    conn.commit()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _tristate(value: Optional[bool]) -> Optional[int]:
    return None if value is None else int(value)


# --- Venues ---

def upsert_venue(conn: sqlite3.Connection, venue: Venue) -> int:
    conn.execute(
        """
        INSERT INTO venues (name, slug, website_url, area)
        VALUES (:name, :slug, :website_url, :area)
        ON CONFLICT(slug) DO UPDATE SET
            name        = excluded.name,
            website_url = excluded.website_url,
            area        = excluded.area
        """,
        {"name": venue.name, "slug": venue.slug, "website_url": venue.website_url, "area": venue.area},
    )
    conn.commit()
    return get_venue_by_slug(conn, venue.slug).id


def get_venue_by_slug(conn: sqlite3.Connection, slug: str) -> Optional[Venue]:
    row = conn.execute(
        "SELECT id, name, slug, website_url, area FROM venues WHERE slug = ?", (slug,)
    ).fetchone()
    return _row_to_venue(row) if row else None


def get_all_venues(conn: sqlite3.Connection) -> list[Venue]:
    rows = conn.execute("SELECT id, name, slug, website_url, area FROM venues ORDER BY name").fetchall()
    return [_row_to_venue(r) for r in rows]


def _row_to_venue(row: sqlite3.Row) -> Venue:
    return Venue(
        id=row["id"], name=row["name"], slug=row["slug"],
        website_url=row["website_url"], area=row["area"],
    )


# --- Events ---

def _candidate_params(candidate: CandidateEvent) -> dict:
    return {
        "title":       candidate.title,
        "description": candidate.description,
        "event_type":  candidate.event_type,
        "start_date":  candidate.start_date.isoformat(),
        "end_date":    candidate.end_date.isoformat() if candidate.end_date else None,
        "image_url":   candidate.image_url,
        "source_url":  candidate.source_url,
        "is_free":     _tristate(candidate.is_free),
        "is_sold_out": _tristate(candidate.is_sold_out),
    }


def find_event_by_source_hash(conn: sqlite3.Connection, venue_id: int, source_hash: str) -> Optional[Event]:
    row = conn.execute(
        "SELECT * FROM events WHERE venue_id = ? AND source_hash = ?", (venue_id, source_hash)
    ).fetchone()
    return _row_to_event(row) if row else None


def get_all_slugs(conn: sqlite3.Connection) -> set[str]:
    return {r["slug"] for r in conn.execute("SELECT slug FROM events").fetchall()}


def insert_event(
    conn: sqlite3.Connection,
    venue_id: int,
    slug: str,
    source_hash: str,
    candidate: CandidateEvent,
) -> int:
    now = _now()
    cursor = conn.execute(
        """
        INSERT INTO events (venue_id, title, slug, description, event_type, start_date, end_date,
                            image_url, source_url, is_free, is_sold_out, created_at, updated_at, source_hash)
        VALUES (:venue_id, :title, :slug, :description, :event_type, :start_date, :end_date,
                :image_url, :source_url, :is_free, :is_sold_out, :created_at, :updated_at, :source_hash)
        """,
        {
            **_candidate_params(candidate),
            "venue_id":    venue_id,
            "slug":        slug,
            "source_hash": source_hash,
            "created_at":  now,
            "updated_at":  now,
        },
    )
    conn.commit()
    return cursor.lastrowid


def update_event(conn: sqlite3.Connection, event_id: int, candidate: CandidateEvent) -> None:
    """Overwrite the mutable fields of an existing event. id and slug are left alone."""
    conn.execute(
        """
        UPDATE events SET
            title       = :title,
            description = :description,
            event_type  = :event_type,
            start_date  = :start_date,
            end_date    = :end_date,
            image_url   = :image_url,
            source_url  = :source_url,
            is_free     = :is_free,
            is_sold_out = :is_sold_out,
            updated_at  = :updated_at
        WHERE id = :id
        """,
        {**_candidate_params(candidate), "updated_at": _now(), "id": event_id},
    )
    conn.commit()


def get_upcoming_events(
    conn: sqlite3.Connection,
    from_date: Optional[date] = None,
    days_ahead: int = 90,
    venue_slug: Optional[str] = None,
    event_type: Optional[str] = None,
) -> list[Event]:
    """Events running at any point between from_date and from_date + days_ahead."""
    start = (from_date or date.today()).isoformat()
    end = date.fromordinal(date.fromisoformat(start).toordinal() + days_ahead).isoformat()
    query = """
        SELECT e.* FROM events e
        JOIN venues v ON v.id = e.venue_id
        WHERE e.start_date <= :end AND COALESCE(e.end_date, e.start_date) >= :start
    """
    params: dict = {"start": start, "end": end}
    if venue_slug:
        query += " AND v.slug = :venue_slug"
        params["venue_slug"] = venue_slug
    if event_type:
        query += " AND e.event_type = :event_type"
        params["event_type"] = event_type
    query += " ORDER BY e.start_date, e.title"
    return [_row_to_event(r) for r in conn.execute(query, params).fetchall()]


def delete_past_events(conn: sqlite3.Connection, today: Optional[date] = None) -> int:
    """Remove events that have finished. Events with no end date finish on their start date."""
    cutoff = (today or date.today()).isoformat()
    cursor = conn.execute(
        "DELETE FROM events WHERE COALESCE(end_date, start_date) < ?", (cutoff,)
    )
    conn.commit()
    return cursor.rowcount


def _row_to_event(row: sqlite3.Row) -> Event:
    return Event(
        id=row["id"],
        venue_id=row["venue_id"],
        title=row["title"],
        slug=row["slug"],
        description=row["description"],
        event_type=row["event_type"],
        start_date=date.fromisoformat(row["start_date"]),
        end_date=date.fromisoformat(row["end_date"]) if row["end_date"] else None,
        image_url=row["image_url"],
        source_url=row["source_url"],
        is_free=None if row["is_free"] is None else bool(row["is_free"]),
        is_sold_out=None if row["is_sold_out"] is None else bool(row["is_sold_out"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        source_hash=row["source_hash"],
    )
