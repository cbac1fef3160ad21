from datetime import date
from pathlib import Path

import artvenues.db as db_module
from artvenues.identity import fingerprint
from artvenues.models import CandidateEvent, Venue

TODAY = date(2026, 10, 19)


def add_event(conn, venue_slug, title, start, end=None, event_type="visual-arts"):
    venue = db_module.get_venue_by_slug(conn, venue_slug)
    url = f"{venue.website_url}/{title.lower().replace(' ', '-')}"
    candidate = CandidateEvent(title=title, start_date=start, end_date=end,
                               source_url=url, event_type=event_type)
    return db_module.insert_event(conn, venue.id, title.lower().replace(" ", "-"), fingerprint(url), candidate)


def test_upsert_venue_updates_in_place(conn):
    before = db_module.get_venue_by_slug(conn, "tate-modern")

    venue_id = db_module.upsert_venue(conn, Venue(
        slug="tate-modern", name="Tate Modern (Bankside)",
        website_url="https://www.tate.org.uk", area="South",
    ))

    assert venue_id == before.id
    assert db_module.get_venue_by_slug(conn, "tate-modern").name == "Tate Modern (Bankside)"
    assert len(db_module.get_all_venues(conn)) == 3


def test_connect_creates_parent_directory(tmp_path):
    path = tmp_path / "nested" / "events.db"
    conn = db_module.connect(path)
    conn.close()
    assert path.exists()


def test_insert_and_find(conn):
    event_id = add_event(conn, "barbican-centre", "Spring Show", date(2026, 11, 1))
    venue = db_module.get_venue_by_slug(conn, "barbican-centre")

    found = db_module.find_event_by_source_hash(
        conn, venue.id, fingerprint("https://www.barbican.org.uk/spring-show"),
    )
    assert found.id == event_id
    assert found.is_free is None
    assert db_module.get_all_slugs(conn) == {"spring-show"}

    other = db_module.get_venue_by_slug(conn, "tate-modern")
    assert db_module.find_event_by_source_hash(conn, other.id, found.source_hash) is None


def test_upcoming_includes_running_exhibitions(conn):
    add_event(conn, "barbican-centre", "Long Run", date(2026, 3, 1), date(2026, 12, 31))
    add_event(conn, "barbican-centre", "Finished", date(2026, 3, 1), date(2026, 4, 1))
    add_event(conn, "tate-modern", "Next Week", date(2026, 10, 26), event_type="talk")
    add_event(conn, "tate-modern", "Next Year", date(2027, 6, 1))

    titles = [e.title for e in db_module.get_upcoming_events(conn, TODAY, days_ahead=30)]
    assert titles == ["Long Run", "Next Week"]

    by_venue = db_module.get_upcoming_events(conn, TODAY, days_ahead=30, venue_slug="tate-modern")
    assert [e.title for e in by_venue] == ["Next Week"]

    by_type = db_module.get_upcoming_events(conn, TODAY, days_ahead=30, event_type="visual-arts")
    assert [e.title for e in by_type] == ["Long Run"]


def test_delete_past_events(conn):
    add_event(conn, "barbican-centre", "Long Run", date(2026, 3, 1), date(2026, 12, 31))
    add_event(conn, "barbican-centre", "Finished", date(2026, 3, 1), date(2026, 4, 1))
    add_event(conn, "tate-modern", "Yesterday", date(2026, 10, 18))
    add_event(conn, "tate-modern", "Today", TODAY)

    removed = db_module.delete_past_events(conn, TODAY)

    assert removed == 2
    assert db_module.get_all_slugs(conn) == {"long-run", "today"}


def test_memory_database_path():
    conn = db_module.connect(Path(":memory:"))
    assert db_module.get_all_venues(conn) == []
    conn.close()
