from datetime import date

import pytest

import artvenues.db as db_module
from artvenues.models import CandidateEvent
from artvenues.reconcile import VenueNotFoundError, upsert_events


def make_candidate(n: int, **overrides) -> CandidateEvent:
    fields = {
        "title": f"Event {n}",
        "start_date": date(2026, 11, n),
        "source_url": f"https://www.barbican.org.uk/whats-on/event-{n}",
    }
    fields.update(overrides)
    return CandidateEvent(**fields)


def all_events(conn):
    return {e.source_url: e for e in db_module.get_upcoming_events(conn, date(2026, 1, 1), days_ahead=3650)}


def test_first_run_inserts(conn):
    result = upsert_events(conn, "barbican-centre", [make_candidate(1), make_candidate(2)])

    assert (result.inserted, result.updated, result.errors) == (2, 0, 0)
    events = all_events(conn)
    assert {e.slug for e in events.values()} == {"event-1", "event-2"}


def test_rerun_is_idempotent(conn):
    candidates = [make_candidate(n) for n in range(1, 4)]
    upsert_events(conn, "barbican-centre", candidates)
    before = {url: (e.id, e.slug) for url, e in all_events(conn).items()}

    result = upsert_events(conn, "barbican-centre", candidates)

    assert (result.inserted, result.updated, result.errors) == (0, 3, 0)
    after = {url: (e.id, e.slug) for url, e in all_events(conn).items()}
    assert after == before


def test_update_changes_fields_but_not_slug(conn):
    upsert_events(conn, "barbican-centre", [make_candidate(1, title="Spring Show")])

    upsert_events(conn, "barbican-centre", [
        make_candidate(1, title="Spring Show (extended)", end_date=date(2026, 12, 31), is_free=True),
    ])

    event = all_events(conn)["https://www.barbican.org.uk/whats-on/event-1"]
    assert event.slug == "spring-show"
    assert event.title == "Spring Show (extended)"
    assert event.end_date == date(2026, 12, 31)
    assert event.is_free is True
    assert event.is_sold_out is None
    assert event.updated_at >= event.created_at


def test_same_title_at_different_venues_gets_suffixed_slugs(conn):
    upsert_events(conn, "barbican-centre", [
        make_candidate(1, title="Spring Show", source_url="https://www.barbican.org.uk/spring-show"),
    ])
    upsert_events(conn, "tate-modern", [
        make_candidate(1, title="Spring Show", source_url="https://www.tate.org.uk/spring-show"),
    ])
    upsert_events(conn, "design-museum", [
        make_candidate(1, title="Spring Show", source_url="https://designmuseum.org/spring-show"),
    ])

    slugs = {e.source_url: e.slug for e in all_events(conn).values()}
    assert slugs == {
        "https://www.barbican.org.uk/spring-show": "spring-show",
        "https://www.tate.org.uk/spring-show": "spring-show-2",
        "https://designmuseum.org/spring-show": "spring-show-3",
    }


def test_same_title_within_one_batch(conn):
    result = upsert_events(conn, "tate-modern", [
        make_candidate(1, title="Tate Lates", source_url="https://www.tate.org.uk/lates-march"),
        make_candidate(2, title="Tate Lates", source_url="https://www.tate.org.uk/lates-april"),
    ])

    assert result.inserted == 2
    assert sorted(e.slug for e in all_events(conn).values()) == ["tate-lates", "tate-lates-2"]


def test_same_url_at_two_venues_is_two_events(conn):
    shared = "https://www.timeout.com/london/art/shared-listing"
    upsert_events(conn, "barbican-centre", [make_candidate(1, source_url=shared)])
    result = upsert_events(conn, "tate-modern", [make_candidate(1, source_url=shared)])

    assert result.inserted == 1
    count = conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]
    assert count == 2


def test_one_failure_does_not_stop_the_batch(conn, monkeypatch):
    candidates = [make_candidate(n) for n in range(1, 6)]
    real_insert = db_module.insert_event

    def flaky_insert(conn_, venue_id, slug, source_hash, candidate):
        if candidate.title == "Event 3":
            raise RuntimeError("disk full")
        return real_insert(conn_, venue_id, slug, source_hash, candidate)

    monkeypatch.setattr(db_module, "insert_event", flaky_insert)

    result = upsert_events(conn, "barbican-centre", candidates)

    assert (result.inserted, result.updated, result.errors) == (4, 0, 1)
    assert "https://www.barbican.org.uk/whats-on/event-3" not in all_events(conn)


def test_slug_constraint_violation_is_contained(conn, monkeypatch):
    # A slug taken outside this run's snapshot collides at insert time
    monkeypatch.setattr(db_module, "get_all_slugs", lambda conn_: set())
    upsert_events(conn, "tate-modern", [make_candidate(9, title="Event 3", source_url="https://www.tate.org.uk/e3")])

    result = upsert_events(conn, "barbican-centre", [make_candidate(n) for n in range(1, 6)])

    assert (result.inserted, result.errors) == (4, 1)


def test_unknown_venue_raises(conn):
    with pytest.raises(VenueNotFoundError):
        upsert_events(conn, "no-such-venue", [make_candidate(1)])


def test_empty_batch(conn):
    result = upsert_events(conn, "barbican-centre", [])
    assert (result.inserted, result.updated, result.errors) == (0, 0, 0)
