from pathlib import Path

import pytest

import artvenues.db as db_module
from artvenues.fetch import Fetcher
from artvenues.models import Venue

FIXTURES = Path(__file__).parent / "fixtures"

VENUES = [
    Venue(slug="barbican-centre", name="Barbican Centre", website_url="https://www.barbican.org.uk", area="Central"),
    Venue(slug="tate-modern", name="Tate Modern", website_url="https://www.tate.org.uk", area="South"),
    Venue(slug="design-museum", name="Design Museum", website_url="https://designmuseum.org", area="West"),
]


@pytest.fixture
def load_fixture():
    """Return a loader for recorded pages in tests/fixtures."""
    def _load(name: str) -> str:
        return (FIXTURES / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture
def conn():
    """In-memory database with a few venues seeded."""
    connection = db_module.connect(Path(":memory:"))
    for venue in VENUES:
        db_module.upsert_venue(connection, venue)
    yield connection
    connection.close()


@pytest.fixture
def fetcher():
    return Fetcher(delay_ms=0)


@pytest.fixture
def delays(fetcher, monkeypatch):
    """Record calls to fetcher.delay() instead of sleeping."""
    calls = []
    monkeypatch.setattr(fetcher, "delay", lambda ms=None: calls.append(ms))
    return calls
