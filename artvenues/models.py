from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from artvenues.normalize import truncate

EVENT_TYPES = (
    "visual-arts",
    "theatre",
    "dance",
    "workshop",
    "talk",
    "market",
    "film",
    "music",
)

AREAS = ("Central", "East", "South", "West", "North")

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 500


@dataclass
class Venue:
    slug: str          # Unique identifier, matches the [venues.<slug>] section in config.toml
    name: str
    website_url: str
    area: str
    # Populated by DB layer after insert
    id: Optional[int] = field(default=None, repr=False)


@dataclass
class CandidateEvent:
    """One event as produced by a venue scraper, before it is persisted."""

    title: str
    start_date: date
    source_url: str
    event_type: str = "visual-arts"
    description: str = ""
    end_date: Optional[date] = None
    image_url: Optional[str] = None
    is_free: Optional[bool] = None       # None = unknown, never guessed as False
    is_sold_out: Optional[bool] = None

    def __post_init__(self):
        self.title = truncate(self.title, MAX_TITLE_LENGTH)
        self.description = truncate(self.description or "", MAX_DESCRIPTION_LENGTH)
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {self.event_type!r}")


@dataclass
class Event:
    venue_id: int      # Foreign key to Venue.id
    title: str
    slug: str
    start_date: date
    source_url: str
    source_hash: str
    event_type: str
    description: str = ""
    end_date: Optional[date] = None
    image_url: Optional[str] = None
    is_free: Optional[bool] = None
    is_sold_out: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Populated by DB layer after insert
    id: Optional[int] = field(default=None, repr=False)
