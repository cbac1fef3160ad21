"""
Keyword-based event type inference.

Groups are tested in order and the first match wins, so visual-arts terms
("art", "gallery", "exhibition") take priority over everything else. Text
that matches nothing is tagged visual-arts, the dominant programme at every
venue we scrape.
"""

from typing import Optional

DEFAULT_EVENT_TYPE = "visual-arts"

KEYWORD_GROUPS: list[tuple[str, tuple[str, ...]]] = [
    ("visual-arts", (
        "exhibition", "gallery", "art", "sculpture", "painting",
        "photography", "installation",
    )),
    ("theatre", ("theatre", "theater", "play", "drama")),
    ("dance", ("dance", "ballet", "choreograph")),
    ("workshop", ("workshop", "class", "masterclass", "course")),
    ("talk", ("talk", "lecture", "discussion", "conversation", "panel")),
    ("market", ("market", "fair", "craft")),
    ("film", ("film", "cinema", "screening", "movie")),
    ("music", ("concert", "music", "orchestra", "recital", "gig", "dj")),
]


def infer_event_type(title: str, description: str = "", category: Optional[str] = None) -> str:
    text = f"{title} {description} {category or ''}".lower()
    for event_type, keywords in KEYWORD_GROUPS:
        if any(keyword in text for keyword in keywords):
            return event_type
    return DEFAULT_EVENT_TYPE
