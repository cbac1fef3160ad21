import pytest

from artvenues.classify import DEFAULT_EVENT_TYPE, infer_event_type
from artvenues.models import EVENT_TYPES


@pytest.mark.parametrize("title, description, category, expected", [
    ("Ballet Gala", "", None, "dance"),
    ("Random Thing", "", None, "visual-arts"),
    ("Printmaking Workshop at the Exhibition", "", None, "visual-arts"),
    ("Hamlet", "A new production of the play", None, "theatre"),
    ("Life Drawing", "", "Masterclass", "workshop"),
    ("Panel: Museums Now", "", None, "talk"),
    ("Christmas Market", "", None, "market"),
    ("Screening: Solaris", "", None, "film"),
    ("Late Night Orchestra", "", None, "music"),
    ("Summer Show", "", "Painting", "visual-arts"),
])
def test_infer_event_type(title, description, category, expected):
    assert infer_event_type(title, description, category) == expected


def test_match_is_case_insensitive():
    assert infer_event_type("BALLET") == "dance"


def test_default_is_a_known_type():
    assert DEFAULT_EVENT_TYPE in EVENT_TYPES
    assert infer_event_type("") == DEFAULT_EVENT_TYPE
