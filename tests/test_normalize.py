from datetime import date

import pytest

from artvenues.normalize import (
    clean_text, parse_date_range, parse_iso_date, parse_single_date, strip_html, truncate,
)

TODAY = date(2026, 10, 19)


@pytest.mark.parametrize("text, expected", [
    ("15 Mar - 20 Jun 2026", (date(2026, 3, 15), date(2026, 6, 20))),
    ("15 March – 20 June 2026", (date(2026, 3, 15), date(2026, 6, 20))),
    ("1 May 2026 — 4 October 2026", (date(2026, 5, 1), date(2026, 10, 4))),
    ("Until 29 March 2026", (TODAY, date(2026, 3, 29))),
    ("until 3rd January 2027", (TODAY, date(2027, 1, 3))),
    ("Until August 2026", (TODAY, date(2026, 8, 1))),
    ("Tuesday, 17 February 2026", (date(2026, 2, 17), None)),
    ("21st Sept 2026, 7.30pm", (date(2026, 9, 21), None)),
])
def test_parse_date_range(text, expected):
    assert parse_date_range(text, TODAY) == expected


def test_range_across_new_year_moves_start_back():
    assert parse_date_range("8 Oct - 1 Mar 2026", TODAY) == (date(2025, 10, 8), date(2026, 3, 1))


def test_range_start_on_leap_day_moves_back_safely():
    start, end = parse_date_range("29 Feb - 1 Feb 2028", TODAY)
    assert start == date(2027, 2, 28)
    assert end == date(2028, 2, 1)


@pytest.mark.parametrize("text", ["", "no date here", "Ongoing", "Dates vary", "March 2026"])
def test_unparseable_text_gives_none(text):
    assert parse_date_range(text, TODAY) == (None, None)


def test_parse_date_range_defaults_today():
    start, end = parse_date_range("Until 29 March 2030")
    assert start == date.today()
    assert end == date(2030, 3, 29)


def test_parse_single_date():
    assert parse_single_date("Opens 4 November 2026 at 10am") == date(2026, 11, 4)
    assert parse_single_date("31 February 2026") is None
    assert parse_single_date("") is None


@pytest.mark.parametrize("value, expected", [
    ("2026-03-01", date(2026, 3, 1)),
    ("2026-03-01T10:00:00Z", date(2026, 3, 1)),
    ("2026-11-04T13:00:00+00:00", date(2026, 11, 4)),
    ("", None),
    (None, None),
    ("soon", None),
])
def test_parse_iso_date(value, expected):
    assert parse_iso_date(value) == expected


def test_clean_text():
    assert clean_text("  Spring\n\t Show  ") == "Spring Show"
    assert clean_text(None) == ""


def test_strip_html():
    assert strip_html("<p>Twelve <em>new</em> works</p>") == "Twelve new works"
    assert strip_html("Fish &amp; Chips") == "Fish & Chips"
    assert strip_html("Plain text") == "Plain text"
    assert strip_html(None) == ""


def test_truncate():
    assert truncate("abcdef", 3) == "abc"
    assert truncate("ab", 3) == "ab"
