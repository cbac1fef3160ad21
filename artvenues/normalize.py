"""
Date and text normalisation for scraped listing pages.

Venue sites write dates as free text: "15 Mar - 20 Jun 2026",
"Until 29 March 2026", "Tuesday, 17 February 2026". Everything here is a pure
function; unparseable input gives None rather than raising.
"""

import re
from datetime import date, datetime
from typing import Optional

from bs4 import BeautifulSoup
from dateutil import parser as dateparser

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"
_DAY = r"\d{1,2}(?:st|nd|rd|th)?"
_YEAR = r"\d{4}"

_DATE_RE = re.compile(rf"{_DAY}\s+{_MONTH}\s+{_YEAR}", re.IGNORECASE)
_UNTIL_RE = re.compile(rf"until\s+({_DAY}\s+{_MONTH}\s+{_YEAR})", re.IGNORECASE)
_UNTIL_MONTH_RE = re.compile(rf"until\s+({_MONTH}\s+{_YEAR})", re.IGNORECASE)
_RANGE_RE = re.compile(
    rf"({_DAY}\s+{_MONTH}(?:\s+{_YEAR})?)\s*[-–—]\s*({_DAY}\s+{_MONTH}\s+{_YEAR})",
    re.IGNORECASE,
)
_YEAR_RE = re.compile(_YEAR)
_WHITESPACE_RE = re.compile(r"\s+")


def _parse(date_str: str) -> Optional[date]:
    try:
        return dateparser.parse(date_str.strip(), dayfirst=True).date()
    except (ValueError, OverflowError, TypeError):
        return None


def parse_single_date(text: str) -> Optional[date]:
    """Return the first 'day month year' date found in text, or None."""
    if not text:
        return None
    m = _DATE_RE.search(text)
    if not m:
        return None
    return _parse(m.group())


def parse_date_range(
    text: str, today: Optional[date] = None
) -> tuple[Optional[date], Optional[date]]:
    """
    Parse a listing's date text into (start_date, end_date).

    Recognised, in order:
      "Until 29 March 2026"       -> (today, 2026-03-29)
      "Until August 2026"         -> (today, 2026-08-01)
      "15 Mar - 20 Jun 2026"      -> (2026-03-15, 2026-06-20)
      "Tuesday, 17 February 2026" -> (2026-02-17, None)

    A range start without a year takes the year of the end. If that puts the
    start after the end, the range crosses New Year and the start is moved
    back a year.
    """
    if not text:
        return None, None
    today = today or date.today()

    m = _UNTIL_RE.search(text)
    if m:
        return today, _parse(m.group(1))

    m = _UNTIL_MONTH_RE.search(text)
    if m:
        return today, _parse(f"1 {m.group(1)}")

    m = _RANGE_RE.search(text)
    if m:
        start_str, end_str = m.group(1), m.group(2)
        borrowed = False
        if not _YEAR_RE.search(start_str):
            start_str = f"{start_str} {_YEAR_RE.search(end_str).group()}"
            borrowed = True
        start, end = _parse(start_str), _parse(end_str)
        if borrowed and start and end and start > end:
            try:
                start = start.replace(year=start.year - 1)
            except ValueError:
                # 29 Feb has no counterpart in the previous year
                start = start.replace(year=start.year - 1, day=28)
        return start, end

    return parse_single_date(text), None


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse the date part of an ISO 8601 string like '2026-03-01T10:00:00Z'."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_html(fragment: Optional[str]) -> str:
    """Reduce an HTML fragment (e.g. a WordPress 'rendered' field) to plain text."""
    if not fragment:
        return ""
    if "<" not in fragment and "&" not in fragment:
        return clean_text(fragment)
    return clean_text(BeautifulSoup(fragment, "lxml").get_text(" "))


def truncate(text: str, limit: int) -> str:
    return text[:limit]
