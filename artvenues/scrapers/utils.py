"""Small BeautifulSoup helpers shared by the venue scrapers."""

import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import Tag

from artvenues.normalize import clean_text

ITEM_ERRORS = (AttributeError, KeyError, TypeError, ValueError)

_BG_URL_RE = re.compile(r"url\(\s*['\"]?([^'\")\s]+)['\"]?\s*\)")


def absolute_url(href: Optional[str], base: str) -> Optional[str]:
    if not href:
        return None
    href = href.strip()
    if href.startswith("http"):
        return href
    return urljoin(base + "/", href)


def select_text(node: Tag, selector: str) -> str:
    """Concatenated text of every element matching selector."""
    return clean_text(" ".join(el.get_text(" ", strip=True) for el in node.select(selector)))


def first_text(node: Tag, selector: str) -> str:
    el = node.select_one(selector)
    return clean_text(el.get_text(" ", strip=True)) if el else ""


def first_line(node: Tag) -> str:
    for line in node.get_text("\n").split("\n"):
        if line.strip():
            return clean_text(line)
    return ""


def image_src(node: Tag) -> Optional[str]:
    img = node.find("img")
    if not img:
        return None
    return img.get("src") or img.get("data-src") or None


def background_image(style: Optional[str], base: str) -> Optional[str]:
    """Pull the URL out of an inline 'background-image: url(...)' style."""
    if not style:
        return None
    m = _BG_URL_RE.search(style)
    if not m:
        return None
    return absolute_url(m.group(1), base)


def free_signal(text: str) -> Optional[bool]:
    return True if "free" in text.lower() else None


def sold_out_signal(text: str) -> Optional[bool]:
    return True if re.search(r"sold.?out", text, re.IGNORECASE) else None
