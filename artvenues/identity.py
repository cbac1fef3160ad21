import hashlib
import re

MAX_SLUG_LENGTH = 80
FINGERPRINT_LENGTH = 16
_FALLBACK_SLUG = "event"

_DISALLOWED_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


def fingerprint(source_url: str, length: int = FINGERPRINT_LENGTH) -> str:
    """
    Stable reconciliation key for an event: a truncated sha256 of its source URL.

    Only the URL is hashed, so edits to the title or dates on the venue site
    update the existing row instead of creating a new one. 16 hex chars is
    plenty for a few thousand events; pass a larger length for bigger corpora.
    """
    return hashlib.sha256(source_url.encode("utf-8")).hexdigest()[:length]


def slugify(title: str) -> str:
    slug = _DISALLOWED_RE.sub("", title.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug[:MAX_SLUG_LENGTH].strip("-")


def resolve_slug(base: str, taken: set[str]) -> str:
    """
    Return base, or the first of base-2, base-3, ... that is not in taken.

    Checks at most len(taken) + 1 suffixes, so it always terminates. Suffixed
    slugs are kept within MAX_SLUG_LENGTH by shortening the base.
    """
    base = base or _FALLBACK_SLUG
    if base not in taken:
        return base
    for i in range(2, len(taken) + 3):
        suffix = f"-{i}"
        candidate = base[:MAX_SLUG_LENGTH - len(suffix)].rstrip("-") + suffix
        if candidate not in taken:
            return candidate
    raise RuntimeError(f"Could not resolve a free slug for {base!r}")  # unreachable
