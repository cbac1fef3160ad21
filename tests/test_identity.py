import re

from artvenues.identity import MAX_SLUG_LENGTH, fingerprint, resolve_slug, slugify

SLUG_RE = re.compile(r"^[a-z0-9-]*$")


def test_slugify_basic():
    assert slugify("Spring Show") == "spring-show"
    assert slugify("Hallyu! The Korean Wave") == "hallyu-the-korean-wave"
    assert slugify("  Beyond the Frame – New Photography ") == "beyond-the-frame-new-photography"


def test_slugify_character_set_and_length():
    titles = [
        "Siena: The Rise of Painting",
        "Tschabalala Self: Around the Way",
        "Café Müller & Friends",
        "---",
        "A" * 300,
        "word " * 40,
    ]
    for title in titles:
        slug = slugify(title)
        assert SLUG_RE.match(slug), slug
        assert len(slug) <= MAX_SLUG_LENGTH
        assert not slug.startswith("-") and not slug.endswith("-")


def test_slugify_is_deterministic():
    assert slugify("Late Night Lates") == slugify("Late Night Lates")


def test_fingerprint_length_and_charset():
    for url in ["", "https://www.barbican.org.uk/whats-on/2026/event/spring-show"]:
        h = fingerprint(url)
        assert len(h) == 16
        assert re.match(r"^[0-9a-f]{16}$", h)


def test_fingerprint_is_stable_and_distinct():
    urls = [f"https://www.tate.org.uk/whats-on/tate-modern/event-{i}" for i in range(500)]
    hashes = {fingerprint(u) for u in urls}
    assert len(hashes) == len(urls)
    assert fingerprint(urls[0]) == fingerprint(urls[0])


def test_fingerprint_custom_length():
    assert len(fingerprint("https://example.org", length=32)) == 32


def test_resolve_slug_free_base():
    assert resolve_slug("spring-show", set()) == "spring-show"


def test_resolve_slug_collisions():
    taken = {"spring-show"}
    assert resolve_slug("spring-show", taken) == "spring-show-2"
    taken.add("spring-show-2")
    assert resolve_slug("spring-show", taken) == "spring-show-3"


def test_resolve_slug_empty_base():
    assert resolve_slug("", set()) == "event"
    assert resolve_slug("", {"event"}) == "event-2"


def test_resolve_slug_keeps_suffixed_slug_within_limit():
    base = "a" * MAX_SLUG_LENGTH
    slug = resolve_slug(base, {base})
    assert slug.endswith("-2")
    assert len(slug) <= MAX_SLUG_LENGTH
