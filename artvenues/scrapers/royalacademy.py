"""
Royal Academy of Arts: not scraped directly.

royalacademy.org.uk sits behind a Cloudflare bot challenge that answers
every automated request (plain HTTP and headless browsers alike) with a 403
challenge page. Headless rendering and challenge solving are out of scope, so
this scraper returns nothing and says why.

The Royal Academy programme is collected from TimeOut instead; see
RoyalAcademyTimeOutScraper in timeout.py.
"""

from artvenues.scrapers.base import UnsupportedScraper


class RoyalAcademyScraper(UnsupportedScraper):
    key = "royalacademy"
    venue_slug = "royal-academy"
    venue_name = "Royal Academy of Arts"
    default_url = "https://www.royalacademy.org.uk/exhibitions-and-events"
    unsupported_reason = (
        "royalacademy.org.uk blocks automated requests with a Cloudflare challenge; "
        "use the 'royalacademytimeout' scraper instead"
    )
