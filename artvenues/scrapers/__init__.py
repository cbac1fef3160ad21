"""
Scraper registry.

To add a new venue scraper:
1. Create <key>.py with a BaseScraper subclass setting key, venue_slug,
   venue_name and default_url
2. Implement fetch_events() to return CandidateEvent objects, unique by source_url
3. Import and register it in the SCRAPERS dict below
4. Add [venues.<venue_slug>] and [scrapers.<key>] sections to config.toml
"""

from artvenues.scrapers.barbican import BarbicanScraper
from artvenues.scrapers.base import BaseScraper
from artvenues.scrapers.designmuseum import DesignMuseumScraper
from artvenues.scrapers.nationalgallery import NationalGalleryScraper
from artvenues.scrapers.royalacademy import RoyalAcademyScraper
from artvenues.scrapers.saatchi import SaatchiGalleryScraper
from artvenues.scrapers.serpentine import SerpentineScraper
from artvenues.scrapers.somersethouse import SomersetHouseScraper
from artvenues.scrapers.southbank import SouthbankCentreScraper
from artvenues.scrapers.tate import TateModernScraper
from artvenues.scrapers.timeout import (
    HaywardGalleryScraper, RoyalAcademyTimeOutScraper, SouthbankTimeOutScraper,
)
from artvenues.scrapers.vanda import VandAScraper
from artvenues.scrapers.whitechapel import WhitechapelGalleryScraper

SCRAPERS: dict[str, type[BaseScraper]] = {
    "barbican": BarbicanScraper,
    "vanda": VandAScraper,
    "tate": TateModernScraper,
    "southbank": SouthbankCentreScraper,
    "nationalgallery": NationalGalleryScraper,
    "designmuseum": DesignMuseumScraper,
    "saatchi": SaatchiGalleryScraper,
    "somersethouse": SomersetHouseScraper,
    "serpentine": SerpentineScraper,
    "whitechapel": WhitechapelGalleryScraper,
    "hayward": HaywardGalleryScraper,
    "royalacademy": RoyalAcademyScraper,
    "royalacademytimeout": RoyalAcademyTimeOutScraper,
    "southbanktimeout": SouthbankTimeOutScraper,
}
