import argparse
import logging
import sys
from pathlib import Path

from artvenues import __version__
import artvenues.config as cfg_module
import artvenues.db as db_module
from artvenues.fetch import Fetcher
from artvenues.models import AREAS, EVENT_TYPES, Venue
from artvenues.runner import format_summary, run_scrapers, total_errors
from artvenues.scrapers import SCRAPERS


def _seed(args, cfg) -> int:
    conn = db_module.connect(cfg_module.get_database_path(cfg))
    venues = cfg_module.get_venues(cfg)
    if not venues:
        print("No venues found. Check your config.toml [venues] section.")
        return 0
    seeded = 0
    for slug, venue_cfg in venues.items():
        area = venue_cfg.get("area", "Central")
        if area not in AREAS:
            print(f"Error: venue '{slug}' has unknown area '{area}' (expected one of {', '.join(AREAS)}).",
                  file=sys.stderr)
            continue
        db_module.upsert_venue(conn, Venue(
            slug=slug,
            name=venue_cfg.get("name", slug),
            website_url=venue_cfg.get("website_url", ""),
            area=area,
        ))
        seeded += 1
    print(f"{seeded} venues seeded.")
    return 0 if seeded == len(venues) else 1


def _scrape(args, cfg) -> int:
    conn = db_module.connect(cfg_module.get_database_path(cfg))
    enabled = cfg_module.get_scrapers(cfg)

    if args.venue:
        if args.venue not in SCRAPERS:
            print(f"Error: no scraper registered under '{args.venue}'.", file=sys.stderr)
            print(f"Available scrapers: {', '.join(sorted(SCRAPERS))}", file=sys.stderr)
            return 1
        targets = {args.venue: SCRAPERS[args.venue]}
    else:
        targets = {k: v for k, v in SCRAPERS.items() if k in enabled}

    if not targets:
        print("No enabled scrapers found. Check your config.toml [scrapers] section.")
        return 0

    fetcher = Fetcher.from_config(cfg_module.get_scraper_settings(cfg))
    scrapers = [cls(enabled.get(key, {}), fetcher) for key, cls in targets.items()]

    print("=== artvenues scrape ===")
    results = run_scrapers(conn, scrapers)
    print(format_summary(results))
    for r in results:
        if r.note:
            print(f"  {r.scraper}: {r.note}")

    errors = total_errors(results)
    if errors:
        print(f"\nWarning: {errors} error(s) occurred during scraping")
        return 1
    print("\nScraping complete!")
    return 0


def _list(args, cfg) -> int:
    conn = db_module.connect(cfg_module.get_database_path(cfg))
    venues = {v.id: v for v in db_module.get_all_venues(conn)}
    events = db_module.get_upcoming_events(
        conn, days_ahead=args.days, venue_slug=args.venue, event_type=args.type,
    )
    for e in events:
        venue = venues.get(e.venue_id)
        dates = e.start_date.isoformat()
        if e.end_date:
            dates += f" – {e.end_date.isoformat()}"
        free = " [free]" if e.is_free else ""
        print(f"{dates:<25} {e.event_type:<12} {venue.name if venue else '?':<24} {e.title}{free}")
    print(f"{len(events)} events.")
    return 0


def _prune(args, cfg) -> int:
    conn = db_module.connect(cfg_module.get_database_path(cfg))
    removed = db_module.delete_past_events(conn)
    print(f"Cleaned up {removed} past events from the database.")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="av",
        description="London art venue event aggregator",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", default="config.toml", metavar="PATH",
        help="Path to config.toml (default: config.toml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # seed
    subparsers.add_parser("seed", help="Create or update venues from config.toml")

    # scrape
    sp_scrape = subparsers.add_parser("scrape", help="Run scrapers and update the database")
    sp_scrape.add_argument(
        "--venue", metavar="KEY",
        help="Only run this scraper (by its key in config.toml)",
    )

    # run (seed + scrape)
    sp_run = subparsers.add_parser("run", help="Seed venues then run all scrapers")
    sp_run.add_argument(
        "--venue", metavar="KEY",
        help="Only run this scraper (by its key in config.toml)",
    )

    # list
    sp_list = subparsers.add_parser("list", help="Print upcoming events from the database")
    sp_list.add_argument("--venue", metavar="SLUG", help="Only events at this venue")
    sp_list.add_argument("--type", choices=EVENT_TYPES, help="Only events of this type")
    sp_list.add_argument("--days", type=int, default=90, help="Days ahead to include (default: 90)")

    # prune
    subparsers.add_parser("prune", help="Delete events that have finished")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = cfg_module.load(Path(args.config))

    if args.command == "seed":
        return _seed(args, cfg)
    elif args.command == "scrape":
        return _scrape(args, cfg)
    elif args.command == "run":
        _seed(args, cfg)
        return _scrape(args, cfg)
    elif args.command == "list":
        return _list(args, cfg)
    elif args.command == "prune":
        return _prune(args, cfg)
    return 1


if __name__ == "__main__":
    sys.exit(main())
