import os
import tomllib
from pathlib import Path
from typing import Any

_DEFAULT_CONFIG_PATH = Path("config.toml")
_DEFAULT_ENV_PATH = Path("secrets")

# Environment variable -> (config section, key, type)
ENV_OVERRIDES: dict[str, tuple[str, str, type]] = {
    "ARTVENUES_DATABASE_PATH": ("database", "path", str),
    "ARTVENUES_CONTACT_URL":   ("scraper", "contact_url", str),
    "ARTVENUES_DELAY_MS":      ("scraper", "delay_ms", int),
}


def load(path: Path = _DEFAULT_CONFIG_PATH, env_path: Path = _DEFAULT_ENV_PATH) -> dict[str, Any]:
    """Load config from TOML, then overlay overrides from the shell and the .env-style secrets file."""
    with open(path, "rb") as f:
        cfg = tomllib.load(f)
    for key, value in _read_env_file(env_path).items():
        # Shell environment wins over the file
        os.environ.setdefault(key, value)
    _apply_env_vars(cfg)
    return cfg


def _read_env_file(env_path: Path) -> dict[str, str]:
    """Parse KEY=value lines; blank lines, comments and quotes around values are ignored."""
    if not env_path.exists():
        return {}
    values = {}
    for raw in env_path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def _apply_env_vars(cfg: dict) -> None:
    for var, (section, key, cast) in ENV_OVERRIDES.items():
        if v := os.environ.get(var):
            try:
                cfg.setdefault(section, {})[key] = cast(v)
            except ValueError as exc:
                raise ValueError(f"{var} must be {cast.__name__}, got {v!r}") from exc


def get_database_path(cfg: dict) -> Path:
    return Path(cfg.get("database", {}).get("path", "data/events.db"))


def get_scraper_settings(cfg: dict) -> dict:
    """The [scraper] section: delay_ms, timeout and contact_url for the shared Fetcher."""
    return cfg.get("scraper", {})


def get_venues(cfg: dict) -> dict[str, dict]:
    """Return the [venues] seed data keyed by venue slug."""
    return cfg.get("venues", {})


def get_scrapers(cfg: dict) -> dict[str, dict]:
    """Return the [scrapers] section, filtering to only enabled scrapers."""
    scrapers = cfg.get("scrapers", {})
    return {key: s for key, s in scrapers.items() if s.get("enabled", True)}
