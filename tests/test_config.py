from pathlib import Path

import pytest

import artvenues.config as cfg_module

CONFIG = """
[database]
path = "data/events.db"

[scraper]
delay_ms = 1000

[venues.tate-modern]
name = "Tate Modern"
website_url = "https://www.tate.org.uk"
area = "South"

[scrapers.tate]

[scrapers.royalacademy]
enabled = false
"""


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    # load() copies .env values into os.environ; setenv registers them for cleanup
    for var in cfg_module.ENV_OVERRIDES:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    path = tmp_path / "config.toml"
    path.write_text(CONFIG)
    return path


def test_load(config_path, tmp_path):
    cfg = cfg_module.load(config_path, env_path=tmp_path / "missing")

    assert cfg_module.get_database_path(cfg) == Path("data/events.db")
    assert cfg_module.get_scraper_settings(cfg) == {"delay_ms": 1000}
    assert list(cfg_module.get_venues(cfg)) == ["tate-modern"]
    assert list(cfg_module.get_scrapers(cfg)) == ["tate"]


def test_defaults_for_empty_config():
    assert cfg_module.get_database_path({}) == Path("data/events.db")
    assert cfg_module.get_scraper_settings({}) == {}
    assert cfg_module.get_scrapers({}) == {}


def test_env_var_overrides(config_path, tmp_path, monkeypatch):
    monkeypatch.setenv("ARTVENUES_DATABASE_PATH", "/tmp/other.db")

    cfg = cfg_module.load(config_path, env_path=tmp_path / "missing")

    assert cfg_module.get_database_path(cfg) == Path("/tmp/other.db")


def test_env_file_overrides(config_path, tmp_path):
    env_file = tmp_path / "secrets"
    env_file.write_text('# local overrides\nARTVENUES_CONTACT_URL="https://example.org/me"\n')

    cfg = cfg_module.load(config_path, env_path=env_file)

    assert cfg["scraper"]["contact_url"] == "https://example.org/me"


def test_shell_env_beats_env_file(config_path, tmp_path, monkeypatch):
    monkeypatch.setenv("ARTVENUES_CONTACT_URL", "https://example.org/shell")
    env_file = tmp_path / "secrets"
    env_file.write_text("ARTVENUES_CONTACT_URL=https://example.org/file\n")

    cfg = cfg_module.load(config_path, env_path=env_file)

    assert cfg["scraper"]["contact_url"] == "https://example.org/shell"


def test_delay_override_is_an_int(config_path, tmp_path, monkeypatch):
    monkeypatch.setenv("ARTVENUES_DELAY_MS", "0")

    cfg = cfg_module.load(config_path, env_path=tmp_path / "missing")

    assert cfg_module.get_scraper_settings(cfg)["delay_ms"] == 0


def test_bad_delay_override(config_path, tmp_path, monkeypatch):
    monkeypatch.setenv("ARTVENUES_DELAY_MS", "soon")

    with pytest.raises(ValueError, match="ARTVENUES_DELAY_MS"):
        cfg_module.load(config_path, env_path=tmp_path / "missing")
