"""Demo seeding, settings loading and the command line."""

from __future__ import annotations

import sys

import pytest

from vendor_discovery import main as cli
from vendor_discovery.config.settings import Settings, settings
from vendor_discovery.demo import generate_demo_vendors
from vendor_discovery.models.filter_state import LOCATIONS, OCCASIONS


def test_demo_vendors_are_deterministic_and_valid():
    first = generate_demo_vendors(count=30, seed=7)
    second = generate_demo_vendors(count=30, seed=7)

    assert [r.summary.slug for r in first] == [r.summary.slug for r in second]
    assert len({r.summary.slug for r in first}) == 30
    for record in first:
        assert record.summary.city in LOCATIONS
        assert set(record.occasions) <= set(OCCASIONS)
        assert 0 <= record.summary.rating <= 5


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MAX_PAGE_SIZE", "50")
    monkeypatch.setenv("BACKEND_URL", "https://api.example.ae")
    monkeypatch.setenv("SITE_URL", "https://example.ae/")
    fresh = Settings()
    assert fresh.max_page_size == 50
    assert fresh.backend_url == "https://api.example.ae"
    assert fresh.site_url == "https://example.ae"
    assert fresh.default_center == (25.2048, 55.2708)


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["vendor-discovery", *argv])
    return cli.main()


def test_cli_seed_stats_and_search(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(settings, "database_path", str(tmp_path / "cli.db"))
    monkeypatch.setattr(settings, "backend_url", None)

    assert _run(monkeypatch, "seed", "--count", "12", "--seed", "1") == 0
    assert "12/12" in capsys.readouterr().out

    assert _run(monkeypatch, "stats") == 0
    assert "Вендоров: 12" in capsys.readouterr().out

    assert _run(monkeypatch, "search", "limit=5", "--json") == 0
    out = capsys.readouterr().out
    assert "Страница 1/3" in out
    assert '"total_pages": 3' in out


def test_cli_without_command_prints_help(monkeypatch, capsys):
    assert _run(monkeypatch) == 0
    assert "usage" in capsys.readouterr().out.lower()
