"""Tests for the command-line jobs."""

import sys

import pytest

from spendly.jobs import refresh_rates, seed_categories


@pytest.mark.parametrize("stored, exit_code", [(12, 0), (0, 1)])
def test_refresh_rates_exit_code(monkeypatch, stored, exit_code):
    async def fake_run():
        return stored

    monkeypatch.setattr(refresh_rates, "run", fake_run)
    monkeypatch.setattr(sys, "argv", ["refresh_rates", "--log-level", "WARNING"])

    with pytest.raises(SystemExit) as exc_info:
        refresh_rates.main()

    assert exc_info.value.code == exit_code


def test_seed_categories_reports_count(monkeypatch, caplog):
    async def fake_run():
        return 14

    monkeypatch.setattr(seed_categories, "run", fake_run)

    with caplog.at_level("INFO", logger="spendly.jobs.seed_categories"):
        seed_categories.main()

    assert "Default categories seeded: 14 created" in caplog.text
