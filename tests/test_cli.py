"""Tests for the command-line checks."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from supplement_engine.cli import main
from supplement_engine.models.supplement import Supplement, SupplementValue
from supplement_engine.serialization.store import JsonSupplementStore

MakeValue = Callable[..., SupplementValue]


@pytest.fixture
def store_path(tmp_path: Path, make_value: MakeValue) -> Path:
    path = tmp_path / "supplements.json"
    store = JsonSupplementStore(path)
    store.save(Supplement(
        id="clean",
        name="Breakfast",
        values=(make_value("a", dates=[("2024-06-01", "2024-06-02")], amount=25.0),),
    ))
    store.save(Supplement(
        id="overlapping",
        name="Dinner",
        values=(
            make_value("x", dates=[("2024-06-01", "2024-06-10")]),
            make_value("y", dates=[("2024-06-05", "2024-06-15")]),
        ),
    ))
    return path


class TestCheck:
    def test_reports_conflicts(self, store_path: Path, capsys: pytest.CaptureFixture) -> None:
        assert main(["--store", str(store_path), "check", "--policy", "strict"]) == 1
        out = capsys.readouterr().out
        assert "Breakfast (clean): 0 conflict(s)" in out
        assert "Conflict 1: x / y overlap on Date Ranges, Room Types, Rate Plans" in out

    def test_single_clean_supplement(self, store_path: Path) -> None:
        assert main(["--store", str(store_path), "check", "--supplement", "clean"]) == 0

    def test_empty_store(self, tmp_path: Path) -> None:
        assert main(["--store", str(tmp_path / "none.json"), "check"]) == 2


class TestQuote:
    def test_prints_totals(self, store_path: Path, capsys: pytest.CaptureFixture) -> None:
        code = main([
            "--store", str(store_path), "quote",
            "--supplement", "clean",
            "--check-in", "2024-06-01",
            "--nights", "3",
            "--room-type", "1",
            "--rate-plan", "1",
        ])
        assert code == 0
        assert "Total: 50.00 USD" in capsys.readouterr().out

    def test_unknown_supplement(self, store_path: Path) -> None:
        code = main([
            "--store", str(store_path), "quote",
            "--supplement", "missing",
            "--check-in", "2024-06-01",
            "--nights", "1",
            "--room-type", "1",
            "--rate-plan", "1",
        ])
        assert code == 2
