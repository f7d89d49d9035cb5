"""
CLI tests against the local JSON backend (no network).
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

import main


@pytest.fixture
def store_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for key in ("BILLING_BACKEND", "BILLING_LOCAL_STORE", "BILLING_API_URL", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path / "bills.json"


def _run(store_file: Path, *args: str) -> int:
    return main.main(["--backend", "local", "--store", str(store_file), "--log-level", "WARNING", *args])


def test_add_list_print(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(store_file, "add", "--name", "Asha", "--amount", "300", "--date", "2024-01-15") == 0
    assert _run(store_file, "add", "--name", "Ravi", "--amount", "1000", "--charge-type", "Delivery") == 0
    bill_id = json.loads(store_file.read_text())[0]["_id"]
    capsys.readouterr()

    assert _run(store_file, "list", "--min-amount", "500") == 0
    out = capsys.readouterr().out
    assert "Ravi" in out and "Asha" not in out

    assert _run(store_file, "print", bill_id) == 0
    out = capsys.readouterr().out
    assert "S.No. 001" in out
    assert "Three Hundred Rupees Only" in out


def test_add_invalid_reports_errors(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(store_file, "add", "--name", "A", "--amount", "-1", "--phone", "123") == 1
    err = capsys.readouterr().err
    assert "Validation failed" in err
    assert "Amount must be a positive number" in err
    assert "Phone number must be 10 digits" in err


def test_bulk_print_range(store_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    for name in ("A", "B", "C"):
        assert _run(store_file, "add", "--name", name, "--amount", "300") == 0
    out_file = tmp_path / "bulk.txt"
    assert _run(store_file, "bulk-print", "--start", "2", "--end", "3", "--output", str(out_file)) == 0
    text = out_file.read_text(encoding="utf-8")
    assert "S.No. 002" in text and "S.No. 003" in text and "S.No. 001" not in text

    assert _run(store_file, "bulk-print", "--start", "5", "--end", "2") == 1
    assert "Start serial number must be less than or equal to end serial number" in capsys.readouterr().err


def test_bulk_print_requires_selection(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(store_file, "add", "--name", "A", "--amount", "300") == 0
    assert _run(store_file, "bulk-print") == 1
    assert "Please select at least one invoice to print" in capsys.readouterr().err


def test_summary_and_delete(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(store_file, "add", "--name", "A", "--amount", "300", "--status", "Paid") == 0
    assert _run(store_file, "add", "--name", "B", "--amount", "200") == 0
    capsys.readouterr()
    assert _run(store_file, "summary") == 0
    out = capsys.readouterr().out
    assert "Total bills:   2" in out
    assert "Paid bills:    1" in out
    assert "₹500.00" in out

    bill_id = json.loads(store_file.read_text())[1]["_id"]
    assert _run(store_file, "delete", bill_id) == 0
    assert len(json.loads(store_file.read_text())) == 1
    assert _run(store_file, "delete", "missing") == 1


def test_list_shows_formatted_mobile(store_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(store_file, "add", "--name", "Asha", "--amount", "300", "--phone", "9876543210") == 0
    capsys.readouterr()
    assert _run(store_file, "list") == 0
    out = capsys.readouterr().out
    assert "Mobile" in out
    assert "(987) 654-3210" in out


def test_bulk_print_unusable_range_does_not_report_selection(
    store_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(store_file, "add", "--name", "A", "--amount", "300") == 0
    capsys.readouterr()
    assert _run(store_file, "bulk-print", "--start", "abc") == 1
    err = capsys.readouterr().err
    assert "Auto-selected" not in err
    assert "Please select at least one invoice to print" in err
