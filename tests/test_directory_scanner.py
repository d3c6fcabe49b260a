from datetime import date

import pytest

from conftest import make_batch_dirs
from core.models import SkipReason
from errors import ScanError
from services.batch_archive.directory_scanner import DirectoryScanner


def test_scan_yields_known_suppliers_in_order(batch_root):
    make_batch_dirs(
        batch_root,
        "supplier2/2024-01-03",
        "supplier1/2024-01-05",
        "supplier1/2024-01-01",
    )
    scanner = DirectoryScanner({"supplier1", "supplier2"})

    units = list(scanner.scan(batch_root))

    assert [(u.supplier, u.batch_date) for u in units] == [
        ("supplier1", date(2024, 1, 1)),
        ("supplier1", date(2024, 1, 5)),
        ("supplier2", date(2024, 1, 3)),
    ]
    assert units[0].path == batch_root / "supplier1" / "2024-01-01"


def test_unknown_supplier_is_reported_and_not_yielded(batch_root):
    make_batch_dirs(batch_root, "supplier1/2024-01-01", "unknownsupplier/2024-01-02")
    skipped = []

    units = list(DirectoryScanner({"supplier1"}).scan(batch_root, on_skip=skipped.append))

    assert [u.supplier for u in units] == ["supplier1"]
    assert [(s.name, s.reason) for s in skipped] == [("unknownsupplier", SkipReason.UNKNOWN_SUPPLIER)]


def test_invalid_batch_names_are_skipped_with_warning(batch_root):
    make_batch_dirs(batch_root, "supplier1/2024-01-01", "supplier1/tmp", "supplier1/2024-13-01")
    skipped = []

    units = list(DirectoryScanner({"supplier1"}).scan(batch_root, on_skip=skipped.append))

    assert [u.batch_date for u in units] == [date(2024, 1, 1)]
    assert sorted(s.name for s in skipped) == ["supplier1/2024-13-01", "supplier1/tmp"]
    assert all(s.reason is SkipReason.INVALID_BATCH_DATE for s in skipped)


def test_files_and_hidden_entries_are_ignored(batch_root):
    make_batch_dirs(batch_root, "supplier1/2024-01-01", ".cache/2024-01-01")
    (batch_root / ".last-archive-date").write_text("2024-01-01\n")
    (batch_root / "supplier1" / "2024-01-02.log").write_text("x")
    skipped = []

    units = list(DirectoryScanner({"supplier1"}).scan(batch_root, on_skip=skipped.append))

    assert len(units) == 1
    assert skipped == []


def test_missing_root_raises_on_iteration(batch_root):
    make_batch_dirs(batch_root, "supplier1/2024-01-01")
    iterator = DirectoryScanner({"supplier1"}).scan(batch_root / "missing")
    with pytest.raises(ScanError):
        next(iterator)
