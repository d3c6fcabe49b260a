from datetime import date
from pathlib import Path

import pytest

import main
from conftest import make_batch_dirs
from core.models import (
    BatchUnit,
    DateRange,
    PipelineOutcome,
    PipelineResult,
    RunMode,
    RunReport,
)


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "ensure_env_file_exists", lambda: None)
    monkeypatch.setattr(main, "setup_file_logging", lambda: tmp_path / "logs")
    monkeypatch.setenv("ARCHIVER_VALID_SUPPLIERS", "supplier1,supplier2")
    monkeypatch.setenv("ARCHIVER_WORK_DIR", str(tmp_path / "work"))
    monkeypatch.setenv("ARCHIVER_MAX_WORKERS", "1")
    monkeypatch.delenv("ARCHIVER_PASSPHRASE", raising=False)
    return tmp_path


def test_parser_accepts_short_and_long_options():
    args = main.build_parser().parse_args(
        ["-b", "2024-01-05", "-f", "2024-01-01", "--bcrypt", "phrase123", "-p", "/data", "-n"]
    )
    assert args.before == "2024-01-05"
    assert args.earliest == "2024-01-01"
    assert args.passphrase == "phrase123"
    assert args.path == Path("/data")
    assert args.noupload is True
    assert args.auto is False


def test_manual_run_without_upload(cli_env, batch_root, capsys):
    make_batch_dirs(batch_root, "supplier1/1999-12-30", "supplier2/2000-01-04", "stranger/1999-12-30")

    code = main.main(
        ["-p", str(batch_root), "-b", "2000-01-05", "-n", "--passphrase", "cli passphrase"]
    )

    assert code == main.EXIT_OK
    artifacts = sorted(p.name for p in (cli_env / "work").rglob("*.bfe"))
    assert artifacts == ["supplier1-1999-12-30.tar.bz2.bfe", "supplier2-2000-01-04.tar.bz2.bfe"]
    out = capsys.readouterr().out
    assert "Заархивировано без загрузки: 2" in out
    assert "stranger" in out
    assert (batch_root / "supplier1" / "1999-12-30").exists()


def test_missing_cutoff_is_fatal(cli_env, batch_root):
    assert main.main(["-p", str(batch_root), "-n"]) == main.EXIT_FATAL


def test_short_passphrase_is_fatal(cli_env, batch_root):
    make_batch_dirs(batch_root, "supplier1/1999-12-30")
    assert main.main(["-p", str(batch_root), "-b", "2000-01-05", "-n", "--bcrypt", "short"]) == main.EXIT_FATAL
    assert not (cli_env / "work").exists()


def test_bad_environment_is_fatal(cli_env, monkeypatch, batch_root):
    monkeypatch.setenv("ARCHIVER_MAX_WORKERS", "lots")
    assert main.main(["-p", str(batch_root), "-b", "2000-01-05", "-n"]) == main.EXIT_FATAL


def _report(**kwargs):
    unit = BatchUnit("supplier1", date(2024, 1, 1), Path("/data/supplier1/2024-01-01"))
    outcome = kwargs.pop("outcome", PipelineOutcome.ARCHIVED)
    return RunReport(
        mode=RunMode.AUTOMATIC,
        date_range=DateRange(date(2024, 1, 10)),
        root_path=Path("/data"),
        results=[PipelineResult(unit=unit, outcome=outcome, stage="upload" if outcome is PipelineOutcome.FAILED else None)],
        **kwargs,
    )


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        ({}, main.EXIT_OK),
        ({"outcome": PipelineOutcome.FAILED}, main.EXIT_UNIT_FAILURES),
        ({"boundary_error": "read-only"}, main.EXIT_BOUNDARY_NOT_SAVED),
        ({"outcome": PipelineOutcome.FAILED, "boundary_error": "read-only"}, main.EXIT_BOUNDARY_NOT_SAVED),
        ({"cancelled": True, "not_started": 3}, main.EXIT_CANCELLED),
    ],
)
def test_exit_codes(kwargs, expected):
    assert main.exit_code_for(_report(**kwargs)) == expected
