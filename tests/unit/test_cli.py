"""Unit tests for the command line entry point."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

import pytest

from fzf_import import __version__, cli
from fzf_import.config import Settings
from fzf_import.domain.errors import DependencyError, InvalidTargetError, SubprocessExitError
from fzf_import.domain.model import ImportOutcome


class RecordingService:
    """Stands in for ImportService and records which workflow ran."""

    def __init__(self, outcome: ImportOutcome = ImportOutcome.ADDED) -> None:
        self.outcome = outcome
        self.calls: list[tuple] = []

    async def search_and_import(self, path, keyword):
        self.calls.append(("keyword", path, keyword))
        return self.outcome

    async def interactive_import(self, path):
        self.calls.append(("interactive", path))
        return self.outcome

    async def search_and_import_at_position(self, path, row, col):
        self.calls.append(("position", path, row, col))
        return self.outcome


@pytest.fixture
def tools_present(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("fzf_import.cli.check_dependencies", lambda settings: None)


@pytest.mark.unit
class TestArgumentParser:
    def test_file_only(self):
        args = cli.build_argument_parser().parse_args(["src/app.ts"])
        assert args.file == "src/app.ts"
        assert args.keyword is None
        assert args.debug is False

    def test_file_keyword_and_debug(self):
        args = cli.build_argument_parser().parse_args(["-d", "src/app.ts:3:4", "useState"])
        assert args.file == "src/app.ts:3:4"
        assert args.keyword == "useState"
        assert args.debug is True

    def test_missing_file_exits_with_usage(self, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as excinfo:
            cli.build_argument_parser().parse_args([])
        assert excinfo.value.code == 2
        assert "usage: fzf-import" in capsys.readouterr().err

    def test_version(self, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as excinfo:
            cli.build_argument_parser().parse_args(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out


@pytest.mark.unit
@pytest.mark.usefixtures("tools_present")
class TestRun:
    def _args(self, file: str, keyword: str | None = None) -> argparse.Namespace:
        return argparse.Namespace(file=file, keyword=keyword, debug=False)

    def test_keyword_mode(self, settings: Settings, project: Path):
        service = RecordingService()
        target = project / "src" / "app.ts"

        outcome = cli.run(self._args(str(target), "Foo"), settings, service)

        assert outcome is ImportOutcome.ADDED
        assert service.calls == [("keyword", target.resolve(), "Foo")]

    def test_interactive_mode(self, settings: Settings, project: Path):
        service = RecordingService(ImportOutcome.CANCELLED)
        target = project / "src" / "app.ts"

        outcome = cli.run(self._args(str(target)), settings, service)

        assert outcome is ImportOutcome.CANCELLED
        assert service.calls == [("interactive", target.resolve())]

    def test_position_mode_ignores_keyword(self, settings: Settings, project: Path):
        service = RecordingService()
        target = project / "src" / "app.ts"

        cli.run(self._args(f"{target}:4:24", "ignored"), settings, service)

        assert service.calls == [("position", target.resolve(), 4, 24)]

    def test_invalid_target(self, settings: Settings, project: Path):
        with pytest.raises(InvalidTargetError):
            cli.run(self._args(f"{project}/src/app.ts:4"), settings, RecordingService())

    def test_missing_dependencies_checked_first(self, settings: Settings, monkeypatch: pytest.MonkeyPatch):
        def missing(settings):
            raise DependencyError("Missing required dependencies: fzf")

        monkeypatch.setattr("fzf_import.cli.check_dependencies", missing)
        with pytest.raises(DependencyError):
            cli.run(self._args("does-not-exist.ts"), settings, RecordingService())


@pytest.fixture
def logging_levels(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    levels: list[str] = []
    monkeypatch.setattr(cli, "configure_logging", lambda level, json_output: levels.append(level))
    return levels


@pytest.mark.unit
@pytest.mark.usefixtures("logging_levels")
class TestMain:
    def test_success_returns_zero(self, monkeypatch: pytest.MonkeyPatch, project: Path):
        monkeypatch.setattr(cli, "run", lambda args, settings: ImportOutcome.ADDED)
        assert cli.main([str(project / "src" / "app.ts"), "Foo"]) == 0

    def test_non_added_outcomes_still_succeed(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(cli, "run", lambda args, settings: ImportOutcome.NO_MATCHES)
        assert cli.main(["app.ts"]) == 0

    @pytest.mark.parametrize(
        "error",
        [
            DependencyError("Missing required dependencies: rg"),
            InvalidTargetError("File does not exist: /tmp/x.ts"),
            SubprocessExitError("rg", 2, "regex parse error"),
        ],
    )
    def test_errors_return_one(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], error):
        def failing(args, settings):
            raise error

        monkeypatch.setattr(cli, "run", failing)

        assert cli.main(["app.ts"]) == 1
        assert capsys.readouterr().err.strip() == f"Error: {error}"

    def test_interrupt_returns_130(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
        def interrupted(args, settings):
            raise asyncio.CancelledError

        monkeypatch.setattr(cli, "run", interrupted)

        assert cli.main(["app.ts"]) == 130
        assert "Interrupted." in capsys.readouterr().err

    def test_invalid_configuration(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
        monkeypatch.setenv("FZF_IMPORT_BATCH_SIZE", "0")

        assert cli.main(["app.ts"]) == 1
        assert "invalid configuration" in capsys.readouterr().err

    def test_debug_flag_enables_debug_logging(self, monkeypatch: pytest.MonkeyPatch, logging_levels: list[str]):
        monkeypatch.setattr(cli, "run", lambda args, settings: ImportOutcome.ADDED)

        cli.main(["-d", "app.ts"])
        cli.main(["app.ts"])

        assert logging_levels == ["DEBUG", "warning"]
