"""Command line entry point: ``fzf-import FILE[:ROW:COL] [KEYWORD]``."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Coroutine, Sequence
import logging
import sys
from typing import Any

from pydantic import ValidationError

from fzf_import import __version__
from fzf_import.config import Settings, get_settings
from fzf_import.domain.errors import FzfImportError
from fzf_import.domain.model import ImportOutcome, TargetSpec
from fzf_import.observability.logging import configure_logging
from fzf_import.runtime.signals import install_cancel_signals
from fzf_import.services.import_service import ImportService
from fzf_import.utils.project import check_dependencies, parse_target, validate_target


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fzf-import",
        description="Find JavaScript/TypeScript imports used elsewhere in the project and add one to a file",
    )
    parser.add_argument(
        "file",
        help="Target file to add imports to (supports file:row:col format)",
    )
    parser.add_argument(
        "keyword",
        nargs="?",
        help="Keyword to search for (interactive mode when omitted)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _dispatch(service: ImportService, target: TargetSpec, keyword: str | None) -> Coroutine[Any, Any, ImportOutcome]:
    path = validate_target(target)
    if target.has_position:
        assert target.row is not None and target.col is not None
        return service.search_and_import_at_position(path, target.row, target.col)
    if keyword:
        return service.search_and_import(path, keyword)
    return service.interactive_import(path)


async def _run_cancellable(workflow: Coroutine[Any, Any, ImportOutcome]) -> ImportOutcome:
    task = asyncio.create_task(workflow)
    remove_handlers = install_cancel_signals(task)
    try:
        return await task
    finally:
        remove_handlers()


def run(args: argparse.Namespace, settings: Settings, service: ImportService | None = None) -> ImportOutcome:
    """Execute one CLI invocation; raises ``FzfImportError`` on failure."""
    check_dependencies(settings)
    target = parse_target(args.file)
    active_service = service or ImportService(settings)
    return asyncio.run(_run_cancellable(_dispatch(active_service, target, args.keyword)))


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as exc:
        sys.stderr.write(f"Error: invalid configuration: {exc}\n")
        return 1

    configure_logging("DEBUG" if args.debug else settings.log_level, settings.log_json)

    try:
        outcome = run(args, settings)
    except FzfImportError as exc:
        logger.debug("Command failed", exc_info=True)
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    except (KeyboardInterrupt, asyncio.CancelledError):
        sys.stderr.write("Interrupted.\n")
        return 130

    logger.debug("Finished with outcome %s", outcome.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
