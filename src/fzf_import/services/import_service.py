"""Import workflows: keyword search, interactive browse, and cursor position.

Each workflow runs one :class:`SearchSession` and hands a non-null selection
to the placement engine, so a failed or cancelled search never touches the
target file.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path

from rich.console import Console

from fzf_import.config import Settings
from fzf_import.domain.model import ImportOutcome
from fzf_import.runtime.session import SearchSession
from fzf_import.utils.placement import add_import_to_file
from fzf_import.utils.project import FileTypeConfig, find_project_root, get_file_type, get_file_type_config
from fzf_import.utils.symbols import read_symbol_at


logger = logging.getLogger(__name__)

SessionFactory = Callable[[Settings, FileTypeConfig], SearchSession]


def default_session_factory(settings: Settings, file_type: FileTypeConfig) -> SearchSession:
    return SearchSession(
        settings,
        search_command=lambda pattern: settings.build_search_command(pattern, glob=file_type.glob()),
    )


class ImportService:
    """Find an import for a target file and add it there."""

    def __init__(
        self,
        settings: Settings,
        *,
        console: Console | None = None,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self._settings = settings
        self._console = console or Console(stderr=True, highlight=False)
        self._session_factory = session_factory or default_session_factory

    async def search_and_import(self, file_path: Path, keyword: str) -> ImportOutcome:
        """Search for imports mentioning ``keyword`` and add the chosen one."""
        file_type = get_file_type_config(file_path)
        pattern = file_type.keyword_pattern(keyword)

        logger.debug("Searching for imports containing: %s", keyword)
        logger.debug("File type: %s", get_file_type(file_path))
        logger.debug("Pattern: %s", pattern)

        return await self._run(file_path, file_type, pattern, f'Select import for "{keyword}"', keyword)

    async def interactive_import(self, file_path: Path) -> ImportOutcome:
        """Browse every non-relative import in the project."""
        file_type = get_file_type_config(file_path)
        logger.debug("Interactive mode for: %s", file_path)

        return await self._run(file_path, file_type, file_type.browse_pattern(), "Select import to add", None)

    async def search_and_import_at_position(self, file_path: Path, row: int, col: int) -> ImportOutcome:
        """Use the identifier under ``row:col`` as the search keyword."""
        get_file_type_config(file_path)
        symbol = read_symbol_at(file_path, row, col)
        if symbol is None:
            self._console.print(f"No symbol found at position {row}:{col}.")
            return ImportOutcome.NO_SYMBOL

        logger.debug("Symbol at %d:%d: %s", row, col, symbol)
        return await self.search_and_import(file_path, symbol)

    async def _run(
        self,
        file_path: Path,
        file_type: FileTypeConfig,
        pattern: str,
        prompt: str,
        keyword: str | None,
    ) -> ImportOutcome:
        project_root = find_project_root(file_path, self._settings.get_project_markers())
        session = self._session_factory(self._settings, file_type)
        selected = await session.run(pattern, project_root, prompt, keyword)

        if selected is None:
            if session.candidates_emitted == 0:
                message = "No imports found matching the keyword." if keyword else "No imports found in the project."
                self._console.print(message)
                return ImportOutcome.NO_MATCHES
            self._console.print("Selection cancelled.")
            return ImportOutcome.CANCELLED

        result = add_import_to_file(file_path, selected)
        if not result.inserted:
            self._console.print("Import already exists in file. Skipping.")
            return ImportOutcome.DUPLICATE

        self._console.print(f"Added import: {result.line}", markup=False)
        return ImportOutcome.ADDED
