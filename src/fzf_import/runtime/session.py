"""One search/select session: ripgrep → rank stage → fzf.

ripgrep output is streamed through a :class:`RankStage` into fzf's stdin while
fzf is already interactive. The session owns both processes and the stage and
always tears them down in one sequence, whichever side finishes first.

States::

    IDLE -> BOTH_LAUNCHED -> [SEARCH_FINISHED] -> SELECTOR_FINISHED -> TERMINATED

Any state may jump to TERMINATED when the session fails or is cancelled.
"""

from __future__ import annotations

import asyncio
from asyncio.subprocess import PIPE, Process
import codecs
from collections.abc import Awaitable, Callable, Sequence
from contextlib import suppress
import logging
from pathlib import Path
import shlex
from typing import Any

from fzf_import.config import Settings
from fzf_import.domain.errors import InvalidSessionTransitionError, SubprocessExitError, SubprocessLaunchError
from fzf_import.domain.model import SessionState
from fzf_import.observability.context import bind_session, generate_session_id
from fzf_import.services.rank_stage import RankStage


logger = logging.getLogger(__name__)

SEARCH_NO_MATCHES = 1
SELECTOR_NO_MATCH = 1
SELECTOR_CANCELLED = 130

ProcessFactory = Callable[..., Awaitable[Process]]
SearchCommand = Callable[[str], Sequence[str]]
SelectorCommand = Callable[..., Sequence[str]]

_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.BOTH_LAUNCHED, SessionState.TERMINATED}),
    SessionState.BOTH_LAUNCHED: frozenset(
        {SessionState.SEARCH_FINISHED, SessionState.SELECTOR_FINISHED, SessionState.TERMINATED}
    ),
    SessionState.SEARCH_FINISHED: frozenset({SessionState.SELECTOR_FINISHED, SessionState.TERMINATED}),
    SessionState.SELECTOR_FINISHED: frozenset({SessionState.TERMINATED}),
    SessionState.TERMINATED: frozenset(),
}


def _program_name(argv: Sequence[str]) -> str:
    return Path(argv[0]).name


class SearchSession:
    """Runs ripgrep and fzf side by side and resolves to the selected line.

    A session is single-use; start a new one for another search.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        search_command: SearchCommand | None = None,
        selector_command: SelectorCommand | None = None,
        process_factory: ProcessFactory | None = None,
        session_id: str | None = None,
    ) -> None:
        self._settings = settings
        self._search_command = search_command or settings.build_search_command
        self._selector_command = selector_command or settings.build_selector_command
        self._process_factory = process_factory or asyncio.create_subprocess_exec
        self.session_id = session_id or generate_session_id()
        self.state = SessionState.IDLE

        self._stage: RankStage | None = None
        self._search: Process | None = None
        self._selector: Process | None = None
        self._search_name = "search"
        self._selector_name = "selector"
        self._pump_task: asyncio.Task[int | None] | None = None
        self._selection_task: asyncio.Task[tuple[int, str]] | None = None
        self._stderr_task: asyncio.Task[bytes] | None = None

    @property
    def candidates_emitted(self) -> int:
        """Number of candidate lines handed to the selector so far."""
        return self._stage.emitted if self._stage is not None else 0

    async def run(
        self,
        pattern: str,
        project_root: Path | str,
        prompt: str,
        keyword: str | None = None,
    ) -> str | None:
        """Search ``project_root`` for ``pattern`` and let the user pick one line.

        Returns the selected line (trimmed), or ``None`` when nothing matched
        or the user cancelled. Raises ``SubprocessError`` subclasses when a
        subprocess cannot start or exits abnormally.
        """
        if self.state is not SessionState.IDLE:
            raise InvalidSessionTransitionError(f"Session {self.session_id} has already run")

        with bind_session(self.session_id):
            self._stage = RankStage(keyword, batch_size=self._settings.batch_size)
            try:
                return await self._run(pattern, Path(project_root), prompt, self._stage)
            finally:
                await self._teardown()

    async def _run(self, pattern: str, project_root: Path, prompt: str, stage: RankStage) -> str | None:
        search_argv = list(self._search_command(pattern))
        selector_argv = list(self._selector_command(prompt, keyword_mode=stage.ranking))
        self._search_name = _program_name(search_argv)
        self._selector_name = _program_name(selector_argv)

        logger.debug("Running: %s", shlex.join(search_argv))
        logger.debug("Project root: %s", project_root)
        self._search = await self._spawn(search_argv, cwd=str(project_root), stdout=PIPE, stderr=PIPE)
        self._selector = await self._spawn(selector_argv, stdin=PIPE, stdout=PIPE)
        self._transition(SessionState.BOTH_LAUNCHED)

        assert self._search.stderr is not None
        self._stderr_task = asyncio.create_task(self._search.stderr.read())
        self._pump_task = asyncio.create_task(self._pump(self._search, self._selector, stage))
        self._selection_task = asyncio.create_task(self._collect_selection(self._selector))

        done, _ = await asyncio.wait({self._pump_task, self._selection_task}, return_when=asyncio.FIRST_COMPLETED)

        if self._selection_task not in done:
            search_code = self._pump_task.result()
            if search_code is not None:
                self._transition(SessionState.SEARCH_FINISHED)
                await self._check_search_exit(search_code)
            returncode, output = await self._selection_task
        else:
            returncode, output = self._selection_task.result()

        self._transition(SessionState.SELECTOR_FINISHED)
        return self._resolve_selection(returncode, output)

    async def _spawn(self, argv: list[str], **kwargs: Any) -> Process:
        program = _program_name(argv)
        try:
            return await self._process_factory(*argv, **kwargs)
        except FileNotFoundError as err:
            raise SubprocessLaunchError(program, "executable not found") from err
        except OSError as err:
            raise SubprocessLaunchError(program, err.strerror or str(err)) from err

    async def _pump(self, search: Process, selector: Process, stage: RankStage) -> int | None:
        """Stream search output into the selector; return the search exit code.

        Returns ``None`` when the selector stopped reading before the search
        finished.
        """
        assert search.stdout is not None
        assert selector.stdin is not None
        writer = selector.stdin
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

        try:
            while chunk := await search.stdout.read(self._settings.read_chunk_size):
                await self._write(writer, stage.feed(decoder.decode(chunk)))
            await self._write(writer, stage.feed(decoder.decode(b"", final=True)))
            await self._write(writer, stage.finish())
        except (BrokenPipeError, ConnectionResetError):
            logger.debug("Selector stopped reading; dropping remaining candidates")
            return None
        finally:
            # EOF on stdin tells fzf the candidate list is complete
            writer.close()
            with suppress(BrokenPipeError, ConnectionResetError):
                await writer.wait_closed()

        return await search.wait()

    @staticmethod
    async def _write(writer: asyncio.StreamWriter, blocks: list[str]) -> None:
        for block in blocks:
            writer.write(block.encode("utf-8"))
            await writer.drain()

    @staticmethod
    async def _collect_selection(selector: Process) -> tuple[int, str]:
        assert selector.stdout is not None
        output = await selector.stdout.read()
        returncode = await selector.wait()
        return returncode, output.decode("utf-8", errors="replace")

    async def _check_search_exit(self, returncode: int) -> None:
        if returncode == 0:
            logger.debug("Search finished; %d candidate(s) sent to selector", self.candidates_emitted)
            return
        if returncode == SEARCH_NO_MATCHES:
            logger.debug("Search found no matches")
            return
        stderr = await self._stderr_task if self._stderr_task is not None else b""
        raise SubprocessExitError(self._search_name, returncode, stderr.decode("utf-8", errors="replace"))

    def _resolve_selection(self, returncode: int, output: str) -> str | None:
        if returncode == SELECTOR_CANCELLED:
            logger.debug("Selection cancelled by user")
            return None
        if returncode == SELECTOR_NO_MATCH:
            logger.debug("Selector exited without a match")
            return None
        if returncode != 0:
            raise SubprocessExitError(self._selector_name, returncode)
        selected = output.strip()
        return selected or None

    def _transition(self, new_state: SessionState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise InvalidSessionTransitionError(f"Cannot transition from {self.state.value} to {new_state.value}")
        logger.debug("Session state %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    # --- teardown ---------------------------------------------------------

    async def _teardown(self) -> None:
        if self.state.is_terminal:
            return
        failed = self.state is not SessionState.SELECTOR_FINISHED

        await self._cancel(self._pump_task)
        await self._cancel(self._selection_task)
        await self._terminate(self._search, self._search_name)
        if failed:
            await self._terminate(self._selector, self._selector_name)
        await self._cancel(self._stderr_task)

        if self._stage is not None and not self._stage.closed:
            self._stage.close()
        self._transition(SessionState.TERMINATED)

    @staticmethod
    async def _cancel(task: asyncio.Task[Any] | None) -> None:
        if task is None:
            return
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as exc:  # noqa: BLE001 - outcome already decided
            logger.debug("Background task ended with %r during teardown", exc)

    async def _terminate(self, proc: Process | None, name: str) -> None:
        """SIGTERM, wait out the grace interval, then SIGKILL."""
        if proc is None or proc.returncode is not None:
            return

        grace = self._settings.terminate_grace_seconds
        logger.debug("Terminating %s (pid=%s)", name, proc.pid)
        with suppress(ProcessLookupError):
            proc.terminate()
        try:
            await asyncio.wait_for(self._reap(proc), timeout=grace)
        except asyncio.TimeoutError:
            logger.warning("%s did not exit within %.1fs; killing", name, grace)
            with suppress(ProcessLookupError):
                proc.kill()
            await self._reap(proc)

    @staticmethod
    async def _reap(proc: Process) -> int:
        # Unread pipe data keeps the transport open, so drain before waiting.
        if proc.stdout is not None:
            await proc.stdout.read()
        return await proc.wait()
