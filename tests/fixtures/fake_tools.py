"""Stand-ins for ripgrep and fzf used by the session tests.

Both are small Python scripts run with ``sys.executable`` so the tests need
neither tool installed. Behaviour is selected through argv.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
import sys


FAKE_RG = '''
import signal
import sys
import time

candidates_path, exit_code, mode = sys.argv[1], int(sys.argv[2]), sys.argv[3]

if mode == "ignore-term":
    signal.signal(signal.SIGTERM, signal.SIG_IGN)

if mode == "flood":
    index = 0
    while True:
        sys.stdout.write(f"import {{ Symbol{index} }} from '@lib/symbol{index}';\\n")
        index += 1
        if index % 100 == 0:
            sys.stdout.flush()

with open(candidates_path, encoding="utf-8") as handle:
    data = handle.read()

if mode == "trickle":
    for char in data:
        sys.stdout.write(char)
        sys.stdout.flush()
else:
    sys.stdout.write(data)
    sys.stdout.flush()

if mode == "fail":
    sys.stderr.write("regex parse error: unclosed group\\n")

if mode in ("hang", "ignore-term"):
    time.sleep(60)

sys.exit(exit_code)
'''

FAKE_FZF = '''
import sys
import time

mode, record_path = sys.argv[1], sys.argv[2]

if mode == "first-line-early":
    line = sys.stdin.readline()
    sys.stdout.write(line)
    sys.exit(0)

data = sys.stdin.read()
with open(record_path, "w", encoding="utf-8") as handle:
    handle.write(data)

if mode == "hold":
    time.sleep(60)
    sys.exit(0)
if mode == "cancel":
    sys.exit(130)
if mode == "crash":
    sys.exit(2)

lines = [line for line in data.splitlines() if line.strip()]
if not lines:
    sys.exit(1)
if mode == "first":
    sys.stdout.write("  " + lines[0] + "  \\n")
elif mode == "last":
    sys.stdout.write(lines[-1] + "\\n")
# "silent" accepts input but prints nothing
sys.exit(0)
'''


@dataclass(slots=True)
class FakeTools:
    """Writes the fake scripts into ``root`` and builds argv for them."""

    root: Path

    def __post_init__(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.rg_script.write_text(FAKE_RG, encoding="utf-8")
        self.fzf_script.write_text(FAKE_FZF, encoding="utf-8")

    @property
    def rg_script(self) -> Path:
        return self.root / "fake_rg.py"

    @property
    def fzf_script(self) -> Path:
        return self.root / "fake_fzf.py"

    @property
    def candidates_path(self) -> Path:
        return self.root / "candidates.txt"

    @property
    def record_path(self) -> Path:
        return self.root / "selector_input.txt"

    def write_candidates(self, lines: Sequence[str]) -> None:
        self.candidates_path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")

    def selector_input(self) -> str:
        if not self.record_path.exists():
            return ""
        return self.record_path.read_text(encoding="utf-8")

    def search_command(self, *, exit_code: int = 0, mode: str = "normal"):
        def _build(pattern: str) -> list[str]:
            return [sys.executable, str(self.rg_script), str(self.candidates_path), str(exit_code), mode]

        return _build

    def selector_command(self, *, mode: str = "first"):
        def _build(prompt: str, *, keyword_mode: bool) -> list[str]:
            return [sys.executable, str(self.fzf_script), mode, str(self.record_path)]

        return _build
