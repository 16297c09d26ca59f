"""Relevance scoring for candidate import lines.

Pure functions with no external dependencies. Candidates are treated as
opaque text: the regexes below only locate the module path and the imported
names well enough to rank lines, they do not validate import syntax.

Only the relative ordering matters; the point values are tuned by hand:
- module path matches outrank symbol matches
- a lone named import outranks the same name inside a larger group
- plain substring containment beats no match at all
"""

from __future__ import annotations

from dataclasses import dataclass
import re


MODULE_CONTAINS = 100
MODULE_EXACT = 50
MODULE_SEGMENT_PREFIX = 30
SYMBOLS_CONTAINS = 80
SINGLE_NAMED_EXACT = 60
NAMED_EXACT = 40
NAMED_PREFIX = 20
DEFAULT_EXACT = 60
DEFAULT_CONTAINS = 40
SUBSTRING_FALLBACK = 10

_MODULE_PATH_RE = re.compile(r"""\bfrom\s*(?P<quote>['"])(?P<path>[^'"]*)(?P=quote)""")
_SIDE_EFFECT_RE = re.compile(r"""^\s*import\s*(?P<quote>['"])(?P<path>[^'"]*)(?P=quote)""")
_IMPORT_CLAUSE_RE = re.compile(r"""^\s*import\s+(?:type\s+)?(?P<clause>.*?)\s*\bfrom\b""")
_BRACE_GROUP_RE = re.compile(r"\{(?P<names>[^}]*)\}")
_NAMESPACE_RE = re.compile(r"^\*\s*as\s+(?P<name>[\w$]+)")
_TOKEN_RE = re.compile(r"^[\w$]+")


@dataclass(slots=True, frozen=True)
class SymbolsSegment:
    """Imported names of one import line."""

    text: str
    braced: bool

    def names(self) -> list[str]:
        return [name.strip() for name in self.text.split(",") if name.strip()]


def module_path(line: str) -> str | None:
    """Return the quoted module specifier of an import line, if any."""
    match = _MODULE_PATH_RE.search(line) or _SIDE_EFFECT_RE.search(line)
    if match is None:
        return None
    return match.group("path")


def is_relative_import(line: str) -> bool:
    """True when the module specifier starts with ``./`` or ``../``."""
    path = module_path(line)
    return path is not None and path.startswith(("./", "../"))


def symbols_segment(line: str) -> SymbolsSegment | None:
    """Extract the brace group, namespace alias, or default name after ``import``."""
    match = _IMPORT_CLAUSE_RE.search(line)
    if match is None:
        return None
    clause = match.group("clause").strip()

    braces = _BRACE_GROUP_RE.search(clause)
    if braces is not None:
        return SymbolsSegment(text=braces.group("names").strip(), braced=True)

    namespace = _NAMESPACE_RE.match(clause)
    if namespace is not None:
        return SymbolsSegment(text=namespace.group("name"), braced=False)

    token = _TOKEN_RE.match(clause)
    if token is not None:
        return SymbolsSegment(text=token.group(0), braced=False)
    return None


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.lower()


def _named_symbols(names: list[str], case_sensitive: bool) -> list[tuple[str, ...]]:
    # ``type Foo`` and ``Foo as Bar`` match on either the exported or the local name.
    folded: list[tuple[str, ...]] = []
    for name in names:
        name = re.sub(r"^type\s+", "", name)
        parts = re.split(r"\s+as\s+", name)
        folded.append(tuple(_fold(part.strip(), case_sensitive) for part in parts if part.strip()))
    return folded


def score_candidate(line: str, keyword: str) -> int:
    """Score how relevant ``line`` is for ``keyword`` (higher is better, never negative).

    Follows ripgrep's smart case: an all-lowercase keyword matches
    case-insensitively, any uppercase character makes it exact.
    """
    if not keyword:
        return 0

    case_sensitive = keyword != keyword.lower()
    needle = _fold(keyword, case_sensitive)
    score = 0

    path = module_path(line)
    if path is not None:
        folded_path = _fold(path, case_sensitive)
        if needle in folded_path:
            score += MODULE_CONTAINS
            if folded_path == needle:
                score += MODULE_EXACT
            score += MODULE_SEGMENT_PREFIX * sum(
                1 for segment in folded_path.split("/") if segment.startswith(needle)
            )

    segment = symbols_segment(line)
    if segment is not None and needle in _fold(segment.text, case_sensitive):
        score += SYMBOLS_CONTAINS
        if segment.braced:
            named = _named_symbols(segment.names(), case_sensitive)
            if len(named) == 1 and needle in named[0]:
                score += SINGLE_NAMED_EXACT
            else:
                for variants in named:
                    if needle in variants:
                        score += NAMED_EXACT
                    elif any(variant.startswith(needle) for variant in variants):
                        score += NAMED_PREFIX
        elif _fold(segment.text, case_sensitive) == needle:
            score += DEFAULT_EXACT
        else:
            score += DEFAULT_CONTAINS

    if score == 0 and needle in _fold(line, case_sensitive):
        score += SUBSTRING_FALLBACK

    return score
