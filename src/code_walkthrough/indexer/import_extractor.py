"""Lexical import extraction.

No parser is involved: each language family has a small set of regular
expressions, and anything they do not recognise is simply not reported.
JavaScript and TypeScript share two independent rules (ES module imports and
``require``/dynamic ``import()`` calls); Python uses one combined rule for the
``from X import`` and ``import X`` forms. Other languages yield nothing.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Pattern, Tuple

# ES6 imports, with or without bindings: import x from 'y' / import 'y'
ES_IMPORT_PATTERN = re.compile(r"""import\s+(?:.*\s+from\s+)?['"]([^'"\n]+)['"]""")

# CommonJS requires and dynamic imports: require('y') / import('y')
REQUIRE_PATTERN = re.compile(r"""(?:require|import)\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")

PYTHON_IMPORT_PATTERN = re.compile(
    r"^[ \t]*(?:from\s+(\.*[\w.]*)\s+import\b|import\s+([\w.]+))",
    re.MULTILINE,
)

# Targets mentioned on a single line, used for cross-referencing steps
LINE_FROM_PATTERN = re.compile(r"""from\s+['"]([^'"]+)['"]""")

_RULES = {
    "javascript": (ES_IMPORT_PATTERN, REQUIRE_PATTERN),
    "typescript": (ES_IMPORT_PATTERN, REQUIRE_PATTERN),
    "python": (PYTHON_IMPORT_PATTERN,),
}


@dataclass(frozen=True)
class ImportMatch:
    """A raw import target together with the statement text that produced it."""

    target: str
    statement: str
    offset: int


def _first_group(match: "re.Match[str]") -> Optional[str]:
    for group in match.groups():
        if group:
            return group
    return None


def iter_import_matches(content: str, language: Optional[str]) -> Iterator[ImportMatch]:
    """Yield import matches in source order; unknown languages yield nothing."""
    patterns: Tuple[Pattern[str], ...] = _RULES.get(language or "", ())
    if not patterns or not content:
        return

    found: List[ImportMatch] = []
    for pattern in patterns:
        for match in pattern.finditer(content):
            target = _first_group(match)
            if not target:
                continue
            found.append(ImportMatch(target=target, statement=match.group(0), offset=match.start()))

    # Both JS rules may hit the same file; interleave them by position
    found.sort(key=lambda m: m.offset)
    yield from found


def extract_imports(content: str, language: Optional[str]) -> List[str]:
    """Return the raw import targets found in ``content``."""
    return [m.target for m in iter_import_matches(content, language)]


def find_line_targets(line: str) -> List[str]:
    """Return import targets written on a single line (``from '...'`` or ``require('...')``)."""
    links = []
    from_match = LINE_FROM_PATTERN.search(line)
    if from_match:
        links.append(from_match.group(1))
    require_match = REQUIRE_PATTERN.search(line)
    if require_match:
        links.append(require_match.group(1))
    return links
