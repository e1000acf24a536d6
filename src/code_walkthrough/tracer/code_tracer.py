"""Heuristic execution-path tracing over an indexed project."""

import itertools
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Set

from ..indexer.import_extractor import ImportMatch, find_line_targets, iter_import_matches
from ..indexer.import_graph import resolve_import
from ..models import IndexedProject, ProjectFile, WalkthroughStep
from ..utils.config import Config, TraceConfig, load_config
from ..utils.logging import get_logger
from .keywords import extract_keywords
from .line_shapes import describe_line

logger = get_logger("tracer")

ProgressCallback = Callable[[Dict[str, Any]], None]


class CodeTracer:
    """Walks the import graph from entry points collecting keyword-relevant spans."""

    def __init__(self, config: Optional[Config] = None):
        self.config: TraceConfig = (config or load_config()).trace

    def trace_execution_path(self, question: str, project: IndexedProject,
                             on_progress: Optional[ProgressCallback] = None) -> List[WalkthroughStep]:
        """Return the walkthrough steps for ``question``, in traversal order."""
        keywords = extract_keywords(question)
        if not keywords:
            return []

        counter = itertools.count()
        steps: List[WalkthroughStep] = []

        # Primary strategy: depth-first walk from every entry point
        known = set(project.paths)
        visited: Set[str] = set()
        for entry_point in project.entry_points:
            self._walk_from(entry_point, keywords, project, known, visited, counter, steps, on_progress)

        # Fallback: files that mention a keyword, entry points first
        if not steps:
            for f in self.select_fallback_files(project, keywords):
                text = self._read_text(project, f)
                if text is None:
                    continue
                steps.extend(self.extract_relevant_spans(text, keywords, f.path, counter))
                self._report(on_progress, "fallback", f.path, len(steps))

        return steps

    def _walk_from(self, start: str, keywords: Sequence[str], project: IndexedProject,
                   known: Set[str], visited: Set[str], counter: Iterator[int], steps: List[WalkthroughStep],
                   on_progress: Optional[ProgressCallback]) -> None:
        # Explicit stack; children are pushed in reverse so they pop in source order
        stack = [start]
        while stack:
            path = stack.pop()
            if path in visited:
                continue
            visited.add(path)

            f = project.get_file(path)
            if f is None:
                continue
            text = self._read_text(project, f)
            if text is None:
                logger.debug("Abandoning trace branch at unreadable %s", path)
                continue

            steps.extend(self.extract_relevant_spans(text, keywords, path, counter))
            self._report(on_progress, "entry_points", path, len(steps))

            if not self.config.follow_imports:
                continue
            children = []
            for match in iter_import_matches(text, f.language):
                if not self._import_matches_keywords(match, keywords):
                    continue
                resolved = resolve_import(match.target, path, known)
                if resolved and resolved not in visited:
                    children.append(resolved)
            stack.extend(reversed(children))

    def extract_relevant_spans(self, text: str, keywords: Sequence[str], file_path: str,
                               counter: Iterator[int]) -> List[WalkthroughStep]:
        """Create one step per line that mentions any keyword."""
        lines = [line.rstrip("\r") for line in text.split("\n")]
        # A final newline terminates the last line rather than starting a new one
        if len(lines) > 1 and lines[-1] == "":
            lines.pop()
        last = len(lines) - 1
        steps = []

        for i, line in enumerate(lines):
            lowered = line.lower()
            keyword = next((kw for kw in keywords if kw.lower() in lowered), None)
            if keyword is None:
                continue

            description = describe_line(line, keyword)
            start = max(0, i - self.config.context_before)
            end = min(last, i + self.config.context_after)
            steps.append(WalkthroughStep(
                index=next(counter),
                file=file_path,
                line_range=(start + 1, end + 1),
                code="\n".join(lines[start:end + 1]),
                explanation=description.explanation,
                why_relevant=description.why_relevant,
                links_to=tuple(find_line_targets(line)),
            ))

        return steps

    def select_fallback_files(self, project: IndexedProject, keywords: Sequence[str]) -> List[ProjectFile]:
        """Pick classified files whose path or content mentions a keyword."""
        lowered = [kw.lower() for kw in keywords]
        matching = []
        for f in project.files:
            if not f.language:
                continue
            haystacks = [f.path.lower(), (f.content or "").lower()]
            if any(kw in hay for kw in lowered for hay in haystacks):
                matching.append(f)
        # sorted() is stable, so discovery order holds within each group
        matching = sorted(matching, key=lambda f: not f.is_entry)
        return matching[:self.config.fallback_file_limit]

    @staticmethod
    def _import_matches_keywords(match: ImportMatch, keywords: Sequence[str]) -> bool:
        target = match.target.lower()
        statement = match.statement.lower()
        return any(kw.lower() in target or kw.lower() in statement for kw in keywords)

    @staticmethod
    def _read_text(project: IndexedProject, f: ProjectFile) -> Optional[str]:
        """Use the indexed content, else read through to disk for classified files."""
        if f.content is not None:
            return f.content
        if not f.language:
            return None
        full_path = Path(project.root) / f.path
        try:
            return full_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read %s: %s", f.path, e)
            return None

    @staticmethod
    def _report(on_progress: Optional[ProgressCallback], strategy: str, path: str, steps_found: int) -> None:
        if on_progress:
            on_progress({
                "phase": "trace",
                "strategy": strategy,
                "current_file": path,
                "steps_found": steps_found,
            })


def trace(question: str, project: IndexedProject, config: Optional[Config] = None,
          on_progress: Optional[ProgressCallback] = None) -> List[WalkthroughStep]:
    """Convenience wrapper around ``CodeTracer.trace_execution_path``."""
    return CodeTracer(config).trace_execution_path(question, project, on_progress)
