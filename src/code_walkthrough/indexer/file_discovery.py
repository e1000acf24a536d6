"""File discovery: glob filtering, .gitignore handling and content loading."""

import os
import posixpath
import stat
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import pathspec

from ..models import ProjectFile
from ..utils.config import IndexConfig
from ..utils.logging import get_logger
from .classifier import is_entry_point, language_of

logger = get_logger("indexer.discovery")

ProgressCallback = Callable[[Dict[str, Any]], None]

# Never descended into, regardless of filters
ALWAYS_SKIPPED_DIRS = {".git", ".hg", ".svn"}


class PathFilter:
    """Decides which root-relative paths are part of the project."""

    def __init__(self, include: Sequence[str], exclude: Sequence[str]):
        self.include_spec = pathspec.GitIgnoreSpec.from_lines(include)
        self.exclude_spec = pathspec.GitIgnoreSpec.from_lines(exclude)

    def is_excluded_dir(self, rel_dir: str) -> bool:
        return self.exclude_spec.match_file(f"{rel_dir}/")

    def accepts(self, rel_path: str) -> bool:
        """Exclude patterns always win over include patterns."""
        if self.exclude_spec.match_file(rel_path):
            return False
        return self.include_spec.match_file(rel_path)


class GitIgnoreRules:
    """Accumulates .gitignore files met during the walk, each scoped to its directory."""

    def __init__(self):
        self._specs: List[Tuple[str, pathspec.PathSpec]] = []

    def load(self, root: Path, rel_dir: str) -> None:
        gitignore = root / rel_dir / ".gitignore" if rel_dir else root / ".gitignore"
        try:
            lines = gitignore.read_text(encoding="utf-8", errors="ignore").splitlines()
        except OSError as e:
            logger.debug("Could not read %s: %s", gitignore, e)
            return
        spec = pathspec.GitIgnoreSpec.from_lines(lines)
        self._specs.append((rel_dir, spec))

    def ignores(self, rel_path: str, is_dir: bool = False) -> bool:
        """The deepest .gitignore with a matching pattern decides, so ``!x`` can re-include."""
        # Specs are collected top-down, so reversed order visits the deepest first
        for base, spec in reversed(self._specs):
            if base:
                if not rel_path.startswith(f"{base}/"):
                    continue
                local = rel_path[len(base) + 1:]
            else:
                local = rel_path
            if is_dir:
                local = f"{local}/"
            result = spec.check_file(local)
            if result.include is not None:
                return result.include
        return False


class FileDiscovery:
    """Walks a root directory and produces ProjectFile records in discovery order."""

    def __init__(self, config: Optional[IndexConfig] = None):
        self.config = config or IndexConfig()

    def iter_candidate_paths(self, root: Path, include: Sequence[str], exclude: Sequence[str]) -> Iterator[str]:
        """Yield root-relative POSIX paths of regular files that pass every filter."""
        path_filter = PathFilter(include, exclude)
        gitignore = GitIgnoreRules() if self.config.respect_gitignore else None

        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_dir = current.relative_to(root).as_posix() if current != root else ""

            if gitignore is not None and ".gitignore" in filenames:
                gitignore.load(root, rel_dir)

            kept_dirs = []
            for name in sorted(dirnames):
                if name in ALWAYS_SKIPPED_DIRS:
                    continue
                rel_path = posixpath.join(rel_dir, name) if rel_dir else name
                if path_filter.is_excluded_dir(rel_path):
                    continue
                if gitignore is not None and gitignore.ignores(rel_path, is_dir=True):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for name in sorted(filenames):
                rel_path = posixpath.join(rel_dir, name) if rel_dir else name
                if not path_filter.accepts(rel_path):
                    continue
                if gitignore is not None and gitignore.ignores(rel_path):
                    continue
                yield rel_path

    def load_file(self, root: Path, rel_path: str) -> Optional[ProjectFile]:
        """Stat and (maybe) read one file; None means it is not part of the project."""
        full_path = root / rel_path
        try:
            st = os.stat(full_path)
        except OSError as e:
            logger.debug("Skipping %s: %s", rel_path, e)
            return None

        if not stat.S_ISREG(st.st_mode):
            return None
        if st.st_size > self.config.max_file_size:
            logger.debug("Skipping %s: %d bytes exceeds max_file_size", rel_path, st.st_size)
            return None

        language = language_of(posixpath.splitext(rel_path)[1])
        content = None
        preview = None
        if language and st.st_size < self.config.max_content_size:
            try:
                content = full_path.read_text(encoding="utf-8")
                preview = "\n".join(content.split("\n")[:self.config.preview_lines])
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Could not read %s: %s", rel_path, e)
                content = None
                preview = None

        return ProjectFile(
            path=rel_path,
            size=st.st_size,
            language=language,
            content=content,
            preview=preview,
            is_entry=is_entry_point(posixpath.basename(rel_path)),
        )

    def discover(self, root: str, include: Sequence[str], exclude: Sequence[str],
                 on_progress: Optional[ProgressCallback] = None) -> List[ProjectFile]:
        """Return the project files under ``root`` in discovery order."""
        root_path = Path(root)
        candidates = list(self.iter_candidate_paths(root_path, include, exclude))
        total = len(candidates)
        results: List[Optional[ProjectFile]] = [None] * total

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_position = {
                executor.submit(self.load_file, root_path, rel_path): position
                for position, rel_path in enumerate(candidates)
            }

            scanned = 0
            for future in as_completed(future_to_position):
                position = future_to_position[future]
                results[position] = future.result()
                scanned += 1
                if on_progress:
                    on_progress({
                        "phase": "discovery",
                        "files_scanned": scanned,
                        "total_files": total,
                        "current_file": candidates[position],
                    })

        return [f for f in results if f is not None]
