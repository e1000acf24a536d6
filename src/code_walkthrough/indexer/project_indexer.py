"""Builds the project-wide index consumed by the tracer and downstream reporters."""

from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..models import IndexedProject, IndexFilters, ProjectFile
from ..utils.config import Config, load_config
from ..utils.logging import get_logger
from .file_discovery import FileDiscovery, ProgressCallback
from .framework_detector import detect_frameworks
from .import_extractor import extract_imports

logger = get_logger("indexer")


class ProjectIndexer:
    """Orchestrates discovery, classification and import extraction for one root."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        self.discovery = FileDiscovery(self.config.index)

    def default_filters(self) -> IndexFilters:
        return IndexFilters(
            include=tuple(self.config.index.include),
            exclude=tuple(self.config.index.exclude),
        )

    def index_project(self, root: str, filters: Optional[IndexFilters] = None,
                      on_progress: Optional[ProgressCallback] = None) -> IndexedProject:
        """Index ``root``.

        Only a missing or non-directory root is an error; every per-file
        problem is skipped and the rest of the project is still indexed.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        filters = filters or self.default_filters()
        files = self.discovery.discover(str(root_path), filters.include, filters.exclude, on_progress)
        logger.debug("Discovered %d files under %s", len(files), root_path)

        self._emit(on_progress, "entry_points")
        entry_points = self.find_entry_points(files)

        self._emit(on_progress, "frameworks")
        frameworks = detect_frameworks(str(root_path), files)

        self._emit(on_progress, "languages")
        languages = self.detect_languages(files)

        self._emit(on_progress, "import_graph")
        import_graph = self.build_import_graph(files)

        return IndexedProject(
            root=str(root_path),
            name=root_path.name,
            files=tuple(files),
            entry_points=entry_points,
            frameworks=tuple(frameworks),
            languages=languages,
            import_graph=import_graph,
            total_size=sum(f.size for f in files),
        )

    @staticmethod
    def _emit(on_progress: Optional[ProgressCallback], phase: str) -> None:
        if on_progress:
            on_progress({"phase": phase})

    @staticmethod
    def find_entry_points(files: Sequence[ProjectFile]) -> Tuple[str, ...]:
        return tuple(f.path for f in files if f.is_entry)

    @staticmethod
    def detect_languages(files: Sequence[ProjectFile]) -> FrozenSet[str]:
        return frozenset(f.language for f in files if f.language)

    @staticmethod
    def build_import_graph(files: Sequence[ProjectFile]) -> Dict[str, Tuple[str, ...]]:
        """Map each file with loaded content to its raw import targets; empty results are dropped."""
        graph: Dict[str, Tuple[str, ...]] = {}
        for f in files:
            if not f.content or not f.language:
                continue
            imports = extract_imports(f.content, f.language)
            if imports:
                graph[f.path] = tuple(imports)
        return graph


def index_project(root: str, include: Optional[List[str]] = None, exclude: Optional[List[str]] = None,
                  config: Optional[Config] = None,
                  on_progress: Optional[ProgressCallback] = None) -> IndexedProject:
    """Convenience wrapper: index ``root`` with the given glob filters."""
    indexer = ProjectIndexer(config)
    filters = indexer.default_filters()
    if include is not None or exclude is not None:
        filters = IndexFilters(
            include=tuple(include) if include is not None else filters.include,
            exclude=tuple(exclude) if exclude is not None else filters.exclude,
        )
    return indexer.index_project(root, filters, on_progress)
