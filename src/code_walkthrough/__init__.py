"""Static project indexing and heuristic execution-path tracing."""

from .indexer import ProjectIndexer, index_project
from .models import IndexedProject, IndexFilters, ProjectFile, WalkthroughStep
from .tracer import CodeTracer, trace

__version__ = "0.1.0"

__all__ = [
    "ProjectIndexer", "index_project", "CodeTracer", "trace",
    "IndexedProject", "IndexFilters", "ProjectFile", "WalkthroughStep",
]
