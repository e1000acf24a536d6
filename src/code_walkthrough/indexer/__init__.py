from .classifier import is_entry_point, language_of
from .file_discovery import FileDiscovery
from .framework_detector import detect_frameworks
from .import_extractor import extract_imports
from .import_graph import build_dependency_graph, graph_statistics, resolve_import
from .preview import build_privacy_preview
from .project_indexer import ProjectIndexer, index_project

__all__ = [
    'ProjectIndexer', 'index_project', 'FileDiscovery', 'detect_frameworks',
    'extract_imports', 'language_of', 'is_entry_point', 'resolve_import',
    'build_dependency_graph', 'graph_statistics', 'build_privacy_preview',
]
