"""Relative import resolution and a networkx view of the resolved import graph."""

import posixpath
from typing import Any, Collection, Dict, Optional

import networkx as nx

from ..models import IndexedProject

# Tried in order after the bare path
RESOLUTION_SUFFIXES = (
    ".ts", ".tsx", ".js", ".jsx",
    "/index.ts", "/index.tsx", "/index.js", "/index.jsx",
)


def is_relative_import(target: str) -> bool:
    return target.startswith("./") or target.startswith("../")


def resolve_import(target: str, from_path: str, known_paths: Collection[str]) -> Optional[str]:
    """Resolve a relative import target to an indexed root-relative path.

    Package and alias imports are never resolved: only ``./`` and ``../``
    targets are considered, and only when the result lands on a known file.
    """
    if not is_relative_import(target):
        return None

    base = posixpath.normpath(posixpath.join(posixpath.dirname(from_path), target))
    if base == ".." or base.startswith("../"):
        return None

    for suffix in ("",) + RESOLUTION_SUFFIXES:
        candidate = base + suffix
        if candidate in known_paths:
            return candidate
    return None


def build_dependency_graph(project: IndexedProject) -> nx.DiGraph:
    """Return a directed file graph with an edge for every resolvable relative import."""
    graph = nx.DiGraph()
    for f in project.files:
        if f.language:
            graph.add_node(f.path, language=f.language, is_entry=f.is_entry)

    known = set(project.paths)
    for source, targets in project.import_graph.items():
        for target in targets:
            resolved = resolve_import(target, source, known)
            if resolved is None or resolved == source:
                continue
            if not graph.has_node(resolved):
                graph.add_node(resolved)
            graph.add_edge(source, resolved, import_name=target)
    return graph


def graph_statistics(graph: nx.DiGraph, top: int = 5) -> Dict[str, Any]:
    """Get basic statistics about the resolved import graph."""
    cycles = [sorted(component) for component in nx.strongly_connected_components(graph)
              if len(component) > 1]
    most_imported = sorted(
        ((node, degree) for node, degree in graph.in_degree() if degree > 0),
        key=lambda item: (-item[1], item[0]),
    )[:top]
    return {
        "total_nodes": graph.number_of_nodes(),
        "total_edges": graph.number_of_edges(),
        "connected_components": nx.number_weakly_connected_components(graph) if graph.number_of_nodes() else 0,
        "import_cycles": sorted(cycles),
        "most_imported": most_imported,
    }
