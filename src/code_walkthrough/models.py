"""Core data models shared by the indexer and the tracer."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class IndexFilters:
    """Glob filters applied during discovery; exclude always wins."""

    include: Tuple[str, ...] = ("**/*",)
    exclude: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectFile:
    """One discovered file, keyed by its root-relative path."""

    path: str
    size: int
    language: Optional[str] = None
    content: Optional[str] = None
    preview: Optional[str] = None
    is_entry: bool = False

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": self.path,
            "size": self.size,
            "language": self.language,
            "is_entry": self.is_entry,
            "preview": self.preview,
        }
        if include_content:
            data["content"] = self.content
        return data


@dataclass(frozen=True)
class IndexedProject:
    """The completed, read-only index of a project tree."""

    root: str
    name: str
    files: Tuple[ProjectFile, ...]
    entry_points: Tuple[str, ...]
    frameworks: Tuple[str, ...]
    languages: FrozenSet[str]
    import_graph: Mapping[str, Tuple[str, ...]] = field(hash=False)
    total_size: int
    _by_path: Dict[str, ProjectFile] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        by_path = {f.path: f for f in self.files}
        object.__setattr__(self, "_by_path", by_path)
        object.__setattr__(self, "import_graph", MappingProxyType(dict(self.import_graph)))

    def get_file(self, path: str) -> Optional[ProjectFile]:
        """Look up a file by its root-relative path."""
        return self._by_path.get(path)

    def has_file(self, path: str) -> bool:
        return path in self._by_path

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "name": self.name,
            "files": [f.to_dict() for f in self.files],
            "entry_points": list(self.entry_points),
            "frameworks": list(self.frameworks),
            "languages": sorted(self.languages),
            "import_graph": {path: list(targets) for path, targets in self.import_graph.items()},
            "total_size": self.total_size,
        }


@dataclass(frozen=True)
class WalkthroughStep:
    """One annotated, line-ranged excerpt judged relevant to the question."""

    index: int
    file: str
    line_range: Tuple[int, int]
    code: str
    explanation: str
    why_relevant: str
    links_to: Tuple[str, ...] = ()

    @property
    def start_line(self) -> int:
        return self.line_range[0]

    @property
    def end_line(self) -> int:
        return self.line_range[1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "file": self.file,
            "line_range": list(self.line_range),
            "code": self.code,
            "explanation": self.explanation,
            "why_relevant": self.why_relevant,
            "links_to": list(self.links_to),
        }


@dataclass(frozen=True)
class PreviewEntry:
    """A single file row of the privacy preview."""

    path: str
    size: int
    preview: str
    included: bool


@dataclass(frozen=True)
class PrivacyPreview:
    """What would leave the machine if the index were sent downstream."""

    files: Tuple[PreviewEntry, ...]
    total_size: int
    file_count: int
