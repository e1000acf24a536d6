"""Static lookup tables mapping extensions to languages and names to entry points."""

import posixpath
from types import MappingProxyType
from typing import Optional

LANGUAGE_BY_EXTENSION = MappingProxyType({
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".py": "python",
    ".java": "java",
    ".go": "go",
    ".rs": "rust",
    ".cpp": "cpp",
    ".c": "c",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".kt": "kotlin",
})

ENTRY_POINT_FILENAMES = frozenset({
    # JavaScript / TypeScript
    "index.js", "index.ts", "index.tsx",
    "main.js", "main.ts", "main.tsx",
    "app.js", "app.ts", "app.tsx",
    "server.js", "server.ts",
    # Python
    "__main__.py", "main.py", "app.py",
    # Others
    "Main.java", "main.go", "main.rs",
})


def language_of(extension: str) -> Optional[str]:
    """Return the language tag for an extension such as ``.ts``, or None."""
    return LANGUAGE_BY_EXTENSION.get(extension)


def language_of_path(path: str) -> Optional[str]:
    return language_of(posixpath.splitext(path)[1])


def is_entry_point(basename: str) -> bool:
    """Return True if the filename is a canonical program start."""
    return basename in ENTRY_POINT_FILENAMES
