import textwrap
from pathlib import Path
from typing import Mapping, Optional

import pytest

from code_walkthrough.indexer import ProjectIndexer
from code_walkthrough.models import IndexedProject, IndexFilters
from code_walkthrough.utils.config import Config


class RepoBuilder:
    """Utility for writing files into a throwaway repository and indexing it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> None:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def index(self, config: Optional[Config] = None, filters: Optional[IndexFilters] = None,
              on_progress=None) -> IndexedProject:
        """Return a fresh index of the repository contents."""
        indexer = ProjectIndexer(config or Config())
        return indexer.index_project(str(self.root), filters, on_progress)


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path: Path) -> None:
    """Keep host environment variables and .env files out of the configuration."""
    for name in ("MAX_FILE_SIZE", "MAX_CONTENT_SIZE", "DEBUG", "NO_COLOR", "CODE_WALKTHROUGH_MAX_STEPS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
