"""Tests for file discovery, filtering and content loading."""

import os
import warnings

import pytest

from code_walkthrough.indexer.file_discovery import FileDiscovery, PathFilter
from code_walkthrough.utils.config import IndexConfig


def _paths(files):
    return {f.path for f in files}


def test_discover_returns_relative_paths_with_language_and_content(repo_builder) -> None:
    repo_builder.write({
        "src/index.ts": "import { a } from './a';\n",
        "src/a.ts": "export const a = 1;\n",
        "README.md": "# readme\n",
    })

    files = FileDiscovery().discover(str(repo_builder.root), ["**/*"], [])
    by_path = {f.path: f for f in files}

    assert set(by_path) == {"src/index.ts", "src/a.ts", "README.md"}
    assert by_path["src/index.ts"].language == "typescript"
    assert by_path["src/index.ts"].is_entry
    assert by_path["src/index.ts"].content == "import { a } from './a';\n"
    assert by_path["README.md"].language is None
    assert by_path["README.md"].content is None
    assert by_path["README.md"].preview is None
    assert by_path["README.md"].size == len("# readme\n")


def test_exclude_wins_over_include(repo_builder) -> None:
    repo_builder.write({
        "src/keep.ts": "export {};\n",
        "src/generated/skip.ts": "export {};\n",
        "lib/other.js": "module.exports = {};\n",
    })

    files = FileDiscovery().discover(
        str(repo_builder.root), ["src/**/*.ts"], ["src/generated/**"]
    )

    assert _paths(files) == {"src/keep.ts"}


def test_default_style_excludes_prune_directories(repo_builder) -> None:
    repo_builder.write({
        "index.js": "require('./lib');\n",
        "node_modules/dep/index.js": "module.exports = 1;\n",
        "dist/bundle.js": "var x;\n",
    })

    files = FileDiscovery().discover(
        str(repo_builder.root), ["**/*"], ["node_modules/**", "dist/**"]
    )

    assert _paths(files) == {"index.js"}


def test_gitignore_rules_are_honoured(repo_builder) -> None:
    repo_builder.write({
        ".gitignore": "build/\n*.log\n",
        "main.py": "print('ok')\n",
        "build/artifact.py": "x = 1\n",
        "notes.log": "ignore me\n",
        "pkg/.gitignore": "secret.py\n",
        "pkg/secret.py": "token = 'x'\n",
        "pkg/public.py": "value = 1\n",
        "secret.py": "kept = True\n",
    })

    files = FileDiscovery().discover(str(repo_builder.root), ["**/*"], [])
    paths = _paths(files)

    assert "main.py" in paths
    assert "pkg/public.py" in paths
    assert "secret.py" in paths
    assert "build/artifact.py" not in paths
    assert "notes.log" not in paths
    assert "pkg/secret.py" not in paths


def test_nested_gitignore_can_reinclude_files(repo_builder) -> None:
    repo_builder.write({
        ".gitignore": "*.log\n",
        "other.log": "x\n",
        "sub/.gitignore": "!keep.log\n",
        "sub/keep.log": "kept\n",
        "sub/drop.log": "dropped\n",
    })

    paths = _paths(FileDiscovery().discover(str(repo_builder.root), ["**/*"], []))

    assert "sub/keep.log" in paths
    assert "sub/drop.log" not in paths
    assert "other.log" not in paths


def test_gitignore_can_be_disabled(repo_builder) -> None:
    repo_builder.write({".gitignore": "*.log\n", "notes.log": "x\n"})

    discovery = FileDiscovery(IndexConfig(respect_gitignore=False))
    files = discovery.discover(str(repo_builder.root), ["**/*"], [])

    assert "notes.log" in _paths(files)


def test_files_over_max_size_are_dropped(repo_builder) -> None:
    repo_builder.write({
        "small.py": "x = 1\n",
        "big.py": "x = 1\n" * 100,
    })

    config = IndexConfig(max_file_size=50, max_content_size=50)
    files = FileDiscovery(config).discover(str(repo_builder.root), ["**/*"], [])

    assert _paths(files) == {"small.py"}
    assert all(f.size <= 50 for f in files)


def test_content_only_read_below_secondary_threshold(repo_builder) -> None:
    repo_builder.write({
        "tiny.py": "a = 1\n",
        "medium.py": "value = 12345\n" * 10,
    })

    config = IndexConfig(max_file_size=1000, max_content_size=100)
    by_path = {f.path: f for f in FileDiscovery(config).discover(str(repo_builder.root), ["**/*"], [])}

    assert by_path["tiny.py"].content == "a = 1\n"
    assert by_path["medium.py"].content is None
    assert by_path["medium.py"].language == "python"
    assert by_path["medium.py"].size == 140


def test_preview_keeps_leading_lines(repo_builder) -> None:
    repo_builder.write({"app.py": "".join(f"line{i}\n" for i in range(10))})

    files = FileDiscovery(IndexConfig(preview_lines=3)).discover(str(repo_builder.root), ["**/*"], [])

    assert files[0].preview == "line0\nline1\nline2"


def test_undecodable_file_is_kept_without_content(repo_builder) -> None:
    repo_builder.write_bytes("broken.py", b"\xff\xfe\x00bad")

    files = FileDiscovery().discover(str(repo_builder.root), ["**/*"], [])

    assert len(files) == 1
    assert files[0].path == "broken.py"
    assert files[0].language == "python"
    assert files[0].content is None
    assert files[0].preview is None


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_directories_are_not_followed(repo_builder, tmp_path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "leak.py").write_text("x = 1\n", encoding="utf-8")
    repo_builder.write({"main.py": "print(1)\n"})
    try:
        os.symlink(outside, repo_builder.root / "linked", target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    files = FileDiscovery().discover(str(repo_builder.root), ["**/*"], [])

    assert _paths(files) == {"main.py"}


def test_progress_listener_does_not_change_results(repo_builder) -> None:
    repo_builder.write({f"src/mod{i}.py": f"import mod{i + 1}\n" for i in range(12)})
    discovery = FileDiscovery(IndexConfig(max_workers=4))

    events = []
    with_listener = discovery.discover(str(repo_builder.root), ["**/*"], [], on_progress=events.append)
    without_listener = discovery.discover(str(repo_builder.root), ["**/*"], [])

    assert with_listener == without_listener
    assert len(events) == 12
    assert events[-1]["files_scanned"] == 12
    assert all(event["total_files"] == 12 for event in events)
    assert {event["current_file"] for event in events} == _paths(without_listener)


def test_path_filter_accepts() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        path_filter = PathFilter(["**/*.ts"], ["**/*.spec.ts"])

    assert path_filter.accepts("src/app.ts")
    assert path_filter.accepts("app.ts")
    assert not path_filter.accepts("src/app.spec.ts")
    assert not path_filter.accepts("src/app.js")
