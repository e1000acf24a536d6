"""Tests for the project indexer."""

import pytest

from code_walkthrough.indexer import ProjectIndexer, index_project
from code_walkthrough.models import IndexFilters
from code_walkthrough.utils.config import Config, IndexConfig


def test_index_builds_complete_project(repo_builder) -> None:
    repo_builder.write({
        "src/index.ts": """
            import { auth } from './auth';
            const util = require('./util');
        """,
        "src/auth.ts": "export function auth() {}\n",
        "src/util.js": "module.exports = {};\n",
        "scripts/main.py": "from .helpers import run\nimport os\n",
        "docs/guide.md": "# Guide\n",
    })

    project = repo_builder.index()

    assert project.name == "repo"
    assert project.root == str(repo_builder.root.resolve())
    assert set(project.paths) == {
        "src/index.ts", "src/auth.ts", "src/util.js", "scripts/main.py", "docs/guide.md",
    }
    assert set(project.entry_points) == {"src/index.ts", "scripts/main.py"}
    assert project.languages == {"typescript", "javascript", "python"}
    assert project.import_graph["src/index.ts"] == ("./auth", "./util")
    assert project.import_graph["scripts/main.py"] == (".helpers", "os")
    assert "src/auth.ts" not in project.import_graph
    assert "docs/guide.md" not in project.import_graph
    assert project.total_size == sum(f.size for f in project.files)


def test_index_invariants_hold(repo_builder) -> None:
    repo_builder.write({
        "main.go": "package main\n",
        "app.py": "import flask\n",
        "lib/x.ts": "import y from './y';\n",
        "lib/y.ts": "export default 1;\n",
    })

    project = repo_builder.index()
    paths = set(project.paths)

    assert set(project.entry_points) <= paths
    assert set(project.import_graph) <= paths
    for f in project.files:
        if f.content is not None:
            assert f.language is not None


def test_react_dependency_is_detected(repo_builder) -> None:
    repo_builder.write({
        "package.json": '{"dependencies": {"react": "^18.0.0"}, "devDependencies": {"express": "4"}}',
        "index.js": "console.log('hi');\n",
    })

    project = repo_builder.index()

    assert "React" in project.frameworks
    assert "Express" in project.frameworks


def test_invalid_package_json_does_not_abort_indexing(repo_builder) -> None:
    repo_builder.write({
        "package.json": '{"dependencies": {"react": ',
        "index.js": "console.log('hi');\n",
    })

    project = repo_builder.index()

    assert "React" not in project.frameworks
    assert "package.json" in project.paths
    assert "index.js" in project.entry_points


def test_manifest_files_contribute_labels(repo_builder) -> None:
    repo_builder.write({
        "go.mod": "module example.com/demo\n",
        "Cargo.toml": "[package]\nname = 'demo'\n",
        "requirements.txt": "Django>=4.0\n# comment\nrequests\n",
    })

    project = repo_builder.index()

    assert set(project.frameworks) == {"Go", "Rust", "Python", "Django"}


def test_nested_requirements_still_label_python(repo_builder) -> None:
    repo_builder.write({"service/requirements.txt": "flask\n"})

    project = repo_builder.index()

    assert project.frameworks == ("Python",)


def test_max_file_size_ceiling_applies(repo_builder) -> None:
    repo_builder.write({
        "small.py": "x = 1\n",
        "large.py": "y = 2\n" * 50,
    })
    config = Config(index=IndexConfig(max_file_size=100, max_content_size=80))

    project = repo_builder.index(config)

    assert all(f.size <= 100 for f in project.files)
    assert project.paths == ["small.py"]


def test_indexing_is_idempotent(repo_builder) -> None:
    repo_builder.write({
        "package.json": '{"dependencies": {"vue": "3"}}',
        "src/main.ts": "import a from './a';\n",
        "src/a.ts": "import b from './b';\n",
        "src/b.ts": "export default 2;\n",
    })

    first = repo_builder.index()
    second = repo_builder.index()

    assert set(first.files) == set(second.files)
    assert first.frameworks == second.frameworks
    assert first.languages == second.languages
    assert first.import_graph == second.import_graph


def test_indexed_project_is_hashable_and_read_only(repo_builder) -> None:
    repo_builder.write({
        "src/main.ts": "import a from './a';\n",
        "src/a.ts": "export default 1;\n",
    })

    first = repo_builder.index()
    second = repo_builder.index()

    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1
    with pytest.raises(TypeError):
        first.import_graph["src/a.ts"] = ("./b",)


def test_filters_are_applied(repo_builder) -> None:
    repo_builder.write({
        "src/app.ts": "export {};\n",
        "test/app.spec.ts": "export {};\n",
    })

    project = repo_builder.index(filters=IndexFilters(include=("**/*.ts",), exclude=("test/**",)))

    assert project.paths == ["src/app.ts"]


def test_progress_phases_are_reported(repo_builder) -> None:
    repo_builder.write({"index.ts": "export {};\n"})
    events = []

    repo_builder.index(on_progress=events.append)

    phases = [event["phase"] for event in events]
    assert phases[0] == "discovery"
    assert phases[-4:] == ["entry_points", "frameworks", "languages", "import_graph"]


def test_missing_root_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        ProjectIndexer(Config()).index_project(str(tmp_path / "missing"))


def test_file_root_raises(tmp_path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        ProjectIndexer(Config()).index_project(str(target))


def test_index_project_helper_overrides_filters(repo_builder) -> None:
    repo_builder.write({"a.py": "x = 1\n", "b.js": "var y;\n"})

    project = index_project(str(repo_builder.root), include=["**/*.py"], config=Config())

    assert project.paths == ["a.py"]
