"""Tests for the extension and entry-point lookup tables."""

import pytest

from code_walkthrough.indexer.classifier import is_entry_point, language_of, language_of_path


@pytest.mark.parametrize(
    "extension,expected",
    [
        (".ts", "typescript"),
        (".tsx", "typescript"),
        (".jsx", "javascript"),
        (".py", "python"),
        (".go", "go"),
        (".kt", "kotlin"),
    ],
)
def test_language_of_known_extensions(extension, expected) -> None:
    assert language_of(extension) == expected


def test_language_of_unknown_extension_is_none() -> None:
    assert language_of(".md") is None
    assert language_of(".json") is None
    assert language_of("") is None


def test_language_of_path_uses_last_suffix() -> None:
    assert language_of_path("src/app.test.ts") == "typescript"
    assert language_of_path("README") is None


def test_entry_points_match_exact_basenames() -> None:
    assert is_entry_point("main.go")
    assert is_entry_point("index.ts")
    assert is_entry_point("__main__.py")
    assert is_entry_point("Main.java")
    assert not is_entry_point("main.java")
    assert not is_entry_point("a.ts")
    assert not is_entry_point("src/index.ts")
