"""Framework detection from well-known manifest files."""

import json
import re
from pathlib import Path
from typing import Iterable, List, Sequence

from ..models import ProjectFile
from ..utils.logging import get_logger

logger = get_logger("indexer.frameworks")

# package.json dependency key -> label, checked in this order
NODE_FRAMEWORKS = (
    ("react", "React"),
    ("vue", "Vue"),
    ("@angular/core", "Angular"),
    ("express", "Express"),
    ("next", "Next.js"),
    ("@nestjs/core", "NestJS"),
    ("fastify", "Fastify"),
)

PYTHON_FRAMEWORKS = (
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
)

_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def _node_frameworks(manifest: Path) -> List[str]:
    try:
        pkg = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug("Invalid package.json at %s: %s", manifest, e)
        return []
    if not isinstance(pkg, dict):
        return []

    deps = {}
    for section in ("dependencies", "devDependencies"):
        values = pkg.get(section)
        if isinstance(values, dict):
            deps.update(values)

    return [label for key, label in NODE_FRAMEWORKS if key in deps]


def _python_frameworks(requirements: Path) -> List[str]:
    try:
        lines = requirements.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Unreadable requirements file %s: %s", requirements, e)
        return []

    names = set()
    for line in lines:
        if line.lstrip().startswith(("#", "-")):
            continue
        match = _REQUIREMENT_NAME.match(line)
        if match:
            names.add(match.group(1).lower())
    return [label for key, label in PYTHON_FRAMEWORKS if key in names]


def _add(frameworks: List[str], labels: Iterable[str]) -> None:
    for label in labels:
        if label not in frameworks:
            frameworks.append(label)


def detect_frameworks(root: str, files: Sequence[ProjectFile]) -> List[str]:
    """Infer technology labels from manifests among the discovered files.

    Manifests that cannot be read or parsed contribute no labels.
    """
    root_path = Path(root)
    paths = {f.path for f in files}
    frameworks: List[str] = []

    if "package.json" in paths:
        _add(frameworks, _node_frameworks(root_path / "package.json"))

    if any(path.endswith("requirements.txt") for path in paths):
        _add(frameworks, ["Python"])
        if "requirements.txt" in paths:
            _add(frameworks, _python_frameworks(root_path / "requirements.txt"))
    if "go.mod" in paths:
        _add(frameworks, ["Go"])
    if "Cargo.toml" in paths:
        _add(frameworks, ["Rust"])

    return frameworks
