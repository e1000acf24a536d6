"""Ordered decision table describing what a matched line of code does.

Each ``LineShape`` pairs a detector with explanation templates. The table is
evaluated top to bottom and the first detector that accepts the line wins, so
more specific shapes (imports, requires) must precede generic ones (calls,
assignments). Templates are ``str.format`` strings receiving ``keyword`` plus
the named fields captured from the line.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, NamedTuple, Pattern, Tuple


@dataclass(frozen=True)
class Capture:
    """A named value pulled out of the line, with a fallback when absent."""

    name: str
    pattern: Pattern[str]
    default: str

    def extract(self, line: str) -> str:
        match = self.pattern.search(line)
        if match:
            for group in match.groups():
                if group:
                    return group.strip()
        return self.default


@dataclass(frozen=True)
class LineShape:
    kind: str
    detect: Callable[[str], bool]
    explanation: str
    why_relevant: str
    captures: Tuple[Capture, ...] = ()

    def describe(self, line: str, keyword: str) -> Tuple[str, str]:
        fields: Dict[str, str] = {c.name: c.extract(line) for c in self.captures}
        fields["keyword"] = keyword
        return self.explanation.format(**fields), self.why_relevant.format(**fields)


class LineDescription(NamedTuple):
    kind: str
    explanation: str
    why_relevant: str


def _contains(*needles: str) -> Callable[[str], bool]:
    return lambda line: any(needle in line for needle in needles)


def _contains_all(*needles: str) -> Callable[[str], bool]:
    return lambda line: all(needle in line for needle in needles)


def _is_function_definition(line: str) -> bool:
    if "function " in line or ("const " in line and "=>" in line):
        return True
    return re.match(r"\s*(?:async\s+)?(?:def|func|fn)\s+\w+", line) is not None


def _is_assignment(line: str) -> bool:
    return "=" in line and "==" not in line


LINE_SHAPES: Tuple[LineShape, ...] = (
    LineShape(
        kind="import",
        detect=_contains_all("import", "from"),
        explanation="Imports {imported} from {module}",
        why_relevant="This brings in the {keyword} functionality needed for this feature",
        captures=(
            Capture("imported", re.compile(r"import\s+(?:\{([^}]+)\}|(\w+))"), "module"),
            Capture("module", re.compile(r"""from\s+['"]([^'"]+)['"]|from\s+([\w.]+)"""), "module"),
        ),
    ),
    LineShape(
        kind="require",
        detect=_contains("require"),
        explanation="Loads {module} using CommonJS",
        why_relevant="This loads the {keyword} module for use in this file",
        captures=(
            Capture("module", re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)"""), "module"),
        ),
    ),
    LineShape(
        kind="instantiation",
        detect=_contains("new "),
        explanation="Creates new instance of {name}",
        why_relevant="This initializes the {keyword} service that will handle the main functionality",
        captures=(Capture("name", re.compile(r"new\s+(\w+)"), "class"),),
    ),
    LineShape(
        kind="class",
        detect=_contains("class "),
        explanation="Defines {name} class",
        why_relevant="This class encapsulates the {keyword} logic and methods",
        captures=(Capture("name", re.compile(r"class\s+(\w+)"), "class"),),
    ),
    LineShape(
        kind="function",
        detect=_is_function_definition,
        explanation="Defines {name} function",
        why_relevant="This function handles {keyword}-related operations",
        captures=(Capture("name", re.compile(r"(?:function|const|def|func|fn)\s+(\w+)"), "function"),),
    ),
    LineShape(
        kind="async_call",
        detect=_contains("await ", ".then"),
        explanation="Async call involving {keyword}",
        why_relevant="This performs an asynchronous {keyword} operation and waits for the result",
    ),
    LineShape(
        kind="method_call",
        detect=lambda line: re.search(r"\.\w+\(", line) is not None,
        explanation="Calls {method} method",
        why_relevant="This invokes the {keyword} API to perform the requested action",
        captures=(Capture("method", re.compile(r"\.(\w+)\("), "method"),),
    ),
    LineShape(
        kind="export",
        detect=_contains("export "),
        explanation="Exports {name}",
        why_relevant="This makes the {keyword} functionality available to other modules",
        captures=(Capture("name", re.compile(r"export\s+(?:default\s+)?(\w+)"), "component"),),
    ),
    LineShape(
        kind="assignment",
        detect=_is_assignment,
        explanation="Assigns value to {name}",
        why_relevant="This stores {keyword} configuration or data for later use",
        captures=(Capture("name", re.compile(r"(?:const|let|var)?\s*(\w+)\s*="), "variable"),),
    ),
    LineShape(
        kind="usage",
        detect=lambda line: True,
        explanation="Uses {keyword} in code logic",
        why_relevant="This line contains logic that directly involves {keyword}",
    ),
)


def classify_line(line: str) -> LineShape:
    # The final "usage" shape accepts every line
    return next(shape for shape in LINE_SHAPES if shape.detect(line))


def describe_line(line: str, keyword: str) -> LineDescription:
    """Explain ``line`` in terms of ``keyword`` using the first matching shape."""
    shape = classify_line(line)
    explanation, why_relevant = shape.describe(line, keyword)
    return LineDescription(shape.kind, explanation, why_relevant)
