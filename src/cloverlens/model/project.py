"""Project code model that coverage facts are attached to.

A Project owns its files (with per-line attributes), project-wide simple
metrics, and code elements (packages, classes, operations) with their own
metrics. Analyzers only mutate the model through the setters below; they
never replace it.

Lookups of files that are not tracked return None rather than raising:
coverage reports routinely mention generated or temporary files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class ProjectFile:
    """A tracked source file, identified by its project-relative path."""

    path: str
    content: str
    line_attributes: dict[int, dict[str, int]] = field(default_factory=dict)

    def set_line_attribute(self, line: int, name: str, value: int) -> None:
        self.line_attributes.setdefault(line, {})[name] = value

    def get_line_attribute(self, line: int, name: str) -> int | None:
        return self.line_attributes.get(line, {}).get(name)


@dataclass(slots=True, eq=False)
class CodeElement:
    """Package, class or operation in the code model."""

    kind: str
    name: str
    location: str | None = None
    metrics: dict[str, int | float] = field(default_factory=dict)
    children: list[CodeElement] = field(default_factory=list)

    def add_child(self, element: CodeElement) -> None:
        if not any(child is element for child in self.children):
            self.children.append(element)

    def set_location(self, path: str) -> None:
        self.location = path

    def set_metric(self, name: str, value: int | float) -> None:
        self.metrics[name] = value

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "location": self.location,
            "metrics": dict(self.metrics),
            "children": [f"{c.kind}:{c.name}" for c in self.children],
        }


class Project:
    """In-memory project model rooted at a directory.

    Files can be registered up front with add_file(); otherwise they are
    read lazily from disk the first time get_file() asks for them.
    """

    def __init__(self, root_dir: Path | str, files: dict[str, str] | None = None) -> None:
        self._root = Path(root_dir)
        self._files: dict[str, ProjectFile] = {}
        self._metrics: dict[str, int | float] = {}
        self._elements: dict[tuple[str, str], CodeElement] = {}
        for path, content in (files or {}).items():
            self.add_file(path, content)

    @property
    def dir(self) -> str:
        """Root directory as a string, without a trailing separator."""
        root = str(self._root)
        return root.rstrip("/") or "/"

    @property
    def metrics(self) -> dict[str, int | float]:
        return dict(self._metrics)

    @property
    def code_elements(self) -> list[CodeElement]:
        return list(self._elements.values())

    @property
    def files(self) -> list[ProjectFile]:
        return list(self._files.values())

    def add_file(self, path: str, content: str) -> ProjectFile:
        project_file = ProjectFile(path=path, content=content)
        self._files[path] = project_file
        return project_file

    def get_file(self, path: str) -> ProjectFile | None:
        """Return the tracked file at *path*, or None if it is not part of the project."""
        if path in self._files:
            return self._files[path]

        candidate = (self._root / path).resolve()
        try:
            candidate.relative_to(self._root.resolve())
        except ValueError:
            return None
        if not candidate.is_file():
            return None

        content = candidate.read_text(encoding="utf-8", errors="replace")
        return self.add_file(path, content)

    def set_simple_valued_metric(self, name: str, value: int | float) -> None:
        self._metrics[name] = value

    def get_code_element(self, kind: str, name: str) -> CodeElement | None:
        return self._elements.get((kind, name))

    def get_or_create_code_element(self, kind: str, name: str) -> CodeElement:
        key = (kind, name)
        element = self._elements.get(key)
        if element is None:
            element = CodeElement(kind=kind, name=name)
            self._elements[key] = element
        return element

    def to_dict(self) -> dict[str, Any]:
        """Serialize metrics, code elements and line attributes for JSON output."""
        return {
            "dir": self.dir,
            "metrics": dict(self._metrics),
            "code_elements": [e.to_dict() for e in self._elements.values()],
            "line_attributes": {
                f.path: {str(line): attrs for line, attrs in sorted(f.line_attributes.items())}
                for f in self._files.values()
                if f.line_attributes
            },
        }
