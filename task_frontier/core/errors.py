from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class GraphError(Exception):
    """A problem with a graph snapshot or its settings, located by file and field path.

    Loaders raise these; validators and linters return them as lists. Codes
    starting with ``L_`` come from the linter, ``E_`` from everything else.
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    @property
    def location(self) -> str:
        loc = ":".join(p for p in (self.file, self.path) if p)
        return loc or "<snapshot>"

    @property
    def source(self) -> str:
        if self.code.startswith("L_"):
            return "lint"
        return "validate"

    def to_item(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "file": self.file,
            "path": self.path,
            "severity": "error",
            "source": self.source,
        }

    def __str__(self) -> str:
        return f"{self.location}: {self.code}: {self.message}"


class GraphLoadError(GraphError):
    @property
    def source(self) -> str:
        return "load"


class GraphValidationError(GraphError):
    pass
