from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

DASHBOARD_RESOURCE_TYPE = "Microsoft.Portal/dashboards"
UNTITLED_TILE = "Untitled Tile"


class DashboardPreviewError(Exception):
    """Base class for errors raised by the dashboard preview package."""


class SourceKind(str, Enum):
    BICEP = "bicep"
    JSON = "json"


class LoadErrorKind(str, Enum):
    """Recoverable failures produced while loading a dashboard definition."""

    INVALID_JSON = "invalid_json"
    COMPILER_FAILED = "compiler_failed"
    MALFORMED_COMPILER_OUTPUT = "malformed_compiler_output"


@dataclass(slots=True)
class LoadError:
    kind: LoadErrorKind
    message: str


@dataclass(slots=True)
class LoadContext:
    """Where the source text lives on disk, when it lives anywhere."""

    path: Path | None = None


@dataclass(slots=True)
class LoadResult:
    """Either a parsed dashboard definition or the reason it could not be loaded."""

    definition: Any = None
    error: LoadError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_definition(self) -> Any:
        """Return a renderable definition, folding failures into an ``error`` field."""
        if self.error is not None:
            return {"error": self.error.message}
        return self.definition


@dataclass(frozen=True, slots=True)
class TilePosition:
    x: int = 0
    y: int = 0
    col_span: int = 1
    row_span: int = 1

    def to_arm(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "colSpan": self.col_span, "rowSpan": self.row_span}


@dataclass(frozen=True, slots=True)
class Tile:
    title: str
    position: TilePosition = field(default_factory=TilePosition)
    content: str = ""
