"""Azure Portal dashboard layout preview from Bicep or ARM JSON."""

from .layout import extract_tiles, render, render_error, render_grid
from .loader import DefinitionLoader, UnsupportedSourceError, kind_for_path
from .models import LoadError, LoadErrorKind, LoadResult, SourceKind, Tile, TilePosition
from .preview import ActiveSource, PreviewHost, PreviewSession

__version__ = "0.1.0"

__all__ = [
    "ActiveSource",
    "DefinitionLoader",
    "LoadError",
    "LoadErrorKind",
    "LoadResult",
    "PreviewHost",
    "PreviewSession",
    "SourceKind",
    "Tile",
    "TilePosition",
    "UnsupportedSourceError",
    "extract_tiles",
    "kind_for_path",
    "render",
    "render_error",
    "render_grid",
]
