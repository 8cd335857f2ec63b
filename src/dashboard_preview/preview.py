"""Load-and-render cycle and the boundary to the editor hosting the preview."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from .layout import DEFAULT_GRID_COLUMNS, render
from .loader import DefinitionLoader
from .models import LoadContext, SourceKind


@dataclass(slots=True)
class ActiveSource:
    """Text of the document currently shown in the host, with its kind."""

    text: str
    kind: SourceKind
    path: Path | None = None


SourceChangedCallback = Callable[[], Awaitable["str | None"]]


class PreviewHost(Protocol):
    """What the preview needs from the editor embedding it."""

    def get_active_source(self) -> ActiveSource | None:
        """Return the active document, or None when nothing is open."""

    def on_source_changed(self, callback: SourceChangedCallback) -> None:
        """Register a callback the host awaits whenever the active document changes."""

    def display_markup(self, markup: str) -> None:
        """Show rendered markup in the preview surface."""


class PreviewSession:
    """Runs one fresh load-and-render cycle per refresh.

    Refreshes are not sequenced: when two overlap, whichever compile finishes
    last wins the display, even if it came from an older edit.
    """

    def __init__(
        self,
        loader: DefinitionLoader,
        *,
        columns: int = DEFAULT_GRID_COLUMNS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loader = loader
        self._columns = columns
        self._host: PreviewHost | None = None
        self._logger = logger or logging.getLogger("dashboard_preview.preview")

    def bind(self, host: PreviewHost) -> None:
        self._host = host
        host.on_source_changed(self.refresh_active)

    async def refresh(
        self,
        source_text: str,
        kind: SourceKind | str,
        path: str | Path | None = None,
    ) -> str:
        context = LoadContext(path=Path(path) if path is not None else None)
        result = await self._loader.load(source_text, kind, context)
        markup = render(result.as_definition(), columns=self._columns)
        self._logger.info(
            "preview_rendered",
            extra={"kind": str(SourceKind(kind).value), "ok": result.ok, "markup_chars": len(markup)},
        )
        if self._host is not None:
            self._host.display_markup(markup)
        return markup

    async def refresh_active(self) -> str | None:
        if self._host is None:
            raise RuntimeError("PreviewSession.refresh_active requires a bound host")
        source = self._host.get_active_source()
        if source is None:
            return None
        return await self.refresh(source.text, source.kind, source.path)
