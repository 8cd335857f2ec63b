"""File-backed preview host.

Stands in for an editor: the active document is a file on disk, a change is
a new modification time, and the preview surface is an output file or stdout.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import TextIO

from dashboard_preview.loader import kind_for_path
from dashboard_preview.preview import ActiveSource, SourceChangedCallback


class FilePreviewHost:
    """Watches one source file and writes rendered markup to ``output_path``."""

    def __init__(
        self,
        source_path: str | Path,
        output_path: str | Path | None = None,
        *,
        stream: TextIO | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source_path = Path(source_path)
        self.output_path = Path(output_path) if output_path is not None else None
        # Unsupported extensions are rejected before any load happens.
        self.kind = kind_for_path(self.source_path)
        self._stream = stream
        self._callbacks: list[SourceChangedCallback] = []
        self._last_mtime: float | None = None
        self._logger = logger or logging.getLogger("dashboard_preview.file_host")

    def get_active_source(self) -> ActiveSource | None:
        if not self.source_path.exists():
            return None
        text = self.source_path.read_text(encoding="utf-8")
        return ActiveSource(text=text, kind=self.kind, path=self.source_path)

    def on_source_changed(self, callback: SourceChangedCallback) -> None:
        self._callbacks.append(callback)

    def display_markup(self, markup: str) -> None:
        if self.output_path is None:
            (self._stream or sys.stdout).write(markup)
            return
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(markup, encoding="utf-8")
        self._logger.info("preview_written", extra={"output": str(self.output_path)})

    def changed(self) -> bool:
        """Report whether the source file's modification time moved since the last check."""
        try:
            mtime = self.source_path.stat().st_mtime
        except FileNotFoundError:
            return False
        if mtime == self._last_mtime:
            return False
        self._last_mtime = mtime
        return True

    async def notify(self) -> None:
        for callback in list(self._callbacks):
            await callback()

    async def poll(self, *, interval_seconds: float = 1.0, max_checks: int | None = None) -> None:
        """Notify subscribers on every change until ``max_checks`` polls have run."""
        checks = 0
        while max_checks is None or checks < max_checks:
            if self.changed():
                self._logger.info("source_changed", extra={"source": str(self.source_path)})
                await self.notify()
            checks += 1
            if max_checks is None or checks < max_checks:
                await asyncio.sleep(interval_seconds)
