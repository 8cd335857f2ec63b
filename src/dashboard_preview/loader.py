"""Turns Bicep or ARM-JSON source text into a dashboard definition."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from .bicep import BicepCompiler, BicepCompilerError
from .models import (
    DashboardPreviewError,
    LoadContext,
    LoadError,
    LoadErrorKind,
    LoadResult,
    SourceKind,
)

INVALID_JSON_MESSAGE = "Invalid JSON"
BICEP_FAILURE_PREFIX = "Failed to convert Bicep: "
MALFORMED_OUTPUT_MESSAGE = "Failed to parse the Bicep build output as JSON."
GENERIC_COMPILER_FAILURE = "Bicep compiler exited with a non-zero status"

_SUFFIX_KINDS = {".bicep": SourceKind.BICEP, ".json": SourceKind.JSON}


class UnsupportedSourceError(DashboardPreviewError, ValueError):
    """Raised when a file is neither Bicep nor ARM JSON."""


def kind_for_path(path: str | Path) -> SourceKind:
    suffix = Path(path).suffix.lower()
    if suffix not in _SUFFIX_KINDS:
        raise UnsupportedSourceError(f"Unsupported file type: {path}. Please open a Bicep or ARM JSON file.")
    return _SUFFIX_KINDS[suffix]


class DefinitionLoader:
    """Loads dashboard definitions; every failure comes back as a ``LoadResult`` error."""

    def __init__(self, compiler: BicepCompiler, *, logger: logging.Logger | None = None) -> None:
        self._compiler = compiler
        self._logger = logger or logging.getLogger("dashboard_preview.loader")

    async def load(
        self,
        source_text: str,
        kind: SourceKind | str,
        context: LoadContext | None = None,
    ) -> LoadResult:
        kind = SourceKind(kind)
        if kind is SourceKind.JSON:
            return self.load_json(source_text)
        return await self.load_bicep(source_text, context or LoadContext())

    def load_json(self, source_text: str) -> LoadResult:
        try:
            definition = json.loads(source_text)
        except json.JSONDecodeError as exc:
            self._logger.info("definition_invalid_json", extra={"line": exc.lineno, "column": exc.colno})
            return LoadResult(error=LoadError(LoadErrorKind.INVALID_JSON, INVALID_JSON_MESSAGE))
        return LoadResult(definition=definition)

    async def load_bicep(self, source_text: str, context: LoadContext) -> LoadResult:
        if context.path is not None:
            return await self._compile(Path(context.path).resolve())

        # Unsaved buffers are compiled from a scratch copy.
        with tempfile.TemporaryDirectory(prefix="dashboard-preview-") as scratch:
            path = Path(scratch) / "main.bicep"
            path.write_text(source_text, encoding="utf-8")
            return await self._compile(path)

    async def _compile(self, path: Path) -> LoadResult:
        try:
            output = await self._compiler.compile(path)
        except BicepCompilerError as exc:
            self._logger.warning("bicep_compile_failed", extra={"path": str(path), "reason": str(exc)})
            return self._compiler_failed(str(exc))

        if not output.succeeded:
            diagnostic = output.stderr.strip() or f"{GENERIC_COMPILER_FAILURE} ({output.returncode})"
            self._logger.warning(
                "bicep_compile_failed",
                extra={"path": str(path), "returncode": output.returncode, "reason": diagnostic},
            )
            return self._compiler_failed(diagnostic)

        try:
            definition = json.loads(output.stdout)
        except json.JSONDecodeError:
            self._logger.warning("bicep_output_malformed", extra={"path": str(path)})
            return LoadResult(
                error=LoadError(
                    LoadErrorKind.MALFORMED_COMPILER_OUTPUT,
                    BICEP_FAILURE_PREFIX + MALFORMED_OUTPUT_MESSAGE,
                )
            )
        return LoadResult(definition=definition)

    @staticmethod
    def _compiler_failed(diagnostic: str) -> LoadResult:
        return LoadResult(error=LoadError(LoadErrorKind.COMPILER_FAILED, BICEP_FAILURE_PREFIX + diagnostic))
