"""Boundary for the external Bicep compiler."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .models import DashboardPreviewError


class BicepCompilerError(DashboardPreviewError, RuntimeError):
    """Raised when the compiler process could not be run to completion."""


@dataclass(slots=True)
class CompileOutput:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class BicepCompiler(Protocol):
    """Turns a Bicep file into ARM-JSON text."""

    async def compile(self, path: Path) -> CompileOutput:
        """Compile ``path`` and return the process outcome."""


class BicepCliCompiler:
    """Runs ``bicep build <path> --stdout`` as a subprocess.

    The process runs in a worker thread so the caller's event loop keeps
    serving other work while the compiler is busy.
    """

    def __init__(
        self,
        binary_path: str = "bicep",
        *,
        timeout_seconds: float = 60.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self.binary_path = binary_path
        self.timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger("dashboard_preview.bicep")

    def build_command(self, path: Path) -> list[str]:
        return [self.binary_path, "build", str(path), "--stdout"]

    async def compile(self, path: Path) -> CompileOutput:
        cmd = self.build_command(path)
        self._logger.info("bicep_compile_started", extra={"path": str(path)})
        try:
            result = await asyncio.to_thread(
                subprocess.run,
                cmd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise BicepCompilerError(f"Bicep compiler not found: {self.binary_path}") from exc
        except OSError as exc:
            raise BicepCompilerError(f"Bicep compiler could not be started: {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise BicepCompilerError(f"Bicep compiler timed out after {self.timeout_seconds}s") from exc

        self._logger.info(
            "bicep_compile_finished",
            extra={"path": str(path), "returncode": result.returncode},
        )
        return CompileOutput(returncode=result.returncode, stdout=result.stdout, stderr=result.stderr)


class StaticBicepCompiler:
    """Returns a fixed outcome for every file; used for demos and tests."""

    def __init__(self, output: CompileOutput) -> None:
        self.output = output
        self.calls: list[Path] = []

    async def compile(self, path: Path) -> CompileOutput:
        self.calls.append(path)
        return self.output
