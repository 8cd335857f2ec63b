from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dashboard_preview.bicep import BicepCliCompiler, BicepCompilerError, CompileOutput, StaticBicepCompiler
from dashboard_preview.layout import render
from dashboard_preview.loader import DefinitionLoader, UnsupportedSourceError, kind_for_path
from dashboard_preview.models import LoadContext, LoadErrorKind, SourceKind

DASHBOARD = {
    "resources": [
        {
            "type": "Microsoft.Portal/dashboards",
            "properties": {"lenses": [{"parts": [{"metadata": {"type": "Parts/ClockTile"}}]}]},
        }
    ]
}


class RaisingCompiler:
    async def compile(self, path: Path) -> CompileOutput:
        raise BicepCompilerError("Bicep compiler not found: bicep")


class ScratchFileCompiler:
    """Records what the compiler saw on disk."""

    def __init__(self) -> None:
        self.seen: list[tuple[Path, str]] = []

    async def compile(self, path: Path) -> CompileOutput:
        self.seen.append((path, path.read_text(encoding="utf-8")))
        return CompileOutput(returncode=0, stdout=json.dumps(DASHBOARD))


def test_json_source_parses() -> None:
    loader = DefinitionLoader(StaticBicepCompiler(CompileOutput(returncode=0)))

    result = asyncio.run(loader.load(json.dumps(DASHBOARD), "json"))

    assert result.ok
    assert result.definition == DASHBOARD


def test_invalid_json_is_recovered() -> None:
    loader = DefinitionLoader(StaticBicepCompiler(CompileOutput(returncode=0)))

    result = asyncio.run(loader.load('{"resources": [', SourceKind.JSON))
    markup = render(result.as_definition())

    assert result.error.kind is LoadErrorKind.INVALID_JSON
    assert result.as_definition() == {"error": "Invalid JSON"}
    assert "Invalid JSON" in markup
    assert 'class="tile"' not in markup


def test_bicep_success_uses_resolved_path(tmp_path: Path) -> None:
    source = tmp_path / "dashboard.bicep"
    source.write_text("resource dash 'Microsoft.Portal/dashboards@2020-09-01-preview' = {}", encoding="utf-8")
    compiler = StaticBicepCompiler(CompileOutput(returncode=0, stdout=json.dumps(DASHBOARD)))
    loader = DefinitionLoader(compiler)

    result = asyncio.run(loader.load(source.read_text(), "bicep", LoadContext(path=source)))

    assert result.ok
    assert result.definition == DASHBOARD
    assert compiler.calls == [source.resolve()]
    assert compiler.calls[0].is_absolute()


def test_compiler_diagnostic_is_shown() -> None:
    compiler = StaticBicepCompiler(
        CompileOutput(returncode=1, stderr="main.bicep(3,5) : Error BCP057: Unknown identifier 'foo'\n")
    )
    loader = DefinitionLoader(compiler)

    result = asyncio.run(loader.load("", "bicep", LoadContext(path=Path("main.bicep"))))
    markup = render(result.as_definition())

    assert result.error.kind is LoadErrorKind.COMPILER_FAILED
    assert result.error.message.startswith("Failed to convert Bicep: ")
    assert "Unknown identifier 'foo'" in markup
    assert 'class="tile"' not in markup


def test_compiler_failure_without_stderr_uses_generic_message() -> None:
    loader = DefinitionLoader(StaticBicepCompiler(CompileOutput(returncode=3)))

    result = asyncio.run(loader.load("", "bicep", LoadContext(path=Path("main.bicep"))))

    assert result.error.kind is LoadErrorKind.COMPILER_FAILED
    assert "non-zero status (3)" in result.error.message


def test_compiler_that_cannot_run_is_recovered() -> None:
    loader = DefinitionLoader(RaisingCompiler())

    result = asyncio.run(loader.load("", "bicep", LoadContext(path=Path("main.bicep"))))

    assert result.error.kind is LoadErrorKind.COMPILER_FAILED
    assert result.as_definition() == {"error": "Failed to convert Bicep: Bicep compiler not found: bicep"}


def test_malformed_compiler_output() -> None:
    loader = DefinitionLoader(StaticBicepCompiler(CompileOutput(returncode=0, stdout="WARNING: not json")))

    result = asyncio.run(loader.load("", "bicep", LoadContext(path=Path("main.bicep"))))

    assert result.error.kind is LoadErrorKind.MALFORMED_COMPILER_OUTPUT
    assert "Failed to parse the Bicep build output as JSON." in render(result.as_definition())


def test_unsaved_bicep_is_compiled_from_scratch_file() -> None:
    compiler = ScratchFileCompiler()
    loader = DefinitionLoader(compiler)

    result = asyncio.run(loader.load("param location string", "bicep"))

    assert result.ok
    path, text = compiler.seen[0]
    assert path.suffix == ".bicep"
    assert text == "param location string"
    assert not path.exists()


def test_each_load_invokes_compiler_once() -> None:
    compiler = StaticBicepCompiler(CompileOutput(returncode=0, stdout="{}"))
    loader = DefinitionLoader(compiler)

    async def _run() -> None:
        await asyncio.gather(
            loader.load("", "bicep", LoadContext(path=Path("a.bicep"))),
            loader.load("", "bicep", LoadContext(path=Path("a.bicep"))),
        )

    asyncio.run(_run())
    assert len(compiler.calls) == 2


def test_kind_for_path() -> None:
    assert kind_for_path("infra/Dashboard.BICEP") is SourceKind.BICEP
    assert kind_for_path(Path("dash.json")) is SourceKind.JSON

    try:
        kind_for_path("dash.yaml")
    except UnsupportedSourceError as exc:
        assert "dash.yaml" in str(exc)
    else:
        raise AssertionError("expected UnsupportedSourceError")


def test_unrunnable_compiler_binary_is_recovered(tmp_path: Path) -> None:
    binary = tmp_path / "bicep"
    binary.write_text("not a program", encoding="utf-8")
    binary.chmod(0o644)
    loader = DefinitionLoader(BicepCliCompiler(binary_path=str(binary)))

    result = asyncio.run(loader.load("", "bicep", LoadContext(path=tmp_path / "main.bicep")))

    assert result.error.kind is LoadErrorKind.COMPILER_FAILED
    assert "could not be started" in render(result.as_definition())


def test_undecodable_compiler_diagnostic_is_recovered(tmp_path: Path) -> None:
    script = tmp_path / "fake_bicep.py"
    script.write_text('import sys\nsys.stderr.buffer.write(b"bad \\xff\\xfe")\nsys.exit(1)', encoding="utf-8")

    class ScriptCompiler(BicepCliCompiler):
        def build_command(self, path: Path) -> list[str]:
            return [sys.executable, str(script), "build", str(path), "--stdout"]

    loader = DefinitionLoader(ScriptCompiler())

    result = asyncio.run(loader.load("", "bicep", LoadContext(path=tmp_path / "main.bicep")))

    assert result.error.kind is LoadErrorKind.COMPILER_FAILED
    assert result.error.message.startswith("Failed to convert Bicep: bad ")
