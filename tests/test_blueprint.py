"""Tests for the Blueprint compilation unit."""

import asyncio
from pathlib import Path

import pytest

from blot.blueprint import Blueprint, BlueprintState, CompiledArtifact, compile_markdown
from blot.env import Environment
from blot.exceptions import (
    DocumentTypeError,
    FixtureSyntaxError,
    InvalidDestinationError,
    TransclusionError,
)
from blot.filesystem import LocalFileSystem


@pytest.mark.asyncio
async def test_end_to_end_without_directives_or_placeholders():
    text = 'Hello {"a":1} World {"b":[1,2]}'
    bp = Blueprint(text)
    assert bp.state is BlueprintState.CREATED
    assert bp.compiled is None
    artifact = await bp.compile()
    assert list(artifact.fixtures) == [{"a": 1}, {"b": [1, 2]}]
    assert artifact.markdown == text
    assert bp.compiled is artifact
    assert bp.state is BlueprintState.COMPILED
    assert bp.markdown == text


@pytest.mark.asyncio
async def test_stages_run_in_order(fake_loader, fixed_generator):
    """Placeholders inside included content are generated before extraction."""
    loader = fake_loader({"body.json": '{"id": |~value|}'})
    bp = Blueprint("+ Response 200\n\n        :[b](body.json)\n")
    artifact = await bp.compile(generator=fixed_generator, loader=loader)
    assert artifact.fixtures == ({"id": 42},)
    assert "|~value|" not in artifact.markdown
    assert ":[b]" not in artifact.markdown
    assert fixed_generator.calls == 1


@pytest.mark.asyncio
async def test_failed_compile_holds_no_artifact():
    bp = Blueprint('{"ok": 1}')
    await bp.compile()
    bp.markdown = "text {not json} more"
    with pytest.raises(FixtureSyntaxError):
        await bp.compile()
    assert bp.compiled is None
    assert bp.state is BlueprintState.FAILED


@pytest.mark.asyncio
async def test_transclusion_failure_short_circuits(fixed_generator):
    bp = Blueprint("")
    with pytest.raises(TransclusionError):
        await bp.compile(generator=fixed_generator)
    assert fixed_generator.calls == 0
    assert bp.state is BlueprintState.FAILED


@pytest.mark.asyncio
async def test_recompile_overwrites_artifact():
    class Counter:
        def __init__(self):
            self.n = 0

        def process(self, text):
            self.n += 1
            return text.replace("|~n|", str(self.n))

    gen = Counter()
    bp = Blueprint('{"n": |~n|}')
    first = await bp.compile(generator=gen)
    second = await bp.compile(generator=gen)
    assert first.fixtures == ({"n": 1},)
    assert second.fixtures == ({"n": 2},)
    assert bp.compiled is second


@pytest.mark.asyncio
async def test_state_is_compiling_while_stages_run(fake_loader):
    seen = []
    bp = Blueprint("x :[a](a.md)")

    class ObservingLoader:
        async def load(self, target, base=None):
            seen.append(bp.state)
            return "included", target

    await bp.compile(loader=ObservingLoader())
    assert seen == [BlueprintState.COMPILING]


def test_non_string_document_rejected():
    with pytest.raises(DocumentTypeError, match="int"):
        Blueprint(42)


@pytest.mark.asyncio
async def test_compile_markdown_names_source_in_errors():
    with pytest.raises(FixtureSyntaxError) as excinfo:
        await compile_markdown("{oops}", source="notes.apib")
    assert excinfo.value.context["source"] == "notes.apib"


@pytest.mark.asyncio
async def test_dist_writes_marshalled_format(tmp_path: Path):
    fs = LocalFileSystem(Environment(tmp_path))
    bp = Blueprint('# Notes\n\n{"a": 1}\n')
    text = await bp.dist("out/notes.json", filesystem=fs)
    assert (tmp_path / "out" / "notes.json").read_text(encoding="utf-8") == text
    assert bp.state is BlueprintState.COMPILED


@pytest.mark.asyncio
async def test_dist_reuses_held_artifact(tmp_path: Path):
    fs = LocalFileSystem(Environment(tmp_path))
    bp = Blueprint("# Notes")
    bp.compiled = CompiledArtifact(markdown="# Precompiled")
    await bp.dist("notes.apib", filesystem=fs)
    assert (tmp_path / "notes.apib").read_text(encoding="utf-8") == "# Precompiled"


@pytest.mark.asyncio
async def test_dist_validates_destination_before_compiling(tmp_path: Path):
    fs = LocalFileSystem(Environment(tmp_path))
    bp = Blueprint("{invalid}")
    with pytest.raises(InvalidDestinationError):
        await bp.dist("out", filesystem=fs)
    assert bp.state is BlueprintState.CREATED
    assert list(tmp_path.iterdir()) == []


def test_compiled_artifact_is_immutable():
    artifact = CompiledArtifact(markdown="x")
    with pytest.raises(AttributeError):
        artifact.markdown = "y"
    assert asyncio.iscoroutinefunction(Blueprint.compile)
