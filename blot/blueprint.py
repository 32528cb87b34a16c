"""Blueprint: the compilation unit for one API description document.

A ``Blueprint`` owns one document's raw text and, once :meth:`Blueprint.compile`
succeeds, the resulting :class:`CompiledArtifact`. Compilation runs the
pipeline stages in a fixed order:

1. transclusion (include directives expanded, recursively),
2. interpolation (placeholder tokens replaced by generated values),
3. fixture extraction (brace-delimited JSON parsed, fail-fast).

Any stage failure leaves the unit in the ``FAILED`` state without an artifact
and propagates unchanged. Recompiling simply recomputes and overwrites.

Examples
--------
>>> import asyncio
>>> bp = Blueprint('Hello {"a":1} World {"b":[1,2]}')
>>> artifact = asyncio.run(bp.compile())
>>> artifact.fixtures
({'a': 1}, {'b': [1, 2]})
>>> bp.state
<BlueprintState.COMPILED: 'compiled'>
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from blot.config import MAX_INCLUDE_DEPTH
from blot.exceptions import DocumentTypeError
from blot.filesystem import LocalFileSystem
from blot.pipeline.fixtures import extract_fixtures
from blot.pipeline.interpolation import FixtureGenerator, interpolate
from blot.pipeline.marshaller import resolve_format, serialize
from blot.pipeline.transclusion import IncludeLoader, transclude

logger = logging.getLogger(__name__)


class BlueprintState(str, Enum):
    """Lifecycle of a compilation unit."""

    CREATED = "created"
    COMPILING = "compiling"
    COMPILED = "compiled"
    FAILED = "failed"


@dataclass(frozen=True)
class CompiledArtifact:
    """Finalized markdown plus the fixtures extracted from it, in order."""

    markdown: str
    fixtures: tuple[Any, ...] = ()


async def compile_markdown(
    markdown: str,
    *,
    source: str | None = None,
    base: str | None = None,
    generator: FixtureGenerator | None = None,
    loader: IncludeLoader | None = None,
    max_depth: int = MAX_INCLUDE_DEPTH,
) -> CompiledArtifact:
    """Run transclusion, interpolation and extraction over ``markdown``.

    Parameters
    ----------
    markdown : str
        Raw document text.
    source : str | None, optional
        Identifier of the document, named in fixture errors.
    base : str | None, optional
        Identifier relative include targets resolve against; ``source`` when
        omitted.
    generator : FixtureGenerator | None, optional
        Placeholder engine; the process-wide default when omitted.
    loader : IncludeLoader | None, optional
        Include loader; file and HTTP dispatch when omitted.
    max_depth : int, optional
        Deepest include chain accepted.

    Returns
    -------
    CompiledArtifact
        The finalized text and its fixtures.

    Raises
    ------
    TransclusionError
        If the text is empty or an include cannot be resolved.
    InterpolationError
        If a placeholder cannot be generated.
    FixtureSyntaxError
        If a brace-delimited span is not valid JSON.
    """
    transcluded = await transclude(
        markdown, loader=loader, base=base or source, max_depth=max_depth
    )
    finalized = interpolate(transcluded, generator)
    fixtures = extract_fixtures(finalized, source=source)
    return CompiledArtifact(markdown=finalized, fixtures=tuple(fixtures))


class Blueprint:
    """Compilation unit holding a document and its compiled artifact.

    Parameters
    ----------
    markdown : str
        Raw document text.
    source : str | None, optional
        Identifier of the document (usually its path), used in errors.
    base : str | None, optional
        Identifier relative include targets resolve against.

    Attributes
    ----------
    markdown : str
        The raw document text; never modified.
    compiled : CompiledArtifact | None
        The artifact of the last successful compile, else None.
    state : BlueprintState
        Current lifecycle state.
    """

    def __init__(
        self, markdown: str, *, source: str | None = None, base: str | None = None
    ) -> None:
        if not isinstance(markdown, str):
            raise DocumentTypeError(
                "Documents must be represented as a string, "
                f"got {type(markdown).__name__}",
                context={"type": type(markdown).__name__},
            )
        self.markdown = markdown
        self.source = source
        self.base = base
        self.compiled: CompiledArtifact | None = None
        self.state = BlueprintState.CREATED

    def __repr__(self) -> str:
        return f"Blueprint(source={self.source!r}, state={self.state.value!r})"

    async def compile(
        self,
        *,
        generator: FixtureGenerator | None = None,
        loader: IncludeLoader | None = None,
        max_depth: int = MAX_INCLUDE_DEPTH,
    ) -> CompiledArtifact:
        """Compile the held document and store the artifact.

        Returns
        -------
        CompiledArtifact
            The new artifact, also stored on :attr:`compiled`.

        Raises
        ------
        AppError
            Whatever the failing stage raised; the unit is left ``FAILED``.
        """
        self.compiled = None
        self.state = BlueprintState.COMPILING
        try:
            artifact = await compile_markdown(
                self.markdown,
                source=self.source,
                base=self.base,
                generator=generator,
                loader=loader,
                max_depth=max_depth,
            )
        except BaseException:
            self.state = BlueprintState.FAILED
            raise
        self.compiled = artifact
        self.state = BlueprintState.COMPILED
        logger.debug(
            "Compiled %s with %d fixtures", self.source or "<string>", len(artifact.fixtures)
        )
        return artifact

    async def dist(
        self,
        destination: str,
        *,
        filesystem: LocalFileSystem | None = None,
        **compile_options: Any,
    ) -> str:
        """Write the artifact to ``destination`` in the format its extension names.

        The destination is validated before anything else. The held artifact
        is used when present; otherwise the document is compiled first.

        Returns
        -------
        str
            The text written.

        Raises
        ------
        InvalidDestinationError
            If ``destination`` has no extension.
        UnsupportedFormatError
            If the extension is not a registered format.
        FilesystemError
            If writing fails.
        """
        fmt = resolve_format(destination)
        artifact = self.compiled or await self.compile(**compile_options)
        text = serialize(artifact, fmt)
        await (filesystem or LocalFileSystem()).write_text(destination, text)
        return text
