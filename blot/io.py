"""Document import and export entrypoints.

This module sequences the filesystem collaborator and the compilation unit:
:func:`src` and :func:`glob` read documents from disk and compile them,
:func:`read` compiles in-memory documents, and :func:`dist` exports one
compiled document to a destination whose extension picks the format.

Batch operations compile their members concurrently on the event loop and
aggregate all-or-nothing: the first member failure is raised and no partial
results are returned. Successful results keep the input order.

Milestones are logged at INFO level under ``blot.io``; logging never affects
the outcome of an operation.

Examples
--------
>>> import asyncio
>>> from blot import io
>>> artifacts = asyncio.run(io.read(['{"a": 1}', 'no fixtures here']))
>>> [a.fixtures for a in artifacts]
[({'a': 1},), ()]
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

from blot.blueprint import Blueprint, CompiledArtifact
from blot.exceptions import DocumentTypeError, InputError
from blot.filesystem import LocalFileSystem
from blot.pipeline.marshaller import resolve_format, serialize

logger = logging.getLogger(__name__)


async def src(
    filepath: Path | str,
    *,
    filesystem: LocalFileSystem | None = None,
    **compile_options: Any,
) -> CompiledArtifact:
    """Read and compile one blueprint file.

    Parameters
    ----------
    filepath : Path | str
        Logical path of the document, resolved through the environment.
    filesystem : LocalFileSystem | None, optional
        Filesystem collaborator.
    **compile_options
        Forwarded to :meth:`Blueprint.compile` (``generator``, ``loader``,
        ``max_depth``).

    Returns
    -------
    CompiledArtifact
        The compiled document.

    Raises
    ------
    InputError
        If ``filepath`` is empty.
    FilesystemError
        If the file cannot be read.
    """
    logger.info("importing content from %s", filepath)
    if not filepath:
        raise InputError("Failed to read file, filepath required")
    fs = filesystem or LocalFileSystem()
    markdown = await fs.read_text(filepath)
    logger.info("imported contents of %s", filepath)
    blueprint = Blueprint(
        markdown,
        source=str(filepath),
        base=os.path.normpath(str(fs.resolve(filepath))),
    )
    return await blueprint.compile(**compile_options)


async def glob(
    pattern: str,
    *,
    filesystem: LocalFileSystem | None = None,
    recursive: bool = True,
    **compile_options: Any,
) -> list[CompiledArtifact]:
    """Compile every blueprint file matching ``pattern``.

    ``recursive`` is forwarded to the filesystem glob, so ``**`` matches
    nested directories only when it is true.

    Returns
    -------
    list[CompiledArtifact]
        One artifact per matched file, in sorted path order.
    """
    logger.info("globbing against %s", pattern)
    fs = filesystem or LocalFileSystem()
    paths = await fs.glob(pattern, recursive=recursive)
    return list(
        await asyncio.gather(
            *(src(path, filesystem=fs, **compile_options) for path in paths)
        )
    )


async def read(documents: Any, **compile_options: Any) -> Any:
    """Compile one document or an ordered collection of documents.

    Parameters
    ----------
    documents : str | list[str] | tuple[str, ...]
        A document, or a collection of documents.
    **compile_options
        Forwarded to :meth:`Blueprint.compile`.

    Returns
    -------
    CompiledArtifact | list[CompiledArtifact]
        A single artifact for a single document, otherwise a list matching
        the input order.

    Raises
    ------
    DocumentTypeError
        If ``documents`` is neither a string nor a list/tuple of strings.
    AppError
        The first failure among the compiled members.
    """
    logger.info("reading in content")
    if isinstance(documents, str):
        return await Blueprint(documents).compile(**compile_options)
    if isinstance(documents, (list, tuple)):
        blueprints = [Blueprint(document) for document in documents]
        return list(
            await asyncio.gather(
                *(blueprint.compile(**compile_options) for blueprint in blueprints)
            )
        )
    raise DocumentTypeError(
        "Documents must be represented as a string or a list, "
        f"got {type(documents).__name__}",
        context={"type": type(documents).__name__},
    )


async def dist(
    document: str | Blueprint | CompiledArtifact,
    destination: str,
    *,
    filesystem: LocalFileSystem | None = None,
    **compile_options: Any,
) -> str:
    """Export one document to ``destination``.

    The destination is validated before compiling or writing. A string is
    compiled first, a :class:`Blueprint` reuses its artifact when it holds one,
    and a :class:`CompiledArtifact` is exported as is.

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
    DocumentTypeError
        If ``document`` is not a single document.
    FilesystemError
        If writing fails.
    """
    logger.info("exporting content to %s", destination)
    fmt = resolve_format(destination)
    if isinstance(document, CompiledArtifact):
        artifact = document
    elif isinstance(document, Blueprint):
        artifact = document.compiled or await document.compile(**compile_options)
    elif isinstance(document, str):
        artifact = await read(document, **compile_options)
    else:
        raise DocumentTypeError(
            f"Only a single document can be exported, got {type(document).__name__}",
            context={"type": type(document).__name__},
        )
    text = serialize(artifact, fmt)
    fs = filesystem or LocalFileSystem()
    await fs.write_text(destination, text)
    logger.info("exported content to %s", destination)
    return text
