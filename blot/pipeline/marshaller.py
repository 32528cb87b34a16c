"""Marshalling of compiled artifacts into named output representations.

The registry maps a format key to a marshalling function over a
:class:`blot.blueprint.CompiledArtifact` and a serializer producing the text
written to disk. It ships with:

- ``apib``: the artifact's markdown, unchanged.
- ``json``: the artifact's fixtures (serialized as indented UTF-8 JSON).
- ``html``: the artifact's markdown rendered to HTML with ``markdown2``.

New formats are added with :func:`register_format`. Destination paths are
mapped to a format by their extension with :func:`resolve_format`, which runs
before any I/O so a bad destination never touches the filesystem.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import markdown2

from blot.config import (
    DESTINATION_EXTENSION_PATTERN,
    HTML_MARKDOWN_EXTRAS,
    JSON_INDENT,
)
from blot.exceptions import InvalidDestinationError, UnsupportedFormatError

if TYPE_CHECKING:
    from blot.blueprint import CompiledArtifact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatDescriptor:
    """A registered output format.

    Attributes
    ----------
    key : str
        Format key, also the destination file extension.
    marshal : Callable[[CompiledArtifact], Any]
        Produces the representation from an artifact.
    serialize : Callable[[Any], str]
        Turns the representation into file text.
    """

    key: str
    marshal: Callable[["CompiledArtifact"], Any]
    serialize: Callable[[Any], str]


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _json_text(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=JSON_INDENT) + "\n"


def _render_html(artifact: "CompiledArtifact") -> str:
    return str(markdown2.markdown(artifact.markdown, extras=HTML_MARKDOWN_EXTRAS))


FORMATS: dict[str, FormatDescriptor] = {}


def register_format(
    key: str,
    marshal: Callable[["CompiledArtifact"], Any],
    serialize: Callable[[Any], str] | None = None,
) -> FormatDescriptor:
    """Register (or replace) the output format ``key``.

    Parameters
    ----------
    key : str
        Format key; matched case-insensitively against destination extensions.
    marshal : Callable[[CompiledArtifact], Any]
        Function producing the representation.
    serialize : Callable[[Any], str] | None, optional
        Function producing file text; ``str`` conversion when omitted.

    Returns
    -------
    FormatDescriptor
        The registered descriptor.
    """
    descriptor = FormatDescriptor(key.lower(), marshal, serialize or _as_text)
    FORMATS[descriptor.key] = descriptor
    return descriptor


register_format("apib", lambda artifact: artifact.markdown)
register_format("json", lambda artifact: artifact.fixtures, _json_text)
register_format("html", _render_html)


def get_format(key: str) -> FormatDescriptor:
    """Return the descriptor registered for ``key``.

    Raises
    ------
    UnsupportedFormatError
        If no format is registered under ``key``.
    """
    descriptor = FORMATS.get(str(key).lower())
    if descriptor is None:
        raise UnsupportedFormatError(
            f"Unsupported filetype: {key}",
            context={"format": key, "supported": sorted(FORMATS)},
        )
    return descriptor


def marshall(artifact: "CompiledArtifact", fmt: str) -> Any:
    """Produce the ``fmt`` representation of ``artifact``.

    Examples
    --------
    >>> from blot.blueprint import CompiledArtifact
    >>> artifact = CompiledArtifact(markdown="# Demo {\\"a\\": 1}", fixtures=({"a": 1},))
    >>> marshall(artifact, "json")
    ({'a': 1},)
    >>> marshall(artifact, "apib")
    '# Demo {"a": 1}'
    """
    return get_format(fmt).marshal(artifact)


def serialize(artifact: "CompiledArtifact", fmt: str) -> str:
    """Return the file text for the ``fmt`` representation of ``artifact``."""
    descriptor = get_format(fmt)
    return descriptor.serialize(descriptor.marshal(artifact))


def resolve_format(destination: str) -> str:
    """Return the registered format key for a destination path.

    Raises
    ------
    InvalidDestinationError
        If ``destination`` has no file extension.
    UnsupportedFormatError
        If the extension is not a registered format.
    """
    match = DESTINATION_EXTENSION_PATTERN.search(str(destination or ""))
    if not match:
        raise InvalidDestinationError(
            "File destinations must contain an extension "
            f"({', '.join('.' + key for key in sorted(FORMATS))})",
            context={"destination": str(destination)},
        )
    return get_format(match.group(1)).key
