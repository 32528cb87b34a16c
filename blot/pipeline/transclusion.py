"""Transclusion resolver for blueprint documents.

Expands include directives of the form ``:[label](target)`` in place, loading
each target through an include loader and resolving directives found inside
the included content transitively. The resolver itself is pure with respect to
compiler state; all file and network access happens in the loaders.

Boundaries
----------
- Relative targets resolve against the document that contains the directive
  (a file path or a URL); top-level targets resolve through the environment.
- Multi-line content included by a directive that starts its line inherits
  the directive's indentation, so included payload bodies stay nested.
- A target that is already on the current include chain, or a chain deeper
  than ``max_depth``, fails with ``CircularTransclusionError``.

Examples
--------
>>> import asyncio
>>> asyncio.run(transclude("# API without includes"))
'# API without includes'
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Protocol
from urllib.parse import urljoin

import aiohttp
from aiolimiter import AsyncLimiter

from blot.config import (
    DEFAULT_HTTP_RPM,
    DEFAULT_HTTP_TIMEOUT,
    INCLUDE_DIRECTIVE_PATTERN,
    MAX_INCLUDE_DEPTH,
    REMOTE_INCLUDE_SCHEMES,
)
from blot.env import Environment, current_environment
from blot.exceptions import CircularTransclusionError, TransclusionError

logger = logging.getLogger(__name__)


def is_remote(target: str | None) -> bool:
    """Return True when ``target`` is an http(s) URL."""
    return bool(target) and target.lower().startswith(REMOTE_INCLUDE_SCHEMES)


class IncludeLoader(Protocol):
    """Load the text an include directive points at.

    ``base`` is the identifier of the including document, or ``None`` at the
    top level. The returned identifier is used as the base for directives found
    in the loaded text and for cycle detection.
    """

    async def load(self, target: str, base: str | None = None) -> tuple[str, str]:
        ...


class FileIncludeLoader:
    """Load include targets from the local filesystem.

    Parameters
    ----------
    environment : Environment | None, optional
        Resolver for top-level relative targets. Defaults to the process-wide
        environment at call time.
    """

    def __init__(self, environment: Environment | None = None) -> None:
        self._environment = environment

    def resolve(self, target: str, base: str | None = None) -> Path:
        """Return the filesystem path a target refers to."""
        path = Path(target).expanduser()
        if path.is_absolute():
            return path
        if base:
            return Path(base).parent / path
        return (self._environment or current_environment()).uri(path)

    async def load(self, target: str, base: str | None = None) -> tuple[str, str]:
        path = self.resolve(target, base)
        identifier = os.path.normpath(str(path))
        try:
            text = await asyncio.to_thread(Path(identifier).read_text, encoding="utf-8")
        except OSError as exc:
            raise TransclusionError(
                f"Failed to transclude {target}: {exc}",
                context={"target": target, "base": base},
            ) from exc
        return text, identifier


class HttpIncludeLoader:
    """Fetch include targets over HTTP.

    Fetches are throttled by an ``AsyncLimiter`` and bounded by a per-request
    timeout. A failed fetch raises ``TransclusionError``; nothing is retried.

    Parameters
    ----------
    timeout : int, optional
        Seconds allowed per request.
    rpm : int, optional
        Requests allowed per minute.
    session : aiohttp.ClientSession | None, optional
        Session to reuse. A short-lived session is opened per fetch otherwise.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
        rpm: int = DEFAULT_HTTP_RPM,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.timeout = timeout
        self.limiter = AsyncLimiter(rpm, 60)
        self.session = session

    async def load(self, target: str, base: str | None = None) -> tuple[str, str]:
        url = urljoin(base, target) if is_remote(base) else target
        async with self.limiter:
            if self.session is not None:
                return await self._fetch(self.session, url), url
            async with aiohttp.ClientSession() as session:
                return await self._fetch(session, url), url

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> str:
        try:
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                text = await response.text()
                if not 200 <= response.status < 300:
                    raise TransclusionError(
                        f"Failed to transclude {url}: HTTP {response.status}",
                        context={"target": url, "status_code": response.status},
                    )
                return text
        except aiohttp.ClientError as exc:
            raise TransclusionError(
                f"Failed to transclude {url}: {exc}", context={"target": url}
            ) from exc
        except asyncio.TimeoutError as exc:
            raise TransclusionError(
                f"Timed out transcluding {url} after {self.timeout}s",
                context={"target": url},
            ) from exc


class DispatchingIncludeLoader:
    """Route include targets to the file or HTTP loader.

    URLs, and relative targets found inside remote documents, go to the HTTP
    loader; everything else goes to the file loader.
    """

    def __init__(
        self,
        file_loader: IncludeLoader | None = None,
        http_loader: IncludeLoader | None = None,
    ) -> None:
        self.file_loader = file_loader or FileIncludeLoader()
        self.http_loader = http_loader or HttpIncludeLoader()

    async def load(self, target: str, base: str | None = None) -> tuple[str, str]:
        if is_remote(target) or (is_remote(base) and not Path(target).is_absolute()):
            return await self.http_loader.load(target, base)
        return await self.file_loader.load(target, base)


def _directive_indent(text: str, start: int) -> str:
    """Return the whitespace before ``start`` when the directive opens its line."""
    line_start = text.rfind("\n", 0, start) + 1
    prefix = text[line_start:start]
    return prefix if not prefix.strip() else ""


def _indent(content: str, indent: str) -> str:
    if not indent:
        return content
    lines = content.split("\n")
    return "\n".join(
        [lines[0]] + [indent + line if line.strip() else line for line in lines[1:]]
    )


async def _resolve(
    text: str,
    loader: IncludeLoader,
    base: str | None,
    chain: tuple[str, ...],
    depth: int,
    max_depth: int,
) -> str:
    matches = list(INCLUDE_DIRECTIVE_PATTERN.finditer(text))
    if not matches:
        return text
    if depth >= max_depth:
        raise CircularTransclusionError(
            f"Include chain exceeds the maximum depth of {max_depth}",
            context={"chain": list(chain)},
        )

    async def expand(target: str) -> str:
        content, identifier = await loader.load(target, base)
        if identifier in chain:
            raise CircularTransclusionError(
                f"Circular transclusion of {identifier}",
                context={"chain": [*chain, identifier]},
            )
        logger.debug("Transcluded %s (depth %d)", identifier, depth + 1)
        content = content[:-1] if content.endswith("\n") else content
        return await _resolve(
            content, loader, identifier, (*chain, identifier), depth + 1, max_depth
        )

    expansions = await asyncio.gather(
        *(expand(match.group("target")) for match in matches)
    )
    pieces: list[str] = []
    cursor = 0
    for match, expansion in zip(matches, expansions):
        pieces.append(text[cursor : match.start()])
        pieces.append(_indent(expansion, _directive_indent(text, match.start())))
        cursor = match.end()
    pieces.append(text[cursor:])
    return "".join(pieces)


async def transclude(
    markdown: str,
    *,
    loader: IncludeLoader | None = None,
    base: str | None = None,
    max_depth: int = MAX_INCLUDE_DEPTH,
) -> str:
    """Expand every include directive in ``markdown``.

    Parameters
    ----------
    markdown : str
        Document text, possibly containing ``:[label](target)`` directives.
    loader : IncludeLoader | None, optional
        Loader used for targets. Defaults to a ``DispatchingIncludeLoader``.
    base : str | None, optional
        Identifier of the document ``markdown`` came from (file path or URL);
        relative targets resolve against it.
    max_depth : int, optional
        Deepest include chain accepted.

    Returns
    -------
    str
        The flattened text. Text without directives is returned unchanged.

    Raises
    ------
    TransclusionError
        If ``markdown`` is empty, a target cannot be loaded, or resolution
        produces no text.
    CircularTransclusionError
        If an include chain loops or exceeds ``max_depth``.
    """
    if not markdown or not isinstance(markdown, str):
        raise TransclusionError("Valid markdown required for transclusion")
    loader = loader or DispatchingIncludeLoader()
    chain = (base,) if base else ()
    resolved = await _resolve(markdown, loader, base, chain, 0, max_depth)
    if not resolved:
        raise TransclusionError(
            "Failed to parse markdown for transclusions", context={"base": base}
        )
    return resolved
