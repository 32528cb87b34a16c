"""Fixture extraction from finalized blueprint text.

Scans text for top-level brace-delimited spans and parses each one as strict
JSON. The scanner tracks nesting depth and skips double-quoted strings inside a
span, so ``{"a": {"b": "}"}}`` is one candidate rather than three.

Extraction is fail-fast: the first span that is not valid JSON aborts the scan
with :class:`blot.exceptions.FixtureSyntaxError`. A caller never receives a
partial fixture list.

Examples
--------
>>> extract_fixtures('Hello {"a":1} World {"b":[1,2]}')
[{'a': 1}, {'b': [1, 2]}]
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any

from blot.exceptions import FixtureSyntaxError

logger = logging.getLogger(__name__)


def _location(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based ``(line, column)`` of ``offset`` in ``text``."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def iter_fixture_candidates(
    text: str, source: str | None = None
) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, fragment)`` for each top-level brace-delimited span.

    Parameters
    ----------
    text : str
        Finalized document text.
    source : str | None, optional
        Identifier of the document, used in error messages.

    Yields
    ------
    tuple[int, str]
        Start offset and text of each candidate, in order of appearance.

    Raises
    ------
    FixtureSyntaxError
        If a span is still open at the end of the text.
    """
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for index, char in enumerate(text):
        if depth == 0:
            if char == "{":
                depth = 1
                start = index
            continue
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                yield start, text[start : index + 1]
    if depth:
        fragment = text[start:]
        raise _syntax_error(text, start, fragment, source, "unterminated JSON object")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _syntax_error(
    text: str, offset: int, fragment: str, source: str | None, reason: str
) -> FixtureSyntaxError:
    line, column = _location(text, offset)
    where = f" {source}" if source else ""
    return FixtureSyntaxError(
        f"Found invalid JSON in API blueprint{where}: {fragment}\n\n{reason}",
        context={
            "fragment": fragment,
            "source": source,
            "offset": offset,
            "line": line,
            "column": column,
        },
    )


def extract_fixtures(markdown: str, source: str | None = None) -> list[Any]:
    """Extract the ordered list of JSON fixtures embedded in ``markdown``.

    Parameters
    ----------
    markdown : str
        Finalized (transcluded and interpolated) document text.
    source : str | None, optional
        Identifier of the document the text came from, named in errors.

    Returns
    -------
    list[Any]
        Parsed fixtures in order of appearance; empty when there are none.

    Raises
    ------
    FixtureSyntaxError
        On the first candidate that fails strict JSON parsing.
    """
    fixtures: list[Any] = []
    for offset, fragment in iter_fixture_candidates(markdown, source):
        try:
            fixtures.append(json.loads(fragment, parse_constant=_reject_constant))
        except ValueError as exc:
            raise _syntax_error(markdown, offset, fragment, source, str(exc)) from exc
    logger.debug("Extracted %d fixtures from %s", len(fixtures), source or "<string>")
    return fixtures
