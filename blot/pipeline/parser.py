"""Structural parser integration.

Delegates finalized document text to a grammar engine and normalizes its
outcome: empty input fails with ``ValidationError`` before the engine is
called, and any engine-reported syntax error becomes a ``GrammarError``
carrying the engine's message. The engine runs in a worker thread so the
event loop keeps serving other compiles while a large document is parsed.

This stage is independent of :meth:`blot.blueprint.Blueprint.compile`; callers
parse finalized text when they need the document structure.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from blot.exceptions import GrammarError, ValidationError

from .grammar import GrammarEngine, GrammarSyntaxError, OutlineGrammar

logger = logging.getLogger(__name__)

DEFAULT_ENGINE: GrammarEngine = OutlineGrammar()


async def parse(markdown: str, *, engine: GrammarEngine | None = None) -> dict[str, Any]:
    """Parse ``markdown`` into a structured AST.

    Parameters
    ----------
    markdown : str
        Finalized blueprint text.
    engine : GrammarEngine | None, optional
        Grammar engine to delegate to. Defaults to :class:`OutlineGrammar`.

    Returns
    -------
    dict[str, Any]
        The engine's AST (resource groups, resources, actions, payloads).

    Raises
    ------
    ValidationError
        If ``markdown`` is empty.
    GrammarError
        If the engine rejects the text.

    Examples
    --------
    >>> import asyncio
    >>> ast = asyncio.run(parse("# Demo\\n\\n## Notes [/notes]\\n"))
    >>> ast["name"]
    'Demo'
    """
    if not markdown:
        raise ValidationError("Markdown data required")
    engine = engine or DEFAULT_ENGINE
    logger.debug("Parsing %d characters with %s", len(markdown), type(engine).__name__)
    try:
        return await asyncio.to_thread(engine.parse, markdown)
    except GrammarSyntaxError as exc:
        raise GrammarError(
            f"Failed to parse file as valid API blueprint: {exc}",
            context={"engine_message": exc.message, "line": exc.line},
        ) from exc
