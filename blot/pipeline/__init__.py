"""Compilation pipeline stages.

This package is the stable API boundary for the individual stages the
compilation unit sequences: transclusion, interpolation, fixture extraction,
structural parsing and marshalling. Each stage is a free function; state lives
only in :class:`blot.blueprint.Blueprint`.

Examples
--------
>>> import asyncio
>>> from blot.pipeline import transclude, interpolate, extract_fixtures
>>> text = asyncio.run(transclude('Hello {"a": 1}'))
>>> extract_fixtures(interpolate(text))
[{'a': 1}]
"""

from .fixtures import extract_fixtures, iter_fixture_candidates
from .grammar import GrammarEngine, GrammarSyntaxError, OutlineGrammar
from .interpolation import (
    FakerGenerator,
    FixtureGenerator,
    get_default_generator,
    interpolate,
    reset_default_generator,
    set_default_generator,
)
from .marshaller import (
    FORMATS,
    FormatDescriptor,
    get_format,
    marshall,
    register_format,
    resolve_format,
    serialize,
)
from .parser import parse
from .transclusion import (
    DispatchingIncludeLoader,
    FileIncludeLoader,
    HttpIncludeLoader,
    IncludeLoader,
    transclude,
)

__all__ = [
    "FORMATS",
    "DispatchingIncludeLoader",
    "FakerGenerator",
    "FileIncludeLoader",
    "FixtureGenerator",
    "FormatDescriptor",
    "GrammarEngine",
    "GrammarSyntaxError",
    "HttpIncludeLoader",
    "IncludeLoader",
    "OutlineGrammar",
    "extract_fixtures",
    "get_default_generator",
    "get_format",
    "interpolate",
    "iter_fixture_candidates",
    "marshall",
    "parse",
    "register_format",
    "reset_default_generator",
    "resolve_format",
    "serialize",
    "set_default_generator",
    "transclude",
]
