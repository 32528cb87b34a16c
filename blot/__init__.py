"""Blot: compile API blueprint documents into markdown and JSON fixtures.

A blueprint is a markdown API description that may include other documents
with ``:[label](target)`` directives and carry sample-data placeholders such
as ``|~email|``. Compiling a blueprint resolves the includes, generates the
placeholder values and extracts every embedded JSON literal as a fixture.

Package Structure
-----------------
- ``pipeline/``:
    The compilation stages as free functions: transclusion, interpolation,
    fixture extraction, structural parsing and marshalling.
- ``blueprint.py``: The compilation unit (``Blueprint``) and its artifact.
- ``io.py``: ``src``/``glob``/``read``/``dist`` import and export entrypoints.
- ``filesystem.py``, ``env.py``: Filesystem and path resolution collaborators.
- ``settings.py``, ``config.py``: Runtime settings and constants.
- ``exceptions.py``: The error taxonomy.
- ``runner.py``, ``cli.py``: Logging setup and the command line wrapper.

Examples
--------
>>> import asyncio
>>> import blot
>>> artifact = asyncio.run(blot.read('Hello {"a":1} World {"b":[1,2]}'))
>>> artifact.fixtures
({'a': 1}, {'b': [1, 2]})
"""

from blot.blueprint import Blueprint, BlueprintState, CompiledArtifact, compile_markdown
from blot.exceptions import (
    AppError,
    CircularTransclusionError,
    ConfigurationError,
    DocumentTypeError,
    FilesystemError,
    FixtureSyntaxError,
    GrammarError,
    InputError,
    InterpolationError,
    InvalidDestinationError,
    TransclusionError,
    UnsupportedFormatError,
    ValidationError,
)
from blot.io import dist, glob, read, src
from blot.pipeline import (
    FakerGenerator,
    extract_fixtures,
    interpolate,
    marshall,
    parse,
    register_format,
    set_default_generator,
    transclude,
)

__all__ = [
    "AppError",
    "Blueprint",
    "BlueprintState",
    "CircularTransclusionError",
    "CompiledArtifact",
    "ConfigurationError",
    "DocumentTypeError",
    "FakerGenerator",
    "FilesystemError",
    "FixtureSyntaxError",
    "GrammarError",
    "InputError",
    "InterpolationError",
    "InvalidDestinationError",
    "TransclusionError",
    "UnsupportedFormatError",
    "ValidationError",
    "compile_markdown",
    "dist",
    "extract_fixtures",
    "glob",
    "interpolate",
    "marshall",
    "parse",
    "read",
    "register_format",
    "set_default_generator",
    "src",
    "transclude",
]
