"""Programmatic runner and logging configuration for blueprint compilation.

This module is the boundary between entrypoints (the command line wrapper,
scripts, tests) and the compiler. It builds the explicit configuration values
a compile needs (environment, filesystem, fixture generator, include loader)
from :class:`blot.settings.BlotSettings` and runs the import/export
operations in :mod:`blot.io`. No compilation logic lives here.

Examples
--------
>>> import asyncio
>>> from blot.runner import compile_to_destination, configure_logging
>>> configure_logging(log_level="INFO", enable_file=False)
>>> results = asyncio.run(compile_to_destination("api/*.apib"))  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import glob as _glob
import logging
import os

from blot import io
from blot.blueprint import CompiledArtifact
from blot.config import LOG_DIR, LOG_FILENAME, LOG_FORMAT
from blot.env import Environment
from blot.exceptions import InputError
from blot.filesystem import LocalFileSystem
from blot.pipeline.interpolation import FakerGenerator
from blot.pipeline.marshaller import resolve_format
from blot.pipeline.transclusion import (
    DispatchingIncludeLoader,
    FileIncludeLoader,
    HttpIncludeLoader,
)
from blot.settings import BlotSettings

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    r"""Configure logging for compiler runs.

    Sets up a console handler and, unless disabled, a file handler at
    ``LOG_DIR / LOG_FILENAME`` using ``LOG_FORMAT``. File handler creation
    errors are swallowed so read-only checkouts still run.

    Parameters
    ----------
    log_level : str, optional
        The logging level (e.g., "INFO", "DEBUG"). Defaults to "INFO".
    enable_file : bool, optional
        Whether to also log to a file. Ignored when ``DISABLE_FILE_LOGS`` is
        set in the environment.

    Notes
    -----
    All existing root handlers are removed first, so repeated calls are safe.
    """
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file and not os.environ.get("DISABLE_FILE_LOGS"):
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(0, logging.FileHandler(LOG_DIR / LOG_FILENAME, mode="a"))
        except Exception:
            pass
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_generator(settings: BlotSettings) -> FakerGenerator:
    """Return the fixture generator described by ``settings``."""
    return FakerGenerator(locale=settings.faker_locale, seed=settings.faker_seed)


def build_loader(
    settings: BlotSettings, environment: Environment
) -> DispatchingIncludeLoader:
    """Return the include loader described by ``settings``."""
    return DispatchingIncludeLoader(
        file_loader=FileIncludeLoader(environment),
        http_loader=HttpIncludeLoader(
            timeout=settings.http_timeout, rpm=settings.http_rpm
        ),
    )


async def compile_to_destination(
    source: str,
    destination: str | None = None,
    *,
    settings: BlotSettings | None = None,
) -> list[tuple[str, CompiledArtifact]]:
    """Compile the documents named by ``source`` and optionally export one.

    Parameters
    ----------
    source : str
        A document path or a glob pattern, relative to the settings root.
    destination : str | None, optional
        Export path; its extension selects the format. Requires ``source`` to
        match exactly one document.
    settings : BlotSettings | None, optional
        Configuration; loaded from the environment when omitted.

    Returns
    -------
    list[tuple[str, CompiledArtifact]]
        ``(path, artifact)`` for every compiled document, in path order.

    Raises
    ------
    InputError
        If nothing matches ``source``, or ``destination`` is given for more
        than one document.
    AppError
        Any compilation, marshalling or filesystem failure.
    """
    settings = settings or BlotSettings()
    if destination is not None:
        resolve_format(destination)
    environment = Environment(settings.root)
    filesystem = LocalFileSystem(environment)
    options = {
        "generator": build_generator(settings),
        "loader": build_loader(settings, environment),
        "max_depth": settings.max_include_depth,
    }
    if _glob.has_magic(source):
        paths = await filesystem.glob(source)
    else:
        paths = [source]
    if not paths:
        raise InputError(f"No documents match {source}", context={"source": source})
    if destination is not None and len(paths) != 1:
        raise InputError(
            f"Exactly one document is required to export, {len(paths)} match {source}",
            context={"source": source, "matches": len(paths)},
        )
    artifacts = await asyncio.gather(
        *(io.src(path, filesystem=filesystem, **options) for path in paths)
    )
    if destination is not None:
        await io.dist(artifacts[0], destination, filesystem=filesystem)
    return list(zip(paths, artifacts))


__all__ = [
    "build_generator",
    "build_loader",
    "compile_to_destination",
    "configure_logging",
]
