"""Filesystem collaborator for reading, writing and globbing documents.

This module performs only file I/O and does not compile anything. Each
operation runs in a worker thread through ``asyncio.to_thread`` so callers on
the event loop suspend instead of blocking, and every ``OSError`` is wrapped
in :class:`blot.exceptions.FilesystemError`.
"""

from __future__ import annotations

import asyncio
import glob as _glob
import logging
from pathlib import Path

from blot.env import Environment, current_environment
from blot.exceptions import FilesystemError

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """Asynchronous access to the local filesystem.

    Parameters
    ----------
    environment : Environment | None, optional
        Resolver for logical paths. Defaults to the process-wide environment
        at call time.
    encoding : str, optional
        Text encoding for reads and writes.
    """

    def __init__(
        self, environment: Environment | None = None, encoding: str = "utf-8"
    ) -> None:
        self._environment = environment
        self.encoding = encoding

    @property
    def environment(self) -> Environment:
        return self._environment or current_environment()

    def resolve(self, path: Path | str) -> Path:
        """Return the filesystem path for a logical ``path``."""
        return self.environment.uri(path)

    async def read_text(self, path: Path | str) -> str:
        """Read a text file.

        Raises
        ------
        FilesystemError
            If the file cannot be read.
        """
        real_path = self.resolve(path)
        try:
            return await asyncio.to_thread(real_path.read_text, encoding=self.encoding)
        except OSError as exc:
            raise FilesystemError(
                f"Failed to read file {path}: {exc}", context={"path": str(path)}
            ) from exc

    async def write_text(self, path: Path | str, text: str) -> Path:
        """Write ``text`` to ``path``, creating parent directories.

        Returns
        -------
        Path
            The filesystem path written.

        Raises
        ------
        FilesystemError
            If the file cannot be written.
        """
        real_path = self.resolve(path)

        def _write() -> None:
            real_path.parent.mkdir(parents=True, exist_ok=True)
            real_path.write_text(text, encoding=self.encoding)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise FilesystemError(
                f"An error occurred while saving file {path}: {exc}",
                context={"path": str(path)},
            ) from exc
        return real_path

    async def glob(self, pattern: str, *, recursive: bool = True) -> list[str]:
        """Return the sorted paths matching ``pattern``.

        Relative patterns are matched under the environment root and the
        matches are returned relative to it, so they can be passed back to
        :meth:`read_text` unchanged.
        """
        root = self.environment.root
        absolute = Path(pattern).is_absolute()

        def _match() -> list[str]:
            if absolute:
                return sorted(_glob.glob(pattern, recursive=recursive))
            return sorted(
                _glob.glob(pattern, root_dir=str(root), recursive=recursive)
            )

        try:
            return await asyncio.to_thread(_match)
        except OSError as exc:
            raise FilesystemError(
                f"Failed to load globbed files for {pattern}: {exc}",
                context={"pattern": pattern},
            ) from exc
