"""Logical path resolution for the compiler's filesystem collaborators.

An ``Environment`` maps the paths callers hand to :func:`blot.io.src`,
:func:`blot.io.dist` and include directives onto real filesystem paths. The
compilation core never resolves paths itself; it asks the environment.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class Environment:
    """Resolve logical paths against a working root.

    Parameters
    ----------
    root : Path | str
        Directory relative paths are joined to.

    Examples
    --------
    >>> env = Environment("/srv/docs")
    >>> str(env.uri("api/users.apib"))
    '/srv/docs/api/users.apib'
    >>> str(env.uri("/abs/file.apib"))
    '/abs/file.apib'
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def uri(self, path: Path | str) -> Path:
        """Return the filesystem path for ``path``.

        Absolute paths are returned unchanged; relative paths are joined to
        the environment root.
        """
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.root / candidate

    def __repr__(self) -> str:
        return f"Environment(root={str(self.root)!r})"


_current: Environment | None = None


def current_environment() -> Environment:
    """Return the process-wide convenience environment.

    Built lazily from :class:`blot.settings.BlotSettings` on first use.
    """
    global _current
    if _current is None:
        from blot.settings import BlotSettings

        _current = Environment(BlotSettings().root)
        logger.debug("Using environment rooted at %s", _current.root)
    return _current


def use_environment(environment: Environment | None) -> None:
    """Replace the process-wide environment; ``None`` restores lazy defaults."""
    global _current
    _current = environment
