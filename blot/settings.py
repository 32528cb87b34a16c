"""Configuration and environment loader for the blueprint compiler.

This module provides ``BlotSettings``, which loads and validates the runtime
configuration consumed by the compiler's collaborators: the working root for
path resolution, the log level, the fixture generator's locale and seed, the
include depth limit, and the remote include loader's timeout and rate.

Role in Architecture
--------------------
- Forms the boundary between the process environment (or a ``.env`` file) and
  the explicit configuration values threaded into each compile.
- No compilation logic: only configuration loading, structuring and validation.

Examples
--------
>>> from blot.settings import BlotSettings
>>> settings = BlotSettings()
>>> settings.max_include_depth > 0
True
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from blot.config import (
    DEFAULT_FAKER_LOCALE,
    DEFAULT_HTTP_RPM,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    MAX_INCLUDE_DEPTH,
)
from blot.exceptions import ConfigurationError


def _read_optional_int(name: str, *, minimum: int | None = None) -> int | None:
    """Read an integer environment variable, validating its range.

    Parameters
    ----------
    name : str
        Environment variable name.
    minimum : int | None, optional
        Smallest accepted value.

    Returns
    -------
    int | None
        The parsed value, or None when the variable is unset or blank.

    Raises
    ------
    ConfigurationError
        If the value is not an integer or lies below ``minimum``.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", context={"variable": name}
        ) from exc
    if minimum is not None and value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}, got {value}", context={"variable": name}
        )
    return value


def _read_int(name: str, default: int, *, minimum: int | None = None) -> int:
    """Read an integer environment variable, falling back to ``default``."""
    value = _read_optional_int(name, minimum=minimum)
    return default if value is None else value


class BlotSettings:
    r"""Runtime settings for a compilation session.

    Attributes
    ----------
    root : Path
        Directory logical paths are resolved against (``BLOT_ROOT``, default
        the current working directory).
    log_level : str
        Logging level name (``BLOT_LOG_LEVEL``).
    faker_locale : str
        Locale handed to the default fixture generator (``BLOT_FAKER_LOCALE``).
    faker_seed : int | None
        Seed for the default fixture generator (``BLOT_FAKER_SEED``); unseeded
        when unset.
    max_include_depth : int
        Deepest include chain accepted (``BLOT_MAX_INCLUDE_DEPTH``).
    http_timeout : int
        Seconds allowed per remote include fetch (``BLOT_HTTP_TIMEOUT``).
    http_rpm : int
        Remote include fetches allowed per minute (``BLOT_HTTP_RPM``).

    Notes
    -----
    Loads ``<root>/.env`` when present; values in the file take precedence so
    a project directory can pin its own configuration.
    """

    def __init__(self, root: Path | str | None = None) -> None:
        """Initialize settings from the environment and an optional ``.env`` file.

        Parameters
        ----------
        root : Path | str | None, optional
            Directory holding the ``.env`` file. Defaults to ``BLOT_ROOT`` or
            the current working directory.

        Raises
        ------
        ConfigurationError
            If a numeric variable is malformed or out of range.
        """
        env_root = Path(root or os.getenv("BLOT_ROOT") or Path.cwd())
        env_path = env_root / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=True)
        self.root: Path = Path(root or os.getenv("BLOT_ROOT") or env_root)
        self.log_level: str = os.getenv("BLOT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        self.faker_locale: str = os.getenv("BLOT_FAKER_LOCALE") or DEFAULT_FAKER_LOCALE
        self.faker_seed: int | None = _read_optional_int("BLOT_FAKER_SEED")
        self.max_include_depth: int = _read_int(
            "BLOT_MAX_INCLUDE_DEPTH", MAX_INCLUDE_DEPTH, minimum=1
        )
        self.http_timeout: int = _read_int(
            "BLOT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT, minimum=1
        )
        self.http_rpm: int = _read_int("BLOT_HTTP_RPM", DEFAULT_HTTP_RPM, minimum=1)

    def __repr__(self) -> str:
        return (
            f"BlotSettings(root={str(self.root)!r}, log_level={self.log_level!r}, "
            f"faker_locale={self.faker_locale!r}, faker_seed={self.faker_seed!r})"
        )
