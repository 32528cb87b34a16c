"""Global configuration constants for the blueprint compiler.

Defines paths, filenames, patterns and defaults used across the compilation
pipeline and its collaborators. Runtime overrides are read from the process
environment by :mod:`blot.settings`.
"""

from __future__ import annotations

import re
from pathlib import Path

# Project directories
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
PACKAGE_DIR: Path = PROJECT_ROOT / "blot"
LOG_DIR: Path = PROJECT_ROOT / "logs"

# Logging
LOG_FILENAME: str = "blot.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL: str = "INFO"

# Transclusion: ``:[label](target)``
INCLUDE_DIRECTIVE_PATTERN: re.Pattern[str] = re.compile(
    r":\[(?P<label>[^\]\n]*)\]\((?P<target>[^)\s]+)\)"
)
MAX_INCLUDE_DEPTH: int = 32
REMOTE_INCLUDE_SCHEMES: tuple[str, ...] = ("http://", "https://")

# Interpolation: ``|~provider|`` or ``|~provider:key=value,...|``
PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(
    r"\|~(?P<provider>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<args>[^|\n]*))?\|"
)
DEFAULT_FAKER_LOCALE: str = "en_US"

# Remote include loader defaults
DEFAULT_HTTP_TIMEOUT: int = 30
DEFAULT_HTTP_RPM: int = 600

# Marshalling
DESTINATION_EXTENSION_PATTERN: re.Pattern[str] = re.compile(
    r"\.([0-9a-z]+)$", re.IGNORECASE
)
HTML_MARKDOWN_EXTRAS: list[str] = ["tables", "fenced-code-blocks"]
JSON_INDENT: int = 2

# Structural parser
AST_VERSION: str = "2.0"
HTTP_METHODS: tuple[str, ...] = (
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "HEAD",
    "OPTIONS",
    "TRACE",
    "CONNECT",
)
