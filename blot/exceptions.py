"""Central compiler exception hierarchy.

This module defines the base exception ``AppError`` and the specialized
subclasses raised by each compilation stage (transclusion, interpolation,
fixture extraction, structural parsing, marshalling) and by the filesystem
collaborator. Every stage communicates failure by raising one of these; the
orchestrator never recovers locally, so callers see the original error.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all compiler errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'FIXTURE_SYNTAX_ERROR'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.
    transient : bool, optional
        Whether the error is temporary and may succeed if attempted again.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.
    transient : bool
        True if the error is transient.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'})
    >>> str(e)
    'CODE: message'
    """

    __slots__ = ("code", "message", "context", "transient")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("CONFIGURATION_ERROR", message, context=context)


class InputError(AppError):
    """Raised when required document text is missing or empty."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        code: str = "INPUT_ERROR",
    ) -> None:
        super().__init__(code, message, context=context)


class ValidationError(InputError):
    """Raised by the structural parser when it receives no text."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="VALIDATION_ERROR")


class DocumentTypeError(InputError):
    """Raised when documents are neither a string nor a collection of strings."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="DOCUMENT_TYPE_ERROR")


class TransclusionError(AppError):
    """Raised when include directives cannot be resolved."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        code: str = "TRANSCLUSION_ERROR",
    ) -> None:
        super().__init__(code, message, context=context)


class CircularTransclusionError(TransclusionError):
    """Raised when an include chain revisits a target or grows too deep."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="CIRCULAR_TRANSCLUSION_ERROR")


class InterpolationError(AppError):
    """Raised when a placeholder token cannot be generated."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("INTERPOLATION_ERROR", message, context=context)


class FixtureSyntaxError(AppError):
    """Raised when a brace-delimited fixture candidate is not valid JSON."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("FIXTURE_SYNTAX_ERROR", message, context=context)

    @property
    def fragment(self) -> str | None:
        """Return the offending text span, when recorded."""
        return self.context.get("fragment")


class GrammarError(AppError):
    """Raised when the grammar engine rejects a document."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("GRAMMAR_ERROR", message, context=context)


class UnsupportedFormatError(AppError):
    """Raised when a marshalling format key is not registered."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("UNSUPPORTED_FORMAT_ERROR", message, context=context)


class InvalidDestinationError(AppError):
    """Raised when an export destination carries no file extension."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("INVALID_DESTINATION_ERROR", message, context=context)


class FilesystemError(AppError):
    """Raised when reading, writing or globbing the filesystem fails."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("FILESYSTEM_ERROR", message, context=context)
