"""
Exception hierarchy for the conversion system.

Failures are scoped: a malformed artifact only affects its own
artifact/language pair, a missing translation only affects one reinjection,
and a path outside the configured root is a caller bug that stops the run.
"""

from typing import Optional, Dict, Any


class ConversionError(Exception):
    """Base exception for all conversion-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context about the error
        recoverable: Whether the run can continue past this error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base += f" (context: {context_str})"
        return base


# ============================================================================
# Adapter-level errors
# ============================================================================

class AdapterError(ConversionError):
    """Base exception for format adapter errors."""
    pass


class MalformedSourceError(AdapterError):
    """Raised when an artifact or document cannot be parsed, or when an
    entry that cannot be represented reaches reconciliation.

    Attributes:
        path: The artifact or document that could not be processed
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if path is not None:
            ctx['path'] = path
        if original_error is not None:
            ctx['original_error'] = str(original_error)
        super().__init__(message, ctx, recoverable=True)
        self.path = path
        self.original_error = original_error


class MissingTranslationError(AdapterError):
    """Raised when a reinjection mapping omits an extracted id.

    Attributes:
        unit_id: The id that has no translation
    """

    def __init__(
        self,
        message: str,
        unit_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if unit_id is not None:
            ctx['unit_id'] = unit_id
        super().__init__(message, ctx, recoverable=False)
        self.unit_id = unit_id


class UnsupportedFormatError(AdapterError):
    """Raised when no adapter handles a file."""

    def __init__(
        self,
        message: str,
        file_type: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if file_type is not None:
            ctx['file_type'] = file_type
        super().__init__(message, ctx, recoverable=False)


# ============================================================================
# Contract violations
# ============================================================================

class PathInvariantError(ConversionError):
    """Raised when an artifact is not under the configured root directory.

    This is never caught by the converter.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        root: Optional[str] = None
    ):
        ctx = {}
        if path is not None:
            ctx['path'] = path
        if root is not None:
            ctx['root'] = root
        super().__init__(message, ctx, recoverable=False)


# ============================================================================
# Configuration errors
# ============================================================================

class ConfigurationError(ConversionError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context, recoverable=False)
