"""
Typed failures raised by store operations and client-side validation.

Environmental problems (no backend, unreadable storage) are not represented
here; stores absorb them with a fallback and log them instead.
"""


class WhisperNotesError(Exception):
    """Base class for errors the client surfaces to its callers."""


class ValidationError(WhisperNotesError, ValueError):
    """Raised for user input rejected before any store is touched."""


class PasswordMismatchError(ValidationError):
    """Raised when the password and its confirmation differ."""


class WeakPasswordError(ValidationError):
    """Raised when a new password does not meet the strength rules."""


class NotFoundError(WhisperNotesError, LookupError):
    """Raised when an update targets a record that does not exist."""


class InvalidReferenceError(WhisperNotesError, ValueError):
    """Raised when a note would reference a notebook that does not exist."""


class UnknownThemeError(WhisperNotesError, ValueError):
    """Raised when selecting a theme that is not part of the catalog."""
