"""WhisperNotes client state layer."""

from whispernotes.app import WhisperNotesApp, create_app, lifespan
from whispernotes.errors import (
    InvalidReferenceError,
    NotFoundError,
    PasswordMismatchError,
    UnknownThemeError,
    ValidationError,
    WeakPasswordError,
    WhisperNotesError,
)
from whispernotes.models import CascadePolicy, Note, Notebook, Provenance, Theme, User

__all__ = [
    "WhisperNotesApp", "create_app", "lifespan",
    "WhisperNotesError", "ValidationError", "PasswordMismatchError", "WeakPasswordError",
    "NotFoundError", "InvalidReferenceError", "UnknownThemeError",
    "CascadePolicy", "Provenance", "Note", "Notebook", "Theme", "User",
]
