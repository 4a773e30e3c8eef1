"""
WhisperNotes models.

Usage:
    from whispernotes.models import User, Theme, Note, Notebook
    from whispernotes.models import Provenance, CascadePolicy
    from whispernotes.models import AuthResult
"""

# --- Enums ---
from whispernotes.models.enums import Provenance, CascadePolicy

# --- Domain models ---
from whispernotes.models.domain import (
    RecordModel, utcnow,
    User, ProfileUpdate, SignInRequest, SignUpRequest,
    Theme,
    Note, NoteUpdate,
    Notebook,
    Snapshot, IdentitySnapshot, ThemeSnapshot, NoteSnapshot, NotebookSnapshot,
)

# --- Result models ---
from whispernotes.models.results import AuthResult

__all__ = [
    # Enums
    "Provenance", "CascadePolicy",
    # Domain
    "RecordModel", "utcnow",
    "User", "ProfileUpdate", "SignInRequest", "SignUpRequest",
    "Theme",
    "Note", "NoteUpdate",
    "Notebook",
    "Snapshot", "IdentitySnapshot", "ThemeSnapshot", "NoteSnapshot", "NotebookSnapshot",
    # Results
    "AuthResult",
]
