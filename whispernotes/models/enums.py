"""
Enum definitions for the WhisperNotes client.
"""
from enum import Enum


class Provenance(str, Enum):
    """Where the current session's user record came from."""
    REMOTE = "remote"
    LOCAL_FALLBACK = "local_fallback"


class CascadePolicy(str, Enum):
    """What happens to notes filed in a notebook that is being deleted."""
    DELETE_NOTES = "delete_notes"
    DETACH_NOTES = "detach_notes"
