"""Domain models: the records the client stores own."""

from whispernotes.models.domain.base import RecordModel, utcnow
from whispernotes.models.domain.user import User, ProfileUpdate, SignInRequest, SignUpRequest
from whispernotes.models.domain.theme import Theme
from whispernotes.models.domain.note import Note, NoteUpdate
from whispernotes.models.domain.notebook import Notebook
from whispernotes.models.domain.snapshots import (
    Snapshot,
    IdentitySnapshot,
    ThemeSnapshot,
    NoteSnapshot,
    NotebookSnapshot,
)
