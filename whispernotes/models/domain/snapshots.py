"""Immutable store snapshots handed to subscribers."""

from pydantic import BaseModel, ConfigDict
from typing import Optional

from whispernotes.models.domain.note import Note
from whispernotes.models.domain.notebook import Notebook
from whispernotes.models.domain.theme import Theme
from whispernotes.models.domain.user import User


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_loading: bool = False


class IdentitySnapshot(Snapshot):
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


class ThemeSnapshot(Snapshot):
    themes: tuple[Theme, ...]
    current_theme: Theme


class NoteSnapshot(Snapshot):
    notes: tuple[Note, ...] = ()


class NotebookSnapshot(Snapshot):
    notebooks: tuple[Notebook, ...] = ()
