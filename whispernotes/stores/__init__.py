"""Client stores, listed leaves first."""

from whispernotes.stores.base import Store
from whispernotes.stores.theme import ThemeStore
from whispernotes.stores.identity import IdentityStore
from whispernotes.stores.notebooks import NotebookStore
from whispernotes.stores.notes import NoteStore

__all__ = ["Store", "ThemeStore", "IdentityStore", "NotebookStore", "NoteStore"]
