"""
WhisperNotes - client state layer
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import aiosqlite

from whispernotes.config import settings
from whispernotes.database.db import LocalStorage
from whispernotes.logging import setup_logging, get_logger
from whispernotes.services.auth_client import AuthClient
from whispernotes.services.document import DocumentSurface
from whispernotes.stores import IdentityStore, NotebookStore, NoteStore, ThemeStore

logger = get_logger('main')


@dataclass
class WhisperNotesApp:
    """
    The composed state layer. UI components are handed the stores they need
    from here instead of looking them up globally.
    """
    storage: LocalStorage
    auth: AuthClient
    surface: DocumentSurface
    themes: ThemeStore
    identity: IdentityStore
    notebooks: NotebookStore
    notes: NoteStore

    async def startup(self) -> None:
        try:
            await self.storage.initialize()
        except (aiosqlite.Error, OSError) as e:
            logger.warning(f"Local storage unavailable, starting from defaults: {e}")
        # Leaves first: notes check their notebook references while loading.
        await self.themes.load()
        await self.identity.load()
        await self.notebooks.load()
        await self.notes.load()
        logger.info("Stores loaded")

    async def shutdown(self) -> None:
        await self.auth.close()
        logger.info("Shutting down client")


def create_app(
    db_path: Optional[str] = None,
    surface: Optional[DocumentSurface] = None,
    auth: Optional[AuthClient] = None,
) -> WhisperNotesApp:
    storage = LocalStorage(db_path or settings.DATABASE_PATH)
    auth = auth or AuthClient()
    surface = surface or DocumentSurface()
    notebooks = NotebookStore(storage)
    return WhisperNotesApp(
        storage=storage,
        auth=auth,
        surface=surface,
        themes=ThemeStore(storage, surface),
        identity=IdentityStore(storage, auth),
        notebooks=notebooks,
        notes=NoteStore(storage, notebooks),
    )


@asynccontextmanager
async def lifespan(app: WhisperNotesApp) -> AsyncIterator[WhisperNotesApp]:
    client_logger = setup_logging()
    client_logger.info("Starting WhisperNotes client")

    await app.startup()
    try:
        yield app
    finally:
        await app.shutdown()
