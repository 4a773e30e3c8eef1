"""
Note store: the journal notes, their notebook membership and search.

Canonical order is insertion order. Search results are sorted by recency on
the way out, which never reorders the stored collection.
"""

from datetime import timedelta
from typing import Iterable, Optional

from pydantic import ValidationError

from whispernotes.config import settings
from whispernotes.database.db import LocalStorage
from whispernotes.errors import InvalidReferenceError, NotFoundError
from whispernotes.logging import get_logger
from whispernotes.models import CascadePolicy, Note, NoteSnapshot, NoteUpdate, utcnow
from whispernotes.stores.base import Store
from whispernotes.stores.notebooks import NotebookStore

logger = get_logger('stores.notes')


class NoteStore(Store[NoteSnapshot]):
    """Store for notes. Checks notebook references against the notebook store."""

    def __init__(
        self,
        storage: LocalStorage,
        notebooks: NotebookStore,
        storage_key: Optional[str] = None,
    ):
        super().__init__(storage, storage_key or settings.NOTES_STORAGE_KEY)
        self.notebooks = notebooks
        self._notes: list[Note] = []
        notebooks.bind_note_store(self)

    @property
    def notes(self) -> tuple[Note, ...]:
        return tuple(self._notes)

    def get_note(self, note_id: str) -> Optional[Note]:
        return next((n for n in self._notes if n.id == note_id), None)

    def _index_of(self, note_id: str) -> Optional[int]:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        return None

    def _check_notebook(self, notebook_id: Optional[str]) -> None:
        if notebook_id is not None and not self.notebooks.exists(notebook_id):
            raise InvalidReferenceError(f"Notebook {notebook_id} does not exist")

    def _build_snapshot(self) -> NoteSnapshot:
        return NoteSnapshot(notes=tuple(self._notes), is_loading=self.is_loading)

    def _serialize(self):
        return [note.to_json_dict() for note in self._notes]

    def _checkpoint(self) -> list[Note]:
        return list(self._notes)

    def _rollback(self, checkpoint: list[Note]) -> None:
        self._notes = checkpoint

    def _restore(self, stored) -> None:
        self._notes = []
        if stored is None:
            return
        if not isinstance(stored, list):
            logger.warning("Discarding notes entry that is not a list")
            return
        for raw in stored:
            try:
                note = Note.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping unreadable note record: {e}")
                continue
            # A crash mid-cascade can leave notes naming a notebook that is gone.
            if note.notebook_id is not None and not self.notebooks.exists(note.notebook_id):
                logger.warning(f"Note {note.id[:8]} referenced missing notebook; un-filing it")
                note = note.model_copy(update={"notebook_id": None})
            self._notes.append(note)
        logger.info(f"Loaded {len(self._notes)} notes")

    # ── Queries ──

    def search(self, query: str = "") -> list[Note]:
        """
        Case-insensitive substring search over title and body.

        A blank query returns every note. Results are most recently updated
        first; notes with equal timestamps keep insertion order.
        """
        needle = (query or "").strip().casefold()
        hits = [n for n in self._notes if not needle or n.matches(needle)]
        return sorted(hits, key=lambda n: n.updated_at, reverse=True)

    def list_by_notebook(self, notebook_id: str) -> list[Note]:
        return [n for n in self._notes if n.notebook_id == notebook_id]

    # ── Operations ──

    async def create_note(
        self,
        title: str,
        body: str = "",
        notebook_id: Optional[str] = None,
        tags: Iterable[str] = (),
    ) -> Note:
        async with self._lock:
            # Checked under the lock: a notebook delete may be cascading right now.
            self._check_notebook(notebook_id)
            now = utcnow()
            note = Note(
                title=title,
                body=body,
                notebook_id=notebook_id,
                tags=tags,
                created_at=now,
                updated_at=now,
            )
            checkpoint = self._checkpoint()
            self._notes.append(note)
            await self._commit(checkpoint)
        logger.info(f"Created note {note.id[:8]}")
        return note

    async def update_note(self, note_id: str, changes: NoteUpdate | dict) -> Note:
        """
        Merge changes into a note and refresh its updated_at.

        :raises NotFoundError: If the note does not exist
        :raises InvalidReferenceError: If changes name a notebook that does not exist
        """
        if not isinstance(changes, NoteUpdate):
            changes = NoteUpdate.model_validate(changes)
        async with self._lock:
            index = self._index_of(note_id)
            if index is None:
                raise NotFoundError(f"Note {note_id} not found")
            fields = changes.changes()
            if "notebook_id" in fields:
                self._check_notebook(fields["notebook_id"])

            current = self._notes[index]
            now = utcnow()
            if now <= current.updated_at:
                now = current.updated_at + timedelta(microseconds=1)
            updated = Note.model_validate({**current.model_dump(), **fields, "updated_at": now})
            checkpoint = self._checkpoint()
            self._notes[index] = updated
            await self._commit(checkpoint)
        return updated

    async def delete_note(self, note_id: str) -> bool:
        async with self._lock:
            index = self._index_of(note_id)
            if index is None:
                return False
            checkpoint = self._checkpoint()
            del self._notes[index]
            await self._commit(checkpoint)
        logger.info(f"Deleted note {note_id[:8]}")
        return True

    async def detach_notebook(self, notebook_id: str, policy: CascadePolicy) -> int:
        """
        Apply a notebook-deletion cascade policy to the notes filed under it.

        :return: Number of notes deleted or un-filed
        """
        async with self._lock:
            affected = sum(1 for n in self._notes if n.notebook_id == notebook_id)
            if not affected:
                return 0
            checkpoint = self._checkpoint()
            if policy == CascadePolicy.DELETE_NOTES:
                self._notes = [n for n in self._notes if n.notebook_id != notebook_id]
            else:
                now = utcnow()
                self._notes = [
                    n.model_copy(update={"notebook_id": None, "updated_at": now})
                    if n.notebook_id == notebook_id else n
                    for n in self._notes
                ]
            await self._commit(checkpoint)
        return affected
