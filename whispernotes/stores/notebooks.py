"""
Notebook store: named groupings of notes.

Deleting a notebook first runs the cascade policy on the bound note store,
then removes the notebook, so no note is left pointing at a missing notebook.
"""

from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from whispernotes.config import settings
from whispernotes.database.db import LocalStorage
from whispernotes.errors import NotFoundError, ValidationError as InputError
from whispernotes.logging import get_logger
from whispernotes.models import CascadePolicy, Notebook, NotebookSnapshot
from whispernotes.stores.base import Store

if TYPE_CHECKING:
    from whispernotes.stores.notes import NoteStore

logger = get_logger('stores.notebooks')


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InputError("Notebook name is required")
    return cleaned


class NotebookStore(Store[NotebookSnapshot]):
    """Store for notebooks, in creation order."""

    def __init__(self, storage: LocalStorage, storage_key: Optional[str] = None):
        super().__init__(storage, storage_key or settings.NOTEBOOKS_STORAGE_KEY)
        self._notebooks: list[Notebook] = []
        self._note_store: Optional["NoteStore"] = None

    def bind_note_store(self, notes: "NoteStore") -> None:
        self._note_store = notes

    @property
    def notebooks(self) -> tuple[Notebook, ...]:
        return tuple(self._notebooks)

    def get_notebook(self, notebook_id: str) -> Optional[Notebook]:
        return next((nb for nb in self._notebooks if nb.id == notebook_id), None)

    def exists(self, notebook_id: str) -> bool:
        return self.get_notebook(notebook_id) is not None

    def _index_of(self, notebook_id: str) -> Optional[int]:
        for i, nb in enumerate(self._notebooks):
            if nb.id == notebook_id:
                return i
        return None

    def _build_snapshot(self) -> NotebookSnapshot:
        return NotebookSnapshot(notebooks=tuple(self._notebooks), is_loading=self.is_loading)

    def _serialize(self):
        return [nb.to_json_dict() for nb in self._notebooks]

    def _checkpoint(self) -> list[Notebook]:
        return list(self._notebooks)

    def _rollback(self, checkpoint: list[Notebook]) -> None:
        self._notebooks = checkpoint

    def _restore(self, stored) -> None:
        self._notebooks = []
        if stored is None:
            return
        if not isinstance(stored, list):
            logger.warning("Discarding notebooks entry that is not a list")
            return
        for raw in stored:
            try:
                self._notebooks.append(Notebook.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable notebook record: {e}")
        logger.info(f"Loaded {len(self._notebooks)} notebooks")

    # ── Operations ──

    async def create_notebook(self, name: str) -> Notebook:
        notebook = Notebook(name=_clean_name(name))
        async with self._lock:
            checkpoint = self._checkpoint()
            self._notebooks.append(notebook)
            await self._commit(checkpoint)
        logger.info(f"Created notebook: {notebook.name} ({notebook.id[:8]})")
        return notebook

    async def rename_notebook(self, notebook_id: str, name: str) -> Notebook:
        cleaned = _clean_name(name)
        async with self._lock:
            index = self._index_of(notebook_id)
            if index is None:
                raise NotFoundError(f"Notebook {notebook_id} not found")
            renamed = self._notebooks[index].model_copy(update={"name": cleaned})
            checkpoint = self._checkpoint()
            self._notebooks[index] = renamed
            await self._commit(checkpoint)
        return renamed

    async def delete_notebook(
        self,
        notebook_id: str,
        cascade: CascadePolicy = CascadePolicy.DELETE_NOTES,
    ) -> bool:
        """
        Delete a notebook and apply the cascade policy to its notes.

        Deleting an unknown id is not an error; stray notes that still name it
        are cleaned up all the same.

        :return: True if a notebook was removed
        """
        async with self._lock:
            affected = 0
            if self._note_store is not None:
                affected = await self._note_store.detach_notebook(notebook_id, cascade)
            index = self._index_of(notebook_id)
            if index is None:
                return False
            checkpoint = self._checkpoint()
            del self._notebooks[index]
            await self._commit(checkpoint)
        logger.info(
            f"Deleted notebook {notebook_id[:8]} ({cascade.value}, {affected} notes affected)"
        )
        return True
