"""
Tests for the note and notebook stores, including referential integrity
between them and search.
"""

import asyncio
import json

import aiosqlite
import pytest
import pytest_asyncio

from whispernotes.errors import InvalidReferenceError, NotFoundError, ValidationError
from whispernotes.models import CascadePolicy, NoteUpdate
from whispernotes.stores import NotebookStore, NoteStore

NOTES_KEY = "whisper_notes"
NOTEBOOKS_KEY = "whisper_notebooks"


def build_stores(storage) -> tuple[NotebookStore, NoteStore]:
    notebooks = NotebookStore(storage, storage_key=NOTEBOOKS_KEY)
    notes = NoteStore(storage, notebooks, storage_key=NOTES_KEY)
    return notebooks, notes


@pytest_asyncio.fixture
async def stores(storage):
    notebooks, notes = build_stores(storage)
    await notebooks.load()
    await notes.load()
    return notebooks, notes


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, stores, storage):
        _, notes = stores

        note = await notes.create_note("Kyoto", "temples", tags=["travel", " japan ", ""])

        assert note.id
        assert note.created_at == note.updated_at
        assert note.tags == frozenset({"travel", "japan"})
        assert notes.notes == (note,)
        stored = json.loads(await storage.get_item(NOTES_KEY))
        assert stored[0]["id"] == note.id
        assert stored[0]["tags"] == ["japan", "travel"]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, stores):
        _, notes = stores

        first = await notes.create_note("one")
        second = await notes.create_note("one")

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_missing_notebook_is_rejected(self, stores, storage):
        _, notes = stores

        with pytest.raises(InvalidReferenceError):
            await notes.create_note("Orphan", notebook_id="nope")

        assert notes.notes == ()
        assert await storage.get_item(NOTES_KEY) is None


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_merges_and_refreshes_updated_at(self, stores):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        note = await notes.create_note("Kyoto", "temples", tags=["japan"])

        updated = await notes.update_note(note.id, {"body": "temples and gardens", "notebook_id": travel.id})

        assert updated.title == "Kyoto"
        assert updated.body == "temples and gardens"
        assert updated.notebook_id == travel.id
        assert updated.tags == frozenset({"japan"})
        assert updated.created_at == note.created_at
        assert updated.updated_at > note.updated_at

    @pytest.mark.asyncio
    async def test_none_title_leaves_title_alone(self, stores):
        _, notes = stores
        note = await notes.create_note("Kyoto")

        updated = await notes.update_note(note.id, NoteUpdate(title=None, body="new"))

        assert updated.title == "Kyoto"

    @pytest.mark.asyncio
    async def test_notebook_id_none_unfiles_note(self, stores):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        note = await notes.create_note("Kyoto", notebook_id=travel.id)

        updated = await notes.update_note(note.id, {"notebook_id": None})

        assert updated.notebook_id is None

    @pytest.mark.asyncio
    async def test_missing_note_fails_and_changes_nothing(self, stores, storage):
        _, notes = stores
        await notes.create_note("Kyoto")
        before = notes.notes
        persisted = await storage.get_item(NOTES_KEY)

        with pytest.raises(NotFoundError):
            await notes.update_note("missing", {"title": "x"})

        assert notes.notes == before
        assert await storage.get_item(NOTES_KEY) == persisted

    @pytest.mark.asyncio
    async def test_missing_notebook_reference_fails(self, stores):
        _, notes = stores
        note = await notes.create_note("Kyoto")

        with pytest.raises(InvalidReferenceError):
            await notes.update_note(note.id, {"notebook_id": "ghost", "title": "changed"})

        assert notes.get_note(note.id) == note


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, stores):
        _, notes = stores
        note = await notes.create_note("Kyoto")

        assert await notes.delete_note(note.id) is True
        assert await notes.delete_note(note.id) is False
        assert notes.notes == ()


class TestSearch:

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_over_title_and_body(self, stores):
        _, notes = stores
        kyoto = await notes.create_note("Kyoto", "temples")
        osaka = await notes.create_note("Osaka", "Street food near the KYOTO line")
        await notes.create_note("Groceries", "milk")

        assert {n.id for n in notes.search("kyoto")} == {kyoto.id, osaka.id}
        assert [n.id for n in notes.search("TEMPLE")] == [kyoto.id]
        assert notes.search("nothing like this") == []

    @pytest.mark.asyncio
    async def test_blank_query_returns_everything_most_recent_first(self, stores):
        _, notes = stores
        a = await notes.create_note("a")
        b = await notes.create_note("b")
        c = await notes.create_note("c")
        await notes.update_note(a.id, {"body": "edited"})

        results = notes.search("")
        assert results[0].id == a.id
        assert {n.id for n in results} == {a.id, b.id, c.id}
        stamps = [n.updated_at for n in results]
        assert stamps == sorted(stamps, reverse=True)
        assert len(notes.search("   ")) == 3

    @pytest.mark.asyncio
    async def test_search_never_reorders_canonical_collection(self, stores):
        _, notes = stores
        a = await notes.create_note("a")
        b = await notes.create_note("b")
        await notes.update_note(a.id, {"title": "a2"})

        first = [n.id for n in notes.search("")]
        second = [n.id for n in notes.search("")]

        assert first == second
        assert [n.id for n in notes.notes] == [a.id, b.id]

    @pytest.mark.asyncio
    async def test_list_by_notebook(self, stores):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        work = await notebooks.create_notebook("Work")
        kyoto = await notes.create_note("Kyoto", notebook_id=travel.id)
        await notes.create_note("Standup", notebook_id=work.id)
        nara = await notes.create_note("Nara", notebook_id=travel.id)

        assert notes.list_by_notebook(travel.id) == [kyoto, nara]


class TestNotebooks:

    @pytest.mark.asyncio
    async def test_create_and_rename(self, stores, storage):
        notebooks, _ = stores
        travel = await notebooks.create_notebook("  Travel ")

        renamed = await notebooks.rename_notebook(travel.id, "Trips")

        assert travel.name == "Travel"
        assert renamed.id == travel.id
        assert renamed.created_at == travel.created_at
        assert notebooks.notebooks == (renamed,)
        assert json.loads(await storage.get_item(NOTEBOOKS_KEY))[0]["name"] == "Trips"

    @pytest.mark.asyncio
    async def test_duplicate_names_are_allowed(self, stores):
        notebooks, _ = stores

        first = await notebooks.create_notebook("Ideas")
        second = await notebooks.create_notebook("Ideas")

        assert first.id != second.id
        assert len(notebooks.notebooks) == 2

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, stores):
        notebooks, _ = stores

        with pytest.raises(ValidationError):
            await notebooks.create_notebook("   ")

    @pytest.mark.asyncio
    async def test_rename_missing_notebook(self, stores):
        notebooks, _ = stores

        with pytest.raises(NotFoundError):
            await notebooks.rename_notebook("missing", "Anything")

    @pytest.mark.asyncio
    async def test_delete_missing_notebook_is_a_noop(self, stores):
        notebooks, _ = stores

        assert await notebooks.delete_notebook("missing") is False

    @pytest.mark.asyncio
    async def test_cascade_delete_removes_notes(self, stores, storage):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        await notes.create_note("Kyoto", notebook_id=travel.id)
        await notes.create_note("Nara", notebook_id=travel.id)
        keep = await notes.create_note("Groceries")

        assert await notebooks.delete_notebook(travel.id, cascade=CascadePolicy.DELETE_NOTES) is True

        assert notes.list_by_notebook(travel.id) == []
        assert all(n.notebook_id != travel.id for n in notes.notes)
        assert notes.notes == (keep,)
        assert notebooks.notebooks == ()
        assert len(json.loads(await storage.get_item(NOTES_KEY))) == 1
        assert json.loads(await storage.get_item(NOTEBOOKS_KEY)) == []

    @pytest.mark.asyncio
    async def test_detach_policy_keeps_notes_unfiled(self, stores):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        kyoto = await notes.create_note("Kyoto", notebook_id=travel.id)

        await notebooks.delete_notebook(travel.id, cascade=CascadePolicy.DETACH_NOTES)

        remaining = notes.get_note(kyoto.id)
        assert remaining is not None
        assert remaining.notebook_id is None
        assert notes.list_by_notebook(travel.id) == []


class TestConcurrentCascade:

    @pytest.mark.asyncio
    async def test_create_during_cascade_cannot_file_into_deleted_notebook(self, stores, storage):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        await notes.create_note("Nara", notebook_id=travel.id)

        deleting = asyncio.create_task(notebooks.delete_notebook(travel.id))
        await asyncio.sleep(0)
        created = asyncio.create_task(notes.create_note("Kyoto", notebook_id=travel.id))
        deleted, result = await asyncio.gather(deleting, created, return_exceptions=True)

        assert deleted is True
        assert isinstance(result, InvalidReferenceError)
        assert [n for n in notes.notes if n.notebook_id == travel.id] == []
        stored = json.loads(await storage.get_item(NOTES_KEY))
        assert [n for n in stored if n["notebookId"] == travel.id] == []


class TestPersistence:

    @pytest.mark.asyncio
    async def test_reload_round_trips_every_field(self, stores, storage):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        note = await notes.create_note("Kyoto", "temples", notebook_id=travel.id, tags=["a", "b"])

        fresh_notebooks, fresh_notes = build_stores(storage)
        await fresh_notebooks.load()
        await fresh_notes.load()

        assert fresh_notebooks.notebooks == (travel,)
        assert fresh_notes.notes == (note,)

    @pytest.mark.asyncio
    async def test_dangling_reference_is_unfiled_on_load(self, storage):
        notebooks, notes = build_stores(storage)
        travel = await notebooks.create_notebook("Travel")
        note = await notes.create_note("Kyoto", notebook_id=travel.id)
        # Simulate a crash between the two persists of a cascading delete.
        await storage.set_item(NOTEBOOKS_KEY, "[]")

        fresh_notebooks, fresh_notes = build_stores(storage)
        await fresh_notebooks.load()
        await fresh_notes.load()

        assert fresh_notes.get_note(note.id).notebook_id is None

    @pytest.mark.asyncio
    async def test_unreadable_records_are_skipped(self, storage):
        await storage.set_item(
            NOTES_KEY,
            json.dumps([{"title": "ok"}, {"body": "no title"}, "garbage"]),
        )
        notebooks, notes = build_stores(storage)
        await notebooks.load()

        await notes.load()

        assert [n.title for n in notes.notes] == ["ok"]

    @pytest.mark.asyncio
    async def test_non_list_entry_starts_empty(self, storage):
        await storage.set_item(NOTEBOOKS_KEY, json.dumps({"oops": True}))
        notebooks, _ = build_stores(storage)

        await notebooks.load()

        assert notebooks.notebooks == ()


class TestSubscriptions:

    @pytest.mark.asyncio
    async def test_subscribers_receive_snapshots(self, stores):
        _, notes = stores
        seen = []
        unsubscribe = notes.subscribe(lambda snap: seen.append(len(snap.notes)))

        await notes.create_note("one")
        await notes.create_note("two")
        unsubscribe()
        unsubscribe()
        await notes.create_note("three")

        assert seen == [1, 2]

    @pytest.mark.asyncio
    async def test_snapshot_is_immutable(self, stores):
        _, notes = stores
        await notes.create_note("one")
        snap = notes.snapshot

        await notes.create_note("two")

        assert len(snap.notes) == 1
        assert len(notes.snapshot.notes) == 2


class TestKyotoScenario:

    @pytest.mark.asyncio
    async def test_notebook_cascade_end_to_end(self, stores):
        notebooks, notes = stores
        travel = await notebooks.create_notebook("Travel")
        kyoto = await notes.create_note("Kyoto", "temples", notebook_id=travel.id)

        assert notes.search("kyoto") == [kyoto]

        await notebooks.delete_notebook(travel.id, cascade=CascadePolicy.DELETE_NOTES)

        assert notes.list_by_notebook(travel.id) == []
        assert notes.search("kyoto") == []


class TestWriteFailures:
    """A failed write reaches the caller and leaves memory matching storage."""

    @pytest_asyncio.fixture
    async def failing(self, failing_storage):
        notebooks, notes = build_stores(failing_storage)
        await notebooks.load()
        await notes.load()
        return failing_storage, notebooks, notes

    @pytest.mark.asyncio
    async def test_failed_create_is_rolled_back(self, failing):
        storage, _, notes = failing
        kept = await notes.create_note("Kyoto")
        seen = []
        notes.subscribe(seen.append)
        storage.fail_writes = True

        with pytest.raises(aiosqlite.OperationalError):
            await notes.create_note("Nara")

        assert notes.notes == (kept,)
        assert notes.snapshot.notes == (kept,)
        assert seen == []

    @pytest.mark.asyncio
    async def test_failed_update_and_delete_are_rolled_back(self, failing):
        storage, _, notes = failing
        kyoto = await notes.create_note("Kyoto")
        storage.fail_writes = True

        with pytest.raises(aiosqlite.OperationalError):
            await notes.update_note(kyoto.id, {"title": "Nara"})
        with pytest.raises(aiosqlite.OperationalError):
            await notes.delete_note(kyoto.id)

        assert notes.notes == (kyoto,)
        assert notes.get_note(kyoto.id).title == "Kyoto"

    @pytest.mark.asyncio
    async def test_failed_notebook_writes_are_rolled_back(self, failing):
        storage, notebooks, _ = failing
        travel = await notebooks.create_notebook("Travel")
        storage.fail_writes = True

        with pytest.raises(aiosqlite.OperationalError):
            await notebooks.create_notebook("Recipes")
        with pytest.raises(aiosqlite.OperationalError):
            await notebooks.rename_notebook(travel.id, "Trips")
        with pytest.raises(aiosqlite.OperationalError):
            await notebooks.delete_notebook(travel.id)

        assert notebooks.notebooks == (travel,)
        assert notebooks.snapshot.notebooks == (travel,)

    @pytest.mark.asyncio
    async def test_failed_cascade_keeps_notes(self, failing):
        storage, notebooks, notes = failing
        travel = await notebooks.create_notebook("Travel")
        kyoto = await notes.create_note("Kyoto", notebook_id=travel.id)
        storage.fail_writes = True

        with pytest.raises(aiosqlite.OperationalError):
            await notebooks.delete_notebook(travel.id)

        assert notes.notes == (kyoto,)
        assert notebooks.exists(travel.id)
