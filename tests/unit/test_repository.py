"""Tests for the Firestore repositories against a mocked async client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from google.cloud.firestore import DELETE_FIELD

from storyforest.api.database.repository import (
    AdminConfigRepository,
    BookRepository,
    DraftRepository,
    UserRepository,
    _chunks,
)
from storyforest.api.models.documents import DraftBook, DraftPage
from storyforest.api.models.enums import GenerationStatus


class FakeSnapshot:
    def __init__(self, doc_id, data, exists=True):
        self.id = doc_id
        self._data = data
        self.exists = exists
        self.reference = MagicMock(name=f"ref:{doc_id}")

    def to_dict(self):
        return self._data


def _stream(*snapshots):
    """A query whose .stream() is an async iterator over snapshots."""

    async def _iterate():
        for snapshot in snapshots:
            yield snapshot

    query = MagicMock()
    query.stream = MagicMock(side_effect=lambda: _iterate())
    return query


@pytest.fixture
def db():
    client = MagicMock()
    client.batch.return_value.commit = AsyncMock()
    return client


def test_chunks():
    assert list(_chunks(list(range(5)), 2)) == [[0, 1], [2, 3], [4]]


class TestBookRepository:
    @pytest.mark.asyncio
    async def test_list_books_by_author_newest_first(self, db):
        repo = BookRepository(db)
        repo.books.where.return_value = _stream(
            FakeSnapshot("old", {"title": "Old", "authorId": "a", "createdAt": 1}),
            FakeSnapshot("new", {"title": "New", "authorId": "a", "createdAt": 2}),
        )

        books = await repo.list_books_by_author("a")

        assert [b.id for b in books] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_list_books_by_authors_chunks_in_filter(self, db):
        repo = BookRepository(db)
        repo.books.where.side_effect = lambda filter: _stream()

        assert await repo.list_books_by_authors([]) == []
        await repo.list_books_by_authors([f"uid-{i}" for i in range(31)])

        assert repo.books.where.call_count == 2

    @pytest.mark.asyncio
    async def test_get_missing_book(self, db):
        repo = BookRepository(db)
        repo.books.document.return_value.get = AsyncMock(return_value=FakeSnapshot("x", None, exists=False))

        assert await repo.get_book("x") is None

    @pytest.mark.asyncio
    async def test_reassign_author_batches_updates(self, db):
        repo = BookRepository(db)
        snapshots = [FakeSnapshot(f"b{i}", {}) for i in range(3)]
        repo.books.where.return_value = _stream(*snapshots)

        moved = await repo.reassign_author("old", "new")

        assert moved == 3
        batch = db.batch.return_value
        assert batch.update.call_count == 3
        batch.update.assert_any_call(snapshots[0].reference, {"authorId": "new"})
        batch.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_set_page_audio_url_merges(self, db):
        repo = BookRepository(db)
        page_ref = MagicMock()
        page_ref.set = AsyncMock()
        repo._pages = MagicMock(return_value=MagicMock(document=MagicMock(return_value=page_ref)))

        await repo.set_page_audio_url("book-1", 2, "default", "https://a.mp3")

        page_ref.set.assert_awaited_once_with({"audioUrls": {"default": "https://a.mp3"}}, merge=True)


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_complete_status_records_time(self, db):
        repo = UserRepository(db)
        repo.users.document.return_value.set = AsyncMock()

        await repo.set_generation_status("user-123", GenerationStatus.COMPLETE)

        fields = repo.users.document.return_value.set.call_args.args[0]
        assert fields["generation_status"] == "complete"
        assert "last_generation_at" in fields

    @pytest.mark.asyncio
    async def test_clear_voice_deletes_field(self, db):
        repo = UserRepository(db)
        repo.users.document.return_value.update = AsyncMock()

        await repo.clear_voice("user-123")

        repo.users.document.return_value.update.assert_awaited_once_with({"elevenlabs_voice_id": DELETE_FIELD})

    @pytest.mark.asyncio
    async def test_missing_settings_mean_default_narrator(self, db):
        repo = UserRepository(db)
        repo.settings.document.return_value.get = AsyncMock(return_value=FakeSnapshot("u", None, exists=False))

        settings = await repo.get_settings("user-123")

        assert settings.selected_voice_id is None


class TestAdminConfigRepository:
    @pytest.mark.asyncio
    async def test_admin_ids_empty_without_config(self, db):
        repo = AdminConfigRepository(db)
        repo.ref.get = AsyncMock(return_value=FakeSnapshot("admins", None, exists=False))

        assert await repo.get_admin_ids() == []

    @pytest.mark.asyncio
    async def test_set_uids_keeps_other_fields(self, db):
        repo = AdminConfigRepository(db)
        repo.ref.set = AsyncMock()

        await repo.set_uids(["admin-new"])

        repo.ref.set.assert_awaited_once_with({"uids": ["admin-new"]}, merge=True)


class TestDraftRepository:
    @pytest.mark.asyncio
    async def test_new_draft_with_client_id_gets_created_at(self, db):
        repo = DraftRepository(db)
        ref = repo.drafts.document.return_value
        ref.id = "client-id"
        ref.set = AsyncMock()

        draft_id = await repo.save_draft(DraftBook(id="client-id", pages=[DraftPage(page_number=1, text="Hi")]))

        assert draft_id == "client-id"
        repo.drafts.document.assert_called_with("client-id")
        written = ref.set.await_args.args[0]
        assert written["createdAt"] is not None
        assert written["createdAt"] == written["updatedAt"]

    @pytest.mark.asyncio
    async def test_auto_id_draft_gets_created_at(self, db):
        repo = DraftRepository(db)
        ref = repo.drafts.document.return_value
        ref.id = "auto-id"
        ref.set = AsyncMock()

        assert await repo.save_draft(DraftBook()) == "auto-id"
        assert ref.set.await_args.args[0]["createdAt"] is not None

    @pytest.mark.asyncio
    async def test_overwrite_keeps_given_created_at(self, db):
        repo = DraftRepository(db)
        ref = repo.drafts.document.return_value
        ref.id = "draft-1"
        ref.set = AsyncMock()

        await repo.save_draft(DraftBook(id="draft-1", created_at=1000))

        assert ref.set.await_args.args[0]["createdAt"] == 1000
