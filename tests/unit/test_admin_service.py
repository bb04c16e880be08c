"""Tests for admin registration and book ownership migration."""

from unittest.mock import AsyncMock

import pytest

from storyforest.api.auth.tokens import AuthUser
from storyforest.api.database.repository import AdminConfigRepository, BookRepository, UserRepository
from storyforest.api.errors import CallableError
from storyforest.api.models.documents import AdminConfig, Book, UserProfile
from storyforest.api.services.admin_service import AdminService

ADMIN = AuthUser(uid="admin-new", email="Boss@Example.com")


@pytest.fixture
def admins():
    return AsyncMock(spec=AdminConfigRepository)


@pytest.fixture
def books():
    repo = AsyncMock(spec=BookRepository)
    repo.reassign_author.return_value = 0
    repo.list_all_books.return_value = []
    return repo


@pytest.fixture
def users():
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def service(admins, books, users):
    return AdminService(admins, books, users, admin_emails={"boss@example.com"})


class TestRegisterAdminLogin:
    @pytest.mark.asyncio
    async def test_rejects_non_admin(self, service, admins):
        with pytest.raises(CallableError) as exc:
            await service.register_admin_login(AuthUser(uid="u", email="parent@example.com"))

        assert exc.value.code == "permission-denied"
        admins.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_login_migrates_orphans(self, service, admins, books, users):
        admins.get.return_value = None
        books.list_all_books.return_value = [
            Book(id="b1", title="Orphan", author_id="deleted-user"),
            Book(id="b2", title="Old admin", author_id="admin-old-account"),
            Book(id="b3", title="Parent's", author_id="parent"),
            Book(id="b4", title="Also orphan", author_id="deleted-user"),
            Book(id="b5", title="Already mine", author_id="admin-new"),
        ]
        users.get_user.side_effect = lambda uid: {
            "admin-old-account": UserProfile(uid=uid, email="boss@example.com"),
            "parent": UserProfile(uid=uid, email="parent@example.com"),
        }.get(uid)

        migrated = await service.register_admin_login(ADMIN)

        assert migrated == 3
        admins.create.assert_awaited_once_with("admin-new")
        moved = [c.args[0] for c in books.update_book.await_args_list]
        assert moved == ["b1", "b2", "b4"]
        # Author lookups are cached per author
        assert users.get_user.await_count == 3
        admins.mark_migrated.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_new_uid_takes_over_old_admin_books(self, service, admins, books):
        admins.get.return_value = AdminConfig(uids=["admin-old"], migrated=True)
        books.reassign_author.return_value = 7

        migrated = await service.register_admin_login(ADMIN)

        assert migrated == 7
        admins.add_uid.assert_awaited_once_with("admin-new")
        books.reassign_author.assert_awaited_once_with("admin-old", "admin-new")
        admins.set_uids.assert_awaited_once_with(["admin-new"])
        books.list_all_books.assert_not_called()
        admins.mark_migrated.assert_not_called()

    @pytest.mark.asyncio
    async def test_repeat_login_is_a_no_op(self, service, admins, books):
        admins.get.return_value = AdminConfig(uids=["admin-new"], migrated=True)

        assert await service.register_admin_login(ADMIN) == 0

        admins.add_uid.assert_not_called()
        admins.set_uids.assert_not_called()
        books.reassign_author.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_config_defaults(self, service, admins):
        admins.get.return_value = None

        assert await service.get_config() == AdminConfig()

    def test_is_admin_email(self, service):
        assert service.is_admin_email("BOSS@example.com")
        assert not service.is_admin_email(None)
        assert not service.is_admin_email("parent@example.com")
