"""Admin registration and ownership migration."""

import logging
from typing import Optional

from ..auth.tokens import AuthUser
from ..config import get_admin_emails
from ..database.repository import AdminConfigRepository, BookRepository, UserRepository
from ..errors import permission_denied
from ..models.documents import AdminConfig

logger = logging.getLogger(__name__)


class AdminService:
    """
    Keeps config/admins pointing at the admin's current uid and moves
    official books to it.

    Args:
        admins: config/admins repository
        books: Book repository
        users: User repository (to find orphaned authors)
        admin_emails: Allowed admin emails (defaults to ADMIN_EMAILS)
    """

    def __init__(
        self,
        admins: AdminConfigRepository,
        books: BookRepository,
        users: UserRepository,
        admin_emails: Optional[set[str]] = None,
    ):
        self.admins = admins
        self.books = books
        self.users = users
        self.admin_emails = admin_emails if admin_emails is not None else get_admin_emails()

    def is_admin_email(self, email: Optional[str]) -> bool:
        return bool(email) and email.lower() in self.admin_emails

    async def get_config(self) -> AdminConfig:
        return await self.admins.get() or AdminConfig()

    async def register_admin_login(self, user: AuthUser) -> int:
        """
        Register the caller as the admin and migrate books to their uid.

        Returns:
            Number of books whose author was changed
        """
        if not self.is_admin_email(user.email):
            raise permission_denied("Not an admin user")

        uid = user.uid
        admin_config = await self.admins.get()
        previous_uids = admin_config.uids if admin_config else []

        if admin_config is None:
            await self.admins.create(uid)
        elif uid not in previous_uids:
            await self.admins.add_uid(uid)

        migrated = 0
        old_uids = [u for u in previous_uids if u != uid]
        for old_uid in old_uids:
            migrated += await self.books.reassign_author(old_uid, uid)
        if old_uids:
            await self.admins.set_uids([uid])

        if admin_config is None or not admin_config.migrated:
            migrated += await self._migrate_orphan_books(uid)
            await self.admins.mark_migrated()

        logger.info(f"Admin {user.email} registered, migrated {migrated} books")
        return migrated

    async def _migrate_orphan_books(self, uid: str) -> int:
        """Move books whose author has no user doc, no email, or an admin email."""
        migrated = 0
        authors: dict[str, bool] = {}

        for book in await self.books.list_all_books():
            author_id = book.author_id
            if not author_id or author_id == uid:
                continue

            if author_id not in authors:
                author = await self.users.get_user(author_id)
                authors[author_id] = author is None or not author.email or self.is_admin_email(author.email)

            if authors[author_id]:
                await self.books.update_book(book.id, {"authorId": uid})
                migrated += 1

        return migrated
