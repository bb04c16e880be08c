"""Draft service: single-author drafts for the story editor."""

import logging
from typing import Optional

from ..database.repository import DraftRepository
from ..errors import invalid_argument, not_found, permission_denied
from ..models.documents import DraftBook

logger = logging.getLogger(__name__)


class DraftService:
    """Every operation is scoped to the calling author."""

    def __init__(self, drafts: DraftRepository):
        self.drafts = drafts

    async def get_owned_draft(self, draft_id: str, user_id: str) -> DraftBook:
        """Return the draft if it exists and belongs to user_id."""
        draft = await self.drafts.get_draft(draft_id)
        if draft is None:
            raise not_found(f"Draft {draft_id} not found")
        if draft.author_id != user_id:
            raise permission_denied("Draft belongs to another user")
        return draft

    async def save_draft(self, user_id: str, draft: DraftBook) -> str:
        """Create or overwrite one of the caller's drafts. Returns its id."""
        if draft.id:
            existing = await self.drafts.get_draft(draft.id)
            if existing is not None:
                if existing.author_id != user_id:
                    raise permission_denied("Draft belongs to another user")
                # The stored creation time wins over anything the client sends
                draft.created_at = existing.created_at

        draft.author_id = user_id
        return await self.drafts.save_draft(draft)

    async def update_page_image(self, user_id: str, draft_id: str, page_number: int, image_url: Optional[str]) -> None:
        if not image_url:
            raise invalid_argument("Missing imageUrl")
        draft = await self.get_owned_draft(draft_id, user_id)
        if not any(p.page_number == page_number for p in draft.pages):
            raise not_found(f"Page {page_number} not found in draft {draft_id}")
        await self.drafts.update_page_image(draft_id, page_number, image_url)

    async def list_drafts(self, user_id: str) -> list[DraftBook]:
        return await self.drafts.list_drafts(user_id)

    async def delete_draft(self, user_id: str, draft_id: str) -> None:
        await self.get_owned_draft(draft_id, user_id)
        await self.drafts.delete_draft(draft_id)
        logger.info(f"Deleted draft {draft_id}")
