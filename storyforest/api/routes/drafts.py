"""Draft endpoints. Drafts are visible only to their author."""

from fastapi import APIRouter, status

from ..dependencies import CurrentUser, Drafts
from ..models.documents import DraftBook
from ..models.requests import SaveDraftRequest, UpdatePageImageRequest
from ..models.responses import DraftListResponse, IdResponse

router = APIRouter()


@router.post("/", response_model=IdResponse, summary="Create or overwrite a draft")
async def save_draft(request: SaveDraftRequest, service: Drafts, user: CurrentUser):
    draft = DraftBook.model_validate(request.model_dump())
    draft_id = await service.save_draft(user.uid, draft)
    return IdResponse(id=draft_id)


@router.get("/", response_model=DraftListResponse, summary="List the caller's drafts")
async def list_drafts(service: Drafts, user: CurrentUser):
    return DraftListResponse(drafts=await service.list_drafts(user.uid))


@router.get("/{draft_id}", response_model=DraftBook, summary="Get a draft with its pages")
async def get_draft(draft_id: str, service: Drafts, user: CurrentUser):
    return await service.get_owned_draft(draft_id, user.uid)


@router.put(
    "/{draft_id}/pages/{page_number}/image",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Set a page's illustration",
)
async def update_page_image(
    draft_id: str,
    page_number: int,
    request: UpdatePageImageRequest,
    service: Drafts,
    user: CurrentUser,
):
    await service.update_page_image(user.uid, draft_id, page_number, request.image_url)


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a draft")
async def delete_draft(draft_id: str, service: Drafts, user: CurrentUser):
    await service.delete_draft(user.uid, draft_id)
