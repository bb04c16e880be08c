"""Published book endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from ..dependencies import Books, CurrentUser, Drafts, Translations
from ..errors import not_found
from ..models.documents import Book
from ..models.requests import BookAudioRequest, PublishStoryRequest
from ..models.responses import BookAudioResponse, BookListResponse, IdResponse, TranslationResponse

router = APIRouter()


@router.post(
    "/",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a generated story",
    description="Page images sent as base64 or data URLs are uploaded; http(s) URLs pass through.",
)
async def publish_book(request: PublishStoryRequest, service: Books, user: CurrentUser):
    book_id = await service.publish_book(user.uid, request)
    return IdResponse(id=book_id)


@router.get("/", response_model=BookListResponse, summary="List all books")
async def list_all_books(service: Books):
    return BookListResponse(books=await service.list_all_books())


@router.get("/mine", response_model=BookListResponse, summary="List the caller's books")
async def list_my_books(service: Books, user: CurrentUser):
    return BookListResponse(books=await service.list_user_books(user.uid))


@router.get("/official", response_model=BookListResponse, summary="List official books")
async def list_official_books(service: Books):
    return BookListResponse(books=await service.list_official_books())


@router.post(
    "/from-draft/{draft_id}",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a draft",
)
async def publish_draft(draft_id: str, service: Books, drafts: Drafts, user: CurrentUser):
    draft = await drafts.get_owned_draft(draft_id, user.uid)
    book_id = await service.publish_draft(draft)
    return IdResponse(id=book_id)


@router.get("/{book_id}", response_model=Book, summary="Get a book with its pages")
async def get_book(book_id: str, service: Books):
    return await service.get_book(book_id)


@router.put(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a book from a draft",
    description="Replaces metadata and pages. Only the author or an admin may update.",
)
async def update_book(
    book_id: str,
    draft_id: Annotated[str, Query(alias="draftId")],
    service: Books,
    drafts: Drafts,
    user: CurrentUser,
):
    await service.ensure_can_edit(book_id, user)
    draft = await drafts.get_owned_draft(draft_id, user.uid)
    await service.update_published_book(book_id, draft)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Deletes pages, stored files and the book. Only the author or an admin may delete.",
)
async def delete_book(book_id: str, service: Books, user: CurrentUser):
    await service.ensure_can_edit(book_id, user)
    await service.delete_book(book_id)


@router.post("/{book_id}/audio", response_model=BookAudioResponse, summary="Narrate a book")
async def generate_book_audio(book_id: str, request: BookAudioRequest, service: Books, user: CurrentUser):
    return await service.generate_book_audio(book_id, request.voice_id, request.language)


@router.get(
    "/{book_id}/translations/{language}",
    response_model=TranslationResponse,
    summary="Get a cached translation",
)
async def get_translation(book_id: str, language: str, service: Translations):
    translation = await service.get_cached_translation(book_id, language)
    if translation is None:
        raise not_found(f"No cached {language} translation for book {book_id}")
    return TranslationResponse(**translation.model_dump(), cached=True)


@router.post(
    "/{book_id}/translations/{language}",
    response_model=TranslationResponse,
    summary="Translate a book and cache it",
)
async def translate_book(book_id: str, language: str, service: Translations, user: CurrentUser):
    translation = await service.translate_and_cache_book(book_id, language)
    return TranslationResponse(**translation.model_dump(), cached=False)
